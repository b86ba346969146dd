"""Simple WebSocket test client for manual testing.

Usage:
    python tests/test_client.py [interactive]
"""

import asyncio
import json
import os

import pytest
import websockets


RUN_WS_TESTS = os.getenv("RUN_WS_TESTS") == "1"
URI = os.getenv("TETRIS_WS_URI", "ws://localhost:8000/ws")


@pytest.mark.asyncio
async def test_game_session():
    """Test a complete game session."""
    if not RUN_WS_TESTS:
        pytest.skip("WebSocket integration test requires RUN_WS_TESTS=1 and backend server.")

    print("Connecting to WebSocket server...")
    async with websockets.connect(URI) as websocket:
        print("Connected")

        # 1. Send hello
        await websocket.send(json.dumps({"type": "hello", "version": "t1.0.0"}))
        data = json.loads(await websocket.recv())
        assert data["type"] == "hello"

        # 2. Reset game
        await websocket.send(json.dumps({"type": "reset", "seed": 42}))
        data = json.loads(await websocket.recv())
        assert data["type"] == "obs"
        print(f"Game reset. Current piece: {data['data']['current']['kind']}, next: {data['data']['next']['kind']}")

        # 3. Take some actions
        for action in ["RIGHT", "RIGHT", "ROTATE", "DOWN", "DOWN", "DROP"]:
            await websocket.send(json.dumps({"type": "command", "action": action}))
            data = json.loads(await websocket.recv())
            # Gravity pushes may arrive between replies
            while data["info"].get("source") == "gravity":
                data = json.loads(await websocket.recv())

            print(f"   {action:6} -> events: {data['info'].get('events', [])}, score: {data['data']['episode']['score']}")
            if data["done"]:
                break

        # 4. Pause
        await websocket.send(json.dumps({"type": "command", "action": "PAUSE"}))
        data = json.loads(await websocket.recv())
        while data["info"].get("source") == "gravity":
            data = json.loads(await websocket.recv())
        assert data["data"]["episode"]["state"] == "paused"


async def interactive_mode():
    """Interactive mode - control game via keyboard."""
    print("Interactive mode - control Tetris via keyboard")
    print("Commands: left, right, down, rotate, drop, pause, reset, quit")
    print()

    async with websockets.connect(URI) as websocket:
        await websocket.send(json.dumps({"type": "hello", "version": "t1.0.0"}))
        await websocket.recv()

        await websocket.send(json.dumps({"type": "reset"}))
        data = json.loads(await websocket.recv())
        print(f"Game started! Piece: {data['data']['current']['kind']}\n")

        while True:
            cmd = input("> ").strip().lower()

            if cmd == "quit":
                break
            elif cmd in ["left", "right", "down", "rotate", "drop", "pause", "reset"]:
                await websocket.send(json.dumps({"type": "command", "action": cmd.upper()}))
                data = json.loads(await websocket.recv())
                while data["info"].get("source") == "gravity":
                    data = json.loads(await websocket.recv())

                obs = data["data"]
                current = obs["current"]
                print(f"Piece: {current['kind']} at ({current['x']}, {current['y']})")
                print(f"Score: {obs['episode']['score']}, Lines: {obs['episode']['lines_total']}, State: {obs['episode']['state']}")
                print(f"Events: {data['info'].get('events', [])}")

                if data["done"]:
                    print("GAME OVER! Type 'reset' to play again.")
            else:
                print("Unknown command")


if __name__ == "__main__":
    import sys

    mode = sys.argv[1] if len(sys.argv) > 1 else "test"

    if mode == "interactive":
        asyncio.run(interactive_mode())
    else:
        RUN_WS_TESTS = True
        asyncio.run(test_game_session())
