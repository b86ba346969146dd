"""FastAPI WebSocket server for the Tetris engine."""

import json
import asyncio
import logging
import os
from dataclasses import replace
from typing import List, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from tetris_engine.config import GameConfig
from tetris_engine.game import TetrisGame
from api.protocol import (
    PROTOCOL_VERSION,
    HelloRequest,
    HelloResponse,
    ResetRequest,
    CommandRequest,
    ObservationResponse,
    ErrorResponse,
    ErrorCode,
    parse_message,
    to_dict,
)

CONFIG = GameConfig.from_env()

app = FastAPI(title="Tetris Engine API", version="0.1.0")

# Enable CORS for web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class FrameClock:
    """Turns event loop timestamps into whole-millisecond steps.

    Sub-millisecond remainders carry over to the next step, so the total
    never drifts behind real time.
    """

    def __init__(self, start: float):
        self.last = start

    def elapsed_ms(self, now: float) -> int:
        elapsed = int((now - self.last) * 1000)
        self.last += elapsed / 1000
        return elapsed


class GameSession:
    """Manages a single game and its gravity timer for one client.

    The websocket handler and the gravity task share one event loop, and
    every game call is synchronous, so a tick never interleaves with a
    command.
    """

    def __init__(self, websocket: WebSocket, config: Optional[GameConfig] = None):
        self.config = config or CONFIG
        self.game: Optional[TetrisGame] = None
        self.gravity_task: Optional[asyncio.Task] = None
        self.websocket = websocket

    @property
    def initialized(self) -> bool:
        return self.game is not None

    def reset(self, seed: Optional[int] = None) -> ObservationResponse:
        """Start a new game.

        Args:
            seed: Random seed (None keeps the configured stream)

        Returns:
            Initial observation response
        """
        if self.game is None:
            config = self.config if seed is None else replace(self.config, seed=seed)
            self.game = TetrisGame(config)
        else:
            self.game.reset(seed)

        self.sync_gravity()
        return self.observe({"event": "reset", "seed": seed})

    def command(self, action: str) -> ObservationResponse:
        """Apply an input command.

        Args:
            action: Command name

        Returns:
            Observation response after the command

        Raises:
            RuntimeError: If the game has not been started
        """
        if self.game is None:
            raise RuntimeError("Game not initialized. Send reset first.")

        recognized = self.game.dispatch(action)
        self.sync_gravity()
        info = {}
        if not recognized:
            info["ignored"] = True
        return self.observe(info)

    def observe(
        self, info: Optional[dict] = None, events: Optional[List[str]] = None
    ) -> ObservationResponse:
        """Build an observation and drain pending game events."""
        info = dict(info or {})
        info["events"] = (events or []) + self.game.pop_events()
        return ObservationResponse(
            type="obs",
            data=self.game.snapshot().to_dict(),
            done=self.game.game_over,
            info=info,
        )

    def sync_gravity(self) -> None:
        """Run the gravity task exactly while the game is running."""
        if self.game is not None and self.game.running:
            self.start_gravity()
        else:
            self.stop_gravity()

    def start_gravity(self) -> None:
        if self.gravity_task and not self.gravity_task.done():
            return
        logger.info("[Gravity] Starting: tick_ms=%d", self.config.tick_ms)
        self.gravity_task = asyncio.create_task(self.run_gravity())

    def stop_gravity(self) -> None:
        if self.gravity_task and not self.gravity_task.done():
            logger.info("[Gravity] Stopping")
            self.gravity_task.cancel()
        self.gravity_task = None

    async def run_gravity(self) -> None:
        """Advance game time in the background and push changes."""
        loop = asyncio.get_running_loop()
        clock = FrameClock(loop.time())
        try:
            while self.game is not None and self.game.running:
                await asyncio.sleep(self.config.frame_ms / 1000)
                elapsed_ms = clock.elapsed_ms(loop.time())
                if elapsed_ms <= 0:
                    continue

                self.game.advance(elapsed_ms)
                events = self.game.pop_events()
                if events:
                    obs_response = self.observe({"source": "gravity"}, events=events)
                    await self.websocket.send_text(json.dumps(to_dict(obs_response)))

            logger.info("[Gravity] Ended: state=%s", self.game.state.value if self.game else None)

        except asyncio.CancelledError:
            logger.info("[Gravity] Cancelled")
            raise
        except Exception as e:
            logger.error(f"[Gravity] Error: {e}", exc_info=True)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "tetris-engine-api", "version": "0.1.0"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


async def send_error(websocket: WebSocket, code: str, message: str) -> None:
    error = ErrorResponse(type="error", code=code, message=message)
    await websocket.send_text(json.dumps(to_dict(error)))


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for game communication."""
    await websocket.accept()
    session = GameSession(websocket)
    logger.info("[WS] Client connected")

    try:
        while True:
            # Receive message
            data = await websocket.receive_text()

            try:
                message_dict = json.loads(data)
                message = parse_message(message_dict)

                if isinstance(message, HelloRequest):
                    if message.version != PROTOCOL_VERSION:
                        await send_error(
                            websocket,
                            ErrorCode.VERSION_MISMATCH,
                            f"Expected version {PROTOCOL_VERSION}, got {message.version}",
                        )
                        continue
                    response = HelloResponse()
                    await websocket.send_text(json.dumps(to_dict(response)))

                elif isinstance(message, ResetRequest):
                    obs_response = session.reset(message.seed)
                    await websocket.send_text(json.dumps(to_dict(obs_response)))

                elif isinstance(message, CommandRequest):
                    try:
                        obs_response = session.command(message.action)
                        await websocket.send_text(json.dumps(to_dict(obs_response)))
                    except RuntimeError as e:
                        await send_error(websocket, ErrorCode.GAME_NOT_INITIALIZED, str(e))

            except json.JSONDecodeError as e:
                await send_error(websocket, ErrorCode.INVALID_MESSAGE, f"Invalid JSON: {str(e)}")

            except ValueError as e:
                logger.warning(f"[WS] Rejected message: {e}")
                await send_error(websocket, ErrorCode.INVALID_MESSAGE, str(e))

    except WebSocketDisconnect:
        logger.info("[WS] Client disconnected")
    finally:
        session.stop_gravity()


def main() -> None:
    import uvicorn

    host = os.getenv("TETRIS_HOST", "0.0.0.0")
    port = int(os.getenv("TETRIS_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
