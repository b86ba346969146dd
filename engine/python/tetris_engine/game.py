"""Tetris game: falling piece control, locking, and the pause/game-over state machine.

TetrisGame owns the board, the active and next pieces, the score and the
game state. Every operation is synchronous; callers feeding it timer ticks
and user input must serialize those calls.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from tetris_engine.board import Board, Cell
from tetris_engine.config import GameConfig
from tetris_engine.piece import PIECE_COLORS, PIECE_SHAPES, Piece
from tetris_engine.rng import PieceGenerator, make_generator
from tetris_engine.rules import LockGrace, calculate_score

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Game lifecycle states."""
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class Command(Enum):
    """Input commands routed by dispatch()."""
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    DOWN = "DOWN"      # Soft drop (move down one row)
    ROTATE = "ROTATE"  # Clockwise rotation
    DROP = "DROP"      # Hard drop
    PAUSE = "PAUSE"    # Toggle pause
    RESET = "RESET"


@dataclass
class Snapshot:
    """Read-only view of the game for a presentation layer."""
    width: int
    height: int
    cells: List[List[Cell]]
    current: Optional[Piece]
    next_kind: Optional[str]
    score: int
    lines_total: int
    pieces_locked: int
    state: GameState
    tick_ms: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to dictionary for serialization."""
        current = None
        if self.current is not None:
            current = {
                "kind": self.current.kind,
                "x": self.current.x,
                "y": self.current.y,
                "shape": [list(row) for row in self.current.shape],
                "color": self.current.color,
            }
        next_piece = None
        if self.next_kind is not None:
            next_piece = {
                "kind": self.next_kind,
                "shape": [list(row) for row in PIECE_SHAPES[self.next_kind]],
                "color": PIECE_COLORS[self.next_kind],
            }
        return {
            "board": {
                "w": self.width,
                "h": self.height,
                "cells": self.cells,
            },
            "current": current,
            "next": next_piece,
            "episode": {
                "score": self.score,
                "lines_total": self.lines_total,
                "pieces_locked": self.pieces_locked,
                "state": self.state.value,
            },
            "config": {
                "tick_ms": self.tick_ms,
            },
        }


class TetrisGame:
    """Single-player falling block game."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        generator: Optional[PieceGenerator] = None,
    ):
        """Initialize and start a game.

        Args:
            config: Game parameters (defaults to GameConfig())
            generator: Piece source (defaults to the configured randomizer)
        """
        self.config = config or GameConfig()
        self.generator = generator or make_generator(self.config.randomizer, self.config.seed)

        self.board = Board()
        self.lock_grace = LockGrace(delay_ms=self.config.hard_drop_grace_ms)

        self.current: Optional[Piece] = None
        self.next_kind: Optional[str] = None

        self.state = GameState.RUNNING
        self.score = 0
        self.lines_total = 0
        self.pieces_locked = 0
        self.elapsed_ms = 0

        self._events: List[str] = []

        self.reset()

    @property
    def running(self) -> bool:
        return self.state is GameState.RUNNING

    @property
    def game_over(self) -> bool:
        return self.state is GameState.GAME_OVER

    def reset(self, seed: Optional[int] = None) -> None:
        """Clear the board and score, then start a new game.

        Args:
            seed: Reseed the piece generator (None keeps its current stream)
        """
        if seed is not None:
            self.generator.reset(seed)

        self.board.reset()
        self.lock_grace.reset()
        self.current = None
        self.next_kind = None
        self.score = 0
        self.lines_total = 0
        self.pieces_locked = 0
        self.elapsed_ms = 0
        self.state = GameState.RUNNING

        self._events.append("reset")
        logger.debug("Game reset (seed=%s)", seed)
        self._spawn_piece()

    def move_left(self) -> bool:
        """Shift the active piece one column left if the target is free."""
        return self._try_move(-1, 0)

    def move_right(self) -> bool:
        """Shift the active piece one column right if the target is free."""
        return self._try_move(1, 0)

    def move_down(self) -> bool:
        """Move the active piece down one row, locking it if it cannot move.

        Returns:
            True if the piece moved; False if it was locked or the game is
            not running
        """
        if not self._can_act():
            return False

        if self._try_move(0, 1):
            return True

        self._lock_piece()
        return False

    def rotate(self) -> bool:
        """Rotate the active piece clockwise in place.

        There are no wall kicks: a rotation that collides is discarded.

        Returns:
            True if rotation succeeded
        """
        if not self._can_act():
            return False

        rotated = self.current.rotate()
        if not self.board.fits(rotated):
            return False

        self.current = rotated
        self._events.append("rotate")
        return True

    def hard_drop(self) -> bool:
        """Drop the active piece to the lowest free row and lock it.

        With a grace period configured the lock is deferred until the
        countdown expires in advance(); a second hard drop during the grace
        period locks at once.

        Returns:
            True if the drop was performed
        """
        if not self._can_act():
            return False

        self._drop_to_floor()
        self._events.append("hard_drop")

        if self.lock_grace.enabled and not self.lock_grace.active:
            self.lock_grace.start()
        else:
            self._lock_piece()
        return True

    def toggle_pause(self) -> bool:
        """Switch between running and paused.

        Resuming restarts the descent period from zero.

        Returns:
            False if the game is over, True otherwise
        """
        if self.state is GameState.RUNNING:
            self.state = GameState.PAUSED
            self._events.append("pause")
        elif self.state is GameState.PAUSED:
            self.state = GameState.RUNNING
            self.elapsed_ms = 0
            self._events.append("resume")
        else:
            return False

        logger.debug("Game %s", self.state.value)
        return True

    def tick(self) -> bool:
        """One automatic descent step."""
        return self.move_down()

    def advance(self, elapsed_ms: int) -> None:
        """Run simulated time forward.

        While running, one automatic descent happens per full tick period,
        and a pending hard-drop grace countdown is advanced. Nothing happens
        while paused or after game over.

        Args:
            elapsed_ms: Milliseconds since the previous call

        Raises:
            ValueError: If elapsed_ms is negative
        """
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must not be negative, got {elapsed_ms}")
        if not self.running:
            return

        if self.lock_grace.advance(elapsed_ms):
            self._drop_to_floor()
            self._lock_piece()

        self.elapsed_ms += elapsed_ms
        while self.running and self.elapsed_ms >= self.config.tick_ms:
            self.elapsed_ms -= self.config.tick_ms
            self.tick()

    def dispatch(self, command: Union[Command, str]) -> bool:
        """Route an input command to the matching operation.

        Unrecognized commands are ignored.

        Args:
            command: Command member or its name (case-insensitive)

        Returns:
            True if the command was recognized, whether or not the game
            accepted it
        """
        if not isinstance(command, Command):
            try:
                command = Command[str(command).strip().upper()]
            except KeyError:
                logger.debug("Ignoring unknown command: %r", command)
                return False

        handlers: Dict[Command, Callable[[], Any]] = {
            Command.LEFT: self.move_left,
            Command.RIGHT: self.move_right,
            Command.DOWN: self.move_down,
            Command.ROTATE: self.rotate,
            Command.DROP: self.hard_drop,
            Command.PAUSE: self.toggle_pause,
            Command.RESET: self.reset,
        }
        handlers[command]()
        return True

    def render_board(self) -> List[List[Cell]]:
        """Compose settled cells with the active piece overlaid.

        Active piece cells outside the board are clipped.

        Returns:
            List of rows of color strings (None = empty)
        """
        cells = self.board.to_rows()
        if self.current is not None:
            for x, y in self.current.cells():
                if self.board.in_bounds(x, y):
                    cells[y][x] = self.current.color
        return cells

    def snapshot(self) -> Snapshot:
        """Build a read-only snapshot of the current game."""
        return Snapshot(
            width=self.board.width,
            height=self.board.height,
            cells=self.render_board(),
            current=self.current,
            next_kind=self.next_kind,
            score=self.score,
            lines_total=self.lines_total,
            pieces_locked=self.pieces_locked,
            state=self.state,
            tick_ms=self.config.tick_ms,
        )

    def pop_events(self) -> List[str]:
        """Return and clear the events recorded since the last call."""
        events, self._events = self._events, []
        return events

    def _can_act(self) -> bool:
        return self.running and self.current is not None

    def _spawn_piece(self) -> None:
        """Promote the next piece to active and draw a new next piece.

        If the new piece collides where it spawns, the game is over.
        """
        kind = self.next_kind if self.next_kind is not None else self.generator.next()
        self.next_kind = self.generator.next()
        self.current = Piece.spawn(kind, self.board.width)
        self._events.append("spawn")

        if not self.board.fits(self.current):
            self.state = GameState.GAME_OVER
            self.lock_grace.reset()
            self._events.append("game_over")
            logger.debug("Game over: %r blocked at spawn (score=%d)", self.current, self.score)

    def _try_move(self, dx: int, dy: int) -> bool:
        """Try to move the current piece.

        Args:
            dx: Change in x
            dy: Change in y

        Returns:
            True if move succeeded
        """
        if not self._can_act():
            return False

        moved = self.current.move(dx, dy)
        if not self.board.fits(moved):
            return False

        self.current = moved
        self._events.append("move")
        return True

    def _drop_to_floor(self) -> None:
        # y=0 is top, so dropping increases y
        while self.board.fits(self.current.move(0, 1)):
            self.current = self.current.move(0, 1)

    def _lock_piece(self) -> None:
        """Merge the active piece into the board, clear rows, score, respawn."""
        self.lock_grace.reset()
        self.board.lock_piece(self.current)
        self.pieces_locked += 1
        self._events.append("lock")

        lines_cleared = self.board.clear_completed_rows()
        if lines_cleared > 0:
            self.lines_total += lines_cleared
            self.score += calculate_score(lines_cleared, self.config.points_per_line)
            self._events.append("clear")
            logger.debug("Cleared %d line(s), score=%d", lines_cleared, self.score)

        self.current = None
        self._spawn_piece()
