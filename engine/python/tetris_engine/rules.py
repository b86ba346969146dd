"""Scoring and lock timing rules."""

from typing import Optional

POINTS_PER_LINE = 100


class LockGrace:
    """Countdown between a hard drop and the lock it triggers."""

    def __init__(self, delay_ms: int = 0):
        """Initialize the grace timer.

        Args:
            delay_ms: Milliseconds to wait before locking (0 = lock at once)
        """
        self.delay_ms = delay_ms
        self.remaining_ms: Optional[int] = None

    @property
    def enabled(self) -> bool:
        return self.delay_ms > 0

    @property
    def active(self) -> bool:
        return self.remaining_ms is not None

    def start(self) -> None:
        """Arm the countdown."""
        self.remaining_ms = self.delay_ms

    def reset(self) -> None:
        """Disarm the countdown."""
        self.remaining_ms = None

    def advance(self, elapsed_ms: int) -> bool:
        """Run the countdown forward.

        Args:
            elapsed_ms: Milliseconds elapsed since the last call

        Returns:
            True if the piece should lock now
        """
        if self.remaining_ms is None:
            return False

        self.remaining_ms -= elapsed_ms
        if self.remaining_ms <= 0:
            self.remaining_ms = None
            return True
        return False


def calculate_score(lines_cleared: int, points_per_line: int = POINTS_PER_LINE) -> int:
    """Calculate score from lines cleared in one lock.

    Every line is worth the same, so a double is worth twice a single.

    Args:
        lines_cleared: Number of lines cleared simultaneously
        points_per_line: Points awarded per line

    Returns:
        Score points
    """
    return max(lines_cleared, 0) * points_per_line
