"""Frame clock turning host timestamps into clamped step durations."""

from typing import Optional


class FrameClock:
    """Tracks the previous frame timestamp.

    Gaps longer than max_dt (e.g. after the host was suspended) are clamped
    so a single step never jumps bubbles across the canvas.
    """

    def __init__(self, max_dt: float = 0.05):
        self.max_dt = max_dt
        self._last: Optional[float] = None

    def reset(self, timestamp: Optional[float] = None):
        self._last = timestamp

    def tick(self, timestamp: float) -> float:
        """Seconds since the previous tick, clamped to [0, max_dt].

        Args:
            timestamp: Monotonic time in seconds

        Returns:
            Step duration; 0.0 on the first tick
        """
        if self._last is None:
            self._last = timestamp
            return 0.0
        raw = timestamp - self._last
        self._last = timestamp
        return min(max(raw, 0.0), self.max_dt)
