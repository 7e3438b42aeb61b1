"""
Turn timer bounding every wait on a human decision.
"""

import time
from typing import Callable, Optional


class TurnTimer:
    """Deadline for one open request. The clock is injectable for tests."""

    def __init__(self, timeout_seconds: Optional[float], clock: Callable[[], float] = time.monotonic):
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self.request_id: Optional[int] = None
        self.deadline: Optional[float] = None

    def start(self, request_id: int) -> None:
        """Arm the deadline for a request. A timeout of None never expires."""
        self.request_id = request_id
        if self.timeout_seconds is None:
            self.deadline = None
        else:
            self.deadline = self.clock() + self.timeout_seconds

    def cancel(self) -> None:
        self.request_id = None
        self.deadline = None

    @property
    def running(self) -> bool:
        return self.deadline is not None

    def remaining(self) -> float:
        if self.deadline is None:
            return 0.0
        return max(0.0, self.deadline - self.clock())

    def expired(self) -> bool:
        return self.deadline is not None and self.clock() >= self.deadline
