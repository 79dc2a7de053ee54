"""A counting semaphore with timed waits and shutdown."""

from __future__ import annotations

import threading


class Semaphore:
    """Counting semaphore whose waits end early once shut down."""

    def __init__(self, count: int = 0) -> None:
        self._count = count
        self._condition = threading.Condition()
        self._shut_down = False

    def notify(self) -> None:
        """Release one unit and wake one waiter."""
        with self._condition:
            self._count += 1
            self._condition.notify()

    def wait_for(self, seconds: float) -> bool:
        """Take one unit, waiting up to ``seconds``; return whether one was taken."""
        with self._condition:
            ready = self._condition.wait_for(
                lambda: self._count > 0 or self._shut_down, timeout=seconds
            )
            if not ready:
                return False
            if self._count > 0:
                self._count -= 1
                return True
            return False

    def shutdown(self) -> None:
        """Wake every waiter; waits without an available unit return False."""
        with self._condition:
            self._shut_down = True
            self._condition.notify_all()