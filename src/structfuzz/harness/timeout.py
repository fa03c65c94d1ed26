"""Per-stage watchdog.

A Timeout holds one state word: 0 when idle, a random timer id while a
timer runs, TIMED_OUT once a timer fired. Every transition is a
compare-and-swap, so exactly one of "fired" and "cancelled" wins a race.

The watchdog thread cannot interrupt a hung stage; when it wins it runs the
callback and then the expire action, which by default ends the process with
exit code 123.
"""

import logging
import random
import threading
from collections.abc import Callable

__all__ = ["TIMED_OUT", "Timeout"]

logger = logging.getLogger(__name__)

TIMED_OUT = -1


class Timeout:
    """Cancellable one-shot timer guarded by a CAS state word.

    Attributes:
        on_expire: Action run after the callback when the timer fires
    """

    __slots__ = ("_id", "_lock", "_thread", "_wake", "on_expire")

    def __init__(self, on_expire: Callable[[], None]) -> None:
        self.on_expire = on_expire
        self._id = 0
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._wake = threading.Event()

    def _compare_and_swap(self, old: int, new: int) -> bool:
        with self._lock:
            if self._id != old:
                return False
            self._id = new
            return True

    def start(self, ms: int, callback: Callable[[], None]) -> None:
        """Arm the timer.

        Args:
            ms: Milliseconds until expiry; 0 disables the timer
            callback: Run on expiry, before on_expire

        Raises:
            ValueError: If ms is negative
            RuntimeError: If a timer is already armed or has fired
        """
        if ms == 0:
            return
        if ms < 0:
            msg = f"invalid timeout: {ms}"
            raise ValueError(msg)
        timer_id = random.randint(1, 2**31 - 1)
        if not self._compare_and_swap(0, timer_id):
            msg = "failed to start timer"
            raise RuntimeError(msg)
        wake = threading.Event()
        self._wake = wake
        self._thread = threading.Thread(
            target=self._run,
            args=(timer_id, ms / 1000, wake, callback),
            name=f"structfuzz-timeout-{timer_id:08x}",
            daemon=True,
        )
        self._thread.start()

    def _run(
        self, timer_id: int, seconds: float, wake: threading.Event, callback: Callable[[], None]
    ) -> None:
        if wake.wait(seconds):
            return
        if self._compare_and_swap(timer_id, TIMED_OUT):
            logger.warning("Stage timed out after %.3f s", seconds)
            callback()
            self.on_expire()

    def cancel(self) -> None:
        """Disarm the timer unless it already fired."""
        with self._lock:
            if self._id == TIMED_OUT:
                return
            self._id = 0
        self._wake.set()

    @property
    def timed_out(self) -> bool:
        return self._id <= TIMED_OUT

    def dispose(self) -> None:
        self.cancel()

    def __repr__(self) -> str:
        return f"Timeout(state={self._id})"
