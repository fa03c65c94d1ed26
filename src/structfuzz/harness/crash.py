"""Message dumped when the process dies unexpectedly.

The buffer is encoded when the message is set, never when it is dumped:
dump() runs from atexit hooks, signal handlers and the timeout thread right
before os._exit(), where allocating or logging is not safe.
"""

import atexit
import faulthandler
import os
import signal
import sys
import threading

from structfuzz.constants import TIMEOUT_EXIT_CODE

__all__ = ["CrashReporter"]

_RULER_TOP = "v----------------------v"
_RULER_BOTTOM = "^----------------------^"


class CrashReporter:
    """Pre-encoded crash message plus the hooks that print it.

    Attributes:
        message: Currently armed message, b"" when disarmed
    """

    __slots__ = ("_installed", "_lock", "message")

    def __init__(self) -> None:
        self.message = b""
        self._installed = False
        self._lock = threading.Lock()

    def set_message(self, msg: str) -> None:
        """Arm the buffer with msg, or disarm it with ""."""
        if not msg:
            self.message = b""
            return
        text = f"\nUnexpected exit()\n{_RULER_TOP}\n{msg}\n{_RULER_BOTTOM}\n"
        self.message = text.encode("utf-8", "backslashreplace")

    def dump(self, fd: int = 2) -> None:
        """Write the armed message to fd, if any."""
        message = self.message
        if message:
            os.write(fd, message)

    def exit_hard(self, code: int = TIMEOUT_EXIT_CODE) -> None:
        """Dump, then leave without running cleanup handlers."""
        self.dump()
        os._exit(code)

    def install(self) -> None:
        """Register the exit hooks. Safe to call more than once."""
        with self._lock:
            if self._installed:
                return
            self._installed = True
        atexit.register(self.dump)
        if not faulthandler.is_enabled():
            faulthandler.enable()
        if sys.platform != "win32" and threading.current_thread() is threading.main_thread():
            signal.signal(signal.SIGABRT, self._on_abort)

    def _on_abort(self, signum: int, frame: object) -> None:
        self.exit_hard()

    def __repr__(self) -> str:
        return f"CrashReporter(armed={bool(self.message)})"
