"""Cooperative cancellation for analysis runs.

Worker threads cannot be interrupted from outside, so each run carries a
token that the per-type loop checks at every iteration boundary. Whoever
needs the run to stop (the caller, the timeout, a shutdown) cancels the
token with a reason; the worker raises at its next check.
"""

from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Optional

from ..exceptions import (
    AnalysisCancelledError,
    AnalysisInterruptedError,
    AnalysisTimeoutError,
    AnalyzerShutdownError,
)


class CancelReason(Enum):
    CANCELLED = "cancelled"
    TIMED_OUT = "timed out"
    SHUTDOWN = "shut down"


_ERRORS: dict[CancelReason, type[AnalysisInterruptedError]] = {
    CancelReason.CANCELLED: AnalysisCancelledError,
    CancelReason.TIMED_OUT: AnalysisTimeoutError,
    CancelReason.SHUTDOWN: AnalyzerShutdownError,
}


class CancellationToken:
    """Thread-safe, one-way cancel flag with an optional deadline.

    The first ``cancel`` wins; later calls keep the original reason.
    """

    def __init__(self, timeout_seconds: Optional[float] = None):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: Optional[CancelReason] = None
        self._message = ""
        self._deadline = time.monotonic() + timeout_seconds if timeout_seconds is not None else None

    def cancel(self, reason: CancelReason = CancelReason.CANCELLED, message: str = "") -> bool:
        """Cancel the token. Returns False if it was already cancelled."""
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._message = message or f"Analysis {reason.value}"
            self._event.set()
            return True

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def reason(self) -> Optional[CancelReason]:
        return self._reason

    @property
    def message(self) -> str:
        return self._message

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline (never negative), or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        """Raise the matching AnalysisInterruptedError if the run must stop.

        An expired deadline cancels the token as TIMED_OUT first.
        """
        if not self._event.is_set() and self.expired:
            self.cancel(CancelReason.TIMED_OUT)
        if self._event.is_set():
            raise _ERRORS[self._reason or CancelReason.CANCELLED](self._message)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; returns ``cancelled``."""
        return self._event.wait(timeout)

    def __repr__(self) -> str:
        state = self._reason.value if self._reason else "active"
        return f"CancellationToken({state})"
