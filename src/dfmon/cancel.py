from __future__ import annotations

import signal
import threading
from typing import Any, Dict


class CancelToken:
    """One-shot cancellation flag. Once set it stays set."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def install_signal_handlers(token: CancelToken) -> Dict[int, Any]:
    """
    Route SIGINT/SIGTERM to `token`.
    Returns the previous handlers, to be passed to restore_signal_handlers().
    Must be called from the main thread.
    """
    previous: Dict[int, Any] = {}

    def _handler(signum, frame) -> None:
        token.cancel()

    for sig in _SIGNALS:
        previous[sig] = signal.signal(sig, _handler)
    return previous


def restore_signal_handlers(previous: Dict[int, Any]) -> None:
    for sig, handler in previous.items():
        # None: the old handler was not installed from Python
        signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
