"""
Notification sinks for wrapped inference calls.

The wrapper reports three moments: progress before the call, a summary after a
successful call that used at least one technique, and a failure message when the
call raises. Sinks are collaborators supplied by the caller.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Union, runtime_checkable

from backend.app.config import redact_secrets
from backend.app.observability.logging import structured_log

MessageCallback = Callable[[str], None]


@runtime_checkable
class Notifier(Protocol):
    def progress(self, message: str) -> None: ...

    def complete(self, message: str) -> None: ...

    def failed(self, message: str) -> None: ...


class CallbackNotifier:
    """Adapts plain callables; missing callbacks drop their notifications."""

    def __init__(
        self,
        on_progress: Optional[MessageCallback] = None,
        on_complete: Optional[MessageCallback] = None,
        on_failed: Optional[MessageCallback] = None,
    ) -> None:
        self._on_progress = on_progress
        self._on_complete = on_complete
        self._on_failed = on_failed

    def progress(self, message: str) -> None:
        if self._on_progress is not None:
            self._on_progress(message)

    def complete(self, message: str) -> None:
        if self._on_complete is not None:
            self._on_complete(message)

    def failed(self, message: str) -> None:
        if self._on_failed is not None:
            self._on_failed(message)


class LogNotifier:
    """Writes each notification as a structured log event."""

    def __init__(self, source: str = "inference") -> None:
        self.source = source

    def _emit(self, kind: str, message: str) -> None:
        structured_log({"event": f"{self.source}.{kind}", "message": redact_secrets(message)})

    def progress(self, message: str) -> None:
        self._emit("progress", message)

    def complete(self, message: str) -> None:
        self._emit("complete", message)

    def failed(self, message: str) -> None:
        self._emit("failed", message)


NotifierLike = Union[Notifier, MessageCallback, None]


def as_notifier(sink: NotifierLike) -> Optional[Notifier]:
    """
    Normalize a sink argument.

    None stays None. A bare callable receives progress messages only. Anything
    implementing the Notifier protocol is returned as is.
    """
    if sink is None:
        return None
    if isinstance(sink, Notifier):
        return sink
    if callable(sink):
        return CallbackNotifier(on_progress=sink)
    raise TypeError(f"unsupported notifier: {type(sink).__name__}")


__all__ = ["Notifier", "CallbackNotifier", "LogNotifier", "as_notifier"]
