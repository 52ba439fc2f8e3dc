"""Security audit events.

Small opt-in event channel for cookie integrity telemetry. Applications
can register a sink to forward events to logs, metrics, or a SIEM.

Events emitted by ``take``:

- ``cookie.indecipherable``: a cookie was present but failed to verify
- ``cookie.rotated``: a cookie verified only under a retired key
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from time import time
from typing import Any


@dataclass(frozen=True, slots=True)
class SecurityEvent:
    """A structured security event."""

    name: str
    timestamp: float = field(default_factory=time)
    cookie_key: str | None = None
    cookie_name: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


type SecurityEventSink = Callable[[SecurityEvent], None]


_sink_lock = threading.Lock()
_sink: SecurityEventSink | None = None


def set_security_event_sink(sink: SecurityEventSink | None) -> None:
    """Set a process-wide sink for security events.

    Pass ``None`` to disable event delivery.
    """
    global _sink
    with _sink_lock:
        _sink = sink


def emit_security_event(
    name: str,
    *,
    cookie_key: str | None = None,
    cookie_name: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Emit a best-effort security event to the configured sink."""
    with _sink_lock:
        sink = _sink
    if sink is None:
        return

    event = SecurityEvent(
        name=name,
        cookie_key=cookie_key,
        cookie_name=cookie_name,
        details=details or {},
    )
    sink(event)
