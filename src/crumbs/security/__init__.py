"""Security utilities — key material and audit events.

Key derivation::

    from crumbs.security import derive_key

    key = derive_key("my-passphrase", salt="my-app")

Audit events (opt-in)::

    from crumbs.security import set_security_event_sink

    set_security_event_sink(lambda event: log.warning("%s", event.name))
"""

from crumbs.security.audit import SecurityEvent, emit_security_event, set_security_event_sink
from crumbs.security.keys import decode_keys, derive_key, encode_key

__all__ = [
    "SecurityEvent",
    "decode_keys",
    "derive_key",
    "emit_security_event",
    "encode_key",
    "set_security_event_sink",
]
