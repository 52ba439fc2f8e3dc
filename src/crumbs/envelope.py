"""Authenticated payload envelope.

Every sealed cookie carries its value wrapped with the logical key of
the definition that produced it::

    {"metadata": {"key": "session", "max_age": 86400}, "value": {...}}

Serialization sorts keys at every depth, so logically equal values
always produce byte-identical plaintext. Decoding refuses payloads whose
embedded key belongs to a different definition, which keeps same-named
cookies scoped to different domains or paths from reading each other.
"""

import json
import logging
import math
from typing import Any

from crumbs.config import CookieConfig

logger = logging.getLogger("crumbs.envelope")

# Shapes that pollute object prototypes once the payload reaches JavaScript
_PROTO_KEY = "__proto__"
_CONSTRUCTOR_KEY = "constructor"
_PROTOTYPE_KEY = "prototype"

# Sentinel for a failed decode; ``None`` is a legitimate "absent" value
INVALID: Any = object()


def encode(value: Any, config: CookieConfig) -> bytes | None:
    """Serialize *value* inside the envelope for *config*.

    Returns ``None`` when there is nothing to encode, the value is not
    representable as JSON, or it carries prototype keys that ``decode``
    would refuse.
    """
    if value is None:
        return None
    metadata: dict[str, Any] = {"key": config.key}
    if config.max_age is not None:
        metadata["max_age"] = config.max_age
    try:
        text = json.dumps(
            {"metadata": metadata, "value": value},
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError):
        logger.debug("envelope: value for %r is not JSON-serializable", config.key)
        return None
    if _is_polluting(value):
        logger.debug("envelope: value for %r carries prototype keys", config.key)
        return None
    return text.encode("utf-8")


def _is_polluting(node: Any) -> bool:
    """Return ``True`` if *node* holds ``__proto__`` or ``constructor.prototype`` anywhere.

    A plain ``constructor`` or ``prototype`` key is ordinary data.
    """
    if isinstance(node, dict):
        if _PROTO_KEY in node:
            return True
        constructor = node.get(_CONSTRUCTOR_KEY)
        if isinstance(constructor, dict) and _PROTOTYPE_KEY in constructor:
            return True
        return any(_is_polluting(child) for child in node.values())
    if isinstance(node, (list, tuple)):
        return any(_is_polluting(child) for child in node)
    return False


def _reject_constant(name: str) -> Any:
    msg = f"Non-standard JSON constant: {name}"
    raise ValueError(msg)


def decode(buffer: bytes, config: CookieConfig) -> Any:
    """Return the value carried by *buffer*, or ``INVALID``.

    ``INVALID`` covers every rejection: bad UTF-8 or JSON, a malformed
    envelope, prototype-polluting keys, and envelopes that belong to a
    different cookie definition.
    """
    try:
        payload = json.loads(buffer.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError):
        logger.debug("envelope: payload for %r is not valid JSON", config.key)
        return INVALID

    if not isinstance(payload, dict) or "value" not in payload:
        return INVALID
    metadata = payload.get("metadata")
    if not isinstance(metadata, dict) or not isinstance(metadata.get("key"), str):
        return INVALID
    if _is_polluting(payload):
        logger.debug("envelope: payload for %r carries prototype keys", config.key)
        return INVALID
    if metadata["key"] != config.key:
        logger.debug(
            "envelope: payload belongs to %r, not %r", metadata["key"], config.key,
        )
        return INVALID

    value = payload["value"]
    if value is None:
        return INVALID
    return value


def is_equal(left: Any, right: Any) -> bool:
    """Deep structural equality with JSON semantics.

    Unlike ``==``, booleans never equal numbers (``True`` and ``1``
    serialize differently), and tuples compare like lists.
    """
    if left is right:
        return True
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        if isinstance(left, float) and isinstance(right, float) and math.isnan(left):
            return math.isnan(right)
        return left == right
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(
            is_equal(a, b) for a, b in zip(left, right, strict=True)
        )
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(is_equal(left[k], right[k]) for k in left)
    if type(left) is not type(right):
        return False
    return left == right
