"""Codec protocol and shared helpers.

A codec is a stateless pair of coroutines that turn a plaintext buffer
into a wire-safe ``<segment>.<segment>`` token and back::

    token = await codec.seal(b"payload", keys)
    opened = await codec.open(token, keys)   # Opened(value, rotated) | None

``keys[0]`` seals. Every key is tried, in order, when opening; success
with any key but the first marks the result as ``rotated``.

Codecs never raise on untrusted input. Malformed tokens, bad base64, and
authentication failures all come back as ``None``.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from itsdangerous import BadData
from itsdangerous.encoding import base64_decode, base64_encode

logger = logging.getLogger("crumbs.codecs")

SEPARATOR = "."


@dataclass(frozen=True, slots=True)
class Opened:
    """Plaintext recovered from a token."""

    value: bytes
    rotated: bool = False


class Codec(Protocol):
    """Protocol for cookie codecs.

    Synchronous and asynchronous backends share one awaitable contract,
    so callers never care which kind they hold.
    """

    name: str

    async def seal(self, plaintext: bytes, keys: Sequence[bytes]) -> str | None: ...

    async def open(self, token: str, keys: Sequence[bytes]) -> Opened | None: ...


def require_keys(keys: Sequence[bytes]) -> None:
    """Raise ``ValueError`` for an empty key list (a wiring bug, not bad input)."""
    if not keys:
        msg = "At least one key is required."
        raise ValueError(msg)


def join_token(first: bytes, second: bytes) -> str:
    """Join two raw segments into ``b64(first).b64(second)``."""
    return f"{base64_encode(first).decode('ascii')}{SEPARATOR}{base64_encode(second).decode('ascii')}"


def split_token(token: str, *, scheme: str) -> tuple[bytes, bytes] | None:
    """Split and decode a two-segment token, or return ``None`` if malformed."""
    segments = token.split(SEPARATOR)
    if len(segments) != 2:
        logger.debug("%s: malformed token (%d segments)", scheme, len(segments))
        return None
    try:
        return base64_decode(segments[0]), base64_decode(segments[1])
    except BadData:
        logger.debug("%s: token is not valid base64", scheme)
        return None
