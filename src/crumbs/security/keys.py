"""Key material utilities — PBKDF2 key derivation and key loading.

Derives fixed-length cookie keys from a passphrase with
PBKDF2-HMAC-SHA512 (stdlib ``hashlib``). The result is suitable for every
cookie type (32 bytes for ``aes-gcm`` and ``secretbox``)::

    from crumbs.security.keys import derive_key

    primary = derive_key("correct horse battery staple", salt="my-app")

Keys are usually derived once, offline, with ``crumbs derive-key`` and
shipped as base64 strings; ``decode_keys`` turns those back into bytes.
"""

import base64
import binascii
import hashlib
import os
from collections.abc import Iterable

DEFAULT_ITERATIONS = 600_000
KEY_LENGTH = 32  # 256 bits
_SALT_LENGTH = 32  # Random salt length in bytes


def derive_key(
    secret: str,
    *,
    salt: str | bytes | None = None,
    iterations: int = DEFAULT_ITERATIONS,
    length: int = KEY_LENGTH,
) -> bytes:
    """Derive a key from *secret* with PBKDF2-HMAC-SHA512.

    Without a *salt*, a random one is used, so the key cannot be
    re-derived later; pass a fixed salt to get a reproducible key.

    Args:
        secret: The passphrase.
        salt: Optional salt (strings are UTF-8 encoded).
        iterations: PBKDF2 iteration count.
        length: Key length in bytes.

    Returns:
        The derived key.
    """
    if not secret:
        msg = "Secret must not be empty."
        raise ValueError(msg)
    if iterations < 1:
        msg = "Iterations must be a positive integer."
        raise ValueError(msg)

    if salt is None:
        salt_bytes = os.urandom(_SALT_LENGTH)
    elif isinstance(salt, str):
        salt_bytes = salt.encode("utf-8")
    else:
        salt_bytes = salt

    return hashlib.pbkdf2_hmac(
        "sha512",
        secret.encode("utf-8"),
        salt_bytes,
        iterations,
        dklen=length,
    )


def encode_key(key: bytes) -> str:
    """Return *key* as standard base64 text."""
    return base64.b64encode(key).decode("ascii")


def decode_keys(encoded: Iterable[str]) -> tuple[bytes, ...]:
    """Decode base64 key strings, preserving order (primary first).

    Raises ``ValueError`` on anything that is not valid base64.
    """
    keys: list[bytes] = []
    for index, text in enumerate(encoded):
        try:
            keys.append(base64.b64decode(text.strip(), validate=True))
        except binascii.Error as exc:
            msg = f"Key #{index} is not valid base64."
            raise ValueError(msg) from exc
    return tuple(keys)
