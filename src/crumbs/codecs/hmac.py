"""HMAC-SHA256 signing codec.

Token format: ``b64(value).b64(hmac_sha256(key, value))``. The value is
readable by the client; only tampering is detected.

Signatures come from ``itsdangerous.Signer`` with key derivation turned
off, so the configured key is the HMAC key exactly.
"""

import hashlib
import hmac
from collections.abc import Sequence

from itsdangerous import Signer
from itsdangerous.encoding import base64_encode

from crumbs.codecs.base import SEPARATOR, Opened, logger, require_keys, split_token


def _signer(key: bytes) -> Signer:
    return Signer(key, key_derivation="none", digest_method=hashlib.sha256)


def _sign(value: bytes, key: bytes) -> str:
    signature = _signer(key).get_signature(value).decode("ascii")
    return f"{base64_encode(value).decode('ascii')}{SEPARATOR}{signature}"


class HMACCodec:
    """Sign with ``keys[0]``; verify against every key in order."""

    __slots__ = ()

    name = "hmac"

    async def seal(self, plaintext: bytes, keys: Sequence[bytes]) -> str | None:
        require_keys(keys)
        if not plaintext:
            return None
        return _sign(plaintext, keys[0])

    async def open(self, token: str, keys: Sequence[bytes]) -> Opened | None:
        require_keys(keys)
        segments = split_token(token, scheme=self.name)
        if segments is None:
            return None
        value, _ = segments
        if not value:
            return None

        # Compare whole tokens, not just signatures, so the check is uniform
        presented = token.encode("ascii", "replace")
        for index, key in enumerate(keys):
            expected = _sign(value, key).encode("ascii")
            if hmac.compare_digest(expected, presented):
                return Opened(value=value, rotated=index > 0)

        logger.debug("hmac: signature did not verify under any of %d keys", len(keys))
        return None
