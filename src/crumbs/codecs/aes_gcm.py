"""AES-256-GCM authenticated-encryption codec.

Token format: ``b64(ciphertext || tag).b64(nonce)`` with a fresh random
96-bit nonce per seal. Authentication is inherent to the primitive: a
wrong key surfaces as ``InvalidTag`` and the next key is tried.
"""

import os
from collections.abc import Sequence

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from crumbs.codecs.base import Opened, join_token, logger, require_keys, split_token

NONCE_SIZE = 12
TAG_SIZE = 16


class AESGCMCodec:
    """Encrypt with ``keys[0]``; decrypt with each key until one authenticates."""

    __slots__ = ()

    name = "aes-gcm"

    async def seal(self, plaintext: bytes, keys: Sequence[bytes]) -> str | None:
        require_keys(keys)
        if not plaintext:
            return None
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = AESGCM(keys[0]).encrypt(nonce, plaintext, None)
        return join_token(ciphertext, nonce)

    async def open(self, token: str, keys: Sequence[bytes]) -> Opened | None:
        require_keys(keys)
        segments = split_token(token, scheme=self.name)
        if segments is None:
            return None
        ciphertext, nonce = segments
        if len(ciphertext) < TAG_SIZE:
            logger.debug("aes-gcm: ciphertext shorter than the authentication tag")
            return None
        if len(nonce) != NONCE_SIZE:
            logger.debug("aes-gcm: nonce has the wrong length (%d)", len(nonce))
            return None

        for index, key in enumerate(keys):
            try:
                value = AESGCM(key).decrypt(nonce, ciphertext, None)
            except InvalidTag:
                continue
            return Opened(value=value, rotated=index > 0)

        logger.debug("aes-gcm: unable to decrypt under any of %d keys", len(keys))
        return None
