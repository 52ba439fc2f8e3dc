"""XSalsa20-Poly1305 (NaCl secretbox) codec.

Token format: ``b64(ciphertext || mac).b64(nonce)`` with a fresh random
192-bit nonce per seal.
"""

from collections.abc import Sequence

from nacl.exceptions import CryptoError
from nacl.secret import SecretBox
from nacl.utils import random as random_bytes

from crumbs.codecs.base import Opened, join_token, logger, require_keys, split_token


class SecretBoxCodec:
    """Encrypt with ``keys[0]``; open with each key until one authenticates."""

    __slots__ = ()

    name = "secretbox"

    async def seal(self, plaintext: bytes, keys: Sequence[bytes]) -> str | None:
        require_keys(keys)
        if not plaintext:
            return None
        nonce = random_bytes(SecretBox.NONCE_SIZE)
        encrypted = SecretBox(keys[0]).encrypt(plaintext, nonce)
        return join_token(encrypted.ciphertext, nonce)

    async def open(self, token: str, keys: Sequence[bytes]) -> Opened | None:
        require_keys(keys)
        segments = split_token(token, scheme=self.name)
        if segments is None:
            return None
        ciphertext, nonce = segments
        if len(ciphertext) < SecretBox.MACBYTES:
            logger.debug("secretbox: ciphertext shorter than the MAC")
            return None
        if len(nonce) != SecretBox.NONCE_SIZE:
            logger.debug("secretbox: nonce has the wrong length (%d)", len(nonce))
            return None

        for index, key in enumerate(keys):
            try:
                value = SecretBox(key).decrypt(ciphertext, nonce)
            except CryptoError:
                continue
            return Opened(value=value, rotated=index > 0)

        logger.debug("secretbox: unable to decrypt under any of %d keys", len(keys))
        return None
