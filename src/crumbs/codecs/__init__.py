"""Keyed codecs — seal and open opaque buffers as cookie-safe tokens.

Three schemes share one contract (see ``crumbs.codecs.base``):

- ``hmac``: HMAC-SHA256 signature, value readable by the client
- ``aes-gcm``: AES-256-GCM authenticated encryption
- ``secretbox``: XSalsa20-Poly1305 authenticated encryption
"""

from crumbs.codecs.aes_gcm import AESGCMCodec
from crumbs.codecs.base import Codec, Opened
from crumbs.codecs.hmac import HMACCodec
from crumbs.codecs.secretbox import SecretBoxCodec
from crumbs.errors import ConfigurationError

_CODECS: dict[str, Codec] = {
    "hmac": HMACCodec(),
    "aes-gcm": AESGCMCodec(),
    "secretbox": SecretBoxCodec(),
}


def get_codec(cookie_type: str) -> Codec:
    """Return the codec registered for *cookie_type*."""
    try:
        return _CODECS[cookie_type]
    except KeyError:
        msg = f"Unknown cookie type: {cookie_type!r}"
        raise ConfigurationError(msg) from None


__all__ = [
    "AESGCMCodec",
    "Codec",
    "HMACCodec",
    "Opened",
    "SecretBoxCodec",
    "get_codec",
]
