"""Cookie configuration.

CookieConfig is a frozen dataclass: immutable after creation, with no
string-key dict lookups. Build one through ``parse_cookie_options`` so
the attribute and key-material rules are checked up front::

    config = parse_cookie_options(
        key="session",
        type="aes-gcm",
        keys=[derive_key("s3cr3t", salt="app")],
        prefix="__Host-",
        secure=True,
        path="/",
    )
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from crumbs.errors import ConfigurationError

type CookieType = Literal["hmac", "aes-gcm", "secretbox"]
type SameSite = Literal["Strict", "Lax", "None"]
type Prefix = Literal["__Secure-", "__Host-"]

# (prev, next) -> reduced value; None means "delete"
type Reducer = Callable[[Any, Any], Any]

COOKIE_TYPES: frozenset[str] = frozenset({"hmac", "aes-gcm", "secretbox"})
SAME_SITE_VALUES: frozenset[str] = frozenset({"Strict", "Lax", "None"})
PREFIXES: tuple[str, ...] = ("__Secure-", "__Host-")

MAX_KEYS = 5

# Schemes that need a fixed-size symmetric key
_KEY_LENGTHS: dict[str, int] = {"aes-gcm": 32, "secretbox": 32}

# RFC 6265 cookie-name token: visible ASCII minus separators
_TOKEN_RE = re.compile(r'^(?=[\x20-\x7E]*$)[^()@<>,;:\\"\[\]?={}\s]+$')


@dataclass(frozen=True, slots=True)
class CookieConfig:
    """Validated, normalized cookie definition. Immutable after creation.

    ``key`` identifies the cookie inside a jar and is embedded in every
    payload. ``wire_name`` is what the browser sees.
    """

    key: str
    type: CookieType
    keys: tuple[bytes, ...]
    name: str | None = None
    prefix: Prefix | None = None
    domain: str | None = None
    path: str | None = None
    max_age: int | None = None
    secure: bool = False
    http_only: bool = False
    same_site: SameSite | None = None
    reducer: Reducer | None = None

    @property
    def wire_name(self) -> str:
        base = self.name if self.name is not None else self.key
        return base if self.prefix is None else f"{self.prefix}{base}"


def _check_domain(domain: str) -> str | None:
    if not domain:
        return "must not be empty"
    if domain[0] == "-" or domain[-1] in ".-":
        return "invalid first/last char in cookie domain"
    return None


def _check_path(path: str) -> str | None:
    if not path:
        return "must not be empty"
    for char in path:
        if char < "\x20" or char > "\x7e" or char == ";":
            return "invalid cookie path character"
    return None


def _check_keys(cookie_type: str, keys: Any) -> str | None:
    if isinstance(keys, (bytes, bytearray, str)) or not isinstance(keys, Sequence):
        return "must be a sequence of bytes"
    if not keys:
        return "must contain at least one key"
    if len(keys) > MAX_KEYS:
        return f"must contain at most {MAX_KEYS} keys"
    for item in keys:
        if not isinstance(item, (bytes, bytearray)):
            return "must contain only bytes"
        if not item:
            return "must not contain empty keys"
    expected = _KEY_LENGTHS.get(cookie_type)
    if expected is not None and any(len(item) != expected for item in keys):
        return f"the key should be strictly {expected * 8} bits"
    return None


def parse_cookie_options(
    *,
    key: str,
    type: str,
    keys: Sequence[bytes],
    name: str | None = None,
    prefix: str | None = None,
    domain: str | None = None,
    path: str | None = None,
    max_age: int | None = None,
    secure: bool | None = None,
    http_only: bool | None = None,
    same_site: str | None = None,
    reducer: Reducer | None = None,
) -> CookieConfig:
    """Validate raw cookie options and return a ``CookieConfig``.

    All problems are collected and reported in a single
    ``ConfigurationError`` so a misconfigured cookie fails once, loudly.
    """
    problems: list[str] = []

    if type not in COOKIE_TYPES:
        problems.append(f"Key 'type' - must be one of {sorted(COOKIE_TYPES)}.")
    elif (problem := _check_keys(type, keys)) is not None:
        problems.append(f"Key 'keys' - {problem}.")

    if not isinstance(key, str) or not _TOKEN_RE.match(key):
        problems.append("Key 'key' - invalid cookie key.")

    if name is not None and (
        not _TOKEN_RE.match(name) or name.startswith(PREFIXES)
    ):
        problems.append("Key 'name' - invalid cookie name.")

    if prefix is not None and prefix not in PREFIXES:
        problems.append(f"Key 'prefix' - must be one of {list(PREFIXES)}.")

    if domain is not None and (problem := _check_domain(domain)) is not None:
        problems.append(f"Key 'domain' - {problem}.")

    if path is not None and (problem := _check_path(path)) is not None:
        problems.append(f"Key 'path' - {problem}.")

    if max_age is not None and (
        isinstance(max_age, bool) or not isinstance(max_age, int) or max_age < 0
    ):
        problems.append("Key 'max_age' - must be a non-negative integer.")

    if same_site is not None and same_site not in SAME_SITE_VALUES:
        problems.append(f"Key 'same_site' - must be one of {sorted(SAME_SITE_VALUES)}.")

    if reducer is not None and not callable(reducer):
        problems.append("Key 'reducer' - must be callable.")

    if prefix == "__Secure-" and secure is not True:
        problems.append('"__Secure-" prefixed cookie must be set with a "secure" attribute.')
    if prefix == "__Host-" and (secure is not True or domain is not None or path != "/"):
        problems.append(
            '"__Host-" prefixed cookie must be set with a "secure" attribute, '
            'MUST NOT contain a "Domain" attribute and MUST contain a "Path" '
            'attribute with a value of "/".'
        )

    if problems:
        msg = " ".join(["Encountered issues parsing options.", *problems])
        raise ConfigurationError(msg)

    return CookieConfig(
        key=key,
        type=type,  # type: ignore[arg-type]
        keys=tuple(bytes(item) for item in keys),
        name=name,
        prefix=prefix,  # type: ignore[arg-type]
        domain=domain,
        path=path,
        max_age=max_age,
        secure=bool(secure),
        http_only=bool(http_only),
        same_site=same_site,  # type: ignore[arg-type]
        reducer=reducer,
    )
