"""Cookie definitions and the per-cookie state machine.

A cookie couples a validated ``CookieConfig`` with its codec and the
payload envelope. Its internals live on a ``CookieBinding`` stored under
a single marker attribute; ``is_cookie`` checks for that marker rather
than for a class, so anything carrying a binding is a cookie::

    session = cookie(key="session", type="aes-gcm", keys=[key], http_only=True)

    binding = session.__crumbs_cookie__
    state = await binding.from_string(raw)      # CookieState
    header = await binding.to_string(state)     # "session=...; HttpOnly" | None
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Any, TypeGuard

from crumbs import envelope
from crumbs.codecs import Codec, get_codec
from crumbs.config import CookieConfig, Reducer, parse_cookie_options
from crumbs.errors import NotACookie
from crumbs.http.cookies import EPOCH_IMF, SetCookie

COOKIE_MARKER = "__crumbs_cookie__"


class StateType(enum.Enum):
    """What a cookie looks like from the server's side."""

    UNSET = "unset"
    SET = "set"
    SET_BUT_NEEDS_UPDATE = "set_but_needs_update"
    INDECIPHERABLE = "indecipherable"
    EXPIRED = "expired"


# Most usable interpretation first; used when one name appears several times
STATE_PRIORITY: tuple[StateType, ...] = (
    StateType.SET,
    StateType.SET_BUT_NEEDS_UPDATE,
    StateType.UNSET,
    StateType.EXPIRED,
    StateType.INDECIPHERABLE,
)

_VALUE_STATES: frozenset[StateType] = frozenset({StateType.SET, StateType.SET_BUT_NEEDS_UPDATE})


@dataclass(frozen=True, slots=True)
class CookieState:
    """One observed or desired state of a cookie.

    Only ``SET`` and ``SET_BUT_NEEDS_UPDATE`` carry a value.
    """

    type: StateType
    value: Any = None

    @property
    def has_value(self) -> bool:
        return self.type in _VALUE_STATES

    @property
    def priority(self) -> int:
        return STATE_PRIORITY.index(self.type)

    @classmethod
    def unset(cls) -> CookieState:
        return cls(StateType.UNSET)

    @classmethod
    def set(cls, value: Any) -> CookieState:
        return cls(StateType.SET, value)

    @classmethod
    def set_but_needs_update(cls, value: Any) -> CookieState:
        return cls(StateType.SET_BUT_NEEDS_UPDATE, value)

    @classmethod
    def indecipherable(cls) -> CookieState:
        return cls(StateType.INDECIPHERABLE)

    @classmethod
    def expired(cls) -> CookieState:
        return cls(StateType.EXPIRED)


class CookieBinding:
    """Internal face of a cookie: codec, envelope, and header assembly."""

    __slots__ = ("_codec", "_delete_header", "_template", "config", "name")

    def __init__(self, config: CookieConfig, codec: Codec | None = None) -> None:
        self.config = config
        self.name = config.wire_name
        self._codec = codec if codec is not None else get_codec(config.type)
        self._template = SetCookie(
            name=self.name,
            domain=config.domain,
            httponly=config.http_only,
            max_age=config.max_age,
            path=config.path,
            samesite=config.same_site,
            secure=config.secure,
        )
        # Browsers match deletions by name, domain, and path; prefixed
        # cookies additionally need Secure to be overwritten at all.
        self._delete_header = SetCookie(
            name=self.name,
            domain=config.domain,
            expires=EPOCH_IMF,
            path=config.path,
            secure=config.secure,
        ).to_header_value()

    @property
    def key(self) -> str:
        return self.config.key

    @property
    def reducer(self) -> Reducer | None:
        return self.config.reducer

    async def encode(self, value: Any) -> str | None:
        """Seal *value* into a token, or ``None`` if it cannot be encoded."""
        plaintext = envelope.encode(value, self.config)
        if plaintext is None:
            return None
        return await self._codec.seal(plaintext, self.config.keys)

    async def from_string(self, raw: str | None) -> CookieState:
        """Interpret one raw header value for this cookie."""
        if raw is None:
            return CookieState.unset()

        opened = await self._codec.open(raw, self.config.keys)
        if opened is None:
            return CookieState.indecipherable()

        value = envelope.decode(opened.value, self.config)
        if value is envelope.INVALID:
            return CookieState.indecipherable()

        if opened.rotated:
            return CookieState.set_but_needs_update(value)
        return CookieState.set(value)

    async def to_string(self, state: CookieState) -> str | None:
        """Render *state* as a ``Set-Cookie`` value, or ``None`` for nothing to send."""
        if state.type in (StateType.EXPIRED, StateType.INDECIPHERABLE):
            return self._delete_header

        if state.has_value:
            token = await self.encode(state.value)
            if token is None:
                return None
            return replace(self._template, value=token).to_header_value()

        return None

    def __repr__(self) -> str:
        return f"CookieBinding(key={self.key!r}, name={self.name!r}, type={self.config.type!r})"


class Cookie:
    """Opaque cookie handle, registered in a ``Jar``.

    Immutable. Everything useful sits on the binding under
    ``COOKIE_MARKER``.
    """

    __slots__ = (COOKIE_MARKER,)

    def __init__(self, binding: CookieBinding) -> None:
        object.__setattr__(self, COOKIE_MARKER, binding)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Cookie is immutable."
        raise AttributeError(msg)

    def __repr__(self) -> str:
        binding: CookieBinding = getattr(self, COOKIE_MARKER)
        return f"Cookie(key={binding.key!r}, name={binding.name!r})"


def cookie(**options: Any) -> Cookie:
    """Define a cookie. See ``parse_cookie_options`` for the accepted options.

    Raises ``ConfigurationError`` if the options are invalid.
    """
    return Cookie(CookieBinding(parse_cookie_options(**options)))


def is_cookie(value: object) -> TypeGuard[Cookie]:
    """Return ``True`` if *value* carries a cookie binding."""
    return isinstance(getattr(value, COOKIE_MARKER, None), CookieBinding)


def ensure_cookie(value: object) -> CookieBinding:
    """Return the binding carried by *value*, or raise ``NotACookie``."""
    if not is_cookie(value):
        raise NotACookie
    return getattr(value, COOKIE_MARKER)
