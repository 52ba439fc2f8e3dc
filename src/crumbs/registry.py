"""Cookie jar — an append-only registry of cookie definitions.

Each ``put`` returns a new snapshot and leaves the previous one intact,
so jars can be built fluently and shared freely across requests::

    cookies = jar().put(session).put(theme).put(cart)

Snapshots carry a log of registration actions, newest first.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TypeGuard

from crumbs.definition import Cookie, ensure_cookie
from crumbs.errors import DuplicateCookieKey, NotAJar

JAR_MARKER = "__crumbs_jar__"


class ActionType(enum.Enum):
    COOKIE = "cookie"


@dataclass(frozen=True, slots=True)
class Action:
    """One registration recorded in a jar's log."""

    type: ActionType
    payload: Cookie


@dataclass(frozen=True, slots=True)
class JarState:
    """Snapshot contents: logical key -> cookie, plus the action log."""

    cookies: Mapping[str, Cookie]
    log: tuple[Action, ...]


_EMPTY = JarState(cookies=MappingProxyType({}), log=())


class Jar:
    """Immutable jar snapshot. Safe to share between concurrent requests."""

    __slots__ = (JAR_MARKER,)

    def __init__(self, state: JarState = _EMPTY) -> None:
        object.__setattr__(self, JAR_MARKER, state)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Jar is immutable."
        raise AttributeError(msg)

    @property
    def _state(self) -> JarState:
        return getattr(self, JAR_MARKER)

    @property
    def cookies(self) -> Mapping[str, Cookie]:
        return self._state.cookies

    @property
    def log(self) -> tuple[Action, ...]:
        return self._state.log

    def put(self, cookie: Cookie) -> Jar:
        """Return a new jar with *cookie* registered.

        Raises ``NotACookie`` if *cookie* carries no binding and
        ``DuplicateCookieKey`` if its logical key is already taken.
        """
        binding = ensure_cookie(cookie)
        state = self._state
        if binding.key in state.cookies:
            raise DuplicateCookieKey(binding.key)

        return Jar(
            JarState(
                cookies=MappingProxyType({**state.cookies, binding.key: cookie}),
                log=(Action(ActionType.COOKIE, cookie), *state.log),
            )
        )

    def __contains__(self, key: object) -> bool:
        return key in self._state.cookies

    def __iter__(self) -> Iterator[str]:
        return iter(self._state.cookies)

    def __len__(self) -> int:
        return len(self._state.cookies)

    def __repr__(self) -> str:
        return f"Jar({list(self._state.cookies)!r})"


def jar() -> Jar:
    """Return an empty jar."""
    return Jar()


def is_jar(value: object) -> TypeGuard[Jar]:
    """Return ``True`` if *value* carries a jar snapshot."""
    return isinstance(getattr(value, JAR_MARKER, None), JarState)


def ensure_jar(value: object) -> JarState:
    """Return the snapshot carried by *value*, or raise ``NotAJar``."""
    if not is_jar(value):
        raise NotAJar
    return getattr(value, JAR_MARKER)
