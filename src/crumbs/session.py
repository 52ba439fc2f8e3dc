"""Session view — reconcile a ``Cookie`` header against a jar.

``take`` decodes every cookie the jar knows about, lets the request
read and mutate their values in memory, and finally reports only the
``Set-Cookie`` headers needed to bring the browser up to date::

    view = await take(request.headers.get("cookie"), cookies)

    cart = view.get("cart") or []
    view.set("cart", [*cart, item_id])
    view.delete("flash")

    for header in await view.values():
        response = response.with_header("Set-Cookie", header)

Each logical key keeps an append-only history of states. The first
entry is what the header said; every ``set``/``delete`` appends one.
At flush time only the first and last entries matter: a cookie whose
value ends up where it started is not re-sent, unless it was sealed
under a retired key and needs re-issuing under the primary one.

Decoding and encoding run concurrently across cookies in an anyio task
group; there is no data dependency between logical keys.
"""

import logging
from collections.abc import Mapping
from typing import Any

import anyio

from crumbs._internal.multimap import MultiValueMapping
from crumbs.config import Reducer
from crumbs.definition import CookieBinding, CookieState, StateType, ensure_cookie
from crumbs.envelope import is_equal
from crumbs.errors import UnknownCookieKey
from crumbs.http.cookies import parse_cookie_header
from crumbs.registry import ensure_jar
from crumbs.security.audit import emit_security_event

logger = logging.getLogger("crumbs.session")


def _pick(states: list[CookieState]) -> CookieState:
    """Return the most usable state; the earliest header entry wins ties."""
    return min(states, key=lambda state: state.priority)


async def _resolve(binding: CookieBinding, header: MultiValueMapping) -> CookieState:
    raw_values: list[str | None] = list(header.get_list(binding.name)) or [None]
    states: list[CookieState] = [CookieState.unset()] * len(raw_values)

    async def _decode(index: int, raw: str | None) -> None:
        states[index] = await binding.from_string(raw)

    async with anyio.create_task_group() as tg:
        for index, raw in enumerate(raw_values):
            tg.start_soon(_decode, index, raw)

    state = _pick(states)
    if state.type is StateType.INDECIPHERABLE:
        logger.debug("session: cookie %r (%s) is indecipherable", binding.key, binding.name)
        emit_security_event(
            "cookie.indecipherable",
            cookie_key=binding.key,
            cookie_name=binding.name,
            details={"candidates": len(raw_values)},
        )
    elif state.type is StateType.SET_BUT_NEEDS_UPDATE:
        logger.debug("session: cookie %r was sealed with a retired key", binding.key)
        emit_security_event("cookie.rotated", cookie_key=binding.key, cookie_name=binding.name)
    return state


class SessionView:
    """Per-request view over the cookies of one jar.

    Not shared between requests. ``get``/``set``/``delete`` raise
    ``UnknownCookieKey`` for keys the jar does not know; nothing else
    raises.
    """

    __slots__ = ("_bindings", "_history", "_reducers")

    def __init__(
        self,
        bindings: Mapping[str, CookieBinding],
        initial: Mapping[str, CookieState],
        reducers: Mapping[str, Reducer] | None = None,
    ) -> None:
        self._bindings = dict(bindings)
        self._history: dict[str, list[CookieState]] = {
            key: [initial[key]] for key in self._bindings
        }
        self._reducers = dict(reducers or {})

    def _states(self, key: str) -> list[CookieState]:
        try:
            return self._history[key]
        except KeyError:
            raise UnknownCookieKey(key) from None

    def get(self, key: str) -> Any:
        """Return the current value for *key*, or ``None``."""
        last = self._states(key)[-1]
        return last.value if last.has_value else None

    def set(self, key: str, value: Any) -> None:
        """Record a new value for *key*, merged through its reducer.

        A reduced value of ``None`` deletes the cookie.
        """
        states = self._states(key)
        last = states[-1]
        previous = last.value if last.has_value else None

        reducer = self._reducers.get(key) or self._bindings[key].reducer
        reduced = reducer(previous, value) if reducer is not None else value

        if reduced is None:
            self.delete(key)
            return
        states.append(CookieState.set(reduced))

    def delete(self, key: str) -> None:
        """Mark *key* for deletion. Repeated deletes are no-ops."""
        states = self._states(key)
        first_type = states[0].type
        if first_type is StateType.INDECIPHERABLE:
            target = StateType.INDECIPHERABLE
        elif first_type is StateType.UNSET:
            target = StateType.UNSET
        else:
            target = StateType.EXPIRED

        if states[-1].type is not target:
            states.append(CookieState(target))

    def history(self, key: str) -> tuple[CookieState, ...]:
        """Return every recorded state for *key*, oldest first."""
        return tuple(self._states(key))

    def _changed(self, key: str) -> bool:
        states = self._history[key]
        first, last = states[0], states[-1]
        unchanged = (
            first.type is StateType.SET
            and last.type is StateType.SET
            and is_equal(first.value, last.value)
        )
        return not unchanged

    async def entries(self) -> list[tuple[str, str]]:
        """Return ``(key, Set-Cookie value)`` pairs for every cookie that changed."""
        pending = [key for key in self._history if self._changed(key)]
        rendered: dict[str, str | None] = {}

        async def _render(key: str) -> None:
            rendered[key] = await self._bindings[key].to_string(self._history[key][-1])

        async with anyio.create_task_group() as tg:
            for key in pending:
                tg.start_soon(_render, key)

        return [(key, header) for key in pending if (header := rendered[key]) is not None]

    async def values(self) -> list[str]:
        """Return the ``Set-Cookie`` values for every cookie that changed."""
        return [header for _, header in await self.entries()]

    def __repr__(self) -> str:
        return f"SessionView({list(self._history)!r})"


async def take(
    header: str | MultiValueMapping | None,
    cookie_jar: object,
    reducers: Mapping[str, Reducer] | None = None,
) -> SessionView:
    """Build a ``SessionView`` for one request.

    *header* is the raw ``Cookie`` header, or an already parsed
    multi-valued mapping (a ``CookieHeader`` or a framework's own; only
    ``get_list`` is used). *reducers* maps logical keys to ``(prev, next)``
    merge functions and overrides any reducer set on the cookie itself.

    Raises ``NotAJar`` if *cookie_jar* is not a jar and
    ``UnknownCookieKey`` if *reducers* names a key the jar lacks.
    """
    state = ensure_jar(cookie_jar)
    bindings = {key: ensure_cookie(value) for key, value in state.cookies.items()}
    for key in reducers or {}:
        if key not in bindings:
            raise UnknownCookieKey(key)

    parsed = header if isinstance(header, MultiValueMapping) else parse_cookie_header(header)
    initial: dict[str, CookieState] = {}

    async def _load(key: str, binding: CookieBinding) -> None:
        initial[key] = await _resolve(binding, parsed)

    async with anyio.create_task_group() as tg:
        for key, binding in bindings.items():
            tg.start_soon(_load, key, binding)

    return SessionView(bindings, initial, reducers)
