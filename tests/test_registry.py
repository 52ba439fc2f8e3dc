"""Tests for crumbs.registry — jar snapshots and registration log."""

import pytest

from crumbs.definition import cookie
from crumbs.errors import DuplicateCookieKey, NotACookie, NotAJar
from crumbs.registry import JAR_MARKER, Action, ActionType, Jar, JarState, ensure_jar, is_jar, jar
from crumbs.security.keys import derive_key

KEY_A = derive_key("key-a", salt="crumbs-tests", iterations=1)

vixen = cookie(key="vixen", type="aes-gcm", keys=[KEY_A], prefix="__Secure-", secure=True)
tycho = cookie(key="tycho", type="aes-gcm", keys=[KEY_A], domain="example.com", path="/tycho")
dazzle = cookie(key="dazzle", type="hmac", keys=[KEY_A], http_only=True, same_site="Lax")


class TestJar:
    def test_empty(self) -> None:
        empty = jar()
        assert isinstance(empty, Jar)
        assert len(empty) == 0
        assert empty.log == ()
        assert dict(empty.cookies) == {}

    def test_put_registers_in_order(self) -> None:
        cookies = jar().put(vixen).put(tycho).put(dazzle)
        assert list(cookies) == ["vixen", "tycho", "dazzle"]
        assert dict(cookies.cookies) == {"vixen": vixen, "tycho": tycho, "dazzle": dazzle}
        assert "tycho" in cookies
        assert "abc" not in cookies

    def test_log_is_newest_first(self) -> None:
        cookies = jar().put(vixen).put(tycho).put(dazzle)
        assert cookies.log == (
            Action(ActionType.COOKIE, dazzle),
            Action(ActionType.COOKIE, tycho),
            Action(ActionType.COOKIE, vixen),
        )

    def test_snapshots_are_independent(self) -> None:
        first = jar().put(vixen)
        second = first.put(tycho)
        third = first.put(dazzle)
        assert list(first) == ["vixen"]
        assert list(second) == ["vixen", "tycho"]
        assert list(third) == ["vixen", "dazzle"]
        assert len(first.log) == 1

    def test_cookies_mapping_is_read_only(self) -> None:
        cookies = jar().put(vixen)
        with pytest.raises(TypeError):
            cookies.cookies["tycho"] = tycho  # type: ignore[index]

    def test_jar_is_immutable(self) -> None:
        with pytest.raises(AttributeError):
            jar().anything = 1  # type: ignore[attr-defined]

    def test_rejects_non_cookie(self) -> None:
        with pytest.raises(NotACookie, match="Not a cookie"):
            jar().put(vixen).put(tycho).put({})  # type: ignore[arg-type]

    def test_rejects_duplicate_key(self) -> None:
        twin = cookie(key="vixen", type="aes-gcm", keys=[KEY_A], prefix="__Secure-", secure=True)
        with pytest.raises(DuplicateCookieKey, match="'vixen'"):
            jar().put(vixen).put(twin)

    def test_same_cookie_twice_is_duplicate(self) -> None:
        with pytest.raises(DuplicateCookieKey):
            jar().put(vixen).put(vixen)

    def test_duplicate_key_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            jar().put(tycho).put(tycho)


class TestJarGuard:
    def test_is_jar(self) -> None:
        assert is_jar(jar())
        assert is_jar(jar().put(vixen))
        assert not is_jar({})
        assert not is_jar(None)

    def test_ensure_jar_returns_state(self) -> None:
        state = ensure_jar(jar().put(vixen))
        assert isinstance(state, JarState)
        assert list(state.cookies) == ["vixen"]
        assert getattr(jar(), JAR_MARKER).log == ()

    def test_ensure_jar_rejects(self) -> None:
        with pytest.raises(NotAJar, match="Not a cookie jar"):
            ensure_jar(object())
