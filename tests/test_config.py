"""Tests for crumbs.config — CookieConfig and option validation."""

import dataclasses

import pytest

from crumbs.config import CookieConfig, parse_cookie_options
from crumbs.errors import ConfigurationError

KEY = b"k" * 32


class TestCookieConfig:
    def test_defaults(self) -> None:
        config = parse_cookie_options(key="session", type="aes-gcm", keys=[KEY])
        assert config.name is None
        assert config.prefix is None
        assert config.domain is None
        assert config.path is None
        assert config.max_age is None
        assert config.secure is False
        assert config.http_only is False
        assert config.same_site is None
        assert config.reducer is None
        assert config.keys == (KEY,)

    def test_frozen(self) -> None:
        config = parse_cookie_options(key="session", type="hmac", keys=[b"k"])
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.key = "other"  # type: ignore[misc]

    def test_wire_name_defaults_to_key(self) -> None:
        config = parse_cookie_options(key="session", type="hmac", keys=[b"k"])
        assert config.wire_name == "session"

    def test_wire_name_with_name_and_prefix(self) -> None:
        config = parse_cookie_options(
            key="vixenTwo", name="vixen", prefix="__Secure-", secure=True, type="hmac", keys=[b"k"],
        )
        assert config.wire_name == "__Secure-vixen"

    def test_keys_normalized_to_bytes_tuple(self) -> None:
        config = parse_cookie_options(key="s", type="hmac", keys=[bytearray(b"abc")])
        assert config.keys == (b"abc",)
        assert isinstance(config, CookieConfig)


class TestParseCookieOptionsErrors:
    @pytest.mark.parametrize(
        ("options", "fragment"),
        [
            ({"type": "rot13"}, "Key 'type'"),
            ({"keys": []}, "at least one key"),
            ({"keys": [KEY] * 6}, "at most 5 keys"),
            ({"keys": [b"short"]}, "256 bits"),
            ({"keys": KEY}, "sequence of bytes"),
            ({"keys": ["text-key"]}, "only bytes"),
            ({"key": "bad key"}, "Key 'key'"),
            ({"key": ""}, "Key 'key'"),
            ({"name": "__Host-x"}, "Key 'name'"),
            ({"name": "semi;colon"}, "Key 'name'"),
            ({"domain": "-example.com"}, "Key 'domain'"),
            ({"domain": "example.com."}, "Key 'domain'"),
            ({"path": "/a;b"}, "Key 'path'"),
            ({"path": ""}, "Key 'path'"),
            ({"max_age": -1}, "Key 'max_age'"),
            ({"max_age": True}, "Key 'max_age'"),
            ({"same_site": "lax"}, "Key 'same_site'"),
            ({"prefix": "__Weird-"}, "Key 'prefix'"),
            ({"reducer": "nope"}, "Key 'reducer'"),
        ],
    )
    def test_rejects(self, options: dict[str, object], fragment: str) -> None:
        merged: dict[str, object] = {"key": "session", "type": "aes-gcm", "keys": [KEY], **options}
        with pytest.raises(ConfigurationError, match="Encountered issues parsing options") as exc:
            parse_cookie_options(**merged)  # type: ignore[arg-type]
        assert fragment in str(exc.value)

    def test_hmac_keys_any_length(self) -> None:
        config = parse_cookie_options(key="s", type="hmac", keys=[b"short"])
        assert config.keys == (b"short",)

    def test_secure_prefix_requires_secure(self) -> None:
        with pytest.raises(ConfigurationError, match='"__Secure-" prefixed cookie'):
            parse_cookie_options(key="s", type="hmac", keys=[b"k"], prefix="__Secure-")

    @pytest.mark.parametrize(
        "options",
        [
            {"secure": False, "path": "/"},
            {"secure": True, "path": "/", "domain": "example.com"},
            {"secure": True, "path": "/sub"},
            {"secure": True},
        ],
    )
    def test_host_prefix_constraints(self, options: dict[str, object]) -> None:
        with pytest.raises(ConfigurationError, match='"__Host-" prefixed cookie'):
            parse_cookie_options(key="s", type="hmac", keys=[b"k"], prefix="__Host-", **options)  # type: ignore[arg-type]

    def test_host_prefix_accepted(self) -> None:
        config = parse_cookie_options(
            key="ball", type="hmac", keys=[b"k"], prefix="__Host-", secure=True, path="/",
        )
        assert config.wire_name == "__Host-ball"

    def test_collects_multiple_problems(self) -> None:
        with pytest.raises(ConfigurationError) as exc:
            parse_cookie_options(key="s", type="aes-gcm", keys=[b"short"], max_age=-5, path="")
        message = str(exc.value)
        assert "Key 'keys'" in message
        assert "Key 'max_age'" in message
        assert "Key 'path'" in message
