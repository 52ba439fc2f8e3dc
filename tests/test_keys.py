"""Tests for crumbs.security.keys — PBKDF2 key derivation and loading."""

import base64

import pytest

from crumbs.security.keys import KEY_LENGTH, decode_keys, derive_key, encode_key


class TestDeriveKey:
    def test_fixed_salt_is_reproducible(self) -> None:
        first = derive_key("passphrase", salt="app", iterations=10)
        second = derive_key("passphrase", salt=b"app", iterations=10)
        assert first == second

    def test_default_length(self) -> None:
        assert len(derive_key("passphrase", salt="app", iterations=1)) == KEY_LENGTH == 32

    def test_custom_length(self) -> None:
        assert len(derive_key("passphrase", salt="app", iterations=1, length=16)) == 16

    def test_random_salt_differs(self) -> None:
        assert derive_key("passphrase", iterations=1) != derive_key("passphrase", iterations=1)

    def test_secret_and_salt_both_matter(self) -> None:
        base = derive_key("passphrase", salt="app", iterations=1)
        assert derive_key("other", salt="app", iterations=1) != base
        assert derive_key("passphrase", salt="other", iterations=1) != base

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ValueError, match="Secret must not be empty"):
            derive_key("", salt="app")

    def test_iterations_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="Iterations"):
            derive_key("passphrase", salt="app", iterations=0)


class TestKeyText:
    def test_encode_is_standard_base64(self) -> None:
        key = derive_key("passphrase", salt="app", iterations=1)
        assert base64.b64decode(encode_key(key)) == key

    def test_decode_preserves_order(self) -> None:
        first = derive_key("a", salt="app", iterations=1)
        second = derive_key("b", salt="app", iterations=1)
        assert decode_keys([encode_key(first), f" {encode_key(second)}\n"]) == (first, second)

    def test_decode_rejects_invalid(self) -> None:
        with pytest.raises(ValueError, match="Key #1 is not valid base64"):
            decode_keys([encode_key(b"k" * 32), "not base64!"])
