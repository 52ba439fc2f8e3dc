"""Crumbs exception hierarchy.

Only API misuse raises. Malformed, forged, or outdated cookies never do:
they decode to an ``INDECIPHERABLE`` state instead.
"""


class CrumbsError(Exception):
    """Base for all crumbs-specific errors."""


class ConfigurationError(CrumbsError):
    """Raised when cookie options are invalid.

    Typically surfaces at import time, where cookies are defined.
    """


class NotACookie(CrumbsError, TypeError):  # noqa: N818
    """A value offered to ``Jar.put`` does not carry a cookie binding."""

    def __init__(self, detail: str = "Not a cookie.") -> None:
        super().__init__(detail)


class NotAJar(CrumbsError, TypeError):  # noqa: N818
    """A value offered to ``take`` does not carry a jar snapshot."""

    def __init__(self, detail: str = "Not a cookie jar.") -> None:
        super().__init__(detail)


class DuplicateCookieKey(CrumbsError, ValueError):
    """Two cookies registered in one jar share a logical key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Cookie key {key!r} is already registered in this jar.")


class UnknownCookieKey(CrumbsError, KeyError):
    """A session view was asked about a key its jar does not know."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Wrong cookie key: {self.key!r}"
