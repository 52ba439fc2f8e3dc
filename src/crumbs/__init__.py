"""Crumbs — tamper-evident, optionally encrypted HTTP cookies.

Signed or encrypted cookies with multi-key rotation, and a per-request
session view that only emits the ``Set-Cookie`` headers that changed.

Basic usage::

    from crumbs import cookie, derive_key, jar, take

    key = derive_key("s3cr3t", salt="my-app")

    session = cookie(key="session", type="aes-gcm", keys=[key], http_only=True)
    cookies = jar().put(session)

    view = await take(request.headers.get("cookie"), cookies)
    view.set("session", {"user": 42})
    set_cookie_headers = await view.values()
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "ConfigurationError",
    "Cookie",
    "CookieConfig",
    "CookieState",
    "CrumbsError",
    "DuplicateCookieKey",
    "Jar",
    "NotACookie",
    "NotAJar",
    "SessionView",
    "StateType",
    "UnknownCookieKey",
    "cookie",
    "derive_key",
    "is_cookie",
    "is_equal",
    "is_jar",
    "jar",
    "parse_cookie_header",
    "take",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import crumbs`` fast (no crypto backends loaded) while
    providing a clean top-level API.
    """
    if name in ("Cookie", "CookieState", "StateType", "cookie", "is_cookie"):
        from crumbs import definition as _definition

        return getattr(_definition, name)

    if name == "CookieConfig":
        from crumbs.config import CookieConfig

        return CookieConfig

    if name in ("Jar", "jar", "is_jar"):
        from crumbs import registry as _registry

        return getattr(_registry, name)

    if name in ("SessionView", "take"):
        from crumbs import session as _session

        return getattr(_session, name)

    if name == "derive_key":
        from crumbs.security.keys import derive_key

        return derive_key

    if name == "is_equal":
        from crumbs.envelope import is_equal

        return is_equal

    if name == "parse_cookie_header":
        from crumbs.http.cookies import parse_cookie_header

        return parse_cookie_header

    if name in (
        "ConfigurationError",
        "CrumbsError",
        "DuplicateCookieKey",
        "NotACookie",
        "NotAJar",
        "UnknownCookieKey",
    ):
        from crumbs import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
