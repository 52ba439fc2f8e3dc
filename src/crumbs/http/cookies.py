"""Cookie header parsing and Set-Cookie serialization.

Consolidates the read side (``parse_cookie_header``, used by ``take``)
and the write side (``SetCookie``, used by ``CookieBinding``) in one
module.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def to_imf(moment: datetime) -> str:
    """Format *moment* as an IMF-fixdate (RFC 7231 §7.1.1.1).

    Naive datetimes are taken to be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return (
        f"{_DAYS[moment.weekday()]}, {moment.day:02d} {_MONTHS[moment.month - 1]} "
        f"{moment.year} {moment.hour:02d}:{moment.minute:02d}:{moment.second:02d} GMT"
    )


EPOCH_IMF = to_imf(datetime(1970, 1, 1, tzinfo=UTC))


class CookieHeader(Mapping[str, str]):
    """Immutable, case-sensitive view of a parsed ``Cookie`` header.

    Implements ``Mapping[str, str]`` and the ``MultiValueMapping`` protocol.
    ``__getitem__`` returns the first occurrence of a name.
    ``get_list`` returns every occurrence, in header order.
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: tuple[tuple[str, str], ...] = ()) -> None:
        object.__setattr__(self, "_pairs", pairs)

    def __getitem__(self, key: str) -> str:
        for name, value in self._pairs:
            if name == key:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self._pairs)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._pairs:
            if name not in seen:
                seen.add(name)
                yield name

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        return f"CookieHeader({list(self._pairs)!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* (browsers may send duplicates)."""
        return [value for name, value in self._pairs if name == key]

    def to_dict(self) -> dict[str, list[str]]:
        return {name: self.get_list(name) for name in self}

    @property
    def pairs(self) -> tuple[tuple[str, str], ...]:
        return self._pairs


def parse_cookie_header(header: str | None) -> CookieHeader:
    """Parse a ``Cookie`` header value into a ``CookieHeader``.

    Pairs are scanned left to right; every occurrence of a name is kept.
    Whitespace around names and values is trimmed, a fully double-quoted
    value is unquoted, and segments without ``=`` are skipped. When a
    ``;`` appears before the next ``=``, scanning backtracks to the
    nearest preceding ``;`` so a malformed segment cannot swallow its
    neighbor.

    Returns an empty ``CookieHeader`` for empty or missing headers.
    """
    if not header:
        return CookieHeader()

    pairs: list[tuple[str, str]] = []
    length = len(header)
    index = 0

    while index < length:
        eq_idx = header.find("=", index)
        if eq_idx == -1:
            break

        end_idx = header.find(";", index)
        if end_idx == -1:
            end_idx = length
        elif end_idx < eq_idx:
            index = header.rfind(";", 0, eq_idx) + 1
            continue

        name = header[index:eq_idx].strip()
        value = header[eq_idx + 1 : end_idx].strip()
        if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
            value = value[1:-1]
        pairs.append((name, value))
        index = end_idx + 1

    return CookieHeader(tuple(pairs))


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive.

    Attributes serialize in a fixed order (``Domain``, ``Expires``,
    ``HttpOnly``, ``Max-Age``, ``Path``, ``SameSite``, ``Secure``) so the
    same cookie always produces the same header.
    """

    name: str
    value: str = ""
    domain: str | None = None
    expires: str | None = None
    httponly: bool = False
    max_age: int | None = None
    path: str | None = None
    samesite: str | None = None
    secure: bool = False

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string."""
        parts = [f"{self.name}={self.value}"]
        if self.domain is not None:
            parts.append(f"Domain={self.domain}")
        if self.expires is not None:
            parts.append(f"Expires={self.expires}")
        if self.httponly:
            parts.append("HttpOnly")
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        if self.path is not None:
            parts.append(f"Path={self.path}")
        if self.samesite is not None:
            parts.append(f"SameSite={self.samesite}")
        if self.secure:
            parts.append("Secure")
        return "; ".join(parts)
