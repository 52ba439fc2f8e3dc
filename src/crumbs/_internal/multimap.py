"""MultiValueMapping protocol — what ``take`` needs from a parsed ``Cookie`` header.

Browsers may send one cookie name several times, so a plain ``dict``
loses information. ``CookieHeader`` implements this protocol, and so
can a framework's own parsed-cookie object; ``take`` accepts either
without re-parsing the raw header.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """A read-only mapping of cookie names to one or more values.

    ``__getitem__`` and ``get`` return the first occurrence of a name.
    ``get_list`` returns every occurrence, in header order.
    """

    def __getitem__(self, key: str) -> str: ...
    def __contains__(self, key: object) -> bool: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def get(self, key: str, default: str | None = None) -> str | None: ...
    def get_list(self, key: str) -> list[str]: ...
