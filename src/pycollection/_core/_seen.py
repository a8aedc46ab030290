from __future__ import annotations

from typing import Any


class Seen:
    """Membership record of keys, falling back to a linear lookup for unhashable ones.

    Example:
    ```python
    >>> from pycollection._core import Seen
    >>> seen = Seen()
    >>> seen.add([1]), seen.add("a"), seen.add([1])
    (False, False, True)

    ```
    """

    __slots__ = ("_hashable", "_unhashable")

    def __init__(self) -> None:
        self._hashable: set[Any] = set()
        self._unhashable: list[Any] = []

    def add(self, key: Any) -> bool:
        """Record `key`, and return whether it was already seen."""
        try:
            if key in self._hashable:
                return True
            self._hashable.add(key)
        except TypeError:
            if key in self._unhashable:
                return True
            self._unhashable.append(key)
        return False
