from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, NamedTuple

# Callbacks are called with `(item, index, collection)` truncated to the parameters they declare,
# so the aliases below stay loose about arity.

type Predicate = Callable[..., bool]
"""A truth test over `(item, index, collection)`."""
type Mapper[R] = Callable[..., R]
"""A transformation over `(item, index, collection)`."""
type Reducer[R] = Callable[..., R]
"""A fold step over `(accumulator, item, index, collection)`."""
type Comparator[T] = Callable[[T, T], int]
"""A three-way comparison, negative, zero or positive."""
type Lazyable[T] = T | Callable[[], T]
"""A value, or a function producing it only when needed."""
type AsyncPredicate = Callable[..., bool | Awaitable[bool]]
"""A truth test which may be a coroutine function."""
type AsyncMapper[R] = Callable[..., R | Awaitable[R]]
"""A transformation which may be a coroutine function."""


class Item[K, V](NamedTuple):
    """Represents a key-value pair.

    See `Collection.group_by()` and `Collection.count_by()` for details.
    """

    key: K
    """The key of the item."""
    value: V
    """The value associated with the key."""

    def __repr__(self) -> str:
        return f"({self.key.__repr__()}, {self.value.__repr__()})"


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()
"""Sentinel for "no value", distinct from `None`, which is a valid item."""


def from_lazy[T](value: Lazyable[T]) -> T:
    if callable(value):
        return value()
    return value
