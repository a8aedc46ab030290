"""Safe-integer guards shared by the synchronous and asynchronous collections.

Python integers never overflow, but indexes, counters and sums are still bounded to the safe integer range of a double,
so results stay exact when exchanged with systems using floating point numbers.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from contextlib import aclosing
from numbers import Real

from ._config import get_config
from ._errors import InvalidTypeError, NumberOverflowError, NumberUnderflowError

MAX_SAFE_INTEGER = 2**53 - 1
MIN_SAFE_INTEGER = -MAX_SAFE_INTEGER

type Number = int | float


def resolve_limit(throw_on_number_limit: bool | None) -> bool:
    if throw_on_number_limit is None:
        return get_config().throw_on_number_limit
    return throw_on_number_limit


def check_index(index: int, throw: bool, what: str = "Index") -> None:
    if throw and index >= MAX_SAFE_INTEGER:
        msg = f"{what} has overflowed"
        raise NumberOverflowError(msg)


def checked_enumerate[T](data: Iterable[T], throw: bool) -> Iterator[tuple[int, T]]:
    """`enumerate`, raising `NumberOverflowError` when the index reaches the safe limit and `throw` is set."""
    for index, item in enumerate(data):
        check_index(index, throw)
        yield index, item


async def achecked_enumerate[T](
    data: AsyncIterable[T], throw: bool
) -> AsyncIterator[tuple[int, T]]:
    index = 0
    async with aclosing(aiter(data)) as items:
        async for item in items:
            check_index(index, throw)
            yield index, item
            index += 1


def ensure_number(item: object) -> Number:
    # bool is an int subclass, but not a number here.
    if isinstance(item, bool) or not isinstance(item, Real):
        msg = f"Item type is invalid must be number, got {type(item).__name__}"
        raise InvalidTypeError(msg)
    return item  # pyright: ignore[reportReturnType]


def checked_add(total: Number, item: Number, throw: bool) -> Number:
    result = total + item
    if throw and result >= MAX_SAFE_INTEGER:
        raise NumberOverflowError("Sum has overflowed")
    if throw and result < MIN_SAFE_INTEGER:
        raise NumberUnderflowError("Sum has underflowed")
    return result
