from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator
from dataclasses import dataclass


def _name(factory: Callable[..., object]) -> str:
    func = getattr(factory, "func", factory)
    return getattr(func, "__name__", type(func).__name__).strip("_")


@dataclass(slots=True)
class Lazy[T](Iterable[T]):
    """A re-iterable view which calls `factory` each time iteration starts.

    Chaining operations nest these views, so a pipeline is only run when a terminal operation iterates it, in a single pass.
    """

    factory: Callable[[], Iterator[T]]

    def __iter__(self) -> Iterator[T]:
        return self.factory()

    def __repr__(self) -> str:
        return f"<lazy {_name(self.factory)}>"


@dataclass(slots=True)
class AsyncLazy[T](AsyncIterable[T]):
    """Asynchronous counterpart of `Lazy`."""

    factory: Callable[[], AsyncIterator[T]]

    def __aiter__(self) -> AsyncIterator[T]:
        return self.factory()

    def __repr__(self) -> str:
        return f"<lazy {_name(self.factory)}>"


class AsyncPeekable[T]:
    """Asynchronous iterator wrapper able to look one item ahead.

    Mirrors the subset of `more_itertools.peekable` needed by windowing operations.
    """

    __slots__ = ("_cache", "_iterator")

    def __init__(self, data: AsyncIterable[T]) -> None:
        self._iterator = aiter(data)
        self._cache: list[T] = []

    async def aclose(self) -> None:
        await self._iterator.aclose()  # pyright: ignore[reportAttributeAccessIssue]

    async def has_next(self) -> bool:
        if self._cache:
            return True
        try:
            self._cache.append(await anext(self._iterator))
        except StopAsyncIteration:
            return False
        return True

    async def take(self, n: int) -> list[T]:
        items: list[T] = []
        while len(items) < n and await self.has_next():
            items.append(self._cache.pop())
        return items
