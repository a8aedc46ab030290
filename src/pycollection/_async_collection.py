from __future__ import annotations

import builtins
import functools
import math
import statistics
from collections.abc import (
    AsyncIterable,
    AsyncIterator,
    Awaitable,
    Callable,
    Iterable,
)
from contextlib import aclosing
from typing import Any

import more_itertools as mit

from ._collection import is_nested
from ._core import (
    AsyncLazy,
    AsyncPeekable,
    CommonBase,
    Seen,
    aguarded,
    bind,
    guard_aiter,
    resolve,
)
from ._errors import InvalidTypeError, ItemNotFoundError, MultipleItemsFoundError
from ._numeric import (
    Number,
    achecked_enumerate,
    checked_add,
    ensure_number,
    resolve_limit,
)
from ._types import (
    MISSING,
    AsyncMapper,
    AsyncPredicate,
    Item,
    Lazyable,
    from_lazy,
)

type Source[T] = AsyncIterable[T] | Iterable[T]


def _identity[T](item: T) -> T:
    return item


async def _merge_sort[T](
    items: list[T], compare: Callable[[T, T], int | Awaitable[int]]
) -> list[T]:
    # Stable, and awaits the comparator, which `sorted` cannot do.
    if len(items) <= 1:
        return items
    middle = len(items) // 2
    left = await _merge_sort(items[:middle], compare)
    right = await _merge_sort(items[middle:], compare)
    merged: list[T] = []
    i = j = 0
    while i < len(left) and j < len(right):
        if await resolve(compare(left[i], right[j])) > 0:
            merged.append(right[j])
            j += 1
        else:
            merged.append(left[i])
            i += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged


class AsyncCollection[T](CommonBase[Source[T]], AsyncIterable[T]):
    """Asynchronous counterpart of `Collection`.

    Wraps an `AsyncIterable` or a plain `Iterable`, and is itself an `AsyncIterable`.

    Transformations are lazy and return a new `AsyncCollection`. Terminal operations are coroutines.
    Every callback may be a plain function or a coroutine function, awaitable results being awaited before use.
    Items are requested from the source one at a time, in order.

    Args:
        data (AsyncIterable[T] | Iterable[T]): The source to wrap.

    Example:
    ```python
    >>> import asyncio
    >>> import pycollection as pc
    >>> async def double(x: int) -> int:
    ...     return x * 2
    >>>
    >>> asyncio.run(pc.AsyncCollection([1, 2, 3]).map(double).to_list())
    [2, 4, 6]

    ```
    """

    __slots__ = ()

    def __aiter__(self) -> AsyncIterator[T]:
        return guard_aiter(self._inner)

    def _lazy[U](
        self, factory: Callable[[AsyncCollection[T]], AsyncIterator[U]]
    ) -> AsyncCollection[U]:
        return AsyncCollection(AsyncLazy(functools.partial(factory, self)))

    @staticmethod
    def times[U](
        amount: int, callback: Callable[[int], U | Awaitable[U]]
    ) -> AsyncCollection[U]:
        """Create an `AsyncCollection` by calling `callback` with each number from 1 to `amount`.

        Example:
        ```python
        >>> import asyncio
        >>> import pycollection as pc
        >>> asyncio.run(pc.AsyncCollection.times(3, lambda n: n * 10).to_list())
        [10, 20, 30]

        ```
        """

        async def _times() -> AsyncIterator[U]:
            for number in builtins.range(1, amount + 1):
                yield await resolve(callback(number))

        return AsyncCollection(AsyncLazy(_times))

    @staticmethod
    def range(start: int, stop: int) -> AsyncCollection[int]:
        """Create an `AsyncCollection` of the integers from `start` to `stop`, both included."""
        return AsyncCollection(builtins.range(start, stop + 1))

    def iterator(self) -> AsyncIterator[T]:
        """Return a fresh asynchronous iterator over the items."""
        return aiter(self)

    @aguarded
    async def pipe[R](
        self,
        func: Callable[..., R | Awaitable[R]],
        *args: Any,
        **kwargs: Any,
    ) -> R:
        """Pass `Self` to a function, and return its result, awaited if needed.

        Exceptions raised by `func` go through the same error boundary as any terminal operation.

        Example:
        ```python
        >>> import asyncio
        >>> import pycollection as pc
        >>> asyncio.run(pc.AsyncCollection([1, 2, 3]).pipe(lambda c: c.sum()))
        6

        ```
        """
        return await resolve(func(self, *args, **kwargs))

    # ---------------------------------------------------------------- transformations

    def filter(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> AsyncCollection[T]:
        """Keep only the items passing a truth test.

        Example:
        ```python
        >>> import asyncio
        >>> import pycollection as pc
        >>> asyncio.run(pc.AsyncCollection([1, 2, 3, 4, 5, 6]).filter(lambda x: 2 < x < 5).to_list())
        [3, 4]

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _filter(data: AsyncCollection[T]) -> AsyncIterator[T]:
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    if await resolve(func(item, index, data)):
                        yield item

        return self._lazy(_filter)

    def map[R](
        self, func: AsyncMapper[R], *, throw_on_number_limit: bool | None = None
    ) -> AsyncCollection[R]:
        """Apply a function to every item."""
        mapper = bind(func, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _map(data: AsyncCollection[T]) -> AsyncIterator[R]:
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    yield await resolve(mapper(item, index, data))

        return self._lazy(_map)

    def flat_map[R](
        self,
        func: AsyncMapper[Source[R]],
        *,
        throw_on_number_limit: bool | None = None,
    ) -> AsyncCollection[R]:
        """Apply a function returning a sync or async iterable to every item, and flatten the results by one level."""
        mapper = bind(func, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _flat_map(data: AsyncCollection[T]) -> AsyncIterator[R]:
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    inner = AsyncCollection(await resolve(mapper(item, index, data)))
                    async with aclosing(aiter(inner)) as values:
                        async for value in values:
                            yield value

        return self._lazy(_flat_map)

    def collapse(self) -> AsyncCollection[Any]:
        """Flatten a collection of sync or async iterables by one level, `str` and `bytes` being kept whole."""

        async def _collapse(data: AsyncCollection[T]) -> AsyncIterator[Any]:
            async with aclosing(aiter(data)) as items:
                async for item in items:
                    if not (isinstance(item, AsyncIterable) or is_nested(item)):
                        yield item
                        continue
                    inner = AsyncCollection(item)  # pyright: ignore[reportArgumentType]
                    async with aclosing(aiter(inner)) as values:
                        async for value in values:
                            yield value

        return self._lazy(_collapse)

    def update[R](
        self,
        predicate: AsyncPredicate,
        func: AsyncMapper[R],
        *,
        throw_on_number_limit: bool | None = None,
    ) -> AsyncCollection[T | R]:
        """Apply a function only to the items passing a truth test, leaving the others unchanged."""
        check = bind(predicate, 3)
        mapper = bind(func, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _update(data: AsyncCollection[T]) -> AsyncIterator[T | R]:
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    if await resolve(check(item, index, data)):
                        yield await resolve(mapper(item, index, data))
                    else:
                        yield item

        return self._lazy(_update)

    def page(
        self, page: int, page_size: int, *, throw_on_number_limit: bool | None = None
    ) -> AsyncCollection[T]:
        """Return the items of a 1-based page, a negative page counting from the end.

        Raises:
            ValueError: If `page` is zero.
        """
        if page == 0:
            raise ValueError("page must be a non zero integer")
        offset = page * page_size if page < 0 else (page - 1) * page_size
        return self.skip(offset, throw_on_number_limit=throw_on_number_limit).take(
            page_size, throw_on_number_limit=throw_on_number_limit
        )

    def take(
        self, limit: int, *, throw_on_number_limit: bool | None = None
    ) -> AsyncCollection[T]:
        """Take the first `limit` items, or all but the last `-limit` items if negative."""
        throw = resolve_limit(throw_on_number_limit)

        async def _take(data: AsyncCollection[T]) -> AsyncIterator[T]:
            count = limit
            if count < 0:
                count = await data.size(throw_on_number_limit=throw) + count
            if count <= 0:
                return
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    yield item
                    if index + 1 >= count:
                        return

        return self._lazy(_take)

    def take_until(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> AsyncCollection[T]:
        """Take items until the truth test passes, the matching item excluded."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _take_until(data: AsyncCollection[T]) -> AsyncIterator[T]:
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    if await resolve(func(item, index, data)):
                        return
                    yield item

        return self._lazy(_take_until)

    def take_while(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> AsyncCollection[T]:
        """Take items while the truth test passes."""
        func = bind(predicate, 3)

        async def _negated(*args: Any) -> bool:
            return not await resolve(func(*args))

        return self.take_until(_negated, throw_on_number_limit=throw_on_number_limit)

    def skip(
        self, offset: int, *, throw_on_number_limit: bool | None = None
    ) -> AsyncCollection[T]:
        """Skip the first `offset` items, or keep only the last `-offset` items if negative."""
        throw = resolve_limit(throw_on_number_limit)

        async def _skip(data: AsyncCollection[T]) -> AsyncIterator[T]:
            count = offset
            if count < 0:
                count = await data.size(throw_on_number_limit=throw) + count
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    if index >= count:
                        yield item

        return self._lazy(_skip)

    def skip_until(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> AsyncCollection[T]:
        """Skip items until the truth test passes, then keep every remaining item."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _skip_until(data: AsyncCollection[T]) -> AsyncIterator[T]:
            matched = False
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    if not matched:
                        matched = bool(await resolve(func(item, index, data)))
                    if matched:
                        yield item

        return self._lazy(_skip_until)

    def skip_while(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> AsyncCollection[T]:
        """Skip items while the truth test passes, then keep every remaining item."""
        func = bind(predicate, 3)

        async def _negated(*args: Any) -> bool:
            return not await resolve(func(*args))

        return self.skip_until(_negated, throw_on_number_limit=throw_on_number_limit)

    def _switch[U](
        self,
        condition: Callable[[], bool | Awaitable[bool]],
        callback: Callable[[AsyncCollection[T]], Any],
    ) -> AsyncCollection[T | U]:
        async def _when(data: AsyncCollection[T]) -> AsyncIterator[T | U]:
            source = data
            if await resolve(condition()):
                source = AsyncCollection(await resolve(callback(data)))
            async with aclosing(aiter(source)) as items:
                async for item in items:
                    yield item

        return self._lazy(_when)

    def when[U](
        self, condition: bool, callback: Callable[[AsyncCollection[T]], Any]
    ) -> AsyncCollection[T | U]:
        """Replace the collection by `callback(collection)` if `condition` is true.

        The callback may return a sync or async iterable, or an awaitable of one.

        Example:
        ```python
        >>> import asyncio
        >>> import pycollection as pc
        >>> data = pc.AsyncCollection([1, 2]).when(True, lambda c: c.append([3]))
        >>> asyncio.run(data.to_list())
        [1, 2, 3]

        ```
        """
        return self._switch(lambda: condition, callback)

    def when_not[U](
        self, condition: bool, callback: Callable[[AsyncCollection[T]], Any]
    ) -> AsyncCollection[T | U]:
        """Replace the collection by `callback(collection)` if `condition` is false."""
        return self._switch(lambda: not condition, callback)

    def when_empty[U](
        self, callback: Callable[[AsyncCollection[T]], Any]
    ) -> AsyncCollection[T | U]:
        """Replace the collection by `callback(collection)` if it is empty."""
        return self._switch(self.is_empty, callback)

    def when_not_empty[U](
        self, callback: Callable[[AsyncCollection[T]], Any]
    ) -> AsyncCollection[T | U]:
        """Replace the collection by `callback(collection)` if it is not empty."""
        return self._switch(self.is_not_empty, callback)

    def tap(self, callback: Callable[[AsyncCollection[T]], object]) -> AsyncCollection[T]:
        """Call `callback(collection)`, awaited if needed, each time iteration starts, and yield the items unchanged."""

        async def _tap(data: AsyncCollection[T]) -> AsyncIterator[T]:
            await resolve(callback(data))
            async with aclosing(aiter(data)) as items:
                async for item in items:
                    yield item

        return self._lazy(_tap)

    # ---------------------------------------------------------------- grouping

    def chunk(self, size: int) -> AsyncCollection[AsyncCollection[T]]:
        """Break the collection into consecutive chunks of `size` items, the last one being possibly shorter.

        Example:
        ```python
        >>> import asyncio
        >>> import pycollection as pc
        >>> chunks = pc.AsyncCollection(range(1, 8)).chunk(4).map(lambda c: c.to_list())
        >>> asyncio.run(chunks.to_list())
        [[1, 2, 3, 4], [5, 6, 7]]

        ```
        """
        if size < 1:
            raise ValueError("chunk size must be at least 1")

        async def _chunk(data: AsyncCollection[T]) -> AsyncIterator[AsyncCollection[T]]:
            chunk: list[T] = []
            async with aclosing(aiter(data)) as items:
                async for item in items:
                    chunk.append(item)
                    if len(chunk) == size:
                        yield AsyncCollection(chunk)
                        chunk = []
            if chunk:
                yield AsyncCollection(chunk)

        return self._lazy(_chunk)

    def chunk_while(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> AsyncCollection[AsyncCollection[T]]:
        """Break the collection into chunks, starting a new one each time the truth test fails.

        The predicate receives `(item, index, chunk)`, `chunk` being the chunk currently built.
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _chunk_while(
            data: AsyncCollection[T],
        ) -> AsyncIterator[AsyncCollection[T]]:
            chunk: list[T] = []
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    if index == 0 or await resolve(
                        func(item, index, AsyncCollection(chunk))
                    ):
                        chunk.append(item)
                    else:
                        yield AsyncCollection(chunk)
                        chunk = [item]
            if chunk:
                yield AsyncCollection(chunk)

        return self._lazy(_chunk_while)

    def split(self, amount: int) -> AsyncCollection[AsyncCollection[T]]:
        """Break the collection into `amount` groups of near equal size, earlier groups taking the remainder."""
        if amount < 1:
            raise ValueError("split amount must be at least 1")

        async def _split(data: AsyncCollection[T]) -> AsyncIterator[AsyncCollection[T]]:
            items = [item async for item in data]
            for part in mit.divide(amount, items):
                yield AsyncCollection(list(part))

        return self._lazy(_split)

    def split_in(self, amount: int) -> AsyncCollection[AsyncCollection[T]]:
        """Break the collection into at most `amount` groups, filling each group before the next one.

        Example:
        ```python
        >>> import asyncio
        >>> import pycollection as pc
        >>> groups = pc.AsyncCollection(range(1, 11)).split_in(3).map(lambda c: c.to_list())
        >>> asyncio.run(groups.to_list())
        [[1, 2, 3, 4], [5, 6, 7, 8], [9, 10]]

        ```
        """
        if amount < 1:
            raise ValueError("split amount must be at least 1")

        async def _split_in(
            data: AsyncCollection[T],
        ) -> AsyncIterator[AsyncCollection[T]]:
            items = [item async for item in data]
            if not items:
                return
            for part in mit.chunked(items, math.ceil(len(items) / amount)):
                yield AsyncCollection(part)

        return self._lazy(_split_in)

    def partition(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> AsyncCollection[AsyncCollection[T]]:
        """Separate the items passing a truth test from those which do not, the matching ones first."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _partition(
            data: AsyncCollection[T],
        ) -> AsyncIterator[AsyncCollection[T]]:
            matched: list[T] = []
            rest: list[T] = []
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    if await resolve(func(item, index, data)):
                        matched.append(item)
                    else:
                        rest.append(item)
            yield AsyncCollection(matched)
            yield AsyncCollection(rest)

        return self._lazy(_partition)

    def sliding(
        self, size: int, step: int | None = None
    ) -> AsyncCollection[AsyncCollection[T]]:
        """Return a "sliding window" view of the items.

        See `Collection.sliding()` for the windowing rules.
        """
        if size < 1:
            raise ValueError("window size must be at least 1")
        window_step = size - 1 if step is None else step

        async def _sliding(
            data: AsyncCollection[T],
        ) -> AsyncIterator[AsyncCollection[T]]:
            if window_step < 1:
                return
            async with aclosing(AsyncPeekable(data)) as items:
                window = await items.take(size)
                while window:
                    yield AsyncCollection(window)
                    if not await items.has_next():
                        return
                    if window_step < size:
                        window = window[window_step:] + await items.take(window_step)
                    else:
                        await items.take(window_step - size)
                        window = await items.take(size)

        return self._lazy(_sliding)

    def group_by[K](
        self,
        selector: AsyncMapper[K] | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> AsyncCollection[Item[K, AsyncCollection[T]]]:
        """Group the items by the key returned by `selector`, the item itself by default, in first-seen order."""
        key = bind(selector or _identity, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _group_by(
            data: AsyncCollection[T],
        ) -> AsyncIterator[Item[K, AsyncCollection[T]]]:
            groups: dict[K, list[T]] = {}
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    group = await resolve(key(item, index, data))
                    groups.setdefault(group, []).append(item)
            for group, members in groups.items():
                yield Item(group, AsyncCollection(members))

        return self._lazy(_group_by)

    def count_by[K](
        self,
        selector: AsyncMapper[K] | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> AsyncCollection[Item[K, int]]:
        """Count the items by the key returned by `selector`, the item itself by default, in first-seen order.

        Example:
        ```python
        >>> import asyncio
        >>> import pycollection as pc
        >>> asyncio.run(pc.AsyncCollection("abaca").count_by().to_list())
        [('a', 3), ('b', 1), ('c', 1)]

        ```
        """
        key = bind(selector or _identity, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _count_by(data: AsyncCollection[T]) -> AsyncIterator[Item[K, int]]:
            counts: dict[K, int] = {}
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    group = await resolve(key(item, index, data))
                    counts[group] = counts.get(group, 0) + 1
            for group, count in counts.items():
                yield Item(group, count)

        return self._lazy(_count_by)

    def unique(
        self,
        selector: AsyncMapper[Any] | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> AsyncCollection[T]:
        """Keep the first occurrence of each distinct item, or of each distinct key returned by `selector`."""
        key = bind(selector or _identity, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _unique(data: AsyncCollection[T]) -> AsyncIterator[T]:
            seen = Seen()
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    if not seen.add(await resolve(key(item, index, data))):
                        yield item

        return self._lazy(_unique)

    def duplicates(
        self,
        selector: AsyncMapper[Any] | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> AsyncCollection[T]:
        """Keep every occurrence of an item, or of a key returned by `selector`, which was already seen."""
        key = bind(selector or _identity, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _duplicates(data: AsyncCollection[T]) -> AsyncIterator[T]:
            seen = Seen()
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    if seen.add(await resolve(key(item, index, data))):
                        yield item

        return self._lazy(_duplicates)

    # ---------------------------------------------------------------- combining

    def prepend[U](self, iterable: Source[U]) -> AsyncCollection[T | U]:
        """Add the items of a sync or async iterable before the items of the collection."""

        async def _prepend(data: AsyncCollection[T]) -> AsyncIterator[T | U]:
            for source in (AsyncCollection(iterable), data):
                async with aclosing(aiter(source)) as items:
                    async for item in items:
                        yield item

        return self._lazy(_prepend)

    def append[U](self, iterable: Source[U]) -> AsyncCollection[T | U]:
        """Add the items of a sync or async iterable after the items of the collection."""

        async def _append(data: AsyncCollection[T]) -> AsyncIterator[T | U]:
            for source in (data, AsyncCollection(iterable)):
                async with aclosing(aiter(source)) as items:
                    async for item in items:
                        yield item

        return self._lazy(_append)

    def insert_before[U](
        self,
        predicate: AsyncPredicate,
        iterable: Source[U],
        *,
        throw_on_number_limit: bool | None = None,
    ) -> AsyncCollection[T | U]:
        """Insert the items of `iterable` before the first item passing the truth test."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _insert_before(data: AsyncCollection[T]) -> AsyncIterator[T | U]:
            matched = False
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    if not matched and await resolve(func(item, index, data)):
                        async with aclosing(aiter(AsyncCollection(iterable))) as values:
                            async for value in values:
                                yield value
                        matched = True
                    yield item

        return self._lazy(_insert_before)

    def insert_after[U](
        self,
        predicate: AsyncPredicate,
        iterable: Source[U],
        *,
        throw_on_number_limit: bool | None = None,
    ) -> AsyncCollection[T | U]:
        """Insert the items of `iterable` after the first item passing the truth test."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        async def _insert_after(data: AsyncCollection[T]) -> AsyncIterator[T | U]:
            matched = False
            async with aclosing(achecked_enumerate(data, throw)) as items:
                async for index, item in items:
                    yield item
                    if not matched and await resolve(func(item, index, data)):
                        async with aclosing(aiter(AsyncCollection(iterable))) as values:
                            async for value in values:
                                yield value
                        matched = True

        return self._lazy(_insert_after)

    def zip[U](self, iterable: Source[U]) -> AsyncCollection[tuple[T, U]]:
        """Pair each item with the item of a sync or async iterable at the same position, stopping at the shortest."""

        async def _zip(data: AsyncCollection[T]) -> AsyncIterator[tuple[T, U]]:
            async with (
                aclosing(aiter(data)) as items,
                aclosing(aiter(AsyncCollection(iterable))) as others,
            ):
                async for item in items:
                    other = await anext(others, MISSING)
                    if other is MISSING:
                        return
                    yield item, other

        return self._lazy(_zip)

    # ---------------------------------------------------------------- ordering

    def sort(
        self, compare: Callable[[T, T], int | Awaitable[int]] | None = None
    ) -> AsyncCollection[T]:
        """Sort the items, with an optional three-way comparator which may be a coroutine function.

        Example:
        ```python
        >>> import asyncio
        >>> import pycollection as pc
        >>> async def descending(a: int, b: int) -> int:
        ...     return b - a
        >>>
        >>> asyncio.run(pc.AsyncCollection([3, 1, 2]).sort(descending).to_list())
        [3, 2, 1]

        ```
        """

        async def _sort(data: AsyncCollection[T]) -> AsyncIterator[T]:
            items = [item async for item in data]
            if compare is None:
                ordered = sorted(items)  # pyright: ignore[reportCallIssue, reportArgumentType]
            else:
                ordered = await _merge_sort(items, compare)
            for item in ordered:
                yield item

        return self._lazy(_sort)

    def reverse(self) -> AsyncCollection[T]:
        """Reverse the order of the items."""

        async def _reverse(data: AsyncCollection[T]) -> AsyncIterator[T]:
            items = [item async for item in data]
            for item in reversed(items):
                yield item

        return self._lazy(_reverse)

    def nth(self, step: int) -> AsyncCollection[T]:
        """Keep every `step`-th item, starting with the first one."""
        if step < 1:
            raise ValueError("step must be at least 1")

        async def _nth(data: AsyncCollection[T]) -> AsyncIterator[T]:
            index = 0
            async with aclosing(aiter(data)) as items:
                async for item in items:
                    if index % step == 0:
                        yield item
                    index += 1

        return self._lazy(_nth)

    # ---------------------------------------------------------------- aggregation

    @aguarded
    async def reduce[R](
        self,
        func: AsyncMapper[R],
        initial: R = MISSING,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> R:
        """Apply a function of `(accumulator, item, index, collection)` cumulatively to the items.

        Raises:
            InvalidTypeError: If the collection is empty and no `initial` value is given.
        """
        step = bind(func, 4)
        throw = resolve_limit(throw_on_number_limit)
        output = initial
        async with aclosing(achecked_enumerate(self, throw)) as items:
            if output is MISSING:
                seed = await anext(items, MISSING)
                if seed is MISSING:
                    raise InvalidTypeError(
                        "Reduce of empty collection must be given an initial value"
                    )
                output = seed[1]
            async for index, item in items:
                output = await resolve(step(output, item, index, self))
        return output

    @aguarded
    async def join(
        self, separator: str = ",", *, throw_on_number_limit: bool | None = None
    ) -> str:
        """Join string items with a separator.

        Raises:
            InvalidTypeError: If an item is not a `str`.
        """
        throw = resolve_limit(throw_on_number_limit)
        parts: list[str] = []
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for _, item in items:
                if not isinstance(item, str):
                    msg = f"Item type is invalid must be string, got {type(item).__name__}"
                    raise InvalidTypeError(msg)
                parts.append(item)
        return separator.join(parts)

    @aguarded
    async def sum(self, *, throw_on_number_limit: bool | None = None) -> Number:
        """Sum the items.

        Example:
        ```python
        >>> import asyncio
        >>> import pycollection as pc
        >>> asyncio.run(pc.AsyncCollection([1, 2, 3]).sum())
        6

        ```
        """
        throw = resolve_limit(throw_on_number_limit)
        total: Number = 0
        async with aclosing(aiter(self)) as items:
            async for item in items:
                total = checked_add(total, ensure_number(item), throw)
        return total

    @aguarded
    async def average(self, *, throw_on_number_limit: bool | None = None) -> Number:
        """Arithmetic mean of the items, `0` for an empty collection."""
        throw = resolve_limit(throw_on_number_limit)
        total: Number = 0
        size = 0
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                total = checked_add(total, ensure_number(item), throw)
                size = index + 1
        if size == 0:
            return 0
        return total / size

    @aguarded
    async def median(self) -> Number:
        """Median of the items, `0` for an empty collection."""
        async with aclosing(aiter(self)) as items:
            values = [ensure_number(item) async for item in items]
        if not values:
            return 0
        return statistics.median(values)

    @aguarded
    async def min(self) -> Number:
        """Smallest item, `0` for an empty collection."""
        result: Number | None = None
        async with aclosing(aiter(self)) as items:
            async for item in items:
                number = ensure_number(item)
                if result is None or number < result:
                    result = number
        return 0 if result is None else result

    @aguarded
    async def max(self) -> Number:
        """Largest item, `0` for an empty collection."""
        result: Number | None = None
        async with aclosing(aiter(self)) as items:
            async for item in items:
                number = ensure_number(item)
                if result is None or number > result:
                    result = number
        return 0 if result is None else result

    @aguarded
    async def percentage(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> float:
        """Share of the items passing the truth test, in percent, `0` for an empty collection."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        total = 0
        part = 0
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                if await resolve(func(item, index, self)):
                    part += 1
                total = index + 1
        if total == 0:
            return 0.0
        return part / total * 100

    @aguarded
    async def some(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> bool:
        """Whether at least one item passes the truth test. Stops at the first match."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                if await resolve(func(item, index, self)):
                    return True
        return False

    @aguarded
    async def every(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> bool:
        """Whether all items pass the truth test. Stops at the first failure."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                if not await resolve(func(item, index, self)):
                    return False
        return True

    # ---------------------------------------------------------------- lookup

    @aguarded
    async def first_or[D](
        self,
        default: Lazyable[D | Awaitable[D]],
        predicate: AsyncPredicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | D:
        """Return the first item passing the truth test, or the first item if no predicate is given.

        A callable `default` is called only if nothing is found, and its result awaited if needed.

        Example:
        ```python
        >>> import asyncio
        >>> import pycollection as pc
        >>> asyncio.run(pc.AsyncCollection([1, 2, 3]).first_or(-1, lambda x: x > 5))
        -1

        ```
        """
        func = bind(predicate, 3) if predicate is not None else None
        throw = resolve_limit(throw_on_number_limit)
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                if func is None or await resolve(func(item, index, self)):
                    return item
        return await resolve(from_lazy(default))

    async def first(
        self,
        predicate: AsyncPredicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | None:
        """Same as `first_or`, with `None` as default."""
        return await self.first_or(
            None, predicate, throw_on_number_limit=throw_on_number_limit
        )

    async def first_or_fail(
        self,
        predicate: AsyncPredicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T:
        """Same as `first_or`, but raises `ItemNotFoundError` instead of returning a default."""
        item = await self.first_or(
            MISSING, predicate, throw_on_number_limit=throw_on_number_limit
        )
        if item is MISSING:
            raise ItemNotFoundError("Item was not found")
        return item

    @aguarded
    async def last_or[D](
        self,
        default: Lazyable[D | Awaitable[D]],
        predicate: AsyncPredicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | D:
        """Return the last item passing the truth test, or the last item if no predicate is given."""
        func = bind(predicate, 3) if predicate is not None else None
        throw = resolve_limit(throw_on_number_limit)
        found: Any = MISSING
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                if func is None or await resolve(func(item, index, self)):
                    found = item
        if found is MISSING:
            return await resolve(from_lazy(default))
        return found

    async def last(
        self,
        predicate: AsyncPredicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | None:
        """Same as `last_or`, with `None` as default."""
        return await self.last_or(
            None, predicate, throw_on_number_limit=throw_on_number_limit
        )

    async def last_or_fail(
        self,
        predicate: AsyncPredicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T:
        """Same as `last_or`, but raises `ItemNotFoundError` instead of returning a default."""
        item = await self.last_or(
            MISSING, predicate, throw_on_number_limit=throw_on_number_limit
        )
        if item is MISSING:
            raise ItemNotFoundError("Item was not found")
        return item

    @aguarded
    async def before_or[D](
        self,
        default: Lazyable[D | Awaitable[D]],
        predicate: AsyncPredicate,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | D:
        """Return the item directly before the first item passing the truth test."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        previous: Any = MISSING
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                if await resolve(func(item, index, self)):
                    if previous is MISSING:
                        break
                    return previous
                previous = item
        return await resolve(from_lazy(default))

    async def before(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> T | None:
        """Same as `before_or`, with `None` as default."""
        return await self.before_or(
            None, predicate, throw_on_number_limit=throw_on_number_limit
        )

    async def before_or_fail(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> T:
        """Same as `before_or`, but raises `ItemNotFoundError` instead of returning a default."""
        item = await self.before_or(
            MISSING, predicate, throw_on_number_limit=throw_on_number_limit
        )
        if item is MISSING:
            raise ItemNotFoundError("Item was not found")
        return item

    @aguarded
    async def after_or[D](
        self,
        default: Lazyable[D | Awaitable[D]],
        predicate: AsyncPredicate,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | D:
        """Return the item directly after the first item passing the truth test."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        matched = False
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                if matched:
                    return item
                matched = bool(await resolve(func(item, index, self)))
        return await resolve(from_lazy(default))

    async def after(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> T | None:
        """Same as `after_or`, with `None` as default."""
        return await self.after_or(
            None, predicate, throw_on_number_limit=throw_on_number_limit
        )

    async def after_or_fail(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> T:
        """Same as `after_or`, but raises `ItemNotFoundError` instead of returning a default."""
        item = await self.after_or(
            MISSING, predicate, throw_on_number_limit=throw_on_number_limit
        )
        if item is MISSING:
            raise ItemNotFoundError("Item was not found")
        return item

    @aguarded
    async def sole(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> T:
        """Return the only item passing the truth test.

        Raises:
            ItemNotFoundError: If no item passes.
            MultipleItemsFoundError: If more than one item passes.
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        found: Any = MISSING
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                if await resolve(func(item, index, self)):
                    if found is not MISSING:
                        raise MultipleItemsFoundError("Multiple items were found")
                    found = item
        if found is MISSING:
            raise ItemNotFoundError("Item was not found")
        return found

    @aguarded
    async def search(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> int:
        """Index of the first item passing the truth test, `-1` if none does."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                if await resolve(func(item, index, self)):
                    return index
        return -1

    # ---------------------------------------------------------------- consumption

    @aguarded
    async def count(
        self, predicate: AsyncPredicate, *, throw_on_number_limit: bool | None = None
    ) -> int:
        """Number of items passing the truth test."""
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        total = 0
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                if await resolve(func(item, index, self)):
                    total += 1
        return total

    @aguarded
    async def size(self, *, throw_on_number_limit: bool | None = None) -> int:
        """Number of items."""
        throw = resolve_limit(throw_on_number_limit)
        total = 0
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, _ in items:
                total = index + 1
        return total

    @aguarded
    async def is_empty(self) -> bool:
        """Whether the collection has no item. Only pulls the first item."""
        async with aclosing(aiter(self)) as items:
            return await anext(items, MISSING) is MISSING

    async def is_not_empty(self) -> bool:
        """Whether the collection has at least one item."""
        return not await self.is_empty()

    @aguarded
    async def for_each(
        self,
        callback: AsyncMapper[object],
        *,
        throw_on_number_limit: bool | None = None,
    ) -> None:
        """Call a function of `(item, index, collection)` on every item, awaited if needed."""
        func = bind(callback, 3)
        throw = resolve_limit(throw_on_number_limit)
        async with aclosing(achecked_enumerate(self, throw)) as items:
            async for index, item in items:
                await resolve(func(item, index, self))

    @aguarded
    async def to_list(self) -> list[T]:
        """Collect the items into a new `list`."""
        return [item async for item in self]
