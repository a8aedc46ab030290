from __future__ import annotations

import builtins
import functools
import itertools
import math
import statistics
from collections.abc import Callable, Iterable, Iterator
from typing import Any

import cytoolz as cz
import more_itertools as mit

from ._core import CommonBase, Lazy, Pipeable, Seen, bind, guard_iter, guarded
from ._errors import InvalidTypeError, ItemNotFoundError, MultipleItemsFoundError
from ._numeric import (
    Number,
    checked_add,
    checked_enumerate,
    ensure_number,
    resolve_limit,
)
from ._types import (
    MISSING,
    Comparator,
    Item,
    Lazyable,
    Mapper,
    Predicate,
    Reducer,
    from_lazy,
)


def _identity[T](item: T) -> T:
    return item


def is_nested(item: object) -> bool:
    """Whether `collapse()` should flatten `item`, strings and bytes being kept whole."""
    return cz.itertoolz.isiterable(item) and not isinstance(item, (str, bytes))


class Collection[T](CommonBase[Iterable[T]], Pipeable, Iterable[T]):
    """A lazy, chainable wrapper around any `Iterable`.

    Implements the `Iterable` Protocol from `collections.abc`, so it can be used anywhere a standard iterable is expected.

    Every transformation (`filter`, `map`, `chunk`, ...) returns a new `Collection` composed over the previous one.
    Nothing is computed until a terminal operation (`to_list`, `sum`, `first`, ...) iterates it, and then every chained step runs in a single pass over the source.

    The source is never mutated, and a `Collection` over a re-iterable source (`list`, `tuple`, `range`, another `Collection`) can be consumed any number of times.
    A `Collection` over a one-shot `Iterator` (e.g a generator) is single-use, like the iterator itself.

    Callbacks are called with `(item, index, collection)`, truncated to the number of positional parameters they accept, so `lambda x: ...` only receives the item.

    Args:
        data (Iterable[T]): Any object that can be iterated over.

    Example:
    ```python
    >>> import pycollection as pc
    >>> pc.Collection([1, 2, 3, 4, 5, 6]).filter(lambda x: 2 < x < 5).to_list()
    [3, 4]
    >>> pc.Collection([1, 2, 3])
    Collection([1, 2, 3])

    ```
    """

    __slots__ = ()

    def __iter__(self) -> Iterator[T]:
        return guard_iter(self._inner)

    def _lazy[U](self, factory: Callable[[Collection[T]], Iterator[U]]) -> Collection[U]:
        return Collection(Lazy(functools.partial(factory, self)))

    @staticmethod
    def times[U](amount: int, callback: Callable[[int], U]) -> Collection[U]:
        """Create a `Collection` by calling `callback` with each number from 1 to `amount`.

        Args:
            amount (int): How many times to call the callback.
            callback (Callable[[int], U]): Function receiving the 1-based call number.

        Returns:
            Collection[U]: A lazy collection of the results.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection.times(3, lambda n: n * 10).to_list()
        [10, 20, 30]

        ```
        """

        def _times() -> Iterator[U]:
            return (callback(number) for number in builtins.range(1, amount + 1))

        return Collection(Lazy(_times))

    @staticmethod
    def range(start: int, stop: int) -> Collection[int]:
        """Create a `Collection` of the integers from `start` to `stop`, both included.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection.range(2, 5).to_list()
        [2, 3, 4, 5]

        ```
        """
        return Collection(builtins.range(start, stop + 1))

    def iterator(self) -> Iterator[T]:
        """Return a fresh iterator over the items.

        Returns:
            Iterator[T]: An iterator running the whole pipeline from the start.
        """
        return iter(self)

    # ---------------------------------------------------------------- transformations

    def filter(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> Collection[T]:
        """Keep only the items passing a truth test.

        Args:
            predicate (Predicate): Function of `(item, index, collection)` returning a bool.
            throw_on_number_limit (bool | None): Raise `NumberOverflowError` if the index reaches the safe integer limit.

        Returns:
            Collection[T]: A lazy collection of the matching items.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4, 5, 6]).filter(lambda x: 2 < x < 5).to_list()
        [3, 4]
        >>> pc.Collection("abcd").filter(lambda _, index: index % 2 == 0).to_list()
        ['a', 'c']

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _filter(data: Collection[T]) -> Iterator[T]:
            for index, item in checked_enumerate(data, throw):
                if func(item, index, data):
                    yield item

        return self._lazy(_filter)

    def map[R](
        self, func: Mapper[R], *, throw_on_number_limit: bool | None = None
    ) -> Collection[R]:
        """Apply a function to every item.

        Args:
            func (Mapper[R]): Function of `(item, index, collection)`.
            throw_on_number_limit (bool | None): Raise `NumberOverflowError` if the index reaches the safe integer limit.

        Returns:
            Collection[R]: A lazy collection of the results.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4, 5]).map(lambda x: x * 2).to_list()
        [2, 4, 6, 8, 10]
        >>> pc.Collection(["a", "b"]).map(lambda x, i: f"{i}:{x}").to_list()
        ['0:a', '1:b']

        ```
        """
        mapper = bind(func, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _map(data: Collection[T]) -> Iterator[R]:
            for index, item in checked_enumerate(data, throw):
                yield mapper(item, index, data)

        return self._lazy(_map)

    def flat_map[R](
        self,
        func: Mapper[Iterable[R]],
        *,
        throw_on_number_limit: bool | None = None,
    ) -> Collection[R]:
        """Apply a function returning an iterable to every item, and flatten the results by one level.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3]).flat_map(lambda x: [x, x * 10]).to_list()
        [1, 10, 2, 20, 3, 30]

        ```
        """
        mapper = bind(func, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _flat_map(data: Collection[T]) -> Iterator[R]:
            for index, item in checked_enumerate(data, throw):
                yield from mapper(item, index, data)

        return self._lazy(_flat_map)

    def collapse(self) -> Collection[Any]:
        """Flatten a collection of iterables by one level.

        Items which are not iterable, as well as `str` and `bytes`, are kept as they are.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([[1, 2], [3, 4], 5, "ab"]).collapse().to_list()
        [1, 2, 3, 4, 5, 'ab']

        ```
        """

        def _collapse(data: Collection[T]) -> Iterator[Any]:
            for item in data:
                if is_nested(item):
                    yield from item  # pyright: ignore[reportGeneralTypeIssues]
                else:
                    yield item

        return self._lazy(_collapse)

    def update[R](
        self,
        predicate: Predicate,
        func: Mapper[R],
        *,
        throw_on_number_limit: bool | None = None,
    ) -> Collection[T | R]:
        """Apply a function only to the items passing a truth test, leaving the others unchanged.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4, 5]).update(lambda x: x % 2 == 0, lambda x: x * 2).to_list()
        [1, 4, 3, 8, 5]

        ```
        """
        check = bind(predicate, 3)
        mapper = bind(func, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _update(data: Collection[T]) -> Iterator[T | R]:
            for index, item in checked_enumerate(data, throw):
                if check(item, index, data):
                    yield mapper(item, index, data)
                else:
                    yield item

        return self._lazy(_update)

    def page(
        self, page: int, page_size: int, *, throw_on_number_limit: bool | None = None
    ) -> Collection[T]:
        """Return the items which would be present on a given page.

        Pages are 1-based. A negative page counts from the end, `-1` being the last page.

        Args:
            page (int): The page number, non zero.
            page_size (int): The number of items per page.
            throw_on_number_limit (bool | None): Raise `NumberOverflowError` if the index reaches the safe integer limit.

        Returns:
            Collection[T]: A lazy collection of at most `page_size` items.

        Raises:
            ValueError: If `page` is zero.

        Example:
        ```python
        >>> import pycollection as pc
        >>> data = pc.Collection([1, 2, 3, 4, 5, 6, 7, 8, 9])
        >>> data.page(2, 3).to_list()
        [4, 5, 6]
        >>> data.page(-1, 2).to_list()
        [8, 9]

        ```
        """
        if page == 0:
            raise ValueError("page must be a non zero integer")
        offset = page * page_size if page < 0 else (page - 1) * page_size
        return self.skip(offset, throw_on_number_limit=throw_on_number_limit).take(
            page_size, throw_on_number_limit=throw_on_number_limit
        )

    def take(
        self, limit: int, *, throw_on_number_limit: bool | None = None
    ) -> Collection[T]:
        """Take the first `limit` items.

        A negative `limit` keeps the last `-limit` items instead; note that this requires to iterate the source twice.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([0, 1, 2, 3, 4, 5]).take(3).to_list()
        [0, 1, 2]
        >>> pc.Collection([0, 1, 2, 3, 4, 5]).take(-2).to_list()
        [0, 1, 2, 3]

        ```
        """
        throw = resolve_limit(throw_on_number_limit)

        def _take(data: Collection[T]) -> Iterator[T]:
            count = limit
            if count < 0:
                count = data.size(throw_on_number_limit=throw) + count
            if count <= 0:
                return
            for index, item in checked_enumerate(data, throw):
                yield item
                if index + 1 >= count:
                    return

        return self._lazy(_take)

    def take_until(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> Collection[T]:
        """Take items until the truth test passes, the matching item excluded.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4]).take_until(lambda x: x >= 3).to_list()
        [1, 2]

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _take_until(data: Collection[T]) -> Iterator[T]:
            for index, item in checked_enumerate(data, throw):
                if func(item, index, data):
                    return
                yield item

        return self._lazy(_take_until)

    def take_while(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> Collection[T]:
        """Take items while the truth test passes.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4]).take_while(lambda x: x < 3).to_list()
        [1, 2]

        ```
        """
        func = bind(predicate, 3)
        return self.take_until(
            lambda *args: not func(*args), throw_on_number_limit=throw_on_number_limit
        )

    def skip(
        self, offset: int, *, throw_on_number_limit: bool | None = None
    ) -> Collection[T]:
        """Skip the first `offset` items.

        A negative `offset` keeps only the last `-offset` items; note that this requires to iterate the source twice.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4, 5, 6, 7, 8, 9, 10]).skip(4).to_list()
        [5, 6, 7, 8, 9, 10]
        >>> pc.Collection([1, 2, 3, 4, 5]).skip(-2).to_list()
        [4, 5]

        ```
        """
        throw = resolve_limit(throw_on_number_limit)

        def _skip(data: Collection[T]) -> Iterator[T]:
            count = offset
            if count < 0:
                count = data.size(throw_on_number_limit=throw) + count
            for index, item in checked_enumerate(data, throw):
                if index >= count:
                    yield item

        return self._lazy(_skip)

    def skip_until(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> Collection[T]:
        """Skip items until the truth test passes, then keep every remaining item.

        The predicate is not called anymore once it passed.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4, 1]).skip_until(lambda x: x >= 3).to_list()
        [3, 4, 1]

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _skip_until(data: Collection[T]) -> Iterator[T]:
            matched = False
            for index, item in checked_enumerate(data, throw):
                if not matched:
                    matched = bool(func(item, index, data))
                if matched:
                    yield item

        return self._lazy(_skip_until)

    def skip_while(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> Collection[T]:
        """Skip items while the truth test passes, then keep every remaining item.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4]).skip_while(lambda x: x <= 3).to_list()
        [4]

        ```
        """
        func = bind(predicate, 3)
        return self.skip_until(
            lambda *args: not func(*args), throw_on_number_limit=throw_on_number_limit
        )

    def _switch[U](
        self,
        condition: Callable[[], bool],
        callback: Callable[[Collection[T]], Iterable[U]],
    ) -> Collection[T | U]:
        def _when(data: Collection[T]) -> Iterator[T | U]:
            if condition():
                yield from callback(data)
            else:
                yield from data

        return self._lazy(_when)

    def when[U](
        self, condition: bool, callback: Callable[[Collection[T]], Iterable[U]]
    ) -> Collection[T | U]:
        """Replace the collection by `callback(collection)` if `condition` is true.

        The callback is only called when the result is iterated.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2]).when(True, lambda c: c.append([3])).to_list()
        [1, 2, 3]
        >>> pc.Collection([1, 2]).when(False, lambda c: c.append([3])).to_list()
        [1, 2]

        ```
        """
        return self._switch(lambda: condition, callback)

    def when_not[U](
        self, condition: bool, callback: Callable[[Collection[T]], Iterable[U]]
    ) -> Collection[T | U]:
        """Replace the collection by `callback(collection)` if `condition` is false."""
        return self._switch(lambda: not condition, callback)

    def when_empty[U](
        self, callback: Callable[[Collection[T]], Iterable[U]]
    ) -> Collection[T | U]:
        """Replace the collection by `callback(collection)` if it is empty.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([]).when_empty(lambda c: c.append(["default"])).to_list()
        ['default']

        ```
        """
        return self._switch(self.is_empty, callback)

    def when_not_empty[U](
        self, callback: Callable[[Collection[T]], Iterable[U]]
    ) -> Collection[T | U]:
        """Replace the collection by `callback(collection)` if it is not empty."""
        return self._switch(self.is_not_empty, callback)

    def tap(self, callback: Callable[[Collection[T]], object]) -> Collection[T]:
        """Call `callback(collection)` each time iteration starts, and yield the items unchanged.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2]).tap(lambda c: print(c.size())).to_list()
        2
        [1, 2]

        ```
        """

        def _tap(data: Collection[T]) -> Iterator[T]:
            callback(data)
            yield from data

        return self._lazy(_tap)

    # ---------------------------------------------------------------- grouping

    def chunk(self, size: int) -> Collection[Collection[T]]:
        """Break the collection into consecutive chunks of `size` items, the last one being possibly shorter.

        Args:
            size (int): Number of items per chunk, at least 1.

        Returns:
            Collection[Collection[T]]: A lazy collection of chunks.

        Raises:
            ValueError: If `size` is lower than 1.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4, 5, 6, 7]).chunk(4).map(list).to_list()
        [[1, 2, 3, 4], [5, 6, 7]]

        ```
        """
        if size < 1:
            raise ValueError("chunk size must be at least 1")

        def _chunk(data: Collection[T]) -> Iterator[Collection[T]]:
            for items in mit.chunked(data, size):
                yield Collection(items)

        return self._lazy(_chunk)

    def chunk_while(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> Collection[Collection[T]]:
        """Break the collection into chunks, starting a new one each time the truth test fails.

        The predicate receives `(item, index, chunk)`, `chunk` being the chunk currently built, which allows to inspect the previous items.

        Example:
        ```python
        >>> import pycollection as pc
        >>> (
        ...     pc.Collection("AABBCCCD")
        ...     .chunk_while(lambda value, _, chunk: value == chunk.last())
        ...     .map("".join)
        ...     .to_list()
        ... )
        ['AA', 'BB', 'CCC', 'D']

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _chunk_while(data: Collection[T]) -> Iterator[Collection[T]]:
            chunk: list[T] = []
            for index, item in checked_enumerate(data, throw):
                if index == 0 or func(item, index, Collection(chunk)):
                    chunk.append(item)
                else:
                    yield Collection(chunk)
                    chunk = [item]
            if chunk:
                yield Collection(chunk)

        return self._lazy(_chunk_while)

    def split(self, amount: int) -> Collection[Collection[T]]:
        """Break the collection into `amount` groups of near equal size.

        Earlier groups take the remainder, so their size is at most one more than the following ones.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(range(1, 11)).split(3).map(list).to_list()
        [[1, 2, 3, 4], [5, 6, 7], [8, 9, 10]]

        ```
        """
        if amount < 1:
            raise ValueError("split amount must be at least 1")

        def _split(data: Collection[T]) -> Iterator[Collection[T]]:
            for part in mit.divide(amount, data):
                yield Collection(list(part))

        return self._lazy(_split)

    def split_in(self, amount: int) -> Collection[Collection[T]]:
        """Break the collection into at most `amount` groups, filling each group before the next one.

        Every group but the last holds `ceil(size / amount)` items, so fewer groups are returned when the items run out.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(range(1, 11)).split_in(3).map(list).to_list()
        [[1, 2, 3, 4], [5, 6, 7, 8], [9, 10]]

        ```
        """
        if amount < 1:
            raise ValueError("split amount must be at least 1")

        def _split_in(data: Collection[T]) -> Iterator[Collection[T]]:
            items = list(data)
            if not items:
                return
            for part in mit.chunked(items, math.ceil(len(items) / amount)):
                yield Collection(part)

        return self._lazy(_split_in)

    def partition(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> Collection[Collection[T]]:
        """Separate the items passing a truth test from those which do not.

        Both groups preserve the relative order of their items.

        Returns:
            Collection[Collection[T]]: Exactly two collections, the matching items first.

        Example:
        ```python
        >>> import pycollection as pc
        >>> passed, failed = pc.Collection([1, 2, 3, 4, 5, 6]).partition(lambda x: x < 3)
        >>> passed.to_list(), failed.to_list()
        ([1, 2], [3, 4, 5, 6])

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _partition(data: Collection[T]) -> Iterator[Collection[T]]:
            matched: list[T] = []
            rest: list[T] = []
            for index, item in checked_enumerate(data, throw):
                (matched if func(item, index, data) else rest).append(item)
            yield Collection(matched)
            yield Collection(rest)

        return self._lazy(_partition)

    def sliding(self, size: int, step: int | None = None) -> Collection[Collection[T]]:
        """Return a "sliding window" view of the items.

        Windows of `size` items start every `step` items.
        Iteration stops after the first window reaching the end of the source, so the last window may be shorter than `size`.

        Args:
            size (int): Number of items per window, at least 1.
            step (int | None): Distance between the starts of two windows. Defaults to `size - 1`, so consecutive windows share one item. A step lower than 1 yields no window.

        Returns:
            Collection[Collection[T]]: A lazy collection of windows.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4, 5]).sliding(2).map(list).to_list()
        [[1, 2], [2, 3], [3, 4], [4, 5]]
        >>> pc.Collection("abcdefgh").sliding(3).map("".join).to_list()
        ['abc', 'cde', 'efg', 'gh']
        >>> pc.Collection("abcdefgh").sliding(3, 1).map("".join).to_list()
        ['abc', 'bcd', 'cde', 'def', 'efg', 'fgh']

        ```
        """
        if size < 1:
            raise ValueError("window size must be at least 1")
        window_step = size - 1 if step is None else step

        def _sliding(data: Collection[T]) -> Iterator[Collection[T]]:
            if window_step < 1:
                return
            items = mit.peekable(data)
            window = list(itertools.islice(items, size))
            while window:
                yield Collection(window)
                if not items:
                    return
                if window_step < size:
                    window = window[window_step:] + list(
                        itertools.islice(items, window_step)
                    )
                else:
                    mit.consume(items, window_step - size)
                    window = list(itertools.islice(items, size))

        return self._lazy(_sliding)

    def group_by[K](
        self,
        selector: Mapper[K] | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> Collection[Item[K, Collection[T]]]:
        """Group the items by the key returned by `selector`, the item itself by default.

        Groups are yielded in the order their key was first seen.

        Example:
        ```python
        >>> import pycollection as pc
        >>> groups = pc.Collection(["a", "bb", "c", "dd"]).group_by(len)
        >>> groups.map(lambda group: (group.key, group.value.to_list())).to_list()
        [(1, ['a', 'c']), (2, ['bb', 'dd'])]

        ```
        """
        key = bind(selector or _identity, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _group_by(data: Collection[T]) -> Iterator[Item[K, Collection[T]]]:
            groups: dict[K, list[T]] = {}
            for index, item in checked_enumerate(data, throw):
                groups.setdefault(key(item, index, data), []).append(item)
            for group, items in groups.items():
                yield Item(group, Collection(items))

        return self._lazy(_group_by)

    def count_by[K](
        self,
        selector: Mapper[K] | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> Collection[Item[K, int]]:
        """Count the items by the key returned by `selector`, the item itself by default.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(["a", "b", "a", "c", "a"]).count_by().to_list()
        [('a', 3), ('b', 1), ('c', 1)]

        ```
        """
        key = bind(selector or _identity, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _count_by(data: Collection[T]) -> Iterator[Item[K, int]]:
            counts: dict[K, int] = {}
            for index, item in checked_enumerate(data, throw):
                group = key(item, index, data)
                counts[group] = counts.get(group, 0) + 1
            return itertools.starmap(Item, counts.items())

        return self._lazy(_count_by)

    def unique(
        self,
        selector: Mapper[Any] | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> Collection[T]:
        """Keep the first occurrence of each distinct item, or of each distinct key returned by `selector`.

        Unhashable keys are supported, at the cost of a linear lookup.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 1, 2, 2, 3, 4, 2]).unique().to_list()
        [1, 2, 3, 4]
        >>> pc.Collection(["a", "B", "A", "b"]).unique(str.lower).to_list()
        ['a', 'B']

        ```
        """
        key = bind(selector or _identity, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _unique(data: Collection[T]) -> Iterator[T]:
            seen = Seen()
            for index, item in checked_enumerate(data, throw):
                if not seen.add(key(item, index, data)):
                    yield item

        return self._lazy(_unique)

    def duplicates(
        self,
        selector: Mapper[Any] | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> Collection[T]:
        """Keep every occurrence of an item, or of a key returned by `selector`, which was already seen.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(["a", "b", "a", "c", "b"]).duplicates().to_list()
        ['a', 'b']

        ```
        """
        key = bind(selector or _identity, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _duplicates(data: Collection[T]) -> Iterator[T]:
            seen = Seen()
            for index, item in checked_enumerate(data, throw):
                if seen.add(key(item, index, data)):
                    yield item

        return self._lazy(_duplicates)

    # ---------------------------------------------------------------- combining

    def prepend[U](self, iterable: Iterable[U]) -> Collection[T | U]:
        """Add the items of `iterable` before the items of the collection.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3]).prepend([-1, 20]).to_list()
        [-1, 20, 1, 2, 3]

        ```
        """

        def _prepend(data: Collection[T]) -> Iterator[T | U]:
            return cz.itertoolz.concat((iterable, data))

        return self._lazy(_prepend)

    def append[U](self, iterable: Iterable[U]) -> Collection[T | U]:
        """Add the items of `iterable` after the items of the collection.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3]).append([-1, -2]).to_list()
        [1, 2, 3, -1, -2]

        ```
        """

        def _append(data: Collection[T]) -> Iterator[T | U]:
            return cz.itertoolz.concat((data, iterable))

        return self._lazy(_append)

    def insert_before[U](
        self,
        predicate: Predicate,
        iterable: Iterable[U],
        *,
        throw_on_number_limit: bool | None = None,
    ) -> Collection[T | U]:
        """Insert the items of `iterable` before the first item passing the truth test.

        The collection is left unchanged if no item passes.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3]).insert_before(lambda x: x == 2, ["a", "b"]).to_list()
        [1, 'a', 'b', 2, 3]

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _insert_before(data: Collection[T]) -> Iterator[T | U]:
            matched = False
            for index, item in checked_enumerate(data, throw):
                if not matched and func(item, index, data):
                    yield from iterable
                    matched = True
                yield item

        return self._lazy(_insert_before)

    def insert_after[U](
        self,
        predicate: Predicate,
        iterable: Iterable[U],
        *,
        throw_on_number_limit: bool | None = None,
    ) -> Collection[T | U]:
        """Insert the items of `iterable` after the first item passing the truth test.

        The collection is left unchanged if no item passes.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3]).insert_after(lambda x: x == 2, ["a", "b"]).to_list()
        [1, 2, 'a', 'b', 3]

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)

        def _insert_after(data: Collection[T]) -> Iterator[T | U]:
            matched = False
            for index, item in checked_enumerate(data, throw):
                yield item
                if not matched and func(item, index, data):
                    yield from iterable
                    matched = True

        return self._lazy(_insert_after)

    def zip[U](self, iterable: Iterable[U]) -> Collection[tuple[T, U]]:
        """Pair each item with the item of `iterable` at the same position.

        Stops at the end of the shortest of the two.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(["Chair", "Desk", "Lamp"]).zip([100, 200]).to_list()
        [('Chair', 100), ('Desk', 200)]

        ```
        """

        def _zip(data: Collection[T]) -> Iterator[tuple[T, U]]:
            return builtins.zip(data, iterable)

        return self._lazy(_zip)

    # ---------------------------------------------------------------- ordering

    def sort(self, compare: Comparator[T] | None = None) -> Collection[T]:
        """Sort the items, with an optional three-way comparator.

        The comparator returns a negative number, zero, or a positive number if its first argument is respectively lower than, equal to, or greater than the second one.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([3, 1, 2]).sort().to_list()
        [1, 2, 3]
        >>> pc.Collection([3, 1, 2]).sort(lambda a, b: b - a).to_list()
        [3, 2, 1]

        ```
        """

        def _sort(data: Collection[T]) -> Iterator[T]:
            if compare is None:
                return iter(sorted(data))  # pyright: ignore[reportCallIssue, reportArgumentType]
            return iter(sorted(data, key=functools.cmp_to_key(compare)))

        return self._lazy(_sort)

    def reverse(self) -> Collection[T]:
        """Reverse the order of the items.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3]).reverse().to_list()
        [3, 2, 1]

        ```
        """

        def _reverse(data: Collection[T]) -> Iterator[T]:
            return reversed(tuple(data))

        return self._lazy(_reverse)

    def nth(self, step: int) -> Collection[T]:
        """Keep every `step`-th item, starting with the first one.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection("abcdef").nth(4).to_list()
        ['a', 'e']

        ```
        """
        if step < 1:
            raise ValueError("step must be at least 1")

        def _nth(data: Collection[T]) -> Iterator[T]:
            return cz.itertoolz.take_nth(step, data)

        return self._lazy(_nth)

    # ---------------------------------------------------------------- aggregation

    @guarded
    def reduce[R](
        self,
        func: Reducer[R],
        initial: R = MISSING,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> R:
        """Apply a function of `(accumulator, item, index, collection)` cumulatively to the items, from left to right.

        Without `initial`, the first item is used as the starting accumulator.

        Args:
            func (Reducer[R]): The fold step.
            initial (R): The starting accumulator.
            throw_on_number_limit (bool | None): Raise `NumberOverflowError` if the index reaches the safe integer limit.

        Returns:
            R: The final accumulator.

        Raises:
            InvalidTypeError: If the collection is empty and no `initial` value is given.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3]).reduce(lambda acc, x: acc + x)
        6
        >>> pc.Collection(["a", "b"]).reduce(lambda acc, x: acc + x, "!")
        '!ab'

        ```
        """
        step = bind(func, 4)
        throw = resolve_limit(throw_on_number_limit)
        items = checked_enumerate(self, throw)
        output = initial
        if output is MISSING:
            seed = next(items, MISSING)
            if seed is MISSING:
                raise InvalidTypeError(
                    "Reduce of empty collection must be given an initial value"
                )
            output = seed[1]
        for index, item in items:
            output = step(output, item, index, self)
        return output

    @guarded
    def join(
        self, separator: str = ",", *, throw_on_number_limit: bool | None = None
    ) -> str:
        """Join string items with a separator.

        Raises:
            InvalidTypeError: If an item is not a `str`.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(["a", "b", "c"]).join()
        'a,b,c'
        >>> pc.Collection(["a", "b", "c"]).join("_#_")
        'a_#_b_#_c'

        ```
        """
        throw = resolve_limit(throw_on_number_limit)

        def _check(item: object) -> str:
            if not isinstance(item, str):
                msg = f"Item type is invalid must be string, got {type(item).__name__}"
                raise InvalidTypeError(msg)
            return item

        return separator.join(_check(item) for _, item in checked_enumerate(self, throw))

    @guarded
    def sum(self, *, throw_on_number_limit: bool | None = None) -> Number:
        """Sum the items.

        Raises:
            InvalidTypeError: If an item is not a number.
            NumberOverflowError: If the flag is set and the sum exceeds the safe integer limit.
            NumberUnderflowError: If the flag is set and the sum goes below the negative safe integer limit.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3]).sum()
        6

        ```
        """
        throw = resolve_limit(throw_on_number_limit)
        total: Number = 0
        for item in self:
            total = checked_add(total, ensure_number(item), throw)
        return total

    @guarded
    def average(self, *, throw_on_number_limit: bool | None = None) -> Number:
        """Arithmetic mean of the items, `0` for an empty collection.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4]).average()
        2.5

        ```
        """
        throw = resolve_limit(throw_on_number_limit)
        total: Number = 0
        size = 0
        for index, item in checked_enumerate(self, throw):
            total = checked_add(total, ensure_number(item), throw)
            size = index + 1
        if size == 0:
            return 0
        return total / size

    @guarded
    def median(self) -> Number:
        """Median of the items, `0` for an empty collection.

        The items don't need to be sorted. With an even number of items, the mean of the two middle values is returned.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([5, 1, 3]).median()
        3
        >>> pc.Collection([1, 2, 3, 4, 5, 6]).median()
        3.5

        ```
        """
        values = [ensure_number(item) for item in self]
        if not values:
            return 0
        return statistics.median(values)

    @guarded
    def min(self) -> Number:
        """Smallest item, `0` for an empty collection.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([2, 1, 3, -2, 4]).min()
        -2

        ```
        """
        result: Number | None = None
        for item in self:
            number = ensure_number(item)
            if result is None or number < result:
                result = number
        return 0 if result is None else result

    @guarded
    def max(self) -> Number:
        """Largest item, `0` for an empty collection.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([2, 1, 3, -2, 4]).max()
        4

        ```
        """
        result: Number | None = None
        for item in self:
            number = ensure_number(item)
            if result is None or number > result:
                result = number
        return 0 if result is None else result

    @guarded
    def percentage(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> float:
        """Share of the items passing the truth test, in percent, `0` for an empty collection.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(["a", "b", "a", "b"]).percentage(lambda x: x == "a")
        50.0

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        total = 0
        part = 0
        for index, item in checked_enumerate(self, throw):
            if func(item, index, self):
                part += 1
            total = index + 1
        if total == 0:
            return 0.0
        return part / total * 100

    @guarded
    def some(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> bool:
        """Whether at least one item passes the truth test. Stops at the first match.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([0, 1, 2, 3, 4, 5]).some(lambda x: x == 1)
        True

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        return any(
            func(item, index, self) for index, item in checked_enumerate(self, throw)
        )

    @guarded
    def every(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> bool:
        """Whether all items pass the truth test. Stops at the first failure, and is `True` for an empty collection.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([0, 1, 2, 3, 4, 5]).every(lambda x: x < 6)
        True

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        return all(
            func(item, index, self) for index, item in checked_enumerate(self, throw)
        )

    # ---------------------------------------------------------------- lookup

    @guarded
    def first_or[D](
        self,
        default: Lazyable[D],
        predicate: Predicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | D:
        """Return the first item passing the truth test, or the first item if no predicate is given.

        Args:
            default (Lazyable[D]): Returned when nothing is found. If callable, it is called and its result returned instead.
            predicate (Predicate | None): Optional truth test.
            throw_on_number_limit (bool | None): Raise `NumberOverflowError` if the index reaches the safe integer limit.

        Returns:
            T | D: The item found, or the default.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4]).first_or(-1, lambda x: x > 2)
        3
        >>> pc.Collection([1, 2, 3, 4]).first_or(lambda: -1, lambda x: x > 5)
        -1

        ```
        """
        func = bind(predicate, 3) if predicate is not None else None
        throw = resolve_limit(throw_on_number_limit)
        for index, item in checked_enumerate(self, throw):
            if func is None or func(item, index, self):
                return item
        return from_lazy(default)

    def first(
        self,
        predicate: Predicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | None:
        """Return the first item passing the truth test, or the first item if no predicate is given. `None` if not found.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4]).first(lambda x: x > 2)
        3
        >>> pc.Collection([]).first() is None
        True

        ```
        """
        return self.first_or(
            None, predicate, throw_on_number_limit=throw_on_number_limit
        )

    def first_or_fail(
        self,
        predicate: Predicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T:
        """Same as `first`, but raises if nothing is found.

        Raises:
            ItemNotFoundError: If no item is found.
        """
        item = self.first_or(
            MISSING, predicate, throw_on_number_limit=throw_on_number_limit
        )
        if item is MISSING:
            raise ItemNotFoundError("Item was not found")
        return item

    @guarded
    def last_or[D](
        self,
        default: Lazyable[D],
        predicate: Predicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | D:
        """Return the last item passing the truth test, or the last item if no predicate is given.

        A callable `default` is called only if nothing is found.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4]).last_or(-1, lambda x: x < 3)
        2
        >>> pc.Collection([0]).last_or(-1)
        0

        ```
        """
        func = bind(predicate, 3) if predicate is not None else None
        throw = resolve_limit(throw_on_number_limit)
        found: Any = MISSING
        for index, item in checked_enumerate(self, throw):
            if func is None or func(item, index, self):
                found = item
        if found is MISSING:
            return from_lazy(default)
        return found

    def last(
        self,
        predicate: Predicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | None:
        """Return the last item passing the truth test, or the last item if no predicate is given. `None` if not found.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4]).last(lambda x: x > 2)
        4

        ```
        """
        return self.last_or(None, predicate, throw_on_number_limit=throw_on_number_limit)

    def last_or_fail(
        self,
        predicate: Predicate | None = None,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T:
        """Same as `last`, but raises `ItemNotFoundError` if nothing is found."""
        item = self.last_or(
            MISSING, predicate, throw_on_number_limit=throw_on_number_limit
        )
        if item is MISSING:
            raise ItemNotFoundError("Item was not found")
        return item

    @guarded
    def before_or[D](
        self,
        default: Lazyable[D],
        predicate: Predicate,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | D:
        """Return the item directly before the first item passing the truth test.

        The default is returned if no item passes, or if the first match is the first item.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(["a", "b", "c"]).before_or("-", lambda x: x == "b")
        'a'
        >>> pc.Collection(["a", "b", "c"]).before_or("-", lambda x: x == "a")
        '-'

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        previous: Any = MISSING
        for index, item in checked_enumerate(self, throw):
            if func(item, index, self):
                break
            previous = item
        else:
            return from_lazy(default)
        if previous is MISSING:
            return from_lazy(default)
        return previous

    def before(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> T | None:
        """Same as `before_or`, with `None` as default."""
        return self.before_or(
            None, predicate, throw_on_number_limit=throw_on_number_limit
        )

    def before_or_fail(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> T:
        """Same as `before_or`, but raises `ItemNotFoundError` instead of returning a default."""
        item = self.before_or(
            MISSING, predicate, throw_on_number_limit=throw_on_number_limit
        )
        if item is MISSING:
            raise ItemNotFoundError("Item was not found")
        return item

    @guarded
    def after_or[D](
        self,
        default: Lazyable[D],
        predicate: Predicate,
        *,
        throw_on_number_limit: bool | None = None,
    ) -> T | D:
        """Return the item directly after the first item passing the truth test.

        The default is returned if no item passes, or if the first match is the last item.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(["a", "b", "c"]).after_or("-", lambda x: x == "b")
        'c'
        >>> pc.Collection(["a", "b", "c"]).after_or("-", lambda x: x == "c")
        '-'

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        matched = False
        for index, item in checked_enumerate(self, throw):
            if matched:
                return item
            matched = bool(func(item, index, self))
        return from_lazy(default)

    def after(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> T | None:
        """Same as `after_or`, with `None` as default."""
        return self.after_or(None, predicate, throw_on_number_limit=throw_on_number_limit)

    def after_or_fail(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> T:
        """Same as `after_or`, but raises `ItemNotFoundError` instead of returning a default."""
        item = self.after_or(
            MISSING, predicate, throw_on_number_limit=throw_on_number_limit
        )
        if item is MISSING:
            raise ItemNotFoundError("Item was not found")
        return item

    @guarded
    def sole(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> T:
        """Return the only item passing the truth test.

        Iteration stops as soon as a second match is found.

        Raises:
            ItemNotFoundError: If no item passes.
            MultipleItemsFoundError: If more than one item passes.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4, 5]).sole(lambda x: x == 4)
        4

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        found: Any = MISSING
        for index, item in checked_enumerate(self, throw):
            if func(item, index, self):
                if found is not MISSING:
                    raise MultipleItemsFoundError("Multiple items were found")
                found = item
        if found is MISSING:
            raise ItemNotFoundError("Item was not found")
        return found

    @guarded
    def search(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> int:
        """Index of the first item passing the truth test, `-1` if none does.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(["a", "b", "c"]).search(lambda x: x == "c")
        2

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        for index, item in checked_enumerate(self, throw):
            if func(item, index, self):
                return index
        return -1

    # ---------------------------------------------------------------- consumption

    @guarded
    def count(
        self, predicate: Predicate, *, throw_on_number_limit: bool | None = None
    ) -> int:
        """Number of items passing the truth test.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([1, 2, 3, 4, 5, 6]).count(lambda x: x % 2 == 0)
        3

        ```
        """
        func = bind(predicate, 3)
        throw = resolve_limit(throw_on_number_limit)
        return cz.itertoolz.count(
            item
            for index, item in checked_enumerate(self, throw)
            if func(item, index, self)
        )

    @guarded
    def size(self, *, throw_on_number_limit: bool | None = None) -> int:
        """Number of items.

        Like the builtin `len`, but works on lazy collections, by iterating them.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(range(10)).filter(lambda x: x > 6).size()
        3

        ```
        """
        throw = resolve_limit(throw_on_number_limit)
        return cz.itertoolz.count(checked_enumerate(self, throw))

    @guarded
    def is_empty(self) -> bool:
        """Whether the collection has no item. Only pulls the first item.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection([]).is_empty()
        True

        ```
        """
        return mit.first(self, MISSING) is MISSING

    def is_not_empty(self) -> bool:
        """Whether the collection has at least one item."""
        return not self.is_empty()

    @guarded
    def for_each(
        self,
        callback: Callable[..., object],
        *,
        throw_on_number_limit: bool | None = None,
    ) -> None:
        """Call a function of `(item, index, collection)` on every item, for side effects.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(["a", "b"]).for_each(lambda x, i: print(i, x))
        0 a
        1 b

        ```
        """
        func = bind(callback, 3)
        throw = resolve_limit(throw_on_number_limit)
        for index, item in checked_enumerate(self, throw):
            func(item, index, self)

    @guarded
    def to_list(self) -> list[T]:
        """Collect the items into a new `list`.

        Example:
        ```python
        >>> import pycollection as pc
        >>> pc.Collection(range(3)).to_list()
        [0, 1, 2]

        ```
        """
        return list(self)
