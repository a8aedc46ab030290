"""Tests for the asynchronous AsyncCollection operations."""

import asyncio
from collections.abc import AsyncIterator

import pytest

import pycollection as pc


async def _source(*items: int) -> AsyncIterator[int]:
    for item in items:
        await asyncio.sleep(0)
        yield item


async def _is_even(item: int) -> bool:
    await asyncio.sleep(0)
    return item % 2 == 0


class TestAsyncConstruction:
    """Test the ways to build an AsyncCollection."""

    @pytest.mark.asyncio
    async def test_sync_source(self) -> None:
        """Test a plain iterable source."""
        assert await pc.AsyncCollection([1, 2, 3]).to_list() == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_async_source(self) -> None:
        """Test an async generator source."""
        assert await pc.AsyncCollection(_source(1, 2)).to_list() == [1, 2]

    @pytest.mark.asyncio
    async def test_times_with_coroutine(self) -> None:
        """Test times awaits coroutine callbacks."""

        async def square(n: int) -> int:
            return n * n

        assert await pc.AsyncCollection.times(3, square).to_list() == [1, 4, 9]

    @pytest.mark.asyncio
    async def test_range(self) -> None:
        """Test range includes both bounds."""
        assert await pc.AsyncCollection.range(1, 3).to_list() == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_iterator(self) -> None:
        """Test iterator returns an async iterator."""
        iterator = pc.AsyncCollection([5]).iterator()
        assert await anext(iterator) == 5

    def test_repr(self) -> None:
        """Test repr of a lazy async pipeline."""
        data = pc.AsyncCollection([1]).filter(_is_even)
        assert repr(data) == "AsyncCollection(<lazy filter>)"


class TestAsyncTransformations:
    """Test lazy async transformations."""

    @pytest.mark.asyncio
    async def test_filter_mixed_callbacks(self) -> None:
        """Test filter accepts sync and async predicates."""
        data = pc.AsyncCollection(range(1, 7))
        assert await data.filter(_is_even).to_list() == [2, 4, 6]
        assert await data.filter(lambda x: x > 4).to_list() == [5, 6]

    @pytest.mark.asyncio
    async def test_map_with_index(self) -> None:
        """Test map receives the index when asked for."""

        async def label(item: str, index: int) -> str:
            return f"{index}{item}"

        assert await pc.AsyncCollection("ab").map(label).to_list() == ["0a", "1b"]

    @pytest.mark.asyncio
    async def test_flat_map_async_results(self) -> None:
        """Test flat_map flattens async iterables."""
        data = pc.AsyncCollection([1, 3]).flat_map(lambda x: _source(x, x + 1))
        assert await data.to_list() == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_collapse(self) -> None:
        """Test collapse flattens sync and async iterables, keeping strings whole."""
        data = pc.AsyncCollection([[1], _source(2, 3), "ab", 4]).collapse()
        assert await data.to_list() == [1, 2, 3, "ab", 4]

    @pytest.mark.asyncio
    async def test_update(self) -> None:
        """Test update maps only matching items."""
        data = pc.AsyncCollection([1, 2, 3]).update(_is_even, lambda x: x * 10)
        assert await data.to_list() == [1, 20, 3]

    @pytest.mark.asyncio
    async def test_take_skip_page(self) -> None:
        """Test take, skip and page."""
        data = pc.AsyncCollection(_source(1, 2, 3, 4, 5))
        assert await pc.AsyncCollection([1, 2, 3, 4, 5]).take(-2).to_list() == [1, 2, 3]
        assert await pc.AsyncCollection([1, 2, 3, 4, 5]).skip(-2).to_list() == [4, 5]
        assert await pc.AsyncCollection(range(1, 10)).page(-1, 4).to_list() == [6, 7, 8, 9]
        assert await data.take(2).to_list() == [1, 2]

    @pytest.mark.asyncio
    async def test_take_while_skip_while(self) -> None:
        """Test the predicate based take and skip."""
        data = pc.AsyncCollection([2, 4, 5, 6])
        assert await data.take_while(_is_even).to_list() == [2, 4]
        assert await data.skip_while(_is_even).to_list() == [5, 6]
        assert await data.take_until(lambda x: x > 4).to_list() == [2, 4]
        assert await data.skip_until(lambda x: x > 4).to_list() == [5, 6]

    @pytest.mark.asyncio
    async def test_when(self) -> None:
        """Test conditional replacements."""
        data = pc.AsyncCollection([1, 2])
        assert await data.when(True, lambda c: c.append([3])).to_list() == [1, 2, 3]
        assert await data.when_not(True, lambda c: c.append([3])).to_list() == [1, 2]
        assert await pc.AsyncCollection([]).when_empty(lambda _: [0]).to_list() == [0]
        assert await data.when_not_empty(lambda c: c.take(1)).to_list() == [1]

    @pytest.mark.asyncio
    async def test_tap(self) -> None:
        """Test tap awaits its callback before yielding items."""
        seen: list[int] = []

        async def record(collection: pc.AsyncCollection[int]) -> None:
            seen.append(await collection.size())

        assert await pc.AsyncCollection([1, 2]).tap(record).to_list() == [1, 2]
        assert seen == [2]


class TestAsyncGrouping:
    """Test async operations producing nested collections."""

    @pytest.mark.asyncio
    async def test_chunk(self) -> None:
        """Test chunk sizes."""
        data = pc.AsyncCollection(_source(1, 2, 3, 4, 5)).chunk(2)
        assert await data.map(lambda c: c.to_list()).to_list() == [[1, 2], [3, 4], [5]]

    @pytest.mark.asyncio
    async def test_chunk_while(self) -> None:
        """Test chunk_while with an async chunk lookup."""

        async def same_as_last(item: str, _: int, chunk: pc.AsyncCollection[str]) -> bool:
            return item == await chunk.last()

        data = pc.AsyncCollection("aabccc").chunk_while(same_as_last)
        assert await data.map(lambda c: c.join("")).to_list() == ["aa", "b", "ccc"]

    @pytest.mark.asyncio
    async def test_split_and_partition(self) -> None:
        """Test split and partition."""
        parts = pc.AsyncCollection(range(1, 11)).split(3).map(lambda c: c.size())
        assert await parts.to_list() == [4, 3, 3]
        evens, odds = await pc.AsyncCollection([1, 2, 3, 4]).partition(_is_even).to_list()
        assert await evens.to_list() == [2, 4]
        assert await odds.to_list() == [1, 3]

    @pytest.mark.asyncio
    async def test_split_in(self) -> None:
        """Test split_in fills each group before starting the next one."""
        groups = pc.AsyncCollection(_source(*range(1, 11))).split_in(3)
        result = await groups.map(lambda c: c.to_list()).to_list()
        assert result == [[1, 2, 3, 4], [5, 6, 7, 8], [9, 10]]
        assert await pc.AsyncCollection([]).split_in(3).to_list() == []

    @pytest.mark.asyncio
    async def test_sliding(self) -> None:
        """Test sliding windows over an async source."""
        data = pc.AsyncCollection(_source(1, 2, 3, 4, 5)).sliding(3)
        assert await data.map(lambda c: c.to_list()).to_list() == [[1, 2, 3], [3, 4, 5]]

    @pytest.mark.asyncio
    async def test_sliding_large_step(self) -> None:
        """Test sliding with a step larger than the window."""
        data = pc.AsyncCollection(range(1, 9)).sliding(2, 3)
        assert await data.map(lambda c: c.to_list()).to_list() == [[1, 2], [4, 5], [7, 8]]

    @pytest.mark.asyncio
    async def test_group_by_and_count_by(self) -> None:
        """Test group_by and count_by with an async selector."""
        groups = pc.AsyncCollection([1, 2, 3, 4, 5]).group_by(_is_even)
        result = await groups.map(
            lambda group: group.value.to_list()
        ).to_list()
        assert result == [[1, 3, 5], [2, 4]]
        counts = await pc.AsyncCollection([1, 2, 3]).count_by(_is_even).to_list()
        assert counts == [(False, 2), (True, 1)]

    @pytest.mark.asyncio
    async def test_unique_and_duplicates(self) -> None:
        """Test unique and duplicates, including unhashable keys."""
        data = pc.AsyncCollection(["a", "b", "a", "c", "b"])
        assert await data.unique().to_list() == ["a", "b", "c"]
        assert await data.duplicates().to_list() == ["a", "b"]
        lists = pc.AsyncCollection([[1], [2], [1]])
        assert await lists.unique().to_list() == [[1], [2]]
        assert await lists.duplicates().to_list() == [[1]]


class TestAsyncCombining:
    """Test async combination and ordering operations."""

    @pytest.mark.asyncio
    async def test_prepend_append_insert(self) -> None:
        """Test prepend, append and the insertions."""
        data = pc.AsyncCollection([1, 2])
        assert await data.prepend(_source(0)).append([3]).to_list() == [0, 1, 2, 3]
        assert await data.insert_before(_is_even, ["x"]).to_list() == [1, "x", 2]
        assert await data.insert_after(lambda x: x == 1, ["x"]).to_list() == [1, "x", 2]

    @pytest.mark.asyncio
    async def test_zip(self) -> None:
        """Test zip with an async iterable."""
        data = pc.AsyncCollection("abc").zip(_source(1, 2))
        assert await data.to_list() == [("a", 1), ("b", 2)]

    @pytest.mark.asyncio
    async def test_sort_reverse_nth(self) -> None:
        """Test sort, reverse and nth."""
        data = pc.AsyncCollection([3, 1, 2, 5, 4])
        assert await data.sort().to_list() == [1, 2, 3, 4, 5]

        async def descending(a: int, b: int) -> int:
            return b - a

        assert await data.sort(descending).to_list() == [5, 4, 3, 2, 1]
        assert await data.reverse().to_list() == [4, 5, 2, 1, 3]
        assert await data.nth(2).to_list() == [3, 2, 4]

    @pytest.mark.asyncio
    async def test_sort_is_stable(self) -> None:
        """Test equal items keep their relative order with a comparator."""
        data = pc.AsyncCollection([("b", 1), ("a", 1), ("c", 0)])
        result = await data.sort(lambda x, y: x[1] - y[1]).to_list()
        assert result == [("c", 0), ("b", 1), ("a", 1)]


class TestAsyncTerminals:
    """Test async terminal operations."""

    @pytest.mark.asyncio
    async def test_reduce(self) -> None:
        """Test reduce with an async step."""

        async def add(acc: int, item: int) -> int:
            return acc + item

        assert await pc.AsyncCollection([1, 2, 3]).reduce(add) == 6
        assert await pc.AsyncCollection([]).reduce(add, 5) == 5
        with pytest.raises(pc.InvalidTypeError):
            await pc.AsyncCollection([]).reduce(add)

    @pytest.mark.asyncio
    async def test_join(self) -> None:
        """Test join and its type check."""
        assert await pc.AsyncCollection(["a", "b"]).join() == "a,b"
        assert await pc.AsyncCollection([]).join() == ""
        with pytest.raises(pc.InvalidTypeError):
            await pc.AsyncCollection(["a", 1]).join()

    @pytest.mark.asyncio
    async def test_numbers(self) -> None:
        """Test numeric aggregations."""
        data = pc.AsyncCollection(_source(4, 1, 3))
        assert await pc.AsyncCollection([4, 1, 3]).sum() == 8
        assert await pc.AsyncCollection([4, 1, 3, 4]).average() == 3
        assert await pc.AsyncCollection([4, 1, 3, 2]).median() == 2.5
        assert await pc.AsyncCollection([4, 0, 3]).min() == 0
        assert await data.max() == 4
        assert await pc.AsyncCollection([]).sum() == 0

    @pytest.mark.asyncio
    async def test_percentage_some_every(self) -> None:
        """Test percentage, some and every with async predicates."""
        data = pc.AsyncCollection([1, 2, 3, 4])
        assert await data.percentage(_is_even) == 50.0
        assert await data.some(_is_even)
        assert not await data.every(_is_even)

    @pytest.mark.asyncio
    async def test_lookups(self) -> None:
        """Test first, last, before, after and their variants."""
        data = pc.AsyncCollection([1, 2, 3, 4])
        assert await data.first(_is_even) == 2
        assert await data.last(_is_even) == 4
        assert await data.before(_is_even) == 1
        assert await data.after(_is_even) == 3
        assert await data.first(lambda x: x > 9) is None
        assert await data.after_or("-", lambda x: x == 4) == "-"

        async def fallback() -> str:
            return "lazy"

        assert await data.before_or(fallback, lambda x: x == 1) == "lazy"
        with pytest.raises(pc.ItemNotFoundError):
            await data.last_or_fail(lambda x: x > 9)
        with pytest.raises(pc.ItemNotFoundError):
            await data.first_or_fail(lambda x: x > 9)
        with pytest.raises(pc.ItemNotFoundError):
            await data.before_or_fail(lambda x: x == 1)
        with pytest.raises(pc.ItemNotFoundError):
            await data.after_or_fail(lambda x: x == 4)

    @pytest.mark.asyncio
    async def test_sole(self) -> None:
        """Test sole with one, none and several matches."""
        data = pc.AsyncCollection([1, 2, 3, 4])
        assert await data.sole(lambda x: x == 3) == 3
        with pytest.raises(pc.MultipleItemsFoundError):
            await data.sole(_is_even)
        with pytest.raises(pc.ItemNotFoundError):
            await data.sole(lambda x: x > 9)

    @pytest.mark.asyncio
    async def test_counting(self) -> None:
        """Test search, count, size and emptiness."""
        data = pc.AsyncCollection(["a", "b", "c"])
        assert await data.search(lambda x: x == "c") == 2
        assert await data.search(lambda x: x == "z") == -1
        assert await data.count(lambda x: x != "b") == 2
        assert await data.size() == 3
        assert await data.is_not_empty()
        assert await pc.AsyncCollection([]).is_empty()

    @pytest.mark.asyncio
    async def test_for_each_and_pipe(self) -> None:
        """Test for_each awaits callbacks and pipe awaits results."""
        seen: list[int] = []

        async def record(item: int) -> None:
            seen.append(item)

        await pc.AsyncCollection([1, 2]).for_each(record)
        assert seen == [1, 2]
        assert await pc.AsyncCollection([1, 2]).pipe(lambda c: c.size()) == 2

    @pytest.mark.asyncio
    async def test_wraps_foreign_errors(self) -> None:
        """Test a failing async callback surfaces as UnexpectedCollectionError."""

        async def boom(_: int) -> int:
            msg = "boom"
            raise KeyError(msg)

        with pytest.raises(pc.UnexpectedCollectionError) as error:
            await pc.AsyncCollection([1]).map(boom).to_list()
        assert isinstance(error.value.__cause__, KeyError)


class TestAsyncClosing:
    """Test async generator sources are closed when iteration stops early."""

    @staticmethod
    def _tracked(closed: list[bool]) -> AsyncIterator[int]:
        async def source() -> AsyncIterator[int]:
            try:
                for item in range(1, 10):
                    await asyncio.sleep(0)
                    yield item
            finally:
                closed.append(True)

        return source()

    @pytest.mark.asyncio
    async def test_first_closes_source(self) -> None:
        """Test first closes the source through a lazy step."""
        closed: list[bool] = []
        data = pc.AsyncCollection(self._tracked(closed)).map(lambda x: x * 2)
        assert await data.first() == 2
        assert closed == [True]

    @pytest.mark.asyncio
    async def test_some_closes_source(self) -> None:
        """Test some closes the source once a match is found."""
        closed: list[bool] = []
        data = pc.AsyncCollection(self._tracked(closed)).filter(_is_even)
        assert await data.some(lambda x: x == 4)
        assert closed == [True]

    @pytest.mark.asyncio
    async def test_take_closes_source(self) -> None:
        """Test take closes the source after the last taken item."""
        closed: list[bool] = []
        data = pc.AsyncCollection(self._tracked(closed)).take(1)
        assert await data.to_list() == [1]
        assert closed == [True]

    @pytest.mark.asyncio
    async def test_is_empty_closes_source(self) -> None:
        """Test is_empty closes the source after pulling one item."""
        closed: list[bool] = []
        assert not await pc.AsyncCollection(self._tracked(closed)).is_empty()
        assert closed == [True]

    @pytest.mark.asyncio
    async def test_windows_close_source(self) -> None:
        """Test closing a sliding step closes the source."""
        closed: list[bool] = []
        windows = pc.AsyncCollection(self._tracked(closed)).sliding(2)
        first = await windows.first()
        assert first is not None
        assert await first.to_list() == [1, 2]
        assert closed == [True]

    @pytest.mark.asyncio
    async def test_error_closes_source(self) -> None:
        """Test a failing terminal still closes the source."""
        closed: list[bool] = []
        with pytest.raises(pc.InvalidTypeError):
            await pc.AsyncCollection(self._tracked(closed)).map(str).sum()
        assert closed == [True]
