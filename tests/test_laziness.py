"""Tests for the lazy evaluation model."""

import itertools
from collections.abc import Iterator

import pytest

import pycollection as pc


class Counter:
    """An iterable recording how many items were pulled."""

    def __init__(self, size: int) -> None:
        self.size = size
        self.pulled = 0

    def __iter__(self) -> Iterator[int]:
        for item in range(self.size):
            self.pulled += 1
            yield item


def test_nothing_runs_before_a_terminal() -> None:
    """Test chaining does not pull any item."""
    source = Counter(10)
    calls: list[int] = []
    pc.Collection(source).map(calls.append).filter(lambda _: True).chunk(2)
    assert source.pulled == 0
    assert calls == []


def test_single_pass() -> None:
    """Test each chained step runs in the same pass, item by item."""
    steps: list[str] = []
    data = (
        pc.Collection([1, 2])
        .map(lambda x: steps.append(f"map{x}") or x)
        .filter(lambda x: steps.append(f"filter{x}") or True)
    )
    assert data.to_list() == [1, 2]
    assert steps == ["map1", "filter1", "map2", "filter2"]


def test_short_circuit() -> None:
    """Test terminals stop pulling once they know the answer."""
    source = Counter(100)
    assert pc.Collection(source).map(lambda x: x * 2).first(lambda x: x > 4) == 6
    assert source.pulled == 4


def test_take_on_infinite_source() -> None:
    """Test take works on an infinite iterator."""
    assert pc.Collection(itertools.count()).take(3).to_list() == [0, 1, 2]


def test_infinite_source_with_sliding() -> None:
    """Test sliding only pulls what it needs."""
    windows = pc.Collection(itertools.count()).sliding(2).take(2)
    assert windows.map(lambda c: c.to_list()).to_list() == [[0, 1], [1, 2]]


def test_reiterable() -> None:
    """Test a collection over a re-iterable source can be consumed again."""
    data = pc.Collection([3, 1, 2]).sort()
    assert data.to_list() == data.to_list() == [1, 2, 3]


def test_one_shot_source() -> None:
    """Test a collection over an iterator is single use."""
    data = pc.Collection(iter([1, 2]))
    assert data.to_list() == [1, 2]
    assert data.to_list() == []


def test_when_evaluated_at_iteration() -> None:
    """Test when_empty checks emptiness when iterated, not when built."""
    source: list[int] = []
    data = pc.Collection(source).when_empty(lambda _: ["empty"])
    source.append(1)
    assert data.to_list() == [1]


def test_source_is_not_mutated() -> None:
    """Test operations never mutate the source."""
    source = [3, 1, 2]
    pc.Collection(source).sort().reverse().append([4]).to_list()
    assert source == [3, 1, 2]


@pytest.mark.asyncio
async def test_async_nothing_runs_before_a_terminal() -> None:
    """Test async chaining does not pull any item."""
    source = Counter(5)
    data = pc.AsyncCollection(source).map(lambda x: x + 1)
    assert source.pulled == 0
    assert await data.first() == 1
    assert source.pulled == 1
