"""Tests for the callback calling convention."""

import functools

import pytest

import pycollection as pc
from pycollection._core import bind, positional_count


class TestPositionalCount:
    """Test the positional parameter detection."""

    def test_python_functions(self) -> None:
        """Test parameters of Python functions are all counted."""

        def three(item: int, index: int = 0, collection: object = None) -> int:
            return item

        assert positional_count(lambda: None) == 0
        assert positional_count(lambda x: x) == 1
        assert positional_count(three) == 3

    def test_keyword_only_are_ignored(self) -> None:
        """Test keyword-only parameters are not counted."""

        def func(item: int, *, scale: int = 1) -> int:
            return item * scale

        assert positional_count(func) == 1

    def test_builtins_receive_the_item(self) -> None:
        """Test builtins and types receive at least one argument."""
        assert positional_count(str) == 1
        assert positional_count(len) == 1
        assert positional_count(str.upper) == 1

    def test_partial(self) -> None:
        """Test partials only count their remaining required parameters."""
        assert positional_count(functools.partial(pow, 2)) == 1

    def test_bound_method(self) -> None:
        """Test self is not counted for bound methods."""

        class Scaler:
            def apply(self, item: int, index: int) -> int:
                return item * index

        assert positional_count(Scaler().apply) == 2


class TestBind:
    """Test callbacks are called with the right number of arguments."""

    def test_truncates_arguments(self) -> None:
        """Test bind drops extra trailing arguments."""
        assert bind(lambda x: x, 3)(1, 2, 3) == 1
        assert bind(lambda x, i: (x, i), 3)(1, 2, 3) == (1, 2)

    def test_returns_func_when_enough(self) -> None:
        """Test bind keeps callables accepting every argument."""

        def func(a: int, b: int, c: int) -> int:
            return a + b + c

        assert bind(func, 3) is func


@pytest.mark.parametrize(
    ("callback", "expected"),
    [
        (lambda item: item, ["a", "b"]),
        (lambda item, index: f"{item}{index}", ["a0", "b1"]),
        (lambda item, index, collection: f"{item}{index}{collection.size()}", ["a02", "b12"]),
        (lambda *args: len(args), [3, 3]),
    ],
)
def test_map_arities(callback: object, expected: list[object]) -> None:
    """Test map callbacks of every arity."""
    assert pc.Collection(["a", "b"]).map(callback).to_list() == expected  # type: ignore[arg-type]


def test_collection_argument_is_the_parent() -> None:
    """Test the third argument is the collection the operation was called on."""
    parent = pc.Collection([1, 2, 3]).filter(lambda x: x > 1)
    seen: list[object] = []
    parent.map(lambda _, __, collection: seen.append(collection)).to_list()
    assert seen == [parent, parent]
