"""Calling conventions of user callbacks.

Callbacks are called with up to `(item, index, collection)`, truncated to the number of positional parameters they accept.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

_VARIADIC = 1 << 16


def positional_count(func: Callable[..., Any]) -> int:
    """Number of positional arguments `func` can receive.

    Parameters with a default value are only counted for functions written in Python.
    Other callables (builtins, types, partials) receive at least one argument, and a single one if their signature can't be introspected.

    Args:
        func (Callable[..., Any]): The callable to inspect.

    Returns:
        int: The count, or a large value if `func` accepts `*args`.

    Example:
    ```python
    >>> from pycollection._core._callbacks import positional_count
    >>> positional_count(lambda item, index: item)
    2
    >>> positional_count(lambda *args: args) > 3
    True

    ```
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return 1
    python_function = inspect.isfunction(func) or inspect.ismethod(func)
    count = 0
    for parameter in signature.parameters.values():
        match parameter.kind:
            case inspect.Parameter.VAR_POSITIONAL:
                return _VARIADIC
            case (
                inspect.Parameter.POSITIONAL_ONLY
                | inspect.Parameter.POSITIONAL_OR_KEYWORD
            ) if python_function or parameter.default is inspect.Parameter.empty:
                count += 1
            case _:
                pass
    if python_function:
        return count
    return max(count, 1)


def bind[R](func: Callable[..., R], max_args: int) -> Callable[..., R]:
    """Adapt `func` so it can always be called with `max_args` positional arguments.

    Extra trailing arguments are dropped before the call.
    """
    count = positional_count(func)
    if count >= max_args:
        return func

    def _bound(*args: Any) -> R:
        return func(*args[:count])

    return _bound


async def resolve[T](value: T | Awaitable[T]) -> T:
    """Await `value` if needed, so sync and async callbacks can be mixed."""
    if inspect.isawaitable(value):
        return await value
    return value
