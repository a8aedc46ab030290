from __future__ import annotations

from abc import ABC
from collections.abc import Callable
from typing import Concatenate, Self

from ._guard import guarded


class Pipeable:
    __slots__ = ()

    @guarded
    def pipe[**P, R](
        self,
        func: Callable[Concatenate[Self, P], R],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> R:
        """Pass `Self` to a function and return its result.

        This allows to write `x.pipe(f)` instead of `f(x)`, hence keeping a chaining style when a step is not provided as a method.

        This is a terminal operation from the point of view of the chain, but the function is free to return another collection.
        Exceptions raised by `func` go through the same error boundary as any terminal operation.

        Args:
            func (Callable[Concatenate[Self, P], R]): Function receiving the instance.
            *args (P.args): Positional arguments to pass to the function.
            **kwargs (P.kwargs): Keyword arguments to pass to the function.

        Returns:
            R: The value returned by `func`.

        Example:
        ```python
        >>> import pycollection as pc
        >>> def evens(data: pc.Collection[int]) -> pc.Collection[int]:
        ...     return data.filter(lambda x: x % 2 == 0)
        >>>
        >>> pc.Collection(range(7)).pipe(evens).pipe(lambda c: c.sum())
        12

        ```
        """
        return func(self, *args, **kwargs)


class CommonBase[T](ABC):
    """Base class for all collection wrappers.

    Holds the wrapped source and a repr which never consumes it.

    Args:
        data (T): The underlying data to wrap.
    """

    _inner: T

    __slots__ = ("_inner",)

    def __init__(self, data: T) -> None:
        self._inner = data

    def __repr__(self) -> str:
        from .._config import get_config

        return f"{self.__class__.__name__}({get_config().iter_repr(self._inner)})"

    def inner(self) -> T:
        """Get the underlying data.

        Returns:
            T: The wrapped source, as given to the constructor.
        """
        return self._inner
