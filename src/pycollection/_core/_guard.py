"""Error boundary of the collections.

Any exception which is not a `CollectionError` is re-raised as an `UnexpectedCollectionError` chained to the original one.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import (
    AsyncIterable,
    AsyncIterator,
    Callable,
    Coroutine,
    Iterable,
    Iterator,
)
from typing import Any

from .._errors import CollectionError, UnexpectedCollectionError

logger = logging.getLogger(__name__)


def unexpected(error: Exception) -> UnexpectedCollectionError:
    logger.debug("wrapping %s raised during iteration", type(error).__name__)
    return UnexpectedCollectionError(f'Unexpected error "{error}" occured')


def guard_iter[T](data: Iterable[T]) -> Iterator[T]:
    try:
        yield from data
    except CollectionError:
        raise
    except Exception as error:
        raise unexpected(error) from error


async def guard_aiter[T](data: AsyncIterable[T] | Iterable[T]) -> AsyncIterator[T]:
    try:
        if isinstance(data, AsyncIterable):
            items = aiter(data)
            try:
                async for item in items:
                    yield item
            finally:
                # Plain async iterators have no `aclose`.
                aclose = getattr(items, "aclose", None)
                if aclose is not None:
                    await aclose()
        else:
            for item in data:
                yield item
    except CollectionError:
        raise
    except Exception as error:
        raise unexpected(error) from error


def guarded[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Apply the error boundary to a terminal operation."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except CollectionError:
            raise
        except Exception as error:
            raise unexpected(error) from error

    return wrapper


def aguarded[**P, R](
    func: Callable[P, Coroutine[Any, Any, R]],
) -> Callable[P, Coroutine[Any, Any, R]]:
    """Apply the error boundary to an asynchronous terminal operation."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await func(*args, **kwargs)
        except CollectionError:
            raise
        except Exception as error:
            raise unexpected(error) from error

    return wrapper
