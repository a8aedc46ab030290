from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, fields, replace
from typing import Any

from ._core._format import iter_repr

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Config:
    """Defaults shared by every collection.

    The active instance is held in a `ContextVar`, so each thread and each asyncio task sees the values set in its own context.

    Attributes:
        throw_on_number_limit (bool): Default of the `throw_on_number_limit` flag of every operation.
        max_repr_items (int): Number of items shown by `repr()` of a collection over an in-memory sequence.
    """

    throw_on_number_limit: bool = False
    max_repr_items: int = 20

    def iter_repr(self, data: object) -> str:
        return iter_repr(data, self.max_repr_items)


_CONFIG: ContextVar[Config] = ContextVar("pycollection_config", default=Config())


def _updated(changes: dict[str, Any]) -> Config:
    known = {field.name for field in fields(Config)}
    unknown = set(changes) - known
    if unknown:
        msg = f"Unknown config option(s): {', '.join(sorted(unknown))}"
        raise TypeError(msg)
    logger.debug("collection config updated: %s", changes)
    return replace(get_config(), **changes)


def get_config() -> Config:
    """Get the configuration active in the current context.

    Returns:
        Config: The active configuration.

    Example:
    ```python
    >>> import pycollection as pc
    >>> pc.get_config().throw_on_number_limit
    False

    ```
    """
    return _CONFIG.get()


def set_config(**changes: Any) -> None:
    """Update the configuration of the current context.

    Tasks created afterwards inherit the new values, tasks already running keep their own.

    Args:
        **changes (Any): New values, keyed by `Config` field name.

    Raises:
        TypeError: If a key is not a `Config` field.
    """
    _CONFIG.set(_updated(changes))


@contextmanager
def config_context(**changes: Any) -> Iterator[Config]:
    """Temporarily update the configuration of the current context.

    The previous values are restored on exit, even if the block raises.
    Concurrent tasks entering their own `config_context` do not see each other's values.

    Args:
        **changes (Any): New values, keyed by `Config` field name.

    Yields:
        Config: The updated configuration.

    Example:
    ```python
    >>> import pycollection as pc
    >>> with pc.config_context(throw_on_number_limit=True):
    ...     pc.get_config().throw_on_number_limit
    True
    >>> pc.get_config().throw_on_number_limit
    False

    ```
    """
    token = _CONFIG.set(_updated(changes))
    try:
        yield _CONFIG.get()
    finally:
        _CONFIG.reset(token)
