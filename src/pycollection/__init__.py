from ._async_collection import AsyncCollection
from ._collection import Collection
from ._config import Config, config_context, get_config, set_config
from ._errors import (
    CollectionError,
    InvalidTypeError,
    ItemNotFoundError,
    MultipleItemsFoundError,
    NumberOverflowError,
    NumberUnderflowError,
    UnexpectedCollectionError,
)
from ._numeric import MAX_SAFE_INTEGER, MIN_SAFE_INTEGER
from ._types import Item

__all__ = [
    "MAX_SAFE_INTEGER",
    "MIN_SAFE_INTEGER",
    "AsyncCollection",
    "Collection",
    "CollectionError",
    "Config",
    "InvalidTypeError",
    "Item",
    "ItemNotFoundError",
    "MultipleItemsFoundError",
    "NumberOverflowError",
    "NumberUnderflowError",
    "UnexpectedCollectionError",
    "config_context",
    "get_config",
    "set_config",
]
