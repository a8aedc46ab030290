class CollectionError(Exception):
    """Base class of every error raised by a collection."""


class UnexpectedCollectionError(CollectionError):
    """A foreign exception escaped from the source or from a callback.

    The original exception is available as `__cause__`.
    """


class NumberOverflowError(UnexpectedCollectionError):
    """An index, counter or sum reached the maximum safe integer."""


class NumberUnderflowError(UnexpectedCollectionError):
    """A sum fell below the minimum safe integer."""


class ItemNotFoundError(CollectionError):
    """A lookup which requires a result found nothing."""


class MultipleItemsFoundError(CollectionError):
    """More than one item matched where exactly one was expected."""


class InvalidTypeError(CollectionError):
    """An item has the wrong type for the requested aggregation."""
