from collections.abc import Sequence
from pprint import pformat


def iter_repr(
    v: object,
    max_items: int = 20,
    depth: int = 3,
    width: int = 80,
    *,
    compact: bool = True,
) -> str:
    if not isinstance(v, Sequence) or isinstance(v, (str, bytes, range)):
        return repr(v)
    if len(v) <= max_items:
        return pformat(v, depth=depth, width=width, compact=compact)
    truncated = list(v[:max_items])
    return pformat(truncated, depth=depth, width=width, compact=compact) + "..."
