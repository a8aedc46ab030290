from ._callbacks import bind, positional_count, resolve
from ._guard import aguarded, guard_aiter, guard_iter, guarded
from ._lazy import AsyncLazy, AsyncPeekable, Lazy
from ._main import CommonBase, Pipeable
from ._seen import Seen

__all__ = [
    "AsyncLazy",
    "AsyncPeekable",
    "CommonBase",
    "Lazy",
    "Pipeable",
    "Seen",
    "aguarded",
    "bind",
    "guard_aiter",
    "guard_iter",
    "guarded",
    "positional_count",
    "resolve",
]
