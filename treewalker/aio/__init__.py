"""Asynchronous implementation of TreeWalker.

This package contains the native async/await walker. Expansion functions
may be coroutine functions or async generator functions, so children can
be fetched with non-blocking I/O.
"""

from .walker import (
    AsyncChildrenOf,
    AsyncLazyTreeWalker,
    AsyncSplitCursor,
    iterate_children,
)

from .api import (
    walk_async,
    walk_all_async,
    collect_async,
    count_nodes_async,
    parallel_collect_async,
)

__all__ = [
    'AsyncChildrenOf',
    'AsyncLazyTreeWalker',
    'AsyncSplitCursor',
    'iterate_children',
    'walk_async',
    'walk_all_async',
    'collect_async',
    'count_nodes_async',
    'parallel_collect_async',
]
