"""Core traversal engine: spliterator protocol and split cursor."""

from .cursor import SplitCursor
from .spliterator import (
    ChildrenOf,
    LazyTreeSpliterator,
    SingletonSpliterator,
    Spliterator,
)

__all__ = [
    'ChildrenOf',
    'LazyTreeSpliterator',
    'SingletonSpliterator',
    'SplitCursor',
    'Spliterator',
]
