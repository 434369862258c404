"""Synchronous implementation of TreeWalker.

This package contains the blocking traversal engine, the thread-pool
parallel driver built on its split protocol, and ready-made expansion
functions.
"""

# Core components
from .core.cursor import SplitCursor
from .core.spliterator import (
    ChildrenOf,
    LazyTreeSpliterator,
    SingletonSpliterator,
    Spliterator,
)

# Parallel decomposition
from .parallel import ParallelWalker

# Expansion functions
from .expanders import (
    FileSystemExpander,
    directory_children,
    dom_children,
    nested_classes,
    subclasses,
)

# Configuration
from ..config import (
    Characteristics,
    ParallelConfig,
    SplitPolicy,
    WalkConfig,
)

# High-level API
from .api import (
    walk,
    walk_all,
    count_nodes,
    find_nodes,
    get_leaf_nodes,
    parallel_collect,
    parallel_for_each,
)

__all__ = [
    # Core
    'ChildrenOf',
    'LazyTreeSpliterator',
    'SingletonSpliterator',
    'SplitCursor',
    'Spliterator',
    'ParallelWalker',
    # Expanders
    'FileSystemExpander',
    'directory_children',
    'dom_children',
    'nested_classes',
    'subclasses',
    # Config
    'Characteristics',
    'ParallelConfig',
    'SplitPolicy',
    'WalkConfig',
    # API
    'walk',
    'walk_all',
    'count_nodes',
    'find_nodes',
    'get_leaf_nodes',
    'parallel_collect',
    'parallel_for_each',
]
