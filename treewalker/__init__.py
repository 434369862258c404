"""TreeWalker - Lazy Splittable Tree Traversal.

TreeWalker turns an implicit tree, given only by a root value and a
"children of" function, into a lazy depth-first, pre-order sequence.
Children are computed only when traversal reaches them, and the sequence
can be split into independent subtrees for parallel draining.

Choose your implementation:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Synchronous:
    from treewalker.sync import walk

Asynchronous:
    from treewalker.aio import walk_async
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

import logging

__version__ = "0.3.0"

# Library convention: no output unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

from . import sync
from . import aio
from .config import Characteristics, ParallelConfig, SplitPolicy, WalkConfig
from .errors import ConfigurationError, WalkerError, WalkerStateError
from .sync import LazyTreeSpliterator, walk, walk_all

__all__ = [
    "__version__",
    "sync",
    "aio",
    "walk",
    "walk_all",
    "LazyTreeSpliterator",
    "Characteristics",
    "ParallelConfig",
    "SplitPolicy",
    "WalkConfig",
    "ConfigurationError",
    "WalkerError",
    "WalkerStateError",
]
