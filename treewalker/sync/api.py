"""High-level API for TreeWalker.

This module provides simple, functional interfaces for common tree walking
operations. These functions wrap LazyTreeSpliterator and ParallelWalker
for ease of use in simple cases.
"""

import itertools
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, TypeVar

from ..config import ParallelConfig, WalkConfig
from .core.spliterator import ChildrenOf, LazyTreeSpliterator
from .parallel import ParallelWalker

T = TypeVar('T')

_MISSING = object()


def walk(root: Optional[T],
         children_of: ChildrenOf,
         config: Optional[WalkConfig] = None) -> LazyTreeSpliterator[T]:
    """Walk a tree depth-first, pre-order, lazily.

    This is the primary high-level function. The result is an iterator;
    ``children_of`` is only called for nodes the consumer actually reaches,
    so slicing an infinite tree is safe.

    Args:
        root: Root node (None yields nothing)
        children_of: Function returning a node's direct children
        config: Walk configuration (split policy)

    Returns:
        LazyTreeSpliterator over the root and all its descendants

    Example:
        >>> expand = lambda n: [n * 2, n * 2 + 1] if n < 4 else []
        >>> list(walk(1, expand))
        [1, 2, 4, 5, 3, 6, 7]
    """
    if config is not None:
        config.ensure_valid()
    return LazyTreeSpliterator.from_node(root, children_of, config)


def walk_all(roots: Iterable[Optional[T]],
             children_of: ChildrenOf,
             config: Optional[WalkConfig] = None) -> LazyTreeSpliterator[T]:
    """Walk a forest: each root's subtree in turn, with no synthetic root.

    ``roots`` is consumed lazily, one root per finished subtree.

    Example:
        >>> list(walk_all([1, 10], lambda n: [n + 1] if n in (1, 10) else []))
        [1, 2, 10, 11]
    """
    if config is not None:
        config.ensure_valid()
    return LazyTreeSpliterator.from_nodes(roots, children_of, config)


def count_nodes(root: Optional[T], children_of: ChildrenOf) -> int:
    """Count every node reachable from ``root``.

    Args:
        root: Root node
        children_of: Function returning a node's direct children

    Returns:
        Number of non-None nodes in the tree
    """
    count = 0
    for _ in walk(root, children_of):
        count += 1
    return count


def find_nodes(root: Optional[T],
               children_of: ChildrenOf,
               predicate: Callable[[T], bool],
               limit: Optional[int] = None) -> Iterator[T]:
    """Find nodes matching a predicate, in pre-order.

    Expansion stops as soon as ``limit`` matches have been produced.

    Args:
        root: Root node
        children_of: Function returning a node's direct children
        predicate: Function to test nodes
        limit: Maximum number of matches (None = all)

    Yields:
        Matching nodes

    Example:
        >>> list(find_nodes(Path("."), directory_children,
        ...                 lambda p: p.suffix == ".py", limit=3))
    """
    matches = filter(predicate, walk(root, children_of))
    if limit is not None:
        matches = itertools.islice(matches, limit)
    yield from matches


def get_leaf_nodes(root: Optional[T], children_of: ChildrenOf) -> Iterator[T]:
    """Find all nodes without children.

    Each node is expanded exactly once; the expansion result is reused for
    the walk itself. Only the first child is read to decide whether a node
    is a leaf, so unbounded child sequences are fine.

    Args:
        root: Root node
        children_of: Function returning a node's direct children

    Yields:
        Leaf nodes in pre-order
    """
    # Holds at most one entry: the walk expands a node right after it is
    # yielded, before any other node.
    expanded: Dict[int, Iterable[T]] = {}

    def cached_children(node: T) -> Optional[Iterable[Optional[T]]]:
        children = expanded.pop(id(node), _MISSING)
        if children is _MISSING:
            return children_of(node)
        return children

    for node in walk(root, cached_children):
        remaining = iter(children_of(node) or ())
        first = next((c for c in remaining if c is not None), None)
        if first is None:
            expanded[id(node)] = ()
            yield node
        else:
            expanded[id(node)] = itertools.chain([first], remaining)


def parallel_collect(root: Optional[T],
                     children_of: ChildrenOf,
                     config: Optional[ParallelConfig] = None) -> List[T]:
    """Collect every node using a thread pool.

    ``children_of`` runs on worker threads. The result contains each node
    exactly once, in no particular order.

    Args:
        root: Root node
        children_of: Thread-safe function returning a node's direct children
        config: Parallel configuration

    Returns:
        List of all nodes
    """
    return ParallelWalker(walk(root, children_of), config).collect()


def parallel_for_each(root: Optional[T],
                      children_of: ChildrenOf,
                      action: Callable[[T], Any],
                      config: Optional[ParallelConfig] = None) -> None:
    """Call ``action`` for every node using a thread pool.

    Args:
        root: Root node
        children_of: Thread-safe function returning a node's direct children
        action: Thread-safe callable receiving each node
        config: Parallel configuration
    """
    ParallelWalker(walk(root, children_of), config).for_each(action)
