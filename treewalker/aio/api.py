"""High-level async API for TreeWalker.

Simple functions for common async walking operations, built on
AsyncLazyTreeWalker.
"""

import asyncio
import logging
from typing import Any, List, Optional, TypeVar

from ..config import WalkConfig
from ..errors import ConfigurationError
from .walker import AsyncChildrenOf, AsyncLazyTreeWalker

logger = logging.getLogger(__name__)

T = TypeVar('T')


def walk_async(root: Optional[T],
               children_of: AsyncChildrenOf,
               config: Optional[WalkConfig] = None) -> AsyncLazyTreeWalker[T]:
    """Walk a tree depth-first, pre-order, lazily, with async expansion.

    Args:
        root: Root node (None yields nothing)
        children_of: Function returning a node's children; may be a
            coroutine function or an async generator function
        config: Walk configuration (split policy)

    Returns:
        AsyncLazyTreeWalker to consume with ``async for``

    Example:
        >>> async def children(n):
        ...     await asyncio.sleep(0)
        ...     return [n * 2, n * 2 + 1] if n < 4 else []
        >>> [n async for n in walk_async(1, children)]
        [1, 2, 4, 5, 3, 6, 7]
    """
    if config is not None:
        config.ensure_valid()
    return AsyncLazyTreeWalker.from_node(root, children_of, config)


def walk_all_async(roots: Any,
                   children_of: AsyncChildrenOf,
                   config: Optional[WalkConfig] = None) -> AsyncLazyTreeWalker[T]:
    """Walk a forest of roots (sync or async iterable), with no synthetic root."""
    if config is not None:
        config.ensure_valid()
    return AsyncLazyTreeWalker.from_nodes(roots, children_of, config)


async def collect_async(root: Optional[T],
                        children_of: AsyncChildrenOf,
                        limit: Optional[int] = None) -> List[T]:
    """Collect nodes in pre-order.

    Args:
        root: Root node
        children_of: Function returning a node's children
        limit: Stop after this many nodes (None = all); nodes past the
            limit are never expanded

    Returns:
        List of nodes in pre-order
    """
    nodes: List[T] = []
    if limit is not None and limit <= 0:
        return nodes

    async for node in walk_async(root, children_of):
        nodes.append(node)
        if limit is not None and len(nodes) >= limit:
            break
    return nodes


async def count_nodes_async(root: Optional[T], children_of: AsyncChildrenOf) -> int:
    """Count every node reachable from ``root``."""
    count = 0
    async for _ in walk_async(root, children_of):
        count += 1
    return count


async def parallel_collect_async(root: Optional[T],
                                 children_of: AsyncChildrenOf,
                                 max_concurrent: int = 100,
                                 split_depth: int = 2,
                                 max_forks_per_task: int = 64) -> List[T]:
    """Collect every node, draining split-off subtrees concurrently.

    Subtrees down to ``split_depth`` levels below the root are detached
    with ``try_split()`` and drained as separate tasks. At most
    ``max_concurrent`` tasks expand or drain at once. Each task detaches at
    most ``max_forks_per_task`` subtrees and drains the rest itself.

    Args:
        root: Root node
        children_of: Function returning a node's children
        max_concurrent: Maximum concurrently active tasks
        split_depth: How many levels of subtrees to fork
        max_forks_per_task: Maximum subtrees one task detaches

    Returns:
        List of all nodes, in no particular order
    """
    if max_concurrent <= 0:
        raise ConfigurationError("Invalid configuration: max_concurrent must be positive")
    if split_depth < 0:
        raise ConfigurationError("Invalid configuration: split_depth cannot be negative")
    if max_forks_per_task <= 0:
        raise ConfigurationError("Invalid configuration: max_forks_per_task must be positive")

    semaphore = asyncio.Semaphore(max_concurrent)

    async def drain(walker: AsyncLazyTreeWalker[T], level: int) -> List[T]:
        tasks: List["asyncio.Future[List[T]]"] = []
        try:
            # Forks are awaited outside the semaphore so parents never hold a
            # slot their children need.
            async with semaphore:
                if level < split_depth:
                    while len(tasks) < max_forks_per_task:
                        fork = await walker.try_split()
                        if fork is None:
                            break
                        tasks.append(asyncio.ensure_future(drain(fork, level + 1)))
                nodes = [node async for node in walker]

            for chunk in await asyncio.gather(*tasks):
                nodes.extend(chunk)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        return nodes

    nodes = await drain(walk_async(root, children_of), 0)
    logger.debug("Async parallel walk collected %d node(s)", len(nodes))
    return nodes
