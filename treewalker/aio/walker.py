"""Async lazy tree walking.

Native async/await counterpart of LazyTreeSpliterator. The expansion
function may be a plain function, a coroutine function, or an async
generator function, so children can come from non-blocking I/O.

The same guarantees hold as for the sync engine: pre-order, each child
subtree drained in full before the next sibling starts, None values
skipped, and no expansion call for a node the consumer never reaches.
"""

import asyncio
import inspect
import logging
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Generic,
    List,
    Optional,
    TypeVar,
    Union,
)

from ..config import SplitPolicy, WalkConfig
from ..errors import WalkerStateError
from ..sync.core.spliterator import SingletonSpliterator

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

# node -> children as an iterable, an async iterable, or an awaitable of either
AsyncChildrenOf = Callable[[T], Union[Any, Awaitable[Any], AsyncIterator[Any], None]]

_DEFAULT_CONFIG = WalkConfig()


class AsyncSplitCursor(Generic[R]):
    """Single-use cursor over deferred constructors, serialized by an asyncio.Lock.

    Mirrors SplitCursor: the source is realized on the first ``take()``,
    every constructor is handed to exactly one caller, and a failing source
    turns every later ``take()`` into a WalkerStateError.
    """

    def __init__(self, source: Callable[[], AsyncIterator[Callable[[], R]]]):
        self._source: Optional[Callable[[], AsyncIterator[Callable[[], R]]]] = source
        self._iterator: Optional[AsyncIterator[Callable[[], R]]] = None
        self._lock: Optional[asyncio.Lock] = None
        self._exhausted = False
        self._failure: Optional[BaseException] = None

    @property
    def is_exhausted(self) -> bool:
        return self._exhausted

    @property
    def has_failed(self) -> bool:
        return self._failure is not None

    async def take(self, blocking: bool = True) -> Optional[R]:
        """Fetch the next constructor and realize it.

        Args:
            blocking: Wait for the cursor if another task holds it; when
                False, return None on contention without consuming anything

        Returns:
            The constructed value, or None if exhausted (or contended)
        """
        if self._lock is None:
            # Created lazily so it binds to the running loop
            self._lock = asyncio.Lock()

        if not blocking and self._lock.locked():
            logger.debug("Async cursor %#x busy, split declined", id(self))
            return None

        async with self._lock:
            constructor = await self._fetch()

        if constructor is None:
            return None
        return constructor()

    async def _fetch(self) -> Optional[Callable[[], R]]:
        if self._failure is not None:
            raise WalkerStateError(
                "walker cannot continue after its expansion function failed"
            ) from self._failure

        if self._exhausted:
            return None

        try:
            if self._iterator is None:
                source, self._source = self._source, None
                self._iterator = source()
            return await self._iterator.__anext__()
        except StopAsyncIteration:
            self._exhausted = True
            self._iterator = None
            return None
        except Exception as e:
            self._failure = e
            self._iterator = None
            raise


class AsyncLazyTreeWalker(Generic[T]):
    """Depth-first, pre-order, on-demand async traversal of an implicit tree.

    Use ``async for`` or ``await walker.advance()``. A walker must be
    consumed by one task at a time; ``try_split()`` may be awaited from
    other tasks and hands each child subtree to exactly one of them.
    """

    def __init__(self,
                 pending: Callable[[], AsyncIterator[Callable[[], 'AsyncLazyTreeWalker[T]']]],
                 active: Optional[Any] = None,
                 config: Optional[WalkConfig] = None):
        self._cursor: AsyncSplitCursor['AsyncLazyTreeWalker[T]'] = AsyncSplitCursor(pending)
        self._active = active
        self._config = config or _DEFAULT_CONFIG
        self._frames: List['AsyncLazyTreeWalker[T]'] = []
        self._exhausted = False

    @classmethod
    def from_node(cls,
                  root: Optional[T],
                  children_of: AsyncChildrenOf,
                  config: Optional[WalkConfig] = None) -> 'AsyncLazyTreeWalker[T]':
        """Create a walker yielding ``root`` and then its descendants."""
        if root is None:
            return cls(_no_children, None, config)
        return cls(lambda: _deferred_children(root, children_of, config),
                   SingletonSpliterator(root),
                   config)

    @classmethod
    def from_nodes(cls,
                   roots: Any,
                   children_of: AsyncChildrenOf,
                   config: Optional[WalkConfig] = None) -> 'AsyncLazyTreeWalker[T]':
        """Create a forest walker over a sync or async iterable of roots."""
        return cls(lambda: _deferred_walkers(roots, children_of, config), None, config)

    @property
    def is_exhausted(self) -> bool:
        return self._exhausted

    async def advance(self) -> Optional[T]:
        """Return the next pre-order node, or None once exhausted."""
        if self._exhausted:
            return None

        box: List[T] = []
        frames = self._frames
        while True:
            walker = frames[-1] if frames else self
            active = walker._active

            if active is None:
                active = await walker._take_next_child()
                if active is None:
                    walker._exhausted = True
                    if not frames:
                        return None
                    frames.pop()
                    (frames[-1] if frames else self)._active = None
                    continue
                walker._active = active

            if isinstance(active, AsyncLazyTreeWalker):
                frames.append(active)
                continue

            if active.try_advance(box.append):
                return box[0]
            walker._active = None

    async def try_split(self) -> Optional['AsyncLazyTreeWalker[T]']:
        """Detach the next not-yet-started child subtree, per the split policy."""
        policy = self._config.split_policy
        if policy is SplitPolicy.DISABLED:
            return None
        return await self._take_next_child(blocking=policy is SplitPolicy.SERIALIZED)

    async def _take_next_child(self, blocking: bool = True) -> Optional['AsyncLazyTreeWalker[T]']:
        if self._exhausted:
            return None
        return await self._cursor.take(blocking)

    def __aiter__(self) -> 'AsyncLazyTreeWalker[T]':
        return self

    async def __anext__(self) -> T:
        node = await self.advance()
        if node is None:
            raise StopAsyncIteration
        return node

    def __repr__(self) -> str:
        return f"AsyncLazyTreeWalker(depth={len(self._frames)}, exhausted={self._exhausted})"


async def iterate_children(result: Any) -> AsyncIterator[Any]:
    """Normalize an expansion result into an async iterator.

    Accepts None, a sync iterable, an async iterable, or an awaitable
    resolving to any of those.
    """
    if inspect.isawaitable(result):
        result = await result
    if result is None:
        return
    if hasattr(result, '__aiter__'):
        async for item in result:
            yield item
    else:
        for item in result:
            yield item


async def _no_children() -> AsyncIterator[Any]:
    return
    yield


async def _deferred_walkers(nodes: Any,
                            children_of: AsyncChildrenOf,
                            config: Optional[WalkConfig]) -> AsyncIterator[Callable[[], AsyncLazyTreeWalker[T]]]:
    async for node in iterate_children(nodes):
        if node is not None:
            yield _constructor(node, children_of, config)


async def _deferred_children(root: T,
                             children_of: AsyncChildrenOf,
                             config: Optional[WalkConfig]) -> AsyncIterator[Callable[[], AsyncLazyTreeWalker[T]]]:
    async for constructor in _deferred_walkers(children_of(root), children_of, config):
        yield constructor


def _constructor(node: T,
                 children_of: AsyncChildrenOf,
                 config: Optional[WalkConfig]) -> Callable[[], AsyncLazyTreeWalker[T]]:
    return lambda: AsyncLazyTreeWalker.from_node(node, children_of, config)
