"""Lazy splittable tree traversal for TreeWalker.

A tree is never materialized. It is described by a root value and a
``children_of`` expansion function, and unfolded depth-first, pre-order,
one element at a time as the consumer asks for it.

The traversal engine exposes the split/advance protocol of a
parallel-capable lazy sequence. Taking the next child subtree is a single
operation that serves two callers: the engine itself, stepping from one
child subtree to the next, and an external driver that detaches a subtree
and drains it elsewhere.
"""

import functools
import sys
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

from ...config import Characteristics, SplitPolicy, WalkConfig
from .cursor import SplitCursor

T = TypeVar('T')

# node -> direct children (None entries and a None result mean "nothing")
ChildrenOf = Callable[[T], Optional[Iterable[Optional[T]]]]

_DEFAULT_CONFIG = WalkConfig()


class Spliterator(ABC, Generic[T]):
    """Abstract source of elements that can be advanced and split.

    Subclasses implement ``try_advance`` and ``try_split``. Everything else,
    including the Python iterator protocol, is built on top of those two.
    """

    @abstractmethod
    def try_advance(self, action: Callable[[T], Any]) -> bool:
        """Feed the next element to ``action``.

        Args:
            action: Callable receiving the element

        Returns:
            True if an element was consumed, False if none remain
        """
        pass

    @abstractmethod
    def try_split(self) -> Optional['Spliterator[T]']:
        """Detach a unit of future work as an independent spliterator.

        Returns:
            A spliterator owning the detached elements, or None if this
            spliterator cannot be split
        """
        pass

    @abstractmethod
    def estimate_size(self) -> int:
        """Estimate remaining elements; ``sys.maxsize`` means unknown."""
        pass

    @abstractmethod
    def characteristics(self) -> Characteristics:
        pass

    def has_characteristics(self, flags: Characteristics) -> bool:
        return (self.characteristics() & flags) == flags

    def advance(self) -> Optional[T]:
        """Return the next element, or None once exhausted.

        Elements are never None, so None unambiguously means exhaustion.
        """
        box: List[T] = []
        if self.try_advance(box.append):
            return box[0]
        return None

    def for_each_remaining(self, action: Callable[[T], Any]) -> None:
        """Feed every remaining element to ``action``, in order."""
        while self.try_advance(action):
            pass

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        box: List[T] = []
        if not self.try_advance(box.append):
            raise StopIteration
        return box[0]


class SingletonSpliterator(Spliterator[T]):
    """One-shot spliterator yielding a single value."""

    def __init__(self, value: T):
        self._value = value
        self._consumed = False

    def try_advance(self, action: Callable[[T], Any]) -> bool:
        if self._consumed:
            return False
        self._consumed = True
        value, self._value = self._value, None
        action(value)
        return True

    def try_split(self) -> Optional[Spliterator[T]]:
        return None

    def estimate_size(self) -> int:
        return 0 if self._consumed else 1

    def characteristics(self) -> Characteristics:
        return (Characteristics.ORDERED | Characteristics.SIZED | Characteristics.SUBSIZED
                | Characteristics.NONNULL | Characteristics.IMMUTABLE)

    def __repr__(self) -> str:
        return f"SingletonSpliterator(consumed={self._consumed})"


class LazyTreeSpliterator(Spliterator[T]):
    """Depth-first, pre-order, on-demand traversal of an implicit tree.

    Each engine holds:

    - a cursor over deferred child-engine constructors, realized one at a
      time and only when traversal reaches that child;
    - an active slot with the sub-engine currently being drained. For a
      per-node engine this starts as a one-shot spliterator over the node
      itself, so the node is emitted before any descendant.

    Create engines with :meth:`from_node` or :meth:`from_nodes`.

    ``try_advance`` keeps the chain of active sub-engines on an explicit
    frame stack rather than recursing into them, so tree depth is not
    bounded by the interpreter's recursion limit. The chain is owned
    exclusively by this engine; only subtrees that were never activated
    can leave through ``try_split``.

    Thread safety: ``try_advance`` must be driven by one thread at a time.
    ``try_split`` may be called concurrently with it (and with other
    ``try_split`` calls) according to the configured SplitPolicy; every
    child subtree goes to exactly one caller.
    """

    def __init__(self,
                 pending: Callable[[], Iterable[Callable[[], 'LazyTreeSpliterator[T]']]],
                 active: Optional[Spliterator[T]] = None,
                 config: Optional[WalkConfig] = None):
        """Initialize engine. Prefer the ``from_node``/``from_nodes`` factories.

        Args:
            pending: Zero-argument factory for the deferred constructor sequence
            active: Spliterator to drain before the first child (the "self" slot)
            config: Walk configuration

        Raises:
            ConfigurationError: If a supplied config is invalid
        """
        self._cursor: SplitCursor['LazyTreeSpliterator[T]'] = SplitCursor(pending)
        self._active = active
        self._config = config.ensure_valid() if config is not None else _DEFAULT_CONFIG
        self._frames: List['LazyTreeSpliterator[T]'] = []
        self._exhausted = False

    @classmethod
    def from_node(cls,
                  root: Optional[T],
                  children_of: ChildrenOf,
                  config: Optional[WalkConfig] = None) -> 'LazyTreeSpliterator[T]':
        """Create an engine yielding ``root`` and then its descendants.

        ``children_of(root)`` is not called until the consumer advances past
        ``root``. A None root yields nothing.
        """
        if root is None:
            return cls(_no_children, None, config)
        return cls(functools.partial(_deferred_children, root, children_of, config),
                   SingletonSpliterator(root),
                   config)

    @classmethod
    def from_nodes(cls,
                   roots: Optional[Iterable[Optional[T]]],
                   children_of: ChildrenOf,
                   config: Optional[WalkConfig] = None) -> 'LazyTreeSpliterator[T]':
        """Create a forest engine: each root's subtree in turn, no synthetic root."""
        return cls(functools.partial(_deferred_engines, roots, children_of, config),
                   None,
                   config)

    @property
    def config(self) -> WalkConfig:
        return self._config

    @property
    def is_exhausted(self) -> bool:
        """True once every element has been produced; never resets."""
        return self._exhausted

    def try_advance(self, action: Callable[[T], Any]) -> bool:
        """Feed the next pre-order element to ``action``.

        Raises whatever ``children_of`` raises, unmodified. After such a
        failure the affected engine raises WalkerStateError on reuse.
        """
        if self._exhausted:
            return False

        frames = self._frames
        while True:
            engine = frames[-1] if frames else self
            active = engine._active

            if active is None:
                active = engine._take_next_child()
                if active is None:
                    engine._exhausted = True
                    if not frames:
                        return False
                    frames.pop()
                    (frames[-1] if frames else self)._active = None
                    continue
                engine._active = active

            if isinstance(active, LazyTreeSpliterator):
                frames.append(active)
                continue

            if active.try_advance(action):
                return True
            engine._active = None

    def try_split(self) -> Optional['LazyTreeSpliterator[T]']:
        """Detach the next not-yet-started child subtree.

        The returned engine is owned by the caller; this engine never
        touches it again. Returns None when no child remains, when splitting
        is disabled, or (under FAIL_CLOSED) when the cursor is contended.
        """
        policy = self._config.split_policy
        if policy is SplitPolicy.DISABLED:
            return None
        return self._take_next_child(blocking=policy is SplitPolicy.SERIALIZED)

    def _take_next_child(self, blocking: bool = True) -> Optional['LazyTreeSpliterator[T]']:
        if self._exhausted:
            return None
        return self._cursor.take(blocking)

    def estimate_size(self) -> int:
        return 0 if self._exhausted else sys.maxsize

    def characteristics(self) -> Characteristics:
        return Characteristics.IMMUTABLE | Characteristics.NONNULL

    def __repr__(self) -> str:
        return (f"LazyTreeSpliterator(depth={len(self._frames)}, "
                f"exhausted={self._exhausted}, cursor={self._cursor!r})")


def _no_children() -> Iterable[Any]:
    return ()


def _deferred_engines(nodes: Optional[Iterable[Optional[T]]],
                      children_of: ChildrenOf,
                      config: Optional[WalkConfig]) -> Iterator[Callable[[], LazyTreeSpliterator[T]]]:
    if nodes is None:
        return
    for node in nodes:
        if node is not None:
            yield functools.partial(LazyTreeSpliterator.from_node, node, children_of, config)


def _deferred_children(root: T,
                       children_of: ChildrenOf,
                       config: Optional[WalkConfig]) -> Iterator[Callable[[], LazyTreeSpliterator[T]]]:
    # Generator body, so children_of(root) runs on the first fetch only
    yield from _deferred_engines(children_of(root), children_of, config)
