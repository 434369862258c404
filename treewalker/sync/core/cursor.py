"""Exclusive forward cursor over deferred child constructors.

A LazyTreeSpliterator keeps its not-yet-materialized children as a lazy
sequence of zero-argument constructors. The SplitCursor owns that sequence
and hands each constructor out exactly once, whether the caller is the
engine stepping to its next sibling or an external driver detaching a
subtree to drain on another thread.
"""

import logging
import threading
from typing import Callable, Generic, Iterable, Iterator, Optional, TypeVar

from ...errors import WalkerStateError

logger = logging.getLogger(__name__)

R = TypeVar('R')


class SplitCursor(Generic[R]):
    """Single-use, thread-safe cursor over a sequence of constructors.

    The source factory is called at most once, on the first ``take()``.
    Each fetch-and-advance step runs under one lock, so concurrent callers
    can never realize the same constructor twice or skip one. The
    constructor itself is invoked outside the lock by the caller that
    fetched it; ownership of the result transfers completely to that caller.
    """

    def __init__(self, source: Callable[[], Iterable[Callable[[], R]]]):
        """Initialize cursor with a lazy source.

        Args:
            source: Zero-argument factory returning the constructor sequence
        """
        self._source: Optional[Callable[[], Iterable[Callable[[], R]]]] = source
        self._iterator: Optional[Iterator[Callable[[], R]]] = None
        self._lock = threading.Lock()
        self._exhausted = False
        self._failure: Optional[BaseException] = None

    @property
    def is_open(self) -> bool:
        """True once the source has been realized and not yet exhausted."""
        return self._iterator is not None

    @property
    def is_exhausted(self) -> bool:
        return self._exhausted

    @property
    def has_failed(self) -> bool:
        return self._failure is not None

    def take(self, blocking: bool = True) -> Optional[R]:
        """Fetch the next constructor and realize it.

        Args:
            blocking: Wait for the cursor if another thread holds it. When
                False the call fails closed and returns None on contention;
                nothing is consumed in that case.

        Returns:
            The constructed value, or None if exhausted (or contended)

        Raises:
            WalkerStateError: If an earlier fetch raised from the source
        """
        if not self._lock.acquire(blocking):
            logger.debug("Cursor %#x busy, split declined", id(self))
            return None

        try:
            constructor = self._fetch()
        finally:
            self._lock.release()

        if constructor is None:
            return None
        return constructor()

    def _fetch(self) -> Optional[Callable[[], R]]:
        # Caller holds the lock.
        if self._failure is not None:
            raise WalkerStateError(
                "walker cannot continue after its expansion function failed"
            ) from self._failure

        if self._exhausted:
            return None

        try:
            if self._iterator is None:
                source, self._source = self._source, None
                self._iterator = iter(source())
            return next(self._iterator)
        except StopIteration:
            self._close()
            return None
        except Exception as e:
            self._failure = e
            self._iterator = None
            raise

    def _close(self) -> None:
        self._exhausted = True
        self._iterator = None

    def __repr__(self) -> str:
        state = 'exhausted' if self._exhausted else 'open' if self.is_open else 'pending'
        if self._failure is not None:
            state = 'failed'
        return f"SplitCursor(state={state})"
