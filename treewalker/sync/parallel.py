"""Parallel decomposition driver for TreeWalker.

The ParallelWalker drains a spliterator on a thread pool. Each task
detaches child subtrees with ``try_split()`` and hands them to the
coordinator, which schedules them as new tasks, then drains whatever is
left of its own spliterator in place.

Workers never wait on other futures; they only report forks and completion
through a queue that the coordinating thread consumes. This keeps a small
pool from starving itself on deep trees.
"""

import logging
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar

from ..config import ParallelConfig
from .core.spliterator import Spliterator

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Task events: (kind, payload)
_FORK = 'fork'
_DONE = 'done'
_FAILED = 'failed'


class ParallelWalker(Generic[T]):
    """Fork-style parallel consumer of a splittable traversal.

    Elements are delivered from worker threads in no particular order.
    A ParallelWalker drains its spliterator once; running it again yields
    nothing new.
    """

    def __init__(self, spliterator: Spliterator[T], config: Optional[ParallelConfig] = None):
        """Initialize driver.

        Args:
            spliterator: Traversal to drain (typically a LazyTreeSpliterator)
            config: Parallel configuration

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.spliterator = spliterator
        self.config = (config or ParallelConfig()).ensure_valid()
        self.tasks_run = 0

    def for_each(self, action: Callable[[T], Any]) -> None:
        """Call ``action`` for every element, concurrently.

        ``action`` runs on worker threads and must be thread-safe. The
        first exception raised by ``action`` or by an expansion function
        propagates unmodified; tasks not yet started are skipped.
        """
        events: "queue.Queue[Tuple[str, Any]]" = queue.Queue()
        cancel = threading.Event()
        self.tasks_run = 0

        with ThreadPoolExecutor(max_workers=self.config.max_workers,
                                thread_name_prefix="treewalker") as executor:

            def schedule(spliterator: Spliterator[T], level: int) -> None:
                self.tasks_run += 1
                executor.submit(self._task, spliterator, level, action, events, cancel)

            schedule(self.spliterator, 0)
            outstanding = 1

            try:
                while outstanding:
                    kind, payload = events.get()
                    if kind == _FORK:
                        outstanding += 1
                        schedule(*payload)
                    elif kind == _DONE:
                        outstanding -= 1
                    else:
                        raise payload
            finally:
                cancel.set()

        logger.debug("Parallel walk finished after %d task(s)", self.tasks_run)

    def collect(self) -> List[T]:
        """Return every element as a list, in no particular order."""
        results: List[T] = []
        lock = threading.Lock()

        def gather(element: T) -> None:
            with lock:
                results.append(element)

        self.for_each(gather)
        return results

    def count(self) -> int:
        """Return the number of elements."""
        total = 0
        lock = threading.Lock()

        def tally(_: T) -> None:
            nonlocal total
            with lock:
                total += 1

        self.for_each(tally)
        return total

    def _task(self,
              spliterator: Spliterator[T],
              level: int,
              action: Callable[[T], Any],
              events: "queue.Queue[Tuple[str, Any]]",
              cancel: threading.Event) -> None:
        try:
            if level < self.config.split_depth:
                forks = 0
                while forks < self.config.max_forks_per_task and not cancel.is_set():
                    fork = spliterator.try_split()
                    if fork is None:
                        break
                    events.put((_FORK, (fork, level + 1)))
                    forks += 1
                if forks:
                    logger.debug("Detached %d subtree(s) at split level %d", forks, level)

            while not cancel.is_set() and spliterator.try_advance(action):
                pass
        except BaseException as e:
            # Forwarded to the coordinating thread, which re-raises it
            events.put((_FAILED, e))
        else:
            events.put((_DONE, None))
