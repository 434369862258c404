"""Configuration system for TreeWalker.

This module defines how users tune a walk: how external splitting of the
traversal engine behaves, and how the parallel driver decomposes work.
"""

from dataclasses import dataclass
from enum import Enum, Flag, auto
from typing import List, Optional

from .errors import ConfigurationError


class SplitPolicy(Enum):
    """How external ``try_split()`` calls interact with the engine's cursor.

    Internal sequential stepping always waits for the cursor; the policy
    only governs callers that detach subtrees for independent draining.
    """
    SERIALIZED = "serialized"    # Wait for the cursor, safe concurrent split
    FAIL_CLOSED = "fail_closed"  # Return None when another thread holds it
    DISABLED = "disabled"        # Single-thread only, never split externally


class Characteristics(Flag):
    """Structural properties a spliterator reports about its elements."""
    NONE = 0
    ORDERED = auto()
    DISTINCT = auto()
    SORTED = auto()
    SIZED = auto()
    NONNULL = auto()
    IMMUTABLE = auto()
    CONCURRENT = auto()
    SUBSIZED = auto()


@dataclass
class WalkConfig:
    """Configuration for a single lazy tree walk."""

    split_policy: SplitPolicy = SplitPolicy.SERIALIZED

    @classmethod
    def single_threaded(cls) -> 'WalkConfig':
        """Create config for walks that are never split externally."""
        return cls(split_policy=SplitPolicy.DISABLED)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not isinstance(self.split_policy, SplitPolicy):
            errors.append(f"split_policy must be a SplitPolicy, got {self.split_policy!r}")
        return errors

    def ensure_valid(self) -> 'WalkConfig':
        """Raise ConfigurationError if the config is invalid, else return self."""
        _raise_on_errors(self.validate())
        return self


@dataclass
class ParallelConfig:
    """Configuration for the thread-pool parallel driver.

    A task detaches child subtrees while its split level is below
    ``split_depth``; deeper subtrees are drained in place by the task
    that owns them.
    """

    max_workers: Optional[int] = None  # None = ThreadPoolExecutor default
    split_depth: int = 2               # How many levels of subtrees to fork
    max_forks_per_task: int = 64       # Bound on splits per task (wide trees)

    @classmethod
    def sequential(cls) -> 'ParallelConfig':
        """Create config that drains everything in a single task."""
        return cls(max_workers=1, split_depth=0)

    @classmethod
    def wide(cls, max_workers: Optional[int] = None) -> 'ParallelConfig':
        """Create config for shallow, very wide trees.

        Args:
            max_workers: Worker thread count (None = executor default)

        Returns:
            ParallelConfig forking only the first level, without a fork bound
        """
        return cls(max_workers=max_workers, split_depth=1, max_forks_per_task=1_000_000)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.max_workers is not None and self.max_workers <= 0:
            errors.append("max_workers must be positive")

        if self.split_depth < 0:
            errors.append("split_depth cannot be negative")

        if self.max_forks_per_task <= 0:
            errors.append("max_forks_per_task must be positive")

        return errors

    def ensure_valid(self) -> 'ParallelConfig':
        """Raise ConfigurationError if the config is invalid, else return self."""
        _raise_on_errors(self.validate())
        return self


def _raise_on_errors(errors: List[str]) -> None:
    if errors:
        raise ConfigurationError(f"Invalid configuration: {'; '.join(errors)}")
