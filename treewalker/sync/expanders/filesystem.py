"""Filesystem expansion functions for TreeWalker.

Directories are expanded to their entries; files (and anything that is not
a directory) have no children. Entries are yielded lazily, in sorted order.
"""

import logging
from pathlib import Path
from typing import Iterator, Union

logger = logging.getLogger(__name__)


class FileSystemExpander:
    """Configurable ``children_of`` callback for filesystem trees.

    Example:
        >>> expander = FileSystemExpander(include_hidden=False)
        >>> for path in walk(Path("."), expander):
        ...     print(path)
    """

    def __init__(self,
                 include_hidden: bool = True,
                 follow_symlinks: bool = False,
                 skip_unreadable: bool = True):
        """Initialize filesystem expander.

        Args:
            include_hidden: Whether to include hidden files/directories
            follow_symlinks: Whether to descend into symlinked directories
            skip_unreadable: Treat directories that cannot be listed as
                leaves (logged at WARNING) instead of raising OSError
        """
        self.include_hidden = include_hidden
        self.follow_symlinks = follow_symlinks
        self.skip_unreadable = skip_unreadable

    def __call__(self, path: Union[str, Path]) -> Iterator[Path]:
        """Yield the entries of ``path`` if it is a directory."""
        path = Path(path) if isinstance(path, str) else path

        if not path.is_dir():
            return  # No children for files
        if not self.follow_symlinks and path.is_symlink():
            return

        try:
            entries = sorted(path.iterdir())
        except OSError as e:
            if not self.skip_unreadable:
                raise
            logger.warning("Skipping unreadable directory %s: %s", path, e)
            return

        for child in entries:
            if not self.include_hidden and child.name.startswith('.'):
                continue
            yield child

    def __repr__(self) -> str:
        return (f"FileSystemExpander(include_hidden={self.include_hidden}, "
                f"follow_symlinks={self.follow_symlinks}, "
                f"skip_unreadable={self.skip_unreadable})")


_default_expander = FileSystemExpander()


def directory_children(path: Union[str, Path]) -> Iterator[Path]:
    """Yield the sorted entries of a directory; nothing for other paths."""
    return _default_expander(path)
