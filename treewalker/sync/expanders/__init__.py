"""Ready-made expansion functions for common tree shapes."""

from .classes import nested_classes, subclasses
from .dom import dom_children
from .filesystem import FileSystemExpander, directory_children

__all__ = [
    'nested_classes',
    'subclasses',
    'FileSystemExpander',
    'directory_children',
    'dom_children',
]
