#!/usr/bin/env python3
"""
Walk a class hierarchy and a directory tree with TreeWalker.

This example demonstrates:
- Taking only the first N nodes of a lazily walked class hierarchy
- Filtering and sorting the nodes of a walked directory tree
"""

import argparse
import importlib
import itertools
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from treewalker.logging import configure_logging
from treewalker.sync import directory_children, nested_classes, subclasses, walk


def resolve_class(dotted: str) -> type:
    """Import ``module.Class`` (or ``module.Outer.Inner``)."""
    parts = dotted.split('.')
    for split in range(len(parts) - 1, 0, -1):
        try:
            obj = importlib.import_module('.'.join(parts[:split]))
        except ImportError:
            continue
        for name in parts[split:]:
            obj = getattr(obj, name)
        return obj
    return getattr(importlib.import_module('builtins'), dotted)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Lazy tree walking demo")
    parser.add_argument("--class", dest="cls", default="object",
                        help="Class to start the hierarchy walk from (default: object)")
    parser.add_argument("--nested", action="store_true",
                        help="Walk nested classes instead of subclasses")
    parser.add_argument("--limit", type=int, default=10,
                        help="Number of classes to print (default: 10)")
    parser.add_argument("root", nargs="?", default=".",
                        help="Directory to list subdirectories of (default: .)")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    children_of = nested_classes if args.nested else subclasses
    for cls in itertools.islice(walk(resolve_class(args.cls), children_of), args.limit):
        print(cls)

    directories = (p for p in walk(Path(args.root), directory_children) if p.is_dir())
    for path in sorted(directories):
        print(path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
