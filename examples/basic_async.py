#!/usr/bin/env python3
"""
Basic async walk example showing lazy expansion with non-blocking I/O.

This example demonstrates:
- An async generator used as the expansion function
- Stopping early without expanding the rest of the tree
- Draining split-off subtrees concurrently
"""

import asyncio
import os
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from treewalker.aio import collect_async, parallel_collect_async


async def list_directory(path: Path):
    """Yield directory entries, listing in a worker thread."""
    if not path.is_dir():
        return
    loop = asyncio.get_running_loop()
    try:
        names = await loop.run_in_executor(None, os.listdir, path)
    except OSError:
        return
    for name in sorted(names):
        yield path / name


async def main():
    """Demonstrate basic async walking."""
    root_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()

    print(f"Walking: {root_path}")
    print("-" * 50)

    first = await collect_async(root_path, list_directory, limit=20)
    for path in first:
        print(f"  {path}")

    everything = await parallel_collect_async(root_path, list_directory, max_concurrent=16)
    files = sum(1 for p in everything if p.is_file())

    print(f"\nWalk Summary:")
    print(f"  Entries: {len(everything):,}")
    print(f"  Files: {files:,}")


if __name__ == "__main__":
    print("TreeWalker - Basic Async Walk Example")
    print("=" * 50)
    asyncio.run(main())
