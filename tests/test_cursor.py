"""Tests for SplitCursor, the exclusive fetch-and-advance hand-off."""

import threading

import pytest

from treewalker import WalkerStateError
from treewalker.sync import LazyTreeSpliterator, SplitCursor


def constructors(values, realized=None):
    """Wrap values in zero-argument constructors that record realization."""
    for value in values:
        def build(value=value):
            if realized is not None:
                realized.append(value)
            return value
        yield build


class TestSplitCursor:
    """Test cursor lifecycle."""

    def test_source_realized_on_first_take(self):
        calls = []

        def source():
            calls.append(1)
            return constructors(['a'])

        cursor = SplitCursor(source)
        assert calls == []
        assert not cursor.is_open

        assert cursor.take() == 'a'
        assert calls == [1]
        assert cursor.is_open

    def test_each_constructor_realized_once(self):
        realized = []
        cursor = SplitCursor(lambda: constructors(['a', 'b', 'c'], realized))

        assert [cursor.take() for _ in range(3)] == ['a', 'b', 'c']
        assert realized == ['a', 'b', 'c']

    def test_exhaustion_is_terminal(self):
        cursor = SplitCursor(lambda: constructors(['a']))

        assert cursor.take() == 'a'
        assert cursor.take() is None
        assert cursor.is_exhausted
        assert not cursor.is_open
        assert cursor.take() is None

    def test_failure_recorded(self):
        def source():
            yield lambda: 'a'
            raise KeyError('broken')

        cursor = SplitCursor(source)
        assert cursor.take() == 'a'

        with pytest.raises(KeyError):
            cursor.take()
        assert cursor.has_failed

        with pytest.raises(WalkerStateError) as exc_info:
            cursor.take()
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_non_blocking_take_fails_closed(self):
        realized = []
        cursor = SplitCursor(lambda: constructors(['a', 'b'], realized))

        cursor._lock.acquire()
        try:
            assert cursor.take(blocking=False) is None
        finally:
            cursor._lock.release()

        assert realized == []
        assert cursor.take(blocking=False) == 'a'

    def test_repr_reports_state(self):
        cursor = SplitCursor(lambda: constructors(['a']))
        assert 'pending' in repr(cursor)
        cursor.take()
        assert 'open' in repr(cursor)
        cursor.take()
        assert 'exhausted' in repr(cursor)


class TestConcurrentTake:
    """Test that concurrent takes hand out each constructor exactly once."""

    def test_threads_partition_the_sequence(self):
        count = 2000
        cursor = SplitCursor(lambda: constructors(range(count)))
        barrier = threading.Barrier(8)
        taken = [[] for _ in range(8)]

        def worker(bucket):
            barrier.wait()
            while True:
                value = cursor.take()
                if value is None:
                    break
                bucket.append(value)

        threads = [threading.Thread(target=worker, args=(bucket,)) for bucket in taken]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        merged = sorted(v for bucket in taken for v in bucket)
        assert merged == list(range(count))

    def test_concurrent_splits_of_one_walker(self):
        """Threads splitting the same walker receive disjoint subtrees."""
        width = 500
        def children(n):
            if n == 'root':
                return [f"c{i}" for i in range(width)]
            if n.endswith('.leaf'):
                return []
            return [f"{n}.leaf"]

        walker = LazyTreeSpliterator.from_node('root', children)
        barrier = threading.Barrier(4)
        drained = [[] for _ in range(4)]

        def worker(bucket):
            barrier.wait()
            while True:
                subtree = walker.try_split()
                if subtree is None:
                    break
                bucket.extend(subtree)

        threads = [threading.Thread(target=worker, args=(bucket,)) for bucket in drained]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        merged = [n for bucket in drained for n in bucket] + list(walker)
        expected = ['root'] + [n for i in range(width) for n in (f"c{i}", f"c{i}.leaf")]
        assert sorted(merged) == sorted(expected)
        assert len(merged) == len(set(merged))

    def test_split_while_another_thread_drains(self):
        """Splitting during a drain hands out each subtree exactly once."""
        width = 2000

        def children(n):
            if n == 'root':
                return (f"c{i}" for i in range(width))
            if n.endswith('.leaf'):
                return []
            return [f"{n}.leaf"]

        walker = LazyTreeSpliterator.from_node('root', children)
        barrier = threading.Barrier(2)
        drained = []
        split_off = []

        def drainer():
            barrier.wait()
            drained.extend(walker)

        def splitter():
            barrier.wait()
            while True:
                subtree = walker.try_split()
                if subtree is None:
                    break
                split_off.extend(subtree)

        threads = [threading.Thread(target=drainer), threading.Thread(target=splitter)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        merged = drained + split_off
        expected = ['root'] + [n for i in range(width) for n in (f"c{i}", f"c{i}.leaf")]
        assert sorted(merged) == sorted(expected)
        assert len(merged) == len(set(merged))
        assert drained[0] == 'root'
