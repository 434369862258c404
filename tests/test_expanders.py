"""Unit tests for the ready-made expansion functions.

Tests filesystem and class-hierarchy expanders, on their own and driven
by the lazy walker.
"""

import itertools
import os
import shutil
import sys
import tempfile
import unittest
import xml.dom.minidom
from pathlib import Path
from unittest import mock

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from treewalker.sync import (
    FileSystemExpander,
    directory_children,
    dom_children,
    nested_classes,
    subclasses,
    walk,
    walk_all,
)


class Outer:
    class First:
        class Deep:
            pass

    class Second:
        pass

    Alias = int
    value = 3


class Base:
    pass


class Left(Base):
    pass


class Right(Base):
    pass


class LeftLeaf(Left):
    pass


class TestFileSystemExpander(unittest.TestCase):
    """Test filesystem expansion."""

    def setUp(self):
        """Create a test tree structure.

        root/
          a/
            a1.txt
          b/
            b1/
          .hidden/
            h.txt
          c.txt
        """
        self.test_dir = tempfile.mkdtemp()
        self.test_path = Path(self.test_dir)

        (self.test_path / "a").mkdir()
        (self.test_path / "a" / "a1.txt").write_text("a1")
        (self.test_path / "b" / "b1").mkdir(parents=True)
        (self.test_path / ".hidden").mkdir()
        (self.test_path / ".hidden" / "h.txt").write_text("h")
        (self.test_path / "c.txt").write_text("c")

    def tearDown(self):
        """Clean up test directory."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def relative(self, paths):
        return [str(p.relative_to(self.test_path)) for p in paths if p != self.test_path]

    def test_children_sorted(self):
        names = [p.name for p in directory_children(self.test_path)]
        self.assertEqual(names, sorted(names))
        self.assertEqual(set(names), {"a", "b", ".hidden", "c.txt"})

    def test_file_has_no_children(self):
        self.assertEqual(list(directory_children(self.test_path / "c.txt")), [])

    def test_missing_path_has_no_children(self):
        self.assertEqual(list(directory_children(self.test_path / "missing")), [])

    def test_accepts_strings(self):
        self.assertEqual(len(list(directory_children(str(self.test_path)))), 4)

    def test_walk_visits_everything_in_preorder(self):
        paths = self.relative(walk(self.test_path, directory_children))
        expected = sorted([
            ".hidden", os.path.join(".hidden", "h.txt"),
            "a", os.path.join("a", "a1.txt"),
            "b", os.path.join("b", "b1"),
            "c.txt",
        ])
        self.assertEqual(sorted(paths), expected)
        self.assertLess(paths.index("a"), paths.index(os.path.join("a", "a1.txt")))
        self.assertLess(paths.index(os.path.join("a", "a1.txt")), paths.index("b"))

    def test_hidden_excluded(self):
        expander = FileSystemExpander(include_hidden=False)
        paths = self.relative(walk(self.test_path, expander))
        self.assertFalse(any(p.startswith(".hidden") for p in paths))

    def test_directories_only_sorted(self):
        """Filter and sort the walked stream, as the demo does."""
        dirs = sorted(p for p in walk(self.test_path, directory_children) if p.is_dir())
        self.assertEqual(self.relative(dirs), [".hidden", "a", "b", os.path.join("b", "b1")])

    def test_unreadable_directory_skipped(self):
        expander = FileSystemExpander()
        with mock.patch.object(Path, "iterdir", side_effect=PermissionError("denied")):
            with self.assertLogs("treewalker.sync.expanders.filesystem", level="WARNING") as logs:
                children = list(expander(self.test_path))

        self.assertEqual(children, [])
        self.assertIn("Skipping unreadable directory", logs.output[0])

    def test_unreadable_directory_raises_when_strict(self):
        expander = FileSystemExpander(skip_unreadable=False)
        with mock.patch.object(Path, "iterdir", side_effect=PermissionError("denied")):
            with self.assertRaises(PermissionError):
                list(walk(self.test_path, expander))

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
    def test_symlinked_directory_not_followed(self):
        link = self.test_path / "link"
        try:
            os.symlink(self.test_path / "a", link, target_is_directory=True)
        except (OSError, NotImplementedError):
            self.skipTest("cannot create symlinks here")

        paths = self.relative(walk(self.test_path, directory_children))
        self.assertIn("link", paths)
        self.assertNotIn(os.path.join("link", "a1.txt"), paths)

        followed = self.relative(walk(self.test_path, FileSystemExpander(follow_symlinks=True)))
        self.assertIn(os.path.join("link", "a1.txt"), followed)

    def test_forest_of_directories(self):
        roots = [self.test_path / "a", self.test_path / "b"]
        paths = self.relative(walk_all(roots, directory_children))
        self.assertEqual(paths, ["a", os.path.join("a", "a1.txt"), "b", os.path.join("b", "b1")])


class TestClassExpanders(unittest.TestCase):
    """Test class-hierarchy expansion."""

    def test_nested_classes(self):
        self.assertEqual(nested_classes(Outer), [Outer.First, Outer.Second])

    def test_walk_nested_classes(self):
        self.assertEqual(list(walk(Outer, nested_classes)),
                         [Outer, Outer.First, Outer.First.Deep, Outer.Second])

    def test_nested_classes_of_non_class(self):
        self.assertEqual(nested_classes(42), [])

    def test_subclasses(self):
        self.assertEqual(set(subclasses(Base)), {Left, Right})

    def test_walk_subclasses(self):
        found = list(walk(Base, subclasses))
        self.assertEqual(found[0], Base)
        self.assertEqual(set(found), {Base, Left, Right, LeftLeaf})
        self.assertLess(found.index(Left), found.index(LeftLeaf))

    def test_subclasses_of_type(self):
        first = list(itertools.islice(walk(type, subclasses), 3))
        self.assertEqual(first[0], type)
        self.assertEqual(len(first), 3)

    def test_object_hierarchy_limit(self):
        """The first ten classes below object, without walking them all."""
        first = list(itertools.islice(walk(object, subclasses), 10))
        self.assertEqual(first[0], object)
        self.assertEqual(len(first), 10)
        self.assertTrue(all(isinstance(c, type) for c in first))


class TestDomExpander(unittest.TestCase):
    """Test XML DOM expansion."""

    def setUp(self):
        self.doc = xml.dom.minidom.parseString(
            "<catalog><book id=\"1\"><title>Dune</title></book>"
            "<!-- gap --><book id=\"2\"/></catalog>"
        )

    def label(self, node):
        if node.nodeType == node.ELEMENT_NODE and node.hasAttribute("id"):
            return f"{node.nodeName}#{node.getAttribute('id')}"
        if node.nodeType in (node.TEXT_NODE, node.COMMENT_NODE):
            return f"{node.nodeName}:{node.data.strip()}"
        return node.nodeName

    def test_walk_document_in_preorder(self):
        labels = [self.label(n) for n in walk(self.doc, dom_children)]
        self.assertEqual(labels, [
            "#document", "catalog", "book#1", "title", "#text:Dune",
            "#comment:gap", "book#2",
        ])

    def test_leaf_nodes_have_no_children(self):
        text = self.doc.getElementsByTagName("title")[0].firstChild
        self.assertEqual(dom_children(text), [])
        self.assertEqual(dom_children(self.doc.getElementsByTagName("book")[1]), [])

    def test_non_dom_values_have_no_children(self):
        self.assertEqual(dom_children("catalog"), [])
        self.assertEqual(dom_children(None), [])


if __name__ == '__main__':
    unittest.main()
