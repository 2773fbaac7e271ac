"""
Unit tests for tgzfs path handling.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import os
import shutil
import sys
import tempfile
import unittest

# Add the src directory to the path if needed
src_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), "../src"))
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from tgzfs.core import path_resolver
from tgzfs.core.errors import CrossedBoundaryError
from tgzfs.core.path_resolver import PathResolver


class TestPathFunctions(unittest.TestCase):
    """Test case for the module-level path helpers."""

    def test_normalize(self):
        self.assertEqual(path_resolver.normalize(''), '.')
        self.assertEqual(path_resolver.normalize('a//b/./c/..'), 'a/b')
        self.assertEqual(path_resolver.normalize('a\\b'), 'a/b')
        self.assertEqual(path_resolver.normalize('//x'), '/x')
        self.assertEqual(path_resolver.normalize('/../x'), '/x')
        self.assertEqual(path_resolver.normalize('../x'), '../x')

    def test_join(self):
        self.assertEqual(path_resolver.join('a', 'b'), 'a/b')
        self.assertEqual(path_resolver.join('a', '/etc'), 'a/etc')
        self.assertEqual(path_resolver.join('', 'a', ''), 'a')
        self.assertEqual(path_resolver.join('/root', 'x/../y'), '/root/y')
        self.assertEqual(path_resolver.join(), '')

    def test_split(self):
        self.assertEqual(path_resolver.split('/a/b/'), ['a', 'b'])
        self.assertEqual(path_resolver.split('.'), [])
        self.assertEqual(path_resolver.split('/'), [])

    def test_is_cross_boundaries(self):
        self.assertTrue(path_resolver.is_cross_boundaries('..'))
        self.assertTrue(path_resolver.is_cross_boundaries('a/../../b'))
        self.assertFalse(path_resolver.is_cross_boundaries('a/../b'))
        self.assertFalse(path_resolver.is_cross_boundaries('/../b'))
        self.assertFalse(path_resolver.is_cross_boundaries('..foo'))

    def test_relative(self):
        self.assertEqual(path_resolver.relative('/a/b'), 'a/b')
        self.assertEqual(path_resolver.relative('/'), '.')
        self.assertEqual(path_resolver.relative(''), '.')
        self.assertEqual(path_resolver.relative('/../a'), 'a')
        with self.assertRaises(CrossedBoundaryError) as cm:
            path_resolver.relative('a/../../b')
        self.assertEqual(cm.exception.path, 'a/../../b')
        self.assertIsInstance(cm.exception, PermissionError)

    def test_is_within(self):
        self.assertTrue(path_resolver.is_within('/a/b', '/a/b'))
        self.assertTrue(path_resolver.is_within('/a/b/c', '/a/b'))
        self.assertTrue(path_resolver.is_within('/a', '/'))
        self.assertFalse(path_resolver.is_within('/a/bc', '/a/b'))
        self.assertFalse(path_resolver.is_within('/a', '/a/b'))


class TestPathResolver(unittest.TestCase):
    """Test case for PathResolver."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.root = os.path.join(self.test_dir, 'root')
        os.makedirs(os.path.join(self.root, 'sub'))
        self.resolver = PathResolver(self.root)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_resolve_root(self):
        for path in ('', '.', '/', '..', '../..'):
            info = self.resolver.resolve(path)
            self.assertEqual(info.virtual_path, '.')
            self.assertEqual(info.physical_path, self.resolver.root)
            self.assertEqual(info.original_path, path)

    def test_resolve_clamps(self):
        info = self.resolver.resolve('../../etc/passwd')
        self.assertEqual(info.virtual_path, 'etc/passwd')
        self.assertEqual(info.physical_path, os.path.join(self.resolver.root, 'etc', 'passwd'))

        info = self.resolver.resolve('/sub/file')
        self.assertEqual(info.physical_path, os.path.join(self.resolver.root, 'sub', 'file'))

    def test_symlink_escape(self):
        outside = os.path.join(self.test_dir, 'outside')
        os.makedirs(outside)
        os.symlink(outside, os.path.join(self.root, 'link'))
        with self.assertRaises(CrossedBoundaryError):
            self.resolver.resolve('link/file')

    def test_symlink_inside_root(self):
        os.symlink(os.path.join(self.root, 'sub'), os.path.join(self.root, 'alias'))
        info = self.resolver.resolve('alias/file')
        self.assertEqual(info.virtual_path, 'alias/file')

    def test_symlink_not_followed_in_last_component(self):
        outside = os.path.join(self.test_dir, 'outside')
        os.makedirs(outside)
        os.symlink(outside, os.path.join(self.root, 'link'))
        with self.assertRaises(CrossedBoundaryError):
            self.resolver.resolve('link')
        info = self.resolver.resolve('link', follow_symlinks=False)
        self.assertEqual(info.physical_path, os.path.join(self.resolver.root, 'link'))
        # Only the last component is exempt.
        with self.assertRaises(CrossedBoundaryError):
            self.resolver.resolve('link/file', follow_symlinks=False)


if __name__ == '__main__':
    unittest.main()
