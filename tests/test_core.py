"""
Unit tests for the tgzfs core: capabilities, the backend contract,
configuration, logging and the backend registry.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import contextlib
import io
import os
import shutil
import stat
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from tgzfs import (
    OSFS,
    BackendManager,
    Capability,
    ChrootFS,
    ConfigAPI,
    EmbedFS,
    File,
    FileClosedError,
    FileInfo,
    Filesystem,
    UnsupportedOperationError,
)
from tgzfs.core.global_config import GlobalConfig
from tgzfs.core.logging import debug_print
from tgzfs.core.utils import parse_mode


class MemoryFile(File):
    def __init__(self, name, data=b''):
        super().__init__(name)
        self._buf = io.BytesIO(data)
        self.close_calls = 0

    def _read(self, size):
        return self._buf.read(size)

    def _stat(self):
        size = len(self._buf.getvalue())
        return FileInfo(self._name, size, stat.S_IFREG | 0o644, 0.0, False)

    def _close(self):
        self.close_calls += 1


class MemoryFS(Filesystem):
    """Smallest possible backend: a single read-only file."""

    def capabilities(self):
        return Capability.READ

    def open(self, path, mode='r', perm=0o666):
        if path != 'only':
            raise FileNotFoundError(path)
        return MemoryFile(path, b'only data')

    def stat(self, path):
        with self.open(path) as f:
            return f.stat()

    def read_dir(self, path):
        return [self.stat('only')]


class TestCapability(unittest.TestCase):

    def test_composites(self):
        self.assertEqual(
            Capability.DEFAULT,
            Capability.READ | Capability.WRITE | Capability.READ_AND_WRITE
            | Capability.SEEK | Capability.TRUNCATE | Capability.LOCK)
        self.assertEqual(Capability.ALL, Capability.DEFAULT | Capability.CHROOT | Capability.CHMOD)
        self.assertFalse(Capability.DEFAULT & Capability.CHMOD)

    def test_has_capability(self):
        fs = MemoryFS()
        self.assertTrue(fs.has_capability(Capability.READ))
        self.assertFalse(fs.has_capability(Capability.READ | Capability.WRITE))
        self.assertFalse(fs.has_capability(Capability.CHROOT))


class TestFileContract(unittest.TestCase):

    def test_file_info_perm(self):
        info = FileInfo('x', 1, stat.S_IFDIR | 0o755, 0.0, True)
        self.assertEqual(info.perm, 0o755)

    def test_close_semantics(self):
        f = MemoryFile('f', b'abc')
        self.assertEqual(f.read(2), b'ab')
        self.assertFalse(f.closed)
        f.close()
        self.assertTrue(f.closed)
        self.assertEqual(f.close_calls, 1)
        with self.assertRaises(FileClosedError) as cm:
            f.close()
        self.assertEqual(cm.exception.name, 'f')
        self.assertIsInstance(cm.exception, ValueError)
        for op in (f.read, f.tell, f.stat, f.lock, f.unlock):
            with self.assertRaises(FileClosedError):
                op()
        self.assertEqual(f.close_calls, 1)

    def test_context_manager_closes_once(self):
        with MemoryFile('f') as f:
            f.close()
        self.assertEqual(f.close_calls, 1)

    def test_optional_operations_unsupported(self):
        with MemoryFile('f') as f:
            for call in (lambda: f.write(b'x'), lambda: f.seek(0), f.tell,
                         lambda: f.truncate(0), f.lock, lambda: f.read_at(1, 0)):
                with self.assertRaises(UnsupportedOperationError):
                    call()

    def test_absent_mutations(self):
        fs = MemoryFS()
        for call in (lambda: fs.mkdir('d'), lambda: fs.mkdir_all('d'),
                     lambda: fs.rename('a', 'b'), lambda: fs.remove('only'),
                     lambda: fs.chmod('only', 0o600), lambda: fs.chroot('.')):
            with self.assertRaises(UnsupportedOperationError):
                call()

    def test_exists_and_join(self):
        fs = MemoryFS()
        self.assertTrue(fs.exists('only'))
        self.assertFalse(fs.exists('other'))
        self.assertEqual(fs.join('a', 'b/../c'), 'a/c')
        self.assertEqual(fs.root(), '/')


class TestParseMode(unittest.TestCase):

    def test_modes(self):
        m = parse_mode('r')
        self.assertTrue(m.readable)
        self.assertFalse(m.mutating)
        m = parse_mode('rb+')
        self.assertTrue(m.readable and m.writable)
        self.assertFalse(m.create)
        m = parse_mode('w')
        self.assertTrue(m.truncate and m.create and not m.readable)
        self.assertTrue(parse_mode('a').append)
        self.assertTrue(parse_mode('x').exclusive)

    def test_invalid_modes(self):
        for mode in ('', 'rt', 'rw', 'rr', 'z', '+'):
            with self.assertRaises(ValueError):
                parse_mode(mode)


class TestConfig(unittest.TestCase):

    def setUp(self):
        GlobalConfig.reset()
        self.config = ConfigAPI()

    def tearDown(self):
        GlobalConfig.reset()

    def test_defaults(self):
        self.assertEqual(self.config.temp_prefix, 'tmp-tgz-')
        self.assertIsNone(self.config.temp_dir)
        self.assertEqual(self.config['copy_buffer_size'], 64 * 1024)
        self.assertEqual(sorted(self.config), ['copy_buffer_size', 'debug_level', 'temp_dir', 'temp_prefix'])
        self.assertEqual(len(self.config), 4)

    def test_set_and_reset(self):
        self.config.debug_level = 3
        self.assertEqual(GlobalConfig.get_debug_level(), 3)
        self.config['temp_prefix'] = 'unpack-'
        self.assertEqual(GlobalConfig.get_temp_prefix(), 'unpack-')
        self.config.reset('temp_prefix')
        self.assertEqual(self.config.temp_prefix, 'tmp-tgz-')
        self.config.reset()
        self.assertEqual(self.config.get_debug_level(), GlobalConfig._defaults['debug_level'])

    def test_validation(self):
        with self.assertRaises(ValueError):
            self.config.temp_prefix = ''
        with self.assertRaises(ValueError):
            self.config.temp_prefix = 'a/b'
        with self.assertRaises(ValueError):
            self.config.copy_buffer_size = 0
        with self.assertRaises(KeyError):
            self.config.set('no_such_key', 1)
        with self.assertRaises(KeyError):
            self.config['no_such_key']
        with self.assertRaises(AttributeError):
            self.config.no_such_key = 1
        with self.assertRaises(AttributeError):
            self.config.no_such_key

    def test_debug_print(self):
        self.config.debug_level = 0
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            debug_print("hidden", level=1)
            self.config.debug_level = 2
            debug_print("shown", level=2)
            debug_print("too verbose", level=3)
        self.assertEqual(out.getvalue(), "[TGZFS-DEBUG-2] shown\n")

    def test_debug_print_traceback(self):
        self.config.debug_level = 4
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            err = e
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            debug_print("failed", level=1, exc=err)
        self.assertIn("[TGZFS-DEBUG-1] failed", out.getvalue())
        self.assertIn("RuntimeError: boom", out.getvalue())


class TestBackendManager(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_builtin_backends_registered(self):
        backends = BackendManager.get_all_backends()
        self.assertIs(backends['os'], OSFS)
        self.assertIs(backends['embed'], EmbedFS)
        self.assertIs(backends['chroot'], ChrootFS)
        self.assertIs(BackendManager.get_backend('OS'), OSFS)

    def test_open_filesystem(self):
        fs = BackendManager.open_filesystem('os', self.test_dir)
        self.assertIsInstance(fs, OSFS)
        self.assertEqual(fs.root(), os.path.abspath(self.test_dir))
        with self.assertRaises(ValueError):
            BackendManager.open_filesystem('nope')

    def test_subclass_registration(self):
        class ScratchFS(MemoryFS):
            backend_name = 'scratch'

        try:
            self.assertIs(BackendManager.get_backend('scratch'), ScratchFS)
            self.assertIsInstance(BackendManager.open_filesystem('scratch'), ScratchFS)
        finally:
            BackendManager.deregister_backend('scratch')
        self.assertIsNone(BackendManager.get_backend('scratch'))

    def test_unnamed_subclass_not_registered(self):
        before = BackendManager.get_all_backends()

        class Unnamed(OSFS):
            pass

        self.assertEqual(BackendManager.get_all_backends(), before)


if __name__ == '__main__':
    unittest.main()
