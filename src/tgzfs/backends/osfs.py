"""
Host filesystem backend for tgzfs.
Exposes a directory on disk (typically a private temp directory) as a
mutable tgzfs filesystem. Every virtual path is confined beneath the root.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import io
import os
import shutil
import stat
import tempfile
from typing import List, Optional

try:
    import fcntl
except ImportError:  # not available on Windows; LOCK is then not advertised
    fcntl = None

from tgzfs.core.base_filesystem import File, FileInfo, Filesystem
from tgzfs.core.capabilities import Capability
from tgzfs.core import path_resolver
from tgzfs.core.path_resolver import PathResolver
from tgzfs.core.utils import OpenMode, parse_mode, perm_bits

DEFAULT_CAPABILITIES = Capability.ALL if fcntl is not None else Capability.ALL & ~Capability.LOCK


def _info_from_stat(name: str, st: os.stat_result) -> FileInfo:
    return FileInfo(
        name=name,
        size=st.st_size,
        mode=st.st_mode,
        modified=st.st_mtime,
        is_dir=stat.S_ISDIR(st.st_mode)
    )


def _builtin_mode(open_mode: OpenMode) -> str:
    return open_mode.mode.replace('b', '') + 'b'


class OSFile(File):
    """
    A file on the host filesystem.

    Attributes:
        mode (OpenMode): The mode the file was opened with.
    """

    def __init__(self, name: str, fileobj, mode: OpenMode, capabilities: Capability):
        super().__init__(name)
        self._fileobj = fileobj
        self.mode = mode
        self._capabilities = capabilities

    def _require(self, capability, operation):
        if not self._capabilities & capability:
            self._unsupported(operation)

    def _read(self, size):
        if not self.mode.readable:
            self._unsupported('read')
        return self._fileobj.read(size)

    def _read_at(self, size, offset):
        self._require(Capability.SEEK, 'read_at')
        if not self.mode.readable:
            self._unsupported('read_at')
        self._fileobj.flush()
        fd = self._fileobj.fileno()
        if size < 0:
            size = max(os.fstat(fd).st_size - offset, 0)
        if hasattr(os, 'pread'):
            return os.pread(fd, size, offset)
        pos = self._fileobj.tell()
        try:
            self._fileobj.seek(offset)
            return self._fileobj.read(size)
        finally:
            self._fileobj.seek(pos)

    def _seek(self, offset, whence):
        self._require(Capability.SEEK, 'seek')
        return self._fileobj.seek(offset, whence)

    def _tell(self):
        self._require(Capability.SEEK, 'tell')
        return self._fileobj.tell()

    def _write(self, data):
        if not self.mode.writable:
            self._unsupported('write')
        return self._fileobj.write(data)

    def _truncate(self, size):
        self._require(Capability.TRUNCATE, 'truncate')
        if not self.mode.writable:
            self._unsupported('truncate')
        self._fileobj.truncate(size)

    def _stat(self):
        self._fileobj.flush()
        return _info_from_stat(os.path.basename(self._name), os.fstat(self._fileobj.fileno()))

    def _lock(self):
        self._require(Capability.LOCK, 'lock')
        fcntl.flock(self._fileobj.fileno(), fcntl.LOCK_EX)

    def _unlock(self):
        self._require(Capability.LOCK, 'unlock')
        fcntl.flock(self._fileobj.fileno(), fcntl.LOCK_UN)

    def _close(self):
        self._fileobj.close()


class OSFS(Filesystem):
    """
    Mutable backend over a host directory.

    '..' components and absolute paths are clamped to the root; symlinks that
    lead outside it raise CrossedBoundaryError. A narrower capability set may
    be given, in which case every operation outside it is refused.
    """
    backend_name = 'os'

    def __init__(self, root: str, capabilities: Optional[Capability] = None):
        if not os.path.isdir(root):
            raise NotADirectoryError(f"OSFS root is not a directory: '{root}'")
        self._resolver = PathResolver(root)
        self._capabilities = DEFAULT_CAPABILITIES if capabilities is None else Capability(capabilities)
        self._owns_root = False

    @classmethod
    def temporary(cls, prefix: str = 'tgzfs_', capabilities: Optional[Capability] = None) -> 'OSFS':
        """
        Create a backend rooted at a fresh private temp directory.
        The directory is removed again by close().
        """
        root = tempfile.mkdtemp(prefix=prefix)
        fs = cls(root, capabilities)
        fs._owns_root = True
        fs._log(f"created temporary root {root}", level=2)
        return fs

    def close(self):
        """Remove the root directory if this backend created it."""
        if self._owns_root and os.path.isdir(self.root()):
            self._log(f"removing temporary root {self.root()}", level=2)
            shutil.rmtree(self.root())
        self._owns_root = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def capabilities(self) -> Capability:
        return self._capabilities

    def root(self) -> str:
        return self._resolver.root

    def _physical(self, path: str, follow_symlinks: bool = True) -> str:
        return self._resolver.resolve(path, follow_symlinks).physical_path

    def contains(self, base: str, path: str, follow_symlinks: bool = True) -> bool:
        real_base = path_resolver.real_path(self._physical(base))
        real = path_resolver.real_path(self._physical(path, follow_symlinks), follow_symlinks)
        return path_resolver.is_within(real, real_base)

    def open(self, path: str, mode: str = 'r', perm: int = 0o666) -> OSFile:
        open_mode = parse_mode(mode)
        if open_mode.writable:
            self._require(Capability.WRITE, f"open mode '{mode}'")
            if open_mode.readable:
                self._require(Capability.READ_AND_WRITE, f"open mode '{mode}'")
        else:
            self._require(Capability.READ, 'open')

        physical = self._physical(path)
        if open_mode.create:
            parent = os.path.dirname(physical)
            if parent:
                os.makedirs(parent, exist_ok=True)
        self._log(f"open {path} mode={mode}", level=2)
        fileobj = io.open(physical, _builtin_mode(open_mode),
                          opener=lambda p, flags: os.open(p, flags, perm))
        return OSFile(path, fileobj, open_mode, self._capabilities)

    def stat(self, path: str) -> FileInfo:
        self._require(Capability.READ, 'stat')
        physical = self._physical(path)
        return _info_from_stat(os.path.basename(physical), os.stat(physical))

    def read_dir(self, path: str) -> List[FileInfo]:
        self._require(Capability.READ, 'read_dir')
        with os.scandir(self._physical(path)) as it:
            entries = [_info_from_stat(e.name, e.stat(follow_symlinks=False)) for e in it]
        return sorted(entries, key=lambda info: info.name)

    def mkdir(self, path: str, perm: int = 0o777) -> None:
        self._require(Capability.WRITE, 'mkdir')
        self._log(f"mkdir {path} perm={perm:o}", level=2)
        os.mkdir(self._physical(path), perm)

    def mkdir_all(self, path: str, perm: int = 0o777) -> None:
        self._require(Capability.WRITE, 'mkdir_all')
        self._log(f"mkdir_all {path} perm={perm:o}", level=2)
        os.makedirs(self._physical(path), perm, exist_ok=True)

    def rename(self, src: str, dst: str) -> None:
        self._require(Capability.WRITE, 'rename')
        physical_src = self._physical(src, follow_symlinks=False)
        physical_dst = self._physical(dst, follow_symlinks=False)
        parent = os.path.dirname(physical_dst)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self._log(f"rename {src} -> {dst}", level=2)
        os.rename(physical_src, physical_dst)

    def remove(self, path: str) -> None:
        """Remove a file or an empty directory."""
        self._require(Capability.WRITE, 'remove')
        physical = self._physical(path, follow_symlinks=False)
        self._log(f"remove {path}", level=2)
        if os.path.isdir(physical) and not os.path.islink(physical):
            os.rmdir(physical)
        else:
            os.remove(physical)

    def chmod(self, path: str, mode: int) -> None:
        self._require(Capability.CHMOD, 'chmod')
        os.chmod(self._physical(path), perm_bits(mode))
