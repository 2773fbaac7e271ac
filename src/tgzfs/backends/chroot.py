"""
Scoped (chroot) view over another tgzfs backend.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from typing import List

from tgzfs.core import path_resolver
from tgzfs.core.base_filesystem import File, FileInfo, Filesystem
from tgzfs.core.capabilities import Capability
from tgzfs.core.errors import CrossedBoundaryError


class ChrootFile(File):
    """A file opened through a ChrootFS, named by its path inside the view."""

    def __init__(self, name: str, file: File):
        super().__init__(name)
        self._file = file

    def _read(self, size):
        return self._file.read(size)

    def _read_at(self, size, offset):
        return self._file.read_at(size, offset)

    def _seek(self, offset, whence):
        return self._file.seek(offset, whence)

    def _tell(self):
        return self._file.tell()

    def _write(self, data):
        return self._file.write(data)

    def _truncate(self, size):
        self._file.truncate(size)

    def _stat(self):
        return self._file.stat()

    def _lock(self):
        self._file.lock()

    def _unlock(self):
        self._file.unlock()

    def _close(self):
        self._file.close()


class ChrootFS(Filesystem):
    """
    A filesystem confined to a subtree of another backend.

    Paths climbing above the view's root with '..', or resolving through a
    symlink to somewhere outside it, raise CrossedBoundaryError;
    absolute paths are taken relative to the view's root. Capabilities are
    those of the underlying backend.
    """
    backend_name = 'chroot'

    def __init__(self, underlying: Filesystem, base: str):
        if path_resolver.is_cross_boundaries(base):
            raise CrossedBoundaryError(base)
        self._underlying = underlying
        self._base = path_resolver.normalize(base)

    @property
    def underlying(self) -> Filesystem:
        return self._underlying

    @property
    def base(self) -> str:
        return self._base

    def _underlying_path(self, path: str, follow_symlinks: bool = True) -> str:
        target = self._underlying.join(self._base, path_resolver.relative(path))
        if not self._underlying.contains(self._base, target, follow_symlinks):
            raise CrossedBoundaryError(path)
        return target

    def contains(self, base: str, path: str, follow_symlinks: bool = True) -> bool:
        return self._underlying.contains(
            self._underlying_path(base), self._underlying_path(path, follow_symlinks), follow_symlinks)

    def capabilities(self) -> Capability:
        return self._underlying.capabilities()

    def root(self) -> str:
        return self._underlying.join(self._underlying.root(), self._base)

    def open(self, path: str, mode: str = 'r', perm: int = 0o666) -> ChrootFile:
        target = self._underlying_path(path)
        return ChrootFile(path, self._underlying.open(target, mode, perm))

    def create(self, path: str) -> ChrootFile:
        target = self._underlying_path(path)
        return ChrootFile(path, self._underlying.create(target))

    def stat(self, path: str) -> FileInfo:
        return self._underlying.stat(self._underlying_path(path))

    def read_dir(self, path: str) -> List[FileInfo]:
        return self._underlying.read_dir(self._underlying_path(path))

    def mkdir(self, path: str, perm: int = 0o777) -> None:
        self._underlying.mkdir(self._underlying_path(path), perm)

    def mkdir_all(self, path: str, perm: int = 0o777) -> None:
        self._underlying.mkdir_all(self._underlying_path(path), perm)

    def rename(self, src: str, dst: str) -> None:
        self._underlying.rename(
            self._underlying_path(src, follow_symlinks=False), self._underlying_path(dst, follow_symlinks=False))

    def remove(self, path: str) -> None:
        self._underlying.remove(self._underlying_path(path, follow_symlinks=False))

    def chmod(self, path: str, mode: int) -> None:
        self._underlying.chmod(self._underlying_path(path), mode)

    def chroot(self, path: str) -> 'ChrootFS':
        self._require(Capability.CHROOT, 'chroot')
        return ChrootFS(self._underlying, self._underlying_path(path))
