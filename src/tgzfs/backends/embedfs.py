"""
Read-only embedded data backend for tgzfs.
Adapts immutable packaged data (an importlib.resources Traversable, a
zipfile.Path, or anything shaped like them) to the tgzfs filesystem contract.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import io
import stat
from typing import List

from tgzfs.core import path_resolver
from tgzfs.core.base_filesystem import File, FileInfo, Filesystem
from tgzfs.core.capabilities import Capability
from tgzfs.core.errors import ReadOnlyError, UnsupportedOperationError
from tgzfs.core.utils import parse_mode

FILE_MODE = stat.S_IFREG | 0o444
DIR_MODE = stat.S_IFDIR | 0o555


def _entry_size(entry) -> int:
    with entry.open('rb') as stream:
        if stream.seekable():
            return stream.seek(0, io.SEEK_END)
        size = 0
        while True:
            chunk = stream.read(64 * 1024)
            if not chunk:
                return size
            size += len(chunk)


def _entry_info(entry) -> FileInfo:
    if entry.is_dir():
        return FileInfo(name=entry.name, size=0, mode=DIR_MODE, modified=0.0, is_dir=True)
    return FileInfo(name=entry.name, size=_entry_size(entry), mode=FILE_MODE, modified=0.0, is_dir=False)


class EmbedFile(File):
    """
    An open entry of embedded data.

    Seeking and positioned reads are only available when the underlying
    stream is seekable; writes and truncation always raise ReadOnlyError.
    """

    def __init__(self, name: str, entry, stream):
        super().__init__(name)
        self._entry = entry
        self._stream = stream

    def _require_random_access(self, operation):
        if not self._stream.seekable():
            raise UnsupportedOperationError(f"{operation} not supported on this entry: {self._name}")

    def _read(self, size):
        return self._stream.read(size)

    def _read_at(self, size, offset):
        self._require_random_access('read_at')
        pos = self._stream.tell()
        try:
            self._stream.seek(offset)
            return self._stream.read(size)
        finally:
            self._stream.seek(pos)

    def _seek(self, offset, whence):
        self._require_random_access('seek')
        return self._stream.seek(offset, whence)

    def _tell(self):
        self._require_random_access('tell')
        return self._stream.tell()

    def _write(self, data):
        raise ReadOnlyError(f"file write not supported: {self._name}")

    def _truncate(self, size):
        raise ReadOnlyError(f"truncate not supported: {self._name}")

    def _stat(self):
        return _entry_info(self._entry)

    # Locking immutable data is a no-op.
    def _lock(self):
        pass

    def _unlock(self):
        pass

    def _close(self):
        self._stream.close()


class EmbedFS(Filesystem):
    """
    Read-only filesystem over embedded data.

    Usage example:
        from importlib.resources import files
        fs = EmbedFS(files('mypackage') / 'data')
        with fs.open('templates/base.txt') as f:
            text = f.read()
    """
    backend_name = 'embed'

    def __init__(self, source):
        self._source = source

    def capabilities(self) -> Capability:
        return Capability.READ | Capability.CHROOT

    def _lookup(self, path: str):
        entry = self._source
        for part in path_resolver.split(path_resolver.relative(path)):
            entry = entry.joinpath(part)
        if not (entry.is_dir() or entry.is_file()):
            raise FileNotFoundError(f"No such file or directory: '{path}'")
        return entry

    def open(self, path: str, mode: str = 'r', perm: int = 0o666) -> EmbedFile:
        if parse_mode(mode).mutating:
            raise ReadOnlyError(f"unsupported mode '{mode}': filesystem is read-only")
        entry = self._lookup(path)
        if entry.is_dir():
            raise IsADirectoryError(f"Is a directory: '{path}'")
        return EmbedFile(entry.name, entry, entry.open('rb'))

    def stat(self, path: str) -> FileInfo:
        return _entry_info(self._lookup(path))

    def read_dir(self, path: str) -> List[FileInfo]:
        entry = self._lookup(path)
        if not entry.is_dir():
            raise NotADirectoryError(f"Not a directory: '{path}'")
        # Traversable iteration order is unspecified.
        return sorted((_entry_info(child) for child in entry.iterdir()), key=lambda info: info.name)

    def create(self, path: str):
        raise ReadOnlyError(f"cannot create file '{path}': filesystem is read-only")

    def mkdir(self, path: str, perm: int = 0o777) -> None:
        raise ReadOnlyError(f"cannot mkdir '{path}': filesystem is read-only")

    def mkdir_all(self, path: str, perm: int = 0o777) -> None:
        raise ReadOnlyError(f"cannot mkdir_all '{path}': filesystem is read-only")

    def rename(self, src: str, dst: str) -> None:
        raise ReadOnlyError(f"cannot rename '{src}': filesystem is read-only")

    def remove(self, path: str) -> None:
        raise ReadOnlyError(f"cannot remove '{path}': filesystem is read-only")

    def chmod(self, path: str, mode: int) -> None:
        raise ReadOnlyError(f"cannot chmod '{path}': filesystem is read-only")
