"""
Base classes for tgzfs backends.
Defines the interfaces that every filesystem backend and file handle must implement.

Backends are not required to be thread-safe. Callers sharing one backend
between threads (for example, to extract several archives at once) must
synchronize access themselves unless the backend documents otherwise.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import io
import stat
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Optional

from . import path_resolver
from .capabilities import Capability
from .errors import FileClosedError, UnsupportedOperationError


class FileInfo(NamedTuple):
    """Information about a file or directory in a backend."""
    name: str
    size: int
    mode: int
    modified: float
    is_dir: bool

    @property
    def perm(self) -> int:
        return stat.S_IMODE(self.mode)


class File(ABC):
    """
    An open file on a tgzfs backend.

    Every public operation checks the handle is still open. Closing marks the
    handle closed before releasing the underlying resource, so a failed close
    is reported once and never retried. A second close raises FileClosedError.
    """

    def __init__(self, name: str):
        self._name = name
        self._closed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self):
        if self._closed:
            raise FileClosedError(self._name)

    def _unsupported(self, operation):
        raise UnsupportedOperationError(f"{operation} not supported on {type(self).__name__}: {self._name}")

    # --- Public operations ---
    def read(self, size: int = -1) -> bytes:
        self._check_open()
        return self._read(size)

    def read_at(self, size: int, offset: int) -> bytes:
        """
        Read up to size bytes starting at offset without moving the file position.
        """
        self._check_open()
        if offset < 0:
            raise ValueError(f"negative offset: {offset}")
        return self._read_at(size, offset)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        return self._seek(offset, whence)

    def tell(self) -> int:
        self._check_open()
        return self._tell()

    def write(self, data) -> int:
        self._check_open()
        return self._write(data)

    def truncate(self, size: int) -> None:
        self._check_open()
        self._truncate(size)

    def stat(self) -> FileInfo:
        self._check_open()
        return self._stat()

    def lock(self) -> None:
        self._check_open()
        self._lock()

    def unlock(self) -> None:
        self._check_open()
        self._unlock()

    def close(self) -> None:
        self._check_open()
        self._closed = True
        self._close()

    # --- Context management ---
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self._closed:
            self.close()

    def __repr__(self):
        state = 'closed' if self._closed else 'open'
        return f"<{type(self).__name__} {self._name!r} ({state})>"

    # --- Backend hooks ---
    @abstractmethod
    def _read(self, size: int) -> bytes:
        pass

    @abstractmethod
    def _stat(self) -> FileInfo:
        pass

    @abstractmethod
    def _close(self) -> None:
        pass

    def _read_at(self, size, offset):
        self._unsupported('read_at')

    def _seek(self, offset, whence):
        self._unsupported('seek')

    def _tell(self):
        self._unsupported('tell')

    def _write(self, data):
        self._unsupported('write')

    def _truncate(self, size):
        self._unsupported('truncate')

    def _lock(self):
        self._unsupported('lock')

    def _unlock(self):
        self._unsupported('unlock')


class Filesystem(ABC):
    """
    Base class for filesystem backends.

    Every backend declares a Capability set. Mutating operations a backend
    does not override raise UnsupportedOperationError; backends that do
    override them check their own capability flag first, so an unsupported
    operation never has a partial effect.

    Concrete subclasses that set ``backend_name`` are registered with
    BackendManager on definition.
    """
    backend_name: Optional[str] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        name = cls.__dict__.get('backend_name')
        if name:
            from tgzfs.core.backend_manager import BackendManager
            BackendManager.register_backend(name, cls)

    # --- Logging and capability checks ---
    def _log(self, msg, level=1, exc=None):
        from tgzfs.core.logging import debug_print
        debug_print(f"{type(self).__name__}: {msg}", level=level, exc=exc)

    def has_capability(self, capability: Capability) -> bool:
        return (self.capabilities() & capability) == capability

    def _require(self, capability: Capability, operation: str):
        if not self.has_capability(capability):
            self._log(f"refusing {operation}: missing {capability!r}", level=2)
            raise UnsupportedOperationError(
                f"{type(self).__name__} does not support {operation}")

    def _absent(self, operation):
        raise UnsupportedOperationError(f"{type(self).__name__} does not support {operation}")

    # --- Required operations ---
    @abstractmethod
    def capabilities(self) -> Capability:
        """Return the set of capabilities this backend supports."""
        pass

    @abstractmethod
    def open(self, path: str, mode: str = 'r', perm: int = 0o666) -> File:
        """
        Open a file.

        Args:
            path: Path within the backend
            mode: Python mode string ('r', 'w', 'a', 'x', optionally with '+'); always binary
            perm: Permission bits for newly created files

        Returns:
            An open File
        """
        pass

    @abstractmethod
    def stat(self, path: str) -> FileInfo:
        """
        Get information about a file or directory.

        Raises:
            FileNotFoundError: If nothing exists at path
        """
        pass

    @abstractmethod
    def read_dir(self, path: str) -> List[FileInfo]:
        """
        List a directory.

        Returns:
            FileInfo records sorted by name, ascending
        """
        pass

    # --- Mutating operations (absent unless a backend provides them) ---
    def create(self, path: str) -> File:
        """Create or truncate a file, opened for reading and writing."""
        return self.open(path, 'w+', 0o666)

    def mkdir(self, path: str, perm: int = 0o777) -> None:
        self._absent('mkdir')

    def mkdir_all(self, path: str, perm: int = 0o777) -> None:
        self._absent('mkdir_all')

    def rename(self, src: str, dst: str) -> None:
        self._absent('rename')

    def remove(self, path: str) -> None:
        self._absent('remove')

    def chmod(self, path: str, mode: int) -> None:
        self._absent('chmod')

    # --- Path operations ---
    def chroot(self, path: str) -> 'Filesystem':
        """
        Return a filesystem rooted at path. Paths given to the returned
        filesystem can never resolve outside it.
        """
        self._require(Capability.CHROOT, 'chroot')
        from tgzfs.backends.chroot import ChrootFS
        return ChrootFS(self, path)

    def contains(self, base: str, path: str, follow_symlinks: bool = True) -> bool:
        """
        True when path, already joined lexically beneath base, still resolves
        beneath base. Backends whose paths can alias (symlinks) override this.
        """
        return True

    def join(self, *elements: str) -> str:
        return path_resolver.join(*elements)

    def root(self) -> str:
        return '/'

    def exists(self, path: str) -> bool:
        try:
            self.stat(path)
            return True
        except FileNotFoundError:
            return False

    def __repr__(self):
        return f"<{type(self).__name__} root={self.root()!r}>"
