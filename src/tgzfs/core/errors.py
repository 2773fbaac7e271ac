"""
Exception hierarchy for tgzfs.

Builtin exception types are mixed in where a caller would naturally catch
them (FileNotFoundError, PermissionError, ValueError), so the tgzfs classes
refine rather than replace the usual OS conditions.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import io
from typing import Callable, Optional


class TgzfsError(Exception):
    """Base class for every error raised by tgzfs."""


class UnsupportedOperationError(TgzfsError, io.UnsupportedOperation):
    """The backend (or this entry) does not provide the requested operation."""


class ReadOnlyError(UnsupportedOperationError):
    """A mutating operation was attempted on a read-only backend."""


class FileClosedError(TgzfsError, ValueError):
    """An operation was attempted on a closed file handle."""

    def __init__(self, name: str = ''):
        self.name = name
        super().__init__(f"file already closed: {name}" if name else "file already closed")


class CrossedBoundaryError(TgzfsError, PermissionError):
    """A path resolved outside the root of a scoped filesystem."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"path crosses filesystem boundary: {path}")


def _noop():
    pass


class ExtractionError(TgzfsError):
    """
    Base class for failures of :func:`tgzfs.extract.extract`.

    Attributes:
        archive: Path of the archive being extracted
        entry: Name of the archive entry being processed, if any
        path: Temporary directory holding the partial extraction ('' if none was created)
        cleanup: Callable removing ``path`` and its contents; always safe to call
        close_errors: Errors raised while closing the entry file and then the archive
            after this failure, in the order they happened
        close_error: The first of close_errors, or None
    """

    def __init__(self, message: str, archive: str = '', entry: Optional[str] = None,
                 path: str = '', cleanup: Optional[Callable[[], None]] = None):
        super().__init__(message)
        self.archive = archive
        self.entry = entry
        self.path = path
        self.cleanup = cleanup if cleanup is not None else _noop
        self.close_errors = []

    @property
    def close_error(self) -> Optional[BaseException]:
        return self.close_errors[0] if self.close_errors else None

    def add_close_error(self, error: Optional[BaseException]) -> None:
        if error is not None:
            self.close_errors.append(error)


class ArchiveNotFoundError(ExtractionError, FileNotFoundError):
    pass


class ArchiveOpenError(ExtractionError):
    pass


class ArchiveCloseError(ExtractionError):
    pass


class TempDirError(ExtractionError):
    pass


class DecompressionError(ExtractionError):
    pass


class MalformedArchiveError(ExtractionError):
    pass


class UnsupportedEntryTypeError(ExtractionError):
    """An archive entry is neither a regular file nor a directory."""

    def __init__(self, message: str, entry_type: str = '', **kwargs):
        super().__init__(message, **kwargs)
        self.entry_type = entry_type


class EntryWriteError(ExtractionError):
    pass


class ChmodError(ExtractionError):
    pass
