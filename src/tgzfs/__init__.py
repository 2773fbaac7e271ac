"""
tgzfs: Virtual filesystem backends and gzipped tarball extraction

A Python library providing one filesystem contract over several backends
(host directories, read-only embedded data, scoped views) and an extractor
that unpacks a .tar.gz into an isolated temp directory on a backend.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT

Public API:
    - Filesystem, File, FileInfo, Capability: the backend contract
    - OSFS, EmbedFS, ChrootFS: backends
    - extract, ExtractResult: tarball extraction
    - ConfigAPI: configuration

Example usage:
    from tgzfs import OSFS, extract, read_file, write_file
    with OSFS.temporary() as fs:
        write_file(fs, 'bundle.tar.gz', payload)
        with extract(fs, 'bundle.tar.gz') as result:
            print(read_file(result.filesystem, 'docs/readme.txt'))
"""

from .api.config_api import ConfigAPI
from .backends import ChrootFile, ChrootFS, EmbedFile, EmbedFS, OSFile, OSFS
from .core.backend_manager import BackendManager
from .core.base_filesystem import File, FileInfo, Filesystem
from .core.capabilities import Capability
from .core.errors import (
    ArchiveCloseError,
    ArchiveNotFoundError,
    ArchiveOpenError,
    ChmodError,
    CrossedBoundaryError,
    DecompressionError,
    EntryWriteError,
    ExtractionError,
    FileClosedError,
    MalformedArchiveError,
    ReadOnlyError,
    TempDirError,
    TgzfsError,
    UnsupportedEntryTypeError,
    UnsupportedOperationError,
)
from .directory_operations import remove_all, temp_dir, walk
from .extract import ExtractResult, extract
from .file_operations import copy_stream, read_file, write_file

__version__ = '0.1.0'
__all__ = [
    "ArchiveCloseError",
    "ArchiveNotFoundError",
    "ArchiveOpenError",
    "BackendManager",
    "Capability",
    "ChmodError",
    "ChrootFS",
    "ChrootFile",
    "ConfigAPI",
    "CrossedBoundaryError",
    "DecompressionError",
    "EmbedFS",
    "EmbedFile",
    "EntryWriteError",
    "ExtractResult",
    "ExtractionError",
    "File",
    "FileClosedError",
    "FileInfo",
    "Filesystem",
    "MalformedArchiveError",
    "OSFS",
    "OSFile",
    "ReadOnlyError",
    "TempDirError",
    "TgzfsError",
    "UnsupportedEntryTypeError",
    "UnsupportedOperationError",
    "copy_stream",
    "extract",
    "read_file",
    "remove_all",
    "temp_dir",
    "walk",
    "write_file",
]
