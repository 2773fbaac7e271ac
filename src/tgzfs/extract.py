"""
Gzipped tarball extraction for tgzfs.

extract() unpacks a .tar.gz stored on a backend into a fresh temporary
directory on the same backend and hands back a filesystem scoped to it,
together with a cleanup callable that removes the directory again.

Failures are raised as ExtractionError subclasses. Partial output is not
removed when extraction fails: the error carries the temp directory path and
the cleanup callable, so the caller can inspect what was written before
cleaning up. The archive is read strictly in stream order and never held in
memory as a whole.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import gzip
import tarfile
import zlib
from typing import Callable, NamedTuple

from tgzfs.core import path_resolver
from tgzfs.core.base_filesystem import Filesystem
from tgzfs.core.capabilities import Capability
from tgzfs.core.errors import (
    ArchiveCloseError,
    ArchiveNotFoundError,
    ArchiveOpenError,
    ChmodError,
    DecompressionError,
    EntryWriteError,
    ExtractionError,
    MalformedArchiveError,
    TempDirError,
    TgzfsError,
    UnsupportedEntryTypeError,
)
from tgzfs.core.logging import debug_print
from tgzfs.directory_operations import remove_all, temp_dir
from tgzfs.file_operations import copy_stream

_FILE_TYPES = (tarfile.REGTYPE, tarfile.AREGTYPE)

_TYPE_NAMES = {
    tarfile.SYMTYPE: 'symlink',
    tarfile.LNKTYPE: 'hardlink',
    tarfile.CHRTYPE: 'character device',
    tarfile.BLKTYPE: 'block device',
    tarfile.FIFOTYPE: 'fifo',
    tarfile.CONTTYPE: 'contiguous file',
    tarfile.GNUTYPE_SPARSE: 'sparse file',
}


class ExtractResult(NamedTuple):
    """
    Outcome of a successful extraction.

    Attributes:
        filesystem: View of the backend rooted at the extracted tree
        path: The temp directory on the backend holding the tree
        cleanup: Removes the temp directory; safe to call more than once
    """
    filesystem: Filesystem
    path: str
    cleanup: Callable[[], None]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()


def _make_cleanup(fs, path):
    done = False

    def cleanup():
        nonlocal done
        if done:
            return
        remove_all(fs, path)
        done = True
        debug_print(f"[extract] Cleaned up {path}", level=2)

    return cleanup


def _close_after_failure(f, what):
    try:
        f.close()
    except Exception as e:
        debug_print(f"[extract] Error closing {what} after a failure: {e}", level=1, exc=e)
        return e
    return None


class _GzipReader:
    """
    Decompressing reader over an open archive.
    Codec failures surface as DecompressionError; tarfile passes them through untouched.
    """

    def __init__(self, fileobj, context):
        self._gzip = gzip.GzipFile(fileobj=fileobj, mode='rb')
        self._context = context

    def read(self, size=-1):
        try:
            return self._gzip.read(size)
        except (gzip.BadGzipFile, EOFError, zlib.error) as e:
            raise DecompressionError(
                f"cannot decompress {self._context['archive']}: {e}", **self._context) from e
        except OSError as e:
            raise ExtractionError(
                f"error reading {self._context['archive']}: {e}", **self._context) from e

    def close(self):
        self._gzip.close()


def _describe_type(member):
    return _TYPE_NAMES.get(member.type, repr(member.type.decode('ascii', 'replace')))


def extract(fs: Filesystem, archive: str) -> ExtractResult:
    """
    Extract a gzip-compressed tar archive into a new temp directory on fs.

    Only regular files and directories are supported. File permission bits
    are applied when the backend has the CHMOD capability.

    Args:
        fs: Mutable backend holding the archive; the tree is extracted onto it too
        archive: Path of the .tar.gz on fs

    Returns:
        ExtractResult with the scoped filesystem, the temp directory and a cleanup callable

    Raises:
        ArchiveNotFoundError: archive does not exist (nothing is created)
        ArchiveOpenError: archive exists but cannot be opened (nothing is created)
        TempDirError: the temp directory cannot be allocated (nothing is created)
        DecompressionError: the gzip layer is invalid
        MalformedArchiveError: the tar layer is invalid or truncated
        UnsupportedEntryTypeError: an entry is neither a regular file nor a directory
        EntryWriteError: an entry cannot be written to the backend
        ChmodError: permission bits cannot be applied
        ArchiveCloseError: everything else succeeded but closing the archive failed
    """
    debug_print(f"[extract] Extracting {archive}", level=2)
    try:
        f = fs.open(archive, 'r')
    except FileNotFoundError as e:
        raise ArchiveNotFoundError(f"archive not found: {archive}", archive=archive) from e
    except (OSError, TgzfsError) as e:
        raise ArchiveOpenError(f"cannot open archive {archive}: {e}", archive=archive) from e

    try:
        result = _unpack(fs, archive, f)
    except BaseException as error:
        close_error = _close_after_failure(f, archive)
        if isinstance(error, ExtractionError):
            debug_print(f"[extract] Extraction of {archive} failed: {error}", level=1, exc=error)
            error.add_close_error(close_error)
        raise

    try:
        f.close()
    except (OSError, TgzfsError) as e:
        raise ArchiveCloseError(f"error closing archive {archive}: {e}", archive=archive,
                                path=result.path, cleanup=result.cleanup) from e
    debug_print(f"[extract] Extracted {archive} into {result.path}", level=2)
    return result


def _unpack(fs, archive, f):
    try:
        tmp = temp_dir(fs)
    except (OSError, TgzfsError) as e:
        raise TempDirError(f"cannot create temp dir for {archive}: {e}", archive=archive) from e
    cleanup = _make_cleanup(fs, tmp)
    context = {'archive': archive, 'path': tmp, 'cleanup': cleanup}

    reader = _GzipReader(f, context)
    try:
        try:
            tar = tarfile.open(fileobj=reader, mode='r|')
        except tarfile.TarError as e:
            raise MalformedArchiveError(f"invalid tar stream in {archive}: {e}", **context) from e
        with tar:
            _untar(fs, tar, tmp, context)
    finally:
        reader.close()

    try:
        scoped = fs.chroot(tmp)
    except (OSError, TgzfsError) as e:
        raise ExtractionError(f"cannot scope filesystem to {tmp}: {e}", **context) from e
    return ExtractResult(scoped, tmp, cleanup)


def _untar(fs, tar, dst, context):
    while True:
        try:
            member = tar.next()
        except tarfile.TarError as e:
            raise MalformedArchiveError(f"invalid tar stream in {context['archive']}: {e}", **context) from e
        if member is None:
            return
        # stream mode would otherwise keep every header read so far
        tar.members = []

        try:
            target = fs.join(dst, path_resolver.relative(member.name))
        except TgzfsError as e:
            raise EntryWriteError(f"entry escapes the extraction root: {member.name}",
                                  entry=member.name, **context) from e
        mode = member.mode & 0o777

        if member.isdir():
            debug_print(f"[extract] dir  {member.name} mode={mode:o}", level=3)
            try:
                fs.mkdir_all(target, mode)
            except OSError as e:
                raise EntryWriteError(f"cannot create directory {member.name}: {e}",
                                      entry=member.name, **context) from e
        elif member.type in _FILE_TYPES:
            debug_print(f"[extract] file {member.name} size={member.size} mode={mode:o}", level=3)
            _make_file(fs, target, mode, tar.extractfile(member), member, context)
        else:
            entry_type = _describe_type(member)
            raise UnsupportedEntryTypeError(
                f"unable to untar type {entry_type} in file {member.name}",
                entry_type=entry_type, entry=member.name, **context)


def _make_file(fs, path, mode, contents, member, context):
    try:
        w = fs.create(path)
    except OSError as e:
        raise EntryWriteError(f"cannot create file {member.name}: {e}", entry=member.name, **context) from e

    try:
        try:
            copy_stream(contents, w, member.size)
        except (tarfile.TarError, EOFError) as e:
            raise MalformedArchiveError(f"truncated entry {member.name}: {e}", entry=member.name, **context) from e
        except OSError as e:
            raise EntryWriteError(f"cannot write file {member.name}: {e}", entry=member.name, **context) from e
    except BaseException as error:
        close_error = _close_after_failure(w, member.name)
        if isinstance(error, ExtractionError):
            if error.entry is None:
                error.entry = member.name
            error.add_close_error(close_error)
        raise

    try:
        w.close()
    except OSError as e:
        raise EntryWriteError(f"cannot close file {member.name}: {e}", entry=member.name, **context) from e

    if fs.has_capability(Capability.CHMOD):
        try:
            fs.chmod(path, mode)
        except OSError as e:
            raise ChmodError(f"cannot chmod {member.name} to {mode:o}: {e}", entry=member.name, **context) from e
