"""
File operations for tgzfs.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from typing import Optional

from tgzfs.core.base_filesystem import Filesystem
from tgzfs.core.global_config import GlobalConfig


def read_file(fs: Filesystem, path: str) -> bytes:
    """
    Read the entire contents of a file.
    """
    with fs.open(path, 'r') as f:
        return f.read()


def write_file(fs: Filesystem, path: str, data: bytes, perm: int = 0o666) -> None:
    """
    Write data to a file, creating or truncating it.
    """
    with fs.open(path, 'w', perm) as f:
        _write_all(f, data)


def _write_all(dst, data):
    view = memoryview(data)
    while view:
        written = dst.write(view)
        if not written:
            raise OSError(f"short write to {getattr(dst, 'name', dst)!r}")
        view = view[written:]


def copy_stream(src, dst, size: Optional[int] = None) -> int:
    """
    Copy bytes from one file-like object to another in chunks.

    Args:
        src: Object with read(n)
        dst: Object with write(data)
        size: Exact number of bytes to copy; None copies until EOF

    Returns:
        Number of bytes copied

    Raises:
        EOFError: If src ends before size bytes were read
    """
    chunk_size = GlobalConfig.get_copy_buffer_size()
    copied = 0
    while size is None or copied < size:
        want = chunk_size if size is None else min(chunk_size, size - copied)
        chunk = src.read(want)
        if not chunk:
            if size is not None:
                raise EOFError(f"unexpected end of data after {copied} of {size} bytes")
            break
        _write_all(dst, chunk)
        copied += len(chunk)
    return copied
