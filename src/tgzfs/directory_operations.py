"""
Directory operations for tgzfs.
Helpers built only on the filesystem contract, so they work on every backend.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import os
import secrets
import tempfile
from typing import Iterator, List, Optional, Tuple

from tgzfs.core.base_filesystem import Filesystem
from tgzfs.core.global_config import GlobalConfig
from tgzfs.core.logging import debug_print

LOCAL_TEMP_DIR = '.tmp'


def default_temp_location(fs: Filesystem) -> str:
    """
    Return where temp directories are allocated on fs.

    A configured temp_dir wins. Otherwise a backend rooted at '/' uses the
    system temp directory and any other backend uses '.tmp' below its root.
    """
    configured = GlobalConfig.get_temp_dir()
    if configured:
        return configured
    if fs.root() in ('', '/', os.sep):
        return tempfile.gettempdir()
    return LOCAL_TEMP_DIR


def temp_dir(fs: Filesystem, dir: Optional[str] = None, prefix: Optional[str] = None) -> str:
    """
    Create a new, uniquely named directory on fs.

    Args:
        fs: Backend to create the directory on
        dir: Parent directory (default: default_temp_location(fs))
        prefix: Name prefix (default: the configured temp_prefix)

    Returns:
        Path of the new directory on fs

    Raises:
        FileExistsError: If no unused name could be found
    """
    if dir is None:
        dir = default_temp_location(fs)
    if prefix is None:
        prefix = GlobalConfig.get_temp_prefix()
    fs.mkdir_all(dir, 0o700)
    stem = f"{prefix}{os.getpid()}-"
    for _ in range(tempfile.TMP_MAX):
        name = fs.join(dir, stem + secrets.token_hex(5))
        try:
            fs.mkdir(name, 0o700)
        except FileExistsError:
            continue
        debug_print(f"[directory_operations.temp_dir] Created temp dir: {name}", level=2)
        return name
    raise FileExistsError(f"No usable temporary directory name found in '{dir}'")


def remove_all(fs: Filesystem, path: str) -> None:
    """
    Remove path and everything below it. A missing path is not an error.
    Symlinks below path are removed, never followed.
    """
    try:
        info = fs.stat(path)
    except FileNotFoundError:
        return
    _remove_tree(fs, path, info.is_dir)
    debug_print(f"[directory_operations.remove_all] Removed: {path}", level=2)


def _remove_tree(fs, path, is_dir):
    if is_dir:
        for child in fs.read_dir(path):
            _remove_tree(fs, fs.join(path, child.name), child.is_dir)
    fs.remove(path)


def walk(fs: Filesystem, top: str = '.') -> Iterator[Tuple[str, List[str], List[str]]]:
    """
    Walk a directory tree top-down, like os.walk, in name order.

    Yields:
        (dirpath, dirnames, filenames) tuples
    """
    dirnames = []
    filenames = []
    for info in fs.read_dir(top):
        if info.is_dir:
            dirnames.append(info.name)
        else:
            filenames.append(info.name)
    yield top, dirnames, filenames
    for name in dirnames:
        yield from walk(fs, fs.join(top, name))
