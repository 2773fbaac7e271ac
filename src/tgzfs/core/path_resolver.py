"""
Path resolution for tgzfs.
Normalizes virtual paths and confines them beneath a root, which is what
keeps scoped filesystems from leaking access to sibling directories.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import os
import posixpath
from typing import List, NamedTuple

from .errors import CrossedBoundaryError


class PathInfo(NamedTuple):
    """Information about a virtual path resolved beneath a root."""
    original_path: str
    virtual_path: str
    physical_path: str


def normalize(path: str) -> str:
    """Convert separators to '/' and collapse '.', '..' and repeated slashes."""
    if not path:
        return '.'
    path = posixpath.normpath(path.replace('\\', '/'))
    if path.startswith('//'):
        path = '/' + path.lstrip('/')
    return path


def split(path: str) -> List[str]:
    path = normalize(path).strip('/')
    if path in ('', '.'):
        return []
    return path.split('/')


def join(*elements: str) -> str:
    """
    Join path elements and normalize the result.

    Unlike os.path.join, an absolute element does not discard what came
    before it, so join(root, '/etc') stays beneath root.
    """
    parts = [e for e in elements if e]
    if not parts:
        return ''
    return normalize('/'.join(parts))


def is_cross_boundaries(path: str) -> bool:
    """True when a relative path climbs above its starting point."""
    path = normalize(path)
    return path == '..' or path.startswith('../')


def is_within(path: str, root: str) -> bool:
    """True when the host path lies at or below the host directory root."""
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)


def real_path(path: str, follow_symlinks: bool = True) -> str:
    """
    Canonical host path. Without follow_symlinks only the parent directory is
    resolved and the last component is kept as it is.
    """
    if follow_symlinks:
        return os.path.realpath(path)
    parent, name = os.path.split(path)
    return os.path.join(os.path.realpath(parent), name)


def relative(path: str) -> str:
    """
    Return the path relative to a root, refusing paths that climb out of it.
    A leading '/' is treated as the root.
    """
    cleaned = normalize(path).lstrip('/')
    if is_cross_boundaries(cleaned):
        raise CrossedBoundaryError(path)
    return cleaned or '.'


class PathResolver:
    """
    Resolves virtual paths beneath a physical root directory.
    '..' and absolute paths are clamped to the root, never escaping it.
    """

    def __init__(self, root: str):
        self.root = os.path.abspath(root)

    def resolve(self, path: str, follow_symlinks: bool = True) -> PathInfo:
        """
        Resolve a virtual path.

        Args:
            path: Virtual path, relative to the root ('/' refers to the root)
            follow_symlinks: When False a symlink in the last component is not
                followed, so the link itself can be removed or renamed

        Returns:
            PathInfo with the cleaned virtual path and its host path

        Raises:
            CrossedBoundaryError: If symlinks take the host path outside the root
        """
        # Anchoring at '/' before normalizing clamps any '..' to the root.
        virtual = posixpath.normpath('/' + (path or '').replace('\\', '/')).lstrip('/')
        physical = os.path.join(self.root, *virtual.split('/')) if virtual else self.root

        if not is_within(real_path(physical, follow_symlinks or not virtual), os.path.realpath(self.root)):
            raise CrossedBoundaryError(path)

        return PathInfo(
            original_path=path,
            virtual_path=virtual or '.',
            physical_path=physical
        )

