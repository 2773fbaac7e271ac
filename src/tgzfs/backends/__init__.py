"""
Filesystem backends for tgzfs.
Importing this package registers every backend with BackendManager.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from .chroot import ChrootFile, ChrootFS
from .embedfs import EmbedFile, EmbedFS
from .osfs import OSFile, OSFS

__all__ = ['ChrootFS', 'ChrootFile', 'EmbedFS', 'EmbedFile', 'OSFS', 'OSFile']
