"""
Capability flags declared by tgzfs backends.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import enum


class Capability(enum.IntFlag):
    """Operations a backend supports. Checked before any mutation is attempted."""
    READ = 1
    WRITE = 2
    READ_AND_WRITE = 4
    SEEK = 8
    TRUNCATE = 16
    LOCK = 32
    CHROOT = 64
    CHMOD = 128

    DEFAULT = READ | WRITE | READ_AND_WRITE | SEEK | TRUNCATE | LOCK
    ALL = DEFAULT | CHROOT | CHMOD
