"""
Utility functions for tgzfs: open-mode parsing and stat conversion.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import stat
from typing import NamedTuple


class OpenMode(NamedTuple):
    """Decoded form of a Python open() mode string."""
    mode: str
    readable: bool
    writable: bool
    create: bool
    truncate: bool
    append: bool
    exclusive: bool

    @property
    def mutating(self) -> bool:
        return self.writable or self.create or self.truncate or self.append or self.exclusive


def parse_mode(mode: str) -> OpenMode:
    """
    Parse a Python file mode string. All tgzfs files are binary, so 'b' is
    accepted and ignored while 't' is refused.

    Args:
        mode: One of 'r', 'w', 'a', 'x', optionally followed by '+' and/or 'b'

    Returns:
        OpenMode describing the requested access

    Raises:
        ValueError: If the mode string is not understood
    """
    if not mode or len(set(mode)) != len(mode) or set(mode) - set('rwaxb+'):
        raise ValueError(f"invalid mode: {mode!r}")
    kinds = [c for c in mode if c in 'rwax']
    if len(kinds) != 1:
        raise ValueError(f"mode must have exactly one of r/w/a/x: {mode!r}")
    kind = kinds[0]
    update = '+' in mode
    return OpenMode(
        mode=mode,
        readable=kind == 'r' or update,
        writable=kind != 'r' or update,
        create=kind in 'wax',
        truncate=kind == 'w',
        append=kind == 'a',
        exclusive=kind == 'x',
    )


def perm_bits(mode: int) -> int:
    """Strip file type bits, keeping permission and setuid/setgid/sticky bits."""
    return stat.S_IMODE(mode)
