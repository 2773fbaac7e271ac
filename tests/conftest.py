"""
Shared pytest fixtures for the tgzfs tests.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import gzip
import io
import os
import sys
import tarfile

import pytest

# Add the src directory to the path if needed
src_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), "../src"))
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from tgzfs import OSFS
from tgzfs.api.config_api import ConfigAPI


@pytest.fixture(autouse=True)
def config():
    # Allow debug level to be set via environment variable for tests
    api = ConfigAPI()
    api.reset()
    debug_level = os.environ.get('TGZFS_DEBUG_LEVEL')
    if debug_level is not None:
        api.set('debug_level', int(debug_level))
    yield api
    api.reset()


@pytest.fixture
def osfs(tmp_path):
    return OSFS(str(tmp_path))


def make_tar(entries):
    """
    Build an uncompressed tar stream.

    entries: list of (name, data, mode) for files, (name, None, mode) for
    directories, or ready-made TarInfo objects carrying no data.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode='w', format=tarfile.GNU_FORMAT) as tar:
        for entry in entries:
            if isinstance(entry, tarfile.TarInfo):
                tar.addfile(entry)
                continue
            name, data, mode = entry
            info = tarfile.TarInfo(name)
            info.mode = mode
            info.mtime = 1700000000
            if data is None:
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            else:
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def make_tgz(entries):
    return gzip.compress(make_tar(entries))

