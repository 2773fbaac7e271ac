#!/usr/bin/env python3
"""
tgzfs Example Script

This script demonstrates extracting a .tar.gz with the tgzfs library and
browsing the result through the scoped filesystem it returns.

Author: Tim Hosking
GitHub: https://github.com/Munger
"""

import argparse
import io
import os
import sys
import tarfile

from tgzfs import OSFS, ConfigAPI, ExtractionError, extract, read_file, walk, write_file


def list_contents(fs):
    """List every directory and file of a filesystem."""
    print("\nExtracted tree:")
    print("-" * 50)
    for dirpath, dirnames, filenames in walk(fs):
        for name in dirnames:
            print(f"{fs.join(dirpath, name)}/")
        for name in filenames:
            info = fs.stat(fs.join(dirpath, name))
            print(f"{fs.join(dirpath, name)} ({info.size} bytes, mode {info.perm:o})")


def show_file(fs, path):
    """Read and display the contents of a file."""
    print(f"\nReading file: {path}")
    print("-" * 50)
    content = read_file(fs, path)
    # Limit to 500 chars if too large
    text = content.decode('utf-8', errors='replace')
    print(text[:500] + ("..." if len(text) > 500 else ""))


def build_demo_archive():
    """Build a small .tar.gz in memory."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode='w:gz') as tar:
        for name, data, mode in (("docs/readme.txt", b"Hello from tgzfs!\n", 0o644),
                                 ("bin/run.sh", b"#!/bin/sh\necho hi\n", 0o755)):
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = mode
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def extract_and_show(fs, archive, read=None, keep=False):
    try:
        result = extract(fs, archive)
    except ExtractionError as e:
        print(f"Extraction failed: {e}")
        if e.path:
            print(f"Partial output left in: {e.path}" if keep else f"Removing partial output: {e.path}")
        if not keep:
            e.cleanup()
        return 1

    print(f"Extracted {archive} into {result.path}")
    list_contents(result.filesystem)
    if read:
        show_file(result.filesystem, read)
    if keep:
        print(f"\nKeeping {result.path}")
    else:
        result.cleanup()
    return 0


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="tgzfs Example Script")
    parser.add_argument("archive", nargs="?", help="Path of a .tar.gz to extract")
    parser.add_argument("--read", help="Read a file from the extracted tree")
    parser.add_argument("--keep", action="store_true", help="Keep the extracted tree")
    parser.add_argument("--debug", type=int, default=0, help="Debug level (0-4)")
    parser.add_argument("--demo", action="store_true", help="Run a full demonstration")
    args = parser.parse_args()

    ConfigAPI().debug_level = args.debug

    if args.demo:
        with OSFS.temporary() as fs:
            write_file(fs, "demo.tar.gz", build_demo_archive())
            return extract_and_show(fs, "demo.tar.gz", read="docs/readme.txt")

    if not args.archive:
        parser.print_help()
        return 2

    archive = os.path.abspath(args.archive)
    fs = OSFS(os.path.dirname(archive))
    return extract_and_show(fs, os.path.basename(archive), read=args.read, keep=args.keep)


if __name__ == "__main__":
    sys.exit(main())
