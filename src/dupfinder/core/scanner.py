"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Directory walker for the duplicate finder.
Features:
- Recursively scans one or more root directories with os.scandir
- Emits regular files only (no directories, symlinks, FIFOs, sockets or devices)
- Skips entries that fail during traversal instead of aborting the scan
- Emits each path once even when roots overlap
"""

import os
import logging
from typing import List, Iterator, Optional, Callable, Set, Tuple

logger = logging.getLogger(__name__)


class InvalidRootError(RuntimeError):
    """A scan root is missing or is not a directory."""


def validate_roots(roots: List[str]) -> None:
    """
    Checks every root before the pipeline starts.
    Raises:
        InvalidRootError: for the first root that does not exist or is not a directory
    """
    for root in roots:
        if not os.path.exists(root):
            error_msg = f"Directory does not exist: {root}"
            logger.error(error_msg)
            raise InvalidRootError(error_msg)
        if not os.path.isdir(root):
            error_msg = f"Not a directory: {root}"
            logger.error(error_msg)
            raise InvalidRootError(error_msg)


class FileScannerImpl:
    """
    Walks root directories and yields absolute paths of regular files.

    Attributes:
        roots: Root directories to scan, in caller order
    """

    def __init__(self, roots: List[str]):
        self.roots = [os.path.abspath(root) for root in roots]

    def scan(self, stopped_flag: Optional[Callable[[], bool]] = None) -> Iterator[str]:
        """
        Lazily yields file paths. The walk ends early once stopped_flag returns True;
        it is checked once per directory.
        """
        visited_dirs: Set[Tuple[int, int]] = set()
        found = 0

        for root in self.roots:
            logger.debug(f"Scanning directory: {root}")
            stack = [root]
            while stack:
                if stopped_flag and stopped_flag():
                    logger.debug("Scan interrupted by caller")
                    return

                directory = stack.pop()
                # Identity is (device, inode) so aliased roots are walked once
                dir_id = self._directory_id(directory)
                if dir_id is None or dir_id in visited_dirs:
                    continue
                visited_dirs.add(dir_id)

                for path, is_dir in self._list_directory(directory):
                    if is_dir:
                        stack.append(path)
                    else:
                        found += 1
                        yield path

        logger.debug(f"Walk completed. Found {found} files.")

    @staticmethod
    def _directory_id(directory: str) -> Optional[Tuple[int, int]]:
        try:
            st = os.stat(directory)
        except OSError as e:
            logger.debug(f"Skipping inaccessible directory {directory}: {e}")
            return None
        return st.st_dev, st.st_ino

    @staticmethod
    def _list_directory(directory: str) -> List[tuple]:
        """
        Returns (path, is_dir) pairs for the regular files and real
        subdirectories of `directory`. Unreadable entries are left out.
        """
        entries = []
        try:
            with os.scandir(directory) as it:
                for entry in it:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            entries.append((entry.path, True))
                        elif entry.is_file(follow_symlinks=False):
                            entries.append((entry.path, False))
                        else:
                            logger.debug(f"Skipping non-regular entry: {entry.path}")
                    except OSError as e:
                        logger.debug(f"Skipping {entry.path}: {e}")
        except OSError as e:
            logger.debug(f"Skipping inaccessible directory {directory}: {e}")
        return entries


def walk_files(roots: List[str], stopped_flag: Optional[Callable[[], bool]] = None) -> Iterator[str]:
    """Yields absolute paths of every regular file under roots."""
    return FileScannerImpl(roots).scan(stopped_flag=stopped_flag)
