"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Implements file grouping strategies using FileEntry objects and a Hasher.

Grouping and singleton filtering are kept apart: FileGrouperImpl only maps
files to keys, `drop_singletons` removes groups that cannot hold duplicates,
and `merge_groups` combines the partial mappings returned by worker tasks.
"""

import logging
from collections import defaultdict
from typing import List, Dict, Any, Callable, Iterable, Mapping, Collection, TypeVar, Set

from dupfinder.core.interfaces import FileGrouper, Hasher
from dupfinder.core.models import FileEntry
from dupfinder.core.hasher import HasherImpl

logger = logging.getLogger(__name__)

K = TypeVar("K")


class FileGrouperImpl(FileGrouper):
    """
    A concrete implementation of FileGrouper.
    Uses an injected Hasher instance for flexibility and testability.
    """

    def __init__(self, hasher: Hasher = None):
        self.hasher = hasher or HasherImpl()

    def group_by_size(self, files: Iterable[FileEntry]) -> Dict[int, List[FileEntry]]:
        """Groups files by their size."""
        return self._group_by(files, lambda f: f.size)

    def group_by_quick_hash(self, files: Iterable[FileEntry]) -> Dict[int, List[FileEntry]]:
        """Groups files by the hash of their first bytes."""
        return self._group_by(files, self.hasher.compute_quick_hash)

    def group_by_full_hash(self, files: Iterable[FileEntry]) -> Dict[str, List[FileEntry]]:
        """Groups files by full content hash."""
        return self._group_by(files, self.hasher.compute_full_hash)

    @staticmethod
    def _group_by(files: Iterable[FileEntry], key_func: Callable[[FileEntry], Any]) -> Dict[Any, List[FileEntry]]:
        """
        Helper method to group files by any computed key.
        Args:
            files: Files to group
            key_func: Function that computes a hashable key from a FileEntry;
                      None means the file is dropped
        Returns:
            Dict[key, List[FileEntry]], singletons included
        """
        groups = defaultdict(list)
        skipped_files = 0
        for file in files:
            try:
                key = key_func(file)
            except OSError as e:
                logger.debug(f"Error processing {file.path}: {e}")
                key = None
            if key is None:
                skipped_files += 1
                continue
            groups[key].append(file)

        if skipped_files > 0:
            logger.debug(f"Skipped {skipped_files} unreadable files")

        return dict(groups)


def drop_singletons(groups: Mapping[K, Collection]) -> Dict[K, Collection]:
    """Keeps only groups with at least two members."""
    return {key: members for key, members in groups.items() if len(members) >= 2}


def merge_groups(partials: Iterable[Mapping[K, Iterable[str]]]) -> Dict[K, Set[str]]:
    """
    Reduces per-task mappings into one, uniting members that share a key.
    """
    merged: Dict[K, Set[str]] = defaultdict(set)
    for partial in partials:
        for key, members in partial.items():
            merged[key].update(members)
    return dict(merged)
