"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the duplicate finder.

Key Components:
---------------
- HashAlgorithm: Standardized interface for hash functions (xxHash64, SHA-256).
- Hasher: Interface for computing the quick (prefix) and full hashes of a file.
- FileGrouper: Interface for grouping files by size or hash values.
- SizeStage / HashStage: Interfaces for individual stages in the pipeline.
- DuplicateFinder: Interface for the engine coordinating all stages.
"""

from typing import Protocol, List, Dict, Iterable, Optional, Any
from dupfinder.core.models import (
    FileEntry,
    CandidateGroup,
    DuplicateGroups,
    ScanContext,
)


# ===== Interfaces =====

class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Implementations are incremental: `new()` returns a fresh hash object
    with `update()` and a way to turn it into a key.
    """

    def new(self) -> Any:
        """Returns a fresh, empty hash object."""
        ...

    def finish(self, state: Any) -> Any:
        """Turns a hash object into the grouping key."""
        ...


class Hasher(Protocol):
    """Interface for hashing files. Returns None for unreadable files."""
    def compute_quick_hash(self, file: FileEntry) -> Optional[int]: ...
    def compute_full_hash(self, file: FileEntry) -> Optional[str]: ...


class FileGrouper(Protocol):
    """
    Interface for grouping files by a computed key.
    Files whose key is None are left out of every group.
    """
    def group_by_size(self, files: Iterable[FileEntry]) -> Dict[int, List[FileEntry]]:
        ...

    def group_by_quick_hash(self, files: Iterable[FileEntry]) -> Dict[int, List[FileEntry]]:
        ...

    def group_by_full_hash(self, files: Iterable[FileEntry]) -> Dict[str, List[FileEntry]]:
        ...


# =============================
# Stage Interfaces
# =============================

class SizeStage(Protocol):
    """First stage: stat discovered paths and bucket them by length."""
    def process(self, paths: Iterable[str], context: ScanContext) -> List[CandidateGroup]:
        """
        Returns groups where each contains 2+ files of the same size.
        """
        ...


class HashStage(Protocol):
    """A stage that splits candidate groups by some content hash."""
    def process(self, groups: List[CandidateGroup], context: ScanContext) -> List[CandidateGroup]:
        """
        Returns the refined groups (2+ files each) for the next stage.
        """
        ...


class DuplicateFinder(Protocol):
    """Runs size → quick hash → full hash over a stream of paths."""
    def find_duplicates(self, paths: Iterable[str], context: ScanContext) -> DuplicateGroups:
        ...
