"""
Core duplicate detection engine — walker, hasher, grouper, stages and pipeline.

- FileScannerImpl: recursive directory walk over one or more roots
- HasherImpl: xxHash64 quick hash of the first 8 KiB, SHA-256 full hash
- FileGrouperImpl + drop_singletons + merge_groups: grouping combinators
- SizeStageImpl / QuickHashStage / FullHashStage: thread-pooled stages
- DuplicateFinderImpl: size → quick hash → full hash pipeline
- Models: FileEntry, CandidateGroup, ScanParams, ScanContext, ScanStats

No UI dependencies — suitable for CLI and library usage.
"""

from .scanner import FileScannerImpl, InvalidRootError, validate_roots, walk_files
from .grouper import FileGrouperImpl, drop_singletons, merge_groups
from .hasher import HasherImpl, HashingConfig, XXHashAlgorithmImpl, SHA256AlgorithmImpl
from .stages import SizeStageImpl, QuickHashStage, FullHashStage
from .deduplicator import DuplicateFinderImpl
from .models import (
    FileEntry, CandidateGroup, DuplicateGroups, ReportMetadata,
    ScanContext, ScanParams, ScanStats, Stage)

__all__ = [
    "FileScannerImpl",
    "InvalidRootError",
    "validate_roots",
    "walk_files",
    "FileGrouperImpl",
    "drop_singletons",
    "merge_groups",
    "HasherImpl",
    "HashingConfig",
    "XXHashAlgorithmImpl",
    "SHA256AlgorithmImpl",
    "SizeStageImpl",
    "QuickHashStage",
    "FullHashStage",
    "DuplicateFinderImpl",
    "FileEntry",
    "CandidateGroup",
    "DuplicateGroups",
    "ReportMetadata",
    "ScanContext",
    "ScanParams",
    "ScanStats",
    "Stage",
]
