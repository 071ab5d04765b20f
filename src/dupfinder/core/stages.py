"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Pipeline stages for the duplicate finder.

CLASS HIERARCHY
---------------
PooledStageBase : Owns the worker pool size and the fan-out/merge helper
SizeStageImpl   : Stats discovered paths and buckets them by exact length
QuickHashStage  : Splits each size bucket by xxHash64 of the first 8 KiB
FullHashStage   : Splits each candidate group by SHA-256 of the whole file

STAGE CONTRACTS
---------------
Each stage implements `process()` which:
  • Accepts the survivors of the previous stage
  • Returns only groups with 2+ members
  • Drops files that fail to stat/open/read without touching their siblings
  • Advances the context's progress counter (stage name, processed, total)

CONCURRENCY
-----------
Work units (paths for the size stage, groups for the hash stages) are
independent. Each task runs in a ThreadPoolExecutor worker, opens its own
files, and returns a local result; the calling thread merges them. Worker
threads never write to shared structures other than the context's
lock-guarded progress counter.
"""

import os
import stat
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Dict, Iterable, Optional, Callable, TypeVar

from dupfinder.core.models import FileEntry, CandidateGroup, ScanContext, Stage
from dupfinder.core.grouper import FileGrouperImpl, drop_singletons
from dupfinder.core.interfaces import SizeStage, HashStage

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


#=============================
# Base Class
#=============================
class PooledStageBase:
    """
    Base class for stages that fan work out to a thread pool.
    """

    def __init__(self, grouper: FileGrouperImpl, max_workers: Optional[int] = None):
        self.grouper = grouper
        self.max_workers = max_workers or os.cpu_count() or 1

    def _map(self, func: Callable[[T], R], items: Iterable[T]) -> List[R]:
        """
        Runs func over items in the pool and returns the results.
        Result order is irrelevant to every caller.
        """
        items = list(items)
        if not items:
            return []
        pool = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            results = list(pool.map(func, items))
        except BaseException:
            # Ctrl+C: drop queued tasks, only the running ones are waited for
            pool.shutdown(wait=True, cancel_futures=True)
            raise
        pool.shutdown(wait=True)
        return results


# =============================
# Individual Stages
# =============================
class SizeStageImpl(PooledStageBase, SizeStage):

    def process(self, paths: Iterable[str], context: ScanContext) -> List[CandidateGroup]:
        """
        Group by file size.
        Returns list of CandidateGroups with 2+ files of same size.
        """
        paths = list(paths)
        context.stats.files_discovered = len(paths)
        context.start_stage(Stage.SIZE, len(paths))

        def stat_path(path: str) -> Optional[FileEntry]:
            try:
                return self._stat_entry(path)
            finally:
                context.advance()

        entries = [entry for entry in self._map(stat_path, paths) if entry is not None]
        size_groups = drop_singletons(self.grouper.group_by_size(entries))

        logger.info(f"{len(paths)} files identified, {len(size_groups)} file sizes with candidates")
        return [
            CandidateGroup(size=size, files=files, key=size)
            for size, files in size_groups.items()
        ]

    @staticmethod
    def _stat_entry(path: str) -> Optional[FileEntry]:
        """Reads the current length of a path, or None if it is gone or no longer a regular file."""
        try:
            st = os.stat(path, follow_symlinks=False)
        except OSError as e:
            logger.debug(f"Could not get size of {path}: {e}")
            return None
        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping {path}: no longer a regular file")
            return None
        return FileEntry(path=path, size=st.st_size)


class QuickHashStage(PooledStageBase, HashStage):
    """One task per size bucket; buckets share no state."""

    def process(self, groups: List[CandidateGroup], context: ScanContext) -> List[CandidateGroup]:
        context.start_stage(Stage.QUICK, sum(g.file_count for g in groups))

        def split_bucket(group: CandidateGroup) -> List[CandidateGroup]:
            hash_groups = drop_singletons(self.grouper.group_by_quick_hash(group.files))
            context.advance(group.file_count)
            return [
                CandidateGroup(size=group.size, files=files, key=qhash)
                for qhash, files in hash_groups.items()
            ]

        new_groups = [g for partial in self._map(split_bucket, groups) for g in partial]
        logger.info(f"{len(new_groups)} quick hash groups identified")
        return new_groups


class FullHashStage(PooledStageBase, HashStage):
    """One task per candidate group. Output keys are SHA-256 hex digests."""

    def process(self, groups: List[CandidateGroup], context: ScanContext) -> List[CandidateGroup]:
        context.start_stage(Stage.FULL, sum(g.file_count for g in groups))

        def verify_group(group: CandidateGroup) -> Dict[str, List[FileEntry]]:
            files = self._advancing(group.files, context)
            return drop_singletons(self.grouper.group_by_full_hash(files))

        confirmed = []
        for partial, group in zip(self._map(verify_group, groups), groups):
            for digest, files in partial.items():
                confirmed.append(CandidateGroup(size=group.size, files=files, key=digest))

        logger.info(f"{len(confirmed)} duplicate groups confirmed")
        return confirmed

    @staticmethod
    def _advancing(files: Iterable[FileEntry], context: ScanContext) -> Iterable[FileEntry]:
        """Yields files, advancing progress after each one has been hashed."""
        for file in files:
            yield file
            context.advance()
