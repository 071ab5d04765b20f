"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Implements the pipeline-based duplicate finder:
    size → quick hash (first 8 KiB) → full hash (SHA-256)
"""
import time
import logging
from typing import List, Tuple, Iterable, Optional

from dupfinder.core.models import CandidateGroup, ScanContext, DuplicateGroups
from dupfinder.core.grouper import FileGrouperImpl, merge_groups
from dupfinder.core.interfaces import DuplicateFinder, HashStage
from dupfinder.core.stages import SizeStageImpl, QuickHashStage, FullHashStage

logger = logging.getLogger(__name__)


# =============================
# Main Duplicate Finder Class
# =============================
class DuplicateFinderImpl(DuplicateFinder):
    """
    Runs the three stages in order and collects per-stage statistics
    into the context it is given.
    """
    def __init__(self, grouper: Optional[FileGrouperImpl] = None, max_workers: Optional[int] = None):
        self.grouper = grouper or FileGrouperImpl()
        self.max_workers = max_workers

    def find_duplicates(self, paths: Iterable[str], context: ScanContext) -> DuplicateGroups:
        """
        Main pipeline.
        Args:
            paths: Discovered file paths (any iterable, consumed once)
            context: Per-scan progress and statistics holder
        Returns:
            Mapping of SHA-256 hex digest to the set of paths sharing it
        """
        stats = context.stats
        total_start_time = time.time()

        size_stage = SizeStageImpl(self.grouper, self.max_workers)
        start_time = time.time()
        groups = size_stage.process(paths, context)
        DuplicateFinderImpl._update_stats(context, "size", time.time() - start_time, groups)

        for stage_name, stage in self._build_pipeline():
            start_time = time.time()
            groups = stage.process(groups, context)
            DuplicateFinderImpl._update_stats(context, stage_name, time.time() - start_time, groups)

        duplicates = merge_groups(
            {group.key: [f.path for f in group.files]} for group in groups
        )

        stats.total_time = time.time() - total_start_time
        logger.info(f"{len(duplicates)} duplicate groups identified.")
        return duplicates

    def _build_pipeline(self) -> List[Tuple[str, HashStage]]:
        return [
            ("quick", QuickHashStage(self.grouper, self.max_workers)),
            ("full", FullHashStage(self.grouper, self.max_workers)),
        ]

    @staticmethod
    def _update_stats(
        context: ScanContext,
        stage: str,
        duration: float,
        groups: List[CandidateGroup],
    ):
        """Records how many groups and files survived a stage."""
        context.stats.update_stage(
            stage_name=stage,
            groups_found=len(groups),
            files_processed=sum(g.file_count for g in groups),
            duration=duration
        )
