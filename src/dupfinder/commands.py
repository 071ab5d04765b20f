"""
Scan command orchestrator.
This is the single entry point for business logic, used by the CLI and by library callers.
"""
import logging
from typing import List, Dict, Optional, Callable, Tuple

from dupfinder.core.models import DuplicateGroups, ScanParams, ScanContext, ScanStats
from dupfinder.core.scanner import FileScannerImpl, validate_roots
from dupfinder.core.deduplicator import DuplicateFinderImpl

logger = logging.getLogger(__name__)


class ScanCommand:
    """
    Orchestrates the whole scan:
    1. Validate the roots
    2. Walk them lazily
    3. Run the size → quick hash → full hash pipeline

    Usage:
        params = ScanParams(roots=["/data/photos", "/backup/photos"])
        duplicates, stats = ScanCommand().execute(
            params,
            progress_callback=cli_progress_printer,
        )
    """

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
            stage_listener: Optional[Callable[[str, Dict], None]] = None
    ) -> Tuple[DuplicateGroups, ScanStats]:
        """
        Execute a scan with given parameters.

        Args:
            params: Validated scan parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool, checked by the walker only
            stage_listener: (stage_key: str, data: dict) -> None, called when a stage
                starts (status "started", total) and when its statistics are recorded

        Returns:
            Tuple of (duplicate groups keyed by digest, statistics)

        Raises:
            InvalidRootError: If any root is missing or not a directory
        """
        validate_roots(params.roots)

        context = ScanContext(progress_callback=progress_callback, stopped_flag=stopped_flag)
        if stage_listener:
            context.stats.add_listener(stage_listener)
        scanner = FileScannerImpl(params.roots)
        finder = DuplicateFinderImpl(max_workers=params.max_workers)

        logger.info(f"Starting duplicate file detection across {len(params.roots)} directories")
        duplicates = finder.find_duplicates(scanner.scan(stopped_flag=context.is_stopped), context)
        return duplicates, context.stats


def scan(
        roots: List[str],
        workers: Optional[int] = None,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
        stopped_flag: Optional[Callable[[], bool]] = None
) -> DuplicateGroups:
    """
    Finds files with identical content under `roots`.
    Returns a mapping of SHA-256 hex digest to the set of absolute paths sharing it;
    every set has at least two members.
    """
    duplicates, _ = ScanCommand().execute(
        ScanParams(roots=[str(root) for root in roots], workers=workers),
        progress_callback=progress_callback,
        stopped_flag=stopped_flag,
    )
    return duplicates
