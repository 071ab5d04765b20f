"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for file discovery, pipeline state and scan statistics.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union, Callable, Set, Any
import logging
import os
import threading
from enum import Enum

logger = logging.getLogger(__name__)


# =============================
# Enums
# =============================

class Stage(str, Enum):
    SIZE = "Size grouping"
    QUICK = "Quick Hash"
    FULL = "Full Hash"

    @property
    def key(self) -> str:
        """Short name used as the stats key."""
        mapping = {
            Stage.SIZE: "size",
            Stage.QUICK: "quick",
            Stage.FULL: "full",
        }
        return mapping[self]

    @classmethod
    def from_key(cls, key: str) -> "Stage":
        for stage in cls:
            if stage.key == key:
                return stage
        raise ValueError(f"Unknown stage: {key}")


# ======================
#  Core Data Models
# ======================

DuplicateGroups = Dict[str, Set[str]]


@dataclass(frozen=True)
class FileEntry:
    """
    A regular file found during the walk.
    `size` is the length read when the file was bucketed, not a live value.
    """
    path: str
    size: int  # in bytes

    def __repr__(self):
        return f"<FileEntry path={self.path}, size={self.size}>"


@dataclass
class CandidateGroup:
    """
    Files that are still potential duplicates after a pipeline stage.
    All files share `size`; `key` is whatever the last stage grouped by.
    """
    size: int
    files: List[FileEntry]
    key: Any = None

    @property
    def file_count(self) -> int:
        return len(self.files)

    def __repr__(self):
        return f"<CandidateGroup size={self.size}, count={len(self.files)}>"


class ScanStats:
    """
    Statistics collected during one pipeline run.
    Only touched from the orchestrating thread.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.files_discovered: int = 0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

        for listener in self._listeners:
            listener(stage_name, self.stage_stats[stage_name])

    def notify_stage_start(self, stage_name: str, total: Optional[int] = None):
        """Notifies listeners that a new stage has started with `total` files to process."""
        for listener in self._listeners:
            listener(stage_name, {"status": "started", "total": total})

    def print_summary(self) -> str:
        labels = {
            "size": "Size Groups",
            "quick": "Quick Hash Groups",
            "full": "Confirmed Duplicate Groups",
        }

        lines = [
            "Scan Statistics:",
            f"Files discovered: {self.files_discovered}",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage.lower(), stage.title())
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


class ScanContext:
    """
    Per-scan state handed to every stage: stats plus a lock-guarded
    progress counter that worker threads may advance.
    """

    def __init__(
            self,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
    ):
        self.stats = ScanStats()
        self.progress_callback = progress_callback
        self.stopped_flag = stopped_flag
        self._lock = threading.Lock()
        self._stage: Optional[str] = None
        self._processed = 0
        self._total: Optional[int] = None

    def start_stage(self, stage: Stage, total: Optional[int]) -> None:
        with self._lock:
            self._stage = stage.value
            self._processed = 0
            self._total = total
        self.stats.notify_stage_start(stage.key, total)

    def advance(self, count: int = 1) -> None:
        with self._lock:
            self._processed += count
            stage, current, total = self._stage, self._processed, self._total
            # Callback runs under the lock so reports stay monotonic
            if self.progress_callback and stage is not None:
                self.progress_callback(stage, current, total)

    @property
    def processed(self) -> int:
        with self._lock:
            return self._processed

    def is_stopped(self) -> bool:
        return bool(self.stopped_flag and self.stopped_flag())


# ======================
#  Parameters
# ======================

@dataclass
class ScanParams:
    """Parameters for a scan with built-in validation."""
    roots: List[str]
    workers: Optional[int] = None

    def __post_init__(self):
        if not self.roots:
            raise ValueError("At least one root directory is required")

        if any(not str(root).strip() for root in self.roots):
            raise ValueError("Root directory cannot be empty")

        if self.workers is not None and self.workers < 1:
            raise ValueError("Worker count must be at least 1")

        self.roots = [os.path.abspath(str(root)) for root in self.roots]

    @property
    def max_workers(self) -> int:
        """Worker pool size, defaulting to the hardware concurrency."""
        return self.workers or os.cpu_count() or 1


@dataclass
class ReportMetadata:
    """Header information printed at the top of a report."""
    generated_by: str
    start_time: str
    end_time: str
    roots: List[str] = field(default_factory=list)
