"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/report_service.py
Plain-text duplicate report.
Consumes the digest → paths mapping produced by a scan; does not touch the scan itself.
"""
import os
import getpass
import logging
from typing import List, Tuple, Mapping, Iterable, Optional

from dupfinder.core.models import ReportMetadata
from dupfinder.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)

REPORT_TITLE = "Duplicate File Finder Report"


class ReportWriteError(OSError):
    """The report destination could not be created or written."""


class ReportService:
    @staticmethod
    def current_user() -> str:
        """Name recorded in the 'Generated by' header line."""
        try:
            return getpass.getuser()
        except (KeyError, OSError):
            return "unknown"

    @staticmethod
    def representative_size(paths: Iterable[str]) -> int:
        """
        Size of the first readable path in a group (all members share it).
        Returns 0 when none can be read.
        """
        for path in sorted(paths):
            try:
                return os.path.getsize(path)
            except OSError as e:
                logger.debug(f"Could not get size of {path}: {e}")
        return 0

    @staticmethod
    def sorted_entries(duplicates: Mapping[str, Iterable[str]]) -> List[Tuple[int, List[str]]]:
        """
        (size, sorted paths) per group, largest size first.
        Ties are broken by the first path so output is stable.
        """
        entries = []
        for paths in duplicates.values():
            ordered = sorted(paths)
            entries.append((ReportService.representative_size(ordered), ordered))
        entries.sort(key=lambda e: (-e[0], e[1][0] if e[1] else ""))
        return entries

    @staticmethod
    def total_savings(entries: List[Tuple[int, List[str]]]) -> int:
        """Bytes freed if all but one file of every group were removed."""
        return sum(size * max(len(paths) - 1, 0) for size, paths in entries)

    @staticmethod
    def render(duplicates: Mapping[str, Iterable[str]], metadata: ReportMetadata) -> str:
        """Builds the report text."""
        entries = ReportService.sorted_entries(duplicates)

        lines = [
            REPORT_TITLE,
            f"Generated by: {metadata.generated_by}",
            f"Start Time: {metadata.start_time}",
            f"End Time: {metadata.end_time}",
        ]
        if len(metadata.roots) == 1:
            lines.append(f"Base Directory: {metadata.roots[0]}")
        else:
            lines.append("Base Directories:")
            lines.extend(f" - {root}" for root in metadata.roots)
        lines.append("")

        savings = ReportService.total_savings(entries)
        lines.append(f"Total Potential Space Savings: {ConvertUtils.format_size(savings)}")
        lines.append("")

        for size, paths in entries:
            lines.append(f"Size: {ConvertUtils.format_size(size)}")
            lines.extend(paths)
            lines.append("")

        return "\n".join(lines) + "\n"

    @staticmethod
    def write(
            duplicates: Mapping[str, Iterable[str]],
            output_file: str,
            metadata: Optional[ReportMetadata] = None,
    ) -> None:
        """
        Writes the report to output_file.
        Raises:
            ReportWriteError: if the file cannot be created or written
        """
        if metadata is None:
            now = ConvertUtils.timestamp_to_human()
            metadata = ReportMetadata(
                generated_by=ReportService.current_user(),
                start_time=now,
                end_time=now,
            )
        text = ReportService.render(duplicates, metadata)
        try:
            with open(output_file, "w", encoding="utf-8", errors="surrogateescape") as f:
                f.write(text)
        except OSError as e:
            logger.error(f"Failed to write report to {output_file}: {e}")
            raise ReportWriteError(f"Cannot write report to {output_file}: {e}") from e
        logger.info(f"Duplicate files saved to {output_file}")
