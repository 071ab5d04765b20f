"""
dupfinder — finds files with identical content across directory trees.

Core features:
- Three-stage detection: size → xxHash64 of the first 8 KiB → SHA-256 of the whole file
- Thread-pooled stages; unreadable files are skipped, never fatal
- Plain-text report with total potential space savings
- CLI interface (`dupfinder`)
"""

from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("dupfinder")
except PackageNotFoundError:
    import tomllib
    from pathlib import Path

    with open(Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from dupfinder.commands import ScanCommand, scan
from dupfinder.core import (
    ScanParams, ScanStats, FileEntry, ReportMetadata, InvalidRootError, HashingConfig)
from dupfinder.services import ReportService, ReportWriteError
from dupfinder.utils.convert_utils import ConvertUtils

__all__ = [
    "ScanCommand",
    "scan",
    "ScanParams",
    "ScanStats",
    "FileEntry",
    "ReportMetadata",
    "InvalidRootError",
    "HashingConfig",
    "ReportService",
    "ReportWriteError",
    "ConvertUtils",
    "__version__",
]
