#!/usr/bin/env python3
"""
dupfinder CLI — command line interface for duplicate file detection.
Scans one or more directories and writes a plain-text report of files with identical content.
Never modifies the scanned trees.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import List, Dict, Optional, NoReturn
import logging

from tqdm import tqdm

from dupfinder import __version__
from dupfinder.commands import ScanCommand
from dupfinder.core.models import DuplicateGroups, ReportMetadata, ScanParams, Stage
from dupfinder.core.scanner import InvalidRootError
from dupfinder.services.report_service import ReportService, ReportWriteError
from dupfinder.utils.convert_utils import ConvertUtils, REPORT_TIME_FORMAT

logger = logging.getLogger("dupfinder")

DEFAULT_REPORT_FILENAME = "duplicate_file_report.txt"
DEFAULT_LOG_FILENAME = "duplicate_finder.log"
LOG_HANDLER_NAME = "dupfinder-cli"

EPILOG_TEXT = """
Examples:
  Scan the current directory
  %(prog)s

  Scan one directory, write the report to ~/reports/
  %(prog)s ~/Downloads -o ~/reports

  Find duplicates shared between two trees
  %(prog)s -d ~/Photos /mnt/backup/Photos -o photos_report.txt
"""


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._bar: Optional[tqdm] = None
        self._bar_stage: Optional[str] = None
        self._log_handler: Optional[logging.Handler] = None

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupfinder",
            description="Scans the specified directory recursively for duplicate files.",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        inputs = parser.add_mutually_exclusive_group()
        inputs.add_argument(
            "directory",
            nargs="?",
            default=None,
            help="Directory to scan for duplicates (default: current directory)"
        )
        inputs.add_argument(
            "--directories", "-d",
            nargs="+",
            default=None,
            metavar="DIR",
            help="One or more directories to scan for duplicates"
        )

        parser.add_argument(
            "--output", "-o",
            default=DEFAULT_REPORT_FILENAME,
            metavar="FILE",
            help=f"Output file or directory for the report. Default: {DEFAULT_REPORT_FILENAME}"
        )
        parser.add_argument(
            "--workers", "-w",
            type=int,
            default=None,
            metavar="N",
            help="Number of worker threads. Default: number of CPUs"
        )
        parser.add_argument(
            "--log-file",
            default=DEFAULT_LOG_FILENAME,
            metavar="PATH",
            help=f"Log file path. Default: {DEFAULT_LOG_FILENAME}"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress progress bars and non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and log at DEBUG level"
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        )

        return parser.parse_args(args)

    @staticmethod
    def collect_roots(args: argparse.Namespace) -> List[str]:
        """Directories to scan, in the order given."""
        if args.directories:
            return list(args.directories)
        if args.directory:
            return [args.directory]
        return [os.getcwd()]

    def validate_roots(self, roots: List[str]) -> None:
        """Every root must be an existing directory."""
        for root in roots:
            if not os.path.isdir(root):
                logger.error(f"Invalid directory: {root}")
                self.error_exit(f"'{root}' is not a valid directory")

    @staticmethod
    def resolve_output(output: str) -> str:
        """An existing directory receives the default report file name."""
        if os.path.isdir(output):
            return os.path.join(output, DEFAULT_REPORT_FILENAME)
        return output

    def setup_logging(self, log_file: str) -> None:
        """
        Attaches a file handler to the package logger.
        Format: [YYYYMMDD HH:MM:SS] [LEVEL] message
        """
        try:
            handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            self.warning(f"Cannot open log file {log_file}: {e}")
            return
        handler.set_name(LOG_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(message)s",
            datefmt=REPORT_TIME_FORMAT
        ))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if self.verbose else logging.INFO)
        self._log_handler = handler

    def teardown_logging(self) -> None:
        if self._log_handler is not None:
            logger.removeHandler(self._log_handler)
            self._log_handler.close()
            self._log_handler = None
            logger.setLevel(logging.NOTSET)

    def stage_listener(self, stage_key: str, data: Dict) -> None:
        """Opens the stage's bar as soon as the stage starts, even if it has no work."""
        if self.quiet or data.get("status") != "started":
            return
        self.open_progress(Stage.from_key(stage_key).value, data.get("total"))

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - one tqdm bar per pipeline stage."""
        if self.quiet:
            return

        if stage != self._bar_stage:
            self.open_progress(stage, total)

        self._bar.update(current - self._bar.n)

    def open_progress(self, stage: str, total: Optional[int]) -> None:
        self.close_progress()
        self._bar = tqdm(total=total, desc=stage, unit="file", file=sys.stderr, leave=True)
        self._bar_stage = stage

    def close_progress(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
            self._bar_stage = None

    def run_scan(self, params: ScanParams) -> DuplicateGroups:
        """Execute the scan, printing statistics in verbose mode."""
        command = ScanCommand()
        try:
            duplicates, stats = command.execute(
                params,
                progress_callback=self.progress_callback,
                stage_listener=self.stage_listener,
            )
        except InvalidRootError as e:
            self.error_exit(str(e))
        finally:
            self.close_progress()

        if not self.quiet:
            print(f"{stats.files_discovered} files identified across {len(params.roots)} directories")
        if self.verbose:
            print(stats.print_summary())

        return duplicates

    def write_report(self, duplicates: DuplicateGroups, output_file: str,
                     start_time: str, roots: List[str]) -> None:
        metadata = ReportMetadata(
            generated_by=ReportService.current_user(),
            start_time=start_time,
            end_time=ConvertUtils.timestamp_to_human(),
            roots=roots,
        )
        try:
            ReportService.write(duplicates, output_file, metadata)
        except ReportWriteError as e:
            self.error_exit(f"Error writing output: {e}")

        if not self.quiet:
            print(f"Duplicate file report saved to {output_file}")
        logger.info(f"Duplicate file report saved to {output_file}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet

        if args.workers is not None and args.workers < 1:
            self.error_exit("--workers must be at least 1")

        self.setup_logging(args.log_file)
        try:
            self._run(args)
        finally:
            self.teardown_logging()

    def _run(self, args: argparse.Namespace) -> None:
        roots = self.collect_roots(args)
        self.validate_roots(roots)

        params = ScanParams(roots=roots, workers=args.workers)
        output_file = self.resolve_output(args.output)
        start_time = ConvertUtils.timestamp_to_human(self.start_time)

        if not self.quiet:
            if len(params.roots) == 1:
                print(f"Scanning directory: {params.roots[0]}")
            else:
                print(f"Scanning {len(params.roots)} directories")
            print(f"Output will be saved to: {output_file}")

        duplicates = self.run_scan(params)

        if not duplicates:
            if not self.quiet:
                print("No duplicate files found.")
            logger.info("No duplicate files found.")
        else:
            self.write_report(duplicates, output_file, start_time, params.roots)

        if self.verbose:
            elapsed = time.time() - self.start_time
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
