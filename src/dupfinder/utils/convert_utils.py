"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""
import time
from typing import Optional

REPORT_TIME_FORMAT = "%Y%m%d %H:%M:%S"


class ConvertUtils:
    @staticmethod
    def format_size(size_bytes: int) -> str:
        """
        Convert bytes to a human-readable string (e.g., "500 bytes", "1.46 KB").
        Units are binary multiples.
        """
        if size_bytes < 0:
            return "0 bytes"

        kb = 1024
        units = [
            ("TB", kb ** 4),
            ("GB", kb ** 3),
            ("MB", kb ** 2),
            ("KB", kb),
        ]
        for unit, factor in units:
            if size_bytes >= factor:
                return f"{size_bytes / factor:.2f} {unit}"
        return f"{size_bytes} bytes"

    @staticmethod
    def timestamp_to_human(timestamp: Optional[float] = None, fmt: str = REPORT_TIME_FORMAT) -> str:
        """
        Convert a Unix timestamp (default: now) to a local-time string.
        """
        if timestamp is None:
            timestamp = time.time()
        return time.strftime(fmt, time.localtime(timestamp))
