from .report_service import ReportService, ReportWriteError

__all__ = ["ReportService", "ReportWriteError"]
