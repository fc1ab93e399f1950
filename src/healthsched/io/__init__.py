"""Report formatting."""

from healthsched.io.formatter import ReportFormatter

__all__ = ["ReportFormatter"]
