"""Aggregation, derived metrics and rendering for the Africa COVID-19 report."""

from .loader import ParseError, load_cases
from .report import Report, build_report

__version__ = "0.1.0"

__all__ = ["ParseError", "load_cases", "Report", "build_report"]
