"""Diff and comment rendering for classified plan changes."""

from .diff_renderer import DiffRenderer, to_canonical_text
from .report_builder import (
    COMMENT_MARKER,
    MAX_COMMENT_BODY_SIZE,
    ReportBuilder,
    ReportSizeError,
)

__all__ = [
    "COMMENT_MARKER",
    "DiffRenderer",
    "MAX_COMMENT_BODY_SIZE",
    "ReportBuilder",
    "ReportSizeError",
    "to_canonical_text",
]
