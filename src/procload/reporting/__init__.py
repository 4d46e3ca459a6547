"""
Report generation for the procload package.

The renderer builds an ordered list of predicate-gated sections from an
analysis result and hands them to a formatter for the requested output format
(Markdown, plain text or JSON).
"""

from .formatters import (
    JsonFormatter,
    MarkdownFormatter,
    ReportFormatter,
    TextFormatter,
    create_formatter,
)
from .formatting import NOT_AVAILABLE, format_decimal, truncate_command
from .renderer import render
from .sections import (
    LoadStatus,
    REPORT_SECTIONS,
    ReportContext,
    Section,
    SectionDefinition,
    build_sections,
    classify_load,
)

__all__ = [
    "render",
    # Formatters
    "ReportFormatter",
    "MarkdownFormatter",
    "TextFormatter",
    "JsonFormatter",
    "create_formatter",
    # Sections
    "LoadStatus",
    "REPORT_SECTIONS",
    "ReportContext",
    "Section",
    "SectionDefinition",
    "build_sections",
    "classify_load",
    # Formatting
    "NOT_AVAILABLE",
    "format_decimal",
    "truncate_command",
]
