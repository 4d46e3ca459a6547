"""
procload: process load diagnostics from CPU monitoring snapshots.

This package turns periodic per-process CPU/memory snapshots into per-process
statistics, classifies processes against warning and critical thresholds, and
renders a diagnostic report.

The package is organized into specialized modules:
- analysis: Aggregation of measurements into per-process statistics
- reporting: Section-based report rendering (Markdown, text, JSON)
- models: Data structures and type definitions
- sources: Loading monitoring documents from JSON
- config: Configuration management and validation
- validation: Input validation and error handling
- collectors: Live snapshot collection with psutil
- storage: Flattened sample export with Polars
- cli: Command-line interface

Usage:
    From command line:
        procload report cpu_monitor_log.json

    Programmatically:
        from procload import analyze, render, load_document, ReportOptions
        document = load_document("cpu_monitor_log.json")
        options = ReportOptions(cpu_warning_threshold=50)
        print(render(document, analyze(document, options), options))
"""

# Main interfaces
from .analysis import analyze
from .reporting import render
from .sources import load_document, parse_document
from .config import get_config, clear_config_cache, set_config_path
from .cli import main_cli

# Model classes for external use
from .models import (
    AnalysisResult,
    AppConfig,
    ProcessStats,
    ReportOptions,
    TimeRange,
)

# Validation utilities
from .validation import ParseError, ValidationError

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "analyze",
    "render",
    "load_document",
    "parse_document",
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "main_cli",
    # Models
    "AnalysisResult",
    "AppConfig",
    "ProcessStats",
    "ReportOptions",
    "TimeRange",
    # Errors
    "ParseError",
    "ValidationError",
]
