"""
Configuration data models.

This module contains the configuration structures for report generation,
snapshot collection and sample export, plus the root object that aggregates
them. Values are loaded from `config.toml` and overridden by CLI flags.
"""

from dataclasses import dataclass, field, replace
from typing import Literal, Optional

OutputFormat = Literal["markdown", "json", "text"]

OUTPUT_FORMATS = ["markdown", "json", "text"]


@dataclass(frozen=True)
class ReportOptions:
    """
    Severity thresholds and rendering options for a single analysis.

    No ordering is enforced between the two thresholds; a critical threshold
    below the warning threshold is legal and simply makes every high-load
    process critical.
    """

    # [report] - CPU percentage at or above which a process is "high load".
    cpu_warning_threshold: float = 80.0
    # [report] - CPU percentage at or above which a high-load process is "critical".
    cpu_critical_threshold: float = 90.0
    # [report] - Whether the recommendations section is rendered.
    include_recommendations: bool = True
    # [report] - One of "markdown", "json", "text".
    output_format: OutputFormat = "markdown"

    def with_overrides(
        self,
        cpu_warning_threshold: Optional[float] = None,
        cpu_critical_threshold: Optional[float] = None,
        include_recommendations: Optional[bool] = None,
        output_format: Optional[str] = None,
    ) -> "ReportOptions":
        """Return a copy with every non-None argument applied."""
        changes = {
            "cpu_warning_threshold": cpu_warning_threshold,
            "cpu_critical_threshold": cpu_critical_threshold,
            "include_recommendations": include_recommendations,
            "output_format": output_format,
        }
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


@dataclass
class CollectConfig:
    """
    Configuration for live snapshot collection (`procload collect`).
    """

    # [collect] - Seconds to wait between two measurements.
    interval_seconds: float = 1.0
    # [collect] - Number of measurements in a collected document.
    measurement_count: int = 5
    # [collect] - Keep only the N busiest processes of each measurement.
    top_processes: int = 20
    # [collect] - Informational threshold echoed into `monitoring_config`.
    cpu_threshold: float = 80.0


@dataclass
class ExportConfig:
    """
    Configuration for the flattened sample export.
    """

    # [export] - Parquet compression algorithm.
    compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy"


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    # [general] - Root logger level name.
    log_level: str = "INFO"
    report: ReportOptions = field(default_factory=ReportOptions)
    collect: CollectConfig = field(default_factory=CollectConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
