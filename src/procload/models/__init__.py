"""
Data models and structures for procload.

Configuration Models:
- Report thresholds and rendering options
- Snapshot collection and sample export settings

Document Models:
- Read-only views over the descriptive parts of a monitoring document

Result Models:
- Per-process rollups and the aggregated analysis result

All models use type hints and dataclasses.
"""

# Configuration models
from .config import (
    AppConfig,
    CollectConfig,
    ExportConfig,
    OUTPUT_FORMATS,
    ReportOptions,
)

# Document models
from .document import (
    MonitoringConfigInfo,
    SystemInfo,
    get_execution_timestamp,
    get_field,
    normalize_cpu_cores,
)

# Result models
from .results import AnalysisResult, ProcessStats, TimeRange

__all__ = [
    # Configuration
    "AppConfig",
    "CollectConfig",
    "ExportConfig",
    "OUTPUT_FORMATS",
    "ReportOptions",
    # Document
    "MonitoringConfigInfo",
    "SystemInfo",
    "get_execution_timestamp",
    "get_field",
    "normalize_cpu_cores",
    # Results
    "AnalysisResult",
    "ProcessStats",
    "TimeRange",
]
