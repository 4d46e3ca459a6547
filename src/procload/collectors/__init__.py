"""
Snapshot collectors for producing monitoring documents from a live system.
"""

from .snapshot import (
    SnapshotCollector,
    collect_document,
    collect_system_info,
    format_cpu_time,
)

__all__ = [
    "SnapshotCollector",
    "collect_document",
    "collect_system_info",
    "format_cpu_time",
]
