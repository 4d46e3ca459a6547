"""
Read-only accessors for monitoring documents.

A monitoring document is the parsed JSON written by the snapshot producer. It
is kept as a plain mapping so that malformed sub-fields can be tolerated; the
helpers here pull out the descriptive parts with their fallbacks applied.

Producers write snake_case keys (`system_info`, `cpu_cores`); camelCase
spellings of the same keys are accepted as well.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

DEFAULT_CPU_CORES = 1


def get_field(mapping: Any, *keys: str, default: Any = None) -> Any:
    """
    Return the value of the first key present in ``mapping``.

    Args:
        mapping: Object to read from; anything that is not a mapping yields ``default``.
        *keys: Candidate keys in lookup order.
        default: Value returned when no key is present.
    """
    if not isinstance(mapping, Mapping):
        return default
    for key in keys:
        if key in mapping:
            return mapping[key]
    return default


def normalize_cpu_cores(value: Any) -> int:
    """Coerce a core count, falling back to 1 for absent, non-integer or non-positive values."""
    if isinstance(value, bool) or value is None:
        return DEFAULT_CPU_CORES
    if isinstance(value, float) and not value.is_integer():
        return DEFAULT_CPU_CORES
    try:
        cores = int(value)
    except (ValueError, TypeError, OverflowError):
        return DEFAULT_CPU_CORES
    return cores if cores >= 1 else DEFAULT_CPU_CORES


@dataclass(frozen=True)
class SystemInfo:
    """The `system_info` block of a monitoring document."""

    cpu_cores: int
    load_average: Optional[str]
    uptime: Optional[str]

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "SystemInfo":
        block = get_field(document, "system_info", "systemInfo", default={})
        load_average = get_field(block, "load_average", "loadAverage")
        uptime = get_field(block, "uptime")
        return cls(
            cpu_cores=normalize_cpu_cores(get_field(block, "cpu_cores", "cpuCores")),
            load_average=load_average if isinstance(load_average, str) else None,
            uptime=str(uptime) if uptime not in (None, "") else None,
        )


@dataclass(frozen=True)
class MonitoringConfigInfo:
    """
    The `monitoring_config` block, echoed verbatim in reports.

    None of these values take part in the analysis.
    """

    cpu_threshold: Optional[Any]
    interval_seconds: Optional[Any]
    measurement_count: Optional[Any]

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "MonitoringConfigInfo":
        block = get_field(document, "monitoring_config", "monitoringConfig", default={})
        return cls(
            cpu_threshold=get_field(block, "cpu_threshold", "cpuThreshold"),
            interval_seconds=get_field(block, "interval_seconds", "intervalSeconds", "interval"),
            measurement_count=get_field(block, "measurement_count", "measurementCount"),
        )


def get_execution_timestamp(document: Mapping[str, Any]) -> Optional[str]:
    value = get_field(document, "execution_timestamp", "executionTimestamp")
    return str(value) if value not in (None, "") else None
