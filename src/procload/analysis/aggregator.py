"""
Aggregation of monitoring snapshots into per-process statistics.

This module folds the ordered measurements of a monitoring document into one
`ProcessStats` rollup per pid, classifies the rollups against the warning and
critical CPU thresholds, and derives the system-wide load figures.

`analyze` is a pure function: the pid lookup is built fresh for every call
and nothing outside the returned `AnalysisResult` is touched.
"""

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..models.config import ReportOptions
from ..models.document import get_field, normalize_cpu_cores
from ..models.results import AnalysisResult, ProcessStats, TimeRange
from ..validation import ValidationError

logger = logging.getLogger(__name__)

ZERO_LOAD: Tuple[float, float, float] = (0.0, 0.0, 0.0)


def _as_number(value: Any) -> Optional[float]:
    """Convert a sample field to float, returning None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_pid(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def parse_load_average(raw: Any) -> Tuple[float, float, float]:
    """Parse a "1.52 1.38 1.25" style load average string.

    Parsing is all-or-nothing: if the value is absent, not a string, or any
    token fails to convert, the zero triple is returned. Fewer than three
    tokens are padded with zeros and extra tokens are ignored.

    Examples:
        >>> parse_load_average("1.5 2.0 2.5")
        (1.5, 2.0, 2.5)
        >>> parse_load_average("abc")
        (0.0, 0.0, 0.0)
    """
    if not isinstance(raw, str):
        return ZERO_LOAD
    try:
        values = [float(token) for token in raw.split()]
    except ValueError:
        logger.debug(f"Unparseable load average {raw!r}, using zeros")
        return ZERO_LOAD
    values = (values + [0.0, 0.0, 0.0])[:3]
    return values[0], values[1], values[2]


def iter_samples(measurement: Any) -> Iterator[Dict[str, Any]]:
    """Yield the usable process samples of one measurement, normalized.

    A measurement that is not an object, or whose ``processes`` is missing or
    not a list, yields nothing. Samples that are not objects, or that lack a
    usable ``pid`` or numeric ``cpu``, are skipped. A missing ``mem`` is 0.0
    and a missing ``command`` is the empty string.
    """
    processes = get_field(measurement, "processes")
    if not isinstance(processes, list):
        logger.debug("Measurement without a process list contributes no samples")
        return
    for sample in processes:
        if not isinstance(sample, Mapping):
            logger.debug(f"Skipping non-object process sample: {sample!r}")
            continue
        pid = _as_pid(sample.get("pid"))
        cpu = _as_number(sample.get("cpu"))
        if pid is None or cpu is None:
            logger.debug(f"Skipping process sample without usable pid/cpu: {sample!r}")
            continue
        mem = _as_number(sample.get("mem"))
        command = sample.get("command")
        cpu_time = sample.get("time")
        yield {
            "pid": pid,
            "cpu": cpu,
            "mem": 0.0 if mem is None else mem,
            "time": None if cpu_time is None else str(cpu_time),
            "command": "" if command is None else str(command),
        }


def fold_measurements(measurements: List[Any]) -> Dict[int, ProcessStats]:
    """
    Fold measurements, in order, into a pid -> ProcessStats mapping.

    The mapping preserves first-encounter order of pids.
    """
    stats_by_pid: Dict[int, ProcessStats] = {}

    for measurement in measurements:
        timestamp = get_field(measurement, "timestamp")
        for sample in iter_samples(measurement):
            stats = stats_by_pid.get(sample["pid"])
            if stats is None:
                stats_by_pid[sample["pid"]] = ProcessStats.first_sample(
                    pid=sample["pid"],
                    command=sample["command"],
                    cpu=sample["cpu"],
                    mem=sample["mem"],
                    timestamp=timestamp,
                )
            else:
                stats.add_sample(sample["cpu"], sample["mem"], timestamp)

    return stats_by_pid


def require_measurements(document: Mapping[str, Any]) -> List[Any]:
    """Return ``document["measurements"]``, raising ValidationError unless it is a list."""
    measurements = get_field(document, "measurements")
    if not isinstance(measurements, list):
        raise ValidationError(
            "Invalid monitoring document: missing or malformed measurements",
            field_name="measurements",
            value=type(measurements).__name__,
        )
    return measurements


def analyze(document: Mapping[str, Any], options: Optional[ReportOptions] = None) -> AnalysisResult:
    """Analyze a monitoring document against CPU severity thresholds.

    Args:
        document: Parsed monitoring document (see `procload.sources`).
        options: Thresholds to classify against; defaults to 80 / 90 percent.

    Returns:
        The frozen AnalysisResult for the document.

    Raises:
        ValidationError: If ``measurements`` is missing or not a list.
    """
    options = options or ReportOptions()

    measurements = require_measurements(document)
    stats_by_pid = fold_measurements(measurements)

    # sorted() is stable, so equal peaks keep first-encounter order.
    high_load = sorted(
        (s for s in stats_by_pid.values() if s.max_cpu >= options.cpu_warning_threshold),
        key=lambda s: s.max_cpu,
        reverse=True,
    )
    critical = [s for s in high_load if s.max_cpu >= options.cpu_critical_threshold]

    system_info = get_field(document, "system_info", "systemInfo", default={})
    load_average = parse_load_average(get_field(system_info, "load_average", "loadAverage"))
    cpu_cores = normalize_cpu_cores(get_field(system_info, "cpu_cores", "cpuCores"))

    if measurements:
        time_range = TimeRange(
            start=get_field(measurements[0], "timestamp"),
            end=get_field(measurements[-1], "timestamp"),
        )
    else:
        time_range = TimeRange()

    result = AnalysisResult(
        total_processes=len(stats_by_pid),
        high_load_processes=tuple(high_load),
        critical_processes=tuple(critical),
        load_average=load_average,
        cpu_cores=cpu_cores,
        load_per_core=load_average[0] / cpu_cores,
        measurement_count=len(measurements),
        time_range=time_range,
    )
    logger.debug(
        f"Analyzed {result.measurement_count} measurements: {result.total_processes} processes, "
        f"{len(high_load)} high load, {len(critical)} critical"
    )
    return result
