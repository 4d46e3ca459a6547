"""
Analysis result data models.

This module defines the per-process rollup built while folding measurements
and the result object returned by the aggregator. `ProcessStats` is mutable
only while the fold is running; `AnalysisResult` is frozen once produced.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class ProcessStats:
    """
    Rollup of every sample observed for a single pid.

    The full CPU history is retained so that ``avg_cpu`` is always the
    arithmetic mean of all recorded values rather than an incrementally
    updated running mean.
    """

    pid: int
    # Captured from the first sample only; a reused pid keeps its first command.
    command: str
    max_cpu: float
    min_cpu: float
    avg_cpu: float
    max_mem: float
    sample_count: int = 0
    timestamps: List[Optional[str]] = field(default_factory=list)
    cpu_history: List[float] = field(default_factory=list, repr=False)

    @classmethod
    def first_sample(
        cls, pid: int, command: str, cpu: float, mem: float, timestamp: Optional[str]
    ) -> "ProcessStats":
        """Seed a rollup from the first sample seen for ``pid``."""
        return cls(
            pid=pid,
            command=command,
            max_cpu=cpu,
            min_cpu=cpu,
            avg_cpu=cpu,
            max_mem=mem,
            sample_count=1,
            timestamps=[timestamp],
            cpu_history=[cpu],
        )

    def add_sample(self, cpu: float, mem: float, timestamp: Optional[str]) -> None:
        """Fold one more sample for this pid into the rollup."""
        self.cpu_history.append(cpu)
        self.max_cpu = max(self.max_cpu, cpu)
        self.min_cpu = min(self.min_cpu, cpu)
        self.avg_cpu = sum(self.cpu_history) / len(self.cpu_history)
        self.max_mem = max(self.max_mem, mem)
        self.timestamps.append(timestamp)
        self.sample_count += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pid": self.pid,
            "command": self.command,
            "max_cpu": self.max_cpu,
            "min_cpu": self.min_cpu,
            "avg_cpu": self.avg_cpu,
            "max_mem": self.max_mem,
            "sample_count": self.sample_count,
            "timestamps": list(self.timestamps),
        }


@dataclass(frozen=True)
class TimeRange:
    """First and last measurement timestamps; both None for an empty document."""

    start: Optional[str] = None
    end: Optional[str] = None


@dataclass(frozen=True)
class AnalysisResult:
    """
    Normalized outcome of analysing one monitoring document.

    ``critical_processes`` is always filtered from ``high_load_processes``
    and keeps its ordering (descending peak CPU, first-seen order on ties).
    """

    # Number of distinct pids across all measurements.
    total_processes: int
    high_load_processes: Tuple[ProcessStats, ...]
    critical_processes: Tuple[ProcessStats, ...]
    # 1, 5 and 15 minute load averages; all zero when unparseable.
    load_average: Tuple[float, float, float]
    cpu_cores: int
    load_per_core: float
    measurement_count: int
    time_range: TimeRange

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation of the result."""
        return {
            "total_processes": self.total_processes,
            "high_load_processes": [p.to_dict() for p in self.high_load_processes],
            "critical_processes": [p.to_dict() for p in self.critical_processes],
            "load_average": list(self.load_average),
            "cpu_cores": self.cpu_cores,
            "load_per_core": self.load_per_core,
            "measurement_count": self.measurement_count,
            "time_range": {"start": self.time_range.start, "end": self.time_range.end},
        }
