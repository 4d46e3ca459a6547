"""
Live snapshot collection using the 'psutil' library.

This module produces monitoring documents in the same shape that the
aggregator consumes: a list of timestamped measurements, each holding the CPU
and memory usage of the busiest processes at that instant, together with the
`system_info` and `monitoring_config` blocks.

Per-process CPU percentages are computed by psutil relative to the previous
call on the same `psutil.Process` object, so the collector keeps the objects
it has seen between measurements and primes them once before the first one.
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

import psutil

from ..models.config import CollectConfig

logger = logging.getLogger(__name__)

_SKIPPABLE_ERRORS = (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess)


def format_cpu_time(seconds: float) -> str:
    """Format accumulated CPU seconds as ``M:SS`` (the `ps` TIME column style)."""
    total = int(seconds)
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def _command_line(info: Dict[str, Any]) -> str:
    cmdline = info.get("cmdline")
    if cmdline:
        return " ".join(cmdline)
    return info.get("name") or ""


class SnapshotCollector:
    """
    Samples CPU and memory usage of running processes.

    Attributes:
        top_n: Number of busiest processes kept per measurement.
        _tracked: psutil.Process objects keyed by pid, reused so that
            `cpu_percent(None)` measures the time since the previous sample.
    """

    _ITER_ATTRS = ["pid", "name", "cmdline", "cpu_times", "memory_percent"]

    def __init__(self, top_n: int = 20):
        self.top_n = top_n
        self._tracked: Dict[int, psutil.Process] = {}

    def _track(self, proc: psutil.Process) -> psutil.Process:
        known = self._tracked.get(proc.pid)
        # psutil.Process equality includes the creation time, so a reused pid
        # starts a fresh CPU baseline.
        if known is None or known != proc:
            self._tracked[proc.pid] = proc
            return proc
        return known

    def prime(self) -> None:
        """Initialize CPU counters for every running process."""
        for proc in psutil.process_iter(["pid"]):
            try:
                self._track(proc).cpu_percent(None)
            except _SKIPPABLE_ERRORS:
                continue
        logger.debug(f"Primed CPU counters for {len(self._tracked)} processes")

    def collect_measurement(self) -> Dict[str, Any]:
        """
        Take one measurement of the busiest processes.

        Returns:
            A measurement dict: ``{"timestamp": str, "processes": [sample, ...]}``
            with samples ordered by descending CPU usage.
        """
        samples: List[Dict[str, Any]] = []
        seen = set()
        for proc in psutil.process_iter(self._ITER_ATTRS):
            try:
                tracked = self._track(proc)
                cpu = tracked.cpu_percent(None)
            except _SKIPPABLE_ERRORS:
                continue
            info = proc.info
            seen.add(proc.pid)
            cpu_times = info.get("cpu_times")
            samples.append({
                "pid": proc.pid,
                "cpu": round(cpu, 1),
                "mem": round(info.get("memory_percent") or 0.0, 1),
                "time": format_cpu_time(cpu_times.user + cpu_times.system) if cpu_times else "0:00",
                "command": _command_line(info),
            })

        for pid in list(self._tracked):
            if pid not in seen:
                del self._tracked[pid]

        samples.sort(key=lambda sample: sample["cpu"], reverse=True)
        return {
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "processes": samples[: self.top_n],
        }


def collect_system_info() -> Dict[str, Any]:
    """Describe the local machine in the `system_info` document format."""
    one, five, fifteen = psutil.getloadavg()
    uptime = timedelta(seconds=int(time.time() - psutil.boot_time()))
    return {
        "cpu_cores": psutil.cpu_count() or 1,
        "load_average": f"{one:.2f} {five:.2f} {fifteen:.2f}",
        "uptime": str(uptime),
    }


def collect_document(
    config: Optional[CollectConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    """
    Collect a complete monitoring document from the local machine.

    Args:
        config: Collection settings; defaults to `CollectConfig()`.
        sleep: Function used to wait between measurements.

    Returns:
        A monitoring document ready for `procload.analysis.analyze`.
    """
    config = config or CollectConfig()
    collector = SnapshotCollector(top_n=config.top_processes)
    execution_timestamp = datetime.now().isoformat(timespec="seconds")

    logger.info(
        f"Collecting {config.measurement_count} measurements every {config.interval_seconds}s"
    )
    collector.prime()
    measurements = []
    for index in range(config.measurement_count):
        sleep(config.interval_seconds)
        measurements.append(collector.collect_measurement())
        logger.debug(f"Measurement {index + 1}/{config.measurement_count} collected")

    return {
        "execution_timestamp": execution_timestamp,
        "system_info": collect_system_info(),
        "monitoring_config": {
            "cpu_threshold": config.cpu_threshold,
            "interval_seconds": config.interval_seconds,
            "measurement_count": config.measurement_count,
        },
        "measurements": measurements,
    }
