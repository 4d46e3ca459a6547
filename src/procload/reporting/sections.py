"""
Declarative report structure.

A report is an ordered list of `SectionDefinition` entries. Each entry pairs a
predicate over the `ReportContext` with a builder that produces a `Section`
made of format-neutral blocks (paragraphs, bullet lists and tables). The
formatters in `procload.reporting.formatters` turn the built sections into
Markdown, plain text or JSON.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

from ..models.config import ReportOptions
from ..models.document import MonitoringConfigInfo, SystemInfo, get_execution_timestamp
from ..models.results import AnalysisResult, ProcessStats
from .formatting import (
    NOT_AVAILABLE,
    display_value,
    format_decimal,
    format_percent,
    format_timestamp,
    truncate_command,
)

REPORT_TITLE = "Process Load Diagnostic Report"
NEXT_CHECK_HORIZON = timedelta(minutes=30)
HIGH_LOAD_DISPLAY_LIMIT = 10
COMMAND_DISPLAY_LIMIT = 60


class LoadStatus(Enum):
    """Load-per-core bands with their fixed display labels."""

    HIGH = "high"
    MEDIUM = "medium"
    NORMAL = "normal"

    @property
    def label(self) -> str:
        return _LOAD_LABELS[self]


_LOAD_LABELS = {
    LoadStatus.HIGH: "HIGH - load is more than twice the core count",
    LoadStatus.MEDIUM: "MEDIUM - load exceeds the core count",
    LoadStatus.NORMAL: "NORMAL - load is within core capacity",
}


def classify_load(load_per_core: float) -> LoadStatus:
    """Band a load-per-core figure: above 2 is high, above 1 is medium."""
    if load_per_core > 2:
        return LoadStatus.HIGH
    if load_per_core > 1:
        return LoadStatus.MEDIUM
    return LoadStatus.NORMAL


# --- Blocks ---


@dataclass(frozen=True)
class Paragraph:
    text: str


@dataclass(frozen=True)
class Bullets:
    items: Sequence[str]


@dataclass(frozen=True)
class Table:
    headers: Sequence[str]
    rows: Sequence[Sequence[str]]


Block = Union[Paragraph, Bullets, Table]


@dataclass(frozen=True)
class Section:
    """One rendered section: a heading at ``level`` followed by its blocks."""

    key: str
    title: str
    level: int
    blocks: List[Block] = field(default_factory=list)


@dataclass(frozen=True)
class ReportContext:
    """Everything a section builder may read, resolved once per render."""

    document: Mapping[str, Any]
    analysis: AnalysisResult
    options: ReportOptions
    generated_at: datetime
    next_check_at: datetime
    system_info: SystemInfo
    monitoring_config: MonitoringConfigInfo
    execution_timestamp: Optional[str]

    @classmethod
    def create(
        cls,
        document: Mapping[str, Any],
        analysis: AnalysisResult,
        options: ReportOptions,
        now: Optional[datetime] = None,
    ) -> "ReportContext":
        generated_at = now or datetime.now()
        return cls(
            document=document,
            analysis=analysis,
            options=options,
            generated_at=generated_at,
            next_check_at=generated_at + NEXT_CHECK_HORIZON,
            system_info=SystemInfo.from_document(document),
            monitoring_config=MonitoringConfigInfo.from_document(document),
            execution_timestamp=get_execution_timestamp(document),
        )

    @property
    def load_status(self) -> LoadStatus:
        return classify_load(self.analysis.load_per_core)


@dataclass(frozen=True)
class SectionDefinition:
    key: str
    predicate: Callable[[ReportContext], bool]
    builder: Callable[[ReportContext], Section]


# --- Section builders ---


def _always(ctx: ReportContext) -> bool:
    return True


def _build_header(ctx: ReportContext) -> Section:
    analysis = ctx.analysis
    period = (
        f"{display_value(analysis.time_range.start)} - {display_value(analysis.time_range.end)}"
    )
    return Section("header", REPORT_TITLE, 1, [Bullets([
        f"Execution timestamp: {display_value(ctx.execution_timestamp)}",
        f"Analysis period: {period}",
        f"Measurements: {analysis.measurement_count}",
        f"Distinct processes: {analysis.total_processes}",
        f"Thresholds: warning {format_percent(ctx.options.cpu_warning_threshold)}, "
        f"critical {format_percent(ctx.options.cpu_critical_threshold)}",
    ])])


def _build_system_summary(ctx: ReportContext) -> Section:
    one, five, fifteen = ctx.analysis.load_average
    return Section("system", "System Summary", 2, [Bullets([
        f"CPU cores: {ctx.analysis.cpu_cores}",
        f"Uptime: {display_value(ctx.system_info.uptime)}",
        f"Load average (1/5/15 min): {format_decimal(one)} / "
        f"{format_decimal(five)} / {format_decimal(fifteen)}",
    ])])


def _build_monitoring_config(ctx: ReportContext) -> Section:
    config = ctx.monitoring_config
    return Section("monitoring_config", "Monitoring Configuration", 2, [Bullets([
        f"CPU threshold: {display_value(config.cpu_threshold, '%')}",
        f"Sampling interval: {display_value(config.interval_seconds, ' s')}",
        f"Planned measurements: {display_value(config.measurement_count)}",
    ])])


def _build_anomalies(ctx: ReportContext) -> Section:
    blocks: List[Block] = []
    if not ctx.analysis.high_load_processes:
        blocks.append(Paragraph(
            f"No process reached the warning threshold of "
            f"{format_percent(ctx.options.cpu_warning_threshold)}."
        ))
    return Section("anomalies", "Detected Anomalies", 2, blocks)


def _build_critical(ctx: ReportContext) -> Section:
    rows = [
        [
            str(p.pid),
            format_percent(p.max_cpu),
            format_percent(p.avg_cpu),
            str(p.sample_count),
            p.command or NOT_AVAILABLE,
        ]
        for p in ctx.analysis.critical_processes
    ]
    return Section("critical", "Critical Processes", 3, [
        Paragraph(
            f"{len(rows)} process(es) reached the critical threshold of "
            f"{format_percent(ctx.options.cpu_critical_threshold)}."
        ),
        Table(["PID", "Max CPU", "Avg CPU", "Samples", "Command"], rows),
    ])


def _build_high_load(ctx: ReportContext) -> Section:
    processes = ctx.analysis.high_load_processes
    rows = [
        [
            str(rank),
            str(p.pid),
            format_percent(p.max_cpu),
            format_percent(p.avg_cpu),
            format_percent(p.max_mem),
            truncate_command(p.command, COMMAND_DISPLAY_LIMIT) or NOT_AVAILABLE,
        ]
        for rank, p in enumerate(processes[:HIGH_LOAD_DISPLAY_LIMIT], start=1)
    ]
    blocks: List[Block] = [
        Table(["Rank", "PID", "Max CPU", "Avg CPU", "Max Mem", "Command"], rows)
    ]
    hidden = len(processes) - HIGH_LOAD_DISPLAY_LIMIT
    if hidden > 0:
        blocks.append(Paragraph(f"... and {hidden} more high-load process(es) not shown."))
    return Section("high_load", "High Load Processes", 3, blocks)


def _build_load_analysis(ctx: ReportContext) -> Section:
    return Section("load_analysis", "Load Analysis", 3, [Bullets([
        f"Load per core: {format_decimal(ctx.analysis.load_per_core, 2)}",
        f"Status: {ctx.load_status.label}",
    ])])


def _build_recommendations(ctx: ReportContext) -> Section:
    return Section("recommendations", "Recommendations", 2)


def _needs_immediate_action(ctx: ReportContext) -> bool:
    return bool(ctx.analysis.critical_processes) or ctx.analysis.load_per_core > 2


def _describe_process(process: ProcessStats) -> str:
    return f"PID {process.pid} ({truncate_command(process.command, COMMAND_DISPLAY_LIMIT) or NOT_AVAILABLE})"


def _build_immediate(ctx: ReportContext) -> Section:
    blocks: List[Block] = []
    critical = ctx.analysis.critical_processes
    if critical:
        names = ", ".join(_describe_process(p) for p in critical)
        blocks.append(Paragraph(
            f"Critical CPU usage: investigate {names}. Check whether these processes "
            f"are stuck in a loop, then throttle, reschedule or restart them."
        ))
    if ctx.analysis.load_per_core > 2:
        blocks.append(Paragraph(
            f"System overload: load per core is "
            f"{format_decimal(ctx.analysis.load_per_core, 2)}. Pause non-essential jobs "
            f"and stop accepting new batch work until the load drops below the core count."
        ))
    return Section("immediate", "Immediate Actions", 3, blocks)


def _build_near_term(ctx: ReportContext) -> Section:
    return Section("near_term", "Near-Term Actions", 3, [Bullets([
        "Review scheduled jobs and cron tasks that overlap with the observed peaks.",
        "Set CPU limits (nice, cgroups or container quotas) for batch workloads.",
        "Check application logs of high-load processes for errors or retry storms.",
        "Increase the sampling frequency while the issue is being investigated.",
    ])])


def _build_long_term(ctx: ReportContext) -> Section:
    cores = ctx.analysis.cpu_cores
    return Section("long_term", "Long-Term Actions", 3, [Bullets([
        "Plan capacity from the observed peaks and add cores or hosts where needed.",
        "Profile recurring high-load processes and optimise their hot paths.",
        "Keep monitoring snapshots so that trends can be compared over time.",
        f"Alert when the 1-minute load average exceeds {format_decimal(cores * 1.5, 2)} "
        f"(warning) or {format_decimal(cores * 2, 2)} (critical).",
        f"Alert when the process count exceeds "
        f"{format_decimal(ctx.analysis.total_processes * 1.5)}.",
    ])])


def _build_footer(ctx: ReportContext) -> Section:
    return Section("footer", "Report Information", 2, [Bullets([
        f"Report generated: {format_timestamp(ctx.generated_at)}",
        f"Next recommended check: {format_timestamp(ctx.next_check_at)}",
    ])])


def _recommendations_enabled(ctx: ReportContext) -> bool:
    return ctx.options.include_recommendations


REPORT_SECTIONS: List[SectionDefinition] = [
    SectionDefinition("header", _always, _build_header),
    SectionDefinition("system", _always, _build_system_summary),
    SectionDefinition("monitoring_config", _always, _build_monitoring_config),
    SectionDefinition("anomalies", _always, _build_anomalies),
    SectionDefinition("critical", lambda ctx: bool(ctx.analysis.critical_processes), _build_critical),
    SectionDefinition("high_load", lambda ctx: bool(ctx.analysis.high_load_processes), _build_high_load),
    SectionDefinition("load_analysis", _always, _build_load_analysis),
    SectionDefinition("recommendations", _recommendations_enabled, _build_recommendations),
    SectionDefinition(
        "immediate",
        lambda ctx: _recommendations_enabled(ctx) and _needs_immediate_action(ctx),
        _build_immediate,
    ),
    SectionDefinition("near_term", _recommendations_enabled, _build_near_term),
    SectionDefinition("long_term", _recommendations_enabled, _build_long_term),
    SectionDefinition("footer", _always, _build_footer),
]


def build_sections(
    ctx: ReportContext, definitions: Optional[Sequence[SectionDefinition]] = None
) -> List[Section]:
    """Build every section whose predicate holds, in definition order."""
    return [
        definition.builder(ctx)
        for definition in (REPORT_SECTIONS if definitions is None else definitions)
        if definition.predicate(ctx)
    ]
