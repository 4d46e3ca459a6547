"""
Unit tests for the predicate-gated report sections.

Each section builder is checked on its own against analysis results built
from small documents.
"""

from datetime import timedelta

import pytest

from procload.analysis import analyze
from procload.models import ReportOptions
from procload.reporting.sections import (
    Bullets,
    LoadStatus,
    Paragraph,
    ReportContext,
    Table,
    build_sections,
    classify_load,
)


def _context(document, fixed_now, **option_overrides):
    options = ReportOptions(**option_overrides)
    return ReportContext.create(document, analyze(document, options), options, now=fixed_now)


def _keys(ctx):
    return [section.key for section in build_sections(ctx)]


def _section(ctx, key):
    return next(section for section in build_sections(ctx) if section.key == key)


def _text(section):
    lines = []
    for block in section.blocks:
        if isinstance(block, Paragraph):
            lines.append(block.text)
        elif isinstance(block, Bullets):
            lines.extend(block.items)
    return "\n".join(lines)


@pytest.mark.unit
class TestLoadClassification:
    """Test cases for the load-per-core bands."""

    @pytest.mark.parametrize(
        "load_per_core,expected",
        [
            (0.0, LoadStatus.NORMAL),
            (1.0, LoadStatus.NORMAL),
            (1.01, LoadStatus.MEDIUM),
            (2.0, LoadStatus.MEDIUM),
            (2.01, LoadStatus.HIGH),
            (10.0, LoadStatus.HIGH),
        ],
    )
    def test_bands(self, load_per_core, expected):
        assert classify_load(load_per_core) is expected

    def test_labels_are_distinct(self):
        labels = {status.label for status in LoadStatus}
        assert len(labels) == 3


@pytest.mark.unit
class TestSectionSelection:
    """Test cases for which sections are emitted."""

    def test_full_report_sections(self, sample_document, fixed_now):
        ctx = _context(sample_document, fixed_now)

        assert _keys(ctx) == [
            "header",
            "system",
            "monitoring_config",
            "anomalies",
            "critical",
            "high_load",
            "load_analysis",
            "recommendations",
            "immediate",
            "near_term",
            "long_term",
            "footer",
        ]

    def test_empty_document_sections(self, empty_document, fixed_now):
        ctx = _context(empty_document, fixed_now)

        assert _keys(ctx) == [
            "header",
            "system",
            "monitoring_config",
            "anomalies",
            "load_analysis",
            "recommendations",
            "near_term",
            "long_term",
            "footer",
        ]

    def test_recommendations_disabled(self, sample_document, fixed_now):
        ctx = _context(sample_document, fixed_now, include_recommendations=False)

        keys = _keys(ctx)

        for key in ("recommendations", "immediate", "near_term", "long_term"):
            assert key not in keys
        assert keys[-1] == "footer"

    def test_high_load_without_critical(self, sample_document, fixed_now):
        ctx = _context(sample_document, fixed_now, cpu_critical_threshold=100)

        keys = _keys(ctx)

        assert "critical" not in keys
        assert "high_load" in keys
        assert "immediate" not in keys


@pytest.mark.unit
class TestSectionContent:
    """Test cases for the content of individual sections."""

    def test_header(self, sample_document, fixed_now):
        text = _text(_section(_context(sample_document, fixed_now), "header"))

        assert "Execution timestamp: 2025-06-22T17:46:17" in text
        assert "Analysis period: 2025-06-22 17:46:17 - 2025-06-22 17:46:27" in text
        assert "Measurements: 3" in text
        assert "Distinct processes: 4" in text
        assert "Thresholds: warning 80.0%, critical 90.0%" in text

    def test_system_summary(self, sample_document, fixed_now):
        text = _text(_section(_context(sample_document, fixed_now), "system"))

        assert "CPU cores: 4" in text
        assert "Uptime: 3 days, 4:05" in text
        assert "Load average (1/5/15 min): 2.0 / 1.5 / 1.0" in text

    def test_monitoring_config_echo(self, sample_document, fixed_now):
        text = _text(_section(_context(sample_document, fixed_now), "monitoring_config"))

        assert "CPU threshold: 80%" in text
        assert "Sampling interval: 5 s" in text
        assert "Planned measurements: 3" in text

    def test_placeholders_for_missing_descriptive_fields(self, empty_document, fixed_now):
        ctx = _context(empty_document, fixed_now)

        header = _text(_section(ctx, "header"))
        system = _text(_section(ctx, "system"))
        config = _text(_section(ctx, "monitoring_config"))

        assert "Execution timestamp: N/A" in header
        assert "Analysis period: N/A - N/A" in header
        assert "Uptime: N/A" in system
        assert "CPU threshold: N/A" in config
        assert "Sampling interval: N/A" in config
        assert "Planned measurements: N/A" in config

    def test_anomalies_without_high_load(self, empty_document, fixed_now):
        text = _text(_section(_context(empty_document, fixed_now), "anomalies"))
        assert "No process reached the warning threshold of 80.0%" in text

    def test_critical_table(self, sample_document, fixed_now):
        section = _section(_context(sample_document, fixed_now), "critical")
        table = next(block for block in section.blocks if isinstance(block, Table))

        assert table.headers == ["PID", "Max CPU", "Avg CPU", "Samples", "Command"]
        assert table.rows[0] == ["400", "95.0%", "95.0%", "1", "ffmpeg -i input.mp4"]
        assert table.rows[1] == ["100", "90.0%", "50.0%", "3", "python train.py"]

    def test_high_load_table_is_limited_to_ten(self, fixed_now):
        processes = [
            {"pid": pid, "cpu": 80.0 + pid, "mem": 0.5, "command": f"job-{pid} " + "x" * 80}
            for pid in range(1, 13)
        ]
        document = {"measurements": [{"timestamp": "t", "processes": processes}]}

        section = _section(_context(document, fixed_now, cpu_critical_threshold=1000), "high_load")
        table = section.blocks[0]

        assert len(table.rows) == 10
        assert table.rows[0][:3] == ["1", "12", "92.0%"]
        assert table.rows[0][5].endswith("...")
        assert len(table.rows[0][5]) == 63
        assert section.blocks[1] == Paragraph("... and 2 more high-load process(es) not shown.")

    def test_load_analysis(self, sample_document, fixed_now):
        text = _text(_section(_context(sample_document, fixed_now), "load_analysis"))

        assert "Load per core: 0.50" in text
        assert LoadStatus.NORMAL.label in text

    def test_immediate_with_critical_only(self, sample_document, fixed_now):
        section = _section(_context(sample_document, fixed_now), "immediate")

        assert len(section.blocks) == 1
        assert "PID 400 (ffmpeg -i input.mp4)" in section.blocks[0].text
        assert "PID 100 (python train.py)" in section.blocks[0].text

    def test_immediate_with_overload_only(self, fixed_now):
        document = {
            "system_info": {"cpu_cores": 2, "load_average": "5.0 4.0 3.0"},
            "measurements": [{"timestamp": "t", "processes": [{"pid": 1, "cpu": 10.0}]}],
        }

        section = _section(_context(document, fixed_now), "immediate")

        assert len(section.blocks) == 1
        assert "load per core is 2.50" in section.blocks[0].text

    def test_immediate_with_both_conditions(self, sample_document, fixed_now):
        sample_document["system_info"]["load_average"] = "12.0 8.0 4.0"

        section = _section(_context(sample_document, fixed_now), "immediate")

        assert len(section.blocks) == 2
        assert "load per core is 3.00" in section.blocks[1].text

    def test_long_term_alert_thresholds(self, sample_document, fixed_now):
        text = _text(_section(_context(sample_document, fixed_now), "long_term"))

        assert "exceeds 6.00 (warning) or 8.00 (critical)" in text
        assert "process count exceeds 6.0" in text

    def test_footer_timestamps(self, sample_document, fixed_now):
        ctx = _context(sample_document, fixed_now)
        text = _text(_section(ctx, "footer"))

        assert ctx.next_check_at - ctx.generated_at == timedelta(minutes=30)
        assert "Report generated: 2025-06-22 18:00:00" in text
        assert "Next recommended check: 2025-06-22 18:30:00" in text
