"""
Output formatters for analysis reports.

Every formatter consumes the same `ReportContext` and section list; they only
differ in how headings, paragraphs, bullet lists and tables are written out.
"""

import json
import logging
import math
from abc import ABC, abstractmethod
from io import StringIO
from typing import Any, Dict, List

from ..models.config import OUTPUT_FORMATS
from ..validation import ValidationError
from ..models.document import get_field
from .formatting import format_timestamp
from .sections import Block, Bullets, Paragraph, ReportContext, Section, Table, build_sections

logger = logging.getLogger(__name__)


class ReportFormatter(ABC):
    """Base class for report formatters."""

    @abstractmethod
    def format(self, ctx: ReportContext) -> str:
        """Render the report for ``ctx``."""
        pass


class _BlockFormatter(ReportFormatter):
    """Shared section walk for the line-oriented formats."""

    def format(self, ctx: ReportContext) -> str:
        output = StringIO()
        for index, section in enumerate(build_sections(ctx)):
            if index:
                output.write("\n")
            self._write_heading(output, section)
            for block in section.blocks:
                output.write("\n")
                self._write_block(output, block)
        return output.getvalue()

    def _write_block(self, output: StringIO, block: Block) -> None:
        if isinstance(block, Paragraph):
            output.write(f"{block.text}\n")
        elif isinstance(block, Bullets):
            self._write_bullets(output, block)
        elif isinstance(block, Table):
            self._write_table(output, block)
        else:
            raise TypeError(f"Unsupported report block: {type(block).__name__}")

    @abstractmethod
    def _write_heading(self, output: StringIO, section: Section) -> None:
        pass

    @abstractmethod
    def _write_bullets(self, output: StringIO, block: Bullets) -> None:
        pass

    @abstractmethod
    def _write_table(self, output: StringIO, block: Table) -> None:
        pass


class MarkdownFormatter(_BlockFormatter):
    """Markdown formatter (the default)."""

    def _write_heading(self, output: StringIO, section: Section) -> None:
        output.write(f"{'#' * section.level} {section.title}\n")

    def _write_bullets(self, output: StringIO, block: Bullets) -> None:
        for item in block.items:
            output.write(f"- {item}\n")

    def _write_table(self, output: StringIO, block: Table) -> None:
        output.write("| " + " | ".join(block.headers) + " |\n")
        output.write("|" + "|".join("---" for _ in block.headers) + "|\n")
        for row in block.rows:
            cells = [cell.replace("|", "\\|") for cell in row]
            output.write("| " + " | ".join(cells) + " |\n")


class TextFormatter(_BlockFormatter):
    """Plain text formatter with underlined headings and aligned columns."""

    _UNDERLINES = {1: "=", 2: "-"}

    def _write_heading(self, output: StringIO, section: Section) -> None:
        underline = self._UNDERLINES.get(section.level)
        if underline:
            output.write(f"{section.title}\n{underline * len(section.title)}\n")
        else:
            output.write(f"{section.title}:\n")

    def _write_bullets(self, output: StringIO, block: Bullets) -> None:
        for item in block.items:
            output.write(f"  * {item}\n")

    def _write_table(self, output: StringIO, block: Table) -> None:
        widths = [len(header) for header in block.headers]
        for row in block.rows:
            widths = [max(width, len(cell)) for width, cell in zip(widths, row)]

        def line(cells) -> str:
            return "  " + "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip() + "\n"

        output.write(line(block.headers))
        output.write(line(["-" * width for width in widths]))
        for row in block.rows:
            output.write(line(row))


def _finite_json(value: Any) -> Any:
    """Replace NaN and infinities with None; JSON has no tokens for them."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _finite_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite_json(item) for item in value]
    return value


class JsonFormatter(ReportFormatter):
    """JSON formatter carrying the raw analysis next to the rendered guidance."""

    def format(self, ctx: ReportContext) -> str:
        payload: Dict[str, Any] = {
            "generated_at": format_timestamp(ctx.generated_at),
            "next_check_at": format_timestamp(ctx.next_check_at),
            "document": {
                "execution_timestamp": ctx.execution_timestamp,
                "system_info": {
                    "cpu_cores": ctx.system_info.cpu_cores,
                    "load_average": ctx.system_info.load_average,
                    "uptime": ctx.system_info.uptime,
                },
                "monitoring_config": get_field(
                    ctx.document, "monitoring_config", "monitoringConfig", default=None
                ),
            },
            "thresholds": {
                "cpu_warning_threshold": ctx.options.cpu_warning_threshold,
                "cpu_critical_threshold": ctx.options.cpu_critical_threshold,
            },
            "analysis": ctx.analysis.to_dict(),
            "load_status": ctx.load_status.value,
        }
        if ctx.options.include_recommendations:
            payload["recommendations"] = self._recommendations(build_sections(ctx))
        return json.dumps(
            _finite_json(payload), indent=2, ensure_ascii=False, allow_nan=False, default=str
        )

    @staticmethod
    def _recommendations(sections: List[Section]) -> Dict[str, List[str]]:
        guidance: Dict[str, List[str]] = {}
        for section in sections:
            if section.key not in ("immediate", "near_term", "long_term"):
                continue
            lines: List[str] = []
            for block in section.blocks:
                if isinstance(block, Paragraph):
                    lines.append(block.text)
                elif isinstance(block, Bullets):
                    lines.extend(block.items)
            guidance[section.key] = lines
        return guidance


_FORMATTERS = {
    "markdown": MarkdownFormatter,
    "text": TextFormatter,
    "json": JsonFormatter,
}


def create_formatter(format_type: str = "markdown") -> ReportFormatter:
    """
    Create a formatter for the given output format.

    Raises:
        ValidationError: If an unsupported format type is specified
    """
    formatter_cls = _FORMATTERS.get(format_type)
    if formatter_cls is None:
        raise ValidationError(
            f"Unsupported output format: {format_type} (expected one of {OUTPUT_FORMATS})",
            field_name="output_format",
            value=format_type,
        )
    logger.debug(f"Creating {formatter_cls.__name__}")
    return formatter_cls()
