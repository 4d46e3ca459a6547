"""
Report rendering entry point.

`render` is deterministic apart from the two wall-clock stamps in the footer
(render time and the next recommended check 30 minutes later). Pass ``now``
to pin them, for example in tests.
"""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from ..models.config import ReportOptions
from ..models.results import AnalysisResult
from .formatters import create_formatter
from .sections import ReportContext

logger = logging.getLogger(__name__)


def render(
    document: Mapping[str, Any],
    analysis: AnalysisResult,
    options: Optional[ReportOptions] = None,
    now: Optional[datetime] = None,
) -> str:
    """Render a report for an analysed monitoring document.

    Args:
        document: The document the analysis was computed from; only its
            descriptive fields (system info, monitoring config) are read.
        analysis: Result of `procload.analysis.analyze` for ``document``.
        options: Thresholds and output settings; ``output_format`` picks the formatter.
        now: Render time; defaults to the current local time.

    Returns:
        The report text in the requested format.
    """
    options = options or ReportOptions()
    ctx = ReportContext.create(document, analysis, options, now=now)
    report = create_formatter(options.output_format).format(ctx)
    logger.debug(f"Rendered {options.output_format} report ({len(report)} characters)")
    return report
