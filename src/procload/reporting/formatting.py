"""
Value formatting helpers shared by every report format.
"""

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Optional

NOT_AVAILABLE = "N/A"
ELLIPSIS = "..."
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_decimal(value: Optional[float], places: int = 1) -> str:
    """Format a number with a fixed number of decimals using half-up rounding.

    Rounding goes through the shortest decimal representation of the float,
    so ``format_decimal(0.25)`` gives ``"0.3"`` rather than the binary
    round-half-even ``"0.2"``.

    Examples:
        >>> format_decimal(62.25)
        '62.3'
        >>> format_decimal(1.005, places=2)
        '1.01'
    """
    if value is None:
        return NOT_AVAILABLE
    if not math.isfinite(value):
        return str(value)
    number = Decimal(str(value))
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # Room for every integer digit plus the requested decimals.
        ctx.prec = max(ctx.prec, number.adjusted() + places + 2)
        return str(number.quantize(quantum, rounding=ROUND_HALF_UP))


def format_percent(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{format_decimal(value)}%"


def truncate_command(command: str, limit: int = 60) -> str:
    """Cut a command line to ``limit`` characters, marking the cut with an ellipsis."""
    if len(command) <= limit:
        return command
    return command[:limit] + ELLIPSIS


def format_timestamp(moment: datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)


def display_value(value: Any, suffix: str = "") -> str:
    """Echo a descriptive document value, or the placeholder when it is missing."""
    if value is None or value == "":
        return NOT_AVAILABLE
    if isinstance(value, float):
        return f"{format_decimal(value)}{suffix}"
    return f"{value}{suffix}"
