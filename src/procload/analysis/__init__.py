"""
Aggregation of monitoring snapshots for the procload package.
"""

from .aggregator import (
    analyze,
    fold_measurements,
    iter_samples,
    parse_load_average,
    require_measurements,
)

__all__ = [
    "analyze",
    "fold_measurements",
    "iter_samples",
    "parse_load_average",
    "require_measurements",
]
