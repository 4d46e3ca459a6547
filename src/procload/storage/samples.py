"""
Flattened sample export using Polars.

A monitoring document nests process samples inside measurements. For offline
analysis the samples are flattened into one row per (measurement, process)
and written as a Parquet file (or CSV when the target path ends in `.csv`).
Samples are normalized with the same rules the aggregator applies, so the
exported table holds exactly the samples the report was computed from.
"""

import logging
from pathlib import Path
from typing import Any, List, Literal, Mapping, Union

import polars as pl

from ..analysis.aggregator import iter_samples, require_measurements
from ..models.document import get_field

logger = logging.getLogger(__name__)

SAMPLE_SCHEMA = {
    "measurement_index": pl.Int64,
    "timestamp": pl.Utf8,
    "pid": pl.Int64,
    "cpu": pl.Float64,
    "mem": pl.Float64,
    "time": pl.Utf8,
    "command": pl.Utf8,
}

Compression = Literal["snappy", "gzip", "brotli", "lz4", "zstd"]


def samples_frame(document: Mapping[str, Any]) -> pl.DataFrame:
    """
    Flatten the measurements of a document into a DataFrame.

    Args:
        document: Parsed monitoring document

    Returns:
        DataFrame with the columns of `SAMPLE_SCHEMA`, in measurement order

    Raises:
        ValidationError: If ``measurements`` is missing or not a list
    """
    rows: List[dict] = []
    for index, measurement in enumerate(require_measurements(document)):
        timestamp = get_field(measurement, "timestamp")
        for sample in iter_samples(measurement):
            rows.append({
                "measurement_index": index,
                "timestamp": None if timestamp is None else str(timestamp),
                **sample,
            })
    return pl.DataFrame(rows, schema=SAMPLE_SCHEMA)


def save_samples(
    df: pl.DataFrame, path: Union[str, Path], compression: Compression = "snappy"
) -> Path:
    """
    Save a samples DataFrame as Parquet, or as CSV for a `.csv` path.

    Args:
        df: DataFrame produced by `samples_frame`
        path: Target file path
        compression: Parquet compression algorithm

    Returns:
        The path written to
    """
    file_path = Path(path)
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if file_path.suffix.lower() == ".csv":
            df.write_csv(file_path)
        else:
            df.write_parquet(file_path, compression=compression)
    except Exception as e:
        logger.error(f"Failed to save samples to {file_path}: {e}")
        raise
    logger.info(f"Saved {len(df)} process samples to: {file_path}")
    return file_path


def load_samples(path: Union[str, Path]) -> pl.DataFrame:
    """Load a samples file written by `save_samples`."""
    file_path = Path(path)
    if file_path.suffix.lower() == ".csv":
        return pl.read_csv(file_path, schema=SAMPLE_SCHEMA)
    return pl.read_parquet(file_path)
