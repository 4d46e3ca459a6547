"""
Storage of flattened process samples.

Samples are held in Polars DataFrames and written as compressed Parquet (or
CSV) files for analysis outside of the report.
"""

from .samples import SAMPLE_SCHEMA, load_samples, samples_frame, save_samples

__all__ = ["SAMPLE_SCHEMA", "load_samples", "samples_frame", "save_samples"]
