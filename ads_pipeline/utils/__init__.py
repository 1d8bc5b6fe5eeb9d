"""Shared utilities for the ads pipeline."""

from ads_pipeline.utils.io import read_csv_files, write_output
from ads_pipeline.utils.transforms import (
    decimal_ratio,
    decimal_sum,
    merge_datasets,
    normalize_columns,
    round_series,
    safe_divide,
)
from ads_pipeline.utils.validators import validate_dataframe
from ads_pipeline.utils.types import PipelineStatus, StageFrames, StatusReport
