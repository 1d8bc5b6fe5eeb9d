"""Shared type definitions for the pipeline."""

from enum import StrEnum

import pandas as pd


type StageFrames = dict[str, pd.DataFrame]
type StatusReport = dict[str, str | int]


class PipelineStatus(StrEnum):
    SUCCESS = "success"
    FAILED = "failed"
