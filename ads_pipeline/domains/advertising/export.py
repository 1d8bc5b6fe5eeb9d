"""Export pipeline stage outputs for downstream reporting."""

import shutil
from pathlib import Path

import pandas as pd
from rich.console import Console

from ads_pipeline.config import OUTPUT_FORMATS, OutputConfig
from ads_pipeline.utils.io import write_output
from ads_pipeline.utils.types import StageFrames

console = Console()

EXPORTED_STAGES = ["normalized", "monthly", "comparison"]


def write_comparison_output(
    frames: StageFrames,
    output: OutputConfig,
    run_id: str | None = None,
) -> Path:
    """Write every stage frame into a fresh run directory.

    Files land in a hidden staging directory that is renamed into place only
    after all writes succeed, so a failed export leaves no run directory.
    """
    if output.fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Export format not supported: {output.fmt}")

    missing = [stage for stage in EXPORTED_STAGES if stage not in frames]
    if missing:
        raise ValueError(f"Missing stage outputs: {missing}")

    run_id = run_id or pd.Timestamp.now().strftime("%Y%m%d_%H%M%S")
    run_dir = output.output_dir / run_id
    if run_dir.exists():
        raise FileExistsError(f"Run directory already exists: {run_dir}")

    staging_dir = output.output_dir / f".{run_id}.partial"
    console.print(f"  Writing outputs to {run_dir}")

    try:
        for stage in EXPORTED_STAGES:
            write_output(frames[stage], staging_dir / stage, output.fmt)
        staging_dir.rename(run_dir)
    except Exception:
        shutil.rmtree(staging_dir, ignore_errors=True)
        raise

    console.print(f"  Export complete ({output.fmt} format)")
    return run_dir
