"""File I/O utilities for reading and writing pipeline data."""

import tomllib
from pathlib import Path

import pandas as pd
from rich.console import Console

type FilePath = str | Path

console = Console()


def read_csv_files(
    directory: FilePath,
    pattern: str = "*.csv",
    parse_dates: list[str] | None = None,
) -> pd.DataFrame:
    """Read all CSV files matching a pattern and concatenate them.

    Files are read in name order so daily export drops stack chronologically.
    Raises FileNotFoundError when nothing matches.
    """
    directory = Path(directory)
    paths = sorted(directory.glob(pattern))
    if not paths:
        raise FileNotFoundError(f"No files matching {pattern!r} in {directory}")

    chunks = []
    for csv_file in paths:
        console.print(f"  Reading {csv_file.name}...")
        chunks.append(pd.read_csv(csv_file, parse_dates=parse_dates))

    return pd.concat(chunks, ignore_index=True)


def write_output(df: pd.DataFrame, path: FilePath, fmt: str = "csv") -> Path:
    """Write a DataFrame to the specified format, returning the file path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    match fmt:
        case "csv":
            target = path.with_suffix(".csv")
            df.to_csv(target, index=False)
        case "parquet":
            target = path.with_suffix(".parquet")
            df.to_parquet(target, index=False)
        case "json":
            target = path.with_suffix(".json")
            df.to_json(target, orient="records", indent=2, date_format="iso")
        case other:
            raise ValueError(f"Unsupported output format: {other}")

    console.print(f"  Wrote {len(df)} rows to {target}")
    return target


def load_toml_config(path: FilePath) -> dict:
    """Load a TOML configuration file using Python 3.11+ stdlib."""
    with open(path, "rb") as f:
        return tomllib.load(f)
