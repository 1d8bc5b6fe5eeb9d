"""Common data transformation utilities."""

from decimal import ROUND_HALF_UP, Decimal

import numpy as np
import pandas as pd

type ColumnMapping = dict[str, str]


def normalize_columns(df: pd.DataFrame, mapping: ColumnMapping | None = None) -> pd.DataFrame:
    """Normalize column names to snake_case and apply optional mapping."""
    df.columns = [col.strip().lower().replace(" ", "_").replace("-", "_") for col in df.columns]

    if mapping:
        df = df.rename(columns=mapping)

    return df


def merge_datasets(
    left: pd.DataFrame,
    right: pd.DataFrame,
    on: str | list[str],
    how: str = "left",
    validate: str | None = None,
) -> pd.DataFrame:
    """Merge two datasets, optionally enforcing the join cardinality."""
    match how:
        case "left" | "right" | "inner" | "outer":
            result = pd.merge(left, right, on=on, how=how, validate=validate)
        case other:
            raise ValueError(f"Unsupported merge type: {other}")

    return result


def safe_divide(
    numerator: pd.Series,
    denominator: pd.Series,
    scale: float = 1.0,
    fallback: float = 0.0,
) -> pd.Series:
    """Divide element-wise, only where the denominator is positive.

    Rows with a zero, negative or null denominator get ``fallback`` and are
    never divided.
    """
    valid = denominator.notna() & (denominator > 0)
    result = pd.Series(fallback, index=numerator.index, dtype="float64")
    result.loc[valid] = scale * numerator.loc[valid] / denominator.loc[valid]
    return result


def to_decimal(value: float | Decimal) -> Decimal:
    """Exact decimal for the shortest text form of a float."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(float(value)))


def decimal_sum(series: pd.Series) -> float:
    """Sum like SQL ``SUM`` on numerics, without binary float drift.

    ``decimal_sum(pd.Series([0.1, 0.2]))`` is ``0.3``. Nulls are skipped.
    """
    return float(sum((to_decimal(v) for v in series.dropna()), Decimal(0)))


def round_half_up(value: float | Decimal, digits: int = 2, scale: int = 1) -> float:
    """Round like SQL ``ROUND`` on numerics (ties away from zero).

    ``scale`` multiplies the already-rounded value exactly, so
    ``round_half_up(0.29, 2, scale=100)`` is ``29.0`` rather than
    ``28.999999999999996``. Nulls pass through.
    """
    if not isinstance(value, Decimal) and pd.isna(value):
        return np.nan
    quantum = Decimal(1).scaleb(-digits)
    rounded = to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded * scale)


def round_series(series: pd.Series, digits: int = 2, scale: int = 1) -> pd.Series:
    """Apply ``round_half_up`` to every element of a Series."""
    return series.map(lambda v: round_half_up(v, digits, scale)).astype("float64")


def decimal_ratio(
    numerator: pd.Series,
    denominator: pd.Series,
    scale: int = 1,
    digits: int = 2,
    fallback: float = 0.0,
) -> pd.Series:
    """``round(scale * numerator / denominator, digits)`` in decimal arithmetic.

    Like ``safe_divide``, only rows with a positive denominator are divided.
    The numerator may hold ``Decimal`` values.
    """
    valid = denominator.notna() & (denominator > 0)
    result = pd.Series(fallback, index=numerator.index, dtype="float64")
    result.loc[valid] = pd.Series(
        [
            round_half_up(scale * to_decimal(num) / to_decimal(den), digits)
            for num, den in zip(numerator.loc[valid], denominator.loc[valid])
        ],
        index=numerator.index[valid],
        dtype="float64",
    )
    return result
