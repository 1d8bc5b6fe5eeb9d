"""Month-over-month comparison of campaign efficiency ratios."""

import logging

import numpy as np
import pandas as pd

from ads_pipeline.domains.advertising.models import COMPARISON_COLUMNS, TRENDED_METRICS
from ads_pipeline.domains.advertising.monthly import null_keys_to_none, sort_by_campaign_month
from ads_pipeline.utils.transforms import round_half_up, round_series, to_decimal

logger = logging.getLogger(__name__)


def _same_partition_as_previous(keys: pd.Series) -> pd.Series:
    """True where a row has the same campaign_key as the row before it.

    Null keys belong to one partition, so two consecutive null keys match.
    """
    previous = keys.shift(1)
    same = (keys == previous) | (keys.isna() & previous.isna())
    same.iloc[:1] = False
    return same.astype(bool)


def _guarded_perc_diff(abs_diff: pd.Series, lag: pd.Series) -> pd.Series:
    """round(abs_diff / lag, 2) * 100 where |lag| > 0, else 0.

    The lag keeps its sign, so a negative prior value gives a negative result.
    """
    valid = lag.abs() > 0
    perc = pd.Series(0.0, index=lag.index, dtype="float64")
    perc.loc[valid] = pd.Series(
        [
            round_half_up(to_decimal(diff) / to_decimal(prior), scale=100)
            for diff, prior in zip(abs_diff.loc[valid], lag.loc[valid])
        ],
        index=lag.index[valid],
        dtype="float64",
    )
    return perc


def _unguarded_perc_diff(abs_diff: pd.Series, lag: pd.Series) -> pd.Series:
    """abs_diff / lag * 100, null where the lag is null or zero."""
    valid = lag.notna() & (lag != 0)
    perc = pd.Series(np.nan, index=lag.index, dtype="float64")
    perc.loc[valid] = abs_diff.loc[valid] / lag.loc[valid] * 100
    return perc


def compare_periods(monthly: pd.DataFrame) -> pd.DataFrame:
    """Attach lag, absolute and percentage change for ctr, cpm and romi.

    ``lag_<m>`` is the value from the previous row of the same campaign once
    rows are sorted by month, which is not necessarily the previous calendar
    month. ``perc_diff_ctr`` and ``perc_diff_romi`` are 0 without a usable
    lag; ``perc_diff_cpm`` is left null instead.
    """
    df = sort_by_campaign_month(monthly)
    df["campaign_key"] = null_keys_to_none(df["campaign_key"])
    same_partition = _same_partition_as_previous(df["campaign_key"])

    for metric in TRENDED_METRICS:
        lag = df[metric].shift(1).where(same_partition).astype("float64")
        abs_diff = (df[metric] - lag).abs()

        if metric == "cpm":
            perc_diff = _unguarded_perc_diff(abs_diff, lag)
        else:
            # ctr and romi carry two decimals, so their difference does too
            abs_diff = round_series(abs_diff)
            perc_diff = _guarded_perc_diff(abs_diff, lag)

        df[f"lag_{metric}"] = lag
        df[f"abs_diff_{metric}"] = abs_diff
        df[f"perc_diff_{metric}"] = perc_diff

    first_months = int((~same_partition).sum())
    logger.info(
        "Compared %d campaign-months (%d without a prior month)",
        len(df),
        first_months,
    )
    return df[COMPARISON_COLUMNS]
