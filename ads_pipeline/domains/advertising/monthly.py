"""Monthly campaign rollup with guarded efficiency ratios."""

import logging

import numpy as np
import pandas as pd

from ads_pipeline.domains.advertising.models import MONTHLY_COLUMNS
from ads_pipeline.utils.transforms import decimal_ratio, decimal_sum, safe_divide, to_decimal

logger = logging.getLogger(__name__)

GROUP_KEYS = ["campaign_key", "ad_month"]


def null_keys_to_none(series: pd.Series) -> pd.Series:
    return series.astype(object).where(series.notna(), None)


def sort_by_campaign_month(df: pd.DataFrame) -> pd.DataFrame:
    """Order rows by campaign_key (null keys last), then ad_month."""
    return df.sort_values(GROUP_KEYS, na_position="last", kind="mergesort", ignore_index=True)


def aggregate_monthly(normalized: pd.DataFrame) -> pd.DataFrame:
    """Roll normalized daily rows up to one row per (campaign_key, month).

    Rows without a campaign key form their own group per month. Ratios fall
    back to 0 whenever their denominator sum is not positive:

      cpc  = spend / clicks
      cpm  = 1000 * spend / impressions
      ctr  = round(100 * clicks / impressions, 2)
      romi = round(100 * (value - spend) / spend, 2), also 0 without value

    Sums and the rounded ratios use decimal arithmetic, so ties round the
    way SQL ``ROUND`` does on numerics.
    """
    df = normalized.assign(ad_month=normalized["ad_date"].dt.to_period("M").dt.to_timestamp())

    sums = df.groupby(GROUP_KEYS, dropna=False, sort=False).agg(
        spend=("spend", decimal_sum),
        impressions=("impressions", decimal_sum),
        clicks=("clicks", decimal_sum),
        value=("value", decimal_sum),
    ).reset_index()
    for metric_col in ("spend", "impressions", "clicks", "value"):
        sums[metric_col] = sums[metric_col].astype("float64")

    monthly = pd.DataFrame({
        "ad_month": sums["ad_month"],
        "campaign_key": null_keys_to_none(sums["campaign_key"]),
        "total_spend": sums["spend"].clip(lower=0),
        "total_impressions": sums["impressions"].clip(lower=0),
        "total_clicks": sums["clicks"].clip(lower=0),
        # null distinguishes "no revenue signal" from a computed zero
        "total_value": sums["value"].where(sums["value"] > 0, np.nan),
    })

    monthly["cpc"] = safe_divide(sums["spend"], sums["clicks"])
    monthly["cpm"] = safe_divide(sums["spend"], sums["impressions"], scale=1000)
    monthly["ctr"] = decimal_ratio(sums["clicks"], sums["impressions"], scale=100)

    net_return = pd.Series(
        [to_decimal(value) - to_decimal(spend) for value, spend in zip(sums["value"], sums["spend"])],
        index=sums.index,
        dtype=object,
    )
    has_return = sums["value"] > 0
    monthly["romi"] = decimal_ratio(net_return, sums["spend"].where(has_return), scale=100)

    logger.info(
        "Aggregated %d normalized rows into %d campaign-months (%d campaigns)",
        len(normalized),
        len(monthly),
        monthly["campaign_key"].nunique(dropna=False),
    )
    return sort_by_campaign_month(monthly[MONTHLY_COLUMNS])
