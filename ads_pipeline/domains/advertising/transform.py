"""Normalize unified ad rows: dedup, campaign key extraction, null metrics."""

import logging
import re

import numpy as np
import pandas as pd

from ads_pipeline.domains.advertising.models import (
    METRIC_COLUMNS,
    NORMALIZED_COLUMNS,
    RAW_FIELDS,
)

logger = logging.getLogger(__name__)

CAMPAIGN_KEY_PATTERN = re.compile(r"utm_campaign=(\w+)")

# upstream exports serialize missing campaign values as the text "nan"
NULL_SENTINEL = "nan"


def extract_campaign_key(tracking_string: object) -> str | None:
    """Return the lower-cased ``utm_campaign`` value, or None.

    >>> extract_campaign_key("utm_campaign=SpringSale&utm_source=fb")
    'springsale'
    """
    if not isinstance(tracking_string, str):
        return None

    match = CAMPAIGN_KEY_PATTERN.search(tracking_string)
    if match is None:
        return None

    key = match.group(1).lower()
    return None if key == NULL_SENTINEL else key


def extract_campaign_keys(tracking_strings: pd.Series) -> pd.Series:
    """Vectorized ``extract_campaign_key`` over a column of tracking strings."""
    text = tracking_strings.where(tracking_strings.map(lambda v: isinstance(v, str)))
    keys = text.astype(object).str.extract(CAMPAIGN_KEY_PATTERN.pattern, expand=False).str.lower()
    keys = keys.where(keys.notna() & (keys != NULL_SENTINEL))
    return keys.astype(object).where(keys.notna(), None)


def coalesce_metric(series: pd.Series) -> pd.Series:
    """Coerce a metric to float and replace nulls with zero.

    Text that does not parse as a finite number counts as null.
    """
    values = pd.to_numeric(series, errors="coerce").astype("float64")
    return values.replace([np.inf, -np.inf], np.nan).fillna(0.0)


def drop_duplicate_rows(raw_df: pd.DataFrame) -> pd.DataFrame:
    """Collapse rows identical on date, tracking string and all six metrics.

    The platform tag is not part of the key, and nulls compare equal.
    """
    deduped = raw_df.drop_duplicates(subset=RAW_FIELDS, keep="first")
    dupes_removed = len(raw_df) - len(deduped)
    if dupes_removed:
        logger.info("Removed %d duplicate raw rows", dupes_removed)
    return deduped.reset_index(drop=True)


def normalize_ad_records(raw_df: pd.DataFrame) -> pd.DataFrame:
    """Turn unified raw rows into one normalized row per distinct raw row."""
    df = drop_duplicate_rows(raw_df)

    normalized = pd.DataFrame({"ad_date": pd.to_datetime(df["ad_date"])})
    normalized["campaign_key"] = extract_campaign_keys(df["tracking_string"])

    for metric_col in METRIC_COLUMNS:
        normalized[metric_col] = coalesce_metric(df[metric_col])

    unattributed = int(normalized["campaign_key"].isna().sum())
    if unattributed:
        logger.warning("%d of %d rows have no campaign key", unattributed, len(normalized))

    return normalized[NORMALIZED_COLUMNS]
