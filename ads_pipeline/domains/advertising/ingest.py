"""Source adapters for the Facebook and Google daily ad exports.

Each adapter returns the seven raw fields (``RAW_FIELDS``) and nothing else;
tagging rows with their platform is the unifier's job.
"""

import logging

import pandas as pd

from ads_pipeline.config import SourceConfig
from ads_pipeline.domains.advertising.models import METRIC_COLUMNS, RAW_FIELDS
from ads_pipeline.utils.io import read_csv_files
from ads_pipeline.utils.transforms import merge_datasets, normalize_columns

logger = logging.getLogger(__name__)

# both platforms export the tracking string as `url_parameters`
COLUMN_MAPPING = {"url_parameters": "tracking_string"}


def _to_raw_fields(df: pd.DataFrame, platform: str) -> pd.DataFrame:
    """Project an export onto the raw fields, adding absent metrics as null."""
    missing = {"ad_date", "tracking_string"} - set(df.columns)
    if missing:
        raise ValueError(f"{platform} export is missing required columns: {missing}")

    for metric_col in METRIC_COLUMNS:
        if metric_col not in df.columns:
            logger.warning("%s export has no %s column, treating as null", platform, metric_col)
            df[metric_col] = pd.NA

    df["ad_date"] = pd.to_datetime(df["ad_date"])
    return df[RAW_FIELDS].reset_index(drop=True)


def _join_reference_table(
    daily: pd.DataFrame,
    sources: SourceConfig,
    filename: str,
    key: str,
) -> pd.DataFrame:
    """Left-join a reference table onto the daily rows without changing row count."""
    path = sources.data_dir / filename
    if key not in daily.columns:
        logger.warning("Daily Facebook rows carry no %s, skipping %s", key, filename)
        return daily
    if not path.exists():
        logger.warning("Reference table %s not found, skipping enrichment", path)
        return daily

    reference = normalize_columns(pd.read_csv(path))
    reference = reference.drop(columns=[c for c in reference.columns if c in daily.columns and c != key])
    # many_to_one raises MergeError if the reference key is not unique
    return merge_datasets(daily, reference, on=key, how="left", validate="many_to_one")


def load_facebook_ads(sources: SourceConfig) -> pd.DataFrame:
    """Load Facebook daily ad rows, enriched with ad set and campaign attributes."""
    daily = read_csv_files(sources.data_dir, sources.facebook_daily)
    daily = normalize_columns(daily, mapping=COLUMN_MAPPING)

    enriched = _join_reference_table(daily, sources, sources.facebook_adset, "adset_id")
    enriched = _join_reference_table(enriched, sources, sources.facebook_campaign, "campaign_id")

    logger.info("Loaded %d Facebook daily rows", len(enriched))
    return _to_raw_fields(enriched, "Facebook")


def load_google_ads(sources: SourceConfig) -> pd.DataFrame:
    """Load Google daily ad rows, which already carry every raw field."""
    daily = read_csv_files(sources.data_dir, sources.google_daily)
    daily = normalize_columns(daily, mapping=COLUMN_MAPPING)

    logger.info("Loaded %d Google daily rows", len(daily))
    return _to_raw_fields(daily, "Google")
