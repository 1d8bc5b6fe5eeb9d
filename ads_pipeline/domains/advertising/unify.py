"""Combine the per-platform raw frames into one tagged frame."""

import logging

import pandas as pd

from ads_pipeline.domains.advertising.models import RAW_COLUMNS, RAW_FIELDS, AdSource

logger = logging.getLogger(__name__)


def _tag_source(df: pd.DataFrame, source: AdSource) -> pd.DataFrame:
    missing = set(RAW_FIELDS) - set(df.columns)
    if missing:
        raise ValueError(f"{source} rows are missing raw fields: {sorted(missing)}")

    tagged = df[RAW_FIELDS].copy()
    tagged["source"] = source.value
    return tagged[RAW_COLUMNS]


def unify_sources(facebook: pd.DataFrame, google: pd.DataFrame) -> pd.DataFrame:
    """Stack Facebook then Google rows, tagging each with its platform.

    Row order within each platform is preserved. Nothing is filtered or
    deduplicated here.
    """
    tagged = [_tag_source(facebook, AdSource.FACEBOOK), _tag_source(google, AdSource.GOOGLE)]
    unified = pd.concat(tagged, ignore_index=True)

    logger.info(
        "Unified %d rows (%d Facebook, %d Google)",
        len(unified),
        len(tagged[0]),
        len(tagged[1]),
    )
    return unified
