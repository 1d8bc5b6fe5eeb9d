"""Advertising domain: cross-platform campaign rollups and monthly trends.

Facebook and Google daily rows are unified, normalized to a campaign key
taken from ``utm_campaign``, rolled up per campaign and month, and compared
against each campaign's previous month.
"""

import logging

import pandas as pd

from ads_pipeline.config import PipelineConfig
from ads_pipeline.domains.advertising.ingest import load_facebook_ads, load_google_ads
from ads_pipeline.domains.advertising.unify import unify_sources
from ads_pipeline.domains.advertising.transform import normalize_ad_records
from ads_pipeline.domains.advertising.monthly import aggregate_monthly
from ads_pipeline.domains.advertising.trends import compare_periods
from ads_pipeline.domains.advertising.export import write_comparison_output
from ads_pipeline.domains.advertising.models import (
    MonthlyMetricSchema,
    NormalizedAdSchema,
    PeriodComparisonSchema,
    RawAdSchema,
)
from ads_pipeline.utils.types import StageFrames, StatusReport
from ads_pipeline.utils.validators import validate_dataframe

logger = logging.getLogger(__name__)


def validate(df: pd.DataFrame, schema_name: str = "normalized") -> bool:
    """Validate a stage frame against the matching pandera schema."""
    match schema_name:
        case "raw":
            RawAdSchema.validate(df)
        case "normalized":
            NormalizedAdSchema.validate(df)
        case "monthly":
            MonthlyMetricSchema.validate(df)
        case "comparison":
            PeriodComparisonSchema.validate(df)
        case other:
            raise ValueError(f"No schema registered for: {other}")
    return True


def check_sources(config: PipelineConfig) -> StatusReport:
    """Check that both platform exports load and unify into valid raw rows."""
    try:
        unified = unify_sources(load_facebook_ads(config.sources), load_google_ads(config.sources))
        result = validate_dataframe(unified, RawAdSchema)

        match result:
            case {"valid": True}:
                return {"status": "ok", "row_count": len(unified)}
            case {"valid": False, "errors": errs}:
                return {"status": "error", "message": "; ".join(errs[:3])}
    except FileNotFoundError as exc:
        return {"status": "error", "message": str(exc)}
    except ValueError as exc:
        return {"status": "error", "message": f"Malformed export: {exc}"}


def build_period_comparison(
    facebook: pd.DataFrame,
    google: pd.DataFrame,
    validate_stages: bool = True,
) -> StageFrames:
    """Run every stage over in-memory platform frames.

    Returns the output of each stage keyed by name; the final report rows are
    under ``"comparison"``.
    """
    unified = unify_sources(facebook, google)
    normalized = normalize_ad_records(unified)
    monthly = aggregate_monthly(normalized)
    comparison = compare_periods(monthly)

    if validate_stages:
        validate(unified, "raw")
        validate(normalized, "normalized")
        validate(monthly, "monthly")
        validate(comparison, "comparison")

    return {
        "unified": unified,
        "normalized": normalized,
        "monthly": monthly,
        "comparison": comparison,
    }


def run(config: PipelineConfig, export: bool = True) -> StageFrames:
    """Execute the full advertising pipeline from the configured exports."""
    facebook = load_facebook_ads(config.sources)
    google = load_google_ads(config.sources)

    frames = build_period_comparison(facebook, google, validate_stages=config.validate_stages)

    if export:
        write_comparison_output(frames, config.output)

    logger.info("Advertising pipeline produced %d comparison rows", len(frames["comparison"]))
    return frames
