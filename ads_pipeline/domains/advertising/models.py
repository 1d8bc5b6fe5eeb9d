"""Column contracts and pandera schemas for the advertising pipeline stages."""

from enum import StrEnum

import pandera as pa
from pandera import Column, Check


class AdSource(StrEnum):
    FACEBOOK = "Facebook"
    GOOGLE = "Google"


METRIC_COLUMNS = ["spend", "impressions", "reach", "clicks", "leads", "value"]

# fields every source adapter must supply; `source` is added by the unifier
RAW_FIELDS = ["ad_date", "tracking_string", *METRIC_COLUMNS]
RAW_COLUMNS = ["ad_date", "tracking_string", "source", *METRIC_COLUMNS]
NORMALIZED_COLUMNS = ["ad_date", "campaign_key", *METRIC_COLUMNS]

MONTHLY_COLUMNS = [
    "ad_month",
    "campaign_key",
    "total_spend",
    "total_impressions",
    "total_clicks",
    "total_value",
    "cpc",
    "cpm",
    "romi",
    "ctr",
]

TRENDED_METRICS = ["ctr", "cpm", "romi"]

COMPARISON_COLUMNS = [
    "ad_month",
    "campaign_key",
    "total_spend",
    "total_impressions",
    "total_clicks",
    "total_value",
    "cpc",
    "ctr", "lag_ctr", "abs_diff_ctr", "perc_diff_ctr",
    "cpm", "lag_cpm", "abs_diff_cpm", "perc_diff_cpm",
    "romi", "lag_romi", "abs_diff_romi", "perc_diff_romi",
]


def _lower_case(series):
    return series == series.str.lower()


# raw values are only presence-checked: the normalizer owns their cleanup
RawAdSchema = pa.DataFrameSchema(
    columns={
        "ad_date": Column("datetime64[ns]", nullable=False),
        "tracking_string": Column(nullable=True),
        "source": Column(str, Check.isin([s.value for s in AdSource]), nullable=False),
        **{col: Column(nullable=True) for col in METRIC_COLUMNS},
    },
    coerce=True,
    strict=False,
)


NormalizedAdSchema = pa.DataFrameSchema(
    columns={
        "ad_date": Column("datetime64[ns]", nullable=False),
        "campaign_key": Column(
            str,
            checks=[
                Check(_lower_case, error="campaign_key must be lower-case"),
                Check.notin(["nan"]),
            ],
            nullable=True,
        ),
        **{col: Column(float, nullable=False) for col in METRIC_COLUMNS},
    },
    coerce=True,
    strict=False,
)


MonthlyMetricSchema = pa.DataFrameSchema(
    columns={
        "ad_month": Column(
            "datetime64[ns]",
            Check(lambda s: s.dt.day == 1, error="ad_month must be the first of the month"),
            nullable=False,
        ),
        "campaign_key": Column(str, nullable=True),
        "total_spend": Column(float, Check.greater_than_or_equal_to(0), nullable=False),
        "total_impressions": Column(float, Check.greater_than_or_equal_to(0), nullable=False),
        "total_clicks": Column(float, Check.greater_than_or_equal_to(0), nullable=False),
        "total_value": Column(float, Check.greater_than(0), nullable=True),
        "cpc": Column(float, nullable=False),
        "cpm": Column(float, nullable=False),
        "romi": Column(float, nullable=False),
        "ctr": Column(float, nullable=False),
    },
    checks=[
        Check(lambda df: (df["total_impressions"] > 0) | ((df["cpm"] == 0) & (df["ctr"] == 0)),
              error="cpm and ctr must be 0 without impressions"),
        Check(lambda df: (df["total_clicks"] > 0) | (df["cpc"] == 0),
              error="cpc must be 0 without clicks"),
        Check(lambda df: (df["total_spend"] > 0) | (df["romi"] == 0),
              error="romi must be 0 without spend"),
    ],
    unique=["campaign_key", "ad_month"],
    coerce=True,
    strict=False,
)


PeriodComparisonSchema = MonthlyMetricSchema.add_columns({
    "lag_ctr": Column(float, nullable=True),
    "abs_diff_ctr": Column(float, Check.greater_than_or_equal_to(0), nullable=True),
    "perc_diff_ctr": Column(float, nullable=False),
    "lag_cpm": Column(float, nullable=True),
    "abs_diff_cpm": Column(float, Check.greater_than_or_equal_to(0), nullable=True),
    "perc_diff_cpm": Column(float, nullable=True),
    "lag_romi": Column(float, nullable=True),
    "abs_diff_romi": Column(float, Check.greater_than_or_equal_to(0), nullable=True),
    "perc_diff_romi": Column(float, nullable=False),
})
