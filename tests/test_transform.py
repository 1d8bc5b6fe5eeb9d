import numpy as np
import pandas as pd
import pytest

from ads_pipeline.domains.advertising.models import METRIC_COLUMNS, NORMALIZED_COLUMNS
from ads_pipeline.domains.advertising.transform import (
    coalesce_metric,
    drop_duplicate_rows,
    extract_campaign_key,
    extract_campaign_keys,
    normalize_ad_records,
)
from ads_pipeline.domains.advertising.unify import unify_sources


TRACKING_CASES = [
    ("utm_campaign=SpringSale&utm_source=fb", "springsale"),
    ("utm_source=fb&utm_campaign=Summer_2024&utm_medium=cpc", "summer_2024"),
    ("utm_campaign=nan", None),
    ("utm_campaign=NaN&utm_source=fb", None),
    ("utm_campaign=nanny", "nanny"),
    ("utm_source=fb&utm_medium=cpc", None),
    ("utm_campaign=", None),
    ("", None),
    (None, None),
    (np.nan, None),
    (12345, None),
]


@pytest.mark.parametrize("tracking_string, expected", TRACKING_CASES)
def test_extract_campaign_key(tracking_string, expected):
    assert extract_campaign_key(tracking_string) == expected


def test_extract_campaign_key_stops_at_separator():
    assert extract_campaign_key("utm_campaign=black-friday") == "black"


def test_column_extraction_matches_single_value_rule():
    tracking = pd.Series([value for value, _ in TRACKING_CASES], dtype=object)

    keys = extract_campaign_keys(tracking)
    assert keys.tolist() == [expected for _, expected in TRACKING_CASES]
    assert keys.index.equals(tracking.index)


def test_coalesce_metric_replaces_nulls_and_junk():
    coalesced = coalesce_metric(pd.Series([1.5, None, "oops", -2]))

    assert coalesced.tolist() == [1.5, 0.0, 0.0, -2.0]


def test_coalesce_metric_treats_infinity_as_junk():
    coalesced = coalesce_metric(pd.Series(["inf", "-inf", "7"], dtype=object))

    assert coalesced.tolist() == [0.0, 0.0, 7.0]


def test_fractional_counts_are_not_truncated(platform_rows):
    rows = [
        {"ad_date": "2024-03-01", "tracking_string": "utm_campaign=a", "impressions": 1.5},
        {"ad_date": "2024-03-02", "tracking_string": "utm_campaign=a", "impressions": 1.5},
    ]
    normalized = normalize_ad_records(unify_sources(platform_rows(rows), platform_rows([])))

    assert normalized["impressions"].tolist() == [1.5, 1.5]


def test_identical_rows_collapse_across_platforms(platform_rows):
    row = {"ad_date": "2024-03-01", "tracking_string": "utm_campaign=a", "spend": 1.0, "clicks": 4}
    unified = unify_sources(platform_rows([row, row]), platform_rows([row]))

    assert len(drop_duplicate_rows(unified)) == 1


def test_rows_differing_in_one_metric_are_kept(platform_rows):
    rows = [
        {"ad_date": "2024-03-01", "tracking_string": "utm_campaign=a", "spend": 1.0},
        {"ad_date": "2024-03-01", "tracking_string": "utm_campaign=a", "spend": 2.0},
    ]
    normalized = normalize_ad_records(unify_sources(platform_rows(rows), platform_rows([])))

    assert normalized["spend"].tolist() == [1.0, 2.0]


def test_dedup_happens_before_key_extraction(platform_rows):
    # different raw strings that extract to the same key are distinct rows
    rows = [
        {"ad_date": "2024-03-01", "tracking_string": "utm_campaign=Promo", "spend": 1.0},
        {"ad_date": "2024-03-01", "tracking_string": "utm_campaign=promo", "spend": 1.0},
    ]
    normalized = normalize_ad_records(unify_sources(platform_rows(rows), platform_rows([])))

    assert normalized["campaign_key"].tolist() == ["promo", "promo"]


def test_normalized_metrics_are_never_null(facebook_rows, google_rows):
    normalized = normalize_ad_records(unify_sources(facebook_rows, google_rows))

    assert list(normalized.columns) == NORMALIZED_COLUMNS
    assert not normalized[METRIC_COLUMNS].isna().any().any()
    assert (normalized[METRIC_COLUMNS] >= 0).all().all()
    assert normalized["leads"].tolist() == [0, 0, 0, 0, 0]


def test_normalized_dtypes(facebook_rows, google_rows):
    normalized = normalize_ad_records(unify_sources(facebook_rows, google_rows))

    assert normalized["clicks"].dtype == "float64"
    assert normalized["spend"].dtype == "float64"
    assert normalized["campaign_key"].tolist() == [
        "springsale", "springsale", None, "springsale", "brand_search",
    ]
