import pandas as pd
import pytest

from ads_pipeline.domains.advertising.models import METRIC_COLUMNS, RAW_FIELDS


def make_platform_rows(rows: list[dict]) -> pd.DataFrame:
    """Build an adapter-shaped frame; unspecified metrics are null."""
    records = []
    for row in rows:
        record = {"ad_date": None, "tracking_string": None, **{m: None for m in METRIC_COLUMNS}}
        record.update(row)
        records.append(record)
    df = pd.DataFrame(records, columns=RAW_FIELDS)
    df["ad_date"] = pd.to_datetime(df["ad_date"])
    return df


@pytest.fixture
def platform_rows():
    return make_platform_rows


@pytest.fixture
def facebook_rows():
    return make_platform_rows([
        {"ad_date": "2024-01-05", "tracking_string": "utm_campaign=SpringSale&utm_source=fb",
         "spend": 10.0, "impressions": 1000, "clicks": 2, "value": 30.0},
        {"ad_date": "2024-02-03", "tracking_string": "utm_campaign=SpringSale&utm_source=fb",
         "spend": 40.0, "impressions": 2000, "clicks": 10, "value": 20.0},
        {"ad_date": "2024-01-09", "tracking_string": "utm_source=fb",
         "spend": 5.0, "impressions": 100, "clicks": 1},
    ])


@pytest.fixture
def google_rows():
    return make_platform_rows([
        {"ad_date": "2024-01-20", "tracking_string": "utm_source=google&utm_campaign=springsale",
         "spend": 20.0, "impressions": 1000, "clicks": 3, "value": 45.0},
        {"ad_date": "2024-01-21", "tracking_string": "utm_campaign=brand_search",
         "spend": 15.0, "impressions": 0, "clicks": 0},
    ])
