import dataclasses

import pandas as pd
import pandera as pa
import pytest

from ads_pipeline.config import OutputConfig, PipelineConfig, SourceConfig
from ads_pipeline.domains import advertising
from ads_pipeline.domains.advertising import build_period_comparison, check_sources, validate


def test_end_to_end_springsale(facebook_rows, google_rows):
    frames = build_period_comparison(facebook_rows, google_rows)
    comparison = frames["comparison"]

    assert comparison["campaign_key"].tolist() == [
        "brand_search", "springsale", "springsale", None,
    ]

    january = comparison.iloc[1]
    assert january["total_spend"] == 30.0
    assert january["total_clicks"] == 5
    assert january["cpc"] == 6.0
    assert january["total_value"] == 75.0
    assert january["romi"] == 150.0
    assert january["ctr"] == 0.25
    assert january["cpm"] == 15.0

    february = comparison.iloc[2]
    assert february["ctr"] == 0.5
    assert february["lag_ctr"] == 0.25
    assert february["abs_diff_ctr"] == 0.25
    assert february["perc_diff_ctr"] == 100.0
    assert february["romi"] == -50.0
    assert february["perc_diff_romi"] == pytest.approx(133.0)


def test_zero_impression_campaign_has_zero_ratios(facebook_rows, google_rows):
    brand = build_period_comparison(facebook_rows, google_rows)["comparison"].iloc[0]

    assert brand["cpm"] == 0.0
    assert brand["ctr"] == 0.0
    assert brand["cpc"] == 0.0
    assert brand["romi"] == 0.0


def test_duplicate_rows_contribute_once(platform_rows):
    row = {"ad_date": "2024-01-05", "tracking_string": "utm_campaign=dup", "spend": 10.0, "clicks": 2}
    frames = build_period_comparison(platform_rows([row, row]), platform_rows([row]))

    assert len(frames["normalized"]) == 1
    assert frames["monthly"].iloc[0]["total_spend"] == 10.0


def test_pipeline_is_idempotent(facebook_rows, google_rows):
    first = build_period_comparison(facebook_rows, google_rows)["comparison"]
    second = build_period_comparison(facebook_rows, google_rows)["comparison"]

    pd.testing.assert_frame_equal(first, second)


def test_validate_rejects_null_metrics(facebook_rows, google_rows):
    normalized = build_period_comparison(facebook_rows, google_rows)["normalized"].copy()
    normalized["spend"] = normalized["spend"].astype("float64")
    normalized.loc[0, "spend"] = None

    with pytest.raises(pa.errors.SchemaError):
        validate(normalized, "normalized")


def test_validate_unknown_schema(facebook_rows):
    with pytest.raises(ValueError):
        validate(facebook_rows, "weekly")


@pytest.fixture
def config(tmp_path):
    data_dir = tmp_path / "raw"
    data_dir.mkdir()
    pd.DataFrame([
        {"ad_date": "2024-01-05", "url_parameters": "utm_campaign=Promo", "spend": 10.0,
         "impressions": 1000, "reach": 900, "clicks": 2, "leads": 0, "value": 30.0},
    ]).to_csv(data_dir / "facebook_ads_basic_daily.csv", index=False)
    pd.DataFrame([
        {"ad_date": "2024-02-05", "url_parameters": "utm_campaign=promo", "spend": 20.0,
         "impressions": 1000, "reach": 900, "clicks": 3, "leads": 1, "value": 10.0},
    ]).to_csv(data_dir / "google_ads_basic_daily.csv", index=False)

    return PipelineConfig(
        env="development",
        sources=SourceConfig(data_dir=data_dir),
        output=OutputConfig(output_dir=tmp_path / "out", fmt="csv"),
    )


def test_run_exports_every_stage(config):
    frames = advertising.run(config)

    run_dirs = list((config.output.output_dir).iterdir())
    assert len(run_dirs) == 1
    assert sorted(p.name for p in run_dirs[0].iterdir()) == [
        "comparison.csv", "monthly.csv", "normalized.csv",
    ]
    assert len(frames["comparison"]) == 2


def test_run_without_export(config):
    advertising.run(config, export=False)

    assert not config.output.output_dir.exists()


def test_run_fails_without_source(config):
    (config.sources.data_dir / "google_ads_basic_daily.csv").unlink()

    with pytest.raises(FileNotFoundError):
        advertising.run(config)
    assert not config.output.output_dir.exists()


def test_check_sources(config):
    assert check_sources(config) == {"status": "ok", "row_count": 2}


def test_check_sources_reports_missing_export(config):
    broken = dataclasses.replace(
        config, sources=dataclasses.replace(config.sources, google_daily="missing*.csv"),
    )

    result = check_sources(broken)
    assert result["status"] == "error"
    assert "missing" in result["message"]
