"""Pipeline configuration and environment setup."""

import dataclasses
from dataclasses import dataclass
from pathlib import Path

import yaml

from ads_pipeline.utils.io import load_toml_config

type ConfigDict = dict[str, str | int | bool | list[str]]

PYPROJECT = Path(__file__).parent.parent / "pyproject.toml"

OUTPUT_FORMATS = ("csv", "parquet", "json")


@dataclass(frozen=True)
class SourceConfig:
    data_dir: Path
    facebook_daily: str = "facebook_ads_basic_daily*.csv"
    facebook_adset: str = "facebook_adset.csv"
    facebook_campaign: str = "facebook_campaign.csv"
    google_daily: str = "google_ads_basic_daily*.csv"


@dataclass(frozen=True)
class OutputConfig:
    output_dir: Path
    fmt: str = "csv"


@dataclass(frozen=True)
class PipelineConfig:
    env: str
    sources: SourceConfig
    output: OutputConfig
    validate_stages: bool = True
    log_level: str = "INFO"


def load_pipeline_config(env: str = "production") -> PipelineConfig:
    match env:
        case "production":
            sources = SourceConfig(data_dir=Path("/data/ads/raw"))
            output = OutputConfig(output_dir=Path("/data/ads/output"), fmt="parquet")
            log_level = "INFO"
        case "staging":
            sources = SourceConfig(data_dir=Path("/data/ads-staging/raw"))
            output = OutputConfig(output_dir=Path("/data/ads-staging/output"), fmt="parquet")
            log_level = "INFO"
        case "development":
            sources = SourceConfig(data_dir=Path("data/raw"))
            output = OutputConfig(output_dir=Path("data/output"), fmt="csv")
            log_level = "DEBUG"
        case other:
            raise ValueError(f"Unknown environment: {other}")

    return PipelineConfig(env=env, sources=sources, output=output, log_level=log_level)


def get_env_config(pyproject: Path = PYPROJECT) -> ConfigDict:
    """Read pipeline config from pyproject.toml."""
    if not pyproject.exists():
        return {}
    data = load_toml_config(pyproject)
    return data.get("tool", {}).get("ads_pipeline", {})


def load_config_file(path: Path | None = None) -> ConfigDict:
    """Load overrides from a YAML file, falling back to pyproject.toml."""
    if path is not None:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    return get_env_config()


def apply_overrides(config: PipelineConfig, overrides: ConfigDict) -> PipelineConfig:
    """Return a copy of ``config`` with flat override keys applied.

    Recognised keys: data_dir, facebook_daily, facebook_adset,
    facebook_campaign, google_daily, output_dir, output_format,
    validate_stages, log_level. ``env`` is ignored here since it selects
    the base config.
    """
    sources = config.sources
    output = config.output
    top_level: dict = {}

    for key, value in overrides.items():
        match key:
            case "env":
                continue
            case "data_dir":
                sources = dataclasses.replace(sources, data_dir=Path(value))
            case "facebook_daily" | "facebook_adset" | "facebook_campaign" | "google_daily":
                sources = dataclasses.replace(sources, **{key: str(value)})
            case "output_dir":
                output = dataclasses.replace(output, output_dir=Path(value))
            case "output_format":
                if value not in OUTPUT_FORMATS:
                    raise ValueError(f"Unsupported output format: {value}")
                output = dataclasses.replace(output, fmt=value)
            case "validate_stages":
                top_level["validate_stages"] = bool(value)
            case "log_level":
                top_level["log_level"] = str(value).upper()
            case other:
                raise ValueError(f"Unknown config key: {other}")

    return dataclasses.replace(config, sources=sources, output=output, **top_level)
