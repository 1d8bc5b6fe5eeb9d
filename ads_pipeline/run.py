"""Main pipeline runner. Validates sources or executes the ads pipeline."""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ads_pipeline.config import (
    OUTPUT_FORMATS,
    PipelineConfig,
    apply_overrides,
    load_config_file,
    load_pipeline_config,
)
from ads_pipeline.domains import advertising
from ads_pipeline.domains.advertising.report import print_trend_report
from ads_pipeline.utils.types import PipelineStatus

console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Resolve the config: env defaults, then file overrides, then CLI flags."""
    file_overrides = load_config_file(args.config)
    env = args.env or file_overrides.get("env", "production")
    config = apply_overrides(load_pipeline_config(env), file_overrides)

    cli_overrides = {
        "data_dir": args.data_dir,
        "output_dir": args.output_dir,
        "output_format": args.format,
    }
    return apply_overrides(config, {k: v for k, v in cli_overrides.items() if v is not None})


def validate_sources(config: PipelineConfig) -> bool:
    result = advertising.check_sources(config)

    table = Table(title="Source Validation")
    table.add_column("Domain")
    table.add_column("Valid")
    table.add_column("Details")

    match result:
        case {"status": "ok", "row_count": n}:
            table.add_row("advertising", "[green]✓[/green]", f"{n:,} raw rows")
            valid = True
        case {"status": "error", "message": msg}:
            table.add_row("advertising", "[red]✗[/red]", msg)
            valid = False
        case _:
            table.add_row("advertising", "[red]✗[/red]", "Unknown validation result")
            valid = False

    console.print(table)
    return valid


def run_pipeline(config: PipelineConfig, export: bool, campaign: str | None) -> PipelineStatus:
    console.print(f"[bold]Running ads pipeline ({config.env})...[/bold]")
    try:
        frames = advertising.run(config, export=export)
    except Exception:
        logging.getLogger(__name__).exception("Ads pipeline failed")
        return PipelineStatus.FAILED

    print_trend_report(frames["comparison"], campaign=campaign)
    return PipelineStatus.SUCCESS


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the ads performance pipeline")
    parser.add_argument("--env", type=str, help="production, staging or development")
    parser.add_argument("--config", type=Path, help="YAML file with config overrides")
    parser.add_argument("--data-dir", type=str, help="Directory holding the platform exports")
    parser.add_argument("--output-dir", type=str, help="Directory for run outputs")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, help="Output file format")
    parser.add_argument("--campaign", type=str, help="Only show this campaign in the report")
    parser.add_argument("--no-export", action="store_true", help="Skip writing output files")
    parser.add_argument("--validate", action="store_true", help="Only validate sources, don't run")
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        sys.exit(1)

    _configure_logging(config.log_level)

    if args.validate:
        if not validate_sources(config):
            sys.exit(1)
        return

    status = run_pipeline(config, export=not args.no_export, campaign=args.campaign)
    match status:
        case PipelineStatus.SUCCESS:
            console.print("[bold green]Ads pipeline completed.[/bold green]")
        case _:
            console.print(f"[bold red]Ads pipeline {status}.[/bold red]")
            sys.exit(1)


if __name__ == "__main__":
    main()
