"""Render period comparisons for the console."""

import pandas as pd
from rich.console import Console
from rich.table import Table

type TrendNotes = list[str]

console = Console()

UNATTRIBUTED_LABEL = "(no campaign)"


def _fmt(value: float | None) -> str:
    if value is None or pd.isna(value):
        return "-"
    return f"{value:,.2f}"


def _label(campaign_key: str | None) -> str:
    return UNATTRIBUTED_LABEL if pd.isna(campaign_key) else campaign_key


def _direction(diff: float) -> str:
    match diff:
        case d if d > 0:
            return "up"
        case d if d < 0:
            return "down"
        case _:
            return "flat"


def build_trend_table(
    comparison: pd.DataFrame,
    campaign: str | None = None,
    limit: int | None = None,
) -> Table:
    """Build a rich table of monthly metrics with their prior-month deltas."""
    rows = comparison
    if campaign is not None:
        rows = rows[rows["campaign_key"] == campaign.lower()]
    if limit is not None:
        rows = rows.head(limit)

    table = Table(title="Monthly Campaign Trends")
    table.add_column("Month", style="cyan")
    table.add_column("Campaign", style="bold")
    table.add_column("Spend", justify="right")
    table.add_column("CTR %", justify="right")
    table.add_column("Δ CTR %", justify="right")
    table.add_column("CPM", justify="right")
    table.add_column("Δ CPM %", justify="right")
    table.add_column("ROMI %", justify="right")
    table.add_column("Δ ROMI %", justify="right")

    for _, row in rows.iterrows():
        table.add_row(
            row["ad_month"].strftime("%Y-%m"),
            _label(row["campaign_key"]),
            _fmt(row["total_spend"]),
            _fmt(row["ctr"]),
            _fmt(row["perc_diff_ctr"]),
            _fmt(row["cpm"]),
            _fmt(row["perc_diff_cpm"]),
            _fmt(row["romi"]),
            _fmt(row["perc_diff_romi"]),
        )

    return table


def summarize_trends(comparison: pd.DataFrame) -> TrendNotes:
    """One note per campaign describing its latest month against the prior one."""
    notes: TrendNotes = []
    if comparison.empty:
        return notes

    latest = comparison.groupby("campaign_key", dropna=False, sort=False).tail(1)
    for _, row in latest.iterrows():
        label = _label(row["campaign_key"])
        month = row["ad_month"].strftime("%Y-%m")
        if pd.isna(row["lag_ctr"]):
            notes.append(f"{label}: first reported month {month}")
            continue

        changes = ", ".join(
            f"{metric.upper()} {_direction(row[metric] - row[f'lag_{metric}'])}"
            for metric in ("ctr", "cpm", "romi")
        )
        notes.append(f"{label} {month}: {changes}")

    return notes


def print_trend_report(comparison: pd.DataFrame, campaign: str | None = None) -> None:
    console.print(build_trend_table(comparison, campaign=campaign))
    for note in summarize_trends(comparison):
        console.print(f"  • {note}")
