from __future__ import annotations

from typing import Mapping, Sequence

from ..models import Holding, Performer, Summary, SummaryLabel
from .normalize import coerce_number, find_metric_row, text_cell, to_percent
from .validation import SUMMARY, TOP_PERFORMERS, IngestionError
from ..utils import is_valid_number

Row = Mapping[str, object]


def _metric_number(rows: Sequence[Row], metric: str) -> float:
    raw = find_metric_row(rows, SUMMARY, metric).get("Value", "")
    num = coerce_number(raw)
    if not is_valid_number(num):
        raise IngestionError(f"{SUMMARY}: {metric} is not a number ({raw!r})")
    return num


def _metric_label(rows: Sequence[Row], metric: str) -> SummaryLabel:
    raw = find_metric_row(rows, SUMMARY, metric).get("Value", "")
    if is_valid_number(raw):
        return raw
    return text_cell(raw)


def build_performer(rows: Sequence[Row], metric: str) -> Performer:
    row = find_metric_row(rows, TOP_PERFORMERS, metric)
    raw = row.get("Performance", "")
    gain = coerce_number(raw)
    if not is_valid_number(gain):
        raise IngestionError(f"{TOP_PERFORMERS}: {metric} Performance is not a number ({raw!r})")
    return Performer(
        symbol=text_cell(row.get("Symbol", "")),
        name=text_cell(row.get("Company Name", "")),
        gain_percent=to_percent(gain),
    )


def build_summary(summary_rows: Sequence[Row], performer_rows: Sequence[Row]) -> Summary:
    count = _metric_number(summary_rows, "Number of Holdings")
    if count < 0 or not count.is_integer():
        raise IngestionError(f"{SUMMARY}: Number of Holdings must be a whole number ({count!r})")
    return Summary(
        total_value=_metric_number(summary_rows, "Total Portfolio Value"),
        total_invested=_metric_number(summary_rows, "Total Invested Amount"),
        total_gain_loss=_metric_number(summary_rows, "Total Gain/Loss"),
        total_gain_loss_percent=to_percent(_metric_number(summary_rows, "Total Gain/Loss %")),
        number_of_holdings=int(count),
        diversification_score=_metric_label(summary_rows, "Diversification Score"),
        risk_level=_metric_label(summary_rows, "Risk Level"),
        top_performer=build_performer(performer_rows, "Best Performer"),
        worst_performer=build_performer(performer_rows, "Worst Performer"),
    )


def check_summary_consistency(summary: Summary, holdings: Sequence[Holding], tolerance_pct: float = 1.0) -> list[str]:
    """Declared summary figures that disagree with the holdings sheet."""
    issues = []
    if summary.number_of_holdings != len(holdings):
        issues.append(
            f"Number of Holdings is {summary.number_of_holdings} but the Holdings sheet has {len(holdings)} rows"
        )
    held_value = sum(h.value for h in holdings)
    if summary.total_value:
        drift_pct = abs(held_value - summary.total_value) / abs(summary.total_value) * 100
        if drift_pct > tolerance_pct:
            issues.append(
                f"Total Portfolio Value {summary.total_value:,.2f} differs from holdings total "
                f"{held_value:,.2f} by {drift_pct:.2f}%"
            )
    return issues
