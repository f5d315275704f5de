from __future__ import annotations

import math
from typing import Mapping, Sequence

from ..models import AllocationShare, Holding, TimelinePoint
from ..utils import date_key, is_valid_number
from .validation import (
    HISTORICAL_PERFORMANCE,
    HOLDINGS,
    MARKET_CAP,
    SECTOR_ALLOCATION,
    IngestionError,
)

Row = Mapping[str, object]

# sheet column -> Holding attribute
HOLDING_TEXT_COLUMNS = {
    "Symbol": "symbol",
    "Company Name": "name",
    "Sector": "sector",
    "Market Cap": "market_cap",
    "Exchange": "exchange",
}
HOLDING_NUMBER_COLUMNS = {
    "Avg Price ₹": "avg_price",
    "Current Price (₹)": "current_price",
    "Value ₹": "value",
    "Gain/Loss (₹)": "gain_loss",
}
TIMELINE_COLUMNS = {
    "Portfolio Value (₹)": "portfolio",
    "Nifty 50": "benchmark_index",
    "Gold (₹/10g)": "commodity_reference",
}


def coerce_number(val) -> float:
    """Parse a numeric cell, tolerating grouping commas. Invalid input yields NaN."""
    if isinstance(val, bool):
        return math.nan
    if isinstance(val, (int, float)):
        return float(val)
    if isinstance(val, str):
        text = val.replace(",", "").strip()
        if not text:
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    try:
        return float(val)
    except (TypeError, ValueError):
        return math.nan


def to_percent(fraction: float) -> float:
    return fraction * 100


def text_cell(val) -> str:
    if val is None:
        return ""
    if isinstance(val, float) and math.isnan(val):
        return ""
    return str(val).strip()


def row_number(idx: int) -> int:
    # header occupies the first sheet row
    return idx + 2


def require_number(sheet: str, idx: int, row: Row, column: str) -> float:
    raw = row.get(column, "")
    num = coerce_number(raw)
    if not is_valid_number(num):
        raise IngestionError(f"{sheet} row {row_number(idx)}: {column} is not a number ({raw!r})")
    return num


def find_metric_row(rows: Sequence[Row], sheet: str, metric: str) -> Row:
    for row in rows:
        if row.get("Metric") == metric:
            return row
    raise IngestionError(f"{sheet}: missing metric row {metric!r}")


def _quantity(idx: int, row: Row) -> int:
    qty = require_number(HOLDINGS, idx, row, "Quantity")
    if qty < 0 or not qty.is_integer():
        raise IngestionError(
            f"{HOLDINGS} row {row_number(idx)}: Quantity must be a whole number >= 0 ({row.get('Quantity')!r})"
        )
    return int(qty)


def normalize_holdings(rows: Sequence[Row]) -> tuple[Holding, ...]:
    holdings = []
    seen = set()
    for idx, row in enumerate(rows):
        fields = {attr: text_cell(row.get(col, "")) for col, attr in HOLDING_TEXT_COLUMNS.items()}
        symbol = fields["symbol"]
        if not symbol:
            raise IngestionError(f"{HOLDINGS} row {row_number(idx)}: Symbol is empty")
        if symbol in seen:
            raise IngestionError(f"{HOLDINGS} row {row_number(idx)}: duplicate Symbol {symbol}")
        seen.add(symbol)
        for col, attr in HOLDING_NUMBER_COLUMNS.items():
            fields[attr] = require_number(HOLDINGS, idx, row, col)
        fields["quantity"] = _quantity(idx, row)
        fields["gain_loss_percent"] = to_percent(require_number(HOLDINGS, idx, row, "Gain/Loss %"))
        holdings.append(Holding(**fields))
    return tuple(holdings)


def normalize_allocation(rows: Sequence[Row], sheet: str, label_column: str) -> dict[str, AllocationShare]:
    """Bucket label -> value/percentage; a repeated label keeps the last row, as the sheet reads top-down."""
    buckets: dict[str, AllocationShare] = {}
    for idx, row in enumerate(rows):
        label = text_cell(row.get(label_column, ""))
        buckets[label] = AllocationShare(
            value=require_number(sheet, idx, row, "Value (₹)"),
            percentage=to_percent(require_number(sheet, idx, row, "Percentage")),
        )
    return buckets


def normalize_sector_allocation(rows: Sequence[Row]) -> dict[str, AllocationShare]:
    return normalize_allocation(rows, SECTOR_ALLOCATION, "Sector")


def normalize_market_cap_allocation(rows: Sequence[Row]) -> dict[str, AllocationShare]:
    return normalize_allocation(rows, MARKET_CAP, "Market Cap")


def normalize_timeline(rows: Sequence[Row]) -> tuple[TimelinePoint, ...]:
    points = []
    for idx, row in enumerate(rows):
        values = {
            attr: require_number(HISTORICAL_PERFORMANCE, idx, row, col)
            for col, attr in TIMELINE_COLUMNS.items()
        }
        points.append(TimelinePoint(date=date_key(row.get("Date", "")), **values))
    return tuple(points)
