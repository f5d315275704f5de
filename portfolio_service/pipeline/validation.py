from typing import Mapping, Sequence, Tuple, List

HOLDINGS = "Holdings"
SECTOR_ALLOCATION = "Sector_Allocation"
MARKET_CAP = "Market_Cap"
HISTORICAL_PERFORMANCE = "Historical_Performance"
SUMMARY = "Summary"
TOP_PERFORMERS = "Top_Performers"

REQUIRED_COLUMNS = {
    HOLDINGS: [
        "Symbol",
        "Company Name",
        "Quantity",
        "Avg Price ₹",
        "Current Price (₹)",
        "Sector",
        "Market Cap",
        "Exchange",
        "Value ₹",
        "Gain/Loss (₹)",
        "Gain/Loss %",
    ],
    SECTOR_ALLOCATION: ["Sector", "Value (₹)", "Percentage"],
    MARKET_CAP: ["Market Cap", "Value (₹)", "Percentage"],
    HISTORICAL_PERFORMANCE: ["Date", "Portfolio Value (₹)", "Nifty 50", "Gold (₹/10g)"],
    SUMMARY: ["Metric", "Value"],
    TOP_PERFORMERS: ["Metric", "Symbol", "Company Name", "Performance"],
}

SUMMARY_METRICS = [
    "Total Portfolio Value",
    "Total Invested Amount",
    "Total Gain/Loss",
    "Total Gain/Loss %",
    "Number of Holdings",
    "Diversification Score",
    "Risk Level",
]

PERFORMER_METRICS = ["Best Performer", "Worst Performer"]

MIN_TIMELINE_POINTS = 4


class IngestionError(ValueError):
    """The workbook cannot be turned into a usable snapshot."""

    def __init__(self, reasons):
        if isinstance(reasons, str):
            reasons = [reasons]
        self.reasons = list(reasons)
        super().__init__("; ".join(self.reasons) or "ingestion failed")


def _metrics_present(rows: Sequence[Mapping]) -> set:
    return {row.get("Metric") for row in rows}


def validate_sheets(sheets: Mapping[str, Sequence[Mapping]]) -> Tuple[bool, List[str]]:
    """Check required sheets, columns and metric rows before any coercion happens."""
    reasons = []
    for sheet, columns in REQUIRED_COLUMNS.items():
        rows = sheets.get(sheet)
        if rows is None:
            reasons.append(f"missing sheet {sheet}")
            continue
        seen = set()
        for row in rows:
            seen.update(row.keys())
        # an empty sheet has no header information to check
        if rows:
            for col in columns:
                if col not in seen:
                    reasons.append(f"{sheet}: missing column {col}")

    if SUMMARY in sheets:
        present = _metrics_present(sheets[SUMMARY])
        for metric in SUMMARY_METRICS:
            if metric not in present:
                reasons.append(f"{SUMMARY}: missing metric row {metric!r}")
    if TOP_PERFORMERS in sheets:
        present = _metrics_present(sheets[TOP_PERFORMERS])
        for metric in PERFORMER_METRICS:
            if metric not in present:
                reasons.append(f"{TOP_PERFORMERS}: missing metric row {metric!r}")

    perf = sheets.get(HISTORICAL_PERFORMANCE)
    if perf is not None and len(perf) < MIN_TIMELINE_POINTS:
        reasons.append(
            f"{HISTORICAL_PERFORMANCE}: need at least {MIN_TIMELINE_POINTS} rows, got {len(perf)}"
        )
    return (len(reasons) == 0), reasons
