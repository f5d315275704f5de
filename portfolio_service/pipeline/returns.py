from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd
import structlog

from ..models import ReturnsTable, TimelinePoint

log = structlog.get_logger()

# wire series name -> TimelinePoint attribute
SERIES = {
    "portfolio": "portfolio",
    "benchmarkIndex": "benchmark_index",
    "commodityReference": "commodity_reference",
}

# window label -> offset of the reference row counted back from the latest row;
# None anchors at the first row. Assumes one row per month over a year.
WINDOWS = {
    "1month": 1,
    "3months": 3,
    "1year": None,
}

MIN_POINTS = max(offset for offset in WINDOWS.values() if offset is not None) + 1


class InsufficientHistoryError(ValueError):
    pass


def timeline_frame(timeline: Sequence[TimelinePoint]) -> pd.DataFrame:
    rows = [point.model_dump() for point in timeline]
    frame = pd.DataFrame(rows, columns=["date", *SERIES.values()])
    return frame.rename(columns={attr: name for name, attr in SERIES.items()})


def pct_return(latest: float, reference: float) -> Optional[str]:
    """Percent change formatted to two decimals; None when the reference is zero."""
    if reference == 0:
        return None
    return f"{(latest - reference) / reference * 100:.2f}"


def _reference_index(n: int, offset: int | None) -> int:
    return 0 if offset is None else n - 1 - offset


def calculate_returns(timeline: Sequence[TimelinePoint]) -> ReturnsTable:
    n = len(timeline)
    if n < MIN_POINTS:
        raise InsufficientHistoryError(f"returns need at least {MIN_POINTS} timeline points, got {n}")
    frame = timeline_frame(timeline)
    latest = frame.iloc[n - 1]
    out: ReturnsTable = {}
    for series in SERIES:
        windows = {}
        for label, offset in WINDOWS.items():
            ref_idx = _reference_index(n, offset)
            reference = float(frame.iloc[ref_idx][series])
            value = pct_return(float(latest[series]), reference)
            if value is None:
                log.warning(
                    "return_reference_zero",
                    series=series,
                    window=label,
                    reference_date=frame.iloc[ref_idx]["date"],
                )
            windows[label] = value
        out[series] = windows
    return out
