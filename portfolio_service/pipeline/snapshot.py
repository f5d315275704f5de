from __future__ import annotations

from typing import Mapping, Sequence

import structlog
from pydantic import ValidationError

from ..models import Allocation, FrozenModel, FrozenReturnsTable, Holding, Summary, TimelinePoint
from ..utils import sha256_json
from .aggregate import build_summary, check_summary_consistency
from .normalize import (
    normalize_holdings,
    normalize_market_cap_allocation,
    normalize_sector_allocation,
    normalize_timeline,
)
from .returns import InsufficientHistoryError, calculate_returns
from .validation import (
    HISTORICAL_PERFORMANCE,
    HOLDINGS,
    MARKET_CAP,
    SECTOR_ALLOCATION,
    SUMMARY,
    TOP_PERFORMERS,
    IngestionError,
    validate_sheets,
)
from .workbook import read_workbook

log = structlog.get_logger()


class PortfolioSnapshot(FrozenModel):
    """Everything derived from one workbook. Built once, never mutated."""

    holdings: tuple[Holding, ...]
    allocation: Allocation
    timeline: tuple[TimelinePoint, ...]
    returns: FrozenReturnsTable
    summary: Summary

    @property
    def digest(self) -> str:
        return sha256_json(self.model_dump(mode="json", by_alias=True))


def build_snapshot(sheets: Mapping[str, Sequence[Mapping]], value_tolerance_pct: float = 1.0) -> PortfolioSnapshot:
    ok, reasons = validate_sheets(sheets)
    if not ok:
        raise IngestionError(reasons)
    try:
        holdings = normalize_holdings(sheets[HOLDINGS])
        timeline = normalize_timeline(sheets[HISTORICAL_PERFORMANCE])
        snapshot = PortfolioSnapshot(
            holdings=holdings,
            allocation=Allocation(
                by_sector=normalize_sector_allocation(sheets[SECTOR_ALLOCATION]),
                by_market_cap=normalize_market_cap_allocation(sheets[MARKET_CAP]),
            ),
            timeline=timeline,
            returns=calculate_returns(timeline),
            summary=build_summary(sheets[SUMMARY], sheets[TOP_PERFORMERS]),
        )
    except InsufficientHistoryError as exc:
        raise IngestionError(str(exc)) from exc
    except ValidationError as exc:
        raise IngestionError([f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors()]) from exc
    for issue in check_summary_consistency(snapshot.summary, snapshot.holdings, value_tolerance_pct):
        log.warning("summary_inconsistent", detail=issue)
    return snapshot


def load_snapshot(file_path: str, value_tolerance_pct: float = 1.0) -> PortfolioSnapshot:
    try:
        snapshot = build_snapshot(read_workbook(file_path), value_tolerance_pct=value_tolerance_pct)
    except IngestionError as exc:
        log.error("snapshot_load_failed", path=file_path, reasons=exc.reasons)
        raise
    log.info(
        "snapshot_loaded",
        path=file_path,
        holdings=len(snapshot.holdings),
        timeline_points=len(snapshot.timeline),
        digest=snapshot.digest,
    )
    return snapshot
