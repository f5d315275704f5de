import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from .schemas import AlertResponse, FilterOptions, HealthResponse, PerformanceResponse
from ..alerts.evaluator import default_rules, evaluate_alert
from ..config import settings
from ..models import Allocation, Holding, QueryState, Summary
from ..pipeline.export import XLSX_MEDIA_TYPE, export_records, export_workbook
from ..pipeline.query import apply_query, filter_options
from ..pipeline.snapshot import PortfolioSnapshot

log = structlog.get_logger()

router = APIRouter()

_EXPORT_FORMATS = ("xlsx", "json")

def current_snapshot(request: Request) -> PortfolioSnapshot:
    snap = getattr(request.app.state, "snapshot", None)
    if snap is None:
        raise HTTPException(503, 'snapshot not loaded')
    return snap

def query_state(
    search: str = Query("", description="Case-insensitive match on symbol or company name."),
    sector: str = Query("", description="Exact sector label."),
    market_cap: str = Query("", alias="marketCap", description="Exact market-cap bucket label."),
    sort_key: str | None = Query(None, alias="sortKey", description="Holding field, e.g. gainLossPercent."),
    sort_direction: str = Query("asc", alias="sortDirection"),
) -> QueryState:
    sort_direction = sort_direction.lower()
    if sort_direction not in ('asc', 'desc'):
        raise HTTPException(400, 'sortDirection must be asc|desc')
    return QueryState(
        search_text=search,
        sector_filter=sector,
        market_cap_filter=market_cap,
        sort_key=sort_key,
        sort_direction=sort_direction,
    )

@router.get(
    '/health',
    response_model=HealthResponse,
    summary="Health check",
    description="Reports whether a snapshot is loaded, with its digest and source.",
    tags=["Health"],
)
def health(request: Request):
    snap = current_snapshot(request)
    return HealthResponse(
        ok=True,
        holdings=len(snap.holdings),
        snapshot_digest=snap.digest,
        loaded_at_utc=getattr(request.app.state, "loaded_at_utc", None),
        source=getattr(request.app.state, "source", None),
    )

@router.get(
    '/api/portfolio/holdings',
    response_model=list[Holding],
    summary="List holdings",
    description=(
        "Holdings in ingestion order. "
        "Optional search/sector/marketCap filters and a sortKey/sortDirection sort."
    ),
    tags=["Portfolio"],
)
def holdings(state: QueryState = Depends(query_state), snap: PortfolioSnapshot = Depends(current_snapshot)):
    return list(apply_query(snap.holdings, state))

@router.get(
    '/api/portfolio/holdings/filters',
    response_model=FilterOptions,
    summary="Holding filter options",
    description="Distinct sectors and market-cap buckets present in the holdings.",
    tags=["Portfolio"],
)
def holding_filters(snap: PortfolioSnapshot = Depends(current_snapshot)):
    return filter_options(snap.holdings)

@router.get(
    '/api/portfolio/holdings/export',
    summary="Export holdings view",
    description=(
        "Exports the filtered/sorted holdings view. "
        "format=xlsx (default) downloads a workbook, format=json returns the export records."
    ),
    tags=["Portfolio"],
)
def export_holdings(
    export_format: str = Query("xlsx", alias="format"),
    state: QueryState = Depends(query_state),
    snap: PortfolioSnapshot = Depends(current_snapshot),
):
    export_format = export_format.lower()
    if export_format not in _EXPORT_FORMATS:
        raise HTTPException(400, 'format must be xlsx|json')
    records = export_records(apply_query(snap.holdings, state))
    log.info("holdings_exported", rows=len(records), format=export_format)
    if export_format == "json":
        return records
    return Response(
        content=export_workbook(records),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{settings.export_filename}"'},
    )

@router.get(
    '/api/portfolio/allocation',
    response_model=Allocation,
    summary="Allocation by sector and market cap",
    tags=["Portfolio"],
)
def allocation(snap: PortfolioSnapshot = Depends(current_snapshot)):
    return snap.allocation

@router.get(
    '/api/portfolio/performance',
    response_model=PerformanceResponse,
    summary="Performance timeline and returns",
    description="Timeline rows plus 1month/3months/1year returns; a null return means a zero reference value.",
    tags=["Portfolio"],
)
def performance(snap: PortfolioSnapshot = Depends(current_snapshot)):
    return PerformanceResponse(timeline=list(snap.timeline), returns=snap.returns)

@router.get(
    '/api/portfolio/summary',
    response_model=Summary,
    summary="Portfolio summary",
    tags=["Portfolio"],
)
def summary(snap: PortfolioSnapshot = Depends(current_snapshot)):
    return snap.summary

@router.get(
    '/api/portfolio/alert',
    response_model=AlertResponse,
    summary="Active alert",
    description="The single highest-priority gain/loss alert, or null.",
    tags=["Alerts"],
)
def alert(snap: PortfolioSnapshot = Depends(current_snapshot)):
    rules = default_rules(settings.alert_gain_threshold_pct, settings.alert_loss_threshold_pct)
    return AlertResponse(alert=evaluate_alert(snap.holdings, rules))
