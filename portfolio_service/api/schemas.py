from typing import Optional

from ..models import Alert, FrozenModel, ReturnsTable, TimelinePoint

class PerformanceResponse(FrozenModel):
    timeline: list[TimelinePoint]
    returns: ReturnsTable

class FilterOptions(FrozenModel):
    sectors: list[str]
    market_caps: list[str]

class AlertResponse(FrozenModel):
    alert: Optional[Alert] = None

class HealthResponse(FrozenModel):
    ok: bool
    holdings: int
    snapshot_digest: str
    loaded_at_utc: Optional[str] = None
    source: Optional[str] = None
