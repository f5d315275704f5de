"""Typed portfolio snapshot entities.

Attributes are snake_case; every model serializes with camelCase aliases so the
JSON bodies match the wire names (``gainLossPercent``, ``byMarketCap``...).
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Annotated, Literal, Optional, TypeVar, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, WrapSerializer
from pydantic.alias_generators import to_camel

SortDirection = Literal["asc", "desc"]

V = TypeVar("V")


def _read_only(value: dict) -> MappingProxyType:
    return MappingProxyType(value)


def _as_dict(value, handler):
    return handler(dict(value))


# dict on input and output, read-only view once validated
ReadOnlyMap = Annotated[dict[str, V], AfterValidator(_read_only), WrapSerializer(_as_dict)]


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class Holding(FrozenModel):
    symbol: str
    name: str
    quantity: int = Field(ge=0)
    avg_price: float
    current_price: float
    value: float
    gain_loss: float
    gain_loss_percent: float
    sector: str
    market_cap: str
    exchange: str


class AllocationShare(FrozenModel):
    value: float
    percentage: float


class Allocation(FrozenModel):
    by_sector: ReadOnlyMap[AllocationShare]
    by_market_cap: ReadOnlyMap[AllocationShare]


class TimelinePoint(FrozenModel):
    date: str
    portfolio: float
    benchmark_index: float
    commodity_reference: float


# series -> window -> "12.34" (None when the reference value is zero)
ReturnsTable = dict[str, dict[str, Optional[str]]]
FrozenReturnsTable = ReadOnlyMap[ReadOnlyMap[Optional[str]]]

# label or score cell, kept as the sheet typed it
SummaryLabel = Union[float, str]


class Performer(FrozenModel):
    symbol: str
    name: str
    gain_percent: float


class Summary(FrozenModel):
    total_value: float
    total_invested: float
    total_gain_loss: float
    total_gain_loss_percent: float
    number_of_holdings: int
    diversification_score: SummaryLabel
    risk_level: SummaryLabel
    top_performer: Performer
    worst_performer: Performer


class Alert(FrozenModel):
    kind: Literal["gain", "loss"]
    message: str
    holding_symbol: str


class QueryState(FrozenModel):
    search_text: str = ""
    sector_filter: str = ""
    market_cap_filter: str = ""
    sort_key: Optional[str] = None
    sort_direction: SortDirection = "asc"
