from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence

from pydantic.alias_generators import to_camel

from ..models import Holding, QueryState

# accept both the wire name (gainLossPercent) and the attribute name (gain_loss_percent)
SORT_FIELDS = {
    **{name: name for name in Holding.model_fields},
    **{to_camel(name): name for name in Holding.model_fields},
}
TEXT_FIELDS = {name for name, info in Holding.model_fields.items() if info.annotation is str}


def resolve_sort_field(sort_key: Optional[str]) -> Optional[str]:
    if not sort_key:
        return None
    return SORT_FIELDS.get(sort_key)


def _matches(holding: Holding, state: QueryState) -> bool:
    if state.sector_filter and holding.sector != state.sector_filter:
        return False
    if state.market_cap_filter and holding.market_cap != state.market_cap_filter:
        return False
    if state.search_text:
        needle = state.search_text.lower()
        if needle not in holding.symbol.lower() and needle not in holding.name.lower():
            return False
    return True


def filter_holdings(holdings: Iterable[Holding], state: QueryState) -> list[Holding]:
    return [h for h in holdings if _matches(h, state)]


def _sort_key_fn(field: str) -> Callable[[Holding], object]:
    if field in TEXT_FIELDS:
        return lambda h: getattr(h, field).lower()
    return lambda h: getattr(h, field)


def sort_holdings(holdings: Sequence[Holding], sort_key: Optional[str], direction: str = "asc") -> list[Holding]:
    """Stable single-key sort; an unknown or empty key leaves the order untouched."""
    field = resolve_sort_field(sort_key)
    if field is None:
        return list(holdings)
    # sorted() stays stable with reverse=True, so ties keep input order either way
    return sorted(holdings, key=_sort_key_fn(field), reverse=(direction == "desc"))


def apply_query(holdings: Sequence[Holding], state: QueryState) -> tuple[Holding, ...]:
    filtered = filter_holdings(holdings, state)
    return tuple(sort_holdings(filtered, state.sort_key, state.sort_direction))


def filter_options(holdings: Iterable[Holding]) -> dict[str, list[str]]:
    holdings = list(holdings)
    return {
        "sectors": sorted({h.sector for h in holdings if h.sector}),
        "marketCaps": sorted({h.market_cap for h in holdings if h.market_cap}),
    }
