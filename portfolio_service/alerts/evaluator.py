from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import structlog

from ..models import Alert, Holding
from .constants import GAIN_TEMPLATE, LOSS_TEMPLATE, POSITION_GAIN_ALERT, POSITION_LOSS_ALERT

log = structlog.get_logger()


@dataclass(frozen=True)
class AlertRule:
    """One threshold check. Rules are evaluated in the order they are listed."""

    kind: str
    predicate: Callable[[Holding], bool]
    template: str
    threshold: float

    def render(self, holding: Holding) -> Alert:
        message = self.template.format(
            symbol=holding.symbol,
            threshold=abs(self.threshold),
            percent=holding.gain_loss_percent,
        )
        return Alert(kind=self.kind, message=message, holding_symbol=holding.symbol)


def default_rules(
    gain_threshold: float = POSITION_GAIN_ALERT,
    loss_threshold: float = POSITION_LOSS_ALERT,
) -> tuple[AlertRule, ...]:
    """Gain breaches outrank loss breaches anywhere in the collection."""
    return (
        AlertRule(
            kind="gain",
            predicate=lambda h: h.gain_loss_percent > gain_threshold,
            template=GAIN_TEMPLATE,
            threshold=gain_threshold,
        ),
        AlertRule(
            kind="loss",
            predicate=lambda h: h.gain_loss_percent < loss_threshold,
            template=LOSS_TEMPLATE,
            threshold=loss_threshold,
        ),
    )


def evaluate_alert(holdings: Sequence[Holding], rules: Sequence[AlertRule] | None = None) -> Optional[Alert]:
    """Return the first holding matching the highest-priority rule that matches at all, or None.

    Holdings are scanned in ingestion order, so the earliest breaching
    position wins within a rule.
    """
    for rule in rules if rules is not None else default_rules():
        for holding in holdings:
            if rule.predicate(holding):
                alert = rule.render(holding)
                log.debug("alert_triggered", kind=alert.kind, symbol=alert.holding_symbol)
                return alert
    return None
