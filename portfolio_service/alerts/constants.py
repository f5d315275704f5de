from __future__ import annotations

# Thresholds (unit: percent of cost basis)
POSITION_GAIN_ALERT = 20.0    # strictly above
POSITION_LOSS_ALERT = -10.0   # strictly below

GAIN_TEMPLATE = "Alert: Holding {symbol} gained over {threshold:g}% ({percent:.1f}%)"
LOSS_TEMPLATE = "Alert: Holding {symbol} lost over {threshold:g}% ({percent:.1f}%)"
