from __future__ import annotations

import io
from typing import Iterable, Mapping, Sequence

import pandas as pd

from ..models import Holding

EXPORT_SHEET = "Holdings"

# export column -> Holding attribute, in output order
EXPORT_COLUMNS = {
    "Symbol": "symbol",
    "Name": "name",
    "Quantity": "quantity",
    "Current Price": "current_price",
    "Value": "value",
    "Gain/Loss": "gain_loss",
    "Gain %": "gain_loss_percent",
    "Sector": "sector",
    "Market Cap": "market_cap",
}

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_records(holdings: Iterable[Holding]) -> list[dict]:
    return [{col: getattr(h, attr) for col, attr in EXPORT_COLUMNS.items()} for h in holdings]


def export_frame(records: Sequence[Mapping]) -> pd.DataFrame:
    return pd.DataFrame(list(records), columns=list(EXPORT_COLUMNS))


def export_workbook(records: Sequence[Mapping]) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        export_frame(records).to_excel(writer, sheet_name=EXPORT_SHEET, index=False)
    return buf.getvalue()
