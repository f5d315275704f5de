import copy
from pathlib import Path

import pandas as pd

from portfolio_service.models import Holding

_HOLDING_COLUMNS = [
    "Symbol", "Company Name", "Quantity", "Avg Price ₹", "Current Price (₹)",
    "Sector", "Market Cap", "Exchange", "Value ₹", "Gain/Loss (₹)", "Gain/Loss %",
]

_HOLDING_ROWS = [
    ("RELIANCE", "Reliance Industries Ltd", 50, 2450.0, 2680.5, "Energy", "Large Cap", "NSE", 134025.0, 11525.0, 0.0941),
    ("INFY", "Infosys Limited", 100, 1450.0, 1820.75, "Technology", "Large Cap", "NSE", 182075.0, 37075.0, 0.2557),
    ("HDFCBANK", "HDFC Bank Limited", 75, 1580.0, 1425.3, "Banking", "Large Cap", "NSE", "1,06,897.50", -11602.5, -0.0979),
    ("ZOMATO", "Zomato Ltd", 200, 120.0, 102.4, "Consumer Services", "Mid Cap", "BSE", 20480.0, -3520.0, -0.1467),
]

_SHEETS = {
    "Holdings": [dict(zip(_HOLDING_COLUMNS, row)) for row in _HOLDING_ROWS],
    "Sector_Allocation": [
        {"Sector": "Energy", "Value (₹)": 134025.0, "Percentage": 0.3022},
        {"Sector": "Technology", "Value (₹)": 182075.0, "Percentage": 0.4106},
        {"Sector": "Banking", "Value (₹)": 106897.5, "Percentage": 0.2410},
        {"Sector": "Consumer Services", "Value (₹)": 20480.0, "Percentage": 0.0462},
    ],
    "Market_Cap": [
        {"Market Cap": "Large Cap", "Value (₹)": "422,997.50", "Percentage": 0.9538},
        {"Market Cap": "Mid Cap", "Value (₹)": "20,480", "Percentage": 0.0462},
    ],
    "Historical_Performance": [
        {"Date": "2024-01-31", "Portfolio Value (₹)": 380000.0, "Nifty 50": 21700.0, "Gold (₹/10g)": 62000.0},
        {"Date": "2024-02-29", "Portfolio Value (₹)": 392000.0, "Nifty 50": 21980.0, "Gold (₹/10g)": 62500.0},
        {"Date": "2024-03-31", "Portfolio Value (₹)": 401500.0, "Nifty 50": 22300.0, "Gold (₹/10g)": 63800.0},
        {"Date": "2024-04-30", "Portfolio Value (₹)": 398000.0, "Nifty 50": 22150.0, "Gold (₹/10g)": 64200.0},
        {"Date": "2024-05-31", "Portfolio Value (₹)": 420000.0, "Nifty 50": 22500.0, "Gold (₹/10g)": 66000.0},
        {"Date": "2024-06-30", "Portfolio Value (₹)": 443477.5, "Nifty 50": 22800.0, "Gold (₹/10g)": 68500.0},
    ],
    "Summary": [
        {"Metric": "Total Portfolio Value", "Value": "443,477.50"},
        {"Metric": "Total Invested Amount", "Value": "410,000.00"},
        {"Metric": "Total Gain/Loss", "Value": "33,477.50"},
        {"Metric": "Total Gain/Loss %", "Value": 0.0817},
        {"Metric": "Number of Holdings", "Value": 4},
        {"Metric": "Diversification Score", "Value": "8.2/10"},
        {"Metric": "Risk Level", "Value": "Moderate"},
    ],
    "Top_Performers": [
        {"Metric": "Best Performer", "Symbol": "INFY", "Company Name": "Infosys Limited", "Performance": 0.2557},
        {"Metric": "Worst Performer", "Symbol": "ZOMATO", "Company Name": "Zomato Ltd", "Performance": -0.1467},
    ],
}


def sample_sheets() -> dict:
    return copy.deepcopy(_SHEETS)


def write_workbook(path: Path, sheets: dict) -> Path:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=name, index=False)
    return path


def holding(symbol: str, gain_loss_percent: float = 0.0, **overrides) -> Holding:
    fields = dict(
        symbol=symbol,
        name=f"{symbol} Ltd",
        quantity=10,
        avg_price=100.0,
        current_price=100.0 * (1 + gain_loss_percent / 100),
        value=1000.0 * (1 + gain_loss_percent / 100),
        gain_loss=10.0 * gain_loss_percent,
        gain_loss_percent=gain_loss_percent,
        sector="Technology",
        market_cap="Large Cap",
        exchange="NSE",
    )
    fields.update(overrides)
    return Holding(**fields)
