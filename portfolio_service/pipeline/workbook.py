"""Spreadsheet reading: every sheet of a workbook as ordered row records."""
from __future__ import annotations

import os
import zipfile
from typing import Mapping

import pandas as pd
import structlog

from .validation import IngestionError

log = structlog.get_logger()

SUPPORTED_EXTENSIONS = {".xlsx", ".xlsm"}

Sheets = dict[str, list[dict]]


def frame_to_records(frame: pd.DataFrame) -> list[dict]:
    """Rows as header-keyed dicts; blank rows are dropped and empty cells become ''."""
    frame = frame.dropna(how="all")
    frame = frame.astype(object).where(frame.notna(), "")
    frame.columns = [str(col) for col in frame.columns]
    return frame.to_dict(orient="records")


def read_workbook(file_path: str) -> Sheets:
    absolute_path = file_path if os.path.isabs(file_path) else os.path.abspath(file_path)
    ext = os.path.splitext(absolute_path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise IngestionError(f"workbook must be an Excel file ({', '.join(sorted(SUPPORTED_EXTENSIONS))}): {file_path}")
    if not os.path.exists(absolute_path):
        raise IngestionError(f"workbook not found: {absolute_path}")
    try:
        frames: Mapping[str, pd.DataFrame] = pd.read_excel(
            absolute_path, sheet_name=None, dtype=object, engine="openpyxl"
        )
    except (OSError, ValueError, KeyError, zipfile.BadZipFile) as exc:
        raise IngestionError(f"cannot read workbook {absolute_path}: {exc}") from exc
    sheets = {name: frame_to_records(frame) for name, frame in frames.items()}
    log.info(
        "workbook_read",
        path=absolute_path,
        sheets={name: len(rows) for name, rows in sheets.items()},
    )
    return sheets
