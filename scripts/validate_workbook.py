"""
Check that a portfolio workbook ingests cleanly.

Usage:
  python scripts/validate_workbook.py [path_to_workbook.xlsx] [--strict]

If no path given, uses WORKBOOK_PATH from the environment/.env.
Prints a JSON report: ingestion reasons on failure, otherwise the snapshot
digest, headline numbers and summary consistency warnings. --strict also fails
on consistency warnings.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Ensure repo root is on sys.path.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio_service.config import settings
from portfolio_service.logging import setup_logging
from portfolio_service.pipeline.aggregate import check_summary_consistency
from portfolio_service.pipeline.snapshot import build_snapshot
from portfolio_service.pipeline.validation import IngestionError
from portfolio_service.pipeline.workbook import read_workbook


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("path", nargs="?", default=settings.workbook_path)
    parser.add_argument("--strict", action="store_true", help="treat summary inconsistencies as failures")
    args = parser.parse_args(argv)

    # stdout carries only the JSON report
    setup_logging("ERROR")
    try:
        snap = build_snapshot(read_workbook(args.path), value_tolerance_pct=settings.summary_value_tolerance_pct)
    except IngestionError as exc:
        print(json.dumps({"ok": False, "path": args.path, "reasons": exc.reasons}, indent=2))
        return 1

    warnings = check_summary_consistency(snap.summary, snap.holdings, settings.summary_value_tolerance_pct)
    report = {
        "ok": not (args.strict and warnings),
        "path": args.path,
        "digest": snap.digest,
        "holdings": len(snap.holdings),
        "timeline_points": len(snap.timeline),
        "sectors": len(snap.allocation.by_sector),
        "market_caps": len(snap.allocation.by_market_cap),
        "total_value": snap.summary.total_value,
        "returns": snap.model_dump(mode="json")["returns"],
        "warnings": warnings,
    }
    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 0 if report["ok"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
