import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from portfolio_service.logging import setup_logging
from scripts.validate_workbook import main

from sample_sheets import sample_sheets, write_workbook


class ValidateWorkbookScriptTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()
        setup_logging()

    def _run(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = main(list(argv))
        # the whole of stdout must be one JSON document
        return code, json.loads(out.getvalue())

    def test_clean_workbook(self):
        path = write_workbook(self.tmp / "portfolio.xlsx", sample_sheets())
        code, report = self._run(str(path))
        self.assertEqual(code, 0)
        self.assertTrue(report["ok"])
        self.assertEqual(report["holdings"], 4)
        self.assertEqual(report["returns"]["portfolio"]["1month"], "5.59")
        self.assertEqual(report["warnings"], [])

    def test_inconsistent_summary_reported_once(self):
        sheets = sample_sheets()
        sheets["Summary"][4]["Value"] = 9
        path = write_workbook(self.tmp / "portfolio.xlsx", sheets)
        code, report = self._run(str(path))
        self.assertEqual(code, 0)
        self.assertEqual(len(report["warnings"]), 1)
        self.assertIn("Number of Holdings is 9", report["warnings"][0])

        code, report = self._run(str(path), "--strict")
        self.assertEqual(code, 1)
        self.assertFalse(report["ok"])

    def test_corrupt_workbook_report(self):
        path = self.tmp / "bad.xlsx"
        path.write_text("not a workbook")
        code, report = self._run(str(path))
        self.assertEqual(code, 1)
        self.assertFalse(report["ok"])
        self.assertIn("cannot read workbook", report["reasons"][0])


if __name__ == "__main__":
    unittest.main()
