import unittest

from portfolio_service.models import TimelinePoint
from portfolio_service.pipeline.normalize import normalize_timeline
from portfolio_service.pipeline.returns import InsufficientHistoryError, calculate_returns, pct_return

from sample_sheets import sample_sheets


def _timeline(portfolio, benchmark=None, commodity=None):
    benchmark = benchmark or portfolio
    commodity = commodity or portfolio
    return [
        TimelinePoint(date=f"2024-{i + 1:02d}", portfolio=p, benchmark_index=b, commodity_reference=c)
        for i, (p, b, c) in enumerate(zip(portfolio, benchmark, commodity))
    ]


class ReturnsTests(unittest.TestCase):
    def test_fixed_offset_windows(self):
        returns = calculate_returns(_timeline([100, 110, 121, 133.1]))
        self.assertEqual(returns["portfolio"]["1month"], "10.00")
        self.assertEqual(returns["portfolio"]["3months"], "33.10")
        self.assertEqual(returns["portfolio"]["1year"], "33.10")

    def test_all_series_and_windows_present(self):
        timeline = normalize_timeline(sample_sheets()["Historical_Performance"])
        returns = calculate_returns(timeline)
        self.assertEqual(set(returns), {"portfolio", "benchmarkIndex", "commodityReference"})
        for windows in returns.values():
            self.assertEqual(list(windows), ["1month", "3months", "1year"])
        self.assertEqual(returns["portfolio"]["1month"], "5.59")
        self.assertEqual(returns["benchmarkIndex"]["3months"], pct_return(22800.0, 22300.0))
        self.assertEqual(returns["commodityReference"]["1year"], pct_return(68500.0, 62000.0))

    def test_negative_return_keeps_sign(self):
        returns = calculate_returns(_timeline([200, 190, 180, 150]))
        self.assertEqual(returns["portfolio"]["1month"], "-16.67")
        self.assertEqual(returns["portfolio"]["1year"], "-25.00")

    def test_zero_reference_is_marked_not_zeroed(self):
        returns = calculate_returns(_timeline([100, 110, 121, 133.1], commodity=[0, 5, 10, 20]))
        self.assertIsNone(returns["commodityReference"]["1year"])
        self.assertIsNone(returns["commodityReference"]["3months"])
        self.assertEqual(returns["commodityReference"]["1month"], "100.00")
        self.assertEqual(returns["portfolio"]["1year"], "33.10")

    def test_short_timeline_is_fatal(self):
        with self.assertRaises(InsufficientHistoryError):
            calculate_returns(_timeline([100, 110, 121]))


if __name__ == "__main__":
    unittest.main()
