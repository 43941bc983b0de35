"""
Tests unitaires pour analytics.py
"""

import pandas as pd
import pytest

from resort_pricing.analytics import (
    calendar_to_dataframe,
    summarize_calendar,
    summarize_price_history,
)
from resort_pricing.models import AppliedRule, PriceBreakdown, PriceCalculationResult


def make_result(base, final, rules=()):
    return PriceCalculationResult(
        base_price=base,
        final_price=final,
        applied_rules=[AppliedRule(name=name, multiplier=1.2, type="seasonal") for name in rules],
        breakdown=PriceBreakdown(
            base_price=base,
            seasonal_adjustment=final - base,
            total_adjustments=final - base,
        ),
    )


class TestSummarizePriceHistory:
    """Tests pour summarize_price_history."""

    def test_summary(self):
        records = [
            {
                "base_price": 100.0,
                "final_price": 120.0,
                "applied_rules": [{"name": "Weekend Pricing", "multiplier": 1.2, "type": "weekend"}],
            },
            {
                "base_price": 200.0,
                "final_price": 210.0,
                "applied_rules": [
                    {"name": "Weekend Pricing", "multiplier": 1.2, "type": "weekend"},
                    {"name": "Early Bird Discount", "multiplier": 0.9, "type": "early_bird"},
                ],
            },
            {"base_price": 100.0, "final_price": 100.0, "applied_rules": []},
        ]

        analytics = summarize_price_history(records)

        summary = analytics["summary"]
        assert summary["totalBookings"] == 3
        assert summary["totalBaseValue"] == 400.0
        assert summary["totalFinalValue"] == 430.0
        assert summary["totalAdjustment"] == 30.0
        assert summary["averageAdjustmentPercent"] == 7.5
        assert analytics["ruleUsage"] == {"Weekend Pricing": 2, "Early Bird Discount": 1}
        assert analytics["recentHistory"] == records

    def test_empty_history(self):
        analytics = summarize_price_history([])

        assert analytics["summary"]["totalBookings"] == 0
        assert analytics["summary"]["averageAdjustmentPercent"] == 0.0
        assert analytics["ruleUsage"] == {}
        assert analytics["recentHistory"] == []

    def test_recent_history_is_limited(self):
        records = [{"base_price": 10.0, "final_price": 10.0, "applied_rules": None} for _ in range(60)]

        analytics = summarize_price_history(records)

        assert len(analytics["recentHistory"]) == 50
        assert analytics["ruleUsage"] == {}


class TestCalendarTables:
    @pytest.fixture
    def calendar(self):
        return {
            "2024-07-11": make_result(100.0, 100.0),
            "2024-07-12": make_result(100.0, 120.0, ["Weekend Pricing"]),
            "2024-07-13": make_result(100.0, 150.0, ["Weekend Pricing", "Summer Peak"]),
        }

    def test_calendar_to_dataframe(self, calendar):
        df = calendar_to_dataframe(calendar)

        assert isinstance(df, pd.DataFrame)
        assert list(df.index) == ["2024-07-11", "2024-07-12", "2024-07-13"]
        assert df.loc["2024-07-13", "applied_rules"] == "Weekend Pricing, Summer Peak"
        assert df.loc["2024-07-12", "final_price"] == 120.0

    def test_summarize_calendar(self, calendar):
        summary = summarize_calendar(calendar)

        assert summary == {
            "days": 3,
            "minPrice": 100.0,
            "maxPrice": 150.0,
            "averagePrice": 123.33,
        }

    def test_empty_calendar(self):
        assert summarize_calendar({})["days"] == 0
        assert calendar_to_dataframe({}).empty
