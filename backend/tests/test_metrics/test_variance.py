"""Unit tests for STLY variance and week-over-week pickup."""

from datetime import date
from decimal import Decimal

import pytest

from staymetrics.metrics.aggregation import aggregate
from staymetrics.metrics.allocation import Stay
from staymetrics.metrics.periods import month_period
from staymetrics.metrics.variance import (
    HEADLINE_METRICS,
    Variance,
    absolute_change,
    compare,
    compare_metrics,
    percentage_change,
    pickup,
)


class TestPercentageChange:
    def test_zero_baseline_is_none(self):
        assert percentage_change(Decimal("50"), Decimal("0")) is None

    @pytest.mark.parametrize("current, baseline", [(None, Decimal("10")), (Decimal("10"), None), (None, None)])
    def test_missing_side_is_none(self, current, baseline):
        assert percentage_change(current, baseline) is None

    @pytest.mark.parametrize(
        "current, baseline, expected",
        [
            (Decimal("120"), Decimal("100"), Decimal("20")),
            (Decimal("75"), Decimal("100"), Decimal("-25")),
            (Decimal("0"), Decimal("40"), Decimal("-100")),
            (Decimal("40"), Decimal("40"), Decimal("0")),
        ],
    )
    def test_relative_change(self, current, baseline, expected):
        assert percentage_change(current, baseline) == expected

    def test_works_with_floats(self):
        assert percentage_change(150.0, 100.0) == pytest.approx(50.0)


class TestAbsoluteChange:
    def test_difference(self):
        assert absolute_change(Decimal("95.50"), Decimal("100")) == Decimal("-4.50")

    def test_zero_baseline_still_has_absolute(self):
        assert compare(Decimal("50"), Decimal("0")) == Variance(absolute=Decimal("50"), percentage=None)

    def test_missing_side_is_none(self):
        assert compare(None, Decimal("3")) == Variance(absolute=None, percentage=None)


class TestPickup:
    def test_pickup_is_change_since_week_ago(self):
        assert pickup(Decimal("62.5"), Decimal("60")) == Decimal("2.5")

    def test_pickup_without_week_ago_value(self):
        assert pickup(Decimal("62.5"), None) is None


class TestCompareMetrics:
    def test_compares_every_headline_metric(self):
        june = month_period(date(2025, 6, 1))
        current = aggregate(
            [Stay(date(2025, 6, 1), date(2025, 6, 11), room_revenue=Decimal("1500"))],
            june.start,
            june.end,
            1,
        )
        baseline = aggregate(
            [Stay(date(2025, 6, 1), date(2025, 6, 6), room_revenue=Decimal("500"))],
            june.start,
            june.end,
            1,
        )

        result = compare_metrics(current, baseline)

        assert set(result) == set(HEADLINE_METRICS)
        assert result["adr"] == Variance(absolute=Decimal("50"), percentage=Decimal("50"))
        assert abs(result["occupancy"].percentage - Decimal("100")) < Decimal("1e-20")
        assert abs(result["revpar"].percentage - Decimal("200")) < Decimal("1e-20")

    def test_empty_baseline_month(self):
        june = month_period(date(2025, 6, 1))
        current = aggregate([Stay(date(2025, 6, 1), date(2025, 6, 3), room_revenue=Decimal("200"))], june.start, june.end, 1)
        baseline = aggregate([], june.start, june.end, 1)

        result = compare_metrics(current, baseline)

        assert result["adr"] == Variance(absolute=None, percentage=None)
        assert result["occupancy"].percentage is None
        assert result["occupancy"].absolute == current.occupancy
