"""Unit tests for the end-to-end analysis entry point"""

import copy
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from finance_insights.domain.engine import AnalysisParams, analyze
from finance_insights.domain.exceptions import InvalidAnalysisParamsError
from finance_insights.domain.models import NO_DATA_CATEGORY


def test_scenario_one_month(now, scenario_snapshot):
    """1000 income, food 200 + 300, transport 100 in the current month"""
    transactions, incomes = scenario_snapshot

    result = analyze(transactions, incomes, now=now)

    assert {c: t.total for c, t in result.category_totals.items()} == {
        "Food": Decimal("500"),
        "Transport": Decimal("100"),
    }
    assert result.health.savings_rate_percent == 40.0
    assert result.anomalies == []

    positives = [i for i in result.insights if i.type == "positive"]
    assert any(i.signal == "savings_rate" and "40.0%" in i.message for i in positives)


def test_empty_input(now):
    result = analyze([], [], now=now)

    assert [s.category for s in result.breakdown] == [NO_DATA_CATEGORY]
    assert result.breakdown[0].value == 1
    assert result.anomalies == []
    assert result.health.score == 0
    assert result.health.status == "Insufficient Data"
    assert len(result.buckets) == 7
    assert [i.signal for i in result.insights] == ["insufficient_data"]
    assert result.forecast.confidence == "low"
    assert result.daily_tip


def test_analysis_is_deterministic(now, scenario_snapshot):
    transactions, incomes = scenario_snapshot

    assert analyze(transactions, incomes, now=now) == analyze(transactions, incomes, now=now)


def test_analysis_does_not_mutate_inputs(now, scenario_snapshot):
    transactions, incomes = scenario_snapshot
    before = copy.deepcopy((transactions, incomes))

    analyze(transactions, incomes, now=now)

    assert (transactions, incomes) == before


def test_malformed_records_degrade_without_raising(now, raw_expense):
    transactions = [
        None,
        "garbage",
        raw_expense("neg", -40, "Food"),
        raw_expense("nan", "NaN", ""),
        raw_expense("nodate", 25, "Books", date="??"),
        raw_expense("ok", 10, "Food"),
    ]

    result = analyze(transactions, [{"amount": "lots"}], now=now)

    assert result.category_totals["Uncategorized"].total == 0
    assert result.category_totals["Books"].total == Decimal("25")
    assert result.category_totals["Food"].count == 2
    # Undated Books spend stays out of the time series
    assert result.buckets[-1].expenses == Decimal("10")
    assert result.health.status == "Insufficient Data"


def test_window_bounds_series_and_health(now, raw_expense, raw_income):
    transactions = [
        raw_expense("recent", 100, "Food", "2025-06-01"),
        raw_expense("ancient", 5000, "Food", "2023-01-01"),
    ]
    incomes = [raw_income("pay", 1000, "2025-06-01"), raw_income("old-pay", 9000, "2023-01-01")]

    result = analyze(transactions, incomes, now=now, params=AnalysisParams(window_months=2))

    assert len(result.buckets) == 3
    assert result.summary.total_income == Decimal("1000")
    assert result.health.savings_rate_percent == 90.0
    # Category totals ignore the window
    assert result.category_totals["Food"].total == Decimal("5100")
    # Only in-window expenses feed the anomaly mean, and one is not enough
    assert result.anomalies == []


def test_multi_month_history_feeds_forecast_and_trend_insight(now, raw_expense, raw_income):
    transactions = [
        raw_expense("m1", 200, "Food", "2025-03-10"),
        raw_expense("m2", 220, "Food", "2025-04-10"),
        raw_expense("m3", 240, "Food", "2025-05-10"),
        raw_expense("m4", 360, "Food", "2025-06-10"),
    ]
    incomes = [raw_income(f"p{m}", 1000, f"2025-0{m}-01") for m in (3, 4, 5, 6)]

    result = analyze(transactions, incomes, now=now)

    assert result.forecast.trend == "increasing"
    assert result.forecast.confidence == "medium"
    assert result.forecast.category_predictions["Food"].predicted_change_percent == 50.0
    assert len(result.forecast.projections) == 3
    signals = [i.signal for i in result.insights]
    assert signals == ["savings_rate", "top_category", "month_over_month"]


def test_params_from_settings_and_validation():
    class FakeSettings:
        analysis_window_months = 3
        significance_threshold = 0.1
        anomaly_multiplier = 3.0
        noise_threshold_percent = 5.0
        forecast_periods = 6

    params = AnalysisParams.from_settings(FakeSettings())
    assert params == AnalysisParams(3, 0.1, 3.0, 5.0, 6)

    with pytest.raises(InvalidAnalysisParamsError):
        analyze([], [], now=datetime(2025, 1, 1), params=AnalysisParams(window_months=-1))
    with pytest.raises(InvalidAnalysisParamsError):
        AnalysisParams(significance_threshold=1.0).validate()
    with pytest.raises(InvalidAnalysisParamsError):
        AnalysisParams(anomaly_multiplier=0).validate()


def test_extreme_but_valid_amounts_never_raise(now, raw_expense):
    transactions = [
        raw_expense("tiny", "0.01", "Food", "2025-05-10"),
        raw_expense("huge", 1000000, "Food", "2025-06-10"),
        raw_expense("overflow", "1e1000000", "Food", "2025-06-11"),
    ]

    result = analyze(transactions, [], now=now)

    assert result.forecast.trend == "increasing"
    assert result.buckets[-1].expenses == Decimal("1000000")
    assert result.insights[0].signal == "savings_rate"
    assert result.insights[0].type == "negative"


def test_aware_now_and_dates_bucket_in_utc(raw_expense):
    """Late evening on 30 June at UTC-5 is already July in UTC"""
    transactions = [raw_expense("late", 40, "Food", "2025-06-30T23:30:00-05:00")]
    july = datetime(2025, 7, 15, tzinfo=timezone.utc)

    result = analyze(transactions, [], now=july, params=AnalysisParams(window_months=1))

    assert [(b.label, b.expenses) for b in result.buckets] == [("Jun", Decimal("0")), ("Jul", Decimal("40"))]
    assert result.generated_at == july


def test_forecast_periods_are_bounded():
    with pytest.raises(InvalidAnalysisParamsError):
        AnalysisParams(forecast_periods=25).validate()
    AnalysisParams(forecast_periods=24).validate()
