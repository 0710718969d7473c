"""Unit tests for the unusual-transaction rule"""

from datetime import date, datetime
from decimal import Decimal
from finance_insights.domain.anomalies import detect_anomalies
from finance_insights.domain.normalizer import normalize_records


def expenses(make_record, amounts):
    return [make_record(f"t{i}", amount, "Food") for i, amount in enumerate(amounts)]


def test_flags_only_amounts_above_twice_the_mean(make_record):
    """[10, 10, 10, 50]: mean 20, threshold 40, only 50 is flagged"""
    anomalies = detect_anomalies(expenses(make_record, [10, 10, 10, 50]))

    assert [a.record_id for a in anomalies] == ["t3"]
    assert anomalies[0].amount == Decimal("50")
    assert anomalies[0].ratio_to_mean == 2.5


def test_threshold_boundary_is_inclusive(make_record):
    """[10, 10, 10, 30]: mean 15, threshold exactly 30, and 30 is flagged"""
    anomalies = detect_anomalies(expenses(make_record, [10, 10, 10, 30]))

    assert [a.record_id for a in anomalies] == ["t3"]
    assert anomalies[0].ratio_to_mean == 2.0


def test_just_below_threshold_is_not_flagged(make_record):
    assert detect_anomalies(expenses(make_record, ["10", "10", "10", "29.99"])) == []


def test_zero_or_one_expense_yields_nothing(make_record):
    assert detect_anomalies([]) == []
    assert detect_anomalies(expenses(make_record, [5000])) == []


def test_invalid_amounts_and_incomes_are_excluded(make_record, income_record):
    """Invalid amounts and incomes neither feed the mean nor get flagged"""
    records = expenses(make_record, [10, 10]) + [
        make_record("bad", 0, "Food", amount_valid=False),
        income_record("salary", 5000),
    ]

    assert detect_anomalies(records) == []


def test_multiplier_is_configurable(make_record):
    records = expenses(make_record, [10, 10, 10, 20])  # mean 12.5

    assert [a.record_id for a in detect_anomalies(records, multiplier=1.5)] == ["t3"]
    assert detect_anomalies(records, multiplier=2.0) == []


def test_since_restricts_to_window_and_drops_undated(make_record):
    records = [
        make_record("old", 900, "Travel", datetime(2024, 1, 5)),
        make_record("undated", 900, "Travel", None),
        make_record("a", 10, "Food", datetime(2025, 5, 2)),
        make_record("b", 10, "Food", datetime(2025, 5, 3)),
        make_record("c", 10, "Food", datetime(2025, 5, 4)),
        make_record("d", 60, "Food", datetime(2025, 6, 1)),
    ]

    windowed = detect_anomalies(records, since=date(2025, 1, 1))
    assert [a.record_id for a in windowed] == ["d"]

    unbounded = detect_anomalies(records)
    assert [a.record_id for a in unbounded] == ["old", "undated"]


def test_anomaly_carries_reporting_fields(make_record):
    records = [make_record("a", 10, "Food"), make_record("b", 10, "Food"), make_record("big", 100, "Electronics")]

    [anomaly] = detect_anomalies(records)

    assert anomaly.category == "Electronics"
    assert anomaly.kind == "expense"
    assert anomaly.title == "Unusual Electronics expense"
    assert anomaly.description == "100.00 is 2.5x your average expense of 40.00"
    assert anomaly.occurred_at == datetime(2025, 6, 10)


def test_input_is_not_mutated(make_record):
    records = expenses(make_record, [10, 10, 10, 50])
    snapshot = list(records)

    detect_anomalies(records)

    assert records == snapshot


def test_record_without_amount_does_not_drag_the_mean_down(raw_expense):
    """A sibling with no amount must not make an ordinary expense look unusual"""
    records = normalize_records([raw_expense("real", 10), {"id": "blank", "category": "Food", "date": "2025-06-11"}], [])

    assert detect_anomalies(records) == []
