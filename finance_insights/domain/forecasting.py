"""Trend detection and spending forecasts from month buckets"""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Dict, List

from finance_insights.domain.models import (
    CategoryPrediction,
    CategoryTotal,
    ForecastResult,
    MonthBucket,
    Projection,
)
from finance_insights.utils.date_utils import add_months, month_label

INCREASING = "increasing"
DECREASING = "decreasing"
STABLE = "stable"

LOW = "low"
MEDIUM = "medium"
HIGH = "high"

# Non-empty historical months needed before confidence is raised
MEDIUM_CONFIDENCE_MIN_PERIODS = 2
HIGH_CONFIDENCE_MIN_PERIODS = 5

# Each further projected month loses this much confidence
CONFIDENCE_DECAY_PERCENT = 15

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def growth_rate(previous: Decimal, current: Decimal) -> float:
    """Period-over-period change in percent; a zero base contributes 0%"""
    if previous == 0:
        return 0.0
    return float((current - previous) / previous * 100)


def classify_trend(rate: float) -> str:
    if rate > 0:
        return INCREASING
    if rate < 0:
        return DECREASING
    return STABLE


def average_growth_rate(values: List[Decimal]) -> float:
    """Mean growth rate across all consecutive pairs, 0 with fewer than two values"""
    if len(values) < 2:
        return 0.0
    rates = [growth_rate(prev, cur) for prev, cur in zip(values, values[1:])]
    return sum(rates) / len(rates)


def forecast_confidence(buckets: List[MonthBucket]) -> str:
    """
    Confidence tier from how many months actually carry spending.

    - fewer than 2 non-empty months: low
    - 2 to 4: medium
    - 5 or more: high
    """
    non_empty = sum(1 for b in buckets if b.expenses > 0)
    if non_empty >= HIGH_CONFIDENCE_MIN_PERIODS:
        return HIGH
    if non_empty >= MEDIUM_CONFIDENCE_MIN_PERIODS:
        return MEDIUM
    return LOW


def _extrapolate(base: Decimal, rate: float, steps: int) -> Decimal:
    """base compounded by rate percent over steps, in cents and floored at 0"""
    with localcontext() as ctx:
        factor = Decimal(str(1 + rate / 100)) ** steps
        amount = base * factor
        if amount <= 0:
            return ZERO
        # Cents of a large projection can need more digits than the default precision
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def project_spending(buckets: List[MonthBucket], rate: float, periods: int = 3) -> List[Projection]:
    """
    Extrapolate total expenses for the next `periods` months.

    Each step compounds the average growth rate once more; confidence starts
    at 100% and drops by CONFIDENCE_DECAY_PERCENT per step, never below 0.
    """
    if not buckets or periods <= 0:
        return []

    last = buckets[-1]
    projections = []
    for step in range(1, periods + 1):
        month = add_months(last.month, step)
        projections.append(
            Projection(
                month=month,
                label=month_label(month),
                amount=_extrapolate(last.expenses, rate, step),
                confidence_percent=max(0, 100 - CONFIDENCE_DECAY_PERCENT * (step - 1)),
            )
        )
    return projections


def predict_categories(
    buckets: List[MonthBucket],
    category_totals: Dict[str, CategoryTotal],
) -> Dict[str, CategoryPrediction]:
    """
    Per-category trend from each category's two most recent months with spend.

    Categories with fewer than two such months are left out rather than
    guessed.
    """
    predictions: Dict[str, CategoryPrediction] = {}
    for category in category_totals:
        history = [
            b.expenses_by_category[category]
            for b in buckets
            if b.expenses_by_category.get(category, ZERO) > 0
        ]
        if len(history) < 2:
            continue

        change = round(growth_rate(history[-2], history[-1]), 2)
        predictions[category] = CategoryPrediction(
            trend=classify_trend(change),
            predicted_change_percent=change,
        )
    return predictions


def forecast(
    buckets: List[MonthBucket],
    category_totals: Dict[str, CategoryTotal],
    periods: int = 3,
) -> ForecastResult:
    """Main entry point: next-month prediction, trend and per-category outlook"""
    expenses = [b.expenses for b in buckets]
    rate = round(average_growth_rate(expenses), 2)
    last_expenses = expenses[-1] if expenses else ZERO

    return ForecastResult(
        predicted_amount=_extrapolate(last_expenses, rate, 1),
        trend=classify_trend(rate),
        avg_growth_rate_percent=rate,
        confidence=forecast_confidence(buckets),
        category_predictions=predict_categories(buckets, category_totals),
        projections=project_spending(buckets, rate, periods),
    )
