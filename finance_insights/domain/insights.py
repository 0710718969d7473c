"""Rule-based insight generation from the analysis signals"""

from decimal import Decimal
from typing import Dict, List, Optional

from finance_insights.domain.forecasting import STABLE, growth_rate
from finance_insights.domain.health import INSUFFICIENT_DATA_STATUS
from finance_insights.domain.models import (
    EXPENSE_COLOR,
    INCOME_COLOR,
    NEUTRAL_COLOR,
    SAVINGS_COLOR,
    Aggregates,
    Anomaly,
    CategoryTotal,
    ForecastResult,
    HealthScore,
    Insight,
)

POSITIVE = "positive"
NEUTRAL = "neutral"
NEGATIVE = "negative"

RECOMMENDED_SAVINGS_RATE = 20.0
TOP_CATEGORY_HIGH_SHARE = 40.0
TOP_CATEGORY_MEDIUM_SHARE = 25.0

ZERO = Decimal("0")


def _impact(magnitude: float, high: float, medium: float) -> str:
    if magnitude > high:
        return "high"
    if magnitude > medium:
        return "medium"
    return "low"


def savings_rate_insight(
    health: HealthScore,
    total_income: Decimal,
    total_expenses: Decimal = ZERO,
) -> Optional[Insight]:
    """Savings rate against the recommended 20%; spending without income is always a warning"""
    if total_income <= 0:
        if total_expenses <= 0:
            return None
        return Insight(
            type=NEGATIVE,
            signal="savings_rate",
            title="Savings Rate",
            message="Warning: Your expenses exceed your income. No income was recorded this period.",
            impact="high",
            icon="warning",
            color=EXPENSE_COLOR,
        )

    rate = health.savings_rate_percent
    impact = _impact(abs(rate), 20, 10)

    if rate > RECOMMENDED_SAVINGS_RATE:
        return Insight(
            type=POSITIVE,
            signal="savings_rate",
            title="Savings Rate",
            message=(
                f"Great job! Your savings rate is {rate:.1f}% which is above "
                f"the recommended {RECOMMENDED_SAVINGS_RATE:.0f}%."
            ),
            impact=impact,
            icon="savings",
            color=INCOME_COLOR,
        )
    if rate > 0:
        return Insight(
            type=NEUTRAL,
            signal="savings_rate",
            title="Savings Rate",
            message=(
                f"Your savings rate is {rate:.1f}%. "
                f"Try to aim for {RECOMMENDED_SAVINGS_RATE:.0f}% or more."
            ),
            impact=impact,
            icon="savings",
            color=SAVINGS_COLOR,
        )
    if rate < 0:
        message = "Warning: Your expenses exceed your income. Consider reviewing your budget."
    else:
        message = "You spent everything you earned this period. Consider reviewing your budget."
    return Insight(
        type=NEGATIVE,
        signal="savings_rate",
        title="Savings Rate",
        message=message,
        impact=impact if rate < 0 else "medium",
        icon="warning",
        color=EXPENSE_COLOR,
    )


def top_category_insight(category_totals: Dict[str, CategoryTotal]) -> Optional[Insight]:
    total_spend = sum((t.total for t in category_totals.values()), ZERO)
    if total_spend <= 0:
        return None

    top = min(category_totals.values(), key=lambda t: (-t.total, t.category))
    share = float(top.total / total_spend * 100)

    return Insight(
        type=NEGATIVE if share > TOP_CATEGORY_HIGH_SHARE else NEUTRAL,
        signal="top_category",
        title="Top Spending Category",
        message=f"Your highest spending category is {top.category} at {share:.1f}% of total expenses.",
        impact=_impact(share, TOP_CATEGORY_HIGH_SHARE, TOP_CATEGORY_MEDIUM_SHARE),
        icon="pie-chart",
        color=top.color or EXPENSE_COLOR,
    )


def month_over_month_insight(
    aggregates: Aggregates,
    forecast: ForecastResult,
    noise_threshold_percent: float,
) -> Optional[Insight]:
    """Only emitted for a non-zero previous month and a change above the noise threshold"""
    buckets = aggregates.buckets
    if len(buckets) < 2:
        return None

    previous, current = buckets[-2].expenses, buckets[-1].expenses
    if previous <= 0:
        return None

    change = growth_rate(previous, current)
    if abs(change) <= noise_threshold_percent:
        return None

    lower = change < 0
    message = f"Your spending is {abs(change):.1f}% {'lower' if lower else 'higher'} than last month."
    if forecast.trend != STABLE:
        message += f" At this pace next month comes to about {forecast.predicted_amount:.2f}."

    return Insight(
        type=POSITIVE if lower else NEGATIVE,
        signal="month_over_month",
        title="Spending Trend",
        message=message,
        impact="high" if abs(change) > 2 * noise_threshold_percent else "medium",
        icon="trending-down" if lower else "trending-up",
        color=INCOME_COLOR if lower else EXPENSE_COLOR,
    )


def unusual_transactions_insight(anomalies: List[Anomaly]) -> Optional[Insight]:
    if not anomalies:
        return None

    count = len(anomalies)
    return Insight(
        type=NEUTRAL,
        signal="unusual_transactions",
        title="Unusual Activity",
        message=f"You have {count} unusually large transaction{'s' if count > 1 else ''} this period.",
        impact="medium" if count > 1 else "low",
        icon="warning",
        color=NEUTRAL_COLOR,
    )


def insufficient_data_insight() -> Insight:
    return Insight(
        type=NEUTRAL,
        signal="insufficient_data",
        title="Not Enough Data",
        message="Add more transactions and income to unlock personalized insights.",
        impact="low",
        icon="analytics",
        color=NEUTRAL_COLOR,
    )


def generate_insights(
    aggregates: Aggregates,
    forecast: ForecastResult,
    anomalies: List[Anomaly],
    health: HealthScore,
    noise_threshold_percent: float = 10.0,
) -> List[Insight]:
    """
    Main entry point: at most one insight per signal, in a fixed order.

    Order: savings rate, top category, month-over-month change, unusual
    transactions. When none of the signals can be produced the result is a
    single neutral "insufficient data" insight, never an empty list.
    """
    total_income = sum((b.income for b in aggregates.buckets), ZERO)
    total_expenses = sum((b.expenses for b in aggregates.buckets), ZERO)

    candidates = [
        savings_rate_insight(health, total_income, total_expenses),
        top_category_insight(aggregates.category_totals),
        month_over_month_insight(aggregates, forecast, noise_threshold_percent),
        unusual_transactions_insight(anomalies),
    ]
    insights = [insight for insight in candidates if insight is not None]

    if not insights:
        insights.append(insufficient_data_insight())
    return insights


def daily_tip(health: HealthScore, category_totals: Dict[str, CategoryTotal]) -> str:
    """Pick one deterministic tip from the health status and the top category"""
    if health.status == INSUFFICIENT_DATA_STATUS:
        return "Record your income so we can track how much you save each month."
    if health.score < 40:
        return "Your spending is close to or above your income. List your fixed costs and look for one to cut this week."

    top = next(iter(category_totals.values()), None)
    if top is not None and top.total > 0 and health.score < 80:
        return f"{top.category} is where most of your money goes. Setting a monthly limit for it is an easy first step."
    return "You're saving well. Consider moving part of your surplus into an emergency fund or investments."
