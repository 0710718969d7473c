"""Financial health score - savings rate mapped onto a bounded 0-100 score"""

from decimal import Decimal
from typing import Union

from finance_insights.domain.models import HealthScore

Amount = Union[Decimal, int, float]

INSUFFICIENT_DATA_STATUS = "Insufficient Data"

# Score at a 0% savings rate, and points gained per savings-rate percent.
# Saturates at 100 for a 40% savings rate and at 0 for -40%.
SCORE_MIDPOINT = 50
SCORE_PER_SAVINGS_PERCENT = 1.25


def health_status(score: int) -> str:
    """
    Map a score to its qualitative band.

    Bands:
    - 80-100: Excellent
    - 60-79:  Good
    - 40-59:  Fair
    - 20-39:  Needs Attention
    - 0-19:   Critical
    """
    if score >= 80:
        return "Excellent"
    elif score >= 60:
        return "Good"
    elif score >= 40:
        return "Fair"
    elif score >= 20:
        return "Needs Attention"
    else:
        return "Critical"


def score_from_savings_rate(savings_rate_percent: float) -> int:
    """Monotonic mapping of savings rate onto [0, 100]"""
    raw = SCORE_MIDPOINT + SCORE_PER_SAVINGS_PERCENT * savings_rate_percent
    return int(min(max(round(raw), 0), 100))


def compute_health_score(total_income: Amount, total_expenses: Amount) -> HealthScore:
    """
    Combine savings rate and expense ratio into a HealthScore.

    Zero income cannot produce a rate: both percentages are defined as 0,
    the score sits at its floor and the status reports insufficient data.
    """
    income = Decimal(str(total_income))
    expenses = Decimal(str(total_expenses))

    if income <= 0:
        return HealthScore(
            score=0,
            status=INSUFFICIENT_DATA_STATUS,
            savings_rate_percent=0.0,
            expense_to_income_ratio_percent=0.0,
        )

    savings_rate = float((income - expenses) / income * 100)
    expense_ratio = float(expenses / income * 100)
    score = score_from_savings_rate(savings_rate)

    return HealthScore(
        score=score,
        status=health_status(score),
        savings_rate_percent=round(savings_rate, 2),
        expense_to_income_ratio_percent=round(expense_ratio, 2),
    )
