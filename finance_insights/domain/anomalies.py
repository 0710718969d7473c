"""Unusual transaction detection"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from finance_insights.domain.models import EXPENSE, Anomaly, Record

CENTS = Decimal("0.01")


def _eligible(records: Iterable[Record], since: Optional[date]) -> List[Record]:
    eligible = []
    for record in records:
        if record.kind != EXPENSE or not record.amount_valid:
            continue
        if since is not None:
            if record.occurred_at is None or record.occurred_at.date() < since:
                continue
        eligible.append(record)
    return eligible


def detect_anomalies(
    records: Iterable[Record],
    multiplier: float = 2.0,
    since: Optional[date] = None,
) -> List[Anomaly]:
    """
    Flag expenses at or above `multiplier` times the mean expense.

    This is a plain multiplier rule, not a statistical model: no standard
    deviation banding. The comparison is inclusive and exact (Decimal), so
    with amounts [10, 10, 10, 30] the mean is 15 and 30 is flagged.

    Args:
        records: Normalized records; only valid expense amounts are considered
        multiplier: How many times the mean an expense must reach
        since: When given, only expenses dated on or after this day count

    Returns:
        Anomalies in input order; empty with fewer than two eligible expenses
    """
    expenses = _eligible(records, since)
    if len(expenses) < 2:
        return []

    mean = sum((r.amount for r in expenses), Decimal("0")) / len(expenses)
    if mean <= 0:
        return []

    threshold = mean * Decimal(str(multiplier))
    display_mean = mean.quantize(CENTS, rounding=ROUND_HALF_UP)

    anomalies = []
    for record in expenses:
        if record.amount < threshold:
            continue
        ratio = round(float(record.amount / mean), 2)
        anomalies.append(
            Anomaly(
                record_id=record.id,
                kind=record.kind,
                category=record.category,
                amount=record.amount,
                occurred_at=record.occurred_at,
                title=f"Unusual {record.category} expense",
                description=(
                    f"{record.amount:.2f} is {ratio:.1f}x your average expense of {display_mean:.2f}"
                ),
                ratio_to_mean=ratio,
            )
        )
    return anomalies
