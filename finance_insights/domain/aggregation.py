"""Aggregation - month buckets, category totals and display breakdowns"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from finance_insights.domain.models import (
    EXPENSE,
    INCOME,
    NEUTRAL_COLOR,
    NO_DATA_CATEGORY,
    NO_DATA_COLOR,
    OTHER_CATEGORY,
    BreakdownSlice,
    CategoryShare,
    CategoryTotal,
    MonthBucket,
    MonthlySummary,
    Record,
)
from finance_insights.utils.date_utils import add_months, generate_month_range, month_label, month_start

ZERO = Decimal("0")


def percentage(part: Decimal, whole: Decimal) -> float:
    """part / whole * 100 rounded to 2 places, 0 when whole is 0"""
    if whole == 0:
        return 0.0
    return round(float(part / whole * 100), 2)


def window_start(now: datetime, window_months: int) -> date:
    """First day of the oldest month in the analysis window"""
    return add_months(month_start(now), -window_months)


def build_month_buckets(records: Iterable[Record], window_months: int, now: datetime) -> List[MonthBucket]:
    """
    Bucket income and expenses per calendar month over [now - window, now].

    Every month in the window gets a bucket, even with no records, so the
    series has exactly window_months + 1 entries and no gaps.
    """
    months = generate_month_range(window_start(now, window_months), month_start(now))
    buckets = {m: MonthBucket(month=m, label=month_label(m)) for m in months}

    for record in records:
        if record.occurred_at is None:
            continue
        bucket = buckets.get(month_start(record.occurred_at))
        if bucket is None:
            continue

        if record.kind == INCOME:
            bucket.income += record.amount
        elif record.kind == EXPENSE:
            bucket.expenses += record.amount
            bucket.expenses_by_category[record.category] = (
                bucket.expenses_by_category.get(record.category, ZERO) + record.amount
            )

    return [buckets[m] for m in months]


def build_category_totals(records: Iterable[Record]) -> Dict[str, CategoryTotal]:
    """Expense totals per category, independent of the window and of dates"""
    totals: Dict[str, CategoryTotal] = {}
    for record in records:
        if record.kind != EXPENSE:
            continue
        entry = totals.get(record.category)
        if entry is None:
            entry = totals[record.category] = CategoryTotal(category=record.category)
        entry.total += record.amount
        entry.count += 1
        if entry.color is None and record.color:
            entry.color = record.color

    # Largest first; name breaks ties so ordering is stable
    ordered = sorted(totals.values(), key=lambda t: (-t.total, t.category))
    return {t.category: t for t in ordered}


def aggregate(
    records: Iterable[Record],
    window_months: int,
    now: datetime,
) -> Tuple[List[MonthBucket], Dict[str, CategoryTotal]]:
    """Main aggregation entry point: (month buckets, category totals)"""
    records = list(records)
    return build_month_buckets(records, window_months, now), build_category_totals(records)


def category_breakdown(
    category_totals: Dict[str, CategoryTotal],
    threshold: float = 0.05,
) -> List[BreakdownSlice]:
    """
    Chart-ready breakdown with the long tail folded into "Other".

    Categories at or above threshold * total spend are kept individually.
    Zero total spend yields a single "No Data" placeholder of value 1, which
    is a display sentinel and not an amount.
    """
    total_spend = sum((t.total for t in category_totals.values()), ZERO)
    if total_spend <= 0:
        return [BreakdownSlice(category=NO_DATA_CATEGORY, value=Decimal("1"), color=NO_DATA_COLOR, percentage=100.0)]

    cutoff = total_spend * Decimal(str(threshold))
    slices: List[BreakdownSlice] = []
    other_total = ZERO

    for entry in category_totals.values():
        if entry.total >= cutoff:
            slices.append(
                BreakdownSlice(
                    category=entry.category,
                    value=entry.total,
                    color=entry.color,
                    percentage=percentage(entry.total, total_spend),
                )
            )
        else:
            other_total += entry.total

    slices.sort(key=lambda s: (-s.value, s.category))

    if other_total > 0:
        slices.append(
            BreakdownSlice(
                category=OTHER_CATEGORY,
                value=other_total,
                color=NEUTRAL_COLOR,
                percentage=percentage(other_total, total_spend),
            )
        )

    return slices


def monthly_summary(
    buckets: List[MonthBucket],
    category_totals: Dict[str, CategoryTotal],
    top_n: int = 3,
) -> MonthlySummary:
    """Window income/expense totals, net savings and the top spending categories"""
    total_income = sum((b.income for b in buckets), ZERO)
    total_expenses = sum((b.expenses for b in buckets), ZERO)
    net_savings = total_income - total_expenses

    all_spend = sum((t.total for t in category_totals.values()), ZERO)
    top = sorted(category_totals.values(), key=lambda t: (-t.total, t.category))[:top_n]

    return MonthlySummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_savings=net_savings,
        savings_rate_percent=percentage(net_savings, total_income),
        top_categories=[
            CategoryShare(category=t.category, amount=t.total, percentage=percentage(t.total, all_spend))
            for t in top
            if t.total > 0
        ],
    )
