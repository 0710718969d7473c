"""Record normalization - turns loosely-shaped stored documents into Records"""

import math
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from finance_insights.domain.models import EXPENSE, INCOME, UNCATEGORIZED, Record
from finance_insights.utils.date_utils import to_utc

DATE_FIELDS = ("occurredAt", "occurred_at", "date")
ZERO = Decimal("0")

# Amounts outside this range are treated as malformed
MIN_AMOUNT = Decimal("0.000001")
MAX_AMOUNT = Decimal("1e15")


def parse_amount(value: Any) -> Tuple[Decimal, bool]:
    """
    Coerce a stored amount to a non-negative Decimal.

    Returns (amount, valid). Missing, negative, non-finite, non-numeric or
    out-of-range amounts become zero and are marked invalid so they never
    feed averages. An explicit zero stays valid.
    """
    if value is None:
        return ZERO, False
    if isinstance(value, bool):
        return ZERO, False

    try:
        if isinstance(value, float):
            if not math.isfinite(value):
                return ZERO, False
            amount = Decimal(str(value))
        else:
            amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO, False

    if not amount.is_finite() or amount < 0:
        return ZERO, False
    if amount == 0:
        return ZERO, True
    if amount < MIN_AMOUNT or amount > MAX_AMOUNT:
        return ZERO, False
    return amount, True


def parse_occurred_at(value: Any) -> Optional[datetime]:
    """
    Parse the supported date shapes; anything else yields None.

    Timezone-aware values are converted to UTC so month bucketing follows
    one clock. Naive values are taken as already being on that clock.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)

    try:
        if isinstance(value, datetime):
            return to_utc(value)

        # Firestore-style timestamp documents
        if isinstance(value, Mapping):
            seconds = value.get("seconds", value.get("_seconds"))
            if seconds is None:
                return None
            return datetime.fromtimestamp(float(seconds), tz=timezone.utc)

        # Epoch milliseconds
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)

        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            return to_utc(datetime.fromisoformat(text))
    except (ValueError, TypeError, OverflowError, OSError):
        return None

    return None


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_record(raw: Any, default_kind: str) -> Optional[Record]:
    """
    Produce a canonical Record from a raw stored document, or drop it.

    Only non-mapping input is dropped; every other defect degrades to a safe
    default (zero amount, "Uncategorized", no date).
    """
    if not isinstance(raw, Mapping):
        return None

    explicit_kind = _clean_text(raw.get("kind") or raw.get("type")).lower()
    kind = explicit_kind if explicit_kind in (INCOME, EXPENSE) else default_kind

    amount, amount_valid = parse_amount(raw.get("amount"))

    occurred_at = None
    for field_name in DATE_FIELDS:
        if field_name in raw:
            occurred_at = parse_occurred_at(raw[field_name])
            break

    color = _clean_text(raw.get("color")) or None

    return Record(
        id=_clean_text(raw.get("id")),
        kind=kind,
        amount=amount,
        category=_clean_text(raw.get("category")) or UNCATEGORIZED,
        occurred_at=occurred_at,
        currency=_clean_text(raw.get("currency")),
        description=_clean_text(raw.get("description") or raw.get("note")),
        color=color,
        amount_valid=amount_valid,
    )


def normalize_records(
    transactions: Iterable[Any],
    incomes: Iterable[Any],
) -> List[Record]:
    """Normalize a snapshot: transactions default to expenses, incomes to income"""
    records: List[Record] = []
    for raw in transactions or ():
        record = normalize_record(raw, EXPENSE)
        if record is not None:
            records.append(record)
    for raw in incomes or ():
        record = normalize_record(raw, INCOME)
        if record is not None:
            records.append(record)
    return records
