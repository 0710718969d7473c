"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

INCOME = "income"
EXPENSE = "expense"

UNCATEGORIZED = "Uncategorized"
OTHER_CATEGORY = "Other"
NO_DATA_CATEGORY = "No Data"

# Display hints carried through to the presentation layer
INCOME_COLOR = "#00b894"
EXPENSE_COLOR = "#d63031"
SAVINGS_COLOR = "#0984e3"
NEUTRAL_COLOR = "#636e72"
NO_DATA_COLOR = "#CCCCCC"


@dataclass(frozen=True)
class Record:
    """One financial event, normalized from a stored transaction or income"""

    id: str
    kind: str  # "income" or "expense"
    amount: Decimal
    category: str
    occurred_at: Optional[datetime]
    currency: str = ""
    description: str = ""
    color: Optional[str] = None
    amount_valid: bool = True


@dataclass
class MonthBucket:
    """Income and expense totals for one calendar month"""

    month: date
    label: str
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    expenses_by_category: Dict[str, Decimal] = field(default_factory=dict)


@dataclass
class CategoryTotal:
    """Expense total for one category across the whole snapshot"""

    category: str
    total: Decimal = Decimal("0")
    count: int = 0
    color: Optional[str] = None


@dataclass
class BreakdownSlice:
    """Display row of the significance-merged category breakdown"""

    category: str
    value: Decimal
    color: Optional[str]
    percentage: float


@dataclass
class CategoryShare:
    category: str
    amount: Decimal
    percentage: float


@dataclass
class MonthlySummary:
    """Window totals shown on the summary card"""

    total_income: Decimal
    total_expenses: Decimal
    net_savings: Decimal
    savings_rate_percent: float
    top_categories: List[CategoryShare]


@dataclass
class CategoryPrediction:
    trend: str  # "increasing" | "decreasing" | "stable"
    predicted_change_percent: float


@dataclass
class Projection:
    """Extrapolated spending for one future month"""

    month: date
    label: str
    amount: Decimal
    confidence_percent: int


@dataclass
class ForecastResult:
    """Output of expense trend extrapolation"""

    predicted_amount: Decimal
    trend: str  # "increasing" | "decreasing" | "stable"
    avg_growth_rate_percent: float
    confidence: str  # "low" | "medium" | "high"
    category_predictions: Dict[str, CategoryPrediction]
    projections: List[Projection]


@dataclass
class Anomaly:
    """A single record flagged as unusually large"""

    record_id: str
    kind: str
    category: str
    amount: Decimal
    occurred_at: Optional[datetime]
    title: str
    description: str
    ratio_to_mean: float


@dataclass
class HealthScore:
    score: int
    status: str
    savings_rate_percent: float
    expense_to_income_ratio_percent: float


@dataclass
class Insight:
    """Short human-readable finding, regenerated on every run"""

    type: str  # "positive" | "neutral" | "negative"
    signal: str
    title: str
    message: str
    impact: str  # "low" | "medium" | "high"
    icon: str
    color: str


@dataclass
class CategorySuggestion:
    category: str
    confidence_percent: int
    icon: str
    matched_keywords: List[str]


@dataclass
class Aggregates:
    """Time series plus category totals produced by one aggregation pass"""

    buckets: List[MonthBucket]
    category_totals: Dict[str, CategoryTotal]


@dataclass
class AnalysisResult:
    """Everything one analysis run produces for the presentation layer"""

    buckets: List[MonthBucket]
    category_totals: Dict[str, CategoryTotal]
    breakdown: List[BreakdownSlice]
    summary: MonthlySummary
    forecast: ForecastResult
    anomalies: List[Anomaly]
    health: HealthScore
    insights: List[Insight]
    daily_tip: str
    generated_at: datetime
