"""Analysis engine - core entry point tying the analytics steps together"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional

from finance_insights.domain.aggregation import aggregate, category_breakdown, monthly_summary, window_start
from finance_insights.domain.anomalies import detect_anomalies
from finance_insights.domain.exceptions import InvalidAnalysisParamsError
from finance_insights.domain.forecasting import forecast
from finance_insights.domain.health import compute_health_score
from finance_insights.domain.insights import daily_tip, generate_insights
from finance_insights.domain.models import Aggregates, AnalysisResult
from finance_insights.domain.normalizer import normalize_records
from finance_insights.utils.date_utils import to_utc


MAX_FORECAST_PERIODS = 24


@dataclass(frozen=True)
class AnalysisParams:
    """Recognized tunables for one analysis run"""

    window_months: int = 6
    significance_threshold: float = 0.05
    anomaly_multiplier: float = 2.0
    noise_threshold_percent: float = 10.0
    forecast_periods: int = 3

    def validate(self) -> None:
        if self.window_months < 0:
            raise InvalidAnalysisParamsError("window_months must be >= 0")
        if not 0 <= self.significance_threshold < 1:
            raise InvalidAnalysisParamsError("significance_threshold must be in [0, 1)")
        if self.anomaly_multiplier <= 0:
            raise InvalidAnalysisParamsError("anomaly_multiplier must be > 0")
        if self.noise_threshold_percent < 0:
            raise InvalidAnalysisParamsError("noise_threshold_percent must be >= 0")
        if not 0 <= self.forecast_periods <= MAX_FORECAST_PERIODS:
            raise InvalidAnalysisParamsError(f"forecast_periods must be in [0, {MAX_FORECAST_PERIODS}]")

    @classmethod
    def from_settings(cls, settings: Any) -> "AnalysisParams":
        return cls(
            window_months=settings.analysis_window_months,
            significance_threshold=settings.significance_threshold,
            anomaly_multiplier=settings.anomaly_multiplier,
            noise_threshold_percent=settings.noise_threshold_percent,
            forecast_periods=settings.forecast_periods,
        )


def analyze(
    transactions: Iterable[Any],
    incomes: Iterable[Any],
    now: Optional[datetime] = None,
    params: Optional[AnalysisParams] = None,
) -> AnalysisResult:
    """
    Run the whole analysis over one record snapshot.

    Flow:
    1. Normalize raw transactions and incomes
    2. Bucket by month over the window and total by category
    3. Forecast expenses from the buckets
    4. Flag unusual expenses inside the window
    5. Score financial health from the window totals
    6. Derive insights and the daily tip

    Malformed or sparse records never raise; only invalid params do.
    Timezone-aware dates, `now` included, are read in UTC.
    """
    params = params or AnalysisParams()
    params.validate()
    now = to_utc(now) if now is not None else datetime.now(timezone.utc)

    records = normalize_records(transactions, incomes)

    buckets, category_totals = aggregate(records, params.window_months, now)
    aggregates = Aggregates(buckets=buckets, category_totals=category_totals)
    summary = monthly_summary(buckets, category_totals)

    outlook = forecast(buckets, category_totals, periods=params.forecast_periods)
    anomalies = detect_anomalies(
        records,
        multiplier=params.anomaly_multiplier,
        since=window_start(now, params.window_months),
    )

    total_income = sum((b.income for b in buckets), Decimal("0"))
    total_expenses = sum((b.expenses for b in buckets), Decimal("0"))
    health = compute_health_score(total_income, total_expenses)

    insights = generate_insights(
        aggregates,
        outlook,
        anomalies,
        health,
        noise_threshold_percent=params.noise_threshold_percent,
    )

    return AnalysisResult(
        buckets=buckets,
        category_totals=category_totals,
        breakdown=category_breakdown(category_totals, params.significance_threshold),
        summary=summary,
        forecast=outlook,
        anomalies=anomalies,
        health=health,
        insights=insights,
        daily_tip=daily_tip(health, category_totals),
        generated_at=now,
    )
