"""Analysis endpoints - run the insights engine over a user's records"""

import time
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request

from finance_insights.api.v1.schemas import (
    AnalysisRequest,
    AnalysisResponse,
    AnomalySchema,
    BreakdownSliceSchema,
    CategoryPredictionSchema,
    CategoryShareSchema,
    CategoryTotalSchema,
    ForecastSchema,
    HealthScoreSchema,
    InsightSchema,
    MonthBucketSchema,
    MonthlySummarySchema,
    ProjectionSchema,
)
from finance_insights.api.dependencies import get_coordinator, get_records_client, get_request_id
from finance_insights.domain.coordinator import AnalysisCoordinator, RunOutcome, SnapshotLoader
from finance_insights.domain.exceptions import InvalidAnalysisParamsError, RecordSourceError
from finance_insights.domain.models import AnalysisResult
from finance_insights.infrastructure.clients.records import RecordsClient
from finance_insights.infrastructure.observability.metrics import record_analysis
from finance_insights.infrastructure.observability.logging import log_analysis

router = APIRouter()


def to_response(user_id: str, result: AnalysisResult, published: bool = True) -> AnalysisResponse:
    """Map engine output onto the wire schema"""
    forecast = result.forecast
    summary = result.summary

    return AnalysisResponse(
        user_id=user_id,
        generated_at=result.generated_at,
        published=published,
        monthly_trends=[
            MonthBucketSchema(month=b.month, label=b.label, income=float(b.income), expenses=float(b.expenses))
            for b in result.buckets
        ],
        category_totals=[
            CategoryTotalSchema(category=t.category, total=float(t.total), count=t.count, color=t.color)
            for t in result.category_totals.values()
        ],
        breakdown=[
            BreakdownSliceSchema(category=s.category, value=float(s.value), color=s.color, percentage=s.percentage)
            for s in result.breakdown
        ],
        summary=MonthlySummarySchema(
            total_income=float(summary.total_income),
            total_expenses=float(summary.total_expenses),
            net_savings=float(summary.net_savings),
            savings_rate_percent=summary.savings_rate_percent,
            top_categories=[
                CategoryShareSchema(category=c.category, amount=float(c.amount), percentage=c.percentage)
                for c in summary.top_categories
            ],
        ),
        forecast=ForecastSchema(
            predicted_amount=float(forecast.predicted_amount),
            trend=forecast.trend,
            avg_growth_rate_percent=forecast.avg_growth_rate_percent,
            confidence=forecast.confidence,
            category_predictions={
                category: CategoryPredictionSchema(
                    trend=p.trend,
                    predicted_change_percent=p.predicted_change_percent,
                )
                for category, p in forecast.category_predictions.items()
            },
            projections=[
                ProjectionSchema(
                    month=p.month,
                    label=p.label,
                    amount=float(p.amount),
                    confidence_percent=p.confidence_percent,
                )
                for p in forecast.projections
            ],
        ),
        anomalies=[
            AnomalySchema(
                record_id=a.record_id,
                kind=a.kind,
                category=a.category,
                amount=float(a.amount),
                occurred_at=a.occurred_at,
                title=a.title,
                description=a.description,
                ratio_to_mean=a.ratio_to_mean,
            )
            for a in result.anomalies
        ],
        health_score=HealthScoreSchema(
            score=result.health.score,
            status=result.health.status,
            savings_rate_percent=result.health.savings_rate_percent,
            expense_to_income_ratio_percent=result.health.expense_to_income_ratio_percent,
        ),
        insights=[
            InsightSchema(
                type=i.type,
                signal=i.signal,
                title=i.title,
                message=i.message,
                impact=i.impact,
                icon=i.icon,
                color=i.color,
            )
            for i in result.insights
        ],
        daily_tip=result.daily_tip,
    )


async def _run_analysis(
    user_id: str,
    loader: SnapshotLoader,
    request: Request,
    coordinator: AnalysisCoordinator,
    now: Optional[datetime] = None,
) -> AnalysisResponse:
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        outcome: RunOutcome = await coordinator.run(user_id, loader, now=now)

    except RecordSourceError as e:
        record_analysis("failed")
        logging.error(f"Record store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Record store unavailable")

    except InvalidAnalysisParamsError as e:
        record_analysis("failed")
        logging.warning(f"Invalid analysis parameters: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        record_analysis("failed")
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    result = outcome.result
    duration_ms = (time.time() - start_time) * 1000
    record_analysis(
        "published" if outcome.published else "superseded",
        health_status=result.health.status,
        anomaly_count=len(result.anomalies),
    )
    log_analysis(
        request_id,
        user_id,
        expense_count=sum(b.count for b in result.category_totals.values()),
        health_status=result.health.status,
        insight_count=len(result.insights),
        anomaly_count=len(result.anomalies),
        published=outcome.published,
        duration_ms=duration_ms,
    )

    return to_response(user_id, result, published=outcome.published)


@router.post("/analysis", response_model=AnalysisResponse)
async def analyze_snapshot(
    request_body: AnalysisRequest,
    request: Request,
    coordinator: AnalysisCoordinator = Depends(get_coordinator),
):
    """
    Analyze a record snapshot supplied by the caller.

    The body carries the user's transactions and incomes as stored; the
    engine normalizes them, so malformed entries degrade instead of failing.
    """

    async def loader():
        return request_body.transactions, request_body.incomes

    return await _run_analysis(request_body.user_id, loader, request, coordinator, now=request_body.now)


@router.get("/analysis/{user_id}", response_model=AnalysisResponse)
async def analyze_user(
    user_id: str,
    request: Request,
    coordinator: AnalysisCoordinator = Depends(get_coordinator),
    records_client: RecordsClient = Depends(get_records_client),
):
    """
    Fetch the user's snapshot from the record store and analyze it.

    Returns 503 when the record store stays unavailable after retries.
    """

    async def loader():
        return await records_client.get_snapshot(user_id)

    return await _run_analysis(user_id, loader, request, coordinator)


@router.get("/analysis/{user_id}/latest", response_model=AnalysisResponse)
def latest_analysis(
    user_id: str,
    coordinator: AnalysisCoordinator = Depends(get_coordinator),
):
    """Return the most recently published analysis for the user"""
    result = coordinator.latest(user_id)
    if result is None:
        raise HTTPException(status_code=404, detail="No analysis available")
    return to_response(user_id, result)
