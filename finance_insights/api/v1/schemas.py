"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Any, Dict, List, Optional


class AnalysisRequest(BaseModel):
    """Request body for POST /v1/analysis"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    # Raw stored documents; malformed entries are normalized or dropped, never rejected
    transactions: List[Any] = Field(default_factory=list, description="Expense records")
    incomes: List[Any] = Field(default_factory=list, description="Income records")
    now: Optional[datetime] = Field(None, description="Reference time for the analysis window")


class MonthBucketSchema(BaseModel):
    month: date
    label: str
    income: float
    expenses: float


class CategoryTotalSchema(BaseModel):
    category: str
    total: float
    count: int
    color: Optional[str] = None


class BreakdownSliceSchema(BaseModel):
    """Pie-chart slice; "Other" folds small categories, "No Data" is a placeholder"""

    category: str
    value: float
    color: Optional[str] = None
    percentage: float


class CategoryShareSchema(BaseModel):
    category: str
    amount: float
    percentage: float


class MonthlySummarySchema(BaseModel):
    total_income: float
    total_expenses: float
    net_savings: float
    savings_rate_percent: float
    top_categories: List[CategoryShareSchema]


class CategoryPredictionSchema(BaseModel):
    trend: str
    predicted_change_percent: float


class ProjectionSchema(BaseModel):
    month: date
    label: str
    amount: float
    confidence_percent: int


class ForecastSchema(BaseModel):
    predicted_amount: float
    trend: str
    avg_growth_rate_percent: float
    confidence: str
    category_predictions: Dict[str, CategoryPredictionSchema]
    projections: List[ProjectionSchema]


class AnomalySchema(BaseModel):
    record_id: str
    kind: str
    category: str
    amount: float
    occurred_at: Optional[datetime] = None
    title: str
    description: str
    ratio_to_mean: float


class HealthScoreSchema(BaseModel):
    score: int
    status: str
    savings_rate_percent: float
    expense_to_income_ratio_percent: float


class InsightSchema(BaseModel):
    type: str
    signal: str
    title: str
    message: str
    impact: str
    icon: str
    color: str


class AnalysisResponse(BaseModel):
    """Response for the analysis endpoints"""

    user_id: str
    generated_at: datetime
    published: bool = True
    monthly_trends: List[MonthBucketSchema]
    category_totals: List[CategoryTotalSchema]
    breakdown: List[BreakdownSliceSchema]
    summary: MonthlySummarySchema
    forecast: ForecastSchema
    anomalies: List[AnomalySchema]
    health_score: HealthScoreSchema
    insights: List[InsightSchema]
    daily_tip: str


class CategorySuggestionRequest(BaseModel):
    """Request body for POST /v1/categories/suggest"""

    description: str = Field(..., max_length=500, description="Free-text transaction description")


class CategorySuggestionSchema(BaseModel):
    category: str
    confidence_percent: int
    icon: str
    matched_keywords: List[str]


class CategorySuggestionResponse(BaseModel):
    description: str
    best_match: str
    suggestions: List[CategorySuggestionSchema]
