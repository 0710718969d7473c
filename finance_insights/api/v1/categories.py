"""POST /v1/categories/suggest - keyword-based category suggestions"""

from fastapi import APIRouter

from finance_insights.api.v1.schemas import (
    CategorySuggestionRequest,
    CategorySuggestionResponse,
    CategorySuggestionSchema,
)
from finance_insights.domain.categorizer import categorize, suggest_categories

router = APIRouter()


@router.post("/categories/suggest", response_model=CategorySuggestionResponse)
def suggest(request_body: CategorySuggestionRequest):
    """
    Suggest expense categories for a transaction description.

    Returns:
        Ranked suggestions (empty when no keyword matches) and the best match
    """
    suggestions = suggest_categories(request_body.description)

    return CategorySuggestionResponse(
        description=request_body.description,
        best_match=categorize(request_body.description),
        suggestions=[
            CategorySuggestionSchema(
                category=s.category,
                confidence_percent=s.confidence_percent,
                icon=s.icon,
                matched_keywords=s.matched_keywords,
            )
            for s in suggestions
        ],
    )
