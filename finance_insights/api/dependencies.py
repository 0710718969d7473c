"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache
from fastapi import Request
from finance_insights.config import settings
from finance_insights.domain.coordinator import AnalysisCoordinator
from finance_insights.domain.engine import AnalysisParams
from finance_insights.infrastructure.clients.records import RecordsClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_records_client() -> RecordsClient:
    """Provide record store client instance"""
    return RecordsClient()


@lru_cache
def get_coordinator() -> AnalysisCoordinator:
    """Provide the process-wide analysis coordinator"""
    return AnalysisCoordinator(AnalysisParams.from_settings(settings))
