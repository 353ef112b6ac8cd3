"""Analytics endpoint: productivity statistics over the whole data set."""

from __future__ import annotations

from fastapi import APIRouter

from src.analytics.aggregator import calculate_stats, identify_user_segment
from src.api.models import StatsResponse
from src.config import settings
from src.storage.repository import get_store

router = APIRouter()


@router.get("/api/stats", response_model=StatsResponse)
def get_stats() -> StatsResponse:
    """Compute a fresh stats snapshot; nothing is cached or stored."""
    store = get_store()
    with store.lock:
        stats = calculate_stats(
            store.data,
            accuracy_threshold=settings.high_confidence_threshold,
            top_patterns_limit=settings.top_patterns_limit,
            weekly_window=settings.weekly_stats_window,
        )
    return StatsResponse.model_validate(
        {**stats.to_dict(), "user_segment": identify_user_segment(stats)}
    )
