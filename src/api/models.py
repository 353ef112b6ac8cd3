"""Pydantic request/response schemas for the Braindump API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.analytics.models import TimeOfDay
from src.braindump.models import Category
from src.processing.state_machine import ProcessingStage


class ClassifyRequest(BaseModel):
    """Request body for the /api/classify endpoint."""

    text: str


class ClassificationResponse(BaseModel):
    category: Category
    confidence: float
    reasoning: str
    metadata: dict[str, Any] = {}


class CaptureRequest(BaseModel):
    """Request body for the /api/capture endpoint."""

    text: str


class VoiceItemResponse(BaseModel):
    """A captured or organized item."""

    id: str
    text: str
    timestamp: str
    session_id: str | None = None
    processed: bool = False
    classification: ClassificationResponse | None = None
    confidence: float | None = None
    category: Category | None = None
    completed: bool | None = None
    priority: str | None = None
    tags: list[str] = []
    metadata: dict[str, Any] = {}


class SessionStatsResponse(BaseModel):
    total_words: int
    duration: int
    tasks_created: int
    notes_created: int
    average_confidence: float


class SessionResponse(BaseModel):
    id: str
    start_time: str
    end_time: str | None = None
    item_count: int = 0
    processed: bool = False
    processed_at: str | None = None
    stats: SessionStatsResponse | None = None


class AppDataResponse(BaseModel):
    tasks: list[VoiceItemResponse] = []
    notes: list[VoiceItemResponse] = []
    braindump: list[VoiceItemResponse] = []
    sessions: list[SessionResponse] = []


class PatternResponse(BaseModel):
    theme: str
    count: int
    confidence: float
    category: Category


class WeeklyStatsResponse(BaseModel):
    week: str
    item_count: int
    session_count: int
    accuracy: int = Field(description="Mean item confidence as an integer percentage (0-100).")


class CategoryBreakdownResponse(BaseModel):
    tasks: int
    notes: int
    tasks_percentage: int
    notes_percentage: int


class ProductivityTrendResponse(BaseModel):
    hour: int
    item_count: int
    label: str


class StatsResponse(BaseModel):
    """Response body for the /api/stats endpoint."""

    total_sessions: int
    total_items: int
    avg_items_per_session: float
    avg_session_duration: float = Field(description="Minutes.")
    organization_accuracy: int = Field(
        description="Integer percentage (0-100) of classified items above the confidence threshold."
    )
    most_productive_time: TimeOfDay
    top_patterns: list[PatternResponse]
    weekly_stats: list[WeeklyStatsResponse]
    category_breakdown: CategoryBreakdownResponse
    productivity_trends: list[ProductivityTrendResponse]
    user_segment: str


class StartProcessingRequest(BaseModel):
    """Request body for the /api/processing endpoint.

    When ``item_ids`` is omitted every unprocessed braindump item is processed.
    """

    item_ids: list[str] | None = None


class OverrideRequest(BaseModel):
    category: Category


class ReviewItemResponse(BaseModel):
    item_id: str
    text: str
    suggested_category: Category
    classification: ClassificationResponse
    user_corrected: bool = False
    original_suggestion: Category | None = None


class BatchResponse(BaseModel):
    """State of a processing batch."""

    batch_id: str
    stage: ProcessingStage
    current_index: int
    total: int
    items: list[ReviewItemResponse]
    warnings: list[str] = []


class ApplyResponse(BaseModel):
    """Response body for the apply endpoint."""

    batch_id: str
    tasks: list[VoiceItemResponse]
    notes: list[VoiceItemResponse]
    warnings: list[str] = []
