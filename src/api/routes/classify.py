"""Classification endpoint: preview how a piece of text would be organized."""

from __future__ import annotations

from fastapi import APIRouter

from src.api.models import ClassificationResponse, ClassifyRequest
from src.classification.classifier import classify

router = APIRouter()


@router.post("/api/classify", response_model=ClassificationResponse)
async def classify_text(request: ClassifyRequest) -> ClassificationResponse:
    """Classify text as a task or a note without storing anything."""
    result = classify(request.text)
    return ClassificationResponse.model_validate(result.to_dict())
