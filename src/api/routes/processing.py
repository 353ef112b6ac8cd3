"""Processing endpoints: organize braindump items through classify -> review -> apply."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from src.api.models import (
    ApplyResponse,
    BatchResponse,
    ClassificationResponse,
    OverrideRequest,
    ReviewItemResponse,
    StartProcessingRequest,
    VoiceItemResponse,
)
from src.config import settings
from src.processing.state_machine import (
    BraindumpProcessor,
    InvalidTransitionError,
    UnknownItemError,
)
from src.storage.repository import BraindumpStore, NotFoundError, get_store

router = APIRouter()


def _batch_response(batch_id: str, processor: BraindumpProcessor) -> BatchResponse:
    return BatchResponse(
        batch_id=batch_id,
        stage=processor.stage,
        current_index=processor.current_index,
        total=processor.total,
        items=[
            ReviewItemResponse(
                item_id=r.item.id,
                text=r.item.text,
                suggested_category=r.suggested_category,
                classification=ClassificationResponse.model_validate(r.classification.to_dict()),
                user_corrected=bool(r.metadata.get("user_corrected", False)),
                original_suggestion=r.metadata.get("original_suggestion"),
            )
            for r in processor.items
        ],
        warnings=processor.warnings,
    )


def _get_batch(store: BraindumpStore, batch_id: str) -> BraindumpProcessor:
    try:
        return store.get_batch(batch_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail="Processing batch not found") from exc


@router.post("/api/processing", response_model=BatchResponse, status_code=201)
def start_processing(request: StartProcessingRequest | None = None) -> BatchResponse:
    """Classify unprocessed braindump items and hold them for review."""
    store = get_store()
    pending = store.pending_items()
    if request is not None and request.item_ids is not None:
        wanted = set(request.item_ids)
        pending = [i for i in pending if i.id in wanted]
        missing = wanted - {i.id for i in pending}
        if missing:
            raise HTTPException(
                status_code=404,
                detail=f"Unknown or already processed items: {sorted(missing)}",
            )
    if not pending:
        raise HTTPException(status_code=400, detail="No unprocessed braindump items")

    processor = BraindumpProcessor(delay_seconds=settings.processing_delay_seconds)
    processor.start(pending)
    batch_id = store.add_batch(processor)
    return _batch_response(batch_id, processor)


@router.get("/api/processing/{batch_id}", response_model=BatchResponse)
def get_processing(batch_id: str) -> BatchResponse:
    store = get_store()
    return _batch_response(batch_id, _get_batch(store, batch_id))


@router.patch("/api/processing/{batch_id}/items/{item_id}", response_model=BatchResponse)
def override_category(batch_id: str, item_id: str, request: OverrideRequest) -> BatchResponse:
    """Change the category an item will be committed to."""
    store = get_store()
    processor = _get_batch(store, batch_id)
    try:
        processor.override_category(item_id, request.category)
    except UnknownItemError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _batch_response(batch_id, processor)


@router.post("/api/processing/{batch_id}/reprocess", response_model=BatchResponse)
def reprocess(batch_id: str) -> BatchResponse:
    """Discard the current classifications and classify the batch again."""
    store = get_store()
    processor = _get_batch(store, batch_id)
    try:
        processor.reprocess()
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _batch_response(batch_id, processor)


@router.post("/api/processing/{batch_id}/apply", response_model=ApplyResponse)
def apply_processing(batch_id: str) -> ApplyResponse:
    """Commit the reviewed batch into tasks and notes.

    The batch is forgotten once committed; later calls with its id get 404.
    """
    store = get_store()
    try:
        result = store.commit(batch_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail="Processing batch not found") from exc
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return ApplyResponse(
        batch_id=batch_id,
        tasks=[VoiceItemResponse.model_validate(i.to_dict()) for i in result.tasks],
        notes=[VoiceItemResponse.model_validate(i.to_dict()) for i in result.notes],
        warnings=result.warnings,
    )


@router.delete("/api/processing/{batch_id}", status_code=204)
def cancel_processing(batch_id: str) -> None:
    """Abandon a batch that has not been applied."""
    store = get_store()
    processor = _get_batch(store, batch_id)
    try:
        processor.cancel()
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    store.discard_batch(batch_id)
