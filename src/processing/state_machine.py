"""Braindump processing: classify a batch, let the caller review it, then commit.

Stages run ``processing -> review -> complete``. Only :meth:`BraindumpProcessor.apply`
touches the source items (marking them processed), and only
:func:`commit_batch` moves items between AppData collections.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

from src.braindump.models import AppData, Category, Classification, VoiceItem
from src.capture.sessions import SessionTracker
from src.classification.classifier import classify

logger = logging.getLogger(__name__)

ProgressObserver = Callable[[int, int, VoiceItem], None]


class ProcessingStage(StrEnum):
    PROCESSING = "processing"
    REVIEW = "review"
    COMPLETE = "complete"


class ProcessingError(Exception):
    """Base class for caller errors raised by the processor."""


class InvalidTransitionError(ProcessingError):
    """The requested operation is not allowed in the current stage."""


class UnknownItemError(ProcessingError):
    """The item id is not part of this batch."""


@dataclass
class ReviewItem:
    """A source item paired with its classification and the category it will commit to."""

    item: VoiceItem
    classification: Classification
    suggested_category: Category
    metadata: dict[str, Any] = field(default_factory=dict)  # user_corrected, original_suggestion


@dataclass
class ApplyResult:
    """Committed items partitioned by final category."""

    tasks: list[VoiceItem]
    notes: list[VoiceItem]
    warnings: list[str] = field(default_factory=list)


class BraindumpProcessor:
    """State machine organizing one batch of braindump items."""

    def __init__(
        self,
        classifier: Callable[[str], Classification] = classify,
        observer: ProgressObserver | None = None,
        delay_seconds: float = 0.0,
    ) -> None:
        self.classifier = classifier
        self.observer = observer
        self.delay_seconds = delay_seconds

        self.stage = ProcessingStage.PROCESSING
        self.current_index = 0
        self.total = 0
        self.items: list[ReviewItem] = []
        self.warnings: list[str] = []

        self._source: list[VoiceItem] = []
        self._cancelled = False
        self._result: ApplyResult | None = None

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    # ── Transitions ───────────────────────────────────────────────────────

    def start(self, items: Iterable[VoiceItem]) -> None:
        """Classify every item in input order, then move to review."""
        self._require_open("start")
        self._source = list(items)
        self._cancelled = False
        self._run()

    def reprocess(self) -> None:
        """Discard current classifications and classify the same batch again."""
        self._require_open("reprocess")
        self._cancelled = False
        self._run()

    def override_category(self, item_id: str, category: Category | str) -> ReviewItem:
        """Change the category an item will be committed to.

        Raises:
            InvalidTransitionError: If the batch is not in review.
            UnknownItemError: If no item in the batch has ``item_id``.
            ValueError: If ``category`` is not a valid category.
        """
        if self.stage is not ProcessingStage.REVIEW or self._cancelled:
            raise InvalidTransitionError(f"Cannot override categories in stage {self.stage.value!r}")
        category = Category(category)

        review = next((r for r in self.items if r.item.id == item_id), None)
        if review is None:
            raise UnknownItemError(f"Item {item_id!r} is not part of this batch")

        original = review.classification.category
        review.suggested_category = category
        if category == original:
            review.metadata.pop("user_corrected", None)
            review.metadata.pop("original_suggestion", None)
        else:
            review.metadata["user_corrected"] = True
            review.metadata["original_suggestion"] = original.value
        return review

    def apply(self) -> ApplyResult:
        """Commit the reviewed batch.

        Marks every source item processed and returns the committed items
        split into tasks and notes. Calling again after completion returns
        the same result.
        """
        if self.stage is ProcessingStage.COMPLETE and self._result is not None:
            logger.warning("Batch already applied; returning the previous result")
            return self._result
        if self.stage is not ProcessingStage.REVIEW or self._cancelled:
            raise InvalidTransitionError(f"Cannot apply a batch in stage {self.stage.value!r}")

        tasks: list[VoiceItem] = []
        notes: list[VoiceItem] = []
        for review in self.items:
            committed = _committed_item(review)
            if committed.category is Category.TASKS:
                tasks.append(committed)
            else:
                notes.append(committed)

        for source in self._source:
            source.processed = True

        self.stage = ProcessingStage.COMPLETE
        self._result = ApplyResult(tasks=tasks, notes=notes, warnings=list(self.warnings))
        logger.info("Applied batch: %d tasks, %d notes", len(tasks), len(notes))
        return self._result

    def cancel(self) -> None:
        """Abandon the batch without touching any source item."""
        self._require_open("cancel")
        self._cancelled = True
        self.items = []
        logger.info("Processing cancelled in stage %s", self.stage.value)

    # ── Internals ─────────────────────────────────────────────────────────

    def _require_open(self, operation: str) -> None:
        if self.stage is ProcessingStage.COMPLETE:
            raise InvalidTransitionError(f"Cannot {operation} a completed batch")

    def _run(self) -> None:
        self.stage = ProcessingStage.PROCESSING
        self.items = []
        self.warnings = []
        self.current_index = 0
        self.total = len(self._source)
        logger.info("Processing %d braindump items", self.total)

        for index, item in enumerate(self._source):
            self.current_index = index
            if self.observer is not None:
                self.observer(index, self.total, item)
            if self._cancelled:
                return

            classification = self._classify(item)
            self.items.append(
                ReviewItem(
                    item=item,
                    classification=classification,
                    suggested_category=classification.category,
                )
            )
            if self.delay_seconds > 0 and index < self.total - 1:
                time.sleep(self.delay_seconds)

        self.stage = ProcessingStage.REVIEW

    def _classify(self, item: VoiceItem) -> Classification:
        try:
            return self.classifier(item.text)
        except Exception:
            logger.exception("Classification failed for item %s", item.id)
            self.warnings.append(f"Classification failed for item {item.id}; defaulted to notes")
            return Classification(
                category=Category.NOTES,
                confidence=0.0,
                reasoning="classification failed",
            )


def _committed_item(review: ReviewItem) -> VoiceItem:
    classification = review.classification
    category = review.suggested_category
    metadata = {
        **review.item.metadata,
        **classification.metadata,
        "reasoning": classification.reasoning,
        **review.metadata,
    }
    committed = replace(
        review.item,
        processed=True,
        category=category,
        completed=False if category is Category.TASKS else review.item.completed,
        tags=list(review.item.tags),
        metadata=metadata,
    )
    committed.attach_classification(classification)
    return committed


def commit_batch(
    data: AppData, result: ApplyResult, tracker: SessionTracker | None = None
) -> int:
    """Move committed items out of the braindump into tasks and notes.

    Items already present in tasks or notes are not inserted twice. Every
    session that contributed items is offered to the tracker for finalization.

    Returns:
        The number of items inserted.
    """
    committed = [*result.tasks, *result.notes]
    committed_ids = {i.id for i in committed}
    existing_ids = {i.id for i in data.tasks} | {i.id for i in data.notes}

    data.braindump[:] = [i for i in data.braindump if i.id not in committed_ids]

    inserted = 0
    for target, items in ((data.tasks, result.tasks), (data.notes, result.notes)):
        for item in items:
            if item.id in existing_ids:
                continue
            target.append(item)
            existing_ids.add(item.id)
            inserted += 1

    tracker = tracker or SessionTracker(data)
    for session_id in dict.fromkeys(i.session_id for i in committed if i.session_id):
        tracker.finalize(session_id)

    return inserted
