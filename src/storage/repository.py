"""Persistence seam for AppData plus the process-wide store used by the API.

Durable storage lives outside this project; :class:`InMemoryRepository` is
the only implementation shipped here.
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from functools import lru_cache

from src.braindump.models import AppData, BraindumpSession, VoiceItem
from src.capture.sessions import SessionTracker
from src.processing.state_machine import ApplyResult, BraindumpProcessor, commit_batch

logger = logging.getLogger(__name__)


class NotFoundError(KeyError):
    """Raised when a processing batch id is unknown."""


class BraindumpRepository(ABC):
    @abstractmethod
    def load(self) -> AppData:
        raise NotImplementedError

    @abstractmethod
    def save(self, data: AppData) -> None:
        raise NotImplementedError


class InMemoryRepository(BraindumpRepository):
    """Keeps a single AppData in memory; ``save`` stores a deep copy."""

    def __init__(self, data: AppData | None = None) -> None:
        self._data = data or AppData()

    def load(self) -> AppData:
        return self._data

    def save(self, data: AppData) -> None:
        self._data = copy.deepcopy(data)


class BraindumpStore:
    """Live AppData, its capture tracker, and open processing batches.

    Every write to ``data`` goes through :attr:`lock`, so a capture can never
    interleave with a commit rewriting the braindump collection.
    """

    def __init__(self, repository: BraindumpRepository | None = None) -> None:
        self.repository = repository or InMemoryRepository()
        self.data = self.repository.load()
        self.tracker = SessionTracker(self.data)
        self.batches: dict[str, BraindumpProcessor] = {}
        self.lock = threading.Lock()

    # ── Capture ───────────────────────────────────────────────────────────

    def capture(self, text: str) -> VoiceItem:
        with self.lock:
            item = self.tracker.capture(text)
            self.persist()
        return item

    def end_session(self) -> BraindumpSession | None:
        with self.lock:
            session = self.tracker.end_session()
            if session is not None:
                self.persist()
        return session

    def pending_items(self) -> list[VoiceItem]:
        """Snapshot of braindump items not yet processed."""
        with self.lock:
            return [i for i in self.data.braindump if not i.processed]

    # ── Batches ───────────────────────────────────────────────────────────

    def add_batch(self, processor: BraindumpProcessor) -> str:
        batch_id = str(uuid.uuid4())
        self.batches[batch_id] = processor
        return batch_id

    def get_batch(self, batch_id: str) -> BraindumpProcessor:
        try:
            return self.batches[batch_id]
        except KeyError:
            raise NotFoundError(batch_id) from None

    def discard_batch(self, batch_id: str) -> None:
        self.batches.pop(batch_id, None)

    def commit(self, batch_id: str) -> ApplyResult:
        """Apply a reviewed batch, move its items into tasks/notes, and forget it.

        Raises:
            NotFoundError: If the batch id is unknown.
            InvalidTransitionError: If the batch is not in review.
        """
        processor = self.get_batch(batch_id)
        with self.lock:
            result = processor.apply()
            inserted = commit_batch(self.data, result, self.tracker)
            self.persist()
            self.discard_batch(batch_id)
        logger.info("Committed batch %s (%d items inserted)", batch_id, inserted)
        return result

    def persist(self) -> None:
        self.repository.save(self.data)


@lru_cache(maxsize=1)
def get_store() -> BraindumpStore:
    """Return the cached process-wide store."""
    return BraindumpStore()
