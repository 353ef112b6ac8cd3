"""Session tracking: group captured items into braindump sessions."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from src.analytics.numeric import round_half_up
from src.braindump.models import (
    AppData,
    BraindumpSession,
    Classification,
    SessionStats,
    VoiceItem,
    format_timestamp,
    parse_timestamp,
)
from src.classification.classifier import classify

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SessionTracker:
    """Open, extend, close, and finalize capture sessions on an AppData.

    One tracker is one capture context: at most one session is open at a time.
    """

    def __init__(
        self,
        data: AppData,
        clock: Callable[[], datetime] = _utc_now,
        classifier: Callable[[str], Classification] = classify,
    ) -> None:
        self.data = data
        self.clock = clock
        self.classifier = classifier
        self._open_session_id: str | None = None

    @property
    def open_session(self) -> BraindumpSession | None:
        if self._open_session_id is None:
            return None
        return self.data.find_session(self._open_session_id)

    def start_session(self) -> BraindumpSession:
        """Return the open session, creating one if none is open."""
        session = self.open_session
        if session is not None:
            return session

        session = BraindumpSession(id=str(uuid.uuid4()), start_time=format_timestamp(self.clock()))
        self.data.sessions.append(session)
        self._open_session_id = session.id
        logger.info("Opened braindump session %s", session.id)
        return session

    def capture(self, text: str, item_id: str | None = None) -> VoiceItem:
        """Store a captured thought in the braindump collection.

        The item is classified on arrival so analytics over the braindump
        see its category and confidence before it is organized. Starts a
        session when none is open, bumps its item count, and moves its end
        time to the capture instant.
        """
        session = self.start_session()
        now = format_timestamp(self.clock())
        item = VoiceItem(
            id=item_id or str(uuid.uuid4()),
            text=text,
            timestamp=now,
            session_id=session.id,
        )
        item.attach_classification(self.classifier(text))
        self.data.braindump.append(item)
        session.item_count += 1
        session.end_time = now
        return item

    def end_session(self) -> BraindumpSession | None:
        """Close the open session. No-op when nothing is open."""
        session = self.open_session
        if session is None:
            return None
        session.end_time = format_timestamp(self.clock())
        self._open_session_id = None
        logger.info("Closed braindump session %s (%d items)", session.id, session.item_count)
        return session

    def finalize(self, session_id: str) -> bool:
        """Mark a session processed and fill its stats, exactly once.

        Nothing happens when the session is unknown, already processed, or
        still has unprocessed items in the braindump collection.

        Returns:
            True if the session was finalized by this call.
        """
        session = self.data.find_session(session_id)
        if session is None or session.processed:
            return False
        if any(i.session_id == session_id and not i.processed for i in self.data.braindump):
            return False

        tasks = [i for i in self.data.tasks if i.session_id == session_id]
        notes = [i for i in self.data.notes if i.session_id == session_id]
        committed = tasks + notes
        confidences = [i.confidence for i in committed if i.confidence is not None]

        session.stats = SessionStats(
            total_words=sum(len(i.text.split()) for i in committed),
            duration=_duration_seconds(session),
            tasks_created=len(tasks),
            notes_created=len(notes),
            average_confidence=(
                round_half_up(sum(confidences) / len(confidences), 2) if confidences else 0.0
            ),
        )
        session.processed = True
        session.processed_at = format_timestamp(self.clock())
        if self._open_session_id == session_id:
            self._open_session_id = None
        logger.info(
            "Session %s processed: %d tasks, %d notes",
            session_id,
            session.stats.tasks_created,
            session.stats.notes_created,
        )
        return True


def _duration_seconds(session: BraindumpSession) -> int:
    started = parse_timestamp(session.start_time)
    ended = parse_timestamp(session.end_time)
    if started is None or ended is None:
        return 0
    return max(0, int((ended - started).total_seconds()))
