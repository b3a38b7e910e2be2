"""SessionRegistry — in-process holder of live assessment sessions.

A live session is pure in-memory state (position, answers, submission
status); only drafts and submissions reach the database.  Sessions are keyed
by the (user_id, session_id) pair and leave the registry when:

- the respondent abandons them
- their submission has completed and been stored
- they sit idle longer than ``SESSION_IDLE_TTL_SECONDS`` (see ``sweep``)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel

from dora_assessment.models.session import SubmissionOutcome, SubmissionState
from dora_assessment.session import AssessmentSession

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LiveSession:
    """A registered session plus the metadata the API reports about it."""

    user_id: str
    session_id: str
    catalog_version: str
    session: AssessmentSession
    resumed: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    last_seen: datetime = field(default_factory=_utcnow)
    # Completed outcome whose database write has not succeeded yet
    pending: SubmissionOutcome | None = None
    # Serialises storing ``pending``
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)


class SessionInfo(BaseModel):
    """Public view of a live session."""

    user_id: str
    session_id: str
    catalog_version: str
    language: str
    state: str
    position: int
    total: int
    progress: float
    resumed: bool
    created_at: datetime
    last_seen: datetime

    @classmethod
    def from_live(cls, live: LiveSession) -> "SessionInfo":
        s = live.session
        return cls(
            user_id=live.user_id,
            session_id=live.session_id,
            catalog_version=live.catalog_version,
            language=s.language.value,
            state=s.state.value,
            position=s.navigator.position,
            total=s.navigator.total,
            progress=s.progress(),
            resumed=live.resumed,
            created_at=live.created_at,
            last_seen=live.last_seen,
        )


class SessionRegistry:
    """Dict-backed registry of live sessions."""

    def __init__(self) -> None:
        self._sessions: dict[tuple[str, str], LiveSession] = {}

    def add(self, live: LiveSession) -> LiveSession:
        """Register ``live``.

        Raises:
            ValueError: if the (user_id, session_id) pair is taken.
        """
        key = (live.user_id, live.session_id)
        if key in self._sessions:
            raise ValueError(
                f"Session already exists: user_id={live.user_id}, "
                f"session_id={live.session_id}"
            )
        self._sessions[key] = live
        logger.info("Session registered: user_id=%s session_id=%s", *key)
        return live

    def get(self, user_id: str, session_id: str, *, touch: bool = True) -> LiveSession:
        """Return a live session or raise ``ValueError`` if not found.

        Every lookup counts as activity unless ``touch`` is false.
        """
        live = self._sessions.get((user_id, session_id))
        if live is None:
            raise ValueError(
                f"Session not found: user_id={user_id}, session_id={session_id}"
            )
        if touch:
            live.last_seen = _utcnow()
        return live

    def remove(self, user_id: str, session_id: str) -> None:
        self.get(user_id, session_id, touch=False)
        del self._sessions[(user_id, session_id)]
        logger.info("Session removed: user_id=%s session_id=%s", user_id, session_id)

    def list_for(self, user_id: str) -> list[LiveSession]:
        """A user's live sessions, most recent first."""
        sessions = [s for (uid, _), s in self._sessions.items() if uid == user_id]
        return sorted(sessions, key=lambda s: s.created_at, reverse=True)

    def __len__(self) -> int:
        return len(self._sessions)

    def sweep(self, idle_ttl_seconds: float, *, now: datetime | None = None) -> int:
        """Evict sessions idle for longer than ``idle_ttl_seconds``.

        Sessions with a submission in flight are kept whatever their age.
        Returns the number of sessions evicted.
        """
        now = now or _utcnow()
        cutoff = now - timedelta(seconds=idle_ttl_seconds)
        stale = [
            key for key, live in self._sessions.items()
            if live.last_seen < cutoff
            and live.session.state is not SubmissionState.SUBMITTING
        ]
        for key in stale:
            live = self._sessions.pop(key)
            if live.pending is not None:
                logger.error(
                    "Evicting session with an unstored submission: user_id=%s "
                    "session_id=%s respondent=%s submitted=%s",
                    live.user_id, live.session_id,
                    live.pending.payload.user_name, live.pending.payload.date,
                )
        if stale:
            logger.info(
                "Evicted %d idle session(s); %d live", len(stale), len(self._sessions),
            )
        return len(stale)
