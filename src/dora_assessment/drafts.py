"""DraftManager — builds drafts from a live session and restores them.

Drafts are values: building one copies the session's answers and
observations, and restoring one copies them back.  Persistence belongs to
the optional ``DraftStore`` collaborator.

Restoring against a catalog that changed since the draft was saved is
handled best-effort by default: entries for questions the catalog no longer
has are dropped and an out-of-range position is clamped to the last
question.  Pass ``strict=True`` to reject such drafts instead.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from dora_assessment.answers import AnswerStore
from dora_assessment.interfaces import DraftStore
from dora_assessment.models.catalog import Catalog
from dora_assessment.models.session import Draft, Respondent, StoreSnapshot
from dora_assessment.navigation import NavigationController

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class DraftManager:
    """Creates and applies ``Draft`` snapshots for one catalog.

    Args:
        catalog: the catalog drafts are restored against
        store: optional persistence collaborator receiving every saved draft
    """

    def __init__(self, catalog: Catalog, store: DraftStore | None = None) -> None:
        self._catalog = catalog
        self._store = store

    def build(
        self,
        position: int,
        snapshot: StoreSnapshot,
        respondent: Respondent,
    ) -> Draft:
        """Construct a new draft value without persisting it."""
        return Draft(
            provider_name=respondent.provider_name,
            financial_entity_name=respondent.financial_entity_name,
            user_name=respondent.user_name,
            answers=dict(snapshot.answers),
            observations=dict(snapshot.observations),
            date=utc_now_iso(),
            last_question_index=position,
            is_completed=False,
        )

    async def save(
        self,
        position: int,
        snapshot: StoreSnapshot,
        respondent: Respondent,
        *,
        store: DraftStore | None = None,
    ) -> Draft:
        """Build a draft and hand it to the draft store, if one is configured.

        ``store`` overrides the store given at construction for this save.
        """
        draft = self.build(position, snapshot, respondent)
        target = store or self._store
        if target is not None:
            await target.save(draft)
        logger.info(
            "Draft saved for user=%s at position %d (%d answers)",
            draft.user_name, draft.last_question_index, len(draft.answers),
        )
        return draft

    def restore(
        self,
        draft: Draft,
        navigator: NavigationController,
        answers: AnswerStore,
        *,
        strict: bool = False,
    ) -> None:
        """Seed the answer store and navigator from ``draft``.

        Must run before the session renders its first question.  Applying
        the same draft twice yields the same state.

        Raises:
            ValueError: with ``strict=True``, if the draft references
                questions or a position the catalog does not have.
        """
        known = {q.id for q in self._catalog.questions}
        stale = (set(draft.answers) | set(draft.observations)) - known
        last_index = max(len(self._catalog.questions) - 1, 0)
        out_of_range = draft.last_question_index > last_index

        if strict and (stale or out_of_range):
            raise ValueError(
                f"Stale draft for catalog '{self._catalog.version}': "
                f"unknown questions={sorted(stale)}, "
                f"position={draft.last_question_index}"
            )
        if stale:
            logger.warning(
                "Dropping %d draft entries unknown to catalog '%s': %s",
                len(stale), self._catalog.version, sorted(stale),
            )
        if out_of_range:
            logger.warning(
                "Draft position %d is beyond catalog '%s'; clamping to %d",
                draft.last_question_index, self._catalog.version, last_index,
            )

        answers.load(
            {qid: v for qid, v in draft.answers.items() if qid in known},
            {qid: t for qid, t in draft.observations.items() if qid in known},
        )
        navigator.restore_to(min(draft.last_question_index, last_index))
