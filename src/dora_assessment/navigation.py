"""NavigationController — position tracking over the ordered question list.

The controller only knows the catalog and an integer position.  Answers
live in the ``AnswerStore``; ``progress`` takes them as an argument so the
two components stay independent.
"""

from __future__ import annotations

from collections.abc import Mapping

from dora_assessment.models.catalog import Catalog, Question


class NavigationController:
    """Holds the current position in the question sequence.

    Invariant: ``0 <= position < len(catalog)`` whenever a current question
    exists.  ``advance`` and ``retreat`` clamp; ``restore_to`` does not.

    Args:
        catalog: the immutable catalog for this session
    """

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    @property
    def total(self) -> int:
        return len(self._catalog.questions)

    @property
    def is_first(self) -> bool:
        return self._position == 0

    @property
    def is_last(self) -> bool:
        """True on the last question, where "submit" replaces "next"."""
        return self.total > 0 and self._position == self.total - 1

    def current_question(self) -> Question | None:
        """Return the question at the current position.

        ``None`` means there is no current question (empty catalog or a
        position outside the catalog) and the session cannot proceed.
        """
        if 0 <= self._position < self.total:
            return self._catalog.questions[self._position]
        return None

    def progress(self, answers: Mapping[str, float]) -> float:
        """Fraction of the questionnaire done, for presentation only.

        ``(position + 1 if the current question is answered) / total``,
        kept within ``[0, 1]``.
        """
        if self.total == 0:
            return 0.0
        current = self.current_question()
        answered = 1 if current is not None and current.id in answers else 0
        fraction = (self._position + answered) / self.total
        return min(1.0, max(0.0, fraction))

    def advance(self) -> int:
        """Move to the next question; no-op on the last one."""
        if self._position < self.total - 1:
            self._position += 1
        return self._position

    def retreat(self) -> int:
        """Move to the previous question; no-op on the first one."""
        if self._position > 0:
            self._position -= 1
        return self._position

    def restore_to(self, index: int) -> None:
        # Bounds are the caller's responsibility (see DraftManager.restore).
        self._position = index
