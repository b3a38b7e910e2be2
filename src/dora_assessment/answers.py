"""AnswerStore — per-question answers and free-text observations.

The two maps have independent lifecycles: a question can carry an
observation without an answer and vice versa.  Values are not checked
against the question's declared options.
"""

from __future__ import annotations

from collections.abc import Mapping

from dora_assessment.models.session import StoreSnapshot


class AnswerStore:
    """Mutable answer/observation maps owned by one session."""

    def __init__(self) -> None:
        self._answers: dict[str, float] = {}
        self._observations: dict[str, str] = {}

    @property
    def answers(self) -> Mapping[str, float]:
        """Read-only view of the live answer map."""
        return self._answers

    @property
    def observations(self) -> Mapping[str, str]:
        return self._observations

    def record_answer(self, qid: str, value: float) -> None:
        """Insert or overwrite the answer for ``qid``."""
        self._answers[qid] = value

    def record_observation(self, qid: str, text: str) -> None:
        """Insert or overwrite the observation for ``qid``.

        An empty string is stored as-is and is distinct from no observation.
        """
        self._observations[qid] = text

    def answer_for(self, qid: str) -> float | None:
        return self._answers.get(qid)

    def observation_for(self, qid: str) -> str | None:
        return self._observations.get(qid)

    def is_answered(self, qid: str) -> bool:
        return qid in self._answers

    def snapshot(self) -> StoreSnapshot:
        """Copy both maps into an immutable snapshot.

        Later writes to the store never show up in a snapshot already taken.
        """
        return StoreSnapshot(
            answers=dict(self._answers),
            observations=dict(self._observations),
        )

    def load(
        self,
        answers: Mapping[str, float],
        observations: Mapping[str, str],
    ) -> None:
        """Replace both maps with copies of the given contents."""
        self._answers = dict(answers)
        self._observations = dict(observations)
