"""Catalog models — categories, questions, and their selectable options.

A catalog is loaded once (typically from ``v1/catalog/*.yaml``) and stays
immutable for the lifetime of every session that uses it.  All models are
frozen so a session can hold references without copying.

Question order in ``Catalog.questions`` is the presentation order; category
order in ``Catalog.categories`` is the order of score aggregation and chart
rendering.
"""

from __future__ import annotations

import enum
from typing import List

from pydantic import BaseModel, ConfigDict, model_validator


class Language(str, enum.Enum):
    """Languages the questionnaire is available in."""

    ES = "es"
    PT = "pt"


class LocalizedText(BaseModel):
    """A string available in every supported language."""

    model_config = ConfigDict(frozen=True)

    es: str
    pt: str

    def get(self, language: Language | str) -> str:
        """Return the text for ``language``."""
        return getattr(self, Language(language).value)


class Category(BaseModel):
    """A scoring group of questions (e.g. ICT risk management)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: LocalizedText


class Option(BaseModel):
    """A selectable answer carrying the numeric value recorded on selection."""

    model_config = ConfigDict(frozen=True)

    value: float
    text: LocalizedText


class Question(BaseModel):
    """A single questionnaire item belonging to one category.

    ``text`` may contain ``{providerName}`` / ``{financialEntityName}``
    placeholders that are substituted with the respondent identity at
    render time.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    category_id: str
    text: LocalizedText
    options: List[Option]

    def option_for(self, value: float) -> Option | None:
        """Return the option whose value equals ``value``, if any."""
        for option in self.options:
            if option.value == value:
                return option
        return None


class Catalog(BaseModel):
    """Ordered categories and questions for one questionnaire version."""

    model_config = ConfigDict(frozen=True)

    version: str = "custom"
    categories: List[Category]
    questions: List[Question]

    @model_validator(mode="after")
    def _chk(self):
        category_ids = [c.id for c in self.categories]
        if len(set(category_ids)) != len(category_ids):
            raise ValueError("category ids must be unique")
        question_ids = [q.id for q in self.questions]
        if len(set(question_ids)) != len(question_ids):
            raise ValueError("question ids must be unique")
        known = set(category_ids)
        for q in self.questions:
            if q.category_id not in known:
                raise ValueError(
                    f"question '{q.id}' references unknown category '{q.category_id}'"
                )
        return self

    def __len__(self) -> int:
        return len(self.questions)

    def get_question(self, qid: str) -> Question:
        """Look up a question by id.

        Raises:
            KeyError: if ``qid`` is not part of the catalog.
        """
        for q in self.questions:
            if q.id == qid:
                return q
        raise KeyError(qid)

    def has_question(self, qid: str) -> bool:
        return any(q.id == qid for q in self.questions)

    def questions_for(self, category_id: str) -> list[Question]:
        """Questions of one category, in presentation order."""
        return [q for q in self.questions if q.category_id == category_id]
