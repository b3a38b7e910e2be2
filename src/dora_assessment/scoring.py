"""Category score aggregation.

Scores are derived on demand from the catalog and an answer map; nothing
here mutates session state.

Unanswered questions are excluded from both the sum and the count, so a
category with answers {4, unanswered, 2} scores 3.0.  A category without any
answered question has no score at all (``None``), which the report must
render differently from a real 0.
"""

from __future__ import annotations

from collections.abc import Mapping

from dora_assessment.models.catalog import Catalog
from dora_assessment.models.report import CategoryScore


def scores_by_category(
    catalog: Catalog, answers: Mapping[str, float]
) -> list[CategoryScore]:
    """Mean answered value per category, in catalog category order.

    The order is part of the contract: chart renderers place bars by index.
    """
    results: list[CategoryScore] = []
    for category in catalog.categories:
        questions = catalog.questions_for(category.id)
        values = [answers[q.id] for q in questions if q.id in answers]
        score = sum(values) / len(values) if values else None
        results.append(CategoryScore(
            category_id=category.id,
            score=score,
            answered=len(values),
            total=len(questions),
        ))
    return results


def overall_score(scores: list[CategoryScore]) -> float | None:
    """Unweighted mean of the categories that have data.

    Returns ``None`` when no category has data.
    """
    values = [s.score for s in scores if s.score is not None]
    if not values:
        return None
    return sum(values) / len(values)
