"""ReportRenderer — chart input and Jinja2 text summary for the report.

Builds the ``ChartData`` handed to the chart renderer and renders the
plain-text summary that travels with the report request.  Templates live in
the ``template/`` directory next to this module.
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from dora_assessment.constants import CHART_MAX, LABELS
from dora_assessment.models.catalog import Catalog, Language
from dora_assessment.models.report import CategoryScore, ChartData
from dora_assessment.models.session import Respondent, SubmissionPayload
from dora_assessment.scoring import overall_score
from dora_assessment.templating import replace_variables


def _format_score(value: float | None, no_data: str) -> str:
    if value is None:
        return no_data
    return f"{value:.1f}"


class ReportRenderer:
    """Renders report artefacts in one language.

    Args:
        template_dir: optional override for the template directory.
            Defaults to ``template/`` sibling of this module.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "template"
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def build_chart_data(
        self,
        catalog: Catalog,
        scores: list[CategoryScore],
        language: Language,
    ) -> ChartData:
        """One bar per category, labels and values in catalog order."""
        names = {c.id: c.name.get(language) for c in catalog.categories}
        lang = Language(language).value
        return ChartData(
            labels=[names[s.category_id] for s in scores],
            values=[s.score for s in scores],
            dataset_label=LABELS["score"][lang],
            title=LABELS["score_by_category"][lang],
            axis_max=CHART_MAX,
        )

    def render_summary(
        self,
        payload: SubmissionPayload,
        catalog: Catalog,
        scores: list[CategoryScore],
        language: Language,
    ) -> str:
        """Render the plain-text report summary."""
        lang = Language(language).value
        no_data = LABELS["no_data"][lang]
        respondent = Respondent(
            user_name=payload.user_name,
            provider_name=payload.provider_name,
            financial_entity_name=payload.financial_entity_name,
        )
        names = {c.id: c.name.get(lang) for c in catalog.categories}

        categories = [
            {
                "name": names[s.category_id],
                "score": _format_score(s.score, no_data),
                "answered": s.answered,
                "total": s.total,
            }
            for s in scores
        ]

        answered = []
        for q in catalog.questions:
            value = payload.answers.get(q.id)
            observation = payload.observations.get(q.id)
            if value is None and not observation:
                continue
            option = q.option_for(value) if value is not None else None
            answered.append({
                "qid": q.id,
                "question": replace_variables(q.text.get(lang), respondent),
                "answer": option.text.get(lang) if option else _format_score(value, no_data),
                "observation": observation,
            })

        template = self._env.get_template(f"summary_{lang}.jinja2")
        return template.render(
            title=LABELS["title"][lang],
            payload=payload,
            overall=_format_score(overall_score(scores), no_data),
            categories=categories,
            questions=answered,
        )
