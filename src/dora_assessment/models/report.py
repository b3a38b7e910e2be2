"""Report models — scores, chart data, and the report request.

These are the values handed to the external chart renderer and report
delivery collaborators.  Category scores are derived on demand and never
stored on the session.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from dora_assessment.models.catalog import Catalog, Language
from dora_assessment.models.session import SubmissionPayload


class CategoryScore(BaseModel):
    """Mean of the answered values in one category.

    ``score`` is ``None`` when no question of the category was answered;
    this "no data" result must be rendered differently from a real 0.
    """

    model_config = ConfigDict(frozen=True)

    category_id: str
    score: Optional[float] = None
    answered: int = 0
    total: int = 0

    @property
    def has_data(self) -> bool:
        return self.score is not None


class ChartData(BaseModel):
    """Input for the chart renderer: one bar per category, in catalog order."""

    labels: list[str]
    # None marks a category without data
    values: list[Optional[float]]
    dataset_label: str
    title: str
    axis_max: int = 100
    index_axis: Literal["x", "y"] = "y"


class ReportRequest(BaseModel):
    """Everything the report collaborator needs to assemble and deliver."""

    payload: SubmissionPayload
    catalog: Catalog
    language: Language
    scores: list[CategoryScore]
    # Rendered chart image (base64 data URI); None when unavailable
    chart_image: Optional[str] = None
    # Plain-text summary rendered from the report template
    summary: Optional[str] = None
