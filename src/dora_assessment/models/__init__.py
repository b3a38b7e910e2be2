"""Public model re-exports for dora_assessment.

Consumers should import from ``dora_assessment.models`` rather than
reaching into sub-modules directly.
"""

# --- Catalog ---
from dora_assessment.models.catalog import (
    Catalog,
    Category,
    Language,
    LocalizedText,
    Option,
    Question,
)

# --- Session / step ---
from dora_assessment.models.session import (
    CompletedStep,
    Draft,
    EmptyCatalogStep,
    OptionPayload,
    QuestionStep,
    Respondent,
    StepResult,
    StoreSnapshot,
    SubmissionOutcome,
    SubmissionPayload,
    SubmissionState,
)

# --- Report ---
from dora_assessment.models.report import (
    CategoryScore,
    ChartData,
    ReportRequest,
)

__all__ = [
    # Catalog
    "Catalog",
    "Category",
    "Language",
    "LocalizedText",
    "Option",
    "Question",
    # Session
    "CompletedStep",
    "Draft",
    "EmptyCatalogStep",
    "OptionPayload",
    "QuestionStep",
    "Respondent",
    "StepResult",
    "StoreSnapshot",
    "SubmissionOutcome",
    "SubmissionPayload",
    "SubmissionState",
    # Report
    "CategoryScore",
    "ChartData",
    "ReportRequest",
]
