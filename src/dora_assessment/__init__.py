"""dora_assessment — DORA questionnaire SDK.

Public API:
    AssessmentSession       — explicit session object with navigation/draft/submit commands
    CatalogStore            — loads YAML catalogs into typed models
    NavigationController    — position tracking with clamped advance/retreat
    AnswerStore             — answer and observation maps with value snapshots
    DraftManager            — builds and restores resumable drafts
    SubmissionOrchestrator  — idle/submitting/completed/failed submission flow
    scores_by_category      — per-category mean of answered values
    replace_variables       — identity placeholder substitution

Collaborator interfaces:
    ChartRenderer   — renders the score chart image
    ReportDelivery  — assembles and delivers the final report
    DraftStore      — persists drafts for the caller
"""

from dora_assessment.answers import AnswerStore
from dora_assessment.catalog import CatalogStore
from dora_assessment.drafts import DraftManager
from dora_assessment.interfaces import ChartRenderer, DraftStore, ReportDelivery
from dora_assessment.models import (
    Catalog,
    Category,
    CategoryScore,
    ChartData,
    CompletedStep,
    Draft,
    EmptyCatalogStep,
    Language,
    LocalizedText,
    Option,
    Question,
    QuestionStep,
    ReportRequest,
    Respondent,
    StepResult,
    StoreSnapshot,
    SubmissionOutcome,
    SubmissionPayload,
    SubmissionState,
)
from dora_assessment.navigation import NavigationController
from dora_assessment.report import ReportRenderer
from dora_assessment.scoring import overall_score, scores_by_category
from dora_assessment.session import AssessmentSession
from dora_assessment.submission import SubmissionOrchestrator
from dora_assessment.templating import replace_variables

__all__ = [
    # Session & components
    "AssessmentSession",
    "AnswerStore",
    "CatalogStore",
    "DraftManager",
    "NavigationController",
    "ReportRenderer",
    "SubmissionOrchestrator",
    "overall_score",
    "replace_variables",
    "scores_by_category",
    # Interfaces
    "ChartRenderer",
    "DraftStore",
    "ReportDelivery",
    # Models
    "Catalog",
    "Category",
    "CategoryScore",
    "ChartData",
    "CompletedStep",
    "Draft",
    "EmptyCatalogStep",
    "Language",
    "LocalizedText",
    "Option",
    "Question",
    "QuestionStep",
    "ReportRequest",
    "Respondent",
    "StepResult",
    "StoreSnapshot",
    "SubmissionOutcome",
    "SubmissionPayload",
    "SubmissionState",
]
