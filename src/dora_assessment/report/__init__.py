"""Report artefacts for the delivery collaborator.

Provides ``ReportRenderer``, which builds the score chart input and renders
the Jinja2 plain-text summary attached to every report request.
"""

from dora_assessment.report.manager import ReportRenderer

__all__ = ["ReportRenderer"]
