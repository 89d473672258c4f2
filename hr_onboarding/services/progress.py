"""
Progress Calculator — derived state of an onboarding workflow.

Pure over the workflow's three sub-collections; invoked by every manager after
a mutation and before the workflow is written back.

    track progress  = 100 × completed required / required   (100 when nothing is required)
    overall         = round((checklist + document + training) / 3)
    status          = completed at 100, not-started at 0, in-progress otherwise

Rounding is half-up on the integer percentages, so 62.5 → 63 and
83.33 → 83.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

from hr_onboarding.models.onboarding import (
    ChecklistStatus,
    DocumentStatus,
    TrainingStatus,
    WorkflowStatus,
    enum_value,
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def track_progress(items, done_status) -> int:
    """Percentage of required items whose status equals ``done_status``."""
    required = [item for item in items if item.is_required]
    if not required:
        return 100
    done = sum(1 for item in required if enum_value(item.status) == enum_value(done_status))
    return round_half_up(100 * done / len(required))


def derive_status(overall_progress: int) -> WorkflowStatus:
    if overall_progress >= 100:
        return WorkflowStatus.COMPLETED
    if overall_progress <= 0:
        return WorkflowStatus.NOT_STARTED
    return WorkflowStatus.IN_PROGRESS


def calculate_progress(workflow, now: datetime | None = None):
    """Recompute per-track and overall progress and status in place.

    Args:
        workflow: OnboardingWorkflow (persistent or transient).
        now: Timestamp for ``updated_at`` / ``last_activity_date``; defaults
             to the current UTC time.

    Returns:
        The same workflow, for chaining.
    """
    now = now or datetime.now(timezone.utc)

    workflow.checklist_progress = track_progress(workflow.checklist, ChecklistStatus.COMPLETED)
    workflow.document_progress = track_progress(workflow.documents, DocumentStatus.APPROVED)
    workflow.training_progress = track_progress(workflow.training, TrainingStatus.COMPLETED)

    workflow.overall_progress = round_half_up(
        (workflow.checklist_progress + workflow.document_progress + workflow.training_progress) / 3
    )
    workflow.status = derive_status(workflow.overall_progress)

    workflow.updated_at = now
    workflow.last_activity_date = now
    return workflow
