"""
Onboarding Workflow Service — reads, hooks and the shared mutation cycle.

Every write in the engine follows the same read-modify-write cycle:

    wf = load_workflow(workflow_id, repo)       # NotFound if unknown
    ... mutate one sub-collection ...
    commit_mutation(wf, repo, "checklist.complete", item_id=...)
        → progress.calculate_progress(wf)
        → repo.save(wf)

This module owns that cycle plus the read side used by consumers:
    - get_workflow / list_workflows / get_consultant_workflow
    - mark_welcome_message_sent  (flipped by the notification collaborator)
    - get_onboarding_stats       (summary counts for the HR overview)
"""

import logging
from datetime import date

from hr_onboarding.core.exceptions import ValidationError
from hr_onboarding.core.results import NotFound
from hr_onboarding.models.onboarding import (
    ConsultantType,
    WorkflowStatus,
    enum_value,
)
from hr_onboarding.repository import SqlAlchemyWorkflowRepository
from hr_onboarding.services.progress import calculate_progress, round_half_up

logger = logging.getLogger(__name__)


# ── Mutation cycle ───────────────────────────────────────────────────────────


def resolve_repo(repo=None):
    return repo if repo is not None else SqlAlchemyWorkflowRepository()


def load_workflow(workflow_id, repo):
    """Return the workflow or a NotFound value."""
    workflow = repo.get(workflow_id)
    if workflow is None:
        logger.info("Onboarding workflow id=%s not found", workflow_id)
        return NotFound("OnboardingWorkflow", workflow_id)
    return workflow


def commit_mutation(workflow, repo, action, **context):
    """Recompute derived fields, write the whole workflow back and log the action."""
    calculate_progress(workflow)
    repo.save(workflow)
    logger.info(
        "Onboarding %s workflow=%s %s → overall=%d%% status=%s",
        action,
        workflow.id,
        " ".join(f"{k}={v}" for k, v in context.items()),
        workflow.overall_progress,
        enum_value(workflow.status),
    )
    return workflow


def apply_patch(entity, patch, allowed_fields, entity_name):
    """Set ``patch`` fields on ``entity``; any field outside ``allowed_fields`` is rejected.

    Raises:
        ValidationError: listing every rejected field. Nothing is applied in that case.
    """
    rejected = {k: "not patchable" for k in patch if k not in allowed_fields}
    if rejected:
        raise ValidationError(f"{entity_name} patch contains fields that cannot be changed", details=rejected)
    for field, value in patch.items():
        setattr(entity, field, value)


# ── Reads ────────────────────────────────────────────────────────────────────


def get_workflow(workflow_id, *, repo=None):
    return load_workflow(workflow_id, resolve_repo(repo))


def list_workflows(status=None, consultant_type=None, consultant_id=None, *, repo=None):
    """List workflows, optionally filtered by status, consultant type or consultant id."""
    return resolve_repo(repo).list(
        status=status, consultant_type=consultant_type, consultant_id=consultant_id,
    )


def get_consultant_workflow(consultant_id, *, repo=None):
    """Return the consultant's most recently created workflow, or NotFound."""
    workflows = resolve_repo(repo).list(consultant_id=consultant_id)
    if not workflows:
        return NotFound("OnboardingWorkflow", f"consultant:{consultant_id}")
    return workflows[-1]


# ── Hooks ────────────────────────────────────────────────────────────────────


def mark_welcome_message_sent(workflow_id, *, repo=None):
    """Record that the welcome message went out.

    Sending is the notification collaborator's job; this only flips the flag.
    """
    repo = resolve_repo(repo)
    workflow = load_workflow(workflow_id, repo)
    if isinstance(workflow, NotFound):
        return workflow
    workflow.welcome_message_sent = True
    return commit_mutation(workflow, repo, "welcome_message.sent")


# ── Summary ──────────────────────────────────────────────────────────────────


def _is_overdue(workflow, today):
    if enum_value(workflow.status) == WorkflowStatus.COMPLETED.value:
        return False
    return workflow.target_completion_date is not None and workflow.target_completion_date < today


def get_onboarding_stats(today=None, *, repo=None):
    """Aggregate counts across all workflows.

    Returns:
        dict with total, active, completed, not_started, overdue,
        employees, contractors and avg_progress.
    """
    today = today or date.today()
    workflows = resolve_repo(repo).list()

    def _count(pred):
        return sum(1 for wf in workflows if pred(wf))

    total = len(workflows)
    return {
        "total": total,
        "active": _count(lambda wf: enum_value(wf.status) == WorkflowStatus.IN_PROGRESS.value),
        "completed": _count(lambda wf: enum_value(wf.status) == WorkflowStatus.COMPLETED.value),
        "not_started": _count(lambda wf: enum_value(wf.status) == WorkflowStatus.NOT_STARTED.value),
        "overdue": _count(lambda wf: _is_overdue(wf, today)),
        "employees": _count(lambda wf: enum_value(wf.consultant_type) == ConsultantType.EMPLOYEE.value),
        "contractors": _count(lambda wf: enum_value(wf.consultant_type) == ConsultantType.CONTRACTOR.value),
        "avg_progress": (
            round_half_up(sum(wf.overall_progress or 0 for wf in workflows) / total) if total else 0
        ),
    }
