"""
Template Instantiator — creates onboarding workflows from catalog templates.

    create_from_template(template_id, consultant_id, consultant_name,
                         start_date, created_by) → OnboardingWorkflow | NotFound

The template's prototype lists are deep-copied: every checklist item, document
and training module gets a fresh UUID and its track's initial status, all
other descriptive fields are carried over unchanged. Progress fields start at
0 and are derived once before the workflow is written through the repository,
so a track with no required items opens at 100%.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

from hr_onboarding.core.exceptions import ValidationError
from hr_onboarding.core.results import NotFound
from hr_onboarding.models.onboarding import (
    ChecklistItem,
    ChecklistStatus,
    DocumentStatus,
    OnboardingDocument,
    OnboardingWorkflow,
    TrainingModule,
    TrainingStatus,
    WorkflowStatus,
)
from hr_onboarding.repository import SqlAlchemyTemplateCatalog
from hr_onboarding.services.onboarding_service import resolve_repo
from hr_onboarding.services.progress import calculate_progress

logger = logging.getLogger(__name__)


def _uuid():
    return str(uuid.uuid4())


def resolve_catalog(catalog=None):
    return catalog if catalog is not None else SqlAlchemyTemplateCatalog()


# ── Catalog reads ────────────────────────────────────────────────────────────


def list_templates(active_only=False, *, catalog=None):
    return resolve_catalog(catalog).list(active_only=active_only)


def get_template(template_id, *, catalog=None):
    template = resolve_catalog(catalog).get(template_id)
    if template is None:
        return NotFound("OnboardingTemplate", template_id)
    return template


# ── Prototype copies ─────────────────────────────────────────────────────────


def _copy_checklist(workflow_id, prototypes):
    return [
        ChecklistItem(
            id=_uuid(),
            workflow_id=workflow_id,
            title=p.title,
            description=p.description,
            priority=p.priority,
            category=p.category,
            order=p.order,
            is_required=p.is_required,
            applicable_for=list(p.applicable_for or []),
            status=ChecklistStatus.PENDING,
        )
        for p in prototypes
    ]


def _copy_documents(workflow_id, prototypes):
    return [
        OnboardingDocument(
            id=_uuid(),
            workflow_id=workflow_id,
            name=p.name,
            description=p.description,
            category=p.category,
            is_required=p.is_required,
            applicable_for=list(p.applicable_for or []),
            position=index,
            status=DocumentStatus.NOT_SUBMITTED,
        )
        for index, p in enumerate(prototypes)
    ]


def _copy_training(workflow_id, prototypes):
    return [
        TrainingModule(
            id=_uuid(),
            workflow_id=workflow_id,
            title=p.title,
            description=p.description,
            category=p.category,
            duration=p.duration,
            passing_score=p.passing_score,
            max_attempts=p.max_attempts,
            is_required=p.is_required,
            applicable_for=list(p.applicable_for or []),
            order=p.order,
            status=TrainingStatus.NOT_STARTED,
            attempts=0,
        )
        for p in prototypes
    ]


# ── Instantiation ────────────────────────────────────────────────────────────


def create_from_template(
    template_id,
    consultant_id,
    consultant_name,
    start_date,
    created_by,
    *,
    repo=None,
    catalog=None,
):
    """Create and persist a workflow for a consultant from a template.

    Args:
        template_id: Catalog id (e.g. "template_employee").
        consultant_id: Id of the employee or contractor being onboarded.
        consultant_name: Display name.
        start_date: datetime.date of the first day.
        created_by: Actor creating the workflow.

    Returns:
        The new OnboardingWorkflow, or NotFound when the template does not exist.

    Raises:
        ValidationError: when the template is inactive.
    """
    repo = resolve_repo(repo)
    template = resolve_catalog(catalog).get(template_id)
    if template is None:
        logger.info("Onboarding template id=%s not found", template_id)
        return NotFound("OnboardingTemplate", template_id)
    if not template.is_active:
        raise ValidationError(f"Template {template_id} is inactive", details={"template_id": "inactive"})

    now = datetime.now(timezone.utc)
    workflow_id = _uuid()
    workflow = OnboardingWorkflow(
        id=workflow_id,
        template_id=template.id,
        consultant_id=consultant_id,
        consultant_name=consultant_name,
        consultant_type=template.consultant_type,
        status=WorkflowStatus.NOT_STARTED,
        start_date=start_date,
        target_completion_date=start_date + timedelta(days=template.default_duration),
        checklist=_copy_checklist(workflow_id, template.checklist_items),
        documents=_copy_documents(workflow_id, template.documents),
        training=_copy_training(workflow_id, template.training),
        checklist_progress=0,
        document_progress=0,
        training_progress=0,
        overall_progress=0,
        welcome_message_sent=False,
        created_by=created_by,
        created_at=now,
        updated_at=now,
        last_activity_date=now,
    )
    # Tracks with nothing required are vacuously complete from the start.
    calculate_progress(workflow, now=now)
    repo.save(workflow)
    logger.info(
        "Onboarding workflow %s created from %s for consultant %s "
        "(%d checklist, %d documents, %d training)",
        workflow.id, template.id, consultant_id,
        len(workflow.checklist), len(workflow.documents), len(workflow.training),
    )
    return workflow
