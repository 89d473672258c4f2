"""
Document Review Manager — submission and review of onboarding documents.

    submit(workflow_id, document_id, file_url, file_name)
    review(workflow_id, document_id, outcome, reviewed_by, notes=None)
    update_document(workflow_id, document_id, patch)

Lifecycle (DOCUMENT_TRANSITIONS):
    not-submitted ─submit─▶ submitted ─review─▶ approved | rejected | revision-required
    rejected | revision-required ─submit─▶ submitted

Only ``approved`` counts toward the document track. A resubmission overwrites
the stored file reference in place; earlier submissions are not kept.
"""

import logging
from datetime import datetime, timezone

from hr_onboarding.core.exceptions import InvalidTransitionError, ValidationError
from hr_onboarding.core.results import NotFound
from hr_onboarding.models.onboarding import (
    REVIEW_OUTCOMES,
    DocumentStatus,
    enum_value,
    validate_document_transition,
)
from hr_onboarding.services.onboarding_service import (
    apply_patch,
    commit_mutation,
    load_workflow,
    resolve_repo,
)

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = {"name", "description", "category", "is_required", "applicable_for"}


def _load_document(workflow_id, document_id, repo):
    workflow = load_workflow(workflow_id, repo)
    if isinstance(workflow, NotFound):
        return workflow, workflow
    document = workflow.find_document(document_id)
    if document is None:
        return workflow, NotFound("OnboardingDocument", document_id)
    return workflow, document


def _transition(document, new_status):
    old = enum_value(document.status)
    if not validate_document_transition(old, new_status):
        raise InvalidTransitionError("OnboardingDocument", old, enum_value(new_status))
    document.status = new_status


def submit(workflow_id, document_id, file_url, file_name, *, repo=None):
    """Attach an uploaded file and move the document to ``submitted``.

    Allowed for documents that were never submitted, rejected, or sent back
    for revision. Any earlier file reference is replaced.
    """
    repo = resolve_repo(repo)
    workflow, document = _load_document(workflow_id, document_id, repo)
    if isinstance(document, NotFound):
        return document

    resubmission = document.file_url is not None
    _transition(document, DocumentStatus.SUBMITTED)
    document.file_url = file_url
    document.file_name = file_name
    document.uploaded_date = datetime.now(timezone.utc)
    return commit_mutation(
        workflow, repo, "document.submit",
        document=document_id, resubmission=resubmission,
    )


def review(workflow_id, document_id, outcome, reviewed_by, notes=None, *, repo=None):
    """Record the reviewer's decision on a submitted document.

    Args:
        outcome: "approved", "rejected" or "revision-required".

    Raises:
        ValidationError: outcome is not a review outcome.
        InvalidTransitionError: the document is not awaiting review.
    """
    try:
        outcome = DocumentStatus(enum_value(outcome))
    except ValueError:
        outcome = None
    if outcome not in REVIEW_OUTCOMES:
        raise ValidationError(
            "outcome must be one of: approved, rejected, revision-required",
            details={"outcome": "invalid"},
        )

    repo = resolve_repo(repo)
    workflow, document = _load_document(workflow_id, document_id, repo)
    if isinstance(document, NotFound):
        return document

    _transition(document, outcome)
    document.reviewed_by = reviewed_by
    document.reviewed_date = datetime.now(timezone.utc)
    document.review_notes = notes
    return commit_mutation(
        workflow, repo, "document.review",
        document=document_id, outcome=outcome.value, by=reviewed_by,
    )


def update_document(workflow_id, document_id, patch, *, repo=None):
    """Patch descriptive fields of a document requirement (not its review state)."""
    repo = resolve_repo(repo)
    workflow, document = _load_document(workflow_id, document_id, repo)
    if isinstance(document, NotFound):
        return document

    apply_patch(document, patch, PATCHABLE_FIELDS, "OnboardingDocument")
    return commit_mutation(
        workflow, repo, "document.update",
        document=document_id, fields=",".join(sorted(patch)),
    )
