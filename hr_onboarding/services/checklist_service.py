"""
Checklist Manager — state changes on a workflow's checklist items.

    complete_item(workflow_id, item_id, completed_by)
    update_item(workflow_id, item_id, patch)

Both return the updated workflow, or NotFound for an unknown workflow/item.
"""

import logging
from datetime import datetime, timezone

from hr_onboarding.core.exceptions import InvalidTransitionError, ValidationError
from hr_onboarding.core.results import NotFound
from hr_onboarding.models.onboarding import (
    CHECKLIST_PRIORITIES,
    ChecklistStatus,
    enum_value,
    validate_checklist_transition,
)
from hr_onboarding.services.onboarding_service import (
    apply_patch,
    commit_mutation,
    load_workflow,
    resolve_repo,
)

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = {
    "title", "description", "priority", "category",
    "order", "is_required", "applicable_for", "status",
}


def _load_item(workflow_id, item_id, repo):
    workflow = load_workflow(workflow_id, repo)
    if isinstance(workflow, NotFound):
        return workflow, workflow
    item = workflow.find_checklist_item(item_id)
    if item is None:
        return workflow, NotFound("ChecklistItem", item_id)
    return workflow, item


def _transition(item, new_status):
    old = enum_value(item.status)
    if not validate_checklist_transition(old, new_status):
        raise InvalidTransitionError("ChecklistItem", old, enum_value(new_status))
    item.status = new_status


def complete_item(workflow_id, item_id, completed_by, *, repo=None):
    """Mark a pending checklist item completed, stamping date and actor."""
    repo = resolve_repo(repo)
    workflow, item = _load_item(workflow_id, item_id, repo)
    if isinstance(item, NotFound):
        return item

    _transition(item, ChecklistStatus.COMPLETED)
    item.completed_date = datetime.now(timezone.utc)
    item.completed_by = completed_by
    return commit_mutation(workflow, repo, "checklist.complete", item=item_id, by=completed_by)


def update_item(workflow_id, item_id, patch, *, repo=None):
    """Patch a checklist item's fields.

    A ``status`` in the patch goes through the checklist lifecycle table;
    reopening a completed item clears its completion stamp.

    Raises:
        ValidationError: unknown/identity fields or an invalid priority.
        InvalidTransitionError: a status change the lifecycle does not allow.
    """
    repo = resolve_repo(repo)
    workflow, item = _load_item(workflow_id, item_id, repo)
    if isinstance(item, NotFound):
        return item

    patch = dict(patch)
    if "priority" in patch and patch["priority"] not in CHECKLIST_PRIORITIES:
        raise ValidationError(
            f"priority must be one of: {sorted(CHECKLIST_PRIORITIES)}",
            details={"priority": patch["priority"]},
        )
    new_status = patch.pop("status", None)
    target = None
    if new_status is not None and enum_value(new_status) != enum_value(item.status):
        try:
            target = ChecklistStatus(enum_value(new_status))
        except ValueError:
            raise ValidationError(f"Unknown checklist status: {new_status}", details={"status": new_status}) from None
        if not validate_checklist_transition(item.status, target):
            raise InvalidTransitionError("ChecklistItem", enum_value(item.status), target.value)

    apply_patch(item, patch, PATCHABLE_FIELDS, "ChecklistItem")

    if target is not None:
        item.status = target
        if target == ChecklistStatus.PENDING:
            item.completed_date = None
            item.completed_by = None
        elif item.completed_date is None:
            item.completed_date = datetime.now(timezone.utc)

    return commit_mutation(workflow, repo, "checklist.update", item=item_id, fields=",".join(sorted(patch)))
