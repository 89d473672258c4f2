"""
Checklist Manager tests — complete_item / update_item and their effect on progress.
"""

from datetime import date

import pytest

import hr_onboarding.services.checklist_service as svc
from hr_onboarding.core.exceptions import InvalidTransitionError, ValidationError
from hr_onboarding.core.results import NotFound
from hr_onboarding.models import db as _db
from hr_onboarding.models.onboarding import ChecklistStatus, OnboardingWorkflow, WorkflowStatus
from hr_onboarding.models.template import build_template
from hr_onboarding.services.template_service import create_from_template


def _two_item_workflow():
    """Workflow with two required checklist items, one document and one module."""
    _db.session.add(build_template({
        "id": "template_small",
        "name": "Small",
        "consultant_type": "contractor",
        "default_duration": 7,
        "checklist_items": [
            {"title": "Laptop", "order": 1},
            {"title": "Badge", "order": 2},
            {"title": "Parking", "order": 3, "is_required": False},
        ],
        "documents": [{"name": "NDA"}],
        "training": [{"title": "Security", "passing_score": 80, "max_attempts": 3}],
    }))
    _db.session.commit()
    return create_from_template("template_small", "c-7", "Alan Turing", date(2026, 1, 5), "hr.admin")


class TestCompleteItem:
    def test_one_of_two_required_gives_50(self):
        wf = _two_item_workflow()
        wf = svc.complete_item(wf.id, wf.checklist[0].id, "it.ops")
        assert wf.checklist_progress == 50
        assert wf.overall_progress == 17  # (50 + 0 + 0) / 3 = 16.67
        assert wf.status == WorkflowStatus.IN_PROGRESS

    def test_stamps_actor_and_date(self):
        wf = _two_item_workflow()
        item_id = wf.checklist[0].id
        svc.complete_item(wf.id, item_id, "it.ops")
        _db.session.expire_all()
        item = _db.session.get(OnboardingWorkflow, wf.id).find_checklist_item(item_id)
        assert item.status == ChecklistStatus.COMPLETED
        assert item.completed_by == "it.ops"
        assert item.completed_date is not None

    def test_optional_item_does_not_move_progress(self):
        wf = _two_item_workflow()
        optional = next(i for i in wf.checklist if not i.is_required)
        wf = svc.complete_item(wf.id, optional.id, "it.ops")
        assert wf.checklist_progress == 0

    def test_both_required_gives_100(self):
        wf = _two_item_workflow()
        for item in [i for i in wf.checklist if i.is_required]:
            wf = svc.complete_item(wf.id, item.id, "it.ops")
        assert wf.checklist_progress == 100

    def test_completing_twice_is_a_conflict(self):
        wf = _two_item_workflow()
        svc.complete_item(wf.id, wf.checklist[0].id, "it.ops")
        with pytest.raises(InvalidTransitionError):
            svc.complete_item(wf.id, wf.checklist[0].id, "it.ops")

    def test_unknown_workflow(self):
        result = svc.complete_item("missing", "item", "it.ops")
        assert isinstance(result, NotFound)
        assert result.resource == "OnboardingWorkflow"

    def test_unknown_item(self):
        wf = _two_item_workflow()
        result = svc.complete_item(wf.id, "missing", "it.ops")
        assert isinstance(result, NotFound)
        assert result.resource == "ChecklistItem"


class TestUpdateItem:
    def test_patch_descriptive_fields(self):
        wf = _two_item_workflow()
        item_id = wf.checklist[0].id
        wf = svc.update_item(wf.id, item_id, {"title": "MacBook", "priority": "low"})
        item = wf.find_checklist_item(item_id)
        assert item.title == "MacBook"
        assert item.priority == "low"

    def test_making_item_optional_recomputes(self):
        wf = _two_item_workflow()
        first, second = wf.checklist[0].id, wf.checklist[1].id
        svc.complete_item(wf.id, first, "it.ops")
        wf = svc.update_item(wf.id, second, {"is_required": False})
        assert wf.checklist_progress == 100

    def test_status_patch_completes_and_reopens(self):
        wf = _two_item_workflow()
        item_id = wf.checklist[0].id
        wf = svc.update_item(wf.id, item_id, {"status": "completed"})
        assert wf.checklist_progress == 50
        assert wf.find_checklist_item(item_id).completed_date is not None

        wf = svc.update_item(wf.id, item_id, {"status": "pending"})
        item = wf.find_checklist_item(item_id)
        assert wf.checklist_progress == 0
        assert item.completed_date is None
        assert item.completed_by is None

    def test_same_status_is_a_no_op(self):
        wf = _two_item_workflow()
        wf = svc.update_item(wf.id, wf.checklist[0].id, {"status": "pending"})
        assert wf.checklist_progress == 0

    def test_unknown_status_rejected(self):
        wf = _two_item_workflow()
        with pytest.raises(ValidationError):
            svc.update_item(wf.id, wf.checklist[0].id, {"status": "archived"})

    def test_invalid_priority_rejected(self):
        wf = _two_item_workflow()
        with pytest.raises(ValidationError):
            svc.update_item(wf.id, wf.checklist[0].id, {"priority": "urgent"})

    def test_identity_fields_rejected_and_nothing_applied(self):
        wf = _two_item_workflow()
        item_id = wf.checklist[0].id
        with pytest.raises(ValidationError) as exc:
            svc.update_item(wf.id, item_id, {"title": "Changed", "workflow_id": "other"})
        assert "workflow_id" in exc.value.details
        _db.session.rollback()
        _db.session.expire_all()
        assert _db.session.get(OnboardingWorkflow, wf.id).find_checklist_item(item_id).title == "Laptop"
