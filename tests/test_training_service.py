"""
Training Manager tests — start, scoring with capped attempts, and patches.

Contractor template modules:
    Company Overview        passing 80, max 3 attempts
    Security & Compliance   passing 90, max 3 attempts
"""

from datetime import date

import pytest

import hr_onboarding.services.training_service as svc
from hr_onboarding.core.exceptions import InvalidTransitionError, ValidationError
from hr_onboarding.core.results import NotFound
from hr_onboarding.models.onboarding import TrainingStatus
from hr_onboarding.services.template_service import create_from_template


@pytest.fixture()
def workflow(seeded_templates):
    return create_from_template("template_contractor", "c-3", "Barbara Liskov", date(2026, 3, 2), "hr.admin")


def _module_id(wf, title="Company Overview"):
    return next(t.id for t in wf.training if t.title == title)


class TestStart:
    def test_start_moves_to_in_progress(self, workflow):
        tid = _module_id(workflow)
        wf = svc.start(workflow.id, tid)
        module = wf.find_training(tid)
        assert module.status == TrainingStatus.IN_PROGRESS
        assert module.started_date is not None
        assert module.attempts == 0

    def test_start_is_idempotent(self, workflow):
        tid = _module_id(workflow)
        svc.start(workflow.id, tid)
        first_started = svc.start(workflow.id, tid).find_training(tid).started_date
        wf = svc.start(workflow.id, tid)
        assert wf.find_training(tid).status == TrainingStatus.IN_PROGRESS
        assert wf.find_training(tid).started_date == first_started

    def test_start_on_completed_module_leaves_it(self, workflow):
        tid = _module_id(workflow)
        svc.record_score(workflow.id, tid, 95)
        wf = svc.start(workflow.id, tid)
        assert wf.find_training(tid).status == TrainingStatus.COMPLETED

    def test_unknown_module(self, workflow):
        result = svc.start(workflow.id, "missing")
        assert isinstance(result, NotFound)
        assert result.resource == "TrainingModule"


class TestRecordScore:
    def test_retry_sequence_ends_in_failed(self, workflow):
        tid = _module_id(workflow)
        svc.start(workflow.id, tid)

        wf = svc.record_score(workflow.id, tid, 70)
        module = wf.find_training(tid)
        assert (module.status, module.attempts, module.score) == (TrainingStatus.IN_PROGRESS, 1, 70)

        wf = svc.record_score(workflow.id, tid, 75)
        module = wf.find_training(tid)
        assert (module.status, module.attempts) == (TrainingStatus.IN_PROGRESS, 2)

        wf = svc.record_score(workflow.id, tid, 60)
        module = wf.find_training(tid)
        assert (module.status, module.attempts) == (TrainingStatus.FAILED, 3)
        assert module.attempts_remaining == 0
        assert module.completed_date is None
        assert wf.training_progress == 0

    def test_pass_on_first_attempt(self, workflow):
        tid = _module_id(workflow)
        svc.start(workflow.id, tid)
        wf = svc.record_score(workflow.id, tid, 85)
        module = wf.find_training(tid)
        assert (module.status, module.attempts) == (TrainingStatus.COMPLETED, 1)
        assert module.completed_date is not None
        assert wf.training_progress == 50

    def test_score_equal_to_passing_passes(self, workflow):
        tid = _module_id(workflow, "Security & Compliance")
        wf = svc.record_score(workflow.id, tid, 90)
        assert wf.find_training(tid).status == TrainingStatus.COMPLETED

    def test_score_without_start_auto_starts(self, workflow):
        tid = _module_id(workflow)
        wf = svc.record_score(workflow.id, tid, 50)
        module = wf.find_training(tid)
        assert module.status == TrainingStatus.IN_PROGRESS
        assert module.started_date is not None
        assert module.attempts == 1

    def test_pass_after_failures(self, workflow):
        tid = _module_id(workflow)
        svc.record_score(workflow.id, tid, 10)
        svc.record_score(workflow.id, tid, 20)
        wf = svc.record_score(workflow.id, tid, 80)
        module = wf.find_training(tid)
        assert (module.status, module.attempts) == (TrainingStatus.COMPLETED, 3)

    @pytest.mark.parametrize("scores", [[95], [10, 20, 30]])
    def test_scoring_a_finished_module_is_rejected(self, workflow, scores):
        tid = _module_id(workflow)
        for score in scores:
            svc.record_score(workflow.id, tid, score)
        with pytest.raises(InvalidTransitionError):
            svc.record_score(workflow.id, tid, 100)

    def test_attempts_never_exceed_max(self, workflow):
        tid = _module_id(workflow)
        for score in (0, 0, 0):
            wf = svc.record_score(workflow.id, tid, score)
        with pytest.raises(InvalidTransitionError):
            svc.record_score(workflow.id, tid, 0)
        module = wf.find_training(tid)
        assert module.attempts <= module.max_attempts

    def test_both_modules_complete_training_track(self, workflow):
        for module in list(workflow.training):
            wf = svc.record_score(workflow.id, module.id, 100)
        assert wf.training_progress == 100


class TestUpdateTraining:
    def test_raise_max_attempts(self, workflow):
        tid = _module_id(workflow)
        svc.record_score(workflow.id, tid, 10)
        svc.record_score(workflow.id, tid, 10)
        svc.update_training(workflow.id, tid, {"max_attempts": 5})
        wf = svc.record_score(workflow.id, tid, 10)
        module = wf.find_training(tid)
        assert (module.status, module.attempts, module.attempts_remaining) == (TrainingStatus.IN_PROGRESS, 3, 2)

    def test_max_attempts_below_used_rejected(self, workflow):
        tid = _module_id(workflow)
        svc.record_score(workflow.id, tid, 10)
        svc.record_score(workflow.id, tid, 10)
        with pytest.raises(ValidationError):
            svc.update_training(workflow.id, tid, {"max_attempts": 2})

    def test_patch_passing_score(self, workflow):
        tid = _module_id(workflow)
        svc.update_training(workflow.id, tid, {"passing_score": 60})
        wf = svc.record_score(workflow.id, tid, 65)
        assert wf.find_training(tid).status == TrainingStatus.COMPLETED

    def test_status_cannot_be_patched(self, workflow):
        with pytest.raises(ValidationError):
            svc.update_training(workflow.id, _module_id(workflow), {"status": "completed"})

    def test_passing_score_frozen_after_completion(self, workflow):
        tid = _module_id(workflow)
        svc.record_score(workflow.id, tid, 85)
        with pytest.raises(ValidationError) as exc:
            svc.update_training(workflow.id, tid, {"passing_score": 95})
        assert exc.value.details == {"passing_score": "frozen"}
        module = svc.start(workflow.id, tid).find_training(tid)
        assert (module.status, module.score, module.passing_score) == (TrainingStatus.COMPLETED, 85, 80)

    def test_max_attempts_frozen_after_failure(self, workflow):
        tid = _module_id(workflow)
        for _ in range(3):
            svc.record_score(workflow.id, tid, 10)
        with pytest.raises(ValidationError):
            svc.update_training(workflow.id, tid, {"max_attempts": 5})
        module = svc.start(workflow.id, tid).find_training(tid)
        assert (module.status, module.attempts, module.max_attempts) == (TrainingStatus.FAILED, 3, 3)

    def test_descriptive_patch_allowed_after_completion(self, workflow):
        tid = _module_id(workflow)
        svc.record_score(workflow.id, tid, 90)
        wf = svc.update_training(workflow.id, tid, {"description": "Archived course"})
        assert wf.find_training(tid).description == "Archived course"
