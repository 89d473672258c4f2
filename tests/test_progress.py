"""
Progress calculator tests — percentages, rounding and derived workflow status.

All workflows are transient ORM objects; nothing touches the database.
"""

from datetime import date, datetime, timezone

import pytest

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
from hr_onboarding.services.progress import (
    calculate_progress,
    derive_status,
    round_half_up,
    track_progress,
)


# ── Helpers ───────────────────────────────────────────────────────────────────


def _item(status=ChecklistStatus.PENDING, required=True):
    return ChecklistItem(title="Task", status=status, is_required=required)


def _doc(status=DocumentStatus.NOT_SUBMITTED, required=True):
    return OnboardingDocument(name="Doc", status=status, is_required=required)


def _module(status=TrainingStatus.NOT_STARTED, required=True):
    return TrainingModule(
        title="Module", status=status, is_required=required,
        passing_score=80, max_attempts=3, attempts=0,
    )


def _workflow(checklist=(), documents=(), training=()):
    return OnboardingWorkflow(
        id="wf-1",
        consultant_id="c-1",
        consultant_name="Ada Lovelace",
        start_date=date(2026, 1, 5),
        target_completion_date=date(2026, 2, 4),
        status=WorkflowStatus.NOT_STARTED,
        checklist=list(checklist),
        documents=list(documents),
        training=list(training),
    )


# ═════════════════════════════════════════════════════════════════════════════
# Rounding & per-track percentages
# ═════════════════════════════════════════════════════════════════════════════


class TestRounding:
    @pytest.mark.parametrize("value,expected", [
        (0, 0), (33.333, 33), (62.5, 63), (66.667, 67), (83.333, 83), (99.5, 100), (100, 100),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestTrackProgress:
    def test_no_required_items_is_complete(self):
        assert track_progress([], ChecklistStatus.COMPLETED) == 100
        assert track_progress([_item(required=False)], ChecklistStatus.COMPLETED) == 100

    def test_optional_items_are_ignored(self):
        items = [
            _item(ChecklistStatus.COMPLETED),
            _item(ChecklistStatus.PENDING),
            _item(ChecklistStatus.COMPLETED, required=False),
            _item(ChecklistStatus.PENDING, required=False),
        ]
        assert track_progress(items, ChecklistStatus.COMPLETED) == 50

    def test_one_of_three_rounds_down(self):
        items = [_item(ChecklistStatus.COMPLETED), _item(), _item()]
        assert track_progress(items, ChecklistStatus.COMPLETED) == 33

    def test_two_of_three_rounds_up(self):
        items = [_item(ChecklistStatus.COMPLETED), _item(ChecklistStatus.COMPLETED), _item()]
        assert track_progress(items, ChecklistStatus.COMPLETED) == 67

    def test_only_approved_documents_count(self):
        docs = [
            _doc(DocumentStatus.APPROVED),
            _doc(DocumentStatus.SUBMITTED),
            _doc(DocumentStatus.REJECTED),
            _doc(DocumentStatus.REVISION_REQUIRED),
        ]
        assert track_progress(docs, DocumentStatus.APPROVED) == 25

    def test_failed_training_does_not_count(self):
        modules = [_module(TrainingStatus.COMPLETED), _module(TrainingStatus.FAILED)]
        assert track_progress(modules, TrainingStatus.COMPLETED) == 50


# ═════════════════════════════════════════════════════════════════════════════
# Derived status & full recompute
# ═════════════════════════════════════════════════════════════════════════════


class TestDeriveStatus:
    @pytest.mark.parametrize("overall,expected", [
        (0, WorkflowStatus.NOT_STARTED),
        (1, WorkflowStatus.IN_PROGRESS),
        (99, WorkflowStatus.IN_PROGRESS),
        (100, WorkflowStatus.COMPLETED),
    ])
    def test_status_follows_overall(self, overall, expected):
        assert derive_status(overall) == expected


class TestCalculateProgress:
    def test_overall_is_rounded_mean_of_tracks(self):
        wf = _workflow(
            checklist=[_item(ChecklistStatus.COMPLETED), _item()],            # 50
            documents=[_doc(DocumentStatus.APPROVED), _doc(), _doc()],         # 33
            training=[_module(TrainingStatus.COMPLETED)],                      # 100
        )
        calculate_progress(wf)
        assert (wf.checklist_progress, wf.document_progress, wf.training_progress) == (50, 33, 100)
        assert wf.overall_progress == 61  # (50 + 33 + 100) / 3 = 61.0
        assert wf.status == WorkflowStatus.IN_PROGRESS

    def test_fresh_workflow_is_not_started(self):
        wf = _workflow(checklist=[_item()], documents=[_doc()], training=[_module()])
        calculate_progress(wf)
        assert wf.overall_progress == 0
        assert wf.status == WorkflowStatus.NOT_STARTED

    def test_empty_track_counts_as_complete(self):
        wf = _workflow(checklist=[_item()], documents=[], training=[_module()])
        calculate_progress(wf)
        assert wf.document_progress == 100
        assert wf.overall_progress == 33
        assert wf.status == WorkflowStatus.IN_PROGRESS

    def test_everything_done_completes_workflow(self):
        wf = _workflow(
            checklist=[_item(ChecklistStatus.COMPLETED)],
            documents=[_doc(DocumentStatus.APPROVED)],
            training=[_module(TrainingStatus.COMPLETED)],
        )
        calculate_progress(wf)
        assert wf.overall_progress == 100
        assert wf.status == WorkflowStatus.COMPLETED

    def test_reopening_moves_workflow_back(self):
        item = _item(ChecklistStatus.COMPLETED)
        wf = _workflow(
            checklist=[item],
            documents=[_doc(DocumentStatus.APPROVED)],
            training=[_module(TrainingStatus.COMPLETED)],
        )
        calculate_progress(wf)
        item.status = ChecklistStatus.PENDING
        calculate_progress(wf)
        assert wf.checklist_progress == 0
        assert wf.overall_progress == 67
        assert wf.status == WorkflowStatus.IN_PROGRESS

    def test_percentages_stay_in_bounds(self):
        wf = _workflow(
            checklist=[_item(ChecklistStatus.COMPLETED) for _ in range(7)],
            documents=[_doc(DocumentStatus.APPROVED), _doc()],
            training=[_module(), _module(TrainingStatus.FAILED)],
        )
        calculate_progress(wf)
        for value in (wf.checklist_progress, wf.document_progress,
                      wf.training_progress, wf.overall_progress):
            assert 0 <= value <= 100

    def test_stamps_activity_timestamps(self):
        now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        wf = _workflow(checklist=[_item()])
        result = calculate_progress(wf, now=now)
        assert result is wf
        assert wf.updated_at == now
        assert wf.last_activity_date == now
