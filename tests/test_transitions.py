"""
Exhaustive lifecycle-table tests for the three per-item state machines
defined in ``hr_onboarding/models/onboarding.py``:

    1. ChecklistItem (CHECKLIST_TRANSITIONS)
       - pending -> completed
       - completed -> pending

    2. OnboardingDocument (DOCUMENT_TRANSITIONS)
       - not-submitted -> submitted
       - submitted -> approved | rejected | revision-required
       - rejected -> submitted
       - revision-required -> submitted
       - approved -> (terminal)

    3. TrainingModule (TRAINING_TRANSITIONS)
       - not-started -> in-progress
       - in-progress -> in-progress | completed | failed
       - completed -> (terminal)
       - failed -> (terminal)

Every pair not listed is invalid.
"""

import itertools

import pytest

from hr_onboarding.models.onboarding import (
    CHECKLIST_TRANSITIONS,
    DOCUMENT_TRANSITIONS,
    TRAINING_TRANSITIONS,
    ChecklistStatus,
    DocumentStatus,
    TrainingStatus,
    validate_checklist_transition,
    validate_document_transition,
    validate_training_transition,
)

_MACHINES = [
    (CHECKLIST_TRANSITIONS, ChecklistStatus, validate_checklist_transition),
    (DOCUMENT_TRANSITIONS, DocumentStatus, validate_document_transition),
    (TRAINING_TRANSITIONS, TrainingStatus, validate_training_transition),
]


def _all_pairs():
    for table, enum_cls, validator in _MACHINES:
        for old, new in itertools.product(enum_cls, repeat=2):
            yield pytest.param(
                validator, old, new, new in table[old],
                id=f"{enum_cls.__name__}:{old.value}->{new.value}",
            )


@pytest.mark.parametrize("validator,old,new,expected", list(_all_pairs()))
def test_every_pair(validator, old, new, expected):
    assert validator(old, new) is expected


@pytest.mark.parametrize("table,enum_cls", [(t, e) for t, e, _ in _MACHINES])
def test_every_state_has_a_row(table, enum_cls):
    assert set(table) == set(enum_cls)


def test_plain_strings_accepted():
    assert validate_document_transition("rejected", "submitted") is True
    assert validate_training_transition("failed", "in-progress") is False
    assert validate_checklist_transition("completed", "pending") is True


def test_unknown_status_is_invalid():
    assert validate_document_transition("lost", "submitted") is False
    assert validate_training_transition("in-progress", "paused") is False


def test_terminal_states():
    assert DOCUMENT_TRANSITIONS[DocumentStatus.APPROVED] == []
    assert TRAINING_TRANSITIONS[TrainingStatus.COMPLETED] == []
    assert TRAINING_TRANSITIONS[TrainingStatus.FAILED] == []
