"""
Training Manager — scored training modules with a capped number of attempts.

    start(workflow_id, training_id)
    record_score(workflow_id, training_id, score)
    update_training(workflow_id, training_id, patch)

State machine (TRAINING_TRANSITIONS):

    not-started ─start─▶ in-progress
    in-progress ─score ≥ passing─────────────────▶ completed   (terminal)
    in-progress ─score < passing, attempts = max─▶ failed      (terminal)
    in-progress ─score < passing, attempts < max─▶ in-progress

Scores are trusted as given; range checks belong to the input layer.
"""

import logging
from datetime import datetime, timezone

from hr_onboarding.core.exceptions import InvalidTransitionError, ValidationError
from hr_onboarding.core.results import NotFound
from hr_onboarding.models.onboarding import (
    TERMINAL_TRAINING_STATUSES,
    TrainingStatus,
    enum_value,
    validate_training_transition,
)
from hr_onboarding.services.onboarding_service import (
    apply_patch,
    commit_mutation,
    load_workflow,
    resolve_repo,
)

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = {
    "title", "description", "category", "duration",
    "passing_score", "max_attempts", "is_required", "applicable_for", "order",
}
SCORING_FIELDS = {"passing_score", "max_attempts"}


def _load_module(workflow_id, training_id, repo):
    workflow = load_workflow(workflow_id, repo)
    if isinstance(workflow, NotFound):
        return workflow, workflow
    module = workflow.find_training(training_id)
    if module is None:
        return workflow, NotFound("TrainingModule", training_id)
    return workflow, module


def _transition(module, new_status):
    old = enum_value(module.status)
    if not validate_training_transition(old, new_status):
        raise InvalidTransitionError("TrainingModule", old, enum_value(new_status))
    module.status = new_status


def next_status(module, score):
    """Status a module moves to after scoring ``score`` on its next attempt."""
    if score >= module.passing_score:
        return TrainingStatus.COMPLETED
    if (module.attempts or 0) + 1 >= module.max_attempts:
        return TrainingStatus.FAILED
    return TrainingStatus.IN_PROGRESS


def start(workflow_id, training_id, *, repo=None):
    """Move a not-started module to in-progress; already started modules are left as they are."""
    repo = resolve_repo(repo)
    workflow, module = _load_module(workflow_id, training_id, repo)
    if isinstance(module, NotFound):
        return module

    if enum_value(module.status) != TrainingStatus.NOT_STARTED.value:
        logger.debug("Training %s already %s; start ignored", training_id, enum_value(module.status))
        return workflow

    _transition(module, TrainingStatus.IN_PROGRESS)
    module.started_date = datetime.now(timezone.utc)
    return commit_mutation(workflow, repo, "training.start", training=training_id)


def record_score(workflow_id, training_id, score, *, repo=None):
    """Record one attempt's score.

    A module that was never started is started by its first score.

    Raises:
        InvalidTransitionError: the module is already completed or failed.
    """
    repo = resolve_repo(repo)
    workflow, module = _load_module(workflow_id, training_id, repo)
    if isinstance(module, NotFound):
        return module

    status = TrainingStatus(enum_value(module.status))
    if status in TERMINAL_TRAINING_STATUSES:
        raise InvalidTransitionError("TrainingModule", status.value, "scored")

    now = datetime.now(timezone.utc)
    if status == TrainingStatus.NOT_STARTED:
        _transition(module, TrainingStatus.IN_PROGRESS)
        module.started_date = now

    new_status = next_status(module, score)
    _transition(module, new_status)
    module.attempts = (module.attempts or 0) + 1
    module.score = score
    module.completed_date = now if new_status == TrainingStatus.COMPLETED else None

    return commit_mutation(
        workflow, repo, "training.score",
        training=training_id, score=score, attempt=f"{module.attempts}/{module.max_attempts}",
    )


def update_training(workflow_id, training_id, patch, *, repo=None):
    """Patch descriptive fields of a training module.

    Scoring rules (passing_score, max_attempts) are frozen once the module is
    completed or failed, so a finished module always agrees with its rules.

    Raises:
        ValidationError: unknown fields, a scoring-rule change on a finished
            module, or a max_attempts leaving an open module no attempt.
    """
    repo = resolve_repo(repo)
    workflow, module = _load_module(workflow_id, training_id, repo)
    if isinstance(module, NotFound):
        return module

    status = TrainingStatus(enum_value(module.status))
    frozen = sorted(SCORING_FIELDS & set(patch))
    if frozen and status in TERMINAL_TRAINING_STATUSES:
        raise ValidationError(
            f"{', '.join(frozen)} cannot change once a module is {status.value}",
            details={field: "frozen" for field in frozen},
        )
    if "max_attempts" in patch:
        used = module.attempts or 0
        if patch["max_attempts"] < used + 1:
            raise ValidationError(
                f"max_attempts must be at least {used + 1}",
                details={"max_attempts": patch["max_attempts"], "attempts": used},
            )
    apply_patch(module, patch, PATCHABLE_FIELDS, "TrainingModule")
    return commit_mutation(
        workflow, repo, "training.update",
        training=training_id, fields=",".join(sorted(patch)),
    )
