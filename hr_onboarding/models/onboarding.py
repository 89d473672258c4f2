"""
Consultant Onboarding Engine
Onboarding workflow domain models.

Models:
    - OnboardingWorkflow:  one consultant's onboarding run, created from a template
    - ChecklistItem:       checklist task owned by a workflow
    - OnboardingDocument:  document the consultant submits and HR reviews
    - TrainingModule:      scored training module with a capped number of attempts

Architecture:
    OnboardingWorkflow ──1:N──▶ ChecklistItem
    OnboardingWorkflow ──1:N──▶ OnboardingDocument
    OnboardingWorkflow ──1:N──▶ TrainingModule

Lifecycle states:
    OnboardingWorkflow:  not-started → in-progress → completed   (derived, never set directly)
    ChecklistItem:       pending → completed → pending (reopen)
    OnboardingDocument:  not-submitted → submitted → approved | rejected | revision-required
                         rejected | revision-required → submitted (resubmission)
    TrainingModule:      not-started → in-progress → completed | failed
"""

import enum
import uuid
from datetime import datetime, timezone

from hr_onboarding.models import db


# ── Helpers ──────────────────────────────────────────────────────────────────


def _uuid():
    """Generate a new UUID4 string for primary keys."""
    return str(uuid.uuid4())


def _utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


def enum_values(enum_cls):
    return [member.value for member in enum_cls]


def enum_value(value):
    """Return the plain string behind an enum member (or the string itself)."""
    return value.value if isinstance(value, enum.Enum) else value


def _status_column(enum_cls, name, default):
    return db.Column(
        db.Enum(
            enum_cls,
            name=name,
            native_enum=False,
            create_constraint=True,
            values_callable=enum_values,
            length=30,
        ),
        nullable=False,
        default=default,
    )


# ── Closed status variants ───────────────────────────────────────────────────


class ConsultantType(str, enum.Enum):
    EMPLOYEE = "employee"
    CONTRACTOR = "contractor"


class WorkflowStatus(str, enum.Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class ChecklistStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class DocumentStatus(str, enum.Enum):
    NOT_SUBMITTED = "not-submitted"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    REVISION_REQUIRED = "revision-required"


class TrainingStatus(str, enum.Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    FAILED = "failed"


CHECKLIST_PRIORITIES = {"low", "medium", "high"}

REVIEW_OUTCOMES = {
    DocumentStatus.APPROVED,
    DocumentStatus.REJECTED,
    DocumentStatus.REVISION_REQUIRED,
}

TERMINAL_TRAINING_STATUSES = {TrainingStatus.COMPLETED, TrainingStatus.FAILED}


# ── Lifecycle Transition Guards ──────────────────────────────────────────────

CHECKLIST_TRANSITIONS = {
    ChecklistStatus.PENDING:   [ChecklistStatus.COMPLETED],
    ChecklistStatus.COMPLETED: [ChecklistStatus.PENDING],
}

DOCUMENT_TRANSITIONS = {
    DocumentStatus.NOT_SUBMITTED:     [DocumentStatus.SUBMITTED],
    DocumentStatus.SUBMITTED:         [DocumentStatus.APPROVED,
                                       DocumentStatus.REJECTED,
                                       DocumentStatus.REVISION_REQUIRED],
    DocumentStatus.REJECTED:          [DocumentStatus.SUBMITTED],
    DocumentStatus.REVISION_REQUIRED: [DocumentStatus.SUBMITTED],
    DocumentStatus.APPROVED:          [],
}

# in-progress → in-progress is a failed attempt with attempts left
TRAINING_TRANSITIONS = {
    TrainingStatus.NOT_STARTED: [TrainingStatus.IN_PROGRESS],
    TrainingStatus.IN_PROGRESS: [TrainingStatus.IN_PROGRESS,
                                 TrainingStatus.COMPLETED,
                                 TrainingStatus.FAILED],
    TrainingStatus.COMPLETED:   [],
    TrainingStatus.FAILED:      [],
}


def _validate(table, enum_cls, old_status, new_status):
    try:
        old, new = enum_cls(enum_value(old_status)), enum_cls(enum_value(new_status))
    except ValueError:
        return False
    return new in table[old]


def validate_checklist_transition(old_status, new_status):
    """Return True if ChecklistItem status transition is valid."""
    return _validate(CHECKLIST_TRANSITIONS, ChecklistStatus, old_status, new_status)


def validate_document_transition(old_status, new_status):
    """Return True if OnboardingDocument status transition is valid."""
    return _validate(DOCUMENT_TRANSITIONS, DocumentStatus, old_status, new_status)


def validate_training_transition(old_status, new_status):
    """Return True if TrainingModule status transition is valid."""
    return _validate(TRAINING_TRANSITIONS, TrainingStatus, old_status, new_status)


# ═════════════════════════════════════════════════════════════════════════════
# 1. OnboardingWorkflow
# ═════════════════════════════════════════════════════════════════════════════


class OnboardingWorkflow(db.Model):
    """
    A consultant's onboarding run. Progress fields and status are derived by
    services.progress.calculate_progress after every mutation.
    """

    __tablename__ = "onboarding_workflows"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    template_id = db.Column(
        db.String(64), nullable=True, index=True,
        comment="Template the workflow was instantiated from (informational, no FK)",
    )

    consultant_id = db.Column(db.String(64), nullable=False, index=True)
    consultant_name = db.Column(db.String(200), nullable=False)
    consultant_type = db.Column(
        db.Enum(
            ConsultantType,
            name="consultant_type",
            native_enum=False,
            create_constraint=True,
            values_callable=enum_values,
            length=20,
        ),
        nullable=False,
    )

    status = _status_column(WorkflowStatus, "workflow_status", WorkflowStatus.NOT_STARTED)
    start_date = db.Column(db.Date, nullable=False)
    target_completion_date = db.Column(db.Date, nullable=False)

    checklist_progress = db.Column(db.Integer, nullable=False, default=0)
    document_progress = db.Column(db.Integer, nullable=False, default=0)
    training_progress = db.Column(db.Integer, nullable=False, default=0)
    overall_progress = db.Column(db.Integer, nullable=False, default=0)

    welcome_message_sent = db.Column(db.Boolean, nullable=False, default=False)

    # Audit
    created_by = db.Column(db.String(100), default="")
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    last_activity_date = db.Column(db.DateTime(timezone=True), nullable=True)

    # ── Constraints ──────────────────────────────────────────────────────
    __table_args__ = (
        db.CheckConstraint(
            "checklist_progress BETWEEN 0 AND 100 AND document_progress BETWEEN 0 AND 100 "
            "AND training_progress BETWEEN 0 AND 100 AND overall_progress BETWEEN 0 AND 100",
            name="ck_onboarding_workflow_progress_range",
        ),
    )

    # ── Relationships ────────────────────────────────────────────────────
    checklist = db.relationship(
        "ChecklistItem", back_populates="workflow",
        cascade="all, delete-orphan", order_by="ChecklistItem.order",
    )
    documents = db.relationship(
        "OnboardingDocument", back_populates="workflow",
        cascade="all, delete-orphan", order_by="OnboardingDocument.position",
    )
    training = db.relationship(
        "TrainingModule", back_populates="workflow",
        cascade="all, delete-orphan", order_by="TrainingModule.order",
    )

    def find_checklist_item(self, item_id):
        return next((i for i in self.checklist if i.id == item_id), None)

    def find_document(self, document_id):
        return next((d for d in self.documents if d.id == document_id), None)

    def find_training(self, training_id):
        return next((t for t in self.training if t.id == training_id), None)

    def to_dict(self, include_children=True):
        result = {
            "id": self.id,
            "template_id": self.template_id,
            "consultant_id": self.consultant_id,
            "consultant_name": self.consultant_name,
            "consultant_type": enum_value(self.consultant_type),
            "status": enum_value(self.status),
            "start_date": _iso(self.start_date),
            "target_completion_date": _iso(self.target_completion_date),
            "checklist_progress": self.checklist_progress,
            "document_progress": self.document_progress,
            "training_progress": self.training_progress,
            "overall_progress": self.overall_progress,
            "welcome_message_sent": self.welcome_message_sent,
            "created_by": self.created_by,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "last_activity_date": _iso(self.last_activity_date),
        }
        if include_children:
            result["checklist"] = [i.to_dict() for i in self.checklist]
            result["documents"] = [d.to_dict() for d in self.documents]
            result["training"] = [t.to_dict() for t in self.training]
        return result

    def __repr__(self):
        return f"<OnboardingWorkflow {self.id}: {self.consultant_name} [{enum_value(self.status)}]>"


# ═════════════════════════════════════════════════════════════════════════════
# 2. ChecklistItem
# ═════════════════════════════════════════════════════════════════════════════


class ChecklistItem(db.Model):
    __tablename__ = "onboarding_checklist_items"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    workflow_id = db.Column(
        db.String(36), db.ForeignKey("onboarding_workflows.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )

    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, default="")
    priority = db.Column(db.String(10), default="medium", comment="low | medium | high")
    category = db.Column(db.String(50), default="", comment="hr | it | admin | ...")
    order = db.Column(db.Integer, default=0, comment="Display order within the checklist")
    is_required = db.Column(db.Boolean, nullable=False, default=True)
    applicable_for = db.Column(db.JSON, default=list, comment="Consultant types the item applies to")

    status = _status_column(ChecklistStatus, "checklist_status", ChecklistStatus.PENDING)
    completed_date = db.Column(db.DateTime(timezone=True), nullable=True)
    completed_by = db.Column(db.String(100), nullable=True)

    workflow = db.relationship("OnboardingWorkflow", back_populates="checklist")

    def to_dict(self):
        return {
            "id": self.id,
            "workflow_id": self.workflow_id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "category": self.category,
            "order": self.order,
            "is_required": self.is_required,
            "applicable_for": list(self.applicable_for or []),
            "status": enum_value(self.status),
            "completed_date": _iso(self.completed_date),
            "completed_by": self.completed_by,
        }

    def __repr__(self):
        return f"<ChecklistItem {self.id}: {self.title[:40]} [{enum_value(self.status)}]>"


# ═════════════════════════════════════════════════════════════════════════════
# 3. OnboardingDocument
# ═════════════════════════════════════════════════════════════════════════════


class OnboardingDocument(db.Model):
    """
    Document requirement of a workflow. Resubmission overwrites the stored file
    reference in place; no submission history is kept.
    """

    __tablename__ = "onboarding_documents"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    workflow_id = db.Column(
        db.String(36), db.ForeignKey("onboarding_workflows.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default="")
    category = db.Column(db.String(50), default="", comment="contract | tax | identity | banking | compliance")
    is_required = db.Column(db.Boolean, nullable=False, default=True)
    applicable_for = db.Column(db.JSON, default=list)
    position = db.Column(db.Integer, default=0, comment="Template order")

    status = _status_column(DocumentStatus, "document_status", DocumentStatus.NOT_SUBMITTED)
    file_url = db.Column(db.String(500), nullable=True)
    file_name = db.Column(db.String(255), nullable=True)
    uploaded_date = db.Column(db.DateTime(timezone=True), nullable=True)

    reviewed_by = db.Column(db.String(100), nullable=True)
    reviewed_date = db.Column(db.DateTime(timezone=True), nullable=True)
    review_notes = db.Column(db.Text, nullable=True)

    workflow = db.relationship("OnboardingWorkflow", back_populates="documents")

    def to_dict(self):
        return {
            "id": self.id,
            "workflow_id": self.workflow_id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "is_required": self.is_required,
            "applicable_for": list(self.applicable_for or []),
            "status": enum_value(self.status),
            "file_url": self.file_url,
            "file_name": self.file_name,
            "uploaded_date": _iso(self.uploaded_date),
            "reviewed_by": self.reviewed_by,
            "reviewed_date": _iso(self.reviewed_date),
            "review_notes": self.review_notes,
        }

    def __repr__(self):
        return f"<OnboardingDocument {self.id}: {self.name} [{enum_value(self.status)}]>"


# ═════════════════════════════════════════════════════════════════════════════
# 4. TrainingModule
# ═════════════════════════════════════════════════════════════════════════════


class TrainingModule(db.Model):
    """
    Scored training module. attempts never exceeds max_attempts; completed and
    failed are terminal.
    """

    __tablename__ = "onboarding_training_modules"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    workflow_id = db.Column(
        db.String(36), db.ForeignKey("onboarding_workflows.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )

    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, default="")
    category = db.Column(db.String(50), default="", comment="hr-policy | safety | compliance | ...")
    duration = db.Column(db.Integer, default=0, comment="Minutes")
    passing_score = db.Column(db.Integer, nullable=False, default=80)
    max_attempts = db.Column(db.Integer, nullable=False, default=3)
    is_required = db.Column(db.Boolean, nullable=False, default=True)
    applicable_for = db.Column(db.JSON, default=list)
    order = db.Column(db.Integer, default=0)

    status = _status_column(TrainingStatus, "training_status", TrainingStatus.NOT_STARTED)
    started_date = db.Column(db.DateTime(timezone=True), nullable=True)
    completed_date = db.Column(db.DateTime(timezone=True), nullable=True)
    score = db.Column(db.Float, nullable=True, comment="Latest attempt score")
    attempts = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.CheckConstraint("attempts <= max_attempts", name="ck_training_attempts_cap"),
        db.CheckConstraint("max_attempts >= 1", name="ck_training_max_attempts_min"),
    )

    workflow = db.relationship("OnboardingWorkflow", back_populates="training")

    @property
    def attempts_remaining(self):
        return max((self.max_attempts or 0) - (self.attempts or 0), 0)

    def to_dict(self):
        return {
            "id": self.id,
            "workflow_id": self.workflow_id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "duration": self.duration,
            "passing_score": self.passing_score,
            "max_attempts": self.max_attempts,
            "is_required": self.is_required,
            "applicable_for": list(self.applicable_for or []),
            "order": self.order,
            "status": enum_value(self.status),
            "started_date": _iso(self.started_date),
            "completed_date": _iso(self.completed_date),
            "score": self.score,
            "attempts": self.attempts,
            "attempts_remaining": self.attempts_remaining,
        }

    def __repr__(self):
        return f"<TrainingModule {self.id}: {self.title[:40]} [{enum_value(self.status)}]>"
