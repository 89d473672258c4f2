"""onboarding_engine_tables

Creates the onboarding engine tables:
  - onboarding_templates                    — catalog of workflow prototypes
  - onboarding_template_checklist_items     — prototype checklist tasks
  - onboarding_template_documents           — prototype document requirements
  - onboarding_template_training_modules    — prototype training modules
  - onboarding_workflows                    — one consultant's onboarding run
  - onboarding_checklist_items              — per-workflow checklist
  - onboarding_documents                    — per-workflow documents + review state
  - onboarding_training_modules             — per-workflow training + attempts

Tables created conditionally (IF NOT EXISTS semantics) so the revision can be
stamped on databases that already received them via db.create_all().

Revision ID: 7c1e4a9b2d30
Revises:
Create Date: 2026-10-18 09:12:44.318206
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = '7c1e4a9b2d30'
down_revision = None
branch_labels = None
depends_on = None


def _enum(name, *values, length=30):
    return sa.Enum(*values, name=name, native_enum=False, create_constraint=True, length=length)


def _consultant_type(name):
    return _enum(name, "employee", "contractor", length=20)


def _template_fk():
    return sa.Column(
        "template_id", sa.String(length=64),
        sa.ForeignKey("onboarding_templates.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )


def _workflow_fk():
    return sa.Column(
        "workflow_id", sa.String(length=36),
        sa.ForeignKey("onboarding_workflows.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )


def upgrade():
    bind = op.get_bind()
    existing = set(sa_inspect(bind).get_table_names())

    # ── Template catalog ──────────────────────────────────────────────────
    if "onboarding_templates" not in existing:
        op.create_table(
            "onboarding_templates",
            sa.Column("id", sa.String(length=64), primary_key=True),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("consultant_type", _consultant_type("template_consultant_type"), nullable=False),
            sa.Column("default_duration", sa.Integer(), nullable=False, comment="Days"),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        )

    if "onboarding_template_checklist_items" not in existing:
        op.create_table(
            "onboarding_template_checklist_items",
            sa.Column("id", sa.Integer(), primary_key=True),
            _template_fk(),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("priority", sa.String(length=10), nullable=True),
            sa.Column("category", sa.String(length=50), nullable=True),
            sa.Column("order", sa.Integer(), nullable=True),
            sa.Column("is_required", sa.Boolean(), nullable=False),
            sa.Column("applicable_for", sa.JSON(), nullable=True),
        )

    if "onboarding_template_documents" not in existing:
        op.create_table(
            "onboarding_template_documents",
            sa.Column("id", sa.Integer(), primary_key=True),
            _template_fk(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("category", sa.String(length=50), nullable=True),
            sa.Column("is_required", sa.Boolean(), nullable=False),
            sa.Column("applicable_for", sa.JSON(), nullable=True),
            sa.Column("position", sa.Integer(), nullable=True),
        )

    if "onboarding_template_training_modules" not in existing:
        op.create_table(
            "onboarding_template_training_modules",
            sa.Column("id", sa.Integer(), primary_key=True),
            _template_fk(),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("category", sa.String(length=50), nullable=True),
            sa.Column("duration", sa.Integer(), nullable=True),
            sa.Column("passing_score", sa.Integer(), nullable=False),
            sa.Column("max_attempts", sa.Integer(), nullable=False),
            sa.Column("is_required", sa.Boolean(), nullable=False),
            sa.Column("applicable_for", sa.JSON(), nullable=True),
            sa.Column("order", sa.Integer(), nullable=True),
        )

    # ── Workflows ─────────────────────────────────────────────────────────
    if "onboarding_workflows" not in existing:
        op.create_table(
            "onboarding_workflows",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column(
                "template_id", sa.String(length=64), nullable=True, index=True,
                comment="Template the workflow was instantiated from (informational, no FK)",
            ),
            sa.Column("consultant_id", sa.String(length=64), nullable=False, index=True),
            sa.Column("consultant_name", sa.String(length=200), nullable=False),
            sa.Column("consultant_type", _consultant_type("consultant_type"), nullable=False),
            sa.Column(
                "status", _enum("workflow_status", "not-started", "in-progress", "completed"),
                nullable=False,
            ),
            sa.Column("start_date", sa.Date(), nullable=False),
            sa.Column("target_completion_date", sa.Date(), nullable=False),
            sa.Column("checklist_progress", sa.Integer(), nullable=False),
            sa.Column("document_progress", sa.Integer(), nullable=False),
            sa.Column("training_progress", sa.Integer(), nullable=False),
            sa.Column("overall_progress", sa.Integer(), nullable=False),
            sa.Column("welcome_message_sent", sa.Boolean(), nullable=False),
            sa.Column("created_by", sa.String(length=100), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("last_activity_date", sa.DateTime(timezone=True), nullable=True),
            sa.CheckConstraint(
                "checklist_progress BETWEEN 0 AND 100 AND document_progress BETWEEN 0 AND 100 "
                "AND training_progress BETWEEN 0 AND 100 AND overall_progress BETWEEN 0 AND 100",
                name="ck_onboarding_workflow_progress_range",
            ),
        )

    if "onboarding_checklist_items" not in existing:
        op.create_table(
            "onboarding_checklist_items",
            sa.Column("id", sa.String(length=36), primary_key=True),
            _workflow_fk(),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("priority", sa.String(length=10), nullable=True, comment="low | medium | high"),
            sa.Column("category", sa.String(length=50), nullable=True),
            sa.Column("order", sa.Integer(), nullable=True),
            sa.Column("is_required", sa.Boolean(), nullable=False),
            sa.Column("applicable_for", sa.JSON(), nullable=True),
            sa.Column("status", _enum("checklist_status", "pending", "completed"), nullable=False),
            sa.Column("completed_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("completed_by", sa.String(length=100), nullable=True),
        )

    if "onboarding_documents" not in existing:
        op.create_table(
            "onboarding_documents",
            sa.Column("id", sa.String(length=36), primary_key=True),
            _workflow_fk(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("category", sa.String(length=50), nullable=True),
            sa.Column("is_required", sa.Boolean(), nullable=False),
            sa.Column("applicable_for", sa.JSON(), nullable=True),
            sa.Column("position", sa.Integer(), nullable=True),
            sa.Column(
                "status",
                _enum(
                    "document_status",
                    "not-submitted", "submitted", "approved", "rejected", "revision-required",
                ),
                nullable=False,
            ),
            sa.Column("file_url", sa.String(length=500), nullable=True),
            sa.Column("file_name", sa.String(length=255), nullable=True),
            sa.Column("uploaded_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("reviewed_by", sa.String(length=100), nullable=True),
            sa.Column("reviewed_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("review_notes", sa.Text(), nullable=True),
        )

    if "onboarding_training_modules" not in existing:
        op.create_table(
            "onboarding_training_modules",
            sa.Column("id", sa.String(length=36), primary_key=True),
            _workflow_fk(),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("category", sa.String(length=50), nullable=True),
            sa.Column("duration", sa.Integer(), nullable=True, comment="Minutes"),
            sa.Column("passing_score", sa.Integer(), nullable=False),
            sa.Column("max_attempts", sa.Integer(), nullable=False),
            sa.Column("is_required", sa.Boolean(), nullable=False),
            sa.Column("applicable_for", sa.JSON(), nullable=True),
            sa.Column("order", sa.Integer(), nullable=True),
            sa.Column(
                "status",
                _enum("training_status", "not-started", "in-progress", "completed", "failed"),
                nullable=False,
            ),
            sa.Column("started_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("completed_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("score", sa.Float(), nullable=True, comment="Latest attempt score"),
            sa.Column("attempts", sa.Integer(), nullable=False),
            sa.CheckConstraint("attempts <= max_attempts", name="ck_training_attempts_cap"),
        )


def downgrade():
    for table in (
        "onboarding_training_modules",
        "onboarding_documents",
        "onboarding_checklist_items",
        "onboarding_workflows",
        "onboarding_template_training_modules",
        "onboarding_template_documents",
        "onboarding_template_checklist_items",
        "onboarding_templates",
    ):
        op.drop_table(table)
