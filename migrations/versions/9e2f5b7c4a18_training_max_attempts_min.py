"""training_max_attempts_min

Training modules need at least one attempt:
  - onboarding_template_training_modules.max_attempts >= 1
  - onboarding_training_modules.max_attempts >= 1

Constraints are added only where missing, so databases built by
db.create_all() (which already carry them) can be upgraded as well.

Revision ID: 9e2f5b7c4a18
Revises: 7c1e4a9b2d30
Create Date: 2026-10-18 14:03:27.551902
"""
from alembic import op
import sqlalchemy as sa  # noqa: F401
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = '9e2f5b7c4a18'
down_revision = '7c1e4a9b2d30'
branch_labels = None
depends_on = None

_CONSTRAINTS = (
    ("onboarding_template_training_modules", "ck_template_training_max_attempts_min"),
    ("onboarding_training_modules", "ck_training_max_attempts_min"),
)


def _existing_checks(inspector, table):
    return {ck.get("name") for ck in inspector.get_check_constraints(table)}


def upgrade():
    inspector = sa_inspect(op.get_bind())
    for table, name in _CONSTRAINTS:
        if name in _existing_checks(inspector, table):
            continue
        with op.batch_alter_table(table) as batch_op:
            batch_op.create_check_constraint(name, "max_attempts >= 1")


def downgrade():
    inspector = sa_inspect(op.get_bind())
    for table, name in _CONSTRAINTS:
        if name not in _existing_checks(inspector, table):
            continue
        with op.batch_alter_table(table) as batch_op:
            batch_op.drop_constraint(name, type_="check")
