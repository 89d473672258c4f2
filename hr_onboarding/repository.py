"""
Consultant Onboarding Engine
Storage boundary for workflows and templates.

Services never touch ``db.session`` for workflow state directly; they go
through a ``WorkflowRepository`` (whole-document get/list/save) and read
templates through a ``TemplateCatalog``. Both default to the SQLAlchemy
implementations and can be swapped for the in-memory ones:

    repo = InMemoryWorkflowRepository()
    catalog = InMemoryTemplateCatalog.from_defaults()
    wf = template_service.create_from_template(
        "template_employee", "c-1", "Ada", date(2026, 1, 5), "hr.admin",
        repo=repo, catalog=catalog,
    )

There is no locking or versioning: each save overwrites the stored workflow,
so concurrent writers to the same workflow race and the later write wins.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from sqlalchemy import select

from hr_onboarding.models import db
from hr_onboarding.models.onboarding import OnboardingWorkflow, enum_value
from hr_onboarding.models.template import DEFAULT_TEMPLATES, OnboardingTemplate, build_template

logger = logging.getLogger(__name__)


def _matches(workflow, status=None, consultant_type=None, consultant_id=None) -> bool:
    if status is not None and enum_value(workflow.status) != enum_value(status):
        return False
    if consultant_type is not None and enum_value(workflow.consultant_type) != enum_value(consultant_type):
        return False
    if consultant_id is not None and workflow.consultant_id != consultant_id:
        return False
    return True


# ═════════════════════════════════════════════════════════════════════════════
# Workflows
# ═════════════════════════════════════════════════════════════════════════════


class WorkflowRepository(ABC):
    """Keyed, whole-document storage for onboarding workflows."""

    @abstractmethod
    def get(self, workflow_id: str) -> OnboardingWorkflow | None:
        ...

    @abstractmethod
    def list(
        self,
        status: str | None = None,
        consultant_type: str | None = None,
        consultant_id: str | None = None,
    ) -> list[OnboardingWorkflow]:
        """Return workflows matching every given filter, oldest first."""

    @abstractmethod
    def save(self, workflow: OnboardingWorkflow) -> None:
        """Persist the full workflow including its three sub-collections."""


class SqlAlchemyWorkflowRepository(WorkflowRepository):
    """Workflow repository on the Flask-SQLAlchemy session (needs an app context)."""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def get(self, workflow_id):
        return self.session.get(OnboardingWorkflow, workflow_id)

    def list(self, status=None, consultant_type=None, consultant_id=None):
        stmt = select(OnboardingWorkflow)
        if status is not None:
            stmt = stmt.where(OnboardingWorkflow.status == enum_value(status))
        if consultant_type is not None:
            stmt = stmt.where(OnboardingWorkflow.consultant_type == enum_value(consultant_type))
        if consultant_id is not None:
            stmt = stmt.where(OnboardingWorkflow.consultant_id == consultant_id)
        stmt = stmt.order_by(OnboardingWorkflow.created_at, OnboardingWorkflow.id)
        return list(self.session.execute(stmt).scalars().all())

    def save(self, workflow):
        try:
            self.session.add(workflow)
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.exception("Failed to save onboarding workflow id=%s", workflow.id)
            raise


class InMemoryWorkflowRepository(WorkflowRepository):
    """Dict-backed repository for tests and embedding without a database.

    Stores the workflow objects themselves; a caller that mutates a workflow
    it got from ``get`` is expected to ``save`` it, as the services do.
    """

    def __init__(self, workflows=None):
        self._workflows: dict[str, OnboardingWorkflow] = {}
        for wf in workflows or []:
            self.save(wf)

    def get(self, workflow_id):
        return self._workflows.get(workflow_id)

    def list(self, status=None, consultant_type=None, consultant_id=None):
        found = [
            wf for wf in self._workflows.values()
            if _matches(wf, status=status, consultant_type=consultant_type,
                        consultant_id=consultant_id)
        ]
        return sorted(found, key=lambda wf: (wf.created_at is None, wf.created_at))

    def save(self, workflow):
        self._workflows[workflow.id] = workflow

    def __len__(self):
        return len(self._workflows)


# ═════════════════════════════════════════════════════════════════════════════
# Templates
# ═════════════════════════════════════════════════════════════════════════════


class TemplateCatalog(ABC):
    """Read-only lookup of onboarding templates."""

    @abstractmethod
    def get(self, template_id: str) -> OnboardingTemplate | None:
        ...

    @abstractmethod
    def list(self, active_only: bool = False) -> list[OnboardingTemplate]:
        ...


class SqlAlchemyTemplateCatalog(TemplateCatalog):

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def get(self, template_id):
        return self.session.get(OnboardingTemplate, template_id)

    def list(self, active_only=False):
        stmt = select(OnboardingTemplate).order_by(OnboardingTemplate.name)
        if active_only:
            stmt = stmt.where(OnboardingTemplate.is_active.is_(True))
        return list(self.session.execute(stmt).scalars().all())


class InMemoryTemplateCatalog(TemplateCatalog):

    def __init__(self, templates=None):
        self._templates = {t.id: t for t in templates or []}

    @classmethod
    def from_defaults(cls):
        """Catalog holding the built-in employee and contractor templates."""
        return cls(build_template(data) for data in DEFAULT_TEMPLATES)

    def get(self, template_id):
        return self._templates.get(template_id)

    def list(self, active_only=False):
        templates = sorted(self._templates.values(), key=lambda t: t.name)
        if active_only:
            templates = [t for t in templates if t.is_active]
        return templates
