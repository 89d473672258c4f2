"""
The engine on in-memory storage — no database rows are written.

Every service accepts ``repo=`` / ``catalog=``; these tests drive the full
lifecycle through InMemoryWorkflowRepository and InMemoryTemplateCatalog.
"""

from datetime import date, datetime, timedelta, timezone

import hr_onboarding.services.checklist_service as checklist_svc
import hr_onboarding.services.document_service as document_svc
import hr_onboarding.services.onboarding_service as onboarding_svc
import hr_onboarding.services.template_service as template_svc
import hr_onboarding.services.training_service as training_svc
from hr_onboarding.core.results import NotFound
from hr_onboarding.models import db as _db
from hr_onboarding.models.onboarding import OnboardingWorkflow, TrainingStatus, WorkflowStatus
from hr_onboarding.repository import InMemoryTemplateCatalog, InMemoryWorkflowRepository


def _create(repo, catalog, template_id="template_employee", consultant_id="c-1"):
    return template_svc.create_from_template(
        template_id, consultant_id, "Margaret Hamilton", date(2026, 4, 6), "hr.admin",
        repo=repo, catalog=catalog,
    )


class TestInMemoryCatalog:
    def test_defaults_loaded(self, memory_catalog):
        assert {t.id for t in memory_catalog.list()} == {"template_employee", "template_contractor"}
        assert memory_catalog.get("template_employee").default_duration == 30

    def test_active_only(self):
        catalog = InMemoryTemplateCatalog.from_defaults()
        catalog.get("template_employee").is_active = False
        assert [t.id for t in catalog.list(active_only=True)] == ["template_contractor"]

    def test_unknown(self, memory_catalog):
        assert memory_catalog.get("nope") is None
        assert isinstance(template_svc.get_template("nope", catalog=memory_catalog), NotFound)


class TestInMemoryLifecycle:
    def test_create_stores_in_repo_only(self, memory_repo, memory_catalog):
        wf = _create(memory_repo, memory_catalog)
        assert len(memory_repo) == 1
        assert memory_repo.get(wf.id) is wf
        assert _db.session.query(OnboardingWorkflow).count() == 0

    def test_each_manager_writes_back(self, memory_repo, memory_catalog):
        wf = _create(memory_repo, memory_catalog, "template_contractor")
        checklist_svc.complete_item(wf.id, wf.checklist[0].id, "it.ops", repo=memory_repo)
        document_svc.submit(wf.id, wf.documents[0].id, "u", "f.pdf", repo=memory_repo)
        document_svc.review(wf.id, wf.documents[0].id, "approved", "hr", repo=memory_repo)
        training_svc.record_score(wf.id, wf.training[0].id, 85, repo=memory_repo)

        stored = memory_repo.get(wf.id)
        assert stored.checklist_progress == 33
        assert stored.document_progress == 33
        assert stored.training_progress == 50
        assert stored.overall_progress == 39  # (33 + 33 + 50) / 3 = 38.67
        assert stored.status == WorkflowStatus.IN_PROGRESS
        assert stored.training[0].status == TrainingStatus.COMPLETED

    def test_unknown_ids(self, memory_repo):
        assert isinstance(checklist_svc.complete_item("x", "y", "z", repo=memory_repo), NotFound)
        assert isinstance(training_svc.start("x", "y", repo=memory_repo), NotFound)
        assert isinstance(onboarding_svc.get_workflow("x", repo=memory_repo), NotFound)

    def test_unknown_template(self, memory_repo, memory_catalog):
        assert isinstance(_create(memory_repo, memory_catalog, "template_intern"), NotFound)
        assert len(memory_repo) == 0


class TestInMemoryQueries:
    def test_list_is_oldest_first_and_filters(self, memory_repo, memory_catalog):
        first = _create(memory_repo, memory_catalog, consultant_id="c-1")
        second = _create(memory_repo, memory_catalog, "template_contractor", consultant_id="c-1")
        first.created_at = datetime.now(timezone.utc) - timedelta(days=1)

        assert [wf.id for wf in memory_repo.list()] == [first.id, second.id]
        assert [wf.id for wf in memory_repo.list(consultant_type="contractor")] == [second.id]
        assert onboarding_svc.get_consultant_workflow("c-1", repo=memory_repo).id == second.id

    def test_seeded_repository(self, memory_catalog):
        wf = _create(InMemoryWorkflowRepository(), memory_catalog)
        repo = InMemoryWorkflowRepository([wf])
        assert repo.get(wf.id) is wf

    def test_stats(self, memory_repo, memory_catalog):
        _create(memory_repo, memory_catalog)
        stats = onboarding_svc.get_onboarding_stats(today=date(2026, 4, 6), repo=memory_repo)
        assert stats["total"] == 1
        assert stats["not_started"] == 1
        assert stats["overdue"] == 0
