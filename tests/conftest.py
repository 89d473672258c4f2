"""
Shared pytest fixtures for the onboarding engine test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - seeded_templates: default employee/contractor catalog in the DB
    - memory_repo / memory_catalog: database-free storage for service tests
"""

import pytest

from hr_onboarding import create_app
from hr_onboarding.models import db as _db
from hr_onboarding.models.template import seed_default_templates
from hr_onboarding.repository import InMemoryTemplateCatalog, InMemoryWorkflowRepository


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def seeded_templates():
    """Insert the default template catalog and return the number created."""
    created = seed_default_templates()
    _db.session.commit()
    return created


@pytest.fixture()
def memory_repo():
    return InMemoryWorkflowRepository()


@pytest.fixture()
def memory_catalog():
    return InMemoryTemplateCatalog.from_defaults()
