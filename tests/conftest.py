"""Shared test fixtures for the mortgage CRM test suite.

Provides:
- app: Flask app configured for testing (in-memory SQLite, CSRF off)
- client: Flask test client
- db_session: clean database per test (tables created/dropped)
- api_headers: Bearer auth for /api/* calls
- seed_data: admin user, active + inactive referrer, default templates
- make_lead / make_referrer: factories for ad-hoc rows
"""

import pytest
from werkzeug.security import generate_password_hash

from mortgage_crm import create_app
from mortgage_crm.extensions import db as _db
from mortgage_crm.models.lead import Lead
from mortgage_crm.models.referrer import Referrer
from mortgage_crm.models.user import User
from mortgage_crm.services.template_service import seed_default_templates


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")
    yield app


@pytest.fixture(autouse=True)
def db_session(app):
    """Create all tables before each test, drop after."""
    with app.app_context():
        _db.create_all()
        yield _db.session
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def api_headers(app):
    """Authorization header accepted by every /api/* route."""
    return {"Authorization": f"Bearer {app.config['CRM_API_KEY']}"}


@pytest.fixture
def make_referrer(db_session):
    def _make(name="ABC Bank", is_active=True):
        referrer = Referrer(name=name, is_active=is_active)
        _db.session.add(referrer)
        _db.session.commit()
        return referrer
    return _make


@pytest.fixture
def make_lead(db_session):
    """Insert a lead directly, bypassing the service rules.

    created_at/updated_at can be pinned to place a lead at a given date.
    """
    def _make(first_name="Jane", last_name="Doe", created_at=None, updated_at=None, **fields):
        lead = Lead(first_name=first_name, last_name=last_name, **fields)
        if created_at is not None:
            lead.created_at = created_at
        if updated_at is not None or created_at is not None:
            lead.updated_at = updated_at or created_at
        _db.session.add(lead)
        _db.session.commit()
        return lead
    return _make


@pytest.fixture
def seed_data(app, db_session):
    """Admin user, one active and one inactive referrer, default templates.

    Returns a dict with plain IDs so tests can use them after requests
    have committed and expired the objects.
    """
    admin = User(
        email="admin@mortgage.local",
        password_hash=generate_password_hash("admin123"),
        full_name="Admin User",
        is_admin=True,
    )
    _db.session.add(admin)

    active = Referrer(name="ABC Bank", is_active=True)
    inactive = Referrer(name="Old Credit Union", is_active=False)
    _db.session.add_all([active, inactive])

    seed_default_templates()
    _db.session.commit()

    from mortgage_crm.models.checklist import ChecklistTemplate

    templates = {t.lead_type: t.id for t in ChecklistTemplate.query.all()}

    return {
        "admin_id": admin.id,
        "admin_email": admin.email,
        "admin_password": "admin123",
        "referrer_id": active.id,
        "inactive_referrer_id": inactive.id,
        "templates": templates,
    }
