"""
Shared fixtures for the test suite.

Every test runs against the in-memory SQLite engine that TESTING mode
installs, with the schema recreated per test.
"""

import os
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

# Set test environment variables before importing the application
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from acme_csr.core.security import get_password_hash  # noqa: E402
from acme_csr.db.database import engine  # noqa: E402
from acme_csr.db.models import Base  # noqa: E402
from acme_csr.domain.entities.campaign import Campaign  # noqa: E402
from acme_csr.domain.entities.organization import Organization  # noqa: E402
from acme_csr.domain.entities.user import User  # noqa: E402
from acme_csr.domain.enums import UserRole  # noqa: E402
from acme_csr.domain.value_objects.email import Email  # noqa: E402
from acme_csr.domain.value_objects.money import Money  # noqa: E402
from acme_csr.domain.value_objects.translatable import TranslatableText  # noqa: E402
from acme_csr.infrastructure import orm  # noqa: E402,F401
from acme_csr.infrastructure.repositories.unit_of_work_impl import unit_of_work_factory  # noqa: E402


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Tests against the SQLite schema")
    config.addinivalue_line("markers", "api: API endpoint tests")


@pytest.fixture
def database():
    """Fresh schema for each test"""
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def job_queue():
    return MagicMock()


@pytest.fixture
def uow_factory(database):
    """Builds units of work that each own a session on the test database"""
    return unit_of_work_factory()


@pytest.fixture
def make_user(uow_factory):
    """Persist a user and return the entity"""

    async def _make(email="employee@example.com", role=UserRole.EMPLOYEE, organization_id=None, password="password123"):
        user = User.create(
            email=Email(email),
            name=email.split("@")[0].title(),
            hashed_password=get_password_hash(password),
            role=role,
            organization_id=organization_id,
        )
        uow = uow_factory()
        async with uow:
            await uow.users.add(user)
            await uow.commit()
        return user

    return _make


@pytest.fixture
def make_organization(uow_factory):

    async def _make(name="Acme Foundation", **details):
        organization = Organization.create(name=TranslatableText({"en": name}), **details)
        uow = uow_factory()
        async with uow:
            await uow.organizations.add(organization)
            await uow.commit()
        return organization

    return _make


def build_campaign(organization_id, user_id, goal="1000", currency="EUR", starts_in_days=-1, ends_in_days=30):
    """Unsaved campaign entity with a running date range"""
    now = datetime.utcnow()
    return Campaign.create(
        title=TranslatableText({"en": "Clean Water"}),
        description=TranslatableText({"en": "Wells for villages"}),
        goal_amount=Money(Decimal(goal), currency),
        start_date=now + timedelta(days=starts_in_days),
        end_date=now + timedelta(days=ends_in_days),
        organization_id=organization_id,
        user_id=user_id,
    )


@pytest.fixture
def make_campaign(uow_factory):

    async def _make(organization_id, user_id, goal="1000", active=True):
        campaign = build_campaign(organization_id, user_id, goal=goal)
        if active:
            campaign.submit_for_approval()
            campaign.approve(user_id)
        uow = uow_factory()
        async with uow:
            await uow.campaigns.add(campaign)
            await uow.commit()
        return campaign

    return _make


class InMemoryStorage:
    """Object storage double keeping uploads in a dict"""

    def __init__(self):
        self.objects = {}

    async def upload_bytes(self, object_name, data, content_type):
        self.objects[object_name] = (data, content_type)
        return object_name

    async def download_bytes(self, object_name):
        return self.objects[object_name][0]

    async def delete(self, object_name):
        return self.objects.pop(object_name, None) is not None

    async def get_presigned_url(self, object_name, expires_minutes=None):
        return f"https://storage.test/{object_name}"


@pytest.fixture
def storage():
    return InMemoryStorage()
