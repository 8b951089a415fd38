import pytest
from fastapi.testclient import TestClient

from acme_csr.api.dependencies import get_job_queue
from acme_csr.core.security import create_access_token
from acme_csr.main import app


@pytest.fixture
def client(database, job_queue):
    """Test client on the central host; background jobs go to a mock queue"""
    app.dependency_overrides[get_job_queue] = lambda: job_queue
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():

    def _headers(user, tenant_id=None):
        return {"Authorization": f"Bearer {create_access_token(str(user.id.value), tenant_id)}"}

    return _headers
