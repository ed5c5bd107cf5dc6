"""
Shared pytest fixtures for API tests.

Key patterns:

1. Database Isolation: Each test gets a fresh temporary database
2. DI Override: Use app.dependency_overrides to inject test dependencies
3. Service Injection: Services are created with test repositories
4. Real tokens: Requests carry bearer tokens signed with the test secret

Fixture Hierarchy:
    temp_db → repositories → services → test_app → client
"""
import os
import tempfile
import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt

# Configuration is read on import, so the test environment must be set
# before any application module is imported
TEST_JWT_SECRET = "test-jwt-secret-for-testing-purposes-123456"
_TEST_DATA_DIR = tempfile.mkdtemp(prefix="records-svc-tests-")
os.environ.setdefault("RECORDS_SVC_JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("RECORDS_SVC_DB_DIR", os.path.join(_TEST_DATA_DIR, "data"))
os.environ.setdefault("RECORDS_SVC_UPLOAD_DIR", os.path.join(_TEST_DATA_DIR, "uploads"))

from core import dependencies as deps
from core.config import JWT_ALGORITHM, JWT_SECRET
from core.exceptions import setup_exception_handlers
from repositories import (
    Database,
    DiseaseRepository,
    ExamRepository,
    HospitalizationRepository,
    SurgeryRepository,
    UserRepository,
    UserSurgeryRepository,
)
from services import ExamService, UploadService, UserSurgeryService


def make_token(user_id: str, secret: str = None, **claims) -> str:
    """Sign a bearer token for ``user_id`` (the ``sub`` claim)."""
    payload = {"sub": user_id, **claims}
    return jwt.encode(payload, secret or JWT_SECRET, algorithm=JWT_ALGORITHM)


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def temp_db(tmp_path):
    """
    Create a temporary database for testing.

    The database lives in pytest's tmp_path, so the WAL side files are
    removed together with it.
    """
    return Database(db_path=str(tmp_path / "test.db"))


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


# =============================================================================
# REPOSITORIES
# =============================================================================

@pytest.fixture
def user_repo(temp_db):
    return UserRepository(db=temp_db)


@pytest.fixture
def exam_repo(temp_db):
    return ExamRepository(db=temp_db)


@pytest.fixture
def surgery_repo(temp_db):
    return SurgeryRepository(db=temp_db)


@pytest.fixture
def disease_repo(temp_db):
    return DiseaseRepository(db=temp_db)


@pytest.fixture
def hospitalization_repo(temp_db):
    return HospitalizationRepository(db=temp_db)


@pytest.fixture
def user_surgery_repo(temp_db):
    return UserSurgeryRepository(db=temp_db)


# =============================================================================
# SERVICES
# =============================================================================

@pytest.fixture
def upload_service(upload_dir):
    """Create an UploadService writing into the test upload directory."""
    return UploadService(upload_dir=str(upload_dir), max_size=1024 * 1024)


@pytest.fixture
def exam_service(exam_repo, user_repo, upload_service):
    return ExamService(exam_repository=exam_repo, user_repository=user_repo, upload_service=upload_service)


@pytest.fixture
def user_surgery_service(user_surgery_repo, surgery_repo, hospitalization_repo, user_repo):
    return UserSurgeryService(
        user_surgery_repository=user_surgery_repo,
        surgery_repository=surgery_repo,
        hospitalization_repository=hospitalization_repo,
        user_repository=user_repo
    )


# =============================================================================
# USERS
# =============================================================================

@pytest.fixture
def user_a(user_repo):
    """The user the default client authenticates as."""
    return user_repo.add(name="Ana Souza", email="ana@example.com", user_id=str(uuid.uuid4()))


@pytest.fixture
def user_b(user_repo):
    return user_repo.add(name="Bruno Lima", email="bruno@example.com", user_id=str(uuid.uuid4()))


# =============================================================================
# APPLICATION
# =============================================================================

@pytest.fixture
def test_app(temp_db, user_repo, exam_repo, surgery_repo, hospitalization_repo, user_surgery_repo,
             upload_service, exam_service, user_surgery_service):
    """
    Create a FastAPI test app with dependency overrides.

    Uses the real routers and exception handlers; only the dependency
    functions are replaced so every request hits the test database.
    Authentication is not overridden.
    """
    from api.routers import health_router, exams_router, user_surgeries_router

    app = FastAPI(title="Medical Records Service Test")

    setup_exception_handlers(app)

    app.dependency_overrides[deps.get_database] = lambda: temp_db
    app.dependency_overrides[deps.get_user_repository] = lambda: user_repo
    app.dependency_overrides[deps.get_exam_repository] = lambda: exam_repo
    app.dependency_overrides[deps.get_surgery_repository] = lambda: surgery_repo
    app.dependency_overrides[deps.get_hospitalization_repository] = lambda: hospitalization_repo
    app.dependency_overrides[deps.get_user_surgery_repository] = lambda: user_surgery_repo
    app.dependency_overrides[deps.get_upload_service] = lambda: upload_service
    app.dependency_overrides[deps.get_exam_service] = lambda: exam_service
    app.dependency_overrides[deps.get_user_surgery_service] = lambda: user_surgery_service

    app.include_router(health_router)
    app.include_router(exams_router)
    app.include_router(user_surgeries_router)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(test_app):
    """A client that sends no Authorization header."""
    return TestClient(test_app)


@pytest.fixture
def client(test_app, user_a):
    """A client authenticated as ``user_a``."""
    return TestClient(test_app, headers=auth_headers(user_a["id"]))


@pytest.fixture
def client_b(test_app, user_b):
    """A client authenticated as ``user_b``."""
    return TestClient(test_app, headers=auth_headers(user_b["id"]))


@pytest.fixture
def app_client(tmp_path, monkeypatch):
    """
    A client for the real application on an empty database.

    No user rows exist; the caller is only known through its token.
    Returns ``(client, caller_id)``.
    """
    from main import app

    monkeypatch.setattr(deps, "_database_instance", Database(db_path=str(tmp_path / "fresh.db")))
    monkeypatch.setattr(deps.settings, "records_svc_upload_dir", str(tmp_path / "fresh-uploads"))

    caller_id = str(uuid.uuid4())
    return TestClient(app, headers=auth_headers(caller_id)), caller_id
