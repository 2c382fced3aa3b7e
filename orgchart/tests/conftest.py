"""
Pytest configuration and fixtures
"""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("NETWORK_ORIGIN_LOOKUP_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.engine import Engine
from orgchart.main import app
from orgchart.db.base import Base
from orgchart.core.actor import Actor, AuditContext
from orgchart.core.config import AuditConfig
from orgchart.core.deps import get_db, get_identity_cache
from orgchart.core.security import create_actor_token
from orgchart.repositories.audit_log_store import AuditLogStore
from orgchart.repositories.entity_repository import build_entity_repositories
from orgchart.services.audit_query_service import AuditQueryService
from orgchart.services.audit_service import AuditRecorder
from orgchart.services.identity_cache import IdentityContextCache
from orgchart.services.rollback_service import RollbackEngine

# Import all models to ensure they're registered with Base.metadata
from orgchart.models import Department, Employee, AuditLog  # noqa


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ORG_ID = "org_test"


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def identity():
    """Identity cache without an outbound lookup"""
    return IdentityContextCache(None)


@pytest.fixture
def client(db, identity):
    """Test client fixture with database and identity cache overrides"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_cache] = lambda: identity
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def actor():
    return Actor(email="hanako@example.com", display_name="Hanako")


@pytest.fixture
def auth_headers(actor):
    token = create_actor_token(actor.email, actor.display_name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def audit_config():
    return AuditConfig(organization_id=ORG_ID)


@pytest.fixture
def context(actor):
    return AuditContext(
        organization_id=ORG_ID,
        actor=actor,
        ip_address="203.0.113.7",
        user_agent="pytest",
        session_id="sess_test",
    )


@pytest.fixture
def anonymous_context():
    return AuditContext(organization_id=ORG_ID)


@pytest.fixture
def store(db):
    return AuditLogStore(db)


@pytest.fixture
def recorder(store, identity, audit_config):
    return AuditRecorder(store, identity, audit_config)


@pytest.fixture
def query_service(store, audit_config):
    return AuditQueryService(store, audit_config)


@pytest.fixture
def engine_for(db, store, identity):
    """Build a rollback engine (and its recorder) for a given config"""
    def build(config):
        recorder = AuditRecorder(store, identity, config)
        return RollbackEngine(store, build_entity_repositories(db), recorder, config)
    return build


@pytest.fixture
def rollback_engine(engine_for, audit_config):
    return engine_for(audit_config)
