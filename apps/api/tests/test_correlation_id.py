from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app import audit
from app.core.config import get_settings
from app.core.database import Base, get_db
from app.main import app
from app.platform.dealership.repository import DealershipRepository


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_settings() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def tree(db_session: Session) -> dict[str, str]:
    repository = DealershipRepository()
    root = repository.create(db_session, name="Root", address="1 Main St")
    d1 = repository.create(db_session, name="D1", address="2 Main St", parent_dealership_id=root.id)
    d2 = repository.create(db_session, name="D2", address="3 Main St", parent_dealership_id=root.id)
    db_session.commit()
    return {"root": root.id, "d1": d1.id, "d2": d2.id}

def _auth(client: TestClient, dealership_id: str) -> dict[str, str]:
    token = client.post(f"/api/auth/token/{dealership_id}").json()["token"]
    return {"Authorization": f"Bearer {token}"}


def test_generated_correlation_id_returned_in_header(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers.get("x-correlation-id")
    assert response.headers.get("x-request-id") == response.headers.get("x-correlation-id")


def test_correlation_id_respected_when_provided(client: TestClient, tree: dict[str, str]) -> None:
    response = client.get("/api/customers/missing", headers={**_auth(client, tree["d1"]), "X-Correlation-Id": "abc-123"})
    assert response.status_code == 404
    assert response.headers.get("x-correlation-id") == "abc-123"


def test_oversized_correlation_id_is_replaced(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Correlation-Id": "x" * 500})
    header_value = response.headers.get("x-correlation-id")
    assert header_value
    assert header_value != "x" * 500


def test_audit_uses_request_correlation_id(client: TestClient, tree: dict[str, str]) -> None:
    audit.audit_entries.clear()
    response = client.get(
        f"/api/dealerships/{tree['d2']}",
        headers={**_auth(client, tree["d1"]), "X-Correlation-Id": "corr-deny-1"},
    )
    assert response.status_code == 403

    denials = audit.find_entries(action="access.denied")
    assert denials
    assert denials[-1]["correlation_id"] == "corr-deny-1"
    audit.audit_entries.clear()
