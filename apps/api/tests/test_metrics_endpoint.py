from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

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
def configure_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("METRICS_ENABLED", "true")
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


def _sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


def test_metrics_endpoint_exposes_http_and_access_metrics(client: TestClient, tree: dict[str, str]) -> None:
    allow_labels = {"resource": "vehicle", "action": "list", "decision": "allow"}
    deny_labels = {"resource": "customer", "action": "list", "decision": "deny"}
    allowed_before = _sample("dealership_access_decisions_total", allow_labels)
    denied_before = _sample("dealership_access_decisions_total", deny_labels)
    walks_before = _sample("dealership_hierarchy_walk_depth_count")

    assert client.get("/health").status_code == 200

    root_headers = _auth(client, tree["root"])
    allowed = client.get("/api/vehicles", params={"dealership_id": tree["d1"]}, headers=root_headers)
    assert allowed.status_code == 200
    denied = client.get("/api/customers", params={"last_name": "x", "dealership_id": tree["d2"]}, headers=_auth(client, tree["d1"]))
    assert denied.status_code == 403
    path = client.get(f"/api/dealerships/{tree['d1']}/path", headers=root_headers)
    assert path.status_code == 200

    metrics = client.get("/metrics", headers=root_headers)
    assert metrics.status_code == 200
    body = metrics.text

    assert "http_requests_total" in body
    assert "http_request_duration_seconds" in body
    assert "dealership_access_decisions_total" in body

    assert 'path="/health"' in body
    assert 'path="/api/dealerships/{id}/path"' in body
    assert _sample("dealership_access_decisions_total", allow_labels) == allowed_before + 1
    assert _sample("dealership_access_decisions_total", deny_labels) == denied_before + 1
    assert _sample("dealership_hierarchy_walk_depth_count") >= walks_before + 1


def test_metrics_endpoint_requires_token(client: TestClient) -> None:
    assert client.get("/metrics").status_code == 401


def test_metrics_endpoint_hidden_when_disabled(
    client: TestClient,
    tree: dict[str, str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    headers = _auth(client, tree["root"])
    monkeypatch.setenv("METRICS_ENABLED", "false")
    get_settings.cache_clear()

    assert client.get("/metrics", headers=headers).status_code == 404
