from __future__ import annotations

import os
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("OTEL_ENABLED", "true")

from app.core.config import get_settings
from app.core.database import Base, get_db
from app.main import app
from app.otel import setup_inmemory_otel
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

@pytest.fixture()
def span_exporter() -> InMemorySpanExporter:
    exporter = setup_inmemory_otel("dms-api")
    exporter.clear()
    return exporter


def _auth(client: TestClient, dealership_id: str) -> dict[str, str]:
    token = client.post(f"/api/auth/token/{dealership_id}").json()["token"]
    return {"Authorization": f"Bearer {token}"}


def test_request_span_contains_correlation_id(client: TestClient, span_exporter: InMemorySpanExporter) -> None:
    response = client.get("/health", headers={"X-Correlation-Id": "otel-corr-1"})
    assert response.status_code == 200

    spans = span_exporter.get_finished_spans()
    assert spans
    assert any(span.attributes.get("correlation_id") == "otel-corr-1" for span in spans)


def test_access_validation_span_records_decision(
    client: TestClient,
    span_exporter: InMemorySpanExporter,
    tree: dict[str, str],
) -> None:
    headers = _auth(client, tree["d1"])
    span_exporter.clear()

    response = client.get("/api/vehicles", params={"dealership_id": tree["d2"]}, headers=headers)
    assert response.status_code == 403

    access_spans = [span for span in span_exporter.get_finished_spans() if span.name == "dealership.access.validate"]
    assert access_spans
    assert any(
        span.attributes.get("dealership.caller_id") == tree["d1"]
        and span.attributes.get("dealership.target_id") == tree["d2"]
        and span.attributes.get("dealership.access.allowed") is False
        for span in access_spans
    )
