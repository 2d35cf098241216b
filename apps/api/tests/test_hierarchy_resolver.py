from __future__ import annotations

from collections.abc import Generator

import pytest
from prometheus_client import REGISTRY
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.core.database import Base
from app.platform.dealership.models import Dealership
from app.platform.dealership.repository import DealershipRepository
from app.platform.security.hierarchy import HierarchyResolver


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
def repository() -> DealershipRepository:
    return DealershipRepository()


@pytest.fixture()
def resolver(repository: DealershipRepository) -> HierarchyResolver:
    return HierarchyResolver(repository)


@pytest.fixture()
def tree(db_session: Session, repository: DealershipRepository) -> dict[str, str]:
    """root -> a -> b, root -> x, and a detached root."""

    root = repository.create(db_session, name="Root Motors", address="1 Main St")
    a = repository.create(db_session, name="A Motors", address="2 Main St", parent_dealership_id=root.id)
    b = repository.create(db_session, name="B Motors", address="3 Main St", parent_dealership_id=a.id)
    x = repository.create(db_session, name="X Motors", address="4 Main St", parent_dealership_id=root.id)
    other = repository.create(db_session, name="Other Group", address="9 Side St")
    db_session.commit()
    return {"root": root.id, "a": a.id, "b": b.id, "x": x.id, "other": other.id}


def test_is_ancestor_follows_parent_links(db_session: Session, resolver: HierarchyResolver, tree: dict[str, str]) -> None:
    assert resolver.is_ancestor(db_session, tree["a"], tree["b"]) is True
    assert resolver.is_ancestor(db_session, tree["root"], tree["b"]) is True
    assert resolver.is_ancestor(db_session, tree["root"], tree["x"]) is True


def test_is_ancestor_is_strict_and_directional(db_session: Session, resolver: HierarchyResolver, tree: dict[str, str]) -> None:
    for dealership_id in tree.values():
        assert resolver.is_ancestor(db_session, dealership_id, dealership_id) is False

    assert resolver.is_ancestor(db_session, tree["b"], tree["root"]) is False
    assert resolver.is_ancestor(db_session, tree["x"], tree["b"]) is False
    assert resolver.is_ancestor(db_session, tree["other"], tree["b"]) is False


def test_is_ancestor_with_unknown_dealerships(db_session: Session, resolver: HierarchyResolver, tree: dict[str, str]) -> None:
    assert resolver.is_ancestor(db_session, "missing", tree["b"]) is False
    assert resolver.is_ancestor(db_session, tree["root"], "missing") is False


def test_descendants_include_root_and_whole_subtree(
    db_session: Session,
    resolver: HierarchyResolver,
    tree: dict[str, str],
) -> None:
    assert resolver.descendants_of(db_session, tree["root"]) == {tree["root"], tree["a"], tree["b"], tree["x"]}
    assert resolver.descendants_of(db_session, tree["a"]) == {tree["a"], tree["b"]}
    assert resolver.descendants_of(db_session, tree["b"]) == {tree["b"]}
    assert resolver.descendants_of(db_session, tree["other"]) == {tree["other"]}
    assert resolver.descendants_of(db_session, "missing") == set()


def test_descendants_agree_with_is_ancestor(
    db_session: Session,
    resolver: HierarchyResolver,
    tree: dict[str, str],
) -> None:
    for candidate in tree.values():
        descendants = resolver.descendants_of(db_session, candidate)
        for node in tree.values():
            expected = node in descendants and node != candidate
            assert resolver.is_ancestor(db_session, candidate, node) is expected


def test_ancestor_chain_is_nearest_first(db_session: Session, resolver: HierarchyResolver, tree: dict[str, str]) -> None:
    chain = resolver.ancestor_chain(db_session, tree["b"])
    assert [row.id for row in chain] == [tree["b"], tree["a"], tree["root"]]
    assert resolver.ancestor_chain(db_session, "missing") == []


def test_ancestor_chain_records_walk_depth(db_session: Session, resolver: HierarchyResolver, tree: dict[str, str]) -> None:
    def walks() -> tuple[float, float]:
        count = REGISTRY.get_sample_value("dealership_hierarchy_walk_depth_count") or 0.0
        total = REGISTRY.get_sample_value("dealership_hierarchy_walk_depth_sum") or 0.0
        return count, total

    count_before, sum_before = walks()
    resolver.ancestor_chain(db_session, tree["b"])
    count_after, sum_after = walks()

    assert count_after == count_before + 1
    assert sum_after == sum_before + 2


def test_dangling_parent_ends_the_walk(db_session: Session, resolver: HierarchyResolver, tree: dict[str, str]) -> None:
    orphan = Dealership(name="Orphan", address="0 Nowhere", parent_dealership_id="gone")
    db_session.add(orphan)
    db_session.commit()

    assert [row.id for row in resolver.ancestor_chain(db_session, orphan.id)] == [orphan.id]
    assert resolver.is_ancestor(db_session, tree["root"], orphan.id) is False
    assert resolver.descendants_of(db_session, orphan.id) == {orphan.id}


def test_injected_cycle_terminates(db_session: Session, resolver: HierarchyResolver, tree: dict[str, str]) -> None:
    root = db_session.get(Dealership, tree["root"])
    assert root is not None
    root.parent_dealership_id = tree["b"]
    db_session.commit()

    assert resolver.is_ancestor(db_session, "missing", tree["a"]) is False
    assert resolver.is_ancestor(db_session, tree["b"], tree["a"]) is True
    assert resolver.descendants_of(db_session, tree["a"]) == {tree["root"], tree["a"], tree["b"], tree["x"]}
    assert [row.id for row in resolver.ancestor_chain(db_session, tree["b"])] == [tree["b"], tree["a"], tree["root"]]


def test_depth_bound_stops_long_chains(
    db_session: Session,
    resolver: HierarchyResolver,
    repository: DealershipRepository,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    parent_id: str | None = None
    ids: list[str] = []
    for index in range(6):
        dealership = repository.create(db_session, name=f"Level {index}", address="Chain Rd", parent_dealership_id=parent_id)
        ids.append(dealership.id)
        parent_id = dealership.id
    db_session.commit()

    monkeypatch.setenv("HIERARCHY_MAX_DEPTH", "2")
    get_settings.cache_clear()

    chain = resolver.ancestor_chain(db_session, ids[-1])
    assert len(chain) == 3
    assert resolver.is_ancestor(db_session, ids[0], ids[-1]) is False


def test_store_children_and_updates(db_session: Session, repository: DealershipRepository, tree: dict[str, str]) -> None:
    children = repository.get_children(db_session, tree["root"])
    assert [row.id for row in children] == [tree["a"], tree["x"]]
    assert repository.get_children(db_session, tree["b"]) == []

    moved = repository.update(db_session, tree["b"], name="B Motors", address="3 Main St", parent_dealership_id=tree["x"])
    assert moved is not None and moved.parent_dealership_id == tree["x"]

    renamed = repository.update(db_session, tree["b"], name="B Renamed", address="3 Main St")
    assert renamed is not None
    assert renamed.name == "B Renamed"
    assert renamed.parent_dealership_id == tree["x"]

    assert repository.update(db_session, "missing", name="Ghost", address="Nowhere") is None
