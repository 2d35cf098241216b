from __future__ import annotations

import logging
from collections.abc import Collection, Iterator

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.core.config import get_settings
from app.metrics import observe_hierarchy_anomaly
from app.platform.dealership.models import Dealership


logger = logging.getLogger("app.dealership.store")


class DealershipRepository:
    """Persistent dealership tree.

    Ancestor walks follow ``parent_dealership_id`` one row at a time so callers can stop
    early; descendant sets are materialized with a recursive CTE. Both terminate on
    malformed trees: the upward walk tracks visited ids and is bounded by
    ``hierarchy_max_depth``, and the CTE uses ``UNION`` so a cycle produces no new rows.
    """

    resource = "dealership"

    def get_by_id(self, session: Session, dealership_id: str) -> Dealership | None:
        return session.get(Dealership, dealership_id)

    def get_children(self, session: Session, dealership_id: str) -> list[Dealership]:
        stmt = (
            select(Dealership)
            .where(Dealership.parent_dealership_id == dealership_id)
            .order_by(Dealership.name.asc())
        )
        return list(session.scalars(stmt).all())

    def iter_ancestor_ids(self, session: Session, dealership_id: str) -> Iterator[str]:
        """Yield ``dealership_id`` and then each existing ancestor id, nearest first."""

        max_depth = get_settings().hierarchy_max_depth
        visited: set[str] = set()
        current: str | None = dealership_id

        while current is not None:
            if current in visited:
                observe_hierarchy_anomaly("cycle")
                logger.warning("dealership.hierarchy.cycle", extra={"dealership_id": current})
                return
            if len(visited) > max_depth:
                observe_hierarchy_anomaly("max_depth")
                logger.warning("dealership.hierarchy.max_depth", extra={"dealership_id": dealership_id})
                return

            row = session.execute(
                select(Dealership.parent_dealership_id).where(Dealership.id == current)
            ).first()
            if row is None:
                return

            visited.add(current)
            yield current
            current = row.parent_dealership_id

    def get_ancestor_chain(self, session: Session, dealership_id: str) -> list[Dealership]:
        chain: list[Dealership] = []
        for ancestor_id in self.iter_ancestor_ids(session, dealership_id):
            dealership = session.get(Dealership, ancestor_id)
            if dealership is not None:
                chain.append(dealership)
        return chain

    def get_descendant_ids(self, session: Session, dealership_id: str) -> set[str]:
        tree = (
            select(Dealership.id)
            .where(Dealership.id == dealership_id)
            .cte("dealership_subtree", recursive=True)
        )
        tree = tree.union(
            select(Dealership.id).join(tree, Dealership.parent_dealership_id == tree.c.id)
        )
        return set(session.scalars(select(tree.c.id)).all())

    def list_by_ids(self, session: Session, dealership_ids: Collection[str]) -> list[Dealership]:
        if not dealership_ids:
            return []
        stmt = (
            select(Dealership)
            .where(Dealership.id.in_(list(dealership_ids)))
            .options(selectinload(Dealership.sub_dealerships))
            .order_by(Dealership.name.asc(), Dealership.id.asc())
        )
        return list(session.scalars(stmt).all())

    def create(
        self,
        session: Session,
        *,
        name: str,
        address: str,
        parent_dealership_id: str | None = None,
    ) -> Dealership:
        dealership = Dealership(name=name, address=address, parent_dealership_id=parent_dealership_id)
        session.add(dealership)
        session.flush()
        return dealership

    def update(
        self,
        session: Session,
        dealership_id: str,
        *,
        name: str,
        address: str,
        parent_dealership_id: str | None = None,
    ) -> Dealership | None:
        dealership = session.get(Dealership, dealership_id)
        if dealership is None:
            return None

        dealership.name = name
        dealership.address = address
        if parent_dealership_id is not None:
            dealership.parent_dealership_id = parent_dealership_id
        session.flush()
        return dealership
