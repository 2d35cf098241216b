from __future__ import annotations

from sqlalchemy.orm import Session

from app.metrics import observe_hierarchy_walk
from app.platform.dealership.models import Dealership
from app.platform.dealership.repository import DealershipRepository


class HierarchyResolver:
    """Answers tree-shape questions about dealerships.

    Every method is a read-only traversal and never raises for unknown or detached
    dealerships: a missing node simply has no ancestors and no descendants.
    """

    def __init__(self, store: DealershipRepository | None = None) -> None:
        self._store = store or DealershipRepository()

    def is_ancestor(self, session: Session, candidate_ancestor_id: str, dealership_id: str) -> bool:
        """Return True iff ``candidate_ancestor_id`` sits strictly above ``dealership_id``."""

        depth = 0
        # The walk yields dealership_id itself first; only strict ancestors count.
        for depth, ancestor_id in enumerate(self._store.iter_ancestor_ids(session, dealership_id)):
            if depth > 0 and ancestor_id == candidate_ancestor_id:
                observe_hierarchy_walk(depth)
                return True
        observe_hierarchy_walk(depth)
        return False

    def descendants_of(self, session: Session, root_dealership_id: str) -> set[str]:
        return self._store.get_descendant_ids(session, root_dealership_id)

    def ancestor_chain(self, session: Session, dealership_id: str) -> list[Dealership]:
        chain = self._store.get_ancestor_chain(session, dealership_id)
        if chain:
            observe_hierarchy_walk(len(chain) - 1)
        return chain
