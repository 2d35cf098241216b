from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.platform.dealership.models import Dealership
from app.platform.dealership.repository import DealershipRepository


class DealershipSeedHelper:
    """Bootstraps root dealerships, which no authenticated caller can create."""

    def __init__(self, repository: DealershipRepository) -> None:
        self._repository = repository

    def ensure_root_dealership(self, session: Session, *, name: str, address: str) -> Dealership:
        existing = session.scalar(
            select(Dealership).where(
                Dealership.name == name,
                Dealership.parent_dealership_id.is_(None),
            )
        )
        if existing is not None:
            return existing

        dealership = self._repository.create(session, name=name, address=address)
        session.commit()
        session.refresh(dealership)
        return dealership


dealership_seed_helper = DealershipSeedHelper(DealershipRepository())
