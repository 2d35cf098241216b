from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.platform.security.access import ScopedAccess
from app.platform.security.context import AuthContext
from app.platform.security.errors import AuthorizationError


T = TypeVar("T")


def run_scoped(
    access: ScopedAccess,
    session: Session,
    ctx: AuthContext,
    dealership_id: str | None,
    operation: Callable[[str], T],
    *,
    resource: str,
    action: str,
    explicit: bool = False,
) -> T:
    """Run a resource operation inside the caller's dealership scope.

    Scope denials surface as HTTP 403 before ``operation`` is called. With ``explicit``
    the validator runs even for self-access.
    """

    try:
        if explicit:
            if dealership_id is None:
                raise HTTPException(status_code=422, detail="dealership_id is required")
            return access.run_explicit(session, ctx, dealership_id, operation, resource=resource, action=action)
        return access.run(session, ctx, dealership_id, operation, resource=resource, action=action)
    except AuthorizationError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))


def commit_or_conflict(session: Session, detail: str) -> None:
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)
