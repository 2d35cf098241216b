from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.orm import Session

from app import audit
from app.metrics import observe_access_decision
from app.otel import get_tracer
from app.platform.security.context import AuthContext
from app.platform.security.errors import DealershipAccessDeniedError
from app.platform.security.hierarchy import HierarchyResolver


logger = logging.getLogger("app.security.access")
tracer = get_tracer("app.security.access")

T = TypeVar("T")


class AccessValidator:
    """Top-down trust: a dealership may act on itself and on any of its descendants."""

    def __init__(self, resolver: HierarchyResolver | None = None) -> None:
        self._resolver = resolver or HierarchyResolver()

    def validate_access(self, session: Session, caller_dealership_id: str, target_dealership_id: str) -> bool:
        with tracer.start_as_current_span("dealership.access.validate") as span:
            span.set_attribute("dealership.caller_id", caller_dealership_id)
            span.set_attribute("dealership.target_id", target_dealership_id)

            if caller_dealership_id == target_dealership_id:
                allowed = True
            else:
                allowed = target_dealership_id in self._resolver.descendants_of(session, caller_dealership_id)

            span.set_attribute("dealership.access.allowed", allowed)

        logger.info(
            "dealership.access.validated",
            extra={
                "dealership_id": caller_dealership_id,
                "target_dealership_id": target_dealership_id,
                "decision": "allow" if allowed else "deny",
            },
        )
        return allowed

    def ensure_access(
        self,
        session: Session,
        ctx: AuthContext,
        target_dealership_id: str,
        *,
        resource: str,
        action: str,
    ) -> None:
        """Raise ``DealershipAccessDeniedError`` unless ``ctx`` may act on the target dealership."""

        allowed = self.validate_access(session, ctx.dealership_id, target_dealership_id)
        observe_access_decision(resource=resource, action=action, allowed=allowed)
        if allowed:
            return

        _emit_access_denied(ctx, target_dealership_id, resource=resource, action=action)
        raise DealershipAccessDeniedError(ctx.dealership_id, target_dealership_id)


class ScopedAccess:
    """Resolves the dealership a resource operation runs against and gates it.

    Resource services hand in the caller context, the optional dealership id from the
    request and the storage operation; the operation only runs once the effective
    dealership id is known to be within the caller's subtree.
    """

    def __init__(self, validator: AccessValidator | None = None) -> None:
        self.validator = validator or AccessValidator()

    def resolve_dealership_id(
        self,
        session: Session,
        ctx: AuthContext,
        dealership_id: str | None,
        *,
        resource: str,
        action: str,
    ) -> str:
        if dealership_id is None or dealership_id == ctx.dealership_id:
            return ctx.dealership_id

        self.validator.ensure_access(session, ctx, dealership_id, resource=resource, action=action)
        return dealership_id

    def run(
        self,
        session: Session,
        ctx: AuthContext,
        dealership_id: str | None,
        operation: Callable[[str], T],
        *,
        resource: str,
        action: str,
    ) -> T:
        effective_dealership_id = self.resolve_dealership_id(
            session,
            ctx,
            dealership_id,
            resource=resource,
            action=action,
        )
        return operation(effective_dealership_id)

    def run_explicit(
        self,
        session: Session,
        ctx: AuthContext,
        dealership_id: str,
        operation: Callable[[str], T],
        *,
        resource: str,
        action: str,
    ) -> T:
        """Like ``run`` but always consults the validator, even for self-access."""

        self.validator.ensure_access(session, ctx, dealership_id, resource=resource, action=action)
        return operation(dealership_id)


def _emit_access_denied(ctx: AuthContext, target_dealership_id: str, *, resource: str, action: str) -> None:
    logger.warning(
        "dealership.access.denied",
        extra={
            "dealership_id": ctx.dealership_id,
            "target_dealership_id": target_dealership_id,
            "resource": resource,
            "action": action,
            "decision": "deny",
        },
    )
    audit.record(
        actor_dealership_id=ctx.dealership_id,
        entity_type="security.dealership_scope",
        entity_id=target_dealership_id,
        action="access.denied",
        before=None,
        after={
            "resource": resource,
            "action": action,
            "caller_dealership_id": ctx.dealership_id,
            "target_dealership_id": target_dealership_id,
        },
        correlation_id=ctx.correlation_id,
    )


scoped_access = ScopedAccess()
