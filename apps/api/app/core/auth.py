from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from starlette.requests import Request

from app.context import get_correlation_id
from app.core.config import get_settings
from app.core.context import bind_dealership
from app.core.database import get_db
from app.platform.dealership.repository import DealershipRepository
from app.platform.security.context import AuthContext


_dealership_repository = DealershipRepository()


@dataclass
class AuthUser:
    sub: str
    dealership_id: str


def create_access_token(dealership_id: str) -> str:
    settings = get_settings()
    expires_at = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expires_days)
    claims = {"sub": dealership_id, "dealership_id": dealership_id, "exp": expires_at}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(request: Request) -> AuthUser:
    auth_header = request.headers.get("authorization", "")
    token = auth_header.replace("Bearer ", "") if auth_header.startswith("Bearer ") else ""
    if not token:
        raise _unauthenticated("missing bearer token")

    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise _unauthenticated("invalid or expired token")

    dealership_id = payload.get("dealership_id")
    if not isinstance(dealership_id, str) or not dealership_id:
        raise _unauthenticated("token carries no dealership")

    bind_dealership(request, dealership_id)
    return AuthUser(sub=str(payload.get("sub", dealership_id)), dealership_id=dealership_id)


def get_auth_context(
    request: Request,
    auth_user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AuthContext:
    if _dealership_repository.get_by_id(db, auth_user.dealership_id) is None:
        raise _unauthenticated("unknown dealership")

    correlation_id = get_correlation_id() or getattr(getattr(request.state, "context", None), "request_id", None)
    return AuthContext(
        dealership_id=auth_user.dealership_id,
        subject=auth_user.sub,
        correlation_id=correlation_id,
    )
