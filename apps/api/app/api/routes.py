from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from app.business.customers.api import router as customers_router
from app.business.sales.api import router as sales_router
from app.business.vehicles.api import router as vehicles_router
from app.core.auth import get_auth_context
from app.core.config import get_settings
from app.metrics import generate_metrics_payload, metrics_content_type
from app.platform.dealership.api import auth_router, router as dealerships_router
from app.platform.security.context import AuthContext

router = APIRouter()
router.include_router(auth_router)
router.include_router(dealerships_router)
router.include_router(customers_router)
router.include_router(vehicles_router)
router.include_router(sales_router)


@router.get("/health", tags=["system"])
def health() -> dict[str, str]:
    settings = get_settings()
    return {
        "status": "ok",
        "service": settings.app_name,
        "environment": settings.app_env,
    }


@router.get("/me", tags=["auth"])
def me(ctx: AuthContext = Depends(get_auth_context)) -> dict[str, str | None]:
    return {
        "sub": ctx.subject,
        "dealership_id": ctx.dealership_id,
    }


@router.get("/metrics", tags=["system"])
def metrics(ctx: AuthContext = Depends(get_auth_context)) -> Response:
    settings = get_settings()
    if not settings.metrics_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")
    return Response(content=generate_metrics_payload(), media_type=metrics_content_type())
