from contextlib import asynccontextmanager, contextmanager
import logging

from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from app.api.routes import router as api_router
from app.core.config import Settings, get_settings
from app.core.context import RequestContextMiddleware
from app.core.database import SessionLocal, get_db
from app.logging import configure_logging
from app.middleware.correlation_id import CorrelationIdMiddleware
from app.middleware.request_logging import RequestLoggingMiddleware
from app.otel import flush_otel, get_fastapi_server_request_hook, setup_otel
from app.platform.dealership.seed import dealership_seed_helper


configure_logging()
logger = logging.getLogger("app.lifecycle")


@contextmanager
def _startup_session_scope():
    override = app.dependency_overrides.get(get_db) if "app" in globals() else None
    if override is None:
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()
        return

    generator = override()
    session = next(generator)
    try:
        yield session
    finally:
        try:
            next(generator)
        except StopIteration:
            pass


def _seed_root_dealership(settings: Settings) -> None:
    if not settings.root_dealership_name:
        return
    with _startup_session_scope() as session:
        root = dealership_seed_helper.ensure_root_dealership(
            session,
            name=settings.root_dealership_name,
            address=settings.root_dealership_address,
        )
        logger.info("dealership.root.seeded", extra={"dealership_id": root.id})


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        "system.started",
        extra={"service": settings.app_name, "environment": settings.app_env},
    )
    _seed_root_dealership(settings)
    yield
    flush_otel()
    logger.info("system.stopped", extra={"service": settings.app_name})


settings = get_settings()

app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.include_router(api_router)

if settings.otel_enabled:
    setup_otel("dms-api", True)

if not getattr(app, "_is_instrumented_by_opentelemetry", False):
    FastAPIInstrumentor().instrument_app(app, server_request_hook=get_fastapi_server_request_hook())
