"""bcstart.ai roadmap API entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import API_VERSION
from api.routes.health import router as health_router
from api.v1 import build_router
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import GENERATE_LIMIT, READ_LIMIT, WRITE_LIMIT, limiter, rate_limit_exceeded_handler

logger = structlog.get_logger()

setup_logging()

DESCRIPTION = f"""\
## B Corp certification roadmap

Tracks the tasks a business must complete across the five B Corp impact
areas (Governance, Workers, Community, Environment, Customers) and reports
progress per area.

### Authentication
Every `/api/v1` route needs a Supabase session token:
```
Authorization: Bearer <token>
```

### Rate limits
- reads: {READ_LIMIT}
- writes: {WRITE_LIMIT}
- task generation and resets: {GENERATE_LIMIT}
"""


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "app_started",
        environment=settings.app_env,
        test_data_reset_enabled=app.state.test_data_reset_enabled,
        strict_status_transitions=settings.strict_status_transitions,
        task_generation_configured=bool(settings.task_generation_url),
    )
    if app.state.test_data_reset_enabled and settings.is_production:
        logger.warning("test_data_reset_enabled_in_production")
    yield
    logger.info("app_stopped")


def _openapi_tags(include_dev: bool) -> list[dict[str, str]]:
    tags = [
        {"name": "health", "description": "Liveness and readiness probes"},
        {"name": "businesses", "description": "Businesses, their roadmaps and progress"},
        {"name": "todos", "description": "Task lifecycle"},
        {"name": "sub-areas", "description": "Sub-area registry"},
        {"name": "files", "description": "Evidence files attached to tasks"},
    ]
    if include_dev:
        tags.append({"name": "dev", "description": "Development data resets"})
    return tags


def _add_middleware(app: FastAPI) -> None:
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Last added runs first.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(enable_test_data_reset: bool | None = None) -> FastAPI:
    """Build the API. ``enable_test_data_reset`` overrides the setting of the same name."""
    if enable_test_data_reset is None:
        enable_test_data_reset = settings.enable_test_data_reset

    app = FastAPI(
        title=settings.app_name,
        description=DESCRIPTION,
        version=API_VERSION,
        debug=settings.debug,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        openapi_tags=_openapi_tags(enable_test_data_reset),
    )
    app.state.test_data_reset_enabled = enable_test_data_reset

    _add_middleware(app)
    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(build_router(include_dev=enable_test_data_reset), prefix="/api/v1")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
