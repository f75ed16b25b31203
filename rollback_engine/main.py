"""
Rollback trigger API.

Exposes the rollback orchestrator to an external scheduler, an operator
action, or an alarm webhook.

Usage:
    uvicorn rollback_engine.main:app
"""

import logging
import os

from fastapi import FastAPI

from rollback_engine import __version__
from rollback_engine.api.v1 import health, rollback
from rollback_engine.config import settings
from rollback_engine.middleware import ErrorHandlingMiddleware, LoggingMiddleware


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Rollback Engine",
        description="Automated stage and full rollback of unhealthy deployments",
        version=__version__,
    )

    # Last added is first executed
    app.add_middleware(LoggingMiddleware, enable_detailed_logging=False)
    app.add_middleware(ErrorHandlingMiddleware, enable_error_logging=True)

    app.include_router(health.router)
    app.include_router(rollback.router, prefix="/api/v1", tags=["rollback"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8001))
    uvicorn.run("rollback_engine.main:app", host="0.0.0.0", port=port, log_level="info")
