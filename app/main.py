from __future__ import annotations

import logging
import os

import uvicorn
from fastapi import FastAPI

from app.config import get_commerce_settings, load_env_files


def _validate_env() -> None:
    """
    Validate process-wide configuration at startup.

    Only the commerce transport is checked eagerly; vendor and licensing
    credentials are optional and reported per call when missing.
    """

    load_env_files()
    try:
        get_commerce_settings()
    except RuntimeError as exc:
        raise RuntimeError(f"Startup validation failed: {exc}") from exc


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Commerce Insights Connector",
        version="1.0.0",
    )

    from app.api.routers import connector_router, insight_router, licensing_router

    application.include_router(connector_router)
    application.include_router(insight_router)
    application.include_router(licensing_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    logging.getLogger(__name__).info("Connector API initialized")
    return application


app = create_app()


def run() -> None:
    """
    Serve the API with uvicorn on `HOST`:`PORT`.
    """

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    run()
