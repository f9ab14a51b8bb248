from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from api.routes import router
from console.runner import ActionRunner
from console.session import SessionState
from console.transport import close_http_clients
from core.config import settings
from core.logging_setup import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("stack_console_started env=%s", settings.env)
    yield
    await close_http_clients()
    logger.info("stack_console_stopped")


def create_app(session: SessionState | None = None) -> FastAPI:
    setup_logging(settings.log_level)
    app = FastAPI(title="Stack Console", lifespan=lifespan)
    app.state.session = session or SessionState()
    app.state.runner = ActionRunner()
    app.include_router(router)
    if os.path.isdir(settings.ui_dir):
        app.mount("/ui", StaticFiles(directory=settings.ui_dir, html=True), name="ui")
    else:
        logger.warning("ui_dir_missing: %s", settings.ui_dir)

    @app.get("/metrics")
    async def metrics() -> Response:
        if not settings.metrics_enabled:
            return Response(status_code=404)
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
