import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = app.state.settings
    logger.info(
        "Application startup initiated, providers=%s",
        app.state.oauth_service.registry.list_providers(),
    )
    logger.info(
        "Listening on %s:%s, callbacks under %s",
        settings.host,
        settings.port,
        settings.base_url,
    )
    yield
    logger.info("Application shutdown initiated")
    await app.state.http_client.close()
