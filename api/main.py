# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-27
# Description: main.py
# -----------------------------------------------------------------------------
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from api.AppContainer import AppContainer
from api.routers import health, search, chat, index, members
import logging

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger(__name__)


def create_app(container: Optional[AppContainer] = None) -> FastAPI:
    """
    Build the API. The container is created once in the lifespan unless one
    is injected (tests).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        c = container or AppContainer.from_env()
        app.state.container = c
        c.start()
        logger.info("Member Directory API started")
        try:
            yield
        finally:
            c.shutdown()
            logger.info("Member Directory API stopped")

    app = FastAPI(title="Member Directory API", lifespan=lifespan)
    app.include_router(health.router)
    app.include_router(search.router)
    app.include_router(chat.router)
    app.include_router(index.router)
    app.include_router(members.router)
    return app


app = create_app()
