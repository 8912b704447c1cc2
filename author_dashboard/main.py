from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from author_dashboard.api.deps import get_change_channel, get_dashboard_session_registry
from author_dashboard.api.routers.dashboard import router as dashboard_router
from author_dashboard.api.routers.me import router as me_router
from author_dashboard.shared.config import get_settings


settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    channel = None
    registry = get_dashboard_session_registry()
    if settings.postgres_dsn:
        channel = get_change_channel()
        # First subscriber: idle sessions are evicted before any session handler runs.
        channel.subscribe(lambda _event: registry.evict_idle())
        channel.start()
    else:
        logger.warning("main: POSTGRES_DSN not set, change polling disabled")
    try:
        yield
    finally:
        registry.close_all()
        if channel is not None:
            channel.stop()


app = FastAPI(title="Author Dashboard API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(dashboard_router)
app.include_router(me_router)
