import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marquee.core.config import get_settings
from marquee.core.container import ServiceContainer
from marquee.db import Base, SessionLocal, engine
from marquee import models  # ensure models are imported
from marquee.routers import auth, bookings, health, movies, watchlist

logger = logging.getLogger(__name__)


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Table creation for first deploys (idempotent)
        if settings.AUTO_CREATE_TABLES:
            Base.metadata.create_all(bind=engine)
        yield
        app.state.container.shutdown()

    app = FastAPI(
        title="Marquee API",
        description="Movie discovery, watchlist and ticket booking",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(movies.router)
    app.include_router(watchlist.router)
    app.include_router(bookings.router)

    app.state.container = container or ServiceContainer.from_settings(SessionLocal, settings)
    return app


app = create_app()
