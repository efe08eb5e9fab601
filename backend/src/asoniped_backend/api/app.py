"""Factory for constructing the FastAPI application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from asoniped_backend.api.errors import register_exception_handlers
from asoniped_backend.api.routers import (
    anonymous_tickets_router,
    donation_tickets_router,
    donations_router,
    health_router,
    records_router,
    ticket_messages_router,
    ticket_rooms_router,
    users_router,
    volunteer_options_router,
    volunteer_registrations_router,
    volunteers_router,
)
from asoniped_backend.api.services import TicketRooms
from asoniped_backend.database import dispose_databases
from asoniped_backend.logging_config import configure_logging
from asoniped_backend.settings import BackendSettings, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting %s", app.title)
    yield
    dispose_databases()
    logger.info("Database pools closed")


def create_api(settings: BackendSettings | None = None) -> FastAPI:
    """Instantiate and configure the FastAPI application.

    Passing ``settings`` pins them for every request handled by the app.
    """
    config = settings or get_settings()
    configure_logging(config.log_level)

    app = FastAPI(title="ASONIPED API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.state.ticket_rooms = TicketRooms()
    if settings is not None:
        app.dependency_overrides[get_settings] = lambda: settings

    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(donations_router)
    app.include_router(donation_tickets_router)
    app.include_router(ticket_messages_router)
    app.include_router(ticket_rooms_router)
    app.include_router(anonymous_tickets_router)
    app.include_router(records_router)
    app.include_router(volunteer_options_router)
    app.include_router(volunteers_router)
    app.include_router(volunteer_registrations_router)
    return app
