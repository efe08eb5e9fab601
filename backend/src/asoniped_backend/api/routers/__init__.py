"""Route definitions for the public HTTP endpoints."""

from asoniped_backend.api.routers.anonymous_tickets import (
    router as anonymous_tickets_router,
)
from asoniped_backend.api.routers.donation_tickets import (
    router as donation_tickets_router,
)
from asoniped_backend.api.routers.donations import router as donations_router
from asoniped_backend.api.routers.health import router as health_router
from asoniped_backend.api.routers.records import router as records_router
from asoniped_backend.api.routers.rooms import router as ticket_rooms_router
from asoniped_backend.api.routers.ticket_messages import (
    router as ticket_messages_router,
)
from asoniped_backend.api.routers.users import router as users_router
from asoniped_backend.api.routers.volunteers import (
    options_router as volunteer_options_router,
)
from asoniped_backend.api.routers.volunteers import (
    registrations_router as volunteer_registrations_router,
)
from asoniped_backend.api.routers.volunteers import (
    volunteers_router,
)

__all__ = [
    "anonymous_tickets_router",
    "donation_tickets_router",
    "donations_router",
    "health_router",
    "records_router",
    "ticket_messages_router",
    "ticket_rooms_router",
    "users_router",
    "volunteer_options_router",
    "volunteer_registrations_router",
    "volunteers_router",
]
