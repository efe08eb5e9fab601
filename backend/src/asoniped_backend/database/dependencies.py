"""FastAPI dependencies for database access."""

from collections.abc import Iterator
from functools import cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from asoniped_backend.database.service import DatabaseService
from asoniped_backend.settings import BackendSettings, get_settings

SettingsDep = Annotated[BackendSettings, Depends(get_settings)]

_opened: list[DatabaseService] = []


@cache
def _build_database_service(database_url: str) -> DatabaseService:
    """Create a cached :class:`DatabaseService` for the given connection string."""
    service = DatabaseService(database_url)
    _opened.append(service)
    return service


def get_database(settings: SettingsDep) -> DatabaseService:
    """Return the cached database service instance."""
    return _build_database_service(settings.database_url)


def dispose_databases() -> None:
    """Close every pool opened through :func:`get_database` and forget it."""
    _build_database_service.cache_clear()
    while _opened:
        _opened.pop().dispose()


def get_session(
    db: Annotated[DatabaseService, Depends(get_database)],
) -> Iterator[Session]:
    """Yield the request session; it commits once the handler returns."""
    with db.session() as session:
        yield session
