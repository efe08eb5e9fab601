"""Tests for the shared database registry."""

from collections.abc import Iterator

import pytest
from sqlalchemy import text

from asoniped_backend.database import dispose_databases, get_database, get_session
from asoniped_backend.database.dependencies import _build_database_service
from asoniped_backend.settings import BackendSettings


@pytest.fixture(autouse=True)
def _clean_registry() -> Iterator[None]:
    dispose_databases()
    yield
    dispose_databases()


def test_get_database_reuses_service_per_url() -> None:
    settings = BackendSettings(database_url="sqlite://")

    first = get_database(settings)
    second = get_database(BackendSettings(database_url="sqlite://"))

    assert first is second


def test_dispose_databases_forgets_services() -> None:
    settings = BackendSettings(database_url="sqlite://")
    first = get_database(settings)

    dispose_databases()

    assert get_database(settings) is not first


def test_get_session_yields_working_session() -> None:
    service = get_database(BackendSettings(database_url="sqlite://"))
    sessions = get_session(service)

    session = next(sessions)
    assert session.scalar(text("SELECT 1")) == 1
    sessions.close()


def test_dispose_databases_clears_builder_cache() -> None:
    get_database(BackendSettings(database_url="sqlite://"))
    assert _build_database_service.cache_info().currsize == 1

    dispose_databases()

    assert _build_database_service.cache_info().currsize == 0
