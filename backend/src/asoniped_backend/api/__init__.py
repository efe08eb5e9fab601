"""API layer: routers, request models, services and dependencies."""

from asoniped_backend.api.app import create_api

__all__ = ["create_api"]
