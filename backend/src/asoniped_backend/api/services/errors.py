"""Domain exceptions raised by services and translated by routers."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for expected failures of a service operation."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(ServiceError):
    """Raised when the requested entity does not exist."""


class ConflictError(ServiceError):
    """Raised when the operation clashes with stored data."""


class UserAlreadyExistsError(ConflictError):
    """Raised when attempting to create a duplicate user."""


class InvalidTransitionError(ConflictError):
    """Raised when a record is not in a state the action accepts."""


class InvalidCredentialsError(ServiceError):
    """Raised when supplied credentials are invalid."""


class PermissionDeniedError(ServiceError):
    """Raised when the caller may not act on the entity."""


class ValidationFailedError(ServiceError):
    """Raised when a payload passes schema validation but breaks a business rule."""


__all__ = [
    "ConflictError",
    "InvalidCredentialsError",
    "InvalidTransitionError",
    "NotFoundError",
    "PermissionDeniedError",
    "ServiceError",
    "UserAlreadyExistsError",
    "ValidationFailedError",
]
