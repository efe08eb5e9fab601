"""Field patterns and payloads shared by several endpoints."""

from __future__ import annotations

from pydantic import BaseModel

USERNAME_PATTERN = r"^[A-Za-z]{1,15}$"
PHONE_PATTERN = r"^\d{8}$"
PASSWORD_PATTERN = r"^[A-Za-z0-9]{6,20}$"
CEDULA_PATTERN = r"^[A-Za-z0-9-]{5,32}$"


def require_two_words(value: str) -> str:
    """Validate that a full name holds at least first and last name."""
    if len(value.split()) < 2:
        msg = "full name must contain at least two words"
        raise ValueError(msg)
    return value.strip()


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by mutating endpoints."""

    message: str
