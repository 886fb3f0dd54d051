"""
Response envelopes shared by several routers and the app-level error handlers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Confirmation for operations that return no resource.

    Attributes:
        affected: Number of rows changed, when the operation is a bulk update.
    """

    message: str
    affected: int | None = Field(default=None, ge=0)


class ValidationErrorResponse(BaseModel):
    """Body of every 400 raised by request validation."""

    detail: str = "Validation failed"
    errors: list[dict[str, Any]] = Field(default_factory=list)
