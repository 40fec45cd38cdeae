"""Request and response schemas for the NARA API."""

from __future__ import annotations

from pydantic import BaseModel


class RootResponse(BaseModel):
    status: int
    message: str


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    message: str
    error: str | None = None
