"""Pydantic schemas for API responses."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str


class ReadyResponse(HealthResponse):
    """Readiness response with the size of the loaded snapshot."""

    standard_count: int
    pattern_count: int
    skipped_count: int
