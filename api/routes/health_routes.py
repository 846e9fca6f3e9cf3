"""Health check endpoints."""

from fastapi import APIRouter, HTTPException, Request
from starlette import status

from schemas import HealthResponse, ReadyResponse

SERVICE_NAME = "urshort"

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", service=SERVICE_NAME)


@router.get(
    "/ready",
    response_model=ReadyResponse,
    responses={
        503: {
            "description": "Service unavailable - mappings not loaded yet",
            "content": {"application/json": {"example": {"detail": "Starting"}}},
        }
    },
)
async def ready(request: Request) -> ReadyResponse:
    """Readiness endpoint.

    Returns 200 only once the redirect snapshot has been published by the
    application lifespan. Skipped entries do not make the service unready.
    """
    mappings = getattr(request.app.state, "mappings", None)
    if mappings is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Starting",
        )

    issues = getattr(request.app.state, "load_issues", ())
    return ReadyResponse(
        status="ready",
        service=SERVICE_NAME,
        standard_count=len(mappings.standard),
        pattern_count=len(mappings.patterns),
        skipped_count=len(issues),
    )
