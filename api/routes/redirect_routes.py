"""Redirect routes: welcome page and the catch-all resolver.

Registered last so ``/health`` and ``/ready`` are never shadowed by a
mapping with the same key.
"""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette import status

from core.config import get_settings
from core.templates import templates
from services.resolver import NotFound, UriMappings

logger = logging.getLogger(__name__)

router = APIRouter(include_in_schema=False)


def _get_mappings(request: Request) -> UriMappings:
    mappings: UriMappings | None = getattr(request.app.state, "mappings", None)
    if mappings is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Starting",
        )
    return mappings


@router.get("/", response_class=HTMLResponse)
async def welcome(request: Request) -> HTMLResponse:
    """Show that the service is up and how many redirects it knows."""
    mappings = _get_mappings(request)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "standard_count": len(mappings.standard),
            "pattern_count": len(mappings.patterns),
        },
    )


@router.get("/{path:path}")
async def redirect(request: Request, path: str) -> Response:
    """Redirect to the configured destination or render the 404 page."""
    mappings = _get_mappings(request)
    outcome = mappings.resolve(path)

    if isinstance(outcome, NotFound):
        logger.info(
            "redirect.not_found",
            extra={"path": path, "reason": outcome.reason},
        )
        return templates.TemplateResponse(
            request,
            "error.html",
            {"path": f"/{path}"},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    status_code = get_settings().redirect_status_code
    logger.info(
        "redirect.resolved",
        extra={"path": path, "location": outcome.url, "status_code": status_code},
    )
    return RedirectResponse(url=outcome.url, status_code=status_code)
