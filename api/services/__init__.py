"""Service layer for redirect resolution.

Services hold the mapping logic and keep routes thin and focused on HTTP
handling:

    Routes (HTTP) -> Services (loading, resolution, template expansion)

Services should:
- Return plain dataclasses (``Redirect``, ``NotFound``, ``LoadResult``)
- Stay pure after startup; the snapshot is never mutated

Services should NOT:
- Know about HTTP request/response details (status codes, headers)
- Read ``os.environ`` themselves; callers pass the environment in
"""

from services.mapping_loader import LoadIssue, LoadResult, load_uri_mappings
from services.resolver import NotFound, Outcome, Redirect, UriMappings

__all__ = [
    "LoadIssue",
    "LoadResult",
    "NotFound",
    "Outcome",
    "Redirect",
    "UriMappings",
    "load_uri_mappings",
]
