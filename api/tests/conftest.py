"""Pytest configuration and shared fixtures.

This module provides:
- An isolated URSHORT_* environment per test (no stray .env, no host vars)
- A helper for building snapshots from plain environment dictionaries
"""

import os
from collections.abc import Callable, Generator

import pytest

from core.config import clear_settings_cache
from services.mapping_loader import LoadResult, load_uri_mappings


@pytest.fixture
def urshort_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path
) -> Generator[Callable[[dict[str, str]], None]]:
    """Start from an empty URSHORT_* environment in an empty working directory.

    Returns a setter that applies a dict of variables for the current test.
    """
    for key in list(os.environ):
        if key.startswith("URSHORT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()

    def _apply(values: dict[str, str]) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key, value)
        clear_settings_cache()

    yield _apply
    clear_settings_cache()


@pytest.fixture
def load() -> Callable[..., LoadResult]:
    """Load a snapshot from an explicit environment dictionary."""

    def _load(environ: dict[str, str], **kwargs) -> LoadResult:
        return load_uri_mappings(environ, "URSHORT", **kwargs)

    return _load
