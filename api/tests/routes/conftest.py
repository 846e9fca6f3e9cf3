"""Route test configuration: a TestClient bound to a chosen environment."""

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client_for(urshort_env) -> Callable[..., AbstractContextManager[TestClient]]:
    """Return a factory that starts the app with the given URSHORT_* variables.

    The lifespan runs on entering the context, so the snapshot is loaded from
    exactly the variables passed in.
    """
    from main import app

    @contextmanager
    def _client(env: dict[str, str] | None = None) -> Iterator[TestClient]:
        urshort_env(env or {})
        with TestClient(app, follow_redirects=False) as client:
            yield client

    return _client
