"""Shared pytest fixtures for connector tests."""

import pytest

from fecru_connector import Connector
from fecru_connector.util.auth import BasicHandler
from fecru_connector.util.request_options import create_request_options
from fecru_connector.util.rest_uri import RestUri

HOST = "https://fecru.example.com"


@pytest.fixture
def host() -> str:
    return HOST


@pytest.fixture
def connector() -> Connector:
    """Connector in credential-only mode, so no login request is issued."""
    return Connector(HOST, "alice", "secret", use_access_token=False)


@pytest.fixture
def make_rest_uri():
    """Factory for RestUri instances authenticated as alice."""

    def _make(*segments: str, handlers=None, **options) -> RestUri:
        uri = RestUri(
            HOST,
            handlers if handlers is not None else [BasicHandler("alice", "secret")],
            create_request_options(**options),
        )
        for segment in segments:
            uri.add_segment(segment)
        return uri

    return _make
