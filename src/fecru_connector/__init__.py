"""Typed async client for the FishEye/Crucible REST APIs."""

__version__ = "0.1.0"

from .config import ConnectorConfig, load_config
from .connector import Connector
from .errors import ApiError, ConfigurationError, ConnectorError, ReviewConflictError
from .models import (
    Authentication,
    DomainError,
    FailedCondition,
    PagedRequestOptions,
    PagedResponse,
    ReviewError,
)
from .paging import get_next_paged_request_options, iterate_pages

__all__ = [
    "ApiError",
    "Authentication",
    "ConfigurationError",
    "Connector",
    "ConnectorConfig",
    "ConnectorError",
    "DomainError",
    "FailedCondition",
    "PagedRequestOptions",
    "PagedResponse",
    "ReviewConflictError",
    "ReviewError",
    "get_next_paged_request_options",
    "iterate_pages",
    "load_config",
]
