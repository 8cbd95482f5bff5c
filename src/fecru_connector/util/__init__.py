"""Request/response core: URI building, authentication and transport."""

from .auth import (
    AuthHandler,
    AuthHandlerChain,
    AuthHandlerRegistry,
    BasicHandler,
    TokenHandler,
)
from .request_options import ContentType, RequestOptions, create_request_options
from .response import Failure, Resolution, Response, Success, Unrecognized
from .rest_uri import RestUri
from .sub_connector import ParentConnectorReference, SubConnector
from .uri import JOIN, REPEAT, Uri

__all__ = [
    "AuthHandler",
    "AuthHandlerChain",
    "AuthHandlerRegistry",
    "BasicHandler",
    "ContentType",
    "Failure",
    "JOIN",
    "ParentConnectorReference",
    "REPEAT",
    "RequestOptions",
    "Resolution",
    "Response",
    "RestUri",
    "Success",
    "SubConnector",
    "TokenHandler",
    "Unrecognized",
    "Uri",
    "create_request_options",
]
