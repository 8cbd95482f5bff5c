"""Per-request options: media types, TLS validation and timeout."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union


class ContentType(str, Enum):
    """Media types used by the REST services."""

    JSON = "application/json"
    FORM = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class RequestOptions:
    """Options for one HTTP exchange.

    Args:
        content_type: Media type of the outgoing body
        accept_type: Media type requested for the response body
        ignore_ssl_error: Accept untrusted certificates when True
        timeout: Transport timeout in seconds (None: httpx default)
    """

    content_type: str = ContentType.JSON.value
    accept_type: str = ContentType.JSON.value
    ignore_ssl_error: bool = False
    timeout: Optional[float] = None

    @property
    def verify(self) -> bool:
        return not self.ignore_ssl_error

    @property
    def headers(self) -> Dict[str, str]:
        return {"Content-Type": self.content_type, "Accept": self.accept_type}


def create_request_options(
    request_mime_type: Union[ContentType, str] = ContentType.JSON,
    result_mime_type: Union[ContentType, str] = ContentType.JSON,
    ignore_ssl_error: bool = False,
    timeout: Optional[float] = None,
) -> RequestOptions:
    """Build fresh request options; JSON in and out by default."""
    return RequestOptions(
        content_type=ContentType(request_mime_type).value,
        accept_type=ContentType(result_mime_type).value,
        ignore_ssl_error=ignore_ssl_error,
        timeout=timeout,
    )
