"""Exceptions raised by the FishEye/Crucible connector.

Transport failures (DNS, refused connections, TLS, protocol errors) are not
represented here: they surface as the original ``httpx`` exceptions.
"""

from typing import TYPE_CHECKING, Any, Optional

from .models import DomainError, ReviewError, UNKNOWN_ERROR_MESSAGE

if TYPE_CHECKING:
    from .util.response import Response


class ConnectorError(Exception):
    """Base exception for connector errors."""

    pass


class ConfigurationError(ConnectorError, ValueError):
    """Exception raised when connector configuration is invalid."""

    pass


class ApiError(ConnectorError):
    """A completed HTTP exchange whose status was not the expected one.

    Args:
        error: Error body reported by the server (or the default error)
        status_code: HTTP status code of the exchange
        body: Raw decoded response body
    """

    def __init__(
        self, error: DomainError, status_code: Optional[int] = None, body: Any = None
    ):
        super().__init__(f"{error.code}: {error.message}")
        self.error = error
        self.status_code = status_code
        self.body = body

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @classmethod
    def from_response(
        cls, response: "Response", fallback_message: str = UNKNOWN_ERROR_MESSAGE
    ) -> "ApiError":
        """Build the error for an unexpected response; never fails."""
        return cls(
            response.get_error(fallback_message),
            status_code=response.status_code,
            body=response.result,
        )


class ReviewConflictError(ApiError):
    """Review transition rejected because review conditions failed (HTTP 409)."""

    def __init__(
        self,
        review_error: ReviewError,
        status_code: Optional[int] = 409,
        body: Any = None,
    ):
        super().__init__(review_error, status_code=status_code, body=body)
        self.review_error = review_error

    @property
    def failed_conditions(self):
        return self.review_error.failed_conditions
