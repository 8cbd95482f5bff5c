"""Base class for the endpoint groups of a connector."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from ..errors import ApiError, ReviewConflictError
from ..models import ReviewError
from .auth import AuthHandler
from .request_options import RequestOptions
from .response import Response
from .rest_uri import RestUri

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParentConnectorReference:
    """What an endpoint group needs from its connector.

    The accessors are read on every request, so a token installed after the
    group was created is picked up by its next call.
    """

    get_host: Callable[[], str]
    get_web_context: Callable[[], Optional[str]]
    get_auth_handlers: Callable[[], List[AuthHandler]]
    create_request_options: Callable[..., RequestOptions]


class SubConnector:
    """Builds request URIs and turns unexpected responses into exceptions."""

    def __init__(self, parent: ParentConnectorReference):
        self.parent = parent

    def _get_rest_uri(self, base: str, **option_overrides: Any) -> RestUri:
        uri = RestUri(
            self.parent.get_host(),
            self.parent.get_auth_handlers(),
            self.parent.create_request_options(**option_overrides),
        )
        return uri.add_segment(self.parent.get_web_context()).add_segment(base)

    @staticmethod
    def _result_or_raise(
        response: Response, status: int = 200, fallback_message: Optional[str] = None
    ) -> Any:
        """Body of a response with the expected status, else ApiError.

        An empty body is an error even with the expected status; endpoints
        that answer without a body use :meth:`_expect_status`.
        """
        if response.status_code != status:
            raise ApiError.from_response(
                response, fallback_message or f"Unexpected HTTP {response.status_code}"
            )
        result = response.get_result(status)
        if result is None:
            raise ApiError.from_response(
                response, fallback_message or f"Empty response body with HTTP {status}"
            )
        return result

    @staticmethod
    def _expect_status(response: Response, *statuses: int) -> None:
        """Raise ApiError unless the status is one of ``statuses``."""
        if response.status_code not in statuses:
            raise ApiError.from_response(
                response, f"Unexpected HTTP {response.status_code}"
            )

    @staticmethod
    def _raise_review_conflict(response: Response) -> None:
        """Raise ReviewConflictError for a 409 response."""
        if response.status_code != 409:
            return
        body = response.result
        try:
            review_error = ReviewError.model_validate(body if isinstance(body, dict) else {})
        except ValidationError as e:
            logger.debug(f"Conflict body is not a review error: {e}")
            review_error = ReviewError()
        raise ReviewConflictError(review_error, status_code=409, body=body)
