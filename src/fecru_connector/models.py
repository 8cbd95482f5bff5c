"""Wire models shared by the core and the sub-APIs.

Only the shapes the request/response core itself depends on are modelled
here; resource payloads travel as decoded JSON.
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_ERROR_CODE = "Unknown"
UNKNOWN_ERROR_MESSAGE = "Unknown error"


class DomainError(BaseModel):
    """Error body returned by the REST services on a non-success status."""

    model_config = ConfigDict(extra="allow")

    code: str = Field(UNKNOWN_ERROR_CODE, description="Error code")
    message: str = Field(UNKNOWN_ERROR_MESSAGE, description="Error message")


DEFAULT_ERROR = DomainError(code=UNKNOWN_ERROR_CODE, message=UNKNOWN_ERROR_MESSAGE)


class FailedCondition(BaseModel):
    """One review condition that blocked a transition."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    message: Optional[str] = None
    help_url: Optional[str] = Field(None, alias="helpUrl")


class ReviewError(DomainError):
    """Business-rule violation returned with HTTP 409 by review endpoints."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    failed_conditions: List[FailedCondition] = Field(
        default_factory=list, alias="failedConditions"
    )


class Authentication(BaseModel):
    """Body of a successful login exchange."""

    token: str


@dataclass
class PagedRequestOptions:
    """Paging parameters accepted by the ``*-paged`` endpoints."""

    limit: Optional[int] = None
    start: Optional[int] = None


class PagedResponse(BaseModel):
    """One page of a paged listing."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    start: int = 0
    limit: int = 0
    last_page: bool = Field(False, alias="lastPage")
    size: int = 0
    values: List[Any] = Field(default_factory=list)

