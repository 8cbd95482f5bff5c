"""Response envelope for one HTTP exchange.

The REST services answer the same endpoint with differently shaped bodies
depending on the status code (payload on 200/201, an error body on 4xx, a
review error on 409). The envelope keeps the raw decoded body and lets the
caller, who knows what each status means for its endpoint, pick the shape.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from pydantic import ValidationError

from ..models import DomainError, UNKNOWN_ERROR_CODE, UNKNOWN_ERROR_MESSAGE

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Body matched the expected status and was accepted by the parser."""

    value: T


@dataclass(frozen=True)
class Failure:
    """Body was a recognizable error."""

    error: DomainError


@dataclass(frozen=True)
class Unrecognized:
    """Body could not be interpreted as the expected shape or as an error."""

    body: Any


Resolution = Union[Success[T], Failure, Unrecognized]


class Response(Generic[T]):
    """HTTP status code plus the decoded JSON body of one exchange.

    ``result`` is typed optimistically as ``T`` but may hold an error body;
    check the status with :meth:`get_result` before trusting it.
    """

    __slots__ = ("_status_code", "_result")

    def __init__(self, status_code: int, result: Optional[T] = None):
        self._status_code = status_code
        self._result = result

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def result(self) -> Optional[T]:
        return self._result

    def get_result(self, expected_status: Optional[int] = None) -> Optional[Any]:
        """Return the body if the status matches.

        Args:
            expected_status: Status code that implies the success shape. If
                omitted the body is returned whatever the status.

        Returns:
            The body (not validated), or None when the status differs or
            there is no body
        """
        if expected_status is not None and expected_status != self._status_code:
            return None
        return self._result

    def get_error(self, fallback_message: str = UNKNOWN_ERROR_MESSAGE) -> DomainError:
        """Interpret the body as an error without validating it.

        A missing body, or one that is not a JSON object, yields
        ``DomainError(code="Unknown", message=fallback_message)``.
        """
        if isinstance(self._result, dict):
            fields = {
                "code": UNKNOWN_ERROR_CODE,
                "message": fallback_message,
                **self._result,
            }
            return DomainError.model_construct(**fields)
        return DomainError(code=UNKNOWN_ERROR_CODE, message=fallback_message)

    def resolve(
        self, expected_status: int, parser: Callable[[Any], U]
    ) -> "Resolution[U]":
        """Classify the exchange into a tagged result.

        Args:
            expected_status: Status code that implies the success shape
            parser: Converts the raw body into the success value and raises
                ``ValueError``/``TypeError`` (pydantic errors included) when
                the body does not fit

        Returns:
            Success, Failure or Unrecognized
        """
        if self._status_code == expected_status:
            try:
                return Success(parser(self._result))
            except (ValueError, TypeError):
                return Unrecognized(self._result)

        if isinstance(self._result, dict) and {"code", "message"} & self._result.keys():
            try:
                return Failure(DomainError.model_validate(self._result))
            except ValidationError:
                pass
        return Unrecognized(self._result)

    def __repr__(self) -> str:
        return f"Response(status_code={self._status_code}, result={self._result!r})"

