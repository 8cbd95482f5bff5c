"""Authentication handlers and the handler registry.

A connector starts in credential-only mode with a basic handler. When
access tokens are enabled it exchanges the credentials for a token and from
then on offers the token handler first and the basic handler as fallback.
"""

import base64
import logging
from typing import Awaitable, Callable, Generator, List, Optional, Sequence, Tuple

import httpx

logger = logging.getLogger(__name__)

LoginExchange = Callable[[], Awaitable[Optional[str]]]


class AuthHandler(httpx.Auth):
    """One way of attaching credentials to an outgoing request."""

    def prepare_request(self, request: httpx.Request) -> None:
        raise NotImplementedError

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        self.prepare_request(request)
        yield request


class BasicHandler(AuthHandler):
    """HTTP basic authentication with username and password."""

    def __init__(self, username: str, password: str):
        self.username = username
        self._password = password
        credentials = f"{username}:{password}".encode("utf-8")
        self._header = "Basic " + base64.b64encode(credentials).decode("ascii")

    @property
    def password(self) -> str:
        return self._password

    def prepare_request(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = self._header

    def __repr__(self) -> str:
        return f"BasicHandler(username={self.username!r})"


class TokenHandler(AuthHandler):
    """Bearer token obtained from the login exchange."""

    def __init__(self, token: str):
        self.token = token

    def prepare_request(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = f"Bearer {self.token}"

    def __repr__(self) -> str:
        return f"TokenHandler(token={self.token[:6]!r}...)"


class AuthHandlerChain(httpx.Auth):
    """Try handlers in order, moving to the next one on HTTP 401.

    The response to the last handler's attempt is returned as-is.
    """

    requires_request_body = True

    def __init__(self, handlers: Sequence[AuthHandler]):
        if not handlers:
            raise ValueError("At least one authentication handler is required")
        self.handlers = tuple(handlers)

    @staticmethod
    def _copy_request(request: httpx.Request) -> httpx.Request:
        headers = request.headers.copy()
        headers.pop("Authorization", None)
        return httpx.Request(
            request.method,
            request.url,
            headers=headers,
            content=request.content,
            extensions=request.extensions,
        )

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        last = len(self.handlers) - 1
        for index, handler in enumerate(self.handlers):
            if index > 0:
                # sent requests stay untouched in the response history
                request = self._copy_request(request)
            handler.prepare_request(request)
            response = yield request
            if response.status_code != 401 or index == last:
                return
            logger.debug(
                f"{type(handler).__name__} rejected with 401, "
                f"retrying with {type(self.handlers[index + 1]).__name__}"
            )


class AuthHandlerRegistry:
    """Holds the basic handler and the optional token handler.

    The current handler list is kept as a single tuple that is replaced as a
    whole, so concurrent readers never observe a half-updated state.

    Args:
        username: Username for basic authentication and login
        password: Password for basic authentication and login
        login: Coroutine function performing the login exchange; returns the
            token or None. Token mode is disabled when omitted.
    """

    def __init__(
        self, username: str, password: str, login: Optional[LoginExchange] = None
    ):
        self._basic_handler = BasicHandler(username, password)
        self._login = login
        self._handlers: Tuple[AuthHandler, ...] = (self._basic_handler,)
        self._successful_refreshes = 0

    @property
    def use_access_token(self) -> bool:
        return self._login is not None

    @property
    def basic_handler(self) -> BasicHandler:
        return self._basic_handler

    @property
    def token_handler(self) -> Optional[TokenHandler]:
        head = self._handlers[0]
        return head if isinstance(head, TokenHandler) else None

    def get_auth_handlers(self) -> List[AuthHandler]:
        """Current handlers, preferred first: [token, basic] or [basic]."""
        return list(self._handlers)

    def install_token(self, token: str) -> None:
        """Switch to token-preferred mode with a new token handler."""
        self._handlers = (TokenHandler(token), self._basic_handler)

    def clear_token(self) -> None:
        """Fall back to credential-only mode."""
        self._handlers = (self._basic_handler,)

    async def refresh_access_token(self) -> bool:
        """Run the login exchange and install the returned token.

        Failures never propagate: the registry logs them and stays (or
        goes back to) credential-only. A failing refresh does not discard
        a token installed by a refresh that succeeded after it started.
        Safe to call concurrently.

        Returns:
            True if a token is installed afterwards by this call
        """
        if self._login is None:
            self.clear_token()
            return False

        successes_at_start = self._successful_refreshes
        try:
            token = await self._login()
        except Exception as e:
            logger.warning(f"Access token refresh failed: {e}")
            token = None

        if token:
            self._successful_refreshes += 1
            self.install_token(token)
            logger.debug("Access token refreshed")
            return True

        if self._successful_refreshes == successes_at_start:
            self.clear_token()
        logger.warning("No access token obtained; using basic authentication")
        return False
