"""Connector facade for FishEye/Crucible servers."""

import asyncio
import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from .api.common import CommonApi
from .api.crucible import CrucibleApi
from .api.fisheye import FisheyeApi
from .config import DEFAULT_TIMEOUT, ConnectorConfig
from .models import Authentication
from .util.auth import AuthHandler, AuthHandlerRegistry
from .util.request_options import ContentType, RequestOptions, create_request_options
from .util.rest_uri import RestUri
from .util.sub_connector import ParentConnectorReference

logger = logging.getLogger(__name__)


class Connector:
    """Entry point to the FishEye/Crucible REST APIs.

    With ``use_access_token`` the connector logs in on construction and
    prefers the returned token over basic authentication. The login runs in
    the background when an event loop is running; ``await ready()`` waits
    for it. Requests issued before it finishes use basic authentication.

    Args:
        host: Server URL including scheme and port
        username: Username for basic authentication and login
        password: Password for basic authentication and login
        use_access_token: Exchange the credentials for an access token
        ignore_ssl_error: Accept untrusted TLS certificates
        web_context: Context path the server is deployed under, if any
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        use_access_token: bool = True,
        ignore_ssl_error: bool = False,
        web_context: Optional[str] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        self.host = host.rstrip("/")
        self.web_context = web_context.strip("/") if web_context else None
        self.ignore_ssl_error = ignore_ssl_error
        self.timeout = timeout
        self._auth = AuthHandlerRegistry(
            username, password, self._login if use_access_token else None
        )
        self._refresh_task: Optional[asyncio.Task] = None

        parent = ParentConnectorReference(
            get_host=lambda: self.host,
            get_web_context=lambda: self.web_context,
            get_auth_handlers=self.get_auth_handlers,
            create_request_options=self.create_request_options,
        )
        self.common = CommonApi(parent)
        self.crucible = CrucibleApi(parent)
        self.fisheye = FisheyeApi(parent)

        if use_access_token:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running event loop, login deferred until ready()")
            else:
                self._refresh_task = loop.create_task(self.refresh_access_token())

    @classmethod
    def from_config(cls, config: ConnectorConfig) -> "Connector":
        return cls(
            config.host,
            config.username,
            config.password,
            use_access_token=config.use_access_token,
            ignore_ssl_error=config.ignore_ssl_error,
            web_context=config.web_context,
            timeout=config.timeout,
        )

    @property
    def use_access_token(self) -> bool:
        return self._auth.use_access_token

    def get_auth_handlers(self) -> List[AuthHandler]:
        """Current handlers, token handler first when one is installed."""
        return self._auth.get_auth_handlers()

    def create_request_options(self, **kwargs: Any) -> RequestOptions:
        """Request options with this connector's TLS and timeout settings."""
        kwargs.setdefault("ignore_ssl_error", self.ignore_ssl_error)
        kwargs.setdefault("timeout", self.timeout)
        return create_request_options(**kwargs)

    async def refresh_access_token(self) -> bool:
        """Log in again and install the new token.

        Returns:
            True if a token is in use afterwards
        """
        return await self._auth.refresh_access_token()

    async def ready(self) -> bool:
        """Wait for the initial login.

        Starts it if no event loop was running at construction. A login
        cancelled by :meth:`close` counts as not logged in.

        Returns:
            True if an access token is in use
        """
        if not self.use_access_token:
            return False
        if self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self.refresh_access_token())
        if self._refresh_task.cancelled():
            return False
        return await self._refresh_task

    async def _login(self) -> Optional[str]:
        uri = RestUri(
            self.host,
            [self._auth.basic_handler],
            self.create_request_options(request_mime_type=ContentType.FORM),
        )
        response = await (
            uri.add_segment(self.web_context)
            .add_segment("/rest-service-fecru/auth/login")
            .post(
                "get-auth-token",
                {
                    "userName": self._auth.basic_handler.username,
                    "password": self._auth.basic_handler.password,
                },
            )
        )
        body = response.get_result(200)
        if body is None:
            error = response.get_error("Login failed")
            logger.warning(
                f"Login rejected with HTTP {response.status_code}: {error.message}"
            )
            return None
        try:
            return Authentication.model_validate(body).token
        except ValidationError as e:
            logger.warning(f"Unexpected login response: {e}")
            return None

    async def close(self) -> None:
        """Cancel a pending token refresh."""
        task = self._refresh_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def __aenter__(self) -> "Connector":
        if self.use_access_token and self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self.refresh_access_token())
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"Connector(host={self.host!r}, web_context={self.web_context!r}, "
            f"use_access_token={self.use_access_token})"
        )
