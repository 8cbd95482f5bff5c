"""URI builder with REST verb operations.

Every operation renders the URI, sends one request with the given
authentication handlers and options, and returns a :class:`Response` for
any completed HTTP exchange, 4xx and 5xx included. Transport failures are
raised as the original ``httpx`` exceptions; nothing is retried.
"""

import json
import logging
import os
import tempfile
from typing import IO, Any, Dict, Mapping, Optional, Sequence, Union

import httpx

from .auth import AuthHandler, AuthHandlerChain
from .request_options import ContentType, RequestOptions
from .response import Response
from .uri import Uri

logger = logging.getLogger(__name__)

UploadSource = Union[bytes, IO[bytes]]


def decode_body(response: httpx.Response) -> Any:
    """Decode a JSON body; empty or non-JSON bodies decode to None."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        logger.debug(
            f"Response body with status {response.status_code} is not JSON, ignoring it"
        )
        return None


class RestUri(Uri):
    """URI that can issue REST requests against its host.

    Args:
        host: Host information (e.g. ``https://crucible.example.com:8060``)
        auth_handlers: Authentication handlers, preferred first
        request_options: Options used for every request from this URI
    """

    def __init__(
        self,
        host: str,
        auth_handlers: Sequence[AuthHandler],
        request_options: RequestOptions,
    ):
        super().__init__(host)
        self.auth_handlers = list(auth_handlers)
        self.request_options = request_options

    @property
    def host(self) -> str:
        return self.base

    def _create_client(self) -> httpx.AsyncClient:
        client_args: Dict[str, Any] = {
            "verify": self.request_options.verify,
            "follow_redirects": True,
        }
        # httpx treats an explicit None as "no timeout at all"
        if self.request_options.timeout is not None:
            client_args["timeout"] = self.request_options.timeout
        return httpx.AsyncClient(**client_args)

    def _auth(self) -> Optional[httpx.Auth]:
        return AuthHandlerChain(self.auth_handlers) if self.auth_handlers else None

    def _body_arguments(
        self, content: Any, content_type: Optional[str] = None
    ) -> Dict[str, Any]:
        if content is None:
            return {}
        if (content_type or self.request_options.content_type) == ContentType.FORM.value:
            if isinstance(content, Mapping):
                return {"data": dict(content)}
            return {"content": content}
        return {"json": content}

    async def _send(
        self,
        id: str,
        method: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> Response[Any]:
        url = self.to_string()
        logger.debug(f"{id}: {method} {url}")
        async with self._create_client() as client:
            response = await client.request(
                method,
                url,
                headers=headers if headers is not None else self.request_options.headers,
                auth=self._auth(),
                **kwargs,
            )
        logger.debug(f"{id}: HTTP {response.status_code}")
        return Response(response.status_code, decode_body(response))

    async def get(self, id: str) -> Response[Any]:
        """HTTP GET.

        Args:
            id: Operation identifier, used for diagnostics only
        """
        return await self._send(id, "GET")

    async def create(self, id: str, content: Any = None) -> Response[Any]:
        """HTTP POST with a JSON body."""
        return await self._send(id, "POST", **self._body_arguments(content))

    async def update(self, id: str, content: Any = None) -> Response[Any]:
        """HTTP PATCH with a JSON body."""
        return await self._send(id, "PATCH", **self._body_arguments(content))

    async def replace(self, id: str, content: Any = None) -> Response[Any]:
        """HTTP PUT with a JSON body."""
        return await self._send(id, "PUT", **self._body_arguments(content))

    async def delete(self, id: str) -> Response[Any]:
        """HTTP DELETE."""
        return await self._send(id, "DELETE")

    async def post(
        self,
        id: str,
        content: Any,
        content_type: Optional[Union[ContentType, str]] = None,
    ) -> Response[Any]:
        """HTTP POST honouring the request options' content type.

        Mappings are form-encoded when the content type is
        ``application/x-www-form-urlencoded``.

        Args:
            id: Operation identifier, used for diagnostics only
            content: Request body
            content_type: Overrides the options' content type for this call
        """
        headers = self.request_options.headers
        if content_type is not None:
            headers["Content-Type"] = ContentType(content_type).value
        return await self._send(
            id,
            "POST",
            headers=headers,
            **self._body_arguments(content, headers["Content-Type"]),
        )

    async def upload_file(
        self, id: str, source: UploadSource, file_name: str = "file"
    ) -> Response[Any]:
        """Multipart POST of a file.

        Args:
            id: Operation identifier, used for diagnostics only
            source: Bytes or a binary file object
            file_name: File name sent with the part
        """
        # httpx sets the multipart Content-Type with its boundary
        headers = {"Accept": self.request_options.accept_type}
        return await self._send(
            id, "POST", headers=headers, files={"file": (file_name, source)}
        )

    async def load_file(self, id: str, as_text: bool = False) -> Response[Any]:
        """Streamed GET through a temporary file.

        The body is written to a fresh temporary file while it streams in and
        decoded after the stream closes. The file is removed on every exit
        path. A successful exchange reports status 200.

        Args:
            id: Operation identifier, used for diagnostics only
            as_text: Return the body as text instead of decoding JSON

        Raises:
            httpx.HTTPError: On transport failures
            OSError: If the temporary file cannot be written or read
            json.JSONDecodeError: If a successful body is not valid JSON
        """
        url = self.to_string()
        logger.debug(f"{id}: GET {url} (streamed)")
        fd, temp_path = tempfile.mkstemp(prefix="fecru-", suffix=".download")
        try:
            with os.fdopen(fd, "wb") as temp_file:
                async with self._create_client() as client:
                    async with client.stream(
                        "GET",
                        url,
                        headers=self.request_options.headers,
                        auth=self._auth(),
                    ) as response:
                        async for chunk in response.aiter_bytes():
                            temp_file.write(chunk)
                        status_code = response.status_code
                        encoding = response.encoding or "utf-8"

            with open(temp_path, "rb") as temp_file:
                text = temp_file.read().decode(encoding, errors="replace")
        finally:
            if os.path.exists(temp_path):
                os.unlink(temp_path)

        logger.debug(f"{id}: HTTP {status_code} ({len(text)} characters)")
        if not 200 <= status_code < 300:
            try:
                body = json.loads(text) if text else None
            except ValueError:
                body = None
            return Response(status_code, body)

        if as_text:
            return Response(200, text)
        return Response(200, json.loads(text) if text else None)
