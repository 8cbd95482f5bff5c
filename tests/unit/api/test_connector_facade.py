"""Unit tests for the connector facade: login, token use and lifecycle."""

import asyncio
import base64

import pytest

from fecru_connector import Connector, ConnectorConfig
from fecru_connector.util.auth import BasicHandler, TokenHandler

HOST = "https://fecru.example.com"
LOGIN_URL = f"{HOST}/rest-service-fecru/auth/login"


class TestConstruction:
    """Test connector construction outside an event loop."""

    def test_login_deferred_without_running_loop(self):
        connector = Connector(HOST, "alice", "secret")
        assert connector._refresh_task is None
        assert [type(h) for h in connector.get_auth_handlers()] == [BasicHandler]

    def test_from_config(self):
        config = ConnectorConfig(
            host="https://fecru.example.com/",
            username="alice",
            password="secret",
            web_context="fecru",
            use_access_token=False,
            timeout=12,
        )
        connector = Connector.from_config(config)
        assert connector.host == HOST
        assert connector.web_context == "fecru"
        assert connector.use_access_token is False
        assert connector.create_request_options().timeout == 12

    def test_request_options_carry_ssl_setting(self):
        connector = Connector(HOST, "alice", "secret", False, ignore_ssl_error=True)
        assert connector.create_request_options().verify is False


@pytest.mark.asyncio
class TestLogin:
    """Test the access token exchange."""

    async def test_login_installs_token_used_by_requests(self, httpx_mock):
        httpx_mock.add_response(method="POST", url=LOGIN_URL, json={"token": "tok-1"})
        httpx_mock.add_response(
            method="GET",
            url=f"{HOST}/rest-service/repositories-v1/repo1",
            json={"name": "repo1", "type": "git"},
        )

        connector = Connector(HOST, "alice", "secret")
        assert await connector.ready() is True
        repository = await connector.crucible.get_repository("repo1")

        assert repository == {"name": "repo1", "type": "git"}
        login, get = httpx_mock.get_requests()
        assert login.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert login.content == b"userName=alice&password=secret"
        expected = "Basic " + base64.b64encode(b"alice:secret").decode()
        assert login.headers["Authorization"] == expected
        assert get.headers["Authorization"] == "Bearer tok-1"

    async def test_login_uses_web_context(self, httpx_mock):
        httpx_mock.add_response(
            method="POST",
            url=f"{HOST}/fecru/rest-service-fecru/auth/login",
            json={"token": "tok-2"},
        )
        httpx_mock.add_response(
            url=f"{HOST}/fecru/rest-service-fecru/server-v1", json={"isCrucible": True}
        )

        connector = Connector(HOST, "alice", "secret", web_context="/fecru/")
        await connector.ready()
        await connector.common.get_server_status()

        assert httpx_mock.get_requests()[1].headers["Authorization"] == "Bearer tok-2"

    async def test_rejected_login_falls_back_to_basic(self, httpx_mock, caplog):
        httpx_mock.add_response(
            method="POST",
            url=LOGIN_URL,
            status_code=401,
            json={"code": "AuthenticationFailed", "message": "Bad credentials"},
        )

        connector = Connector(HOST, "alice", "wrong")

        assert await connector.ready() is False
        assert [type(h) for h in connector.get_auth_handlers()] == [BasicHandler]
        assert "Bad credentials" in caplog.text

    async def test_login_without_token_falls_back(self, httpx_mock):
        httpx_mock.add_response(method="POST", url=LOGIN_URL, json={"unexpected": 1})

        connector = Connector(HOST, "alice", "secret")

        assert await connector.ready() is False

    async def test_refresh_replaces_token(self, httpx_mock):
        httpx_mock.add_response(method="POST", url=LOGIN_URL, json={"token": "old"})
        httpx_mock.add_response(method="POST", url=LOGIN_URL, json={"token": "new"})

        connector = Connector(HOST, "alice", "secret")
        await connector.ready()
        assert await connector.refresh_access_token() is True

        handlers = connector.get_auth_handlers()
        assert isinstance(handlers[0], TokenHandler)
        assert handlers[0].token == "new"

    async def test_credential_only_mode_sends_no_login(self, httpx_mock, connector):
        httpx_mock.add_response(url=f"{HOST}/rest-service-fecru/server-v1", json={})

        assert await connector.ready() is False
        await connector.common.get_server_status()

        assert len(httpx_mock.get_requests()) == 1


@pytest.mark.asyncio
class TestLifecycle:
    """Test async context manager behaviour."""

    async def test_exit_cancels_pending_login(self, monkeypatch):
        never = asyncio.Event()

        async def slow_login(self):
            await never.wait()
            return "unused"

        monkeypatch.setattr(Connector, "_login", slow_login)

        async with Connector(HOST, "alice", "secret") as connector:
            task = connector._refresh_task
            assert task is not None
            await asyncio.sleep(0)

        assert task.cancelled()
        assert [type(h) for h in connector.get_auth_handlers()] == [BasicHandler]

    async def test_ready_after_close_reports_no_token(self, monkeypatch):
        never = asyncio.Event()

        async def slow_login(self):
            await never.wait()
            return "unused"

        monkeypatch.setattr(Connector, "_login", slow_login)

        connector = Connector(HOST, "alice", "secret")
        await asyncio.sleep(0)
        await connector.close()

        assert await connector.ready() is False
        assert connector.get_auth_handlers() == [connector._auth.basic_handler]

    async def test_exit_after_login_completes(self, httpx_mock):
        httpx_mock.add_response(method="POST", url=LOGIN_URL, json={"token": "t"})

        async with Connector(HOST, "alice", "secret") as connector:
            await connector.ready()

        assert connector.get_auth_handlers()[0].token == "t"
