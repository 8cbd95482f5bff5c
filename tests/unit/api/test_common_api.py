"""Unit tests for the common (admin, server, indexing) endpoint group."""

import json

import pytest

from fecru_connector.api.common import GetProjectsPagedOptions, GetRepositoriesPagedOptions
from fecru_connector.errors import ApiError
from fecru_connector.models import PagedRequestOptions

BASE = "https://fecru.example.com/rest-service-fecru"


@pytest.mark.asyncio
class TestStatus:
    """Test server and indexing status."""

    async def test_server_status(self, httpx_mock, connector):
        httpx_mock.add_response(
            url=f"{BASE}/server-v1", json={"isCrucible": True, "isFishEye": True}
        )

        status = await connector.common.get_server_status()

        assert status["isCrucible"] is True

    async def test_repository_indexing_status(self, httpx_mock, connector):
        httpx_mock.add_response(
            url=f"{BASE}/indexing-status-v1/status/repo1", json={"fullIndexingInProgress": False}
        )

        status = await connector.common.get_repository_indexing_status("repo1")

        assert status == {"fullIndexingInProgress": False}


@pytest.mark.asyncio
class TestUserGroups:
    """Test user group administration."""

    async def test_create_user_group_expects_201(self, httpx_mock, connector):
        httpx_mock.add_response(
            method="POST",
            url=f"{BASE}/admin/groups",
            status_code=201,
            json={"name": "devs", "admin": False},
        )

        group = await connector.common.create_user_group({"name": "devs", "admin": False})

        assert group["name"] == "devs"

    async def test_create_user_group_rejects_200(self, httpx_mock, connector):
        httpx_mock.add_response(
            method="POST", url=f"{BASE}/admin/groups", json={"name": "devs"}
        )

        with pytest.raises(ApiError):
            await connector.common.create_user_group({"name": "devs"})

    async def test_get_user_groups_paged(self, httpx_mock, connector):
        httpx_mock.add_response(
            url=f"{BASE}/admin/groups?prefix=de&limit=2&start=4",
            json={"start": 4, "limit": 2, "lastPage": True, "size": 1, "values": []},
        )

        page = await connector.common.get_user_groups_paged(
            "de", PagedRequestOptions(limit=2, start=4)
        )

        assert page["start"] == 4

    async def test_update_user_group_sends_admin_only(self, httpx_mock, connector):
        httpx_mock.add_response(
            method="PUT", url=f"{BASE}/admin/groups/devs", json={"admin": True}
        )

        result = await connector.common.update_user_group({"name": "devs", "admin": True})

        assert result == {"admin": True}
        assert json.loads(httpx_mock.get_request().content) == {"admin": True}

    async def test_delete_user_group(self, httpx_mock, connector):
        httpx_mock.add_response(
            method="DELETE", url=f"{BASE}/admin/groups/devs", status_code=204
        )

        await connector.common.delete_user_group("devs")

    @pytest.mark.parametrize("status_code", [204, 304])
    async def test_add_user_to_group_accepts_not_modified(
        self, httpx_mock, connector, status_code
    ):
        httpx_mock.add_response(
            method="PUT", url=f"{BASE}/admin/groups/devs", status_code=status_code
        )

        await connector.common.add_user_to_user_group("devs", "bob")

        assert json.loads(httpx_mock.get_request().content) == {"name": "bob"}

    async def test_add_user_to_group_failure(self, httpx_mock, connector):
        httpx_mock.add_response(
            method="PUT",
            url=f"{BASE}/admin/groups/devs",
            status_code=404,
            json={"code": "NotFound", "message": "No user bob"},
        )

        with pytest.raises(ApiError, match="No user bob"):
            await connector.common.add_user_to_user_group("devs", "bob")


@pytest.mark.asyncio
class TestUsersAndProjects:
    """Test user and project administration."""

    async def test_remove_user(self, httpx_mock, connector):
        httpx_mock.add_response(
            method="DELETE", url=f"{BASE}/admin/users/bob", status_code=204
        )

        await connector.common.remove_user("bob")

    async def test_update_user_password(self, httpx_mock, connector):
        httpx_mock.add_response(
            method="PUT", url=f"{BASE}/admin/users/bob", json={"name": "bob"}
        )

        await connector.common.update_user("bob", "n3w")

        assert json.loads(httpx_mock.get_request().content) == {"password": "n3w"}

    async def test_get_projects_paged_filters(self, httpx_mock, connector):
        httpx_mock.add_response(
            url=f"{BASE}/admin/projects?limit=10&name=Core&defaultRepositoryName=repo1",
            json={"start": 0, "limit": 10, "lastPage": True, "size": 0, "values": []},
        )

        await connector.common.get_projects_paged(
            GetProjectsPagedOptions(limit=10, name="Core", default_repository_name="repo1")
        )

    async def test_delete_project_with_reviews(self, httpx_mock, connector):
        httpx_mock.add_response(
            method="DELETE",
            url=f"{BASE}/admin/projects/CORE?deleteProjectReviews=true",
            status_code=204,
        )

        await connector.common.delete_project("CORE", delete_project_reviews=True)

    async def test_move_project_content(self, httpx_mock, connector):
        httpx_mock.add_response(
            method="PUT",
            url=f"{BASE}/admin/projects/OLD/move-reviews/NEW",
            status_code=204,
        )

        await connector.common.move_project_content("OLD", "NEW")

    async def test_add_default_reviewer(self, httpx_mock, connector):
        httpx_mock.add_response(
            method="PUT",
            url=f"{BASE}/admin/projects/CORE/default-reviewer-users",
            status_code=304,
        )

        await connector.common.add_default_review_user_to_project("CORE", "bob")

    async def test_get_repositories_paged(self, httpx_mock, connector):
        httpx_mock.add_response(
            url=f"{BASE}/admin/repositories?type=git&enabled=false",
            json={"start": 0, "limit": 0, "lastPage": True, "size": 0, "values": []},
        )

        page = await connector.common.get_repositories_paged(
            GetRepositoriesPagedOptions(type="git", enabled=False)
        )

        assert page["values"] == []
