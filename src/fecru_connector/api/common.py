"""Common FishEye/Crucible API (``/rest-service-fecru``).

Indexing status, server status and the administration resources: user
groups, users, projects and repositories.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ..models import PagedRequestOptions
from ..util.rest_uri import RestUri
from ..util.sub_connector import SubConnector


@dataclass
class GetProjectsPagedOptions(PagedRequestOptions):
    """Filters for :meth:`CommonApi.get_projects_paged`."""

    name: Optional[str] = None
    key: Optional[str] = None
    default_repository_name: Optional[str] = field(
        default=None, metadata={"param": "defaultRepositoryName"}
    )
    permission_scheme_name: Optional[str] = field(
        default=None, metadata={"param": "permissionSchemeName"}
    )


@dataclass
class GetRepositoriesPagedOptions(PagedRequestOptions):
    """Filters for :meth:`CommonApi.get_repositories_paged`."""

    type: Optional[str] = None
    enabled: Optional[bool] = None
    started: Optional[bool] = None


class CommonApi(SubConnector):
    """Endpoints shared by FishEye and Crucible."""

    @property
    def _uri_indexing(self) -> RestUri:
        return self._get_rest_uri("/rest-service-fecru/indexing-status-v1")

    @property
    def _uri_server(self) -> RestUri:
        return self._get_rest_uri("/rest-service-fecru/server-v1")

    @property
    def _uri_admin(self) -> RestUri:
        return self._get_rest_uri("/rest-service-fecru/admin")

    # Indexing and server status

    async def get_repository_indexing_status(self, repository_id: str) -> Dict[str, Any]:
        """Indexing status of a repository.

        Args:
            repository_id: Key of the repository

        Raises:
            ApiError: If the server does not answer with 200
        """
        response = await (
            self._uri_indexing.add_segment("status")
            .add_segment(repository_id)
            .get("get-repository-indexing-status")
        )
        return self._result_or_raise(response)

    async def get_server_status(self) -> Dict[str, Any]:
        """Version, build and installation details of the server."""
        response = await self._uri_server.get("get-server-status")
        return self._result_or_raise(response)

    # User groups

    async def create_user_group(self, group: Mapping[str, Any]) -> Dict[str, Any]:
        """Create a user group (``{"name": ..., "admin": ...}``); expects 201."""
        response = await self._uri_admin.add_segment("groups").create(
            "create-user-group", dict(group)
        )
        return self._result_or_raise(response, 201)

    async def get_user_groups_paged(
        self,
        prefix: Optional[str] = None,
        options: Optional[PagedRequestOptions] = None,
    ) -> Dict[str, Any]:
        """Page of user groups, optionally filtered by name prefix."""
        response = await (
            self._uri_admin.add_segment("groups")
            .set_parameters_from_object({"prefix": prefix})
            .set_parameters_from_object(options)
            .get("get-paged-user-groups")
        )
        return self._result_or_raise(response)

    async def get_user_group(self, group_name: str) -> Dict[str, Any]:
        response = await (
            self._uri_admin.add_segment("groups")
            .add_segment(group_name)
            .get("get-user-group")
        )
        return self._result_or_raise(response)

    async def update_user_group(self, group: Mapping[str, Any]) -> Dict[str, Any]:
        """Update a group's admin flag.

        The group is identified by its ``name``; only ``admin`` is sent.
        """
        response = await (
            self._uri_admin.add_segment("groups")
            .add_segment(group["name"])
            .replace("update-user-group", {"admin": group.get("admin")})
        )
        return self._result_or_raise(response)

    async def delete_user_group(self, group_name: str) -> None:
        response = await (
            self._uri_admin.add_segment("groups")
            .add_segment(group_name)
            .delete("delete-user-group")
        )
        self._expect_status(response, 204)

    async def get_users_of_user_group_paged(
        self, group_name: str, options: Optional[PagedRequestOptions] = None
    ) -> Dict[str, Any]:
        response = await (
            self._uri_admin.add_segment("groups")
            .add_segment(group_name)
            .add_segment("users")
            .set_parameters_from_object(options)
            .get("get-paged-users-of-user-group")
        )
        return self._result_or_raise(response)

    async def add_user_to_user_group(self, group_name: str, user_name: str) -> None:
        """Add a user to a group; 304 (already a member) counts as success."""
        response = await (
            self._uri_admin.add_segment("groups")
            .add_segment(group_name)
            .replace("add-user-to-user-group", {"name": user_name})
        )
        self._expect_status(response, 204, 304)

    # Users

    async def create_user(self, user: Mapping[str, Any]) -> Dict[str, Any]:
        """Create a user; expects 201."""
        response = await self._uri_admin.add_segment("users").create(
            "create-user", dict(user)
        )
        return self._result_or_raise(response, 201)

    async def get_users_paged(
        self, options: Optional[PagedRequestOptions] = None
    ) -> Dict[str, Any]:
        response = await (
            self._uri_admin.add_segment("users")
            .set_parameters_from_object(options)
            .get("get-paged-users")
        )
        return self._result_or_raise(response)

    async def get_user(self, user_name: str) -> Dict[str, Any]:
        response = await (
            self._uri_admin.add_segment("users").add_segment(user_name).get("get-user")
        )
        return self._result_or_raise(response)

    async def update_user(self, user_name: str, password: str) -> Dict[str, Any]:
        """Set a user's password; returns the updated user."""
        response = await (
            self._uri_admin.add_segment("users")
            .add_segment(user_name)
            .replace("update-user-data", {"password": password})
        )
        return self._result_or_raise(response)

    async def remove_user(self, user_name: str) -> None:
        response = await (
            self._uri_admin.add_segment("users")
            .add_segment(user_name)
            .delete("delete-user")
        )
        self._expect_status(response, 204)

    async def get_user_groups_of_user_paged(
        self, user_name: str, options: Optional[PagedRequestOptions] = None
    ) -> Dict[str, Any]:
        response = await (
            self._uri_admin.add_segment("users")
            .add_segment(user_name)
            .add_segment("groups")
            .set_parameters_from_object(options)
            .get("get-paged-user-groups-of-user")
        )
        return self._result_or_raise(response)

    # Projects

    async def create_project(self, project: Mapping[str, Any]) -> Dict[str, Any]:
        """Create a project; expects 201."""
        response = await self._uri_admin.add_segment("projects").create(
            "create-project", dict(project)
        )
        return self._result_or_raise(response, 201)

    async def get_projects_paged(
        self, options: Optional[GetProjectsPagedOptions] = None
    ) -> Dict[str, Any]:
        response = await (
            self._uri_admin.add_segment("projects")
            .set_parameters_from_object(options)
            .get("get-paged-projects")
        )
        return self._result_or_raise(response)

    async def get_project(self, project_key: str) -> Dict[str, Any]:
        response = await (
            self._uri_admin.add_segment("projects")
            .add_segment(project_key)
            .get("get-project")
        )
        return self._result_or_raise(response)

    async def update_project(
        self, project_key: str, project: Mapping[str, Any]
    ) -> Dict[str, Any]:
        response = await (
            self._uri_admin.add_segment("projects")
            .add_segment(project_key)
            .replace("update-project", dict(project))
        )
        return self._result_or_raise(response)

    async def delete_project(
        self, project_key: str, delete_project_reviews: Optional[bool] = None
    ) -> None:
        """Delete a project.

        Args:
            project_key: Project to delete
            delete_project_reviews: Also delete the project's reviews
                (server default: False). Use :meth:`move_project_content`
                to keep them.
        """
        response = await (
            self._uri_admin.add_segment("projects")
            .add_segment(project_key)
            .set_parameters_from_object({"deleteProjectReviews": delete_project_reviews})
            .delete("delete-project")
        )
        self._expect_status(response, 204)

    async def move_project_content(
        self, project_key_from: str, project_key_to: str
    ) -> None:
        """Move reviews and snippets from one project to another."""
        response = await (
            self._uri_admin.add_segment("projects")
            .add_segment(project_key_from)
            .add_segment("move-reviews")
            .add_segment(project_key_to)
            .replace("move-project-content")
        )
        self._expect_status(response, 204)

    async def get_project_default_review_users_paged(
        self, project_key: str, options: Optional[PagedRequestOptions] = None
    ) -> Dict[str, Any]:
        response = await (
            self._uri_admin.add_segment("projects")
            .add_segment(project_key)
            .add_segment("default-reviewer-users")
            .set_parameters_from_object(options)
            .get("get-paged-default-reviewer-users-of-project")
        )
        return self._result_or_raise(response)

    async def add_default_review_user_to_project(
        self, project_key: str, user_name: str
    ) -> None:
        """Add a default reviewer; 304 (already present) counts as success."""
        response = await (
            self._uri_admin.add_segment("projects")
            .add_segment(project_key)
            .add_segment("default-reviewer-users")
            .replace("add-default-reviewer-users-to-project", {"name": user_name})
        )
        self._expect_status(response, 204, 304)

    async def get_project_default_reviewer_groups_paged(
        self, project_key: str, options: Optional[PagedRequestOptions] = None
    ) -> Dict[str, Any]:
        response = await (
            self._uri_admin.add_segment("projects")
            .add_segment(project_key)
            .add_segment("default-reviewer-groups")
            .set_parameters_from_object(options)
            .get("get-paged-default-reviewer-groups-of-project")
        )
        return self._result_or_raise(response)

    async def add_default_reviewer_group_to_project(
        self, project_key: str, group_name: str
    ) -> None:
        response = await (
            self._uri_admin.add_segment("projects")
            .add_segment(project_key)
            .add_segment("default-reviewer-groups")
            .replace("add-default-reviewer-group-to-project", {"name": group_name})
        )
        self._expect_status(response, 204, 304)

    # Repositories

    async def create_repository(self, repository: Mapping[str, Any]) -> Dict[str, Any]:
        """Create a repository; expects 201."""
        response = await self._uri_admin.add_segment("repositories").create(
            "create-repository", dict(repository)
        )
        return self._result_or_raise(response, 201)

    async def get_repositories_paged(
        self, options: Optional[GetRepositoriesPagedOptions] = None
    ) -> Dict[str, Any]:
        """Page of repositories; properties with default values may be missing."""
        response = await (
            self._uri_admin.add_segment("repositories")
            .set_parameters_from_object(options)
            .get("get-paged-repositories")
        )
        return self._result_or_raise(response)
