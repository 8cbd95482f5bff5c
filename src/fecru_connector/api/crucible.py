"""Crucible API (``/rest-service``).

Users, search, repositories, reviews and reviewer search. Payloads are
passed through as decoded JSON.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import IO, Any, Dict, List, Mapping, Optional, Sequence, Union

from ..errors import ApiError
from ..models import PagedRequestOptions
from ..util.rest_uri import RestUri
from ..util.sub_connector import SubConnector
from ..util.uri import JOIN, stringify_parameter


class RepositoryType(str, Enum):
    CVS = "cvs"
    SVN = "svn"
    P4 = "p4"
    GIT = "git"
    HG = "hg"
    PLUGIN = "plugin"


class ReviewState(str, Enum):
    DRAFT = "Draft"
    APPROVAL = "Approval"
    REVIEW = "Review"
    SUMMARIZE = "Summarize"
    CLOSED = "Closed"
    DEAD = "Dead"
    REJECTED = "Rejected"
    UNKNOWN = "Unknown"


class ReviewTransition(str, Enum):
    APPROVE = "action:approveReview"
    SUBMIT = "action:submitReview"
    SUMMARIZE = "action:summarizeReview"
    ABANDON = "action:abandonReview"
    CLOSE = "action:closeReview"
    REOPEN = "action:reopenReview"
    RECOVER = "action:recoverReview"
    REJECT = "action:rejectReview"
    COMPLETE = "action:completeReview"
    UNCOMPLETE = "action:uncompleteReview"


class ReviewFilter(str, Enum):
    """Predefined review filters of the current user."""

    ALL_REVIEWS = "allReviews"
    ALL_OPEN_REVIEWS = "allOpenReviews"
    ALL_CLOSED_REVIEWS = "allClosedReviews"
    DRAFT_REVIEWS = "draftReviews"
    TO_REVIEW = "toReview"
    REQUIRE_MY_APPROVAL = "requireMyApproval"
    TO_SUMMARIZE = "toSummarize"
    OUT_FOR_REVIEW = "outForReview"
    DRAFTS = "drafts"
    OPEN = "open"
    COMPLETED = "completed"
    CLOSED = "closed"
    TRASH = "trash"


@dataclass
class SearchRepositoriesOptions:
    """Filters for :meth:`CrucibleApi.search_repositories`.

    ``types`` renders as one ``type`` parameter per value.
    """

    name: Optional[str] = None
    enabled: Optional[bool] = None
    available: Optional[bool] = None
    types: Optional[List[Union[RepositoryType, str]]] = field(
        default=None, metadata={"param": "type"}
    )
    limit: Optional[int] = None


@dataclass
class SearchChangeSetsOptions:
    """Filters for :meth:`CrucibleApi.search_change_sets`."""

    oldest_cs_id: Optional[str] = field(default=None, metadata={"param": "oldestCsid"})
    include_oldest: Optional[bool] = field(
        default=None, metadata={"param": "includeOldest"}
    )
    newest_cs_id: Optional[str] = field(default=None, metadata={"param": "newestCsid"})
    include_newest: Optional[bool] = field(
        default=None, metadata={"param": "includeNewest"}
    )
    max: Optional[int] = None


@dataclass
class SearchReviewsOptions:
    """Criteria for :meth:`CrucibleApi.search_reviews`; unset fields are ignored."""

    title: Optional[str] = None
    author: Optional[str] = None
    moderator: Optional[str] = None
    creator: Optional[str] = None
    states: Optional[List[Union[ReviewState, str]]] = None
    reviewer: Optional[str] = None
    or_roles: Optional[bool] = field(default=None, metadata={"param": "orRoles"})
    complete: Optional[bool] = None
    all_reviewers_complete: Optional[bool] = field(
        default=None, metadata={"param": "allReviewersComplete"}
    )
    project: Optional[str] = None
    from_date: Optional[datetime] = field(default=None, metadata={"param": "fromDate"})
    to_date: Optional[datetime] = field(default=None, metadata={"param": "toDate"})


@dataclass
class GetAllowedReviewParticipantsOptions(PagedRequestOptions):
    query: Optional[str] = field(default=None, metadata={"param": "q"})
    include_groups: Optional[bool] = field(
        default=None, metadata={"param": "includeGroups"}
    )
    include_users: Optional[bool] = field(
        default=None, metadata={"param": "includeUsers"}
    )


@dataclass
class GetAllowedReviewMembersOptions(PagedRequestOptions):
    include_groups: Optional[bool] = field(
        default=None, metadata={"param": "includeGroups"}
    )
    include_users: Optional[bool] = field(
        default=None, metadata={"param": "includeUsers"}
    )


class CrucibleApi(SubConnector):
    """Crucible review and repository endpoints."""

    @property
    def _uri_users(self) -> RestUri:
        return self._get_rest_uri("/rest-service/users-v1")

    @property
    def _uri_search(self) -> RestUri:
        return self._get_rest_uri("/rest-service/search-v1")

    @property
    def _uri_repositories(self) -> RestUri:
        return self._get_rest_uri("/rest-service/repositories-v1")

    @property
    def _uri_reviews(self) -> RestUri:
        return self._get_rest_uri("/rest-service/reviews-v1")

    @property
    def _uri_reviewers(self) -> RestUri:
        return self._get_rest_uri("/rest-service/reviewer-search")

    # Users

    async def get_users(self, username_filter: Sequence[str] = ()) -> List[Dict[str, Any]]:
        """Users, optionally restricted to the given usernames."""
        response = await (
            self._uri_users.set_parameters_from_array("username", username_filter)
            .get("get-users")
        )
        return self._result_or_raise(response)

    async def get_user_committer(self, repository: str, username: str) -> Dict[str, Any]:
        """User mapped to a committer name in a repository."""
        response = await (
            self._uri_users.add_segment(repository)
            .add_segment(username)
            .get("get-user-committer")
        )
        return self._result_or_raise(response)

    async def get_user_profile(self, username: str) -> Dict[str, Any]:
        response = await self._uri_users.add_segment(username).get("get-user-profile")
        return self._result_or_raise(response)

    # Search

    async def search_review(self, term: str, max_return: Optional[int] = None) -> Dict[str, Any]:
        """Reviews whose id, title or description match ``term``."""
        response = await (
            self._uri_search.add_segment("reviews")
            .set_parameters_from_object({"term": term, "maxReturn": max_return})
            .get("search-review")
        )
        return self._result_or_raise(response)

    async def get_reviews_for_issue(
        self, jira_key: str, max_return: Optional[int] = None
    ) -> Dict[str, Any]:
        """Reviews linked to an issue key."""
        response = await (
            self._uri_search.add_segment("reviewsForIssue")
            .set_parameters_from_object({"jiraKey": jira_key, "maxReturn": max_return})
            .get("get-reviews-for-issue")
        )
        return self._result_or_raise(response)

    # Repositories

    async def search_repositories(
        self, options: Optional[SearchRepositoriesOptions] = None
    ) -> Dict[str, Any]:
        response = await (
            self._uri_repositories.set_parameters_from_object(options)
            .get("search-repositories")
        )
        return self._result_or_raise(response)

    async def get_file_revision_content(
        self, repository: str, revision: str, path: str
    ) -> str:
        """Raw content of a file revision.

        The body is streamed through a temporary file.

        Args:
            repository: Key of the repository
            revision: SCM revision string
            path: File path inside the repository
        """
        response = await (
            self._uri_repositories.add_segment("content")
            .add_segment(repository)
            .add_segment(revision)
            .add_segment(path)
            .load_file("get-file-revision-content", as_text=True)
        )
        return self._result_or_raise(response)

    async def get_change_set(self, repository: str, revision: str) -> Dict[str, Any]:
        response = await (
            self._uri_repositories.add_segment("change")
            .add_segment(repository)
            .add_segment(revision)
            .get("get-changeset")
        )
        return self._result_or_raise(response)

    async def search_change_sets(
        self,
        repository: str,
        path: Optional[str] = None,
        options: Optional[SearchChangeSetsOptions] = None,
    ) -> Dict[str, Any]:
        """Change sets of a repository, optionally below ``path``."""
        response = await (
            self._uri_repositories.add_segment("changes")
            .add_segment(repository)
            .set_parameter("path", path)
            .set_parameters_from_object(options)
            .get("search-changesets")
        )
        return self._result_or_raise(response)

    async def get_versioned_entity(
        self, repository: str, revision: str, path: str
    ) -> Dict[str, Any]:
        """Details of a file or versioned directory at a revision."""
        response = await (
            self._uri_repositories.add_segment(repository)
            .add_segment(revision)
            .add_segment(path)
            .get("get-versioned-entity")
        )
        return self._result_or_raise(response)

    async def get_versioned_entity_history(
        self, repository: str, revision: str, path: str
    ) -> Dict[str, Any]:
        response = await (
            self._uri_repositories.add_segment("history")
            .add_segment(repository)
            .add_segment(revision)
            .add_segment(path)
            .get("get-versioned-entity-history")
        )
        return self._result_or_raise(response)

    async def get_repository(self, repository: str) -> Dict[str, Any]:
        response = await (
            self._uri_repositories.add_segment(repository).get("get-repository")
        )
        return self._result_or_raise(response)

    async def browse_repository(self, repository: str, path: str = "") -> Dict[str, Any]:
        """Directory listing of ``path`` (repository root by default)."""
        response = await (
            self._uri_repositories.add_segment("browse")
            .add_segment(repository)
            .add_segment(path)
            .get("browse-repository")
        )
        return self._result_or_raise(response)

    # Reviews

    async def get_reviews(
        self, states: Sequence[Union[ReviewState, str]] = ()
    ) -> Dict[str, Any]:
        """Reviews in any of ``states`` (all reviews when empty)."""
        response = await (
            self._uri_reviews.set_parameters_from_array("state", states, JOIN)
            .get("get-reviews")
        )
        return self._result_or_raise(response)

    async def create_review(
        self, review: Mapping[str, Any], state: Optional[Union[ReviewState, str]] = None
    ) -> Dict[str, Any]:
        """Create a review, optionally moving it straight into ``state``."""
        response = await (
            self._uri_reviews.set_parameter("state", state)
            .create("create-review", dict(review))
        )
        return self._result_or_raise(response)

    async def get_review(self, review_id: str) -> Dict[str, Any]:
        response = await self._uri_reviews.add_segment(review_id).get("get-review")
        return self._result_or_raise(response)

    async def get_review_detailed(self, review_id: str) -> Dict[str, Any]:
        """Review including its items and comments."""
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("details")
            .get("get-review-detailed")
        )
        return self._result_or_raise(response)

    async def delete_review(self, review_id: str) -> None:
        """Delete a review; the server must answer 200."""
        response = await self._uri_reviews.add_segment(review_id).delete("delete-review")
        self._expect_status(response, 200)

    async def get_version_info(self) -> Dict[str, Any]:
        response = await self._uri_reviews.add_segment("versionInfo").get(
            "get-version-info"
        )
        return self._result_or_raise(response)

    async def filter_reviews(
        self, review_filter: Union[ReviewFilter, str], detailed: bool = False
    ) -> Dict[str, Any]:
        """Reviews of the current user matching a predefined filter."""
        uri = self._uri_reviews.add_segment("filter").add_segment(
            stringify_parameter(review_filter)
        )
        if detailed:
            uri.add_segment("details")
        response = await uri.get("filter-reviews-detailed" if detailed else "filter-reviews")
        return self._result_or_raise(response)

    async def search_reviews(
        self, options: SearchReviewsOptions, detailed: bool = False
    ) -> Dict[str, Any]:
        """Reviews matching all given criteria.

        ``states`` renders as one comma-joined parameter and dates as epoch
        milliseconds.
        """
        uri = self._uri_reviews.add_segment("filter")
        if detailed:
            uri.add_segment("details")
        response = await (
            uri.set_parameters_from_object(options, JOIN)
            .get("search-reviews-detailed" if detailed else "search-reviews")
        )
        return self._result_or_raise(response)

    async def get_review_transitions(self, review_id: str) -> Dict[str, Any]:
        """Actions the current user may perform on a review."""
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("transitions")
            .get("get-review-transitions")
        )
        return self._result_or_raise(response)

    async def complete_review(
        self, review_id: str, ignore_warnings: Optional[bool] = None
    ) -> None:
        """Mark the review complete for the current user.

        Raises:
            ReviewConflictError: If review conditions prevent completion (409)
            ApiError: On any other unexpected status
        """
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("complete")
            .set_parameter("ignoreWarnings", ignore_warnings)
            .create("complete-review")
        )
        if response.status_code != 200:
            self._raise_review_conflict(response)
            raise ApiError.from_response(response, "Review could not be completed")

    async def uncomplete_review(
        self, review_id: str, ignore_warnings: Optional[bool] = None
    ) -> None:
        """Undo :meth:`complete_review` for the current user."""
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("uncomplete")
            .set_parameter("ignoreWarnings", ignore_warnings)
            .create("uncomplete-review")
        )
        if response.status_code != 200:
            self._raise_review_conflict(response)
            raise ApiError.from_response(response, "Review could not be uncompleted")

    async def change_review_state(
        self,
        review_id: str,
        transition: Union[ReviewTransition, str],
        ignore_warnings: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Perform a state transition and return the updated review.

        Raises:
            ReviewConflictError: If review conditions block the transition (409)
            ApiError: On any other unexpected status
        """
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("transition")
            .set_parameter("action", transition)
            .set_parameter("ignoreWarnings", ignore_warnings)
            .create("change-review-state")
        )
        if response.status_code != 200:
            self._raise_review_conflict(response)
        return self._result_or_raise(response)

    async def close_review(self, review_id: str, summary: Optional[str] = None) -> None:
        """Close a review in Summarize state with an optional summary."""
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("close")
            .create("close-review", summary)
        )
        self._expect_status(response, 200)

    async def remind_incomplete_reviewers(self, review_id: str) -> None:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("remind")
            .create("remind-incomplete-reviewers")
        )
        self._expect_status(response, 200)

    async def add_file_to_review(
        self, review_id: str, source: Union[bytes, IO[bytes]], file_name: str = "file"
    ) -> Dict[str, Any]:
        """Upload a file as a new review item."""
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("addFile")
            .upload_file("upload-file-to-review", source, file_name)
        )
        return self._result_or_raise(response)

    async def add_review_change_set(
        self, review_id: str, change_set: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Add change sets (``{"repository": ..., "changesets": ...}``)."""
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("addChangeset")
            .create("add-review-changeset", dict(change_set))
        )
        return self._result_or_raise(response)

    async def add_review_patch(self, review_id: str, patch: Mapping[str, Any]) -> Dict[str, Any]:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("patch")
            .create("add-review-patch", dict(patch))
        )
        return self._result_or_raise(response)

    # Review items

    async def get_review_items(self, review_id: str) -> Dict[str, Any]:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("reviewitems")
            .get("get-review-items")
        )
        return self._result_or_raise(response)

    async def get_review_item(self, review_id: str, review_item_id: str) -> Dict[str, Any]:
        # NOTE: verb changed from DELETE to GET; this endpoint only reads the item
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("reviewitems")
            .add_segment(review_item_id)
            .get("get-review-item")
        )
        return self._result_or_raise(response)

    async def delete_review_item(self, review_id: str, review_item_id: str) -> None:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("reviewitems")
            .add_segment(review_item_id)
            .delete("delete-review-item")
        )
        self._expect_status(response, 200)

    # Comments

    async def get_review_comments(
        self, review_id: str, render: Optional[bool] = None
    ) -> Dict[str, Any]:
        """All comments of a review; ``render`` asks for rendered markup."""
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("comments")
            .set_parameter("render", render)
            .get("get-review-comments")
        )
        return self._result_or_raise(response)

    async def add_review_comment(
        self, review_id: str, comment: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Add a general comment to a review."""
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("comments")
            .create("add-review-comment", dict(comment))
        )
        return self._result_or_raise(response)

    async def get_review_comment(
        self, review_id: str, comment_id: str, render: Optional[bool] = None
    ) -> Dict[str, Any]:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("comments")
            .add_segment(comment_id)
            .set_parameter("render", render)
            .get("get-review-comment")
        )
        return self._result_or_raise(response)

    async def delete_review_comment(self, review_id: str, comment_id: str) -> None:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("comments")
            .add_segment(comment_id)
            .delete("delete-review-comment")
        )
        self._expect_status(response, 200)

    async def get_review_comment_replies(
        self, review_id: str, comment_id: str, render: Optional[bool] = None
    ) -> Dict[str, Any]:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("comments")
            .add_segment(comment_id)
            .add_segment("replies")
            .set_parameter("render", render)
            .get("get-review-comment-replies")
        )
        return self._result_or_raise(response)

    async def add_review_comment_reply(
        self, review_id: str, comment_id: str, reply: Mapping[str, Any]
    ) -> Dict[str, Any]:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("comments")
            .add_segment(comment_id)
            .add_segment("replies")
            .create("add-review-comment-reply", dict(reply))
        )
        return self._result_or_raise(response)

    async def publish_all_draft_review_comments(self, review_id: str) -> None:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("publish")
            .create("publish-all-draft-review-comments")
        )
        self._expect_status(response, 200)

    # Reviewers

    async def get_review_reviewers(self, review_id: str) -> Dict[str, Any]:
        # NOTE: verb changed from DELETE to GET; this endpoint only lists reviewers
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("reviewers")
            .get("get-review-reviewers")
        )
        return self._result_or_raise(response)

    async def add_review_reviewers(self, review_id: str, reviewer_ids: Sequence[str]) -> None:
        """Add reviewers; the usernames are sent as one comma-separated string."""
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("reviewers")
            .create("add-review-reviewers", ",".join(reviewer_ids))
        )
        self._expect_status(response, 200)

    async def delete_review_reviewer(self, review_id: str, reviewer_name: str) -> None:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("reviewers")
            .add_segment(reviewer_name)
            .delete("delete-review-reviewer")
        )
        self._expect_status(response, 200)

    async def get_review_reviewers_completed(self, review_id: str) -> Dict[str, Any]:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("reviewers")
            .add_segment("completed")
            .get("get-review-reviewers-completed")
        )
        return self._result_or_raise(response)

    async def get_review_reviewers_uncompleted(self, review_id: str) -> Dict[str, Any]:
        response = await (
            self._uri_reviews.add_segment(review_id)
            .add_segment("reviewers")
            .add_segment("uncompleted")
            .get("get-review-reviewers-uncompleted")
        )
        return self._result_or_raise(response)

    # Reviewer search

    async def get_allowed_participants_for_review(
        self,
        review_id: str,
        options: Optional[GetAllowedReviewParticipantsOptions] = None,
    ) -> Dict[str, Any]:
        """Users and groups allowed to take part in a review (Crucible 4.7.2+)."""
        response = await (
            self._uri_reviewers.add_segment(review_id)
            .add_segment("search")
            .set_parameters_from_object(options)
            .get("get-allowed-review-participants")
        )
        return self._result_or_raise(response)

    async def get_allowed_members_for_review(
        self,
        review_id: str,
        group_name: str,
        options: Optional[GetAllowedReviewMembersOptions] = None,
    ) -> Dict[str, Any]:
        """Members of ``group_name`` allowed to take part in a review."""
        response = await (
            self._uri_reviewers.add_segment(review_id)
            .add_segment("group-members")
            .add_segment(group_name)
            .set_parameters_from_object(options)
            .get("get-allowed-review-members")
        )
        return self._result_or_raise(response)
