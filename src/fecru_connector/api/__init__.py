"""Endpoint groups of the connector."""

from .common import CommonApi, GetProjectsPagedOptions, GetRepositoriesPagedOptions
from .crucible import (
    CrucibleApi,
    GetAllowedReviewMembersOptions,
    GetAllowedReviewParticipantsOptions,
    RepositoryType,
    ReviewFilter,
    ReviewState,
    ReviewTransition,
    SearchChangeSetsOptions,
    SearchRepositoriesOptions,
    SearchReviewsOptions,
)
from .fisheye import FisheyeApi, GetRepositoryChangeSetsOptions

__all__ = [
    "CommonApi",
    "CrucibleApi",
    "FisheyeApi",
    "GetAllowedReviewMembersOptions",
    "GetAllowedReviewParticipantsOptions",
    "GetProjectsPagedOptions",
    "GetRepositoriesPagedOptions",
    "GetRepositoryChangeSetsOptions",
    "RepositoryType",
    "ReviewFilter",
    "ReviewState",
    "ReviewTransition",
    "SearchChangeSetsOptions",
    "SearchRepositoriesOptions",
    "SearchReviewsOptions",
]
