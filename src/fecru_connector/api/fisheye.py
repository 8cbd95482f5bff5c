"""FishEye API (``/rest-service-fe``)."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..util.rest_uri import RestUri
from ..util.sub_connector import SubConnector


@dataclass
class GetRepositoryChangeSetsOptions:
    """Filters for :meth:`FisheyeApi.get_repository_change_sets`.

    Args:
        repository_key: Key of the repository
        repository_path: Only change sets touching this path
        committer_id: Only change sets of this committer
        comment: Only change sets whose comment matches
        p4_job_fixed: Perforce only: change sets marked as fixing this job
        expand: Expansion, e.g. ``changesets[0:20]`` to cap the results
        before_cs_id: Only ancestors of this change set
    """

    repository_key: Optional[str] = field(default=None, metadata={"param": "rep"})
    repository_path: Optional[str] = field(default=None, metadata={"param": "path"})
    committer_id: Optional[str] = field(default=None, metadata={"param": "committer"})
    comment: Optional[str] = None
    p4_job_fixed: Optional[str] = field(default=None, metadata={"param": "p4JobFixed"})
    expand: Optional[str] = None
    before_cs_id: Optional[str] = field(default=None, metadata={"param": "beforeCsid"})


class FisheyeApi(SubConnector):
    """FishEye change set endpoints."""

    @property
    def _uri_changesets(self) -> RestUri:
        return self._get_rest_uri("/rest-service-fe/changeset-v1")

    async def get_repository_change_sets(
        self, options: Optional[GetRepositoryChangeSetsOptions] = None
    ) -> Dict[str, Any]:
        """List change sets of a repository, newest first."""
        response = await (
            self._uri_changesets.add_segment("listChangesets")
            .set_parameters_from_object(options)
            .get("get-repository-changesets")
        )
        return self._result_or_raise(response)
