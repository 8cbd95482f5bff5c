"""Unit tests for the FishEye endpoint group."""

import pytest

from fecru_connector.api.fisheye import GetRepositoryChangeSetsOptions
from fecru_connector.errors import ApiError


@pytest.mark.asyncio
class TestChangeSets:
    """Test change set listing."""

    async def test_list_change_sets_maps_option_names(self, httpx_mock, connector):
        httpx_mock.add_response(
            url=(
                "https://fecru.example.com/rest-service-fe/changeset-v1/listChangesets"
                "?rep=repo1&path=src&committer=alice&beforeCsid=abc"
            ),
            json={"csids": ["1", "2"]},
        )

        result = await connector.fisheye.get_repository_change_sets(
            GetRepositoryChangeSetsOptions(
                repository_key="repo1",
                repository_path="src",
                committer_id="alice",
                before_cs_id="abc",
            )
        )

        assert result == {"csids": ["1", "2"]}

    async def test_list_change_sets_error(self, httpx_mock, connector):
        httpx_mock.add_response(status_code=500)

        with pytest.raises(ApiError) as exc_info:
            await connector.fisheye.get_repository_change_sets()

        assert exc_info.value.code == "Unknown"
        assert exc_info.value.status_code == 500
