# Copyright DataStax, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import pytest
from pytest_httpserver import HTTPServer

from astradb import APIOptions, AstraDBAdmin, DataAPIClient
from astradb.exceptions import (
    DevOpsAPIHttpException,
    UnexpectedDevOpsAPIResponseException,
)
from astradb.info import AvailableRegionInfo
from astradb.utils.request_tools import HttpMethod

REGIONS_PATH = "/v2/regions/serverless"
SAMPLE_REGION = {
    "classification": "standard",
    "cloudProvider": "gcp",
    "displayName": "Moncks Corner, South Carolina",
    "enabled": True,
    "name": "us-east1",
    "region_type": "vector",
    "reservedForQualifiedUsers": False,
    "zone": "na",
}


@pytest.fixture
def admin(httpserver: HTTPServer) -> AstraDBAdmin:
    return DataAPIClient("AstraCS:org-token").get_admin(
        dev_ops_url=httpserver.url_for("/")
    )


class TestAdmin:
    @pytest.mark.describe("test of finding the available regions")
    def test_admin_find_available_regions(
        self, httpserver: HTTPServer, admin: AstraDBAdmin
    ) -> None:
        httpserver.expect_oneshot_request(
            REGIONS_PATH,
            method=HttpMethod.GET,
            headers={"Authorization": "Bearer AstraCS:org-token"},
            query_string={"region-type": "vector", "filter-by-org": "enabled"},
        ).respond_with_json([SAMPLE_REGION])
        regions = admin.find_available_regions(region_type="vector", filter_by_org=True)
        assert regions == [AvailableRegionInfo._from_dict(SAMPLE_REGION)]
        assert regions[0].cloud_provider == "gcp"
        assert regions[0].region_type == "vector"
        assert regions[0].as_dict() == SAMPLE_REGION
        httpserver.check_assertions()

    @pytest.mark.describe("test of regions query parameters")
    def test_admin_regions_query(
        self, httpserver: HTTPServer, admin: AstraDBAdmin
    ) -> None:
        httpserver.expect_oneshot_request(
            REGIONS_PATH,
            query_string={"filter-by-org": "disabled"},
        ).respond_with_json([])
        assert admin.find_available_regions(filter_by_org=False) == []

        httpserver.expect_oneshot_request(
            REGIONS_PATH,
            query_string="",
        ).respond_with_json([])
        assert admin.find_available_regions() == []
        httpserver.check_assertions()

    @pytest.mark.describe("test of DevOps API errors when finding regions")
    def test_admin_regions_errors(
        self, httpserver: HTTPServer, admin: AstraDBAdmin
    ) -> None:
        httpserver.expect_oneshot_request(REGIONS_PATH).respond_with_json(
            {"message": "Unauthorized"}, status=401
        )
        with pytest.raises(DevOpsAPIHttpException) as exc:
            admin.find_available_regions()
        assert exc.value.status_code == 401
        assert str(exc.value) == "DevOps API error (status 401): Unauthorized"

        httpserver.expect_oneshot_request(REGIONS_PATH).respond_with_json(
            {"not": "a list"}
        )
        with pytest.raises(UnexpectedDevOpsAPIResponseException):
            admin.find_available_regions()

        httpserver.expect_oneshot_request(REGIONS_PATH).respond_with_data("[{")
        with pytest.raises(UnexpectedDevOpsAPIResponseException):
            admin.find_available_regions()

    @pytest.mark.describe("test of the admin options and token resolution")
    def test_admin_options(self, httpserver: HTTPServer) -> None:
        client = DataAPIClient(
            "client-token", api_options=APIOptions(headers={"X-Extra": "e"})
        )
        admin = client.get_admin(
            token="admin-token", dev_ops_url=httpserver.url_for("/")
        )
        resolved = admin.resolve_options()
        assert resolved.token == "admin-token"
        assert resolved.headers == {"X-Extra": "e"}
        commander = admin._get_api_commander(resolved)
        assert commander.full_headers["Authorization"] == "Bearer admin-token"
        assert commander.full_headers["X-Extra"] == "e"
        assert commander.dev_ops_api is True
        assert "Authorization" not in AstraDBAdmin()._get_api_commander(
            AstraDBAdmin().resolve_options()
        ).full_headers
