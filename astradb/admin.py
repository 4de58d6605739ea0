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

import json
import logging
from typing import TYPE_CHECKING, Any

from astradb.exceptions import UnexpectedDevOpsAPIResponseException, _TimeoutContext
from astradb.info import AvailableRegionInfo
from astradb.settings.defaults import (
    DEFAULT_DEV_OPS_API_VERSION,
    DEFAULT_DEV_OPS_AUTH_HEADER,
    DEFAULT_DEV_OPS_AUTH_PREFIX,
    DEFAULT_DEV_OPS_URL,
)
from astradb.utils.api_commander import APICommander, merge_headers
from astradb.utils.api_options import APIOptions, FullAPIOptions, merge_api_options
from astradb.utils.arguments import command_api_options
from astradb.utils.request_tools import HttpMethod
from astradb.utils.unset import _UNSET, UnsetType

if TYPE_CHECKING:
    from astradb.client import DataAPIClient


logger = logging.getLogger(__name__)


def _render_query_value(value: str | bool) -> str:
    if isinstance(value, bool):
        return "enabled" if value else "disabled"
    return value


class AstraDBAdmin:
    """
    An "admin" object, able to perform administrative tasks through the
    DevOps API, such as discovering the regions available for databases.

    This class is not meant for direct instantiation by the user, rather
    it is obtained by invoking the `get_admin` method of DataAPIClient.
    The DevOps API requires an organization-wide token, which can be set
    on the client or passed when creating the admin.

    Args:
        client: the DataAPIClient this admin was obtained from, if any.
            Its options (token, headers, timeouts, HTTP client) are inherited.
        api_options: the options set on this admin, taking precedence over
            those of the client.
        dev_ops_url: the base URL of the DevOps API.
        dev_ops_api_version: the version of the DevOps API.
    """

    def __init__(
        self,
        *,
        client: DataAPIClient | None = None,
        api_options: APIOptions | None = None,
        dev_ops_url: str = DEFAULT_DEV_OPS_URL,
        dev_ops_api_version: str = DEFAULT_DEV_OPS_API_VERSION,
    ) -> None:
        self.client = client
        self.api_options = api_options
        self.dev_ops_url = dev_ops_url.rstrip("/")
        self.dev_ops_api_version = dev_ops_api_version

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(dev_ops_url="{self.dev_ops_url}")'

    def resolve_options(self, api_options: APIOptions | None = None) -> FullAPIOptions:
        """
        The options in effect for an admin call: the client options,
        then the admin options, then those passed to the call (if any).
        """

        client_options = None if self.client is None else self.client.api_options
        return merge_api_options(client_options, self.api_options, api_options)

    def _get_api_commander(self, options: FullAPIOptions) -> APICommander:
        headers = merge_headers(
            {
                DEFAULT_DEV_OPS_AUTH_HEADER: (
                    f"{DEFAULT_DEV_OPS_AUTH_PREFIX}{options.token}"
                    if options.token
                    else None
                )
            },
            options.headers,
        )
        return APICommander(
            api_endpoint=self.dev_ops_url,
            path=self.dev_ops_api_version,
            headers=headers,
            http_client=options.http_client,
            redacted_header_names=options.redacted_header_names,
            dev_ops_api=True,
        )

    def find_available_regions(
        self,
        *,
        region_type: str | None = None,
        filter_by_org: bool | None = None,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> list[AvailableRegionInfo]:
        """
        List the regions where serverless databases can be created.

        Args:
            region_type: the kind of region to list, e.g. "vector" or "all".
                If omitted, the DevOps API applies its default.
            filter_by_org: whether to restrict the list to the regions
                available to the token's organization.
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
            api_options: options overriding, for this call only, those of
                the admin and the client.

        Returns:
            a list of AvailableRegionInfo objects.

        Raises:
            DevOpsAPIHttpException: if the DevOps API returns an error status.
            UnexpectedDevOpsAPIResponseException: if the response is not
                a list of regions.

        Example:
            >>> regions = my_admin.find_available_regions(filter_by_org=True)
            >>> [reg.name for reg in regions if reg.cloud_provider == "gcp"][:2]
            ['europe-west4', 'us-central1']
        """

        options = self.resolve_options(command_api_options(api_options, timeout_ms))
        request_params: dict[str, Any] = {
            k: _render_query_value(v)
            for k, v in {
                "region-type": region_type or None,
                "filter-by-org": filter_by_org,
            }.items()
            if v is not None
        }
        logger.info("finding available regions, DevOps API")
        body, _ = self._get_api_commander(options).request(
            http_method=HttpMethod.GET,
            additional_path="regions/serverless",
            request_params=request_params,
            timeout_context=_TimeoutContext(
                request_ms=options.timeout_options.request_timeout_ms,
                connection_ms=options.timeout_options.connection_timeout_ms,
                label="request_timeout_ms",
            ),
        )
        logger.info("finished finding available regions, DevOps API")
        try:
            raw_regions = json.loads(body)
        except ValueError as exc:
            raise UnexpectedDevOpsAPIResponseException(
                text=f"failed to parse regions response: {exc}",
                raw_response=body.decode(errors="replace"),
            ) from exc
        if not isinstance(raw_regions, list):
            raise UnexpectedDevOpsAPIResponseException(
                text="failed to parse regions response: not a list",
                raw_response=body.decode(errors="replace"),
            )
        return [
            AvailableRegionInfo._from_dict(raw_region) for raw_region in raw_regions
        ]
