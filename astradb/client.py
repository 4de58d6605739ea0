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

import logging
from typing import TYPE_CHECKING, Any

from astradb.settings.defaults import DEFAULT_DEV_OPS_API_VERSION, DEFAULT_DEV_OPS_URL
from astradb.utils.api_options import APIOptions, stack_api_options
from astradb.utils.unset import _UNSET, UnsetType

if TYPE_CHECKING:
    from astradb.admin import AstraDBAdmin
    from astradb.database import Database


logger = logging.getLogger(__name__)


class DataAPIClient:
    """
    A client for using the Data API. This is the entry point, sitting
    at the top of the conceptual "client -> database -> collection/table"
    hierarchy and of the "client -> admin" chain as well.

    Options set on the client are inherited by all objects spawned from it,
    each of which can override them in turn: the settings in effect for a
    command are those of the command, then of the collection or table, then
    of the database, then of the client, then the library defaults.

    Args:
        token: an Access Token to the database. Example: `"AstraCS:xyz..."`.
            Since tokens are often scoped to a single database, it is usually
            passed later, when calling `get_database`. Administrative work
            with AstraDBAdmin requires an org-wide token, which then makes
            sense to provide here.
        api_options: a specification - complete or partial - of the API Options
            for this client. If passed alongside `token`, the latter takes
            precedence.

    Example:
        >>> from astradb import DataAPIClient
        >>> my_client = DataAPIClient()
        >>> my_db0 = my_client.get_database(
        ...     "https://01234567-....apps.astra.datastax.com",
        ...     token="AstraCS:...",
        ... )
        >>> my_coll = my_db0.create_collection("movies")
        >>> my_coll.insert_one({"title": "The Title"})
        >>> my_adm = my_client.get_admin(token="AstraCS:org-wide...")
    """

    def __init__(
        self,
        token: str | None | UnsetType = _UNSET,
        *,
        api_options: APIOptions | None = None,
    ) -> None:
        self.api_options = stack_api_options(api_options, APIOptions(token=token))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.api_options})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, DataAPIClient):
            return self.api_options == other.api_options
        else:
            return False

    def __getitem__(self, api_endpoint: str) -> Database:
        return self.get_database(api_endpoint=api_endpoint)

    def with_options(
        self,
        *,
        token: str | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> DataAPIClient:
        """
        Create a clone of this DataAPIClient with some changed attributes.

        Args:
            token: an Access Token to the database.
            api_options: any additional options to set for the clone.
                In case the same setting is also provided as named parameter,
                the latter takes precedence.

        Example:
            >>> other_auth_client = my_client.with_options(token="AstraCS:xyz...")
        """

        return DataAPIClient(
            api_options=stack_api_options(
                stack_api_options(self.api_options, api_options),
                APIOptions(token=token),
            ),
        )

    def get_database(
        self,
        api_endpoint: str,
        *,
        token: str | None | UnsetType = _UNSET,
        keyspace: str | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> Database:
        """
        Get a Database object from this client, for doing data-related work.

        No API call is made: the database is not checked for existence.

        Args:
            api_endpoint: the API Endpoint for the target database
                (e.g. `https://<ID>-<REGION>.apps.astra.datastax.com`).
            token: if supplied, is used by the Database instead of the
                client token.
            keyspace: the keyspace to work in. If omitted, the client setting
                (or the default keyspace) applies.
            api_options: a specification - complete or partial - of the API
                Options for the database. The named parameters, if passed,
                take precedence.

        Returns:
            a Database object with which to work on collections and tables.

        Raises:
            ValueError: if the API endpoint is empty.
        """

        # lazy importing here to avoid circular dependency
        from astradb.database import Database

        if not api_endpoint:
            raise ValueError("An API endpoint is required to get a database.")
        arg_api_options = APIOptions(token=token, keyspace=keyspace)
        return Database(
            api_endpoint=api_endpoint,
            client=self,
            api_options=stack_api_options(api_options, arg_api_options),
        )

    def get_admin(
        self,
        *,
        token: str | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
        dev_ops_url: str = DEFAULT_DEV_OPS_URL,
        dev_ops_api_version: str = DEFAULT_DEV_OPS_API_VERSION,
    ) -> AstraDBAdmin:
        """
        Get an AstraDBAdmin instance, for administrative tasks through
        the DevOps API.

        Args:
            token: if supplied, is used by the admin instead of the client
                token. It must have org-wide admin permissions.
            api_options: options for the admin, taking precedence over
                those of the client. The named parameters, if passed,
                take precedence.
            dev_ops_url: the base URL of the DevOps API.
            dev_ops_api_version: the version of the DevOps API.

        Example:
            >>> my_adm = my_client.get_admin(token="AstraCS:org-wide...")
            >>> my_adm.find_available_regions(region_type="vector")
        """

        # lazy importing here to avoid circular dependency
        from astradb.admin import AstraDBAdmin

        return AstraDBAdmin(
            client=self,
            api_options=stack_api_options(api_options, APIOptions(token=token)),
            dev_ops_url=dev_ops_url,
            dev_ops_api_version=dev_ops_api_version,
        )
