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

from astradb.collection import Collection
from astradb.command import Command
from astradb.info import CollectionDefinition, CreateTableDefinition
from astradb.table import Table
from astradb.utils.api_options import APIOptions, FullAPIOptions, stack_api_options
from astradb.utils.arguments import command_api_options
from astradb.utils.unset import _UNSET, UnsetType

if TYPE_CHECKING:
    from astradb.client import DataAPIClient


logger = logging.getLogger(__name__)


class Database:
    """
    A Data API database. This is the object for doing database-level
    DDL (such as creating and dropping collections and tables) and
    for obtaining Collection and Table objects.

    This class is not meant for direct instantiation by the user, rather
    it is obtained by invoking the `get_database` method of DataAPIClient.

    Args:
        api_endpoint: the full "API Endpoint" string used to reach the Data API,
            e.g. "https://<ID>-<REGION>.apps.astra.datastax.com".
        client: the DataAPIClient this database was obtained from, if any.
            Its options are inherited by the database.
        api_options: the options set on this database. They take precedence
            over those of the client.

    Example:
        >>> from astradb import DataAPIClient
        >>> my_client = DataAPIClient()
        >>> my_db = my_client.get_database(
        ...     "https://01234567-....apps.astra.datastax.com",
        ...     token="AstraCS:...",
        ... )
    """

    def __init__(
        self,
        api_endpoint: str,
        *,
        client: DataAPIClient | None = None,
        api_options: APIOptions | None = None,
    ) -> None:
        self.api_endpoint = api_endpoint.strip("/")
        self.client = client
        self.api_options = api_options

    def __repr__(self) -> str:
        ep_desc = f'api_endpoint="{self.api_endpoint}"'
        keyspace_desc = f'keyspace="{self.keyspace}"'
        return f"{self.__class__.__name__}({ep_desc}, {keyspace_desc})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Database):
            return all(
                [
                    self.api_endpoint == other.api_endpoint,
                    self.client is other.client,
                    self.api_options == other.api_options,
                ]
            )
        else:
            return False

    def __getitem__(self, collection_name: str) -> Collection:
        return self.get_collection(name=collection_name)

    @property
    def resolved_api_options(self) -> FullAPIOptions:
        """
        The options in effect for this database, merging the defaults,
        the client options and the database options.
        """

        return Command(database=self, name="", payload=None).resolve_options()

    @property
    def keyspace(self) -> str:
        """The keyspace the database works in, unless overridden."""
        return self.resolved_api_options.keyspace

    def _command(
        self,
        name: str,
        payload: Any,
        *,
        api_options: APIOptions | None = None,
        keyspace: str | None = None,
    ) -> Command:
        return Command(
            database=self,
            name=name,
            payload=payload,
            command_options=api_options,
            keyspace=keyspace or "",
        )

    def get_collection(
        self, name: str, *, api_options: APIOptions | None = None
    ) -> Collection:
        """
        Get a Collection object for an existing collection. No API call is
        made: the collection is not checked for existence.

        Args:
            name: the name of the collection.
            api_options: options for the collection, taking precedence over
                those of the database and the client.
        """

        return Collection(database=self, name=name, api_options=api_options)

    def get_table(self, name: str, *, api_options: APIOptions | None = None) -> Table:
        """
        Get a Table object for an existing table. No API call is made.

        Args:
            name: the name of the table.
            api_options: options for the table, taking precedence over
                those of the database and the client.
        """

        return Table(database=self, name=name, api_options=api_options)

    def create_collection(
        self,
        name: str,
        *,
        definition: CollectionDefinition | dict[str, Any] | None = None,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> Collection:
        """
        Create a collection on the database and return the Collection object.

        Args:
            name: the name of the collection.
            definition: a CollectionDefinition (or an equivalent dictionary)
                with the collection settings, such as vector or indexing.
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
            api_options: options for this command, which are also set
                on the returned Collection.

        Example:
            >>> my_db.create_collection(
            ...     "movies",
            ...     definition=CollectionDefinition.builder().set_vector_dimension(3).build(),
            ... )
            Collection(name="movies", database.api_endpoint="https://...")
        """

        payload: dict[str, Any] = {"name": name}
        if definition is not None:
            options = CollectionDefinition.coerce(definition).as_dict()
            if options:
                payload["options"] = options
        command = self._command(
            "createCollection",
            payload,
            api_options=command_api_options(api_options, timeout_ms),
        )
        logger.info(f"createCollection('{name}')")
        command.execute()
        logger.info(f"finished createCollection('{name}')")
        return self.get_collection(name, api_options=api_options)

    def drop_collection(
        self,
        name: str,
        *,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> None:
        """Drop a collection from the database, along with all its documents."""

        command = self._command(
            "deleteCollection",
            {"name": name},
            api_options=command_api_options(api_options, timeout_ms),
        )
        logger.info(f"deleteCollection('{name}')")
        command.execute()
        logger.info(f"finished deleteCollection('{name}')")

    def create_table(
        self,
        name: str,
        *,
        definition: CreateTableDefinition | dict[str, Any],
        if_not_exists: bool = False,
        keyspace: str | None = None,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> Table:
        """
        Create a table on the database and return the Table object.

        Args:
            name: the name of the table.
            definition: a CreateTableDefinition (or an equivalent dictionary)
                with the columns and the primary key of the table.
            if_not_exists: if True, creating an existing table is not an error.
            keyspace: the keyspace where the table is created, if other than
                that of the database. The returned Table works in this keyspace.
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
            api_options: options for this command, which are also set
                on the returned Table.
        """

        payload: dict[str, Any] = {
            "name": name,
            "definition": CreateTableDefinition.coerce(definition).as_dict(),
        }
        if if_not_exists:
            payload["options"] = {"ifNotExists": True}
        command = self._command(
            "createTable",
            payload,
            api_options=command_api_options(api_options, timeout_ms),
            keyspace=keyspace,
        )
        logger.info(f"createTable('{name}')")
        command.execute()
        logger.info(f"finished createTable('{name}')")
        table_api_options = (
            stack_api_options(api_options, APIOptions(keyspace=keyspace))
            if keyspace
            else api_options
        )
        return self.get_table(name, api_options=table_api_options)

    def drop_table(
        self,
        name: str,
        *,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> None:
        """Drop a table from the database, along with all its rows and indexes."""

        command = self._command(
            "dropTable",
            {"name": name},
            api_options=command_api_options(api_options, timeout_ms),
        )
        logger.info(f"dropTable('{name}')")
        command.execute()
        logger.info(f"finished dropTable('{name}')")

    def drop_table_index(
        self,
        name: str,
        *,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> None:
        """
        Drop an index from a table. Index names are unique within a keyspace,
        so the table needs not be specified.
        """

        command = self._command(
            "dropIndex",
            {"name": name},
            api_options=command_api_options(api_options, timeout_ms),
        )
        logger.info(f"dropIndex('{name}')")
        command.execute()
        logger.info(f"finished dropIndex('{name}')")
