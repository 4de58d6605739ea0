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
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import httpx

from astradb.command import Command
from astradb.cursors import Cursor, FindPage
from astradb.exceptions import DataAPIException, UnexpectedDataAPIResponseException
from astradb.filters import Filter
from astradb.info import TableIndexDescriptor
from astradb.results import SingleResult, TableInsertResult, parse_response_body
from astradb.utils.api_options import APIOptions
from astradb.utils.arguments import (
    check_filter,
    command_api_options,
    ensure_non_empty_list,
)
from astradb.utils.unset import _UNSET, UnsetType

if TYPE_CHECKING:
    from astradb.database import Database


logger = logging.getLogger(__name__)


class Table:
    """
    A Data API table, the object to interact with the rows it holds and
    with its indexes.

    This class is not meant for direct instantiation by the user, rather
    it is obtained by invoking methods such as `get_table` or `create_table`
    of Database.

    Args:
        database: the Database this table belongs to.
        name: the table name.
        api_options: the options set on this table. They apply to all
            commands run on it and take precedence over those of the
            database and the client.
    """

    def __init__(
        self,
        *,
        database: Database,
        name: str,
        api_options: APIOptions | None = None,
    ) -> None:
        self.database = database
        self.name = name
        self.api_options = api_options

    def __repr__(self) -> str:
        return (
            f'{self.__class__.__name__}(name="{self.name}", '
            f'database.api_endpoint="{self.database.api_endpoint}")'
        )

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Table):
            return all(
                [
                    self.name == other.name,
                    self.database == other.database,
                    self.api_options == other.api_options,
                ]
            )
        else:
            return False

    def _command(
        self,
        name: str,
        payload: Any,
        *,
        api_options: APIOptions | None = None,
        bulk: bool = False,
    ) -> Command:
        return Command(
            database=self.database,
            name=name,
            payload=payload,
            resource_name=self.name,
            resource_options=self.api_options,
            command_options=api_options,
            bulk=bulk,
        )

    def _insert_result(self, body: bytes, command_name: str) -> TableInsertResult:
        response = parse_response_body(body)
        status = response.get("status") or {}
        inserted_ids = status.get("insertedIds")
        if not isinstance(inserted_ids, list):
            raise UnexpectedDataAPIResponseException(
                text=f"Faulty response from {command_name} API command.",
                raw_response=response,
            )
        return TableInsertResult(
            raw_results=[response],
            inserted_ids=inserted_ids,
            primary_key_schema=status.get("primaryKeySchema") or {},
        )

    def insert_one(
        self,
        row: dict[str, Any],
        *,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> TableInsertResult:
        """
        Insert a single row in the table. A row whose primary key
        exists already is overwritten.

        Args:
            row: a dictionary expressing the row to insert.
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
            api_options: options overriding, for this command only, those of
                the table, database and client.

        Returns:
            a TableInsertResult object.

        Example:
            >>> my_table.insert_one({"match_id": "m1", "round": 1, "winner": "Anna"})
            TableInsertResult(inserted_ids=[['m1', 1]], primary_key_schema=..., raw_results=...)
        """

        command = self._command(
            "insertOne",
            {"document": row},
            api_options=command_api_options(api_options, timeout_ms),
        )
        logger.info(f"insertOne on '{self.name}'")
        body, _ = command.execute()
        logger.info(f"finished insertOne on '{self.name}'")
        return self._insert_result(body, "insertOne")

    def insert_many(
        self,
        rows: list[dict[str, Any]],
        *,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> TableInsertResult:
        """
        Insert a list of rows in the table with a single command.

        Raises:
            TypeError: if `rows` is not a list.
            ValueError: if `rows` is empty.
        """

        ensure_non_empty_list(rows, "rows")
        command = self._command(
            "insertMany",
            {"documents": list(rows)},
            api_options=command_api_options(api_options, timeout_ms, bulk=True),
            bulk=True,
        )
        logger.info(f"insertMany on '{self.name}'")
        body, _ = command.execute()
        logger.info(f"finished insertMany on '{self.name}'")
        return self._insert_result(body, "insertMany")

    def find_one(
        self,
        filter: Filter | Mapping[str, Any] | None = None,
        *,
        projection: dict[str, bool] | None = None,
        sort: dict[str, Any] | None = None,
        include_similarity: bool | None = None,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> SingleResult:
        """
        Find at most one row matching a filter.

        Errors are stored on the returned result and raised when decoding it.

        Args:
            filter: a `Filter`, a dictionary or None (to match any row).
            projection: which columns to return, e.g. `{"winner": True}`.
            sort: a sort specification, e.g. a vector sort.
            include_similarity: whether to include the "$similarity" key
                in the row, for vector searches.
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
            api_options: options overriding, for this command only, those of
                the table, database and client.
        """

        try:
            check_filter(filter, allow_none=True)
        except TypeError as exc:
            return SingleResult.from_error(exc)
        payload = {
            k: v
            for k, v in {
                "filter": filter,
                "sort": sort or None,
                "projection": projection or None,
                "options": (
                    None
                    if include_similarity is None
                    else {"includeSimilarity": include_similarity}
                ),
            }.items()
            if v is not None
        }
        command = self._command(
            "findOne",
            payload,
            api_options=command_api_options(api_options, timeout_ms),
        )
        logger.info(f"findOne on '{self.name}'")
        try:
            body, warnings = command.execute()
        except (DataAPIException, httpx.HTTPError) as exc:
            return SingleResult.from_error(exc)
        logger.info(f"finished findOne on '{self.name}'")
        return SingleResult(raw_response=body, warnings=warnings)

    def find(
        self,
        filter: Filter | Mapping[str, Any] | None = None,
        *,
        projection: dict[str, bool] | None = None,
        sort: dict[str, Any] | None = None,
        limit: int | None = None,
        skip: int | None = None,
        include_similarity: bool | None = None,
        initial_page_state: str | None = None,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> Cursor:
        """
        Find rows matching a filter, returning a cursor over them.

        Args:
            filter: a `Filter`, a dictionary or None (to match any row).
            projection: which columns to return.
            sort: a sort specification.
            limit: the maximum number of rows returned overall.
            skip: the number of rows to skip (requires a sort).
            include_similarity: whether to include the "$similarity" key
                in the rows, for vector searches.
            initial_page_state: a page state to resume a previous paginated
                search. It only applies to the first request.
            timeout_ms: a timeout, in milliseconds, for each HTTP request
                issued by the cursor to fetch a page.
            api_options: options overriding, for the commands run by the
                cursor, those of the table, database and client.

        Returns:
            a Cursor. An invalid filter gives a cursor that yields nothing and
            whose `err` is a TypeError.
        """

        try:
            check_filter(filter, allow_none=True)
        except TypeError as exc:
            return Cursor.from_error(exc)

        page_options = command_api_options(api_options, timeout_ms)

        def _fetch_page(page_state: str | None) -> FindPage:
            find_options = {
                k: v
                for k, v in {
                    "limit": limit,
                    "skip": skip,
                    "includeSimilarity": include_similarity,
                    "pageState": (
                        page_state if page_state is not None else initial_page_state
                    ),
                }.items()
                if v is not None
            }
            payload = {
                k: v
                for k, v in {
                    "filter": filter,
                    "sort": sort or None,
                    "projection": projection or None,
                    "options": find_options or None,
                }.items()
                if v is not None
            }
            command = self._command("find", payload, api_options=page_options)
            logger.info(f"find on '{self.name}'")
            body, warnings = command.execute()
            logger.info(f"finished find on '{self.name}'")
            data = parse_response_body(body).get("data") or {}
            rows = data.get("documents")
            if rows is not None and not isinstance(rows, list):
                raise UnexpectedDataAPIResponseException(
                    text="Faulty response from find API command.",
                    raw_response=None,
                )
            return FindPage(
                results=rows or [],
                next_page_state=data.get("nextPageState"),
                warnings=warnings,
            )

        return Cursor(_fetch_page)

    def create_index(
        self,
        name: str,
        column: str | dict[str, str],
        *,
        if_not_exists: bool = False,
        ascii: bool | None = None,
        normalize: bool | None = None,
        case_sensitive: bool | None = None,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> None:
        """
        Create a regular index on a column of the table.

        Args:
            name: the name of the index.
            column: the column to index. For map columns, a dictionary such
                as `{"column_name": "$keys"}` selects what to index.
            if_not_exists: if True, creating an existing index is not an error.
            ascii: for text columns, whether to convert to ASCII when indexing.
            normalize: for text columns, whether to normalize when indexing.
            case_sensitive: for text columns, whether the index is
                case-sensitive.
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
            api_options: options overriding, for this command only, those of
                the table, database and client.
        """

        index_options = {
            k: v
            for k, v in {
                "ascii": ascii,
                "normalize": normalize,
                "caseSensitive": case_sensitive,
            }.items()
            if v is not None
        }
        definition: dict[str, Any] = {"column": column}
        if index_options:
            definition["options"] = index_options
        payload: dict[str, Any] = {"name": name, "definition": definition}
        if if_not_exists:
            payload["options"] = {"ifNotExists": True}
        command = self._command(
            "createIndex",
            payload,
            api_options=command_api_options(api_options, timeout_ms),
        )
        logger.info(f"createIndex on '{self.name}'")
        command.execute()
        logger.info(f"finished createIndex on '{self.name}'")

    def create_vector_index(
        self,
        name: str,
        column: str,
        *,
        if_not_exists: bool = False,
        metric: str | None = None,
        source_model: str | None = None,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> None:
        """
        Create a vector index on a vector column of the table, enabling
        vector searches on it.

        Args:
            name: the name of the index.
            column: the vector column to index.
            if_not_exists: if True, creating an existing index is not an error.
            metric: the similarity metric, one of the `VectorMetric` values.
            source_model: a hint about the embedding model, for the index
                to tune itself.
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
            api_options: options overriding, for this command only, those of
                the table, database and client.
        """

        index_options = {
            k: v
            for k, v in {
                "metric": metric,
                "sourceModel": source_model,
            }.items()
            if v
        }
        definition: dict[str, Any] = {"column": column}
        if index_options:
            definition["options"] = index_options
        payload: dict[str, Any] = {"name": name, "definition": definition}
        if if_not_exists:
            payload["options"] = {"ifNotExists": True}
        command = self._command(
            "createVectorIndex",
            payload,
            api_options=command_api_options(api_options, timeout_ms),
        )
        logger.info(f"createVectorIndex on '{self.name}'")
        command.execute()
        logger.info(f"finished createVectorIndex on '{self.name}'")

    def list_indexes(
        self,
        *,
        explain: bool = False,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> list[TableIndexDescriptor]:
        """
        List the indexes on this table.

        Args:
            explain: if True, the full definition of each index is returned;
                otherwise, only the names.
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
            api_options: options overriding, for this command only, those of
                the table, database and client.

        Returns:
            a list of TableIndexDescriptor objects. Without `explain`, these
            only carry the index name.
        """

        payload: dict[str, Any] = {}
        if explain:
            payload["options"] = {"explain": True}
        command = self._command(
            "listIndexes",
            payload,
            api_options=command_api_options(api_options, timeout_ms),
        )
        logger.info(f"listIndexes on '{self.name}'")
        body, _ = command.execute()
        logger.info(f"finished listIndexes on '{self.name}'")
        response = parse_response_body(body)
        indexes = (response.get("status") or {}).get("indexes")
        if not isinstance(indexes, list):
            raise UnexpectedDataAPIResponseException(
                text="Faulty response from listIndexes API command.",
                raw_response=response,
            )
        return [TableIndexDescriptor.coerce(index) for index in indexes]
