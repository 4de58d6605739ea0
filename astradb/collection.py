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
from astradb.results import (
    CollectionInsertResult,
    CountResult,
    SingleResult,
    parse_response_body,
)
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


class Collection:
    """
    A Data API collection, the object to interact with the documents it holds.

    This class is not meant for direct instantiation by the user, rather
    it is obtained by invoking methods such as `get_collection` of Database.

    Args:
        database: the Database this collection belongs to.
        name: the collection name.
        api_options: the options set on this collection. They apply to
            all commands run on it and take precedence over those
            of the database and the client.

    Example:
        >>> my_coll = my_db.get_collection("my_collection")
        >>> my_coll.insert_one({"_id": "a", "active": True})
        CollectionInsertResult(inserted_ids=['a'], raw_results=...)
        >>> my_coll.find_one({"_id": "a"}).decode()
        {'_id': 'a', 'active': True}
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
        if isinstance(other, Collection):
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

    def _insert_result(self, body: bytes, command_name: str) -> CollectionInsertResult:
        response = parse_response_body(body)
        inserted_ids = (response.get("status") or {}).get("insertedIds")
        if not isinstance(inserted_ids, list):
            raise UnexpectedDataAPIResponseException(
                text=f"Faulty response from {command_name} API command.",
                raw_response=response,
            )
        return CollectionInsertResult(raw_results=[response], inserted_ids=inserted_ids)

    def insert_one(
        self,
        document: dict[str, Any],
        *,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> CollectionInsertResult:
        """
        Insert a single document in the collection.

        Args:
            document: the dictionary expressing the document to insert.
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
                If not passed, the collection-level setting is used instead.
            api_options: options overriding, for this command only, those of
                the collection, database and client.

        Returns:
            a CollectionInsertResult object. Warnings are not attached to the
            result, they reach the warning handler if one is configured.

        Raises:
            DataAPIResponseException: for instance, if a document with the
                same `_id` exists already.
        """

        command = self._command(
            "insertOne",
            {"document": document},
            api_options=command_api_options(api_options, timeout_ms),
        )
        logger.info(f"insertOne on '{self.name}'")
        body, _ = command.execute()
        logger.info(f"finished insertOne on '{self.name}'")
        return self._insert_result(body, "insertOne")

    def insert_many(
        self,
        documents: list[dict[str, Any]],
        *,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> CollectionInsertResult:
        """
        Insert a list of documents in the collection with a single command.

        The bulk-operation timeout, if configured, is used in place of the
        request timeout.

        Args:
            documents: a non-empty list of documents.
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
                If passed, it also replaces the bulk-operation timeout.
            api_options: options overriding, for this command only, those of
                the collection, database and client.

        Raises:
            TypeError: if `documents` is not a list.
            ValueError: if `documents` is empty.
        """

        ensure_non_empty_list(documents, "documents")
        command = self._command(
            "insertMany",
            {"documents": list(documents)},
            api_options=command_api_options(api_options, timeout_ms, bulk=True),
            bulk=True,
        )
        logger.info(f"insertMany on '{self.name}'")
        body, _ = command.execute()
        logger.info(f"finished insertMany on '{self.name}'")
        return self._insert_result(body, "insertMany")

    def find_one(
        self,
        filter: Filter | Mapping[str, Any],
        *,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> SingleResult:
        """
        Find at most one document matching a filter.

        Errors are not raised here: they are stored on the returned result
        and raised when decoding it.

        Args:
            filter: a `Filter` or a dictionary such as `{"name": "John"}`.
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
            api_options: options overriding, for this command only, those of
                the collection, database and client.

        Returns:
            a SingleResult; its `decode()` method returns the document
            or raises NoDocumentsException.
        """

        try:
            check_filter(filter)
        except TypeError as exc:
            return SingleResult.from_error(exc)
        command = self._command(
            "findOne",
            {"filter": filter},
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
        filter: Filter | Mapping[str, Any],
        *,
        projection: dict[str, Any] | None = None,
        sort: dict[str, Any] | None = None,
        limit: int | None = None,
        skip: int | None = None,
        include_similarity: bool | None = None,
        include_sort_vector: bool | None = None,
        initial_page_state: str | None = None,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> Cursor:
        """
        Find documents matching a filter, returning a cursor over them.

        No request is made until the cursor is consumed; further pages are
        fetched transparently as needed.

        Args:
            filter: a `Filter` or a dictionary such as `{"active": True}`.
            projection: which fields to return, e.g. `{"name": True}`.
            sort: a sort specification, e.g. `{"created": -1}` or a vector
                sort `{"$vector": [0.1, 0.2]}`.
            limit: the maximum number of documents returned overall.
            skip: the number of documents to skip (requires a sort).
            include_similarity: whether to include the "$similarity" key in
                the documents, for vector searches.
            include_sort_vector: whether the API should return the vector
                used for sorting.
            initial_page_state: a page state to resume a previous paginated
                search. It only applies to the first request.
            timeout_ms: a timeout, in milliseconds, for each HTTP request
                issued by the cursor to fetch a page.
            api_options: options overriding, for the commands run by the
                cursor, those of the collection, database and client.

        Returns:
            a Cursor. An invalid filter gives a cursor that yields nothing and
            whose `err` is a TypeError.

        Example:
            >>> cursor = my_coll.find({"active": True}, limit=10)
            >>> for doc in cursor:
            ...     print(doc["_id"])
        """

        try:
            check_filter(filter)
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
                    "includeSortVector": include_sort_vector,
                    "pageState": (
                        page_state if page_state is not None else initial_page_state
                    ),
                }.items()
                if v is not None
            }
            payload: dict[str, Any] = {
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
            documents = data.get("documents")
            if documents is not None and not isinstance(documents, list):
                raise UnexpectedDataAPIResponseException(
                    text="Faulty response from find API command.",
                    raw_response=None,
                )
            return FindPage(
                results=documents or [],
                next_page_state=data.get("nextPageState"),
                warnings=warnings,
            )

        return Cursor(_fetch_page)

    def count_documents(
        self,
        filter: Filter | Mapping[str, Any],
        *,
        upper_bound: int,
        timeout_ms: int | None | UnsetType = _UNSET,
        api_options: APIOptions | None = None,
    ) -> int:
        """
        Count the documents in the collection matching a filter.

        Counting is expensive: a reasonable `upper_bound` should be given.

        Args:
            filter: a `Filter` or a dictionary. Pass `{}` to count everything.
            upper_bound: the maximum count accepted. If the count exceeds it,
                an exception is raised. Zero means no caller-side limit (the
                API enforces its own in any case).
            timeout_ms: a timeout, in milliseconds, for the HTTP request.
            api_options: options overriding, for this command only, those of
                the collection, database and client.

        Returns:
            the exact number of matching documents.

        Raises:
            TooManyDocumentsToCountException: if the count exceeds either
                `upper_bound` or the maximum the API can count.
        """

        check_filter(filter)
        command = self._command(
            "countDocuments",
            {"filter": filter},
            api_options=command_api_options(api_options, timeout_ms),
        )
        logger.info(f"countDocuments on '{self.name}'")
        body, warnings = command.execute()
        logger.info(f"finished countDocuments on '{self.name}'")
        return CountResult(raw_response=body, warnings=warnings).count(upper_bound)
