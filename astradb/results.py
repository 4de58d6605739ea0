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
from abc import ABC
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from astradb.exceptions import (
    DataAPIWarningDescriptor,
    NoDocumentsException,
    TooManyDocumentsToCountException,
    UnexpectedDataAPIResponseException,
)

T = TypeVar("T")
R = TypeVar("R", bound="_ResponseResult")

Decoder = Callable[[dict[str, Any]], T]


def parse_response_body(raw_response: bytes) -> dict[str, Any]:
    """
    Parse a raw Data API response into a dictionary.

    Raises:
        UnexpectedDataAPIResponseException: if the body is not a JSON object.
    """

    try:
        parsed = json.loads(raw_response)
    except ValueError as exc:
        raise UnexpectedDataAPIResponseException(
            text=f"Response is not valid JSON: {exc}",
            raw_response=None,
        ) from exc
    if not isinstance(parsed, dict):
        raise UnexpectedDataAPIResponseException(
            text="Response is not a JSON object.",
            raw_response=None,
        )
    return parsed


@dataclass
class _ResponseResult(ABC):
    raw_response: bytes | None
    warnings: list[DataAPIWarningDescriptor] = field(default_factory=list)
    error: Exception | None = None

    def _piecewise_repr(self, pieces: list[str | None]) -> str:
        return f"{self.__class__.__name__}({', '.join(pc for pc in pieces if pc)})"

    def __repr__(self) -> str:
        return self._piecewise_repr(
            [
                "raw_response=..." if self.raw_response is not None else None,
                f"warnings={self.warnings}" if self.warnings else None,
                f"error={self.error!r}" if self.error is not None else None,
            ]
        )

    @classmethod
    def from_error(cls: type[R], error: Exception) -> R:
        """
        Create a result holding an error, keeping the response body and
        warnings the exception carries, if any.
        """

        raw_response = getattr(error, "raw_response", None)
        return cls(
            raw_response=raw_response if isinstance(raw_response, bytes) else None,
            warnings=list(getattr(error, "warning_descriptors", None) or []),
            error=error,
        )

    def _data_section(self) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        if not self.raw_response:
            raise NoDocumentsException()
        data = parse_response_body(self.raw_response).get("data")
        if not isinstance(data, dict):
            raise UnexpectedDataAPIResponseException(
                text="Faulty response from the API: no 'data' object.",
                raw_response=None,
            )
        return data


@dataclass(repr=False)
class SingleResult(_ResponseResult):
    """
    The outcome of a command returning (at most) one document, such as `findOne`.

    The response is decoded lazily: errors that occurred when running the
    command are stored and raised only upon `decode`.

    Attributes:
        raw_response: the response body as returned by the API, if any.
        warnings: the warnings returned by the API.
        error: the error that occurred when running the command, if any.
    """

    def decode(self, decoder: Decoder[T] | None = None) -> T | dict[str, Any]:
        """
        Return the document found by the command.

        Args:
            decoder: an optional callable turning the document (a dict) into
                another object. If omitted, the dict itself is returned.

        Raises:
            NoDocumentsException: if no document was found.
            any error stored in this result.
        """

        document = self._data_section().get("document")
        if document is None:
            raise NoDocumentsException()
        if decoder is None:
            return document
        return decoder(document)


@dataclass(repr=False)
class MultipleResult(_ResponseResult):
    """
    The outcome of a command returning a page of documents, such as `find`.
    """

    def decode(
        self, decoder: Decoder[T] | None = None
    ) -> list[T] | list[dict[str, Any]]:
        documents = self._data_section().get("documents")
        if documents is None:
            raise NoDocumentsException()
        if decoder is None:
            return list(documents)
        return [decoder(document) for document in documents]

    @property
    def next_page_state(self) -> str | None:
        if self.error is not None or not self.raw_response:
            return None
        try:
            data = parse_response_body(self.raw_response).get("data") or {}
        except UnexpectedDataAPIResponseException:
            return None
        page_state = data.get("nextPageState")
        return page_state if isinstance(page_state, str) else None

    @property
    def has_next_page(self) -> bool:
        return bool(self.next_page_state)


@dataclass(repr=False)
class CountResult(_ResponseResult):
    """
    The outcome of a `countDocuments` command.
    """

    def count(self, upper_bound: int) -> int:
        """
        Return the number of documents counted by the API.

        Args:
            upper_bound: the maximum count the caller accepts. Zero or a negative
                number means no caller-side limit.

        Raises:
            TooManyDocumentsToCountException: if the API signals that its own
                counting limit was hit, or if the count exceeds `upper_bound`.
        """

        if self.error is not None:
            raise self.error
        if not self.raw_response:
            raise NoDocumentsException()
        status = parse_response_body(self.raw_response).get("status") or {}
        count = status.get("count")
        if not isinstance(count, int):
            raise UnexpectedDataAPIResponseException(
                text="Faulty response from countDocuments API command.",
                raw_response=None,
            )
        more_data = bool(status.get("moreData"))
        if more_data:
            raise TooManyDocumentsToCountException(
                text=f"Document count exceeds {count}, the maximum allowed by the server",
                count=count,
                server_max_count_exceeded=True,
            )
        if upper_bound > 0 and count > upper_bound:
            raise TooManyDocumentsToCountException(
                text=f"Document count exceeds required upper bound ({upper_bound})",
                count=count,
                server_max_count_exceeded=False,
            )
        return count


@dataclass
class OperationResult(ABC):
    """
    Class that represents the generic result of a single mutation operation.

    Attributes:
        raw_results: response/responses from the Data API call.
    """

    raw_results: list[dict[str, Any]]

    def _piecewise_repr(self, pieces: list[str | None]) -> str:
        return f"{self.__class__.__name__}({', '.join(pc for pc in pieces if pc)})"


@dataclass
class CollectionInsertResult(OperationResult):
    """
    Class that represents the result of insert operations on a collection.

    Attributes:
        raw_results: one-item list with the response from the Data API call
        inserted_ids: the IDs of the inserted documents, in insertion order
    """

    inserted_ids: list[Any]

    def __repr__(self) -> str:
        return self._piecewise_repr(
            [
                f"inserted_ids={self.inserted_ids}",
                "raw_results=..." if self.raw_results is not None else None,
            ]
        )


@dataclass
class TableInsertResult(OperationResult):
    """
    Class that represents the result of insert operations on a table.

    Attributes:
        raw_results: one-item list with the response from the Data API call
        inserted_ids: the primary keys of the inserted rows, each a list of
            values in the order given by `primary_key_schema`
        primary_key_schema: a description of the primary-key columns, as
            returned by the API
    """

    inserted_ids: list[Any]
    primary_key_schema: dict[str, Any]

    def __repr__(self) -> str:
        return self._piecewise_repr(
            [
                f"inserted_ids={self.inserted_ids}",
                f"primary_key_schema={self.primary_key_schema}",
                "raw_results=..." if self.raw_results is not None else None,
            ]
        )
