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
from dataclasses import dataclass
from typing import Any

import httpx

from astradb.exceptions.error_descriptors import (
    DataAPIErrorDescriptor,
    DataAPIWarningDescriptor,
)


class DataAPIException(Exception):
    """
    Any exception occurred while issuing requests to the Data API
    and specific to it, such as:
      - the API return a response with an error,
      - a cursor is used after being closed,
    but not, for instance,
      - a network error while sending an HTTP request to the API.
    """

    pass


@dataclass
class DataAPIResponseException(DataAPIException):
    """
    The Data API returned an HTTP 200 ("success") response, which however
    reports API-specific error(s), possibly alongside partial successes.

    The string form of this exception joins, one per line, the summaries of all
    errors found in the response.

    Attributes:
        text: a text message about the exception.
        command: the payload to the API that led to the response.
        raw_response: the full response body from the API, as bytes. It stays
            available for secondary parsing (e.g. of the "status" part).
        error_descriptors: a list of DataAPIErrorDescriptor, one for each
            item in the API response's "errors" field.
        warning_descriptors: a list of DataAPIWarningDescriptor, one for each
            item in the API response's "status.warnings" field (if there are any).
    """

    text: str | None
    command: dict[str, Any] | None
    raw_response: bytes
    error_descriptors: list[DataAPIErrorDescriptor]
    warning_descriptors: list[DataAPIWarningDescriptor]

    def __init__(
        self,
        text: str | None,
        *,
        command: dict[str, Any] | None,
        raw_response: bytes,
        error_descriptors: list[DataAPIErrorDescriptor],
        warning_descriptors: list[DataAPIWarningDescriptor],
    ) -> None:
        super().__init__(text)
        self.text = text
        self.command = command
        self.raw_response = raw_response
        self.error_descriptors = error_descriptors
        self.warning_descriptors = warning_descriptors

    def __str__(self) -> str:
        return self.text or ""

    @staticmethod
    def from_response(
        *,
        command: dict[str, Any] | None,
        raw_response: bytes,
        error_dicts: list[dict[str, Any]],
        warning_descriptors: list[DataAPIWarningDescriptor],
        **kwargs: Any,
    ) -> DataAPIResponseException:
        """Build this exception from the "errors" found in a raw API response."""

        error_descriptors = [
            DataAPIErrorDescriptor(error_dict) for error_dict in error_dicts
        ]
        text = "\n".join(e_d.summary() for e_d in error_descriptors)

        return DataAPIResponseException(
            text,
            command=command,
            raw_response=raw_response,
            error_descriptors=error_descriptors,
            warning_descriptors=warning_descriptors,
            **kwargs,
        )


@dataclass
class DataAPIHttpException(DataAPIException, httpx.HTTPStatusError):
    """
    A request to the Data API resulted in an HTTP 4xx or 5xx response.

    The server usually accompanies such responses with a JSON body such as
    `{"message": "..."}`: in that case the message becomes the text of the
    exception, otherwise the raw response body is used. This class is still
    a (subclass of) `httpx.HTTPStatusError`.

    Attributes:
        text: a text message about the exception.
        status_code: the HTTP status code of the response.
        raw_response: the body of the response, as bytes.
    """

    text: str | None
    status_code: int
    raw_response: bytes

    def __init__(
        self,
        text: str | None,
        *,
        status_code: int,
        raw_response: bytes,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        DataAPIException.__init__(self, text)
        _request = request or httpx.Request("POST", "http://unknown")
        _response = response or httpx.Response(
            status_code, content=raw_response, request=_request
        )
        httpx.HTTPStatusError.__init__(
            self,
            message=text or "",
            request=_request,
            response=_response,
        )
        self.text = text
        self.status_code = status_code
        self.raw_response = raw_response

    def __str__(self) -> str:
        return self.text or f"HTTP error {self.status_code}"

    @classmethod
    def from_status_and_body(
        cls,
        status_code: int,
        body: bytes,
        **kwargs: Any,
    ) -> DataAPIHttpException:
        """
        Parse an HTTP error response into this exception.

        The body is expected to be a single error record; if it carries a string
        "message", that becomes the text, otherwise the whole body does.
        """

        message: str | None
        # the attempt to extract a response structure cannot afford failure.
        try:
            parsed = json.loads(body)
            raw_message = parsed.get("message") if isinstance(parsed, dict) else None
            message = raw_message if isinstance(raw_message, str) else None
        except ValueError:
            message = None
        text = message if message else body.decode("utf-8", errors="replace")

        return cls(
            text,
            status_code=status_code,
            raw_response=body,
            **kwargs,
        )


@dataclass
class DataAPITimeoutException(DataAPIException, httpx.TimeoutException):
    """
    A Data API request timed out. This is raised in place of the underlying
    `httpx.TimeoutException`, of which it is a subclass.

    Attributes:
        text: a textual description of the error
        timeout_type: this denotes the phase of the HTTP request when the event
            occurred ("connect", "read", "write", "pool") or "generic" if there is
            not a specific request associated to the exception.
        endpoint: if the timeout is tied to a specific request, this is the
            URL that the request was targeting.
        raw_payload:  if the timeout is tied to a specific request, this is the
            associated payload (as a string).
    """

    text: str
    timeout_type: str
    endpoint: str | None
    raw_payload: str | None

    def __init__(
        self,
        text: str,
        *,
        timeout_type: str,
        endpoint: str | None,
        raw_payload: str | None,
        request: httpx.Request | None = None,
    ) -> None:
        DataAPIException.__init__(self, text)
        httpx.TimeoutException.__init__(self, text, request=request)
        self.text = text
        self.timeout_type = timeout_type
        self.endpoint = endpoint
        self.raw_payload = raw_payload


@dataclass
class CursorException(DataAPIException):
    """
    A cursor operation cannot be carried out in the current state of the cursor,
    for instance because the cursor has been closed, or because no current
    document is available to decode.

    Attributes:
        text: a text message about the exception.
        cursor_state: a string description of the current state
            of the cursor. See the documentation for Cursor.
    """

    text: str
    cursor_state: str

    def __init__(
        self,
        text: str,
        *,
        cursor_state: str,
    ) -> None:
        super().__init__(text)
        self.text = text
        self.cursor_state = cursor_state


@dataclass
class UnexpectedDataAPIResponseException(DataAPIException):
    """
    The Data API response is malformed in that it does not have
    expected field(s), or they are of the wrong type.

    Attributes:
        text: a text message about the exception.
        raw_response: the response returned by the API in the form of a dict.
    """

    text: str
    raw_response: dict[str, Any] | None

    def __init__(
        self,
        text: str,
        raw_response: dict[str, Any] | None,
    ) -> None:
        super().__init__(text)
        self.text = text
        self.raw_response = raw_response


@dataclass
class NoDocumentsException(DataAPIException):
    """
    A single-document (or single-row) result was decoded, but the API
    response did not contain any.

    Attributes:
        text: a text message about the exception.
    """

    text: str

    def __init__(self, text: str = "no documents found") -> None:
        super().__init__(text)
        self.text = text


@dataclass
class TooManyDocumentsToCountException(DataAPIException):
    """
    A `count_documents()` operation on a collection failed because the resulting
    number of documents exceeded either the upper bound set by the caller or the
    hard limit imposed by the Data API.

    Attributes:
        text: a text message about the exception.
        count: the count returned by the API, which is a lower bound
            of the actual number of documents.
        server_max_count_exceeded: True if the count limit imposed by the API
            is reached. In that case, increasing the upper bound in the method
            invocation is of no help.
    """

    text: str
    count: int
    server_max_count_exceeded: bool

    def __init__(
        self,
        text: str,
        *,
        count: int,
        server_max_count_exceeded: bool,
    ) -> None:
        super().__init__(text)
        self.text = text
        self.count = count
        self.server_max_count_exceeded = server_max_count_exceeded
