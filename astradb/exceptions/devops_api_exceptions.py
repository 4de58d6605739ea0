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


class DevOpsAPIException(Exception):
    """
    An exception specific to issuing requests to the DevOps API.
    """

    def __init__(self, text: str | None = None):
        Exception.__init__(self, text or "")


@dataclass
class DevOpsAPIHttpException(DevOpsAPIException, httpx.HTTPStatusError):
    """
    A request to the DevOps API resulted in an HTTP 4xx or 5xx response.

    This class acts as the DevOps counterpart to DataAPIHttpException
    to facilitate a symmetric handling of errors at application level.
    The text has the form "DevOps API error (status <N>): <detail>", where the
    detail is the "message" from the response body, or the raw body itself.

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
        DevOpsAPIException.__init__(self, text)
        _request = request or httpx.Request("GET", "http://unknown")
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
    ) -> DevOpsAPIHttpException:
        """Parse an HTTP error response from the DevOps API into this exception."""

        message: str | None
        # the attempt to extract a response structure cannot afford failure.
        try:
            parsed = json.loads(body)
            raw_message = parsed.get("message") if isinstance(parsed, dict) else None
            message = raw_message if isinstance(raw_message, str) else None
        except ValueError:
            message = None
        detail = message if message else body.decode("utf-8", errors="replace")

        return cls(
            f"DevOps API error (status {status_code}): {detail}",
            status_code=status_code,
            raw_response=body,
            **kwargs,
        )


@dataclass
class DevOpsAPITimeoutException(DevOpsAPIException, httpx.TimeoutException):
    """
    A DevOps API request timed out. This is raised in place of the underlying
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
        DevOpsAPIException.__init__(self, text)
        httpx.TimeoutException.__init__(self, text, request=request)
        self.text = text
        self.timeout_type = timeout_type
        self.endpoint = endpoint
        self.raw_payload = raw_payload


@dataclass
class UnexpectedDevOpsAPIResponseException(DevOpsAPIException):
    """
    The DevOps API response is malformed in that it does not have
    expected field(s), or they are of the wrong type.

    Attributes:
        text: a text message about the exception.
        raw_response: the response returned by the API, as text.
    """

    text: str
    raw_response: str | None

    def __init__(
        self,
        text: str,
        raw_response: str | None,
    ) -> None:
        super().__init__(text)
        self.text = text
        self.raw_response = raw_response
