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

import httpx

from astradb.exceptions.data_api_exceptions import (
    CursorException,
    DataAPIException,
    DataAPIHttpException,
    DataAPIResponseException,
    DataAPITimeoutException,
    NoDocumentsException,
    TooManyDocumentsToCountException,
    UnexpectedDataAPIResponseException,
)
from astradb.exceptions.devops_api_exceptions import (
    DevOpsAPIException,
    DevOpsAPIHttpException,
    DevOpsAPITimeoutException,
    UnexpectedDevOpsAPIResponseException,
)
from astradb.exceptions.error_descriptors import (
    DataAPIErrorDescriptor,
    DataAPIWarningDescriptor,
)


class _TimeoutContext:
    """
    This class encodes standardized "enriched information" attached to a timeout
    value to obey. This makes it possible, in case the timeout is raised, to present
    the user with a better error message detailing the name of the setting responsible
    for the timeout.

    Args:
        request_ms: the number of milliseconds a given HTTP request is allowed
            to last. None or zero mean no timeout.
        connection_ms: the number of milliseconds allowed for establishing
            the connection. None means the same as `request_ms`.
        label: a string, providing the name of the timeout setting as known by the user.
    """

    request_ms: int | None
    connection_ms: int | None
    label: str | None

    def __init__(
        self,
        *,
        request_ms: int | None,
        connection_ms: int | None = None,
        label: str | None = None,
    ) -> None:
        self.request_ms = request_ms
        self.connection_ms = connection_ms
        self.label = label

    def __bool__(self) -> bool:
        return self.request_ms is not None or self.connection_ms is not None


def _timeout_exception_details(
    httpx_timeout: httpx.TimeoutException,
    timeout_context: _TimeoutContext,
) -> tuple[str, str, str | None, str | None]:
    text: str
    text_0 = str(httpx_timeout) or "timed out"
    timeout_ms = timeout_context.request_ms
    timeout_label = timeout_context.label
    if timeout_ms:
        if timeout_label:
            text = f"{text_0} (timeout honoured: {timeout_label} = {timeout_ms} ms)"
        else:
            text = f"{text_0} (timeout honoured: {timeout_ms} ms)"
    else:
        text = text_0
    if isinstance(httpx_timeout, httpx.ConnectTimeout):
        timeout_type = "connect"
    elif isinstance(httpx_timeout, httpx.ReadTimeout):
        timeout_type = "read"
    elif isinstance(httpx_timeout, httpx.WriteTimeout):
        timeout_type = "write"
    elif isinstance(httpx_timeout, httpx.PoolTimeout):
        timeout_type = "pool"
    else:
        timeout_type = "generic"
    endpoint: str | None = None
    raw_payload: str | None = None
    try:
        request = httpx_timeout.request
    except RuntimeError:
        # no request attached to this error
        request = None
    if request is not None:
        endpoint = str(request.url)
        if isinstance(request.content, bytes):
            raw_payload = request.content.decode()
    return text, timeout_type, endpoint, raw_payload


def to_dataapi_timeout_exception(
    httpx_timeout: httpx.TimeoutException,
    timeout_context: _TimeoutContext,
) -> DataAPITimeoutException:
    text, timeout_type, endpoint, raw_payload = _timeout_exception_details(
        httpx_timeout, timeout_context
    )
    return DataAPITimeoutException(
        text=text,
        timeout_type=timeout_type,
        endpoint=endpoint,
        raw_payload=raw_payload,
    )


def to_devopsapi_timeout_exception(
    httpx_timeout: httpx.TimeoutException,
    timeout_context: _TimeoutContext,
) -> DevOpsAPITimeoutException:
    text, timeout_type, endpoint, raw_payload = _timeout_exception_details(
        httpx_timeout, timeout_context
    )
    return DevOpsAPITimeoutException(
        text=text,
        timeout_type=timeout_type,
        endpoint=endpoint,
        raw_payload=raw_payload,
    )


__all__ = [
    "DevOpsAPIException",
    "DevOpsAPIHttpException",
    "DevOpsAPITimeoutException",
    "UnexpectedDevOpsAPIResponseException",
    "DataAPIErrorDescriptor",
    "DataAPIWarningDescriptor",
    "DataAPIException",
    "DataAPIHttpException",
    "DataAPITimeoutException",
    "CursorException",
    "NoDocumentsException",
    "TooManyDocumentsToCountException",
    "UnexpectedDataAPIResponseException",
    "DataAPIResponseException",
]

__pdoc__ = {
    "to_dataapi_timeout_exception": False,
    "to_devopsapi_timeout_exception": False,
}
