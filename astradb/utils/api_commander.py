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
from collections.abc import Mapping
from typing import Any, Iterable

import httpx

from astradb.exceptions import (
    DataAPIHttpException,
    DataAPIResponseException,
    DataAPIWarningDescriptor,
    DevOpsAPIHttpException,
    _TimeoutContext,
    to_dataapi_timeout_exception,
    to_devopsapi_timeout_exception,
)
from astradb.settings.defaults import (
    DEFAULT_REDACTED_HEADER_NAMES,
    FIXED_SECRET_PLACEHOLDER,
)
from astradb.utils.api_options import WarningHandler, default_http_client
from astradb.utils.request_tools import (
    HttpMethod,
    log_httpx_request,
    log_httpx_response,
    to_httpx_timeout,
)

logger = logging.getLogger(__name__)


class _PayloadEncoder(json.JSONEncoder):
    """
    JSON encoder aware of the library's own payload objects (filters,
    table and collection definitions), which expose either a `to_json`
    or an `as_dict` method returning plain JSON-ready structures.
    """

    def default(self, obj: object) -> Any:
        if hasattr(obj, "to_json"):
            return obj.to_json()
        if hasattr(obj, "as_dict"):
            return obj.as_dict()
        return super().default(obj)


def encode_payload(payload: Any) -> str:
    return json.dumps(
        payload,
        allow_nan=False,
        separators=(",", ":"),
        ensure_ascii=False,
        cls=_PayloadEncoder,
    )


def merge_headers(*header_maps: Mapping[str, str | None]) -> dict[str, str]:
    """
    Merge header dictionaries, later ones winning, with header names compared
    case-insensitively. A None value removes the header.
    """

    merged: dict[str, tuple[str, str | None]] = {}
    for header_map in header_maps:
        for name, value in header_map.items():
            merged[name.lower()] = (name, value)
    return {name: value for name, value in merged.values() if value is not None}


def _parse_json_body(body: bytes) -> Any:
    try:
        return json.loads(body) if body else None
    except ValueError:
        logger.debug("Response body is not valid JSON, no errors/warnings extracted")
        return None


def _extract_warnings(parsed_body: Any) -> list[DataAPIWarningDescriptor]:
    # warnings are diagnostic: a malformed "status.warnings" is never an error
    try:
        warning_items = (parsed_body.get("status") or {}).get("warnings") or []
        return [DataAPIWarningDescriptor(w_item) for w_item in warning_items]
    except (AttributeError, TypeError) as exc:
        logger.debug(f"Could not extract warnings from response: {exc}")
        return []


class APICommander:
    """
    The object issuing HTTP requests to an API and classifying the responses.

    An APICommander is bound to a base URL (endpoint plus path), to a set of
    headers and to the HTTP client in use. Commands for the Data API are POSTed
    as JSON and their response is split into payload, warnings and errors;
    for the DevOps API (`dev_ops_api=True`) only the HTTP status is checked.
    """

    def __init__(
        self,
        *,
        api_endpoint: str,
        path: str,
        headers: Mapping[str, str | None] = {},
        http_client: httpx.Client | None = None,
        warning_handler: WarningHandler | None = None,
        redacted_header_names: Iterable[str] | None = None,
        dev_ops_api: bool = False,
    ) -> None:
        self.api_endpoint = api_endpoint.rstrip("/")
        self.path = path.lstrip("/")
        self.headers = headers
        self.http_client = http_client or default_http_client
        self.warning_handler = warning_handler
        self.redacted_header_names = set(redacted_header_names or [])
        self.upper_full_redacted_header_names = {
            header_name.upper()
            for header_name in (
                self.redacted_header_names | DEFAULT_REDACTED_HEADER_NAMES
            )
        }
        self.dev_ops_api = dev_ops_api
        self._api_description = "DevOps API" if self.dev_ops_api else "Data API"

        self.full_headers = merge_headers(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            self.headers,
        )
        self._loggable_headers = {
            k: v
            if k.upper() not in self.upper_full_redacted_header_names
            else FIXED_SECRET_PLACEHOLDER
            for k, v in self.full_headers.items()
        }
        self.full_path = ("/".join([self.api_endpoint, self.path])).rstrip("/")

    def __repr__(self) -> str:
        pieces = [
            pc
            for pc in (
                f"api_endpoint={self.api_endpoint}",
                f"path={self.path}",
                f"dev_ops_api={self.dev_ops_api}",
            )
            if pc is not None
        ]
        inner_desc = ", ".join(pieces)
        return f"{self.__class__.__name__}({inner_desc})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, APICommander):
            return all(
                [
                    self.api_endpoint == other.api_endpoint,
                    self.path == other.path,
                    self.headers == other.headers,
                    self.http_client is other.http_client,
                    self.redacted_header_names == other.redacted_header_names,
                    self.dev_ops_api == other.dev_ops_api,
                ]
            )
        else:
            return False

    def _compose_request_url(self, additional_path: str | None) -> str:
        if additional_path:
            return "/".join([self.full_path.rstrip("/"), additional_path.lstrip("/")])
        else:
            return self.full_path

    def extract_errors(
        self,
        status_code: int,
        body: bytes,
        payload: dict[str, Any] | None = None,
    ) -> tuple[bytes, list[DataAPIWarningDescriptor]]:
        """
        Classify a Data API response into its payload, warnings and errors.

        - An HTTP status of 400 or more raises a DataAPIHttpException
          (no warnings are looked for in this case).
        - Otherwise, a non-empty "errors" list in the body raises a
          DataAPIResponseException, carrying all error descriptors, the warnings
          and the raw body.
        - Warnings ("status.warnings") are extracted whenever possible and each one
          is logged and passed to the warning handler before returning or raising.

        Args:
            status_code: the HTTP status code of the response.
            body: the raw response body.
            payload: the command that was sent, used to enrich exceptions.

        Returns:
            a (body, warnings) pair. The body is returned unchanged.
        """

        if status_code >= 400:
            raise DataAPIHttpException.from_status_and_body(status_code, body)

        parsed_body = _parse_json_body(body)
        warnings = _extract_warnings(parsed_body)
        for warning in warnings:
            logger.warning(f"The {self._api_description} returned a warning: {warning}")
            if self.warning_handler is not None:
                self.warning_handler(warning)

        error_dicts: list[Any] = []
        if isinstance(parsed_body, dict):
            error_dicts = parsed_body.get("errors") or []
        if error_dicts:
            logger.warning(f"APICommander about to raise from: {error_dicts}")
            raise DataAPIResponseException.from_response(
                command=payload,
                raw_response=body,
                error_dicts=error_dicts,
                warning_descriptors=warnings,
            )

        return body, warnings

    def raw_request(
        self,
        *,
        http_method: str = HttpMethod.POST,
        payload: Any = None,
        additional_path: str | None = None,
        request_params: dict[str, Any] = {},
        timeout_context: _TimeoutContext | None = None,
    ) -> httpx.Response:
        request_url = self._compose_request_url(additional_path)
        _timeout_context = timeout_context or _TimeoutContext(request_ms=None)
        encoded_payload = encode_payload(payload) if payload is not None else None
        log_httpx_request(
            http_method=http_method,
            full_url=request_url,
            request_params=request_params,
            redacted_request_headers=self._loggable_headers,
            encoded_payload=encoded_payload,
            timeout_context=_timeout_context,
        )
        httpx_timeout_s = to_httpx_timeout(_timeout_context)

        try:
            raw_response = self.http_client.request(
                method=http_method,
                url=request_url,
                content=encoded_payload.encode()
                if encoded_payload is not None
                else None,
                params=request_params,
                timeout=httpx_timeout_s,
                headers=self.full_headers,
            )
        except httpx.TimeoutException as timeout_exc:
            if self.dev_ops_api:
                raise to_devopsapi_timeout_exception(
                    timeout_exc, timeout_context=_timeout_context
                ) from timeout_exc
            else:
                raise to_dataapi_timeout_exception(
                    timeout_exc, timeout_context=_timeout_context
                ) from timeout_exc

        log_httpx_response(response=raw_response)
        return raw_response

    def request(
        self,
        *,
        http_method: str = HttpMethod.POST,
        payload: Any = None,
        additional_path: str | None = None,
        request_params: dict[str, Any] = {},
        timeout_context: _TimeoutContext | None = None,
    ) -> tuple[bytes, list[DataAPIWarningDescriptor]]:
        """
        Issue a request and classify its response.

        For the Data API, see `extract_errors`. For the DevOps API, an HTTP
        status of 400 or more raises a DevOpsAPIHttpException.

        Returns:
            a (body, warnings) pair, with the raw bytes of the response body.
        """

        raw_response = self.raw_request(
            http_method=http_method,
            payload=payload,
            additional_path=additional_path,
            request_params=request_params,
            timeout_context=timeout_context,
        )
        if self.dev_ops_api:
            if raw_response.status_code >= 400:
                raise DevOpsAPIHttpException.from_status_and_body(
                    raw_response.status_code,
                    raw_response.content,
                    request=raw_response.request,
                    response=raw_response,
                )
            return raw_response.content, []
        return self.extract_errors(
            raw_response.status_code,
            raw_response.content,
            payload=payload if isinstance(payload, dict) else None,
        )
