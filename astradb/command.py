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
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from astradb.exceptions import DataAPIWarningDescriptor, _TimeoutContext
from astradb.settings.defaults import (
    DEFAULT_DATA_API_AUTH_HEADER,
    DEFAULT_DATA_API_PATH,
)
from astradb.utils.api_commander import (
    APICommander,
    encode_payload,
    merge_headers,
)
from astradb.utils.api_options import APIOptions, FullAPIOptions, merge_api_options
from astradb.utils.request_tools import HttpMethod
from astradb.utils.unset import _UNSET, UnsetType

if TYPE_CHECKING:
    from astradb.database import Database


logger = logging.getLogger(__name__)


@dataclass
class Command:
    """
    A single Data API command, ready to be sent: the command name, its payload,
    the target resource (collection or table, if any) and the option layers
    that apply to this very execution.

    The wire form of a command with a name is `{"<name>": <payload>}`; a command
    without a name is sent as the bare payload.

    Attributes:
        database: the Database the command is addressed to.
        name: the command name, e.g. "insertOne". May be empty.
        payload: the JSON-serializable body of the command.
        resource_name: the collection/table name, or empty for database-level
            commands.
        resource_options: the options set on the collection/table, if any.
        command_options: the options passed for this command only, if any.
        keyspace: if non-empty, it overrides the keyspace from the options.
        api_version: if non-empty, it overrides the API version from the options.
        bulk: whether the command is a bulk operation (which may be subject
            to a dedicated timeout).
    """

    database: Database | None
    name: str
    payload: Any
    resource_name: str = ""
    resource_options: APIOptions | None = None
    command_options: APIOptions | None = None
    keyspace: str = ""
    api_version: str = ""
    bulk: bool = field(default=False)

    def resolve_options(self) -> FullAPIOptions:
        """
        Merge all option layers, from the defaults to the command options:
        defaults, client, database, collection/table, command.
        """

        client_options: APIOptions | None = None
        database_options: APIOptions | None = None
        if self.database is not None:
            database_options = self.database.api_options
            if self.database.client is not None:
                client_options = self.database.client.api_options
        return merge_api_options(
            client_options,
            database_options,
            self.resource_options,
            self.command_options,
        )

    def _target_keyspace(self, options: FullAPIOptions) -> str:
        return self.keyspace or options.keyspace

    def _target_api_version(self, options: FullAPIOptions) -> str:
        return self.api_version or options.api_version

    def url(self, options: FullAPIOptions | None = None) -> str:
        """
        The full URL the command targets, of the form
        `<endpoint>/api/json/<version>/<keyspace>[/<resource name>]`.

        Raises:
            ValueError: if there is no database or its endpoint is empty.
        """

        if self.database is None:
            raise ValueError(
                "Cannot compose the URL of a command with a null database."
            )
        if not self.database.api_endpoint:
            raise ValueError("Cannot compose the URL of a command: empty API endpoint.")
        _options = options or self.resolve_options()
        segments = [
            self.database.api_endpoint.rstrip("/"),
            DEFAULT_DATA_API_PATH,
            self._target_api_version(_options).strip("/"),
            self._target_keyspace(_options),
            self.resource_name,
        ]
        return "/".join(segment for segment in segments if segment)

    def to_json_dict(self) -> Any:
        if self.name:
            return {self.name: self.payload}
        return self.payload

    def encode(self) -> str:
        """Return the JSON string sent as the request body."""
        return encode_payload(self.to_json_dict())

    @staticmethod
    def decode(encoded: str | bytes) -> tuple[str, Any]:
        """
        Parse the JSON body of a command back into a (name, payload) pair.

        A single-key JSON object is read as a named command; any other
        JSON value is read as a bare payload with an empty name.
        """

        parsed = json.loads(encoded)
        if isinstance(parsed, dict) and len(parsed) == 1:
            name, payload = next(iter(parsed.items()))
            return name, payload
        return "", parsed

    def _get_api_commander(self, options: FullAPIOptions) -> APICommander:
        headers = merge_headers(
            {DEFAULT_DATA_API_AUTH_HEADER: options.token or None},
            options.headers,
        )
        return APICommander(
            api_endpoint=self.url(options),
            path="",
            headers=headers,
            http_client=options.http_client,
            warning_handler=options.warning_handler,
            redacted_header_names=options.redacted_header_names,
        )

    def _timeout_context(
        self,
        options: FullAPIOptions,
        timeout_ms: int | None | UnsetType = _UNSET,
    ) -> _TimeoutContext:
        t_options = options.timeout_options
        if not isinstance(timeout_ms, UnsetType):
            return _TimeoutContext(
                request_ms=timeout_ms,
                connection_ms=t_options.connection_timeout_ms,
                label="timeout_ms",
            )
        if self.bulk and t_options.bulk_operation_timeout_ms is not None:
            return _TimeoutContext(
                request_ms=t_options.bulk_operation_timeout_ms,
                connection_ms=t_options.connection_timeout_ms,
                label="bulk_operation_timeout_ms",
            )
        return _TimeoutContext(
            request_ms=t_options.request_timeout_ms,
            connection_ms=t_options.connection_timeout_ms,
            label="request_timeout_ms",
        )

    def execute(
        self, timeout_ms: int | None | UnsetType = _UNSET
    ) -> tuple[bytes, list[DataAPIWarningDescriptor]]:
        """
        Send the command to the Data API with a single HTTP POST.

        Args:
            timeout_ms: if passed, the timeout for this execution, taking
                precedence over any timeout found in the options. None means
                no timeout.

        Returns:
            a (body, warnings) pair, the body being the raw response bytes.

        Raises:
            ValueError: if the command has no database or the endpoint is empty.
            DataAPIHttpException: if the response has an HTTP error status.
            DataAPIResponseException: if the response reports API errors.
            DataAPITimeoutException: if the request times out.
            httpx.HTTPError: for any other transport failure.
        """

        if self.database is None:
            raise ValueError("Command cannot execute with a null database.")
        options = self.resolve_options()
        api_commander = self._get_api_commander(options)
        logger.debug(f"Running command '{self.name}' on {api_commander.full_path}")
        return api_commander.request(
            http_method=HttpMethod.POST,
            payload=self.to_json_dict(),
            timeout_context=self._timeout_context(options, timeout_ms),
        )
