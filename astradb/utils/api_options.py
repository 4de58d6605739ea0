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

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable

import httpx

from astradb.settings.defaults import (
    DEFAULT_ASTRA_DB_KEYSPACE,
    DEFAULT_BULK_OPERATION_TIMEOUT_MS,
    DEFAULT_CONNECTION_TIMEOUT_MS,
    DEFAULT_DATA_API_VERSION,
    DEFAULT_REDACTED_HEADER_NAMES,
    DEFAULT_REQUEST_TIMEOUT_MS,
    FIXED_SECRET_PLACEHOLDER,
    SECRETS_REDACT_CHAR,
    SECRETS_REDACT_ENDING,
    SECRETS_REDACT_ENDING_LENGTH,
)
from astradb.utils.unset import _UNSET, UnsetType

if TYPE_CHECKING:
    from astradb.exceptions import DataAPIWarningDescriptor


WarningHandler = Callable[["DataAPIWarningDescriptor"], None]

# shared by all objects that do not specify their own HTTP client
default_http_client = httpx.Client()


def redact_secret(secret: str, max_length: int, hide_if_short: bool = True) -> str:
    """
    Return a shortened-if-necessary version of a 'secret' string (with ellipsis).

    Args:
        secret: a secret string to redact
        max_length: if the secret and the fixed ending exceed this size,
            shortening takes place.
        hide_if_short: this controls what to do when the input secret is
            shorter, i.e. when no shortening takes place.
            if False, the secret is returned as-is;
            If True, a masked string is returned of the same length as secret.

    Returns:
        a 'redacted' form of the secret string as per the rules outlined above.
    """
    secret_len = len(secret)
    if secret_len + SECRETS_REDACT_ENDING_LENGTH > max_length:
        return (
            secret[: max_length - SECRETS_REDACT_ENDING_LENGTH] + SECRETS_REDACT_ENDING
        )
    else:
        if hide_if_short:
            return SECRETS_REDACT_CHAR * len(secret)
        else:
            return secret


@dataclass
class TimeoutOptions:
    """
    The group of settings for the API Options concerning the configured timeouts
    for the HTTP requests issued to the API.

    All timeout values are integers expressed in milliseconds. A timeout of None
    (or zero) signifies that no timeout of that kind is imposed at all.

    This class is used to override settings when creating objects such
    as DataAPIClient, Database, Table, Collection, or for a single command.
    Values that are left unspecified will keep the values inherited from the
    parent "spawner" class; each attribute is inherited independently of the
    others. See the `APIOptions` master object for more information.

    Attributes:
        request_timeout_ms: the timeout imposed on a single HTTP request.
            Defaults to 30 s.
        connection_timeout_ms: the timeout for establishing the connection to the
            API. If None, the request timeout applies to this phase as well.
            Defaults to None.
        bulk_operation_timeout_ms: the timeout imposed on the requests carrying
            bulk operations (such as `insert_many`). If None, the request timeout
            is used for these requests too. Defaults to None.
    """

    request_timeout_ms: int | None | UnsetType = _UNSET
    connection_timeout_ms: int | None | UnsetType = _UNSET
    bulk_operation_timeout_ms: int | None | UnsetType = _UNSET


@dataclass
class FullTimeoutOptions(TimeoutOptions):
    """
    The group of settings for the API Options concerning the configured timeouts
    for the HTTP requests issued to the API.

    This is the "full" version of the class, with the guarantee that all of its members
    have defined values (possibly None, meaning "no timeout"), as opposed to the
    (non-full) `TimeoutOptions` counterpart class: the latter admits "unset"
    attributes and is used to override specific settings.

    Attributes:
        request_timeout_ms: the timeout imposed on a single HTTP request.
        connection_timeout_ms: the timeout for establishing the connection to the
            API. If None, the request timeout applies to this phase as well.
        bulk_operation_timeout_ms: the timeout imposed on the requests carrying
            bulk operations. If None, the request timeout is used.
    """

    request_timeout_ms: int | None
    connection_timeout_ms: int | None
    bulk_operation_timeout_ms: int | None

    def __init__(
        self,
        *,
        request_timeout_ms: int | None,
        connection_timeout_ms: int | None,
        bulk_operation_timeout_ms: int | None,
    ) -> None:
        TimeoutOptions.__init__(
            self,
            request_timeout_ms=request_timeout_ms,
            connection_timeout_ms=connection_timeout_ms,
            bulk_operation_timeout_ms=bulk_operation_timeout_ms,
        )

    def with_override(self, other: TimeoutOptions) -> FullTimeoutOptions:
        """
        Given an "overriding" set of options, possibly not defined in all its
        attributes, apply the override logic and return a new full options object.

        Args:
            other: a not-necessarily-fully-specified options object. All its defined
                settings take precedence.
        """

        return FullTimeoutOptions(
            request_timeout_ms=(
                other.request_timeout_ms
                if not isinstance(other.request_timeout_ms, UnsetType)
                else self.request_timeout_ms
            ),
            connection_timeout_ms=(
                other.connection_timeout_ms
                if not isinstance(other.connection_timeout_ms, UnsetType)
                else self.connection_timeout_ms
            ),
            bulk_operation_timeout_ms=(
                other.bulk_operation_timeout_ms
                if not isinstance(other.bulk_operation_timeout_ms, UnsetType)
                else self.bulk_operation_timeout_ms
            ),
        )


@dataclass
class APIOptions:
    """
    This class represents all settings that can be configured for how the client
    interacts with the API. Each object in the abstraction hierarchy
    (DataAPIClient, Database, Table, Collection, a single command) can carry
    one such object: the settings actually used for an API request are obtained
    by layering, in this order, the built-in defaults, the client options,
    the database options, the collection/table options and finally the options
    passed to the method being invoked.

    Every attribute is optional: a setting left unspecified is inherited from the
    less specific layers. With the exception of `headers` and
    `redacted_header_names`, which are merged key by key with the inherited ones,
    a defined attribute completely replaces the inherited value.
    `timeout_options` are themselves merged attribute by attribute.

    Attributes:
        token: the token used to authenticate against the API.
        keyspace: the keyspace that commands target.
        api_version: the version path segment of the Data API (e.g. "v1").
        http_client: the `httpx.Client` used to issue the HTTP requests.
        headers: additional headers to add to all requests (for instance
            "x-embedding-api-key" for vectorize). These take precedence
            over the standard headers with the same name.
        redacted_header_names: names of headers whose value must never appear
            in logs and string representations. A few (e.g. "Token") are
            always redacted.
        timeout_options: an object of type `TimeoutOptions`.
        warning_handler: a callable invoked, once per warning, with a
            DataAPIWarningDescriptor for each warning returned by the API.

    Example:
        >>> from astradb.utils.api_options import APIOptions, TimeoutOptions
        >>>
        >>> my_options = APIOptions(
        ...     keyspace="my_keyspace",
        ...     headers={"x-embedding-api-key": "sk-..."},
        ...     timeout_options=TimeoutOptions(request_timeout_ms=5000),
        ... )
    """

    token: str | None | UnsetType = _UNSET
    keyspace: str | UnsetType = _UNSET
    api_version: str | UnsetType = _UNSET
    http_client: httpx.Client | UnsetType = _UNSET
    headers: dict[str, str] | UnsetType = _UNSET
    redacted_header_names: set[str] | UnsetType = _UNSET
    timeout_options: TimeoutOptions | UnsetType = _UNSET
    warning_handler: WarningHandler | None | UnsetType = _UNSET

    def __init__(
        self,
        *,
        token: str | None | UnsetType = _UNSET,
        keyspace: str | UnsetType = _UNSET,
        api_version: str | UnsetType = _UNSET,
        http_client: httpx.Client | UnsetType = _UNSET,
        headers: dict[str, str] | UnsetType = _UNSET,
        redacted_header_names: Iterable[str] | UnsetType = _UNSET,
        timeout_options: TimeoutOptions | UnsetType = _UNSET,
        warning_handler: WarningHandler | None | UnsetType = _UNSET,
    ) -> None:
        self.token = token
        self.keyspace = keyspace
        self.api_version = api_version
        self.http_client = http_client
        # a private copy, so that later changes to the caller's dict have no effect
        self.headers = _UNSET if isinstance(headers, UnsetType) else dict(headers)
        self.redacted_header_names = (
            _UNSET
            if isinstance(redacted_header_names, UnsetType)
            else set(redacted_header_names)
        )
        self.timeout_options = timeout_options
        self.warning_handler = warning_handler

    def _redacted_headers(self) -> dict[str, str] | UnsetType:
        if isinstance(self.headers, UnsetType):
            return _UNSET
        _redacted_names = {
            hname.upper()
            for hname in (
                DEFAULT_REDACTED_HEADER_NAMES
                | (
                    set()
                    if isinstance(self.redacted_header_names, UnsetType)
                    else self.redacted_header_names
                )
            )
        }
        return {
            k: v if k.upper() not in _redacted_names else FIXED_SECRET_PLACEHOLDER
            for k, v in self.headers.items()
        }

    def __repr__(self) -> str:
        _headers = self._redacted_headers()
        _token_desc: str | None
        if not isinstance(self.token, UnsetType) and self.token:
            _token_desc = f"token={redact_secret(self.token, 15)}"
        else:
            _token_desc = None

        non_unset_pieces = [
            pc
            for pc in (
                _token_desc,
                None
                if isinstance(self.keyspace, UnsetType)
                else f"keyspace={self.keyspace}",
                None
                if isinstance(self.api_version, UnsetType)
                else f"api_version={self.api_version}",
                None
                if isinstance(self.http_client, UnsetType)
                else f"http_client={self.http_client}",
                None if isinstance(_headers, UnsetType) else f"headers={_headers}",
                None
                if isinstance(self.redacted_header_names, UnsetType)
                else f"redacted_header_names={self.redacted_header_names}",
                None
                if isinstance(self.timeout_options, UnsetType)
                else f"timeout_options={self.timeout_options}",
                None
                if isinstance(self.warning_handler, UnsetType)
                or self.warning_handler is None
                else f"warning_handler={self.warning_handler}",
            )
            if pc is not None
        ]
        inner_desc = ", ".join(non_unset_pieces)
        return f"{self.__class__.__name__}({inner_desc})"


@dataclass
class FullAPIOptions(APIOptions):
    """
    This class represents all settings that can be configured for how the client
    interacts with the API.

    This is the "full" version of the class, with the guarantee that all of its members
    have defined values: it is the outcome of resolving all option layers for a
    given API request -- as opposed to the (non-full) `APIOptions` counterpart class:
    the latter admits "unset" attributes and is used to override specific settings.
    Please refer to the documentation for the `APIOptions` class for details.

    Attributes:
        token: the token used to authenticate against the API, or None.
        keyspace: the keyspace that commands target.
        api_version: the version path segment of the Data API (e.g. "v1").
        http_client: the `httpx.Client` used to issue the HTTP requests.
        headers: additional headers to add to all requests.
        redacted_header_names: names of headers to redact in logs and representations.
        timeout_options: an object of type `FullTimeoutOptions`.
        warning_handler: a callable invoked once per API warning, or None.
    """

    token: str | None
    keyspace: str
    api_version: str
    http_client: httpx.Client
    headers: dict[str, str]
    redacted_header_names: set[str]
    timeout_options: FullTimeoutOptions
    warning_handler: WarningHandler | None

    def __init__(
        self,
        *,
        token: str | None,
        keyspace: str,
        api_version: str,
        http_client: httpx.Client,
        headers: dict[str, str],
        redacted_header_names: Iterable[str],
        timeout_options: FullTimeoutOptions,
        warning_handler: WarningHandler | None,
    ) -> None:
        APIOptions.__init__(
            self,
            token=token,
            keyspace=keyspace,
            api_version=api_version,
            http_client=http_client,
            headers=headers,
            redacted_header_names=redacted_header_names,
            timeout_options=timeout_options,
            warning_handler=warning_handler,
        )

    def with_override(self, other: APIOptions | None | UnsetType) -> FullAPIOptions:
        """
        Given an "overriding" set of options, possibly not defined in all its
        attributes, apply the override logic and return a new full options object.

        The override logic is such that defined attributes completely replace the
        pre-existing ones, except for the case of `headers` and
        `redacted_header_names`, in which cases merging takes place, and of
        `timeout_options`, which is merged attribute by attribute.
        Neither `self` nor `other` are modified.

        Args:
            other: a not-necessarily-fully-specified options object. All its defined
                settings take precedence.
        """

        if isinstance(other, UnsetType) or other is None:
            return self

        headers: dict[str, str]
        redacted_header_names: set[str]
        timeout_options: FullTimeoutOptions

        if isinstance(other.headers, UnsetType):
            headers = dict(self.headers)
        else:
            headers = {
                **self.headers,
                **other.headers,
            }
        if isinstance(other.redacted_header_names, UnsetType):
            redacted_header_names = self.redacted_header_names
        else:
            redacted_header_names = (
                self.redacted_header_names | other.redacted_header_names
            )
        if isinstance(other.timeout_options, TimeoutOptions):
            timeout_options = self.timeout_options.with_override(other.timeout_options)
        else:
            timeout_options = self.timeout_options

        return FullAPIOptions(
            token=other.token if not isinstance(other.token, UnsetType) else self.token,
            keyspace=(
                other.keyspace
                if not isinstance(other.keyspace, UnsetType)
                else self.keyspace
            ),
            api_version=(
                other.api_version
                if not isinstance(other.api_version, UnsetType)
                else self.api_version
            ),
            http_client=(
                other.http_client
                if not isinstance(other.http_client, UnsetType)
                else self.http_client
            ),
            headers=headers,
            redacted_header_names=redacted_header_names,
            timeout_options=timeout_options,
            warning_handler=(
                other.warning_handler
                if not isinstance(other.warning_handler, UnsetType)
                else self.warning_handler
            ),
        )


defaultTimeoutOptions = FullTimeoutOptions(
    request_timeout_ms=DEFAULT_REQUEST_TIMEOUT_MS,
    connection_timeout_ms=DEFAULT_CONNECTION_TIMEOUT_MS,
    bulk_operation_timeout_ms=DEFAULT_BULK_OPERATION_TIMEOUT_MS,
)


def defaultAPIOptions() -> FullAPIOptions:
    """
    Return the default APIOptions object, based on 'grand defaults'
    hardcoded in this library. This is the least specific layer of all.
    """

    return FullAPIOptions(
        token=None,
        keyspace=DEFAULT_ASTRA_DB_KEYSPACE,
        api_version=DEFAULT_DATA_API_VERSION,
        http_client=default_http_client,
        headers={},
        redacted_header_names=set(),
        timeout_options=defaultTimeoutOptions,
        warning_handler=None,
    )


def merge_api_options(*layers: APIOptions | None) -> FullAPIOptions:
    """
    Resolve a sequence of option layers into a single full options object.

    The layers are given from the least to the most specific (e.g. client,
    database, collection, command) and are applied, in order, on top of the
    defaults. None entries are skipped.

    Args:
        layers: any number of APIOptions objects, or None.

    Returns:
        a FullAPIOptions with all settings resolved.
    """

    resolved = defaultAPIOptions()
    for layer in layers:
        resolved = resolved.with_override(layer)
    return resolved


def _pick(top: Any, base: Any) -> Any:
    return base if isinstance(top, UnsetType) else top


def stack_api_options(base: APIOptions | None, top: APIOptions | None) -> APIOptions:
    """
    Combine two option layers into one, still sparse, layer: the settings
    defined in `top` take precedence over those in `base`, with the same
    merge rules as `FullAPIOptions.with_override`. Settings defined in
    neither stay unset, so that they can be inherited from outer layers.
    """

    _base = base or APIOptions()
    _top = top or APIOptions()

    headers: dict[str, str] | UnsetType
    if isinstance(_base.headers, UnsetType) or isinstance(_top.headers, UnsetType):
        headers = _pick(_top.headers, _base.headers)
    else:
        headers = {**_base.headers, **_top.headers}

    redacted_header_names: set[str] | UnsetType
    if isinstance(_base.redacted_header_names, UnsetType) or isinstance(
        _top.redacted_header_names, UnsetType
    ):
        redacted_header_names = _pick(
            _top.redacted_header_names, _base.redacted_header_names
        )
    else:
        redacted_header_names = (
            _base.redacted_header_names | _top.redacted_header_names
        )

    timeout_options: TimeoutOptions | UnsetType
    if isinstance(_base.timeout_options, UnsetType) or isinstance(
        _top.timeout_options, UnsetType
    ):
        timeout_options = _pick(_top.timeout_options, _base.timeout_options)
    else:
        timeout_options = TimeoutOptions(
            request_timeout_ms=_pick(
                _top.timeout_options.request_timeout_ms,
                _base.timeout_options.request_timeout_ms,
            ),
            connection_timeout_ms=_pick(
                _top.timeout_options.connection_timeout_ms,
                _base.timeout_options.connection_timeout_ms,
            ),
            bulk_operation_timeout_ms=_pick(
                _top.timeout_options.bulk_operation_timeout_ms,
                _base.timeout_options.bulk_operation_timeout_ms,
            ),
        )

    return APIOptions(
        token=_pick(_top.token, _base.token),
        keyspace=_pick(_top.keyspace, _base.keyspace),
        api_version=_pick(_top.api_version, _base.api_version),
        http_client=_pick(_top.http_client, _base.http_client),
        headers=headers,
        redacted_header_names=redacted_header_names,
        timeout_options=timeout_options,
        warning_handler=_pick(_top.warning_handler, _base.warning_handler),
    )
