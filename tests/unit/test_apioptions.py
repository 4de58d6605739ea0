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
import pytest

from astradb import DataAPIClient
from astradb.command import Command
from astradb.settings.defaults import (
    DEFAULT_ASTRA_DB_KEYSPACE,
    DEFAULT_DATA_API_VERSION,
    DEFAULT_REQUEST_TIMEOUT_MS,
)
from astradb.utils.api_options import (
    APIOptions,
    TimeoutOptions,
    defaultAPIOptions,
    merge_api_options,
    stack_api_options,
)
from astradb.utils.arguments import command_api_options
from astradb.utils.unset import _UNSET


class TestAPIOptions:
    @pytest.mark.describe("test of the defaults for API options")
    def test_apioptions_defaults(self) -> None:
        defaults = merge_api_options()
        assert defaults.token is None
        assert defaults.keyspace == DEFAULT_ASTRA_DB_KEYSPACE
        assert defaults.api_version == DEFAULT_DATA_API_VERSION
        assert defaults.headers == {}
        assert defaults.timeout_options.request_timeout_ms == DEFAULT_REQUEST_TIMEOUT_MS
        assert defaults.warning_handler is None
        assert isinstance(defaults.http_client, httpx.Client)
        assert defaults == defaultAPIOptions()

    @pytest.mark.describe("test of the precedence of API option layers")
    def test_apioptions_precedence(self) -> None:
        resolved = merge_api_options(
            APIOptions(token="client_t", keyspace="client_ks"),
            APIOptions(keyspace="db_ks", api_version="v2"),
            None,
            APIOptions(token="command_t"),
        )
        assert resolved.token == "command_t"
        assert resolved.keyspace == "db_ks"
        assert resolved.api_version == "v2"

    @pytest.mark.describe("test that an explicit None overrides an outer setting")
    def test_apioptions_explicit_none(self) -> None:
        resolved = merge_api_options(
            APIOptions(token="client_t"),
            APIOptions(token=None),
        )
        assert resolved.token is None

    @pytest.mark.describe("test of header and redacted-name merging across layers")
    def test_apioptions_header_merging(self) -> None:
        resolved = merge_api_options(
            APIOptions(
                headers={"X-A": "client", "X-B": "client"},
                redacted_header_names={"X-Secret-1"},
            ),
            APIOptions(
                headers={"X-B": "command", "X-C": "command"},
                redacted_header_names={"X-Secret-2"},
            ),
        )
        assert resolved.headers == {"X-A": "client", "X-B": "command", "X-C": "command"}
        assert resolved.redacted_header_names == {"X-Secret-1", "X-Secret-2"}

    @pytest.mark.describe("test of timeout merging, attribute by attribute")
    def test_apioptions_timeout_merging(self) -> None:
        resolved = merge_api_options(
            APIOptions(
                timeout_options=TimeoutOptions(
                    request_timeout_ms=1000,
                    bulk_operation_timeout_ms=5000,
                )
            ),
            APIOptions(timeout_options=TimeoutOptions(request_timeout_ms=2000)),
        )
        assert resolved.timeout_options.request_timeout_ms == 2000
        assert resolved.timeout_options.bulk_operation_timeout_ms == 5000
        assert resolved.timeout_options.connection_timeout_ms is None

    @pytest.mark.describe("test that merging never aliases the layers' headers")
    def test_apioptions_no_aliasing(self) -> None:
        caller_headers = {"X-A": "1"}
        layer = APIOptions(headers=caller_headers)
        caller_headers["X-A"] = "changed"
        resolved = merge_api_options(layer)
        assert resolved.headers == {"X-A": "1"}
        resolved.headers["X-Z"] = "added"
        assert layer.headers == {"X-A": "1"}
        assert merge_api_options(layer).headers == {"X-A": "1"}

    @pytest.mark.describe("test that a repr of API options hides secrets")
    def test_apioptions_repr_redaction(self) -> None:
        opts = APIOptions(
            token="AstraCS:a-rather-long-secret-token",
            headers={"Token": "tk", "x-embedding-api-key": "ek", "X-Plain": "pv"},
        )
        opts_repr = repr(opts)
        assert "a-rather-long-secret-token" not in opts_repr
        assert "'ek'" not in opts_repr
        assert "'pv'" in opts_repr


class TestStackAPIOptions:
    @pytest.mark.describe("test that stacking keeps unset settings unset")
    def test_stack_sparse(self) -> None:
        stacked = stack_api_options(APIOptions(keyspace="ks"), APIOptions(token="t"))
        assert stacked.keyspace == "ks"
        assert stacked.token == "t"
        assert stacked.api_version is _UNSET
        assert stacked.headers is _UNSET
        assert stacked.timeout_options is _UNSET

    @pytest.mark.describe("test that stacking merges headers and timeouts")
    def test_stack_merges(self) -> None:
        stacked = stack_api_options(
            APIOptions(
                headers={"X-A": "base", "X-B": "base"},
                timeout_options=TimeoutOptions(connection_timeout_ms=100),
            ),
            APIOptions(
                headers={"X-B": "top"},
                timeout_options=TimeoutOptions(request_timeout_ms=200),
            ),
        )
        assert stacked.headers == {"X-A": "base", "X-B": "top"}
        assert isinstance(stacked.timeout_options, TimeoutOptions)
        assert stacked.timeout_options.connection_timeout_ms == 100
        assert stacked.timeout_options.request_timeout_ms == 200

    @pytest.mark.describe("test stacking with missing layers")
    def test_stack_none(self) -> None:
        assert stack_api_options(None, None) == APIOptions()
        assert stack_api_options(APIOptions(token="t"), None) == APIOptions(token="t")

    @pytest.mark.describe("test that a method timeout stacks on the method options")
    def test_command_api_options(self) -> None:
        assert command_api_options(None, _UNSET) is None
        cmd_opts = command_api_options(APIOptions(token="t"), 1234)
        assert cmd_opts is not None
        resolved = merge_api_options(cmd_opts)
        assert resolved.token == "t"
        assert resolved.timeout_options.request_timeout_ms == 1234


class TestOptionsThroughHandles:
    @pytest.mark.describe("test of options resolution from client to command")
    def test_handle_layers(self) -> None:
        client = DataAPIClient(
            "client_t",
            api_options=APIOptions(headers={"X-Layer": "client", "X-Client": "y"}),
        )
        database = client.get_database(
            "https://db.example.com",
            keyspace="db_ks",
            api_options=APIOptions(headers={"X-Layer": "database"}),
        )
        collection = database.get_collection(
            "coll", api_options=APIOptions(token="coll_t")
        )
        command = collection._command(
            "findOne",
            {},
            api_options=APIOptions(headers={"X-Layer": "command"}),
        )
        resolved = command.resolve_options()
        assert resolved.token == "coll_t"
        assert resolved.keyspace == "db_ks"
        assert resolved.headers == {"X-Layer": "command", "X-Client": "y"}
        assert database.keyspace == "db_ks"
        assert database.resolved_api_options.token == "client_t"

    @pytest.mark.describe("test that named arguments win over the api_options ones")
    def test_named_args_precedence(self) -> None:
        client = DataAPIClient(
            "named_t", api_options=APIOptions(token="opts_t", keyspace="ks")
        )
        assert client.api_options.token == "named_t"
        assert client.api_options.keyspace == "ks"
        database = client.get_database(
            "https://db.example.com",
            token="db_t",
            api_options=APIOptions(token="other_t"),
        )
        command = Command(database=database, name="", payload=None)
        assert command.resolve_options().token == "db_t"

    @pytest.mark.describe("test of client cloning with options")
    def test_client_with_options(self) -> None:
        client = DataAPIClient("t1", api_options=APIOptions(keyspace="ks"))
        clone = client.with_options(token="t2")
        assert clone.api_options.token == "t2"
        assert clone.api_options.keyspace == "ks"
        assert client.api_options.token == "t1"
        assert clone != client
        assert client.with_options() == client

    @pytest.mark.describe("test that an empty endpoint is rejected")
    def test_client_empty_endpoint(self) -> None:
        with pytest.raises(ValueError):
            DataAPIClient("t").get_database("")
