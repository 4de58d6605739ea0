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

"""
Shared fixtures for the unit tests: a client and a database pointed
at the local test HTTP server.
"""

from __future__ import annotations

from typing import Iterator

import pytest
from pytest_httpserver import HTTPServer

from astradb import DataAPIClient, Database

TEST_TOKEN = "AstraCS:test-token"


@pytest.fixture(scope="session")
def make_httpserver() -> Iterator[HTTPServer]:
    # threaded, so that requests queued behind a slow (timeout-test) handler
    # are served within their own test and do not leak into the next one
    server = HTTPServer(
        host=HTTPServer.DEFAULT_LISTEN_HOST,
        port=HTTPServer.DEFAULT_LISTEN_PORT,
        threaded=True,
    )
    server.start()
    yield server
    server.clear()
    if server.is_running():
        server.stop()


@pytest.fixture
def token() -> str:
    return TEST_TOKEN


@pytest.fixture
def client(token: str) -> DataAPIClient:
    return DataAPIClient(token)


@pytest.fixture
def database(httpserver: HTTPServer, client: DataAPIClient) -> Database:
    return client.get_database(httpserver.url_for("/"))
