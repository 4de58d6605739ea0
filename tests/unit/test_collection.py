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
from typing import Any

import pytest
from pytest_httpserver import HTTPServer

from astradb import Collection, CursorState, Database
from astradb.exceptions import (
    DataAPIHttpException,
    DataAPIResponseException,
    NoDocumentsException,
    TooManyDocumentsToCountException,
)
from astradb.filters import and_, eq, gte
from astradb.utils.api_options import APIOptions, TimeoutOptions
from astradb.utils.request_tools import HttpMethod

COLL_PATH = "/api/json/v1/default_keyspace/my_coll"


def wire(command: dict[str, Any]) -> str:
    return json.dumps(command, separators=(",", ":"), ensure_ascii=False)


@pytest.fixture
def collection(database: Database) -> Collection:
    return database.get_collection("my_coll")


class TestCollectionHandle:
    @pytest.mark.describe("test of collection equality and representation")
    def test_collection_conversions(self, database: Database) -> None:
        coll1 = database.get_collection("c")
        assert coll1 == database["c"]
        assert coll1 != database.get_collection("d")
        assert coll1 != database.get_collection(
            "c", api_options=APIOptions(keyspace="k")
        )
        assert 'name="c"' in repr(coll1)


class TestCollectionInsert:
    @pytest.mark.describe("test of insert_one on a collection")
    def test_collection_insert_one(
        self, httpserver: HTTPServer, collection: Collection, token: str
    ) -> None:
        httpserver.expect_oneshot_request(
            COLL_PATH,
            method=HttpMethod.POST,
            headers={"Token": token},
            data=wire({"insertOne": {"document": {"_id": "a", "v": 1}}}),
        ).respond_with_json({"status": {"insertedIds": ["a"]}})
        result = collection.insert_one({"_id": "a", "v": 1})
        assert result.inserted_ids == ["a"]
        assert result.raw_results == [{"status": {"insertedIds": ["a"]}}]
        httpserver.check_assertions()

    @pytest.mark.describe("test of insert_one on a collection with an API error")
    def test_collection_insert_one_error(
        self, httpserver: HTTPServer, collection: Collection
    ) -> None:
        httpserver.expect_oneshot_request(COLL_PATH).respond_with_json(
            {
                "errors": [
                    {
                        "errorCode": "DOCUMENT_ALREADY_EXISTS",
                        "message": "Document already exists with the given _id",
                    }
                ]
            }
        )
        with pytest.raises(DataAPIResponseException) as exc:
            collection.insert_one({"_id": "a"})
        assert exc.value.error_descriptors[0].error_code == "DOCUMENT_ALREADY_EXISTS"
        assert exc.value.command == {"insertOne": {"document": {"_id": "a"}}}

    @pytest.mark.describe("test of insert_many on a collection")
    def test_collection_insert_many(
        self, httpserver: HTTPServer, collection: Collection
    ) -> None:
        httpserver.expect_oneshot_request(
            COLL_PATH,
            method=HttpMethod.POST,
            data=wire({"insertMany": {"documents": [{"_id": 1}, {"_id": 2}]}}),
        ).respond_with_json({"status": {"insertedIds": [1, 2]}})
        result = collection.insert_many([{"_id": 1}, {"_id": 2}])
        assert result.inserted_ids == [1, 2]
        httpserver.check_assertions()

    @pytest.mark.describe("test of insert_many argument validation")
    def test_collection_insert_many_validation(self, collection: Collection) -> None:
        with pytest.raises(ValueError):
            collection.insert_many([])
        with pytest.raises(TypeError):
            collection.insert_many({"_id": 1})  # type: ignore[arg-type]


class TestCollectionFindOne:
    @pytest.mark.describe("test of find_one on a collection")
    def test_collection_find_one(
        self, httpserver: HTTPServer, collection: Collection
    ) -> None:
        httpserver.expect_oneshot_request(
            COLL_PATH,
            method=HttpMethod.POST,
            data=wire({"findOne": {"filter": {"_id": "a"}}}),
        ).respond_with_json({"data": {"document": {"_id": "a", "v": 1}}})
        result = collection.find_one({"_id": "a"})
        assert result.error is None
        assert result.decode() == {"_id": "a", "v": 1}
        httpserver.check_assertions()

    @pytest.mark.describe("test of find_one with a filter object and no match")
    def test_collection_find_one_no_match(
        self, httpserver: HTTPServer, collection: Collection
    ) -> None:
        httpserver.expect_oneshot_request(
            COLL_PATH,
            data=wire(
                {"findOne": {"filter": {"$and": [{"a": 1}, {"b": {"$gte": 2}}]}}}
            ),
        ).respond_with_json({"data": {"document": None}})
        result = collection.find_one(and_(eq("a", 1), gte("b", 2)))
        with pytest.raises(NoDocumentsException):
            result.decode()
        httpserver.check_assertions()

    @pytest.mark.describe("test that find_one stores errors on the result")
    def test_collection_find_one_errors(
        self, httpserver: HTTPServer, collection: Collection
    ) -> None:
        httpserver.expect_oneshot_request(COLL_PATH).respond_with_data(
            "upstream failure", status=502
        )
        result = collection.find_one({})
        assert isinstance(result.error, DataAPIHttpException)
        with pytest.raises(DataAPIHttpException):
            result.decode()

        bad_filter = collection.find_one(12)  # type: ignore[arg-type]
        assert isinstance(bad_filter.error, TypeError)
        assert "invalid filter type" in str(bad_filter.error)

    @pytest.mark.describe("test that find_one collects warnings")
    def test_collection_find_one_warnings(
        self, httpserver: HTTPServer, database: Database
    ) -> None:
        handled: list[Any] = []
        collection = database.get_collection(
            "my_coll", api_options=APIOptions(warning_handler=handled.append)
        )
        httpserver.expect_oneshot_request(COLL_PATH).respond_with_json(
            {
                "data": {"document": {"_id": "z"}},
                "status": {"warnings": [{"errorCode": "W1", "message": "w1"}]},
            }
        )
        result = collection.find_one({})
        assert result.decode() == {"_id": "z"}
        assert [wd.error_code for wd in result.warnings] == ["W1"]
        assert len(handled) == 1


class TestCollectionFind:
    @pytest.mark.describe("test of find on a collection across pages")
    def test_collection_find_pages(
        self, httpserver: HTTPServer, collection: Collection
    ) -> None:
        httpserver.expect_ordered_request(
            COLL_PATH,
            method=HttpMethod.POST,
            data=wire(
                {
                    "find": {
                        "filter": {"active": True},
                        "sort": {"n": 1},
                        "projection": {"n": True},
                        "options": {"limit": 3},
                    }
                }
            ),
        ).respond_with_json(
            {
                "data": {
                    "documents": [{"n": 1}, {"n": 2}],
                    "nextPageState": "ps1",
                }
            }
        )
        httpserver.expect_ordered_request(
            COLL_PATH,
            method=HttpMethod.POST,
            data=wire(
                {
                    "find": {
                        "filter": {"active": True},
                        "sort": {"n": 1},
                        "projection": {"n": True},
                        "options": {"limit": 3, "pageState": "ps1"},
                    }
                }
            ),
        ).respond_with_json(
            {"data": {"documents": [{"n": 3}], "nextPageState": None}}
        )
        cursor = collection.find(
            {"active": True}, sort={"n": 1}, projection={"n": True}, limit=3
        )
        assert cursor.state == CursorState.IDLE
        assert [doc["n"] for doc in cursor] == [1, 2, 3]
        assert cursor.state == CursorState.EXHAUSTED
        assert cursor.err is None
        httpserver.check_assertions()

    @pytest.mark.describe("test of find resuming from a page state")
    def test_collection_find_initial_page_state(
        self, httpserver: HTTPServer, collection: Collection
    ) -> None:
        httpserver.expect_oneshot_request(
            COLL_PATH,
            data=wire(
                {
                    "find": {
                        "filter": {},
                        "options": {
                            "includeSimilarity": True,
                            "pageState": "resume_here",
                        },
                    }
                }
            ),
        ).respond_with_json({"data": {"documents": [{"_id": "r"}]}})
        cursor = collection.find(
            {}, include_similarity=True, initial_page_state="resume_here"
        )
        assert cursor.all() == [{"_id": "r"}]
        httpserver.check_assertions()

    @pytest.mark.describe("test of find with an invalid filter")
    def test_collection_find_invalid_filter(self, collection: Collection) -> None:
        cursor = collection.find(["not", "a", "filter"])  # type: ignore[arg-type]
        assert cursor.next() is False
        assert isinstance(cursor.err, TypeError)

    @pytest.mark.describe("test of find with a failing request")
    def test_collection_find_error(
        self, httpserver: HTTPServer, collection: Collection
    ) -> None:
        httpserver.expect_oneshot_request(COLL_PATH).respond_with_json(
            {"errors": [{"message": "bad sort"}]}
        )
        cursor = collection.find({}, sort={"$bogus": 1})
        assert cursor.next() is False
        assert isinstance(cursor.err, DataAPIResponseException)
        assert str(cursor.err) == "bad sort"


class TestCollectionCount:
    @pytest.mark.describe("test of count_documents on a collection")
    def test_collection_count(
        self, httpserver: HTTPServer, collection: Collection
    ) -> None:
        httpserver.expect_oneshot_request(
            COLL_PATH,
            data=wire({"countDocuments": {"filter": {"tag": "x"}}}),
        ).respond_with_json({"status": {"count": 7}})
        assert collection.count_documents({"tag": "x"}, upper_bound=10) == 7
        httpserver.check_assertions()

    @pytest.mark.describe("test of count_documents exceeding its bounds")
    def test_collection_count_exceeding(
        self, httpserver: HTTPServer, collection: Collection
    ) -> None:
        httpserver.expect_oneshot_request(COLL_PATH).respond_with_json(
            {"status": {"count": 7}}
        )
        with pytest.raises(TooManyDocumentsToCountException) as exc:
            collection.count_documents({}, upper_bound=5)
        assert exc.value.server_max_count_exceeded is False

        httpserver.expect_oneshot_request(COLL_PATH).respond_with_json(
            {"status": {"count": 1000, "moreData": True}}
        )
        with pytest.raises(TooManyDocumentsToCountException) as exc_s:
            collection.count_documents({}, upper_bound=5000)
        assert exc_s.value.server_max_count_exceeded is True

    @pytest.mark.describe("test that a method timeout becomes the request timeout")
    def test_collection_method_timeout(self, collection: Collection) -> None:
        command = collection._command(
            "countDocuments",
            {"filter": {}},
            api_options=APIOptions(
                timeout_options=TimeoutOptions(request_timeout_ms=321)
            ),
        )
        t_context = command._timeout_context(command.resolve_options())
        assert t_context.request_ms == 321
