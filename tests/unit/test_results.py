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

from astradb.exceptions import (
    DataAPIResponseException,
    DataAPIWarningDescriptor,
    NoDocumentsException,
    TooManyDocumentsToCountException,
    UnexpectedDataAPIResponseException,
)
from astradb.results import (
    CollectionInsertResult,
    CountResult,
    MultipleResult,
    SingleResult,
    TableInsertResult,
    parse_response_body,
)


def _body(response: dict[str, Any]) -> bytes:
    return json.dumps(response).encode()


class TestSingleResult:
    @pytest.mark.describe("test of decoding a single-document result")
    def test_singleresult_decode(self) -> None:
        result = SingleResult(raw_response=_body({"data": {"document": {"_id": "a"}}}))
        assert result.decode() == {"_id": "a"}
        assert result.decode(lambda doc: doc["_id"]) == "a"

    @pytest.mark.describe("test of a single-document result with no document")
    def test_singleresult_no_document(self) -> None:
        for raw in [
            _body({"data": {"document": None}}),
            _body({"data": {}}),
            b"",
            None,
        ]:
            with pytest.raises(NoDocumentsException):
                SingleResult(raw_response=raw).decode()

    @pytest.mark.describe("test of a single-document result with a faulty response")
    def test_singleresult_faulty(self) -> None:
        with pytest.raises(UnexpectedDataAPIResponseException):
            SingleResult(raw_response=_body({"status": {}})).decode()
        with pytest.raises(UnexpectedDataAPIResponseException):
            SingleResult(raw_response=b"<html>").decode()

    @pytest.mark.describe("test of a single-document result holding an error")
    def test_singleresult_from_error(self) -> None:
        warning = DataAPIWarningDescriptor({"errorCode": "W"})
        error = DataAPIResponseException(
            "boom",
            command=None,
            raw_response=b'{"errors": [{"message": "boom"}]}',
            error_descriptors=[],
            warning_descriptors=[warning],
        )
        result = SingleResult.from_error(error)
        assert result.error is error
        assert result.warnings == [warning]
        assert result.raw_response == b'{"errors": [{"message": "boom"}]}'
        with pytest.raises(DataAPIResponseException):
            result.decode()

        plain = SingleResult.from_error(TypeError("invalid filter type: int"))
        assert plain.raw_response is None
        assert plain.warnings == []
        with pytest.raises(TypeError):
            plain.decode()


class TestMultipleResult:
    @pytest.mark.describe("test of decoding a multiple-document result")
    def test_multipleresult_decode(self) -> None:
        result = MultipleResult(
            raw_response=_body(
                {"data": {"documents": [{"n": 1}, {"n": 2}], "nextPageState": "ps"}}
            )
        )
        assert result.decode() == [{"n": 1}, {"n": 2}]
        assert result.decode(lambda doc: doc["n"]) == [1, 2]
        assert result.next_page_state == "ps"
        assert result.has_next_page is True

    @pytest.mark.describe("test of the last page of a multiple-document result")
    def test_multipleresult_last_page(self) -> None:
        result = MultipleResult(
            raw_response=_body({"data": {"documents": [], "nextPageState": None}})
        )
        assert result.decode() == []
        assert result.next_page_state is None
        assert result.has_next_page is False
        with pytest.raises(NoDocumentsException):
            MultipleResult(raw_response=_body({"data": {}})).decode()
        assert MultipleResult(raw_response=b"nope").next_page_state is None


class TestCountResult:
    @pytest.mark.describe("test of a count result within bounds")
    def test_countresult_ok(self) -> None:
        result = CountResult(raw_response=_body({"status": {"count": 42}}))
        assert result.count(100) == 42
        assert result.count(42) == 42
        assert result.count(0) == 42

    @pytest.mark.describe("test of a count result exceeding the caller bound")
    def test_countresult_upper_bound(self) -> None:
        result = CountResult(raw_response=_body({"status": {"count": 42}}))
        with pytest.raises(TooManyDocumentsToCountException) as exc:
            result.count(10)
        assert exc.value.count == 42
        assert exc.value.server_max_count_exceeded is False
        assert str(exc.value) == "Document count exceeds required upper bound (10)"

    @pytest.mark.describe("test of a count result exceeding the server limit")
    def test_countresult_server_limit(self) -> None:
        result = CountResult(
            raw_response=_body({"status": {"count": 1000, "moreData": True}})
        )
        with pytest.raises(TooManyDocumentsToCountException) as exc:
            result.count(5000)
        assert exc.value.count == 1000
        assert exc.value.server_max_count_exceeded is True

    @pytest.mark.describe("test of a faulty count result")
    def test_countresult_faulty(self) -> None:
        with pytest.raises(UnexpectedDataAPIResponseException):
            CountResult(raw_response=_body({"status": {}})).count(10)
        with pytest.raises(RuntimeError):
            CountResult.from_error(RuntimeError("x")).count(10)


class TestOperationResults:
    @pytest.mark.describe("test of insert result representations")
    def test_insert_results(self) -> None:
        c_result = CollectionInsertResult(raw_results=[{}], inserted_ids=["a", "b"])
        assert repr(c_result) == (
            "CollectionInsertResult(inserted_ids=['a', 'b'], raw_results=...)"
        )
        t_result = TableInsertResult(
            raw_results=[{}],
            inserted_ids=[["m1", 1]],
            primary_key_schema={"match_id": {"type": "text"}},
        )
        assert "inserted_ids=[['m1', 1]]" in repr(t_result)
        assert t_result.primary_key_schema["match_id"] == {"type": "text"}

    @pytest.mark.describe("test of response body parsing")
    def test_parse_response_body(self) -> None:
        assert parse_response_body(b'{"a": 1}') == {"a": 1}
        with pytest.raises(UnexpectedDataAPIResponseException):
            parse_response_body(b"[1]")
        with pytest.raises(UnexpectedDataAPIResponseException):
            parse_response_body(b"{")
