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

import logging

import pytest

from astradb.info import (
    CollectionDefinition,
    ColumnType,
    CreateTableDefinition,
    SortMode,
    TableColumnTypeDescriptor,
    TableIndexDescriptor,
    TablePrimaryKeyDescriptor,
    VectorMetric,
    VectorServiceOptions,
    int_,
    list_,
    map_,
    set_,
    text,
    timestamp,
    udt,
    vector,
)


class TestColumnTypes:
    @pytest.mark.describe("test of column type coercion")
    def test_column_type_coerce(self) -> None:
        assert ColumnType.coerce("text") == ColumnType.TEXT
        assert ColumnType.coerce("TEXT") == ColumnType.TEXT
        assert ColumnType.coerce("USER_DEFINED") == ColumnType.USER_DEFINED
        assert ColumnType.coerce("userDefined") == ColumnType.USER_DEFINED
        assert str(ColumnType.BIGINT) == "bigint"
        with pytest.raises(ValueError):
            ColumnType.coerce("no_such_type")

    @pytest.mark.describe("test of column descriptors and their dictionary form")
    def test_column_descriptors(self) -> None:
        assert text().as_dict() == {"type": "text"}
        assert vector(1024).as_dict() == {"type": "vector", "dimension": 1024}
        assert set_("int").as_dict() == {"type": "set", "valueType": {"type": "int"}}
        assert list_(timestamp()).as_dict() == {
            "type": "list",
            "valueType": {"type": "timestamp"},
        }
        assert map_("text", "int").as_dict() == {
            "type": "map",
            "keyType": "text",
            "valueType": {"type": "int"},
        }
        assert udt("address").as_dict() == {
            "type": "userDefined",
            "udtName": "address",
        }
        service = VectorServiceOptions(provider="openai", model_name="small")
        assert vector(service=service).as_dict() == {
            "type": "vector",
            "service": {"provider": "openai", "modelName": "small"},
        }

    @pytest.mark.describe("test of column descriptors parsed from the API")
    def test_column_descriptor_parsing(self) -> None:
        parsed = TableColumnTypeDescriptor.coerce(
            {"type": "map", "keyType": "text", "valueType": "int"}
        )
        assert parsed == map_("text", int_())
        assert TableColumnTypeDescriptor.coerce("TEXT") == text()
        assert TableColumnTypeDescriptor.coerce(text()) == text()


class TestPrimaryKeys:
    @pytest.mark.describe("test of primary keys in the short (string) form")
    def test_primary_key_string(self) -> None:
        pk = TablePrimaryKeyDescriptor.coerce("id")
        assert pk == TablePrimaryKeyDescriptor(partition_by=["id"], partition_sort={})
        assert pk.as_dict() == "id"

    @pytest.mark.describe("test of primary keys in the object form")
    def test_primary_key_object(self) -> None:
        pk = TablePrimaryKeyDescriptor.coerce(
            {"partitionBy": ["a", "b"], "partitionSort": {"c": SortMode.DESC}}
        )
        assert pk.partition_by == ["a", "b"]
        assert pk.partition_sort == {"c": -1}
        assert pk.as_dict() == {"partitionBy": ["a", "b"], "partitionSort": {"c": -1}}
        assert TablePrimaryKeyDescriptor(partition_by=["a", "b"]).as_dict() == {
            "partitionBy": ["a", "b"]
        }
        one_col_sorted = TablePrimaryKeyDescriptor(
            partition_by=["a"], partition_sort={"c": SortMode.ASC}
        )
        assert one_col_sorted.as_dict() == {
            "partitionBy": ["a"],
            "partitionSort": {"c": 1},
        }
        assert repr(pk) == "TablePrimaryKeyDescriptor[(a,b)c:d]"
        with pytest.raises(TypeError):
            TablePrimaryKeyDescriptor.coerce(12)  # type: ignore[arg-type]


class TestDefinitions:
    @pytest.mark.describe("test of the fluent table definition builder")
    def test_table_definition_builder(self) -> None:
        builder = CreateTableDefinition.builder()
        definition = (
            builder.add_column("match_id", text())
            .add_column("round", "int")
            .add_partition_by("match_id")
            .add_partition_sort({"round": SortMode.ASC})
            .build()
        )
        assert builder.columns == {}
        assert definition.as_dict() == {
            "columns": {"match_id": {"type": "text"}, "round": {"type": "int"}},
            "primaryKey": {"partitionBy": ["match_id"], "partitionSort": {"round": 1}},
        }
        assert CreateTableDefinition.coerce(definition.as_dict()) == definition

    @pytest.mark.describe("test of the collection definition builder")
    def test_collection_definition_builder(self) -> None:
        definition = (
            CollectionDefinition.builder()
            .set_vector_dimension(3)
            .set_vector_metric(VectorMetric.DOT_PRODUCT)
            .set_indexing("deny", ["annotations", "logs"])
            .build()
        )
        assert definition.as_dict() == {
            "vector": {"dimension": 3, "metric": "dot_product"},
            "indexing": {"deny": ["annotations", "logs"]},
        }
        assert CollectionDefinition.builder().as_dict() == {}
        assert CollectionDefinition.coerce(definition.as_dict()) == definition
        with pytest.raises(ValueError):
            CollectionDefinition.builder().set_indexing("maybe", ["x"])
        with pytest.raises(ValueError):
            CollectionDefinition.builder().set_indexing("allow")
        vectorized = CollectionDefinition.builder().set_vector_service(
            "nvidia", "NV-Embed-QA"
        )
        assert vectorized.as_dict() == {
            "vector": {"service": {"provider": "nvidia", "modelName": "NV-Embed-QA"}}
        }

    @pytest.mark.describe("test of index descriptors parsed from the API")
    def test_index_descriptors(self, caplog: pytest.LogCaptureFixture) -> None:
        assert TableIndexDescriptor.coerce("idx") == TableIndexDescriptor(name="idx")
        full = TableIndexDescriptor.coerce(
            {
                "name": "idx_v",
                "definition": {"column": "v", "options": {"metric": "cosine"}},
                "indexType": "vector",
            }
        )
        assert full.definition is not None
        assert full.definition.options is not None
        assert full.definition.options.metric == "cosine"
        assert full.as_dict() == {
            "name": "idx_v",
            "definition": {"column": "v", "options": {"metric": "cosine"}},
            "indexType": "vector",
        }
        with caplog.at_level(logging.WARNING):
            TableIndexDescriptor.coerce({"name": "x", "surprise": 1})
        assert "surprise" in caplog.text
        with pytest.raises(TypeError):
            TableIndexDescriptor.coerce(3)  # type: ignore[arg-type]
