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

from dataclasses import dataclass, field
from typing import Any

from astradb.utils.parsing import _warn_residual_keys
from astradb.utils.str_enum import StrEnum


class ColumnType(StrEnum):
    """
    The column types available for tables, as spelled on the wire.
    """

    TEXT = "text"
    INT = "int"
    BIGINT = "bigint"
    SMALLINT = "smallint"
    TINYINT = "tinyint"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    UUID = "uuid"
    TIMEUUID = "timeuuid"
    BLOB = "blob"
    VARINT = "varint"
    INET = "inet"
    ASCII = "ascii"
    VECTOR = "vector"
    SET = "set"
    LIST = "list"
    MAP = "map"
    USER_DEFINED = "userDefined"


class SortMode:
    """
    Admitted values for sorting, e.g. in the partition sort of a primary key
    or in `sort={"field": SortMode.ASC}` for find methods.
    """

    def __init__(self) -> None:
        raise NotImplementedError

    ASC = 1
    DESC = -1
    ASCENDING = ASC
    DESCENDING = DESC


class VectorMetric:
    """
    Admitted values for the similarity metric of vector collections and
    vector indexes.
    """

    def __init__(self) -> None:
        raise NotImplementedError

    DOT_PRODUCT = "dot_product"
    EUCLIDEAN = "euclidean"
    COSINE = "cosine"


@dataclass
class VectorServiceOptions:
    """
    The configuration of a vectorize service, i.e. an embedding provider
    computing vectors server-side.

    Attributes:
        provider: the name of a service provider for embedding calculation.
        model_name: the name of a specific model for use by the service.
        authentication: a key-value dictionary for the "authentication"
            specification, if any.
        parameters: a key-value dictionary for the "parameters" specification,
            if any.
    """

    provider: str | None
    model_name: str | None
    authentication: dict[str, Any] | None = None
    parameters: dict[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        """Recast this object into a dictionary."""

        return {
            k: v
            for k, v in {
                "provider": self.provider,
                "modelName": self.model_name,
                "authentication": self.authentication,
                "parameters": self.parameters,
            }.items()
            if v is not None
        }

    @staticmethod
    def _from_dict(raw_dict: dict[str, Any] | None) -> VectorServiceOptions | None:
        if raw_dict is None:
            return None
        _warn_residual_keys(
            VectorServiceOptions,
            raw_dict,
            {"provider", "modelName", "authentication", "parameters"},
        )
        return VectorServiceOptions(
            provider=raw_dict.get("provider"),
            model_name=raw_dict.get("modelName"),
            authentication=raw_dict.get("authentication"),
            parameters=raw_dict.get("parameters"),
        )

    @classmethod
    def coerce(
        cls, raw_input: VectorServiceOptions | dict[str, Any] | None
    ) -> VectorServiceOptions | None:
        if isinstance(raw_input, VectorServiceOptions):
            return raw_input
        return cls._from_dict(raw_input)


@dataclass
class TableColumnTypeDescriptor:
    """
    Represents and describes a column in a table.

    Depending on the column type, some of the attributes are relevant:
    vector columns have a dimension and possibly a vectorize service;
    sets and lists have a value type, maps a key and a value type;
    user-defined-type columns have the name of the type.

    Attributes:
        column_type: a `ColumnType` value. Strings such as "text" or
            "TEXT" are also accepted when creating the object.
        dimension: the dimension of a vector column.
        service: a `VectorServiceOptions` for a vector column, if any.
        value_type: the type of the values in a set/list/map column.
        key_type: the type of the keys in a map column.
        udt_name: the name of the user-defined type of the column.
    """

    column_type: ColumnType
    dimension: int | None = None
    service: VectorServiceOptions | None = None
    value_type: TableColumnTypeDescriptor | None = None
    key_type: str | None = None
    udt_name: str | None = None

    def __post_init__(self) -> None:
        self.column_type = ColumnType.coerce(self.column_type)

    def __repr__(self) -> str:
        pieces = [
            pc
            for pc in [
                f"{self.column_type.value}",
                None if self.dimension is None else f"dimension={self.dimension}",
                None if self.service is None else f"service={self.service}",
                None if self.key_type is None else f"key_type={self.key_type}",
                None if self.value_type is None else f"value_type={self.value_type}",
                None if self.udt_name is None else f"udt_name={self.udt_name}",
            ]
            if pc is not None
        ]
        return f"{self.__class__.__name__}({', '.join(pieces)})"

    def as_dict(self) -> dict[str, Any]:
        """Recast this object into a dictionary."""

        return {
            k: v
            for k, v in {
                "type": self.column_type.value,
                "dimension": self.dimension,
                "service": None if self.service is None else self.service.as_dict(),
                "valueType": (
                    None if self.value_type is None else self.value_type.as_dict()
                ),
                "keyType": self.key_type,
                "udtName": self.udt_name,
            }.items()
            if v is not None
        }

    @classmethod
    def _from_dict(cls, raw_dict: dict[str, Any]) -> TableColumnTypeDescriptor:
        """
        Create an instance of TableColumnTypeDescriptor from a dictionary
        such as one from the Data API.
        """

        _warn_residual_keys(
            cls,
            raw_dict,
            {"type", "dimension", "service", "valueType", "keyType", "udtName"},
        )
        return TableColumnTypeDescriptor(
            column_type=raw_dict["type"],
            dimension=raw_dict.get("dimension"),
            service=VectorServiceOptions._from_dict(raw_dict.get("service")),
            value_type=(
                None
                if raw_dict.get("valueType") is None
                else TableColumnTypeDescriptor.coerce(raw_dict["valueType"])
            ),
            key_type=raw_dict.get("keyType"),
            udt_name=raw_dict.get("udtName"),
        )

    @classmethod
    def coerce(
        cls, raw_input: TableColumnTypeDescriptor | dict[str, Any] | str
    ) -> TableColumnTypeDescriptor:
        """
        Normalize the input, whether an object already, a plain dictionary
        of the right structure or a bare type name, into a
        TableColumnTypeDescriptor.
        """

        if isinstance(raw_input, TableColumnTypeDescriptor):
            return raw_input
        elif isinstance(raw_input, str):
            return cls(column_type=ColumnType.coerce(raw_input))
        else:
            return cls._from_dict(raw_input)


def text() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.TEXT)


def int_() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.INT)


def bigint() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.BIGINT)


def smallint() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.SMALLINT)


def tinyint() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.TINYINT)


def float_() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.FLOAT)


def double() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.DOUBLE)


def decimal() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.DECIMAL)


def boolean() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.BOOLEAN)


def date() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.DATE)


def time() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.TIME)


def timestamp() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.TIMESTAMP)


def uuid() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.UUID)


def timeuuid() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.TIMEUUID)


def blob() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.BLOB)


def varint() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.VARINT)


def inet() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.INET)


def ascii() -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.ASCII)


def vector(
    dimension: int | None = None, service: VectorServiceOptions | None = None
) -> TableColumnTypeDescriptor:
    """
    A vector column. The dimension can be omitted only if a vectorize
    service is given, which then determines it.
    """

    return TableColumnTypeDescriptor(
        ColumnType.VECTOR,
        dimension=dimension if dimension else None,
        service=service,
    )


def set_(value_type: TableColumnTypeDescriptor | str) -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(
        ColumnType.SET, value_type=TableColumnTypeDescriptor.coerce(value_type)
    )


def list_(value_type: TableColumnTypeDescriptor | str) -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(
        ColumnType.LIST, value_type=TableColumnTypeDescriptor.coerce(value_type)
    )


def map_(
    key_type: str, value_type: TableColumnTypeDescriptor | str
) -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(
        ColumnType.MAP,
        key_type=key_type,
        value_type=TableColumnTypeDescriptor.coerce(value_type),
    )


def udt(udt_name: str) -> TableColumnTypeDescriptor:
    return TableColumnTypeDescriptor(ColumnType.USER_DEFINED, udt_name=udt_name)


@dataclass
class TablePrimaryKeyDescriptor:
    """
    Represents the part of a table definition that describes the primary key.

    On the wire, a primary key made of a single partition column and no
    partition sort is written as the bare column name; any other primary
    key is written as an object with "partitionBy" and "partitionSort".
    Both forms are accepted when parsing.

    Attributes:
        partition_by: a list of column names forming the partition key, i.e.
            the portion of primary key that determines physical grouping and storage
            of rows on the database. This list cannot be empty.
        partition_sort: this defines how rows are to be sorted within a partition.
            It is a dictionary that specifies, for each column of the primary key
            not in the `partition_by` field, whether the sorting is ascending
            or descending (see the values in the `SortMode` constant).
            Ordering in this dictionary is relevant.
    """

    partition_by: list[str]
    partition_sort: dict[str, int] = field(default_factory=dict)

    def __repr__(self) -> str:
        partition_key_block = ",".join(self.partition_by)
        clustering_block = ",".join(
            f"{clu_col_name}:{'a' if clu_col_sort > 0 else 'd'}"
            for clu_col_name, clu_col_sort in self.partition_sort.items()
        )
        pk_block = f"({partition_key_block}){clustering_block}"
        return f"{self.__class__.__name__}[{pk_block}]"

    def as_dict(self) -> dict[str, Any] | str:
        """
        Recast this object into its wire form: a string for a single-column
        partition key without sorting, a dictionary otherwise.
        """

        if len(self.partition_by) == 1 and not self.partition_sort:
            return self.partition_by[0]
        return {
            k: v
            for k, v in {
                "partitionBy": list(self.partition_by),
                "partitionSort": (
                    dict(self.partition_sort.items()) if self.partition_sort else None
                ),
            }.items()
            if v is not None
        }

    @classmethod
    def _from_dict(cls, raw_dict: dict[str, Any]) -> TablePrimaryKeyDescriptor:
        _warn_residual_keys(cls, raw_dict, {"partitionBy", "partitionSort"})
        return TablePrimaryKeyDescriptor(
            partition_by=list(raw_dict.get("partitionBy") or []),
            partition_sort=dict(raw_dict.get("partitionSort") or {}),
        )

    @classmethod
    def coerce(
        cls, raw_input: TablePrimaryKeyDescriptor | dict[str, Any] | str
    ) -> TablePrimaryKeyDescriptor:
        """
        Normalize the input, whether an object already, a bare column name
        or a plain dictionary of the right structure, into a
        TablePrimaryKeyDescriptor.
        """

        if isinstance(raw_input, TablePrimaryKeyDescriptor):
            return raw_input
        elif isinstance(raw_input, str):
            return cls(partition_by=[raw_input], partition_sort={})
        elif isinstance(raw_input, dict):
            return cls._from_dict(raw_input)
        raise TypeError(
            f"Cannot parse a primary key from a {type(raw_input).__name__}."
        )


@dataclass
class CreateTableDefinition:
    """
    A structure expressing the definition ("schema") of a table to be created.

    Instances can be created passing columns and primary key to the constructor,
    coercing a dictionary shaped like the Data API "definition", or with the
    fluent interface:

    Example:
        >>> from astradb.info import CreateTableDefinition, SortMode, text, int_
        >>> table_definition = (
        ...     CreateTableDefinition.builder()
        ...     .add_column("match_id", text())
        ...     .add_column("round", int_())
        ...     .add_column("winner", "text")
        ...     .add_partition_by(["match_id"])
        ...     .add_partition_sort({"round": SortMode.ASC})
        ...     .build()
        ... )
        >>> table_definition.as_dict()["primaryKey"]
        {'partitionBy': ['match_id'], 'partitionSort': {'round': 1}}

    Attributes:
        columns: a map from column names to their type definition.
        primary_key: a `TablePrimaryKeyDescriptor`.
    """

    columns: dict[str, TableColumnTypeDescriptor]
    primary_key: TablePrimaryKeyDescriptor

    def __repr__(self) -> str:
        not_null_pieces = [
            pc
            for pc in [
                f"columns=[{','.join(self.columns.keys())}]",
                f"primary_key={self.primary_key}",
            ]
            if pc is not None
        ]
        return f"{self.__class__.__name__}({', '.join(not_null_pieces)})"

    def as_dict(self) -> dict[str, Any]:
        """Recast this object into a dictionary."""

        return {
            "columns": {
                col_n: col_v.as_dict() for col_n, col_v in self.columns.items()
            },
            "primaryKey": self.primary_key.as_dict(),
        }

    @classmethod
    def _from_dict(cls, raw_dict: dict[str, Any]) -> CreateTableDefinition:
        _warn_residual_keys(cls, raw_dict, {"columns", "primaryKey"})
        return CreateTableDefinition(
            columns={
                col_n: TableColumnTypeDescriptor.coerce(col_v)
                for col_n, col_v in raw_dict["columns"].items()
            },
            primary_key=TablePrimaryKeyDescriptor.coerce(raw_dict["primaryKey"]),
        )

    @classmethod
    def coerce(
        cls, raw_input: CreateTableDefinition | dict[str, Any]
    ) -> CreateTableDefinition:
        if isinstance(raw_input, CreateTableDefinition):
            return raw_input
        else:
            return cls._from_dict(raw_input)

    @staticmethod
    def builder() -> CreateTableDefinition:
        """
        Create an "empty" builder for constructing a table definition through
        a fluent interface. The builder methods return new objects.
        """

        return CreateTableDefinition(
            columns={},
            primary_key=TablePrimaryKeyDescriptor(partition_by=[], partition_sort={}),
        )

    def add_column(
        self, column_name: str, column_type: TableColumnTypeDescriptor | str
    ) -> CreateTableDefinition:
        return CreateTableDefinition(
            columns={
                **self.columns,
                column_name: TableColumnTypeDescriptor.coerce(column_type),
            },
            primary_key=self.primary_key,
        )

    def add_partition_by(
        self, partition_columns: list[str] | str
    ) -> CreateTableDefinition:
        _partition_columns = (
            partition_columns
            if isinstance(partition_columns, list)
            else [partition_columns]
        )
        return CreateTableDefinition(
            columns=self.columns,
            primary_key=TablePrimaryKeyDescriptor(
                partition_by=self.primary_key.partition_by + _partition_columns,
                partition_sort=self.primary_key.partition_sort,
            ),
        )

    def add_partition_sort(
        self, partition_sort: dict[str, int]
    ) -> CreateTableDefinition:
        return CreateTableDefinition(
            columns=self.columns,
            primary_key=TablePrimaryKeyDescriptor(
                partition_by=self.primary_key.partition_by,
                partition_sort={**self.primary_key.partition_sort, **partition_sort},
            ),
        )

    def build(self) -> CreateTableDefinition:
        """
        Finalize the definition. Since the builder methods never mutate
        objects, this returns the object itself.
        """

        return self


@dataclass
class CollectionVectorOptions:
    """
    The "vector" component of the collection options.

    Attributes:
        dimension: an optional positive integer, the dimensionality
            of the vector space.
        metric: an optional similarity metric, one of the `VectorMetric` values.
        source_model: an optional hint about the embedding model in use,
            for the vector index to tune itself.
        service: an optional VectorServiceOptions object in case a vectorize
            service is configured.
    """

    dimension: int | None = None
    metric: str | None = None
    source_model: str | None = None
    service: VectorServiceOptions | None = None

    def as_dict(self) -> dict[str, Any]:
        """Recast this object into a dictionary."""

        return {
            k: v
            for k, v in {
                "dimension": self.dimension,
                "metric": self.metric,
                "service": None if self.service is None else self.service.as_dict(),
                "sourceModel": self.source_model,
            }.items()
            if v is not None
        }

    @staticmethod
    def _from_dict(raw_dict: dict[str, Any] | None) -> CollectionVectorOptions | None:
        if raw_dict is None:
            return None
        return CollectionVectorOptions(
            dimension=raw_dict.get("dimension"),
            metric=raw_dict.get("metric"),
            source_model=raw_dict.get("sourceModel"),
            service=VectorServiceOptions._from_dict(raw_dict.get("service")),
        )


@dataclass
class CollectionDefinition:
    """
    A structure expressing the options of a collection to be created.

    Attributes:
        vector: an optional CollectionVectorOptions object.
        indexing: an optional dictionary such as `{"deny": [...]}` or
            `{"allow": [...]}` listing the document paths to exclude from or
            include in indexing.
        default_id_type: an optional string, the type of the `_id` values
            generated by the API for documents inserted without one.
        lexical: the "lexical" settings, passed through to the API as they are.
        rerank: the "rerank" settings, passed through to the API as they are.

    Example:
        >>> from astradb.info import CollectionDefinition, VectorMetric
        >>> collection_definition = (
        ...     CollectionDefinition.builder()
        ...     .set_vector_dimension(3)
        ...     .set_vector_metric(VectorMetric.DOT_PRODUCT)
        ...     .set_indexing("deny", ["annotations", "logs"])
        ...     .build()
        ... )
        >>> collection_definition.as_dict()
        {'vector': {'dimension': 3, 'metric': 'dot_product'}, 'indexing': {'deny': ['annotations', 'logs']}}
    """

    vector: CollectionVectorOptions | None = None
    indexing: dict[str, Any] | None = None
    default_id_type: str | None = None
    lexical: dict[str, Any] | None = None
    rerank: dict[str, Any] | None = None

    def __repr__(self) -> str:
        not_null_pieces = [
            pc
            for pc in [
                None if self.vector is None else f"vector={self.vector!r}",
                None if self.indexing is None else f"indexing={self.indexing!r}",
                (
                    None
                    if self.default_id_type is None
                    else f"default_id_type={self.default_id_type!r}"
                ),
                None if self.lexical is None else f"lexical={self.lexical!r}",
                None if self.rerank is None else f"rerank={self.rerank!r}",
            ]
            if pc is not None
        ]
        return f"{self.__class__.__name__}({', '.join(not_null_pieces)})"

    def as_dict(self) -> dict[str, Any]:
        """Recast this object into a dictionary, omitting the unset parts."""

        return {
            k: v
            for k, v in {
                "vector": None if self.vector is None else self.vector.as_dict(),
                "indexing": self.indexing,
                "defaultId": (
                    None
                    if self.default_id_type is None
                    else {"type": self.default_id_type}
                ),
                "lexical": self.lexical,
                "rerank": self.rerank,
            }.items()
            if v is not None
            if v != {}
        }

    @classmethod
    def _from_dict(cls, raw_dict: dict[str, Any]) -> CollectionDefinition:
        _warn_residual_keys(
            cls, raw_dict, {"vector", "indexing", "defaultId", "lexical", "rerank"}
        )
        return CollectionDefinition(
            vector=CollectionVectorOptions._from_dict(raw_dict.get("vector")),
            indexing=raw_dict.get("indexing"),
            default_id_type=(raw_dict.get("defaultId") or {}).get("type"),
            lexical=raw_dict.get("lexical"),
            rerank=raw_dict.get("rerank"),
        )

    @classmethod
    def coerce(
        cls, raw_input: CollectionDefinition | dict[str, Any]
    ) -> CollectionDefinition:
        if isinstance(raw_input, CollectionDefinition):
            return raw_input
        else:
            return cls._from_dict(raw_input)

    @staticmethod
    def builder() -> CollectionDefinition:
        return CollectionDefinition()

    def _vector_with(self, **kwargs: Any) -> CollectionVectorOptions:
        _vector = self.vector or CollectionVectorOptions()
        return CollectionVectorOptions(
            **{
                "dimension": _vector.dimension,
                "metric": _vector.metric,
                "source_model": _vector.source_model,
                "service": _vector.service,
                **kwargs,
            }
        )

    def _with(self, **kwargs: Any) -> CollectionDefinition:
        return CollectionDefinition(
            **{
                "vector": self.vector,
                "indexing": self.indexing,
                "default_id_type": self.default_id_type,
                "lexical": self.lexical,
                "rerank": self.rerank,
                **kwargs,
            }
        )

    def set_vector_dimension(self, dimension: int | None) -> CollectionDefinition:
        return self._with(vector=self._vector_with(dimension=dimension))

    def set_vector_metric(self, metric: str | None) -> CollectionDefinition:
        return self._with(vector=self._vector_with(metric=metric))

    def set_vector_source_model(self, source_model: str | None) -> CollectionDefinition:
        return self._with(vector=self._vector_with(source_model=source_model))

    def set_vector_service(
        self,
        provider: VectorServiceOptions | str | None,
        model_name: str | None = None,
        *,
        authentication: dict[str, Any] | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> CollectionDefinition:
        """
        Set the vectorize service, either as a ready VectorServiceOptions
        or through its provider, model name and optional settings.
        """

        if isinstance(provider, VectorServiceOptions):
            service: VectorServiceOptions | None = provider
        elif provider is None:
            service = None
        else:
            service = VectorServiceOptions(
                provider=provider,
                model_name=model_name,
                authentication=authentication,
                parameters=parameters,
            )
        return self._with(vector=self._vector_with(service=service))

    def set_indexing(
        self, indexing_mode: str | None, indexing_target: list[str] | None = None
    ) -> CollectionDefinition:
        """
        Set the indexing policy: `indexing_mode` is "allow" or "deny" and
        `indexing_target` the list of paths. Passing None removes the policy.

        Raises:
            ValueError: for an unknown mode or a missing target list.
        """

        if indexing_mode is None:
            return self._with(indexing=None)
        if indexing_mode.lower() not in {"allow", "deny"}:
            raise ValueError(f"Unknown indexing mode: '{indexing_mode}'.")
        if indexing_target is None:
            raise ValueError("Indexing target cannot be None for a given mode.")
        return self._with(indexing={indexing_mode.lower(): indexing_target})

    def set_default_id(self, default_id_type: str | None) -> CollectionDefinition:
        return self._with(default_id_type=default_id_type)

    def set_lexical(self, lexical: dict[str, Any] | None) -> CollectionDefinition:
        return self._with(lexical=lexical)

    def set_rerank(self, rerank: dict[str, Any] | None) -> CollectionDefinition:
        return self._with(rerank=rerank)

    def build(self) -> CollectionDefinition:
        return self


@dataclass
class TableIndexOptions:
    """
    The options found in the definition of a table index. Text options
    (ascii, normalize, case_sensitive) apply to regular indexes on text
    columns, while metric and source_model apply to vector indexes.
    """

    ascii: bool | None = None
    normalize: bool | None = None
    case_sensitive: bool | None = None
    metric: str | None = None
    source_model: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            k: v
            for k, v in {
                "ascii": self.ascii,
                "normalize": self.normalize,
                "caseSensitive": self.case_sensitive,
                "metric": self.metric,
                "sourceModel": self.source_model,
            }.items()
            if v is not None
        }

    @classmethod
    def _from_dict(cls, raw_dict: dict[str, Any]) -> TableIndexOptions:
        return TableIndexOptions(
            ascii=raw_dict.get("ascii"),
            normalize=raw_dict.get("normalize"),
            case_sensitive=raw_dict.get("caseSensitive"),
            metric=raw_dict.get("metric"),
            source_model=raw_dict.get("sourceModel"),
        )


@dataclass
class TableIndexDefinition:
    """
    The definition of a table index.

    Attributes:
        column: the indexed column. For map columns, this can be a dictionary
            such as `{"column_name": "$keys"}`.
        options: the index options, if any.
    """

    column: str | dict[str, str]
    options: TableIndexOptions | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            k: v
            for k, v in {
                "column": self.column,
                "options": None if self.options is None else self.options.as_dict(),
            }.items()
            if v is not None
            if v != {}
        }

    @classmethod
    def _from_dict(cls, raw_dict: dict[str, Any]) -> TableIndexDefinition:
        return TableIndexDefinition(
            column=raw_dict["column"],
            options=(
                None
                if raw_dict.get("options") is None
                else TableIndexOptions._from_dict(raw_dict["options"])
            ),
        )


@dataclass
class TableIndexDescriptor:
    """
    The description of an index on a table, as returned by `list_indexes`.

    The API lists indexes either by name only, or (when explaining)
    with their full definition. A bare string is parsed into a descriptor
    with just the name.

    Attributes:
        name: the name of the index.
        definition: a `TableIndexDefinition`, if returned by the API.
        index_type: the type of the index, e.g. "regular" or "vector",
            if returned by the API.
    """

    name: str
    definition: TableIndexDefinition | None = None
    index_type: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            k: v
            for k, v in {
                "name": self.name,
                "definition": (
                    None if self.definition is None else self.definition.as_dict()
                ),
                "indexType": self.index_type,
            }.items()
            if v is not None
        }

    @classmethod
    def _from_dict(cls, raw_dict: dict[str, Any]) -> TableIndexDescriptor:
        _warn_residual_keys(cls, raw_dict, {"name", "definition", "indexType"})
        return TableIndexDescriptor(
            name=raw_dict["name"],
            definition=(
                None
                if raw_dict.get("definition") is None
                else TableIndexDefinition._from_dict(raw_dict["definition"])
            ),
            index_type=raw_dict.get("indexType"),
        )

    @classmethod
    def coerce(
        cls, raw_input: TableIndexDescriptor | dict[str, Any] | str
    ) -> TableIndexDescriptor:
        if isinstance(raw_input, TableIndexDescriptor):
            return raw_input
        elif isinstance(raw_input, str):
            return cls(name=raw_input)
        elif isinstance(raw_input, dict):
            return cls._from_dict(raw_input)
        raise TypeError(
            f"Cannot parse an index descriptor from a {type(raw_input).__name__}."
        )


@dataclass
class AvailableRegionInfo:
    """
    Represents a region information as returned by the `find_available_regions`
    method: in other words, it is a descriptor of a certain region available
    for database creation.

    Attributes:
        classification: level of access to the region, one of 'standard', 'premium'
            or 'premium_plus'.
        cloud_provider: one of 'gcp', 'aws' or 'azure'.
        display_name: a region "pretty name" e.g. for printing messages.
        enabled: a boolean flag marking whether the region is enabled.
        name: the short, ID-like name of the region. This can be used as an
            identifier since it determines a region uniquely.
        region_type: the kind of databases the region is for, e.g. "vector".
        reserved_for_qualified_users: a boolean flag marking availability settings.
        zone: macro-zone for the region, e.g. "na" or "emea".
    """

    classification: str
    cloud_provider: str
    display_name: str
    enabled: bool
    name: str
    region_type: str
    reserved_for_qualified_users: bool
    zone: str

    def __repr__(self) -> str:
        body = f'{self.cloud_provider}/{self.name}: "{self.display_name}", ...'
        return f"{self.__class__.__name__}({body})"

    def as_dict(self) -> dict[str, Any]:
        """
        Recast this object into a dictionary.
        """

        return {
            "classification": self.classification,
            "cloudProvider": self.cloud_provider,
            "displayName": self.display_name,
            "enabled": self.enabled,
            "name": self.name,
            "region_type": self.region_type,
            "reservedForQualifiedUsers": self.reserved_for_qualified_users,
            "zone": self.zone,
        }

    @classmethod
    def _from_dict(cls, raw_dict: dict[str, Any]) -> AvailableRegionInfo:
        """
        Create an instance of AvailableRegionInfo from a dictionary
        such as one from the DevOps API.
        """

        _warn_residual_keys(
            cls,
            raw_dict,
            {
                "classification",
                "cloudProvider",
                "displayName",
                "enabled",
                "name",
                "region_type",
                "reservedForQualifiedUsers",
                "zone",
            },
        )
        return AvailableRegionInfo(
            classification=raw_dict.get("classification", ""),
            cloud_provider=raw_dict.get("cloudProvider", ""),
            display_name=raw_dict.get("displayName", ""),
            enabled=bool(raw_dict.get("enabled", False)),
            name=raw_dict.get("name", ""),
            region_type=raw_dict.get("region_type", ""),
            reserved_for_qualified_users=bool(
                raw_dict.get("reservedForQualifiedUsers", False)
            ),
            zone=raw_dict.get("zone", ""),
        )
