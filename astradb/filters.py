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
Helpers to express filters for `find`, `find_one` and `count_documents`.

Filters can be given as plain dictionaries (`F` is a dict subclass, `A` a
list subclass, both provided for readability) or built with the functions
in this module:

    >>> from astradb.filters import and_, eq, gte, in_
    >>> and_(eq("status", "active"), gte("age", 18)).to_json()
    {'$and': [{'status': 'active'}, {'age': {'$gte': 18}}]}
    >>> in_("tag", "a", "b").to_json()
    {'tag': {'$in': ['a', 'b']}}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class F(dict):  # type: ignore[type-arg]
    """A filter (or any other document fragment) in dictionary form."""


class A(list):  # type: ignore[type-arg]
    """A list of values in a filter, e.g. for `$in`."""


class FilterOperator(str, Enum):
    AND = "$and"
    OR = "$or"
    NOT = "$not"
    GT = "$gt"
    GTE = "$gte"
    LT = "$lt"
    LTE = "$lte"
    EQ = "$eq"
    NE = "$ne"
    IN = "$in"
    NIN = "$nin"
    EXISTS = "$exists"
    ALL = "$all"
    SIZE = "$size"


@dataclass(frozen=True)
class Filter:
    """
    A filter expression: either a condition on a single field, or a logical
    combination of child filters.

    Filters are usually built with the functions in this module, such as
    `eq` or `and_`, rather than instantiated directly.

    Attributes:
        op: the operator. None on a field condition means equality.
        field: the name of the field a condition applies to.
        value: the operand of the condition.
        children: the sub-filters of a logical combination.
    """

    op: FilterOperator | None = None
    field: str = ""
    value: Any = None
    children: tuple[Filter, ...] = ()

    def to_json(self) -> dict[str, Any] | None:
        if self.children:
            if self.op is None:
                raise ValueError("A combination of filters requires an operator.")
            return {self.op.value: [child.to_json() for child in self.children]}
        if self.field:
            if self.op is None or self.op == FilterOperator.EQ:
                return {self.field: self.value}
            return {self.field: {self.op.value: self.value}}
        return None


def eq(field_name: str, value: Any) -> Filter:
    return Filter(op=FilterOperator.EQ, field=field_name, value=value)


def ne(field_name: str, value: Any) -> Filter:
    return Filter(op=FilterOperator.NE, field=field_name, value=value)


def lt(field_name: str, value: Any) -> Filter:
    return Filter(op=FilterOperator.LT, field=field_name, value=value)


def lte(field_name: str, value: Any) -> Filter:
    return Filter(op=FilterOperator.LTE, field=field_name, value=value)


def gt(field_name: str, value: Any) -> Filter:
    return Filter(op=FilterOperator.GT, field=field_name, value=value)


def gte(field_name: str, value: Any) -> Filter:
    return Filter(op=FilterOperator.GTE, field=field_name, value=value)


def in_(field_name: str, *values: Any) -> Filter:
    return Filter(op=FilterOperator.IN, field=field_name, value=list(values))


def nin(field_name: str, *values: Any) -> Filter:
    return Filter(op=FilterOperator.NIN, field=field_name, value=list(values))


def exists(field_name: str, value: bool = True) -> Filter:
    return Filter(op=FilterOperator.EXISTS, field=field_name, value=value)


def all_(field_name: str, *values: Any) -> Filter:
    return Filter(op=FilterOperator.ALL, field=field_name, value=list(values))


def size(field_name: str, value: int) -> Filter:
    return Filter(op=FilterOperator.SIZE, field=field_name, value=value)


def and_(*children: Filter) -> Filter:
    """Combine filters so that all of them must match."""
    return Filter(op=FilterOperator.AND, children=tuple(children))


def or_(*children: Filter) -> Filter:
    """Combine filters so that at least one of them must match."""
    return Filter(op=FilterOperator.OR, children=tuple(children))
