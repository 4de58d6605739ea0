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

from collections.abc import Mapping
from typing import Any

from astradb.filters import Filter
from astradb.utils.api_options import APIOptions, TimeoutOptions, stack_api_options
from astradb.utils.unset import _UNSET, UnsetType


def check_filter(filter: Any, *, allow_none: bool = False) -> None:
    """
    Raise a TypeError unless the filter is a Filter or a mapping
    (or None, where admitted).
    """

    if filter is None and allow_none:
        return
    if not isinstance(filter, (Filter, Mapping)):
        raise TypeError(f"invalid filter type: {type(filter).__name__}")


def ensure_non_empty_list(items: Any, what: str) -> None:
    if not isinstance(items, (list, tuple)):
        raise TypeError(f"{what}: must be a list")
    if len(items) == 0:
        raise ValueError(f"{what}: must be non-empty")


def command_api_options(
    api_options: APIOptions | None,
    timeout_ms: int | None | UnsetType,
    *,
    bulk: bool = False,
) -> APIOptions | None:
    """
    Combine the options passed to a method with its `timeout_ms` parameter,
    the latter taking precedence as the request timeout (and, for bulk
    operations, as the bulk-operation timeout too).
    """

    if isinstance(timeout_ms, UnsetType):
        return api_options
    return stack_api_options(
        api_options,
        APIOptions(
            timeout_options=TimeoutOptions(
                request_timeout_ms=timeout_ms,
                bulk_operation_timeout_ms=timeout_ms if bulk else _UNSET,
            )
        ),
    )
