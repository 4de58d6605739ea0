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

from enum import Enum
from typing import TypeVar

T = TypeVar("T", bound="StrEnum")


class StrEnum(str, Enum):
    """
    A string enum whose members compare equal to their wire value and that
    can be coerced from loosely-written strings.
    """

    def __str__(self) -> str:
        return str(self.value)

    @classmethod
    def _lookup(cls: type[T], value: str) -> T | None:
        u_value = value.upper()
        for member in cls:
            if member.value == value:
                return member
        for member in cls:
            if u_value in {member.name.upper(), member.value.upper()}:
                return member
        return None

    @classmethod
    def coerce(cls: type[T], value: str | T) -> T:
        """
        Return the member matching the input, which can be a member already,
        its exact wire value or (case-insensitively) its name or value.

        Raises:
            ValueError: if the string does not match any member.
        """

        if isinstance(value, cls):
            return value
        member = cls._lookup(value) if isinstance(value, str) else None
        if member is None:
            raise ValueError(
                f"Invalid value '{value}' for {cls.__name__}. "
                f"Allowed values are: {[e.value for e in cls]}"
            )
        return member
