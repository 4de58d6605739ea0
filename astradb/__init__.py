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

import importlib.metadata
import os

import toml

DISTRIBUTION_NAME = "astradb-client"


def get_version() -> str:
    try:
        return importlib.metadata.version(DISTRIBUTION_NAME)

    # If the package is not installed, we can still get the version from the pyproject.toml file
    except importlib.metadata.PackageNotFoundError:
        dir_path = os.path.dirname(os.path.realpath(__file__))
        pyproject_path = os.path.join(dir_path, "..", "pyproject.toml")

        try:
            with open(pyproject_path, encoding="utf-8") as pyproject:
                pyproject_data = toml.loads(pyproject.read())
                return str(pyproject_data["project"]["version"])

        # If the pyproject.toml file does not exist or the version is not found, return unknown
        except (FileNotFoundError, KeyError):
            return "unknown"


__version__: str = get_version()


import astradb.cursors  # noqa: E402
import astradb.filters  # noqa: E402
import astradb.info  # noqa: F401, E402
from astradb.admin import AstraDBAdmin  # noqa: E402
from astradb.client import DataAPIClient  # noqa: E402
from astradb.collection import Collection  # noqa: E402
from astradb.cursors import Cursor, CursorState  # noqa: E402
from astradb.table import Table  # noqa: E402
from astradb.utils.api_options import APIOptions, TimeoutOptions  # noqa: E402

# A circular-import issue requires this to happen at the end of this module:
from astradb.database import Database  # noqa: E402

__all__ = [
    "APIOptions",
    "AstraDBAdmin",
    "Collection",
    "Cursor",
    "CursorState",
    "Database",
    "DataAPIClient",
    "Table",
    "TimeoutOptions",
    "__version__",
]


__pdoc__ = {
    "get_version": False,
    "settings": False,
    "utils": False,
}
