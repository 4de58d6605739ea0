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

# Defaults/settings for Database management
DEFAULT_ASTRA_DB_KEYSPACE = "default_keyspace"
DEFAULT_DATA_API_PATH = "api/json"
DEFAULT_DATA_API_VERSION = "v1"

# Defaults/settings for Data API requests
DEFAULT_REQUEST_TIMEOUT_MS = 30000
DEFAULT_CONNECTION_TIMEOUT_MS: int | None = None
DEFAULT_BULK_OPERATION_TIMEOUT_MS: int | None = None
DEFAULT_DATA_API_AUTH_HEADER = "Token"
EMBEDDING_HEADER_API_KEY = "x-embedding-api-key"
RERANKING_HEADER_API_KEY = "reranking-api-key"

# Defaults/settings for DevOps API requests
DEFAULT_DEV_OPS_URL = "https://api.astra.datastax.com"
DEFAULT_DEV_OPS_API_VERSION = "v2"
DEFAULT_DEV_OPS_AUTH_HEADER = "Authorization"
DEFAULT_DEV_OPS_AUTH_PREFIX = "Bearer "

# Settings for redacting secrets in string representations and logging
SECRETS_REDACT_ENDING = "..."
SECRETS_REDACT_CHAR = "*"
SECRETS_REDACT_ENDING_LENGTH = 3
FIXED_SECRET_PLACEHOLDER = "***"
DEFAULT_REDACTED_HEADER_NAMES = {
    DEFAULT_DATA_API_AUTH_HEADER,
    DEFAULT_DEV_OPS_AUTH_HEADER,
    EMBEDDING_HEADER_API_KEY,
    RERANKING_HEADER_API_KEY,
}
