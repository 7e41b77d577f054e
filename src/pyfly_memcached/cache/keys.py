# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Cache key normalization."""

from __future__ import annotations

from typing import Any

SEGMENT_SEPARATOR = "/"


def expand_cache_key(key: Any) -> str:
    """Convert an arbitrary key input into the string sent to memcached.

    - objects exposing ``cache_key`` (method or attribute) use its result
    - lists and tuples join their normalized segments with ``/``
    - dicts become ``field=value`` segments ordered by field
    - bytes are decoded as UTF-8; everything else goes through ``str()``
    """
    if isinstance(key, str):
        return key
    if isinstance(key, bytes):
        return key.decode("utf-8")

    cache_key = getattr(key, "cache_key", None)
    if cache_key is not None:
        return expand_cache_key(cache_key() if callable(cache_key) else cache_key)

    if isinstance(key, dict):
        segments = sorted((expand_cache_key(k), expand_cache_key(v)) for k, v in key.items())
        return SEGMENT_SEPARATOR.join(f"{k}={v}" for k, v in segments)
    if isinstance(key, (list, tuple)):
        return SEGMENT_SEPARATOR.join(expand_cache_key(part) for part in key)
    return str(key)


def namespaced_key(key: Any, prefix: str = "") -> str:
    """Normalize *key* and prepend the store's ``prefix_key`` namespace."""
    return f"{prefix}{expand_cache_key(key)}"
