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
"""Store defaults and per-call options."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from pyfly_memcached.config.properties.memcached import DEFAULT_COMPRESS_THRESHOLD, MemcachedProperties


@dataclass(frozen=True)
class CacheOptions:
    """Options recognized by the cache store.

    A store holds one instance as its defaults; every call merges its keyword
    arguments over them with :meth:`merge`.

    Attributes:
        expires_in: Seconds until the entry expires; ``0`` never expires.
        raw: Store ``str(value)`` unmodified instead of an encoded entry.
        unless_exist: Only write when the key is not already stored.
        force: Make ``fetch`` skip the read and regenerate.
        race_condition_ttl: Seconds a stale entry keeps being served while
            one caller regenerates it.
        compress: Allow compression (honored by the compressed store).
        compress_threshold: Payload size in bytes above which to compress.
        version: Entries written under another version read as misses.
    """

    expires_in: float = 0
    raw: bool = False
    unless_exist: bool = False
    force: bool = False
    race_condition_ttl: float = 0
    compress: bool = False
    compress_threshold: int = DEFAULT_COMPRESS_THRESHOLD
    version: str | None = None

    @classmethod
    def from_properties(cls, properties: MemcachedProperties) -> CacheOptions:
        return cls(
            expires_in=properties.expires_in,
            race_condition_ttl=properties.race_condition_ttl,
            compress=properties.compress,
            compress_threshold=properties.compress_threshold,
        )

    def merge(self, **overrides: Any) -> CacheOptions:
        """Return a copy with *overrides* applied; ``None`` values keep the default."""
        unknown = set(overrides) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise TypeError(f"Unknown cache options: {', '.join(sorted(unknown))}")
        changes = {k: _seconds(v) for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes) if changes else self


def _seconds(value: Any) -> Any:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return value
