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
"""Memcached client and cache store protocols."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Protocol, runtime_checkable

# Memcached reads larger expiration values as absolute Unix timestamps.
MAX_RELATIVE_TTL = 60 * 60 * 24 * 30


@runtime_checkable
class MemcachedClient(Protocol):
    """Transport contract consumed by the cache and session stores.

    Values cross this seam as ``bytes``; the stores own serialization.
    ``get``, ``delete``, ``incr`` and ``decr`` raise
    :class:`~pyfly_memcached.kernel.exceptions.CacheMissError` for an absent
    key. Every other failure surfaces as
    :class:`~pyfly_memcached.kernel.exceptions.TransportError`.

    ``ttl`` follows memcached semantics: ``0`` never expires, values up to
    30 days are relative seconds, larger values are absolute Unix timestamps.
    """

    @property
    def addresses(self) -> list[str]: ...

    def get(self, key: str) -> bytes: ...

    def get_multi(self, keys: Iterable[str]) -> dict[str, bytes]: ...

    def set(self, key: str, value: bytes, ttl: int = 0) -> bool: ...

    def add(self, key: str, value: bytes, ttl: int = 0) -> bool: ...

    def delete(self, key: str) -> None: ...

    def incr(self, key: str, amount: int = 1) -> int: ...

    def decr(self, key: str, amount: int = 1) -> int: ...

    def flush(self) -> None: ...

    def stats(self) -> dict[str, dict[str, Any]]: ...


@runtime_checkable
class CacheStore(Protocol):
    """Framework-facing cache store contract."""

    def read(self, key: Any, **options: Any) -> Any | None: ...

    def write(self, key: Any, value: Any, **options: Any) -> bool: ...

    def fetch(self, key: Any, generator: Callable[[], Any] | None = None, **options: Any) -> Any: ...

    def read_multi(self, *keys: Any, **options: Any) -> dict[str, Any]: ...

    def increment(self, key: Any, amount: int = 1) -> int | None: ...

    def decrement(self, key: Any, amount: int = 1) -> int | None: ...

    def delete(self, key: Any) -> bool: ...

    def exists(self, key: Any, **options: Any) -> bool: ...

    def clear(self) -> None: ...

    def stats(self) -> dict[str, dict[str, Any]]: ...
