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
"""libmemcached transport via ``pylibmc``."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from pyfly_memcached.config.properties.memcached import TransportProperties
from pyfly_memcached.kernel.exceptions import CacheMissError, TransportError


def build_behaviors(properties: TransportProperties) -> dict[str, Any]:
    """Translate transport properties into pylibmc behaviors."""
    behaviors: dict[str, Any] = {
        "tcp_nodelay": properties.tcp_nodelay,
        "no_block": properties.no_block,
    }
    if properties.distribution == "consistent_ketama":
        behaviors["ketama"] = True
    else:
        behaviors["distribution"] = properties.distribution
    if properties.failover:
        behaviors["remove_failed"] = 1
    return behaviors


class LibmemcachedClient:
    """:class:`~pyfly_memcached.cache.ports.outbound.MemcachedClient` backed by ``pylibmc.Client``.

    ``pylibmc`` returns ``None`` or ``False`` for most misses and raises
    ``pylibmc.NotFound`` for counters; both become :class:`CacheMissError`.
    Any other ``pylibmc.Error`` becomes :class:`TransportError`.
    """

    def __init__(self, properties: TransportProperties, client: Any | None = None) -> None:
        import pylibmc

        self._pylibmc = pylibmc
        self._properties = properties
        self._behaviors = build_behaviors(properties)
        self._client = client or pylibmc.Client(
            list(properties.servers),
            binary=properties.binary_protocol,
            behaviors=self._behaviors,
        )

    @property
    def addresses(self) -> list[str]:
        return list(self._properties.servers)

    @property
    def behaviors(self) -> dict[str, Any]:
        return dict(self._behaviors)

    @contextmanager
    def _translating(self, key: str | None) -> Iterator[None]:
        try:
            yield
        except self._pylibmc.NotFound as exc:
            raise CacheMissError(key or "") from exc
        except self._pylibmc.Error as exc:
            raise TransportError(
                str(exc) or type(exc).__name__,
                code="MEMCACHED_TRANSPORT",
                context={"key": key, "servers": self.addresses},
            ) from exc

    def get(self, key: str) -> bytes:
        with self._translating(key):
            value = self._client.get(key)
        if value is None:
            raise CacheMissError(key)
        return _as_bytes(value)

    def get_multi(self, keys: Iterable[str]) -> dict[str, bytes]:
        keys = list(keys)
        with self._translating(None):
            found = self._client.get_multi(keys)
        return {_as_text(k): _as_bytes(v) for k, v in found.items()}

    def set(self, key: str, value: bytes, ttl: int = 0) -> bool:
        with self._translating(key):
            return bool(self._client.set(key, value, time=ttl))

    def add(self, key: str, value: bytes, ttl: int = 0) -> bool:
        with self._translating(key):
            return bool(self._client.add(key, value, time=ttl))

    def delete(self, key: str) -> None:
        with self._translating(key):
            deleted = self._client.delete(key)
        if not deleted:
            raise CacheMissError(key)

    def incr(self, key: str, amount: int = 1) -> int:
        with self._translating(key):
            return int(self._client.incr(key, amount))

    def decr(self, key: str, amount: int = 1) -> int:
        with self._translating(key):
            return int(self._client.decr(key, amount))

    def flush(self) -> None:
        with self._translating(None):
            self._client.flush_all()

    def stats(self) -> dict[str, dict[str, Any]]:
        with self._translating(None):
            raw = self._client.get_stats()
        return {
            _as_text(server): {_as_text(k): _as_text(v) for k, v in values.items()}
            for server, values in raw
        }


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    # pylibmc hands back ints for values it stored as integers
    return str(value).encode("utf-8")


def _as_text(value: Any) -> Any:
    return value.decode("utf-8") if isinstance(value, bytes) else value
