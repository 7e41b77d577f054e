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
"""In-process memcached client."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from typing import Any

from pyfly_memcached.cache.ports.outbound import MAX_RELATIVE_TTL
from pyfly_memcached.kernel.exceptions import CacheMissError, TransportError

MAX_KEY_LENGTH = 250
_COUNTER_MAX = 2**64


class InMemoryMemcachedClient:
    """Memcached client that keeps everything in a process-local dict.

    Suitable for development, testing, and single-process applications.
    Mirrors the server-side rules the stores rely on: TTL interpretation,
    the 250-byte key limit, add-only-if-absent, and unsigned decimal counters.
    The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self,
        servers: list[str] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._servers = list(servers or ["in-memory"])
        self._clock = clock
        self._store: dict[str, tuple[bytes, float | None]] = {}
        self._lock = threading.RLock()
        self._counters = {"cmd_get": 0, "cmd_set": 0, "get_hits": 0, "get_misses": 0}

    @property
    def addresses(self) -> list[str]:
        return list(self._servers)

    def _check_key(self, key: str) -> None:
        if not key or len(key.encode("utf-8")) > MAX_KEY_LENGTH:
            raise TransportError(
                f"Invalid key length for memcached: {len(key.encode('utf-8'))}",
                code="MEMCACHED_BAD_KEY",
                context={"key": key[:64]},
            )

    def _expires_at(self, ttl: int) -> float | None:
        if ttl <= 0:
            return None
        if ttl > MAX_RELATIVE_TTL:
            return float(ttl)
        return self._clock() + ttl

    def _live(self, key: str) -> bytes | None:
        item = self._store.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and self._clock() >= expires_at:
            del self._store[key]
            return None
        return value

    def get(self, key: str) -> bytes:
        self._check_key(key)
        with self._lock:
            self._counters["cmd_get"] += 1
            value = self._live(key)
            if value is None:
                self._counters["get_misses"] += 1
                raise CacheMissError(key)
            self._counters["get_hits"] += 1
            return value

    def get_multi(self, keys: Iterable[str]) -> dict[str, bytes]:
        found: dict[str, bytes] = {}
        for key in keys:
            try:
                found[key] = self.get(key)
            except CacheMissError:
                continue
        return found

    def set(self, key: str, value: bytes, ttl: int = 0) -> bool:
        self._check_key(key)
        with self._lock:
            self._counters["cmd_set"] += 1
            self._store[key] = (bytes(value), self._expires_at(ttl))
            return True

    def add(self, key: str, value: bytes, ttl: int = 0) -> bool:
        self._check_key(key)
        with self._lock:
            if self._live(key) is not None:
                return False
            return self.set(key, value, ttl)

    def delete(self, key: str) -> None:
        self._check_key(key)
        with self._lock:
            if self._live(key) is None:
                raise CacheMissError(key)
            del self._store[key]

    def incr(self, key: str, amount: int = 1) -> int:
        return self._adjust(key, amount)

    def decr(self, key: str, amount: int = 1) -> int:
        return self._adjust(key, -amount)

    def _adjust(self, key: str, delta: int) -> int:
        self._check_key(key)
        with self._lock:
            current = self._live(key)
            if current is None:
                raise CacheMissError(key)
            if not current.strip().isdigit():
                raise TransportError(
                    "Cannot increment or decrement non-numeric value",
                    code="MEMCACHED_NON_NUMERIC",
                    context={"key": key},
                )
            # incr wraps at 64 bits, decr floors at zero
            result = max(int(current) + delta, 0) % _COUNTER_MAX
            _, expires_at = self._store[key]
            self._store[key] = (str(result).encode("ascii"), expires_at)
            return result

    def flush(self) -> None:
        with self._lock:
            self._store.clear()

    def stats(self) -> dict[str, dict[str, Any]]:
        with self._lock:
            live = sum(1 for key in list(self._store) if self._live(key) is not None)
            return {
                server: {"curr_items": live, "time": int(self._clock()), **self._counters}
                for server in self._servers
            }
