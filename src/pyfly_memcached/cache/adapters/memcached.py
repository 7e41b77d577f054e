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
"""Memcached-backed cache store."""

from __future__ import annotations

import dataclasses
import math
import time
from collections.abc import Callable
from typing import Any

import structlog

from pyfly_memcached.cache.entry import CacheEntry, StructuredPayload, decode_entry, encode_entry
from pyfly_memcached.cache.keys import expand_cache_key, namespaced_key
from pyfly_memcached.cache.options import CacheOptions
from pyfly_memcached.cache.ports.outbound import MAX_RELATIVE_TTL, MemcachedClient
from pyfly_memcached.kernel.exceptions import CacheMissError, TransportError


class MemcachedCacheStore:
    """Cache store that delegates storage to a :class:`MemcachedClient`.

    Values are wrapped in a :class:`CacheEntry` and pickled before storage,
    unless written with ``raw=True``, in which case ``str(value)`` is stored
    as-is so that memcached can ``incr``/``decr`` it. Misses read as ``None``;
    transport errors are logged and re-raised.

    Per-call keyword options are those of :class:`CacheOptions` and are merged
    over the store's defaults.
    """

    def __init__(
        self,
        client: MemcachedClient,
        *,
        options: CacheOptions | None = None,
        prefix_key: str = "",
        logger: Any | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._options = options or CacheOptions()
        self._prefix_key = prefix_key
        self._logger = logger or structlog.get_logger("pyfly_memcached.cache")
        self._clock = clock

    @property
    def client(self) -> MemcachedClient:
        return self._client

    @property
    def addresses(self) -> list[str]:
        return self._client.addresses

    @property
    def options(self) -> CacheOptions:
        return self._options

    @property
    def prefix_key(self) -> str:
        return self._prefix_key

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read(self, key: Any, **options: Any) -> Any | None:
        """Return the cached value, or ``None`` when missing, expired, or of another version."""
        opts = self._options.merge(**options)
        normalized = self._key(key)
        entry = self._read_entry(normalized, "read")
        if entry is None:
            return None

        if entry.expired(self._clock()):
            self._delete_entry(normalized, "read")
            return None
        if entry.mismatched(opts.version):
            return None
        return entry.value

    def write(self, key: Any, value: Any, **options: Any) -> bool:
        """Store *value*. Returns ``False`` only when ``unless_exist`` finds the key taken."""
        opts = self._options.merge(**options)
        return self._write_value(self._key(key), value, opts)

    def fetch(self, key: Any, generator: Callable[[], Any] | None = None, **options: Any) -> Any:
        """Return the cached value, or compute it with *generator*, store it, and return it.

        With ``force=True`` the read is skipped. A cached ``None`` counts as a
        hit. With ``race_condition_ttl`` set, an entry that expired less than
        that many seconds ago is re-stored with its expiry pushed forward so
        concurrent readers keep getting the stale value while this caller
        regenerates it.
        """
        opts = self._options.merge(**options)
        normalized = self._key(key)

        if opts.force:
            if generator is None:
                raise ValueError("fetch with force=True requires a generator")
        else:
            entry = self._read_entry(normalized, "fetch")
            if entry is not None:
                now = self._clock()
                if entry.expired(now):
                    if generator is None:
                        self._delete_entry(normalized, "fetch")
                    else:
                        self._handle_expired_entry(normalized, entry, opts, now)
                    entry = None
                elif entry.mismatched(opts.version):
                    entry = None

            if entry is not None:
                self._logger.debug("cache_hit", key=normalized)
                return entry.value
            if generator is None:
                return None

        self._logger.debug("cache_generate", key=normalized, forced=opts.force)
        value = generator()
        self._write_value(normalized, value, opts)
        return value

    def read_multi(self, *keys: Any, **options: Any) -> dict[str, Any]:
        """Batch read. Only keys that are present appear in the result."""
        opts = self._options.merge(**options)
        if not keys:
            return {}

        names = {self._key(key): expand_cache_key(key) for key in keys}
        try:
            found = self._client.get_multi(list(names))
        except TransportError as exc:
            self._log_error("read_multi", ",".join(names), exc)
            raise

        now = self._clock()
        results: dict[str, Any] = {}
        for normalized, raw in found.items():
            entry = self._decode(raw)
            if entry.expired(now) or entry.mismatched(opts.version):
                continue
            results[names.get(normalized, normalized)] = entry.value
        return results

    def increment(self, key: Any, amount: int = 1) -> int | None:
        """Atomically add *amount* to a raw counter. Returns ``None`` when the key is missing."""
        normalized = self._key(key)
        self._logger.debug("cache_increment", key=normalized, amount=amount)
        try:
            return self._client.incr(normalized, amount)
        except CacheMissError:
            return None
        except TransportError as exc:
            self._log_error("increment", normalized, exc)
            raise

    def decrement(self, key: Any, amount: int = 1) -> int | None:
        """Atomically subtract *amount* from a raw counter. Returns ``None`` when the key is missing."""
        normalized = self._key(key)
        self._logger.debug("cache_decrement", key=normalized, amount=amount)
        try:
            return self._client.decr(normalized, amount)
        except CacheMissError:
            return None
        except TransportError as exc:
            self._log_error("decrement", normalized, exc)
            raise

    def delete(self, key: Any) -> bool:
        """Remove a key. Returns ``True`` if it existed."""
        return self._delete_entry(self._key(key), "delete")

    def exists(self, key: Any, **options: Any) -> bool:
        """Check whether a readable entry is stored under *key*."""
        opts = self._options.merge(**options)
        entry = self._read_entry(self._key(key), "exists")
        if entry is None:
            return False
        return not entry.expired(self._clock()) and not entry.mismatched(opts.version)

    def clear(self) -> None:
        """Flush every server in the client's set, including keys written by other stores."""
        self._logger.info("cache_clear", servers=self.addresses)
        try:
            self._client.flush()
        except TransportError as exc:
            self._log_error("clear", None, exc)
            raise

    def stats(self) -> dict[str, dict[str, Any]]:
        """Return per-server statistics reported by the client."""
        try:
            return self._client.stats()
        except TransportError as exc:
            self._log_error("stats", None, exc)
            raise

    # ------------------------------------------------------------------
    # Payload hooks
    # ------------------------------------------------------------------

    def _dump_payload(self, payload: bytes, options: CacheOptions) -> bytes:
        """Transform an encoded entry before it is sent to the client."""
        return payload

    def _load_payload(self, raw: bytes) -> bytes:
        """Undo :meth:`_dump_payload` on bytes read from the client."""
        return raw

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _key(self, key: Any) -> str:
        return namespaced_key(key, self._prefix_key)

    def _decode(self, raw: bytes) -> CacheEntry:
        result = decode_entry(self._load_payload(raw))
        if isinstance(result, StructuredPayload):
            return result.entry
        return result.to_entry(self._clock())

    def _read_entry(self, key: str, operation: str) -> CacheEntry | None:
        try:
            raw = self._client.get(key)
        except CacheMissError:
            return None
        except TransportError as exc:
            self._log_error(operation, key, exc)
            raise
        return self._decode(raw)

    def _write_value(self, key: str, value: Any, options: CacheOptions) -> bool:
        now = self._clock()
        expires_at = now + options.expires_in if options.expires_in > 0 else None
        entry = CacheEntry(value=value, created_at=now, expires_at=expires_at, version=options.version)
        return self._write_entry(key, entry, options)

    def _write_entry(self, key: str, entry: CacheEntry, options: CacheOptions) -> bool:
        if options.raw:
            payload = _raw_bytes(entry.value)
        else:
            payload = self._dump_payload(encode_entry(entry), options)

        ttl = self._server_ttl(options)
        self._logger.debug("cache_write", key=key, ttl=ttl, unless_exist=options.unless_exist)
        try:
            if options.unless_exist:
                return bool(self._client.add(key, payload, ttl))
            self._client.set(key, payload, ttl)
            return True
        except TransportError as exc:
            self._log_error("write", key, exc)
            raise

    def _delete_entry(self, key: str, operation: str) -> bool:
        try:
            self._client.delete(key)
            return True
        except CacheMissError:
            return False
        except TransportError as exc:
            self._log_error(operation, key, exc)
            raise

    def _handle_expired_entry(
        self, key: str, entry: CacheEntry, options: CacheOptions, now: float
    ) -> None:
        """Extend a just-expired entry inside the race window, or drop it."""
        race_ttl = options.race_condition_ttl
        expired_for = now - (entry.expires_at or now)
        if race_ttl > 0 and expired_for <= race_ttl:
            entry.expires_at = now + race_ttl
            extension = dataclasses.replace(
                options, expires_in=race_ttl * 2, race_condition_ttl=0, raw=False, unless_exist=False
            )
            self._write_entry(key, entry, extension)
        else:
            self._delete_entry(key, "fetch")

    def _server_ttl(self, options: CacheOptions) -> int:
        """Seconds memcached keeps the item: ``expires_in`` plus the race window, ``0`` for never."""
        if options.expires_in <= 0:
            return 0
        ttl = options.expires_in
        if options.race_condition_ttl > 0 and not options.raw:
            ttl += options.race_condition_ttl
        seconds = math.ceil(ttl)
        if seconds > MAX_RELATIVE_TTL:
            return int(self._clock()) + seconds
        return seconds

    def _log_error(self, operation: str, key: str | None, exc: Exception) -> None:
        self._logger.error(
            "memcached_error",
            operation=operation,
            key=key,
            error=str(exc),
            error_type=type(exc).__name__,
        )


def _raw_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    return str(value).encode("utf-8")
