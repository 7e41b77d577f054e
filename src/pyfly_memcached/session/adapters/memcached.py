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
"""Memcached-backed session store."""

from __future__ import annotations

import pickle
import secrets
import threading
import time
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from typing import Any, Literal, TypeVar

import structlog

from pyfly_memcached.cache.ports.outbound import MAX_RELATIVE_TTL, MemcachedClient
from pyfly_memcached.config.properties.memcached import MemcachedSessionProperties
from pyfly_memcached.kernel.exceptions import CacheMissError, SerializationError, TransportError

T = TypeVar("T")

_UNSET: Any = object()


class MemcachedSessionStore:
    """Session store that keeps each session dict as one pickled memcached item.

    Keys are ``prefix_key + sid``. Backend failures never reach the caller:
    they are logged and the operation returns its safe default, so a
    memcached outage degrades every request to a fresh anonymous session.

    When ``properties.multithread`` is set, loads, saves and destroys are
    serialized through one lock per store.
    """

    def __init__(
        self,
        client: MemcachedClient,
        *,
        properties: MemcachedSessionProperties | None = None,
        logger: Any | None = None,
        token_factory: Callable[[int], str] = secrets.token_hex,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._properties = properties or MemcachedSessionProperties()
        self._logger = logger or structlog.get_logger("pyfly_memcached.session")
        self._token_factory = token_factory
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def client(self) -> MemcachedClient:
        return self._client

    @property
    def properties(self) -> MemcachedSessionProperties:
        return self._properties

    def generate_sid(self) -> str:
        """Return a session id that is not currently stored.

        If memcached cannot be reached the unchecked candidate is returned.
        """
        while True:
            sid = self._token_factory(self._properties.sid_bytes)
            try:
                self._client.get(self._key(sid))
            except CacheMissError:
                return sid
            except TransportError as exc:
                self._log_error("generate_sid", sid, exc)
                return sid
            self._logger.debug("session_sid_taken", sid=sid)

    def get_session(self, sid: str | None) -> tuple[str, dict[str, Any]]:
        """Load the session for *sid*, generating a new id when *sid* is ``None``."""
        sid = sid or self.generate_sid()

        def load() -> dict[str, Any]:
            try:
                raw = self._client.get(self._key(sid))
            except CacheMissError:
                return {}
            try:
                return _decode(raw)
            except SerializationError as exc:
                self._logger.warning("session_decode_failed", sid=sid, error=str(exc), size=len(raw))
                return {}

        return sid, self._with_lock("get_session", sid, {}, load)

    def set_session(
        self,
        sid: str,
        session: dict[str, Any],
        *,
        expire_after: int | None = _UNSET,
    ) -> str | Literal[False]:
        """Replace the stored session. Returns *sid*, or ``False`` if it could not be stored.

        The item lives ``expire_after + 1`` seconds so it outlasts the
        caller's own staleness check; ``None`` keeps it until evicted.
        """
        if expire_after is _UNSET:
            expire_after = self._properties.expire_after
        ttl = self._server_ttl(expire_after)
        try:
            payload = _encode(session)
        except SerializationError as exc:
            self._log_error("set_session", sid, exc)
            return False

        def save() -> str:
            self._client.set(self._key(sid), payload, ttl)
            return sid

        result: str | Literal[False] = self._with_lock("set_session", sid, False, save)
        return result

    def destroy_session(self, sid: str, *, drop: bool = False) -> str | None:
        """Delete the session. Unless *drop*, return a fresh replacement id."""

        def destroy() -> str | None:
            try:
                self._client.delete(self._key(sid))
            except CacheMissError:
                pass
            if drop:
                return None
            new_sid = self.generate_sid()
            while new_sid == sid:
                new_sid = self.generate_sid()
            return new_sid

        return self._with_lock("destroy_session", sid, None, destroy)

    def _key(self, sid: str) -> str:
        return f"{self._properties.prefix_key}{sid}"

    def _server_ttl(self, expire_after: int | None) -> int:
        if expire_after is None:
            return 0
        seconds = int(expire_after) + 1
        if seconds > MAX_RELATIVE_TTL:
            return int(self._clock()) + seconds
        return seconds

    def _guard(self) -> AbstractContextManager[Any]:
        return self._lock if self._properties.multithread else nullcontext()

    def _with_lock(self, operation: str, sid: str, default: T, action: Callable[[], T]) -> T:
        with self._guard():
            try:
                return action()
            except TransportError as exc:
                self._log_error(operation, sid, exc)
                return default

    def _log_error(self, operation: str, sid: str, exc: Exception) -> None:
        self._logger.error(
            "memcached_error",
            operation=operation,
            sid=sid,
            error=str(exc),
            error_type=type(exc).__name__,
        )


def _encode(session: dict[str, Any]) -> bytes:
    try:
        return pickle.dumps(dict(session), protocol=pickle.HIGHEST_PROTOCOL)
    except Exception as exc:
        raise SerializationError(
            f"Session could not be pickled: {exc}", code="MEMCACHED_BAD_SESSION"
        ) from exc


def _decode(raw: bytes) -> dict[str, Any]:
    try:
        data = pickle.loads(raw)
    except Exception as exc:
        raise SerializationError("Stored session could not be unpickled", code="MEMCACHED_BAD_SESSION") from exc
    if not isinstance(data, dict):
        raise SerializationError(
            f"Stored session is a {type(data).__name__}, not a dict", code="MEMCACHED_BAD_SESSION"
        )
    return data
