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
"""Shared fixtures: a controllable clock and in-process memcached clients."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest

from pyfly_memcached.cache.adapters.memory import InMemoryMemcachedClient
from pyfly_memcached.kernel.exceptions import TransportError


class FakeClock:
    """Callable clock whose time only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingLogger:
    """Logger stub that records ``(level, event, context)`` tuples."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def _record(self, level: str, event: str, **kw: Any) -> None:
        self.records.append((level, event, kw))

    def debug(self, event: str, **kw: Any) -> None:
        self._record("debug", event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._record("info", event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._record("warning", event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._record("error", event, **kw)

    def events(self, level: str) -> list[tuple[str, dict[str, Any]]]:
        return [(event, kw) for lvl, event, kw in self.records if lvl == level]


class FailingClient:
    """MemcachedClient stub whose every call fails like an unreachable server."""

    def __init__(self, message: str = "CONNECTION FAILURE") -> None:
        self.message = message
        self.calls: list[str] = []

    @property
    def addresses(self) -> list[str]:
        return ["10.0.0.1:11211"]

    def _fail(self, operation: str) -> Any:
        self.calls.append(operation)
        raise TransportError(self.message, code="MEMCACHED_TRANSPORT")

    def get(self, key: str) -> bytes:
        return self._fail("get")

    def get_multi(self, keys: Iterable[str]) -> dict[str, bytes]:
        return self._fail("get_multi")

    def set(self, key: str, value: bytes, ttl: int = 0) -> bool:
        return self._fail("set")

    def add(self, key: str, value: bytes, ttl: int = 0) -> bool:
        return self._fail("add")

    def delete(self, key: str) -> None:
        self._fail("delete")

    def incr(self, key: str, amount: int = 1) -> int:
        return self._fail("incr")

    def decr(self, key: str, amount: int = 1) -> int:
        return self._fail("decr")

    def flush(self) -> None:
        self._fail("flush")

    def stats(self) -> dict[str, dict[str, Any]]:
        return self._fail("stats")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client(clock: FakeClock) -> InMemoryMemcachedClient:
    return InMemoryMemcachedClient(servers=["localhost:11211"], clock=clock)


@pytest.fixture
def failing_client() -> FailingClient:
    return FailingClient()


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()
