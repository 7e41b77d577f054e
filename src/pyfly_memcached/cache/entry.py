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
"""Cache entries and their wire encoding."""

from __future__ import annotations

import pickle
from dataclasses import dataclass
from typing import Any

# Every pickle written with protocol >= 2 starts with the PROTO opcode.
_PICKLE_MARKER = b"\x80"


@dataclass
class CacheEntry:
    """A cached value plus the metadata used to decide staleness.

    ``expires_at`` is a Unix timestamp; ``None`` never expires.
    """

    value: Any
    created_at: float
    expires_at: float | None = None
    version: str | None = None

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def mismatched(self, version: str | None) -> bool:
        """True when a version was requested and this entry was written under another one."""
        return version is not None and self.version is not None and self.version != version


@dataclass(frozen=True)
class StructuredPayload:
    """A payload that decoded into a :class:`CacheEntry`."""

    entry: CacheEntry


@dataclass(frozen=True)
class LegacyPayload:
    """A payload that is not an encoded entry: raw writes, counters, foreign data."""

    raw: bytes

    @property
    def value(self) -> str | bytes:
        try:
            return self.raw.decode("utf-8")
        except UnicodeDecodeError:
            return self.raw

    def to_entry(self, now: float) -> CacheEntry:
        return CacheEntry(value=self.value, created_at=now)


DecodeResult = StructuredPayload | LegacyPayload


def encode_entry(entry: CacheEntry) -> bytes:
    return pickle.dumps(entry, protocol=pickle.HIGHEST_PROTOCOL)


def decode_entry(raw: bytes) -> DecodeResult:
    """Decode stored bytes, falling back to the raw value for anything not written by :func:`encode_entry`."""
    if not raw.startswith(_PICKLE_MARKER):
        return LegacyPayload(raw)
    try:
        loaded = pickle.loads(raw)
    except Exception:  # arbitrary bytes can fail to unpickle in many ways
        return LegacyPayload(raw)
    if isinstance(loaded, CacheEntry):
        return StructuredPayload(loaded)
    return StructuredPayload(CacheEntry(value=loaded, created_at=0.0))
