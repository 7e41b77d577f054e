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
"""Exception hierarchy for the memcached cache and session stores.

Categories:
- CacheMissError: the key is not stored (expected, never logged)
- TransportError: connection, protocol, or server-side failure
- SerializationError: a stored payload cannot be decoded
- ConfigurationError: invalid store or client properties
"""

from __future__ import annotations


class MemcachedStoreException(Exception):
    """Base exception for all pyfly-memcached errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "MEMCACHED_TRANSPORT").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class CacheMissError(MemcachedStoreException):
    """The requested key is not stored on any server."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Key not found: {key!r}", code="MEMCACHED_NOT_FOUND", context={"key": key})
        self.key = key


class TransportError(MemcachedStoreException):
    """Connection, protocol, or server failure reported by the memcached client."""


class SerializationError(MemcachedStoreException):
    """A stored payload could not be decoded."""


class ConfigurationError(MemcachedStoreException):
    """Store or client properties are invalid."""
