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
"""Memcached cache and session configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from pyfly_memcached.core.config import config_properties
from pyfly_memcached.kernel.exceptions import ConfigurationError

DEFAULT_SERVERS = ("localhost:11211",)
DEFAULT_COMPRESS_THRESHOLD = 16 * 1024


@dataclass
class TransportProperties:
    """Options handed to the native memcached client."""

    servers: list[str] = field(default_factory=lambda: list(DEFAULT_SERVERS))
    distribution: str = "consistent_ketama"
    binary_protocol: bool = True
    no_block: bool = False
    failover: bool = False
    tcp_nodelay: bool = False

    def __post_init__(self) -> None:
        for address in self.servers:
            host, _, port = address.rpartition(":")
            if port and host and not port.isdigit():
                raise ConfigurationError(f"Invalid memcached server address: {address!r}")


@config_properties(prefix="pyfly.cache.memcached")
@dataclass
class MemcachedProperties(TransportProperties):
    """Configuration for the memcached cache store (pyfly.cache.memcached.*)."""

    enabled: bool = True
    provider: str = "auto"
    prefix_key: str = ""
    expires_in: float = 0
    race_condition_ttl: float = 0
    compress: bool = False
    compress_threshold: int = DEFAULT_COMPRESS_THRESHOLD

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.provider not in ("auto", "pylibmc", "memory"):
            raise ConfigurationError(f"Unknown memcached provider: {self.provider!r}")
        if self.compress_threshold < 0:
            raise ConfigurationError("compress_threshold must not be negative")


@config_properties(prefix="pyfly.session.memcached")
@dataclass
class MemcachedSessionProperties(TransportProperties):
    """Configuration for the memcached session store (pyfly.session.memcached.*).

    ``memcache_server`` and ``expires`` are accepted as aliases of
    ``servers`` and ``expire_after``.
    """

    provider: str = "auto"
    memcache_server: list[str] | None = None
    prefix_key: str = "pyfly:session:"
    expire_after: int | None = None
    expires: int | None = None
    multithread: bool = False
    sid_bytes: int = 16

    def __post_init__(self) -> None:
        if self.memcache_server:
            self.servers = list(self.memcache_server)
        if self.expire_after is None:
            self.expire_after = self.expires
        super().__post_init__()
        if self.sid_bytes < 8:
            raise ConfigurationError("sid_bytes must be at least 8")


@config_properties(prefix="pyfly.logging")
@dataclass
class LoggingProperties:
    """Configuration for structured logging (pyfly.logging.*)."""

    level: dict = field(default_factory=lambda: {"root": "INFO"})
    format: str = "console"
