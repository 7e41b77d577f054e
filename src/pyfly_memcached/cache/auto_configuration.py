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
"""Cache store auto-configuration."""

from __future__ import annotations

import importlib
from typing import Any

import structlog

from pyfly_memcached.cache.adapters.compressed import CompressedMemcachedCacheStore
from pyfly_memcached.cache.adapters.memcached import MemcachedCacheStore
from pyfly_memcached.cache.options import CacheOptions
from pyfly_memcached.cache.ports.outbound import MemcachedClient
from pyfly_memcached.config.properties.memcached import MemcachedProperties, TransportProperties
from pyfly_memcached.core.config import Config
from pyfly_memcached.kernel.exceptions import ConfigurationError

_logger = structlog.get_logger("pyfly_memcached.cache.auto")


def is_available(module_name: str) -> bool:
    """Check if a Python package is importable."""
    try:
        importlib.import_module(module_name)
        return True
    except ImportError:
        return False


def detect_provider() -> str:
    """Detect the best available memcached client provider."""
    if is_available("pylibmc"):
        return "pylibmc"
    return "memory"


def memcached_client(properties: TransportProperties, provider: str = "auto") -> MemcachedClient:
    """Build the memcached client selected by *provider* (``auto`` detects it)."""
    resolved = provider if provider != "auto" else detect_provider()

    if resolved == "pylibmc":
        if not is_available("pylibmc"):
            raise ConfigurationError("Memcached provider 'pylibmc' requested but pylibmc is not installed")
        from pyfly_memcached.cache.adapters.libmemcached import LibmemcachedClient

        client: MemcachedClient = LibmemcachedClient(properties)
    elif resolved == "memory":
        from pyfly_memcached.cache.adapters.memory import InMemoryMemcachedClient

        client = InMemoryMemcachedClient(servers=list(properties.servers))
    else:
        raise ConfigurationError(f"Unknown memcached provider: {resolved!r}")

    _logger.info("auto_configured", subsystem="memcached", provider=resolved, servers=properties.servers)
    return client


def cache_store(
    config: Config,
    client: MemcachedClient | None = None,
    logger: Any | None = None,
) -> MemcachedCacheStore:
    """Build the cache store described by ``pyfly.cache.memcached.*``.

    ``compress: true`` selects :class:`CompressedMemcachedCacheStore`.
    An injected *client* is reused instead of building one.
    """
    properties = config.bind(MemcachedProperties)
    if not properties.enabled:
        raise ConfigurationError("Memcached cache store is disabled (pyfly.cache.memcached.enabled=false)")

    client = client or memcached_client(properties, properties.provider)
    store_cls = CompressedMemcachedCacheStore if properties.compress else MemcachedCacheStore
    return store_cls(
        client,
        options=CacheOptions.from_properties(properties),
        prefix_key=properties.prefix_key,
        logger=logger,
    )
