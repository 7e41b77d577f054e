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
"""Session store auto-configuration."""

from __future__ import annotations

from typing import Any

from pyfly_memcached.cache.auto_configuration import memcached_client
from pyfly_memcached.cache.ports.outbound import MemcachedClient
from pyfly_memcached.config.properties.memcached import MemcachedSessionProperties
from pyfly_memcached.core.config import Config
from pyfly_memcached.session.adapters.memcached import MemcachedSessionStore


def session_store(
    config: Config,
    client: MemcachedClient | None = None,
    logger: Any | None = None,
) -> MemcachedSessionStore:
    """Build the session store described by ``pyfly.session.memcached.*``.

    Pass *client* to share one memcached connection with the cache store.
    """
    properties = config.bind(MemcachedSessionProperties)
    client = client or memcached_client(properties, properties.provider)
    return MemcachedSessionStore(client, properties=properties, logger=logger)
