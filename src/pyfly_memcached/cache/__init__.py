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
"""pyfly-memcached cache: memcached-backed cache stores.

Import concrete client types from the adapter package::

    from pyfly_memcached.cache.adapters.memory import InMemoryMemcachedClient
    from pyfly_memcached.cache.adapters.libmemcached import LibmemcachedClient
"""

from pyfly_memcached.cache.adapters.compressed import CompressedMemcachedCacheStore
from pyfly_memcached.cache.adapters.memcached import MemcachedCacheStore
from pyfly_memcached.cache.entry import CacheEntry
from pyfly_memcached.cache.keys import expand_cache_key
from pyfly_memcached.cache.options import CacheOptions
from pyfly_memcached.cache.ports.outbound import CacheStore, MemcachedClient

__all__ = [
    "CacheEntry",
    "CacheOptions",
    "CacheStore",
    "CompressedMemcachedCacheStore",
    "MemcachedCacheStore",
    "MemcachedClient",
    "expand_cache_key",
]
