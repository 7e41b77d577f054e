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
"""Memcached cache store with transparent zlib compression."""

from __future__ import annotations

import dataclasses
import zlib
from typing import Any

from pyfly_memcached.cache.adapters.memcached import MemcachedCacheStore
from pyfly_memcached.cache.options import CacheOptions
from pyfly_memcached.cache.ports.outbound import MemcachedClient

COMPRESSED_MARKER = b"\x00zlib\x00"


class CompressedMemcachedCacheStore(MemcachedCacheStore):
    """Cache store that zlib-compresses encoded entries above a size threshold.

    Payloads at or below ``compress_threshold`` bytes are stored as-is, as are
    raw writes. Compressed payloads carry :data:`COMPRESSED_MARKER`, so entries
    written uncompressed (by this store or by a plain
    :class:`MemcachedCacheStore`) remain readable.

    The store default always has ``compress`` on, whatever options are passed;
    a per-call ``compress=False`` skips compression for one write.
    """

    def __init__(self, client: MemcachedClient, *, options: CacheOptions | None = None, **kwargs: Any) -> None:
        options = dataclasses.replace(options, compress=True) if options is not None else CacheOptions(compress=True)
        super().__init__(client, options=options, **kwargs)

    def _dump_payload(self, payload: bytes, options: CacheOptions) -> bytes:
        if not options.compress or len(payload) <= options.compress_threshold:
            return payload
        return COMPRESSED_MARKER + zlib.compress(payload)

    def _load_payload(self, raw: bytes) -> bytes:
        if not raw.startswith(COMPRESSED_MARKER):
            return raw
        try:
            return zlib.decompress(raw[len(COMPRESSED_MARKER) :])
        except zlib.error as exc:
            self._logger.warning("cache_decompress_failed", error=str(exc), size=len(raw))
            return raw
