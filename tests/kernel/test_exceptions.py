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
"""Tests for the exception hierarchy."""

from pyfly_memcached.kernel.exceptions import (
    CacheMissError,
    ConfigurationError,
    MemcachedStoreException,
    SerializationError,
    TransportError,
)


class TestExceptionHierarchy:
    def test_all_derive_from_base(self):
        for exc_cls in (CacheMissError, TransportError, SerializationError, ConfigurationError):
            assert issubclass(exc_cls, MemcachedStoreException)

    def test_message_code_and_context(self):
        exc = TransportError("SERVER HAS FAILED", code="MEMCACHED_TRANSPORT", context={"key": "foo"})
        assert str(exc) == "SERVER HAS FAILED"
        assert exc.code == "MEMCACHED_TRANSPORT"
        assert exc.context == {"key": "foo"}

    def test_context_defaults_to_empty(self):
        exc = ConfigurationError("bad")
        assert exc.code is None
        assert exc.context == {}

    def test_cache_miss_carries_key(self):
        exc = CacheMissError("views/7")
        assert exc.key == "views/7"
        assert exc.code == "MEMCACHED_NOT_FOUND"
        assert exc.context == {"key": "views/7"}
        assert "views/7" in str(exc)
