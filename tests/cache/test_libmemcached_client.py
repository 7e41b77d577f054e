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
"""Tests for LibmemcachedClient using a mocked pylibmc.Client."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from pyfly_memcached.cache.adapters.libmemcached import build_behaviors
from pyfly_memcached.cache.ports.outbound import MemcachedClient
from pyfly_memcached.config.properties.memcached import TransportProperties
from pyfly_memcached.kernel.exceptions import CacheMissError, TransportError


class TestBuildBehaviors:
    def test_defaults(self):
        assert build_behaviors(TransportProperties()) == {
            "tcp_nodelay": False,
            "no_block": False,
            "ketama": True,
        }

    def test_other_distribution(self):
        behaviors = build_behaviors(TransportProperties(distribution="modula"))
        assert behaviors["distribution"] == "modula"
        assert "ketama" not in behaviors

    def test_failover_removes_failed_servers(self):
        behaviors = build_behaviors(TransportProperties(failover=True, no_block=True, tcp_nodelay=True))
        assert behaviors["remove_failed"] == 1
        assert behaviors["no_block"] is True
        assert behaviors["tcp_nodelay"] is True


class TestLibmemcachedClient:
    @pytest.fixture
    def pylibmc(self):
        return pytest.importorskip("pylibmc")

    @pytest.fixture
    def inner(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def client(self, pylibmc, inner):
        from pyfly_memcached.cache.adapters.libmemcached import LibmemcachedClient

        properties = TransportProperties(servers=["10.0.0.1:11211", "10.0.0.2:11211"])
        return LibmemcachedClient(properties, client=inner)

    def test_protocol_compliance(self, client):
        assert isinstance(client, MemcachedClient)

    def test_addresses(self, client):
        assert client.addresses == ["10.0.0.1:11211", "10.0.0.2:11211"]

    def test_get(self, client, inner):
        inner.get.return_value = b"bar"
        assert client.get("foo") == b"bar"
        inner.get.assert_called_once_with("foo")

    def test_get_none_is_a_miss(self, client, inner):
        inner.get.return_value = None
        with pytest.raises(CacheMissError):
            client.get("foo")

    def test_get_integer_value(self, client, inner):
        inner.get.return_value = 42
        assert client.get("counter") == b"42"

    def test_get_multi(self, client, inner):
        inner.get_multi.return_value = {"a": b"1", "b": "2"}
        assert client.get_multi(["a", "b", "c"]) == {"a": b"1", "b": b"2"}
        inner.get_multi.assert_called_once_with(["a", "b", "c"])

    def test_set_passes_ttl(self, client, inner):
        inner.set.return_value = True
        assert client.set("foo", b"bar", 60) is True
        inner.set.assert_called_once_with("foo", b"bar", time=60)

    def test_add_refused(self, client, inner):
        inner.add.return_value = False
        assert client.add("foo", b"bar", 0) is False

    def test_delete_missing(self, client, inner):
        inner.delete.return_value = False
        with pytest.raises(CacheMissError):
            client.delete("foo")

    def test_incr_not_found(self, client, inner, pylibmc):
        inner.incr.side_effect = pylibmc.NotFound("not found")
        with pytest.raises(CacheMissError):
            client.incr("counter")

    def test_decr(self, client, inner):
        inner.decr.return_value = 3
        assert client.decr("counter", 2) == 3
        inner.decr.assert_called_once_with("counter", 2)

    def test_errors_become_transport_errors(self, client, inner, pylibmc):
        inner.get.side_effect = pylibmc.Error("error 47 from memcached_get: SERVER HAS FAILED")
        with pytest.raises(TransportError) as exc_info:
            client.get("foo")
        assert exc_info.value.code == "MEMCACHED_TRANSPORT"
        assert exc_info.value.context["key"] == "foo"
        assert "SERVER HAS FAILED" in str(exc_info.value)

    def test_flush(self, client, inner):
        client.flush()
        inner.flush_all.assert_called_once_with()

    def test_stats(self, client, inner):
        inner.get_stats.return_value = [
            (b"10.0.0.1:11211 (1)", {b"curr_items": b"3"}),
            (b"10.0.0.2:11211 (2)", {b"curr_items": b"0"}),
        ]
        assert client.stats() == {
            "10.0.0.1:11211 (1)": {"curr_items": "3"},
            "10.0.0.2:11211 (2)": {"curr_items": "0"},
        }
