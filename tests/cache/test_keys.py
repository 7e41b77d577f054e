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
"""Tests for cache key normalization."""

from pyfly_memcached.cache.keys import expand_cache_key, namespaced_key


class _Record:
    def __init__(self, key: str) -> None:
        self._key = key

    def cache_key(self) -> str:
        return self._key


class _Tagged:
    cache_key = "tagged/1"


class TestExpandCacheKey:
    def test_strings_pass_through_unchanged(self):
        assert expand_cache_key("Foo Bar") == "Foo Bar"

    def test_bytes_are_decoded(self):
        assert expand_cache_key(b"foo") == "foo"

    def test_object_with_cache_key_method(self):
        assert expand_cache_key(_Record("users/42")) == "users/42"

    def test_object_with_cache_key_attribute(self):
        assert expand_cache_key(_Tagged()) == "tagged/1"

    def test_list_joins_segments_with_slash(self):
        assert expand_cache_key(["fu", "foo"]) == "fu/foo"

    def test_tuple_normalizes_nested_segments(self):
        assert expand_cache_key(("views", _Record("users/42"), 7)) == "views/users/42/7"

    def test_dict_becomes_ordered_field_value_segments(self):
        assert expand_cache_key({"fu": 2, "foo": 1}) == "foo=1/fu=2"

    def test_other_objects_use_str(self):
        assert expand_cache_key(42) == "42"

    def test_crazy_characters_are_preserved(self):
        crazy = "#/:*(<+=> )&$%@?;'\"`~-"
        assert expand_cache_key(crazy) == crazy


class TestNamespacedKey:
    def test_prefix_is_prepended_verbatim(self):
        assert namespaced_key(["a", "b"], "app:") == "app:a/b"

    def test_empty_prefix(self):
        assert namespaced_key("key") == "key"
