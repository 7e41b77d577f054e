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
"""Session store protocol."""

from __future__ import annotations

from typing import Any, Literal, Protocol, runtime_checkable


@runtime_checkable
class SessionStore(Protocol):
    """Abstract session persistence interface used by the request-handling layer.

    Implementations never raise for backend failures: loads degrade to an
    empty session, saves to ``False`` and destroys to ``None``.
    """

    def generate_sid(self) -> str: ...

    def get_session(self, sid: str | None) -> tuple[str, dict[str, Any]]: ...

    def set_session(
        self, sid: str, session: dict[str, Any], *, expire_after: int | None = ...
    ) -> str | Literal[False]: ...

    def destroy_session(self, sid: str, *, drop: bool = False) -> str | None: ...
