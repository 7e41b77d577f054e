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
"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from pyfly_memcached.config.properties.memcached import LoggingProperties


def configure_logging(properties: LoggingProperties | None = None) -> None:
    """Configure structlog and stdlib logging from :class:`LoggingProperties`.

    ``properties.level`` maps ``root`` and dotted module names to level names,
    e.g. ``{"root": "INFO", "pyfly_memcached.session": "DEBUG"}``.
    ``properties.format`` selects ``json`` lines or the colored ``console``
    renderer.
    """
    properties = properties or LoggingProperties()
    levels = {k: str(v).upper() for k, v in properties.level.items()}
    root_level = getattr(logging, levels.pop("root", "INFO"), logging.INFO)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if properties.format.lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=root_level,
        force=True,
    )

    for module, level in levels.items():
        logging.getLogger(module).setLevel(getattr(logging, level, logging.INFO))


def get_logger(name: str) -> Any:
    """Get a structured logger by name."""
    return structlog.get_logger(name)
