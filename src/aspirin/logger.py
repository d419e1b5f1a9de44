# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Logging utilities for the configuration core.

Handlers, levels and formats are set up by the entry point with
``logging.basicConfig()``; this module only hands out loggers.

Example:
    Typical usage in a module::

        from aspirin.logger import get_logger

        logger = get_logger("MyModule")
        logger.info("Operation completed")
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

DEFAULT_LOGGER_NAME = "Aspirin"


def get_logger(name: str | None = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Retrieve a logger instance.

    Args:
        name: The logger name. Defaults to "Aspirin". An empty name falls
            back to the default rather than to the root logger.

    Returns:
        A ``logging.Logger`` instance bound to the given name.
    """
    return logging.getLogger(name or DEFAULT_LOGGER_NAME)


class PrefixedLogger(logging.LoggerAdapter):
    """Logger adapter that puts a fixed prefix in front of every message.

    Example:
        >>> log = PrefixedLogger(get_logger("smtp"), "Aspirin ")
        >>> log.info("delivered")  # logs "Aspirin delivered"
    """

    def __init__(self, logger: logging.Logger, prefix: str | None):
        super().__init__(logger, {})
        self.prefix = prefix or ""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{self.prefix}{msg}", kwargs


__all__ = ["DEFAULT_LOGGER_NAME", "PrefixedLogger", "get_logger"]
