# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration loader for parameter overrides.

Overrides can be kept in an INI-style file, one parameter per line, under
an ``[aspirin]`` section. Values stay strings; typing happens when the
overrides are passed to ``Configuration.init()``.

Example:
    Configuration file format (config.ini)::

        [aspirin]
        delivery.attempt.count = 5
        delivery.debug = yes
        hostname = mx.example.com
        postmaster.email = postmaster@example.com

    Loading it::

        overrides = load_overrides("/etc/aspirin/config.ini")
        configuration = Configuration(overrides)
"""

from __future__ import annotations

import configparser
from pathlib import Path

from .logger import get_logger

DEFAULT_SECTION = "aspirin"

logger = get_logger("ConfigLoader")


def load_overrides(config_path: str | Path, section: str = DEFAULT_SECTION) -> dict[str, str]:
    """Read parameter overrides from a config file.

    Args:
        config_path: Path to the INI file.
        section: Section holding the parameters.

    Returns:
        Mapping of parameter name to raw string value. Empty if the
        section is missing.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
    """
    if not Path(config_path).exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    config = configparser.ConfigParser(interpolation=None)
    config.read(config_path)

    if not config.has_section(section):
        logger.info(f"No [{section}] section in {config_path}, using defaults")
        return {}

    overrides = {key: value.strip() for key, value in config.items(section, raw=True)}
    logger.info(f"Loaded {len(overrides)} overrides from {config_path}")
    return overrides


__all__ = ["DEFAULT_SECTION", "load_overrides"]
