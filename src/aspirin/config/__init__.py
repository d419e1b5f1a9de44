# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration registry, change notification and session derivation."""

from .notifier import ChangeNotifier, ConfigurationChangeListener
from .parameters import KNOWN_PARAMETERS, PARAMETERS, SESSION_PARAMETERS, Parameter, ParameterType
from .registry import Configuration, get_configuration
from .session import SessionBuilder, SessionSnapshot

__all__ = [
    "ChangeNotifier",
    "Configuration",
    "ConfigurationChangeListener",
    "KNOWN_PARAMETERS",
    "PARAMETERS",
    "Parameter",
    "ParameterType",
    "SESSION_PARAMETERS",
    "SessionBuilder",
    "SessionSnapshot",
    "get_configuration",
]
