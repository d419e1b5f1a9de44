# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Known configuration parameters and their typed defaults.

Each parameter is described once by an immutable ``Parameter``. The
descriptors are only used when the registry is (re)initialized: they
pick the override for a name, coerce it to the declared type and fall
back to the built-in default.

Override lookup order for a parameter named ``delivery.attempt.count``:

1. the mapping passed to ``Configuration.init()``
2. the process environment, as ``delivery.attempt.count`` or
   ``ASPIRIN_DELIVERY_ATTEMPT_COUNT``
3. the default below
"""

from __future__ import annotations

import configparser
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..errors import TypeCoercionError
from ..logger import DEFAULT_LOGGER_NAME
from ..store.resolver import DEFAULT_MAIL_STORE, DEFAULT_QUEUE_STORE

PARAM_DELIVERY_ATTEMPT_COUNT = "delivery.attempt.count"
PARAM_DELIVERY_ATTEMPT_DELAY = "delivery.attempt.delay"
PARAM_DELIVERY_BOUNCE_ON_FAILURE = "delivery.bounce-on-failure"
PARAM_DELIVERY_DEBUG = "delivery.debug"
PARAM_DELIVERY_EXPIRY = "delivery.expiry"
PARAM_DELIVERY_THREADS_ACTIVE_MAX = "delivery.threads.active.max"
PARAM_DELIVERY_THREADS_IDLE_MAX = "delivery.threads.idle.max"
PARAM_DELIVERY_TIMEOUT = "delivery.timeout"
PARAM_ENCODING = "encoding"
PARAM_HOSTNAME = "hostname"
PARAM_LOGGER_NAME = "logger.name"
PARAM_LOGGER_PREFIX = "logger.prefix"
PARAM_MAILSTORE_CLASS = "mailstore.class"
PARAM_POSTMASTER_EMAIL = "postmaster.email"
PARAM_QUEUESTORE_CLASS = "queuestore.class"

ENV_PREFIX = "ASPIRIN_"

_INT_RANGE = (-(2**31), 2**31 - 1)
_LONG_RANGE = (-(2**63), 2**63 - 1)

# true/false, yes/no, on/off, 1/0
_BOOLEAN_STATES = configparser.ConfigParser.BOOLEAN_STATES


class ParameterType(str, Enum):
    """Value types a parameter can declare."""

    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    BOOLEAN = "boolean"


def env_name(name: str) -> str:
    """Return the environment variable name for a parameter.

    >>> env_name("delivery.bounce-on-failure")
    'ASPIRIN_DELIVERY_BOUNCE_ON_FAILURE'
    """
    return ENV_PREFIX + name.upper().replace(".", "_").replace("-", "_")


@dataclass(frozen=True)
class Parameter:
    """Immutable descriptor of a known parameter.

    Attributes:
        name: Unique parameter key.
        type: Declared value type.
        default: Value used when no override applies. May be None.
        description: Human readable summary, shown by the CLI.
    """

    name: str
    type: ParameterType
    default: Any = None
    description: str = ""

    def coerce(self, value: Any) -> Any:
        """Convert ``value`` to the declared type.

        Strings are parsed; values that already have the right type pass
        through unchanged. None is only accepted for string parameters.

        Raises:
            TypeCoercionError: If the value cannot be converted.
        """
        if self.type is ParameterType.STRING:
            if value is None:
                return None
            return value if isinstance(value, str) else str(value)
        if self.type is ParameterType.BOOLEAN:
            return self._coerce_boolean(value)
        low, high = _INT_RANGE if self.type is ParameterType.INTEGER else _LONG_RANGE
        return self._coerce_integer(value, low, high)

    def extract(self, overrides: Mapping[str, Any], environ: Mapping[str, str]) -> Any:
        """Pick the override for this parameter and coerce it.

        Returns the default when neither source has a value.

        Raises:
            TypeCoercionError: If the chosen override has the wrong type.
        """
        for source, key in ((overrides, self.name), (environ, self.name), (environ, env_name(self.name))):
            if key in source and source[key] is not None:
                return self.coerce(source[key])
        return self.default

    def _coerce_boolean(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            state = _BOOLEAN_STATES.get(value.strip().lower())
            if state is not None:
                return state
        raise TypeCoercionError(self.name, value, "a boolean")

    def _coerce_integer(self, value: Any, low: int, high: int) -> int:
        expected = f"an {self.type.value}" if self.type is ParameterType.INTEGER else f"a {self.type.value}"
        if isinstance(value, bool):
            raise TypeCoercionError(self.name, value, expected)
        if isinstance(value, int):
            number = value
        elif isinstance(value, str):
            try:
                number = int(value.strip())
            except ValueError as exc:
                raise TypeCoercionError(self.name, value, expected) from exc
        else:
            raise TypeCoercionError(self.name, value, expected)
        if not low <= number <= high:
            raise TypeCoercionError(self.name, value, f"{expected} in [{low}, {high}]")
        return number


KNOWN_PARAMETERS: tuple[Parameter, ...] = (
    Parameter(PARAM_DELIVERY_ATTEMPT_COUNT, ParameterType.INTEGER, 3,
              "Maximum number of delivery attempts of a message."),
    Parameter(PARAM_DELIVERY_ATTEMPT_DELAY, ParameterType.INTEGER, 300000,
              "Delay before the next delivery attempt, in milliseconds."),
    Parameter(PARAM_DELIVERY_BOUNCE_ON_FAILURE, ParameterType.BOOLEAN, True,
              "Send a bounce to the postmaster when delivery fails."),
    Parameter(PARAM_DELIVERY_DEBUG, ParameterType.BOOLEAN, False,
              "Log the full SMTP conversation."),
    Parameter(PARAM_DELIVERY_EXPIRY, ParameterType.LONG, -1,
              "Milliseconds after queueing before delivery is abandoned; -1 never expires."),
    Parameter(PARAM_DELIVERY_THREADS_ACTIVE_MAX, ParameterType.INTEGER, 3,
              "Maximum number of active delivery threads."),
    Parameter(PARAM_DELIVERY_THREADS_IDLE_MAX, ParameterType.INTEGER, 3,
              "Maximum number of idle delivery threads kept in the pool."),
    Parameter(PARAM_DELIVERY_TIMEOUT, ParameterType.INTEGER, 30000,
              "Socket connect and I/O timeout, in milliseconds."),
    Parameter(PARAM_ENCODING, ParameterType.STRING, "UTF-8",
              "MIME charset of outgoing messages."),
    Parameter(PARAM_HOSTNAME, ParameterType.STRING, "localhost",
              "Hostname announced to remote servers."),
    Parameter(PARAM_LOGGER_NAME, ParameterType.STRING, DEFAULT_LOGGER_NAME,
              "Name of the logger. Changing it replaces the live logger."),
    Parameter(PARAM_LOGGER_PREFIX, ParameterType.STRING, "Aspirin ",
              "Text put in front of every log message."),
    Parameter(PARAM_MAILSTORE_CLASS, ParameterType.STRING, DEFAULT_MAIL_STORE,
              "Identifier of the mail store implementation."),
    Parameter(PARAM_QUEUESTORE_CLASS, ParameterType.STRING, DEFAULT_QUEUE_STORE,
              "Identifier of the queue store implementation."),
    Parameter(PARAM_POSTMASTER_EMAIL, ParameterType.STRING, None,
              "Email address of the postmaster."),
)

PARAMETERS: dict[str, Parameter] = {p.name: p for p in KNOWN_PARAMETERS}

SESSION_PARAMETERS = frozenset({PARAM_HOSTNAME, PARAM_ENCODING, PARAM_DELIVERY_TIMEOUT, PARAM_DELIVERY_DEBUG})


__all__ = [
    "ENV_PREFIX",
    "KNOWN_PARAMETERS",
    "PARAMETERS",
    "PARAM_DELIVERY_ATTEMPT_COUNT",
    "PARAM_DELIVERY_ATTEMPT_DELAY",
    "PARAM_DELIVERY_BOUNCE_ON_FAILURE",
    "PARAM_DELIVERY_DEBUG",
    "PARAM_DELIVERY_EXPIRY",
    "PARAM_DELIVERY_THREADS_ACTIVE_MAX",
    "PARAM_DELIVERY_THREADS_IDLE_MAX",
    "PARAM_DELIVERY_TIMEOUT",
    "PARAM_ENCODING",
    "PARAM_HOSTNAME",
    "PARAM_LOGGER_NAME",
    "PARAM_LOGGER_PREFIX",
    "PARAM_MAILSTORE_CLASS",
    "PARAM_POSTMASTER_EMAIL",
    "PARAM_QUEUESTORE_CLASS",
    "Parameter",
    "ParameterType",
    "SESSION_PARAMETERS",
    "env_name",
]
