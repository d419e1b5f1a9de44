# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Change notification for configuration parameters.

Listeners are told the name of a parameter after its new value has been
stored. A listener is either a ``ConfigurationChangeListener`` or any
callable taking the parameter name.

Dispatch copies the listener list under the registration lock and calls
the listeners after releasing it. A listener added while an event is being
delivered never receives that event, and a listener removed before a
mutation never receives its notification.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Union

from ..errors import ListenerDispatchError


class ConfigurationChangeListener(ABC):
    """Observer of configuration changes."""

    @abstractmethod
    def config_changed(self, parameter_name: str) -> None:
        """Called after ``parameter_name`` changed."""
        ...


Listener = Union[ConfigurationChangeListener, Callable[[str], None]]


class ChangeNotifier:
    """Ordered list of listeners with synchronous, isolated dispatch.

    Attributes:
        logger: Where notifications and listener failures are reported.
        errors: Failures of the most recent dispatch.
    """

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter | None = None):
        self.logger = logger or logging.getLogger(__name__)
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()
        self.errors: list[ListenerDispatchError] = []

    @property
    def listeners(self) -> tuple[Listener, ...]:
        with self._lock:
            return tuple(self._listeners)

    def add_listener(self, listener: Listener) -> None:
        if listener is None:
            return
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Remove ``listener``. Unknown listeners are ignored."""
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def notify(self, parameter_name: str) -> int:
        """Deliver a change of ``parameter_name`` to every listener.

        Listeners are called in registration order, from the list as it was
        when ``notify`` was entered. The lock is not held while listeners
        run, so a listener may itself mutate the configuration. A listener
        that raises is logged and skipped; the remaining listeners still run.

        Returns:
            Number of listeners notified successfully.
        """
        with self._lock:
            listeners = list(self._listeners)
        if not listeners:
            return 0

        self.logger.info("Configuration parameter '%s' changed.", parameter_name)
        errors: list[ListenerDispatchError] = []
        delivered = 0
        for listener in listeners:
            try:
                if isinstance(listener, ConfigurationChangeListener):
                    listener.config_changed(parameter_name)
                else:
                    listener(parameter_name)
            except Exception as exc:
                error = ListenerDispatchError(listener, parameter_name)
                error.__cause__ = exc
                errors.append(error)
                self.logger.error("%s", error, exc_info=True)
            else:
                delivered += 1
        self.errors = errors
        return delivered


__all__ = ["ChangeNotifier", "ConfigurationChangeListener", "Listener"]
