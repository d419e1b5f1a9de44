# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Dynamically mutable configuration of the mail delivery subsystem.

``Configuration`` holds the typed parameters listed in
``aspirin.config.parameters`` and exposes a get/set pair for each of
them. Every setter takes effect immediately: the value is stored, the
transport session snapshot is rebuilt when the parameter contributes to
it, and the registered listeners are told the parameter name.

Parameters outside the known set can be kept with ``set_property`` in a
separate, untyped map.

Example:
    Configure and observe::

        from aspirin.config import Configuration

        configuration = Configuration({"delivery.attempt.count": "5"})
        configuration.add_listener(lambda name: print("changed", name))
        configuration.set_hostname("mx.example.com")
        session = configuration.get_mail_session()

Concurrency:
    Each known parameter has its own re-entrant lock held across store,
    session rebuild and notification. Session-relevant values and the
    snapshot are additionally guarded by a session lock, so a reader never
    observes a new value next to a stale snapshot. Notification happens
    after the session lock is released. A session value the snapshot
    cannot accept is logged and rejected; the previous value stays.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Callable, Mapping
from email.headerregistry import Address
from typing import Any

from pydantic import ValidationError

from ..errors import AddressParseError, AspirinError, TypeCoercionError
from ..logger import PrefixedLogger, get_logger
from ..store import MAIL, QUEUE, MailStore, QueueStore, StoreFactoryRegistry, StoreResolver
from .address import parse_address
from .notifier import ChangeNotifier, Listener
from .parameters import (
    KNOWN_PARAMETERS,
    PARAM_DELIVERY_ATTEMPT_COUNT,
    PARAM_DELIVERY_ATTEMPT_DELAY,
    PARAM_DELIVERY_BOUNCE_ON_FAILURE,
    PARAM_DELIVERY_DEBUG,
    PARAM_DELIVERY_EXPIRY,
    PARAM_DELIVERY_THREADS_ACTIVE_MAX,
    PARAM_DELIVERY_THREADS_IDLE_MAX,
    PARAM_DELIVERY_TIMEOUT,
    PARAM_ENCODING,
    PARAM_HOSTNAME,
    PARAM_LOGGER_NAME,
    PARAM_LOGGER_PREFIX,
    PARAM_MAILSTORE_CLASS,
    PARAM_POSTMASTER_EMAIL,
    PARAM_QUEUESTORE_CLASS,
    PARAMETERS,
    SESSION_PARAMETERS,
)
from .session import SessionBuilder, SessionSnapshot


class Configuration:
    """Registry of the current parameter values.

    Args:
        overrides: Initial overrides, see ``init``.
        environ: Process-wide override source. Defaults to ``os.environ``.
        session_builder: Builder for the transport session snapshot.
        factories: Store factory table used by the store resolver.

    Attributes:
        init_errors: Errors recovered during the last ``init``.
        postmaster_error: Why the last postmaster update was rejected.
        notifier: Listener registry.
        stores: Resolver of the mail and queue stores.
        session_builder: Builder of the session snapshot.
    """

    def __init__(
        self,
        overrides: Mapping[str, Any] | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        session_builder: SessionBuilder | None = None,
        factories: StoreFactoryRegistry | None = None,
    ):
        self._environ = os.environ if environ is None else environ
        self._values: dict[str, Any] = {}
        self._extensions: dict[str, Any] = {}
        self._extensions_lock = threading.Lock()
        self._param_locks = {name: threading.RLock() for name in PARAMETERS}
        self._session_lock = threading.RLock()
        self._session: SessionSnapshot | None = None
        self._logger = PrefixedLogger(get_logger(), "")
        self.postmaster: Address | None = None
        self.postmaster_error: AddressParseError | None = None
        self.init_errors: list[AspirinError] = []
        self.notifier = ChangeNotifier(self._logger)
        self.stores = StoreResolver(self, factories)
        self.session_builder = session_builder or SessionBuilder()
        self._setters: dict[str, Callable[[Any], None]] = {
            PARAM_DELIVERY_ATTEMPT_COUNT: self.set_delivery_attempt_count,
            PARAM_DELIVERY_ATTEMPT_DELAY: self.set_delivery_attempt_delay,
            PARAM_DELIVERY_BOUNCE_ON_FAILURE: self.set_delivery_bounce_on_failure,
            PARAM_DELIVERY_DEBUG: self.set_delivery_debug,
            PARAM_DELIVERY_EXPIRY: self.set_delivery_expiry,
            PARAM_DELIVERY_THREADS_ACTIVE_MAX: self.set_delivery_threads_active_max,
            PARAM_DELIVERY_THREADS_IDLE_MAX: self.set_delivery_threads_idle_max,
            PARAM_DELIVERY_TIMEOUT: self.set_delivery_timeout,
            PARAM_ENCODING: self.set_encoding,
            PARAM_HOSTNAME: self.set_hostname,
            PARAM_LOGGER_NAME: self.set_logger_name,
            PARAM_LOGGER_PREFIX: self.set_logger_prefix,
            PARAM_MAILSTORE_CLASS: self.set_mail_store_class_name,
            PARAM_POSTMASTER_EMAIL: self.set_postmaster_email,
            PARAM_QUEUESTORE_CLASS: self.set_queue_store_class_name,
        }
        self.init(overrides)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def init(self, overrides: Mapping[str, Any] | None = None) -> None:
        """Reseed every known parameter and reset derived state.

        For each parameter the value comes from ``overrides``, then from the
        process environment, then from the built-in default. A value that
        cannot be coerced to the declared type is logged, recorded in
        ``init_errors`` and replaced by the default. Extension parameters
        are dropped and cached stores are discarded. No listener is
        notified.
        """
        overrides = overrides or {}
        values: dict[str, Any] = {}
        errors: list[AspirinError] = []
        for parameter in KNOWN_PARAMETERS:
            try:
                values[parameter.name] = parameter.extract(overrides, self._environ)
            except TypeCoercionError as exc:
                errors.append(exc)
                values[parameter.name] = parameter.default

        postmaster = None
        raw_postmaster = values[PARAM_POSTMASTER_EMAIL]
        if raw_postmaster is not None:
            try:
                postmaster = parse_address(raw_postmaster)
            except AddressParseError as exc:
                errors.append(exc)
                values[PARAM_POSTMASTER_EMAIL] = None

        with self._session_lock:
            self._values = values
            with self._extensions_lock:
                self._extensions.clear()
            self._replace_logger()
            self.postmaster = postmaster
            self.postmaster_error = None
            self.init_errors = errors
            self.stores.invalidate(MAIL)
            self.stores.invalidate(QUEUE)
            self._session = self.session_builder.rebuild(self)

        for error in errors:
            self._logger.warning("init(): %s; default kept.", error)

    # -------------------------------------------------------------------------
    # Generic access
    # -------------------------------------------------------------------------

    def get_property(self, name: str) -> Any:
        """Return the value of a known or extension parameter, or None."""
        if name in PARAMETERS:
            return self._get(name)
        with self._extensions_lock:
            return self._extensions.get(name)

    def set_property(self, name: str, value: Any) -> None:
        """Set a parameter by name.

        Unknown names are stored as-is in the extension map without any
        notification. Known names are coerced and routed to their typed
        setter; a value of the wrong type is logged and ignored.
        """
        parameter = PARAMETERS.get(name)
        if parameter is None:
            with self._extensions_lock:
                self._extensions[name] = value
            return
        try:
            value = parameter.coerce(value)
        except TypeCoercionError as exc:
            self._logger.error("set_property(): %s", exc)
            return
        self._setters[name](value)

    def extension_names(self) -> list[str]:
        with self._extensions_lock:
            return sorted(self._extensions)

    def snapshot(self) -> dict[str, Any]:
        """Return the current values of all known parameters."""
        with self._session_lock:
            return dict(self._values)

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        self.notifier.add_listener(listener)

    def remove_listener(self, listener: Listener) -> None:
        self.notifier.remove_listener(listener)

    # -------------------------------------------------------------------------
    # Delivery
    # -------------------------------------------------------------------------

    def get_delivery_attempt_count(self) -> int:
        return self._get(PARAM_DELIVERY_ATTEMPT_COUNT)

    def set_delivery_attempt_count(self, attempt_count: int) -> None:
        """Maximum number of delivery attempts. Applied immediately."""
        self._update(PARAM_DELIVERY_ATTEMPT_COUNT, attempt_count)

    def get_delivery_attempt_delay(self) -> int:
        return self._get(PARAM_DELIVERY_ATTEMPT_DELAY)

    def set_delivery_attempt_delay(self, delay: int) -> None:
        """Delay of the next attempt in milliseconds. Applied immediately."""
        self._update(PARAM_DELIVERY_ATTEMPT_DELAY, delay)

    def is_delivery_bounce_on_failure(self) -> bool:
        return self._get(PARAM_DELIVERY_BOUNCE_ON_FAILURE)

    def set_delivery_bounce_on_failure(self, bounce: bool) -> None:
        """Send a bounce to the postmaster on failure. Applied immediately."""
        self._update(PARAM_DELIVERY_BOUNCE_ON_FAILURE, bounce)

    def is_delivery_debug(self) -> bool:
        return self._get(PARAM_DELIVERY_DEBUG)

    def set_delivery_debug(self, debug: bool) -> None:
        """Trace the SMTP conversation. Applied immediately."""
        self._update(PARAM_DELIVERY_DEBUG, debug)

    def get_delivery_expiry(self) -> int:
        return self._get(PARAM_DELIVERY_EXPIRY)

    def set_delivery_expiry(self, expiry: int) -> None:
        """Sending expiry in milliseconds, -1 for none. Applied immediately."""
        self._update(PARAM_DELIVERY_EXPIRY, expiry)

    def get_delivery_threads_active_max(self) -> int:
        return self._get(PARAM_DELIVERY_THREADS_ACTIVE_MAX)

    def set_delivery_threads_active_max(self, active_max: int) -> None:
        """Maximum active delivery threads. Applied immediately."""
        self._update(PARAM_DELIVERY_THREADS_ACTIVE_MAX, active_max)

    def get_delivery_threads_idle_max(self) -> int:
        return self._get(PARAM_DELIVERY_THREADS_IDLE_MAX)

    def set_delivery_threads_idle_max(self, idle_max: int) -> None:
        """Maximum idle delivery threads. Applied immediately."""
        self._update(PARAM_DELIVERY_THREADS_IDLE_MAX, idle_max)

    def get_delivery_timeout(self) -> int:
        return self._get(PARAM_DELIVERY_TIMEOUT)

    def set_delivery_timeout(self, timeout: int) -> None:
        """Socket and transport timeout in milliseconds. Applied immediately."""
        self._update(PARAM_DELIVERY_TIMEOUT, timeout)

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def get_encoding(self) -> str | None:
        return self._get(PARAM_ENCODING)

    def set_encoding(self, encoding: str | None) -> None:
        """MIME encoding. Applied immediately."""
        self._update(PARAM_ENCODING, encoding)

    def get_hostname(self) -> str | None:
        return self._get(PARAM_HOSTNAME)

    def set_hostname(self, hostname: str | None) -> None:
        """Hostname. Applied immediately."""
        self._update(PARAM_HOSTNAME, hostname)

    def get_postmaster(self) -> Address | None:
        """Return the parsed postmaster address, or None if unset."""
        return self.postmaster

    def get_postmaster_email(self) -> str | None:
        postmaster = self.postmaster
        return str(postmaster) if postmaster is not None else None

    def set_postmaster_email(self, email_address: str | None) -> None:
        """Postmaster address. Applied immediately.

        None clears the postmaster without notification. An unparseable
        address is logged and ignored; the previous postmaster stays.
        """
        with self._param_locks[PARAM_POSTMASTER_EMAIL]:
            if email_address is None:
                self.postmaster = None
                self._values[PARAM_POSTMASTER_EMAIL] = None
                return
            try:
                address = parse_address(email_address)
            except AddressParseError as exc:
                self.postmaster_error = exc
                self._logger.error("set_postmaster_email(): %s", exc)
                return
            self.postmaster = address
            self.postmaster_error = None
            self._values[PARAM_POSTMASTER_EMAIL] = email_address
            self.notifier.notify(PARAM_POSTMASTER_EMAIL)

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    def get_logger_name(self) -> str | None:
        return self._get(PARAM_LOGGER_NAME)

    def set_logger_name(self, logger_name: str | None) -> None:
        """Logger name. Applied immediately; the live logger is replaced."""
        self._update(PARAM_LOGGER_NAME, logger_name, self._replace_logger)

    def get_logger_prefix(self) -> str | None:
        return self._get(PARAM_LOGGER_PREFIX)

    def set_logger_prefix(self, logger_prefix: str | None) -> None:
        """Text in front of every log message. Applied immediately."""
        self._update(PARAM_LOGGER_PREFIX, logger_prefix, self._replace_logger)

    def get_logger(self) -> PrefixedLogger:
        """Return the live logger, prefixed with ``logger.prefix``."""
        return self._logger

    # -------------------------------------------------------------------------
    # Stores
    # -------------------------------------------------------------------------

    def get_mail_store_class_name(self) -> str | None:
        return self._get(PARAM_MAILSTORE_CLASS)

    def set_mail_store_class_name(self, class_name: str | None) -> None:
        """Mail store identifier. The cached store is discarded."""
        self._update(PARAM_MAILSTORE_CLASS, class_name, lambda: self.stores.invalidate(MAIL))

    def get_queue_store_class_name(self) -> str | None:
        return self._get(PARAM_QUEUESTORE_CLASS)

    def set_queue_store_class_name(self, class_name: str | None) -> None:
        """Queue store identifier. The cached store is discarded."""
        self._update(PARAM_QUEUESTORE_CLASS, class_name, lambda: self.stores.invalidate(QUEUE))

    def get_mail_store(self) -> MailStore:
        return self.stores.get_mail_store()

    def set_mail_store(self, mail_store: MailStore | None) -> None:
        """Use ``mail_store`` directly, bypassing identifier resolution."""
        with self._param_locks[PARAM_MAILSTORE_CLASS]:
            self.stores.set_mail_store(mail_store)
            self.notifier.notify(PARAM_MAILSTORE_CLASS)

    def get_queue_store(self) -> QueueStore:
        return self.stores.get_queue_store()

    def set_queue_store(self, queue_store: QueueStore | None) -> None:
        """Use ``queue_store`` directly, bypassing identifier resolution."""
        with self._param_locks[PARAM_QUEUESTORE_CLASS]:
            self.stores.set_queue_store(queue_store)
            self.notifier.notify(PARAM_QUEUESTORE_CLASS)

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    def get_mail_session(self) -> SessionSnapshot:
        """Return the transport session snapshot for the current values."""
        with self._session_lock:
            return self._session

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _get(self, name: str) -> Any:
        if name in SESSION_PARAMETERS:
            with self._session_lock:
                return self._values.get(name)
        return self._values.get(name)

    def _update(self, name: str, value: Any, on_change: Callable[[], None] | None = None) -> None:
        with self._param_locks[name]:
            if name in SESSION_PARAMETERS:
                with self._session_lock:
                    previous = self._values.get(name)
                    self._values[name] = value
                    try:
                        self._session = self.session_builder.rebuild(self)
                    except ValidationError as exc:
                        self._values[name] = previous
                        self._logger.error("%s: %r rejected, previous value kept: %s", name, value, exc)
                        return
            else:
                self._values[name] = value
            if on_change is not None:
                on_change()
            self.notifier.notify(name)

    def _replace_logger(self) -> None:
        self._logger = PrefixedLogger(
            get_logger(self._values.get(PARAM_LOGGER_NAME)),
            self._values.get(PARAM_LOGGER_PREFIX),
        )
        self.notifier.logger = self._logger


_instance: Configuration | None = None
_instance_lock = threading.Lock()


def get_configuration() -> Configuration:
    """Return the shared configuration, creating it on first use."""
    global _instance
    if _instance is None:
        with _instance_lock:
            if _instance is None:
                _instance = Configuration()
    return _instance


__all__ = ["Configuration", "get_configuration"]
