# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration core of the Aspirin mail delivery subsystem.

This package holds the live, mutable configuration shared by the delivery
threads, the management interface and the store resolver, together with
the in-memory reference implementation of the pluggable stores.

Components:
    Configuration: Typed parameter registry with immediate-effect setters.
    ChangeNotifier: Ordered listener list notified after each change.
    SessionSnapshot: Transport settings derived from the configuration.
    StoreResolver: Lazy, cached resolution of the mail and queue stores.
    SimpleMailStore: In-memory baseline mail store.

Example:
    ::

        from aspirin import Configuration

        configuration = Configuration({"hostname": "mx.example.com"})
        configuration.set_delivery_attempt_count(5)
        store = configuration.get_mail_store()
        store.set("m1", message)
"""

from .config import (
    ChangeNotifier,
    Configuration,
    ConfigurationChangeListener,
    SessionBuilder,
    SessionSnapshot,
    get_configuration,
)
from .errors import (
    AddressParseError,
    AspirinError,
    BackendResolutionError,
    ListenerDispatchError,
    TypeCoercionError,
)
from .store import MailStore, QueueStore, SimpleMailStore, SimpleQueueStore, StoreResolver, store_factories

__all__ = [
    "AddressParseError",
    "AspirinError",
    "BackendResolutionError",
    "ChangeNotifier",
    "Configuration",
    "ConfigurationChangeListener",
    "ListenerDispatchError",
    "MailStore",
    "QueueStore",
    "SessionBuilder",
    "SessionSnapshot",
    "SimpleMailStore",
    "SimpleQueueStore",
    "StoreResolver",
    "TypeCoercionError",
    "get_configuration",
    "store_factories",
]
