# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Lazy resolution of the pluggable mail and queue stores.

The configured store is named by an identifier held in the
``mailstore.class`` / ``queuestore.class`` parameters. Identifiers are
looked up in an explicit factory table first; an identifier that was never
registered is treated as a dotted import path (``pkg.module.Class`` or
``pkg.module:Class``) of a zero-argument callable.

Resolution never fails from the caller's point of view: when the store
cannot be built, the error is logged, kept for inspection, and the
in-memory baseline store is used instead.

Example:
    Registering an alternative mail store::

        from aspirin.store import store_factories

        store_factories.register("mail", "redis", RedisMailStore)
        configuration.set_mail_store_class_name("redis")
        store = configuration.get_mail_store()
"""

from __future__ import annotations

import importlib
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..errors import BackendResolutionError
from .mail import MailStore, SimpleMailStore
from .queue import QueueStore, SimpleQueueStore

if TYPE_CHECKING:
    from ..config.registry import Configuration

StoreFactory = Callable[[], Any]

MAIL = "mail"
QUEUE = "queue"


def class_identifier(cls: type) -> str:
    """Return the fully-qualified identifier of a class."""
    return f"{cls.__module__}.{cls.__qualname__}"


DEFAULT_MAIL_STORE = class_identifier(SimpleMailStore)
DEFAULT_QUEUE_STORE = class_identifier(SimpleQueueStore)


@dataclass(frozen=True)
class StoreKind:
    """What the resolver needs to know about one kind of store."""

    name: str
    parameter: str
    interface: type
    default: StoreFactory


MAIL_STORE_KIND = StoreKind(MAIL, "mailstore.class", MailStore, SimpleMailStore)
QUEUE_STORE_KIND = StoreKind(QUEUE, "queuestore.class", QueueStore, SimpleQueueStore)

_KINDS = {MAIL: MAIL_STORE_KIND, QUEUE: QUEUE_STORE_KIND}


def _import_factory(kind: str, identifier: str) -> StoreFactory:
    """Import the callable named by a dotted path."""
    if ":" in identifier:
        module_name, _, attr = identifier.partition(":")
    else:
        module_name, _, attr = identifier.rpartition(".")
    if not module_name or not attr:
        raise BackendResolutionError(kind, identifier, "not a dotted import path")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise BackendResolutionError(kind, identifier, f"module '{module_name}' not found") from exc
    except Exception as exc:
        raise BackendResolutionError(kind, identifier, f"importing '{module_name}' failed: {exc}") from exc
    factory = module
    for part in attr.split("."):
        try:
            factory = getattr(factory, part)
        except AttributeError as exc:
            raise BackendResolutionError(kind, identifier, f"'{part}' not found in '{module_name}'") from exc
    if not callable(factory):
        raise BackendResolutionError(kind, identifier, "not callable")
    return factory


class StoreFactoryRegistry:
    """Explicit table of store identifiers to zero-argument factories.

    The baseline stores are registered under their class identifiers, so
    the default parameter values resolve without any import machinery.
    """

    def __init__(self) -> None:
        self._factories: dict[str, dict[str, StoreFactory]] = {MAIL: {}, QUEUE: {}}
        self._lock = threading.Lock()
        self.register(MAIL, DEFAULT_MAIL_STORE, SimpleMailStore)
        self.register(QUEUE, DEFAULT_QUEUE_STORE, SimpleQueueStore)

    def register(self, kind: str, identifier: str, factory: StoreFactory) -> None:
        """Register ``factory`` as the constructor for ``identifier``."""
        if kind not in self._factories:
            raise ValueError(f"Unknown store kind '{kind}'")
        with self._lock:
            self._factories[kind][identifier] = factory

    def unregister(self, kind: str, identifier: str) -> None:
        with self._lock:
            self._factories.get(kind, {}).pop(identifier, None)

    def registered(self, kind: str) -> list[str]:
        with self._lock:
            return sorted(self._factories.get(kind, {}))

    def lookup(self, kind: str, identifier: str) -> StoreFactory:
        """Return the factory for ``identifier``, importing it if unregistered.

        Raises:
            BackendResolutionError: If the identifier names nothing usable.
        """
        with self._lock:
            factory = self._factories.get(kind, {}).get(identifier)
        if factory is not None:
            return factory
        return _import_factory(kind, identifier)


store_factories = StoreFactoryRegistry()


class StoreResolver:
    """Builds, caches and hands out one store instance per kind.

    The cache for a kind lives until the matching class-name parameter
    changes (``invalidate``) or a store is injected directly.

    Attributes:
        factories: Factory table used for identifier lookup.
    """

    def __init__(self, configuration: Configuration, factories: StoreFactoryRegistry | None = None):
        self._configuration = configuration
        self.factories = factories or store_factories
        self._instances: dict[str, Any] = {}
        self._errors: dict[str, BackendResolutionError | None] = {MAIL: None, QUEUE: None}
        self._lock = threading.RLock()

    def get_mail_store(self) -> MailStore:
        return self._resolve(MAIL_STORE_KIND)

    def get_queue_store(self) -> QueueStore:
        return self._resolve(QUEUE_STORE_KIND)

    def set_mail_store(self, store: MailStore | None) -> None:
        self._inject(MAIL_STORE_KIND, store)

    def set_queue_store(self, store: QueueStore | None) -> None:
        self._inject(QUEUE_STORE_KIND, store)

    def invalidate(self, kind: str) -> None:
        """Drop the cached store so the next access resolves it again."""
        with self._lock:
            self._instances.pop(kind, None)

    def last_error(self, kind: str) -> BackendResolutionError | None:
        """Return why the last resolution of ``kind`` fell back, if it did."""
        with self._lock:
            return self._errors.get(kind)

    def is_cached(self, kind: str) -> bool:
        with self._lock:
            return kind in self._instances

    def _inject(self, kind: StoreKind, store: Any) -> None:
        with self._lock:
            if store is None:
                self._instances.pop(kind.name, None)
            else:
                self._instances[kind.name] = store
            self._errors[kind.name] = None

    def _resolve(self, kind: StoreKind) -> Any:
        with self._lock:
            store = self._instances.get(kind.name)
            if store is None:
                store = self._instantiate(kind)
                self._instances[kind.name] = store
            return store

    def _instantiate(self, kind: StoreKind) -> Any:
        identifier = self._configuration.get_property(kind.parameter)
        try:
            store = self._construct(kind, identifier)
        except BackendResolutionError as exc:
            self._errors[kind.name] = exc
            self._configuration.get_logger().error(
                "%s; falling back to %s", exc, class_identifier(kind.default), exc_info=True
            )
            return kind.default()
        self._errors[kind.name] = None
        return store

    def _construct(self, kind: StoreKind, identifier: str | None) -> Any:
        if not identifier:
            return kind.default()

        try:
            factory = self.factories.lookup(kind.name, identifier)
        except BackendResolutionError:
            raise
        except Exception as exc:
            raise BackendResolutionError(kind.name, identifier, f"lookup failed: {exc}") from exc
        try:
            store = factory()
        except Exception as exc:
            raise BackendResolutionError(kind.name, identifier, f"construction failed: {exc}") from exc

        if not isinstance(store, kind.interface):
            raise BackendResolutionError(
                kind.name,
                identifier,
                f"{type(store).__name__} does not implement {kind.interface.__name__}",
            )

        try:
            store.init()
        except Exception as exc:
            raise BackendResolutionError(kind.name, identifier, f"init() failed: {exc}") from exc
        return store


__all__ = [
    "DEFAULT_MAIL_STORE",
    "DEFAULT_QUEUE_STORE",
    "MAIL",
    "QUEUE",
    "StoreFactoryRegistry",
    "StoreKind",
    "StoreResolver",
    "class_identifier",
    "store_factories",
]
