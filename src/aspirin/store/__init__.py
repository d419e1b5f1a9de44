# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pluggable message and queue stores.

Components:
    MailStore / QueueStore: Abstract contracts for alternative backends.
    SimpleMailStore / SimpleQueueStore: In-memory baseline implementations.
    StoreResolver: Lazily builds the configured backend, with fallback.
    store_factories: Process-wide table of identifier to factory.
"""

from .mail import MailStore, SimpleMailStore
from .queue import QueueStore, SimpleQueueStore
from .resolver import (
    DEFAULT_MAIL_STORE,
    DEFAULT_QUEUE_STORE,
    MAIL,
    QUEUE,
    StoreFactoryRegistry,
    StoreResolver,
    class_identifier,
    store_factories,
)

__all__ = [
    "DEFAULT_MAIL_STORE",
    "DEFAULT_QUEUE_STORE",
    "MAIL",
    "QUEUE",
    "MailStore",
    "QueueStore",
    "SimpleMailStore",
    "SimpleQueueStore",
    "StoreFactoryRegistry",
    "StoreResolver",
    "class_identifier",
    "store_factories",
]
