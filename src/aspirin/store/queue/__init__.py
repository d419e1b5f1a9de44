# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Queue store contract and its in-memory implementation."""

from .base import QueueStore
from .simple import SimpleQueueStore

__all__ = ["QueueStore", "SimpleQueueStore"]
