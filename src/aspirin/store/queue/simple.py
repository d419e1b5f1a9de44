# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""In-memory queue store, the default for ``queuestore.class``."""

from __future__ import annotations

import threading
from typing import Any

from .base import QueueStore


class SimpleQueueStore(QueueStore):
    """Dictionary-backed queue store guarded by a single lock."""

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, mail_id: str) -> Any | None:
        with self._lock:
            return self._entries.get(mail_id)

    def set(self, mail_id: str, entry: Any) -> None:
        if mail_id is None:
            raise ValueError("mail_id is required")
        with self._lock:
            self._entries[mail_id] = entry

    def remove(self, mail_id: str) -> None:
        with self._lock:
            self._entries.pop(mail_id, None)

    def list_ids(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["SimpleQueueStore"]
