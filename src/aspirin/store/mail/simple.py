# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""In-memory mail store.

This store keeps every message in a plain dictionary. There is no size
bound and nothing survives a restart: with many large messages in flight
memory usage grows without limit. Use an alternative store when that
matters.
"""

from __future__ import annotations

import threading
from typing import Any

from .base import MailStore


class SimpleMailStore(MailStore):
    """Dictionary-backed mail store.

    Safe to share between delivery threads: every access goes through a
    single lock.
    """

    def __init__(self) -> None:
        self._messages: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, mail_id: str) -> Any | None:
        with self._lock:
            return self._messages.get(mail_id)

    def set(self, mail_id: str, message: Any) -> None:
        if mail_id is None:
            raise ValueError("mail_id is required")
        with self._lock:
            self._messages[mail_id] = message

    def remove(self, mail_id: str) -> None:
        with self._lock:
            self._messages.pop(mail_id, None)

    def list_ids(self) -> list[str]:
        with self._lock:
            return list(self._messages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)


__all__ = ["SimpleMailStore"]
