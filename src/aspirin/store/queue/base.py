# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Abstract interface for pluggable queue stores.

A queue store keeps the delivery state of queued messages (an opaque
entry owned by the delivery scheduler) keyed by message identifier. It
mirrors the mail store contract; how entries are interpreted is up to
the delivery collaborator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class QueueStore(ABC):
    """Abstract base class for queue stores."""

    def init(self) -> None:
        """Prepare the store after construction. Default does nothing."""

    @abstractmethod
    def get(self, mail_id: str) -> Any | None:
        """Return the queue entry for ``mail_id`` or None."""
        ...

    @abstractmethod
    def set(self, mail_id: str, entry: Any) -> None:
        """Store ``entry`` for ``mail_id``, replacing any previous entry."""
        ...

    @abstractmethod
    def remove(self, mail_id: str) -> None:
        """Drop ``mail_id``. Missing identifiers are ignored."""
        ...

    @abstractmethod
    def list_ids(self) -> list[str]:
        """Return the queued identifiers, in no particular order."""
        ...


__all__ = ["QueueStore"]
