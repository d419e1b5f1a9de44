# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Abstract interface for pluggable mail stores.

A mail store keeps message payloads (usually ``email.message.EmailMessage``
objects) keyed by a caller-supplied message identifier. Identifiers are
opaque, unique strings; a store never generates them.

Alternative implementations are selected by the ``mailstore.class``
parameter and must be constructible without arguments.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class MailStore(ABC):
    """Abstract base class for mail stores."""

    def init(self) -> None:
        """Prepare the store after construction. Default does nothing."""

    @abstractmethod
    def get(self, mail_id: str) -> Any | None:
        """Return the payload stored under ``mail_id`` or None."""
        ...

    @abstractmethod
    def set(self, mail_id: str, message: Any) -> None:
        """Store ``message`` under ``mail_id``, replacing any previous payload."""
        ...

    @abstractmethod
    def remove(self, mail_id: str) -> None:
        """Drop ``mail_id``. Missing identifiers are ignored."""
        ...

    @abstractmethod
    def list_ids(self) -> list[str]:
        """Return the identifiers currently stored, in no particular order."""
        ...


__all__ = ["MailStore"]
