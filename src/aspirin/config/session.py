# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Transport session settings derived from the configuration.

The SMTP transport never reads the registry directly. It receives a
``SessionSnapshot`` built from four parameters (hostname, encoding,
delivery.timeout and delivery.debug). The registry rebuilds the snapshot
whenever one of them changes, so a snapshot handed out is never stale
with respect to those values.

Example:
    Opening a transport from the current snapshot::

        session = configuration.get_mail_session()
        smtp = session.smtp_client(port=25)
        await smtp.connect()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

import aiosmtplib
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .registry import Configuration

MAIL_SMTP_HOST = "mail.smtp.host"
MAIL_SMTP_LOCALHOST = "mail.smtp.localhost"
MAIL_MIME_CHARSET = "mail.mime.charset"
MAIL_SMTP_CONNECTIONTIMEOUT = "mail.smtp.connectiontimeout"
MAIL_SMTP_TIMEOUT = "mail.smtp.timeout"


class SessionSnapshot(BaseModel):
    """Immutable transport settings.

    Attributes:
        smtp_host: Host the transport connects to.
        smtp_local_host: Name announced in HELO/EHLO.
        mime_charset: Default charset for encoded words and text parts.
        connect_timeout_ms: Socket connect timeout in milliseconds.
        io_timeout_ms: Socket read/write timeout in milliseconds.
        debug_enabled: Whether the SMTP conversation should be traced.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    smtp_host: str | None = Field(default=None, description="SMTP server to connect to")
    smtp_local_host: str | None = Field(default=None, description="Local host name")
    mime_charset: str | None = Field(default=None, description="Default MIME charset")
    connect_timeout_ms: int = Field(default=0, description="Connect timeout in ms")
    io_timeout_ms: int = Field(default=0, description="I/O timeout in ms")
    debug_enabled: bool = Field(default=False, description="Trace the SMTP conversation")

    def as_properties(self) -> dict[str, str]:
        """Render the snapshot as ``mail.*`` session properties."""
        properties = {
            MAIL_SMTP_CONNECTIONTIMEOUT: str(self.connect_timeout_ms),
            MAIL_SMTP_TIMEOUT: str(self.io_timeout_ms),
        }
        if self.smtp_host is not None:
            properties[MAIL_SMTP_HOST] = self.smtp_host
        if self.smtp_local_host is not None:
            properties[MAIL_SMTP_LOCALHOST] = self.smtp_local_host
        if self.mime_charset is not None:
            properties[MAIL_MIME_CHARSET] = self.mime_charset
        return properties

    def smtp_client(self, hostname: str | None = None, port: int = 25, **kwargs) -> aiosmtplib.SMTP:
        """Build an unconnected SMTP client configured from this snapshot.

        Args:
            hostname: Remote server, typically the MX of the recipient
                domain. Defaults to ``smtp_host``.
            port: Remote port.
            **kwargs: Passed through to ``aiosmtplib.SMTP``.
        """
        timeout = max(self.connect_timeout_ms, self.io_timeout_ms) / 1000 or None
        return aiosmtplib.SMTP(
            hostname=hostname or self.smtp_host,
            port=port,
            local_hostname=self.smtp_local_host,
            timeout=timeout,
            **kwargs,
        )


class SessionBuilder:
    """Derives ``SessionSnapshot`` objects from a configuration.

    Args:
        global_debug: Returns True when debugging is enabled process-wide.
            Defaults to "the configuration logger is enabled for DEBUG".

    Attributes:
        rebuild_count: Number of snapshots built so far.
    """

    def __init__(self, global_debug: Callable[[], bool] | None = None):
        self._global_debug = global_debug
        self.rebuild_count = 0

    def rebuild(self, configuration: Configuration) -> SessionSnapshot:
        hostname = configuration.get_hostname()
        timeout = configuration.get_delivery_timeout()
        if self._global_debug is not None:
            global_debug = self._global_debug()
        else:
            global_debug = configuration.get_logger().isEnabledFor(logging.DEBUG)

        snapshot = SessionSnapshot(
            smtp_host=hostname,
            smtp_local_host=hostname,
            mime_charset=configuration.get_encoding(),
            connect_timeout_ms=timeout,
            io_timeout_ms=timeout,
            debug_enabled=bool(global_debug and configuration.is_delivery_debug()),
        )
        self.rebuild_count += 1
        return snapshot


__all__ = ["SessionBuilder", "SessionSnapshot"]
