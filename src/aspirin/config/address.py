# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Parsing of the postmaster address."""

from __future__ import annotations

from email.headerregistry import Address
from email.utils import parseaddr

from ..errors import AddressParseError


def parse_address(value: str) -> Address:
    """Parse ``value`` into an ``Address``.

    Accepts a bare ``user@domain`` or a ``Name <user@domain>`` form.

    Raises:
        AddressParseError: If no ``user@domain`` can be extracted.
    """
    display_name, addr_spec = parseaddr(value)
    if not addr_spec or "@" not in addr_spec or any(c.isspace() for c in addr_spec):
        raise AddressParseError(value)
    username, _, domain = addr_spec.rpartition("@")
    if not username or not domain or "@" in username:
        raise AddressParseError(value, "expected exactly one local part and domain")
    try:
        return Address(display_name=display_name, username=username, domain=domain)
    except (ValueError, TypeError) as exc:
        raise AddressParseError(value, str(exc)) from exc


__all__ = ["parse_address"]
