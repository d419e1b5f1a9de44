# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Mail store contract and its in-memory implementation."""

from .base import MailStore
from .simple import SimpleMailStore

__all__ = ["MailStore", "SimpleMailStore"]
