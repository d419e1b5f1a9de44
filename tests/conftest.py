# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Shared fixtures for the configuration core tests."""

from __future__ import annotations

import pytest

from aspirin.config import Configuration, SessionBuilder
from aspirin.store import StoreFactoryRegistry


@pytest.fixture
def factories():
    """Fresh factory table, so registrations do not leak between tests."""
    return StoreFactoryRegistry()


@pytest.fixture
def configuration(factories):
    """Configuration isolated from the process environment."""
    return Configuration(environ={}, factories=factories)


@pytest.fixture
def debug_configuration(factories):
    """Configuration whose global debug flag is always on."""
    return Configuration(environ={}, factories=factories, session_builder=SessionBuilder(lambda: True))
