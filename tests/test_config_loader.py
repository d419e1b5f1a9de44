# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for loading parameter overrides from config.ini."""

import pytest

from aspirin.config import Configuration
from aspirin.config_loader import load_overrides


def test_load_overrides_from_config(tmp_path):
    """Values of the [aspirin] section become raw string overrides."""
    config_file = tmp_path / "config.ini"
    config_file.write_text("""
[aspirin]
delivery.attempt.count = 5
delivery.debug = yes
hostname = mx.example.com
postmaster.email = postmaster@example.com

[server]
port = 8000
""")

    overrides = load_overrides(config_file)

    assert overrides == {
        "delivery.attempt.count": "5",
        "delivery.debug": "yes",
        "hostname": "mx.example.com",
        "postmaster.email": "postmaster@example.com",
    }


def test_overrides_flow_into_configuration(tmp_path):
    config_file = tmp_path / "config.ini"
    config_file.write_text("[aspirin]\ndelivery.expiry = 3600000\nencoding = ISO-8859-1\n")

    configuration = Configuration(load_overrides(config_file), environ={})

    assert configuration.get_delivery_expiry() == 3600000
    assert configuration.get_mail_session().mime_charset == "ISO-8859-1"


def test_missing_section_returns_empty(tmp_path):
    config_file = tmp_path / "config.ini"
    config_file.write_text("[server]\nport = 8000\n")
    assert load_overrides(config_file) == {}


def test_custom_section(tmp_path):
    config_file = tmp_path / "config.ini"
    config_file.write_text("[delivery]\ndelivery.timeout = 1000\n")
    assert load_overrides(config_file, section="delivery") == {"delivery.timeout": "1000"}


def test_percent_signs_are_kept(tmp_path):
    """Values are read raw, without interpolation."""
    config_file = tmp_path / "config.ini"
    config_file.write_text("[aspirin]\nlogger.prefix = 100%\n")
    assert load_overrides(config_file)["logger.prefix"] == "100%"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_overrides(tmp_path / "nope.ini")
