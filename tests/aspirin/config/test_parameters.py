# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for parameter descriptors and override coercion."""

import pytest

from aspirin.config.parameters import (
    KNOWN_PARAMETERS,
    PARAMETERS,
    SESSION_PARAMETERS,
    Parameter,
    ParameterType,
    env_name,
)
from aspirin.errors import TypeCoercionError


class TestKnownParameters:
    """Tests for the table of known parameters."""

    def test_names_are_unique(self):
        """Every known parameter has its own name."""
        assert len(PARAMETERS) == len(KNOWN_PARAMETERS) == 15

    def test_defaults_match_declared_type(self):
        """Non-null defaults have the declared Python type."""
        python_types = {
            ParameterType.STRING: str,
            ParameterType.INTEGER: int,
            ParameterType.LONG: int,
            ParameterType.BOOLEAN: bool,
        }
        for parameter in KNOWN_PARAMETERS:
            if parameter.default is not None:
                assert isinstance(parameter.default, python_types[parameter.type]), parameter.name

    def test_session_parameters(self):
        """Only four parameters contribute to the session snapshot."""
        assert SESSION_PARAMETERS == {"hostname", "encoding", "delivery.timeout", "delivery.debug"}


class TestCoerce:
    """Tests for Parameter.coerce."""

    def test_integer_from_string(self):
        param = Parameter("n", ParameterType.INTEGER, 0)
        assert param.coerce(" 42 ") == 42

    def test_integer_rejects_garbage(self):
        param = Parameter("n", ParameterType.INTEGER, 0)
        with pytest.raises(TypeCoercionError) as exc_info:
            param.coerce("forty-two")
        assert exc_info.value.name == "n"

    def test_integer_rejects_out_of_range(self):
        """Integer parameters are 32 bit."""
        param = Parameter("n", ParameterType.INTEGER, 0)
        with pytest.raises(TypeCoercionError):
            param.coerce(str(2**31))

    def test_long_accepts_64_bit(self):
        param = Parameter("n", ParameterType.LONG, 0)
        assert param.coerce(str(2**40)) == 2**40

    def test_integer_rejects_bool(self):
        param = Parameter("n", ParameterType.INTEGER, 0)
        with pytest.raises(TypeCoercionError):
            param.coerce(True)

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("TRUE", True), ("yes", True), ("on", True), ("1", True),
        ("false", False), ("No", False), ("off", False), ("0", False),
    ])
    def test_boolean_vocabulary(self, raw, expected):
        param = Parameter("b", ParameterType.BOOLEAN, False)
        assert param.coerce(raw) is expected

    def test_boolean_rejects_garbage(self):
        param = Parameter("b", ParameterType.BOOLEAN, False)
        with pytest.raises(TypeCoercionError):
            param.coerce("maybe")

    def test_none_passes_through(self):
        param = Parameter("s", ParameterType.STRING, "x")
        assert param.coerce(None) is None

    @pytest.mark.parametrize("param_type", [ParameterType.INTEGER, ParameterType.LONG, ParameterType.BOOLEAN])
    def test_none_rejected_for_typed_parameters(self, param_type):
        param = Parameter("t", param_type, None)
        with pytest.raises(TypeCoercionError):
            param.coerce(None)


class TestExtract:
    """Tests for override priority."""

    def test_env_name(self):
        assert env_name("delivery.bounce-on-failure") == "ASPIRIN_DELIVERY_BOUNCE_ON_FAILURE"

    def test_default_when_no_override(self):
        param = PARAMETERS["delivery.attempt.count"]
        assert param.extract({}, {}) == 3

    def test_call_override_beats_environment(self):
        param = PARAMETERS["delivery.attempt.count"]
        value = param.extract({"delivery.attempt.count": "7"}, {"ASPIRIN_DELIVERY_ATTEMPT_COUNT": "9"})
        assert value == 7

    def test_environment_by_raw_name(self):
        param = PARAMETERS["hostname"]
        assert param.extract({}, {"hostname": "mx.example.com"}) == "mx.example.com"

    def test_environment_by_prefixed_name(self):
        param = PARAMETERS["delivery.expiry"]
        assert param.extract({}, {"ASPIRIN_DELIVERY_EXPIRY": "60000"}) == 60000
