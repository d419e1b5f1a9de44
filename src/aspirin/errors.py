# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Error types for the configuration core.

None of these escape a getter or setter of the registry. They are raised
inside a component and caught where the fallback is applied, then logged
and, where useful, kept on the owning object for inspection.
"""

from __future__ import annotations


class AspirinError(Exception):
    """Base class for configuration core errors."""


class TypeCoercionError(AspirinError, ValueError):
    """An override value does not match the declared parameter type."""

    def __init__(self, name: str, value: object, expected: str):
        self.name = name
        self.value = value
        self.expected = expected
        super().__init__(f"Parameter '{name}' expects {expected}, got {value!r}")


class AddressParseError(AspirinError, ValueError):
    """The postmaster address could not be parsed."""

    def __init__(self, value: str, reason: str = "unparseable address"):
        self.value = value
        self.reason = reason
        super().__init__(f"Email address {value!r} is invalid: {reason}")


class BackendResolutionError(AspirinError):
    """A pluggable store could not be resolved or instantiated."""

    def __init__(self, kind: str, identifier: str | None, reason: str):
        self.kind = kind
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"{kind} store '{identifier}' could not be instantiated: {reason}")


class ListenerDispatchError(AspirinError):
    """A change listener raised while being notified."""

    def __init__(self, listener: object, name: str):
        self.listener = listener
        self.name = name
        super().__init__(f"Listener {listener!r} failed on change of '{name}'")


__all__ = [
    "AddressParseError",
    "AspirinError",
    "BackendResolutionError",
    "ListenerDispatchError",
    "TypeCoercionError",
]
