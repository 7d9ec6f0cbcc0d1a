# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Exception hierarchy for peercli.

Every failure raised by the validators and compilers is a ``PeerCLIException``
carrying a human-readable message (with the offending values) and a
``details`` dict that the CLI layer can render or serialize.
"""

from __future__ import annotations

from typing import Any


class PeerCLIException(Exception):  # noqa: N818
    """Base exception for all peercli errors.

    All peercli-specific exceptions should inherit from this class.
    """

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigException(PeerCLIException):
    """Exception for configuration errors.

    Raised when:
    - Settings cannot be loaded from the environment
    - A flag combination cannot be reconciled with the settings
    """

    def __init__(self, message: str, missing_vars: list[str] | None = None):
        details = {}
        if missing_vars:
            details["missing_vars"] = missing_vars
        super().__init__(message, details)
        self.missing_vars = missing_vars or []


# ============================================================================
# Input validation
# ============================================================================


class ValidationException(PeerCLIException):
    """Exception for command-parameter validation errors.

    Raised when:
    - A required parameter is missing
    - A parameter is malformed
    - Parameters are inconsistent with each other
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class MissingNameError(ValidationException):
    """The chaincode name parameter was not supplied."""


class MissingVersionError(ValidationException):
    """A lifecycle command was issued without a chaincode version."""


class UnexpectedParameterError(ValidationException):
    """A parameter was supplied to a command that does not accept it."""


class InvalidEndorsementPolicyError(ValidationException):
    """The endorsement policy expression could not be parsed."""


class MalformedJSONError(ValidationException):
    """The constructor JSON does not match the invocation shape."""


class IncompleteInvocationError(ValidationException):
    """The constructor JSON lacks the arguments needed to invoke chaincode."""


class TooManyTargetsError(ValidationException):
    """A single-target command was given more than one peer address."""

    def __init__(self, command: str, count: int):
        super().__init__(
            f"'{command}' command can only be executed against one peer. received {count}",
            field="peer_addresses",
            value=count,
        )
        self.details["command"] = command
        self.command = command
        self.count = count


class CertCountMismatchError(ValidationException):
    """Peer addresses and TLS root cert files cannot be paired positionally."""

    def __init__(self, address_count: int, cert_count: int):
        super().__init__(
            f"number of peer addresses ({address_count}) does not match "
            f"the number of TLS root cert files ({cert_count})",
            field="tls_root_cert_files",
        )
        self.details["peer_addresses"] = address_count
        self.details["tls_root_cert_files"] = cert_count
        self.address_count = address_count
        self.cert_count = cert_count


# ============================================================================
# Policy expressions
# ============================================================================


class PolicyExpressionError(PeerCLIException):
    """Base class for policy expression failures."""


class ExpressionSyntaxError(PolicyExpressionError):
    """The policy expression does not conform to the grammar.

    ``position`` is the character offset of the offending token and
    ``token`` the offending substring.
    """

    def __init__(self, message: str, expression: str, position: int, token: str):
        super().__init__(
            message,
            {"expression": expression, "position": position, "token": token},
        )
        self.expression = expression
        self.position = position
        self.token = token


class UnknownPrincipalError(ExpressionSyntaxError):
    """A principal literal names a role outside the recognized set."""

    def __init__(self, message: str, expression: str, position: int, token: str, role: str):
        super().__init__(message, expression, position, token)
        self.details["role"] = role
        self.role = role


# ============================================================================
# Collection configuration
# ============================================================================


class CollectionConfigError(PeerCLIException):
    """Base class for collection configuration failures."""


class ConfigFormatError(CollectionConfigError):
    """The collection configuration document is structurally invalid."""


class PolicySyntaxError(CollectionConfigError):
    """A collection's member policy could not be compiled."""

    def __init__(self, collection: str, policy: str, reason: str):
        super().__init__(
            f"invalid policy {policy} for collection '{collection}': {reason}",
            {"collection": collection, "policy": policy},
        )
        self.collection = collection
        self.policy = policy


class EncodingError(CollectionConfigError):
    """The collection config package could not be encoded or decoded."""


# ============================================================================
# Command factory
# ============================================================================


class ClientFactoryError(PeerCLIException):
    """Peer or orderer clients could not be assembled for a command."""
