# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Core infrastructure: settings, logging and the exception hierarchy."""

from .config import PeerSettings, clear_settings_cache, get_settings
from .exceptions import (
    CertCountMismatchError,
    ClientFactoryError,
    CollectionConfigError,
    ConfigException,
    ConfigFormatError,
    EncodingError,
    ExpressionSyntaxError,
    IncompleteInvocationError,
    InvalidEndorsementPolicyError,
    MalformedJSONError,
    MissingNameError,
    MissingVersionError,
    PeerCLIException,
    PolicyExpressionError,
    PolicySyntaxError,
    TooManyTargetsError,
    UnexpectedParameterError,
    UnknownPrincipalError,
    ValidationException,
)
from .logging import configure_logging, get_logger

__all__ = [
    # Settings
    "PeerSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    # Exceptions
    "PeerCLIException",
    "ConfigException",
    "ValidationException",
    "MissingNameError",
    "MissingVersionError",
    "UnexpectedParameterError",
    "InvalidEndorsementPolicyError",
    "MalformedJSONError",
    "IncompleteInvocationError",
    "TooManyTargetsError",
    "CertCountMismatchError",
    "PolicyExpressionError",
    "ExpressionSyntaxError",
    "UnknownPrincipalError",
    "CollectionConfigError",
    "ConfigFormatError",
    "PolicySyntaxError",
    "EncodingError",
    "ClientFactoryError",
]
