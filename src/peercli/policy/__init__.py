# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Signature policy expressions: principals, threshold trees and the parser."""

from .parser import PolicyParser, parse_policy
from .principals import (
    MAX_POLICY_DEPTH,
    ROLE_CODES,
    ROLES_BY_CODE,
    IdentityPrincipal,
    NOutOf,
    PolicyNode,
    PrincipalRole,
    SignedBy,
)

__all__ = [
    "MAX_POLICY_DEPTH",
    "IdentityPrincipal",
    "NOutOf",
    "PolicyNode",
    "PolicyParser",
    "PrincipalRole",
    "ROLE_CODES",
    "ROLES_BY_CODE",
    "SignedBy",
    "parse_policy",
]
