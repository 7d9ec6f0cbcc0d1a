# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Identity principals and the threshold policy tree.

A policy is a rooted tree whose leaves name an organizational role
(``SignedBy``) and whose inner nodes (``NOutOf``) are satisfied when at least
``n`` of their children are satisfied. Children keep the order in which they
were written.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum


class PrincipalRole(StrEnum):
    """Roles an identity can hold within its organization."""

    MEMBER = "member"
    ADMIN = "admin"
    PEER = "peer"
    CLIENT = "client"


# Wire codes for roles; order is part of the package format
ROLE_CODES: dict[PrincipalRole, int] = {
    PrincipalRole.MEMBER: 0,
    PrincipalRole.ADMIN: 1,
    PrincipalRole.CLIENT: 2,
    PrincipalRole.PEER: 3,
}
ROLES_BY_CODE: dict[int, PrincipalRole] = {code: role for role, code in ROLE_CODES.items()}

# Deepest nesting of threshold nodes accepted when parsing or decoding
MAX_POLICY_DEPTH = 64


@dataclass(frozen=True)
class IdentityPrincipal:
    """An organizational role, e.g. ``Org1MSP.admin``."""

    org_id: str
    role: PrincipalRole

    def __str__(self) -> str:
        return f"'{self.org_id}.{self.role.value}'"


@dataclass(frozen=True)
class SignedBy:
    """Leaf node: satisfied by a signature from ``principal``."""

    principal: IdentityPrincipal

    def depth(self) -> int:
        return 0

    def principals(self) -> list[IdentityPrincipal]:
        return [self.principal]

    def is_satisfied_by(self, identities: Iterable[IdentityPrincipal]) -> bool:
        return self.principal in set(identities)

    def to_dict(self) -> dict:
        return {"signed_by": {"org_id": self.principal.org_id, "role": self.principal.role.value}}

    def __str__(self) -> str:
        return str(self.principal)


@dataclass(frozen=True)
class NOutOf:
    """Threshold node: satisfied when at least ``n`` children are satisfied."""

    n: int
    rules: tuple[PolicyNode, ...]

    def __post_init__(self) -> None:
        if not self.rules:
            raise ValueError("threshold node requires at least one child")
        if not 1 <= self.n <= len(self.rules):
            raise ValueError(f"threshold {self.n} out of range for {len(self.rules)} children")

    def depth(self) -> int:
        """Nesting depth: 1 for a node whose children are all leaves."""
        return 1 + max(rule.depth() for rule in self.rules)

    def principals(self) -> list[IdentityPrincipal]:
        """All referenced principals, deduplicated in order of first appearance."""
        seen: dict[IdentityPrincipal, None] = {}
        for principal in _walk_principals(self):
            seen.setdefault(principal, None)
        return list(seen)

    def is_satisfied_by(self, identities: Iterable[IdentityPrincipal]) -> bool:
        present = set(identities)
        satisfied = 0
        for rule in self.rules:
            if rule.is_satisfied_by(present):
                satisfied += 1
                if satisfied >= self.n:
                    return True
        return False

    def to_dict(self) -> dict:
        """Convert to a nested dictionary for JSON output."""
        return {"n_out_of": {"n": self.n, "rules": [rule.to_dict() for rule in self.rules]}}

    def __str__(self) -> str:
        operands = ", ".join(str(rule) for rule in self.rules)
        if self.n == 1:
            return f"OR({operands})"
        if self.n == len(self.rules):
            return f"AND({operands})"
        return f"OutOf({self.n}, {operands})"


PolicyNode = SignedBy | NOutOf


def _walk_principals(node: PolicyNode) -> Iterator[IdentityPrincipal]:
    if isinstance(node, SignedBy):
        yield node.principal
        return
    for rule in node.rules:
        yield from _walk_principals(rule)
