# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Recursive-descent parser for signature policy expressions.

Grammar (call keywords are case-insensitive)::

    expr      := call
    call      := ("OR" | "AND") "(" operand ("," operand)* ")"
               | "OUTOF" "(" integer "," operand ("," operand)* ")"
    operand   := call | principal
    principal := "'" org_id "." role "'"
    org_id    := [A-Za-z0-9.-]+
    role      := "member" | "admin" | "peer" | "client"

``OR`` compiles to a threshold of 1, ``AND`` to a threshold equal to its
operand count and ``OutOf(k, ...)`` to a threshold of ``k``. The input is
scanned once, left to right; the first malformed token aborts the parse.
Calls nest at most ``MAX_POLICY_DEPTH`` deep.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import NoReturn

from ..core.exceptions import ExpressionSyntaxError, UnknownPrincipalError
from .principals import MAX_POLICY_DEPTH, IdentityPrincipal, NOutOf, PolicyNode, PrincipalRole, SignedBy

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(
    r"""
    (?P<lparen>\()
    | (?P<rparen>\))
    | (?P<comma>,)
    | (?P<principal>'[^']*')
    | (?P<integer>\d+)
    | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE,
)
_WHITESPACE_RE = re.compile(r"\s*")
_ORG_ID_RE = re.compile(r"[A-Za-z0-9.-]+")

_ROLES = {role.value: role for role in PrincipalRole}


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    position: int


class PolicyParser:
    """Single-use parser over one expression string."""

    def __init__(self, expression: str) -> None:
        self.expression = expression
        self._pos = 0
        self._lookahead: _Token | None = None

    # -------------------------------------------------------------------------
    # Scanner
    # -------------------------------------------------------------------------

    def _scan(self) -> _Token:
        self._pos = _WHITESPACE_RE.match(self.expression, self._pos).end()
        if self._pos >= len(self.expression):
            return _Token("end", "", self._pos)

        if self.expression[self._pos] == "'" and "'" not in self.expression[self._pos + 1 :]:
            self._fail("unterminated principal literal", self._pos, self.expression[self._pos :])

        match = _TOKEN_RE.match(self.expression, self._pos)
        if match is None:
            self._fail("unexpected character", self._pos, self.expression[self._pos])

        token = _Token(match.lastgroup or "", match.group(), self._pos)
        self._pos = match.end()
        return token

    def _peek(self) -> _Token:
        if self._lookahead is None:
            self._lookahead = self._scan()
        return self._lookahead

    def _next(self) -> _Token:
        token = self._peek()
        self._lookahead = None
        return token

    def _expect(self, kind: str, description: str) -> _Token:
        token = self._next()
        if token.kind != kind:
            self._unexpected(token, description)
        return token

    def _fail(self, reason: str, position: int, token: str) -> NoReturn:
        raise ExpressionSyntaxError(
            f"{reason} '{token}' at position {position} in policy expression {self.expression!r}",
            expression=self.expression,
            position=position,
            token=token,
        )

    def _unexpected(self, token: _Token, description: str) -> NoReturn:
        if token.kind == "end":
            self._fail(f"unexpected end of expression, expected {description}", token.position, "")
        self._fail(f"expected {description}, found", token.position, token.text)

    # -------------------------------------------------------------------------
    # Grammar
    # -------------------------------------------------------------------------

    def parse(self) -> PolicyNode:
        """Parse the whole expression into a policy tree.

        Raises:
            ExpressionSyntaxError: If the expression does not conform to the grammar.
            UnknownPrincipalError: If a principal names an unrecognized role.
        """
        token = self._peek()
        if token.kind == "principal":
            self._fail("policy must be an OR, AND or OutOf call, found bare principal", token.position, token.text)
        node = self._parse_call(depth=1)
        trailing = self._next()
        if trailing.kind != "end":
            self._fail("unexpected trailing input", trailing.position, self.expression[trailing.position :])
        return node

    def _parse_call(self, depth: int) -> NOutOf:
        keyword = self._expect("name", "OR, AND or OutOf")
        if depth > MAX_POLICY_DEPTH:
            self._fail(f"policy nesting exceeds maximum depth {MAX_POLICY_DEPTH}, found", keyword.position, keyword.text)
        function = keyword.text.upper()
        if function not in ("OR", "AND", "OUTOF"):
            self._fail("unrecognized policy function", keyword.position, keyword.text)

        self._expect("lparen", "'('")

        threshold: int | None = None
        threshold_token: _Token | None = None
        if function == "OUTOF":
            threshold_token = self._expect("integer", "threshold integer")
            threshold = int(threshold_token.text)
            self._expect("comma", "','")

        operands = [self._parse_operand(depth)]
        while True:
            token = self._next()
            if token.kind == "rparen":
                break
            if token.kind != "comma":
                self._unexpected(token, "',' or ')'")
            operands.append(self._parse_operand(depth))

        if function == "OR":
            threshold = 1
        elif function == "AND":
            threshold = len(operands)
        elif not 1 <= threshold <= len(operands):
            self._fail(
                f"OutOf threshold must be between 1 and {len(operands)}, found",
                threshold_token.position,
                threshold_token.text,
            )

        return NOutOf(n=threshold, rules=tuple(operands))

    def _parse_operand(self, depth: int) -> PolicyNode:
        token = self._peek()
        if token.kind == "principal":
            self._next()
            return SignedBy(self._parse_principal(token))
        if token.kind == "name":
            return self._parse_call(depth + 1)
        self._next()
        self._unexpected(token, "principal or nested OR, AND or OutOf")

    def _parse_principal(self, token: _Token) -> IdentityPrincipal:
        body = token.text[1:-1]
        org_id, dot, role_tag = body.rpartition(".")
        if not dot or not org_id:
            self._fail("principal must have the form 'org.role', found", token.position, token.text)
        if not _ORG_ID_RE.fullmatch(org_id):
            self._fail("invalid organization identifier in principal", token.position, token.text)
        role = _ROLES.get(role_tag)
        if role is None:
            raise UnknownPrincipalError(
                f"unrecognized role '{role_tag}' in principal {token.text} at position {token.position}; "
                f"expected one of {', '.join(_ROLES)}",
                expression=self.expression,
                position=token.position,
                token=token.text,
                role=role_tag,
            )
        return IdentityPrincipal(org_id=org_id, role=role)


def parse_policy(expression: str) -> PolicyNode:
    """Parse a policy expression such as ``OR('A.member', 'B.member')``.

    Raises:
        ExpressionSyntaxError: If the expression does not conform to the grammar.
        UnknownPrincipalError: If a principal names an unrecognized role.
    """
    node = PolicyParser(expression).parse()
    logger.debug("Parsed policy %r into %s", expression, node)
    return node
