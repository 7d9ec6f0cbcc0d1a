# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Chaincode invocation spec normalization and command-parameter checks.

Two constructor JSON shapes are accepted::

    {"Args": ["func", "param"]}                  new schema
    {"Function": "func", "Args": ["param"]}      legacy schema

Keys match case-insensitively. Both shapes normalize to ``InvocationSpec``;
``InvocationSpec.to_args()`` yields the flat argument list sent to the peer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..collection_config import compile_collection_config_file
from ..core.exceptions import (
    ExpressionSyntaxError,
    IncompleteInvocationError,
    InvalidEndorsementPolicyError,
    MalformedJSONError,
    MissingNameError,
    MissingVersionError,
    UnexpectedParameterError,
)
from ..policy import PolicyNode, parse_policy

logger = logging.getLogger(__name__)

INSTALL = "install"
INSTANTIATE = "instantiate"
UPGRADE = "upgrade"
PACKAGE = "package"
INVOKE = "invoke"
QUERY = "query"

CHAINCODE_COMMANDS = (INSTALL, INSTANTIATE, UPGRADE, PACKAGE, INVOKE, QUERY)

# Commands that need a chaincode version
VERSIONED_COMMANDS = frozenset({INSTALL, INSTANTIATE, UPGRADE, PACKAGE})
# Commands that deploy and therefore accept escc/vscc, policy and collections
DEPLOY_COMMANDS = frozenset({INSTANTIATE, UPGRADE})
# Commands whose constructor JSON is not sent anywhere
NO_CTOR_COMMANDS = frozenset({INSTALL, PACKAGE})

DEFAULT_ESCC = "escc"
DEFAULT_VSCC = "vscc"
EMPTY_CTOR = "{}"

_CTOR_KEYS = {"function": "Function", "args": "Args"}


class InvocationSpec(BaseModel):
    """Constructor arguments for a chaincode invocation.

    ``args`` is ``None`` when the key was absent and ``[]`` when it was
    present but empty.
    """

    model_config = ConfigDict(strict=True, extra="forbid", frozen=True, populate_by_name=True)

    function: str | None = Field(None, alias="Function", description="Explicit function name (legacy schema)")
    args: list[str] | None = Field(None, alias="Args", description="Arguments; args[0] is the function in the new schema")

    @model_validator(mode="before")
    @classmethod
    def _fold_key_case(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        folded: dict[str, Any] = {}
        for key, value in data.items():
            canonical = _CTOR_KEYS.get(key.lower(), key) if isinstance(key, str) else key
            if canonical in folded:
                raise ValueError(f"duplicate key '{key}'")
            folded[canonical] = value
        return folded

    @property
    def is_legacy(self) -> bool:
        return bool(self.function)

    def to_args(self) -> list[str]:
        """Flat argument list with the function name first."""
        if self.function:
            return [self.function, *(self.args or [])]
        return list(self.args or [])


def check_and_normalize(ctor_json: str, chaincode_name: str) -> InvocationSpec:
    """Validate constructor JSON for the named chaincode.

    Checks run in order and the first failure wins.

    Raises:
        MissingNameError: If ``chaincode_name`` is empty.
        MalformedJSONError: If ``ctor_json`` does not match the invocation shape.
        IncompleteInvocationError: If no non-empty ``Args`` are supplied.
    """
    if not chaincode_name:
        raise MissingNameError("must supply value for chaincode name parameter", field="name")

    try:
        spec = InvocationSpec.model_validate_json(ctor_json)
    except ValidationError as exc:
        raise MalformedJSONError(
            f"chaincode argument error: {ctor_json} does not match "
            "{\"Args\": [...]} or {\"Function\": \"...\", \"Args\": [...]}",
            field="ctor",
            value=ctor_json,
        ) from exc

    if not spec.args:
        if spec.function:
            reason = f"function '{spec.function}' supplied without arguments"
        elif spec.args is not None:
            reason = "'Args' is empty"
        else:
            reason = "neither 'Function' nor 'Args' supplied"
        raise IncompleteInvocationError(
            "non-empty JSON chaincode parameters must contain the following keys: "
            f"'Args' or 'Function' and 'Args' ({reason})",
            field="ctor",
            value=ctor_json,
        )

    logger.debug("Normalized %s invocation for chaincode %s", "legacy" if spec.is_legacy else "new", chaincode_name)
    return spec


# ============================================================================
# Full command-parameter check
# ============================================================================


@dataclass
class ChaincodeCmdParams:
    """Raw chaincode flags as collected by the CLI."""

    name: str = ""
    version: str = ""
    path: str = ""
    ctor_json: str = EMPTY_CTOR
    policy: str = ""
    escc: str = ""
    vscc: str = ""
    collections_config_file: str = ""


@dataclass(frozen=True)
class ValidatedChaincodeCmd:
    """Everything a request builder needs after a successful check."""

    command: str
    name: str
    version: str
    path: str
    invocation: InvocationSpec | None
    policy: PolicyNode | None = None
    collection_config: bytes | None = None
    escc: str = ""
    vscc: str = ""


def check_chaincode_cmd_params(params: ChaincodeCmdParams, command: str) -> ValidatedChaincodeCmd:
    """Check chaincode flags for ``command``.

    Raises:
        MissingNameError: If no chaincode name is supplied.
        MissingVersionError: If a lifecycle command lacks a version.
        UnexpectedParameterError: If escc/vscc/policy/collections are
            supplied to a command that does not deploy.
        InvalidEndorsementPolicyError: If the endorsement policy is invalid.
        CollectionConfigError: If the collections config cannot be compiled.
        MalformedJSONError, IncompleteInvocationError: From ``check_and_normalize``.
    """
    if not params.name:
        raise MissingNameError("must supply value for chaincode name parameter", field="name")

    if command in VERSIONED_COMMANDS and not params.version:
        raise MissingVersionError(f"chaincode version is not provided for {command}", field="version")

    escc, vscc = params.escc, params.vscc
    if command in DEPLOY_COMMANDS:
        if escc:
            logger.info("Using escc %s", escc)
        else:
            logger.info("Using default escc")
            escc = DEFAULT_ESCC
        if vscc:
            logger.info("Using vscc %s", vscc)
        else:
            logger.info("Using default vscc")
            vscc = DEFAULT_VSCC
    else:
        for field in ("escc", "vscc", "policy", "collections_config_file"):
            value = getattr(params, field)
            if value:
                raise UnexpectedParameterError(
                    f"{field} should be supplied only to chaincode deploy requests, not '{command}'",
                    field=field,
                    value=value,
                )

    policy = None
    if params.policy:
        try:
            policy = parse_policy(params.policy)
        except ExpressionSyntaxError as exc:
            raise InvalidEndorsementPolicyError(
                f"invalid policy {params.policy}: {exc.message}",
                field="policy",
                value=params.policy,
            ) from exc

    collection_config = None
    if params.collections_config_file:
        collection_config = compile_collection_config_file(params.collections_config_file)

    invocation = None
    if command not in NO_CTOR_COMMANDS or params.ctor_json.strip() != EMPTY_CTOR:
        invocation = check_and_normalize(params.ctor_json, params.name)

    return ValidatedChaincodeCmd(
        command=command,
        name=params.name,
        version=params.version,
        path=params.path,
        invocation=invocation,
        policy=policy,
        collection_config=collection_config,
        escc=escc,
        vscc=vscc,
    )
