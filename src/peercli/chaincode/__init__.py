# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Chaincode command validation: invocation specs and peer connections."""

from .connection import (
    ChaincodeCmdFactory,
    CommandKind,
    ConnectionParameters,
    init_cmd_factory,
    validate_peer_connection_parameters,
)
from .invocation import (
    CHAINCODE_COMMANDS,
    ChaincodeCmdParams,
    InvocationSpec,
    ValidatedChaincodeCmd,
    check_and_normalize,
    check_chaincode_cmd_params,
)

__all__ = [
    "CHAINCODE_COMMANDS",
    "ChaincodeCmdFactory",
    "ChaincodeCmdParams",
    "CommandKind",
    "ConnectionParameters",
    "InvocationSpec",
    "ValidatedChaincodeCmd",
    "check_and_normalize",
    "check_chaincode_cmd_params",
    "init_cmd_factory",
    "validate_peer_connection_parameters",
]
