# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""CLI command modules for peercli.

Each module exposes a ``register(subparsers)`` function that wires up
its argparse sub-commands and sets ``parser.set_defaults(func=handler)``.
"""

from . import chaincode, collections_cmd, policy
from .chaincode import cmd_chaincode
from .collections_cmd import cmd_collections_compile, cmd_collections_inspect
from .policy import cmd_policy_parse

# All command modules with register() functions, in registration order.
COMMAND_MODULES = [
    chaincode,
    collections_cmd,
    policy,
]

__all__ = [
    "COMMAND_MODULES",
    "cmd_chaincode",
    "cmd_collections_compile",
    "cmd_collections_inspect",
    "cmd_policy_parse",
]
