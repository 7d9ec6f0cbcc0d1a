# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Policy command: check a signature policy expression."""

from __future__ import annotations

import argparse

from ...core.exceptions import PolicyExpressionError
from ...policy import parse_policy
from ..output import output_error, output_result


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``policy`` command tree."""
    policy_parser = subparsers.add_parser("policy", help="Work with signature policy expressions")
    policy_sub = policy_parser.add_subparsers(dest="policy_command", required=True, metavar="SUBCOMMAND")

    parse_p = policy_sub.add_parser("parse", help="Parse a policy expression and print its tree")
    parse_p.add_argument("expression", help="Policy, e.g. \"OR('Org1.member', 'Org2.member')\"")
    parse_p.set_defaults(func=cmd_policy_parse)


def cmd_policy_parse(args: argparse.Namespace) -> int:
    try:
        policy = parse_policy(args.expression)
    except PolicyExpressionError as e:
        output_error(e.message)
        return 1

    output_result(
        {
            "policy": str(policy),
            "depth": policy.depth(),
            "principals": [str(p) for p in policy.principals()],
            "tree": policy.to_dict(),
        },
        args.output,
    )
    return 0
