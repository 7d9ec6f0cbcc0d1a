# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Chaincode commands: validate flags before a request is built.

Commands:
    peercli chaincode install -n NAME -v VERSION -p PATH
    peercli chaincode instantiate -n NAME -v VERSION -c CTOR [-P POLICY] [--collections-config FILE]
    peercli chaincode upgrade ...
    peercli chaincode package -n NAME -v VERSION -p PATH
    peercli chaincode invoke -n NAME -c CTOR [--peerAddresses ADDR ...] [--tlsRootCertFiles FILE ...]
    peercli chaincode query -n NAME -c CTOR
"""

from __future__ import annotations

import argparse
import base64

from ...chaincode import (
    CHAINCODE_COMMANDS,
    ChaincodeCmdParams,
    ConnectionParameters,
    check_chaincode_cmd_params,
    validate_peer_connection_parameters,
)
from ...chaincode.invocation import EMPTY_CTOR
from ...core.config import get_settings
from ...core.exceptions import PeerCLIException
from ..output import output_error, output_result


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``chaincode`` command tree."""
    chaincode_parser = subparsers.add_parser(
        "chaincode",
        help="Validate chaincode command parameters",
    )
    chaincode_sub = chaincode_parser.add_subparsers(
        dest="chaincode_command",
        required=True,
        metavar="SUBCOMMAND",
    )
    for command in CHAINCODE_COMMANDS:
        command_p = chaincode_sub.add_parser(command, help=f"Validate a chaincode {command} request")
        _add_chaincode_flags(command_p)
        command_p.set_defaults(func=cmd_chaincode)


def _add_chaincode_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-n", "--name", default="", help="Name of the chaincode")
    parser.add_argument("-v", "--version", default="", help="Version of the chaincode")
    parser.add_argument("-p", "--path", default="", help="Path to the chaincode")
    parser.add_argument(
        "-c",
        "--ctor",
        default=EMPTY_CTOR,
        help='Constructor message in JSON, e.g. \'{"Args":["init","a","100"]}\'',
    )
    parser.add_argument("-P", "--policy", default="", help="Endorsement policy, e.g. \"AND('Org1.member', 'Org2.member')\"")
    parser.add_argument(
        "--collections-config",
        dest="collections_config",
        default="",
        help="JSON file with the private data collections configuration",
    )
    parser.add_argument("-E", "--escc", default="", help="Name of the endorsement system chaincode")
    parser.add_argument("-V", "--vscc", default="", help="Name of the verification system chaincode")
    parser.add_argument(
        "--peerAddresses",
        dest="peer_addresses",
        action="append",
        default=None,
        help="Peer to connect to (repeatable; only invoke accepts several)",
    )
    parser.add_argument(
        "--tlsRootCertFiles",
        dest="tls_root_cert_files",
        action="append",
        default=None,
        help="TLS root cert file for the peer at the same position (repeatable)",
    )
    parser.add_argument(
        "--tls",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use TLS when connecting to peers (default: CORE_PEER_TLS_ENABLED)",
    )


def _connection_from_args(args: argparse.Namespace) -> tuple[ConnectionParameters, bool]:
    settings = get_settings()
    tls_enabled = settings.tls_enabled if args.tls is None else args.tls
    if args.peer_addresses:
        params = ConnectionParameters(
            peer_addresses=list(args.peer_addresses),
            tls_root_cert_files=list(args.tls_root_cert_files or []),
        )
    else:
        params = ConnectionParameters(
            peer_addresses=settings.default_peer_addresses,
            tls_root_cert_files=list(args.tls_root_cert_files or settings.default_tls_root_cert_files),
        )
    return params, tls_enabled


def cmd_chaincode(args: argparse.Namespace) -> int:
    """Validate a chaincode command and print the normalized request."""
    command = args.chaincode_command
    params = ChaincodeCmdParams(
        name=args.name,
        version=args.version,
        path=args.path,
        ctor_json=args.ctor,
        policy=args.policy,
        escc=args.escc,
        vscc=args.vscc,
        collections_config_file=args.collections_config,
    )
    connection, tls_enabled = _connection_from_args(args)

    try:
        validated = check_chaincode_cmd_params(params, command)
        connection = validate_peer_connection_parameters(command, connection, tls_enabled)
    except PeerCLIException as e:
        output_error(e.message)
        return 1

    result = {
        "command": command,
        "name": validated.name,
        "version": validated.version,
        "path": validated.path,
        "args": validated.invocation.to_args() if validated.invocation else [],
        "peer_addresses": connection.peer_addresses,
        "tls_root_cert_files": connection.tls_root_cert_files,
        "tls_enabled": tls_enabled,
    }
    if validated.policy is not None:
        result["policy"] = str(validated.policy)
    if validated.collection_config is not None:
        result["collection_config"] = base64.b64encode(validated.collection_config).decode("ascii")
    if validated.escc:
        result["escc"] = validated.escc
        result["vscc"] = validated.vscc

    output_result(result, args.output)
    return 0
