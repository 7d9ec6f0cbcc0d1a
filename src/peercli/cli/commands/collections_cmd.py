# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Collection config commands.

Commands:
    peercli collections compile FILE [-o OUT]    Compile a JSON config into package bytes
    peercli collections inspect FILE             Decode compiled package bytes
"""

from __future__ import annotations

import argparse
import base64
from pathlib import Path

from ...collection_config import compile_collection_config_file, decode_collection_config_package
from ...core.exceptions import PeerCLIException
from ..output import output_error, output_result


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``collections`` command tree."""
    collections_parser = subparsers.add_parser(
        "collections",
        help="Compile and inspect private data collection configs",
    )
    collections_sub = collections_parser.add_subparsers(
        dest="collections_command",
        required=True,
        metavar="SUBCOMMAND",
    )

    compile_p = collections_sub.add_parser("compile", help="Compile a collection config JSON file")
    compile_p.add_argument("file", help="Collection config JSON file")
    compile_p.add_argument("--out", "-o", help="Write package bytes here instead of printing base64")
    compile_p.set_defaults(func=cmd_collections_compile)

    inspect_p = collections_sub.add_parser("inspect", help="Decode a compiled collection config package")
    inspect_p.add_argument("file", help="Compiled package file")
    inspect_p.set_defaults(func=cmd_collections_inspect)


def cmd_collections_compile(args: argparse.Namespace) -> int:
    """Compile a collection config file."""
    try:
        package_bytes = compile_collection_config_file(args.file)
        package = decode_collection_config_package(package_bytes)
    except PeerCLIException as e:
        output_error(e.message)
        return 1

    result = {"collections": package.names(), "size": len(package_bytes)}
    if args.out:
        try:
            Path(args.out).write_bytes(package_bytes)
        except OSError as e:
            output_error(f"could not write {args.out}: {e}")
            return 1
        result["out"] = args.out
    else:
        result["package"] = base64.b64encode(package_bytes).decode("ascii")

    output_result(result, args.output)
    return 0


def cmd_collections_inspect(args: argparse.Namespace) -> int:
    """Decode a compiled package and print its collections."""
    try:
        data = Path(args.file).read_bytes()
    except OSError as e:
        output_error(f"could not read {args.file}: {e}")
        return 1

    try:
        package = decode_collection_config_package(data)
    except PeerCLIException as e:
        output_error(e.message)
        return 1

    output_result(
        {
            "collections": [
                {
                    "name": collection.name,
                    "policy": str(collection.policy),
                    "requiredPeerCount": collection.required_peer_count,
                    "maxPeerCount": collection.maximum_peer_count,
                    "blockToLive": collection.block_to_live,
                    "memberOnlyRead": collection.member_only_read,
                    "memberOnlyWrite": collection.member_only_write,
                }
                for collection in package.collections
            ]
        },
        args.output,
    )
    return 0
