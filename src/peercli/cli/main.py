#!/usr/bin/env python3
"""
peercli - client-side request validation for the ledger peer CLI.

Commands:
  peercli chaincode <command> [flags]     Validate chaincode command flags
  peercli collections compile <file>      Compile a collection config
  peercli collections inspect <file>      Decode a compiled collection config
  peercli policy parse <expression>       Parse a signature policy
"""

from __future__ import annotations

import argparse
import logging
import sys

from ..core.config import get_settings
from ..core.exceptions import ConfigException
from ..core.logging import configure_logging
from .commands import COMMAND_MODULES
from .output import OUTPUT_FORMATS, output_error

logger = logging.getLogger(__name__)


def app() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="peercli",
        description="Validate peer CLI requests before they are sent",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  peercli chaincode invoke -n mycc -c '{"Args":["move","a","b","10"]}' \\
      --peerAddresses peer0:7051 --tlsRootCertFiles peer0.pem \\
      --peerAddresses peer1:7051 --tlsRootCertFiles peer1.pem --tls
  peercli chaincode instantiate -n mycc -v 1.0 -c '{"Args":["init"]}' \\
      -P "AND('Org1MSP.member', 'Org2MSP.member')" --collections-config collections.json
  peercli collections compile collections.json -o collections.pb
  peercli policy parse "OutOf(2, 'A.member', 'B.member', 'C.admin')"
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--output",
        choices=OUTPUT_FORMATS,
        default="json",
        help="Output format (default: json)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    for module in COMMAND_MODULES:
        module.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = app()
    args = parser.parse_args(argv)

    try:
        get_settings()
    except ConfigException as e:
        output_error(e.message)
        return 1

    configure_logging(level="DEBUG" if args.verbose else None)
    logger.debug("Running command %s", args.command)

    handler = getattr(args, "func", None)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
