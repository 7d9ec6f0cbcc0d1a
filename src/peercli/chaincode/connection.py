# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Peer connection parameter validation and command client assembly.

Only ``invoke`` may address several peers; every other chaincode command is
single-target. When TLS is enabled every peer address must be paired with a
TLS root cert file at the same position. When TLS is disabled cert files are
discarded.

Actual client construction is delegated to factories supplied by the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ..core.exceptions import (
    CertCountMismatchError,
    ClientFactoryError,
    TooManyTargetsError,
    ValidationException,
)

logger = logging.getLogger(__name__)

MULTI_TARGET_COMMANDS = frozenset({"invoke"})


class CommandKind(StrEnum):
    """Whether a command may address one peer or many."""

    SINGLE_TARGET = "single-target"
    MULTI_TARGET = "multi-target"

    @classmethod
    def for_command(cls, command: str) -> CommandKind:
        if command in MULTI_TARGET_COMMANDS:
            return cls.MULTI_TARGET
        return cls.SINGLE_TARGET


@dataclass(frozen=True)
class ConnectionParameters:
    """Target peers and the TLS root certs that authenticate them."""

    peer_addresses: list[str] = field(default_factory=list)
    tls_root_cert_files: list[str] | None = None

    def pairs(self) -> list[tuple[str, str | None]]:
        """Addresses paired positionally with their cert file (or None)."""
        certs = self.tls_root_cert_files or []
        return [
            (address, certs[i] if i < len(certs) else None)
            for i, address in enumerate(self.peer_addresses)
        ]


def validate_peer_connection_parameters(
    command: str,
    params: ConnectionParameters,
    tls_enabled: bool,
    kind: CommandKind | None = None,
) -> ConnectionParameters:
    """Validate and reconcile peer addresses with TLS root cert files.

    ``kind`` defaults to ``CommandKind.for_command(command)``. The input is
    left untouched; the reconciled parameters are returned.

    Raises:
        TooManyTargetsError: If a single-target command has several addresses.
        CertCountMismatchError: If TLS is enabled and addresses and certs
            cannot be paired one to one.
    """
    kind = kind or CommandKind.for_command(command)
    addresses = list(params.peer_addresses)
    certs = list(params.tls_root_cert_files or [])

    if kind is CommandKind.SINGLE_TARGET and len(addresses) > 1:
        raise TooManyTargetsError(command, len(addresses))

    if len(certs) > len(addresses):
        logger.warning(
            "received more TLS root cert files (%d) than peer addresses (%d)",
            len(certs),
            len(addresses),
        )

    if not tls_enabled:
        return ConnectionParameters(peer_addresses=addresses, tls_root_cert_files=[])

    if kind is CommandKind.SINGLE_TARGET and addresses and len(certs) > len(addresses):
        logger.debug("Dropping %d extra TLS root cert file(s) for '%s'", len(certs) - 1, command)
        certs = certs[:1]

    if len(certs) != len(addresses):
        raise CertCountMismatchError(len(addresses), len(certs))

    return ConnectionParameters(peer_addresses=addresses, tls_root_cert_files=certs)


# ============================================================================
# Command factory
# ============================================================================

# (address, tls_root_cert_file) -> endorser client
EndorserClientFactory = Callable[[str, str | None], Any]
# orderer endpoint -> broadcast client
OrdererClientFactory = Callable[[str], Any]
# endorser client -> orderer endpoints from the channel config
OrdererEndpointResolver = Callable[[Any], list[str]]


@dataclass
class ChaincodeCmdFactory:
    """Clients a chaincode command needs to talk to the network."""

    endorser_clients: list[Any] = field(default_factory=list)
    broadcast_client: Any = None
    connection: ConnectionParameters = field(default_factory=ConnectionParameters)


def init_cmd_factory(
    command: str,
    params: ConnectionParameters,
    tls_enabled: bool,
    *,
    endorser_required: bool,
    orderer_required: bool,
    endorser_client_factory: EndorserClientFactory,
    orderer_endpoint: str = "",
    orderer_client_factory: OrdererClientFactory | None = None,
    orderer_endpoint_resolver: OrdererEndpointResolver | None = None,
) -> ChaincodeCmdFactory:
    """Validate connection parameters and build the clients for ``command``.

    When an orderer is required but ``orderer_endpoint`` is empty, the first
    endorser client is handed to ``orderer_endpoint_resolver`` to look the
    endpoint up from the channel configuration.

    Raises:
        ClientFactoryError: If validation fails, no endorser client could be
            built when one is required, or no orderer can be reached.
    """
    try:
        connection = validate_peer_connection_parameters(command, params, tls_enabled)
    except ValidationException as exc:
        raise ClientFactoryError(
            f"error validating peer connection parameters: {exc.message}",
            exc.details,
        ) from exc

    factory = ChaincodeCmdFactory(connection=connection)

    if endorser_required:
        for address, cert in connection.pairs():
            factory.endorser_clients.append(endorser_client_factory(address, cert))
        if not factory.endorser_clients:
            raise ClientFactoryError("no endorser clients retrieved - this might indicate a bug")

    if orderer_required:
        if not orderer_endpoint:
            if not factory.endorser_clients:
                raise ClientFactoryError("no ordering endpoint or endorser client supplied")
            if orderer_endpoint_resolver is None:
                raise ClientFactoryError("no ordering endpoint supplied and no way to discover one")
            logger.debug("Retrieving orderer endpoint from %s", connection.peer_addresses[0])
            endpoints = orderer_endpoint_resolver(factory.endorser_clients[0])
            if not endpoints:
                raise ClientFactoryError(f"no orderer endpoints retrieved from {connection.peer_addresses[0]}")
            orderer_endpoint = endpoints[0]
        if orderer_client_factory is None:
            raise ClientFactoryError(f"no orderer client factory for endpoint {orderer_endpoint}")
        logger.info("Using orderer endpoint %s", orderer_endpoint)
        factory.broadcast_client = orderer_client_factory(orderer_endpoint)

    return factory
