# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Compile private data collection configs into package bytes.

The input is a JSON array such as::

    [
      {
        "name": "foo",
        "policy": "OR('A.member', 'B.member')",
        "requiredPeerCount": 3,
        "maxPeerCount": 483279847,
        "blockToLive": 1000000,
        "memberOnlyRead": true
      }
    ]

Compilation is all-or-nothing: the first invalid entry aborts the whole
compile. Duplicate names are passed through for the peer to reject.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ..core.exceptions import ConfigFormatError, ExpressionSyntaxError, PolicySyntaxError
from ..policy import parse_policy
from .codec import CollectionConfigCodec
from .models import CollectionConfigEntry, CollectionConfigPackage, CollectionDescriptor

logger = logging.getLogger(__name__)

_ENTRIES_ADAPTER = TypeAdapter(list[CollectionConfigEntry])


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


def parse_collection_entries(data: bytes | str) -> list[CollectionConfigEntry]:
    """Deserialize the JSON array into raw entries, preserving order.

    Raises:
        ConfigFormatError: If the document is not a JSON array of valid entries.
    """
    try:
        return _ENTRIES_ADAPTER.validate_json(data)
    except ValidationError as exc:
        raise ConfigFormatError(
            f"could not parse collection configuration: {_describe_validation_error(exc)}",
            {"errors": exc.error_count()},
        ) from exc


def build_collection_package(entries: list[CollectionConfigEntry]) -> CollectionConfigPackage:
    """Compile each entry's policy and assemble the package in input order.

    Raises:
        PolicySyntaxError: If any entry's policy expression is invalid.
    """
    collections = []
    for entry in entries:
        try:
            policy = parse_policy(entry.policy)
        except ExpressionSyntaxError as exc:
            raise PolicySyntaxError(entry.name, entry.policy, exc.message) from exc

        if entry.maximum_peer_count < entry.required_peer_count:
            logger.warning(
                "Collection '%s' has maxPeerCount (%d) lower than requiredPeerCount (%d)",
                entry.name,
                entry.maximum_peer_count,
                entry.required_peer_count,
            )

        collections.append(
            CollectionDescriptor(
                name=entry.name,
                policy=policy,
                required_peer_count=entry.required_peer_count,
                maximum_peer_count=entry.maximum_peer_count,
                block_to_live=entry.block_to_live,
                member_only_read=entry.member_only_read,
                member_only_write=entry.member_only_write,
            )
        )
    return CollectionConfigPackage(collections=tuple(collections))


def compile_collection_config(data: bytes | str) -> bytes:
    """Compile a collection config JSON document into package bytes.

    Raises:
        ConfigFormatError: If the document is not a JSON array of objects or
            a required field is missing or out of range.
        PolicySyntaxError: If any collection's policy is invalid.
        EncodingError: If the package cannot be serialized.
    """
    package = build_collection_package(parse_collection_entries(data))
    encoded = CollectionConfigCodec.encode(package)
    logger.debug("Compiled %d collection(s) into %d bytes", len(package), len(encoded))
    return encoded


def compile_collection_config_file(path: str | Path) -> bytes:
    """Read and compile a collection config file.

    Raises:
        ConfigFormatError: If the file cannot be read.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ConfigFormatError(
            f"could not read collection configuration file {path}: {exc}",
            {"path": str(path)},
        ) from exc
    return compile_collection_config(data)


def decode_collection_config_package(data: bytes) -> CollectionConfigPackage:
    """Decode compiled package bytes.

    Raises:
        EncodingError: If the bytes are not a valid package.
    """
    return CollectionConfigCodec.decode(data)
