# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""
Binary codec for collection config packages.

Wire format (all integers big-endian)::

    +------------+-------------+-------------+------------------------+
    | 4 bytes    | u16         | u32         | records...             |
    | magic CCPK | version = 1 | count       |                        |
    +------------+-------------+-------------+------------------------+

Each record is ``<u32 body length><body>`` where the body holds::

    str name | i32 required | i32 maximum | u64 block_to_live
    | u8 member_only_read | u8 member_only_write | envelope

and the policy envelope is an identity table followed by the rule tree::

    u16 identity_count | (str org_id | u8 role_code)* | rule
    rule := u8 0 | u32 identity_index                  (signed by)
          | u8 1 | u32 n | u32 child_count | rule*    (n out of)

Strings are ``<u16 length><UTF-8 bytes>``. Identities are deduplicated in
order of first appearance, so equal principals share one table slot.
"""

from __future__ import annotations

import struct

from ..core.exceptions import EncodingError
from ..policy import MAX_POLICY_DEPTH, ROLE_CODES, ROLES_BY_CODE, IdentityPrincipal, NOutOf, PolicyNode, SignedBy
from .models import CollectionConfigPackage, CollectionDescriptor

PACKAGE_MAGIC = b"CCPK"
PACKAGE_VERSION = 1

_HEADER_STRUCT = struct.Struct("!4sHI")
_U8 = struct.Struct("!B")
_U16 = struct.Struct("!H")
_U32 = struct.Struct("!I")
_COUNTS_STRUCT = struct.Struct("!iiQBB")
_THRESHOLD_STRUCT = struct.Struct("!II")

_RULE_SIGNED_BY = 0
_RULE_N_OUT_OF = 1


class CollectionConfigCodec:
    """Encode and decode ``CollectionConfigPackage`` values.

    Usage::

        data = CollectionConfigCodec.encode(package)
        package = CollectionConfigCodec.decode(data)
    """

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    @staticmethod
    def encode(package: CollectionConfigPackage) -> bytes:
        """Encode a package.

        Raises:
            EncodingError: If a value does not fit its wire field.
        """
        try:
            out = bytearray(_HEADER_STRUCT.pack(PACKAGE_MAGIC, PACKAGE_VERSION, len(package.collections)))
            for collection in package.collections:
                body = CollectionConfigCodec._encode_collection(collection)
                out += _U32.pack(len(body))
                out += body
        except (struct.error, UnicodeEncodeError) as exc:
            raise EncodingError(f"Failed to encode collection config package: {exc}") from exc
        return bytes(out)

    @staticmethod
    def _encode_collection(collection: CollectionDescriptor) -> bytes:
        body = bytearray(_encode_str(collection.name))
        body += _COUNTS_STRUCT.pack(
            collection.required_peer_count,
            collection.maximum_peer_count,
            collection.block_to_live,
            int(collection.member_only_read),
            int(collection.member_only_write),
        )
        body += CollectionConfigCodec.encode_policy(collection.policy)
        return bytes(body)

    @staticmethod
    def encode_policy(policy: PolicyNode) -> bytes:
        """Encode a policy tree as an identity table plus rule tree."""
        if policy.depth() > MAX_POLICY_DEPTH:
            raise EncodingError(f"Policy nesting {policy.depth()} exceeds maximum depth {MAX_POLICY_DEPTH}")
        identities = policy.principals()
        if len(identities) > 0xFFFF:
            raise EncodingError(f"Policy references {len(identities)} identities, maximum is {0xFFFF}")
        index = {principal: i for i, principal in enumerate(identities)}

        out = bytearray(_U16.pack(len(identities)))
        for principal in identities:
            out += _encode_str(principal.org_id)
            out += _U8.pack(ROLE_CODES[principal.role])
        _encode_rule(policy, index, out)
        return bytes(out)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    @staticmethod
    def decode(data: bytes | bytearray | memoryview) -> CollectionConfigPackage:
        """Decode a complete package.

        Raises:
            EncodingError: If the buffer is truncated, has trailing bytes,
                or carries an unknown magic, version, role or rule tag.
        """
        reader = _Reader(bytes(data))
        magic, version, count = reader.unpack(_HEADER_STRUCT)
        if magic != PACKAGE_MAGIC:
            raise EncodingError(f"Bad package magic {magic!r}")
        if version != PACKAGE_VERSION:
            raise EncodingError(f"Unsupported package version {version}")

        collections = []
        for _ in range(count):
            (length,) = reader.unpack(_U32)
            body = _Reader(reader.take(length))
            collections.append(_decode_collection(body))
            body.expect_end("collection record")
        reader.expect_end("package")
        return CollectionConfigPackage(collections=tuple(collections))

    @staticmethod
    def decode_policy(data: bytes) -> PolicyNode:
        """Decode a standalone policy envelope."""
        reader = _Reader(bytes(data))
        policy = _decode_envelope(reader)
        reader.expect_end("policy envelope")
        return policy


# ============================================================================
# Helpers
# ============================================================================


def _encode_str(value: str) -> bytes:
    raw = value.encode("utf-8")
    if len(raw) > 0xFFFF:
        raise EncodingError(f"String of {len(raw)} bytes exceeds maximum {0xFFFF}")
    return _U16.pack(len(raw)) + raw


def _encode_rule(node: PolicyNode, index: dict[IdentityPrincipal, int], out: bytearray) -> None:
    if isinstance(node, SignedBy):
        out += _U8.pack(_RULE_SIGNED_BY)
        out += _U32.pack(index[node.principal])
        return
    out += _U8.pack(_RULE_N_OUT_OF)
    out += _U32.pack(node.n)
    out += _U32.pack(len(node.rules))
    for rule in node.rules:
        _encode_rule(rule, index, out)


class _Reader:
    """Cursor over an immutable buffer."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    def take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise EncodingError(f"Truncated data: need {end} bytes, have {len(self.data)}")
        chunk = self.data[self.offset : end]
        self.offset = end
        return chunk

    def unpack(self, fmt: struct.Struct) -> tuple:
        return fmt.unpack(self.take(fmt.size))

    def read_str(self) -> str:
        (length,) = self.unpack(_U16)
        raw = self.take(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise EncodingError(f"Invalid UTF-8 string at offset {self.offset - length}") from exc

    def expect_end(self, what: str) -> None:
        if self.offset != len(self.data):
            raise EncodingError(f"{len(self.data) - self.offset} trailing bytes after {what}")


def _decode_collection(reader: _Reader) -> CollectionDescriptor:
    name = reader.read_str()
    required, maximum, block_to_live, member_only_read, member_only_write = reader.unpack(_COUNTS_STRUCT)
    policy = _decode_envelope(reader)
    return CollectionDescriptor(
        name=name,
        policy=policy,
        required_peer_count=required,
        maximum_peer_count=maximum,
        block_to_live=block_to_live,
        member_only_read=bool(member_only_read),
        member_only_write=bool(member_only_write),
    )


def _decode_envelope(reader: _Reader) -> PolicyNode:
    (count,) = reader.unpack(_U16)
    identities = []
    for _ in range(count):
        org_id = reader.read_str()
        (code,) = reader.unpack(_U8)
        role = ROLES_BY_CODE.get(code)
        if role is None:
            raise EncodingError(f"Unknown role code {code}")
        identities.append(IdentityPrincipal(org_id=org_id, role=role))
    return _decode_rule(reader, identities, depth=0)


def _decode_rule(reader: _Reader, identities: list[IdentityPrincipal], depth: int) -> PolicyNode:
    (tag,) = reader.unpack(_U8)
    if tag == _RULE_SIGNED_BY:
        (position,) = reader.unpack(_U32)
        if position >= len(identities):
            raise EncodingError(f"Identity index {position} out of range ({len(identities)} identities)")
        return SignedBy(identities[position])
    if tag == _RULE_N_OUT_OF:
        if depth >= MAX_POLICY_DEPTH:
            raise EncodingError(f"Policy nesting exceeds maximum depth {MAX_POLICY_DEPTH}")
        n, child_count = reader.unpack(_THRESHOLD_STRUCT)
        rules = tuple(_decode_rule(reader, identities, depth + 1) for _ in range(child_count))
        try:
            return NOutOf(n=n, rules=rules)
        except ValueError as exc:
            raise EncodingError(f"Invalid threshold rule: {exc}") from exc
    raise EncodingError(f"Unknown rule tag {tag}")
