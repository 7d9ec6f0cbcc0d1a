# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Collection configuration models.

``CollectionConfigEntry`` is the strict pydantic schema for one element of the
user-supplied JSON array. ``CollectionDescriptor`` and
``CollectionConfigPackage`` are the compiled, immutable forms consumed by the
codec.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from ..policy import PolicyNode

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
UINT64_MAX = 2**64 - 1


class CollectionConfigEntry(BaseModel):
    """One raw collection descriptor as written in the config file."""

    model_config = ConfigDict(strict=True, extra="ignore", populate_by_name=True, frozen=True)

    name: str = Field(..., min_length=1, description="Collection name")
    policy: str = Field(..., description="Member orgs policy expression")
    required_peer_count: int = Field(
        0,
        alias="requiredPeerCount",
        ge=0,
        le=INT32_MAX,
        description="Peers the private data must reach before endorsement",
    )
    # Not checked against required_peer_count; see compiler
    maximum_peer_count: int = Field(
        0,
        alias="maxPeerCount",
        ge=INT32_MIN,
        le=INT32_MAX,
        description="Upper bound of peers the private data is disseminated to",
    )
    block_to_live: int = Field(
        0,
        alias="blockToLive",
        ge=0,
        le=UINT64_MAX,
        description="Blocks after which the private data is purged (0 = never)",
    )
    member_only_read: bool = Field(False, alias="memberOnlyRead")
    member_only_write: bool = Field(False, alias="memberOnlyWrite")


@dataclass(frozen=True)
class CollectionDescriptor:
    """A validated collection with its compiled member policy."""

    name: str
    policy: PolicyNode
    required_peer_count: int = 0
    maximum_peer_count: int = 0
    block_to_live: int = 0
    member_only_read: bool = False
    member_only_write: bool = False


@dataclass(frozen=True)
class CollectionConfigPackage:
    """Ordered collection descriptors, as embedded in a deployment request."""

    collections: tuple[CollectionDescriptor, ...] = ()

    def __len__(self) -> int:
        return len(self.collections)

    def __getitem__(self, index: int) -> CollectionDescriptor:
        return self.collections[index]

    def names(self) -> list[str]:
        return [collection.name for collection in self.collections]
