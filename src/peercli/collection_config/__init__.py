# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Private data collection configuration: schema, compiler and codec."""

from .codec import PACKAGE_MAGIC, PACKAGE_VERSION, CollectionConfigCodec
from .compiler import (
    build_collection_package,
    compile_collection_config,
    compile_collection_config_file,
    decode_collection_config_package,
    parse_collection_entries,
)
from .models import CollectionConfigEntry, CollectionConfigPackage, CollectionDescriptor

__all__ = [
    "CollectionConfigCodec",
    "CollectionConfigEntry",
    "CollectionConfigPackage",
    "CollectionDescriptor",
    "PACKAGE_MAGIC",
    "PACKAGE_VERSION",
    "build_collection_package",
    "compile_collection_config",
    "compile_collection_config_file",
    "decode_collection_config_package",
    "parse_collection_entries",
]
