# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""peercli - client-side request shaping for a permissioned ledger peer CLI.

Sits between raw user input (flags, JSON blobs) and the requests sent to
peer and orderer services:

  Invocation specs (constructor JSON, new or legacy schema)
    → normalized arguments
  Peer addresses + TLS root cert files
    → validated, positionally paired connection parameters
  Collection configs (JSON array with signature policies)
    → compiled collection config package bytes

CLI entry point: ``peercli``
"""

__version__ = "1.0.0"

from . import (
    core as core,
)
