# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Output formatting for CLI commands.

Results are printed as pretty JSON, or as ``key: value`` lines in text mode.
"""

from __future__ import annotations

import json
import sys
from typing import Any

OUTPUT_FORMATS = ("json", "text")


def output_result(data: dict[str, Any], output_format: str = "json") -> None:
    """Print a command result in the requested format."""
    if output_format == "text":
        for key, value in data.items():
            if isinstance(value, dict | list):
                value = json.dumps(value, default=str)
            print(f"{key}: {value}")
    else:
        print(json.dumps(data, indent=2, default=str))


def output_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"Error: {message}", file=sys.stderr)
