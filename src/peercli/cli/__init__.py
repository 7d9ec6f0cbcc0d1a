# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""peercli command-line interface."""

from .main import app, main

__all__ = ["main", "app"]
