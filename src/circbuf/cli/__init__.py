"""Command-line interface for circbuf.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Polyline and point-set buffers from command-line coordinates
- Join, cap and internal corner style selection
- Verbose/quiet output modes
- Detailed error reporting
"""

from circbuf.cli.app import cli, main

__all__ = ["cli", "main"]
