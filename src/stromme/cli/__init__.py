"""
Strømme CLI package.

Provides the command-line interface with auto-discovery of commands from
the ``commands/`` subfolder.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
"""
from ._output import OutputFormatter
from ._args import add_json_flag, add_logging_flags

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_logging_flags",
]
