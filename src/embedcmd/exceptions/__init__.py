"""
embedcmd exception classes.

This package provides all exception types used throughout embedcmd for
consistent error handling and reporting.
"""

from embedcmd.exceptions.core import (
    CommandError,
    EmbedCommandError,
    ExtensionLoadError,
    GrammarError,
    UnknownOperationError,
)

__all__ = [
    "EmbedCommandError",
    "CommandError",
    "ExtensionLoadError",
    "GrammarError",
    "UnknownOperationError",
]
