"""
embedcmd command handling.

This package contains the command handler base class and the registry that
resolves command names to handlers and memoizes their dispatch targets.
"""

from embedcmd.commands.base import CommandHandler
from embedcmd.commands.registry import (
    ExtensionHandle,
    ExtensionRegistry,
    handler_class_name,
)

__all__ = [
    "CommandHandler",
    "ExtensionHandle",
    "ExtensionRegistry",
    "handler_class_name",
]
