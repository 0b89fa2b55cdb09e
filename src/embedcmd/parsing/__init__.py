"""
embedcmd parsing components.

This package provides call-string parsing and the parameter model handed to
command handlers.
"""

from embedcmd.parsing.parser import (
    BareValue,
    Call,
    CallParser,
    NamedAssignment,
    Parameter,
    build_parameter_index,
    parse_call,
)

__all__ = [
    "BareValue",
    "Call",
    "CallParser",
    "NamedAssignment",
    "Parameter",
    "build_parameter_index",
    "parse_call",
]
