"""
Core type definitions for embedcmd.

This module contains the embedding type enum, the literal sentinels that are
substituted into host output, and the value aliases shared by the parser,
the registry and the dispatcher.
"""

import html
from collections.abc import Mapping
from enum import Enum
from typing import Any


class EmbeddingType(Enum):
    """How a command occurrence is embedded in the host document."""

    INLINE = "inline"  # output stays inside the surrounding paragraph
    BLOCK = "block"  # output is placed outside any paragraph


# Marker used as command name of a prepared command whose payload is literal text
LITERAL_MARKER = "="

NOT_FOUND = "##_COMMAND_NOT_FOUND_##"
INVALID_SYNTAX = "##_INVALID_COMMAND_SYNTAX_##"

PreparedValue = Any

ParameterIndex = Mapping[str, str]


def wrap_error(message: str) -> str:
    """Wrap a handler-reported error message the way it appears in output."""
    return f"##{message}##"


def escape_html(text: str) -> str:
    """Escape ``&``, ``<``, ``>`` and ``"`` for output; single quotes are kept."""
    return html.escape(text, quote=False).replace('"', "&quot;")
