"""
Core embedcmd components.

This package provides the fundamental type definitions and output sentinels
shared by every other part of the framework.
"""

from embedcmd.core.types import (
    INVALID_SYNTAX,
    LITERAL_MARKER,
    NOT_FOUND,
    EmbeddingType,
    ParameterIndex,
    PreparedValue,
    escape_html,
    wrap_error,
)

__all__ = [
    "EmbeddingType",
    "INVALID_SYNTAX",
    "LITERAL_MARKER",
    "NOT_FOUND",
    "ParameterIndex",
    "PreparedValue",
    "escape_html",
    "wrap_error",
]
