"""
embedcmd embedding syntaxes.

This package provides the inline and block command embeddings that drive the
recognize and render phases for matched commands.
"""

from embedcmd.embedding.dispatcher import (
    BlockEmbedding,
    CommandEmbedding,
    DocumentRenderer,
    InlineEmbedding,
    PreparedCommand,
    TextRenderer,
    create_embeddings,
)

__all__ = [
    "BlockEmbedding",
    "CommandEmbedding",
    "DocumentRenderer",
    "InlineEmbedding",
    "PreparedCommand",
    "TextRenderer",
    "create_embeddings",
]
