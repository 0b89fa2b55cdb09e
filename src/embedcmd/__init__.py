"""
embedcmd - Commands embedded in documents, recognized and rendered in two phases

embedcmd parses ``%name?params(content)%`` and ``#name?params(content)#``
occurrences, resolves the command name to a pluggable handler, and produces
cacheable prepared data followed by the final replacement text.
"""

from importlib.metadata import version

from embedcmd.commands import CommandHandler, ExtensionRegistry
from embedcmd.config import EmbedSettings
from embedcmd.core.types import INVALID_SYNTAX, NOT_FOUND, EmbeddingType
from embedcmd.embedding import (
    BlockEmbedding,
    InlineEmbedding,
    PreparedCommand,
    TextRenderer,
    create_embeddings,
)
from embedcmd.exceptions import CommandError, GrammarError
from embedcmd.parsing import Call, parse_call

__version__ = version("embedcmd")

__all__ = [
    "__version__",
    "BlockEmbedding",
    "Call",
    "CommandError",
    "CommandHandler",
    "EmbedSettings",
    "EmbeddingType",
    "ExtensionRegistry",
    "GrammarError",
    "INVALID_SYNTAX",
    "InlineEmbedding",
    "NOT_FOUND",
    "PreparedCommand",
    "TextRenderer",
    "create_embeddings",
    "parse_call",
]
