"""
Command embeddings: recognize and render embedded commands.

A command embedding is a syntax whose matches consist of an open delimiter,
a call string, a parenthesized content block and a close delimiter:

    %name?params(content)%      inline embedding
    #name?params(content)#      block embedding

Processing has two host-facing entry points. ``recognize`` runs once when the
document is parsed and returns a ``PreparedCommand`` that the host may cache
or persist. ``render`` runs on every output of the document and appends the
replacement text for a prepared command to the host renderer, without
re-parsing the match.
"""

import logging
import re
from dataclasses import dataclass
from typing import NamedTuple, Protocol

from embedcmd.commands.registry import ExtensionRegistry
from embedcmd.config import EmbedSettings
from embedcmd.core.types import (
    INVALID_SYNTAX,
    LITERAL_MARKER,
    NOT_FOUND,
    EmbeddingType,
    PreparedValue,
    escape_html,
    wrap_error,
)
from embedcmd.exceptions import CommandError, GrammarError
from embedcmd.parsing.parser import NAME_CHARS, CallParser

logger = logging.getLogger(__name__)

# The host lexer cannot express the parameter grammar, so its pattern accepts
# any run of parameter characters and the parser reports malformed lists.
LEX_CALL = rf"{NAME_CHARS}(?:\?[a-zA-Z0-9_.\-=&]*)?"


class DocumentRenderer(Protocol):
    """Host output sink: rendered text is appended to ``doc``."""

    doc: str


@dataclass
class TextRenderer:
    """Minimal document renderer collecting output in a string."""

    doc: str = ""


class PreparedCommand(NamedTuple):
    """
    Result of recognizing one command occurrence.

    ``command`` is the lowercase command name, or ``LITERAL_MARKER`` when
    ``payload`` is literal text (a sentinel or an error message) to be output
    escaped instead of running a command.
    """

    command: str
    payload: PreparedValue
    embedding: EmbeddingType

    @property
    def is_literal(self) -> bool:
        return self.command == LITERAL_MARKER


class CommandEmbedding:
    """
    Base class for command embedding syntaxes.

    Subclasses set the embedding type and the delimiter characters; parsing,
    resolution and the two-phase dispatch are shared.
    """

    embedding_type: EmbeddingType
    open_delimiter: str
    close_delimiter: str

    def __init__(
        self,
        registry: ExtensionRegistry,
        parser: CallParser | None = None,
    ):
        self.registry = registry
        self.parser = parser or CallParser()
        self.pattern = re.compile(
            re.escape(self.open_delimiter)
            + LEX_CALL
            + r"\(.*?\)"
            + re.escape(self.close_delimiter),
            re.DOTALL,
        )

    @property
    def settings(self) -> EmbedSettings:
        return self.registry.settings

    def split_match(self, match: str) -> tuple[str, str]:
        """
        Split a matched command into its call string and content.

        Params:
            match: Full matched text, delimiters included

        Returns:
            Tuple of (call_string, content); content may be empty

        Raises:
            ValueError: If the text is not delimited for this embedding
        """
        suffix = ")" + self.close_delimiter
        paren_pos = match.find("(", len(self.open_delimiter))
        if (
            not match.startswith(self.open_delimiter)
            or not match.endswith(suffix)
            or paren_pos < 0
            or paren_pos > len(match) - len(suffix)
        ):
            raise ValueError(
                f"Not a {self.embedding_type.value} command: {match!r}"
            )

        call_string = match[len(self.open_delimiter) : paren_pos]
        content = match[paren_pos + 1 : len(match) - len(suffix)]
        return call_string, content

    def recognize(self, match: str) -> PreparedCommand:
        """
        Parse a matched command and run the prepare phase of its handler.

        Never fails for a bad command: syntax errors, unknown commands and
        handler-reported errors become literal payloads.

        Params:
            match: Full matched text, delimiters included

        Returns:
            The cacheable prepared command
        """
        call_string, content = self.split_match(match)

        try:
            call = self.parser.parse(call_string)
        except GrammarError as e:
            logger.debug(f"Invalid command syntax: {e}")
            return self._literal(INVALID_SYNTAX)

        handle = self.registry.resolve(call.name)
        if handle is None:
            return self._literal(NOT_FOUND)

        try:
            data = self.registry.dispatch(
                handle,
                "prepare",
                self.embedding_type,
                call.parameters,
                call.parameter_index,
                content,
            )
        except CommandError as e:
            logger.debug(f"Command '{call.name}' reported an error: {e.message}")
            return self._literal(wrap_error(e.message))

        return PreparedCommand(call.name, data, self.embedding_type)

    def render(
        self, mode: str, renderer: DocumentRenderer, prepared: PreparedCommand
    ) -> bool:
        """
        Append the replacement text of a prepared command to the renderer.

        Params:
            mode: Host output mode; only the configured output mode is handled
            renderer: Document sink whose ``doc`` receives the output
            prepared: Value returned by ``recognize``, possibly from a cache

        Returns:
            True if the mode was handled, False otherwise
        """
        if mode != self.settings.output_mode:
            return False

        command, payload = prepared[0], prepared[1]
        if command == LITERAL_MARKER:
            renderer.doc += escape_html(payload)
            return True

        handle = self.registry.resolve(command)
        if handle is None:
            renderer.doc += NOT_FOUND
            return True

        try:
            output = self.registry.dispatch(
                handle, "render", self.embedding_type, payload, renderer
            )
        except CommandError as e:
            logger.debug(f"Command '{command}' reported an error: {e.message}")
            renderer.doc += escape_html(e.message)
            return True

        if output:
            renderer.doc += output
        return True

    def _literal(self, text: str) -> PreparedCommand:
        return PreparedCommand(LITERAL_MARKER, text, self.embedding_type)


class InlineEmbedding(CommandEmbedding):
    """Command whose output is embedded inline: ``%name?params(content)%``."""

    embedding_type = EmbeddingType.INLINE
    open_delimiter = "%"
    close_delimiter = "%"


class BlockEmbedding(CommandEmbedding):
    """Command whose output is block-embedded: ``#name?params(content)#``."""

    embedding_type = EmbeddingType.BLOCK
    open_delimiter = "#"
    close_delimiter = "#"


def create_embeddings(
    settings: EmbedSettings | None = None,
) -> tuple[InlineEmbedding, BlockEmbedding]:
    """
    Build both embeddings around one shared registry.

    Params:
        settings: Settings for the registry, defaults if omitted

    Returns:
        Tuple of (inline, block) embeddings
    """
    registry = ExtensionRegistry(settings)
    return InlineEmbedding(registry), BlockEmbedding(registry)
