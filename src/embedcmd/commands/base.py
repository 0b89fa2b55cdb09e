"""
Base class for command handlers.

Each command is implemented by a subclass of ``CommandHandler`` living in its
own module, named after the command in lowercase. The handler class is named
after the command in CamelCase followed by ``Command``, so the ``dt`` command
lives in module ``dt`` as class ``DtCommand``.

Handlers are constructed once per process by the extension registry and must
not keep per-occurrence state: the same instance serves every occurrence on
every page, in whatever order the host renders them.

Commands that echo caller-supplied text must escape it, unless the purpose of
the command is to let the caller embed markup.
"""

from typing import TYPE_CHECKING

from embedcmd.core.types import EmbeddingType, ParameterIndex, PreparedValue
from embedcmd.parsing.parser import Parameter

if TYPE_CHECKING:
    from embedcmd.config import EmbedSettings
    from embedcmd.embedding.dispatcher import DocumentRenderer


class CommandHandler:
    """
    Two-phase implementation of one command.

    ``prepare`` runs once when the document is parsed and its result may be
    cached and persisted. ``render`` runs each time the document is output and
    turns the prepared value into replacement text. Either phase reports a
    problem by raising ``CommandError``; the message then replaces the command
    and any return value is ignored.
    """

    def __init__(self, settings: "EmbedSettings"):
        self.settings = settings

    def prepare(
        self,
        embedding: EmbeddingType,
        parameters: tuple[Parameter, ...],
        parameter_index: ParameterIndex,
        content: str,
    ) -> PreparedValue:
        """
        Pre-process a command occurrence into cacheable data.

        Commands that only produce static replacement text usually build all of
        it here and rely on the default ``render``. Parameters and content are
        only available in this phase, so anything ``render`` needs from them
        must be part of the returned value.

        Params:
            embedding: Whether the command was embedded inline or as a block
            parameters: All parameters in order of occurrence
            parameter_index: Lookup map of the same parameters, last one wins
            content: Text between the parentheses, empty if none

        Returns:
            Any picklable value, handed to ``render`` later

        Raises:
            CommandError: To replace the command with an error message
        """
        return None

    def render(
        self,
        embedding: EmbeddingType,
        data: PreparedValue,
        renderer: "DocumentRenderer | None" = None,
    ) -> str | None:
        """
        Produce the replacement text from the prepared data.

        The default returns the prepared data unchanged. Only commands with a
        dynamic part need to override it.

        Params:
            embedding: Whether the command was embedded inline or as a block
            data: Value returned by ``prepare``, possibly from an earlier process
            renderer: The host renderer, for commands that need to consult it

        Returns:
            Replacement text; None and the empty string are equivalent

        Raises:
            CommandError: To replace the command with an error message
        """
        return data
