"""
Abstract command: shortens its content to a fixed number of characters.

    %abstract?40(Some long introduction ...)%
"""

from embedcmd.commands.base import CommandHandler
from embedcmd.core.types import EmbeddingType, escape_html
from embedcmd.exceptions import CommandError
from embedcmd.parsing.parser import BareValue


class AbstractCommand(CommandHandler):
    def prepare(self, embedding, parameters, parameter_index, content):
        length = 0
        if len(parameters) == 1 and isinstance(parameters[0], BareValue):
            if not parameters[0].value.isdigit():
                raise CommandError("_INVALID_ABSTRACT_PARAMETERS_")
            length = int(parameters[0].value)
        elif parameters:
            raise CommandError("_INVALID_ABSTRACT_PARAMETERS_")

        text = content.strip()
        if length and length < len(text):
            text = text[:length] + self.settings.ellipsis
        text = escape_html(text)

        if embedding == EmbeddingType.BLOCK:
            return f"<div>{text}</div>"
        return text
