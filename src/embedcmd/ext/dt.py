"""
Date/time command: formats a date/time to a pre-configured format.

    %dt(2024-05-01 14:30)%      default format
    %dt?short(2024-05-01)%      format variant "short"
    %dt()%                      current date/time

Formats come from ``EmbedSettings.date_formats``. A format value may carry a
CSS class before a ``|``; the output is then wrapped in an element with that
class.
"""

import html
from datetime import datetime

from embedcmd.commands.base import CommandHandler
from embedcmd.core.types import EmbeddingType, escape_html
from embedcmd.exceptions import CommandError
from embedcmd.parsing.parser import BareValue


class DtCommand(CommandHandler):
    """Format the content as a date/time, entirely in the prepare phase."""

    def prepare(self, embedding, parameters, parameter_index, content):
        variant = None
        if len(parameters) == 1 and isinstance(parameters[0], BareValue):
            variant = parameters[0].value
        elif parameters:
            raise CommandError("_INVALID_DT_PARAMETERS_")

        css_class, date_format = self.settings.date_format(variant)

        if date_format:
            text = self._parse(content).strftime(date_format)
        else:
            text = content
        text = escape_html(text)

        if embedding == EmbeddingType.BLOCK:
            if css_class:
                return f"<div class='{html.escape(css_class)}'>{text}</div>"
            return f"<div>{text}</div>"
        if css_class:
            return f"<span class='{html.escape(css_class)}'>{text}</span>"
        return text

    def _parse(self, content: str) -> datetime:
        content = content.strip()
        if not content:
            return self._now()
        try:
            return datetime.fromisoformat(content)
        except ValueError:
            raise CommandError("_INVALID_DT_VALUE_") from None

    def _now(self) -> datetime:
        return datetime.now()
