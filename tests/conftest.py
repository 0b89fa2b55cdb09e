"""
Shared test fixtures and fake command handlers for the embedcmd test suite.
"""

import html

import pytest

from embedcmd.commands import CommandHandler, ExtensionRegistry
from embedcmd.config import EmbedSettings
from embedcmd.core.types import EmbeddingType
from embedcmd.embedding import BlockEmbedding, InlineEmbedding
from embedcmd.exceptions import CommandError


class EchoCommand(CommandHandler):
    """Echoes its content, escaped, and records every call it receives."""

    def __init__(self, settings):
        super().__init__(settings)
        self.prepare_calls = []
        self.render_calls = []

    def prepare(self, embedding, parameters, parameter_index, content):
        self.prepare_calls.append((embedding, parameters, dict(parameter_index), content))
        return {"content": content, "upper": "upper" in parameter_index}

    def render(self, embedding, data, renderer=None):
        self.render_calls.append((embedding, data))
        text = data["content"].upper() if data["upper"] else data["content"]
        if embedding == EmbeddingType.BLOCK:
            return f"<div>{html.escape(text)}</div>"
        return html.escape(text)


class FailingPrepareCommand(CommandHandler):
    """Reports an error while preparing."""

    def __init__(self, settings):
        super().__init__(settings)
        self.render_calls = 0

    def prepare(self, embedding, parameters, parameter_index, content):
        raise CommandError("_BAD <INPUT>_")

    def render(self, embedding, data, renderer=None):
        self.render_calls += 1
        return "never"


class FailingRenderCommand(CommandHandler):
    """Prepares fine but reports an error while rendering."""

    def prepare(self, embedding, parameters, parameter_index, content):
        return content

    def render(self, embedding, data, renderer=None):
        raise CommandError("render & fail")


class SilentCommand(CommandHandler):
    """Relies on the defaults: prepares None, renders nothing."""

    pass


@pytest.fixture
def settings():
    """Settings searching only the bundled extensions."""
    return EmbedSettings()


@pytest.fixture
def registry(settings):
    """Isolated registry with the fake handlers registered."""
    registry = ExtensionRegistry(settings)
    registry.register("echo", EchoCommand)
    registry.register("failprep", FailingPrepareCommand)
    registry.register("failrender", FailingRenderCommand)
    registry.register("silent", SilentCommand)
    return registry


@pytest.fixture
def inline(registry):
    return InlineEmbedding(registry)


@pytest.fixture
def block(registry):
    return BlockEmbedding(registry)
