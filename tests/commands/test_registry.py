"""
Tests for the extension registry.

Covers module resolution from extension packages, negative caching,
direct registration and memoization of dispatch targets.
"""

import importlib
import importlib.util
import logging
import threading
from unittest.mock import patch

import pytest

from embedcmd.commands import CommandHandler, ExtensionRegistry, handler_class_name
from embedcmd.commands.registry import REGISTERED_MODULE
from embedcmd.config import EmbedSettings
from embedcmd.core.types import EmbeddingType
from embedcmd.exceptions import UnknownOperationError
from embedcmd.ext.abstract import AbstractCommand
from embedcmd.ext.dt import DtCommand


class TestResolution:
    """Tests for resolving command names to handlers."""

    def setup_method(self):
        """Create a registry searching the bundled extensions."""
        self.registry = ExtensionRegistry()

    def test_resolves_bundled_command(self):
        """Test that a bundled command module is found and loaded."""
        handle = self.registry.resolve("dt")
        assert handle is not None
        assert handle.name == "dt"
        assert handle.module_name == "embedcmd.ext.dt"
        assert isinstance(handle.handler, DtCommand)

    def test_resolution_is_case_insensitive(self):
        """Test that names are matched in lowercase."""
        assert self.registry.resolve("ABSTRACT") is self.registry.resolve("abstract")
        assert isinstance(self.registry.resolve("Abstract").handler, AbstractCommand)

    def test_handle_created_once(self):
        """Test that repeated resolution returns the same handle."""
        first = self.registry.resolve("dt")
        assert self.registry.resolve("dt") is first

    def test_handler_receives_settings(self):
        """Test that handlers are built with the registry settings."""
        settings = EmbedSettings(date_formats={"": "%Y"})
        registry = ExtensionRegistry(settings)
        assert registry.resolve("dt").handler.settings is settings

    def test_unknown_command_is_none(self):
        """Test that an unknown command resolves to None."""
        assert self.registry.resolve("zzz") is None
        assert not self.registry.is_known("zzz")
        assert self.registry.is_known("dt")

    def test_negative_result_is_cached(self):
        """Test that unknown names are looked up only once."""
        with patch(
            "embedcmd.commands.registry.importlib.util.find_spec",
            wraps=importlib.util.find_spec,
        ) as find_spec:
            assert self.registry.resolve("zzz") is None
            assert self.registry.resolve("zzz") is None
            assert self.registry.resolve("ZZZ") is None
        assert find_spec.call_count == 1

    def test_invalid_names_never_searched(self):
        """Test that names outside the command grammar are not looked up."""
        with patch("embedcmd.commands.registry.importlib.util.find_spec") as find_spec:
            assert self.registry.resolve("ext.dt") is None
            assert self.registry.resolve("../dt") is None
            assert self.registry.resolve("") is None
        find_spec.assert_not_called()

    def test_packages_searched_in_order(self, caplog):
        """Test that a missing package is skipped with a warning."""
        registry = ExtensionRegistry(
            EmbedSettings(extension_packages=["no_such_package_xyz", "embedcmd.ext"])
        )
        with caplog.at_level(logging.WARNING, logger="embedcmd.commands.registry"):
            handle = registry.resolve("dt")
        assert handle.module_name == "embedcmd.ext.dt"
        assert "no_such_package_xyz" in caplog.text

    def test_module_without_handler_class(self, caplog):
        """Test that a module lacking its handler class resolves to None."""
        registry = ExtensionRegistry(EmbedSettings(extension_packages=["embedcmd"]))
        with caplog.at_level(logging.WARNING, logger="embedcmd.commands.registry"):
            assert registry.resolve("config") is None
        assert "embedcmd.config" in caplog.text
        assert "ConfigCommand" in caplog.text

    def test_load_failure_is_cached(self):
        """Test that a module failing to load is not imported again."""
        registry = ExtensionRegistry(EmbedSettings(extension_packages=["embedcmd"]))
        with patch(
            "embedcmd.commands.registry.importlib.import_module",
            wraps=importlib.import_module,
        ) as import_module:
            assert registry.resolve("config") is None
            assert registry.resolve("config") is None
        assert import_module.call_count == 1

    def test_import_error_in_module(self, caplog):
        """Test that an import failure inside a command module resolves to None."""
        with patch(
            "embedcmd.commands.registry.importlib.import_module",
            side_effect=ImportError("missing dependency"),
        ):
            with caplog.at_level(logging.WARNING, logger="embedcmd.commands.registry"):
                assert self.registry.resolve("dt") is None
        assert "missing dependency" in caplog.text

    def test_handler_class_name(self):
        """Test derivation of handler class names from command names."""
        assert handler_class_name("dt") == "DtCommand"
        assert handler_class_name("abstract") == "AbstractCommand"
        assert handler_class_name("page_info") == "PageInfoCommand"

    def test_concurrent_first_resolution_builds_one_handle(self):
        """Test that racing first resolutions agree on one handle."""
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(self.registry.resolve("abstract"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(result is results[0] for result in results)


class TestRegistration:
    """Tests for registering handlers directly."""

    def test_register_class(self):
        """Test registering a handler class constructs it with settings."""
        registry = ExtensionRegistry()
        handle = registry.register("Fake", CommandHandler)
        assert handle.name == "fake"
        assert handle.module_name == REGISTERED_MODULE
        assert handle.handler.settings is registry.settings
        assert registry.resolve("fake") is handle

    def test_register_instance(self):
        """Test registering an existing handler instance."""
        registry = ExtensionRegistry()
        handler = CommandHandler(registry.settings)
        assert registry.register("fake", handler).handler is handler

    def test_registered_handler_shadows_modules(self):
        """Test that registration takes precedence over module search."""
        registry = ExtensionRegistry()
        registry.register("dt", CommandHandler)
        assert type(registry.resolve("dt").handler) is CommandHandler

    def test_register_after_negative_resolution(self):
        """Test that an unknown name can still be registered."""
        registry = ExtensionRegistry()
        assert registry.resolve("fake") is None
        registry.register("fake", CommandHandler)
        assert registry.resolve("fake") is not None

    def test_register_twice_fails(self):
        """Test that a resolved name cannot be rebound."""
        registry = ExtensionRegistry()
        registry.resolve("dt")
        with pytest.raises(ValueError, match="already resolved"):
            registry.register("dt", CommandHandler)

    def test_register_invalid_name(self):
        """Test that registered names must follow the command grammar."""
        with pytest.raises(ValueError, match="Invalid command name"):
            ExtensionRegistry().register("9lives", CommandHandler)


class TestDispatch:
    """Tests for memoized dispatch targets."""

    def setup_method(self):
        """Create registry and handle fixtures."""
        self.registry = ExtensionRegistry()
        self.handle = self.registry.register("plain", CommandHandler)

    def test_target_is_memoized(self):
        """Test that the same target object is returned every time."""
        first = self.registry.dispatch_target(self.handle, "render")
        second = self.registry.dispatch_target(self.handle, "render")
        assert first is second

    def test_targets_differ_per_operation(self):
        """Test that each operation gets its own target."""
        prepare = self.registry.dispatch_target(self.handle, "prepare")
        render = self.registry.dispatch_target(self.handle, "render")
        assert prepare is not render

    def test_target_not_rebuilt(self):
        """Test that memoized targets skip attribute lookup."""
        self.registry.dispatch_target(self.handle, "render")
        with patch("embedcmd.commands.registry.getattr", create=True) as lookup:
            self.registry.dispatch_target(self.handle, "render")
        lookup.assert_not_called()

    def test_dispatch_calls_handler(self):
        """Test that dispatch invokes the handler operation."""
        result = self.registry.dispatch(
            self.handle, "render", EmbeddingType.INLINE, "text"
        )
        assert result == "text"

    def test_unknown_operation(self):
        """Test that only handler operations can be dispatched."""
        with pytest.raises(UnknownOperationError):
            self.registry.dispatch_target(self.handle, "__init__")
