"""
Registry resolving command names to their handlers.

The registry owns every loaded handler and every memoized dispatch target of
the process. Command modules are looked up by name in the configured
extension packages, imported at most once, and both positive and negative
lookups are remembered: the set of candidate modules is static for the
lifetime of the process.
"""

import importlib
import importlib.util
import logging
import re
import threading
from collections.abc import Callable
from typing import Any

from attrs import frozen
from inflection import camelize

from embedcmd.commands.base import CommandHandler
from embedcmd.config import EmbedSettings
from embedcmd.exceptions import ExtensionLoadError, UnknownOperationError
from embedcmd.parsing.parser import NAME_CHARS

logger = logging.getLogger(__name__)

COMMAND_NAME_PATTERN = re.compile(NAME_CHARS)

REGISTERED_MODULE = "<registered>"


@frozen
class ExtensionHandle:
    """
    A loaded command handler.

    Params:
        name: Lowercase command name
        module_name: Dotted module the handler came from, or ``<registered>``
            for handlers registered directly
        handler: The handler instance shared by every occurrence
    """

    name: str
    module_name: str
    handler: CommandHandler


def handler_class_name(command_name: str) -> str:
    """Name of the handler class a command module must define."""
    return f"{camelize(command_name)}Command"


class ExtensionRegistry:
    """
    Process-wide registry of command handlers.

    Resolution and dispatch-target creation are lazy and guarded by a lock so
    concurrent first uses of the same command build a single handle. Entries
    never change once written, so lookups of known names take no lock.
    """

    OPERATIONS = frozenset({"prepare", "render"})

    def __init__(self, settings: EmbedSettings | None = None):
        self.settings = settings or EmbedSettings()
        self._handles: dict[str, ExtensionHandle | None] = {}
        self._dispatch_targets: dict[tuple[str, str], Callable[..., Any]] = {}
        self._lock = threading.RLock()

    def register(
        self, command_name: str, handler: CommandHandler | type[CommandHandler]
    ) -> ExtensionHandle:
        """
        Register a handler directly, bypassing the module search.

        Params:
            command_name: Command name, matched case-insensitively
            handler: Handler instance, or a handler class to construct with
                the registry settings

        Returns:
            The new handle

        Raises:
            ValueError: If the name is invalid or already resolved to a handler
        """
        if not COMMAND_NAME_PATTERN.fullmatch(command_name):
            raise ValueError(f"Invalid command name: {command_name!r}")
        name = command_name.lower()

        if isinstance(handler, type):
            handler = handler(self.settings)

        with self._lock:
            if self._handles.get(name) is not None:
                raise ValueError(f"Command '{name}' is already resolved")
            handle = ExtensionHandle(name, REGISTERED_MODULE, handler)
            self._handles[name] = handle

        logger.debug(f"Registered command '{name}': {type(handler).__name__}")
        return handle

    def resolve(self, command_name: str) -> ExtensionHandle | None:
        """
        Resolve a command name to its handler.

        Safe to call repeatedly; the first call for a name does the module
        lookup and import, later calls return the remembered result.

        Params:
            command_name: Command name, matched case-insensitively

        Returns:
            The handle, or None if no extension exists for the command or
            its module cannot be loaded as one
        """
        name = command_name.lower()
        if name in self._handles:
            return self._handles[name]

        with self._lock:
            if name in self._handles:
                return self._handles[name]

            handle = None
            if COMMAND_NAME_PATTERN.fullmatch(name):
                module_name = self._find_module(name)
                if module_name is not None:
                    try:
                        handle = self._load(name, module_name)
                    except ExtensionLoadError as e:
                        logger.warning(str(e))

            if handle is None:
                logger.debug(f"No extension found for command '{name}'")
            self._handles[name] = handle
            return handle

    def is_known(self, command_name: str) -> bool:
        """Check whether a command resolves to a handler."""
        return self.resolve(command_name) is not None

    def dispatch_target(
        self, handle: ExtensionHandle, operation: str
    ) -> Callable[..., Any]:
        """
        Get the memoized callable for one operation of a handler.

        Params:
            handle: Handle returned by ``resolve``
            operation: ``prepare`` or ``render``

        Returns:
            The bound handler method, the same object on every call

        Raises:
            UnknownOperationError: If the operation is not a handler operation
        """
        key = (handle.name, operation)
        target = self._dispatch_targets.get(key)
        if target is not None:
            return target

        with self._lock:
            target = self._dispatch_targets.get(key)
            if target is None:
                if operation not in self.OPERATIONS:
                    raise UnknownOperationError(handle.name, operation)
                target = getattr(handle.handler, operation)
                self._dispatch_targets[key] = target
                logger.debug(f"Bound {handle.name}.{operation}")
            return target

    def dispatch(
        self, handle: ExtensionHandle, operation: str, *args: Any, **kwargs: Any
    ) -> Any:
        """Invoke an operation of a handler through its memoized target."""
        return self.dispatch_target(handle, operation)(*args, **kwargs)

    def _find_module(self, name: str) -> str | None:
        """Find the first extension package providing a module for the command."""
        for package in self.settings.extension_packages:
            module_name = f"{package}.{name}"
            try:
                spec = importlib.util.find_spec(module_name)
            except ModuleNotFoundError:
                logger.warning(f"Extension package '{package}' cannot be imported")
                continue
            if spec is not None:
                return module_name
        return None

    def _load(self, name: str, module_name: str) -> ExtensionHandle:
        """Import a command module and construct its handler."""
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise ExtensionLoadError(name, module_name, str(e)) from e

        class_name = handler_class_name(name)
        handler_class = getattr(module, class_name, None)
        if not (
            isinstance(handler_class, type) and issubclass(handler_class, CommandHandler)
        ):
            raise ExtensionLoadError(
                name, module_name, f"no CommandHandler subclass named {class_name}"
            )

        logger.debug(f"Loaded command '{name}' from {module_name}")
        return ExtensionHandle(name, module_name, handler_class(self.settings))
