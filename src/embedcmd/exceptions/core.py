"""
Exception classes for embedded command processing.

This module defines specific exception types for the error conditions that
can occur while parsing call strings, loading command extensions and running
command handlers.
"""


class EmbedCommandError(Exception):
    """Base exception for all embedcmd errors."""

    pass


class GrammarError(EmbedCommandError):
    """Raised when a call string does not match the call-string grammar."""

    def __init__(self, call_string: str, reason: str):
        """
        Initialize the exception.

        Params:
            call_string: The call string that failed to parse
            reason: Why the call string was rejected
        """
        self.call_string = call_string
        self.reason = reason
        super().__init__(f"Invalid call string {call_string!r}: {reason}")


class CommandError(EmbedCommandError):
    """
    Raised by a command handler to report a named error.

    The message replaces the command in the output, wrapped as ``##message##``.
    Any value the handler would otherwise have produced is discarded.
    """

    def __init__(self, message: str):
        """
        Initialize the exception.

        Params:
            message: Error message to substitute into the document
        """
        self.message = message
        super().__init__(message)


class ExtensionLoadError(EmbedCommandError):
    """Raised when a command module exists but does not provide a handler."""

    def __init__(self, command_name: str, module_name: str, reason: str):
        """
        Initialize the exception.

        Params:
            command_name: The command whose extension failed to load
            module_name: Dotted name of the module that was imported
            reason: What is wrong with the module
        """
        self.command_name = command_name
        self.module_name = module_name
        self.reason = reason
        super().__init__(
            f"Cannot load command '{command_name}' from {module_name}: {reason}"
        )


class UnknownOperationError(EmbedCommandError):
    """Raised when dispatching an operation a handler does not implement."""

    def __init__(self, command_name: str, operation: str):
        self.command_name = command_name
        self.operation = operation
        super().__init__(
            f"Command '{command_name}' has no operation '{operation}'"
        )
