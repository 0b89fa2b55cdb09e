"""
Parser for embedded command call strings.

A call string is the command name plus its parameter list, without the
surrounding delimiters and content. Its grammar, in W3C-style BNF:

    call   ::= name ('?' param ('&' param)*)?
    param  ::= value | name '=' value?
    name   ::= [a-zA-Z] [a-zA-Z0-9_]*
    value  ::= [a-zA-Z0-9_.\\-]+

The grammar has no nested structure, so a call string is validated with a
single anchored pattern and then split on its separators.
"""

import re
from types import MappingProxyType

from attrs import Factory, field, frozen

from embedcmd.exceptions import GrammarError

NAME_CHARS = r"[a-zA-Z][a-zA-Z0-9_]*"
VALUE_CHARS = r"[a-zA-Z0-9_.\-]"


@frozen
class BareValue:
    """A parameter given as a single value with no name (``?a``)."""

    value: str

    @property
    def key(self) -> str:
        return self.value

    @property
    def index_value(self) -> str:
        return ""

    def __str__(self) -> str:
        return self.value


@frozen
class NamedAssignment:
    """A parameter given as ``name=value``; the value may be empty (``b=``)."""

    name: str
    value: str = ""

    @property
    def key(self) -> str:
        return self.name

    @property
    def index_value(self) -> str:
        return self.value

    def __str__(self) -> str:
        return f"{self.name}={self.value}"


Parameter = BareValue | NamedAssignment


def build_parameter_index(parameters: tuple[Parameter, ...]) -> MappingProxyType:
    """
    Reduce an ordered parameter sequence to its lookup map.

    Bare values map to the empty string, assignments map their name to their
    value. A later occurrence of the same key overwrites an earlier one.

    Params:
        parameters: Parameters in order of occurrence

    Returns:
        Read-only mapping from parameter key to effective value
    """
    index = {}
    for parameter in parameters:
        index[parameter.key] = parameter.index_value
    return MappingProxyType(index)


@frozen
class Call:
    """
    A parsed call string.

    ``parameters`` keeps the exact shape of the call, every occurrence in
    source order. ``parameter_index`` is the convenience view keyed by name
    (or by value for bare values). It is computed from ``parameters`` when
    the call is built and cannot be set independently.

    Params:
        name: Command name, lowercased
        parameters: Parameters in order of occurrence, empty if none
    """

    name: str
    parameters: tuple[Parameter, ...] = field(default=(), converter=tuple)
    parameter_index: MappingProxyType = field(
        init=False,
        eq=False,
        repr=False,
        default=Factory(
            lambda self: build_parameter_index(self.parameters), takes_self=True
        ),
    )

    def __str__(self) -> str:
        if not self.parameters:
            return self.name
        return f"{self.name}?" + "&".join(str(p) for p in self.parameters)


class CallParser:
    """Parser for command call strings."""

    PARAM = rf"(?:{VALUE_CHARS}+|{NAME_CHARS}={VALUE_CHARS}*)"

    CALL_PATTERN = re.compile(
        rf"(?P<name>{NAME_CHARS})(?:\?(?P<params>{PARAM}(?:&{PARAM})*))?"
    )

    ASSIGNMENT_PATTERN = re.compile(
        rf"(?P<name>{NAME_CHARS})=(?P<value>{VALUE_CHARS}*)"
    )

    def parse(self, call_string: str) -> Call:
        """
        Parse a call string into a Call.

        Params:
            call_string: Command name and optional parameter list

        Returns:
            The parsed call with a lowercased command name

        Raises:
            GrammarError: If the string does not match the grammar
        """
        if not call_string:
            raise GrammarError(call_string, "empty call string")

        match = self.CALL_PATTERN.fullmatch(call_string)
        if match is None:
            raise GrammarError(call_string, self._diagnose(call_string))

        name = match.group("name").lower()
        raw_params = match.group("params")
        if raw_params is None:
            return Call(name)

        return Call(name, [self._parse_param(raw) for raw in raw_params.split("&")])

    def _parse_param(self, raw_param: str) -> Parameter:
        """Turn one already-validated parameter into its model."""
        if "=" not in raw_param:
            return BareValue(raw_param)

        match = self.ASSIGNMENT_PATTERN.fullmatch(raw_param)
        return NamedAssignment(match.group("name"), match.group("value"))

    def _diagnose(self, call_string: str) -> str:
        """Find a human-readable reason for a rejected call string."""
        name, separator, params = call_string.partition("?")

        if not re.fullmatch(NAME_CHARS, name):
            return f"invalid command name {name!r}"
        if separator and not params:
            return "'?' must be followed by at least one parameter"

        for position, raw_param in enumerate(params.split("&"), start=1):
            if not raw_param:
                return f"empty parameter at position {position}"
            if not re.fullmatch(self.PARAM, raw_param):
                return f"malformed parameter {raw_param!r} at position {position}"

        return "does not match call grammar"


_default_parser = CallParser()


def parse_call(call_string: str) -> Call:
    """
    Convenience function to parse a single call string.

    Params:
        call_string: Command name and optional parameter list

    Returns:
        The parsed call

    Raises:
        GrammarError: If the string does not match the grammar
    """
    return _default_parser.parse(call_string)
