"""
Call-site argument parsing for ``@ImageCache``.

The attribute takes at most one argument, a boolean literal that turns the
persistence-exclusion marker on or off.
"""

from dataclasses import dataclass

from ...core.config import MacroConfig
from ...core.syntax import Attribute
from .errors import MustBeBoolLiteral, TooManyArguments


@dataclass(frozen=True)
class GenerationConfig:
    emit_persistence_marker: bool = False


def parse_arguments(attribute: Attribute, config: MacroConfig = None) -> GenerationConfig:
    """
    Interpret the argument clause of an ``@ImageCache`` attribute.

    ``@ImageCache`` and ``@ImageCache()`` use the configured default. A
    single argument must be the literal ``true`` or ``false``, optionally
    labelled with the declared parameter name.

    Args:
        attribute: The invoking attribute
        config: Macro configuration supplying the default and the label

    Returns:
        GenerationConfig for this invocation

    Raises:
        TooManyArguments: More than one argument was given
        MustBeBoolLiteral: The argument is not a boolean literal
    """
    config = config or MacroConfig()
    macro = attribute.name

    if not attribute.arguments:
        return GenerationConfig(emit_persistence_marker=config.emit_persistence_marker)

    if len(attribute.arguments) > 1:
        raise TooManyArguments(len(attribute.arguments), macro)

    argument = attribute.arguments[0]
    if argument.label is not None and argument.label != config.argument_label:
        raise MustBeBoolLiteral(macro)
    if not argument.is_boolean_literal:
        raise MustBeBoolLiteral(macro)

    return GenerationConfig(emit_persistence_marker=argument.boolean_value)
