"""
imagecache code generation module.

Expands Swift attached macros from source text.
"""

from .registry import MacroRegistry, RegistryError, build_default_registry
from .core.generator import (
    Diagnostic,
    ExpansionResult,
    GeneratorError,
    MacroGenerator,
    generate_expansion,
)
from .core.syntax import InputDeclaration, SwiftSyntaxError, parse_declaration
from .core.config import MacroConfig, ConfigManager, ConfigError, load_config
from .expander import SourceExpander, SourceExpansion, expand_declaration, expand_source


def list_supported_macros(registry: MacroRegistry = None):
    """List macro names of a registry (the built-in one by default)."""
    return (registry or build_default_registry()).list_macros()


def list_all_macro_info(registry: MacroRegistry = None):
    """Get information about every macro of a registry."""
    registry = registry or build_default_registry()
    return {name: registry.get_macro_info(name) for name in registry.list_macros()}


# Export main interfaces
__all__ = [
    "MacroRegistry",
    "RegistryError",
    "build_default_registry",
    "MacroGenerator",
    "GeneratorError",
    "ExpansionResult",
    "Diagnostic",
    "generate_expansion",
    "InputDeclaration",
    "SwiftSyntaxError",
    "parse_declaration",
    "MacroConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    "SourceExpander",
    "SourceExpansion",
    "expand_declaration",
    "expand_source",
    "list_supported_macros",
    "list_all_macro_info",
]
