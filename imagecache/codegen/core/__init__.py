"""
Core code generation components.

Provides base classes and utilities used by all macro generators.
"""

from .generator import (
    Diagnostic,
    ExpansionResult,
    GeneratorError,
    MacroGenerator,
    generate_expansion,
)
from .syntax import (
    Attribute,
    Binding,
    DeclarationKind,
    DeclarationParser,
    InputDeclaration,
    PatternKind,
    SourceLocation,
    SwiftSyntaxError,
    TypeKind,
    TypeSyntax,
    parse_declaration,
    tokenize,
)
from .config import MacroConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "MacroGenerator",
    "GeneratorError",
    "ExpansionResult",
    "Diagnostic",
    "generate_expansion",
    # Swift declaration model
    "Attribute",
    "Binding",
    "DeclarationKind",
    "DeclarationParser",
    "InputDeclaration",
    "PatternKind",
    "SourceLocation",
    "SwiftSyntaxError",
    "TypeKind",
    "TypeSyntax",
    "parse_declaration",
    "tokenize",
    # Configuration system
    "MacroConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
