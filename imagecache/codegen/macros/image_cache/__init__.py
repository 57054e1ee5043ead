"""
ImageCache macro module.

Expands ``@ImageCache`` on an optional ``Data`` field into a memoized
``Image?`` accessor.
"""

from .arguments import GenerationConfig, parse_arguments
from .errors import (
    EmptyPrefix,
    ImageCacheError,
    InternalError,
    MustBeBoolLiteral,
    MustBeType,
    MustHaveSuffix,
    OnlyOneBinding,
    OnlyVariableDeclaration,
    OsNotSupported,
    TooManyArguments,
)
from .generator import (
    ImageCacheGenerator,
    create_image_cache_generator,
    create_ios_generator,
    create_macos_generator,
    create_swiftdata_generator,
)
from .strategies import AppKitStrategy, DecodeStrategy, UIKitStrategy, select_strategy
from .validator import DeclarationValidator, PropertySpec

__all__ = [
    "ImageCacheGenerator",
    "DeclarationValidator",
    "PropertySpec",
    "GenerationConfig",
    "parse_arguments",
    "DecodeStrategy",
    "UIKitStrategy",
    "AppKitStrategy",
    "select_strategy",
    # Errors
    "ImageCacheError",
    "InternalError",
    "OnlyVariableDeclaration",
    "OnlyOneBinding",
    "MustBeType",
    "MustHaveSuffix",
    "EmptyPrefix",
    "OsNotSupported",
    "MustBeBoolLiteral",
    "TooManyArguments",
    # Factory functions
    "create_image_cache_generator",
    "create_ios_generator",
    "create_macos_generator",
    "create_swiftdata_generator",
]
