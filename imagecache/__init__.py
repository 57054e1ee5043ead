"""
imagecache: expands the ``@ImageCache`` Swift macro.

``@ImageCache`` turns an optional ``Data`` field into a memoized
``Image?`` accessor plus the hash and cache fields backing it.
"""

__version__ = "0.1.0"

from .codegen import (
    Diagnostic,
    ExpansionResult,
    MacroConfig,
    MacroRegistry,
    SourceExpansion,
    build_default_registry,
    expand_declaration,
    expand_source,
    load_config,
)
from .runtime import CachedImage, ImageDecoder, PillowDecoder

__all__ = [
    "__version__",
    "Diagnostic",
    "ExpansionResult",
    "MacroConfig",
    "MacroRegistry",
    "SourceExpansion",
    "build_default_registry",
    "expand_declaration",
    "expand_source",
    "load_config",
    "CachedImage",
    "ImageDecoder",
    "PillowDecoder",
]
