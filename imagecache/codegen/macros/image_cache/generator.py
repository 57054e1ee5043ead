"""
``@ImageCache`` generator implementation.

Expands an optional ``Data`` field into a hash token, a cache slot and a
memoized computed ``Image?`` accessor.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ...core.config import MacroConfig, load_config
from ...core.generator import MacroGenerator
from ...core.syntax import Attribute, InputDeclaration
from ....logging_config import get_logger
from .arguments import GenerationConfig, parse_arguments
from .strategies import DecodeStrategy, select_strategy
from .validator import DeclarationValidator, PropertySpec

logger = get_logger(__name__)

PEER_TEMPLATES = ("hash_field.swift.j2", "cache_field.swift.j2", "accessor.swift.j2")


class ImageCacheGenerator(MacroGenerator):
    """Peer-macro generator for buffer-backed image accessors."""

    def __init__(self, config: Optional[MacroConfig] = None):
        """Initialize generator with configuration."""
        super().__init__(config)
        self._strategy: Optional[DecodeStrategy] = None

    @property
    def macro_name(self) -> str:
        return "ImageCache"

    def get_template_directory(self) -> Path:
        """Return the ImageCache templates directory."""
        return Path(__file__).parent / "templates"

    @property
    def strategy(self) -> DecodeStrategy:
        """Decode strategy for the configured build target, resolved once."""
        if self._strategy is None:
            self._strategy = select_strategy(
                self.config.target_platform, self.config.resource_type, self.macro_name
            )
        return self._strategy

    def expand(self, attribute: Attribute, declaration: InputDeclaration) -> List[str]:
        """
        Expand ``@ImageCache`` on a declaration.

        The declaration is validated first, then the argument clause, and
        only then is the decode strategy resolved, so declaration errors are
        reported even on unsupported targets.
        """
        validator = DeclarationValidator(self.config, attribute.name)
        spec = validator.validate(declaration)
        generation = parse_arguments(attribute, self.config)
        strategy = self.strategy

        logger.info(
            "Expanding @%s on %s (line %d)",
            attribute.name,
            spec.source_name,
            declaration.location.line,
        )
        return self.generate_peers(spec, generation, strategy)

    def generate_peers(
        self,
        spec: PropertySpec,
        generation: GenerationConfig,
        strategy: DecodeStrategy,
    ) -> List[str]:
        """
        Render the hash field, the cache field and the accessor.

        Args:
            spec: Validated property names
            generation: Per-invocation settings
            strategy: Platform decode strategy

        Returns:
            The three peer declarations, in emission order
        """
        marker = self.config.persistence_marker if generation.emit_persistence_marker else None
        context = {
            "spec": spec,
            "strategy": strategy,
            "resource_type": self.config.resource_type,
            "marker": marker,
            "unit": self.config.indent_unit,
        }
        return [self.render_template(name, context) for name in PEER_TEMPLATES]

    def describe_configuration(self) -> Dict[str, Any]:
        return {
            "Suffix": self.config.suffix,
            "Source Type": self.config.expected_type,
            "Resource Type": self.config.resource_type,
            "Persistence Marker": self.config.persistence_marker,
            "Marker By Default": self.config.emit_persistence_marker,
            "Target Platform": self.config.target_platform or "host",
            "Indent": "tab" if self.config.use_tabs else f"{self.config.indent_size} spaces",
        }


def create_image_cache_generator(
    config: Optional[Dict[str, Any]] = None, **overrides
) -> ImageCacheGenerator:
    """
    Create an ImageCache generator.

    Args:
        config: Configuration overrides as a dict
        **overrides: Individual settings (e.g. ``target_platform="ios"``)

    Returns:
        Configured ImageCacheGenerator
    """
    merged = dict(config or {})
    merged.update(overrides)
    return ImageCacheGenerator(load_config("ImageCache", custom_config=merged))


# Presets for the common build targets
def create_ios_generator(**overrides) -> ImageCacheGenerator:
    """Create a generator for UIKit targets."""
    return create_image_cache_generator(target_platform="ios", **overrides)


def create_macos_generator(**overrides) -> ImageCacheGenerator:
    """Create a generator for AppKit targets."""
    return create_image_cache_generator(target_platform="macos", **overrides)


def create_swiftdata_generator(target_platform: Optional[str] = None) -> ImageCacheGenerator:
    """Create a generator that marks the generated fields ``@Transient`` by default."""
    return create_image_cache_generator(
        target_platform=target_platform, emit_persistence_marker=True
    )
