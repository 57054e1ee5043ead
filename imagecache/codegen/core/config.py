"""
Configuration management for macro expansion.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class MacroConfig:
    """Base configuration for macro generators."""

    # Declaration rules
    suffix: str = "Data"
    raw_buffer_type: str = "Data"

    # Generated declarations
    resource_type: str = "Image"
    persistence_marker: str = "@Transient"
    emit_persistence_marker: bool = False
    argument_label: str = "useSwiftData"

    # Build target (None means the host platform)
    target_platform: Optional[str] = None

    # Code style settings
    indent_size: int = 4
    use_tabs: bool = False

    # Custom settings (macro-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # An empty suffix would turn every field name into its own accessor name.
        if not self.suffix:
            raise ConfigError("suffix must not be empty")

    @property
    def expected_type(self) -> str:
        """Rendered type a source field must be declared with."""
        return f"{self.raw_buffer_type}?"

    @property
    def indent_unit(self) -> str:
        return "\t" if self.use_tabs else " " * self.indent_size


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for known macros."""
        self._configs["imagecache"] = {
            "suffix": "Data",
            "raw_buffer_type": "Data",
            "resource_type": "Image",
            "persistence_marker": "@Transient",
            "emit_persistence_marker": False,
            "argument_label": "useSwiftData",
        }

    def get_config(
        self,
        macro: str = "ImageCache",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> MacroConfig:
        """
        Get complete configuration for a macro.

        Args:
            macro: Macro name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the macro
        """
        # Start with defaults
        base_config = dict(self._configs.get(macro.lower(), {}))

        # Load from file if provided
        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        # Apply custom overrides
        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration file %s (%d keys)", path, len(config))
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> MacroConfig:
        """Convert dictionary to MacroConfig instance."""
        # Extract known fields
        known_fields = set(MacroConfig.__dataclass_fields__)

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Add custom fields to the custom dict
        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return MacroConfig(**config_args)

    def save_config(self, config: MacroConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict = asdict(config)
        custom = config_dict.pop("custom")
        config_dict.update(custom)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {str(e)}") from e

    def list_macros(self) -> List[str]:
        """Get list of macros with default configurations."""
        return list(self._configs.keys())

    def validate_config(self, config: MacroConfig) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        if not config.suffix.isidentifier():
            warnings.append(f"Suffix is not a valid identifier part: {config.suffix!r}")

        if not config.raw_buffer_type:
            warnings.append("raw_buffer_type must not be empty")

        if not config.resource_type:
            warnings.append("resource_type must not be empty")

        if config.emit_persistence_marker and not config.persistence_marker.startswith("@"):
            warnings.append(
                f"Persistence marker should be an attribute: {config.persistence_marker!r}"
            )

        if config.indent_size < 1 and not config.use_tabs:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        return warnings


def load_config(
    macro: str = "ImageCache",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> MacroConfig:
    """
    Convenience function to load configuration.

    Args:
        macro: Macro name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the macro
    """
    return ConfigManager().get_config(macro, custom_config, config_file)


# Example configuration file for reference
EXAMPLE_CONFIG = {
    "target_platform": "ios",
    "emit_persistence_marker": True,
    "indent_size": 4,
}
