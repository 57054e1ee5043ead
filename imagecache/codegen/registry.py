"""
Macro registry for mapping attribute names to generators.

A registry is built once at startup and handed to whatever expands source;
there is no process-wide instance.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from .core.config import MacroConfig, load_config
from .core.generator import MacroGenerator
from ..logging_config import get_logger

logger = get_logger(__name__)


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class MacroRegistry:
    """Registry for managing available macro generators."""

    def __init__(self):
        """Initialize empty registry."""
        self._generators: Dict[str, Type[MacroGenerator]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        name: str,
        generator_class: Type[MacroGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a generator for an attribute name.

        Attribute names are matched case-sensitively, as Swift does.

        Args:
            name: Primary attribute name (e.g., 'ImageCache')
            generator_class: Generator class implementing MacroGenerator
            aliases: Alternative attribute names for this macro
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If generator class is invalid or conflicts exist
        """
        if not isinstance(generator_class, type) or not issubclass(
            generator_class, MacroGenerator
        ):
            raise RegistryError("Generator class must inherit from MacroGenerator")

        if name in self._aliases:
            raise RegistryError(f"'{name}' is already registered as an alias")

        if name in self._generators and not replace:
            logger.debug("Macro %s already registered, skipping", name)
            return

        self._generators[name] = generator_class
        logger.debug("Registered macro %s -> %s", name, generator_class.__name__)

        for alias in aliases or []:
            if alias == name:
                continue

            if not replace:
                if alias in self._generators:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing primary macro"
                    )
                if alias in self._aliases and self._aliases[alias] != name:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias]}'"
                    )

            self._aliases[alias] = name

    def unregister(self, name: str):
        """
        Unregister a generator and its aliases.

        Args:
            name: Macro name to unregister
        """
        self._generators.pop(name, None)

        aliases_to_remove = [
            alias for alias, target in self._aliases.items() if target == name
        ]
        for alias in aliases_to_remove:
            del self._aliases[alias]

    def resolve(self, name: str) -> str:
        """Return the primary name for a name or alias."""
        if name in self._generators:
            return name
        if name in self._aliases:
            return self._aliases[name]

        available = self.list_macros()
        raise RegistryError(
            f"No generator registered for macro: {name}. "
            f"Available: {', '.join(available) or 'none'}"
        )

    def get_generator_class(self, name: str) -> Type[MacroGenerator]:
        """
        Get generator class for an attribute name.

        Args:
            name: Macro name or alias

        Returns:
            Generator class

        Raises:
            RegistryError: If the name is not registered
        """
        return self._generators[self.resolve(name)]

    def create_generator(
        self,
        name: str,
        config: Optional[Union[MacroConfig, Dict[str, Any], str, Path]] = None,
    ) -> MacroGenerator:
        """
        Create generator instance for a macro.

        Args:
            name: Macro name
            config: Configuration as MacroConfig, dict, or file path

        Returns:
            Configured generator instance

        Raises:
            RegistryError: If generator creation fails
        """
        generator_class = self.get_generator_class(name)
        primary = self.resolve(name)

        try:
            if isinstance(config, MacroConfig):
                final_config = config
            elif isinstance(config, (str, Path)):
                final_config = load_config(primary, config_file=config)
            elif isinstance(config, dict):
                final_config = load_config(primary, custom_config=config)
            elif config is None:
                final_config = load_config(primary)
            else:
                raise RegistryError(f"Invalid config type: {type(config)}")

            return generator_class(final_config)

        except RegistryError:
            raise
        except Exception as e:
            raise RegistryError(f"Failed to create {name} generator: {e}") from e

    def list_macros(self) -> List[str]:
        """Get list of registered primary macro names."""
        return sorted(self._generators.keys())

    def get_aliases_for_macro(self, name: str) -> List[str]:
        """
        Get all aliases for a specific macro.

        Args:
            name: Primary macro name

        Returns:
            List of aliases for this macro
        """
        return sorted(alias for alias, target in self._aliases.items() if target == name)

    def list_all_names(self) -> Dict[str, List[str]]:
        """Map each primary macro to all names it answers to."""
        return {
            name: [name] + self.get_aliases_for_macro(name) for name in self.list_macros()
        }

    def is_supported(self, name: str) -> bool:
        """Check whether an attribute name invokes a registered macro."""
        return name in self._generators or name in self._aliases

    def get_macro_info(self, name: str) -> Dict[str, Any]:
        """
        Get information about a registered macro.

        Args:
            name: Macro name or alias

        Returns:
            Dict with macro information

        Raises:
            RegistryError: If the macro is not registered
        """
        generator_class = self.get_generator_class(name)
        primary = self.resolve(name)

        # Create temporary instance to get info
        temp_generator = generator_class(load_config(primary))

        return {
            "name": temp_generator.macro_name,
            "class": generator_class.__name__,
            "role": temp_generator.role,
            "aliases": self.get_aliases_for_macro(primary),
            "module": generator_class.__module__,
        }

    def __contains__(self, name: str) -> bool:
        return self.is_supported(name)


def build_default_registry() -> MacroRegistry:
    """
    Build a registry with every macro shipped in this package.

    Returns:
        A new registry; callers own it and pass it on explicitly
    """
    from .macros.image_cache import ImageCacheGenerator

    registry = MacroRegistry()
    registry.register("ImageCache", ImageCacheGenerator)
    return registry
