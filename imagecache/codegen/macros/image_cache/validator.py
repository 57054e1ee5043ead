"""
Declaration validation for ``@ImageCache``.

Checks the attached declaration against the structural and naming rules
and derives the names of the generated declarations.
"""

from dataclasses import dataclass

from ...core.config import MacroConfig
from ...core.syntax import InputDeclaration, PatternKind, TypeKind
from ....logging_config import get_logger
from .errors import (
    EmptyPrefix,
    InternalError,
    MustBeType,
    MustHaveSuffix,
    OnlyOneBinding,
    OnlyVariableDeclaration,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class PropertySpec:
    """Names derived from a validated source field."""

    source_name: str
    prefix: str

    @property
    def hash_field_name(self) -> str:
        return f"{self.prefix}Hash"

    @property
    def cache_field_name(self) -> str:
        return f"{self.prefix}Cache"

    @property
    def accessor_name(self) -> str:
        return self.prefix


class DeclarationValidator:
    """Validates declarations for a buffer-backed image accessor."""

    def __init__(self, config: MacroConfig = None, macro_name: str = "ImageCache"):
        self.config = config or MacroConfig()
        self.macro_name = macro_name

    def validate(self, declaration: InputDeclaration) -> PropertySpec:
        """
        Validate a declaration and derive its property names.

        Checks run in a fixed order and the first failure is raised:
        declaration kind and binding count, pattern shape, declared type,
        name suffix, non-empty prefix.

        Args:
            declaration: The declaration the attribute is attached to

        Returns:
            PropertySpec for the single binding

        Raises:
            ImageCacheError: The first rule the declaration breaks
        """
        macro = self.macro_name

        if not declaration.is_variable or declaration.binding_count == 0:
            raise OnlyVariableDeclaration(macro)
        if declaration.binding_count > 1:
            raise OnlyOneBinding(macro)

        binding = declaration.bindings[0]
        if binding.pattern.kind != PatternKind.IDENTIFIER or not binding.pattern.identifier:
            raise InternalError(macro)
        identifier = binding.pattern.identifier

        expected_type = self.config.expected_type
        annotation = binding.type_annotation
        if (
            annotation is None
            or annotation.kind != TypeKind.OPTIONAL
            or annotation.description != expected_type
        ):
            raise MustBeType(identifier, expected_type, macro)

        suffix = self.config.suffix
        if not identifier.endswith(suffix):
            raise MustHaveSuffix(identifier, suffix, macro)

        prefix = identifier[: len(identifier) - len(suffix)]
        if not prefix:
            raise EmptyPrefix(identifier, suffix, macro)

        logger.debug("Validated %s (prefix=%s)", identifier, prefix)
        return PropertySpec(source_name=identifier, prefix=prefix)
