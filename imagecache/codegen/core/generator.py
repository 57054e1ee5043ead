"""
Base generator interface for all macro expansions.

Defines the contract that every attached-macro generator must implement.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .templates import TemplateEngine, create_template_engine

if TYPE_CHECKING:
    from .config import MacroConfig
    from .syntax import Attribute, InputDeclaration


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class MacroGenerator(ABC):
    """Abstract base class for attached-macro generators."""

    def __init__(self, config: Optional["MacroConfig"] = None):
        """Initialize generator with optional configuration."""
        if config is None:
            from .config import MacroConfig

            config = MacroConfig()
        self.config = config
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            # Fallback to in-memory templates
            self._template_engine = create_template_engine()

    @property
    @abstractmethod
    def macro_name(self) -> str:
        """Return the attribute name the macro is invoked with (e.g. 'ImageCache')."""
        pass

    @property
    def role(self) -> str:
        """Return the attached-macro role of the generated declarations."""
        return "peer"

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.

        Returns:
            Path to template directory or None
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def expand(
        self, attribute: "Attribute", declaration: "InputDeclaration"
    ) -> List[str]:
        """
        Expand one attribute attached to a declaration.

        Args:
            attribute: The attribute that invoked this macro
            declaration: The declaration the attribute is attached to

        Returns:
            Generated declarations, in emission order

        Raises:
            GeneratorError: If the declaration cannot be expanded
        """
        pass

    def describe_configuration(self) -> Dict[str, Any]:
        """Return settings worth showing to a user, keyed by display name."""
        return {}

    def format_code(self, code: str) -> str:
        """
        Apply formatting to a generated declaration.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n")

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


@dataclass(frozen=True)
class Diagnostic:
    """A single error attached to a source position."""

    kind: str
    message: str
    line: int = 0
    column: int = 0
    source_name: str = "<input>"

    @classmethod
    def from_error(
        cls, error: GeneratorError, location=None, source_name: str = "<input>"
    ) -> "Diagnostic":
        """Build a diagnostic from a raised generator error."""
        location = getattr(error, "location", None) or location
        kind = getattr(error, "kind", type(error).__name__)
        message = getattr(error, "message", None) or str(error)
        line = location.line if location is not None else 0
        column = location.column if location is not None else 0
        return cls(kind, message, line, column, source_name)

    def format(self) -> str:
        return f"{self.source_name}:{self.line}:{self.column}: error: {self.message}"

    def __str__(self) -> str:
        return self.format()


class ExpansionResult:
    """Container for the output of one macro invocation."""

    def __init__(
        self,
        peers: List[str],
        diagnostics: List[Diagnostic] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize expansion result.

        Args:
            peers: Generated declarations in emission order
            diagnostics: Diagnostics raised by the expansion
            metadata: Additional metadata about the expansion
        """
        self.peers = peers
        self.diagnostics = diagnostics or []
        self.metadata = metadata or {}
        self.success = not self.diagnostics

    @property
    def code(self) -> str:
        """All peers joined as they would appear in source."""
        return "\n".join(self.peers)

    @property
    def error_message(self) -> Optional[str]:
        return self.diagnostics[0].message if self.diagnostics else None

    @classmethod
    def error(cls, diagnostic: Diagnostic) -> "ExpansionResult":
        """Create a failed expansion result."""
        return cls(peers=[], diagnostics=[diagnostic])


def generate_expansion(
    generator: MacroGenerator,
    attribute: "Attribute",
    declaration: "InputDeclaration",
    source_name: str = "<input>",
) -> ExpansionResult:
    """
    Expand a macro with error handling.

    A failure never yields partial output: the result holds either every
    peer or a single diagnostic.

    Args:
        generator: Macro generator instance
        attribute: Invoking attribute
        declaration: Declaration the attribute is attached to
        source_name: File name used in diagnostics

    Returns:
        ExpansionResult with peers, diagnostics, and metadata
    """
    try:
        peers = [generator.format_code(peer) for peer in generator.expand(attribute, declaration)]
    except GeneratorError as e:
        return ExpansionResult.error(
            Diagnostic.from_error(e, declaration.location, source_name)
        )

    metadata = {
        "macro": generator.macro_name,
        "attribute": attribute.name,
        "role": generator.role,
        "declaration_kind": declaration.kind.value,
        "peer_count": len(peers),
        "line": declaration.location.line,
    }
    return ExpansionResult(peers, metadata=metadata)
