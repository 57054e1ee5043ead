"""
Source-level macro expansion.

Finds every declaration in a Swift file that carries a registered
attribute and rewrites the file the way the compiler presents an
expansion: the attribute is dropped, the declaration is kept, and the
generated peers follow it at the same indentation.
"""

from bisect import bisect_left
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .core.config import MacroConfig
from .core.generator import (
    Diagnostic,
    ExpansionResult,
    MacroGenerator,
    generate_expansion,
)
from .core.syntax import (
    Attribute,
    DeclarationParser,
    InputDeclaration,
    SwiftSyntaxError,
    Token,
    TokenKind,
    parse_declaration,
    tokenize,
)
from .registry import MacroRegistry, build_default_registry
from ..logging_config import get_logger

logger = get_logger(__name__)

ConfigInput = Optional[Union[MacroConfig, Dict[str, Any], str, Path]]


@dataclass
class SourceExpansion:
    """Result of expanding a whole source file."""

    source: str
    original: str
    source_name: str = "<input>"
    expansions: List[ExpansionResult] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.diagnostics

    @property
    def changed(self) -> bool:
        return self.source != self.original

    @property
    def expanded_count(self) -> int:
        return sum(1 for result in self.expansions if result.success)


class SourceExpander:
    """Expands registered attributes across a source file."""

    def __init__(self, registry: MacroRegistry, config: ConfigInput = None):
        """
        Initialize the expander.

        Args:
            registry: Registry deciding which attributes are macros
            config: Configuration handed to every generator the registry creates
        """
        self.registry = registry
        self.config = config
        self._generators: Dict[str, MacroGenerator] = {}

    def generator_for(self, name: str) -> MacroGenerator:
        """Return the (cached) generator for an attribute name."""
        primary = self.registry.resolve(name)
        if primary not in self._generators:
            self._generators[primary] = self.registry.create_generator(primary, self.config)
        return self._generators[primary]

    def expand_declaration(
        self, declaration: InputDeclaration, source_name: str = "<input>"
    ) -> List[ExpansionResult]:
        """Expand every registered attribute of one declaration."""
        results = []
        for attribute in self._macro_attributes(declaration.attributes):
            generator = self.generator_for(attribute.name)
            results.append(generate_expansion(generator, attribute, declaration, source_name))
        return results

    def expand(self, source: str, source_name: str = "<input>") -> SourceExpansion:
        """
        Expand all registered attributes in a source text.

        A declaration whose expansion fails is left untouched and its
        diagnostic is collected; other declarations are still expanded.

        Args:
            source: Swift source text
            source_name: Name used in diagnostics

        Returns:
            SourceExpansion with the rewritten text and all diagnostics
        """
        outcome = SourceExpansion(source=source, original=source, source_name=source_name)

        try:
            tokens = tokenize(source)
        except SwiftSyntaxError as e:
            outcome.diagnostics.append(Diagnostic.from_error(e, source_name=source_name))
            return outcome

        parser = DeclarationParser(source, tokens)
        token_starts = [token.start for token in tokens]
        edits: List[Tuple[int, int, str]] = []

        index = 0
        while index < len(tokens) - 1:
            token = tokens[index]
            if not self._starts_declaration(tokens, index):
                index += 1
                continue

            parser.index = index
            try:
                attributes = parser.parse_attributes()
            except SwiftSyntaxError:
                index += 1
                continue
            after_attributes = parser.index

            if not self._macro_attributes(attributes):
                index = after_attributes
                continue

            try:
                declaration, next_index = parser.parse(index)
            except SwiftSyntaxError as e:
                logger.debug("Could not read declaration at %s: %s", token.location, e)
                outcome.diagnostics.append(Diagnostic.from_error(e, source_name=source_name))
                index = after_attributes
                continue

            results = self.expand_declaration(declaration, source_name)
            outcome.expansions.extend(results)
            failures = [d for result in results for d in result.diagnostics]
            if failures:
                outcome.diagnostics.extend(failures)
            else:
                peers = [peer for result in results for peer in result.peers]
                end = _insertion_point(source, tokens, token_starts, declaration)
                replacement = self._render_replacement(
                    source, tokens, token_starts, declaration, end, peers
                )
                edits.append((declaration.start, end, replacement))

            # Members of a type still need to be scanned
            index = next_index if declaration.is_variable else after_attributes

        outcome.source = _apply_edits(source, edits)
        logger.info(
            "Expanded %d declaration(s) in %s with %d diagnostic(s)",
            len(edits),
            source_name,
            len(outcome.diagnostics),
        )
        return outcome

    def _macro_attributes(self, attributes: List[Attribute]) -> List[Attribute]:
        return [attribute for attribute in attributes if attribute.name in self.registry]

    @staticmethod
    def _starts_declaration(tokens: List[Token], index: int) -> bool:
        token = tokens[index]
        if token.kind != TokenKind.PUNCTUATION or token.text != "@":
            return False
        if index == 0:
            return True
        previous = tokens[index - 1]
        if previous.kind == TokenKind.PUNCTUATION and previous.text in ("{", "}", ";"):
            return True
        return previous.line < token.line

    def _render_replacement(
        self,
        source: str,
        tokens: List[Token],
        token_starts: List[int],
        declaration: InputDeclaration,
        end: int,
        peers: List[str],
    ) -> str:
        # Drop each macro attribute together with the whitespace after it
        removals = []
        for attribute in self._macro_attributes(declaration.attributes):
            next_token = tokens[bisect_left(token_starts, attribute.end)]
            removals.append((attribute.start, min(next_token.start, declaration.end)))

        text = source[declaration.start:end]
        for removal_start, removal_end in sorted(removals, reverse=True):
            text = (
                text[: removal_start - declaration.start]
                + text[removal_end - declaration.start:]
            )

        indent = _line_indentation(source, declaration.start)
        for peer in peers:
            text += "\n" + _indent_block(peer, indent)
        return text


def _insertion_point(
    source: str, tokens: List[Token], token_starts: List[int], declaration: InputDeclaration
) -> int:
    """Offset the peers are inserted at, past a trailing line comment if any."""
    line_end = source.find("\n", declaration.end)
    if line_end == -1:
        line_end = len(source)

    next_token = tokens[bisect_left(token_starts, declaration.end)]
    if next_token.kind != TokenKind.EOF and next_token.start < line_end:
        return declaration.end

    rest = source[declaration.end:line_end].strip()
    if rest and not rest.startswith("//"):
        return declaration.end
    return line_end


def _line_indentation(source: str, offset: int) -> str:
    line_start = source.rfind("\n", 0, offset) + 1
    line = source[line_start:offset]
    return line[: len(line) - len(line.lstrip(" \t"))]


def _indent_block(code: str, indent: str) -> str:
    return "\n".join(indent + line if line.strip() else line for line in code.split("\n"))


def _apply_edits(source: str, edits: List[Tuple[int, int, str]]) -> str:
    for start, end, replacement in sorted(edits, reverse=True):
        source = source[:start] + replacement + source[end:]
    return source


# Convenience functions


def expand_source(
    source: str,
    registry: Optional[MacroRegistry] = None,
    config: ConfigInput = None,
    source_name: str = "<input>",
) -> SourceExpansion:
    """
    Expand every registered attribute in Swift source.

    Args:
        source: Swift source text
        registry: Registry to use (defaults to the built-in macros)
        config: Generator configuration
        source_name: Name used in diagnostics

    Returns:
        SourceExpansion
    """
    expander = SourceExpander(registry or build_default_registry(), config)
    return expander.expand(source, source_name)


def expand_declaration(
    source: str,
    registry: Optional[MacroRegistry] = None,
    config: ConfigInput = None,
    source_name: str = "<input>",
) -> ExpansionResult:
    """
    Expand a single attributed declaration.

    Args:
        source: Text holding exactly one declaration, e.g.
            ``"@ImageCache\\nvar profilePictureData: Data?"``
        registry: Registry to use (defaults to the built-in macros)
        config: Generator configuration
        source_name: Name used in diagnostics

    Returns:
        ExpansionResult with the peers or a single diagnostic
    """
    try:
        declaration = parse_declaration(source)
    except SwiftSyntaxError as e:
        return ExpansionResult.error(Diagnostic.from_error(e, source_name=source_name))

    expander = SourceExpander(registry or build_default_registry(), config)
    results = expander.expand_declaration(declaration, source_name)
    if not results:
        return ExpansionResult.error(
            Diagnostic(
                "NoMacro",
                "Declaration carries no registered macro attribute",
                declaration.location.line,
                declaration.location.column,
                source_name,
            )
        )

    failures = [result for result in results if not result.success]
    if failures:
        return failures[0]
    if len(results) == 1:
        return results[0]
    return ExpansionResult(
        [peer for result in results for peer in result.peers],
        metadata={"macros": [result.metadata.get("macro") for result in results]},
    )
