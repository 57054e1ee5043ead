"""
Swift declaration reader.

Turns Swift source text into the declaration model that macro generators
work on. Only the declaration-level grammar is understood: attributes,
modifiers, variable bindings with their type annotations, and enough of
every other declaration to find where it ends.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .generator import GeneratorError


class SwiftSyntaxError(GeneratorError):
    """Raised when Swift source cannot be read as a declaration."""

    def __init__(self, message: str, location: Optional["SourceLocation"] = None):
        self.location = location
        self.kind = "SyntaxError"
        if location is not None:
            message = f"{message} at {location}"
        super().__init__(message)


@dataclass(frozen=True)
class SourceLocation:
    """1-based line and column of a token, plus its character offset."""

    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class TokenKind(Enum):
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"
    PUNCTUATION = "punctuation"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    start: int
    end: int
    line: int
    column: int

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.start)


_IDENTIFIER_RE = re.compile(r"`[A-Za-z_][A-Za-z0-9_]*`|[A-Za-z_][A-Za-z0-9_]*|\$[A-Za-z0-9_]+")
_NUMBER_RE = re.compile(
    r"0[xX][0-9A-Fa-f_]+|0[bB][01_]+|0[oO][0-7_]+|\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d+)?"
)
_PUNCTUATION_RE = re.compile(r"->|\.\.\.|\.\.<|[-+*/%=<>!&|^~?.,:;()\[\]{}@#\\]")


def tokenize(source: str) -> List[Token]:
    """
    Split Swift source into tokens.

    Whitespace and comments are dropped. String literals (including
    multi-line literals and interpolations) become single tokens.

    Args:
        source: Swift source text

    Returns:
        Tokens in source order, terminated by an EOF token

    Raises:
        SwiftSyntaxError: On unterminated literals or comments and on
            characters outside the Swift token set
    """
    tokens: List[Token] = []
    pos = 0
    line = 1
    line_start = 0
    length = len(source)

    while pos < length:
        ch = source[pos]

        if ch == "\n":
            line += 1
            line_start = pos + 1
            pos += 1
            continue
        if ch in " \t\r\f\v":
            pos += 1
            continue

        location = SourceLocation(line, pos - line_start + 1, pos)

        if source.startswith("//", pos):
            newline = source.find("\n", pos)
            pos = length if newline == -1 else newline
            continue
        if source.startswith("/*", pos):
            end = _scan_block_comment(source, pos, location)
            line += source.count("\n", pos, end)
            if "\n" in source[pos:end]:
                line_start = source.rfind("\n", pos, end) + 1
            pos = end
            continue

        if ch == '"':
            end = _scan_string(source, pos, location)
            kind, text = TokenKind.STRING, source[pos:end]
        else:
            for kind, pattern in (
                (TokenKind.IDENTIFIER, _IDENTIFIER_RE),
                (TokenKind.NUMBER, _NUMBER_RE),
                (TokenKind.PUNCTUATION, _PUNCTUATION_RE),
            ):
                match = pattern.match(source, pos)
                if match:
                    text = match.group(0)
                    end = match.end()
                    break
            else:
                raise SwiftSyntaxError(f"Unexpected character {ch!r}", location)

        tokens.append(Token(kind, text, pos, end, location.line, location.column))

        newlines = text.count("\n")
        if newlines:
            line += newlines
            line_start = pos + text.rfind("\n") + 1
        pos = end

    tokens.append(Token(TokenKind.EOF, "", length, length, line, length - line_start + 1))
    return tokens


def _scan_block_comment(source: str, start: int, location: SourceLocation) -> int:
    depth = 0
    pos = start
    while pos < len(source):
        if source.startswith("/*", pos):
            depth += 1
            pos += 2
        elif source.startswith("*/", pos):
            depth -= 1
            pos += 2
            if depth == 0:
                return pos
        else:
            pos += 1
    raise SwiftSyntaxError("Unterminated block comment", location)


def _scan_string(source: str, start: int, location: SourceLocation) -> int:
    if source.startswith('"""', start):
        end = source.find('"""', start + 3)
        if end == -1:
            raise SwiftSyntaxError("Unterminated multi-line string literal", location)
        return end + 3

    pos = start + 1
    while pos < len(source):
        ch = source[pos]
        if ch == "\\":
            if source.startswith("\\(", pos):
                pos = _scan_interpolation(source, pos + 2, location)
            else:
                pos += 2
            continue
        if ch == '"':
            return pos + 1
        if ch == "\n":
            break
        pos += 1
    raise SwiftSyntaxError("Unterminated string literal", location)


def _scan_interpolation(source: str, pos: int, location: SourceLocation) -> int:
    depth = 1
    while pos < len(source):
        ch = source[pos]
        if ch == '"':
            pos = _scan_string(source, pos, location)
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return pos + 1
        elif ch == "\n":
            break
        pos += 1
    raise SwiftSyntaxError("Unterminated string interpolation", location)


# Declaration model


class DeclarationKind(Enum):
    VARIABLE = "variable"
    CLASS = "class"
    STRUCT = "struct"
    ENUM = "enum"
    PROTOCOL = "protocol"
    ACTOR = "actor"
    EXTENSION = "extension"
    FUNCTION = "function"
    INITIALIZER = "initializer"
    DEINITIALIZER = "deinitializer"
    SUBSCRIPT = "subscript"
    TYPEALIAS = "typealias"
    ASSOCIATED_TYPE = "associatedtype"
    ENUM_CASE = "case"
    IMPORT = "import"
    MACRO = "macro"
    OPERATOR = "operator"
    PRECEDENCE_GROUP = "precedencegroup"


DECLARATION_KEYWORDS = {
    "var": DeclarationKind.VARIABLE,
    "let": DeclarationKind.VARIABLE,
    "class": DeclarationKind.CLASS,
    "struct": DeclarationKind.STRUCT,
    "enum": DeclarationKind.ENUM,
    "protocol": DeclarationKind.PROTOCOL,
    "actor": DeclarationKind.ACTOR,
    "extension": DeclarationKind.EXTENSION,
    "func": DeclarationKind.FUNCTION,
    "init": DeclarationKind.INITIALIZER,
    "deinit": DeclarationKind.DEINITIALIZER,
    "subscript": DeclarationKind.SUBSCRIPT,
    "typealias": DeclarationKind.TYPEALIAS,
    "associatedtype": DeclarationKind.ASSOCIATED_TYPE,
    "case": DeclarationKind.ENUM_CASE,
    "import": DeclarationKind.IMPORT,
    "macro": DeclarationKind.MACRO,
    "operator": DeclarationKind.OPERATOR,
    "precedencegroup": DeclarationKind.PRECEDENCE_GROUP,
}

MODIFIERS = {
    "private", "fileprivate", "internal", "public", "open", "package",
    "static", "class", "final", "lazy", "weak", "unowned", "override",
    "mutating", "nonmutating", "dynamic", "required", "convenience",
    "optional", "indirect", "nonisolated", "distributed", "prefix",
    "postfix", "infix", "consuming", "borrowing",
}  # fmt: skip

# Tokens that let an expression continue on the following line
_CONTINUATION_TOKENS = {
    ".", "?", ":", "&", "|", "+", "-", "*", "/", "%", "=", "<", ">", "^",
    "->", ",", "(", "[", "where", "throws", "async", "rethrows",
}  # fmt: skip

_EXPRESSION_TERMINATORS = (",", ";", ")", "]", "}")


class TypeKind(Enum):
    SIMPLE = "simple"
    OPTIONAL = "optional"
    IMPLICITLY_UNWRAPPED = "implicitly_unwrapped"
    ARRAY = "array"
    DICTIONARY = "dictionary"
    TUPLE = "tuple"
    FUNCTION = "function"
    CONSTRAINED = "constrained"  # some P / any P
    COMPOSITION = "composition"  # P & Q


@dataclass(frozen=True)
class TypeSyntax:
    """A parsed type annotation, rendered canonically by ``description``."""

    kind: TypeKind
    name: str = ""
    arguments: Tuple["TypeSyntax", ...] = ()
    labels: Tuple[Optional[str], ...] = ()
    specifier: str = ""

    @property
    def wrapped_type(self) -> Optional["TypeSyntax"]:
        """Inner type of an optional or implicitly unwrapped optional."""
        if self.kind in (TypeKind.OPTIONAL, TypeKind.IMPLICITLY_UNWRAPPED):
            return self.arguments[0]
        return None

    @property
    def description(self) -> str:
        if self.kind == TypeKind.SIMPLE:
            return self.name
        if self.kind in (TypeKind.OPTIONAL, TypeKind.IMPLICITLY_UNWRAPPED):
            inner = self.arguments[0]
            text = inner.description
            if inner.kind in (TypeKind.FUNCTION, TypeKind.COMPOSITION, TypeKind.CONSTRAINED):
                text = f"({text})"
            return text + ("?" if self.kind == TypeKind.OPTIONAL else "!")
        if self.kind == TypeKind.ARRAY:
            return f"[{self.arguments[0].description}]"
        if self.kind == TypeKind.DICTIONARY:
            key, value = self.arguments
            return f"[{key.description}: {value.description}]"
        if self.kind == TypeKind.TUPLE:
            return f"({_render_elements(self.arguments, self.labels)})"
        if self.kind == TypeKind.FUNCTION:
            params = self.arguments[:-1]
            effects = f" {self.specifier}" if self.specifier else ""
            return (
                f"({_render_elements(params, self.labels)}){effects}"
                f" -> {self.arguments[-1].description}"
            )
        if self.kind == TypeKind.CONSTRAINED:
            return f"{self.specifier} {self.arguments[0].description}"
        return " & ".join(arg.description for arg in self.arguments)

    def __str__(self) -> str:
        return self.description


def _render_elements(types: Tuple[TypeSyntax, ...], labels: Tuple[Optional[str], ...]) -> str:
    parts = []
    for index, element in enumerate(types):
        label = labels[index] if index < len(labels) else None
        parts.append(f"{label}: {element.description}" if label else element.description)
    return ", ".join(parts)


class PatternKind(Enum):
    IDENTIFIER = "identifier"
    WILDCARD = "wildcard"
    TUPLE = "tuple"


@dataclass
class Pattern:
    kind: PatternKind
    text: str
    location: SourceLocation
    identifier: Optional[str] = None
    elements: List["Pattern"] = field(default_factory=list)


@dataclass
class Binding:
    """One ``pattern: Type = initializer { accessors }`` entry of a variable."""

    pattern: Pattern
    type_annotation: Optional[TypeSyntax] = None
    initializer: Optional[str] = None
    accessor_block: Optional[str] = None


@dataclass
class Argument:
    """A single argument of an attribute's argument clause."""

    label: Optional[str]
    expression: str
    tokens: Tuple[Token, ...]
    location: SourceLocation

    @property
    def is_boolean_literal(self) -> bool:
        return len(self.tokens) == 1 and self.tokens[0].text in ("true", "false")

    @property
    def boolean_value(self) -> Optional[bool]:
        if not self.is_boolean_literal:
            return None
        return self.tokens[0].text == "true"


@dataclass
class Attribute:
    """``@Name`` or ``@Name(arguments)`` attached to a declaration."""

    name: str
    arguments: Optional[List[Argument]]
    location: SourceLocation
    start: int
    end: int

    @property
    def argument_count(self) -> int:
        return len(self.arguments) if self.arguments else 0


@dataclass
class InputDeclaration:
    """A declaration as read from source, with the attributes attached to it."""

    kind: DeclarationKind
    keyword: str
    location: SourceLocation
    start: int
    end: int
    text: str
    attributes: List[Attribute] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)
    bindings: List[Binding] = field(default_factory=list)
    name: Optional[str] = None

    @property
    def is_variable(self) -> bool:
        return self.kind == DeclarationKind.VARIABLE

    @property
    def binding_count(self) -> int:
        return len(self.bindings)

    def find_attribute(self, name: str) -> Optional[Attribute]:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None


class DeclarationParser:
    """Recursive-descent reader for Swift declarations."""

    def __init__(self, source: str, tokens: Optional[List[Token]] = None):
        self.source = source
        self.tokens = tokens if tokens is not None else tokenize(source)
        self.index = 0

    # Token cursor

    def _peek(self, offset: int = 0) -> Token:
        position = min(self.index + offset, len(self.tokens) - 1)
        return self.tokens[position]

    def _previous(self) -> Optional[Token]:
        return self.tokens[self.index - 1] if self.index > 0 else None

    def _advance(self) -> Token:
        token = self._peek()
        if token.kind != TokenKind.EOF:
            self.index += 1
        return token

    def _check(self, text: str) -> bool:
        token = self._peek()
        return token.kind != TokenKind.STRING and token.text == text

    def _expect(self, text: str) -> Token:
        if not self._check(text):
            token = self._peek()
            found = token.text or "end of input"
            raise SwiftSyntaxError(f"Expected '{text}' but found '{found}'", token.location)
        return self._advance()

    def _expect_identifier(self, what: str) -> Token:
        token = self._peek()
        if token.kind != TokenKind.IDENTIFIER:
            found = token.text or "end of input"
            raise SwiftSyntaxError(f"Expected {what} but found '{found}'", token.location)
        return self._advance()

    def _starts_new_line(self, token: Token) -> bool:
        previous = self._previous()
        if previous is None or token.line <= previous.line:
            return False
        return previous.text not in _CONTINUATION_TOKENS and token.text not in _CONTINUATION_TOKENS

    # Declarations

    def parse(self, index: int = 0) -> Tuple[InputDeclaration, int]:
        """
        Read one declaration starting at a token index.

        Args:
            index: Index of the first token (an attribute, modifier or keyword)

        Returns:
            The declaration and the index of the first token after it
        """
        self.index = index
        first = self._peek()
        attributes = self.parse_attributes()
        modifiers = self._parse_modifiers()

        keyword_token = self._peek()
        kind = DECLARATION_KEYWORDS.get(keyword_token.text)
        if keyword_token.kind != TokenKind.IDENTIFIER or kind is None:
            found = keyword_token.text or "end of input"
            raise SwiftSyntaxError(
                f"Expected a declaration but found '{found}'", keyword_token.location
            )
        self._advance()

        bindings: List[Binding] = []
        name = None
        if kind == DeclarationKind.VARIABLE:
            bindings = self._parse_bindings()
        else:
            if self._peek().kind == TokenKind.IDENTIFIER:
                name = self._peek().text
            self._skip_declaration_body()

        last = self._previous()
        end = last.end if last is not None else first.start
        declaration = InputDeclaration(
            kind=kind,
            keyword=keyword_token.text,
            location=first.location,
            start=first.start,
            end=end,
            text=self.source[first.start:end],
            attributes=attributes,
            modifiers=modifiers,
            bindings=bindings,
            name=name,
        )
        return declaration, self.index

    def parse_attributes(self) -> List[Attribute]:
        """Read consecutive ``@`` attributes at the cursor."""
        attributes = []
        while self._check("@"):
            attributes.append(self._parse_attribute())
        return attributes

    def _parse_attribute(self) -> Attribute:
        at = self._expect("@")
        name_token = self._expect_identifier("attribute name")
        name = name_token.text
        last = name_token
        while self._check(".") and self._peek(1).kind == TokenKind.IDENTIFIER:
            self._advance()
            last = self._advance()
            name += "." + last.text

        arguments = None
        if self._check("(") and self._peek().start == last.end:
            arguments = self._parse_argument_clause()
            last = self._previous()

        return Attribute(name, arguments, at.location, at.start, last.end)

    def _parse_argument_clause(self) -> List[Argument]:
        open_paren = self._expect("(")
        arguments: List[Argument] = []
        if self._check(")"):
            self._advance()
            return arguments

        while True:
            start_token = self._peek()
            label = None
            if (
                start_token.kind == TokenKind.IDENTIFIER
                and self._peek(1).text == ":"
                and self._peek(1).kind == TokenKind.PUNCTUATION
            ):
                label = start_token.text
                self._advance()
                self._advance()

            expression_tokens = []
            depth = 0
            while True:
                token = self._peek()
                if token.kind == TokenKind.EOF:
                    raise SwiftSyntaxError("Unterminated attribute arguments", open_paren.location)
                if depth == 0 and token.text in (",", ")") and token.kind == TokenKind.PUNCTUATION:
                    break
                if token.kind == TokenKind.PUNCTUATION:
                    if token.text in "([{":
                        depth += 1
                    elif token.text in ")]}":
                        depth -= 1
                expression_tokens.append(self._advance())

            if expression_tokens:
                expression = self.source[expression_tokens[0].start:expression_tokens[-1].end]
            else:
                expression = ""
            arguments.append(
                Argument(label, expression, tuple(expression_tokens), start_token.location)
            )

            if self._check(","):
                self._advance()
                continue
            self._expect(")")
            return arguments

    def _parse_modifiers(self) -> List[str]:
        modifiers = []
        while True:
            token = self._peek()
            if token.kind != TokenKind.IDENTIFIER or token.text not in MODIFIERS:
                return modifiers
            # "class" is a modifier only in front of another declaration keyword
            if token.text == "class" and self._peek(1).text not in DECLARATION_KEYWORDS.keys() | MODIFIERS:
                return modifiers
            self._advance()
            text = token.text
            if self._check("(") and self._peek().start == token.end:
                self._advance()
                detail = self._expect_identifier("modifier detail")
                self._expect(")")
                text = f"{text}({detail.text})"
            modifiers.append(text)

    # Variables

    def _parse_bindings(self) -> List[Binding]:
        bindings = []
        while True:
            pattern = self._parse_pattern()
            binding = Binding(pattern)

            if self._check(":"):
                self._advance()
                binding.type_annotation = self.parse_type()
            if self._check("="):
                self._advance()
                binding.initializer = self._skip_expression()
            if self._check("{"):
                binding.accessor_block = self._skip_block()

            bindings.append(binding)
            if self._check(","):
                self._advance()
                continue
            return bindings

    def _parse_pattern(self) -> Pattern:
        token = self._peek()
        if self._check("("):
            self._advance()
            elements = []
            while not self._check(")"):
                elements.append(self._parse_pattern())
                if not self._check(","):
                    break
                self._advance()
            close = self._expect(")")
            return Pattern(
                PatternKind.TUPLE,
                self.source[token.start:close.end],
                token.location,
                elements=elements,
            )
        if token.kind == TokenKind.IDENTIFIER and token.text == "_":
            self._advance()
            return Pattern(PatternKind.WILDCARD, "_", token.location)
        name = self._expect_identifier("pattern")
        return Pattern(PatternKind.IDENTIFIER, name.text, name.location, identifier=name.text)

    # Types

    def parse_type(self) -> TypeSyntax:
        """Read a type annotation at the cursor."""
        first = self._parse_postfix_type()
        if not self._check("&"):
            return first
        members = [first]
        while self._check("&"):
            self._advance()
            members.append(self._parse_postfix_type())
        return TypeSyntax(TypeKind.COMPOSITION, arguments=tuple(members))

    def _parse_postfix_type(self) -> TypeSyntax:
        result = self._parse_primary_type()
        while True:
            if self._check("?"):
                self._advance()
                result = TypeSyntax(TypeKind.OPTIONAL, arguments=(result,))
            elif self._check("!"):
                self._advance()
                result = TypeSyntax(TypeKind.IMPLICITLY_UNWRAPPED, arguments=(result,))
            elif self._check(".") and self._peek(1).text in ("Type", "Protocol"):
                self._advance()
                member = self._advance()
                result = TypeSyntax(TypeKind.SIMPLE, name=f"{result.description}.{member.text}")
            else:
                return result

    def _parse_primary_type(self) -> TypeSyntax:
        token = self._peek()

        # Type attributes and ownership specifiers only matter inside function types
        while self._check("@") or token.text in ("inout", "borrowing", "consuming", "sending"):
            if self._check("@"):
                self._parse_attribute()
            else:
                self._advance()
            token = self._peek()

        if token.text in ("some", "any") and self._peek(1).kind == TokenKind.IDENTIFIER:
            self._advance()
            constraint = self._parse_postfix_type()
            return TypeSyntax(TypeKind.CONSTRAINED, arguments=(constraint,), specifier=token.text)

        if self._check("("):
            return self._parse_parenthesized_type()

        if self._check("["):
            self._advance()
            element = self.parse_type()
            if self._check(":"):
                self._advance()
                value = self.parse_type()
                self._expect("]")
                return TypeSyntax(TypeKind.DICTIONARY, arguments=(element, value))
            self._expect("]")
            return TypeSyntax(TypeKind.ARRAY, arguments=(element,))

        if token.kind == TokenKind.IDENTIFIER:
            return self._parse_simple_type()

        found = token.text or "end of input"
        raise SwiftSyntaxError(f"Expected a type but found '{found}'", token.location)

    def _parse_simple_type(self) -> TypeSyntax:
        segments = []
        generic_arguments: Tuple[TypeSyntax, ...] = ()
        while True:
            name = self._expect_identifier("type name").text
            generic_arguments = ()
            if self._check("<"):
                self._advance()
                parsed = [self.parse_type()]
                while self._check(","):
                    self._advance()
                    parsed.append(self.parse_type())
                self._expect(">")
                generic_arguments = tuple(parsed)
                name += "<" + ", ".join(arg.description for arg in generic_arguments) + ">"
            segments.append(name)
            if (
                self._check(".")
                and self._peek(1).kind == TokenKind.IDENTIFIER
                and self._peek(1).text not in ("Type", "Protocol")
            ):
                self._advance()
                continue
            return TypeSyntax(TypeKind.SIMPLE, name=".".join(segments), arguments=generic_arguments)

    def _parse_parenthesized_type(self) -> TypeSyntax:
        self._expect("(")
        elements: List[TypeSyntax] = []
        labels: List[Optional[str]] = []
        while not self._check(")"):
            label = None
            if self._peek().kind == TokenKind.IDENTIFIER and self._peek(1).text == ":":
                label = self._advance().text
                self._advance()
            elif (
                self._peek().kind == TokenKind.IDENTIFIER
                and self._peek(1).kind == TokenKind.IDENTIFIER
                and self._peek(2).text == ":"
            ):
                # external and internal parameter names
                self._advance()
                label = self._advance().text
                self._advance()
            elements.append(self.parse_type())
            labels.append(label)
            if not self._check(","):
                break
            self._advance()
        self._expect(")")

        effects = []
        while self._peek().text in ("async", "throws", "rethrows"):
            effects.append(self._advance().text)
        if self._check("->"):
            self._advance()
            result = self.parse_type()
            return TypeSyntax(
                TypeKind.FUNCTION,
                arguments=tuple(elements) + (result,),
                labels=tuple(labels),
                specifier=" ".join(effects),
            )
        if effects:
            token = self._peek()
            raise SwiftSyntaxError("Expected '->' after function effects", token.location)

        if len(elements) == 1 and labels[0] is None:
            return elements[0]
        return TypeSyntax(TypeKind.TUPLE, arguments=tuple(elements), labels=tuple(labels))

    # Skipping

    def _skip_block(self) -> str:
        """Skip a balanced ``{ ... }`` block and return its source text."""
        open_brace = self._expect("{")
        depth = 1
        while depth:
            token = self._advance()
            if token.kind == TokenKind.EOF:
                raise SwiftSyntaxError("Unterminated block", open_brace.location)
            if token.kind != TokenKind.PUNCTUATION:
                continue
            if token.text == "{":
                depth += 1
            elif token.text == "}":
                depth -= 1
        return self.source[open_brace.start:self._previous().end]

    def _skip_expression(self) -> str:
        """Skip an initializer expression and return its source text."""
        first = self._peek()
        if first.kind == TokenKind.EOF or (
            first.kind == TokenKind.PUNCTUATION and first.text in _EXPRESSION_TERMINATORS
        ):
            raise SwiftSyntaxError("Expected an initializer expression", first.location)

        depth = 0
        while True:
            token = self._peek()
            if token.kind == TokenKind.EOF:
                break
            if token is not first and depth == 0:
                if token.kind == TokenKind.PUNCTUATION and token.text in _EXPRESSION_TERMINATORS:
                    break
                if self._starts_new_line(token):
                    break
            if token.kind == TokenKind.PUNCTUATION:
                if token.text in ("(", "[", "{"):
                    depth += 1
                elif token.text in (")", "]", "}"):
                    depth -= 1
            self._advance()

        return self.source[first.start:self._previous().end]

    def _skip_declaration_body(self):
        depth = 0
        angle = 0
        while True:
            token = self._peek()
            if token.kind == TokenKind.EOF:
                return
            nested = depth or angle
            if not nested and token.kind == TokenKind.PUNCTUATION:
                if token.text == "{":
                    self._skip_block()
                    return
                if token.text in ("}", ";"):
                    return
            if not nested and self._starts_new_line(token):
                return

            if token.kind == TokenKind.PUNCTUATION:
                previous = self._previous()
                if token.text in ("(", "["):
                    depth += 1
                elif token.text in (")", "]"):
                    depth = max(depth - 1, 0)
                elif (
                    token.text == "<"
                    and previous is not None
                    and previous.kind == TokenKind.IDENTIFIER
                    and previous.end == token.start
                ):
                    angle += 1
                elif token.text == ">" and angle:
                    angle -= 1
            self._advance()


def parse_declaration(source: str) -> InputDeclaration:
    """
    Parse source holding exactly one declaration.

    Args:
        source: Swift text such as ``"@ImageCache\\nvar testData: Data?"``

    Returns:
        The parsed declaration

    Raises:
        SwiftSyntaxError: If the text is not a single declaration
    """
    parser = DeclarationParser(source)
    declaration, index = parser.parse(0)
    trailing = parser.tokens[index]
    if trailing.kind == TokenKind.PUNCTUATION and trailing.text == ";":
        trailing = parser.tokens[index + 1]
    if trailing.kind != TokenKind.EOF:
        raise SwiftSyntaxError(
            f"Unexpected '{trailing.text}' after declaration", trailing.location
        )
    return declaration
