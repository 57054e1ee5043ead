import pytest

from imagecache.codegen.core.syntax import (
    DeclarationKind,
    PatternKind,
    SwiftSyntaxError,
    TokenKind,
    TypeKind,
    parse_declaration,
    tokenize,
)


def _type_of(source):
    return parse_declaration(source).bindings[0].type_annotation


def test_tokenize_tracks_lines_and_columns():
    tokens = tokenize("@ImageCache\n  var x: Data?")

    texts = [token.text for token in tokens]
    assert texts == ["@", "ImageCache", "var", "x", ":", "Data", "?", ""]
    assert tokens[-1].kind == TokenKind.EOF

    var_token = tokens[2]
    assert (var_token.line, var_token.column) == (2, 3)
    assert str(var_token.location) == "2:3"


def test_tokenize_skips_nested_comments():
    source = "// header\n/* outer /* inner */ still comment */\nvar x = 1"
    tokens = tokenize(source)

    assert [token.text for token in tokens[:-1]] == ["var", "x", "=", "1"]
    assert tokens[0].line == 3


def test_tokenize_keeps_interpolated_string_whole():
    tokens = tokenize('let s = "a \\(b("c")) d"')

    strings = [token for token in tokens if token.kind == TokenKind.STRING]
    assert len(strings) == 1
    assert strings[0].text == '"a \\(b("c")) d"'


def test_tokenize_multiline_string_advances_lines():
    tokens = tokenize('let s = """\nline\n"""\nvar y: Int')

    y_token = next(token for token in tokens if token.text == "y")
    assert y_token.line == 4


def test_tokenize_rejects_unknown_character():
    with pytest.raises(SwiftSyntaxError) as exc_info:
        tokenize("var x = 'a'")

    assert exc_info.value.location.column == 9
    assert "at 1:9" in str(exc_info.value)


def test_tokenize_rejects_unterminated_comment():
    with pytest.raises(SwiftSyntaxError, match="Unterminated block comment"):
        tokenize("/* never closed")


def test_parse_attributed_variable():
    declaration = parse_declaration("@ImageCache\nvar testData: Data?")

    assert declaration.kind == DeclarationKind.VARIABLE
    assert declaration.is_variable
    assert declaration.keyword == "var"
    assert declaration.location.line == 1
    assert declaration.location.column == 1

    attribute = declaration.find_attribute("ImageCache")
    assert attribute is not None
    assert attribute.arguments is None
    assert attribute.argument_count == 0

    binding = declaration.bindings[0]
    assert binding.pattern.kind == PatternKind.IDENTIFIER
    assert binding.pattern.identifier == "testData"
    assert binding.type_annotation.kind == TypeKind.OPTIONAL
    assert binding.type_annotation.description == "Data?"
    assert binding.type_annotation.wrapped_type.description == "Data"


def test_parse_attribute_arguments():
    declaration = parse_declaration("@ImageCache(useSwiftData: false) var testData: Data?")

    attribute = declaration.attributes[0]
    assert attribute.argument_count == 1
    argument = attribute.arguments[0]
    assert argument.label == "useSwiftData"
    assert argument.expression == "false"
    assert argument.is_boolean_literal
    assert argument.boolean_value is False


def test_parse_empty_argument_clause():
    declaration = parse_declaration("@ImageCache() var testData: Data?")

    assert declaration.attributes[0].arguments == []


def test_parse_non_literal_argument():
    declaration = parse_declaration("@ImageCache(!flag) var testData: Data?")

    argument = declaration.attributes[0].arguments[0]
    assert argument.expression == "!flag"
    assert not argument.is_boolean_literal
    assert argument.boolean_value is None


def test_parse_multiple_attributes_and_modifiers():
    declaration = parse_declaration(
        "@available(iOS 17, *) @ImageCache public private(set) var pictureData: Data?"
    )

    assert [attribute.name for attribute in declaration.attributes] == [
        "available",
        "ImageCache",
    ]
    assert declaration.attributes[0].argument_count == 2
    assert declaration.modifiers == ["public", "private(set)"]


def test_parse_multiple_bindings():
    declaration = parse_declaration("var aData: Data?, bData: Data? = nil")

    assert declaration.binding_count == 2
    assert declaration.bindings[1].initializer == "nil"


def test_parse_tuple_and_wildcard_patterns():
    tuple_decl = parse_declaration("let (aData, bData): (Data?, Data?)")
    wildcard_decl = parse_declaration("var _: Data?")

    pattern = tuple_decl.bindings[0].pattern
    assert pattern.kind == PatternKind.TUPLE
    assert [element.identifier for element in pattern.elements] == ["aData", "bData"]
    assert tuple_decl.bindings[0].type_annotation.description == "(Data?, Data?)"
    assert wildcard_decl.bindings[0].pattern.kind == PatternKind.WILDCARD


@pytest.mark.parametrize(
    "annotation, rendered",
    [
        ("Data", "Data"),
        ("Data ?", "Data?"),
        ("Data!", "Data!"),
        ("Optional<Data>", "Optional<Data>"),
        ("Foundation.Data?", "Foundation.Data?"),
        ("[String: Int]?", "[String: Int]?"),
        ("[Data?]", "[Data?]"),
        ("(() -> Void)?", "(() -> Void)?"),
        ("(Int, String) async throws -> Bool", "(Int, String) async throws -> Bool"),
        ("(any Codable & Sendable)?", "(any Codable & Sendable)?"),
        ("Data.Type", "Data.Type"),
    ],
)
def test_type_rendering(annotation, rendered):
    assert _type_of(f"var x: {annotation}").description == rendered


def test_parse_initializer_and_accessor_block():
    closure = parse_declaration("var x = { 1 }()")
    computed = parse_declaration("var x: Int { get { 1 } }")

    assert closure.bindings[0].initializer == "{ 1 }()"
    assert computed.bindings[0].accessor_block == "{ get { 1 } }"


def test_initializer_continues_across_lines():
    declaration = parse_declaration("var x = Foo()\n    .bar()\n    .baz")

    assert declaration.bindings[0].initializer == "Foo()\n    .bar()\n    .baz"


def test_parse_type_declaration():
    declaration = parse_declaration("class TestData {}")

    assert declaration.kind == DeclarationKind.CLASS
    assert not declaration.is_variable
    assert declaration.name == "TestData"
    assert declaration.binding_count == 0


def test_class_modifier_before_keyword():
    declaration = parse_declaration("class var shared: Data?")

    assert declaration.kind == DeclarationKind.VARIABLE
    assert declaration.modifiers == ["class"]


def test_parse_generic_function_declaration():
    declaration = parse_declaration(
        "func load<T: Decodable>(_ type: T.Type) -> [T] where T: Sendable {\n    []\n}"
    )

    assert declaration.kind == DeclarationKind.FUNCTION
    assert declaration.name == "load"
    assert declaration.text.endswith("}")


def test_parse_declaration_allows_trailing_semicolon():
    declaration = parse_declaration("var testData: Data?;")

    assert declaration.text == "var testData: Data?"


def test_parse_declaration_rejects_trailing_tokens():
    with pytest.raises(SwiftSyntaxError, match="Unexpected 'var'"):
        parse_declaration("var x: Int var y: Int")


def test_parse_declaration_requires_keyword():
    with pytest.raises(SwiftSyntaxError, match="Expected a declaration"):
        parse_declaration("@ImageCache testData")


def test_missing_initializer_expression():
    with pytest.raises(SwiftSyntaxError, match="Expected an initializer expression"):
        parse_declaration("var x =")
