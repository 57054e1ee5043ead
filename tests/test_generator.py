import pytest

from imagecache.codegen.core.config import MacroConfig
from imagecache.codegen.core.generator import Diagnostic, generate_expansion
from imagecache.codegen.core.syntax import parse_declaration
from imagecache.codegen.macros.image_cache import (
    EmptyPrefix,
    ImageCacheGenerator,
    MustBeBoolLiteral,
    MustHaveSuffix,
    OnlyVariableDeclaration,
    OsNotSupported,
    UIKitStrategy,
    create_image_cache_generator,
    create_ios_generator,
    create_macos_generator,
    create_swiftdata_generator,
)


def _expand(generator, source):
    declaration = parse_declaration(source)
    return generator.expand(declaration.attributes[0], declaration)


def _expansion(generator, source, source_name="<input>"):
    declaration = parse_declaration(source)
    return generate_expansion(generator, declaration.attributes[0], declaration, source_name)


def test_expands_into_three_peers(ios_generator, test_data_ios_peers):
    peers = _expand(ios_generator, "@ImageCache(false)\nvar testData: Data?")

    assert peers == test_data_ios_peers


def test_macos_uses_appkit():
    peers = _expand(create_macos_generator(), "@ImageCache\nvar avatarData: Data?")

    accessor = peers[2]
    assert "let nsImage = NSImage(data: avatarData)" in accessor
    assert "avatarCache = Image(nsImage: nsImage)" in accessor
    assert "UIImage" not in accessor


def test_persistence_marker_from_argument(ios_generator):
    peers = _expand(ios_generator, "@ImageCache(true)\nvar testData: Data?")

    assert peers[0] == "@Transient private var testHash: Int = 0"
    assert peers[1] == "@Transient private var testCache: Image?"
    assert not peers[2].startswith("@Transient")


def test_swiftdata_preset_marks_by_default():
    generator = create_swiftdata_generator("ios")

    marked = _expand(generator, "@ImageCache\nvar testData: Data?")
    unmarked = _expand(generator, "@ImageCache(useSwiftData: false)\nvar testData: Data?")

    assert marked[0].startswith("@Transient ")
    assert unmarked[0] == "private var testHash: Int = 0"


def test_custom_names_and_types():
    generator = create_ios_generator(
        resource_type="SwiftUI.Image", persistence_marker="@Attribute(.ephemeral)"
    )

    peers = _expand(generator, "@ImageCache(true)\nvar coverData: Data?")

    assert peers[1] == "@Attribute(.ephemeral) private var coverCache: SwiftUI.Image?"
    assert peers[2].startswith("var cover: SwiftUI.Image? {")
    assert "coverCache = SwiftUI.Image(uiImage: uiImage)" in peers[2]


def test_tab_indentation():
    peers = _expand(create_ios_generator(use_tabs=True), "@ImageCache\nvar testData: Data?")

    lines = peers[2].split("\n")
    assert lines[1] == "\tget {"
    assert lines[2] == "\t\tif testData.hashValue != testHash,"
    assert lines[4] == "\t\t\tlet uiImage = UIImage(data: testData)"
    assert lines[-1] == "}"


def test_two_space_indentation():
    peers = _expand(create_ios_generator(indent_size=2), "@ImageCache\nvar testData: Data?")

    lines = peers[2].split("\n")
    assert lines[1] == "  get {"
    assert lines[6] == "      testCache = Image(uiImage: uiImage)"


def test_generation_is_deterministic():
    source = "@ImageCache(true)\nvar profilePictureData: Data?"

    first = _expand(create_ios_generator(), source)
    second = _expand(create_ios_generator(), source)
    generator = create_ios_generator()

    assert first == second
    assert _expand(generator, source) == _expand(generator, source)


def test_declaration_errors_come_before_platform_errors():
    generator = create_image_cache_generator(target_platform="linux")

    with pytest.raises(MustHaveSuffix):
        _expand(generator, "@ImageCache\nvar test: Data?")
    with pytest.raises(OnlyVariableDeclaration):
        _expand(generator, "@ImageCache\nclass TestData {}")
    with pytest.raises(MustBeBoolLiteral):
        _expand(generator, "@ImageCache(1)\nvar testData: Data?")
    with pytest.raises(OsNotSupported):
        _expand(generator, "@ImageCache\nvar testData: Data?")


def test_empty_prefix(ios_generator):
    with pytest.raises(EmptyPrefix):
        _expand(ios_generator, "@ImageCache\nvar Data: Data?")


def test_strategy_is_resolved_once(ios_generator):
    strategy = ios_generator.strategy

    assert isinstance(strategy, UIKitStrategy)
    assert ios_generator.strategy is strategy


def test_generator_defaults():
    generator = ImageCacheGenerator()

    assert generator.macro_name == "ImageCache"
    assert generator.role == "peer"
    assert isinstance(generator.config, MacroConfig)
    assert all(generator.template_exists(name) for name in (
        "hash_field.swift.j2", "cache_field.swift.j2", "accessor.swift.j2"
    ))


def test_describe_configuration():
    description = create_swiftdata_generator().describe_configuration()

    assert description["Source Type"] == "Data?"
    assert description["Marker By Default"] is True
    assert description["Target Platform"] == "host"
    assert description["Indent"] == "4 spaces"


def test_generate_expansion_success(ios_generator, test_data_ios_peers):
    result = _expansion(ios_generator, "@ImageCache\nvar testData: Data?")

    assert result.success
    assert result.peers == test_data_ios_peers
    assert result.code == "\n".join(test_data_ios_peers)
    assert result.error_message is None
    assert result.metadata == {
        "macro": "ImageCache",
        "attribute": "ImageCache",
        "role": "peer",
        "declaration_kind": "variable",
        "peer_count": 3,
        "line": 1,
    }


def test_generate_expansion_failure_has_single_diagnostic(ios_generator):
    result = _expansion(
        ios_generator, "\n  @ImageCache\n  var testDataObject: Data?", "Model.swift"
    )

    assert not result.success
    assert result.peers == []
    assert result.diagnostics == [
        Diagnostic(
            "MustHaveSuffix",
            "@ImageCache requires testDataObject to have the suffix Data",
            2,
            3,
            "Model.swift",
        )
    ]
    assert result.diagnostics[0].format() == (
        "Model.swift:2:3: error: @ImageCache requires testDataObject to have the suffix Data"
    )
