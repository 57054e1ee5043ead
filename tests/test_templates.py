import pytest

from imagecache.codegen.core.templates import TemplateError, create_template_engine


def test_in_memory_templates_and_filters():
    engine = create_template_engine()
    engine.add_template(
        "note.swift.j2",
        "{{ code | indent_lines('\t', 2) }}\n"
        "{% filter indent_lines('  ') %}\n"
        "do {\n"
        "{{ '  ' }}try run()\n"
        "}\n"
        "{% endfilter %}\n",
    )

    rendered = engine.render_template("note.swift.j2", {"code": "let a = 1\n\nlet b = 2"})

    assert rendered == "\t\tlet a = 1\n\n\t\tlet b = 2\n  do {\n    try run()\n  }\n"
    assert engine.template_exists("note.swift.j2")
    assert not engine.template_exists("missing.swift.j2")


def test_undefined_variables_are_errors():
    engine = create_template_engine()

    with pytest.raises(TemplateError, match="Failed to render template string"):
        engine.render_string("private var {{ name }}Hash: Int = 0", {})


def test_marker_template_trims_when_disabled(ios_generator):
    engine = ios_generator.template_engine
    context = {"spec": type("Spec", (), {"hash_field_name": "testHash"})(), "marker": None}

    assert engine.render_template("hash_field.swift.j2", context) == (
        "private var testHash: Int = 0"
    )


def test_accessor_template_nests_with_indent_unit(ios_generator):
    engine = ios_generator.template_engine
    spec = type(
        "Spec",
        (),
        {
            "accessor_name": "test",
            "source_name": "testData",
            "hash_field_name": "testHash",
            "cache_field_name": "testCache",
        },
    )()
    context = {
        "spec": spec,
        "strategy": ios_generator.strategy,
        "resource_type": "Image",
        "unit": "\t",
    }

    rendered = engine.render_template("accessor.swift.j2", context)

    assert rendered.split("\n") == [
        "var test: Image? {",
        "\tget {",
        "\t\tif testData.hashValue != testHash,",
        "\t\t\tlet testData,",
        "\t\t\tlet uiImage = UIImage(data: testData)",
        "\t\t{",
        "\t\t\ttestCache = Image(uiImage: uiImage)",
        "\t\t\ttestHash = testData.hashValue",
        "\t\t}",
        "\t\treturn testCache",
        "\t}",
        "}",
    ]
