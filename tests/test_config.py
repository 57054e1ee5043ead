import json

import pytest

from imagecache.codegen.core.config import (
    EXAMPLE_CONFIG,
    ConfigError,
    ConfigManager,
    MacroConfig,
    load_config,
)


def test_defaults():
    config = load_config()

    assert config == MacroConfig()
    assert config.suffix == "Data"
    assert config.expected_type == "Data?"
    assert config.resource_type == "Image"
    assert config.persistence_marker == "@Transient"
    assert config.emit_persistence_marker is False
    assert config.target_platform is None
    assert config.indent_unit == "    "


def test_indent_unit():
    assert MacroConfig(indent_size=2).indent_unit == "  "
    assert MacroConfig(use_tabs=True).indent_unit == "\t"


def test_unknown_keys_go_to_custom():
    config = load_config(custom_config={"target_platform": "ios", "team": "media"})

    assert config.target_platform == "ios"
    assert config.custom == {"team": "media"}


def test_file_then_overrides(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(EXAMPLE_CONFIG), encoding="utf-8")

    config = load_config(custom_config={"indent_size": 2}, config_file=path)

    assert config.target_platform == "ios"
    assert config.emit_persistence_marker is True
    assert config.indent_size == 2


@pytest.mark.parametrize(
    "name, content, message",
    [
        ("config.json", "{not json", "Invalid JSON"),
        ("config.json", "[1, 2]", "must contain a JSON object"),
        ("config.yaml", "{}", "must be JSON"),
    ],
)
def test_bad_config_files(tmp_path, name, content, message):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_config(config_file=path)


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(config_file=tmp_path / "absent.json")


def test_save_config_flattens_custom(tmp_path):
    path = tmp_path / "saved.json"
    config = MacroConfig(target_platform="macos", custom={"team": "media"})

    ConfigManager().save_config(config, path)

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["target_platform"] == "macos"
    assert saved["team"] == "media"
    assert "custom" not in saved
    assert load_config(config_file=path) == config


def test_validate_config():
    manager = ConfigManager()

    assert manager.validate_config(MacroConfig()) == []

    warnings = manager.validate_config(
        MacroConfig(
            suffix="-bytes",
            resource_type="",
            emit_persistence_marker=True,
            persistence_marker="Transient",
            indent_size=0,
        )
    )
    assert len(warnings) == 4


def test_list_macros():
    assert ConfigManager().list_macros() == ["imagecache"]


def test_empty_suffix_rejected(tmp_path):
    with pytest.raises(ConfigError, match="suffix must not be empty"):
        MacroConfig(suffix="")

    with pytest.raises(ConfigError, match="suffix must not be empty"):
        load_config(custom_config={"suffix": ""})

    path = tmp_path / "config.json"
    path.write_text(json.dumps({"suffix": ""}), encoding="utf-8")
    with pytest.raises(ConfigError, match="suffix must not be empty"):
        load_config(config_file=path)
