import logging

import pytest
from rich.console import Console

from imagecache.logging_config import ROOT_LOGGER_NAME, get_logger, setup_logging


def test_get_logger_namespaces_names():
    assert get_logger("imagecache.runtime").name == "imagecache.runtime"
    assert get_logger(ROOT_LOGGER_NAME).name == "imagecache"
    assert get_logger("plugins.extra").name == "imagecache.plugins.extra"


def test_setup_logging_installs_rich_handler():
    console = Console(record=True, width=120)

    root = setup_logging("info", console=console)
    get_logger("imagecache.tests").info("expanded %d declarations", 3)
    get_logger("imagecache.tests").debug("hidden detail")

    text = console.export_text()
    assert root.name == ROOT_LOGGER_NAME
    assert root.propagate is False
    assert "expanded 3 declarations" in text
    assert "hidden detail" not in text


def test_setup_logging_replaces_handlers(tmp_path):
    setup_logging("WARNING", log_file=tmp_path / "first.log")
    root = setup_logging(logging.ERROR)

    assert len(root.handlers) == 1


def test_log_file_receives_debug(tmp_path):
    log_file = tmp_path / "imagecache.log"

    setup_logging("ERROR", log_file=log_file, console=Console(record=True))
    get_logger("imagecache.tests").debug("written to file only")

    assert "written to file only" in log_file.read_text(encoding="utf-8")


def test_unknown_level():
    with pytest.raises(ValueError):
        setup_logging("LOUD")
