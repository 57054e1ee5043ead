import pytest
import requests

from imagecache import utils
from imagecache.utils import (
    SourceLoaderError,
    load_source,
    load_source_from_file,
    load_source_from_url,
)


class FakeResponse:
    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(response=self)


def test_load_from_file(tmp_path):
    path = tmp_path / "Model.swift"
    path.write_text("var testData: Data?\n", encoding="utf-8")

    assert load_source_from_file(path) == (str(path), "var testData: Data?\n")
    assert load_source(file_path=str(path))[1] == "var testData: Data?\n"


def test_load_from_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_source_from_file(tmp_path / "Missing.swift")


def test_load_from_undecodable_file(tmp_path):
    path = tmp_path / "Binary.swift"
    path.write_bytes(b"\xff\xfe\x00bad")

    with pytest.raises(SourceLoaderError, match="Error reading file"):
        load_source_from_file(path)


def test_load_from_url(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse("@ImageCache\nvar testData: Data?")

    monkeypatch.setattr(utils.requests, "get", fake_get)

    name, text = load_source_from_url("https://example.com/Model.swift", timeout=5)

    assert name == "https://example.com/Model.swift"
    assert text.startswith("@ImageCache")
    assert calls == [("https://example.com/Model.swift", 5)]


@pytest.mark.parametrize(
    "error, message",
    [
        (requests.exceptions.Timeout(), "Request timeout"),
        (requests.exceptions.ConnectionError(), "Connection error"),
        (requests.exceptions.RequestException("boom"), "Request error"),
    ],
)
def test_load_from_url_request_errors(monkeypatch, error, message):
    def fake_get(url, timeout):
        raise error

    monkeypatch.setattr(utils.requests, "get", fake_get)

    with pytest.raises(SourceLoaderError, match=message):
        load_source_from_url("https://example.com/Model.swift")


def test_load_from_url_http_error(monkeypatch):
    monkeypatch.setattr(utils.requests, "get", lambda url, timeout: FakeResponse(status_code=404))

    with pytest.raises(SourceLoaderError, match="HTTP error 404"):
        load_source_from_url("https://example.com/Model.swift")


def test_invalid_url():
    with pytest.raises(SourceLoaderError, match="Invalid URL"):
        load_source_from_url("not-a-url")


def test_load_source_argument_checks(tmp_path):
    with pytest.raises(SourceLoaderError, match="Either"):
        load_source()
    with pytest.raises(SourceLoaderError, match="Cannot specify both"):
        load_source(file_path=tmp_path / "a.swift", url="https://example.com/a.swift")
