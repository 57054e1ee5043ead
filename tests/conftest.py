import logging
from textwrap import dedent

import pytest

from imagecache.codegen import build_default_registry
from imagecache.codegen.core.config import MacroConfig
from imagecache.codegen.macros.image_cache import create_ios_generator
from imagecache.logging_config import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True


@pytest.fixture()
def ios_config():
    return MacroConfig(target_platform="ios")


@pytest.fixture()
def ios_generator():
    return create_ios_generator()


@pytest.fixture()
def registry():
    return build_default_registry()


@pytest.fixture()
def profile_source():
    return dedent(
        """\
        import SwiftUI
        import SwiftData

        @Model
        final class Profile {
            var name: String = ""

            @ImageCache
            var pictureData: Data?

            init(name: String) {
                self.name = name
            }
        }
        """
    )


@pytest.fixture()
def test_data_ios_peers():
    accessor = dedent(
        """\
        var test: Image? {
            get {
                if testData.hashValue != testHash,
                    let testData,
                    let uiImage = UIImage(data: testData)
                {
                    testCache = Image(uiImage: uiImage)
                    testHash = testData.hashValue
                }
                return testCache
            }
        }"""
    )
    return [
        "private var testHash: Int = 0",
        "private var testCache: Image?",
        accessor,
    ]
