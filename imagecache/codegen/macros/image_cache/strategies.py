"""
Platform decode strategies.

The generated accessor decodes the buffer with the UI framework of the
build target. The strategy is picked from the build configuration when the
generator runs, never from anything at the call site.
"""

import sys
from abc import ABC, abstractmethod
from typing import Optional

from ....logging_config import get_logger
from .errors import OsNotSupported

logger = get_logger(__name__)


class DecodeStrategy(ABC):
    """Renders the decode and wrap steps of the generated accessor."""

    #: Framework the decoder type comes from
    framework: str = ""
    #: Name of the decoded value bound in the accessor's ``if`` clause
    binding: str = ""

    def __init__(self, resource_type: str = "Image"):
        self.resource_type = resource_type

    @property
    def name(self) -> str:
        return self.framework.lower()

    @abstractmethod
    def decode_expression(self, buffer: str) -> str:
        """Expression that decodes ``buffer`` into an optional platform image."""
        pass

    @abstractmethod
    def wrap_expression(self, decoded: str) -> str:
        """Expression that wraps a decoded platform image into the resource type."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(resource_type={self.resource_type!r})"


class UIKitStrategy(DecodeStrategy):
    framework = "UIKit"
    binding = "uiImage"

    def decode_expression(self, buffer: str) -> str:
        return f"UIImage(data: {buffer})"

    def wrap_expression(self, decoded: str) -> str:
        return f"{self.resource_type}(uiImage: {decoded})"


class AppKitStrategy(DecodeStrategy):
    framework = "AppKit"
    binding = "nsImage"

    def decode_expression(self, buffer: str) -> str:
        return f"NSImage(data: {buffer})"

    def wrap_expression(self, decoded: str) -> str:
        return f"{self.resource_type}(nsImage: {decoded})"


# Build targets grouped by the image framework they can import.
# UIKit is checked first: Mac Catalyst has both.
UIKIT_TARGETS = {"ios", "ipados", "tvos", "watchos", "visionos", "maccatalyst", "uikit"}
APPKIT_TARGETS = {"macos", "osx", "appkit"}


def host_platform() -> Optional[str]:
    """Return the build target implied by the running interpreter, if any."""
    if sys.platform == "ios":
        return "ios"
    if sys.platform == "darwin":
        return "macos"
    return None


def select_strategy(
    target_platform: Optional[str] = None,
    resource_type: str = "Image",
    macro_name: str = "ImageCache",
) -> DecodeStrategy:
    """
    Pick the decode strategy for a build target.

    Args:
        target_platform: Configured build target, or None for the host
        resource_type: Type the decoded image is wrapped into
        macro_name: Attribute name used in the error message

    Returns:
        The strategy for the target's framework

    Raises:
        OsNotSupported: If the target has neither UIKit nor AppKit
    """
    platform = target_platform or host_platform()
    key = (platform or "").strip().lower()

    if key in UIKIT_TARGETS:
        strategy = UIKitStrategy(resource_type)
    elif key in APPKIT_TARGETS:
        strategy = AppKitStrategy(resource_type)
    else:
        logger.debug("No decode strategy for target %r", platform)
        raise OsNotSupported(platform or sys.platform, macro_name)

    logger.debug("Selected %s decode strategy for target %s", strategy.framework, key)
    return strategy
