"""Decoded-image accessors for Python objects.

``CachedImage`` is the Python counterpart of the accessor that
``@ImageCache`` generates for Swift: it exposes an image decoded from a
bytes attribute, decodes lazily on read, and decodes again only when the
hash of the bytes changes.

    class Profile:
        picture = CachedImage()          # reads ``picture_data``

        def __init__(self, picture_data: bytes | None = None):
            self.picture_data = picture_data

A failed decode leaves the previous image (or ``None``) in place and is
not reported to the caller. Reads are not synchronized.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from io import BytesIO
from typing import Any

from PIL import Image, UnidentifiedImageError

from .logging_config import get_logger

logger = get_logger(__name__)


class ImageDecoder(ABC):
    """Turns a raw buffer into a decoded resource."""

    @abstractmethod
    def decode(self, buffer: bytes) -> Any | None:
        """Return the decoded resource, or ``None`` if the buffer is not decodable."""


class PillowDecoder(ImageDecoder):
    """Decode image bytes with Pillow."""

    def decode(self, buffer: bytes) -> Image.Image | None:
        try:
            image = Image.open(BytesIO(buffer))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.debug("Buffer of %d bytes is not a decodable image: %s", len(buffer), e)
            return None
        return image


class CachedImage:
    """Descriptor exposing a memoized decoded view of a bytes attribute.

    Args:
        source: Attribute holding the bytes. Defaults to the descriptor's
            name followed by ``suffix``.
        decoder: Decoder to use; a ``PillowDecoder`` by default.
        suffix: Suffix used to derive ``source``.
    """

    def __init__(
        self,
        source: str | None = None,
        decoder: ImageDecoder | None = None,
        suffix: str = "_data",
    ) -> None:
        self.source = source
        self.decoder = decoder or PillowDecoder()
        self.suffix = suffix
        self.name: str | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        if self.source is None:
            self.source = f"{name}{self.suffix}"
        if self.source == name:
            raise TypeError(f"CachedImage {name!r} cannot read from itself")

    @property
    def hash_attribute(self) -> str:
        return f"_{self.name}_hash"

    @property
    def cache_attribute(self) -> str:
        return f"_{self.name}_cache"

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self

        state = instance.__dict__
        buffer = getattr(instance, self.source)
        if isinstance(buffer, (bytearray, memoryview)):
            buffer = bytes(buffer)

        current = hash(buffer)
        if current != state.get(self.hash_attribute, 0) and buffer is not None:
            decoded = self.decoder.decode(buffer)
            if decoded is not None:
                state[self.cache_attribute] = decoded
                state[self.hash_attribute] = current
            else:
                logger.debug("Keeping cached %s: decode failed", self.name)

        return state.get(self.cache_attribute)

    def __set__(self, instance: Any, value: Any) -> None:
        raise AttributeError(f"{self.name} is read-only; assign {self.source} instead")
