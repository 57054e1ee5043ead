"""
Attached-macro generators.

Each subpackage implements one macro.
"""

from .image_cache import ImageCacheGenerator

__all__ = ["ImageCacheGenerator"]
