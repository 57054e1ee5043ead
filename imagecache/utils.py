"""Utility functions for loading Swift source text.

This module provides functions for loading source from files and URLs with
proper error handling.
"""

from pathlib import Path
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)


class SourceLoaderError(Exception):
    """Custom exception for source loading errors."""

    pass


def load_source_from_file(file_path: str | Path) -> tuple[str, str]:
    """Load Swift source from a local file.

    Args:
        file_path: Path to the source file.

    Returns:
        Tuple of (source description, source text).

    Raises:
        FileNotFoundError: If file doesn't exist.
        SourceLoaderError: If file cannot be read or decoded.
    """
    file_path = Path(file_path)
    logger.debug("Attempting to load source from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".swift":
        logger.warning("File does not have .swift extension: %s", file_path)

    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Error reading file %s: %s", file_path, e, exc_info=True)
        raise SourceLoaderError(f"Error reading file {file_path}: {e}") from e

    logger.info("Loaded %d characters from %s", len(text), file_path)
    return str(file_path), text


def load_source_from_url(url: str, timeout: int = 30) -> tuple[str, str]:
    """Load Swift source from a URL.

    Args:
        url: URL to fetch the source from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, source text).

    Raises:
        SourceLoaderError: If URL is invalid or the request fails.
    """
    logger.debug("Attempting to load source from URL: %s", url)

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error("Invalid URL format: %s", url)
        raise SourceLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        logger.error("Request timeout for URL: %s", url)
        raise SourceLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error("Connection error for URL %s: %s", url, e)
        raise SourceLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error("HTTP error %s for URL: %s", e.response.status_code, url)
        raise SourceLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", url, e, exc_info=True)
        raise SourceLoaderError(f"Request error for URL {url}: {e}") from e

    logger.info("Loaded %d characters from %s", len(response.text), url)
    return url, response.text


def load_source(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, str]:
    """Load Swift source from either a file or URL.

    Args:
        file_path: Path to a local file (mutually exclusive with url).
        url: URL to fetch from (mutually exclusive with file_path).
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, source text).

    Raises:
        SourceLoaderError: If neither or both parameters are provided, or loading fails.
        FileNotFoundError: If file doesn't exist.
    """
    if not file_path and not url:
        logger.error("Neither file_path nor url provided")
        raise SourceLoaderError("Either file_path or url must be provided")

    if file_path and url:
        logger.error("Both file_path and url provided")
        raise SourceLoaderError("Cannot specify both file_path and url")

    if file_path:
        return load_source_from_file(file_path)
    return load_source_from_url(url, timeout)
