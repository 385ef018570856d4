"""Loading of schema documents.

A schema document is JSON read from a local path or fetched over http(s).
"""

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests

from .codegen.core.errors import SchemaLoaderError
from .logging_config import get_logger

logger = get_logger(__name__)


def _fail(message: str, cause: Exception | None = None) -> SchemaLoaderError:
    logger.error(message)
    error = SchemaLoaderError(message)
    error.__cause__ = cause
    return error


def load_json_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Read a schema document from disk.

    Args:
        file_path: Location of the document.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        FileNotFoundError: If the path does not exist.
        SchemaLoaderError: If the file is unreadable or not JSON.
    """
    path = Path(file_path)
    if not path.exists():
        logger.error(f"File not found: {path}")
        raise FileNotFoundError(f"File not found: {path}")
    if path.suffix.lower() != ".json":
        logger.warning(f"Schema document without .json extension: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise _fail(f"Cannot read schema document {path}: {e}", e)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise _fail(f"Schema document {path} is not valid JSON: {e}", e)

    logger.info(f"Read schema document {path}")
    return str(path), data


def load_json_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Fetch a schema document with a GET request.

    Raises:
        SchemaLoaderError: On a malformed URL, a transport or HTTP failure,
            or a body that is not JSON.
    """
    parts = urlparse(url)
    if not (parts.scheme and parts.netloc):
        raise _fail(f"Invalid URL: {url}")

    logger.debug(f"Fetching schema document from {url}")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        raise _fail(f"Request timeout after {timeout}s for URL: {url}", e)
    except requests.exceptions.HTTPError as e:
        raise _fail(f"HTTP error {e.response.status_code} for URL: {url}", e)
    except requests.exceptions.RequestException as e:
        raise _fail(f"Request for {url} failed: {e}", e)

    try:
        data = response.json()
    except ValueError as e:
        raise _fail(f"Response from {url} is not valid JSON: {e}", e)

    logger.info(f"Fetched schema document from {url}")
    return url, data


def is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def load_json(source: str | Path, timeout: int = 30) -> tuple[str, Any]:
    """Load a schema document from a path or an http(s) URL."""
    if isinstance(source, str) and is_url(source):
        return load_json_from_url(source, timeout)
    return load_json_from_file(source)
