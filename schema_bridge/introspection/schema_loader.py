"""
Schema Loader - Reads a schema tree from a local JSON file or a URL.

Only plain JSON documents are handled; OpenAPI dialects and $ref resolution
belong to whoever produced the document.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from schema_bridge.exceptions import SchemaLoadError
from .schema_node import SchemaNode

logger = logging.getLogger(__name__)


class SchemaLoader:
    """
    Loads schema trees for field extraction and mapping suggestions

    Usage:
    ```python
    loader = SchemaLoader(timeout=10)
    node = loader.load("https://api.example.com/openapi.json",
                       pointer="/components/schemas/Customer")
    ```
    """

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None):
        """
        Initialize SchemaLoader

        Args:
            timeout: HTTP request timeout in seconds
            session: Optional requests session (auth headers, retries)
        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def load(self, source: str, pointer: Optional[str] = None) -> SchemaNode:
        """
        Load a schema tree

        Args:
            source: File path or http(s) URL of a JSON document
            pointer: Optional "/"-separated path into the document

        Raises:
            SchemaLoadError: If the document cannot be read or the pointer is invalid
        """
        document = self.load_document(source)
        if pointer:
            document = self._resolve_pointer(document, pointer)
        return SchemaNode.from_dict(document)

    def load_document(self, source: str) -> Dict[str, Any]:
        """Read the raw JSON document behind a source"""
        if source.startswith(("http://", "https://")):
            return self._fetch(source)
        return self._read_file(Path(source))

    def _fetch(self, url: str) -> Dict[str, Any]:
        try:
            logger.debug(f"Fetching schema from {url}")
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            document = response.json()
        except requests.exceptions.RequestException as e:
            raise SchemaLoadError(f"Could not fetch schema from {url}: {e}") from e
        except ValueError as e:
            raise SchemaLoadError(f"Invalid JSON from {url}: {e}") from e

        logger.info(f"Fetched schema from {url}")
        return document

    def _read_file(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise SchemaLoadError(f"Schema file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise SchemaLoadError(f"Invalid JSON in {path}: {e}") from e

    @staticmethod
    def _resolve_pointer(document: Any, pointer: str) -> Any:
        """Navigate a "/components/schemas/Name" style pointer"""
        current = document
        for key in [part for part in pointer.split("/") if part]:
            if isinstance(current, dict) and key in current:
                current = current[key]
            elif isinstance(current, list) and key.isdigit() and int(key) < len(current):
                current = current[int(key)]
            else:
                raise SchemaLoadError(f"Pointer {pointer!r} not found (stopped at {key!r})")
        return current
