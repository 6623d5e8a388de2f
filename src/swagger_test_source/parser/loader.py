"""Load OpenAPI / Swagger documents from files or URLs."""

import logging
from pathlib import Path

import requests
import yaml

from swagger_test_source.errors import DocumentLoadError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


def load_document(source: str | Path) -> dict:
    """Read a JSON or YAML API document into a dict.

    ``http://`` and ``https://`` sources are downloaded, anything else is
    treated as a local file path.
    """
    text = _read_text(source)
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentLoadError(str(source), f"invalid JSON/YAML: {e}") from e

    if not isinstance(doc, dict):
        raise DocumentLoadError(str(source), "document root is not a mapping")
    if "openapi" not in doc and "swagger" not in doc:
        raise DocumentLoadError(str(source), "missing 'openapi' or 'swagger' version field")

    logger.info("Loaded API document %s (%d paths)", source, len(doc.get("paths") or {}))
    return doc


def _read_text(source: str | Path) -> str:
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        try:
            response = requests.get(source, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DocumentLoadError(source, str(e)) from e
        return response.text

    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(str(source), str(e)) from e
