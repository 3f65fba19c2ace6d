"""OpenAPI document download.

Fetches the vendor OpenAPI document and keeps a scratch copy on disk so a
failed run can be inspected. Callers must pass the scratch path to
``cleanup`` in a ``finally`` block.
"""

import json
import logging
import secrets
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

import requests

from zentitle_codegen.errors import DownloadError
from zentitle_codegen.parser.openapi import load_spec_file

logger = logging.getLogger(__name__)

OPENAPI_URL = "https://api.nalpeiron.io/openapi/v1/2024-01-01/openapi.json"


@dataclass
class SpecDocument:
    spec: dict
    version: str
    temp_file_path: Path
    source: str


def download_spec(url: str | None = None, timeout: float | None = None) -> SpecDocument:
    """Fetch the OpenAPI document and materialize it to a scratch file."""
    url = url or OPENAPI_URL
    logger.info("Downloading OpenAPI spec from: %s", url)

    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise DownloadError(None, str(e), url) from e

    if not response.ok:
        raise DownloadError(response.status_code, response.reason or "", url)

    try:
        spec = response.json()
    except ValueError as e:
        raise DownloadError(response.status_code, f"response is not JSON: {e}", url) from e
    return _materialize(spec, url)


def load_spec(source: str | None = None, timeout: float | None = None) -> SpecDocument:
    """Load the OpenAPI document from a local file or, otherwise, a URL."""
    if source and not source.startswith(("http://", "https://")):
        path = Path(source)
        if path.is_file():
            logger.info("Reading OpenAPI spec from: %s", path)
            return _materialize(load_spec_file(path), str(path))
    return download_spec(source, timeout=timeout)


def cleanup(temp_file_path: Path) -> None:
    """Remove the scratch file. Never raises."""
    try:
        temp_file_path.unlink()
        logger.info("Cleaned up temporary file: %s", temp_file_path)
    except OSError as e:
        logger.warning("Failed to cleanup temporary file %s: %s", temp_file_path, e)


def spec_version(spec: dict) -> str:
    info = spec.get("info") if isinstance(spec, dict) else None
    version = info.get("version") if isinstance(info, dict) else None
    return str(version) if version else "unknown"


def _materialize(spec: dict, source: str) -> SpecDocument:
    version = spec_version(spec)
    name = f"openapi-{int(time.time() * 1000)}-{secrets.token_hex(5)}.json"
    temp_file_path = Path(tempfile.gettempdir()) / name
    temp_file_path.write_text(json.dumps(spec, indent=2, default=str), encoding="utf-8")

    logger.info("Using OpenAPI spec version: %s", version)
    logger.debug("Temporary file: %s", temp_file_path)
    return SpecDocument(spec=spec, version=version, temp_file_path=temp_file_path, source=source)
