"""Filesystem helpers shared by the generators."""

import logging
from pathlib import Path

from zentitle_codegen.errors import FileSystemError

logger = logging.getLogger(__name__)

HANDLER_SUFFIX = "-handler.ts"
PROPERTIES_SUFFIX = "-properties.ts"


def write_artifact(path: Path, content: str) -> Path:
    """Write a generated file, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FileSystemError(path, e) from e
    return path


def clean_generated(directory: Path, suffix: str) -> list[Path]:
    """Delete files in directory whose name ends with suffix.

    Hand-written files (any other name) are left alone. Failures are logged
    as warnings and never raised.
    """
    removed = []
    try:
        candidates = sorted(directory.iterdir()) if directory.is_dir() else []
    except OSError as e:
        logger.warning("Error cleaning %s: %s", directory, e)
        return removed

    for path in candidates:
        if not path.name.endswith(suffix) or not path.is_file():
            continue
        try:
            path.unlink()
        except OSError as e:
            logger.warning("Could not remove %s: %s", path, e)
            continue
        logger.info("  Removed %s", path.name)
        removed.append(path)
    return removed
