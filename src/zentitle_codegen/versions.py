"""Provenance tracking for generated components.

A single JSON document records which API version each component (node or
trigger) was last generated from. Each update replaces one component's
record wholesale and restamps the shared API source. There is no locking:
two concurrent runs will overwrite each other's top-level stamp.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_VERSION_FILE = Path("api-version.json")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class VersionTracker:
    """Reads and upserts the version-tracking document."""

    def __init__(self, path: Path = DEFAULT_VERSION_FILE):
        self.path = Path(path)

    def update_component_version(
        self,
        component_name: str,
        source_url: str,
        source_version: str,
        metadata: dict,
    ) -> dict:
        logger.info("Updating version info for %s...", component_name)

        info = self.get_version_info()
        if info is None:
            info = {
                "lastUpdated": _now(),
                "apiSource": {"url": source_url, "version": source_version},
                "components": {},
            }

        info["apiSource"] = {"url": source_url, "version": source_version}
        info["lastUpdated"] = _now()
        if not isinstance(info.get("components"), dict):
            info["components"] = {}
        info["components"][component_name] = {**metadata, "generatedAt": _now()}

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(info, indent=2) + "\n", encoding="utf-8")

        logger.info("Updated version info: %s generated from API %s", component_name, source_version)
        return info

    def get_version_info(self) -> dict | None:
        """Return the tracking document, or None if absent or unreadable."""
        try:
            info = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        return info if isinstance(info, dict) else None
