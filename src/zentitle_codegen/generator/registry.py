"""Folds all generated resources into the node's lookup files."""

import logging
from pathlib import Path

from zentitle_codegen.generator.engine import TemplateEngine
from zentitle_codegen.generator.files import write_artifact
from zentitle_codegen.parser.base import Resource

logger = logging.getLogger(__name__)

PROPERTY_REGISTRY = Path("property-registry.ts")
RESOURCE_INDEX = Path("resources") / "index.ts"
RESOURCE_CONFIG = Path("resource-config.ts")
SHARED_RUNTIME = Path("..") / "shared" / "resource-handler.ts"


class RegistryBuilder:
    """Renders the property registry, resource index and resource config."""

    def __init__(self, output_dir: Path, engine: TemplateEngine, node_display_name: str = "Nalpeiron"):
        self.output_dir = Path(output_dir)
        self.engine = engine
        self.node_display_name = node_display_name

    def render(self, resources: list[Resource]) -> dict[Path, str]:
        """Return {relative path: content} for the three registry files."""
        default_resource = resources[0].name if resources else ""
        return {
            PROPERTY_REGISTRY: self.engine.render(
                "property-registry.ts.j2", resources=resources, default_resource=default_resource
            ),
            RESOURCE_INDEX: self.engine.render("resource-index.ts.j2", resources=resources),
            RESOURCE_CONFIG: self.engine.render(
                "resource-config.ts.j2", resources=resources, node_display_name=self.node_display_name
            ),
        }

    def write(self, resources: list[Resource], rendered: dict[Path, str] | None = None) -> list[Path]:
        logger.info("Updating registry files...")
        rendered = rendered or self.render(resources)
        written = []
        for relative, content in rendered.items():
            written.append(write_artifact(self.output_dir / relative, content))
            logger.info("  Regenerated %s", relative.as_posix())
        return written

    def ensure_shared_runtime(self) -> Path | None:
        """Write the ResourceHandler interface module unless one already exists."""
        path = (self.output_dir / SHARED_RUNTIME).resolve()
        if path.exists():
            return None
        write_artifact(path, self.engine.render("resource-handler.ts.j2"))
        logger.info("  Created %s", path)
        return path
