"""Generates one node's sources from the OpenAPI document."""

import logging
from pathlib import Path

from pydantic import BaseModel

from zentitle_codegen import downloader
from zentitle_codegen.config import DEFAULT_COMPONENT
from zentitle_codegen.errors import ArtifactValidationError
from zentitle_codegen.generator.engine import TemplateEngine
from zentitle_codegen.generator.files import (
    HANDLER_SUFFIX,
    PROPERTIES_SUFFIX,
    clean_generated,
    write_artifact,
)
from zentitle_codegen.generator.registry import RegistryBuilder
from zentitle_codegen.generator.validator import validate_files
from zentitle_codegen.parser.base import GenerationConfig, Resource
from zentitle_codegen.parser.openapi import extract_resources
from zentitle_codegen.versions import VersionTracker

logger = logging.getLogger(__name__)

HANDLERS_DIR = Path("resources") / "handlers"
PROPERTIES_DIR = Path("properties")


class GenerationResult(BaseModel):
    """Summary of one completed generation run."""

    component: str
    api_version: str
    resources: list[str]
    files_written: list[Path]


class OpenApiGenerator:
    """Generates handler, properties and registry sources for one node."""

    def __init__(
        self,
        output_dir: Path,
        openapi_url: str | None = None,
        config: GenerationConfig | None = None,
        version_tracker: VersionTracker | None = None,
        component_name: str = DEFAULT_COMPONENT,
        engine: TemplateEngine | None = None,
        timeout: float | None = None,
        node_display_name: str = "Nalpeiron",
    ):
        self.output_dir = Path(output_dir)
        self.openapi_url = openapi_url
        self.config = config or GenerationConfig()
        self.version_tracker = version_tracker or VersionTracker()
        self.component_name = component_name
        self.engine = engine or TemplateEngine()
        self.timeout = timeout
        self.registry = RegistryBuilder(self.output_dir, self.engine, node_display_name)

    def generate(self) -> GenerationResult:
        logger.info("Starting OpenAPI code generation...")
        document = downloader.load_spec(self.openapi_url, timeout=self.timeout)

        try:
            self.clean_generated_directories()

            resources = extract_resources(document.spec, self.config)
            logger.info("Found %d resources to generate", len(resources))

            written: list[Path] = []
            for resource in resources:
                written.extend(self.generate_resource(resource))

            if self.config.update_registry:
                written.extend(self.update_registry_files(resources))

            self.version_tracker.update_component_version(
                self.component_name,
                document.source,
                document.version,
                {
                    "generatedBy": "openapi-generator",
                    "resourceCount": len(resources),
                    "config": {
                        "methods": self.config.allowed_methods,
                        "excludedResources": self.config.excluded_resources,
                        "includedTags": self.config.include_only_tags,
                    },
                },
            )
            logger.info("Code generation completed successfully!")
        finally:
            downloader.cleanup(document.temp_file_path)

        return GenerationResult(
            component=self.component_name,
            api_version=document.version,
            resources=[r.name for r in resources],
            files_written=written,
        )

    def generate_resource(self, resource: Resource) -> list[Path]:
        """Render and write the handler and properties files of one resource."""
        logger.info("Generating resource: %s", resource.name)
        rendered: dict[Path, str] = {}
        if self.config.generate_handlers:
            rendered[HANDLERS_DIR / f"{resource.file_name}{HANDLER_SUFFIX}"] = self.engine.render_handler(resource)
        if self.config.generate_properties:
            rendered[PROPERTIES_DIR / f"{resource.file_name}{PROPERTIES_SUFFIX}"] = self.engine.render_properties(resource)
        return self._write_validated(rendered)

    def update_registry_files(self, resources: list[Resource]) -> list[Path]:
        rendered = self.registry.render(resources)
        self._validate(rendered)
        written = self.registry.write(resources, rendered)
        shared = self.registry.ensure_shared_runtime()
        if shared:
            written.append(shared)
        return written

    def clean_generated_directories(self) -> None:
        logger.info("Cleaning generated directories...")
        clean_generated(self.output_dir / HANDLERS_DIR, HANDLER_SUFFIX)
        clean_generated(self.output_dir / PROPERTIES_DIR, PROPERTIES_SUFFIX)

    def _write_validated(self, rendered: dict[Path, str]) -> list[Path]:
        self._validate(rendered)
        written = []
        for relative, content in rendered.items():
            written.append(write_artifact(self.output_dir / relative, content))
            logger.info("  Wrote %s", relative.as_posix())
        return written

    def _validate(self, rendered: dict[Path, str]) -> None:
        errors = validate_files({p.as_posix(): c for p, c in rendered.items()})
        if errors:
            raise ArtifactValidationError(errors)
