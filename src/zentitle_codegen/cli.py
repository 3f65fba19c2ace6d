"""CLI entry point for zentitle-codegen."""

import json
import logging
from pathlib import Path

import click
from jinja2 import TemplateError

from zentitle_codegen.config import (
    DEFAULT_COMPONENT,
    DEFAULT_OUTPUT_DIR,
    PRODUCT_CONFIGS,
    ProductConfig,
    build_generation_config,
    split_list,
)
from zentitle_codegen.errors import GeneratorError
from zentitle_codegen.generator.orchestrator import OpenApiGenerator
from zentitle_codegen.generator.webhooks import WebhookEventGenerator
from zentitle_codegen.versions import DEFAULT_VERSION_FILE, VersionTracker

product_option = click.option(
    "--product",
    type=click.Choice(sorted(PRODUCT_CONFIGS)),
    default=None,
    help="Apply a product preset (tag filter, output directory, excluded resources).",
)
openapi_option = click.option(
    "--openapi-path",
    envvar="ZENTITLE_OPENAPI_URL",
    default=None,
    help="OpenAPI document URL or local file. Defaults to the vendor endpoint.",
)
output_option = click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=None, help="Node output directory."
)
version_file_option = click.option(
    "--version-file",
    type=click.Path(path_type=Path),
    default=DEFAULT_VERSION_FILE,
    show_default=True,
    help="Version-tracking JSON document.",
)
timeout_option = click.option(
    "--timeout", type=float, default=None, help="Download timeout in seconds."
)


def _resolve_product(name: str | None) -> ProductConfig | None:
    return PRODUCT_CONFIGS[name] if name else None


def _output_dir(output: Path | None, product: ProductConfig | None) -> Path:
    if output:
        return output
    return Path(product.output_dir if product else DEFAULT_OUTPUT_DIR)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def main(verbose: bool):
    """Zentitle code generator: build n8n node sources from the OpenAPI spec."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s" if verbose else "%(message)s",
    )


@main.command()
@product_option
@openapi_option
@click.option("--include-tags", default=None, help="Comma-separated OpenAPI tags to include.")
@output_option
@click.option("--exclude-resources", default=None, help="Comma-separated resource names to skip.")
@click.option("--get-only", is_flag=True, help="Generate GET operations only.")
@click.option("--no-defaults", is_flag=True, help="Do not apply the preset's GET-only default.")
@version_file_option
@timeout_option
def generate(
    product: str | None,
    openapi_path: str | None,
    include_tags: str | None,
    output: Path | None,
    exclude_resources: str | None,
    get_only: bool,
    no_defaults: bool,
    version_file: Path,
    timeout: float | None,
):
    """Generate resource handlers, properties and registry files."""
    preset = _resolve_product(product)
    config = build_generation_config(
        product=preset,
        include_tags=split_list(include_tags),
        exclude_resources=split_list(exclude_resources),
        get_only=get_only,
        no_defaults=no_defaults,
    )
    if config.allowed_methods:
        click.echo(f"Filtering to {', '.join(config.allowed_methods)} methods only")
    if config.include_only_tags:
        click.echo(f"Including tags: {', '.join(config.include_only_tags)}")
    if config.excluded_resources:
        click.echo(f"Excluding resources: {', '.join(config.excluded_resources)}")

    generator = OpenApiGenerator(
        output_dir=_output_dir(output, preset),
        openapi_url=openapi_path,
        config=config,
        version_tracker=VersionTracker(version_file),
        component_name=preset.component_name if preset else DEFAULT_COMPONENT,
        node_display_name=f"Nalpeiron {preset.display_name}" if preset else "Nalpeiron",
        timeout=timeout,
    )
    try:
        result = generator.generate()
    except (GeneratorError, TemplateError) as e:
        raise click.ClickException(f"Generation failed: {e}") from e

    click.echo(
        f"Generated {len(result.resources)} resources ({len(result.files_written)} files) "
        f"from API version {result.api_version}"
    )


@main.command()
@product_option
@openapi_option
@output_option
@version_file_option
@timeout_option
def webhooks(
    product: str | None,
    openapi_path: str | None,
    output: Path | None,
    version_file: Path,
    timeout: float | None,
):
    """Generate the trigger node's webhook event files."""
    preset = _resolve_product(product)
    generator = WebhookEventGenerator(
        output_dir=_output_dir(output, preset),
        openapi_url=openapi_path,
        version_tracker=VersionTracker(version_file),
        component_name=f"{preset.component_name if preset else DEFAULT_COMPONENT}Trigger",
        excluded_events=preset.excluded_webhooks if preset else None,
        timeout=timeout,
    )
    try:
        events = generator.generate()
    except (GeneratorError, TemplateError) as e:
        raise click.ClickException(f"Webhook generation failed: {e}") from e

    click.echo(f"Generated {len(events)} webhook events")


@main.command()
@version_file_option
def info(version_file: Path):
    """Show the recorded API version for each generated component."""
    version_info = VersionTracker(version_file).get_version_info()
    if version_info is None:
        raise click.ClickException(f"No version information found at {version_file}")
    click.echo(json.dumps(version_info, indent=2))
