"""Product presets and run configuration."""

from pydantic import BaseModel

from zentitle_codegen.parser.base import GenerationConfig

DEFAULT_OUTPUT_DIR = "nodes/Nalpeiron/Zentitle2"
DEFAULT_COMPONENT = "NalpeironZentitle2"


class ProductConfig(BaseModel):
    """A named generation preset for one product node."""

    tag: str
    output_dir: str
    display_name: str
    component_name: str
    excluded_resources: list[str] = []
    excluded_operations: dict[str, list[str]] = {}
    excluded_webhooks: list[str] = []


PRODUCT_CONFIGS: dict[str, ProductConfig] = {
    "zentitle": ProductConfig(
        tag="Zentitle",
        output_dir="nodes/Nalpeiron/Zentitle2",
        display_name="Zentitle2",
        component_name="NalpeironZentitle2",
        excluded_resources=["tenant", "abl", "account", "localLicenseServer"],
    ),
    "zengain": ProductConfig(
        tag="Zengain",
        output_dir="nodes/Nalpeiron/Zengain",
        display_name="Zengain",
        component_name="NalpeironZengain",
        excluded_resources=["account", "insight", "product", "subscription"],
    ),
}


def split_list(value: str | None) -> list[str]:
    """Split a comma-separated CLI value, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def build_generation_config(
    product: ProductConfig | None = None,
    include_tags: list[str] | None = None,
    exclude_resources: list[str] | None = None,
    get_only: bool = False,
    no_defaults: bool = False,
) -> GenerationConfig:
    """Combine a product preset with explicit CLI filters.

    A preset contributes its tag filter, its excluded resources and
    operations, and a GET-only method filter. --no-defaults drops the GET-only
    default; --get-only always forces it.
    """
    tags = list(include_tags or [])
    excluded = list(exclude_resources or [])
    methods = None
    excluded_operations = None

    if product:
        excluded_operations = product.excluded_operations or None
        if not tags:
            tags = [product.tag]
        excluded = product.excluded_resources + [r for r in excluded if r not in product.excluded_resources]
        if not no_defaults:
            methods = ["GET"]

    if get_only:
        methods = ["GET"]

    return GenerationConfig(
        allowed_methods=methods,
        excluded_resources=[r.lower() for r in excluded] or None,
        include_only_tags=tags or None,
        excluded_operations=excluded_operations,
    )
