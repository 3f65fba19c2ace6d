"""Normalized resource model parsed from an OpenAPI document.

The parser groups OpenAPI operations into these models; the template
engine and registry builder only ever see this representation.
"""

from pydantic import BaseModel, ConfigDict

WRITE_METHODS = ("POST", "PUT", "PATCH")


class Parameter(BaseModel):
    """A single operation input (path, query, header, or body)."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    type: str  # string / number / boolean / multiOptions / collection
    required: bool
    description: str = ""
    location: str  # path / query / header / body


class Operation(BaseModel):
    """One callable action on a resource, bound to a method and path."""

    model_config = ConfigDict(frozen=True)

    name: str  # operation key: list / get / post / listActivations ...
    display_name: str
    description: str
    method: str  # GET / POST / PUT / DELETE / PATCH
    path: str  # /api/v1/customers/{id}
    operation_id: str | None = None
    parameters: list[Parameter] = []
    request_body_schema: str | None = None
    response_schema: str | None = None
    is_list_operation: bool = False
    is_nested_operation: bool = False
    tags: list[str] = []

    @property
    def path_parameters(self) -> list[Parameter]:
        return [p for p in self.parameters if p.location == "path"]

    @property
    def query_parameters(self) -> list[Parameter]:
        return [p for p in self.parameters if p.location == "query"]

    @property
    def is_write_operation(self) -> bool:
        return self.method in WRITE_METHODS


class Resource(BaseModel):
    """One API noun exposed as a selectable resource in the node UI."""

    model_config = ConfigDict(frozen=True)

    name: str  # camelCase singular: customer, localLicenseServer
    display_name: str
    description: str
    file_name: str  # kebab-case: local-license-server
    handler_class_name: str
    properties_export_name: str
    operations: list[Operation]
    schemas: list[str] = []


class GenerationConfig(BaseModel):
    """Per-run generation switches and filters."""

    model_config = ConfigDict(frozen=True)

    generate_handlers: bool = True
    generate_properties: bool = True
    update_registry: bool = True
    allowed_methods: list[str] | None = None  # upper-cased, e.g. ["GET"]
    excluded_resources: list[str] | None = None  # exact names, lower-cased
    include_only_tags: list[str] | None = None
    excluded_operations: dict[str, list[str]] | None = None  # resource name -> operationIds


class WebhookEvent(BaseModel):
    """A webhook event declared under the OpenAPI document's x-webhooks section."""

    event_code: str  # customer.created
    name: str  # Customer Created
    description: str
    payload_schema: str | None = None
