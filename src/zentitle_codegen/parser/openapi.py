"""OpenAPI 3.x parser.

Groups the operations of an OpenAPI document into Resource models. The
first path segment after the API root names the resource; the remaining
shape of the path and the HTTP method name the operation.

The parser is tolerant: entries that do not fit its assumptions (non-object
path items, paths outside the API root, unsupported methods) are skipped,
never raised.
"""

import json
import logging
import re
from pathlib import Path

import yaml

from zentitle_codegen import naming
from .base import GenerationConfig, Operation, Parameter, Resource

logger = logging.getLogger(__name__)

API_ROOT = "/api/v1/"
HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")
RESERVED_RESOURCE_NAMES = {"root", "api", "v1", "health", "status", "ping"}

TYPE_MAP = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
    "array": "multiOptions",
    "object": "collection",
}

_PATH_PARAM = re.compile(r"\{([^}]+)\}")


def load_spec_file(file_path: Path) -> dict:
    """Read a local OpenAPI document (JSON or YAML)."""
    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def extract_resources(spec: dict, config: GenerationConfig | None = None) -> list[Resource]:
    """Parse an OpenAPI document into resources sorted by name."""
    drafts: dict[str, dict] = {}
    paths = spec.get("paths") if isinstance(spec, dict) else None
    if not isinstance(paths, dict):
        return []

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        for method, operation in path_item.items():
            if not isinstance(operation, dict) or method.upper() not in HTTP_METHODS:
                continue
            method = method.upper()

            if config and config.allowed_methods and method not in config.allowed_methods:
                continue
            if config and config.include_only_tags and not _has_any_tag(operation, config.include_only_tags):
                continue

            segments = _api_segments(path)
            if not segments or segments[0].lower() in RESERVED_RESOURCE_NAMES:
                continue

            resource_name = naming.to_resource_name(segments[0])
            operation_key = sanitize_operation_key(infer_operation_key(segments, method))

            if _is_excluded(resource_name, config) or _is_excluded_operation(resource_name, operation, config):
                continue

            draft = drafts.get(resource_name)
            if draft is None:
                draft = _new_draft(resource_name, operation)
                drafts[resource_name] = draft

            taken = {op.name for op in draft["operations"]}
            unique_key = naming.unique_name(operation_key, taken)
            if unique_key != operation_key:
                logger.debug("Renamed %s %s operation %s -> %s", method, path, operation_key, unique_key)

            draft["operations"].append(
                _build_operation(path, method, operation, unique_key, operation_key, segments)
            )

    resources = [_finalize(draft) for draft in drafts.values()]
    resources = [r for r in resources if _is_valid_resource(r)]
    return sorted(resources, key=lambda r: r.name)


def infer_operation_key(segments: list[str], method: str) -> str:
    """Name an operation from the path segments after the API root.

    /customers GET -> list, /customers POST -> post,
    /customers/{id} GET -> get, /customers/{id}/activations GET -> listActivations.
    """
    method = method.lower()

    if len(segments) == 1:
        return "list" if method == "get" else method

    if len(segments) == 2 and _is_param(segments[1]):
        return "get" if method == "get" else method

    suffix = "".join(
        naming.to_pascal_case(segment.replace("-", "_"))
        for segment in segments[1:]
        if not _is_param(segment)
    )
    if not suffix:
        return _standard_operation(method, has_id=len(segments) > 1)

    if method == "get":
        return f"get{suffix}" if _is_param(segments[-1]) else f"list{suffix}"
    if method == "post":
        return f"create{suffix}"
    if method in ("put", "patch"):
        return f"update{suffix}"
    if method == "delete":
        return f"delete{suffix}"
    return f"{method}{suffix}"


def sanitize_operation_key(key: str) -> str:
    """Reduce an inferred key to a valid identifier, falling back to 'operation'."""
    key = re.sub(r"\{[^}]*\}", "", key)
    key = re.sub(r"[^a-zA-Z0-9_]", "", key)
    key = re.sub(r"^[^a-zA-Z]+", "", key)
    key = re.sub(r"_([a-z])", lambda m: m.group(1).upper(), key)
    return key or "operation"


def _standard_operation(method: str, has_id: bool) -> str:
    if method == "get":
        return "get" if has_id else "list"
    if method == "post":
        return "create"
    if method in ("put", "patch"):
        return "update"
    return method


def _api_segments(path: str) -> list[str]:
    clean = path.split("?")[0]
    if not clean.startswith(API_ROOT):
        return []
    return [s for s in clean[len(API_ROOT):].split("/") if s]


def _is_param(segment: str) -> bool:
    return segment.startswith("{")


def _tags(operation: dict) -> list[str]:
    tags = operation.get("tags")
    if not isinstance(tags, list):
        return []
    return [t for t in tags if isinstance(t, str)]


def _has_any_tag(operation: dict, tags: list[str]) -> bool:
    operation_tags = _tags(operation)
    return any(tag in operation_tags for tag in tags)


def _is_excluded(resource_name: str, config: GenerationConfig | None) -> bool:
    if not config or not config.excluded_resources:
        return False
    excluded = {name.lower() for name in config.excluded_resources}
    return resource_name.lower() in excluded


def _is_excluded_operation(resource_name: str, operation: dict, config: GenerationConfig | None) -> bool:
    if not config or not config.excluded_operations:
        return False
    operation_id = operation.get("operationId")
    return bool(operation_id) and operation_id in config.excluded_operations.get(resource_name, [])


def _is_valid_resource(resource: Resource) -> bool:
    return bool(resource.operations) and resource.name.lower() not in RESERVED_RESOURCE_NAMES


def _new_draft(resource_name: str, operation: dict) -> dict:
    display_name = naming.to_display_name(resource_name)
    tags = _tags(operation)
    subject = tags[0] if tags else display_name
    return {
        "name": resource_name,
        "display_name": display_name,
        "description": f"Manage {subject.lower()}",
        "operations": [],
    }


def _finalize(draft: dict) -> Resource:
    schemas: list[str] = []
    for op in draft["operations"]:
        for ref in (op.request_body_schema, op.response_schema):
            if ref and ref not in schemas:
                schemas.append(ref)

    name = draft["name"]
    return Resource(
        name=name,
        display_name=draft["display_name"],
        description=draft["description"],
        file_name=naming.to_file_name(name),
        handler_class_name=naming.to_handler_class_name(name),
        properties_export_name=naming.to_properties_export_name(name),
        operations=draft["operations"],
        schemas=schemas,
    )


def _build_operation(
    path: str,
    method: str,
    operation: dict,
    key: str,
    inferred_key: str,
    segments: list[str],
) -> Operation:
    display_name, description = _describe(inferred_key, operation)
    return Operation(
        name=key,
        display_name=display_name,
        description=description,
        method=method,
        path=path,
        operation_id=operation.get("operationId"),
        parameters=_extract_parameters(operation, path),
        request_body_schema=_request_body_ref(operation),
        response_schema=_response_ref(operation),
        is_list_operation=inferred_key == "list",
        is_nested_operation=len(segments) > 2,
        tags=_tags(operation),
    )


def _describe(key: str, operation: dict) -> tuple[str, str]:
    summary = operation.get("summary")
    if summary:
        return summary, operation.get("description") or summary

    display_name = naming.CRUD_VERBS.get(key) or naming.to_display_name(key)
    return display_name, operation.get("description") or f"{display_name} operation"


def _extract_parameters(operation: dict, path: str) -> list[Parameter]:
    params = [
        Parameter(
            name=name,
            display_name=naming.to_display_name(name),
            type="string",
            required=True,
            description=f"The {name} identifier",
            location="path",
        )
        for name in _PATH_PARAM.findall(path)
    ]

    declared = operation.get("parameters")
    for p in declared if isinstance(declared, list) else []:
        if not isinstance(p, dict) or "$ref" in p or p.get("in") != "query" or "name" not in p:
            continue
        params.append(
            Parameter(
                name=p["name"],
                display_name=naming.to_display_name(p["name"]),
                type=map_schema_type(p.get("schema")),
                required=bool(p.get("required", False)),
                description=p.get("description") or "",
                location="query",
            )
        )
    return params


def map_schema_type(schema: dict | None) -> str:
    """Map an OpenAPI schema type to an n8n field type."""
    schema_type = schema.get("type") if isinstance(schema, dict) else None
    if not isinstance(schema_type, str):
        return "string"
    return TYPE_MAP.get(schema_type, "string")


def _json_schema_ref(container: dict | None) -> str | None:
    if not isinstance(container, dict) or "$ref" in container:
        return None
    content = container.get("content")
    media = content.get("application/json") if isinstance(content, dict) else None
    schema = media.get("schema") if isinstance(media, dict) else None
    if isinstance(schema, dict) and "$ref" in schema:
        return schema["$ref"]
    return None


def _request_body_ref(operation: dict) -> str | None:
    return _json_schema_ref(operation.get("requestBody"))


def _response_ref(operation: dict) -> str | None:
    responses = operation.get("responses")
    if not isinstance(responses, dict):
        return None
    for status_code, response in responses.items():
        if str(status_code).startswith("2"):
            ref = _json_schema_ref(response)
            if ref:
                return ref
    return None
