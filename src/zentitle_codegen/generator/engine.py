"""Renders per-resource TypeScript sources for the n8n node.

Each artifact is a jinja2 skeleton under ``templates/``. This module builds
the view model for a resource (method names, path expressions, sorted option
lists, sanitized descriptions) and the skeleton only lays it out. Templates
render with ``StrictUndefined`` so a missing value fails generation instead
of leaking placeholder text into the output.
"""

import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from zentitle_codegen import naming
from zentitle_codegen.parser.base import Operation, Parameter, Resource
from zentitle_codegen.parser.openapi import API_ROOT

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

MAX_DESCRIPTION_LENGTH = 120

FIELD_DEFAULTS = {
    "string": "''",
    "number": "0",
    "boolean": "false",
    "multiOptions": "[]",
    "collection": "{}",
}

# Method parameters and locals the handler template declares itself.
HANDLER_LOCALS = {"executeFunctions", "credentials", "accessToken", "itemIndex", "additionalFields", "rawBody", "body"}

TS_RESERVED_WORDS = {
    "break", "case", "catch", "class", "const", "continue", "debugger", "default", "delete",
    "do", "else", "enum", "export", "extends", "false", "finally", "for", "function", "if",
    "import", "in", "instanceof", "new", "null", "return", "super", "switch", "this", "throw",
    "true", "try", "typeof", "var", "void", "while", "with", "let", "static", "yield",
    "await", "implements", "interface", "package", "private", "protected", "public",
}

PAGINATION_FIELDS = [
    {
        "display_name": "Page Number",
        "name": "pageNumber",
        "type": "number",
        "min_value": 1,
        "default": "1",
        "description": "Requested page number",
    },
    {
        "display_name": "Page Size",
        "name": "pageSize",
        "type": "number",
        "min_value": 1,
        "default": "10",
        "description": "Maximum number of items per page",
    },
]


def sanitize_description(description: str | None) -> str:
    """Make free text safe for a single-quoted TypeScript string literal.

    Collapses whitespace, drops braces and one trailing period, truncates to
    120 characters (appending '...') and escapes quotes and backslashes.
    """
    if not description:
        return ""
    text = re.sub(r"\s+", " ", description)
    text = re.sub(r"[{}]", "", text).strip()
    text = re.sub(r"\.$", "", text)
    if len(text) > MAX_DESCRIPTION_LENGTH:
        text = text[:MAX_DESCRIPTION_LENGTH] + "..."
    return escape_ts_string(text)


def escape_ts_string(value: str) -> str:
    """Escape a value for a TypeScript string or template literal."""
    return (
        str(value)
        .replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace('"', '\\"')
        .replace("`", "\\`")
    )


def sort_by_display_name(items: list[dict], key: str = "display_name") -> list[dict]:
    """Case-insensitive alphabetical order, stable on ties."""
    return sorted(items, key=lambda item: (item[key].casefold(), item[key]))


def _identifier(name: str) -> str:
    ident = naming.to_camel_case(re.sub(r"[^a-zA-Z0-9_\-\s]", "", name))
    ident = re.sub(r"[^a-zA-Z0-9_]", "", ident)
    return re.sub(r"^[^a-zA-Z_]+", "", ident) or "value"


def path_variables(names: list[str]) -> list[dict]:
    """Pair each path parameter with a distinct, non-reserved TypeScript local name."""
    taken = set(HANDLER_LOCALS)
    variables = []
    for name in names:
        ident = _identifier(name)
        if ident in TS_RESERVED_WORDS or ident in HANDLER_LOCALS:
            ident = f"{ident}Param"
        ident = naming.unique_name(ident, taken)
        taken.add(ident)
        variables.append({"name": name, "var": ident})
    return variables


def quote_list(values: list[str]) -> str:
    """Render a list as the body of a TypeScript string array: 'a', 'b'."""
    return ", ".join(f"'{escape_ts_string(v)}'" for v in values)


def union_type(values: list[str]) -> str:
    """Render a TypeScript string-literal union, or 'never' when empty."""
    return " | ".join(f"'{escape_ts_string(v)}'" for v in values) or "never"


def build_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["ts"] = escape_ts_string
    env.filters["quoted"] = quote_list
    env.filters["union"] = union_type
    env.filters["describe"] = sanitize_description
    return env


class TemplateEngine:
    """Renders the handler and properties sources for one resource."""

    def __init__(self, env: Environment | None = None):
        self.env = env or build_environment()

    def render(self, template_name: str, **context) -> str:
        return self.env.get_template(template_name).render(**context)

    def render_handler(self, resource: Resource) -> str:
        methods = self._handler_methods(resource)
        needs_data_object = any(m["additional_fields"] or m["has_body"] for m in methods)
        type_imports = ["IDataObject", "IExecuteFunctions"] if needs_data_object else ["IExecuteFunctions"]
        runtime_imports = ["jsonParse"] if any(m["has_body"] for m in methods) else []

        return self.render(
            "handler.ts.j2",
            resource=resource,
            type_imports=type_imports,
            runtime_imports=runtime_imports,
            methods=methods,
        )

    def render_properties(self, resource: Resource) -> str:
        list_operations = [op for op in resource.operations if op.is_list_operation]
        write_operations = [op for op in resource.operations if op.is_write_operation]

        return self.render(
            "properties.ts.j2",
            resource=resource,
            default_operation=resource.operations[0].name,
            operation_options=self._operation_options(resource),
            path_fields=self._path_fields(resource),
            list_operation_names=[op.name for op in list_operations],
            list_fields=self._additional_fields(list_operations) if list_operations else [],
            write_operation_names=[op.name for op in write_operations],
        )

    # -- handler --------------------------------------------------------------

    def unique_method_names(self, resource: Resource) -> dict[str, str]:
        """Map operation keys to handler method names, unique within the resource."""
        method_names: dict[str, str] = {}
        used: set[str] = set()
        for operation in resource.operations:
            base = naming.to_method_name(operation.name, resource.name)
            base = re.sub(r"[^a-zA-Z0-9_]", "", base)
            base = re.sub(r"^[^a-zA-Z]+", "", base) or "operation"
            name = naming.unique_name(base, used)
            used.add(name)
            method_names[operation.name] = name
        return method_names

    def _handler_methods(self, resource: Resource) -> list[dict]:
        method_names = self.unique_method_names(resource)
        return [self._handler_method(op, method_names[op.name]) for op in resource.operations]

    def _handler_method(self, operation: Operation, method_name: str) -> dict:
        path_params = path_variables([p.name for p in operation.path_parameters])
        return {
            "name": method_name,
            "operation": operation.name,
            "http_method": operation.method,
            "path_params": path_params,
            "additional_fields": bool(operation.query_parameters) or operation.is_list_operation,
            "has_body": operation.is_write_operation,
            "api_path": build_request_path(operation.path, path_params),
        }

    # -- properties -----------------------------------------------------------

    def _operation_options(self, resource: Resource) -> list[dict]:
        options = [
            {
                "display_name": naming.to_operation_display_name(op.name, resource.display_name),
                "value": op.name,
                "description": sanitize_description(op.description),
                "action": naming.to_operation_action(op.name, resource.display_name),
            }
            for op in resource.operations
        ]
        return sort_by_display_name(options)

    def _path_fields(self, resource: Resource) -> list[dict]:
        params: dict[str, Parameter] = {}
        users: dict[str, list[str]] = {}
        for operation in resource.operations:
            for param in operation.path_parameters:
                params.setdefault(param.name, param)
                users.setdefault(param.name, [])
                if operation.name not in users[param.name]:
                    users[param.name].append(operation.name)

        return [
            {
                "display_name": param.display_name,
                "name": param.name,
                "type": param.type,
                "required": "true" if param.required else "false",
                "operations": users[name],
                "description": sanitize_description(param.description),
            }
            for name, param in params.items()
        ]

    def _additional_fields(self, list_operations: list[Operation]) -> list[dict]:
        fields: dict[str, dict] = {}
        for operation in list_operations:
            for param in operation.query_parameters:
                if param.name in fields:
                    continue
                fields[param.name] = {
                    "display_name": param.display_name,
                    "name": param.name,
                    "type": param.type,
                    "min_value": None,
                    "default": FIELD_DEFAULTS.get(param.type, "''"),
                    "description": sanitize_description(param.description),
                }

        for pagination in PAGINATION_FIELDS:
            if pagination["name"] not in fields:
                fields[pagination["name"]] = dict(pagination)

        return sort_by_display_name(list(fields.values()))


def build_request_path(path: str, path_params: list[dict]) -> str:
    """Turn '/customers/{id}' into the template-literal body '/api/v1/customers/${id}'."""
    api_path = path if path.startswith(API_ROOT.rstrip("/")) else API_ROOT.rstrip("/") + path
    variables = {param["name"]: param["var"] for param in reversed(path_params)}

    def substitute(match: re.Match) -> str:
        var = variables.get(match.group(1))
        return f"${{{var}}}" if var else match.group(0)

    return re.sub(r"\{([^}]+)\}", substitute, escape_ts_string(api_path))
