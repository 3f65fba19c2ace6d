"""Name conversions between OpenAPI path segments and generated identifiers.

Every function here is pure: the same input always produces the same output.
"""

import re

ACRONYMS = {acronym.upper(): acronym for acronym in (
    "API", "ID", "URL", "HTTP", "JSON", "XML", "JWT", "OAuth", "RSA",
)}

IRREGULAR_PLURALS = {
    "identities": "identity",
    "companies": "company",
    "categories": "category",
    "properties": "property",
    "activities": "activity",
    "authorities": "authority",
    "entities": "entity",
}

CRUD_VERBS = {
    "get": "Get",
    "list": "List",
    "create": "Create",
    "update": "Update",
    "delete": "Delete",
}

HANDLER_CLASS_SUFFIX = "ResourceHandler"
PROPERTIES_EXPORT_SUFFIX = "Properties"

_SEPARATORS = re.compile(r"[-_\s]+")
_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def to_resource_name(segment: str) -> str:
    """Convert a path segment to a singular camelCase resource name.

    'customers' -> 'customer', 'identities' -> 'identity',
    'api-clients' -> 'apiClient'.
    """
    cleaned = re.sub(r"-api$", "", segment)
    words = cleaned.split("-")
    words[-1] = _singularize(words[-1])
    return to_camel_case("-".join(words))


def _singularize(word: str) -> str:
    if word in IRREGULAR_PLURALS:
        return IRREGULAR_PLURALS[word]
    return re.sub(r"s$", "", word)


def to_display_name(name: str) -> str:
    """Title-case a name for display: 'apiClient' -> 'API Client'."""
    words = [w for w in _SEPARATORS.split(_CAMEL_BOUNDARY.sub(r"\1 \2", name)) if w]
    return " ".join(_display_word(w) for w in words)


def _display_word(word: str) -> str:
    acronym = ACRONYMS.get(word.upper())
    if acronym:
        return acronym
    return word[:1].upper() + word[1:].lower()


def to_file_name(name: str) -> str:
    """Kebab-case a camelCase name: 'apiClient' -> 'api-client'."""
    return _CAMEL_BOUNDARY.sub(r"\1-\2", name).lower()


def to_camel_case(value: str) -> str:
    """'api-client' -> 'apiClient', 'customer_notes' -> 'customerNotes'."""
    words = [w for w in _SEPARATORS.split(value) if w]
    if not words:
        return ""
    head = words[0][:1].lower() + words[0][1:]
    return head + "".join(w[:1].upper() + w[1:] for w in words[1:])


def to_pascal_case(value: str) -> str:
    """'apiClient' -> 'ApiClient', 'activations-log' -> 'ActivationsLog'."""
    camel = to_camel_case(value)
    return camel[:1].upper() + camel[1:]


def to_handler_class_name(resource_name: str) -> str:
    return f"{to_pascal_case(resource_name)}{HANDLER_CLASS_SUFFIX}"


def to_properties_export_name(resource_name: str) -> str:
    return f"{resource_name}{PROPERTIES_EXPORT_SUFFIX}"


def to_plural(word: str) -> str:
    if word.endswith("y"):
        return word[:-1] + "ies"
    if word.endswith(("s", "sh", "ch", "x", "z")):
        return word + "es"
    return word + "s"


def to_method_name(operation: str, resource_name: str) -> str:
    """Derive a handler method name from an operation key.

    The five CRUD keys become '<verb><Resource>' ('list' pluralizes the
    resource); any other key is already a well-formed identifier and is
    returned unchanged.
    """
    if operation == "list":
        return f"list{to_pascal_case(to_plural(resource_name))}"
    if operation in CRUD_VERBS:
        return f"{operation}{to_pascal_case(resource_name)}"
    return operation


def to_operation_display_name(operation: str, resource_display_name: str) -> str:
    """'list' -> 'List Customers', 'listActivations' -> 'List Customer Activations'."""
    verb = CRUD_VERBS.get(operation)
    if verb:
        if operation == "list":
            return f"{verb} {to_plural(resource_display_name)}"
        return f"{verb} {resource_display_name}"

    for base, verb in CRUD_VERBS.items():
        suffix = operation[len(base):]
        if operation.startswith(base) and suffix:
            return f"{verb} {resource_display_name} {to_display_name(suffix)}"

    return to_display_name(operation)


def to_operation_action(operation: str, resource_display_name: str) -> str:
    """Sentence-case variant of the display name, used for n8n action labels."""
    display_name = to_operation_display_name(operation, resource_display_name)
    return display_name[:1].upper() + display_name[1:].lower()


def unique_name(base: str, taken: set[str]) -> str:
    """Return base, or base2, base3, ... whichever is first not in taken."""
    if base not in taken:
        return base
    counter = 2
    while f"{base}{counter}" in taken:
        counter += 1
    return f"{base}{counter}"
