import pytest
from pydantic import ValidationError

from zentitle_codegen.parser.base import GenerationConfig, Operation, Parameter, Resource


def _param(name: str, location: str) -> Parameter:
    return Parameter(name=name, display_name=name.title(), type="string", required=False, location=location)


class TestParameter:
    def test_defaults(self):
        p = Parameter(name="id", display_name="ID", type="string", required=True, location="path")
        assert p.description == ""

    def test_is_immutable(self):
        p = _param("q", "query")
        with pytest.raises(ValidationError):
            p.name = "other"


class TestOperation:
    def test_parameter_views(self):
        op = Operation(
            name="get",
            display_name="Get Customer",
            description="Get a customer",
            method="GET",
            path="/api/v1/customers/{id}",
            parameters=[_param("id", "path"), _param("expand", "query"), _param("x-tenant", "header")],
        )
        assert [p.name for p in op.path_parameters] == ["id"]
        assert [p.name for p in op.query_parameters] == ["expand"]
        assert op.is_write_operation is False
        assert op.is_list_operation is False

    @pytest.mark.parametrize("method, expected", [("POST", True), ("PUT", True), ("PATCH", True), ("DELETE", False)])
    def test_write_operation(self, method, expected):
        op = Operation(name="x", display_name="X", description="", method=method, path="/api/v1/x")
        assert op.is_write_operation is expected


class TestResource:
    def test_serialization_roundtrip(self):
        resource = Resource(
            name="apiClient",
            display_name="API Client",
            description="Manage API clients",
            file_name="api-client",
            handler_class_name="ApiClientResourceHandler",
            properties_export_name="apiClientProperties",
            operations=[
                Operation(name="list", display_name="List", description="", method="GET", path="/api/v1/api-clients")
            ],
        )
        data = resource.model_dump()
        resource2 = Resource(**data)
        assert resource2 == resource
        assert resource2.schemas == []


class TestGenerationConfig:
    def test_defaults(self):
        config = GenerationConfig()
        assert config.generate_handlers is True
        assert config.generate_properties is True
        assert config.update_registry is True
        assert config.allowed_methods is None
        assert config.excluded_resources is None
        assert config.include_only_tags is None
