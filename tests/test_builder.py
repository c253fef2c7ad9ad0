import json

import pytest

from openapi_to_node.builder import NodePropertiesBuilder, apply_overrides, is_match
from openapi_to_node.errors import NoOperationsError
from openapi_to_node.node.models import Override

ENTITY_TAG = "🖥️ Entity"

COMPONENTS = {
    "schemas": {
        "Entity": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "maxLength": 54, "example": "default", "description": "Entity name"},
                "start": {
                    "type": "boolean",
                    "description": "Boolean flag description",
                    "example": True,
                    "default": True,
                },
                "config": {"$ref": "#/components/schemas/EntityConfig"},
            },
            "required": ["name"],
        },
        "EntityConfig": {
            "type": "object",
            "properties": {"foo": {"type": "string", "example": "bar"}},
        },
    }
}

RESOURCE = {
    "displayName": "Resource",
    "name": "resource",
    "type": "options",
    "noDataExpression": True,
    "options": [{"name": ENTITY_TAG, "value": "Entity", "description": ""}],
    "default": "",
}


def show(operation, resource="Entity"):
    return {"show": {"resource": [resource], "operation": [operation]}}


def operation_selector(name, action, method, url, resource="Entity"):
    return {
        "displayName": "Operation",
        "name": "operation",
        "type": "options",
        "noDataExpression": True,
        "displayOptions": {"show": {"resource": [resource]}},
        "options": [
            {
                "name": name,
                "value": name,
                "action": action,
                "description": action,
                "routing": {"request": {"method": method, "url": url, "encoding": "json", "json": True}},
            }
        ],
        "default": "",
    }


def notice(title, operation, resource="Entity"):
    return {
        "displayName": title,
        "name": "operation",
        "type": "notice",
        "typeOptions": {"theme": "info"},
        "default": "",
        "displayOptions": show(operation, resource),
    }


def list_all_field(resource="Entity"):
    return {
        "displayName": "All",
        "name": "all",
        "type": "boolean",
        "default": False,
        "description": "Boolean flag description",
        "displayOptions": show("List", resource),
        "routing": {
            "send": {"type": "query", "property": "all", "value": "={{ $value }}", "propertyInDotNotation": False}
        },
    }


def list_paths(tags, name="all"):
    return {
        "/api/entities": {
            "get": {
                "operationId": "EntityController_list",
                "summary": "List all entities",
                "parameters": [
                    {
                        "name": name,
                        "required": False,
                        "in": "query",
                        "example": False,
                        "description": "Boolean flag description",
                        "schema": {"type": "boolean"},
                    }
                ],
                "tags": tags,
            }
        }
    }


def create_paths(schema):
    return {
        "/api/entities": {
            "post": {
                "operationId": "EntityController_create",
                "summary": "Create entity",
                "requestBody": {"content": {"application/json": {"schema": schema}}},
                "tags": [ENTITY_TAG],
            }
        }
    }


class TestQueryParameters:
    def test_query_param_schema(self, custom_config):
        result = NodePropertiesBuilder({"paths": list_paths([ENTITY_TAG])}, custom_config).build()
        assert result == [
            RESOURCE,
            operation_selector("List", "List all entities", "GET", "=/api/entities"),
            notice("GET /api/entities", "List"),
            list_all_field(),
        ]

    def test_dot_in_field_name(self, custom_config):
        result = NodePropertiesBuilder({"paths": list_paths([ENTITY_TAG], "filter.entities.all")}, custom_config).build()
        field = result[-1]
        assert field["displayName"] == "Filter Entities All"
        assert field["name"] == "filter-entities-all"
        assert field["routing"]["send"]["property"] == "filter.entities.all"

    def test_query_param_content(self, custom_config):
        paths = list_paths([ENTITY_TAG], "filter")
        parameter = paths["/api/entities"]["get"]["parameters"][0]
        del parameter["schema"]
        del parameter["example"]
        parameter["content"] = {"application/json": {"schema": {"$ref": "#/components/schemas/EntityConfig"}}}

        result = NodePropertiesBuilder({"paths": paths, "components": COMPONENTS}, custom_config).build()
        field = result[-1]
        assert field["type"] == "json"
        assert field["default"] == '{\n  "foo": "bar"\n}'
        assert field["routing"]["send"] == {
            "type": "query",
            "property": "filter",
            "value": "={{ $value }}",
            "propertyInDotNotation": False,
        }


class TestPathParameters:
    def test_path_param(self, custom_base_config):
        paths = {
            "/api/entities/{entity}": {
                "get": {
                    "operationId": "EntityController_get",
                    "summary": "Get entity",
                    "parameters": [
                        {
                            "name": "entity",
                            "required": True,
                            "in": "path",
                            "schema": {"default": "default"},
                            "description": "Entity <code>name</code>",
                        }
                    ],
                    "tags": [ENTITY_TAG],
                }
            }
        }
        result = NodePropertiesBuilder({"paths": paths}, custom_base_config).build()
        assert result == [
            RESOURCE,
            operation_selector("Get", "Get entity", "GET", '=/api/entities/{{$parameter["entity"]}}'),
            {
                "displayName": "Entity",
                "name": "entity",
                "type": "string",
                "default": "default",
                "required": True,
                "description": "Entity <code>name</code>",
                "displayOptions": show("Get"),
            },
        ]

    def test_path_param_name_matches_url(self, custom_base_config):
        paths = {
            "/api/users/{user.id}/{fields[model]}": {
                "get": {
                    "operationId": "UserController_get",
                    "summary": "Get user",
                    "parameters": [
                        {"name": "user.id", "in": "path", "required": True, "schema": {"type": "string"}},
                        {"name": "fields[model]", "in": "path", "required": True, "schema": {"type": "string"}},
                    ],
                    "tags": [ENTITY_TAG],
                }
            }
        }
        result = NodePropertiesBuilder({"paths": paths}, custom_base_config).build()
        url = result[1]["options"][0]["routing"]["request"]["url"]
        assert url == '=/api/users/{{$parameter["user-id"]}}/{{$parameter["fields%5Bmodel%5D"]}}'
        assert [f["name"] for f in result[2:]] == ["user-id", "fields%5Bmodel%5D"]


class TestRequestBody:
    def test_request_body(self, custom_base_config):
        doc = {"paths": create_paths({"$ref": "#/components/schemas/Entity"}), "components": COMPONENTS}
        result = NodePropertiesBuilder(doc, custom_base_config).build()
        assert result == [
            RESOURCE,
            operation_selector("Create", "Create entity", "POST", "=/api/entities"),
            {
                "displayName": "Name",
                "name": "name",
                "type": "string",
                "default": "default",
                "required": True,
                "description": "Entity name",
                "displayOptions": show("Create"),
                "routing": {
                    "send": {"type": "body", "property": "name", "value": "={{ $value }}", "propertyInDotNotation": False}
                },
            },
            {
                "displayName": "Additional Body Fields",
                "name": "additionalBodyFields",
                "type": "collection",
                "default": {},
                "placeholder": "Add Field",
                "displayOptions": show("Create"),
                "options": [
                    {
                        "displayName": "Start",
                        "name": "start",
                        "type": "boolean",
                        "default": True,
                        "description": "Boolean flag description",
                        "routing": {
                            "send": {
                                "type": "body",
                                "property": "start",
                                "value": "={{ $value }}",
                                "propertyInDotNotation": False,
                            }
                        },
                    },
                    {
                        "displayName": "Config",
                        "name": "config",
                        "type": "json",
                        "default": json.dumps({"foo": "bar"}, indent=2),
                        "routing": {
                            "send": {
                                "type": "body",
                                "property": "config",
                                "value": "={{ JSON.parse($value) }}",
                                "propertyInDotNotation": False,
                            }
                        },
                    },
                ],
            },
        ]

    def test_enum_schema(self, custom_base_config):
        schema = {
            "type": "object",
            "properties": {"type": {"type": "string", "enum": ["type1", "type2"]}},
            "required": ["type"],
        }
        result = NodePropertiesBuilder({"paths": create_paths(schema)}, custom_base_config).build()
        assert result[-1] == {
            "displayName": "Type",
            "name": "type",
            "type": "options",
            "default": "type1",
            "required": True,
            "options": [{"name": "Type 1", "value": "type1"}, {"name": "Type 2", "value": "type2"}],
            "displayOptions": show("Create"),
            "routing": {
                "send": {"type": "body", "property": "type", "value": "={{ $value }}", "propertyInDotNotation": False}
            },
        }

    def test_body_array(self, custom_base_config):
        schema = {"type": "array", "items": {"type": "string"}}
        result = NodePropertiesBuilder({"paths": create_paths(schema)}, custom_base_config).build()
        assert result[-1] == {
            "displayName": "Body",
            "name": "body",
            "type": "json",
            "default": '[\n  "string"\n]',
            "displayOptions": show("Create"),
            "routing": {"request": {"body": "={{ JSON.parse($value) }}"}},
        }

    def test_unsupported_body_becomes_notice(self, custom_base_config):
        paths = create_paths({"type": "object"})
        paths["/api/entities"]["post"]["requestBody"] = {
            "content": {"multipart/form-data": {"schema": {"type": "object"}}}
        }
        result = NodePropertiesBuilder({"paths": paths}, custom_base_config).build()
        assert result[-1] == {
            "displayName": "POST /api/entities<br/><br/>There's no body available for request, "
            "kindly use HTTP Request node to send body",
            "name": "operation",
            "type": "notice",
            "default": "",
            "displayOptions": show("Create"),
        }


class TestRequiredOptionalSplit:
    def test_optional_parameters_in_collections(self, custom_config):
        paths = {
            "/api/entities": {
                "get": {
                    "operationId": "EntityController_list",
                    "summary": "List all entities",
                    "parameters": [
                        {"name": "required_param", "required": True, "in": "query", "schema": {"type": "string"}},
                        {"name": "optional_param", "required": False, "in": "query", "schema": {"type": "string"}},
                    ],
                    "tags": [ENTITY_TAG],
                },
                "post": {
                    "operationId": "EntityController_create",
                    "summary": "Create entity",
                    "requestBody": {
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "object",
                                    "properties": {
                                        "required_body": {"type": "string"},
                                        "optional_body": {"type": "string"},
                                    },
                                    "required": ["required_body"],
                                }
                            }
                        }
                    },
                    "tags": [ENTITY_TAG],
                },
            }
        }
        result = NodePropertiesBuilder({"paths": paths}, custom_config).build()

        def fields_of(operation):
            return {
                f["name"]: f
                for f in result
                if f.get("displayOptions", {}).get("show", {}).get("operation") == [operation]
                and f["type"] not in ("options", "notice")
            }

        list_fields = fields_of("List")
        assert list_fields["required_param"]["required"] is True
        assert "optional_param" not in list_fields
        query_collection = list_fields["additionalQueryParameters"]
        assert query_collection["type"] == "collection"
        assert [o["name"] for o in query_collection["options"]] == ["optional_param"]

        create_fields = fields_of("Create")
        assert create_fields["required_body"]["required"] is True
        assert "optional_body" not in create_fields
        body_collection = create_fields["additionalBodyFields"]
        assert [o["name"] for o in body_collection["options"]] == ["optional_body"]


class TestResources:
    def test_multiple_tags(self, custom_config):
        result = NodePropertiesBuilder({"paths": list_paths([ENTITY_TAG, "Another Tag"])}, custom_config).build()
        assert result == [
            {
                **RESOURCE,
                "options": [
                    {"name": ENTITY_TAG, "value": "Entity", "description": ""},
                    {"name": "Another Tag", "value": "Another Tag", "description": ""},
                ],
            },
            operation_selector("List", "List all entities", "GET", "=/api/entities"),
            operation_selector("List", "List all entities", "GET", "=/api/entities", "Another Tag"),
            notice("GET /api/entities", "List"),
            list_all_field(),
            notice("GET /api/entities", "List", "Another Tag"),
            list_all_field("Another Tag"),
        ]

    def test_fan_out_copies_are_independent(self, custom_config):
        builder = NodePropertiesBuilder({"paths": list_paths([ENTITY_TAG, "Another Tag"])}, custom_config)
        result = builder.build()
        result[4]["routing"]["send"]["value"] = "changed"
        assert result[6]["routing"]["send"]["value"] == "={{ $value }}"

    def test_no_tags_default_resource(self, custom_config):
        result = NodePropertiesBuilder({"paths": list_paths([])}, custom_config).build()
        assert result[0]["options"] == [{"name": "Default", "value": "Default", "description": ""}]
        assert result[1]["displayOptions"] == {"show": {"resource": ["Default"]}}
        assert result[-1] == list_all_field("Default")

    def test_default_parsers_default_resource(self):
        result = NodePropertiesBuilder({"paths": list_paths([])}).build()
        assert result[0]["options"] == [{"name": "Default", "value": "Default", "description": ""}]

    def test_declared_tag_description(self):
        doc = {"paths": list_paths(["Pets"]), "tags": [{"name": "Pets", "description": "Everything about pets"}]}
        result = NodePropertiesBuilder(doc).build()
        assert result[0]["options"] == [{"name": "Pets", "value": "Pets", "description": "Everything about pets"}]

    def test_declared_tags_without_operations_ignored(self):
        doc = {"paths": list_paths(["Pets"]), "tags": [{"name": "Unused"}, {"name": "Pets"}]}
        result = NodePropertiesBuilder(doc).build()
        assert [o["value"] for o in result[0]["options"]] == ["Pets"]


class TestDegenerateDocuments:
    def test_empty_document(self):
        with pytest.raises(NoOperationsError):
            NodePropertiesBuilder({"paths": {}}).build()

    def test_only_skipped_operations(self):
        paths = list_paths(["Pets"])
        paths["/api/entities"]["get"]["deprecated"] = True
        with pytest.raises(NoOperationsError):
            NodePropertiesBuilder({"paths": paths}).build()


class TestDeterminism:
    def test_repeated_builds_identical(self, fixtures_dir):
        from openapi_to_node.openapi.loader import load_document

        doc = load_document(fixtures_dir / "entities.yaml")
        first = NodePropertiesBuilder(doc).build()
        second = NodePropertiesBuilder(doc).build()
        assert first == second
        assert json.dumps(first, default=repr) == json.dumps(second, default=repr)


class TestOverrides:
    def test_override_replaces_single_key(self, custom_base_config):
        doc = {"paths": create_paths({"$ref": "#/components/schemas/Entity"}), "components": COMPONENTS}

        plain = NodePropertiesBuilder(doc, custom_base_config).build()
        overrides = [Override(find={"name": "config"}, replace={"default": "={{ $json.config }}"})]
        result = NodePropertiesBuilder(doc, custom_base_config).build(overrides)

        # config is optional, so it lives in the body collection
        [before] = [o for o in plain[-1]["options"] if o["name"] == "config"]
        [after] = [o for o in result[-1]["options"] if o["name"] == "config"]
        assert after == {**before, "default": "={{ $json.config }}"}
        assert result[:-1] == plain[:-1]
        assert [o for o in result[-1]["options"] if o["name"] != "config"] == [
            o for o in plain[-1]["options"] if o["name"] != "config"
        ]

    def test_override_scoped_to_operation_reaches_collection_options(self, custom_base_config):
        doc = {"paths": create_paths({"$ref": "#/components/schemas/Entity"}), "components": COMPONENTS}
        overrides = [
            {"find": {"name": "start", "displayOptions": show("Create")}, "replace": {"default": False}},
            {"find": {"name": "config", "displayOptions": show("Delete")}, "replace": {"default": "={{ $json.config }}"}},
        ]
        result = NodePropertiesBuilder(doc, custom_base_config).build(overrides)

        start, config = result[-1]["options"]
        assert start["default"] is False
        assert "displayOptions" not in start
        assert config["default"] == json.dumps({"foo": "bar"}, indent=2)

    def test_later_rules_win(self):
        properties = [{"name": "a", "default": 1}, {"name": "b", "default": 2}]
        apply_overrides(
            properties,
            [
                {"find": {"name": "a"}, "replace": {"default": "first"}},
                {"find": {"name": "a"}, "replace": {"default": "second", "required": True}},
            ],
        )
        assert properties == [{"name": "a", "default": "second", "required": True}, {"name": "b", "default": 2}]

    def test_partial_nested_match(self):
        prop = {"name": "x", "displayOptions": {"show": {"resource": ["A"], "operation": ["Get"]}}}
        assert is_match(prop, {"displayOptions": {"show": {"resource": ["A"]}}})
        assert not is_match(prop, {"displayOptions": {"show": {"resource": ["B"]}}})
        assert not is_match(prop, {"missing": None})
