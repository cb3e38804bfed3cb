"""OpenAPI / Swagger document parser.

Parses OpenAPI 3.x and Swagger 2.0 documents into the Spec IR: named
schemas become tables, and every recognised HTTP verb on every path
becomes a function.
"""

import logging
import re
from pathlib import Path
from typing import Any

from specstack.errors import SchemaError
from specstack.parser.base import (
    HTTP_METHODS,
    LOCATIONS,
    ArrayType,
    Column,
    Function,
    ObjectType,
    Parameter,
    PrimitiveType,
    RefType,
    Spec,
    Table,
    TypeNode,
)
from specstack.parser.loader import load_document, parse_document_text
from specstack.parser.validator import validate_spec
from specstack.typemap import (
    ARRAY_MARKER,
    DEFAULT_POLICY,
    PRIMITIVE_NAMES,
    NamingPolicy,
    inline_descriptor,
    pascal_case,
)

logger = logging.getLogger(__name__)

_STATUS_2XX = re.compile(r"^2\d\d$")


def parse_openapi(file_path: Path, policy: NamingPolicy = DEFAULT_POLICY) -> Spec:
    """Parse an OpenAPI/Swagger file into a Spec."""
    return parse_spec(load_document(file_path), policy=policy)


def parse_spec(document: Any, policy: NamingPolicy = DEFAULT_POLICY) -> Spec:
    """Parse a loaded document tree (or raw YAML/JSON text) into a Spec."""
    if isinstance(document, str):
        document = parse_document_text(document)
    if not isinstance(document, dict):
        raise SchemaError("Invalid OpenAPI document: the top level must be an object")

    resolver = RefResolver(document)

    tables = [
        _parse_table(str(name), schema, resolver, policy)
        for name, schema in _entity_schemas(document).items()
    ]

    functions = []
    paths = document.get("paths") or {}
    if not isinstance(paths, dict):
        raise SchemaError("Invalid OpenAPI document: 'paths' must be an object")

    for path, path_item in paths.items():
        path_item = resolver.follow(path_item)
        if not isinstance(path_item, dict):
            logger.debug("Skipping path %s: not an object", path)
            continue
        shared_params = path_item.get("parameters")
        for method in HTTP_METHODS:
            operation = path_item.get(method.lower())
            if not isinstance(operation, dict):
                continue
            functions.append(_parse_operation(method, str(path), operation, shared_params, resolver))

    spec = Spec(tables=tables, functions=functions)

    errors = validate_spec(spec)
    if errors:
        details = "\n".join(f"  {key}: {msg}" for key, msg in errors.items())
        raise SchemaError(f"Generated artifact names collide:\n{details}")

    return spec


class RefResolver:
    """Resolves local JSON-pointer `$ref`s against the owning document."""

    def __init__(self, document: dict):
        self.document = document

    def lookup(self, ref: str) -> Any:
        """Return the node `ref` points at, or None when it does not exist."""
        if not ref.startswith("#/"):
            return None
        node: Any = self.document
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def follow(self, node: Any) -> Any:
        """Follow a chain of `$ref` objects until an inline node is reached.

        Returns None when a link in the chain is missing. Raises SchemaError
        when the chain loops back on itself.
        """
        chain: list[str] = []
        while isinstance(node, dict) and "$ref" in node:
            ref = node["$ref"]
            if not isinstance(ref, str):
                return None
            if ref in chain:
                raise SchemaError(f"Reference cycle: {' -> '.join(chain + [ref])}")
            chain.append(ref)
            node = self.lookup(ref)
            if node is None:
                logger.debug("Unresolved reference %s", ref)
                return None
        return node


# -- schemas -> tables ------------------------------------------------------


def _entity_schemas(document: dict) -> dict:
    components = document.get("components")
    schemas = components.get("schemas") if isinstance(components, dict) else None
    if schemas is None:
        schemas = document.get("definitions")  # Swagger 2.0
    return schemas if isinstance(schemas, dict) else {}


def _parse_table(name: str, schema: Any, resolver: RefResolver, policy: NamingPolicy) -> Table:
    properties, required = _collect_properties(schema, resolver, frozenset())
    columns = [
        Column(
            name=prop_name,
            type=schema_type_node(prop_schema),
            nullable=prop_name not in required,
            primary_key=policy.is_primary_key(prop_name),
        )
        for prop_name, prop_schema in properties.items()
    ]
    return Table(name=name, columns=columns)


def _collect_properties(schema: Any, resolver: RefResolver, visiting: frozenset) -> tuple[dict, set]:
    """Gather properties and required names, expanding `allOf` and aliases."""
    if isinstance(schema, dict) and isinstance(schema.get("$ref"), str):
        ref = schema["$ref"]
        if ref in visiting:
            raise SchemaError(f"Reference cycle through {ref}")
        visiting = visiting | {ref}
    schema = resolver.follow(schema)
    if not isinstance(schema, dict):
        return {}, set()

    properties: dict[str, Any] = {}
    required: set[str] = set()
    for member in _as_list(schema.get("allOf")):
        member_props, member_required = _collect_properties(member, resolver, visiting)
        properties.update(member_props)
        required |= member_required

    own = schema.get("properties")
    if isinstance(own, dict):
        properties.update({str(k): v for k, v in own.items()})
    required.update(str(r) for r in _as_list(schema.get("required")))
    return properties, required


def schema_type_node(schema: Any) -> TypeNode:
    """Convert a JSON-schema fragment into a TypeNode without following refs."""
    if not isinstance(schema, dict):
        return PrimitiveType()

    ref = schema.get("$ref")
    if isinstance(ref, str):
        return RefType(name=ref_name(ref))

    all_of = _as_list(schema.get("allOf"))
    if len(all_of) == 1:
        return schema_type_node(all_of[0])

    schema_type = schema.get("type")
    if isinstance(schema_type, list):  # OpenAPI 3.1: ["string", "null"]
        non_null = [t for t in schema_type if t != "null"]
        schema_type = non_null[0] if len(non_null) == 1 else None

    if schema_type == "array":
        return ArrayType(items=schema_type_node(schema.get("items")))
    if schema_type == "object" or "properties" in schema:
        props = schema.get("properties")
        if not isinstance(props, dict):
            props = {}
        return ObjectType(properties={str(k): schema_type_node(v) for k, v in props.items()})
    if schema_type in PRIMITIVE_NAMES:
        fmt = schema.get("format")
        return PrimitiveType(name=schema_type, format=fmt if isinstance(fmt, str) else None)
    return PrimitiveType()


def ref_name(ref: str) -> str:
    """Extract the type name from a $ref like '#/components/schemas/Pet'."""
    return ref.rsplit("/", 1)[-1].replace("~1", "/").replace("~0", "~")


# -- operations -> functions ------------------------------------------------


def _parse_operation(
    method: str,
    path: str,
    operation: dict,
    shared_params: Any,
    resolver: RefResolver,
) -> Function:
    name = operation.get("operationId")
    if not isinstance(name, str) or not name:
        name = function_name(method, path)

    raw_params = merge_parameters(shared_params, operation.get("parameters"), resolver)
    params = [p for p in (_parse_parameter(raw) for raw in raw_params) if p is not None]

    summary = operation.get("summary")
    return Function(
        name=name,
        method=method,
        path=path,
        parameters=params,
        request_body_type=_request_body_type(name, operation, raw_params, resolver),
        response_body_type=_response_body_type(name, operation, resolver),
        summary=summary if isinstance(summary, str) else "",
    )


def function_name(method: str, path: str) -> str:
    """Fallback name from method and path: GET /pets/{petId} -> getPetsPetId."""
    segments = [s for s in path.split("/") if s]
    return method.lower() + "".join(pascal_case(s) for s in segments)


def merge_parameters(shared: Any, own: Any, resolver: RefResolver) -> list[dict]:
    """Union of path-level and operation-level parameters.

    References are resolved first, then parameters are keyed by name so an
    operation-level declaration replaces the path-level one in place.
    Unresolvable references and nameless parameters are dropped.
    """
    merged: dict[str, dict] = {}
    for raw in [*_as_list(shared), *_as_list(own)]:
        param = resolver.follow(raw)
        if not isinstance(param, dict):
            logger.debug("Dropping parameter %r: reference could not be resolved", raw)
            continue
        name = param.get("name")
        if not isinstance(name, str) or not name:
            logger.debug("Dropping parameter without a name: %r", param)
            continue
        merged[name] = param
    return list(merged.values())


def _parse_parameter(param: dict) -> Parameter | None:
    location = param.get("in", "query")
    if location not in LOCATIONS:
        # Swagger 2.0 body/formData parameters are not part of the bundle
        return None

    if "schema" in param:
        type_node = schema_type_node(param["schema"])
    elif "type" in param:
        type_node = schema_type_node(param)
    else:
        type_node = PrimitiveType(name="string")

    return Parameter(
        name=param["name"],
        location=location,
        required=bool(param.get("required", False)),
        type=type_node,
    )


def _request_body_type(name: str, operation: dict, raw_params: list[dict], resolver: RefResolver) -> str | None:
    body = resolver.follow(operation.get("requestBody"))
    if isinstance(body, dict):
        schema = _json_schema(body.get("content"))
    else:
        schema = next((p.get("schema") for p in raw_params if p.get("in") == "body"), None)
    if schema is None:
        return None
    return body_type_name(schema, name, "request")


def _response_body_type(name: str, operation: dict, resolver: RefResolver) -> str | None:
    responses = operation.get("responses")
    if not isinstance(responses, dict):
        return None

    by_code = {str(code): resp for code, resp in responses.items()}
    for code in sorted((c for c in by_code if _STATUS_2XX.match(c)), key=int):
        response = resolver.follow(by_code[code])
        if not isinstance(response, dict):
            continue
        schema = _json_schema(response.get("content"))
        if schema is None:
            schema = response.get("schema")  # Swagger 2.0
        if schema is not None:
            return body_type_name(schema, name, "response")
    return None


def _json_schema(content: Any) -> Any:
    """Schema of the JSON media type in a `content` map, if any."""
    if not isinstance(content, dict):
        return None
    media_types = {str(k).split(";")[0].strip().lower(): v for k, v in content.items()}
    media = media_types.get("application/json")
    if media is None:
        media = next((v for k, v in media_types.items() if k.endswith("+json")), None)
    if not isinstance(media, dict):
        return None
    return media.get("schema")


def body_type_name(schema: Any, function_name: str, role: str) -> str:
    """Named reference -> its name (`Pet`, `Pet[]`); inline -> placeholder."""
    depth = 0
    node = schema
    while isinstance(node, dict) and "$ref" not in node and node.get("type") == "array":
        node = node.get("items")
        depth += 1
    if isinstance(node, dict) and isinstance(node.get("$ref"), str):
        return ref_name(node["$ref"]) + ARRAY_MARKER * depth
    return inline_descriptor(function_name, role)


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []
