"""Type mapping and identifier sanitization shared by every back-end.

Both target vocabularies (SQL and TypeScript) are driven from the same
TypeNode descriptors so a field resolves the same way in the DDL, the
stored-procedure stubs and the client declarations.
"""

import re
from typing import Callable

from pydantic import BaseModel, ConfigDict

from specstack.parser.base import ArrayType, ObjectType, PrimitiveType, RefType, TypeNode

ARRAY_MARKER = "[]"
INLINE_PREFIX = "inline_"
TABLE_FALLBACK = "unnamed_table"
FUNCTION_FALLBACK = "unnamed_function"

PRIMITIVE_NAMES = ("integer", "number", "boolean", "string")

SQL_PRIMITIVES = {
    "integer": "INTEGER",
    "number": "FLOAT",
    "boolean": "BOOLEAN",
    "string": "VARCHAR",
}
SQL_TIMESTAMP = "TIMESTAMP"
SQL_JSON = "JSONB"
SQL_UNKNOWN = "TEXT"

CLIENT_PRIMITIVES = {
    "integer": "number",
    "number": "number",
    "boolean": "boolean",
    "string": "string",
}
CLIENT_OBJECT = "Record<string, any>"
CLIENT_UNKNOWN = "any"

_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_]")
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_WORD_SPLIT = re.compile(r"[^A-Za-z0-9]+")


def starts_with_uppercase(name: str) -> bool:
    """Default entity rule: `Pet` is an entity, `string` is not."""
    return bool(name) and name[0].isupper()


def is_id_column(name: str) -> bool:
    """Default primary-key rule: a column named exactly `id`."""
    return name == "id"


class NamingPolicy(BaseModel):
    """Overridable naming heuristics used by the parser and the back-ends."""

    model_config = ConfigDict(frozen=True)

    is_entity_reference: Callable[[str], bool] = starts_with_uppercase
    is_primary_key: Callable[[str], bool] = is_id_column


DEFAULT_POLICY = NamingPolicy()


# -- identifiers ----------------------------------------------------------


def sanitize_identifier(raw: str | None, fallback: str) -> str:
    """Turn an arbitrary string into `[A-Za-z_][A-Za-z0-9_]*`.

    Strips one trailing array marker, drops every other character outside
    the identifier alphabet and prefixes a leading digit with `_`. An empty
    result is replaced by `fallback`.
    """
    if not raw:
        return fallback
    if raw.endswith(ARRAY_MARKER):
        raw = raw[: -len(ARRAY_MARKER)]
    stripped = _INVALID_CHARS.sub("", raw)
    if not stripped:
        return fallback
    if stripped[0].isdigit():
        stripped = f"_{stripped}"
    if not _IDENTIFIER.match(stripped):
        return fallback
    return stripped


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name))


def unique_name(name: str, taken: set[str], ignore_case: bool = False) -> str:
    """Return `name`, or `name_2`, `name_3`, ... if already in `taken`.

    The result is added to `taken`. With `ignore_case`, names are compared
    lowercased (unquoted SQL identifiers fold to lower case).
    """
    key = str.lower if ignore_case else str
    candidate = name
    suffix = 2
    while key(candidate) in taken:
        candidate = f"{name}_{suffix}"
        suffix += 1
    taken.add(key(candidate))
    return candidate


def capitalize(s: str) -> str:
    return s[:1].upper() + s[1:]


def pascal_case(text: str) -> str:
    """`pets-creation` -> `PetsCreation`, `{petId}` -> `PetId`."""
    return "".join(capitalize(part) for part in _WORD_SPLIT.split(text) if part)


def hook_name(function_name: str) -> str:
    return "use" + pascal_case(function_name)


def table_identifier(name: str | None) -> str:
    return sanitize_identifier(name, TABLE_FALLBACK)


def function_identifier(name: str | None) -> str:
    return sanitize_identifier(name, FUNCTION_FALLBACK)


# -- type-reference strings -----------------------------------------------


def inline_descriptor(function_name: str, role: str) -> str:
    """Placeholder type for an inline (unreferenced) body schema."""
    return f"{INLINE_PREFIX}{function_name}_{role}"


def type_from_name(name: str, policy: NamingPolicy = DEFAULT_POLICY) -> TypeNode:
    """Resolve a body type string such as `Pet`, `Pet[]` or `string`."""
    if name.endswith(ARRAY_MARKER):
        return ArrayType(items=type_from_name(name[: -len(ARRAY_MARKER)], policy))
    if policy.is_entity_reference(name):
        return RefType(name=name)
    if name in PRIMITIVE_NAMES:
        return PrimitiveType(name=name)
    if name.startswith(INLINE_PREFIX):
        return ObjectType()
    return PrimitiveType()


def entity_names(node: TypeNode) -> list[str]:
    """Names of every entity a descriptor refers to, in first-seen order."""
    if isinstance(node, RefType):
        return [node.name]
    if isinstance(node, ArrayType):
        return entity_names(node.items)
    if isinstance(node, ObjectType):
        names: list[str] = []
        for child in node.properties.values():
            for name in entity_names(child):
                if name not in names:
                    names.append(name)
        return names
    return []


# -- target vocabularies --------------------------------------------------


def map_to_sql_type(node: TypeNode) -> str:
    """Map a descriptor to a PostgreSQL column/argument type."""
    if isinstance(node, ArrayType):
        return map_to_sql_type(node.items) + ARRAY_MARKER
    if isinstance(node, (RefType, ObjectType)):
        return SQL_JSON
    if node.name == "string" and node.format == "date-time":
        return SQL_TIMESTAMP
    return SQL_PRIMITIVES.get(node.name, SQL_UNKNOWN)


def map_to_client_type(node: TypeNode) -> str:
    """Map a descriptor to a TypeScript type expression."""
    if isinstance(node, ArrayType):
        return map_to_client_type(node.items) + ARRAY_MARKER
    if isinstance(node, RefType):
        return sanitize_identifier(node.name, CLIENT_UNKNOWN)
    if isinstance(node, ObjectType):
        return CLIENT_OBJECT
    return CLIENT_PRIMITIVES.get(node.name, CLIENT_UNKNOWN)
