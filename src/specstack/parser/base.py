"""Intermediate representation produced by the OpenAPI parser.

The parser converts a loosely-typed document tree into these frozen
models; the SQL and hook generators only ever read them.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE"]
Location = Literal["path", "query", "header", "cookie"]

HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE")
LOCATIONS: tuple[str, ...] = ("path", "query", "header", "cookie")


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class PrimitiveType(_Frozen):
    """integer / number / boolean / string, or 'unknown' when unspecified."""

    kind: Literal["primitive"] = "primitive"
    name: str = "unknown"
    format: str | None = None


class ArrayType(_Frozen):
    kind: Literal["array"] = "array"
    items: "TypeNode"


class RefType(_Frozen):
    """A named entity, e.g. `#/components/schemas/Pet` -> Pet."""

    kind: Literal["reference"] = "reference"
    name: str


class ObjectType(_Frozen):
    kind: Literal["object"] = "object"
    properties: dict[str, "TypeNode"] = {}


TypeNode = Annotated[
    Union[PrimitiveType, ArrayType, RefType, ObjectType],
    Field(discriminator="kind"),
]

ArrayType.model_rebuild()
ObjectType.model_rebuild()


class Column(_Frozen):
    """A single table column."""

    name: str
    type: TypeNode
    nullable: bool
    primary_key: bool = False


class Table(_Frozen):
    """A relational entity derived from a named schema."""

    name: str
    columns: tuple[Column, ...] = ()

    @property
    def primary_key(self) -> tuple[str, ...]:
        return tuple(col.name for col in self.columns if col.primary_key)


class Parameter(_Frozen):
    """A single operation parameter (path, query, header, or cookie)."""

    name: str
    location: Location
    required: bool
    type: TypeNode = PrimitiveType(name="string")


class Function(_Frozen):
    """One HTTP verb on one path."""

    name: str
    method: HttpMethod
    path: str
    parameters: tuple[Parameter, ...] = ()
    request_body_type: str | None = None
    response_body_type: str | None = None
    summary: str = ""

    @property
    def path_parameters(self) -> tuple[Parameter, ...]:
        return tuple(p for p in self.parameters if p.location == "path")

    @property
    def query_parameters(self) -> tuple[Parameter, ...]:
        return tuple(p for p in self.parameters if p.location == "query")


class Spec(_Frozen):
    """IR root: every table and every function of one document."""

    tables: tuple[Table, ...] = ()
    functions: tuple[Function, ...] = ()
