"""SQL back-end: CREATE TABLE statements and CREATE FUNCTION stubs.

Rendering is total: verbs or shapes that cannot be turned into a
statement produce explanatory comments instead of raising.
"""

from specstack.generator.sql_builder import (
    ColumnDef,
    Comment,
    CreateFunction,
    CreateTable,
    Delete,
    Equals,
    FunctionArg,
    Insert,
    Select,
    Statement,
)
from specstack.parser.base import Function, Table
from specstack.typemap import (
    DEFAULT_POLICY,
    NamingPolicy,
    function_identifier,
    map_to_sql_type,
    sanitize_identifier,
    table_identifier,
    type_from_name,
    unique_name,
)

UNSUPPORTED_METHODS = ("HEAD", "OPTIONS", "TRACE")


class SqlGenerator:
    """Renders IR tables and functions as PostgreSQL text."""

    def __init__(self, policy: NamingPolicy = DEFAULT_POLICY):
        self.policy = policy

    def render_table(self, table: Table) -> str:
        columns = []
        primary_key = []
        taken: set[str] = set()
        for index, col in enumerate(table.columns):
            name = unique_name(sanitize_identifier(col.name, f"column{index}"), taken, ignore_case=True)
            columns.append(ColumnDef(name=name, type=map_to_sql_type(col.type), not_null=not col.nullable))
            if col.primary_key:
                primary_key.append(name)
        return CreateTable(
            name=table_identifier(table.name),
            columns=columns,
            primary_key=primary_key,
        ).render()

    def render_function(self, func: Function) -> str:
        """Render the function; bodies made only of comments return VOID."""
        body = self._body(func)
        returns = "VOID"
        if func.response_body_type and any(not isinstance(s, Comment) for s in body):
            returns = map_to_sql_type(type_from_name(func.response_body_type, self.policy))
        return CreateFunction(
            name=function_identifier(func.name),
            args=[
                FunctionArg(name=arg, type=map_to_sql_type(p.type))
                for arg, p in zip(_arg_names(func), func.parameters)
            ],
            returns=returns,
            body=body,
        ).render()

    # -- body strategies ------------------------------------------------------

    def table_name(self, func: Function) -> str:
        """Response type for GET, request type otherwise, else the function name."""
        type_name = func.response_body_type if func.method == "GET" else func.request_body_type
        return sanitize_identifier(type_name, function_identifier(func.name))

    def _body(self, func: Function) -> list[Statement]:
        if func.method in UNSUPPORTED_METHODS:
            return [Comment(text=f"HTTP method {func.method} is not supported for SQL generation.")]

        table = self.table_name(func)
        returning = func.response_body_type is not None

        if func.method == "GET":
            return self._select(func, table)
        if func.method == "POST":
            return [_body_placeholder(func, table), Insert(table=table, returning=returning)]
        if func.method in ("PUT", "PATCH"):
            return self._update(func, table)
        return [Delete(table=table, where=_path_filter(func), returning=returning)]

    def _select(self, func: Function, table: str) -> list[Statement]:
        statements: list[Statement] = [
            Comment(text=f"Query parameter '{p.name}' is accepted but not applied as a filter.")
            for p in func.query_parameters
        ]
        statements.append(Select(table=table, where=_path_filter(func)))
        return statements

    def _update(self, func: Function, table: str) -> list[Statement]:
        statements: list[Statement] = [_body_placeholder(func, table)]
        where = _path_filter(func)
        if where:
            predicates = " AND ".join(p.render() for p in where)
            statements.append(Comment(text=f"Target rows: WHERE {predicates}"))
        else:
            statements.append(
                Comment(text=f"WARNING: {func.name} has no path parameter identifying the row to update; no filter generated.")
            )
        return statements


def _arg_names(func: Function) -> list[str]:
    """`_<name>` per parameter, suffixed where two names clean up alike."""
    taken: set[str] = set()
    return [
        unique_name("_" + sanitize_identifier(p.name, f"param{i}"), taken, ignore_case=True)
        for i, p in enumerate(func.parameters)
    ]


def _path_filter(func: Function) -> list[Equals]:
    predicates = []
    for index, (param, arg) in enumerate(zip(func.parameters, _arg_names(func))):
        if param.location != "path":
            continue
        column = sanitize_identifier(param.name, f"param{index}")
        predicates.append(Equals(column=column, placeholder=arg))
    return predicates


def _body_placeholder(func: Function, table: str) -> Comment:
    if func.request_body_type:
        return Comment(
            text=f"PLACEHOLDER: map the fields of request body {func.request_body_type} onto the columns of {table}."
        )
    return Comment(text=f"PLACEHOLDER: {func.name} declares no request body; map its inputs onto the columns of {table}.")
