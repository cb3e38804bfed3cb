"""Minimal SQL statement nodes and their PostgreSQL rendering.

Identifier fields are validated on construction and reserved words are
double-quoted on output, so a node can never render a malformed name;
comments are split per line and cannot close the dollar-quoted function
body.
"""

from typing import Annotated, Union

from pydantic import AfterValidator, BaseModel, ConfigDict

from specstack.typemap import is_identifier

INDENT = "  "

# PostgreSQL keywords that cannot appear bare as a table, column or function name.
RESERVED_WORDS = frozenset("""
    all analyse analyze and any array as asc asymmetric authorization between
    bigint binary bit boolean both case cast char character check coalesce
    collate collation column concurrently constraint create cross
    current_catalog current_date current_role current_schema current_time
    current_timestamp current_user dec decimal default deferrable desc
    distinct do else end except exists extract false fetch float for foreign
    freeze from full grant greatest group grouping having ilike in initially
    inner inout int integer intersect interval into is isnull join lateral
    leading least left like limit localtime localtimestamp national natural
    nchar none normalize not notnull null nullif numeric offset on only or
    order out outer overlaps overlay placing position precision primary real
    references returning right row select session_user setof similar smallint
    some substring symmetric system_user table tablesample then time timestamp
    to trailing treat trim true union unique user using values varchar
    variadic verbose when where window with
""".split())


def quote_identifier(name: str) -> str:
    """Double-quote `name` when it is a reserved word, else return it bare."""
    return f'"{name}"' if name.lower() in RESERVED_WORDS else name


def _check_identifier(name: str) -> str:
    if not is_identifier(name):
        raise ValueError(f"invalid SQL identifier: {name!r}")
    return name


def _check_type(sql_type: str) -> str:
    base = sql_type
    while base.endswith("[]"):
        base = base[:-2]
    if not is_identifier(base):
        raise ValueError(f"invalid SQL type: {sql_type!r}")
    return sql_type


Identifier = Annotated[str, AfterValidator(_check_identifier)]
SqlType = Annotated[str, AfterValidator(_check_type)]


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class Comment(_Node):
    text: str

    def render(self) -> list[str]:
        lines = self.text.replace("$$", "$ $").splitlines() or [""]
        return [f"-- {line}".rstrip() for line in lines]


class Equals(_Node):
    """`column = placeholder`"""

    column: Identifier
    placeholder: Identifier

    def render(self) -> str:
        return f"{quote_identifier(self.column)} = {quote_identifier(self.placeholder)}"


def _where(predicates: tuple[Equals, ...]) -> str:
    if not predicates:
        return ""
    return " WHERE " + " AND ".join(p.render() for p in predicates)


def _returning(returning: bool) -> str:
    return " RETURNING *" if returning else ""


class Select(_Node):
    table: Identifier
    where: tuple[Equals, ...] = ()

    def render(self) -> list[str]:
        return [f"SELECT * FROM {quote_identifier(self.table)}{_where(self.where)};"]


class Insert(_Node):
    """INSERT ... DEFAULT VALUES; column lists are never synthesized."""

    table: Identifier
    returning: bool = False

    def render(self) -> list[str]:
        return [f"INSERT INTO {quote_identifier(self.table)} DEFAULT VALUES{_returning(self.returning)};"]


class Delete(_Node):
    table: Identifier
    where: tuple[Equals, ...] = ()
    returning: bool = False

    def render(self) -> list[str]:
        return [f"DELETE FROM {quote_identifier(self.table)}{_where(self.where)}{_returning(self.returning)};"]


Statement = Union[Comment, Select, Insert, Delete]


class ColumnDef(_Node):
    name: Identifier
    type: SqlType
    not_null: bool

    def render(self) -> str:
        name = quote_identifier(self.name)
        return f"{name} {self.type} NOT NULL" if self.not_null else f"{name} {self.type}"


class CreateTable(_Node):
    name: Identifier
    columns: tuple[ColumnDef, ...] = ()
    primary_key: tuple[Identifier, ...] = ()

    def render(self) -> str:
        if not self.columns:
            return f"CREATE TABLE IF NOT EXISTS {quote_identifier(self.name)} ();"
        body = f",\n{INDENT}".join(col.render() for col in self.columns)
        if self.primary_key:
            body += f", PRIMARY KEY ({', '.join(quote_identifier(k) for k in self.primary_key)})"
        return f"CREATE TABLE IF NOT EXISTS {quote_identifier(self.name)} (\n{INDENT}{body}\n);"


class FunctionArg(_Node):
    name: Identifier
    type: SqlType

    def render(self) -> str:
        return f"{quote_identifier(self.name)} {self.type}"


class CreateFunction(_Node):
    name: Identifier
    args: tuple[FunctionArg, ...] = ()
    returns: SqlType = "VOID"
    body: tuple[Statement, ...] = ()

    def render(self) -> str:
        lines = [
            f"CREATE OR REPLACE FUNCTION {quote_identifier(self.name)}({', '.join(a.render() for a in self.args)})",
            f"RETURNS {self.returns}",
            "LANGUAGE sql",
            "AS $$",
        ]
        for statement in self.body:
            lines.extend(INDENT + line for line in statement.render())
        lines.append("$$;")
        return "\n".join(lines)
