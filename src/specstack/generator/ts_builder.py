"""Small TypeScript printing helpers.

Every value that originates in the source document (paths, parameter
names, summaries) reaches the output through one of these functions so
quoting and escaping happen in a single place.
"""

import re

INDENT = "  "

_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


class CodeWriter:
    """Indent-aware line buffer."""

    def __init__(self):
        self.lines: list[str] = []
        self.level = 0

    def line(self, text: str = "") -> "CodeWriter":
        self.lines.append(INDENT * self.level + text if text else "")
        return self

    def open(self, text: str) -> "CodeWriter":
        """Emit `text` and indent what follows."""
        self.line(text)
        self.level += 1
        return self

    def close(self, text: str) -> "CodeWriter":
        self.level -= 1
        return self.line(text)

    def render(self) -> str:
        return "\n".join(self.lines)


def is_js_identifier(name: str) -> bool:
    return bool(_JS_IDENTIFIER.match(name))


def string_literal(value: str) -> str:
    """Single-quoted JS string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )
    return f"'{escaped}'"


def _template_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def template_literal(parts: list[str | tuple[str]]) -> str:
    """Build a template literal; plain strings are text, 1-tuples are expressions.

    Adjacent text parts are escaped together so a `$` ending one part and a
    `{` starting the next cannot form an interpolation.
    """
    out = []
    text = ""
    for part in parts:
        if isinstance(part, tuple):
            out.append(_template_text(text) + "${" + part[0] + "}")
            text = ""
        else:
            text += part
    out.append(_template_text(text))
    return "`" + "".join(out) + "`"


def property_key(name: str) -> str:
    """Object/interface key, quoted when `name` is not an identifier."""
    return name if is_js_identifier(name) else string_literal(name)


def member(obj: str, name: str) -> str:
    """`obj.name`, or `obj['name']` when needed."""
    return f"{obj}.{name}" if is_js_identifier(name) else f"{obj}[{string_literal(name)}]"


def object_literal(entries: list[tuple[str, str]]) -> str:
    """Single-line object literal from (key, expression) pairs."""
    if not entries:
        return "{}"
    return "{ " + ", ".join(f"{property_key(k)}: {v}" for k, v in entries) + " }"


def array_literal(items: list[str]) -> str:
    return "[" + ", ".join(items) + "]"


def doc_comment(text: str) -> list[str]:
    """JSDoc block; `*/` inside the text is broken up."""
    lines = [line.strip() for line in text.replace("*/", "*\\/").splitlines() if line.strip()]
    if not lines:
        return []
    if len(lines) == 1:
        return [f"/** {lines[0]} */"]
    return ["/**", *(f" * {line}" for line in lines), " */"]


def split_path(path: str) -> list[tuple[str, str | None]]:
    """Split `/pets/{id}` into [('/pets/', 'id'), ('', None)].

    Each chunk is (literal text, placeholder name or None).
    """
    chunks: list[tuple[str, str | None]] = []
    pos = 0
    for match in _PLACEHOLDER.finditer(path):
        chunks.append((path[pos:match.start()], match.group(1)))
        pos = match.end()
    chunks.append((path[pos:], None))
    return chunks
