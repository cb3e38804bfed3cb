"""Read API description documents from disk.

YAML is a superset of JSON, so a single YAML loader covers both.
"""

import re
from pathlib import Path
from typing import Any

import yaml

from specstack.errors import FormatError, InputError

_BOOL_TAG = "tag:yaml.org,2002:bool"


class DocumentLoader(yaml.SafeLoader):
    """SafeLoader that reads only true/false as booleans.

    YAML 1.1 also turns `on`, `off`, `yes` and `no` into booleans, which
    would rename properties such as `on` to `True`.
    """


DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
DocumentLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def load_document(file_path: Path) -> Any:
    """Load a YAML/JSON document into a generic tree."""
    file_path = Path(file_path)
    if not file_path.exists():
        raise InputError(file_path, "OpenAPI file not found")
    if not file_path.is_file():
        raise InputError(file_path, "not a regular file")
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(file_path, str(e)) from e
    return parse_document_text(text, source=str(file_path))


def parse_document_text(text: str, source: str = "<string>") -> Any:
    try:
        return yaml.load(text, Loader=DocumentLoader)
    except yaml.YAMLError as e:
        raise FormatError(f"Failed to parse OpenAPI file: {source}: {e}") from e


def detect_format(document: Any) -> str:
    """Detect the flavour of a loaded document.

    Returns: 'openapi3', 'swagger2', or 'unknown'.
    """
    if isinstance(document, dict):
        if "openapi" in document:
            return "openapi3"
        if "swagger" in document:
            return "swagger2"
    return "unknown"
