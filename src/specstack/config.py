"""Generator settings: output layout and client-side import targets."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from specstack.errors import FormatError, InputError, SchemaError

DEFAULT_OUTPUT_DIR = Path("generated")


class GeneratorConfig(BaseModel):
    """Where artifacts go and what the generated client code imports."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    output_dir: Path = DEFAULT_OUTPUT_DIR
    db_dir: str = "db"
    hooks_dir: str = "frontend/src/hooks"
    types_file: str = "frontend/src/types.ts"
    types_import: str = "../types"
    query_package: str = "@tanstack/react-query"


def load_config(path: Path) -> GeneratorConfig:
    """Load a YAML config file into a GeneratorConfig."""
    path = Path(path)
    if not path.is_file():
        raise InputError(path, "config file not found")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise FormatError(f"Failed to parse config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SchemaError(f"Config file {path} must contain a mapping")
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as e:
        raise SchemaError(f"Invalid config file {path}: {e}") from e
