"""Error taxonomy shared by the loader, parser, generators and sink."""

from pathlib import Path


class SpecStackError(Exception):
    """Base class for every error raised by specstack."""


class InputError(SpecStackError):
    """The source document is missing or unreadable."""

    def __init__(self, path: Path | str, reason: str = "file not found"):
        self.path = Path(path)
        super().__init__(f"Cannot read {self.path}: {reason}")


class FormatError(SpecStackError):
    """The source document cannot be parsed as YAML or JSON."""


class SchemaError(SpecStackError):
    """The parsed document is not usable as an API description."""


class WriteError(SpecStackError):
    """An artifact could not be written."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        super().__init__(f"Failed to write {self.path}: {reason}")
