"""Writes generated artifacts to disk."""

import logging
from pathlib import Path

from pydantic import BaseModel

from specstack.errors import WriteError

logger = logging.getLogger(__name__)


class WriteReport(BaseModel):
    """Outcome of writing an artifact set."""

    written: list[Path] = []
    errors: dict[str, str] = {}

    @property
    def ok(self) -> bool:
        return not self.errors


def write_file(path: Path, content: str) -> None:
    """Write `content` to `path`, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise WriteError(path, e.strerror or str(e)) from e
    logger.debug("Wrote %s", path)


def write_files(root: Path, files: dict[str, str]) -> WriteReport:
    """Write every artifact under `root`.

    A failure is recorded against its relative path and does not stop the
    remaining writes; files already written are left in place.
    """
    report = WriteReport()
    for rel_path, content in files.items():
        target = root / rel_path
        try:
            write_file(target, content)
        except WriteError as e:
            report.errors[rel_path] = str(e)
        else:
            report.written.append(target)
    return report
