"""Detects IR names that would make two generated artifacts collide."""

from specstack.parser.base import Spec
from specstack.typemap import function_identifier, hook_name, table_identifier


def validate_spec(spec: Spec) -> dict[str, str]:
    """Check tables and functions for artifact name collisions.

    Returns dict of {"<kind> <generated name>": error_message}, empty when
    every artifact name is unique.
    """
    errors: dict[str, str] = {}
    _check_unique(errors, "table", [(t.name, table_identifier(t.name)) for t in spec.tables])
    _check_unique(errors, "function", [(f.name, function_identifier(f.name)) for f in spec.functions])
    _check_unique(errors, "hook", [(f.name, hook_name(f.name)) for f in spec.functions])
    return errors


def _check_unique(errors: dict[str, str], kind: str, names: list[tuple[str, str]]) -> None:
    seen: dict[str, list[str]] = {}
    for original, generated in names:
        seen.setdefault(generated, []).append(original)
    for generated, originals in seen.items():
        if len(originals) > 1:
            sources = ", ".join(repr(o) for o in originals)
            errors[f"{kind} {generated}"] = f"{len(originals)} {kind}s map to {generated!r} ({sources})"
