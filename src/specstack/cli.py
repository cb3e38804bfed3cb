"""CLI entry point for specstack."""

import logging
from pathlib import Path

import click

from specstack.config import GeneratorConfig, load_config
from specstack.errors import SpecStackError
from specstack.generator.project import ProjectGenerator
from specstack.generator.writer import write_files
from specstack.parser.base import Spec
from specstack.parser.loader import detect_format, load_document
from specstack.parser.openapi import parse_spec


def _parse_doc(doc_path: Path) -> Spec:
    """Load and parse an API document, echoing what was found."""
    click.echo(f"Parsing {doc_path}...")
    document = load_document(doc_path)
    fmt = detect_format(document)
    if fmt == "unknown":
        click.echo("  No 'openapi' or 'swagger' version key found; parsing as OpenAPI 3.")
    spec = parse_spec(document)
    click.echo(f"Found {len(spec.tables)} tables and {len(spec.functions)} functions.")
    return spec


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
def main():
    """specstack: generate SQL schemas and React Query hooks from OpenAPI documents."""
    pass


@main.command()
@click.argument("doc_path", type=click.Path(path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), envvar="SPECSTACK_OUTPUT", default=None, help="Output root directory (default: ./generated).")
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None, help="YAML file with generator settings.")
@click.option("-v", "--verbose", is_flag=True, help="Log parser diagnostics.")
def generate(doc_path: Path, output: Path | None, config_path: Path | None, verbose: bool):
    """Generate DDL, SQL functions, client types and hooks from DOC_PATH."""
    _configure_logging(verbose)
    try:
        config = load_config(config_path) if config_path else GeneratorConfig()
        spec = _parse_doc(doc_path)

        click.echo("Generating DB schema, functions, types and hooks...")
        files = ProjectGenerator(config=config).generate(spec)
    except SpecStackError as e:
        raise click.ClickException(str(e)) from e

    root = output or config.output_dir
    report = write_files(root, files)
    for path in report.written:
        click.echo(f"  Created {path}")

    if not report.ok:
        for rel_path, error in report.errors.items():
            click.echo(f"  {rel_path}: {error}", err=True)
        raise click.ClickException(f"{len(report.errors)} of {len(files)} files could not be written")

    click.echo(f"Done! Generated {len(files)} files in {root}")


@main.command()
@click.argument("doc_path", type=click.Path(path_type=Path))
@click.option("-v", "--verbose", is_flag=True, help="Log parser diagnostics.")
def inspect(doc_path: Path, verbose: bool):
    """Print the intermediate representation of DOC_PATH as JSON."""
    _configure_logging(verbose)
    try:
        spec = parse_spec(load_document(doc_path))
    except SpecStackError as e:
        raise click.ClickException(str(e)) from e
    click.echo(spec.model_dump_json(indent=2))
