"""CLI entry point for swagger-gen."""

import importlib
import logging
import os
import sys
from pathlib import Path

import click

from swagger_gen.config import SwaggerGenConfig, load_config
from swagger_gen.errors import SwaggerGenError
from swagger_gen.generator.document import SwaggerGenerator
from swagger_gen.writer import FORMATS, detect_format, to_json, to_yaml, write_document


def _import_target(reference: str):
    """Resolve ``package.module:attribute`` to an object."""
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise click.BadParameter(f"Expected 'module:attribute', got {reference!r}", param_hint="PROVIDER")

    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())
    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise click.ClickException(f"Cannot import module {module_name!r}: {e}") from e

    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise click.ClickException(f"Module {module_name!r} has no attribute {attribute!r}") from e
    return target


def _load_generator(reference: str, config_path: Path | None) -> tuple[SwaggerGenerator, SwaggerGenConfig]:
    """Build a generator from a provider reference and an optional config file."""
    config = load_config(config_path) if config_path else SwaggerGenConfig()
    target = _import_target(reference)

    if not isinstance(target, SwaggerGenerator) and not hasattr(target, "api_descriptions") and callable(target):
        target = target()

    if isinstance(target, SwaggerGenerator):
        return target, config
    if hasattr(target, "api_descriptions"):
        return config.to_options().build_generator(target), config

    raise click.ClickException(
        f"{reference} is neither a SwaggerGenerator nor an API descriptions provider"
    )


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
def main():
    """swagger-gen: generate OpenAPI documents from route metadata."""
    pass


@main.command()
@click.argument("provider")
@click.argument("document_name")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file (stdout if omitted).")
@click.option("--format", "fmt", default=None, type=click.Choice(FORMATS), help="Output format (default: from the file suffix, else json).")
@click.option("--host", default=None, help="Host for the servers section.")
@click.option("--basepath", "base_path", default=None, help="Base path appended to the server URLs.")
@click.option("--scheme", "schemes", multiple=True, help="Protocol scheme; repeat for several servers.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML configuration file.")
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def tofile(provider: str, document_name: str, output: Path | None, fmt: str | None, host: str | None,
           base_path: str | None, schemes: tuple[str, ...], config_path: Path | None, verbose: bool):
    """Generate DOCUMENT_NAME from PROVIDER and write it out."""
    _configure_logging(verbose)

    try:
        generator, config = _load_generator(provider, config_path)
        document = generator.get_swagger(
            document_name,
            host=host or config.host,
            base_path=base_path or config.base_path,
            schemes=list(schemes) or config.schemes or None,
        )
    except SwaggerGenError as e:
        raise click.ClickException(str(e)) from e

    if output is None:
        click.echo(to_yaml(document) if fmt == "yaml" else to_json(document))
        return

    fmt = fmt or detect_format(output)
    write_document(document, output, fmt)
    click.echo(f"Swagger {fmt.upper()} written to {output}")


@main.command("list-docs")
@click.argument("provider")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML configuration file.")
def list_docs(provider: str, config_path: Path | None):
    """List the document names PROVIDER can generate."""
    try:
        generator, _ = _load_generator(provider, config_path)
    except SwaggerGenError as e:
        raise click.ClickException(str(e)) from e

    names = generator.document_names()
    if not names:
        click.echo("No documents configured.")
        return
    for name in names:
        click.echo(name)
