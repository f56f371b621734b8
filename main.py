#!/usr/bin/env python3
"""schema-bridge - Entry point."""
import logging
import sys
from pathlib import Path

import click
from colorama import init

from config import app_config
from schema_bridge import __version__
from schema_bridge.cli.commands import MappingCLI
from schema_bridge.introspection.schema_loader import SchemaLoader
from schema_bridge.storage.repository import MappingRepository
from schema_bridge.storage.stores import JsonFileStore

# Initialize colorama
init(autoreset=True)

OUTPUT_FORMATS = click.Choice(["markdown", "json"])


def _finish(ok: bool):
    if not ok:
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--storage",
    type=click.Path(dir_okay=False),
    default=None,
    help="Mappings JSON file (default: SCHEMA_BRIDGE_STORAGE_PATH or ./mappings.json)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level",
)
@click.pass_context
def cli(ctx, storage, log_level):
    """schema-bridge - Suggest, store and apply field mappings between two JSON schemas."""
    logging.basicConfig(
        level=(log_level or app_config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if ctx.obj is None:
        repository = MappingRepository(JsonFileStore(Path(storage or app_config.storage.path)))
        ctx.obj = MappingCLI(repository, SchemaLoader(timeout=app_config.fetch.timeout))


@cli.command()
@click.argument("schema")
@click.option("--pointer", default=None, help="Path inside the document, e.g. /components/schemas/User")
@click.pass_obj
def fields(cli_tool, schema, pointer):
    """List the field paths of a schema file or URL."""
    _finish(cli_tool.show_fields(schema, pointer))


@cli.command()
@click.argument("source")
@click.argument("target")
@click.option("--threshold", type=float, default=None, help="Minimum confidence (0-1)")
@click.option("--source-pointer", default=None, help="Path inside the source document")
@click.option("--target-pointer", default=None, help="Path inside the target document")
@click.option("--format", "output_format", type=OUTPUT_FORMATS, default="markdown")
@click.pass_obj
def suggest(cli_tool, source, target, threshold, source_pointer, target_pointer, output_format):
    """Suggest field mappings from SOURCE schema to TARGET schema."""
    if threshold is None:
        threshold = app_config.suggest.confidence_threshold
    _finish(cli_tool.suggest(source, target, threshold, source_pointer, target_pointer, output_format))


@cli.command()
@click.argument("mapping_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def save(cli_tool, mapping_file):
    """Save a mapping configuration from a JSON file."""
    _finish(cli_tool.save(mapping_file))


@cli.command()
@click.argument("mapping_id")
@click.option("--format", "output_format", type=OUTPUT_FORMATS, default="json")
@click.pass_obj
def show(cli_tool, mapping_id, output_format):
    """Show a saved mapping."""
    _finish(cli_tool.show(mapping_id, output_format))


@cli.command(name="list")
@click.pass_obj
def list_mappings(cli_tool):
    """List saved mappings."""
    _finish(cli_tool.list_mappings())


@cli.command()
@click.argument("mapping_id")
@click.pass_obj
def delete(cli_tool, mapping_id):
    """Delete a saved mapping."""
    _finish(cli_tool.delete(mapping_id))


@cli.command()
@click.argument("system")
@click.argument("path")
@click.option("--method", default=None, help="HTTP method filter")
@click.pass_obj
def find(cli_tool, system, path, method):
    """Find mappings that use an endpoint."""
    _finish(cli_tool.find(system, path, method))


@cli.command(name="export")
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
def export_mappings(cli_tool, output):
    """Export all mappings as JSON."""
    _finish(cli_tool.export(output))


@cli.command(name="import")
@click.argument("import_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def import_mappings(cli_tool, import_file):
    """Import mappings from an exported JSON file."""
    _finish(cli_tool.import_file(import_file))


@cli.command()
@click.argument("mapping_id")
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def transform(cli_tool, mapping_id, payload_file):
    """Transform a source payload with a saved mapping."""
    _finish(cli_tool.transform(mapping_id, payload_file))


@cli.command()
@click.argument("mapping_id")
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def validate(cli_tool, mapping_id, payload_file):
    """Validate a transformed payload against a saved mapping."""
    _finish(cli_tool.validate(mapping_id, payload_file))


@cli.command()
@click.argument("mapping_id")
@click.pass_obj
def example(cli_tool, mapping_id):
    """Print an example source payload for a saved mapping."""
    _finish(cli_tool.example(mapping_id))


if __name__ == "__main__":
    cli()
