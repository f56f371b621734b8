"""Command handlers for the schema-bridge CLI."""
import json
from pathlib import Path
from typing import Any, Optional

import click
from colorama import Fore, Style

from schema_bridge import api
from schema_bridge.exceptions import SchemaBridgeError
from schema_bridge.exporter.markdown import MarkdownExporter
from schema_bridge.introspection.schema_loader import SchemaLoader
from schema_bridge.storage.repository import MappingRepository


class MappingCLI:
    """Terminal front-end over the schema-bridge operations."""

    def __init__(self, repository: MappingRepository, loader: Optional[SchemaLoader] = None):
        """Initialize CLI with the process-wide repository."""
        self.repository = repository
        self.loader = loader or SchemaLoader()
        self.markdown = MarkdownExporter()

    def print_header(self, title: str):
        """Print a section header."""
        click.echo(f"\n{Fore.CYAN}{'━' * 45}")
        click.echo(f"{Fore.CYAN}{title}")
        click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")

    @staticmethod
    def echo_json(data: Any):
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))

    @staticmethod
    def fail(message: str) -> bool:
        click.echo(f"{Fore.RED}❌ {message}", err=True)
        return False

    def _warn(self, warnings):
        for warning in warnings:
            click.echo(f"{Fore.YELLOW}⚠️  {warning}", err=True)

    def _load_mapping(self, mapping_id: str):
        configuration = self.repository.get(mapping_id)
        if configuration is None:
            self.fail(f"Mapping not found: {mapping_id}")
        return configuration

    # ------------------------------------------------------------------
    # Schema commands
    # ------------------------------------------------------------------

    def show_fields(self, source: str, pointer: Optional[str] = None) -> bool:
        """List every field path of a schema."""
        try:
            paths = api.extract_fields(self.loader.load(source, pointer))
        except SchemaBridgeError as e:
            return self.fail(str(e))

        for path in paths:
            click.echo(path)
        click.echo(f"{Fore.GREEN}{len(paths)} fields", err=True)
        return True

    def suggest(
        self,
        source: str,
        target: str,
        threshold: float,
        source_pointer: Optional[str] = None,
        target_pointer: Optional[str] = None,
        output_format: str = "markdown",
    ) -> bool:
        """Print ranked mapping suggestions between two schemas."""
        try:
            source_schema = self.loader.load(source, source_pointer)
            target_schema = self.loader.load(target, target_pointer)
            suggestions = api.suggest_mappings(source_schema, target_schema, threshold)
        except (SchemaBridgeError, ValueError) as e:
            return self.fail(str(e))

        if output_format == "json":
            self.echo_json([s.to_dict() for s in suggestions])
        else:
            click.echo(self.markdown.suggestions(suggestions))
        return True

    # ------------------------------------------------------------------
    # Repository commands
    # ------------------------------------------------------------------

    def save(self, mapping_file: Path) -> bool:
        """Save a mapping configuration from a JSON file."""
        try:
            with open(mapping_file, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            return self.fail(f"Invalid JSON in {mapping_file}: {e}")

        try:
            result = api.save_mapping(self.repository, document)
        except SchemaBridgeError as e:
            return self.fail(str(e))

        self._warn(result.warnings)
        click.echo(f"{Fore.GREEN}✅ Saved mapping '{result.configuration.id}' "
                   f"({len(result.configuration.field_mappings)} fields)")
        return True

    def show(self, mapping_id: str, output_format: str = "json") -> bool:
        """Print one stored configuration."""
        configuration = self._load_mapping(mapping_id)
        if configuration is None:
            return False

        if output_format == "markdown":
            click.echo(self.markdown.configuration(configuration))
        else:
            self.echo_json(configuration.to_dict())
        return True

    def list_mappings(self) -> bool:
        """Print all stored configurations."""
        self.print_header("Saved Mappings")
        summaries = api.list_mappings(self.repository)
        self._warn(self.repository.load_warnings)

        if not summaries:
            click.echo(f"{Fore.YELLOW}No mappings found")
            return True

        for summary in summaries:
            line = f"{Fore.GREEN}{summary.id}{Style.RESET_ALL}  {summary.name}"
            if summary.description:
                line += f" - {summary.description}"
            click.echo(line)
        return True

    def delete(self, mapping_id: str) -> bool:
        """Delete a stored configuration."""
        result = api.delete_mapping(self.repository, mapping_id)
        if not result.deleted:
            return self.fail(f"Mapping not found: {mapping_id}")

        self._warn(result.warnings)
        suffix = "" if result.persisted else " (in memory only)"
        click.echo(f"{Fore.GREEN}✅ Deleted mapping '{mapping_id}'{suffix}")
        return True

    def find(self, system: str, path: str, method: Optional[str] = None) -> bool:
        """Print configurations touching an endpoint."""
        matches = api.find_mappings_by_endpoint(self.repository, system, path, method)
        self.echo_json([m.to_dict() for m in matches])
        return True

    def export(self, output: Optional[Path] = None) -> bool:
        """Export every configuration as JSON."""
        document = api.export_mappings(self.repository)
        if output is None:
            click.echo(document)
            return True

        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(document, encoding="utf-8")
        click.echo(f"{Fore.GREEN}✅ Exported mappings to {output}")
        return True

    def import_file(self, import_file: Path) -> bool:
        """Import configurations exported by `export`."""
        result = api.import_mappings(self.repository, import_file.read_text(encoding="utf-8"))
        self._warn(result.warnings)

        for error in result.errors:
            click.echo(f"{Fore.RED}   • {error}", err=True)
        click.echo(f"{Fore.GREEN}Imported {result.imported_count} mappings, {len(result.errors)} rejected")
        return not result.errors

    # ------------------------------------------------------------------
    # Payload commands
    # ------------------------------------------------------------------

    def transform(self, mapping_id: str, payload_file: Path) -> bool:
        """Transform a payload file with a stored configuration."""
        configuration = self._load_mapping(mapping_id)
        if configuration is None:
            return False

        result = api.transform_payload(payload_file.read_text(encoding="utf-8"), configuration)
        self.echo_json(result.to_dict())
        return result.success

    def validate(self, mapping_id: str, payload_file: Path) -> bool:
        """Validate a transformed payload file against a stored configuration."""
        configuration = self._load_mapping(mapping_id)
        if configuration is None:
            return False

        result = api.validate_transformed_payload(payload_file.read_text(encoding="utf-8"), configuration)
        self.echo_json(result.to_dict())
        return result.valid

    def example(self, mapping_id: str) -> bool:
        """Print an example source payload for a stored configuration."""
        configuration = self._load_mapping(mapping_id)
        if configuration is None:
            return False

        self.echo_json(api.generate_example_payload(configuration))
        return True
