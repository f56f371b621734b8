"""Markdown rendering of suggestions and mapping configurations."""
from typing import List

from schema_bridge.mapper.heuristic import MappingSuggestion
from schema_bridge.mapper.mapping import MappingConfiguration


class MarkdownExporter:
    """Render mapping data as Markdown for terminal or document output."""

    def suggestions(self, suggestions: List[MappingSuggestion]) -> str:
        """Render a ranked suggestion list."""
        lines = ["# Mapping Suggestions", "", f"Found {len(suggestions)} potential mappings:", ""]

        for i, suggestion in enumerate(suggestions, 1):
            lines.append(f"## {i}. {suggestion.source_field} → {suggestion.target_field}")
            lines.append(f"- **Confidence**: {suggestion.confidence * 100:.1f}%")
            lines.append(f"- **Reasoning**: {suggestion.reasoning}")
            if suggestion.suggested_transformation is not None:
                lines.append(f"- **Transformation**: {suggestion.suggested_transformation.kind}")
            lines.append("")

        return "\n".join(lines)

    def configuration(self, configuration: MappingConfiguration) -> str:
        """Render one configuration with its field table."""
        source, target = configuration.source_endpoint, configuration.target_endpoint
        lines = [f"# {configuration.name}", ""]

        if configuration.description:
            lines.extend([configuration.description, ""])

        lines.append(f"- **ID**: {configuration.id}")
        lines.append(f"- **Source**: {source.system} {source.method} {source.path}")
        lines.append(f"- **Target**: {target.system} {target.method} {target.path}")
        lines.append(f"- **Created**: {configuration.created_at}")
        lines.append(f"- **Updated**: {configuration.updated_at}")
        lines.append("")

        lines.append(f"## Field Mappings ({len(configuration.field_mappings)})")
        lines.append("")
        lines.append("| Source | Target | Types | Transformation | Required |")
        lines.append("|---|---|---|---|---|")
        for m in configuration.field_mappings:
            transformation = m.transformation.kind if m.transformation else "-"
            types = f"{m.source_type or '?'} → {m.target_type or '?'}"
            required = "yes" if m.required else "no"
            lines.append(f"| {m.source_field} | {m.target_field} | {types} | {transformation} | {required} |")

        if configuration.validation_rules:
            lines.extend(["", "## Validation Rules", ""])
            for rule in configuration.validation_rules:
                lines.append(f"- `{rule.field}`: {rule.kind} {rule.params or ''}".rstrip())

        return "\n".join(lines) + "\n"
