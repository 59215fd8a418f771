"""Usage text for the command catalog."""

from __future__ import annotations

from scriptlaunch.framework.catalog import Catalog


def render_usage(catalog: Catalog, program: str = "scriptlaunch") -> str:
    """Return the usage header followed by one line per command, sorted by name."""
    lines = [f"Usage: {program} [command-name] {{parameters}}"]
    for command in catalog.list_sorted():
        lines.append(f" - {command.name}: {command.description}")
    return "\n".join(lines)
