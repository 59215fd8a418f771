"""Catalog loading.

Parses a catalog file into a :class:`~scriptlaunch.framework.catalog.Catalog`.
The parser is chosen by file suffix:

- ``.yaml`` / ``.yml`` - PyYAML ``safe_load``
- ``.json``
- ``.xml`` - the classic ``launcher.xml`` layout

Example YAML::

    apiVersion: scriptlaunch/v1
    kind: Catalog
    commands:
      - name: hello
        description: Greet someone
        steps:
          - entry_point: greeter
            arguments: ["--lang=en"]
      - name: report
        description: Build and mail the nightly report
        steps:
          - entry_point: reports.build:main
          - entry_point: reports.mail:main
            pass_user_args: false

Example XML::

    <commands>
      <command>
        <name>hello</name>
        <description>Greet someone</description>
        <step passuserargs="false">
          <class>greeter</class>
          <argument>--lang=en</argument>
        </step>
      </command>
    </commands>

Every failure is raised as :class:`CatalogLoadError` naming the file.

Manifesto:
    Catalog authors write YAML, JSON or XML; all three are validated by
    the same pydantic models so every format gets identical rules.

Tags:
    scriptlaunch, framework, catalog, loader, yaml, declarative

Doc-Types:
    api-reference
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal
from xml.etree import ElementTree

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from scriptlaunch.core.errors import CatalogLoadError
from scriptlaunch.framework.catalog import Catalog, Command, Step, is_run_arbitrary, normalize_name
from scriptlaunch.framework.logging import get_logger, timed_block

logger = get_logger(__name__)

SUPPORTED_API_VERSIONS = {"scriptlaunch/v1"}


class StepSpec(BaseModel):
    """One step of a command."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    entry_point: str = Field(default="", alias="class", description="Entry point name or import reference")
    pass_user_args: bool = Field(default=True, alias="passuserargs", description="Forward user arguments")
    arguments: list[str] = Field(default_factory=list, alias="argument", description="Arguments placed first")

    @field_validator("pass_user_args", mode="before")
    @classmethod
    def only_false_disables(cls, v: Any) -> Any:
        """Only an explicit false value turns forwarding off."""
        if v is None:
            return True
        if isinstance(v, str):
            return v.strip().lower() != "false"
        return v

    def to_step(self) -> Step:
        return Step(
            entry_point=self.entry_point,
            pass_user_args=self.pass_user_args,
            extra_arguments=tuple(self.arguments),
        )


class CommandSpec(BaseModel):
    """A named command and its ordered steps."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(..., min_length=1, description="Command name (case-insensitive)")
    description: str = Field(default="", description="Shown in the usage listing")
    steps: list[StepSpec] = Field(default_factory=list, alias="step")

    @model_validator(mode="after")
    def steps_name_entry_points(self) -> CommandSpec:
        """Ordinary commands must name an entry point in every step.

        run-arbitrary takes its entry point from the command line and has
        at most one step.
        """
        if is_run_arbitrary(self.name):
            if len(self.steps) > 1:
                raise ValueError(f"Command '{self.name}' must have exactly one step")
            return self
        for position, step in enumerate(self.steps, start=1):
            if not step.entry_point:
                raise ValueError(f"Step {position} of command '{self.name}' has no entry point")
        return self

    def to_command(self) -> Command:
        return Command(
            name=self.name,
            description=self.description,
            steps=tuple(step.to_step() for step in self.steps),
        )


class CatalogSpec(BaseModel):
    """Root model of a catalog document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    apiVersion: Literal["scriptlaunch/v1"] = Field(default="scriptlaunch/v1")
    kind: Literal["Catalog"] = Field(default="Catalog")
    commands: list[CommandSpec] = Field(default_factory=list, alias="command")

    @field_validator("commands")
    @classmethod
    def validate_unique_names(cls, v: list[CommandSpec]) -> list[CommandSpec]:
        """Ensure command names are unique ignoring case."""
        seen: set[str] = set()
        for command in v:
            key = normalize_name(command.name)
            if key in seen:
                raise ValueError(f"Duplicate command name: {command.name}")
            seen.add(key)
        return v

    def to_commands(self) -> list[Command]:
        return [spec.to_command() for spec in self.commands]


# =============================================================================
# Parsers
# =============================================================================


def _parse_yaml(text: str) -> Any:
    return yaml.safe_load(text)


def _parse_json(text: str) -> Any:
    return json.loads(text)


def _xml_text(element: ElementTree.Element | None) -> str:
    return (element.text or "").strip() if element is not None else ""


def _parse_xml(text: str) -> dict[str, Any]:
    root = ElementTree.fromstring(text)
    if root.tag != "commands":
        raise ValueError(f"Expected root element <commands>, got <{root.tag}>")

    commands = []
    for command_el in root.findall("command"):
        steps = []
        for step_el in command_el.findall("step"):
            steps.append(
                {
                    "class": _xml_text(step_el.find("class")),
                    "passuserargs": step_el.get("passuserargs"),
                    "argument": [_xml_text(arg) for arg in step_el.findall("argument")],
                }
            )
        commands.append(
            {
                "name": _xml_text(command_el.find("name")),
                "description": _xml_text(command_el.find("description")),
                "step": steps,
            }
        )
    return {"commands": commands}


_PARSERS = {
    ".yaml": _parse_yaml,
    ".yml": _parse_yaml,
    ".json": _parse_json,
    ".xml": _parse_xml,
}


def parse_catalog(data: Any, source: str = "<catalog>") -> Catalog:
    """Validate an already-parsed document and build the catalog."""
    if not isinstance(data, dict):
        raise CatalogLoadError(source, f"expected a mapping at the top level, got {type(data).__name__}")
    try:
        spec = CatalogSpec.model_validate(data)
    except ValidationError as e:
        raise CatalogLoadError(source, str(e), cause=e) from e
    return Catalog.from_commands(spec.to_commands(), source=source)


def load_catalog(path: Path | str) -> Catalog:
    """
    Load a catalog file.

    Args:
        path: Catalog file; the suffix selects the format

    Returns:
        The parsed, read-only catalog

    Raises:
        CatalogLoadError: If the file is missing, unparsable or invalid
    """
    path = Path(path)
    source = path.name

    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise CatalogLoadError(str(path), f"unsupported catalog format '{path.suffix}'")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogLoadError(str(path), e.strerror or str(e), cause=e) from e

    logger.debug("catalog.load", path=str(path))
    with timed_block("catalog.parse") as timer:
        try:
            data = parser(text)
        except (yaml.YAMLError, json.JSONDecodeError, ElementTree.ParseError, ValueError) as e:
            raise CatalogLoadError(str(path), f"parse error: {e}", cause=e) from e

        if isinstance(data, dict) and data.get("apiVersion") not in (None, *SUPPORTED_API_VERSIONS):
            raise CatalogLoadError(str(path), f"unsupported apiVersion: {data['apiVersion']}")

        try:
            catalog = parse_catalog(data, source=source)
        except CatalogLoadError as e:
            raise CatalogLoadError(str(path), e.reason, cause=e.cause) from e

    logger.info(
        "catalog.loaded",
        path=str(path),
        commands=len(catalog),
        duration_ms=round(timer.duration_ms, 2),
    )
    return catalog
