"""Command catalog model.

Manifesto:
    The catalog is passive data: named commands, each an ordered pipeline
    of steps. It is built once by a loader and never mutated afterwards,
    so the dispatcher can read it without coordination.

Lookup is a case-insensitive exact match on the full command name. The
reserved ``run-arbitrary`` command is always available: when the catalog
does not define it, a built-in one-step command stands in for it.

Tags:
    scriptlaunch, framework, catalog, commands, steps

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from scriptlaunch.core.errors import CatalogError

RUN_ARBITRARY = "run-arbitrary"
RUN_ARBITRARY_DESCRIPTION = "Run an arbitrary entry point by name"


def normalize_name(name: str) -> str:
    """Return the comparison key for a command name."""
    return name.casefold()


def is_run_arbitrary(name: str) -> bool:
    """True when *name* is the reserved run-arbitrary command."""
    return normalize_name(name) == RUN_ARBITRARY


@dataclass(frozen=True)
class Step:
    """One unit of work within a command.

    ``entry_point`` is resolved when the step runs, not when the catalog is
    loaded, so a catalog may list steps whose code is not installed.
    """

    entry_point: str
    pass_user_args: bool = True
    extra_arguments: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable of strings, store an immutable tuple
        object.__setattr__(self, "extra_arguments", tuple(self.extra_arguments))


@dataclass(frozen=True)
class Command:
    """A named, ordered pipeline of steps."""

    name: str
    description: str = ""
    steps: tuple[Step, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise CatalogError("Command name must not be empty")
        steps = tuple(self.steps)
        if is_run_arbitrary(self.name):
            if len(steps) > 1:
                raise CatalogError(f"Command '{self.name}' must have exactly one step")
            steps = steps or (Step(entry_point=""),)
        object.__setattr__(self, "steps", steps)

    @property
    def key(self) -> str:
        return normalize_name(self.name)


def builtin_run_arbitrary() -> Command:
    """The run-arbitrary command used when a catalog does not define one."""
    return Command(
        name=RUN_ARBITRARY,
        description=RUN_ARBITRARY_DESCRIPTION,
        steps=(Step(entry_point=""),),
    )


@dataclass(frozen=True)
class Catalog:
    """
    Read-only mapping of command names to commands.

    Build with :meth:`from_commands`, which rejects duplicate names, or
    :meth:`compose`, which merges several sources with first-wins semantics.

    Examples:
        >>> catalog = Catalog.from_commands([Command("Hello", "Say hi")])
        >>> catalog.lookup("HELLO").name
        'Hello'
        >>> catalog.lookup("hell") is None
        True
    """

    commands: tuple[Command, ...] = ()
    source: str = "<catalog>"
    _index: dict[str, Command] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "commands", tuple(self.commands))
        index: dict[str, Command] = {}
        for command in self.commands:
            if command.key in index:
                raise CatalogError(
                    f"Duplicate command name in {self.source}: {command.name}"
                ).with_context(command=command.name, catalog_source=self.source)
            index[command.key] = command
        if RUN_ARBITRARY not in index:
            index[RUN_ARBITRARY] = builtin_run_arbitrary()
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_commands(cls, commands: Iterable[Command], source: str = "<catalog>") -> Catalog:
        return cls(commands=tuple(commands), source=source)

    @classmethod
    def compose(cls, *sources: Iterable[Command], source: str = "<catalog>") -> tuple[Catalog, list[Command]]:
        """
        Merge command sources in order; the first command with a name wins.

        Returns the catalog and the list of commands that were shadowed, so
        the caller can report them.
        """
        seen: set[str] = set()
        merged: list[Command] = []
        shadowed: list[Command] = []
        for commands in sources:
            for command in commands:
                if command.key in seen:
                    shadowed.append(command)
                    continue
                seen.add(command.key)
                merged.append(command)
        return cls(commands=tuple(merged), source=source), shadowed

    def lookup(self, name: str) -> Command | None:
        """Case-insensitive exact match on the full command name."""
        return self._index.get(normalize_name(name))

    def list_sorted(self) -> list[Command]:
        """All commands, including run-arbitrary, sorted by name ascending."""
        return sorted(self._index.values(), key=lambda c: (c.key, c.name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._index

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)
