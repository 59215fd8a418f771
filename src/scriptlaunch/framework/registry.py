"""Entry point registry and resolver.

Manifesto:
    Steps name their entry points by string. A registry maps those names
    to callables so steps can be resolved without import-time coupling,
    and import references (``package.module:attr``) cover code that was
    never registered.

An entry point has one calling convention: it accepts a single argument,
the argument vector as a list of strings, and returns ``None``, an exit
status, or a :class:`~scriptlaunch.core.result.Result`.

    @register_entry_point("greeter")
    def greet(argv: list[str]) -> None:
        print("hello", *argv)

Installed distributions can contribute entry points through the
``scriptlaunch.entry_points`` group of ``importlib.metadata``.

Tags:
    scriptlaunch, framework, registry, entry-points, resolution

Doc-Types:
    api-reference
"""

from __future__ import annotations

import importlib
import inspect
from collections.abc import Callable
from importlib.metadata import EntryPoint as DistributionEntryPoint
from importlib.metadata import entry_points
from types import ModuleType
from typing import Any

from scriptlaunch.core.errors import EntryPointFailure, EntryPointNotFoundError
from scriptlaunch.core.result import Err, Ok, Result, try_result
from scriptlaunch.framework.logging import get_logger

logger = get_logger(__name__)

ENTRY_POINT_GROUP = "scriptlaunch.entry_points"

EntryPoint = Callable[[list[str]], Any]


class EntryPointRegistry:
    """Mapping from entry point name to callable."""

    def __init__(self, group: str | None = ENTRY_POINT_GROUP) -> None:
        self._entries: dict[str, EntryPoint] = {}
        self._distribution_entries: dict[str, DistributionEntryPoint] = {}
        self._group = group
        self._loaded = False

    def register(self, name: str, fn: EntryPoint) -> EntryPoint:
        """Register *fn* under *name*; names must be unique."""
        if name in self._entries:
            raise ValueError(f"Entry point '{name}' is already registered")
        self._entries[name] = fn
        logger.debug("entry_point_registered", name=name, target=getattr(fn, "__qualname__", repr(fn)))
        return fn

    def entry_point(self, name: str) -> Callable[[EntryPoint], EntryPoint]:
        """Decorator form of :meth:`register`."""

        def decorator(fn: EntryPoint) -> EntryPoint:
            return self.register(name, fn)

        return decorator

    def get(self, name: str) -> EntryPoint:
        """Get an entry point by name, loading distribution entries lazily."""
        self._ensure_loaded()
        if name in self._entries:
            return self._entries[name]
        if name in self._distribution_entries:
            fn = self._distribution_entries[name].load()
            self._entries[name] = fn
            return fn
        available = ", ".join(self.names())
        raise KeyError(f"Entry point '{name}' not found. Available: {available}")

    def names(self) -> list[str]:
        """List all known entry point names."""
        self._ensure_loaded()
        return sorted(set(self._entries) | set(self._distribution_entries))

    def clear(self) -> None:
        """Clear registry (for testing)."""
        self._entries.clear()
        self._distribution_entries.clear()
        self._loaded = False

    def __contains__(self, name: object) -> bool:
        self._ensure_loaded()
        return name in self._entries or name in self._distribution_entries

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        if self._group is None:
            return
        for ep in entry_points(group=self._group):
            self._distribution_entries.setdefault(ep.name, ep)
        logger.debug(
            "entry_point_registry_loaded",
            registered=len(self._entries),
            distributions=len(self._distribution_entries),
        )


# Global entry point registry
_registry = EntryPointRegistry()


def default_registry() -> EntryPointRegistry:
    return _registry


def register_entry_point(name: str) -> Callable[[EntryPoint], EntryPoint]:
    """Decorator to register a function in the global registry."""
    return _registry.entry_point(name)


def get_entry_point(name: str) -> EntryPoint:
    return _registry.get(name)


def list_entry_points() -> list[str]:
    return _registry.names()


def clear_registry() -> None:
    """Clear the global registry (for testing)."""
    _registry.clear()


# =============================================================================
# Resolution
# =============================================================================


def _import_reference(ref: str) -> Any:
    """Import the object named by ``module:attr.path`` or ``module.attr``.

    Raises:
        ImportError: If no module prefix of *ref* can be imported.
        AttributeError: If the attribute path is invalid.
    """
    if ":" in ref:
        module_path, _, attr_path = ref.partition(":")
        obj: Any = importlib.import_module(module_path)
        for part in attr_path.split(".") if attr_path else ():
            obj = getattr(obj, part)
        return obj

    # Dotted name: import the longest importable prefix, walk the rest
    parts = ref.split(".")
    for cut in range(len(parts), 0, -1):
        module_path = ".".join(parts[:cut])
        try:
            obj = importlib.import_module(module_path)
        except ModuleNotFoundError as e:
            if e.name is not None and not module_path.startswith(e.name):
                raise
            continue
        for part in parts[cut:]:
            obj = getattr(obj, part)
        return obj
    raise ImportError(f"No module named {parts[0]!r}")


def _unwrap_main(obj: Any) -> Any:
    """Modules and classes expose their entry point as ``main``."""
    if isinstance(obj, (ModuleType, type)):
        main = getattr(obj, "main", None)
        if main is None:
            raise TypeError(f"{obj!r} has no 'main' entry point")
        return main
    return obj


def check_calling_convention(fn: Any) -> None:
    """Raise TypeError unless *fn* can be called with exactly one argument."""
    if not callable(fn):
        raise TypeError(f"resolved to non-callable: {type(fn).__name__}")
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures are taken on trust
        return
    try:
        signature.bind(["argv"])
    except TypeError as e:
        raise TypeError(f"must accept a single argv argument: {e}") from None


class EntryPointResolver:
    """
    Resolve entry point names to callables.

    Lookup order: the registry, then an import reference. Any failure is
    reported as :class:`EntryPointNotFoundError`, a configuration error
    attributable to the catalog.
    """

    def __init__(self, registry: EntryPointRegistry | None = None) -> None:
        self.registry = registry if registry is not None else _registry

    def resolve(self, name: str) -> EntryPoint:
        if not name:
            raise EntryPointNotFoundError(name, "empty name")

        if name in self.registry:
            target = self.registry.get(name)
        else:
            try:
                target = _unwrap_main(_import_reference(name))
            except (ImportError, AttributeError, TypeError) as e:
                raise EntryPointNotFoundError(name, str(e), cause=e) from e

        try:
            check_calling_convention(target)
        except TypeError as e:
            raise EntryPointNotFoundError(name, str(e), cause=e) from e

        logger.debug("entry_point.resolved", name=name)
        return target


# =============================================================================
# Invocation
# =============================================================================


def _outcome_from_status(status: Any) -> Result[None]:
    """Map an exit status the way ``sys.exit`` does.

    ``None`` and ``0`` are success, other ints are exit codes and any other
    value is the failure message.
    """
    if status is None or status == 0:
        return Ok(None)
    if isinstance(status, int):
        return Err(EntryPointFailure(f"exited with status {int(status)}"))
    return Err(EntryPointFailure(str(status)))


def invoke_entry_point(fn: EntryPoint, argv: list[str]) -> Result[None]:
    """
    Call *fn* with *argv* and normalise its outcome to a Result.

    ``None``/``0``/``Ok`` are success; ``Err`` and non-zero statuses are
    failures; a raised ``Exception`` becomes the failure cause. Any other
    ``BaseException`` except ``SystemExit`` propagates.
    """
    try:
        outcome = try_result(lambda: fn(argv))
    except SystemExit as e:
        return _outcome_from_status(e.code)
    if outcome.is_err():
        return outcome

    returned = outcome.unwrap()
    if isinstance(returned, (Ok, Err)):
        return Ok(None) if returned.is_ok() else Err(returned.error)
    if isinstance(returned, bool) or not isinstance(returned, int):
        return Ok(None)
    return _outcome_from_status(returned)
