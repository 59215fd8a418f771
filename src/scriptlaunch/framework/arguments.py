"""Argument vector construction for a step.

The raw invocation arguments start with the command name. For the
run-arbitrary command the second argument names the entry point, so two
leading arguments are consumed instead of one. The step's own extra
arguments always come first, followed by the user arguments when the step
forwards them.

    >>> step = Step("greeter", extra_arguments=("--lang=en",))
    >>> build_arguments(["hello", "world"], "hello", step)
    ['--lang=en', 'world']
"""

from __future__ import annotations

from collections.abc import Sequence

from scriptlaunch.framework.catalog import Step, is_run_arbitrary


def skip_count(command_name: str) -> int:
    """Number of leading raw arguments that are not user arguments."""
    return 2 if is_run_arbitrary(command_name) else 1


def user_arguments(raw_args: Sequence[str], command_name: str, step: Step) -> list[str]:
    """The portion of *raw_args* forwarded to the step, order preserved."""
    skip = skip_count(command_name)
    if not step.pass_user_args or len(raw_args) <= skip:
        return []
    return list(raw_args[skip:])


def build_arguments(raw_args: Sequence[str], command_name: str, step: Step) -> list[str]:
    """Return a new argv: ``step.extra_arguments`` followed by the user arguments.

    Pure: inputs are never mutated and equal inputs give equal outputs.
    """
    return [*step.extra_arguments, *user_arguments(raw_args, command_name, step)]
