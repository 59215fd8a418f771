"""Built-in entry points shipped with the launcher.

Published through the ``scriptlaunch.entry_points`` group, so catalogs can
refer to them by their short name.
"""

from __future__ import annotations


def echo(argv: list[str]) -> None:
    """Print the argument vector, space separated."""
    print(" ".join(argv))
