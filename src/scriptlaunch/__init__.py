"""scriptlaunch -- run catalog-defined command pipelines.

A catalog maps command names to ordered steps; each step names an entry
point that receives an argument vector. ``scriptlaunch <command> [args]``
runs the steps in order and exits 0 only if all of them succeed.
"""

__version__ = "0.1.0"
