"""Allow ``python -m scriptlaunch``."""

from scriptlaunch.cli.app import run

if __name__ == "__main__":
    run()
