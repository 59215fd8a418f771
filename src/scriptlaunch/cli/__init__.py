"""Command-line interface for scriptlaunch."""
