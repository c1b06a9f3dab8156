"""Entry point for the taskforest CLI.

Usage:
    python -m taskforest.interfaces.cli.main

Or via installed entry point:
    taskforest <command>
"""

from taskforest.interfaces.cli import app


def main() -> None:
    """Run the taskforest CLI application."""
    app()


if __name__ == "__main__":
    main()
