"""CLI command groups for taskforest.

This package contains the command groups that are registered with the
main Typer app.

Command groups:
- task: Task management (add, list, tree, done, rm, etc.)
- category: Category management (add, list, edit, rm)

Each command group is a Typer app that gets registered
with the main app using app.add_typer().
"""

from taskforest.interfaces.cli.commands import category, task

__all__ = ["category", "task"]
