"""Category management CLI commands.

Categories live in a file next to the task file and are seeded with a
few defaults the first time it is opened. Deleting a category keeps its
tasks and leaves them uncategorized.
"""

from typing import Annotated, Any, Optional

import typer

from taskforest.application import (
    create_category,
    delete_category,
    list_categories,
    update_category,
)
from taskforest.domain.category import CreateCategoryRequest, UpdateCategoryRequest
from taskforest.interfaces.cli.common import (
    DataFileOption,
    exit_on_error,
    open_categories,
    open_store,
    print_error,
    print_info,
    print_success,
)

app = typer.Typer(help="Category management commands")


def _request(model: type, fields: dict[str, Any]) -> Any:
    """Build a request model, turning validation errors into a CLI error."""
    try:
        return model(**fields)
    except ValueError as e:
        print_error(f"Invalid category: {e}")
        raise typer.Exit(1) from e


@app.command("add")
def add(
    name: Annotated[str, typer.Argument(help="Category name")],
    color: Annotated[
        Optional[str], typer.Option("--color", help="Hex colour, e.g. #3B82F6")
    ] = None,
    icon: Annotated[Optional[str], typer.Option("--icon", help="Icon name")] = None,
    data: DataFileOption = None,
) -> None:
    """Add a category."""
    fields: dict[str, Any] = {"name": name, "icon": icon}
    if color is not None:
        fields["color"] = color
    request = _request(CreateCategoryRequest, fields)

    category = exit_on_error(create_category(open_categories(data), request))
    print_success(f"Added category {category.id}: {category.name}")


@app.command("list")
def list_(data: DataFileOption = None) -> None:
    """List categories by name."""
    categories = exit_on_error(list_categories(open_categories(data)))
    if not categories:
        print_info("No categories")
        return

    for category in categories:
        line = f"{category.id}  {category.name}  {category.color}"
        if category.icon:
            line += f"  {category.icon}"
        typer.echo(line)


@app.command("edit")
def edit(
    category_id: Annotated[str, typer.Argument(help="Category ID")],
    name: Annotated[Optional[str], typer.Option("--name", help="New name")] = None,
    color: Annotated[Optional[str], typer.Option("--color", help="Hex colour")] = None,
    icon: Annotated[Optional[str], typer.Option("--icon", help="Icon name")] = None,
    no_icon: Annotated[bool, typer.Option("--no-icon", help="Remove the icon")] = False,
    data: DataFileOption = None,
) -> None:
    """Edit a category. Only the options given are changed."""
    if icon is not None and no_icon:
        print_error("--icon and --no-icon are mutually exclusive")
        raise typer.Exit(1)

    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if color is not None:
        changes["color"] = color
    if icon is not None:
        changes["icon"] = icon
    if no_icon:
        changes["icon"] = None

    if not changes:
        print_info("Nothing to change")
        return

    request = _request(UpdateCategoryRequest, changes)
    category = exit_on_error(update_category(open_categories(data), category_id, request))
    print_success(f"Updated category {category.id}: {category.name}")


@app.command("rm")
def rm(
    category_id: Annotated[str, typer.Argument(help="Category ID")],
    data: DataFileOption = None,
) -> None:
    """Delete a category. Its tasks are kept and become uncategorized."""
    store = open_store(data)
    report = exit_on_error(delete_category(store.categories, store.repository, category_id))

    message = f"Deleted category {category_id}"
    if report.uncategorized_ids:
        message += f", uncategorized {len(report.uncategorized_ids)} task(s)"
    print_success(message)
