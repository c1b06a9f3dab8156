"""Ordering of task listings."""

from collections.abc import Callable, Sequence
from typing import Any

from .models import SortConfig, SortField, SortOrder, Task

_KEYS: dict[SortField, Callable[[Task], Any]] = {
    SortField.TITLE: lambda t: t.title.casefold(),
    SortField.CREATED_AT: lambda t: t.created_at,
    SortField.UPDATED_AT: lambda t: t.updated_at,
    SortField.PRIORITY: lambda t: t.priority.rank,
    SortField.COMPLETED: lambda t: t.completed,
}


def sort_tasks(tasks: Sequence[Task], config: SortConfig | None = None) -> list[Task]:
    """Sort tasks by a single field, stable on ties.

    Tasks without a due date always sort after dated ones, whichever
    direction is requested.

    Args:
        tasks: Tasks to order.
        config: Field and direction; defaults to creation order ascending.

    Returns:
        New sorted list.
    """
    config = config or SortConfig()
    reverse = config.order == SortOrder.DESC

    if config.field == SortField.DUE_DATE:
        dated = [t for t in tasks if t.due_date is not None]
        undated = [t for t in tasks if t.due_date is None]
        return sorted(dated, key=lambda t: t.due_date, reverse=reverse) + undated

    return sorted(tasks, key=_KEYS[config.field], reverse=reverse)
