"""Task list filtering."""

from __future__ import annotations

from worklog_cli.models import OTHER_CATEGORY, Task, TaskFilters


def matches(task: Task, filters: TaskFilters, other_label: str = OTHER_CATEGORY) -> bool:
    """Check a single task against the list filters."""
    if filters.statuses and task.status not in filters.statuses:
        return False

    if filters.main_categories:
        if (task.main_category or other_label) not in filters.main_categories:
            return False

    if filters.sub_categories:
        if (task.sub_category or other_label) not in filters.sub_categories:
            return False

    if filters.labels and not set(filters.labels) & set(task.labels):
        return False

    # Tasks without estimates are never excluded by the date range
    if (
        filters.estimated_after is not None
        and task.estimated_start_date is not None
        and task.estimated_start_date < filters.estimated_after
    ):
        return False
    if (
        filters.estimated_before is not None
        and task.estimated_end_date is not None
        and task.estimated_end_date > filters.estimated_before
    ):
        return False

    if filters.search:
        needle = filters.search.lower()
        if needle not in task.title.lower() and needle not in task.alias_title.lower():
            return False

    return True


def apply_filters(
    tasks: list[Task], filters: TaskFilters, other_label: str = OTHER_CATEGORY
) -> list[Task]:
    """Return the tasks matching *filters*, preserving order."""
    return [t for t in tasks if matches(t, filters, other_label)]
