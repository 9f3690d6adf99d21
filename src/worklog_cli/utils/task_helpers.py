"""Task helper utilities."""

from worklog_cli.models import Task
from worklog_cli.services.task_store import TaskStore


def _find_shortest_unique_suffix(task_ids: list[str], target_id: str) -> str:
    """
    Find the shortest suffix of target_id that uniquely identifies it.

    Args:
        task_ids: List of all task IDs
        target_id: The task ID to find a unique suffix for

    Returns:
        The shortest unique suffix
    """
    for length in range(1, len(target_id) + 1):
        suffix = target_id[-length:]
        matches = [tid for tid in task_ids if tid.endswith(suffix)]
        if len(matches) == 1:
            return suffix
    return target_id


def short_ids(tasks: list[Task], min_length: int = 4) -> dict[str, str]:
    """Map each task id to a display suffix that is unique among *tasks*."""
    ids = [t.id for t in tasks]
    result = {}
    for task_id in ids:
        suffix = _find_shortest_unique_suffix(ids, task_id)
        if len(suffix) < min_length:
            suffix = task_id[-min_length:]
        result[task_id] = suffix
    return result


def resolve_task_id(store: TaskStore, task_id_or_suffix: str) -> str:
    """
    Resolve a task ID or suffix to a full task ID.

    Args:
        store: The task store to search
        task_id_or_suffix: Full task ID or suffix to resolve

    Returns:
        The full task ID

    Raises:
        ValueError: If no matching task is found or multiple matches exist
    """
    ref = task_id_or_suffix.strip()
    if not ref:
        raise ValueError("Task ID cannot be empty")

    if store.get_task_by_id(ref) is not None:
        return ref

    tasks = store.tasks
    matching_tasks = [task for task in tasks if task.id.endswith(ref)]

    if not matching_tasks:
        raise ValueError(f"No task found with ID or suffix '{ref}'")

    if len(matching_tasks) > 1:
        all_task_ids = [t.id for t in tasks]
        suggestions = []
        for task in matching_tasks:
            unique_suffix = _find_shortest_unique_suffix(all_task_ids, task.id)
            title = task.title
            if len(title) > 70:
                title = title[:67] + "..."
            suggestions.append(f"  [{unique_suffix}] {title}")

        raise ValueError(
            f"Multiple tasks match suffix '{ref}':\n"
            + "\n".join(suggestions)
            + "\n\nUse the suffix in brackets to select a specific task."
        )

    return matching_tasks[0].id
