"""Work breakdown structure helpers.

Tasks are stored as a flat list with parent pointers. Everything here resolves
relations by id at traversal time and carries an explicit visited set, so a
corrupted parent chain (self-reference, cycle, dangling id) can never make a
traversal loop.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from worklog_cli.models import MAX_DEPTH, Task


@dataclass(frozen=True)
class IndexedTask:
    """A task placed in the displayed tree."""

    task: Task
    index: str
    depth: int
    has_children: bool


def _children_map(tasks: Iterable[Task]) -> dict[str | None, list[Task]]:
    children: dict[str | None, list[Task]] = defaultdict(list)
    for task in tasks:
        children[task.parent_id].append(task)
    return children


def find_roots(tasks: list[Task]) -> list[Task]:
    """Tasks with no parent, or whose parent is not part of *tasks*."""
    ids = {t.id for t in tasks}
    return [t for t in tasks if not t.parent_id or t.parent_id not in ids]


def walk_tree(tasks: list[Task], max_depth: int = MAX_DEPTH) -> Iterator[IndexedTask]:
    """Pre-order walk over *tasks* as a forest.

    Roots are numbered 1, 2, 3... in list order and children get
    "{parent}.{n}". Tasks below *max_depth* are not visited.
    """
    children = _children_map(tasks)
    roots = find_roots(tasks)
    visited: set[str] = set()

    stack: list[tuple[Task, str, int]] = [
        (task, str(i + 1), 1) for i, task in reversed(list(enumerate(roots)))
    ]
    while stack:
        task, index, depth = stack.pop()
        if task.id in visited:
            continue
        visited.add(task.id)

        kids = children.get(task.id, [])
        yield IndexedTask(task=task, index=index, depth=depth, has_children=bool(kids))

        if depth < max_depth:
            for i in range(len(kids) - 1, -1, -1):
                stack.append((kids[i], f"{index}.{i + 1}", depth + 1))


def index_tasks(tasks: list[Task], max_depth: int = MAX_DEPTH) -> list[IndexedTask]:
    """Annotate a filtered task list with dotted WBS indices and depths.

    The input is not modified and the result is deterministic for a given
    input order.
    """
    return list(walk_tree(tasks, max_depth=max_depth))


def task_depth(task: Task, tasks: list[Task]) -> int:
    """Absolute 1-based depth of *task* within the full task list.

    Stops at a missing parent or when a task is seen twice.
    """
    by_id = {t.id: t for t in tasks}
    depth = 1
    current = task
    seen = {task.id}
    while current.parent_id:
        parent = by_id.get(current.parent_id)
        if parent is None or parent.id in seen:
            break
        seen.add(parent.id)
        depth += 1
        current = parent
    return depth


def descendant_ids(task_id: str, tasks: list[Task]) -> set[str]:
    """All ids below *task_id*, excluding *task_id* itself."""
    children = _children_map(tasks)
    found: set[str] = set()
    queue = [task_id]
    while queue:
        current = queue.pop()
        for child in children.get(current, []):
            if child.id == task_id or child.id in found:
                continue
            found.add(child.id)
            queue.append(child.id)
    return found


def subtree_ids(task_id: str, tasks: list[Task]) -> set[str]:
    """*task_id* plus all of its descendants."""
    return {task_id} | descendant_ids(task_id, tasks)


def would_create_cycle(task_id: str, new_parent_id: str | None, tasks: list[Task]) -> bool:
    """True if making *new_parent_id* the parent of *task_id* closes a loop."""
    if not new_parent_id:
        return False
    if new_parent_id == task_id:
        return True
    return new_parent_id in descendant_ids(task_id, tasks)


def can_add_child(task: Task, tasks: list[Task]) -> bool:
    """Whether a subtask may be created under *task* without exceeding the cap."""
    return task_depth(task, tasks) < MAX_DEPTH


def parent_candidates(task_id: str | None, tasks: list[Task]) -> list[Task]:
    """Tasks that may become the parent of *task_id*.

    Excludes the task itself, its descendants and tasks already at the
    maximum depth. With *task_id* None (a new task) only the depth rule applies.
    """
    excluded = subtree_ids(task_id, tasks) if task_id else set()
    return [
        t for t in tasks if t.id not in excluded and task_depth(t, tasks) < MAX_DEPTH
    ]
