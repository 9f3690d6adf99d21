"""Task store - the single source of truth for tasks and categories.

The store keeps the whole state in memory, applies every mutation
synchronously and then hands a full snapshot to the injected repository.
Readers get immutable-by-convention ``Task`` objects: mutations always build
new task objects and new lists instead of patching existing ones, so a list
obtained before a mutation keeps describing the old state.

Timer rules:

* at most one time log across the store is open, and at most one task is
  IN_PROGRESS;
* ``start_timer`` closes whatever is running before opening a new log;
* ``total_time_spent`` is always recomputed from the log list, never patched.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal

from worklog_cli.models import (
    CategoryData,
    StoreSnapshot,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
    TimeLog,
    WorkOutput,
    WorkOutputUpdate,
)
from worklog_cli.repositories import SnapshotRepository
from worklog_cli.utils.hierarchy import subtree_ids
from worklog_cli.utils.logger import get_logger
from worklog_cli.utils.time_windows import now_ms

CategoryKind = Literal["main", "sub"]

# Task fields that may be cleared by an update; None elsewhere means "unchanged".
_CLEARABLE_FIELDS = frozenset(
    {
        "estimated_start_date",
        "estimated_end_date",
        "actual_start_date",
        "actual_end_date",
        "parent_id",
    }
)


def compute_total(logs: list[TimeLog]) -> int:
    """Sum of closed log durations. Open logs count as zero until closed."""
    return sum(log.duration() for log in logs)


def _dedupe(names: list[str]) -> list[str]:
    return list(dict.fromkeys(names))


class TaskStore:
    """Authoritative collection of tasks plus the two category vocabularies.

    Args:
        repository: Persistence port; every mutation saves a snapshot through it
        clock: Returns "now" as epoch ms, sampled once per operation
        snapshot: Initial state; defaults to what the repository holds, or an
            empty store with the default vocabularies
    """

    def __init__(
        self,
        repository: SnapshotRepository | None = None,
        *,
        clock: Callable[[], int] = now_ms,
        snapshot: StoreSnapshot | None = None,
    ):
        self.repository = repository
        self.clock = clock
        self.logger = get_logger(__name__)

        if snapshot is None and repository is not None:
            snapshot = repository.load()
        if snapshot is None:
            snapshot = StoreSnapshot()

        self._tasks: list[Task] = list(snapshot.tasks)
        self._main_categories: list[str] = list(snapshot.main_categories)
        self._sub_categories: list[str] = list(snapshot.sub_categories)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def main_categories(self) -> list[str]:
        return list(self._main_categories)

    @property
    def sub_categories(self) -> list[str]:
        return list(self._sub_categories)

    def snapshot(self) -> StoreSnapshot:
        """Current state as a persistable document."""
        return StoreSnapshot(
            tasks=list(self._tasks),
            main_categories=list(self._main_categories),
            sub_categories=list(self._sub_categories),
        )

    def get_task_by_id(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def get_children(self, parent_id: str) -> list[Task]:
        """Direct children of *parent_id*, in store order."""
        return [t for t in self._tasks if t.parent_id == parent_id]

    def active_task(self) -> Task | None:
        """The task whose timer is running, if any."""
        for task in self._tasks:
            if task.status == TaskStatus.IN_PROGRESS:
                return task
        return None

    def open_time_logs(self) -> list[tuple[Task, TimeLog]]:
        """Every open log in the store with its owning task."""
        return [
            (task, log)
            for task in self._tasks
            for log in task.time_logs
            if log.end_time is None
        ]

    def open_time_log(self) -> tuple[Task, TimeLog] | None:
        """The single running log with its task, if a timer is running."""
        running = self.open_time_logs()
        return running[0] if running else None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _commit(self, action: str, **details: object) -> None:
        self.logger.debug("store %s %s", action, details)
        if self.repository is not None:
            self.repository.save(self.snapshot())

    def _replace(self, updated: Task) -> None:
        self._tasks = [updated if t.id == updated.id else t for t in self._tasks]

    @staticmethod
    def _with_logs(task: Task, logs: list[TimeLog], **changes: object) -> Task:
        return task.model_copy(
            update={"time_logs": logs, "total_time_spent": compute_total(logs), **changes}
        )

    @staticmethod
    def _close_open_logs(task: Task, now: int) -> list[TimeLog]:
        return [
            log.model_copy(update={"end_time": now}) if log.end_time is None else log
            for log in task.time_logs
        ]

    # ------------------------------------------------------------------
    # Task lifecycle
    # ------------------------------------------------------------------

    def create_task(self, data: TaskCreate) -> Task:
        """Insert a new task with empty logs and a zero total.

        A subtask created without categories inherits its parent's.
        """
        fields = data.model_dump()
        parent = self.get_task_by_id(data.parent_id) if data.parent_id else None
        if parent is not None:
            fields["main_category"] = data.main_category or parent.main_category
            fields["sub_category"] = data.sub_category or parent.sub_category

        starts_timer = data.status == TaskStatus.IN_PROGRESS
        if starts_timer:
            fields["status"] = TaskStatus.TODO

        task = Task.model_validate(
            {**fields, "time_logs": [], "total_time_spent": 0}
        )
        self._tasks = [*self._tasks, task]
        self._commit("create_task", task_id=task.id, parent_id=task.parent_id)
        if starts_timer:
            return self.start_timer(task.id)
        return task

    def update_task(self, task_id: str, updates: TaskUpdate) -> Task | None:
        """Merge the explicitly set fields of *updates* into the task.

        The caller is responsible for not introducing a parent cycle; see
        ``utils.hierarchy.parent_candidates``.
        """
        task = self.get_task_by_id(task_id)
        if task is None:
            self.logger.debug("update_task: unknown task %s", task_id)
            return None

        changes = {
            k: v
            for k, v in updates.model_dump(exclude_unset=True).items()
            if v is not None or k in _CLEARABLE_FIELDS
        }

        # Only the timer may put a task IN_PROGRESS; leaving it stops the timer
        status = changes.get("status")
        starts_timer = status == TaskStatus.IN_PROGRESS and task.status != TaskStatus.IN_PROGRESS
        if starts_timer:
            del changes["status"]
        elif (
            status is not None
            and status != TaskStatus.IN_PROGRESS
            and task.open_log() is not None
        ):
            logs = self._close_open_logs(task, self.clock())
            changes["time_logs"] = logs
            changes["total_time_spent"] = compute_total(logs)

        updated = Task.model_validate({**task.model_dump(), **changes})
        self._replace(updated)
        self._commit("update_task", task_id=task_id, fields=sorted(changes))
        if starts_timer:
            return self.start_timer(task_id)
        return updated

    def delete_task(self, task_id: str) -> list[str]:
        """Remove a task and its whole subtree.

        Returns:
            Ids of every removed task (empty if *task_id* is unknown)
        """
        if self.get_task_by_id(task_id) is None:
            return []

        doomed = subtree_ids(task_id, self._tasks)
        removed = [t.id for t in self._tasks if t.id in doomed]
        self._tasks = [t for t in self._tasks if t.id not in doomed]
        self._commit("delete_task", task_id=task_id, removed=len(removed))
        return removed

    # ------------------------------------------------------------------
    # Timer state machine
    # ------------------------------------------------------------------

    def start_timer(self, task_id: str) -> Task | None:
        """Start timing *task_id*, pausing whatever was running.

        Calling this on the task that is already running closes its current
        log and opens a fresh one at the same instant.
        """
        if self.get_task_by_id(task_id) is None:
            self.logger.debug("start_timer: unknown task %s", task_id)
            return None

        now = self.clock()
        new_tasks = []
        for task in self._tasks:
            if task.open_log() is not None or task.status == TaskStatus.IN_PROGRESS:
                status = (
                    TaskStatus.PAUSED
                    if task.status == TaskStatus.IN_PROGRESS
                    else task.status
                )
                task = self._with_logs(
                    task, self._close_open_logs(task, now), status=status
                )

            if task.id == task_id:
                logs = [*task.time_logs, TimeLog(start_time=now)]
                task = self._with_logs(
                    task,
                    logs,
                    status=TaskStatus.IN_PROGRESS,
                    actual_start_date=task.actual_start_date or now,
                )
            new_tasks.append(task)

        self._tasks = new_tasks
        self._commit("start_timer", task_id=task_id, at=now)
        return self.get_task_by_id(task_id)

    def stop_timer(self, task_id: str) -> Task | None:
        """Close the open log of *task_id* and pause it.

        A task with no open log is left untouched.
        """
        task = self.get_task_by_id(task_id)
        if task is None or task.open_log() is None:
            return task

        now = self.clock()
        updated = self._with_logs(
            task, self._close_open_logs(task, now), status=TaskStatus.PAUSED
        )
        self._replace(updated)
        self._commit("stop_timer", task_id=task_id, at=now)
        return updated

    # ------------------------------------------------------------------
    # Manual time log edits
    # ------------------------------------------------------------------

    def add_time_log(self, task_id: str, start: int, end: int) -> TimeLog | None:
        """Record a finished interval of work after the fact."""
        task = self.get_task_by_id(task_id)
        if task is None:
            return None

        log = TimeLog(start_time=start, end_time=end)
        self._replace(self._with_logs(task, [*task.time_logs, log]))
        self._commit("add_time_log", task_id=task_id, log_id=log.id)
        return log

    def update_time_log(
        self, task_id: str, log_id: str, start: int, end: int | None = None
    ) -> TimeLog | None:
        """Move a log's start and end.

        Passing ``end=None`` keeps the log's current end, so a running log
        stays running and a closed log stays closed.
        """
        task = self.get_task_by_id(task_id)
        if task is None:
            return None

        edited: TimeLog | None = None
        logs = []
        for log in task.time_logs:
            if log.id == log_id:
                new_end = end if end is not None else log.end_time
                log = TimeLog(id=log.id, start_time=start, end_time=new_end)
                edited = log
            logs.append(log)

        if edited is None:
            return None

        self._replace(self._with_logs(task, logs))
        self._commit("update_time_log", task_id=task_id, log_id=log_id)
        return edited

    def delete_time_log(self, task_id: str, log_id: str) -> bool:
        """Remove a log. Deleting the running log pauses the task."""
        task = self.get_task_by_id(task_id)
        if task is None:
            return False

        target = next((log for log in task.time_logs if log.id == log_id), None)
        if target is None:
            return False

        logs = [log for log in task.time_logs if log.id != log_id]
        changes: dict[str, object] = {}
        if target.end_time is None and task.status == TaskStatus.IN_PROGRESS:
            changes["status"] = TaskStatus.PAUSED
        self._replace(self._with_logs(task, logs, **changes))
        self._commit("delete_time_log", task_id=task_id, log_id=log_id)
        return True

    # ------------------------------------------------------------------
    # Work outputs
    # ------------------------------------------------------------------

    def add_output(
        self,
        task_id: str,
        name: str,
        link: str | None = None,
        completeness: object = "",
    ) -> WorkOutput | None:
        task = self.get_task_by_id(task_id)
        if task is None:
            return None

        output = WorkOutput(name=name, link=link, completeness=completeness)
        self._replace(task.model_copy(update={"outputs": [*task.outputs, output]}))
        self._commit("add_output", task_id=task_id, output_id=output.id)
        return output

    def update_output(
        self, task_id: str, output_id: str, updates: WorkOutputUpdate
    ) -> WorkOutput | None:
        """Merge the explicitly set fields into a work output."""
        task = self.get_task_by_id(task_id)
        if task is None:
            return None

        changes = {
            k: v
            for k, v in updates.model_dump(exclude_unset=True).items()
            if v is not None or k == "link"
        }
        edited: WorkOutput | None = None
        outputs = []
        for output in task.outputs:
            if output.id == output_id:
                output = WorkOutput.model_validate({**output.model_dump(), **changes})
                edited = output
            outputs.append(output)

        if edited is None:
            return None

        self._replace(task.model_copy(update={"outputs": outputs}))
        self._commit("update_output", task_id=task_id, output_id=output_id)
        return edited

    def delete_output(self, task_id: str, output_id: str) -> bool:
        task = self.get_task_by_id(task_id)
        if task is None or not any(o.id == output_id for o in task.outputs):
            return False

        outputs = [o for o in task.outputs if o.id != output_id]
        self._replace(task.model_copy(update={"outputs": outputs}))
        self._commit("delete_output", task_id=task_id, output_id=output_id)
        return True

    # ------------------------------------------------------------------
    # Category vocabularies
    # ------------------------------------------------------------------

    def _vocabulary(self, kind: CategoryKind) -> list[str]:
        if kind == "main":
            return self._main_categories
        if kind == "sub":
            return self._sub_categories
        raise ValueError(f"Unknown category kind: {kind!r}")

    def _set_vocabulary(self, kind: CategoryKind, names: list[str]) -> None:
        if kind == "main":
            self._main_categories = names
        else:
            self._sub_categories = names

    def add_category(self, kind: CategoryKind, name: str) -> list[str]:
        """Append a category name; duplicates and blank names are ignored."""
        vocabulary = self._vocabulary(kind)
        name = name.strip()
        if not name:
            return list(vocabulary)

        self._set_vocabulary(kind, _dedupe([*vocabulary, name]))
        self._commit("add_category", kind=kind, name=name)
        return self._vocabulary(kind)

    def rename_category(self, kind: CategoryKind, old: str, new: str) -> list[str]:
        """Rename a category and every task that references it."""
        vocabulary = self._vocabulary(kind)
        new = new.strip()
        if not new or new == old:
            return list(vocabulary)

        self._set_vocabulary(kind, _dedupe([new if c == old else c for c in vocabulary]))
        field = "main_category" if kind == "main" else "sub_category"
        self._tasks = [
            t.model_copy(update={field: new}) if getattr(t, field) == old else t
            for t in self._tasks
        ]
        self._commit("rename_category", kind=kind, old=old, new=new)
        return self._vocabulary(kind)

    def delete_category(self, kind: CategoryKind, name: str) -> list[str]:
        """Remove a name from the vocabulary.

        Tasks keep the now-unlisted name; only blank categories display as Other.
        """
        vocabulary = self._vocabulary(kind)
        if name not in vocabulary:
            return list(vocabulary)

        self._set_vocabulary(kind, [c for c in vocabulary if c != name])
        self._commit("delete_category", kind=kind, name=name)
        return self._vocabulary(kind)

    # ------------------------------------------------------------------
    # Wholesale replacement
    # ------------------------------------------------------------------

    def import_categories(self, data: CategoryData) -> None:
        """Replace both vocabularies. The caller validates the shape first."""
        self._main_categories = list(data.main_categories)
        self._sub_categories = list(data.sub_categories)
        self._commit(
            "import_categories",
            main=len(self._main_categories),
            sub=len(self._sub_categories),
        )

    def import_full_data(self, data: StoreSnapshot) -> None:
        """Replace the entire state. The caller validates the shape first."""
        self._tasks = list(data.tasks)
        self._main_categories = list(data.main_categories)
        self._sub_categories = list(data.sub_categories)
        self._commit("import_full_data", tasks=len(self._tasks))
