"""Time-range aggregation over task time logs.

Each log is clipped to a closed window ``[start, end]``; a log only counts
when the clipped interval is non-empty (``effective_start < effective_end``),
so a log that merely touches the window boundary contributes nothing.
Running logs are measured up to ``now``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from worklog_cli.models import OTHER_CATEGORY, Task, TaskStatus, TimeLog
from worklog_cli.utils.time_windows import MS_PER_MINUTE


@dataclass(frozen=True)
class CategorySlice:
    """One chart bucket."""

    name: str
    minutes: int


@dataclass
class CategoryBreakdown:
    """Minutes per primary and per secondary category."""

    main: list[CategorySlice] = field(default_factory=list)
    sub: list[CategorySlice] = field(default_factory=list)

    @property
    def total_minutes(self) -> int:
        return sum(s.minutes for s in self.main)


@dataclass(frozen=True)
class TimeSlot:
    """A log clipped to one calendar day, with the task data the view needs."""

    log_id: str
    task_id: str
    task_title: str
    alias_title: str
    main_category: str
    sub_category: str
    start_time: int
    end_time: int
    running: bool


def clip_interval(
    log: TimeLog, window_start: int, window_end: int, now: int
) -> tuple[int, int] | None:
    """Clip *log* to the window, or None if nothing of it falls inside."""
    effective_start = max(log.start_time, window_start)
    end = log.end_time if log.end_time is not None else now
    effective_end = min(end, window_end)
    if effective_start < effective_end:
        return effective_start, effective_end
    return None


def is_active_in_range(task: Task, window_start: int, window_end: int, now: int) -> bool:
    """True if at least one of the task's logs overlaps the window."""
    return any(
        clip_interval(log, window_start, window_end, now) is not None
        for log in task.time_logs
    )


def time_in_range(task: Task, window_start: int, window_end: int, now: int) -> int:
    """Milliseconds of the task's work that fall inside the window."""
    total = 0
    for log in task.time_logs:
        clipped = clip_interval(log, window_start, window_end, now)
        if clipped is not None:
            total += clipped[1] - clipped[0]
    return total


def ms_to_minutes(ms: int) -> int:
    """Round milliseconds to whole minutes, halves rounding up."""
    return (ms + MS_PER_MINUTE // 2) // MS_PER_MINUTE


def _to_slices(buckets: dict[str, int]) -> list[CategorySlice]:
    slices = [CategorySlice(name, ms_to_minutes(ms)) for name, ms in buckets.items()]
    return [s for s in slices if s.minutes > 0]


def aggregate_by_category(
    tasks: list[Task],
    window_start: int,
    window_end: int,
    now: int,
    other_label: str = OTHER_CATEGORY,
) -> CategoryBreakdown:
    """Sum clipped time per primary and secondary category.

    Blank categories are bucketed under *other_label*. Buckets keep first-seen
    order and buckets that round to zero minutes are dropped.
    """
    main: dict[str, int] = {}
    sub: dict[str, int] = {}

    for task in tasks:
        main_key = task.main_category or other_label
        sub_key = task.sub_category or other_label
        for log in task.time_logs:
            clipped = clip_interval(log, window_start, window_end, now)
            if clipped is None:
                continue
            duration = clipped[1] - clipped[0]
            main[main_key] = main.get(main_key, 0) + duration
            sub[sub_key] = sub.get(sub_key, 0) + duration

    return CategoryBreakdown(main=_to_slices(main), sub=_to_slices(sub))


def day_slots(tasks: list[Task], day_start: int, day_end: int, now: int) -> list[TimeSlot]:
    """Logs overlapping one day, clipped to it and sorted by start."""
    slots = []
    for task in tasks:
        for log in task.time_logs:
            clipped = clip_interval(log, day_start, day_end, now)
            if clipped is None:
                continue
            slots.append(
                TimeSlot(
                    log_id=log.id,
                    task_id=task.id,
                    task_title=task.title,
                    alias_title=task.alias_title,
                    main_category=task.main_category,
                    sub_category=task.sub_category,
                    start_time=clipped[0],
                    end_time=clipped[1],
                    running=log.end_time is None,
                )
            )
    slots.sort(key=lambda s: s.start_time)
    return slots


def actual_dates(task: Task) -> tuple[int | None, int | None]:
    """Earliest log start and, for finished tasks, the latest closed log end."""
    if not task.time_logs:
        return None, None
    start = min(log.start_time for log in task.time_logs)
    end = None
    if task.status == TaskStatus.DONE:
        ended = [log.end_time for log in task.time_logs if log.end_time is not None]
        if ended:
            end = max(ended)
    return start, end
