"""Read-only report projections over the task store.

Every report is recomputed from the current store contents on demand; nothing
here mutates the store. "Now" is taken from the injected clock once per report
so all figures in one report agree with each other.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timezone, tzinfo

from worklog_cli.models import Task
from worklog_cli.models.config_models import ReportConfig
from worklog_cli.services.task_store import TaskStore
from worklog_cli.utils.diagrams import build_gantt_source, build_wbs_source
from worklog_cli.utils.hierarchy import IndexedTask, index_tasks, task_depth
from worklog_cli.utils.intervals import (
    CategoryBreakdown,
    TimeSlot,
    aggregate_by_category,
    day_slots,
    is_active_in_range,
    time_in_range,
)
from worklog_cli.utils.time_windows import (
    CalendarView,
    calendar_days,
    day_range,
    from_ms,
    months_around,
    start_of_week,
)


@dataclass(frozen=True)
class OutputRow:
    """One line of the output tracking report."""

    entry: IndexedTask
    time_in_range: int


@dataclass
class OutputReport:
    window_start: int
    window_end: int
    rows: list[OutputRow] = field(default_factory=list)


@dataclass
class WeeklyReport:
    """Weekly report inputs and the generated diagram sources.

    Attributes:
        window_start: Start of the report window (epoch ms)
        window_end: End of the report window (epoch ms)
        tasks: Tasks in the window at the selected levels (Gantt input)
        wbs_tasks: ``tasks`` minus the excluded categories (WBS input)
        excluded_main: Primary categories left out of the WBS
        excluded_sub: Secondary categories left out of the WBS
        wbs_source: PlantUML WBS text
        gantt_source: PlantUML Gantt text
    """

    window_start: int
    window_end: int
    tasks: list[Task]
    wbs_tasks: list[Task]
    excluded_main: list[str]
    excluded_sub: list[str]
    wbs_source: str
    gantt_source: str


@dataclass(frozen=True)
class CalendarDay:
    day: date
    slots: list[TimeSlot]


class ReportService:
    """Builds the dashboard, output tracking, weekly and calendar views."""

    def __init__(
        self,
        store: TaskStore,
        config: ReportConfig | None = None,
        *,
        tz: tzinfo = timezone.utc,
    ):
        self.store = store
        self.config = config or ReportConfig()
        self.tz = tz

    def _now(self) -> int:
        return self.store.clock()

    def today(self) -> date:
        """Current date in the report timezone, according to the store clock."""
        return from_ms(self._now(), self.tz).date()

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def category_stats(self, first: date, last: date) -> CategoryBreakdown:
        """Minutes per category between the start of *first* and the end of *last*."""
        start, end = day_range(first, last, self.tz)
        return aggregate_by_category(
            self.store.tasks, start, end, self._now(), self.config.other_label
        )

    # ------------------------------------------------------------------
    # Output tracking
    # ------------------------------------------------------------------

    def default_output_window(self) -> tuple[date, date]:
        """The current week, as configured by ``week_starts_on``."""
        first = start_of_week(self.today(), self.config.week_starts_on)
        return first, date.fromordinal(first.toordinal() + 6)

    def output_report(
        self, first: date | None = None, last: date | None = None
    ) -> OutputReport:
        """Tasks with logged work in the window, indexed as a tree."""
        if first is None or last is None:
            default_first, default_last = self.default_output_window()
            first = first or default_first
            last = last or default_last

        start, end = day_range(first, last, self.tz)
        now = self._now()
        active = [
            t for t in self.store.tasks if is_active_in_range(t, start, end, now)
        ]
        rows = [
            OutputRow(entry=entry, time_in_range=time_in_range(entry.task, start, end, now))
            for entry in index_tasks(active)
        ]
        return OutputReport(window_start=start, window_end=end, rows=rows)

    # ------------------------------------------------------------------
    # Weekly report
    # ------------------------------------------------------------------

    def default_excluded_sub(self) -> list[str]:
        """Secondary categories containing any of the configured keywords."""
        keywords = self.config.exclude_keywords
        return [
            c for c in self.store.sub_categories if any(k in c for k in keywords)
        ]

    def weekly_window(self, today: date | None = None) -> tuple[int, int]:
        return months_around(
            today or self.today(), self.tz, self.config.weekly_window_months
        )

    def weekly_tasks(
        self,
        window_start: int,
        window_end: int,
        levels: list[int] | None = None,
    ) -> list[Task]:
        """Tasks at the selected depths that are planned or worked in the window.

        A task qualifies when its estimated range overlaps the window (an
        estimate needs at least a start) or when one of its logs does.
        """
        levels = self.config.levels if levels is None else levels
        all_tasks = self.store.tasks
        now = self._now()

        selected = []
        for task in all_tasks:
            if task_depth(task, all_tasks) not in levels:
                continue
            planned = (
                task.estimated_start_date is not None
                and task.estimated_start_date <= window_end
                and (
                    task.estimated_end_date is None
                    or task.estimated_end_date >= window_start
                )
            )
            if planned or is_active_in_range(task, window_start, window_end, now):
                selected.append(task)
        return selected

    def weekly_report(
        self,
        today: date | None = None,
        levels: list[int] | None = None,
        excluded_main: list[str] | None = None,
        excluded_sub: list[str] | None = None,
    ) -> WeeklyReport:
        """Build the WBS outline and Gantt schedule for the weekly report.

        Category exclusions only apply to the WBS; the Gantt chart shows every
        task in the window.
        """
        other = self.config.other_label
        window_start, window_end = self.weekly_window(today)
        tasks = self.weekly_tasks(window_start, window_end, levels)

        excluded_main = list(excluded_main or [])
        if excluded_sub is None:
            excluded_sub = self.default_excluded_sub()

        wbs_tasks = [
            t
            for t in tasks
            if (t.main_category or other) not in excluded_main
            and (t.sub_category or other) not in excluded_sub
        ]

        return WeeklyReport(
            window_start=window_start,
            window_end=window_end,
            tasks=tasks,
            wbs_tasks=wbs_tasks,
            excluded_main=excluded_main,
            excluded_sub=list(excluded_sub),
            wbs_source=build_wbs_source(
                wbs_tasks, root_title=self.config.wbs_root_title, other_label=other
            ),
            gantt_source=build_gantt_source(
                tasks, window_start, self._now(), self.tz, other_label=other
            ),
        )

    # ------------------------------------------------------------------
    # Calendar
    # ------------------------------------------------------------------

    def calendar(self, day: date | None = None, view: CalendarView = "week7") -> list[CalendarDay]:
        """Logged work per day for a day, work-week or full-week view."""
        now = self._now()
        tasks = self.store.tasks
        days = calendar_days(day or self.today(), view, self.config.week_starts_on)
        result = []
        for d in days:
            start, end = day_range(d, d, self.tz)
            result.append(CalendarDay(day=d, slots=day_slots(tasks, start, end, now)))
        return result
