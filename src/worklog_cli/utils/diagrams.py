"""PlantUML source generation for the weekly report.

Two notations are produced from an already filtered task list:

* a WBS outline (``@startwbs``), grouped by primary category, one line per
  task and one sub-line per named work output;
* a Gantt schedule (``@startgantt``), grouped by primary category, one entry
  per task whose start and end can be resolved.

Rendering the text into an image is left to an external PlantUML server.
"""

from __future__ import annotations

import re
from datetime import tzinfo

from worklog_cli.models import OTHER_CATEGORY, Task, TaskStatus
from worklog_cli.utils.hierarchy import walk_tree
from worklog_cli.utils.time_windows import MS_PER_DAY, format_ms

# Root task nodes sit below the diagram root (*) and the category node (**).
_WBS_LEVEL_OFFSET = 2

_GANTT_DECORATIONS = {
    TaskStatus.DONE: ["is 100% completed", "is colored in lightgreen"],
    TaskStatus.TODO: ["is 0% completed"],
    TaskStatus.IN_PROGRESS: ["is colored in LightBlue"],
    TaskStatus.PAUSED: ["is colored in Orange"],
}


def _categories_in_order(tasks: list[Task], other_label: str) -> list[str]:
    seen: dict[str, None] = {}
    for task in tasks:
        seen.setdefault(task.main_category or other_label, None)
    return list(seen)


def build_wbs_source(
    tasks: list[Task],
    root_title: str = "Project Tasks",
    other_label: str = OTHER_CATEGORY,
) -> str:
    """Build a PlantUML WBS outline of *tasks* grouped by primary category."""
    lines = ["@startwbs", "skinparam monochrome true", f"* {root_title}"]

    for category in _categories_in_order(tasks, other_label):
        lines.append(f"** {category}")
        cat_tasks = [t for t in tasks if (t.main_category or other_label) == category]
        for node in walk_tree(cat_tasks):
            stars = "*" * (node.depth + _WBS_LEVEL_OFFSET)
            lines.append(f"{stars} {node.task.title}")
            for output in node.task.outputs:
                if output.name:
                    lines.append(f"{stars}* _Output: {output.name}_")

    lines.append("@endwbs")
    return "\n".join(lines)


def resolve_schedule(task: Task, now: int) -> tuple[int | None, int | None]:
    """Pick the bar start and end for a task depending on its status.

    TODO tasks use their estimates. Started tasks begin at their first log and
    end at the estimate (or tomorrow). Finished tasks end at their last closed
    log (or now).
    """
    starts = [log.start_time for log in task.time_logs]
    first_start = min(starts) if starts else None

    if task.status == TaskStatus.TODO:
        return task.estimated_start_date, task.estimated_end_date

    if task.status in (TaskStatus.IN_PROGRESS, TaskStatus.PAUSED):
        end = task.estimated_end_date or now + MS_PER_DAY
        return first_start, end

    ends = [log.end_time for log in task.time_logs if log.end_time is not None]
    return first_start, max(ends) if ends else now


def clean_gantt_title(title: str) -> str:
    """Strip the brackets PlantUML uses to delimit task names."""
    return re.sub(r"[\[\]]", "", title)


def build_gantt_source(
    tasks: list[Task],
    project_start: int,
    now: int,
    tz: tzinfo,
    other_label: str = OTHER_CATEGORY,
) -> str:
    """Build a PlantUML Gantt chart of *tasks* grouped by primary category.

    Tasks whose start or end cannot be resolved are left out.
    """
    lines = [
        "@startgantt",
        "printscale daily zoom 1",
        f"Project starts {format_ms(project_start, tz, '%Y-%m-%d')}",
        "",
    ]

    for category in _categories_in_order(tasks, other_label):
        cat_tasks = [t for t in tasks if (t.main_category or other_label) == category]
        lines.append(f"-- {category} --")
        for task in cat_tasks:
            start, end = resolve_schedule(task, now)
            if start is None or end is None:
                continue
            title = clean_gantt_title(task.title)
            lines.append(
                f"[{title}] starts {format_ms(start, tz, '%Y-%m-%d')}"
                f" and ends {format_ms(end, tz, '%Y-%m-%d')}"
            )
            for decoration in _GANTT_DECORATIONS[task.status]:
                lines.append(f"[{title}] {decoration}")
        lines.append("")

    lines.append("@endgantt")
    return "\n".join(lines)
