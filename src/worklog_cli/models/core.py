"""Task, time log and category data models.

All timestamps are epoch milliseconds. Attributes are snake_case in Python and
camelCase on the wire, so a persisted snapshot reads the same as the exported
backup files.
"""

from __future__ import annotations

import re
import uuid
from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

OTHER_CATEGORY = "Other"
MAX_DEPTH = 5
MAX_LABELS = 3
MAX_ALIAS_LENGTH = 10

DEFAULT_MAIN_CATEGORIES = ["Development", "Meeting", "General"]
DEFAULT_SUB_CATEGORIES = ["Frontend", "Backend", "Research", "Planning", "Urgent"]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def new_id() -> str:
    """Generate a new unique identifier."""
    return str(uuid.uuid4())


def normalize_completeness(value: object) -> str:
    """Normalize a completeness percentage to "" or an integer string in 0..100.

    Mirrors how the output form treats free text: the leading integer wins,
    anything unparseable counts as 0 and out-of-range values are clamped.
    """
    if value is None:
        return ""
    text = str(value)
    if text == "":
        return ""
    match = _LEADING_INT.match(text)
    number = int(match.group(1)) if match else 0
    return str(min(100, max(0, number)))


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskStatus(str, Enum):
    """Lifecycle status of a task."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    PAUSED = "PAUSED"
    DONE = "DONE"


class TimeLog(_CamelModel):
    """One contiguous interval of work on a task.

    Attributes:
        id: Unique identifier for the log
        start_time: Start instant (epoch ms)
        end_time: End instant (epoch ms), None while the timer is running
    """

    id: str = Field(default_factory=new_id)
    start_time: int
    end_time: int | None = None

    @model_validator(mode="after")
    def _clamp_end(self) -> TimeLog:
        if self.end_time is not None and self.end_time < self.start_time:
            self.end_time = self.start_time
        return self

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def duration(self) -> int:
        """Closed duration in ms. Open logs contribute nothing."""
        if self.end_time is None:
            return 0
        return max(0, self.end_time - self.start_time)


class WorkOutput(_CamelModel):
    """A deliverable produced while working on a task.

    Attributes:
        id: Unique identifier for the output
        name: Display name
        link: Optional URL or filesystem path
        completeness: "" or an integer percentage string ("0".."100")
    """

    id: str = Field(default_factory=new_id)
    name: str = ""
    link: str | None = None
    completeness: str = ""

    @field_validator("completeness", mode="before")
    @classmethod
    def _normalize_completeness(cls, v: object) -> str:
        return normalize_completeness(v)


class Task(_CamelModel):
    """A node in the work breakdown structure.

    Attributes:
        id: Unique identifier for the task
        title: Task title (required)
        alias_title: Short alias, at most 10 characters
        description: Free-text description
        main_category: Primary category ("" displays as Other)
        sub_category: Secondary category ("" displays as Other)
        estimated_start_date: Planned start (epoch ms)
        estimated_end_date: Planned end (epoch ms)
        actual_start_date: Set on the first timer start
        actual_end_date: Optional recorded finish
        assignee: Person doing the work
        reporter: Person who asked for the work
        status: Current status
        time_logs: Recorded work intervals, in insertion order
        total_time_spent: Sum of closed log durations (ms)
        parent_id: Optional parent task ID
        outputs: Work outputs owned by this task
        labels: Up to 3 free-text labels
    """

    id: str = Field(default_factory=new_id)
    title: str
    alias_title: str = ""
    description: str = ""
    main_category: str = ""
    sub_category: str = ""
    estimated_start_date: int | None = None
    estimated_end_date: int | None = None
    actual_start_date: int | None = None
    actual_end_date: int | None = None
    assignee: str = ""
    reporter: str = ""
    status: TaskStatus = TaskStatus.TODO
    time_logs: list[TimeLog] = Field(default_factory=list)
    total_time_spent: int = 0
    parent_id: str | None = None
    outputs: list[WorkOutput] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)

    @field_validator("alias_title", mode="before")
    @classmethod
    def _truncate_alias(cls, v: object) -> object:
        if v is None:
            return ""
        return v[:MAX_ALIAS_LENGTH] if isinstance(v, str) else v

    @field_validator("labels", mode="before")
    @classmethod
    def _limit_labels(cls, v: object) -> object:
        if v is None:
            return []
        return list(v)[:MAX_LABELS] if isinstance(v, (list, tuple)) else v

    @field_validator("parent_id", mode="before")
    @classmethod
    def _blank_parent_is_none(cls, v: object) -> object:
        return v or None

    @property
    def main_category_label(self) -> str:
        return self.main_category or OTHER_CATEGORY

    @property
    def sub_category_label(self) -> str:
        return self.sub_category or OTHER_CATEGORY

    def open_log(self) -> TimeLog | None:
        """Return the running time log, if any."""
        for log in self.time_logs:
            if log.end_time is None:
                return log
        return None


class TaskCreate(_CamelModel):
    """Fields accepted when creating a task.

    Logs, outputs, labels and totals start empty; outputs and labels are
    attached afterwards through the store.
    """

    title: str
    alias_title: str = ""
    description: str = ""
    main_category: str = ""
    sub_category: str = ""
    estimated_start_date: int | None = None
    estimated_end_date: int | None = None
    assignee: str = ""
    reporter: str = ""
    status: TaskStatus = TaskStatus.TODO
    parent_id: str | None = None


class TaskUpdate(_CamelModel):
    """Partial update for a task.

    Only fields explicitly set are merged, so passing ``parent_id=None``
    detaches a task while omitting it leaves the parent alone.
    """

    title: str | None = None
    alias_title: str | None = None
    description: str | None = None
    main_category: str | None = None
    sub_category: str | None = None
    estimated_start_date: int | None = None
    estimated_end_date: int | None = None
    actual_start_date: int | None = None
    actual_end_date: int | None = None
    assignee: str | None = None
    reporter: str | None = None
    status: TaskStatus | None = None
    parent_id: str | None = None
    outputs: list[WorkOutput] | None = None
    labels: list[str] | None = None


class WorkOutputUpdate(_CamelModel):
    """Partial update for a work output."""

    name: str | None = None
    link: str | None = None
    completeness: str | None = None

    @field_validator("completeness", mode="before")
    @classmethod
    def _normalize_completeness(cls, v: object) -> object:
        if v is None:
            return None
        return normalize_completeness(v)


class CategoryData(_CamelModel):
    """Category vocabularies as exchanged in category export files."""

    main_categories: list[str] = Field(default_factory=list)
    sub_categories: list[str] = Field(default_factory=list)


class StoreSnapshot(_CamelModel):
    """The persisted document: every task plus both vocabularies."""

    tasks: list[Task] = Field(default_factory=list)
    main_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MAIN_CATEGORIES)
    )
    sub_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SUB_CATEGORIES)
    )

    def to_json_dict(self) -> dict:
        """Serialize with wire aliases, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TaskFilters(BaseModel):
    """Filters for the task list view.

    Attributes:
        statuses: Statuses to include (empty = all)
        main_categories: Primary categories to include, "Other" for blank (empty = all)
        sub_categories: Secondary categories to include, "Other" for blank (empty = all)
        labels: Labels to match (any), empty = all
        estimated_after: Exclude tasks estimated to start before this instant
        estimated_before: Exclude tasks estimated to end after this instant
        search: Case-insensitive substring of title or alias
    """

    statuses: list[TaskStatus] = Field(
        default_factory=lambda: [
            TaskStatus.TODO,
            TaskStatus.IN_PROGRESS,
            TaskStatus.PAUSED,
        ]
    )
    main_categories: list[str] = Field(default_factory=list)
    sub_categories: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    estimated_after: int | None = None
    estimated_before: int | None = None
    search: str | None = None
