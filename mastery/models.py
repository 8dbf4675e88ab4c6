from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from mastery.rates import safe_ratio

TaskCategory = Literal["morning", "productivity", "self-development", "wellness", "evening"]
ValueKind = Literal["boolean", "duration"]
Role = Literal["student", "mentor"]

CATEGORIES: list[str] = ["morning", "productivity", "self-development", "wellness", "evening"]


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Task(_Record):
    id: str
    name: str
    category: TaskCategory
    description: Optional[str] = None
    value_kind: ValueKind = Field("boolean", alias="valueKind")

    @property
    def tracks_value(self) -> bool:
        return self.value_kind == "duration"


class TaskEntry(_Record):
    task_id: str = Field(..., alias="taskId")
    date: dt.date
    completed: bool = False
    value: Optional[str] = None
    notes: Optional[str] = None

    @property
    def key(self) -> tuple[str, dt.date]:
        return self.task_id, self.date

    def is_done_for(self, task: Task | None) -> bool:
        """Duration tasks count as done once a value is logged; others use ``completed``."""
        if task is not None and task.tracks_value:
            return bool((self.value or "").strip())
        return self.completed


class DailyProgress(_Record):
    date: dt.date
    completed_tasks: int = Field(..., alias="completedTasks")
    total_tasks: int = Field(..., alias="totalTasks")
    screen_time: Optional[str] = Field(None, alias="screenTime")

    @property
    def rate(self) -> float:
        return safe_ratio(self.completed_tasks, self.total_tasks, scale=1.0)

    @property
    def percent(self) -> float:
        return self.rate * 100


class User(_Record):
    id: str
    name: str
    role: Role
