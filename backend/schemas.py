from __future__ import annotations

from datetime import date
from typing import Annotated, Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from mastery.models import TaskCategory, ValueKind


class LoginPayload(BaseModel):
    username: str
    password: str


class TaskCreate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    category: TaskCategory
    value_kind: ValueKind = Field("boolean", alias="valueKind")
    description: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class EntryValuePayload(BaseModel):
    value: Optional[str] = None


class ProgressSummaryResponse(BaseModel):
    start: date
    end: date
    average_completion_rate: float = Field(..., alias="averageCompletionRate")
    best_day: Dict[str, Any] = Field(..., alias="bestDay")
    streak: int
    threshold: float

    model_config = ConfigDict(populate_by_name=True)


class ReportResponse(BaseModel):
    kind: str
    ordering: str
    rows: List[Dict[str, Any]]


class ImportResponse(BaseModel):
    tasks: int
    entries: int
