from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date

from mastery.catalog import TaskCatalog, category_label
from mastery.dates import as_date, iter_days, month_days
from mastery.models import DailyProgress, Task, TaskEntry
from mastery.rates import safe_ratio

__all__ = [
    "BestDay",
    "CategoryCompletion",
    "ProgressAggregator",
    "average_completion_rate",
    "best_day",
    "completion_chart_data",
    "safe_ratio",
    "streak",
]


@dataclass(frozen=True)
class CategoryCompletion:
    category: str
    completion_percent: float

    @property
    def label(self) -> str:
        return category_label(self.category)


@dataclass(frozen=True)
class BestDay:
    day: str
    rate: float


@dataclass(frozen=True)
class DayStatus:
    done: bool
    value: str | None = None


@dataclass
class TaskWeekRow:
    task: Task
    days: list[DayStatus] = field(default_factory=list)


@dataclass
class WeekGrid:
    days: list[date]
    rows: list[TaskWeekRow]
    day_percents: list[float]


def _progress_for_day(day: date, catalog: TaskCatalog, entries: list[TaskEntry]) -> DailyProgress:
    completed = 0
    screen_time = None
    value_task = catalog.value_task()
    for entry in entries:
        if entry.date != day or entry.task_id not in catalog:
            continue
        if entry.completed:
            completed += 1
        if value_task is not None and entry.task_id == value_task.id:
            screen_time = entry.value
    return DailyProgress(
        date=day,
        completed_tasks=completed,
        total_tasks=len(catalog),
        screen_time=screen_time,
    )


class ProgressAggregator:
    """Completion statistics computed from an ``EntryStore`` on every call."""

    def __init__(self, store):
        self.store = store

    def _snapshot(self) -> tuple[TaskCatalog, list[TaskEntry]]:
        return self.store.catalog(), self.store.list_entries()

    def daily_progress(self, day) -> DailyProgress:
        catalog, entries = self._snapshot()
        return _progress_for_day(as_date(day), catalog, entries)

    def progress_for_days(self, days) -> list[DailyProgress]:
        catalog, entries = self._snapshot()
        return [_progress_for_day(day, catalog, entries) for day in days]

    def weekly_progress(self, week_start) -> list[DailyProgress]:
        return self.progress_for_days(iter_days(week_start, 7))

    def monthly_progress(self, year: int, month: int) -> list[DailyProgress]:
        return self.progress_for_days(month_days(year, month))

    def category_completion(self, day) -> list[CategoryCompletion]:
        catalog, entries = self._snapshot()
        target = as_date(day)
        completed_by_category = defaultdict(int)
        for entry in entries:
            if entry.date != target or not entry.completed:
                continue
            task = catalog.get(entry.task_id)
            if task is None:
                continue
            completed_by_category[task.category] += 1
        return [
            CategoryCompletion(
                category=category,
                completion_percent=safe_ratio(completed_by_category[category], len(catalog.tasks_in(category))),
            )
            for category in catalog.categories()
        ]

    def week_grid(self, week_start) -> WeekGrid:
        catalog, entries = self._snapshot()
        days = iter_days(week_start, 7)
        by_key = {entry.key: entry for entry in entries}
        rows = []
        done_per_day = [0] * len(days)
        for task in catalog:
            row = TaskWeekRow(task=task)
            for index, day in enumerate(days):
                entry = by_key.get((task.id, day))
                if entry is None:
                    row.days.append(DayStatus(done=False))
                    continue
                done = entry.is_done_for(task)
                row.days.append(DayStatus(done=done, value=entry.value))
                done_per_day[index] += int(done)
            rows.append(row)
        day_percents = [safe_ratio(count, len(catalog)) for count in done_per_day]
        return WeekGrid(days=days, rows=rows, day_percents=day_percents)


def average_completion_rate(series: list[DailyProgress]) -> float:
    if not series:
        return 0.0
    total_rate = sum(day.rate for day in series)
    return safe_ratio(total_rate, len(series))


def best_day(series: list[DailyProgress]) -> BestDay:
    if not series:
        return BestDay(day="N/A", rate=0.0)
    best_index = 0
    best_rate = series[0].rate
    for index, day in enumerate(series):
        if day.rate > best_rate:
            best_rate = day.rate
            best_index = index
    return BestDay(day=series[best_index].date.strftime("%A"), rate=best_rate * 100)


def streak(series: list[DailyProgress], threshold: float = 0.8) -> int:
    """Longest run of consecutive days whose completion ratio reaches ``threshold``."""
    current = 0
    longest = 0
    for day in series:
        if day.rate >= threshold:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def completion_chart_data(series: list[DailyProgress], label_format: str = "%a") -> list[dict]:
    return [{"name": day.date.strftime(label_format), "value": day.percent} for day in series]
