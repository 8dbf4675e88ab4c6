from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

import pandas as pd

from mastery.catalog import category_label
from mastery.dates import trailing_days
from mastery.rates import safe_ratio
from mastery.settings import get_settings

logger = logging.getLogger(__name__)


class ReportKind(str, Enum):
    COMPLETION = "completion"
    CATEGORY = "category"
    TREND = "trend"


class ReportOrdering(str, Enum):
    BY_VALUE = "by_value"
    NATURAL = "natural"


DEFAULT_ORDERING = {
    ReportKind.COMPLETION: ReportOrdering.BY_VALUE,
    ReportKind.CATEGORY: ReportOrdering.BY_VALUE,
    ReportKind.TREND: ReportOrdering.NATURAL,
}

# Column each report ranks on when ordered by value.
VALUE_COLUMN = {
    ReportKind.COMPLETION: "average",
    ReportKind.CATEGORY: "value",
    ReportKind.TREND: "value",
}


@dataclass
class Report:
    kind: ReportKind
    ordering: ReportOrdering
    rows: list[dict]

    @property
    def filename(self) -> str:
        return report_filename(self.kind)

    def to_csv(self) -> str:
        return rows_to_csv(self.rows)


def report_filename(kind) -> str:
    return f"self-mastery-{ReportKind(kind).value}-report.csv"


class ReportGenerator:
    """Ranking and trend views over the whole entry log.

    Natural order is catalog order for the completion ranking, first-seen
    category order for the category analysis and oldest-to-newest for the
    trend. ``ReportOrdering.BY_VALUE`` sorts descending on the report's value
    column, keeping natural order between ties.
    """

    def __init__(self, store, today=None, ranking_window_days=None, trend_window_days=None):
        settings = get_settings()
        self.store = store
        self._today = today or date.today
        self.ranking_window_days = settings.ranking_window_days if ranking_window_days is None else ranking_window_days
        self.trend_window_days = settings.trend_window_days if trend_window_days is None else trend_window_days

    def generate(self, kind, ordering=None) -> Report:
        kind = ReportKind(kind)
        ordering = ReportOrdering(ordering) if ordering else DEFAULT_ORDERING[kind]
        if kind is ReportKind.COMPLETION:
            rows = self.completion_rows()
        elif kind is ReportKind.CATEGORY:
            rows = self.category_rows()
        else:
            rows = self.trend_rows()
        if ordering is ReportOrdering.BY_VALUE:
            column = VALUE_COLUMN[kind]
            rows = sorted(rows, key=lambda row: row[column], reverse=True)
        logger.debug("Generated %s report with %d rows (%s)", kind.value, len(rows), ordering.value)
        return Report(kind=kind, ordering=ordering, rows=rows)

    def completion_rows(self) -> list[dict]:
        catalog = self.store.catalog()
        entries = self.store.list_entries()
        days = trailing_days(self._today(), self.ranking_window_days)
        completed_keys = {entry.key for entry in entries if entry.completed}
        rows = []
        for task in catalog:
            row = {"name": task.name, "category": task.category}
            for day in days:
                row[day.isoformat()] = 100 if (task.id, day) in completed_keys else 0
            row["average"] = safe_ratio(sum(row[day.isoformat()] for day in days), len(days), scale=1.0)
            rows.append(row)
        return rows

    def category_rows(self) -> list[dict]:
        catalog = self.store.catalog()
        entries = self.store.list_entries()
        completed_by_category = {}
        for entry in entries:
            task = catalog.get(entry.task_id)
            if task is None or not entry.completed:
                continue
            completed_by_category[task.category] = completed_by_category.get(task.category, 0) + 1
        rows = []
        for category in catalog.categories():
            total = len(catalog.tasks_in(category))
            total_possible = total * 100
            total_completed = completed_by_category.get(category, 0) * 100
            rows.append(
                {
                    "name": category_label(category),
                    "value": safe_ratio(total_completed, total_possible),
                    "total": total,
                }
            )
        return rows

    def trend_rows(self) -> list[dict]:
        catalog = self.store.catalog()
        entries = self.store.list_entries()
        completed_by_day = {}
        for entry in entries:
            if entry.completed and entry.task_id in catalog:
                completed_by_day[entry.date] = completed_by_day.get(entry.date, 0) + 1
        return [
            {
                "date": day.isoformat(),
                "name": day.strftime("%b %d"),
                "value": safe_ratio(completed_by_day.get(day, 0), len(catalog)),
            }
            for day in trailing_days(self._today(), self.trend_window_days)
        ]

    def tasks_csv(self) -> str:
        rows = [{"id": task.id, "name": task.name, "category": task.category} for task in self.store.catalog()]
        return rows_to_csv(rows)


def rows_to_csv(rows: list[dict]) -> str:
    """Serialize rows with the first row's keys as the header.

    Values containing a comma, a double quote or a newline are quoted and
    embedded quotes are doubled.
    """
    if not rows:
        return ""
    columns = list(rows[0].keys())
    frame = pd.DataFrame([[row.get(column) for column in columns] for row in rows], columns=columns, dtype=object)
    buffer = io.StringIO()
    frame.to_csv(buffer, index=False, lineterminator="\n")
    return buffer.getvalue()
