from __future__ import annotations

import time

from mastery.models import Task

DEFAULT_TASKS = [
    Task(id="task1", name="VISUALIZATION - MORNING", category="morning"),
    Task(id="task2", name="SMILE AT THE MIRROR", category="morning"),
    Task(id="task3", name="READING NEWSPAPER", category="productivity"),
    Task(id="task4", name="PODCAST/ CURRENT TREND NEWS", category="self-development"),
    Task(id="task5", name="PROFESSIONAL FRIEND", category="self-development"),
    Task(id="task6", name="ENGLISH SONG", category="self-development"),
    Task(id="task7", name="READING BOOK", category="self-development"),
    Task(id="task8", name="ENGLISH COMMUNICATION", category="self-development"),
    Task(id="task9", name="ACHIEVEMENTS", category="productivity"),
    Task(id="task10", name="EXERCISE", category="wellness"),
    Task(id="task11", name="GRATITUDE JOURNAL", category="wellness"),
    Task(id="task12", name="PHONE- OFF (9pm - 6am)", category="evening"),
    Task(id="task13", name="WAKE UP BEFORE 6 AM", category="morning"),
    Task(id="task14", name="VISUALIZATION - NIGHT", category="evening"),
    Task(id="task15", name="SCREEN TIME", category="productivity", value_kind="duration"),
]


def new_task_id(existing_ids=()) -> str:
    candidate = f"task{int(time.time() * 1000)}"
    suffix = 1
    taken = set(existing_ids)
    while candidate in taken:
        candidate = f"task{int(time.time() * 1000)}-{suffix}"
        suffix += 1
    return candidate


def category_label(category: str) -> str:
    return category[:1].upper() + category[1:]


class TaskCatalog:
    """Read-only view over a list of tasks."""

    def __init__(self, tasks: list[Task]):
        self.tasks = list(tasks)
        self._by_id = {task.id: task for task in self.tasks}

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self):
        return iter(self.tasks)

    def __contains__(self, task_id) -> bool:
        return task_id in self._by_id

    def get(self, task_id: str) -> Task | None:
        return self._by_id.get(task_id)

    def categories(self) -> list[str]:
        seen = []
        for task in self.tasks:
            if task.category not in seen:
                seen.append(task.category)
        return seen

    def tasks_in(self, category: str) -> list[Task]:
        return [task for task in self.tasks if task.category == category]

    def value_task(self) -> Task | None:
        for task in self.tasks:
            if task.tracks_value:
                return task
        return None
