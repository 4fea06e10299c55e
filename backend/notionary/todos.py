"""Todo checklist helpers shared by the API models and the client.

Todos are duck-typed: anything with ``id``, ``completed`` and
``preceding_task_id`` attributes works, so the same functions serve the
pydantic request models and the client's dataclasses.

A todo may name one preceding task of the same note. Self references are
never offered as an option; longer cycles are allowed and only reported by
:func:`find_dependency_cycle`.
"""
from __future__ import annotations

import time
from datetime import datetime
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_REMINDER_MINUTES = "15"


def new_todo_fields(now: Optional[datetime] = None) -> dict:
    """Field values for a freshly added, empty todo."""
    now = now or datetime.now()
    return {
        "id": str(int(time.time() * 1000)),
        "completed": False,
        "description": "",
        "deadline": now.strftime("%Y-%m-%dT%H:%M"),
        "comments": "",
        "preceding_task_id": None,
        "reminder_time": DEFAULT_REMINDER_MINUTES,
    }


def dependency_options(todos: Sequence[T], todo_id: str) -> list[T]:
    return [t for t in todos if t.id != todo_id]


def task_number(todos: Sequence[T], todo_id: str) -> int:
    """1-based position of a todo in its note, 0 if absent."""
    for idx, t in enumerate(todos):
        if t.id == todo_id:
            return idx + 1
    return 0


def blocking_task(todos: Sequence[T], todo: T) -> Optional[T]:
    """The incomplete task ``todo`` has to wait for, if any."""
    if not todo.preceding_task_id:
        return None
    for t in todos:
        if t.id == todo.preceding_task_id and t.id != todo.id:
            return None if t.completed else t
    return None


def find_dependency_cycle(todos: Sequence[T]) -> Optional[list[str]]:
    """Return the ids along the first dependency cycle found, or None."""
    preceding = {t.id: t.preceding_task_id for t in todos if t.preceding_task_id}
    for start in preceding:
        seen: list[str] = []
        current: Optional[str] = start
        while current is not None and current not in seen:
            seen.append(current)
            current = preceding.get(current)
        if current is not None:
            return seen[seen.index(current):]
    return None
