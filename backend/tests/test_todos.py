from datetime import datetime

from notionary.client.models import TodoItem
from notionary.todos import (
    blocking_task,
    dependency_options,
    find_dependency_cycle,
    new_todo_fields,
    task_number,
)

TODOS = [
    TodoItem("1", completed=True),
    TodoItem("2", preceding_task_id="1"),
    TodoItem("3", preceding_task_id="2"),
]


def test_new_todo_fields():
    fields = new_todo_fields(datetime(2026, 3, 4, 5, 6, 7))
    assert fields["deadline"] == "2026-03-04T05:06"
    assert fields["reminder_time"] == "15"
    assert fields["completed"] is False
    assert fields["preceding_task_id"] is None
    assert fields["id"].isdigit()
    TodoItem(**fields)


def test_dependency_options_exclude_self():
    assert [t.id for t in dependency_options(TODOS, "2")] == ["1", "3"]


def test_task_number():
    assert task_number(TODOS, "1") == 1
    assert task_number(TODOS, "3") == 3
    assert task_number(TODOS, "missing") == 0


def test_blocking_task():
    # "1" is done, so "2" can start
    assert blocking_task(TODOS, TODOS[1]) is None
    assert blocking_task(TODOS, TODOS[2]).id == "2"
    assert blocking_task(TODOS, TODOS[0]) is None
    assert blocking_task(TODOS, TodoItem("x", preceding_task_id="gone")) is None


def test_find_dependency_cycle():
    assert find_dependency_cycle(TODOS) is None
    cyclic = [TodoItem("1", preceding_task_id="3"), *TODOS[1:]]
    cycle = find_dependency_cycle(cyclic)
    assert sorted(cycle) == ["1", "2", "3"]


def test_helpers_accept_api_models():
    from notionary.models.notes import TodoItem as TodoIn

    todos = [TodoIn(id="a"), TodoIn(id="b", preceding_task_id="a")]
    assert blocking_task(todos, todos[1]).id == "a"
