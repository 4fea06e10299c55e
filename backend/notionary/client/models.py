"""Client-side entities.

Immutable records built from the API's camelCase JSON. Fields the server
does not know about (``Group.is_expanded``, ``Group.note_ids``) live only
here and are carried over from the previous record on every merge.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class TodoItem:
    id: str
    completed: bool = False
    description: str = ""
    deadline: str = ""
    comments: str = ""
    preceding_task_id: Optional[str] = None
    reminder_time: Optional[str] = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "TodoItem":
        return cls(
            id=str(raw["id"]),
            completed=bool(raw.get("completed", False)),
            description=raw.get("description") or "",
            deadline=raw.get("deadline") or "",
            comments=raw.get("comments") or "",
            preceding_task_id=raw.get("precedingTaskId") or None,
            reminder_time=raw.get("reminderTime") or None,
        )

    def to_api(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "completed": self.completed,
            "description": self.description,
            "deadline": self.deadline,
            "comments": self.comments,
            "precedingTaskId": self.preceding_task_id,
            "reminderTime": self.reminder_time,
        }


@dataclass(frozen=True)
class Note:
    id: str
    title: str
    content: str = ""
    todos: tuple[TodoItem, ...] = ()
    color: str = "#4F46E5"
    created_at: str = ""
    updated_at: str = ""
    workspace_id: Optional[str] = None
    group_id: Optional[str] = None
    is_pinned: bool = False
    is_archived: bool = False
    order: Optional[int] = None

    @classmethod
    def from_api(cls, raw: dict[str, Any], previous: Optional["Note"] = None) -> "Note":
        if "todos" in raw and raw["todos"] is not None:
            todos = tuple(TodoItem.from_api(t) for t in raw["todos"])
        else:
            todos = previous.todos if previous is not None else ()
        return cls(
            id=str(raw["id"]),
            title=raw.get("title") or "",
            content=raw.get("content") or "",
            todos=todos,
            color=raw.get("color") or "#4F46E5",
            created_at=raw.get("createdAt") or "",
            updated_at=raw.get("updatedAt") or "",
            workspace_id=raw.get("workspaceId") or None,
            group_id=raw.get("groupId") or None,
            is_pinned=bool(raw.get("isPinned", False)),
            is_archived=bool(raw.get("isArchived", False)),
            order=raw.get("order"),
        )


@dataclass(frozen=True)
class Group:
    id: str
    name: str
    color: str = "#4F46E5"
    note_ids: tuple[str, ...] = ()
    is_expanded: bool = True
    workspace_id: Optional[str] = None
    order: Optional[int] = None

    @classmethod
    def from_api(cls, raw: dict[str, Any], previous: Optional["Group"] = None) -> "Group":
        return cls(
            id=str(raw["id"]),
            name=raw.get("name") or "",
            color=raw.get("color") or "#4F46E5",
            note_ids=previous.note_ids if previous is not None else (),
            is_expanded=previous.is_expanded if previous is not None else True,
            workspace_id=raw.get("workspaceId") or None,
            order=raw.get("order"),
        )


@dataclass(frozen=True)
class Workspace:
    id: str
    name: str
    color: str = "#4F46E5"
    icon: Optional[str] = None
    created_at: str = ""
    description: Optional[str] = None
    is_default: bool = False

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "Workspace":
        return cls(
            id=str(raw["id"]),
            name=raw.get("name") or "",
            color=raw.get("color") or "#4F46E5",
            icon=raw.get("icon") or None,
            created_at=raw.get("createdAt") or "",
            description=raw.get("description"),
            is_default=bool(raw.get("isDefault", False)),
        )


# snake_case attribute -> wire key, for building request bodies
WIRE_KEYS = {
    "workspace_id": "workspaceId",
    "group_id": "groupId",
    "is_pinned": "isPinned",
    "is_archived": "isArchived",
    "is_default": "isDefault",
}


def to_wire(changes: dict[str, Any]) -> dict[str, Any]:
    body = {}
    for key, value in changes.items():
        if key == "todos":
            value = [t.to_api() if isinstance(t, TodoItem) else t for t in value]
        body[WIRE_KEYS.get(key, key)] = value
    return body
