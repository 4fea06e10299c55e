from typing import Optional

from pydantic import Field, model_validator

from notionary.models.base import CamelModel
from notionary.storage.notes_store import DEFAULT_NOTE_COLOR


class TodoItem(CamelModel):
    id: str = Field(min_length=1, max_length=64)
    completed: bool = False
    description: str = Field(default="", max_length=2_000)
    deadline: str = ""
    comments: str = Field(default="", max_length=10_000)
    preceding_task_id: Optional[str] = None
    reminder_time: Optional[str] = None

    @model_validator(mode="after")
    def _no_self_dependency(self) -> "TodoItem":
        if self.preceding_task_id and self.preceding_task_id == self.id:
            raise ValueError("a task cannot depend on itself")
        return self


class NoteCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(default="", max_length=100_000)
    color: str = DEFAULT_NOTE_COLOR
    todos: list[TodoItem] = Field(default_factory=list)
    workspace_id: Optional[str] = None
    group_id: Optional[str] = None
    is_pinned: bool = False
    order: Optional[int] = None


class NoteUpdate(CamelModel):
    """Partial update: only fields present in the body are applied."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, max_length=100_000)
    color: Optional[str] = None
    todos: Optional[list[TodoItem]] = None
    workspace_id: Optional[str] = None
    group_id: Optional[str] = None
    is_pinned: Optional[bool] = None
    is_archived: Optional[bool] = None
    order: Optional[int] = None


class NoteOut(CamelModel):
    id: str
    title: str
    content: str
    color: str
    todos: list[TodoItem]
    workspace_id: Optional[str] = None
    group_id: Optional[str] = None
    is_pinned: bool = False
    is_archived: bool = False
    order: Optional[int] = None
    created_at: str
    updated_at: str
    version: int
