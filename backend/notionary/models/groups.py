from typing import Optional

from pydantic import Field

from notionary.models.base import CamelModel
from notionary.storage.groups_store import DEFAULT_GROUP_COLOR


class GroupCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = DEFAULT_GROUP_COLOR
    workspace_id: Optional[str] = None
    order: Optional[int] = None


class GroupUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = None
    workspace_id: Optional[str] = None
    order: Optional[int] = None


class GroupOut(CamelModel):
    id: str
    name: str
    color: str
    workspace_id: Optional[str] = None
    order: Optional[int] = None
    created_at: str
    updated_at: str
    note_count: int = 0
