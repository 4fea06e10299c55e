from typing import Optional

from pydantic import Field

from notionary.models.base import CamelModel
from notionary.storage.workspaces_store import DEFAULT_WORKSPACE_COLOR


class WorkspaceCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = DEFAULT_WORKSPACE_COLOR
    icon: Optional[str] = Field(default=None, max_length=16)
    description: str = Field(default="", max_length=500)


class WorkspaceUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=16)
    description: Optional[str] = Field(default=None, max_length=500)
    is_default: Optional[bool] = None


class WorkspaceOut(CamelModel):
    id: str
    name: str
    color: str
    icon: Optional[str] = None
    description: str = ""
    is_default: bool = False
    created_at: str
    updated_at: str
    note_count: int = 0
    group_count: int = 0
