from dataclasses import dataclass
from typing import Any, Optional

from notionary.storage.records import RecordStore

DEFAULT_WORKSPACE_NAME = "My Workspace"
DEFAULT_WORKSPACE_COLOR = "#4F46E5"


@dataclass(frozen=True)
class Workspace:
    id: str
    owner_user_id: str
    name: str
    created_at: str
    updated_at: str
    color: str = DEFAULT_WORKSPACE_COLOR
    icon: Optional[str] = None
    description: str = ""
    is_default: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_user_id": self.owner_user_id,
            "name": self.name,
            "color": self.color,
            "icon": self.icon,
            "description": self.description,
            "is_default": self.is_default,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class WorkspacesStore(RecordStore[Workspace]):
    """Workspaces of a user. Exactly one of them carries ``is_default``."""

    kind = "workspaces"
    record_type = Workspace

    def list_workspaces(self, user_id: str) -> list[Workspace]:
        workspaces = self.list(user_id)
        workspaces.sort(key=lambda w: w.created_at)
        workspaces.sort(key=lambda w: not w.is_default)
        return workspaces

    def default_for(self, user_id: str) -> Optional[Workspace]:
        for w in self.list(user_id):
            if w.is_default:
                return w
        return None

    def create_workspace(self, user_id: str, name: str, **values: Any) -> Workspace:
        # the first workspace of a user is always the default one
        if not self.list(user_id):
            values["is_default"] = True
        else:
            values.pop("is_default", None)
        return self._insert(user_id, name=name, **values)

    def ensure_default(self, user_id: str) -> Workspace:
        existing = self.default_for(user_id)
        if existing is not None:
            return existing
        workspaces = self.list_workspaces(user_id)
        if workspaces:
            # repair: promote the oldest workspace
            return self.update(user_id, workspaces[0].id, {"is_default": True})
        return self.create_workspace(user_id, DEFAULT_WORKSPACE_NAME)

    def make_default(self, user_id: str, workspace_id: str) -> None:
        for w in self.list(user_id):
            if w.is_default and w.id != workspace_id:
                self.update(user_id, w.id, {"is_default": False})
