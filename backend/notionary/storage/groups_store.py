from dataclasses import dataclass
from typing import Any, Optional

from notionary.storage.records import RecordStore

DEFAULT_GROUP_COLOR = "#4F46E5"


@dataclass(frozen=True)
class Group:
    id: str
    owner_user_id: str
    name: str
    created_at: str
    updated_at: str
    color: str = DEFAULT_GROUP_COLOR
    workspace_id: Optional[str] = None
    order: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_user_id": self.owner_user_id,
            "name": self.name,
            "color": self.color,
            "workspace_id": self.workspace_id,
            "order": self.order,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class GroupsStore(RecordStore[Group]):
    kind = "groups"
    record_type = Group

    def create_group(self, user_id: str, name: str, **values: Any) -> Group:
        return self._insert(user_id, name=name, **values)

    def list_groups(self, user_id: str, workspace_id: Optional[str] = None) -> list[Group]:
        groups = self.list(user_id)
        if workspace_id:
            groups = [g for g in groups if g.workspace_id == workspace_id]
        groups.sort(key=lambda g: g.created_at)
        groups.sort(key=lambda g: (0, g.order) if g.order is not None else (1, 0))
        return groups

    def move_workspace(self, user_id: str, from_id: str, to_id: str) -> int:
        return self.rewrite_where(user_id, "workspace_id", from_id, to_id)
