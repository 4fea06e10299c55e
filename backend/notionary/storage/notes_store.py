from dataclasses import dataclass, field
from typing import Any, Optional

from notionary.storage.records import RecordStore

DEFAULT_NOTE_COLOR = "#4F46E5"


@dataclass(frozen=True)
class Note:
    id: str
    owner_user_id: str
    title: str
    created_at: str
    updated_at: str
    content: str = ""
    color: str = DEFAULT_NOTE_COLOR
    todos: list[dict[str, Any]] = field(default_factory=list)
    workspace_id: Optional[str] = None
    group_id: Optional[str] = None
    is_pinned: bool = False
    is_archived: bool = False
    order: Optional[int] = None
    version: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_user_id": self.owner_user_id,
            "title": self.title,
            "content": self.content,
            "color": self.color,
            "todos": list(self.todos),
            "workspace_id": self.workspace_id,
            "group_id": self.group_id,
            "is_pinned": self.is_pinned,
            "is_archived": self.is_archived,
            "order": self.order,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "version": self.version,
        }


def _sort_key_order(note: Note) -> tuple[int, int]:
    # explicit order first, unordered notes last
    return (0, note.order) if note.order is not None else (1, 0)


class NotesStore(RecordStore[Note]):
    kind = "notes"
    record_type = Note

    def create_note(self, user_id: str, title: str, **values: Any) -> Note:
        return self._insert(user_id, title=title, **values)

    def list_notes(
        self,
        user_id: str,
        workspace_id: Optional[str] = None,
        group_id: Optional[str] = None,
    ) -> list[Note]:
        notes = self.list(user_id)
        if workspace_id:
            notes = [n for n in notes if n.workspace_id == workspace_id]
        if group_id:
            notes = [n for n in notes if n.group_id == group_id]
        # pinned first, then explicit order, then most recently updated
        notes.sort(key=lambda n: n.updated_at, reverse=True)
        notes.sort(key=_sort_key_order)
        notes.sort(key=lambda n: not n.is_pinned)
        return notes

    def get_note(self, user_id: str, note_id: str) -> Optional[Note]:
        return self.get(user_id, note_id)

    def update_note(self, user_id: str, note_id: str, changes: dict[str, Any]) -> Optional[Note]:
        current = self.get(user_id, note_id)
        if current is None:
            return None
        return self.update(user_id, note_id, {**changes, "version": current.version + 1})

    def delete_note(self, user_id: str, note_id: str) -> bool:
        return self.delete(user_id, note_id)

    def clear_group(self, user_id: str, group_id: str) -> int:
        return self.rewrite_where(user_id, "group_id", group_id, None)

    def move_workspace(self, user_id: str, from_id: str, to_id: str) -> int:
        return self.rewrite_where(user_id, "workspace_id", from_id, to_id)
