"""What the board shows for a workspace."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from notionary.client.models import Group, Note
from notionary.client.store import ClientStateStore


@dataclass(frozen=True)
class GroupView:
    group: Group
    notes: tuple[Note, ...]

    @property
    def note_ids(self) -> tuple[str, ...]:
        return tuple(n.id for n in self.notes)


@dataclass(frozen=True)
class WorkspaceItems:
    ungrouped: tuple[Note, ...]
    grouped: tuple[GroupView, ...]

    @property
    def note_count(self) -> int:
        return len(self.ungrouped) + sum(len(g.notes) for g in self.grouped)


def _in_workspace(workspace_id: Optional[str], current: str, default_id: Optional[str]) -> bool:
    # records written before workspaces existed belong to the default one
    return workspace_id == current or (not workspace_id and current == default_id)


def workspace_items(store: ClientStateStore, workspace_id: Optional[str] = None) -> WorkspaceItems:
    current = workspace_id or store.current_workspace_id
    default = store.default_workspace()
    default_id = default.id if default is not None else None

    notes = [n for n in store.notes.values() if _in_workspace(n.workspace_id, current, default_id)]
    groups = [g for g in store.groups.values() if _in_workspace(g.workspace_id, current, default_id)]

    grouped = []
    for group in groups:
        members = tuple(n for n in notes if n.group_id == group.id)
        # an empty group is never drawn, even if one slipped through
        if members:
            grouped.append(GroupView(group, members))
    ungrouped = tuple(n for n in notes if not n.group_id)
    return WorkspaceItems(ungrouped=ungrouped, grouped=tuple(grouped))


def describe(items: WorkspaceItems) -> str:
    total = items.note_count
    if total == 0:
        return "No notes yet"
    if total == 1:
        return "1 note"
    parts = [f"{total} notes"]
    if items.grouped:
        count = len(items.grouped)
        parts.append(f"{count} group{'' if count == 1 else 's'}")
    return " • ".join(parts)
