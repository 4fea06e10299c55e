"""In-memory model of the signed-in user's notes, groups and workspaces.

The store is plain state plus change notification. It is written only by
:class:`notionary.client.sync.SyncLayer`, after the server confirmed a
change; everything else reads it. The app shell only resets it on sign-out
and toggles the sign-in flag.

Group membership is authoritative on the notes (``Note.group_id``).
``Group.note_ids`` is an index derived from it, rebuilt whenever the store
settles, and never edited directly.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Callable, Iterable, Iterator, Optional

from notionary.client.models import Group, Note, Workspace

logger = logging.getLogger(__name__)

Listener = Callable[["ClientStateStore"], None]


class ClientStateStore:
    def __init__(self) -> None:
        self.notes: dict[str, Note] = {}
        self.groups: dict[str, Group] = {}
        self.workspaces: dict[str, Workspace] = {}
        self.current_workspace_id: str = ""
        self.theme: str = "light"
        self.requires_sign_in: bool = False

        self._listeners: list[Listener] = []
        self._batch_depth = 0
        self._dirty = False
        self._index: dict[str, tuple[str, ...]] = {}

    # change tracking

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    @contextmanager
    def batch(self) -> Iterator["ClientStateStore"]:
        """Apply several writes and settle once at the end."""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._settle()

    def _changed(self) -> None:
        if self._batch_depth:
            self._dirty = True
        else:
            self._settle()

    def _settle(self) -> None:
        self._dirty = False
        index: dict[str, list[str]] = {gid: [] for gid in self.groups}
        for note in self.notes.values():
            if note.group_id in index:
                index[note.group_id].append(note.id)
        self._index = {gid: tuple(ids) for gid, ids in index.items()}
        for gid, group in self.groups.items():
            if group.note_ids != self._index[gid]:
                self.groups[gid] = replace(group, note_ids=self._index[gid])
        for listener in list(self._listeners):
            listener(self)

    # reads

    def member_ids(self, group_id: str) -> tuple[str, ...]:
        """Ids of the notes whose ``group_id`` points at ``group_id``."""
        if self._dirty:
            return tuple(n.id for n in self.notes.values() if n.group_id == group_id)
        return self._index.get(group_id, ())

    def members(self, group_id: str) -> list[Note]:
        return [self.notes[nid] for nid in self.member_ids(group_id)]

    def default_workspace(self) -> Optional[Workspace]:
        for w in self.workspaces.values():
            if w.is_default:
                return w
        return None

    # writes (sync layer only)

    def replace_all(
        self,
        workspaces: Iterable[Workspace],
        groups: Iterable[Group],
        notes: Iterable[Note],
    ) -> None:
        self.workspaces = {w.id: w for w in workspaces}
        self.groups = {g.id: g for g in groups}
        self.notes = {n.id: n for n in notes}
        if self.current_workspace_id not in self.workspaces:
            default = self.default_workspace()
            if default is not None:
                self.current_workspace_id = default.id
            elif self.workspaces:
                self.current_workspace_id = next(iter(self.workspaces))
            else:
                self.current_workspace_id = ""
        self._changed()

    def put_note(self, note: Note) -> None:
        self.notes[note.id] = note
        self._changed()

    def drop_note(self, note_id: str) -> None:
        if self.notes.pop(note_id, None) is not None:
            self._changed()

    def put_group(self, group: Group) -> None:
        self.groups[group.id] = group
        self._changed()

    def drop_group(self, group_id: str) -> None:
        """Forget a group; its members stay, ungrouped."""
        if self.groups.pop(group_id, None) is None:
            return
        for note in list(self.notes.values()):
            if note.group_id == group_id:
                self.notes[note.id] = replace(note, group_id=None)
        self._changed()

    def put_workspace(self, workspace: Workspace) -> None:
        self.workspaces[workspace.id] = workspace
        self._changed()

    def drop_workspace(self, workspace_id: str, reassign_to: str) -> None:
        """Forget a workspace and move its notes and groups to ``reassign_to``."""
        if self.workspaces.pop(workspace_id, None) is None:
            return
        for note in list(self.notes.values()):
            if note.workspace_id == workspace_id:
                self.notes[note.id] = replace(note, workspace_id=reassign_to)
        for group in list(self.groups.values()):
            if group.workspace_id == workspace_id:
                self.groups[group.id] = replace(group, workspace_id=reassign_to)
        if self.current_workspace_id == workspace_id:
            self.current_workspace_id = reassign_to
        self._changed()

    def set_current_workspace(self, workspace_id: str) -> None:
        if workspace_id not in self.workspaces:
            raise KeyError(workspace_id)
        self.current_workspace_id = workspace_id
        self._changed()

    def set_theme(self, theme: str) -> None:
        self.theme = theme
        self._changed()

    def mark_sign_in_required(self) -> None:
        if not self.requires_sign_in:
            logger.info("Session rejected by the server, sign-in required")
        self.requires_sign_in = True
        self._changed()

    def clear_sign_in_required(self) -> None:
        self.requires_sign_in = False
        self._changed()

    def reset(self) -> None:
        """Forget everything of the signed-out user; the theme stays."""
        self.notes = {}
        self.groups = {}
        self.workspaces = {}
        self.current_workspace_id = ""
        self._changed()
