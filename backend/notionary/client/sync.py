"""Confirmed-write synchronisation between the API and the client store.

Each mutation issues one request and touches the store only after the
server answered with a 2xx. Failures are logged and leave the store as it
was; nothing is retried and nothing is raised to the caller, except for
input that is rejected locally before any request is made.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Awaitable, Iterable, Optional, TypeVar

from notionary.client.api import NotionaryApi
from notionary.client.errors import ApiError, InvalidInputError, UnauthorizedError
from notionary.client.models import Group, Note, TodoItem, Workspace, to_wire
from notionary.client.store import ClientStateStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_COLOR = "#4F46E5"


class SyncLayer:
    def __init__(self, api: NotionaryApi, store: ClientStateStore):
        self.api = api
        self.store = store

    async def _call(self, label: str, request: Awaitable[T]) -> tuple[bool, Optional[T]]:
        try:
            return True, await request
        except UnauthorizedError as exc:
            logger.warning("%s: unauthorized (%s)", label, exc)
            self.store.mark_sign_in_required()
        except ApiError as exc:
            logger.error("%s failed: %s", label, exc)
        return False, None

    # loading

    async def load(self) -> bool:
        ok, workspaces = await self._call("load workspaces", self.api.list_workspaces())
        if not ok:
            return False
        ok, groups = await self._call("load groups", self.api.list_groups())
        if not ok:
            return False
        ok, notes = await self._call("load notes", self.api.list_notes())
        if not ok:
            return False

        self.store.replace_all(
            [Workspace.from_api(w) for w in workspaces],
            [Group.from_api(g, self.store.groups.get(str(g["id"]))) for g in groups],
            [Note.from_api(n) for n in notes],
        )
        logger.info(
            "Loaded %d workspaces, %d groups, %d notes",
            len(workspaces), len(groups), len(notes),
        )
        return True

    def switch_workspace(self, workspace_id: str) -> None:
        self.store.set_current_workspace(workspace_id)

    # notes

    async def create_note(
        self,
        title: str,
        content: str = "",
        color: str = DEFAULT_COLOR,
        todos: Iterable[TodoItem] = (),
        group_id: Optional[str] = None,
    ) -> Optional[Note]:
        if not title or not title.strip():
            raise InvalidInputError("Title is required")
        body = to_wire({
            "title": title,
            "content": content,
            "color": color,
            "todos": list(todos),
            "workspace_id": self.store.current_workspace_id or None,
            "group_id": group_id,
        })
        ok, raw = await self._call("create note", self.api.create_note(body))
        if not ok:
            return None
        note = Note.from_api(raw)
        self.store.put_note(note)
        return note

    async def update_note(self, note_id: str, **changes: Any) -> Optional[Note]:
        ok, raw = await self._call(f"update note {note_id}", self.api.update_note(note_id, to_wire(changes)))
        if not ok:
            return None
        note = Note.from_api(raw, self.store.notes.get(note_id))
        self.store.put_note(note)
        return note

    async def delete_note(self, note_id: str) -> bool:
        ok, _ = await self._call(f"delete note {note_id}", self.api.delete_note(note_id))
        if ok:
            self.store.drop_note(note_id)
        return ok

    async def assign_group(self, note_ids: Iterable[str], group_id: Optional[str]) -> list[str]:
        """Point every note at ``group_id`` (None ungroups).

        The requests run concurrently; the store is updated once, after all
        of them settled, with whichever succeeded.
        """
        note_ids = list(note_ids)
        if not note_ids:
            return []
        body = {"groupId": group_id}
        results = await asyncio.gather(*(
            self._call(f"assign note {nid} to group {group_id}", self.api.update_note(nid, body))
            for nid in note_ids
        ))
        updated = []
        with self.store.batch():
            for nid, (ok, raw) in zip(note_ids, results):
                if ok:
                    self.store.put_note(Note.from_api(raw, self.store.notes.get(nid)))
                    updated.append(nid)
        if len(updated) < len(note_ids):
            logger.warning(
                "Only %d of %d notes moved to group %s; cached membership may lag until reload",
                len(updated), len(note_ids), group_id,
            )
        return updated

    # groups

    async def create_group(
        self,
        name: str,
        color: str = DEFAULT_COLOR,
        workspace_id: Optional[str] = None,
    ) -> Optional[Group]:
        if not name or not name.strip():
            raise InvalidInputError("Name is required")
        body = to_wire({
            "name": name,
            "color": color,
            "workspace_id": workspace_id or self.store.current_workspace_id or None,
        })
        ok, raw = await self._call("create group", self.api.create_group(body))
        if not ok:
            return None
        group = Group.from_api(raw)
        self.store.put_group(group)
        return group

    async def update_group(self, group_id: str, **changes: Any) -> Optional[Group]:
        changes.pop("is_expanded", None)
        changes.pop("note_ids", None)
        ok, raw = await self._call(f"update group {group_id}", self.api.update_group(group_id, to_wire(changes)))
        if not ok:
            return None
        group = Group.from_api(raw, self.store.groups.get(group_id))
        self.store.put_group(group)
        return group

    def toggle_group(self, group_id: str) -> None:
        """Expand or collapse a group; purely local, never sent."""
        group = self.store.groups.get(group_id)
        if group is not None:
            self.store.put_group(replace(group, is_expanded=not group.is_expanded))

    async def delete_group(self, group_id: str) -> bool:
        ok, _ = await self._call(f"delete group {group_id}", self.api.delete_group(group_id))
        if ok:
            # the server released the members as well
            self.store.drop_group(group_id)
        return ok

    # workspaces

    async def create_workspace(
        self,
        name: str,
        color: str = DEFAULT_COLOR,
        description: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Optional[Workspace]:
        if not name or not name.strip():
            raise InvalidInputError("Name is required")
        body = {"name": name, "color": color, "description": description or "", "icon": icon}
        ok, raw = await self._call("create workspace", self.api.create_workspace(body))
        if not ok:
            return None
        workspace = Workspace.from_api(raw)
        self.store.put_workspace(workspace)
        return workspace

    async def update_workspace(self, workspace_id: str, **changes: Any) -> Optional[Workspace]:
        ok, raw = await self._call(
            f"update workspace {workspace_id}",
            self.api.update_workspace(workspace_id, to_wire(changes)),
        )
        if not ok:
            return None
        workspace = Workspace.from_api(raw)
        with self.store.batch():
            if workspace.is_default:
                for other in list(self.store.workspaces.values()):
                    if other.is_default and other.id != workspace.id:
                        self.store.put_workspace(replace(other, is_default=False))
            self.store.put_workspace(workspace)
        return workspace

    async def delete_workspace(self, workspace_id: str) -> bool:
        if len(self.store.workspaces) <= 1:
            logger.warning("Refusing to delete workspace %s: a user needs at least one", workspace_id)
            return False
        if workspace_id not in self.store.workspaces:
            logger.warning("Unknown workspace %s", workspace_id)
            return False

        ok, _ = await self._call(f"delete workspace {workspace_id}", self.api.delete_workspace(workspace_id))
        if not ok:
            return False

        remaining = [w for w in self.store.workspaces.values() if w.id != workspace_id]
        target = next((w for w in remaining if w.is_default), remaining[0])
        self.store.drop_workspace(workspace_id, reassign_to=target.id)
        return True
