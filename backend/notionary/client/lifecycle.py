"""Group lifecycle: forming, merging, disbanding and dissolving groups.

A group exists only while it has at least two member notes. Every operation
here ends by re-checking that rule for the groups it touched (``settle``):
a group left with one member or none gets its remainder ungrouped and is
deleted. All store changes still go through the sync layer, so a failed
request simply leaves that part of the model untouched.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from notionary.client.store import ClientStateStore
from notionary.client.sync import SyncLayer

logger = logging.getLogger(__name__)

NEW_GROUP_NAME = "New Group"
MIN_GROUP_SIZE = 2


class GroupLifecycle:
    def __init__(self, sync: SyncLayer, store: ClientStateStore):
        self.sync = sync
        self.store = store

    async def settle(self, group_id: str) -> None:
        """Dissolve ``group_id`` if it fell below two members."""
        if group_id not in self.store.groups:
            return
        members = self.store.member_ids(group_id)
        if len(members) >= MIN_GROUP_SIZE:
            return
        logger.info("Dissolving group %s (%d member(s) left)", group_id, len(members))
        if members:
            await self.sync.assign_group(members, None)
        await self.sync.delete_group(group_id)

    async def form_group(self, note_ids: Iterable[str], name: str = NEW_GROUP_NAME) -> Optional[str]:
        """Create a group holding exactly ``note_ids``; returns its id if it survived."""
        note_ids = list(note_ids)
        group = await self.sync.create_group(name=name, workspace_id=self.store.current_workspace_id)
        if group is None:
            return None
        # notes whose earlier ungrouping failed still carry their old group
        previous = list(dict.fromkeys(
            self.store.notes[nid].group_id for nid in note_ids
            if nid in self.store.notes and self.store.notes[nid].group_id
        ))
        await self.sync.assign_group(note_ids, group.id)
        for group_id in previous:
            await self.settle(group_id)
        await self.settle(group.id)
        return group.id if group.id in self.store.groups else None

    async def detach(self, note_ids: Iterable[str]) -> None:
        """Take notes out of their groups, dissolving groups that become too small."""
        grouped = [
            nid for nid in note_ids
            if nid in self.store.notes and self.store.notes[nid].group_id
        ]
        if not grouped:
            return
        vacated = list(dict.fromkeys(self.store.notes[nid].group_id for nid in grouped))
        await self.sync.assign_group(grouped, None)
        for group_id in vacated:
            await self.settle(group_id)

    async def attach(self, note_id: str, group_id: str) -> None:
        """Move a note into an existing group."""
        note = self.store.notes.get(note_id)
        if note is None or group_id not in self.store.groups or note.group_id == group_id:
            return
        previous = note.group_id
        moved = await self.sync.assign_group([note_id], group_id)
        if moved and previous:
            await self.settle(previous)

    async def merge(self, source_id: str, target_id: str) -> None:
        """Move every member of ``source_id`` into ``target_id`` and drop the source."""
        if source_id == target_id:
            return
        await self.sync.assign_group(self.store.member_ids(source_id), target_id)
        await self.sync.delete_group(source_id)
        await self.settle(target_id)

    async def disband(self, group_id: str) -> None:
        """Ungroup every member, then delete the group."""
        members = self.store.member_ids(group_id)
        if members:
            await self.sync.assign_group(members, None)
        await self.sync.delete_group(group_id)

    async def delete_note(self, note_id: str) -> bool:
        note = self.store.notes.get(note_id)
        if note is None:
            return False
        deleted = await self.sync.delete_note(note_id)
        if deleted and note.group_id:
            await self.settle(note.group_id)
        return deleted
