"""Drag-and-drop reconciliation.

One gesture moves the engine ``IDLE -> DRAGGING`` on drag start and back to
``IDLE`` (nothing to do) or ``RESOLVED`` (a plan ran) on drag end. The drop
is first classified into a :class:`DropPlan` against the current store, and
the plan is then carried out by :class:`GroupLifecycle`.

Identifiers follow the board's conventions: a draggable note is its bare id,
a draggable group is ``group-<id>``; droppables are ``workspace``,
``group-<id>`` and ``note-<id>``.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from notionary.client.lifecycle import NEW_GROUP_NAME, GroupLifecycle
from notionary.client.store import ClientStateStore

logger = logging.getLogger(__name__)

WORKSPACE_DROPPABLE = "workspace"
GROUP_PREFIX = "group-"
NOTE_PREFIX = "note-"


class DragPhase(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESOLVED = "resolved"


class DropAction(enum.Enum):
    NOOP = "noop"
    MERGE_GROUPS = "merge_groups"
    DISBAND_GROUP = "disband_group"
    UNGROUP_NOTE = "ungroup_note"
    PAIR_NOTES = "pair_notes"
    MOVE_TO_GROUP = "move_to_group"


@dataclass(frozen=True)
class DragLocation:
    droppable_id: str
    index: int = 0


@dataclass(frozen=True)
class DropResult:
    draggable_id: str
    source: DragLocation
    destination: Optional[DragLocation] = None


@dataclass(frozen=True)
class DropPlan:
    action: DropAction
    item_id: Optional[str] = None
    target_id: Optional[str] = None
    reason: str = ""


def group_key(group_id: str) -> str:
    """Draggable and droppable id of a group."""
    return GROUP_PREFIX + group_id


def note_target(note_id: str) -> str:
    """Droppable id of a note card."""
    return NOTE_PREFIX + note_id


def _strip(identifier: str, prefix: str) -> Optional[str]:
    return identifier[len(prefix):] if identifier.startswith(prefix) else None


def _noop(reason: str) -> DropPlan:
    return DropPlan(DropAction.NOOP, reason=reason)


def plan_drop(result: DropResult, store: ClientStateStore) -> DropPlan:
    """Decide what a drop means, without touching anything."""
    destination = result.destination
    if destination is None:
        return _noop("dropped outside any target")
    if (destination.droppable_id == result.source.droppable_id
            and destination.index == result.source.index):
        return _noop("dropped in place")

    dragged_group = _strip(result.draggable_id, GROUP_PREFIX)
    target_group = _strip(destination.droppable_id, GROUP_PREFIX)
    target_note = _strip(destination.droppable_id, NOTE_PREFIX)

    if dragged_group is not None:
        if dragged_group not in store.groups:
            return _noop("unknown group")
        if target_group is not None:
            if target_group == dragged_group:
                return _noop("group dropped onto itself")
            if target_group not in store.groups:
                return _noop("unknown target group")
            return DropPlan(DropAction.MERGE_GROUPS, dragged_group, target_group)
        if destination.droppable_id == WORKSPACE_DROPPABLE:
            return DropPlan(DropAction.DISBAND_GROUP, dragged_group)
        return _noop("groups only drop onto groups or the workspace")

    note = store.notes.get(result.draggable_id)
    if note is None:
        return _noop("unknown note")

    if destination.droppable_id == WORKSPACE_DROPPABLE:
        if not note.group_id:
            return _noop("note is not grouped")
        return DropPlan(DropAction.UNGROUP_NOTE, note.id, note.group_id)

    if target_note is not None:
        if target_note == note.id:
            return _noop("note dropped onto itself")
        if target_note not in store.notes:
            return _noop("unknown target note")
        return DropPlan(DropAction.PAIR_NOTES, note.id, target_note)

    if target_group is not None:
        if target_group not in store.groups:
            return _noop("unknown target group")
        if note.group_id == target_group:
            return _noop("note already in that group")
        return DropPlan(DropAction.MOVE_TO_GROUP, note.id, target_group)

    return _noop(f"unknown droppable {destination.droppable_id!r}")


class DragAndDropEngine:
    def __init__(self, lifecycle: GroupLifecycle, store: ClientStateStore):
        self.lifecycle = lifecycle
        self.store = store
        self.phase = DragPhase.IDLE
        self.dragged_id: Optional[str] = None

    def on_drag_start(self, draggable_id: str) -> None:
        self.phase = DragPhase.DRAGGING
        self.dragged_id = draggable_id

    async def on_drag_end(self, result: DropResult) -> DropPlan:
        """Carry out a drop. Never raises; failures are logged."""
        self.dragged_id = None
        plan = _noop("not planned")
        try:
            plan = plan_drop(result, self.store)
            if plan.action is DropAction.NOOP:
                logger.debug("Drop of %s ignored: %s", result.draggable_id, plan.reason)
                self.phase = DragPhase.IDLE
                return plan
            logger.info("Drop of %s: %s -> %s", result.draggable_id, plan.action.value, plan.target_id)
            await self._execute(plan)
            self.phase = DragPhase.RESOLVED
        except Exception:
            logger.exception("Drop of %s failed", result.draggable_id)
            self.phase = DragPhase.IDLE
        return plan

    async def _execute(self, plan: DropPlan) -> None:
        if plan.action is DropAction.MERGE_GROUPS:
            await self.lifecycle.merge(plan.item_id, plan.target_id)
        elif plan.action is DropAction.DISBAND_GROUP:
            await self.lifecycle.disband(plan.item_id)
        elif plan.action is DropAction.UNGROUP_NOTE:
            await self.lifecycle.detach([plan.item_id])
        elif plan.action is DropAction.PAIR_NOTES:
            await self.lifecycle.detach([plan.item_id, plan.target_id])
            await self.lifecycle.form_group([plan.target_id, plan.item_id], NEW_GROUP_NAME)
        elif plan.action is DropAction.MOVE_TO_GROUP:
            await self.lifecycle.attach(plan.item_id, plan.target_id)
