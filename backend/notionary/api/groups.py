from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from notionary.api import stores
from notionary.models.groups import GroupCreate, GroupOut, GroupUpdate
from notionary.storage.event_log import Event
from notionary.storage.groups_store import Group
from notionary.utils.jwt_auth import get_current_user

router = APIRouter(prefix="/groups", tags=["groups"])


def _out(user_id: str, group: Group) -> GroupOut:
    note_count = sum(1 for n in stores.notes.list(user_id) if n.group_id == group.id)
    return GroupOut(**group.to_dict(), note_count=note_count)


def require_workspace(user_id: str, workspace_id: Optional[str]) -> None:
    if workspace_id and stores.workspaces.get(user_id, _as_uuid(workspace_id, "Workspace")) is None:
        raise HTTPException(status_code=404, detail="Workspace not found")


def _as_uuid(value: str, label: str) -> str:
    try:
        return str(UUID(value))
    except ValueError:
        raise HTTPException(status_code=404, detail=f"{label} not found")


@router.get("", response_model=list[GroupOut])
def list_groups(
    workspace_id: Optional[str] = Query(default=None, alias="workspaceId"),
    user_id: str = Depends(get_current_user),
) -> list[GroupOut]:
    groups = stores.groups.list_groups(user_id, workspace_id=workspace_id)
    return [_out(user_id, g) for g in groups]


@router.post("", response_model=GroupOut, status_code=201)
def create_group(payload: GroupCreate, user_id: str = Depends(get_current_user)) -> GroupOut:
    require_workspace(user_id, payload.workspace_id)
    group = stores.groups.create_group(user_id, **payload.model_dump())

    stores.event_log.emit(Event(event_type="GROUP_CREATED", user_id=user_id, entity_id=group.id))
    return _out(user_id, group)


@router.put("/{group_id}", response_model=GroupOut)
def update_group(group_id: UUID, payload: GroupUpdate, user_id: str = Depends(get_current_user)) -> GroupOut:
    changes = stores.partial_changes(payload)
    if changes.get("workspace_id"):
        require_workspace(user_id, changes["workspace_id"])

    updated = stores.groups.update(user_id, str(group_id), changes)
    if updated is None:
        raise HTTPException(status_code=404, detail="Group not found")

    stores.event_log.emit(Event(
        event_type="GROUP_UPDATED",
        user_id=user_id,
        entity_id=updated.id,
        meta={"fields": sorted(changes)},
    ))
    return _out(user_id, updated)


@router.delete("/{group_id}", status_code=204)
def delete_group(group_id: UUID, user_id: str = Depends(get_current_user)) -> None:
    gid = str(group_id)
    if stores.groups.get(user_id, gid) is None:
        raise HTTPException(status_code=404, detail="Group not found")

    # members survive their group
    released = stores.notes.clear_group(user_id, gid)
    stores.groups.delete(user_id, gid)

    stores.event_log.emit(Event(
        event_type="GROUP_DELETED",
        user_id=user_id,
        entity_id=gid,
        meta={"released_notes": released},
    ))
    return None
