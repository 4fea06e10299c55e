import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from notionary.api import stores
from notionary.models.workspaces import WorkspaceCreate, WorkspaceOut, WorkspaceUpdate
from notionary.storage.event_log import Event
from notionary.storage.workspaces_store import Workspace
from notionary.utils.jwt_auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


def _out(user_id: str, workspace: Workspace) -> WorkspaceOut:
    note_count = sum(1 for n in stores.notes.list(user_id) if n.workspace_id == workspace.id)
    group_count = sum(1 for g in stores.groups.list(user_id) if g.workspace_id == workspace.id)
    return WorkspaceOut(**workspace.to_dict(), note_count=note_count, group_count=group_count)


def _owned(user_id: str, workspace_id: UUID) -> Workspace:
    workspace = stores.workspaces.get(user_id, str(workspace_id))
    if workspace is None:
        raise HTTPException(status_code=404, detail="Workspace not found")
    return workspace


@router.get("", response_model=list[WorkspaceOut])
def list_workspaces(user_id: str = Depends(get_current_user)) -> list[WorkspaceOut]:
    stores.workspaces.ensure_default(user_id)
    return [_out(user_id, w) for w in stores.workspaces.list_workspaces(user_id)]


@router.post("", response_model=WorkspaceOut, status_code=201)
def create_workspace(payload: WorkspaceCreate, user_id: str = Depends(get_current_user)) -> WorkspaceOut:
    workspace = stores.workspaces.create_workspace(user_id, **payload.model_dump())

    stores.event_log.emit(Event(
        event_type="WORKSPACE_CREATED",
        user_id=user_id,
        entity_id=workspace.id,
        meta={"is_default": workspace.is_default},
    ))
    return _out(user_id, workspace)


@router.put("/{workspace_id}", response_model=WorkspaceOut)
def update_workspace(
    workspace_id: UUID, payload: WorkspaceUpdate, user_id: str = Depends(get_current_user)
) -> WorkspaceOut:
    existing = _owned(user_id, workspace_id)
    changes = stores.partial_changes(payload)

    if changes.get("is_default") is False and existing.is_default:
        # there must always be exactly one default; promote another one instead
        raise HTTPException(status_code=400, detail="Cannot unset the default workspace")
    if changes.get("is_default"):
        stores.workspaces.make_default(user_id, existing.id)

    updated = stores.workspaces.update(user_id, existing.id, changes)
    if updated is None:
        raise HTTPException(status_code=404, detail="Workspace not found")

    stores.event_log.emit(Event(
        event_type="WORKSPACE_UPDATED",
        user_id=user_id,
        entity_id=updated.id,
        meta={"fields": sorted(changes)},
    ))
    return _out(user_id, updated)


@router.delete("/{workspace_id}", status_code=204)
def delete_workspace(workspace_id: UUID, user_id: str = Depends(get_current_user)) -> None:
    existing = _owned(user_id, workspace_id)

    if existing.is_default:
        raise HTTPException(status_code=400, detail="Cannot delete default workspace")
    if len(stores.workspaces.list(user_id)) <= 1:
        raise HTTPException(status_code=400, detail="Cannot delete the last workspace")

    target = stores.workspaces.ensure_default(user_id)
    moved_notes = stores.notes.move_workspace(user_id, existing.id, target.id)
    moved_groups = stores.groups.move_workspace(user_id, existing.id, target.id)
    stores.workspaces.delete(user_id, existing.id)
    logger.info(
        "Deleted workspace %s, moved %d notes and %d groups to %s",
        existing.id, moved_notes, moved_groups, target.id,
    )

    stores.event_log.emit(Event(
        event_type="WORKSPACE_DELETED",
        user_id=user_id,
        entity_id=existing.id,
        meta={"reassigned_to": target.id, "notes": moved_notes, "groups": moved_groups},
    ))
    return None
