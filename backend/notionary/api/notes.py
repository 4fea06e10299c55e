from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from notionary.api import stores
from notionary.api.groups import require_workspace
from notionary.models.notes import NoteCreate, NoteOut, NoteUpdate
from notionary.storage.event_log import Event
from notionary.utils.jwt_auth import get_current_user

router = APIRouter(prefix="/notes", tags=["notes"])


def require_group(user_id: str, group_id: Optional[str]) -> None:
    if not group_id:
        return
    try:
        gid = str(UUID(group_id))
    except ValueError:
        raise HTTPException(status_code=404, detail="Group not found")
    if stores.groups.get(user_id, gid) is None:
        raise HTTPException(status_code=404, detail="Group not found")


@router.post("", response_model=NoteOut, status_code=201)
def create_note(payload: NoteCreate, user_id: str = Depends(get_current_user)) -> NoteOut:
    require_workspace(user_id, payload.workspace_id)
    require_group(user_id, payload.group_id)

    note = stores.notes.create_note(user_id, **payload.model_dump())

    stores.event_log.emit(Event(
        event_type="NOTE_CREATED",
        user_id=user_id,
        entity_id=note.id,
        meta={"version": note.version},
    ))
    return NoteOut(**note.to_dict())


@router.get("", response_model=list[NoteOut])
def list_notes(
    workspace_id: Optional[str] = Query(default=None, alias="workspaceId"),
    group_id: Optional[str] = Query(default=None, alias="groupId"),
    user_id: str = Depends(get_current_user),
) -> list[NoteOut]:
    notes = stores.notes.list_notes(user_id, workspace_id=workspace_id, group_id=group_id)
    return [NoteOut(**n.to_dict()) for n in notes]


@router.get("/{note_id}", response_model=NoteOut)
def get_note(note_id: UUID, user_id: str = Depends(get_current_user)) -> NoteOut:
    note = stores.notes.get_note(user_id, str(note_id))
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteOut(**note.to_dict())


@router.put("/{note_id}", response_model=NoteOut)
def update_note(note_id: UUID, payload: NoteUpdate, user_id: str = Depends(get_current_user)) -> NoteOut:
    nid = str(note_id)
    if stores.notes.get_note(user_id, nid) is None:
        raise HTTPException(status_code=404, detail="Note not found")

    changes = stores.partial_changes(payload)
    if changes.get("workspace_id"):
        require_workspace(user_id, changes["workspace_id"])
    if changes.get("group_id"):
        require_group(user_id, changes["group_id"])

    updated = stores.notes.update_note(user_id, nid, changes)
    if updated is None:
        raise HTTPException(status_code=404, detail="Note not found")

    stores.event_log.emit(Event(
        event_type="NOTE_UPDATED",
        user_id=user_id,
        entity_id=nid,
        meta={"version": updated.version, "fields": sorted(changes)},
    ))
    return NoteOut(**updated.to_dict())


@router.delete("/{note_id}", status_code=204)
def delete_note(note_id: UUID, user_id: str = Depends(get_current_user)) -> None:
    nid = str(note_id)
    if not stores.notes.delete_note(user_id, nid):
        raise HTTPException(status_code=404, detail="Note not found")

    stores.event_log.emit(Event(event_type="NOTE_DELETED", user_id=user_id, entity_id=nid))
    return None
