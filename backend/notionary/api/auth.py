from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from notionary.api import stores
from notionary.models.auth import LoginRequest, RegisterRequest, SessionOut, TokenResponse
from notionary.storage.event_log import Event
from notionary.utils.auth_hash import hash_password, verify_password
from notionary.utils.jwt_auth import create_access_token, get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest) -> SessionOut:
    if stores.users.get_by_email(req.email) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User exists")

    try:
        rec = stores.users.create(req.email, req.name, hash_password(req.password))
    except FileExistsError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User exists")

    stores.workspaces.ensure_default(rec.user_id)
    stores.event_log.emit(Event(event_type="USER_REGISTERED", user_id=rec.user_id))
    return SessionOut(user_id=rec.user_id, name=rec.name, email=rec.email)


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest) -> TokenResponse:
    rec = stores.users.get_by_email(req.email)
    if rec is None or not verify_password(req.password, rec.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = create_access_token(subject=rec.user_id, name=rec.name, email=rec.email)
    return TokenResponse(access_token=token)


@router.get("/session", response_model=SessionOut)
def session(user_id: str = Depends(get_current_user)) -> SessionOut:
    rec = stores.users.get(user_id)
    if rec is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")
    return SessionOut(user_id=rec.user_id, name=rec.name, email=rec.email)
