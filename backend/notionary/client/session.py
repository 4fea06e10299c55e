"""Session provider: who is signed in, and with which bearer token.

Two ways in: the credential flow (email + password against ``/auth/login``)
and the federated flow, where an external sign-in hands over a token minted
for this service and we only confirm it with ``/auth/session``. The token is
kept in a JSON file so a session survives restarts until it expires.
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import httpx
from jose import JWTError, jwt

from notionary.client.api import NotionaryApi
from notionary.storage.records import _atomic_write_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    user_id: str
    email: str
    token: str
    name: Optional[str] = None


def _token_expired(token: str) -> bool:
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return True
    exp = claims.get("exp")
    return exp is not None and exp <= time.time()


class SessionProvider:
    def __init__(self, base_url: str, path: Path, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url
        self.path = path
        self.transport = transport

    def _api(self, token: Optional[str] = None) -> NotionaryApi:
        return NotionaryApi(self.base_url, token=token, transport=self.transport)

    def current(self) -> Optional[Session]:
        if not self.path.exists():
            return None
        try:
            session = Session(**json.loads(self.path.read_text(encoding="utf-8")))
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Discarding unreadable session file %s: %s", self.path, exc)
            return None
        if _token_expired(session.token):
            logger.info("Stored session for %s has expired", session.email)
            return None
        return session

    async def register(self, email: str, password: str, name: Optional[str] = None) -> Session:
        api = self._api()
        try:
            await api.register({"email": email, "password": password, "name": name})
        finally:
            await api.aclose()
        return await self.sign_in(email, password)

    async def sign_in(self, email: str, password: str) -> Session:
        """Credential sign-in. Raises UnauthorizedError on bad credentials."""
        api = self._api()
        try:
            token = (await api.login(email, password))["access_token"]
        finally:
            await api.aclose()
        return await self.sign_in_with_token(token)

    async def sign_in_with_token(self, token: str) -> Session:
        api = self._api(token)
        try:
            raw = await api.get_session()
        finally:
            await api.aclose()
        session = Session(user_id=raw["userId"], email=raw["email"], token=token, name=raw.get("name"))
        _atomic_write_json(self.path, asdict(session))
        logger.info("Signed in as %s", session.email)
        return session

    def sign_out(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
