from __future__ import annotations

import hashlib
import json
import logging
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from notionary.storage.records import _atomic_write_json

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _account_path(base_dir: Path, email: str) -> Path:
    # hash the address so it never ends up in a file name
    digest = hashlib.sha256(_normalize_email(email).encode("utf-8")).hexdigest()
    return base_dir / "accounts" / f"{digest}.json"


@dataclass(frozen=True)
class UserRecord:
    user_id: str
    email: str
    name: Optional[str]
    hashed_password: str
    created_at: str


class UsersStore:
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        p = _account_path(self.base_dir, email)
        if not p.exists():
            return None
        raw = json.loads(p.read_text(encoding="utf-8"))
        return UserRecord(
            user_id=raw["user_id"],
            email=raw["email"],
            name=raw.get("name"),
            hashed_password=raw["hashed_password"],
            created_at=raw["created_at"],
        )

    def get(self, user_id: str) -> Optional[UserRecord]:
        accounts = self.base_dir / "accounts"
        if not accounts.exists():
            return None
        for p in sorted(accounts.glob("*.json")):
            try:
                raw = json.loads(p.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                logger.warning("Skipping unreadable account file %s: %s", p.name, exc)
                continue
            if isinstance(raw, dict) and raw.get("user_id") == user_id:
                return self.get_by_email(raw["email"])
        return None

    def create(self, email: str, name: Optional[str], hashed_password: str) -> UserRecord:
        p = _account_path(self.base_dir, email)
        if p.exists():
            raise FileExistsError("User exists")

        rec = UserRecord(
            user_id=str(uuid.uuid4()),
            email=_normalize_email(email),
            name=name,
            hashed_password=hashed_password,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        _atomic_write_json(p, asdict(rec))
        return rec
