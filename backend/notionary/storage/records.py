import json
import logging
import os
import uuid
from dataclasses import fields, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _safe_user_dir(base_dir: Path, user_id: str, kind: str) -> Path:
    # user_id comes from a verified token, but it still ends up in a path
    if not user_id or any(ch in user_id for ch in "/\\") or ".." in user_id:
        raise ValueError("Invalid user_id")
    return base_dir / "users" / user_id / kind


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.flush()
        os.fsync(f.fileno())
    tmp_path.replace(path)


class RecordStore(Generic[R]):
    """One JSON file per record under ``users/<user_id>/<kind>/``.

    Subclasses set ``kind`` and ``record_type`` (a frozen dataclass with
    ``id``, ``owner_user_id``, ``created_at`` and ``updated_at`` fields and a
    ``to_dict`` method).
    """

    kind: str = ""
    record_type: type

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _dir(self, user_id: str) -> Path:
        return _safe_user_dir(self.base_dir, user_id, self.kind)

    def _path(self, user_id: str, record_id: str) -> Path:
        # ids are generated here and validated as UUIDs at the API edge
        return self._dir(user_id) / f"{uuid.UUID(str(record_id))}.json"

    def _from_raw(self, raw: dict[str, Any]) -> R:
        known = {f.name for f in fields(self.record_type)}
        return self.record_type(**{k: v for k, v in raw.items() if k in known})

    def _insert(self, user_id: str, **values: Any) -> R:
        now = _utc_now_iso()
        record = self.record_type(
            id=str(uuid.uuid4()),
            owner_user_id=user_id,
            created_at=now,
            updated_at=now,
            **values,
        )
        _atomic_write_json(self._path(user_id, record.id), record.to_dict())
        return record

    def list(self, user_id: str) -> list[R]:
        records_dir = self._dir(user_id)
        if not records_dir.exists():
            return []
        out: list[R] = []
        for p in sorted(records_dir.glob("*.json")):
            try:
                out.append(self._from_raw(json.loads(p.read_text(encoding="utf-8"))))
            except (OSError, ValueError, TypeError) as exc:
                logger.warning("Skipping unreadable %s record %s: %s", self.kind, p.name, exc)
        return out

    def get(self, user_id: str, record_id: str) -> Optional[R]:
        path = self._path(user_id, record_id)
        if not path.exists():
            return None
        return self._from_raw(json.loads(path.read_text(encoding="utf-8")))

    def update(self, user_id: str, record_id: str, changes: dict[str, Any]) -> Optional[R]:
        current = self.get(user_id, record_id)
        if current is None:
            return None
        updated = replace(current, **changes, updated_at=_utc_now_iso())
        _atomic_write_json(self._path(user_id, record_id), updated.to_dict())
        return updated

    def delete(self, user_id: str, record_id: str) -> bool:
        path = self._path(user_id, record_id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def rewrite_where(self, user_id: str, field: str, old: Optional[str], new: Optional[str]) -> int:
        """Set ``field`` to ``new`` on every record whose value is ``old``."""
        count = 0
        for record in self.list(user_id):
            if getattr(record, field) == old:
                self.update(user_id, record.id, {field: new})
                count += 1
        return count
