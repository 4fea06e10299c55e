"""Storage singletons shared by the routers.

Routers look these up as ``stores.<name>`` at call time, so reloading this
module (as the tests do after pointing ``APP_DATA_DIR`` elsewhere) swaps the
backing directory for every router at once.
"""
import os
from pathlib import Path

from notionary.storage.event_log import EventLog
from notionary.storage.groups_store import GroupsStore
from notionary.storage.notes_store import NotesStore
from notionary.storage.users_store import UsersStore
from notionary.storage.workspaces_store import WorkspacesStore

# repository_root/data (we are in backend/notionary/api)
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"
DATA_DIR = Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR)))

users = UsersStore(DATA_DIR)
workspaces = WorkspacesStore(DATA_DIR)
groups = GroupsStore(DATA_DIR)
notes = NotesStore(DATA_DIR)
event_log = EventLog(DATA_DIR)

# nullable columns: an explicit null in a PUT body clears them
NULLABLE_FIELDS = frozenset({"workspace_id", "group_id", "order", "icon"})


def partial_changes(payload) -> dict:
    """Fields the client actually sent, minus nulls for required columns."""
    return {
        k: v
        for k, v in payload.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
