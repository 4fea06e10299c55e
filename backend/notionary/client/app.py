"""The board, minus the pixels.

``NotionaryApp`` wires the pieces a signed-in session needs: preferences,
session provider, store, sync layer, group lifecycle and drag-and-drop
engine. Presentation code subscribes to ``app.store`` and calls the methods
below in response to user input.
"""
from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

import httpx

from notionary import todos as todo_rules
from notionary.client.api import NotionaryApi
from notionary.client.dnd import DragAndDropEngine
from notionary.client.errors import InvalidInputError
from notionary.client.lifecycle import GroupLifecycle
from notionary.client.models import Note, TodoItem
from notionary.client.preferences import DARK, LIGHT, Preferences
from notionary.client.selectors import WorkspaceItems, workspace_items
from notionary.client.session import Session, SessionProvider
from notionary.client.store import ClientStateStore
from notionary.client.sync import SyncLayer

logger = logging.getLogger(__name__)


def _api_url() -> str:
    return os.getenv("NOTIONARY_API_URL", "http://127.0.0.1:8000")


def _home_dir() -> Path:
    return Path(os.getenv("NOTIONARY_HOME", str(Path.home() / ".notionary")))


class NotionaryApp:
    def __init__(
        self,
        base_url: Optional[str] = None,
        home: Optional[Path] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or _api_url()
        home = home or _home_dir()
        self.transport = transport
        self.preferences = Preferences(home / "preferences.json")
        self.sessions = SessionProvider(self.base_url, home / "session.json", transport=transport)
        self.store = ClientStateStore()

        self.session: Optional[Session] = None
        self.api: Optional[NotionaryApi] = None
        self.sync: Optional[SyncLayer] = None
        self.lifecycle: Optional[GroupLifecycle] = None
        self.engine: Optional[DragAndDropEngine] = None

    async def start(self) -> bool:
        """Apply the theme, resume the session and load the board.

        Returns False when the user has to sign in first.
        """
        self.store.set_theme(self.preferences.theme)

        self.session = self.sessions.current()
        if self.session is None:
            self.store.mark_sign_in_required()
            return False

        await self.close()
        self.api = NotionaryApi(self.base_url, token=self.session.token, transport=self.transport)
        self.sync = SyncLayer(self.api, self.store)
        self.lifecycle = GroupLifecycle(self.sync, self.store)
        self.engine = DragAndDropEngine(self.lifecycle, self.store)
        loaded = await self.sync.load()
        if loaded:
            self.store.clear_sign_in_required()
        return loaded

    async def close(self) -> None:
        if self.api is not None:
            await self.api.aclose()
            self.api = None

    async def sign_out(self) -> None:
        self.sessions.sign_out()
        await self.close()
        self.session = None
        self.sync = None
        self.lifecycle = None
        self.engine = None
        self.store.reset()
        self.store.mark_sign_in_required()

    def toggle_theme(self) -> str:
        theme = LIGHT if self.store.theme == DARK else DARK
        self.preferences.theme = theme
        self.store.set_theme(theme)
        return theme

    def items(self) -> WorkspaceItems:
        return workspace_items(self.store)

    async def delete_note(self, note_id: str) -> bool:
        return await self.lifecycle.delete_note(note_id)

    # todos

    def _note(self, note_id: str) -> Note:
        note = self.store.notes.get(note_id)
        if note is None:
            raise KeyError(note_id)
        return note

    async def add_todo(self, note_id: str) -> Optional[TodoItem]:
        note = self._note(note_id)
        todo = TodoItem(**todo_rules.new_todo_fields())
        if any(t.id == todo.id for t in note.todos):
            todo = replace(todo, id=f"{todo.id}-{len(note.todos)}")
        updated = await self.sync.update_note(note_id, todos=[*note.todos, todo])
        return todo if updated is not None else None

    async def update_todo(self, note_id: str, todo_id: str, **changes: Any) -> Optional[Note]:
        note = self._note(note_id)
        if not any(t.id == todo_id for t in note.todos):
            raise KeyError(todo_id)
        if "preceding_task_id" in changes:
            changes["preceding_task_id"] = changes["preceding_task_id"] or None
            preceding = changes["preceding_task_id"]
            options = {t.id for t in todo_rules.dependency_options(note.todos, todo_id)}
            if preceding is not None and preceding not in options:
                raise InvalidInputError(f"Task {todo_id} cannot depend on {preceding}")

        todos = [replace(t, **changes) if t.id == todo_id else t for t in note.todos]
        cycle = todo_rules.find_dependency_cycle(todos)
        if cycle:
            logger.warning("Tasks of note %s now depend on each other in a cycle: %s", note_id, cycle)
        return await self.sync.update_note(note_id, todos=todos)

    async def remove_todo(self, note_id: str, todo_id: str) -> Optional[Note]:
        note = self._note(note_id)
        return await self.sync.update_note(note_id, todos=[t for t in note.todos if t.id != todo_id])
