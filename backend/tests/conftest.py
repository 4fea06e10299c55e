import importlib
import os
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

# must be in place before notionary.utils.auth_hash is first imported
os.environ.setdefault("JWT_SECRET", "dev-secret-for-tests")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

PASSWORD = "StrongPassw0rd!"


@pytest.fixture()
def client(tmp_path, monkeypatch):
    # isolate data dir per test
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("JWT_SECRET", "dev-secret-for-tests")
    monkeypatch.setenv("JWT_EXP_MINUTES", "15")

    # routers resolve stores.<name> per request, reloading rebinds them all
    import notionary.api.stores
    import notionary.main
    importlib.reload(notionary.api.stores)

    return TestClient(notionary.main.app)


@pytest.fixture()
def signup(client):
    def _signup(email="alice@example.com", password=PASSWORD, name="Alice"):
        r = client.post("/auth/register", json={"email": email, "password": password, "name": name})
        assert r.status_code == 201
        r = client.post("/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _signup


class RecordingTransport(httpx.AsyncBaseTransport):
    """Routes client requests into the app and remembers them.

    ``fail`` is an optional predicate; matching requests get a 500 without
    reaching the app. ``garble`` answers matching requests with a 200 whose
    body is not JSON, after the app applied them. ``broken`` makes every
    request fail at transport level.
    """

    def __init__(self, app):
        self._inner = httpx.ASGITransport(app=app)
        self.requests = []
        self.fail = None
        self.garble = None
        self.broken = False

    async def handle_async_request(self, request):
        self.requests.append((request.method, request.url.path))
        if self.broken:
            raise httpx.ConnectError("connection refused", request=request)
        if self.fail is not None and self.fail(request):
            return httpx.Response(500, json={"detail": "injected failure"})
        response = await self._inner.handle_async_request(request)
        if self.garble is not None and self.garble(request):
            await response.aread()
            return httpx.Response(200, content=b"<html>gateway hiccup</html>")
        return response

    def mutations(self):
        return [r for r in self.requests if r[0] != "GET"]


@pytest.fixture()
def transport(client):
    return RecordingTransport(client.app)


@pytest.fixture()
def board(client, signup, transport):
    from notionary.client.api import NotionaryApi
    from notionary.client.dnd import DragAndDropEngine
    from notionary.client.lifecycle import GroupLifecycle
    from notionary.client.store import ClientStateStore
    from notionary.client.sync import SyncLayer

    headers = signup()
    token = headers["Authorization"].split(" ", 1)[1]
    api = NotionaryApi("http://testserver", token=token, transport=transport)
    store = ClientStateStore()
    sync = SyncLayer(api, store)
    lifecycle = GroupLifecycle(sync, store)
    return SimpleNamespace(
        client=client,
        headers=headers,
        transport=transport,
        api=api,
        store=store,
        sync=sync,
        lifecycle=lifecycle,
        engine=DragAndDropEngine(lifecycle, store),
    )


def assert_groups_consistent(store):
    """Every group has >= 2 members and its note_ids match the notes."""
    for gid, group in store.groups.items():
        members = tuple(n.id for n in store.notes.values() if n.group_id == gid)
        assert len(members) >= 2, f"group {gid} has {len(members)} member(s)"
        assert group.note_ids == members


def server_notes(board):
    r = board.client.get("/notes", headers=board.headers)
    assert r.status_code == 200
    return {n["id"]: n for n in r.json()}


def server_groups(board):
    r = board.client.get("/groups", headers=board.headers)
    assert r.status_code == 200
    return {g["id"]: g for g in r.json()}
