def _workspaces(client, headers):
    r = client.get("/workspaces", headers=headers)
    assert r.status_code == 200
    return r.json()


def _default(client, headers):
    return [w for w in _workspaces(client, headers) if w["isDefault"]]


def test_create_workspace_is_not_default(client, signup):
    headers = signup()
    r = client.post("/workspaces", headers=headers, json={"name": "Work", "icon": "W", "description": "job"})
    assert r.status_code == 201
    body = r.json()
    assert body["name"] == "Work"
    assert body["isDefault"] is False
    assert body["noteCount"] == 0 and body["groupCount"] == 0

    listed = _workspaces(client, headers)
    # default first
    assert [w["name"] for w in listed] == ["My Workspace", "Work"]


def test_create_requires_name(client, signup):
    headers = signup()
    assert client.post("/workspaces", headers=headers, json={"name": ""}).status_code == 422
    assert client.post("/workspaces", headers=headers, json={}).status_code == 422


def test_switching_default_keeps_exactly_one(client, signup):
    headers = signup()
    work = client.post("/workspaces", headers=headers, json={"name": "Work"}).json()

    r = client.put(f"/workspaces/{work['id']}", headers=headers, json={"isDefault": True})
    assert r.status_code == 200
    assert r.json()["isDefault"] is True

    defaults = _default(client, headers)
    assert [w["id"] for w in defaults] == [work["id"]]


def test_cannot_unset_default(client, signup):
    headers = signup()
    default = _default(client, headers)[0]
    r = client.put(f"/workspaces/{default['id']}", headers=headers, json={"isDefault": False})
    assert r.status_code == 400
    assert len(_default(client, headers)) == 1


def test_update_is_partial(client, signup):
    headers = signup()
    work = client.post("/workspaces", headers=headers, json={"name": "Work", "description": "job"}).json()
    r = client.put(f"/workspaces/{work['id']}", headers=headers, json={"name": "Office"})
    assert r.status_code == 200
    assert r.json()["name"] == "Office"
    assert r.json()["description"] == "job"


def test_default_and_last_workspace_cannot_be_deleted(client, signup):
    headers = signup()
    default = _default(client, headers)[0]
    assert client.delete(f"/workspaces/{default['id']}", headers=headers).status_code == 400

    work = client.post("/workspaces", headers=headers, json={"name": "Work"}).json()
    assert client.delete(f"/workspaces/{default['id']}", headers=headers).status_code == 400
    assert client.delete(f"/workspaces/{work['id']}", headers=headers).status_code == 204
    assert len(_workspaces(client, headers)) == 1


def test_delete_reassigns_notes_and_groups_to_default(client, signup):
    headers = signup()
    default = _default(client, headers)[0]
    work = client.post("/workspaces", headers=headers, json={"name": "Work"}).json()

    group = client.post("/groups", headers=headers, json={"name": "G", "workspaceId": work["id"]}).json()
    note = client.post(
        "/notes", headers=headers,
        json={"title": "in work", "workspaceId": work["id"], "groupId": group["id"]},
    ).json()
    listed = {w["id"]: w for w in _workspaces(client, headers)}
    assert listed[work["id"]]["noteCount"] == 1
    assert listed[work["id"]]["groupCount"] == 1

    assert client.delete(f"/workspaces/{work['id']}", headers=headers).status_code == 204

    moved = client.get(f"/notes/{note['id']}", headers=headers).json()
    assert moved["workspaceId"] == default["id"]
    assert moved["groupId"] == group["id"]
    groups = client.get("/groups", headers=headers).json()
    assert [g["workspaceId"] for g in groups] == [default["id"]]
    assert [w["id"] for w in _workspaces(client, headers)] == [default["id"]]


def test_workspaces_are_private(client, signup):
    alice = signup()
    bob = signup(email="bob@example.com", name="Bob")
    work = client.post("/workspaces", headers=alice, json={"name": "Work"}).json()

    assert len(_workspaces(client, bob)) == 1
    assert client.put(f"/workspaces/{work['id']}", headers=bob, json={"name": "x"}).status_code == 404
    assert client.delete(f"/workspaces/{work['id']}", headers=bob).status_code == 404
    assert client.post("/notes", headers=bob, json={"title": "t", "workspaceId": work["id"]}).status_code == 404


def test_unknown_workspace_id(client, signup):
    headers = signup()
    assert client.delete("/workspaces/not-a-uuid", headers=headers).status_code == 422
    r = client.put("/workspaces/00000000-0000-4000-8000-000000000000", headers=headers, json={"name": "x"})
    assert r.status_code == 404
