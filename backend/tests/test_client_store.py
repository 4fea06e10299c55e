from notionary.client.models import Group, Note, TodoItem, Workspace, to_wire
from notionary.client.selectors import describe, workspace_items
from notionary.client.store import ClientStateStore


def _store():
    store = ClientStateStore()
    store.replace_all(
        [Workspace("w1", "Home", is_default=True), Workspace("w2", "Work")],
        [Group("g1", "G1", workspace_id="w1"), Group("g2", "G2", workspace_id="w1")],
        [
            Note("a", "A", workspace_id="w1", group_id="g1"),
            Note("b", "B", workspace_id="w1", group_id="g1"),
            Note("c", "C", workspace_id="w1"),
            Note("legacy", "Legacy"),
            Note("d", "D", workspace_id="w2"),
        ],
    )
    return store


def test_replace_all_selects_default_workspace():
    store = _store()
    assert store.current_workspace_id == "w1"
    assert store.default_workspace().id == "w1"


def test_note_ids_is_derived_from_notes():
    store = _store()
    assert store.groups["g1"].note_ids == ("a", "b")
    assert store.groups["g2"].note_ids == ()

    store.put_note(Note("c", "C", workspace_id="w1", group_id="g2"))
    assert store.groups["g2"].note_ids == ("c",)
    assert store.member_ids("g2") == ("c",)


def test_batch_notifies_once():
    store = _store()
    calls = []
    unsubscribe = store.subscribe(lambda s: calls.append(s.groups["g2"].note_ids))

    with store.batch():
        store.put_note(Note("a", "A", workspace_id="w1", group_id="g2"))
        # reads inside a batch see the pending writes
        assert store.member_ids("g2") == ("a",)
        store.put_note(Note("b", "B", workspace_id="w1", group_id="g2"))
        assert calls == []
    assert calls == [("a", "b")]

    unsubscribe()
    store.set_theme("dark")
    assert len(calls) == 1


def test_drop_group_releases_members():
    store = _store()
    store.drop_group("g1")
    assert "g1" not in store.groups
    assert store.notes["a"].group_id is None
    assert store.notes["b"].group_id is None


def test_drop_workspace_reassigns():
    store = _store()
    store.set_current_workspace("w2")
    store.drop_workspace("w2", reassign_to="w1")
    assert "w2" not in store.workspaces
    assert store.notes["d"].workspace_id == "w1"
    assert store.current_workspace_id == "w1"


def test_unknown_workspace_cannot_be_selected():
    import pytest

    store = _store()
    with pytest.raises(KeyError):
        store.set_current_workspace("nope")


def test_items_include_legacy_notes_in_default_workspace():
    items = workspace_items(_store())
    assert {n.id for n in items.ungrouped} == {"c", "legacy"}
    # g2 has no members and is not shown
    assert [g.group.id for g in items.grouped] == ["g1"]
    assert items.grouped[0].note_ids == ("a", "b")
    assert items.note_count == 4
    assert describe(items) == "4 notes • 1 group"


def test_items_of_other_workspace():
    items = workspace_items(_store(), "w2")
    assert [n.id for n in items.ungrouped] == ["d"]
    assert items.grouped == ()
    assert describe(items) == "1 note"


def test_describe():
    store = ClientStateStore()
    assert describe(workspace_items(store)) == "No notes yet"

    store.replace_all(
        [Workspace("w1", "Home", is_default=True)],
        [Group("g1", "G1"), Group("g2", "G2")],
        [Note("a", "A", group_id="g1"), Note("b", "B", group_id="g1"),
         Note("c", "C", group_id="g2"), Note("d", "D", group_id="g2"), Note("e", "E")],
    )
    assert describe(workspace_items(store)) == "5 notes • 2 groups"

    store.replace_all([Workspace("w1", "Home", is_default=True)], [], [Note("a", "A"), Note("b", "B")])
    assert describe(workspace_items(store)) == "2 notes"


def test_note_from_api_keeps_todos_when_absent():
    previous = Note("a", "A", todos=(TodoItem("1", description="x"),))
    merged = Note.from_api({"id": "a", "title": "A2", "groupId": "g"}, previous)
    assert merged.todos == previous.todos
    assert merged.group_id == "g"

    replaced = Note.from_api({"id": "a", "title": "A2", "todos": []}, previous)
    assert replaced.todos == ()


def test_group_from_api_keeps_local_fields():
    previous = Group("g", "G", note_ids=("a", "b"), is_expanded=False)
    merged = Group.from_api({"id": "g", "name": "Renamed"}, previous)
    assert merged.name == "Renamed"
    assert merged.is_expanded is False
    assert merged.note_ids == ("a", "b")
    assert Group.from_api({"id": "g", "name": "G"}).is_expanded is True


def test_to_wire():
    body = to_wire({"group_id": None, "is_pinned": True, "todos": [TodoItem("1", preceding_task_id="0")]})
    assert body == {
        "groupId": None,
        "isPinned": True,
        "todos": [{
            "id": "1",
            "completed": False,
            "description": "",
            "deadline": "",
            "comments": "",
            "precedingTaskId": "0",
            "reminderTime": None,
        }],
    }
