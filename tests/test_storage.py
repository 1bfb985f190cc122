import json

import pytest

from kneeklinic.storage import local_store
from kneeklinic.storage.local_store import InMemoryStore, JsonFileStore


@pytest.fixture(autouse=True)
def no_global_store():
    local_store.close_store()
    yield
    local_store.close_store()


def test_memory_store_basic_operations():
    store = InMemoryStore()
    store.set_item("a", "1")
    store.multi_set([("b", "2"), ("c", "3")])

    assert store.get_item("a") == "1"
    assert store.multi_get(["a", "b", "missing"]) == [("a", "1"), ("b", "2"), ("missing", None)]

    store.multi_remove(["a", "b"])
    assert store.keys() == ["c"]

    store.remove_item("c")
    store.remove_item("never-there")
    assert store.keys() == []


def test_json_store_persists_between_instances(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    store = JsonFileStore(path)
    store.multi_set([("@kneeklinic:token", "abc"), ("@kneeklinic:user", '{"_id": "u1"}')])

    assert json.loads(path.read_text()) == {
        "@kneeklinic:token": "abc",
        "@kneeklinic:user": '{"_id": "u1"}',
    }

    reopened = JsonFileStore(path)
    assert reopened.get_item("@kneeklinic:token") == "abc"

    reopened.clear()
    assert JsonFileStore(path).keys() == []


def test_json_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{broken")
    store = JsonFileStore(path)
    assert store.keys() == []

    store.set_item("k", "v")
    assert json.loads(path.read_text()) == {"k": "v"}


def test_json_store_ignores_non_object(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("[1, 2, 3]")
    assert JsonFileStore(path).keys() == []


def test_store_lifecycle(tmp_path):
    with pytest.raises(RuntimeError):
        local_store.get_store()

    store = local_store.open_store(tmp_path / "storage.json")
    assert local_store.get_store() is store
    assert local_store.open_store(tmp_path / "other.json") is store

    local_store.close_store()
    with pytest.raises(RuntimeError):
        local_store.get_store()


def test_use_store_installs_given_store():
    store = InMemoryStore()
    assert local_store.use_store(store) is store
    assert local_store.get_store() is store
