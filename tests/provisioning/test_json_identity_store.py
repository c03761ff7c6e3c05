"""Tests for JsonFileIdentityStore."""

import json

import pytest

from src.kiosk.api.exceptions import PersistenceError
from src.kiosk.provisioning.adapters.json_identity_store import JsonFileIdentityStore


@pytest.fixture
def identity_path(tmp_path):
    return tmp_path / "state" / "identity.json"


@pytest.fixture
def json_store(identity_path):
    return JsonFileIdentityStore(identity_path, client_type="KIOSK")


class TestJsonFileIdentityStore:

    async def test_missing_file_reads_as_empty(self, json_store, identity_path):
        assert await json_store.get_client_id() is None
        assert await json_store.get_client_name() is None
        assert await json_store.get_stored_client_type() is None
        assert not identity_path.exists()

    def test_ambient_client_type(self, json_store):
        assert json_store.get_client_type() == "KIOSK"

    async def test_set_and_get(self, json_store, identity_path):
        await json_store.set_client_id("A")
        await json_store.set_client_name("Gate 1")
        await json_store.set_client_type("KIOSK")

        assert await json_store.get_client_id() == "A"
        assert await json_store.get_client_name() == "Gate 1"
        assert await json_store.get_stored_client_type() == "KIOSK"
        assert json.loads(identity_path.read_text()) == {
            "client_id": "A",
            "client_name": "Gate 1",
            "client_type": "KIOSK",
        }

    async def test_persists_across_instances(self, json_store, identity_path):
        await json_store.set_client_id("A")

        reopened = JsonFileIdentityStore(identity_path)

        assert await reopened.get_client_id() == "A"

    async def test_remove(self, json_store, identity_path):
        await json_store.set_client_id("A")
        await json_store.set_client_name("Gate 1")

        await json_store.remove_client_id()

        assert await json_store.get_client_id() is None
        assert await json_store.get_client_name() == "Gate 1"
        assert "client_id" not in json.loads(identity_path.read_text())

    async def test_remove_absent_key_does_not_create_file(self, json_store, identity_path):
        await json_store.remove_client_type()

        assert not identity_path.exists()

    async def test_corrupt_file_raises(self, json_store, identity_path):
        identity_path.parent.mkdir(parents=True)
        identity_path.write_text("{not json")

        with pytest.raises(PersistenceError):
            await json_store.get_client_id()

    async def test_non_object_file_raises(self, json_store, identity_path):
        identity_path.parent.mkdir(parents=True)
        identity_path.write_text("[1, 2]")

        with pytest.raises(PersistenceError):
            await json_store.set_client_id("A")

    async def test_no_temp_files_left(self, json_store, identity_path):
        await json_store.set_client_id("A")
        await json_store.set_client_id("B")

        assert [p.name for p in identity_path.parent.iterdir()] == ["identity.json"]
