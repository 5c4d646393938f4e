import json
from pathlib import Path

import pytest
from inline_snapshot import snapshot

from repo_scout.credentials.storage import InMemoryStorage, JsonFileStorage, KeyValueStorage, StorageError
from repo_scout.credentials.store import CredentialStore
from repo_scout.models.backend import Backend


def test_storages_are_key_value_storages(tmp_path: Path):
    assert isinstance(InMemoryStorage(), KeyValueStorage)
    assert isinstance(JsonFileStorage(path=tmp_path / "credentials.json"), KeyValueStorage)


def test_in_memory_storage():
    storage = InMemoryStorage()

    storage.set("GROQ_API_KEY", "gsk_123")
    assert storage.get("GROQ_API_KEY") == "gsk_123"

    storage.delete("GROQ_API_KEY")
    storage.delete("GROQ_API_KEY")
    assert storage.get("GROQ_API_KEY") is None


class TestJsonFileStorage:
    def test_missing_file(self, tmp_path: Path):
        storage = JsonFileStorage(path=tmp_path / "credentials.json")

        assert storage.get("GROQ_API_KEY") is None

        storage.delete("GROQ_API_KEY")
        assert not storage.path.exists()

    def test_set_and_delete(self, tmp_path: Path):
        storage = JsonFileStorage(path=tmp_path / "nested" / "credentials.json")

        storage.set("GROQ_API_KEY", "gsk_123")
        storage.set("OPENAI_API_KEY", "sk-1")
        storage.delete("GROQ_API_KEY")

        assert json.loads(storage.path.read_text()) == snapshot({"OPENAI_API_KEY": "sk-1"})
        assert storage.path.stat().st_mode & 0o777 == 0o600

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "credentials.json"
        _ = path.write_text("not json")

        storage = JsonFileStorage(path=path)

        with pytest.raises(StorageError, match="Read"):
            _ = storage.get("GROQ_API_KEY")

    def test_not_an_object(self, tmp_path: Path):
        path = tmp_path / "credentials.json"
        _ = path.write_text('["GROQ_API_KEY"]')

        storage = JsonFileStorage(path=path)

        with pytest.raises(StorageError, match="Expected a JSON object"):
            _ = storage.get("GROQ_API_KEY")

    def test_credentials_survive_a_restart(self, tmp_path: Path):
        path = tmp_path / "credentials.json"

        credential_store = CredentialStore(storage=JsonFileStorage(path=path), environ={})
        credential_store.update({Backend.GEMINI: "AIza-1", Backend.GROQ: "gsk_123"})
        credential_store.update({Backend.GEMINI: ""})

        restarted_store = CredentialStore(storage=JsonFileStorage(path=path), environ={})
        restarted_store.load()

        assert restarted_store.read() == {Backend.GROQ: "gsk_123"}

    def test_corrupt_file_does_not_prevent_startup(self, tmp_path: Path):
        path = tmp_path / "credentials.json"
        _ = path.write_text("{")

        credential_store = CredentialStore(storage=JsonFileStorage(path=path), environ={})
        credential_store.load()

        assert credential_store.read() == {}

    def test_unreadable_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        def read_text(self: Path, *args: object, **kwargs: object) -> str:
            msg = f"Permission denied: {self}"
            raise PermissionError(msg)

        monkeypatch.setattr(Path, "read_text", read_text)

        storage = JsonFileStorage(path=tmp_path / "locked" / "credentials.json")

        with pytest.raises(StorageError, match="Permission denied"):
            _ = storage.get("GROQ_API_KEY")

    def test_unreadable_file_does_not_break_the_store(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        def read_text(self: Path, *args: object, **kwargs: object) -> str:
            msg = f"Permission denied: {self}"
            raise PermissionError(msg)

        monkeypatch.setattr(Path, "read_text", read_text)

        credential_store = CredentialStore(storage=JsonFileStorage(path=tmp_path / "locked" / "credentials.json"), environ={})
        credential_store.load()
        credential_store.update({Backend.GROQ: "gsk_123"})

        assert credential_store.resolve(Backend.GROQ) == "gsk_123"
