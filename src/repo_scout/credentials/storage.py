import json
from pathlib import Path
from typing import Protocol, runtime_checkable


class StorageError(Exception):
    """A persistent storage error from the Repo Scout credential store."""

    def __init__(self, action: str, message: str | None = None):
        msg = f"{action}: {message}" if message else action
        super().__init__(msg)


@runtime_checkable
class KeyValueStorage(Protocol):
    """A persistent string key-value storage, like a browser's local storage.

    Implementations raise StorageError when the storage cannot be read or written."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryStorage:
    """A storage that lives as long as the process."""

    def __init__(self, entries: dict[str, str] | None = None):
        self.entries: dict[str, str] = dict(entries or {})

    def get(self, key: str) -> str | None:
        return self.entries.get(key)

    def set(self, key: str, value: str) -> None:
        self.entries[key] = value

    def delete(self, key: str) -> None:
        _ = self.entries.pop(key, None)


class JsonFileStorage:
    """A storage that keeps all entries in a single JSON object file.

    Values are written as plain strings. The file is created on first write and is
    readable only by the current user."""

    path: Path

    def __init__(self, path: Path):
        self.path = path

    def _read_entries(self) -> dict[str, str]:
        try:
            raw_entries = json.loads(self.path.read_text(encoding="utf-8"))  # pyright: ignore[reportAny]
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            raise StorageError(action=f"Read {self.path}", message=str(e)) from e

        if not isinstance(raw_entries, dict):
            raise StorageError(action=f"Read {self.path}", message="Expected a JSON object")

        return {str(key): value for key, value in raw_entries.items() if isinstance(value, str)}  # pyright: ignore[reportUnknownVariableType]

    def _write_entries(self, entries: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            _ = self.path.write_text(json.dumps(entries, indent=1, sort_keys=True), encoding="utf-8")
            self.path.chmod(0o600)
        except OSError as e:
            raise StorageError(action=f"Write {self.path}", message=str(e)) from e

    def get(self, key: str) -> str | None:
        return self._read_entries().get(key)

    def set(self, key: str, value: str) -> None:
        entries = self._read_entries()
        entries[key] = value
        self._write_entries(entries)

    def delete(self, key: str) -> None:
        entries = self._read_entries()

        if key not in entries:
            return

        del entries[key]
        self._write_entries(entries)
