from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol

from ..core.exceptions import ConcurrentWriteError, StorageUnavailableError


class StorageBackend(Protocol):
    """Namespaced key-value store holding serialized JSON text.

    Every key carries a revision stamp (0 when absent) that increases on each
    write. Writers pass the revision they read; a mismatch means somebody else
    wrote in between and raises ConcurrentWriteError.
    """

    def get_item(self, key: str) -> tuple[Optional[str], int]:
        raise NotImplementedError

    def compare_and_set(self, key: str, value: str, expected_revision: int) -> int:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class InMemoryStorage(StorageBackend):
    """Process-local store. `quota_bytes` emulates a browser storage quota."""

    def __init__(self, *, quota_bytes: Optional[int] = None):
        self._items: dict[str, tuple[str, int]] = {}
        self._quota_bytes = quota_bytes
        self._lock = threading.Lock()

    def get_item(self, key: str) -> tuple[Optional[str], int]:
        with self._lock:
            value, revision = self._items.get(key, (None, 0))
            return value, revision

    def compare_and_set(self, key: str, value: str, expected_revision: int) -> int:
        with self._lock:
            _, current = self._items.get(key, (None, 0))
            if current != expected_revision:
                raise ConcurrentWriteError(f"{key} changed since it was read (revision {current} != {expected_revision})")
            if self._quota_bytes is not None:
                used = sum(len(v.encode("utf-8")) for k, (v, _) in self._items.items() if k != key)
                if used + len(value.encode("utf-8")) > self._quota_bytes:
                    raise StorageUnavailableError("Storage quota exceeded")
            self._items[key] = (value, current + 1)
            return current + 1

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def raw(self, key: str) -> Optional[str]:
        return self._items.get(key, (None, 0))[0]


class JsonFileStorage(StorageBackend):
    """One `<key>.json` file per namespace inside `directory`.

    Note: Writes go through a temp file + os.replace so a reader never sees a
    half-written value. The revision check is guarded by a process-local lock
    only; use the MySQL backend when several processes write concurrently.
    """

    def __init__(self, directory: str | os.PathLike):
        self._dir = Path(directory)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def _read(self, key: str) -> tuple[Optional[str], int]:
        path = self._path(key)
        try:
            with path.open("r", encoding="utf-8") as f:
                envelope = json.load(f)
        except FileNotFoundError:
            return None, 0
        except (OSError, ValueError) as e:
            raise StorageUnavailableError(f"Cannot read {key}: {e}") from e
        return envelope.get("value"), int(envelope.get("revision", 0))

    def get_item(self, key: str) -> tuple[Optional[str], int]:
        with self._lock:
            return self._read(key)

    def compare_and_set(self, key: str, value: str, expected_revision: int) -> int:
        with self._lock:
            _, current = self._read(key)
            if current != expected_revision:
                raise ConcurrentWriteError(f"{key} changed since it was read (revision {current} != {expected_revision})")
            revision = current + 1
            try:
                self._dir.mkdir(parents=True, exist_ok=True)
                fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=f".{key}.", suffix=".tmp")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        json.dump({"revision": revision, "value": value}, f, ensure_ascii=False)
                    os.replace(tmp, self._path(key))
                except BaseException:
                    if os.path.exists(tmp):
                        os.unlink(tmp)
                    raise
            except OSError as e:
                raise StorageUnavailableError(f"Cannot write {key}: {e}") from e
            return revision

    def remove_item(self, key: str) -> None:
        with self._lock:
            try:
                self._path(key).unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                raise StorageUnavailableError(f"Cannot remove {key}: {e}") from e
