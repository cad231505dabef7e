from __future__ import annotations

import asyncio
import json
import logging
import threading
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from ..core.constants import LATENCY_MS
from ..core.exceptions import StorageUnavailableError
from .backend import StorageBackend
from .codec import Codec

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityCollection(Generic[T]):
    """Async CRUD over one namespaced collection stored as a JSON array.

    Each call reads the whole collection, applies the change in memory and
    writes it back with a compare-and-set on the namespace revision. The
    read-modify-write runs as one step on a worker thread under a
    threading.Lock, so calls from any event loop or thread in this process
    never lose a write; writers in other processes are detected by the
    revision check (ConcurrentWriteError).
    """

    def __init__(
        self,
        backend: StorageBackend,
        *,
        key: str,
        name: str,
        codec: Codec[T],
        seed: Iterable[Any] = (),
        scope: Optional[Callable[[T], str]] = None,
        dedupe_on_add: bool = False,
        latency_scale: float = 1.0,
    ):
        self._backend = backend
        self._key = key
        self._name = name
        self._codec = codec
        self._seed = list(seed)
        self._scope = scope
        self._dedupe_on_add = dedupe_on_add
        self._latency_scale = latency_scale
        self._lock = threading.Lock()

    @property
    def key(self) -> str:
        return self._key

    async def _delay(self, op: str) -> None:
        ms = LATENCY_MS.get(f"{self._name}.{op}", 0) * self._latency_scale
        if ms > 0:
            await asyncio.sleep(ms / 1000)

    def _load(self) -> tuple[list[T], int]:
        raw, revision = self._backend.get_item(self._key)
        try:
            docs = json.loads(raw) if raw is not None else self._seed
            return [self._codec.decode(d) for d in docs], revision
        except (ValueError, TypeError, KeyError) as e:
            raise StorageUnavailableError(f"Stored {self._key} is corrupt: {e}") from e

    def _store(self, items: list[T], revision: int) -> None:
        text = json.dumps([self._codec.encode(i) for i in items], ensure_ascii=False)
        self._backend.compare_and_set(self._key, text, revision)

    def _mutate_locked(self, change: Callable[[list[T]], tuple[Optional[list[T]], Any]]) -> Any:
        with self._lock:
            items, revision = self._load()
            new_items, result = change(items)
            if new_items is not None:
                self._store(new_items, revision)
            return result

    async def _read(self) -> tuple[list[T], int]:
        return await asyncio.to_thread(self._load)

    async def _mutate(self, change: Callable[[list[T]], tuple[Optional[list[T]], Any]]) -> Any:
        """Run change(items) -> (items to write or None, result) as one locked step."""
        return await asyncio.to_thread(self._mutate_locked, change)

    async def list(self, scope_key: Optional[str] = None) -> list[T]:
        """All entities, or only those whose scope field equals scope_key."""
        await self._delay("list")
        items, _ = await self._read()
        if scope_key is None or self._scope is None:
            return items
        return [i for i in items if self._scope(i) == scope_key]

    async def list_all(self) -> list[T]:
        await self._delay("list_all")
        items, _ = await self._read()
        return items

    async def get(self, key: str) -> Optional[T]:
        items, _ = await self._read()
        return next((i for i in items if self._codec.key(i) == key), None)

    async def add(self, item: T) -> T:
        await self._delay("add")
        item_key = self._codec.key(item)

        def append(items: list[T]):
            if self._dedupe_on_add and any(self._codec.key(i) == item_key for i in items):
                return None, False
            return [*items, item], True

        if await self._mutate(append):
            logger.debug("%s: added %s", self._key, item_key)
        return item

    async def replace(self, item: T) -> bool:
        """Replace the entity with the same id; False (and no write) if none matches."""
        key = self._codec.key(item)
        return await self.update_where(key, lambda _current: item) is not None

    async def update(self, item: T) -> T:
        await self.replace(item)
        return item

    async def update_where(self, key: str, change: Callable[[T], T]) -> Optional[T]:
        """Replace the entity with this id by change(current) in one locked step.

        Returns the new entity, or None (and no write) if none matches. An
        exception raised by change aborts the write and propagates.
        """
        await self._delay("update")

        def apply(items: list[T]):
            current = next((i for i in items if self._codec.key(i) == key), None)
            if current is None:
                logger.debug("%s: update of missing %s ignored", self._key, key)
                return None, None
            updated = change(current)
            return [updated if self._codec.key(i) == key else i for i in items], updated

        return await self._mutate(apply)

    async def discard(self, key: str) -> bool:
        """Remove the entity with this id; False (and no write) if none matches."""
        await self._delay("remove")

        def drop(items: list[T]):
            kept = [i for i in items if self._codec.key(i) != key]
            if len(kept) == len(items):
                logger.debug("%s: remove of missing %s ignored", self._key, key)
                return None, False
            return kept, True

        return await self._mutate(drop)

    async def remove(self, key: str) -> None:
        await self.discard(key)

    def _seed_locked(self) -> bool:
        with self._lock:
            raw, revision = self._backend.get_item(self._key)
            if raw is not None:
                return False
            self._backend.compare_and_set(self._key, json.dumps(self._seed, ensure_ascii=False), revision)
            return True

    async def ensure_seeded(self) -> bool:
        """Store the seed documents if this collection was never written."""
        return await asyncio.to_thread(self._seed_locked)

    async def remove_where(self, predicate: Callable[[T], bool]) -> list[T]:
        """Remove every entity matching predicate in one write; returns the removed ones."""
        await self._delay("remove")

        def drop(items: list[T]):
            removed = [i for i in items if predicate(i)]
            if not removed:
                return None, removed
            return [i for i in items if not predicate(i)], removed

        return await self._mutate(drop)


class AppendOnlyCollection(Generic[T]):
    """Read and append access only; no update or remove path exists."""

    def __init__(self, inner: EntityCollection[T]):
        self._inner = inner

    @property
    def key(self) -> str:
        return self._inner.key

    async def list(self, scope_key: Optional[str] = None) -> list[T]:
        return await self._inner.list(scope_key)

    async def add(self, item: T) -> T:
        return await self._inner.add(item)

    async def ensure_seeded(self) -> bool:
        return await self._inner.ensure_seeded()
