from __future__ import annotations

import asyncio
import threading
from dataclasses import replace

import pytest

from src.zen_payroll.zen_payroll.core.constants import COMPANIES_KEY, EMPLOYEES_KEY, PAYROLL_KEY
from src.zen_payroll.zen_payroll.core.exceptions import ConcurrentWriteError, StorageUnavailableError
from src.zen_payroll.zen_payroll.storage.backend import InMemoryStorage
from src.zen_payroll.zen_payroll.storage.facade import PersistenceFacade


class RacingStorage(InMemoryStorage):
    """Lets another writer sneak in right before the next write."""

    def __init__(self):
        super().__init__()
        self.race_next_write = False

    def compare_and_set(self, key, value, expected_revision):
        if self.race_next_write:
            self.race_next_write = False
            super().compare_and_set(key, "[]", expected_revision)
        return super().compare_and_set(key, value, expected_revision)


@pytest.mark.asyncio
async def test_absent_namespace_returns_seed_without_writing(facade, backend):
    companies = await facade.companies.list()

    assert [c.id for c in companies] == ["C001", "C002"]
    assert backend.raw(COMPANIES_KEY) is None


@pytest.mark.asyncio
async def test_added_employee_is_listed_deep_equal(facade, arif):
    new = replace(arif, id="EMP999", name="Nadia Islam", email="nadia@techflow.com")

    await facade.employees.add(new)

    listed = await facade.employees.list()
    assert new in listed
    assert [e.id for e in listed] == ["EMP001", "EMP002", "EMP999"]


@pytest.mark.asyncio
async def test_list_is_scoped_by_company(facade):
    assert [e.id for e in await facade.employees.list("C002")] == ["EMP002"]
    assert await facade.employees.list("C404") == []


@pytest.mark.asyncio
async def test_update_is_idempotent(facade, backend, arif):
    changed = replace(arif, department="Finance")

    assert await facade.employees.replace(changed)
    first = backend.raw(EMPLOYEES_KEY)
    assert await facade.employees.replace(changed)

    assert backend.raw(EMPLOYEES_KEY) == first
    assert (await facade.employees.get("EMP001")).department == "Finance"


@pytest.mark.asyncio
async def test_update_of_missing_id_does_not_write(facade, backend, arif):
    await facade.employees.replace(replace(arif, department="Sales"))
    before = backend.get_item(EMPLOYEES_KEY)

    assert not await facade.employees.replace(replace(arif, id="EMP404"))

    assert backend.get_item(EMPLOYEES_KEY) == before


@pytest.mark.asyncio
async def test_remove_of_missing_id_leaves_bytes_unchanged(facade, backend):
    await facade.employees.remove("EMP002")
    before = backend.get_item(EMPLOYEES_KEY)

    await facade.employees.remove("EMP404")

    assert backend.get_item(EMPLOYEES_KEY) == before
    assert [e.id for e in await facade.employees.list()] == ["EMP001"]


@pytest.mark.asyncio
async def test_remove_of_missing_id_on_unwritten_namespace_stays_unwritten(facade, backend):
    assert not await facade.companies.discard("C404")
    assert backend.raw(COMPANIES_KEY) is None


@pytest.mark.asyncio
async def test_departments_add_is_deduplicated(facade):
    await facade.departments.add("Legal")
    await facade.departments.add("Legal")

    departments = await facade.departments.list()
    assert departments.count("Legal") == 1
    assert departments[-1] == "Legal"


def test_payroll_collection_is_append_only(facade):
    assert hasattr(facade.payroll_records, "add")
    assert not hasattr(facade.payroll_records, "replace")
    assert not hasattr(facade.payroll_records, "remove")


@pytest.mark.asyncio
async def test_concurrent_adds_in_one_process_are_not_lost(facade):
    await asyncio.gather(*(facade.departments.add(f"Team {i}") for i in range(10)))

    departments = await facade.departments.list()
    assert all(f"Team {i}" in departments for i in range(10))


def test_competing_adds_across_event_loops(facade):
    async def add_pair(a, b):
        await asyncio.gather(facade.departments.add(a), facade.departments.add(b))

    asyncio.run(add_pair("Legal", "Audit"))
    asyncio.run(add_pair("Risk", "Treasury"))

    departments = asyncio.run(facade.departments.list())
    assert {"Legal", "Audit", "Risk", "Treasury"} <= set(departments)


def test_competing_adds_from_threads(facade):
    names = [f"Desk {i}" for i in range(8)]
    threads = [threading.Thread(target=asyncio.run, args=(facade.departments.add(n),)) for n in names]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    departments = asyncio.run(facade.departments.list())
    assert set(names) <= set(departments)


@pytest.mark.asyncio
async def test_write_after_foreign_change_raises_concurrent_write():
    backend = RacingStorage()
    facade = PersistenceFacade(backend, latency_scale=0)
    await facade.departments.add("Legal")

    backend.race_next_write = True
    with pytest.raises(ConcurrentWriteError):
        await facade.departments.add("Audit")

    assert backend.raw("zp_departments") == "[]"


@pytest.mark.asyncio
async def test_corrupt_collection_raises_storage_unavailable(facade, backend):
    backend.compare_and_set(EMPLOYEES_KEY, "{not json", 0)

    with pytest.raises(StorageUnavailableError):
        await facade.employees.list()


@pytest.mark.asyncio
async def test_quota_exceeded_is_reported_and_nothing_is_stored():
    backend = InMemoryStorage(quota_bytes=64)
    facade = PersistenceFacade(backend, latency_scale=0)

    with pytest.raises(StorageUnavailableError):
        await facade.departments.add("A department name long enough to blow the tiny quota")

    assert backend.raw("zp_departments") is None


@pytest.mark.asyncio
async def test_ensure_seeded_writes_only_missing_namespaces(facade, backend):
    await facade.departments.add("Legal")

    written = await facade.ensure_seeded()

    assert "zp_departments" not in written
    assert COMPANIES_KEY in written and EMPLOYEES_KEY in written
    assert backend.raw(PAYROLL_KEY) == "[]"
    assert await facade.ensure_seeded() == []


@pytest.mark.asyncio
async def test_snapshot_returns_stored_documents(facade):
    await facade.departments.add("Legal")

    snap = await facade.snapshot()

    assert snap["zp_departments"][-1] == "Legal"
    assert snap[COMPANIES_KEY] is None
