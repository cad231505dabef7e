from __future__ import annotations

import asyncio
import json
from typing import Any

from ..companies.model import Company
from ..core.constants import (
    COMPANIES_KEY,
    DEPARTMENTS_KEY,
    EMPLOYEES_KEY,
    LEAVES_KEY,
    PAYROLL_KEY,
    SEED_COMPANIES,
    SEED_DEPARTMENTS,
    SEED_EMPLOYEES,
)
from ..employees.model import Employee
from ..leaves.model import LeaveRequest
from ..payroll.model import PayrollRecord
from .backend import StorageBackend
from .codec import COMPANY_CODEC, DEPARTMENT_CODEC, EMPLOYEE_CODEC, LEAVE_CODEC, PAYROLL_CODEC
from .collection import AppendOnlyCollection, EntityCollection


class PersistenceFacade:
    """Entry point to every stored collection.

    Guarantees nothing across collections: each write is independent, and
    deleting a company does not touch employees unless a service asks for it.
    """

    def __init__(self, backend: StorageBackend, *, latency_scale: float = 1.0):
        self.backend = backend
        self.companies: EntityCollection[Company] = EntityCollection(
            backend,
            key=COMPANIES_KEY,
            name="companies",
            codec=COMPANY_CODEC,
            seed=SEED_COMPANIES,
            latency_scale=latency_scale,
        )
        self.departments: EntityCollection[str] = EntityCollection(
            backend,
            key=DEPARTMENTS_KEY,
            name="departments",
            codec=DEPARTMENT_CODEC,
            seed=SEED_DEPARTMENTS,
            dedupe_on_add=True,
            latency_scale=latency_scale,
        )
        self.employees: EntityCollection[Employee] = EntityCollection(
            backend,
            key=EMPLOYEES_KEY,
            name="employees",
            codec=EMPLOYEE_CODEC,
            seed=SEED_EMPLOYEES,
            scope=lambda e: e.company_id,
            latency_scale=latency_scale,
        )
        self.payroll_records: AppendOnlyCollection[PayrollRecord] = AppendOnlyCollection(
            EntityCollection(
                backend,
                key=PAYROLL_KEY,
                name="payroll",
                codec=PAYROLL_CODEC,
                scope=lambda r: r.company_id,
                latency_scale=latency_scale,
            )
        )
        self.leave_requests: EntityCollection[LeaveRequest] = EntityCollection(
            backend,
            key=LEAVES_KEY,
            name="leaves",
            codec=LEAVE_CODEC,
            scope=lambda r: r.employee_id,
            latency_scale=latency_scale,
        )

    def collections(self) -> tuple:
        return (self.companies, self.departments, self.employees, self.payroll_records, self.leave_requests)

    async def ensure_seeded(self) -> list[str]:
        """Write seed data for collections that have never been stored; returns their keys."""
        return [c.key for c in self.collections() if await c.ensure_seeded()]

    async def snapshot(self) -> dict[str, Any]:
        """Raw stored documents per key, for backups."""
        out: dict[str, Any] = {}
        for c in self.collections():
            raw, _ = await asyncio.to_thread(self.backend.get_item, c.key)
            out[c.key] = json.loads(raw) if raw is not None else None
        return out
