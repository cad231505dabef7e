from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ..common.datetime_utils import epoch_millis, now_utc
from ..common.validators import require_non_empty
from ..core.constants import COUNTRIES
from ..core.enums import CompanyDeletePolicy, Country
from ..core.exceptions import NotFoundError, ValidationError
from ..core.permissions import COMPANIES_MANAGE, require_permission
from ..storage.facade import PersistenceFacade
from ..users.model import AdminProfile
from .model import Company

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompanyDeletion:
    companies: list[Company]
    removed_employee_ids: tuple[str, ...] = ()
    removed_leave_request_ids: tuple[str, ...] = ()
    orphaned_employee_ids: tuple[str, ...] = ()
    kept_payroll_record_ids: tuple[str, ...] = ()


class CompanyService:
    """Use case: manage tenants (Admin only for mutations)."""

    def __init__(
        self,
        facade: PersistenceFacade,
        *,
        delete_policy: CompanyDeletePolicy = CompanyDeletePolicy.ORPHAN,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._facade = facade
        self._delete_policy = CompanyDeletePolicy(delete_policy)
        self._clock = clock

    async def list_companies(self) -> list[Company]:
        return await self._facade.companies.list()

    async def add_company(
        self,
        session: AdminProfile,
        *,
        name: str,
        logo: str = "",
        country: Country = Country.BD,
    ) -> list[Company]:
        require_permission(session, COMPANIES_MANAGE)
        name = require_non_empty(name, "Company name")
        country = Country(country)
        info = COUNTRIES[country.value]
        company = Company(
            id=f"C{epoch_millis(self._clock())}",
            name=name,
            logo=(logo or "").strip() or "🏢",
            currency=info["currency"],
            symbol=info["symbol"],
            default_country=country,
        )
        await self._facade.companies.add(company)
        return await self._facade.companies.list()

    async def delete_company(self, session: AdminProfile, company_id: str) -> CompanyDeletion:
        require_permission(session, COMPANIES_MANAGE)

        companies = await self._facade.companies.list()
        if not any(c.id == company_id for c in companies):
            raise NotFoundError("Company does not exist")
        if len(companies) <= 1:
            raise ValidationError("The last remaining company cannot be deleted")

        dependents = await self._facade.employees.list(company_id)
        if self._delete_policy == CompanyDeletePolicy.BLOCK and dependents:
            raise ValidationError(f"Company still has {len(dependents)} employee(s)")

        await self._facade.companies.remove(company_id)
        remaining = await self._facade.companies.list()

        if self._delete_policy == CompanyDeletePolicy.CASCADE:
            removed = await self._facade.employees.remove_where(lambda e: e.company_id == company_id)
            removed_ids = {e.id for e in removed}
            removed_leaves = await self._facade.leave_requests.remove_where(lambda r: r.employee_id in removed_ids)
            kept_records = await self._facade.payroll_records.list(company_id)
            logger.info(
                "Deleted company %s with %d employee(s) and %d leave request(s)",
                company_id,
                len(removed),
                len(removed_leaves),
            )
            return CompanyDeletion(
                companies=remaining,
                removed_employee_ids=tuple(sorted(removed_ids)),
                removed_leave_request_ids=tuple(r.id for r in removed_leaves),
                kept_payroll_record_ids=tuple(r.id for r in kept_records),
            )

        if dependents:
            logger.warning("Deleted company %s; %d employee(s) left orphaned", company_id, len(dependents))
        return CompanyDeletion(companies=remaining, orphaned_employee_ids=tuple(e.id for e in dependents))
