from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Country


@dataclass(frozen=True)
class Company:
    """Tenant: an isolated grouping of employees and payroll records."""

    id: str
    name: str
    logo: str
    currency: str
    symbol: str
    default_country: Country
