from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .app_state.orchestrator import AppState
from .companies.service import CompanyService
from .core.enums import CompanyDeletePolicy
from .dashboard.service import DashboardService
from .database.bootstrap import apply_schema
from .database.connection import DBConfig, DatabaseConnection
from .employees.service import DepartmentService, EmployeeService
from .leaves.service import LeaveService
from .payroll.advisory import PayrollAdvisor, build_advisor
from .payroll.service import PayrollService
from .storage.backend import InMemoryStorage, JsonFileStorage, StorageBackend
from .storage.facade import PersistenceFacade
from .storage.mysql_backend import MySQLStorage
from .users.service import AuthService, ProfileService
from .users.session_store import SessionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    backend: StorageBackend
    facade: PersistenceFacade
    sessions: SessionStore
    advisor: PayrollAdvisor

    auth_service: AuthService
    profile_service: ProfileService
    company_service: CompanyService
    employee_service: EmployeeService
    department_service: DepartmentService
    payroll_service: PayrollService
    leave_service: LeaveService
    dashboard_service: DashboardService

    def app_state(self) -> AppState:
        return AppState(self)


def build_backend(settings: Any) -> StorageBackend:
    kind = str(getattr(settings, "STORAGE_BACKEND", "memory")).lower()
    if kind == "memory":
        return InMemoryStorage()
    if kind == "file":
        return JsonFileStorage(getattr(settings, "STORAGE_DIR", "instance/storage"))
    if kind == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        apply_schema(conn)
        return MySQLStorage(conn)
    raise ValueError(f"Unknown STORAGE_BACKEND: {kind}")


def build_container(settings: Any, *, backend: Optional[StorageBackend] = None,
                    advisor: Optional[PayrollAdvisor] = None) -> Container:
    backend = backend or build_backend(settings)
    facade = PersistenceFacade(backend, latency_scale=float(getattr(settings, "STORAGE_LATENCY_SCALE", 1.0)))
    sessions = SessionStore(backend)
    advisor = advisor or build_advisor(
        api_key=getattr(settings, "ADVISORY_API_KEY", None),
        model=getattr(settings, "ADVISORY_MODEL", "gpt-4o-mini"),
        timeout=float(getattr(settings, "ADVISORY_TIMEOUT", 30.0)),
    )
    logger.info("Storage backend: %s", type(backend).__name__)

    return Container(
        backend=backend,
        facade=facade,
        sessions=sessions,
        advisor=advisor,
        auth_service=AuthService(
            facade, sessions, employee_password=getattr(settings, "EMPLOYEE_DEFAULT_PASSWORD", None)
        ),
        profile_service=ProfileService(sessions),
        company_service=CompanyService(
            facade,
            delete_policy=CompanyDeletePolicy(getattr(settings, "COMPANY_DELETE_POLICY", "orphan")),
        ),
        employee_service=EmployeeService(facade),
        department_service=DepartmentService(facade),
        payroll_service=PayrollService(facade, advisor=advisor),
        leave_service=LeaveService(facade, allow_amendment=bool(getattr(settings, "ALLOW_LEAVE_AMENDMENT", False))),
        dashboard_service=DashboardService(advisor=advisor),
    )
