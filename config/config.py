"""Settings shared by every environment; each module overrides what differs."""

import os


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
DEBUG = env_flag("DEBUG")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# memory | file | mysql
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "file")
STORAGE_DIR = os.getenv("STORAGE_DIR", "instance/storage")
# Multiplier for the simulated per-operation delay (0 disables it)
STORAGE_LATENCY_SCALE = float(os.getenv("STORAGE_LATENCY_SCALE", "1.0"))

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "zen_payroll"),
}

ADVISORY_API_KEY = os.getenv("ADVISORY_API_KEY") or os.getenv("OPENAI_API_KEY")
ADVISORY_MODEL = os.getenv("ADVISORY_MODEL", "gpt-4o-mini")
ADVISORY_TIMEOUT = float(os.getenv("ADVISORY_TIMEOUT", "30"))

# orphan | cascade | block
COMPANY_DELETE_POLICY = os.getenv("COMPANY_DELETE_POLICY", "orphan")
ALLOW_LEAVE_AMENDMENT = env_flag("ALLOW_LEAVE_AMENDMENT")
# Shared password for employee logins; unset disables them
EMPLOYEE_DEFAULT_PASSWORD = os.getenv("EMPLOYEE_DEFAULT_PASSWORD")
