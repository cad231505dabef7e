from config.config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
DEBUG = False
TESTING = True

STORAGE_BACKEND = "memory"
STORAGE_LATENCY_SCALE = 0.0
ADVISORY_API_KEY = None
COMPANY_DELETE_POLICY = "orphan"
ALLOW_LEAVE_AMENDMENT = False
EMPLOYEE_DEFAULT_PASSWORD = "employee123"
