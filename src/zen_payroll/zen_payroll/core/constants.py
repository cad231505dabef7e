"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from __future__ import annotations

# Storage namespaces (one key per logical collection).
COMPANIES_KEY = "zp_companies"
DEPARTMENTS_KEY = "zp_departments"
EMPLOYEES_KEY = "zp_employees"
PAYROLL_KEY = "zp_payroll"
LEAVES_KEY = "zp_leaves"
SESSION_KEY = "zp_session"

# Artificial latency per facade call, in milliseconds.
LATENCY_MS = {
    "companies.list": 200,
    "companies.add": 400,
    "companies.remove": 400,
    "departments.list": 100,
    "departments.add": 200,
    "departments.remove": 200,
    "employees.list": 300,
    "employees.add": 400,
    "employees.update": 400,
    "employees.remove": 400,
    "payroll.list": 200,
    "payroll.add": 400,
    "leaves.list": 200,
    "leaves.list_all": 300,
    "leaves.add": 400,
    "leaves.update": 300,
}

DAYS_PER_MONTH = 30
MAX_REASONABLE_OVERTIME_HOURS = 100

FALLBACK_TAX_EXPLANATION = "Calculated locally using the configured tax and VAT percentages."

AVATAR_URL_TEMPLATE = "https://api.dicebear.com/7.x/avataaars/svg?seed={email}"

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

COUNTRIES = {
    "BD": {"name": "Bangladesh", "currency": "BDT", "symbol": "৳"},
    "KSA": {"name": "Saudi Arabia", "currency": "SAR", "symbol": "﷼"},
    "UAE": {"name": "United Arab Emirates", "currency": "AED", "symbol": "د.إ"},
    "USA": {"name": "United States", "currency": "USD", "symbol": "$"},
}

# Seed collections, in wire format, returned when a namespace is absent.
SEED_COMPANIES = [
    {"id": "C001", "name": "TechFlow Solutions", "logo": "🚀", "currency": "BDT", "symbol": "৳", "defaultCountry": "BD"},
    {"id": "C002", "name": "Desert Oasis Ltd", "logo": "🌴", "currency": "SAR", "symbol": "﷼", "defaultCountry": "KSA"},
]

SEED_DEPARTMENTS = ["Engineering", "Human Resources", "Sales", "Marketing", "Finance", "Operations"]

SEED_EMPLOYEES = [
    {
        "id": "EMP001",
        "name": "Arif Rahman",
        "role": "Senior Developer",
        "department": "Engineering",
        "status": "Active",
        "email": "arif@techflow.com",
        "country": "BD",
        "joinDate": "2023-01-15",
        "companyId": "C001",
        "systemRole": "Employee",
        "salaryStructure": {
            "basic": 60000,
            "hra": 25000,
            "transport": 5000,
            "medical": 5000,
            "customItems": [
                {"id": "1", "name": "Performance Bonus", "amount": 5000, "type": "allowance"},
                {"id": "2", "name": "Health Insurance", "amount": 2000, "type": "deduction"},
            ],
        },
    },
    {
        "id": "EMP002",
        "name": "Ahmed Al-Farsi",
        "role": "Operations Lead",
        "department": "Operations",
        "status": "Active",
        "email": "ahmed@oasis.com",
        "country": "KSA",
        "joinDate": "2022-11-20",
        "companyId": "C002",
        "systemRole": "Employee",
        "salaryStructure": {
            "basic": 12000,
            "hra": 4000,
            "transport": 1000,
            "medical": 1000,
            "customItems": [],
        },
    },
]
