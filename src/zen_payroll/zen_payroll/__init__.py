"""ZenPayroll package.

This package is organized by feature modules (companies, employees, payroll,
leaves, ...) on top of an async key-value persistence facade, with a thin
Flask controller layer and an in-process application state orchestrator.
"""
