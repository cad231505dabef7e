from __future__ import annotations

import pytest

from src.zen_payroll.zen_payroll.main import create_app

PAYSLIP = {
    "overtimeHours": 10,
    "overtimeRate": 200,
    "bonus": 5000,
    "unpaidLeaveDays": 2,
    "unpaidLeaveRate": 2000,
    "taxPercent": 10,
    "useAdvisory": False,
}


@pytest.fixture
def app():
    return create_app("config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, email, password):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


def test_login_and_me(client):
    body = _login(client, "admin@zenpayroll.ai", "admin123")

    assert body["profile"]["role"] == "Admin"
    assert "role-management" in body["tabs"]
    assert client.get("/api/me").get_json()["profile"]["email"] == "admin@zenpayroll.ai"


def test_anonymous_and_bad_credentials(client):
    assert client.get("/api/me").status_code == 403
    resp = client.post("/api/auth/login", json={"email": "admin@zenpayroll.ai", "password": "x"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid email or password"}


def test_logout_clears_cookie_session(client):
    _login(client, "hr@zenpayroll.ai", "hr123")

    assert client.post("/api/auth/logout").status_code == 200
    assert client.get("/api/companies").status_code == 403


def test_payroll_preview_disburse_and_export(client):
    _login(client, "acc@zenpayroll.ai", "acc123")

    preview = client.post("/api/employees/EMP001/payroll/preview", json=PAYSLIP)
    assert preview.status_code == 200
    assert preview.get_json()["netSalary"] == 87800

    created = client.post("/api/employees/EMP001/payroll", json=PAYSLIP)
    assert created.status_code == 201
    assert created.get_json()["status"] == "Paid"

    ledger = client.get("/api/companies/C001/payroll?status=Paid&q=arif").get_json()
    assert [r["id"] for r in ledger] == [created.get_json()["id"]]

    csv_resp = client.get("/api/companies/C001/payroll.csv")
    assert csv_resp.mimetype == "text/csv"
    assert csv_resp.get_data(as_text=True).splitlines()[0] == "ID,Employee,Month,Year,Gross,Net,Status"


def test_hr_cannot_run_payroll(client):
    _login(client, "hr@zenpayroll.ai", "hr123")

    assert client.post("/api/employees/EMP001/payroll/preview", json=PAYSLIP).status_code == 403


def test_onboarding_validation_and_unknown_ids(client):
    _login(client, "admin@zenpayroll.ai", "admin123")

    bad = client.post("/api/companies/C001/employees", json={"name": "X", "email": "nope", "department": "Sales"})
    assert bad.status_code == 400

    ok = client.post(
        "/api/companies/C001/employees",
        json={"name": "Nadia", "email": "nadia@techflow.com", "department": "Sales", "salaryStructure": {"basic": 1}},
    )
    assert ok.status_code == 201
    assert ok.get_json()["salaryStructure"]["basic"] == 1

    assert client.delete("/api/companies/C404").status_code == 404
    assert client.post("/api/employees/EMP404/activation").status_code == 404


def test_leave_flow_and_terminal_state(client):
    _login(client, "arif@techflow.com", "employee123")
    created = client.post(
        "/api/leaves", json={"type": "Unpaid", "startDate": "2024-01-01", "endDate": "2024-01-03", "reason": "Trip"}
    )
    assert created.status_code == 201
    request_id = created.get_json()["id"]
    assert client.post("/api/leaves", json={"startDate": "01/01/2024"}).status_code == 400

    _login(client, "hr@zenpayroll.ai", "hr123")
    decision = client.post(
        f"/api/leaves/{request_id}/decision", json={"status": "Approved", "paymentStatus": "Unpaid"}
    )
    assert decision.status_code == 200
    assert decision.get_json()["paymentStatus"] == "Unpaid"

    again = client.post(f"/api/leaves/{request_id}/decision", json={"status": "Rejected"})
    assert again.status_code == 409

    pending = client.get("/api/leaves/all?status=Pending").get_json()
    assert pending == []

    _login(client, "acc@zenpayroll.ai", "acc123")
    suggestion = client.get("/api/employees/EMP001/unpaid-leave").get_json()
    assert suggestion["days"] == 3
    assert suggestion["synced"] is True


def test_dashboard(client):
    _login(client, "acc@zenpayroll.ai", "acc123")

    body = client.get("/api/companies/C001/dashboard").get_json()

    assert body["stats"]["active_employees"] == 1
    assert len(body["chart"]) == 6
    assert body["departments"][0]["label"] == "Engineering"
    assert client.get("/api/companies/C001/insights").status_code == 403


@pytest.mark.parametrize("value", ["nan", "inf", "-Infinity"])
def test_non_finite_payroll_numbers_are_rejected(client, value):
    _login(client, "acc@zenpayroll.ai", "acc123")

    resp = client.post("/api/employees/EMP001/payroll/preview", json={**PAYSLIP, "bonus": value})

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "bonus must be a finite number"}
