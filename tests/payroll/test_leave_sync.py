from datetime import date, datetime

from src.zen_payroll.zen_payroll.core.enums import LeaveStatus, LeaveType, PaymentStatus
from src.zen_payroll.zen_payroll.leaves.model import LeaveRequest
from src.zen_payroll.zen_payroll.payroll.leave_sync import sync_unpaid_leave


def _leave(rid, start, end, *, employee_id="EMP001", status=LeaveStatus.APPROVED, payment=PaymentStatus.UNPAID):
    return LeaveRequest(
        id=rid,
        employee_id=employee_id,
        type=LeaveType.UNPAID,
        start_date=start,
        end_date=end,
        reason="Family",
        status=status,
        applied_at=datetime(2024, 1, 1, 8, 0),
        payment_status=payment,
    )


def test_sums_inclusive_days_of_approved_unpaid_leave(arif):
    requests = [
        _leave("LR1", date(2024, 1, 1), date(2024, 1, 3)),
        _leave("LR2", date(2024, 1, 10), date(2024, 1, 10)),
    ]

    s = sync_unpaid_leave(arif, requests)

    assert s.days == 4
    assert s.rate == 2000
    assert s.synced is True
    assert s.request_ids == ("LR1", "LR2")


def test_ignores_paid_pending_and_other_employees(arif):
    requests = [
        _leave("LR1", date(2024, 1, 1), date(2024, 1, 5), payment=PaymentStatus.PAID),
        _leave("LR2", date(2024, 1, 1), date(2024, 1, 5), status=LeaveStatus.PENDING, payment=None),
        _leave("LR3", date(2024, 1, 1), date(2024, 1, 5), employee_id="EMP002"),
        _leave("LR4", date(2024, 1, 1), date(2024, 1, 5), status=LeaveStatus.REJECTED, payment=None),
    ]

    s = sync_unpaid_leave(arif, requests)

    assert s.days == 0
    assert s.synced is False


def test_operator_override_clears_synced_flag(arif):
    s = sync_unpaid_leave(arif, [_leave("LR1", date(2024, 1, 1), date(2024, 1, 2))])

    edited = s.override(days=1)

    assert (edited.days, edited.rate, edited.synced) == (1, 2000, False)
    assert s.synced is True
