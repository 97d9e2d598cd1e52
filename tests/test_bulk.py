import pytest

from hr_approvals.core.config import settings
from hr_approvals.core.exceptions import ValidationError
from hr_approvals.models import LeaveRequest
from hr_approvals.models.reviewable import RequestKind
from hr_approvals.services.balance_ledger import BalanceLedger
from hr_approvals.services.bulk import BulkCoordinator


def test_bulk_approve_reports_each_item(db_session, people, set_balance, make_leave, reviewer_for):
    carol = people["carol"]
    set_balance(carol, "paid", 20)
    pending = [make_leave(carol, days=1) for _ in range(3)]
    done = [make_leave(carol, days=1, status="approved") for _ in range(2)]
    ids = [pending[0].id, done[0].id, pending[1].id, done[1].id, pending[2].id]

    result = BulkCoordinator(db_session).bulk_approve(RequestKind.LEAVE, ids, reviewer_for(people["bob"]))

    assert result.succeeded == [pending[0].id, pending[1].id, pending[2].id]
    assert [f.id for f in result.failed] == [done[0].id, done[1].id]
    assert {f.error_kind for f in result.failed} == {"InvalidStateError"}
    assert BalanceLedger(db_session).balances(carol.id) == {"paid": 17.0}


def test_one_failure_does_not_roll_back_siblings(db_session, people, set_balance, make_leave, reviewer_for):
    carol = people["carol"]
    set_balance(carol, "paid", 4)
    first = make_leave(carol, days=3)
    too_long = make_leave(carol, days=3)
    third = make_leave(carol, days=1)

    result = BulkCoordinator(db_session).bulk_approve(
        RequestKind.LEAVE, [first.id, too_long.id, third.id, 999], reviewer_for(people["bob"])
    )

    assert result.succeeded == [first.id, third.id]
    failures = {f.id: f.error_kind for f in result.failed}
    assert failures == {too_long.id: "InsufficientBalanceError", 999: "NotFoundError"}
    db_session.expire_all()
    assert db_session.get(LeaveRequest, too_long.id).status == "pending"
    assert BalanceLedger(db_session).balances(carol.id) == {"paid": 0.0}


def test_bulk_reports_authorization_failures_per_item(db_session, people, make_leave, reviewer_for):
    own = make_leave(people["carol"])
    other = make_leave(people["frank"])

    result = BulkCoordinator(db_session).bulk_reject(
        RequestKind.LEAVE, [own.id, other.id], reviewer_for(people["erin"]), "Blackout period"
    )

    assert result.succeeded == [own.id]
    assert result.failed[0].id == other.id
    assert result.failed[0].error_kind == "AuthorizationError"


def test_duplicate_ids_fail_after_the_first(db_session, people, make_timesheet, reviewer_for):
    timesheet = make_timesheet(people["carol"])

    result = BulkCoordinator(db_session).bulk_approve(
        RequestKind.TIMESHEET, [timesheet.id, timesheet.id], reviewer_for(people["bob"])
    )

    assert result.succeeded == [timesheet.id]
    assert result.failed[0].error_kind == "InvalidStateError"


def test_bulk_reject_timesheets(db_session, people, make_timesheet, reviewer_for):
    sheets = [make_timesheet(people["frank"]) for _ in range(2)]

    result = BulkCoordinator(db_session).bulk_reject(
        RequestKind.TIMESHEET, [t.id for t in sheets], reviewer_for(people["grace"]), "Wrong project"
    )

    assert result.succeeded == [t.id for t in sheets]
    assert result.failed == []


class TestBulkValidation:
    def test_empty_ids(self, db_session, people, reviewer_for):
        with pytest.raises(ValidationError):
            BulkCoordinator(db_session).bulk_approve(RequestKind.LEAVE, [], reviewer_for(people["bob"]))

    def test_missing_reviewer(self, db_session):
        with pytest.raises(ValidationError):
            BulkCoordinator(db_session).bulk_approve(RequestKind.LEAVE, [1], None)

    @pytest.mark.parametrize("reason", [None, "  "])
    def test_bulk_reject_requires_reason(self, db_session, people, make_leave, reviewer_for, reason):
        leave = make_leave(people["carol"])

        with pytest.raises(ValidationError):
            BulkCoordinator(db_session).bulk_reject(RequestKind.LEAVE, [leave.id], reviewer_for(people["bob"]), reason)

        db_session.expire_all()
        assert db_session.get(LeaveRequest, leave.id).status == "pending"

    def test_batch_size_limit(self, db_session, people, reviewer_for, monkeypatch):
        monkeypatch.setattr(settings, "max_bulk_items", 2)

        with pytest.raises(ValidationError) as exc_info:
            BulkCoordinator(db_session).bulk_approve(RequestKind.LEAVE, [1, 2, 3], reviewer_for(people["bob"]))
        assert exc_info.value.details == {"received": 3}
