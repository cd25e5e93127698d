from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from database.db import utcnow
from services.approval_state import (
    Approved, Pending, Rejected, apply_state, approval_state_of,
)

APPROVED_AT = datetime(2025, 1, 10, 9, 30)
REJECTED_AT = datetime(2025, 1, 12, 14, 0)


def _row(**kwargs):
    values = dict(is_approved=False, approved_by=None, approved_at=None, approval_notes=None, rejected_at=None)
    values.update(kwargs)
    return SimpleNamespace(**values)


def test_approved_requires_approver_and_time():
    with pytest.raises(ValueError):
        Approved(by=None, at=APPROVED_AT)
    with pytest.raises(ValueError):
        Approved(by=1, at=None)


def test_rejected_requires_notes_and_time():
    with pytest.raises(ValueError):
        Rejected(notes=None, at=REJECTED_AT)
    with pytest.raises(ValueError):
        Rejected(notes="x", at=None)


def test_row_to_state():
    assert approval_state_of(_row()) == Pending()
    rejected = approval_state_of(_row(approval_notes="missing final exam", rejected_at=REJECTED_AT))
    assert rejected == Rejected("missing final exam", REJECTED_AT)
    state = approval_state_of(_row(is_approved=True, approved_by=1, approved_at=APPROVED_AT, approval_notes="ok"))
    assert state == Approved(by=1, at=APPROVED_AT, notes="ok")
    assert state.status == "approved"


def test_notes_without_rejection_are_pending():
    # 승인 메모가 남은 채 재입력된 행
    state = approval_state_of(_row(approval_notes="looks good"))
    assert state == Pending(notes="looks good")
    assert state.status == "pending"


def test_apply_approved_sets_metadata():
    row = _row(approval_notes="old", rejected_at=REJECTED_AT)
    apply_state(row, Approved(by=7, at=APPROVED_AT))
    assert row.is_approved is True
    assert row.approved_by == 7
    assert row.approved_at == APPROVED_AT
    assert row.approval_notes is None
    assert row.rejected_at is None


def test_apply_rejected_keeps_previous_approval_metadata():
    row = _row(is_approved=True, approved_by=7, approved_at=APPROVED_AT)
    apply_state(row, Rejected("recheck midterm", REJECTED_AT))
    assert row.is_approved is False
    assert row.approval_notes == "recheck midterm"
    assert row.rejected_at == REJECTED_AT
    assert row.approved_by == 7
    assert row.approved_at == APPROVED_AT
    assert approval_state_of(row).status == "rejected"


def test_apply_pending_clears_approval_but_keeps_notes():
    row = _row(is_approved=True, approved_by=7, approved_at=APPROVED_AT, approval_notes="ok")
    apply_state(row, Pending())
    assert row.is_approved is False
    assert row.approved_by is None
    assert row.approved_at is None
    assert row.approval_notes == "ok"
    assert approval_state_of(row).status == "pending"


def test_apply_pending_clears_rejection():
    row = _row(approval_notes="missing final exam", rejected_at=REJECTED_AT)
    apply_state(row, Pending())
    assert row.rejected_at is None
    assert approval_state_of(row) == Pending(notes="missing final exam")


def test_apply_unknown_state_raises():
    with pytest.raises(TypeError):
        apply_state(_row(), "approved")


def test_state_timestamps_are_timezone_aware():
    assert utcnow().tzinfo is timezone.utc
