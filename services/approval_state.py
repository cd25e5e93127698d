"""
services/approval_state.py

승인 상태를 명시적인 태그 변형(Pending / Approved / Rejected)으로 표현.
DB 행(is_approved + nullable 컬럼)과의 변환은 approval_state_of / apply_state 에서만 수행.
반려 여부는 rejected_at 컬럼으로 구분 (approval_notes 는 승인 메모일 수도 있음)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"


@dataclass(frozen=True)
class Pending:
    notes: Optional[str] = None
    status = STATUS_PENDING


@dataclass(frozen=True)
class Approved:
    by: int
    at: datetime
    notes: Optional[str] = None
    status = STATUS_APPROVED

    def __post_init__(self):
        if self.by is None or self.at is None:
            raise ValueError("Approved state requires approver and approval time")


@dataclass(frozen=True)
class Rejected:
    notes: str
    at: datetime
    status = STATUS_REJECTED

    def __post_init__(self):
        if self.notes is None or self.at is None:
            raise ValueError("Rejected state requires notes and rejection time")


ApprovalState = Union[Pending, Approved, Rejected]


def approval_state_of(row: Any) -> ApprovalState:
    """행 → 상태"""
    if row.is_approved:
        return Approved(by=row.approved_by, at=row.approved_at, notes=row.approval_notes)
    if row.rejected_at is not None:
        return Rejected(notes=row.approval_notes, at=row.rejected_at)
    return Pending(notes=row.approval_notes)


def apply_state(row: Any, state: ApprovalState) -> None:
    """상태 → 행. 원점수 컬럼은 건드리지 않음."""
    if isinstance(state, Approved):
        row.is_approved = True
        row.approved_by = state.by
        row.approved_at = state.at
        row.approval_notes = state.notes
        row.rejected_at = None
    elif isinstance(state, Rejected):
        # 기존 approved_by / approved_at 은 이력으로 유지
        row.is_approved = False
        row.approval_notes = state.notes
        row.rejected_at = state.at
    elif isinstance(state, Pending):
        # 교사 재입력: 승인/반려 정보 초기화, 메모는 유지
        row.is_approved = False
        row.approved_by = None
        row.approved_at = None
        row.rejected_at = None
    else:
        raise TypeError(f"Unknown approval state: {state!r}")
