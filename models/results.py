from sqlalchemy import (
    Column, Integer, Float, String, Boolean, DateTime, Text, ForeignKey, UniqueConstraint, event,
)
from sqlalchemy.orm import relationship
from database.db import Base, utcnow
from models.users import User
from models.students import Student
from models.subjects import Subject
from models.teachers import Teacher
from services.aggregation import term1, term2
from services.approval_state import approval_state_of


class Result(Base):
    __tablename__ = "results"  # 학생 × 과목 × 학년도 성적 테이블

    id = Column(Integer, primary_key=True, index=True)                            # 성적 고유 ID (PK)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)       # 학생 ID
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)       # 과목 ID
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)       # 마지막으로 입력한 교사 ID

    # ✅ 원점수 (월말 0~20, 시험 0~80)
    first_monthly_score = Column(Float)
    second_monthly_score = Column(Float)
    midterm_exam_score = Column(Float)
    third_monthly_score = Column(Float)
    fourth_monthly_score = Column(Float)
    final_exam_score = Column(Float)

    # ✅ 파생 합계 (저장 직전 항상 재계산, 직접 입력 불가)
    term_1_total = Column(Float, nullable=False, default=0)
    term_2_total = Column(Float, nullable=False, default=0)

    # ✅ 승인 상태
    is_approved = Column(Boolean, nullable=False, default=False)
    approved_by = Column(Integer, ForeignKey("users.id"))
    approved_at = Column(DateTime)
    approval_notes = Column(Text)                                                 # 승인/반려 메모
    rejected_at = Column(DateTime)                                                # 반려 시각 (반려 상태일 때만 설정)

    academic_year = Column(String(20), nullable=False, index=True)               # 학년도 (예: 2024-2025)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("student_id", "subject_id", "academic_year", name="uq_result_student_subject_year"),
    )

    student = relationship(Student)
    subject = relationship(Subject)
    teacher = relationship(Teacher)
    approver = relationship(User, foreign_keys=[approved_by])

    @property
    def approval_status(self) -> str:
        return approval_state_of(self).status

    def recompute_totals(self):
        self.term_1_total = term1(self)
        self.term_2_total = term2(self)


# ==========================================================
# 저장 직전 합계 재계산 (어떤 경로로 수정되더라도 원점수와 일치)
# ==========================================================
@event.listens_for(Result, "before_insert")
@event.listens_for(Result, "before_update")
def _sync_totals(mapper, connection, target):
    target.recompute_totals()
