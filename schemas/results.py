from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.settings import settings


# ✅ 입력용 (POST/PUT /results 업서트)
# - term_1_total / term_2_total 등 정의되지 않은 키는 무시 (서버에서 재계산)
class ResultUpsert(BaseModel):
    student_id: int = Field(..., ge=1, description="학생 ID")
    subject_id: int = Field(..., ge=1, description="과목 ID")
    academic_year: str = Field(..., description="학년도 (예: 2024-2025)")
    first_monthly_score: Optional[float] = None      # 1차 월말 (0~20)
    second_monthly_score: Optional[float] = None     # 2차 월말 (0~20)
    midterm_exam_score: Optional[float] = None       # 중간고사 (0~80)
    third_monthly_score: Optional[float] = None      # 3차 월말 (0~20)
    fourth_monthly_score: Optional[float] = None     # 4차 월말 (0~20)
    final_exam_score: Optional[float] = None         # 기말고사 (0~80)

    model_config = ConfigDict(extra="ignore")

    @field_validator("academic_year")
    @classmethod
    def _year_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Academic year is required")
        return v

    @field_validator(
        "first_monthly_score", "second_monthly_score",
        "third_monthly_score", "fourth_monthly_score",
    )
    @classmethod
    def _monthly_range(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not 0 <= v <= settings.MONTHLY_SCORE_MAX:
            raise ValueError(f"Monthly score must be between 0 and {settings.MONTHLY_SCORE_MAX:g}")
        return v

    @field_validator("midterm_exam_score", "final_exam_score")
    @classmethod
    def _exam_range(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not 0 <= v <= settings.EXAM_SCORE_MAX:
            raise ValueError(f"Exam score must be between 0 and {settings.EXAM_SCORE_MAX:g}")
        return v


# ✅ 승인/반려 요청 본문
class ApprovalRequest(BaseModel):
    notes: Optional[str] = None


# ✅ 저장된 성적 행 출력용
class ResultOut(BaseModel):
    id: int
    student_id: int
    subject_id: int
    teacher_id: int
    first_monthly_score: Optional[float] = None
    second_monthly_score: Optional[float] = None
    midterm_exam_score: Optional[float] = None
    third_monthly_score: Optional[float] = None
    fourth_monthly_score: Optional[float] = None
    final_exam_score: Optional[float] = None
    term_1_total: float
    term_2_total: float
    is_approved: bool
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    approval_notes: Optional[str] = None
    rejected_at: Optional[datetime] = None
    approval_status: str
    academic_year: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ✅ 승인 대기 목록 출력용 (학생/교사/과목 표시 정보 포함)
class PendingResultOut(ResultOut):
    student_first_name: Optional[str] = None
    student_last_name: Optional[str] = None
    teacher_first_name: Optional[str] = None
    teacher_last_name: Optional[str] = None
    subject_name: Optional[str] = None
    subject_code: Optional[str] = None
    class_name: Optional[str] = None


# ==========================================================
# 학생용 성적표
# ==========================================================

class SubjectScores(BaseModel):
    first_monthly_score: Optional[float] = None
    second_monthly_score: Optional[float] = None
    midterm_exam_score: Optional[float] = None
    third_monthly_score: Optional[float] = None
    fourth_monthly_score: Optional[float] = None
    final_exam_score: Optional[float] = None


class SubjectReport(BaseModel):
    subject_id: int
    subject_code: Optional[str] = None
    subject_name: Optional[str] = None
    scores: SubjectScores
    term_1_total: float
    term_2_total: float
    annual_total: float


class StudentReport(BaseModel):
    student_id: Optional[int] = None
    academic_year: Optional[str] = None
    term_1_grand_total: float = 0
    term_2_grand_total: float = 0
    annual_grand_total: float = 0
    annual_average: float = 0
    subjects: List[SubjectReport] = Field(default_factory=list)
