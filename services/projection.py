"""
services/projection.py

- 학생용 성적표: 승인된 성적만 과목별로 묶고 전체 합계/평균을 계산
- 학년도 미지정(또는 형식 오류) 시 승인 성적이 있는 가장 최근 학년도를 자동 선택
- 읽기 전용
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from models.results import Result as ResultModel
from models.subjects import Subject as SubjectModel
from schemas.results import StudentReport, SubjectReport, SubjectScores
from services.aggregation import SCORE_FIELDS, annual_from_terms, average_of_totals, grand_total, round2

YEAR_SEPARATOR = "-"


def is_year_range(academic_year: Optional[str]) -> bool:
    """'2024-2025' 처럼 구분자를 포함하는지"""
    return bool(academic_year) and YEAR_SEPARATOR in academic_year


class ResultsProjection:
    def __init__(self, db: Session):
        self.db = db

    def available_years(self, student_id: int) -> List[str]:
        """승인 성적이 1건 이상 있는 학년도 (최근 순)"""
        rows = (
            self.db.query(ResultModel.academic_year)
            .filter(ResultModel.student_id == student_id, ResultModel.is_approved.is_(True))
            .distinct()
            .order_by(ResultModel.academic_year.desc())
            .all()
        )
        return [r.academic_year for r in rows]

    def build_report(self, student_id: int, academic_year: Optional[str] = None) -> StudentReport:
        if not is_year_range(academic_year):
            years = self.available_years(student_id)
            if not years:
                return StudentReport(student_id=student_id)
            academic_year = years[0]

        rows = (
            self.db.query(ResultModel, SubjectModel)
            .join(SubjectModel, SubjectModel.id == ResultModel.subject_id)
            .filter(
                ResultModel.student_id == student_id,
                ResultModel.academic_year == academic_year,
                ResultModel.is_approved.is_(True),
            )
            .order_by(SubjectModel.name)
            .all()
        )

        subjects = []
        for result, subject in rows:
            term_1 = round2(result.term_1_total)
            term_2 = round2(result.term_2_total)
            subjects.append(SubjectReport(
                subject_id=result.subject_id,
                subject_code=subject.code,
                subject_name=subject.name,
                scores=SubjectScores(**{f: getattr(result, f) for f in SCORE_FIELDS}),
                term_1_total=term_1,
                term_2_total=term_2,
                annual_total=annual_from_terms(term_1, term_2),
            ))

        annual_totals = [s.annual_total for s in subjects]
        return StudentReport(
            student_id=student_id,
            academic_year=academic_year,
            term_1_grand_total=grand_total(s.term_1_total for s in subjects),
            term_2_grand_total=grand_total(s.term_2_total for s in subjects),
            annual_grand_total=grand_total(annual_totals),
            annual_average=average_of_totals(annual_totals),
            subjects=subjects,
        )
