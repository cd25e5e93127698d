"""
services/result_upsert.py

- (학생, 과목, 학년도) 키로 성적 행을 생성하거나 갱신
- 원점수 변경 시 합계 재계산 + 승인 상태를 항상 Pending 으로 초기화
- 조회 → 생성/수정을 하나의 트랜잭션으로 처리하고,
  동시 입력으로 유니크 제약 위반이 나면 롤백 후 수정으로 1회 재시도
"""

import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from models.results import Result as ResultModel
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from models.teachers import Teacher as TeacherModel
from schemas.results import ResultUpsert
from services.aggregation import SCORE_FIELDS
from services.approval_state import Pending, apply_state
from utils.exceptions import Conflict, ReferenceInvalid, StorageUnavailable

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


class ResultUpsertEngine:
    def __init__(self, db: Session):
        self.db = db

    def upsert(self, payload: ResultUpsert, teacher_id: int) -> Tuple[ResultModel, bool]:
        """
        성적 업서트

        Args:
            payload: 검증된 입력 (요청에 포함된 점수 필드만 반영)
            teacher_id: 호출 교사 ID (배정 권한 검사를 통과한 상태)

        Returns:
            (저장된 행, 신규 생성 여부)
        """
        self._check_references(payload, teacher_id)

        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                result, created = self._apply(payload, teacher_id)
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                if attempt < MAX_ATTEMPTS:
                    logger.warning(
                        f"성적 동시 입력 감지, 수정으로 재시도: student_id={payload.student_id}, "
                        f"subject_id={payload.subject_id}, academic_year={payload.academic_year}"
                    )
                    continue
                raise Conflict()
            except OperationalError as e:
                self.db.rollback()
                raise StorageUnavailable() from e
            except Exception:
                self.db.rollback()
                raise

            self.db.refresh(result)
            logger.info(
                f"성적 {'생성' if created else '수정'}: result_id={result.id}, teacher_id={teacher_id}"
            )
            return result, created

        raise Conflict()

    # ------------------------------------------------------
    # 내부 단계
    # ------------------------------------------------------

    def _check_references(self, payload: ResultUpsert, teacher_id: int) -> None:
        if self.db.get(StudentModel, payload.student_id) is None:
            raise ReferenceInvalid("Student not found")
        if self.db.get(SubjectModel, payload.subject_id) is None:
            raise ReferenceInvalid("Subject not found")
        if self.db.get(TeacherModel, teacher_id) is None:
            raise ReferenceInvalid("Teacher not found")

    def _find_existing(self, payload: ResultUpsert):
        return (
            self.db.query(ResultModel)
            .filter(
                ResultModel.student_id == payload.student_id,
                ResultModel.subject_id == payload.subject_id,
                ResultModel.academic_year == payload.academic_year,
            )
            .first()
        )

    def _apply(self, payload: ResultUpsert, teacher_id: int) -> Tuple[ResultModel, bool]:
        # 요청에 명시된 점수만 반영 (명시적 null 은 해당 점수 삭제)
        supplied = {f: getattr(payload, f) for f in SCORE_FIELDS if f in payload.model_fields_set}

        result = self._find_existing(payload)
        created = result is None
        if created:
            result = ResultModel(
                student_id=payload.student_id,
                subject_id=payload.subject_id,
                academic_year=payload.academic_year,
            )
            self.db.add(result)

        for field, value in supplied.items():
            setattr(result, field, value)
        result.teacher_id = teacher_id
        apply_state(result, Pending())
        result.recompute_totals()

        self.db.flush()
        return result, created
