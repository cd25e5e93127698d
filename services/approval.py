"""
services/approval.py

- 관리자 승인/반려 처리와 승인 대기 목록
- 원점수는 절대 수정하지 않음 (상태 컬럼만 변경)
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, aliased

from config.settings import settings
from database.db import utcnow
from models.classes import Class as ClassModel
from models.results import Result as ResultModel
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from models.teachers import Teacher as TeacherModel
from models.users import User as UserModel
from schemas.results import PendingResultOut
from services.approval_state import Approved, Rejected, apply_state
from utils.exceptions import NotFound

logger = logging.getLogger(__name__)


class ApprovalWorkflow:
    def __init__(self, db: Session):
        self.db = db

    def _get(self, result_id: int) -> ResultModel:
        result = self.db.get(ResultModel, result_id)
        if result is None:
            raise NotFound("Result not found")
        return result

    def _save(self, result: ResultModel) -> ResultModel:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(result)
        return result

    def approve(self, result_id: int, admin_id: int, notes: Optional[str] = None) -> ResultModel:
        result = self._get(result_id)
        apply_state(result, Approved(by=admin_id, at=utcnow(), notes=notes))
        self._save(result)
        logger.info(f"성적 승인: result_id={result_id}, admin_id={admin_id}")
        return result

    def reject(self, result_id: int, notes: Optional[str] = None) -> ResultModel:
        result = self._get(result_id)
        # 메모 생략(None) 시에만 기본 문구, 빈 문자열은 그대로 저장
        if notes is None:
            notes = settings.DEFAULT_REJECT_NOTE
        apply_state(result, Rejected(notes=notes, at=utcnow()))
        self._save(result)
        logger.info(f"성적 반려: result_id={result_id}")
        return result

    def list_pending(self) -> List[Dict[str, Any]]:
        """미승인 성적 전체 (최근 생성 순) + 학생/교사/과목 표시 정보"""
        student_user = aliased(UserModel)
        teacher_user = aliased(UserModel)

        rows = (
            self.db.query(
                ResultModel,
                student_user.first_name.label("student_first_name"),
                student_user.last_name.label("student_last_name"),
                teacher_user.first_name.label("teacher_first_name"),
                teacher_user.last_name.label("teacher_last_name"),
                SubjectModel.name.label("subject_name"),
                SubjectModel.code.label("subject_code"),
                ClassModel.name.label("class_name"),
            )
            .join(StudentModel, StudentModel.id == ResultModel.student_id)
            .join(student_user, student_user.id == StudentModel.user_id)
            .join(TeacherModel, TeacherModel.id == ResultModel.teacher_id)
            .join(teacher_user, teacher_user.id == TeacherModel.user_id)
            .join(SubjectModel, SubjectModel.id == ResultModel.subject_id)
            .outerjoin(ClassModel, ClassModel.id == StudentModel.class_id)
            .filter(ResultModel.is_approved.is_(False))
            .order_by(ResultModel.created_at.desc(), ResultModel.id.desc())
            .all()
        )

        pending = []
        for row in rows:
            item = PendingResultOut.model_validate(row.Result).model_dump()
            item.update({
                "student_first_name": row.student_first_name,
                "student_last_name": row.student_last_name,
                "teacher_first_name": row.teacher_first_name,
                "teacher_last_name": row.teacher_last_name,
                "subject_name": row.subject_name,
                "subject_code": row.subject_code,
                "class_name": row.class_name,
            })
            pending.append(item)
        return pending
