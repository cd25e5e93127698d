"""
services/authorizer.py

- 역할별 권한 검사기 (Admin / Teacher / Student)
- TeacherAuthorizer 는 (과목, 학급) 배정 범위 안에서만 성적 입력을 허용
- 검사만 수행하며 DB 상태를 변경하지 않음
"""

import logging
from abc import ABC
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from models.assignments import TeacherAssignment as AssignmentModel
from models.results import Result as ResultModel
from models.students import Student as StudentModel
from models.users import ROLE_ADMIN, ROLE_TEACHER, ROLE_STUDENT
from utils.exceptions import AuthorizationDenied, NotFound

logger = logging.getLogger(__name__)


@dataclass
class Principal:
    """인증된 호출자"""
    user_id: int
    role: str
    teacher_id: Optional[int] = None
    student_id: Optional[int] = None


class Authorizer(ABC):
    role: str = ""

    def __init__(self, db: Session):
        self.db = db

    def check_role(self, principal: Principal) -> Principal:
        if principal.role != self.role:
            raise AuthorizationDenied(f"Access denied. {self.role.capitalize()} role required.")
        return principal


class AdminAuthorizer(Authorizer):
    role = ROLE_ADMIN


class StudentAuthorizer(Authorizer):
    """학생은 자기 성적만 조회"""
    role = ROLE_STUDENT

    def authorize_self(self, principal: Principal, student_id: Optional[int]) -> None:
        if principal.student_id is None or principal.student_id != student_id:
            raise AuthorizationDenied("You are not authorized to view these results")


class TeacherAuthorizer(Authorizer):
    """교사 배정 기반 권한 검사 (AssignmentAuthorizer)"""
    role = ROLE_TEACHER

    def _is_assigned(self, teacher_id: int, subject_id: int, class_id: int) -> bool:
        return (
            self.db.query(AssignmentModel.id)
            .filter(
                AssignmentModel.teacher_id == teacher_id,
                AssignmentModel.subject_id == subject_id,
                AssignmentModel.class_id == class_id,
            )
            .first()
            is not None
        )

    def authorize_write(self, teacher_id: int, subject_id: int, student_id: int) -> None:
        student = self.db.query(StudentModel).filter(StudentModel.id == student_id).first()
        if student is None:
            raise NotFound("Student not found")

        if not self._is_assigned(teacher_id, subject_id, student.class_id):
            logger.warning(
                f"성적 입력 거부: teacher_id={teacher_id}, subject_id={subject_id}, class_id={student.class_id}"
            )
            raise AuthorizationDenied("You are not authorized to enter results for this subject and class")

    def authorize_read(self, teacher_id: int, result_id: int) -> ResultModel:
        result = self.db.query(ResultModel).filter(ResultModel.id == result_id).first()
        if result is None:
            raise NotFound("Result not found")
        if result.teacher_id != teacher_id:
            raise AuthorizationDenied("You are not authorized to view this result")
        return result

    def authorize_roster(self, teacher_id: int, subject_id: int, class_id: int) -> None:
        if not self._is_assigned(teacher_id, subject_id, class_id):
            raise AuthorizationDenied("You are not assigned to this subject and class")
