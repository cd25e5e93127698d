"""
dependencies/security.py

- Bearer 토큰(JWT) 검증 → Principal 생성
- require_admin / require_teacher / require_student : 역할 확인 의존성
- 교사의 (과목, 학급) 범위 검사는 services/authorizer.py 의 TeacherAuthorizer 가 담당
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.students import Student as StudentModel
from models.teachers import Teacher as TeacherModel
from models.users import User as UserModel
from services.authorizer import AdminAuthorizer, Principal, StudentAuthorizer, TeacherAuthorizer
from utils.exceptions import AuthorizationDenied, Unauthenticated

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: int, role: str, expires_minutes: Optional[int] = None) -> str:
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload: Dict[str, Any] = {"sub": str(user_id), "role": role, "exp": expires}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _decode(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Token has expired")
    except jwt.InvalidTokenError:
        raise Unauthenticated("Token is not valid")


def get_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    payload = _decode(credentials.credentials)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise Unauthenticated("Token is not valid")

    user = db.get(UserModel, user_id)
    if user is None:
        raise Unauthenticated("Token is not valid")

    # 역할은 토큰이 아니라 DB 기준
    return Principal(user_id=user.id, role=user.role)


# ==========================================================
# 역할별 의존성
# ==========================================================

def require_admin(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> Principal:
    return AdminAuthorizer(db).check_role(principal)


def require_teacher(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> Principal:
    TeacherAuthorizer(db).check_role(principal)
    teacher = db.query(TeacherModel).filter(TeacherModel.user_id == principal.user_id).first()
    if teacher is None:
        raise AuthorizationDenied("Teacher profile not found")
    principal.teacher_id = teacher.id
    return principal


def require_student(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> Principal:
    StudentAuthorizer(db).check_role(principal)
    # 학생 프로필이 아직 없으면 student_id 는 None (빈 성적표 응답)
    student = db.query(StudentModel).filter(StudentModel.user_id == principal.user_id).first()
    principal.student_id = student.id if student else None
    return principal
