from sqlalchemy import Column, Integer, String, DateTime
from database.db import Base, utcnow

# ✅ 사용자 역할 (users.role 값)
ROLE_ADMIN = "admin"
ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"


class User(Base):
    __tablename__ = "users"  # 로그인 계정 테이블 (관리자/교사/학생 공통)

    id = Column(Integer, primary_key=True, index=True)             # 사용자 고유 ID (PK)
    username = Column(String(50), unique=True, nullable=False)     # 로그인 아이디
    email = Column(String(100), unique=True)                       # 이메일
    first_name = Column(String(100), nullable=False)               # 이름
    last_name = Column(String(100), nullable=False)                # 성
    role = Column(String(20), nullable=False)                      # 역할 (admin, teacher, student)
    created_at = Column(DateTime, default=utcnow)         # 생성 시각

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
