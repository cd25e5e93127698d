from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base
from models.users import User
from models.classes import Class


class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(Integer, primary_key=True, index=True)                        # 고유 학생 ID (Primary Key)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)  # 로그인 계정
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)      # 소속 반 ID
    student_number = Column(String(50), unique=True)                          # 학번

    user = relationship(User)
    class_ = relationship(Class)
