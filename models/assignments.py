from datetime import date

from sqlalchemy import Column, Integer, String, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base
from models.teachers import Teacher


class TeacherAssignment(Base):
    __tablename__ = "teacher_assignments"  # 교사 ↔ (과목, 학급) 배정 테이블

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)   # 교사 ID
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)   # 과목 ID
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)      # 학급 ID
    academic_year = Column(String(20), nullable=False)                        # 학년도 (예: 2024-2025)
    assigned_date = Column(Date, default=date.today)                          # 배정일

    __table_args__ = (
        UniqueConstraint("teacher_id", "subject_id", "class_id", "academic_year",
                         name="uq_teacher_assignment"),
    )

    teacher = relationship(Teacher)
