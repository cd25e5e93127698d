from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base
from models.users import User


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)                             # 교사 고유 ID (PK)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)  # 로그인 계정

    user = relationship(User)
