import os

# ✅ 설정 객체 생성 전에 테스트용 환경변수 지정
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret-key")

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from dependencies.security import create_access_token
from main import app
from models.assignments import TeacherAssignment
from models.classes import Class
from models.results import Result  # noqa: F401
from models.students import Student
from models.subjects import Subject
from models.teachers import Teacher
from models.users import User, ROLE_ADMIN, ROLE_TEACHER, ROLE_STUDENT

YEAR = "2024-2025"


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _user(db, username, role, first_name, last_name):
    user = User(
        username=username,
        email=f"{username}@school.test",
        first_name=first_name,
        last_name=last_name,
        role=role,
    )
    db.add(user)
    db.flush()
    return user


@pytest.fixture
def school(db):
    """
    10A / 10B 두 학급, Mathematics / Physics 두 과목
    - teacher1: Mathematics @ 10A
    - teacher2: Mathematics @ 10B, Physics @ 10A
    - student1, student3: 10A / student2: 10B
    """
    admin = _user(db, "admin", ROLE_ADMIN, "Admin", "User")

    class_a = Class(name="10A", grade_level=10)
    class_b = Class(name="10B", grade_level=10)
    math = Subject(name="Mathematics", code="MATH10")
    physics = Subject(name="Physics", code="PHY10")
    db.add_all([class_a, class_b, math, physics])
    db.flush()

    t1_user = _user(db, "teacher1", ROLE_TEACHER, "John", "Doe")
    t2_user = _user(db, "teacher2", ROLE_TEACHER, "Jane", "Smith")
    teacher1 = Teacher(user_id=t1_user.id)
    teacher2 = Teacher(user_id=t2_user.id)
    db.add_all([teacher1, teacher2])
    db.flush()

    s1_user = _user(db, "student1", ROLE_STUDENT, "Alice", "Brown")
    s2_user = _user(db, "student2", ROLE_STUDENT, "Bob", "Wilson")
    s3_user = _user(db, "student3", ROLE_STUDENT, "Carol", "Adams")
    student1 = Student(user_id=s1_user.id, class_id=class_a.id, student_number="S-001")
    student2 = Student(user_id=s2_user.id, class_id=class_b.id, student_number="S-002")
    student3 = Student(user_id=s3_user.id, class_id=class_a.id, student_number="S-003")
    db.add_all([student1, student2, student3])
    db.flush()

    db.add_all([
        TeacherAssignment(teacher_id=teacher1.id, subject_id=math.id, class_id=class_a.id, academic_year=YEAR),
        TeacherAssignment(teacher_id=teacher2.id, subject_id=math.id, class_id=class_b.id, academic_year=YEAR),
        TeacherAssignment(teacher_id=teacher2.id, subject_id=physics.id, class_id=class_a.id, academic_year=YEAR),
    ])
    db.commit()

    return SimpleNamespace(
        admin=admin,
        class_a=class_a, class_b=class_b,
        math=math, physics=physics,
        teacher1=teacher1, teacher2=teacher2,
        t1_user=t1_user, t2_user=t2_user,
        student1=student1, student2=student2, student3=student3,
        s1_user=s1_user, s2_user=s2_user, s3_user=s3_user,
    )


def auth_header(user) -> dict:
    token = create_access_token(user.id, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers(school):
    return SimpleNamespace(
        admin=auth_header(school.admin),
        teacher1=auth_header(school.t1_user),
        teacher2=auth_header(school.t2_user),
        student1=auth_header(school.s1_user),
        student2=auth_header(school.s2_user),
        student3=auth_header(school.s3_user),
    )
