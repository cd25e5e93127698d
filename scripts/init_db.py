from database.db import Base, engine

# ✅ 모든 테이블을 Base 메타데이터에 등록하기 위한 모델 import
from models import users, classes, subjects, teachers, students, assignments, results  # noqa: F401


def init_db():
    Base.metadata.create_all(bind=engine)
    print("✅ 테이블 생성 완료:", ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    init_db()
