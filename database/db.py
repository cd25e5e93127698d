from datetime import datetime, timezone

from sqlalchemy import create_engine               # SQLAlchemy 엔진 생성 도구
from sqlalchemy.orm import declarative_base        # 모델의 Base 클래스
from sqlalchemy.orm import sessionmaker, Session   # 세션 팩토리 함수

from config.settings import settings               # ✅ 환경변수 설정 파일 불러오기


def _engine_kwargs(url: str) -> dict:
    # SQLite는 요청 스레드와 생성 스레드가 다를 수 있음
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_recycle": 3600}


# ✅ 환경변수에서 DB 연결 URL을 불러와 엔진 생성
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

# ✅ 세션 팩토리: DB 연결에 사용할 세션 생성기 정의
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


# ==========================================================
# [공통] 요청 단위 DB 세션
# - 라우터에서 Depends(get_db)로 주입, 서비스에는 인자로 전달
# ==========================================================
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ✅ 타임스탬프 기본값 (UTC, timezone-aware)
def utcnow() -> datetime:
    return datetime.now(timezone.utc)
