import csv
import logging
from typing import Dict, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from database.db import SessionLocal
from schemas.results import ResultUpsert
from services.aggregation import SCORE_FIELDS
from services.result_upsert import ResultUpsertEngine
from utils.exceptions import ResultsError

logger = logging.getLogger(__name__)

CSV_PATH = "data/results.csv"  # ✅ 파일 경로
# 컬럼: student_id, subject_id, teacher_id, academic_year, 점수 6개 (빈 칸은 미입력)


def _row_to_payload(row: Dict[str, str]) -> ResultUpsert:
    data = {
        "student_id": row["student_id"],
        "subject_id": row["subject_id"],
        "academic_year": row["academic_year"],
    }
    # 빈 칸인 점수는 요청에 포함하지 않음 (기존 값 유지)
    for field in SCORE_FIELDS:
        value = (row.get(field) or "").strip()
        if value:
            data[field] = value
    return ResultUpsert(**data)


def import_results(db: Session, csv_path: str = CSV_PATH) -> Dict[str, int]:
    """
    CSV 원점수 일괄 입력 (ResultUpsertEngine 경유, 승인 상태는 Pending 으로 초기화)

    Returns:
        {"created": n, "updated": n, "failed": n}
    """
    counts = {"created": 0, "updated": 0, "failed": 0}
    engine = ResultUpsertEngine(db)

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for line_no, row in enumerate(reader, start=2):
            try:
                payload = _row_to_payload(row)
                _, created = engine.upsert(payload, teacher_id=int(row["teacher_id"]))
            except (ValidationError, ResultsError, KeyError, ValueError) as e:
                logger.warning(f"{csv_path}:{line_no} 건너뜀 - {e}")
                counts["failed"] += 1
                continue
            counts["created" if created else "updated"] += 1

    return counts


def migrate_results(csv_path: Optional[str] = None):
    db: Session = SessionLocal()
    try:
        counts = import_results(db, csv_path or CSV_PATH)
    finally:
        db.close()
    print(f"✅ 성적 CSV → DB 입력 완료: 생성 {counts['created']}건, 수정 {counts['updated']}건, 실패 {counts['failed']}건")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    migrate_results()
