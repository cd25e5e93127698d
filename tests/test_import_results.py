from conftest import YEAR
from models.results import Result
from scripts.import_results import import_results

HEADER = (
    "student_id,subject_id,teacher_id,academic_year,"
    "first_monthly_score,second_monthly_score,midterm_exam_score,"
    "third_monthly_score,fourth_monthly_score,final_exam_score\n"
)


def test_import_creates_updates_and_skips(tmp_path, db, school):
    s1, s3, math, t1 = school.student1.id, school.student3.id, school.math.id, school.teacher1.id
    csv_path = tmp_path / "results.csv"
    csv_path.write_text(
        HEADER
        + f"{s1},{math},{t1},{YEAR},18,19,35,,,32\n"
        + f"{s3},{math},{t1},{YEAR},10,,40,,,\n"
        + f"{s1},{math},{t1},{YEAR},,,36,,,\n"       # 중간고사만 수정
        + f"{s1},{math},{t1},{YEAR},25,,,,,\n"       # 월말 만점 초과 → 실패
        + f"999,{math},{t1},{YEAR},10,,,,,\n",       # 없는 학생 → 실패
        encoding="utf-8",
    )

    counts = import_results(db, str(csv_path))

    assert counts == {"created": 2, "updated": 1, "failed": 2}
    row = db.query(Result).filter(Result.student_id == s1).one()
    assert row.first_monthly_score == 18
    assert row.midterm_exam_score == 36
    assert row.term_1_total == 73
    assert row.term_2_total == 32
    assert row.is_approved is False


def test_import_unknown_teacher_is_skipped(tmp_path, db, school):
    csv_path = tmp_path / "results.csv"
    csv_path.write_text(
        HEADER + f"{school.student1.id},{school.math.id},999,{YEAR},10,,,,,\n",
        encoding="utf-8",
    )

    assert import_results(db, str(csv_path)) == {"created": 0, "updated": 0, "failed": 1}
    assert db.query(Result).count() == 0
