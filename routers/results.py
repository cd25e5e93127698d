from typing import Optional

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_admin, require_student, require_teacher
from models.classes import Class as ClassModel
from models.results import Result as ResultModel
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from models.users import User as UserModel
from schemas.results import ApprovalRequest, ResultOut, ResultUpsert, StudentReport
from services.aggregation import SCORE_FIELDS
from services.approval import ApprovalWorkflow
from services.authorizer import Principal, StudentAuthorizer, TeacherAuthorizer
from services.projection import ResultsProjection
from services.result_upsert import ResultUpsertEngine
from utils.exceptions import NotFound

router = APIRouter(prefix="/results", tags=["results"])


def _serialize(result: ResultModel) -> dict:
    return ResultOut.model_validate(result).model_dump()


# ==========================================================
# [1단계] 교사: 성적 입력 (업서트)
# ==========================================================

# ✅ [UPSERT] 성적 생성/수정 (POST, PUT 동일)
@router.post("")
@router.put("")
def upsert_result(
    payload: ResultUpsert,
    response: Response,
    principal: Principal = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    TeacherAuthorizer(db).authorize_write(principal.teacher_id, payload.subject_id, payload.student_id)
    result, created = ResultUpsertEngine(db).upsert(payload, principal.teacher_id)

    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return {
        "success": True,
        "data": _serialize(result),
        "created": created,
        "message": "Result created successfully" if created else "Result updated successfully",
    }


# ==========================================================
# [2단계] 관리자: 전체 조회 / 승인 워크플로
# ==========================================================

# ✅ [READ] 전체 성적 조회
@router.get("")
def read_results(principal: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    records = db.query(ResultModel).order_by(ResultModel.id).all()
    return {"success": True, "data": [_serialize(r) for r in records]}


# ✅ [PENDING] 승인 대기 목록
@router.get("/approvals/pending")
def read_pending_results(principal: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return {"success": True, "data": ApprovalWorkflow(db).list_pending()}


# ✅ [APPROVE] 성적 승인
@router.put("/approve/{result_id}")
def approve_result(
    result_id: int,
    body: Optional[ApprovalRequest] = Body(None),
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    notes = body.notes if body else None
    result = ApprovalWorkflow(db).approve(result_id, principal.user_id, notes)
    return {"success": True, "data": _serialize(result), "message": "Result approved successfully"}


# ✅ [REJECT] 성적 반려
@router.put("/reject/{result_id}")
def reject_result(
    result_id: int,
    body: Optional[ApprovalRequest] = Body(None),
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    notes = body.notes if body else None
    result = ApprovalWorkflow(db).reject(result_id, notes)
    return {"success": True, "data": _serialize(result), "message": "Result rejected"}


# ==========================================================
# [3단계] 학생: 본인 성적표 (/student/me 는 /student/{student_id} 보다 먼저 선언)
# ==========================================================

# ✅ [YEARS] 승인 성적이 있는 학년도 목록
@router.get("/student/me/years")
def read_my_years(principal: Principal = Depends(require_student), db: Session = Depends(get_db)):
    if principal.student_id is None:
        return {"success": True, "data": []}
    student_id = principal.student_id
    StudentAuthorizer(db).authorize_self(principal, student_id)
    return {"success": True, "data": ResultsProjection(db).available_years(student_id)}


def _my_report(principal: Principal, db: Session, academic_year: Optional[str]) -> dict:
    if principal.student_id is None:
        report = StudentReport()
    else:
        student_id = principal.student_id
        StudentAuthorizer(db).authorize_self(principal, student_id)
        report = ResultsProjection(db).build_report(student_id, academic_year)
    return {"success": True, "data": report.model_dump()}


# ✅ [REPORT] 본인 성적표 (학년도 생략 시 최근 학년도 자동 선택)
@router.get("/student/me")
def read_my_latest_report(principal: Principal = Depends(require_student), db: Session = Depends(get_db)):
    return _my_report(principal, db, None)


@router.get("/student/me/{academic_year}")
def read_my_report(
    academic_year: str,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    return _my_report(principal, db, academic_year)


# ✅ [READ] 특정 학생의 학년도 성적 (관리자, 승인 여부 무관)
@router.get("/student/{student_id}/{academic_year}")
def read_student_results(
    student_id: int,
    academic_year: str,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    rows = (
        db.query(ResultModel, SubjectModel.name, SubjectModel.code)
        .join(SubjectModel, SubjectModel.id == ResultModel.subject_id)
        .filter(ResultModel.student_id == student_id, ResultModel.academic_year == academic_year)
        .order_by(SubjectModel.name)
        .all()
    )
    data = []
    for result, subject_name, subject_code in rows:
        item = _serialize(result)
        item.update({"subject_name": subject_name, "subject_code": subject_code})
        data.append(item)
    return {"success": True, "data": data}


# ==========================================================
# [4단계] 교사: 배정 학급 명단 + 성적
# ==========================================================

# ✅ [ROSTER] 학급 · 과목 · 학년도 기준 학생 명단과 본인이 입력한 성적
@router.get("/class/{class_id}/subject/{subject_id}/{academic_year}")
def read_class_results(
    class_id: int,
    subject_id: int,
    academic_year: str,
    principal: Principal = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    TeacherAuthorizer(db).authorize_roster(principal.teacher_id, subject_id, class_id)

    subject = db.get(SubjectModel, subject_id)
    class_ = db.get(ClassModel, class_id)
    if subject is None or class_ is None:
        raise NotFound("Class or subject not found")

    rows = (
        db.query(StudentModel, UserModel, ResultModel)
        .join(UserModel, UserModel.id == StudentModel.user_id)
        .outerjoin(
            ResultModel,
            (ResultModel.student_id == StudentModel.id)
            & (ResultModel.subject_id == subject_id)
            & (ResultModel.academic_year == academic_year)
            & (ResultModel.teacher_id == principal.teacher_id),
        )
        .filter(StudentModel.class_id == class_id)
        .order_by(UserModel.last_name, UserModel.first_name)
        .all()
    )

    data = []
    for student, user, result in rows:
        item = {
            "student_id": student.id,
            "student_number": student.student_number,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "class_name": class_.name,
            "subject_name": subject.name,
            "subject_code": subject.code,
            "result_id": result.id if result else None,
            "term_1_total": result.term_1_total if result else None,
            "term_2_total": result.term_2_total if result else None,
            "is_approved": result.is_approved if result else False,
            "approval_status": result.approval_status if result else None,
        }
        for field in SCORE_FIELDS:
            item[field] = getattr(result, field) if result else None
        data.append(item)
    return {"success": True, "data": data}


# ==========================================================
# [5단계] 교사: 본인이 입력한 성적 상세
# ==========================================================

# ✅ [READ] 성적 상세 조회 (입력한 교사만)
@router.get("/{result_id}")
def read_result(
    result_id: int,
    principal: Principal = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    result = TeacherAuthorizer(db).authorize_read(principal.teacher_id, result_id)
    return {"success": True, "data": _serialize(result)}
