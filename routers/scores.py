from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database.db import get_db
from dependencies.security import STAFF_ROLES, CurrentUser, require_roles, require_teacher
from models.scores import Score as ScoreModel
from models.students import Student as StudentModel
from schemas.results import ScoreSubmission, ScoreUpdate
from services.results.grading import grade_subject
from services.results.report_builder import build_cohort_summary
from services.results_service import get_term, load_individual_report, load_ranked_cohort
from services.score_store import (
    find_owned_assignment,
    find_scores_for_student_term,
    submit_scores,
    validate_score,
)

router = APIRouter(prefix="/scores", tags=["scores"])


def _score_row(score: ScoreModel) -> dict:
    return {
        "id": score.id,
        "assignment_id": score.assignment_id,
        "student_id": score.student_id,
        "term_id": score.term_id,
        "score": float(score.score),
        "grade": grade_subject(score.score).value,
        "submitted_by": score.submitted_by,
        "updated_at": score.updated_at,
    }


def _get_score_or_404(db: Session, score_id: int) -> ScoreModel:
    score = db.query(ScoreModel).filter(ScoreModel.id == score_id).first()
    if score is None:
        raise HTTPException(status_code=404, detail="Score not found")
    return score


# ==========================================================
# [1단계] 교사 점수 입력/수정
# ==========================================================

# ✅ [CREATE] 배정 과목 점수 일괄 제출 (있으면 덮어쓰기)
@router.post("/submit", status_code=201)
def submit(payload: ScoreSubmission, user: CurrentUser = Depends(require_teacher), db: Session = Depends(get_db)):
    get_term(db, payload.term_id)
    saved = submit_scores(
        db,
        payload.assignment_id,
        payload.term_id,
        [(item.student_id, item.score) for item in payload.scores],
        user.teacher_id,
    )
    return {
        "success": True,
        "data": [_score_row(s) for s in saved],
        "count": len(saved),
        "message": "Scores submitted successfully"
    }


# ✅ [READ] 본인 배정 과목의 학생별 점수
@router.get("/assignment/{assignment_id}")
def read_assignment_scores(
    assignment_id: int,
    term_id: int = None,
    user: CurrentUser = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    assignment = find_owned_assignment(db, assignment_id, user.teacher_id)
    query = (
        db.query(ScoreModel, StudentModel)
        .join(StudentModel, StudentModel.id == ScoreModel.student_id)
        .filter(ScoreModel.assignment_id == assignment.id)
    )
    if term_id:
        query = query.filter(ScoreModel.term_id == term_id)
    rows = query.order_by(StudentModel.fullname).all()

    data = []
    for score, student in rows:
        row = _score_row(score)
        row.update(admission_number=student.admission_number, fullname=student.fullname)
        data.append(row)
    return {"success": True, "data": data, "count": len(data)}


# ✅ [UPDATE] 점수 수정 (제출한 배정의 담당 교사만)
@router.put("/{score_id}")
def update_score(
    score_id: int,
    payload: ScoreUpdate,
    user: CurrentUser = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    score = _get_score_or_404(db, score_id)
    find_owned_assignment(db, score.assignment_id, user.teacher_id)

    score.score = validate_score(payload.score, score.student_id)
    score.submitted_by = user.teacher_id
    db.commit()
    db.refresh(score)
    return {"success": True, "data": _score_row(score), "message": "Score updated successfully"}


# ✅ [DELETE] 점수 삭제
@router.delete("/{score_id}")
def delete_score(score_id: int, user: CurrentUser = Depends(require_teacher), db: Session = Depends(get_db)):
    score = _get_score_or_404(db, score_id)
    find_owned_assignment(db, score.assignment_id, user.teacher_id)

    db.delete(score)
    db.commit()
    return {"success": True, "data": {"score_id": score_id}, "message": "Score deleted successfully"}


# ==========================================================
# [2단계] 조회/분석
# ==========================================================

# ✅ [READ] 학생 학기 점수 목록
@router.get("/student/{student_id}/term/{term_id}", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_student_term_scores(student_id: int, term_id: int, db: Session = Depends(get_db)):
    entries = find_scores_for_student_term(db, student_id, term_id)
    if not entries:
        raise HTTPException(status_code=404, detail="No scores found for this student in this term")

    data = [
        {
            "subject_id": e.subject_id,
            "subject_name": e.subject_name,
            "subject_code": e.subject_code,
            "score": float(e.value),
            "grade": grade_subject(e.value).value,
        }
        for e in entries
    ]
    return {"success": True, "data": data, "count": len(data)}


# ✅ [ANALYTICS] 학생 성취도 (강점/보완 과목, 등급 분포)
@router.get("/performance/student/{student_id}/term/{term_id}", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def student_performance(student_id: int, term_id: int, db: Session = Depends(get_db)):
    report, _ = load_individual_report(db, student_id, term_id)
    return {"success": True, "data": report.model_dump(mode="json")}


# ✅ [ANALYTICS] 학급/분반 성취도 요약
@router.get("/performance/class/{class_id}/term/{term_id}", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def class_performance(class_id: int, term_id: int, stream_id: int = None, db: Session = Depends(get_db)):
    term = get_term(db, term_id)
    ranked = load_ranked_cohort(db, class_id, term_id, term.academic_year, stream_id)
    return {
        "success": True,
        "data": {
            "summary": build_cohort_summary(ranked).model_dump(mode="json"),
            "students": [r.model_dump(mode="json", exclude={"subject_results"}) for r in ranked],
        },
    }
