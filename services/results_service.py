"""
services/results_service.py

DB 조회 + 집계 엔진 연결
- 석차는 항상 학급 전체 코호트로 계산한 뒤, 분반 필터는 석차 산정 이후에 적용
  (분반만 조회해도 class_rank 는 학급 기준 값 유지)
- 성적 값은 저장하지 않고 요청마다 Score 원장에서 다시 계산
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from config.settings import settings
from models.classes import Class as ClassModel
from models.streams import Stream as StreamModel
from models.students import Student as StudentModel
from models.terms import Term as TermModel
from schemas.results import IndividualReport, RankedAggregate
from services.results.aggregator import aggregate_student_record
from services.results.grading import SUBJECT_SCALE, GradeScale, ScaleBasis, total_scale
from services.results.ranking import rank_cohort
from services.results.report_builder import build_individual_report
from services.score_store import (
    find_comments,
    find_scores_for_cohort,
    find_scores_for_student_term,
    find_subject_teachers,
)

logger = logging.getLogger(__name__)


class ResultsNotFound(Exception):
    """조회 대상(학급/학기/학생) 없음 → 404"""
    pass


def get_term(db: Session, term_id: int) -> TermModel:
    term = db.query(TermModel).filter(TermModel.id == term_id).first()
    if term is None:
        raise ResultsNotFound("Term not found")
    return term


def stream_names(db: Session, class_id: int) -> Dict[int, str]:
    rows = db.query(StreamModel.id, StreamModel.stream_name).filter(StreamModel.class_id == class_id).all()
    return {stream_id: name for stream_id, name in rows}


def class_name(db: Session, class_id: int) -> str:
    record = db.query(ClassModel).filter(ClassModel.id == class_id).first()
    return record.class_name if record else "Unknown"


def scale_for(basis: ScaleBasis = ScaleBasis.AVERAGE) -> GradeScale:
    """종합 등급 기준 선택 (총점 기준이면 TOTAL_MAX_MARKS 만점으로 환산)"""
    if basis is ScaleBasis.TOTAL:
        return total_scale(settings.TOTAL_MAX_MARKS)
    return SUBJECT_SCALE


def load_ranked_cohort(
    db: Session,
    class_id: int,
    term_id: int,
    academic_year: Optional[str] = None,
    stream_id: Optional[int] = None,
    scale: GradeScale = SUBJECT_SCALE,
) -> List[RankedAggregate]:
    """학급 코호트 집계 → 석차 → (선택) 분반 필터"""
    cohort = find_scores_for_cohort(db, class_id, None, term_id, academic_year)
    aggregates = [
        aggregate_student_record(student, term_id, academic_year, entries, scale)
        for student, entries in cohort
    ]
    ranked = rank_cohort(aggregates)
    if stream_id:
        ranked = [r for r in ranked if r.stream_id == stream_id]

    logger.info(
        "Cohort ranked: class_id=%s stream_id=%s term_id=%s students=%d",
        class_id, stream_id, term_id, len(ranked),
    )
    return ranked


def export_meta(db: Session, class_id: int, term: TermModel, academic_year: Optional[str] = None) -> Dict[str, Any]:
    return {
        "school_name": settings.SCHOOL_NAME,
        "class_name": class_name(db, class_id),
        "stream_names": stream_names(db, class_id),
        "term_name": term.term_name,
        "academic_year": academic_year or term.academic_year,
    }


def load_individual_report(
    db: Session,
    student_id: int,
    term_id: int,
    academic_year: Optional[str] = None,
) -> Tuple[IndividualReport, Dict[str, Any]]:
    """학생 개인 성적표 + 출력용 메타 정보"""
    student = db.query(StudentModel).filter(StudentModel.id == student_id).first()
    if student is None:
        raise ResultsNotFound("Student not found")
    term = get_term(db, term_id)
    academic_year = academic_year or term.academic_year

    ranked = load_ranked_cohort(db, student.class_id, term_id, academic_year)
    target = next((r for r in ranked if r.student_id == student_id), None)
    if target is None:
        # 비활성 학생은 코호트에서 빠지므로 단독으로 석차 1 처리
        entries = find_scores_for_student_term(db, student_id, term_id, academic_year)
        target = rank_cohort([aggregate_student_record(student, term_id, academic_year, entries)])[0]

    report = build_individual_report(
        target,
        comments=find_comments(db, student_id, term_id),
        subject_teachers=find_subject_teachers(db, student_id, term_id),
    )
    meta = export_meta(db, student.class_id, term, academic_year)
    meta["stream_name"] = meta["stream_names"].get(student.stream_id, "Unknown")
    return report, meta
