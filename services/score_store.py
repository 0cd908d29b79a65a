"""
services/score_store.py

Score 원장 조회/저장 (SQLAlchemy Session 기반)
- 조회 결과는 집계 엔진 입력 형태(ScoreEntry)로 변환해서 반환
- 점수 저장은 자연키 (assignment_id, student_id, term_id) 기준 upsert
  (있으면 수정, 없으면 생성) + DB 유니크 제약으로 중복 방지
- 일괄 제출은 하나의 트랜잭션 (전부 반영 또는 전부 롤백)
"""

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from sqlalchemy import and_
from sqlalchemy.orm import Session

from models.assignments import Assignment as AssignmentModel
from models.comments import Comment as CommentModel
from models.scores import Score as ScoreModel
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from models.teachers import Teacher as TeacherModel
from services.results.aggregator import ScoreEntry
from services.results.grading import to_decimal
from services.results.report_builder import CommentEntry

logger = logging.getLogger(__name__)

MIN_SCORE = Decimal("0")
MAX_SCORE = Decimal("100")


class ScoreValidationError(Exception):
    """점수 범위/형식 오류 (400)"""
    pass


class AssignmentAccessError(Exception):
    """배정되지 않은 교사의 점수 제출/수정 시도 (403)"""
    pass


class ScoreKey(NamedTuple):
    assignment_id: int
    student_id: int
    term_id: int


# ==========================================================
# [조회]
# ==========================================================

def _score_entry_query(db: Session):
    return (
        db.query(
            ScoreModel.student_id,
            SubjectModel.id.label("subject_id"),
            SubjectModel.subject_name,
            SubjectModel.subject_code,
            ScoreModel.score,
        )
        .join(AssignmentModel, AssignmentModel.id == ScoreModel.assignment_id)
        .join(SubjectModel, SubjectModel.id == AssignmentModel.subject_id)
    )


def find_scores_for_student_term(
    db: Session,
    student_id: int,
    term_id: int,
    academic_year: Optional[str] = None,
) -> List[ScoreEntry]:
    query = _score_entry_query(db).filter(ScoreModel.student_id == student_id, ScoreModel.term_id == term_id)
    if academic_year:
        query = query.filter(AssignmentModel.academic_year == academic_year)
    rows = query.order_by(SubjectModel.subject_name).all()
    return [ScoreEntry(r.subject_id, r.subject_name, r.score, r.subject_code) for r in rows]


def find_cohort_students(db: Session, class_id: int, stream_id: Optional[int] = None) -> List[StudentModel]:
    query = db.query(StudentModel).filter(StudentModel.class_id == class_id, StudentModel.is_active.is_(True))
    if stream_id:
        query = query.filter(StudentModel.stream_id == stream_id)
    return query.order_by(StudentModel.fullname).all()


def find_scores_for_cohort(
    db: Session,
    class_id: int,
    stream_id: Optional[int],
    term_id: int,
    academic_year: Optional[str] = None,
) -> List[Tuple[StudentModel, List[ScoreEntry]]]:
    """
    코호트(학급[+분반]) 학생 전원과 각 학생의 해당 학기 점수
    - 점수가 없는 학생도 빈 목록과 함께 포함 (이름순)
    - academic_year 가 주어지면 해당 학년도 배정의 점수만 사용
    """
    students = find_cohort_students(db, class_id, stream_id)
    if not students:
        return []

    query = _score_entry_query(db).filter(
        ScoreModel.term_id == term_id,
        ScoreModel.student_id.in_([s.id for s in students]),
    )
    if academic_year:
        query = query.filter(AssignmentModel.academic_year == academic_year)

    by_student: Dict[int, List[ScoreEntry]] = {s.id: [] for s in students}
    for r in query.all():
        by_student[r.student_id].append(ScoreEntry(r.subject_id, r.subject_name, r.score, r.subject_code))

    return [(s, by_student[s.id]) for s in students]


def find_subject_teachers(db: Session, student_id: int, term_id: int) -> Dict[int, str]:
    """과목 ID → 담당 교사 이름 (성적표 과목표용)"""
    rows = (
        db.query(AssignmentModel.subject_id, TeacherModel.fullname)
        .join(ScoreModel, ScoreModel.assignment_id == AssignmentModel.id)
        .join(TeacherModel, TeacherModel.id == AssignmentModel.teacher_id)
        .filter(ScoreModel.student_id == student_id, ScoreModel.term_id == term_id)
        .all()
    )
    return {subject_id: fullname for subject_id, fullname in rows}


def find_comments(db: Session, student_id: int, term_id: int) -> List[CommentEntry]:
    rows = (
        db.query(CommentModel)
        .filter(CommentModel.student_id == student_id, CommentModel.term_id == term_id)
        .order_by(CommentModel.created_at, CommentModel.id)
        .all()
    )
    return [CommentEntry(c.comment_type, c.comment_text) for c in rows]


# ==========================================================
# [저장]
# ==========================================================

def validate_score(value, student_id=None) -> Decimal:
    number = to_decimal(value)
    if number is None or number < MIN_SCORE or number > MAX_SCORE:
        raise ScoreValidationError(f"Score for student {student_id} must be between 0 and 100")
    return number


def find_owned_assignment(db: Session, assignment_id: int, teacher_id: int) -> AssignmentModel:
    assignment = (
        db.query(AssignmentModel)
        .filter(
            AssignmentModel.id == assignment_id,
            AssignmentModel.teacher_id == teacher_id,
            AssignmentModel.is_active.is_(True),
        )
        .first()
    )
    if assignment is None:
        raise AssignmentAccessError(
            "You are not assigned to this subject/class/stream or assignment not found"
        )
    return assignment


def upsert_score(db: Session, key: ScoreKey, value, submitted_by: int) -> ScoreModel:
    """자연키 기준 find-or-create, 이미 있으면 점수 교체 (commit 은 호출 측)"""
    number = validate_score(value, key.student_id)
    score = (
        db.query(ScoreModel)
        .filter(
            and_(
                ScoreModel.assignment_id == key.assignment_id,
                ScoreModel.student_id == key.student_id,
                ScoreModel.term_id == key.term_id,
            )
        )
        .with_for_update()
        .first()
    )
    if score is None:
        score = ScoreModel(
            assignment_id=key.assignment_id,
            student_id=key.student_id,
            term_id=key.term_id,
            score=number,
            submitted_by=submitted_by,
        )
        db.add(score)
    else:
        score.score = number
        score.submitted_by = submitted_by
    db.flush()
    return score


def submit_scores(
    db: Session,
    assignment_id: int,
    term_id: int,
    entries: Iterable[Tuple[int, object]],
    teacher_id: int,
) -> List[ScoreModel]:
    """
    교사 일괄 점수 제출
    - entries: (student_id, score) 목록
    - 범위 검증을 먼저 전부 수행한 뒤 저장 (하나라도 잘못되면 아무것도 저장하지 않음)
    """
    find_owned_assignment(db, assignment_id, teacher_id)
    entries = [(student_id, validate_score(value, student_id)) for student_id, value in entries]

    try:
        saved = [
            upsert_score(db, ScoreKey(assignment_id, student_id, term_id), value, teacher_id)
            for student_id, value in entries
        ]
        db.commit()
    except Exception:
        db.rollback()
        raise

    for score in saved:
        db.refresh(score)
    logger.info(
        "Scores submitted: assignment_id=%s term_id=%s teacher_id=%s count=%d",
        assignment_id, term_id, teacher_id, len(saved),
    )
    return saved
