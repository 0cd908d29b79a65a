"""
services/results/aggregator.py

한 학생의 한 학기 과목 점수들 → StudentAggregate
- 순수 함수 (DB/IO 없음), 같은 입력이면 항상 같은 결과
- 점수가 하나도 없으면 subject_count=0 인 0점 집계 반환 (예외 아님)
- 숫자로 해석할 수 없는 점수 항목은 건너뛰고 경고 로그만 남김
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple, Optional

from schemas.results import StudentAggregate, SubjectResult
from services.results.grading import SUBJECT_SCALE, GradeScale, ScaleBasis, to_decimal

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


class ScoreEntry(NamedTuple):
    """Score ⨝ Assignment ⨝ Subject 조회 결과 한 줄"""
    subject_id: int
    subject_name: str
    value: object
    subject_code: Optional[str] = None


def round_marks(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def mean(values) -> Decimal:
    values = list(values)
    if not values:
        return round_marks(Decimal("0"))
    return round_marks(sum(values, Decimal("0")) / len(values))


def exact_average(aggregate: StudentAggregate) -> Decimal:
    """반올림하지 않은 평균 (total_score / subject_count), 점수가 없으면 0"""
    if not aggregate.subject_count:
        return Decimal("0")
    return aggregate.total_score / aggregate.subject_count


def aggregate_student(
    student_id: int,
    term_id: int,
    scores: Iterable[ScoreEntry],
    *,
    admission_number: Optional[str] = None,
    fullname: Optional[str] = None,
    class_id: Optional[int] = None,
    stream_id: Optional[int] = None,
    academic_year: Optional[str] = None,
    scale: GradeScale = SUBJECT_SCALE,
) -> StudentAggregate:
    """
    과목 점수 합계/평균/등급 산출
    - 과목 등급은 항상 과목 척도
    - 종합 등급(overall_grade)은 scale 의 basis 에 따라 평균 또는 총점으로 판정
      (기본값: 과목 척도 + 평균)
    """
    results = []
    for entry in scores:
        value = to_decimal(entry.value)
        if value is None:
            logger.warning(
                "Skipping malformed score: student_id=%s term_id=%s subject_id=%s value=%r",
                student_id, term_id, entry.subject_id, entry.value,
            )
            continue
        results.append(
            SubjectResult(
                subject_id=entry.subject_id,
                subject_name=entry.subject_name,
                subject_code=entry.subject_code,
                score=value,
                grade=SUBJECT_SCALE.grade(value),
            )
        )

    # 입력 순서와 무관하게 과목명 → 과목 ID 순으로 고정
    results.sort(key=lambda r: (r.subject_name, r.subject_id))

    total = sum((r.score for r in results), Decimal("0"))
    count = len(results)
    exact = total / count if count else Decimal("0")
    average = round_marks(exact)
    # 등급은 반올림 전 평균으로 판정 (average_score 는 표시/석차용)
    graded_value = total if scale.basis is ScaleBasis.TOTAL else exact

    return StudentAggregate(
        student_id=student_id,
        admission_number=admission_number,
        fullname=fullname,
        class_id=class_id,
        stream_id=stream_id,
        term_id=term_id,
        academic_year=academic_year,
        total_score=total,
        subject_count=count,
        average_score=average,
        overall_grade=scale.grade(graded_value),
        subject_results=tuple(results),
    )


def aggregate_student_record(student, term_id: int, academic_year: Optional[str], scores, scale: GradeScale = SUBJECT_SCALE) -> StudentAggregate:
    """ORM Student 객체를 그대로 받는 편의 함수"""
    return aggregate_student(
        student.id,
        term_id,
        scores,
        admission_number=student.admission_number,
        fullname=student.fullname,
        class_id=student.class_id,
        stream_id=student.stream_id,
        academic_year=academic_year,
        scale=scale,
    )
