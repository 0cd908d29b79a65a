"""
services/results/report_builder.py

석차가 매겨진 집계 결과 → 개인 성적표 / 코호트 요약
- 순수 함수, DB 접근 없음, 입력 객체를 변경하지 않음
- 코멘트 분류
  · recommendation(교장), general(담임): 첫 번째 항목만 사용
  · academic, behavioral: 입력 순서대로 전부 수집
  · 그 외 분류는 무시
"""

from collections import Counter, OrderedDict
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Mapping, NamedTuple, Optional, Sequence

from schemas.results import (
    CohortSummary,
    CommentSet,
    CommentType,
    IndividualReport,
    Letter,
    RankedAggregate,
    SubjectReportLine,
)
from services.results.aggregator import exact_average, mean
from services.results.grading import SUBJECT_SCALE, remark_for

STRENGTH_THRESHOLD = Decimal("70")      # 이 점수 이상 과목은 강점
IMPROVEMENT_THRESHOLD = Decimal("50")   # 이 점수 미만 과목은 보완 필요


class CommentEntry(NamedTuple):
    type: str
    text: str


def _comment_fields(comment):
    if isinstance(comment, Mapping):
        return comment.get("type"), comment.get("text")
    return comment.type, comment.text


def collect_comments(comments: Iterable) -> CommentSet:
    singles = {}
    multiples = {CommentType.ACADEMIC: [], CommentType.BEHAVIORAL: []}

    for comment in comments:
        kind, text = _comment_fields(comment)
        try:
            kind = CommentType(kind)
        except ValueError:
            continue
        if text is None:
            continue
        if kind in multiples:
            multiples[kind].append(text)
        else:
            singles.setdefault(kind, text)

    return CommentSet(
        recommendation=singles.get(CommentType.RECOMMENDATION),
        general=singles.get(CommentType.GENERAL),
        academic=tuple(multiples[CommentType.ACADEMIC]),
        behavioral=tuple(multiples[CommentType.BEHAVIORAL]),
    )


def _ordered_distribution(counter: Counter) -> dict:
    return {letter: counter[letter] for letter in Letter if counter[letter]}


def build_individual_report(
    ranked: RankedAggregate,
    comments: Iterable = (),
    subject_teachers: Optional[Mapping[int, str]] = None,
) -> IndividualReport:
    subject_teachers = subject_teachers or {}

    subjects = tuple(
        SubjectReportLine(
            subject_id=result.subject_id,
            name=result.subject_name,
            code=result.subject_code or "N/A",
            score=result.score,
            grade=result.grade,
            teacher=subject_teachers.get(result.subject_id) or "N/A",
        )
        for result in ranked.subject_results
    )

    return IndividualReport(
        student=ranked,
        comments=collect_comments(comments),
        subjects=subjects,
        remark=remark_for(ranked.overall_grade),
        strengths=tuple(r.subject_name for r in ranked.subject_results if r.score >= STRENGTH_THRESHOLD),
        areas_for_improvement=tuple(
            r.subject_name for r in ranked.subject_results if r.score < IMPROVEMENT_THRESHOLD
        ),
        grade_distribution=_ordered_distribution(Counter(r.grade for r in ranked.subject_results)),
    )


def _subject_averages(scored: Sequence[RankedAggregate]) -> dict:
    by_subject = OrderedDict()
    for aggregate in scored:
        for result in aggregate.subject_results:
            entry = by_subject.setdefault(result.subject_id, (result.subject_name, result.subject_code, []))
            entry[2].append(result.score)

    name_counts = Counter(name for name, _, _ in by_subject.values())
    averages = {}
    for subject_id, (name, code, values) in by_subject.items():
        label = name if name_counts[name] == 1 else f"{name} ({code or subject_id})"
        averages[label] = mean(values)
    return dict(sorted(averages.items()))


def build_cohort_summary(ranked: Sequence[RankedAggregate]) -> CohortSummary:
    """
    코호트 통계
    - 점수가 없는 학생은 total_students 에만 포함
      (평균/등급 분포/과목 평균/최고·최저 계산에서는 제외)
    - 등급 분포와 전체 평균은 반올림 전 학생 평균 기준
    - 과목 평균은 과목 ID 별로 계산 (같은 이름의 과목은 "이름 (코드)" 로 구분)
    """
    scored = [r for r in ranked if r.has_scores]
    exact = [exact_average(r) for r in scored]
    averages = [r.average_score for r in scored]

    return CohortSummary(
        total_students=len(ranked),
        students_with_scores=len(scored),
        average_performance=mean(exact),
        grade_distribution=_ordered_distribution(Counter(SUBJECT_SCALE.grade(avg) for avg in exact)),
        subject_averages=_subject_averages(scored),
        highest_average=max(averages) if averages else None,
        lowest_average=min(averages) if averages else None,
    )


def compose_result_message(ranked: RankedAggregate, term_label: str, class_label: str) -> str:
    """보호자 성적 안내 문자 본문"""
    average = ranked.average_score.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return (
        f"Dear Parent/Guardian, {ranked.fullname}'s {term_label} results: "
        f"Average {average} ({ranked.overall_grade.value}). {class_label}. "
        f"Login to portal for details."
    )


def subject_teacher_lines(report: IndividualReport) -> List[dict]:
    """내보내기용 과목 표 (이름/코드/점수/등급/담당교사)"""
    return [
        {
            "name": line.name,
            "code": line.code,
            "score": line.score,
            "grade": line.grade.value,
            "teacher": line.teacher,
        }
        for line in report.subjects
    ]
