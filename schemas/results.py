"""
schemas/results.py

- 성적 집계 엔진이 주고받는 값 객체(Value Object) 모음
- 전부 DB에 저장되지 않는 파생 데이터이며, 요청마다 Score 원장에서 다시 계산됨
- frozen 모델이라 생성 이후 필드 재할당 불가 (엔진 함수들은 입력을 변경하지 않음)
- Decimal 필드는 JSON 응답에서 숫자(float)로 직렬화
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, computed_field


# 점수/평균용 Decimal (JSON 에서는 float)
Marks = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# =========================================================
# 1) 등급
# =========================================================

class Letter(str, Enum):
    """성적 등급. 선언 순서가 곧 우열 순서 (A 가 최상위)"""
    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    D_PLUS = "D+"
    D = "D"
    D_MINUS = "D-"
    E = "E"

    @property
    def position(self) -> int:
        """0 이 가장 좋은 등급"""
        return list(Letter).index(self)


class CommentType(str, Enum):
    RECOMMENDATION = "recommendation"   # 교장 소견 (단일)
    GENERAL = "general"                 # 담임 소견 (단일)
    ACADEMIC = "academic"               # 교과 코멘트 (여러 개)
    BEHAVIORAL = "behavioral"           # 생활 코멘트 (여러 개)


# =========================================================
# 2) 집계 결과
# =========================================================

class SubjectResult(BaseModel):
    subject_id: int
    subject_name: str
    subject_code: Optional[str] = None
    score: Marks
    grade: Letter

    model_config = ConfigDict(frozen=True)


class StudentAggregate(BaseModel):
    """한 학생의 한 학기 성적 집계"""
    student_id: int
    admission_number: Optional[str] = None
    fullname: Optional[str] = None
    class_id: Optional[int] = None
    stream_id: Optional[int] = None
    term_id: int
    academic_year: Optional[str] = None
    total_score: Marks = Decimal("0")
    subject_count: int = Field(0, ge=0)
    average_score: Marks = Decimal("0")
    overall_grade: Letter = Letter.E
    subject_results: Tuple[SubjectResult, ...] = ()

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[misc]
    @property
    def has_scores(self) -> bool:
        # 점수 0점 한 과목과 "점수 없음"을 구분하는 플래그
        return self.subject_count > 0


class RankedAggregate(StudentAggregate):
    class_rank: int = Field(..., ge=1)
    stream_rank: int = Field(..., ge=1)


# =========================================================
# 3) 성적표 / 요약
# =========================================================

class CommentSet(BaseModel):
    recommendation: Optional[str] = None
    general: Optional[str] = None
    academic: Tuple[str, ...] = ()
    behavioral: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class SubjectReportLine(BaseModel):
    subject_id: int
    name: str
    code: str = "N/A"
    score: Marks
    grade: Letter
    teacher: str = "N/A"

    model_config = ConfigDict(frozen=True)


class IndividualReport(BaseModel):
    """학생 개인 성적표"""
    student: RankedAggregate
    comments: CommentSet
    subjects: Tuple[SubjectReportLine, ...] = ()
    remark: str
    strengths: Tuple[str, ...] = ()
    areas_for_improvement: Tuple[str, ...] = ()
    grade_distribution: Dict[Letter, int] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class CohortSummary(BaseModel):
    """학급/분반 단위 성적 요약"""
    total_students: int = 0
    students_with_scores: int = 0
    average_performance: Marks = Decimal("0")
    grade_distribution: Dict[Letter, int] = Field(default_factory=dict)
    subject_averages: Dict[str, Marks] = Field(default_factory=dict)
    highest_average: Optional[Marks] = None
    lowest_average: Optional[Marks] = None

    model_config = ConfigDict(frozen=True)


# =========================================================
# 4) API 요청 바디
# =========================================================

class ScoreItem(BaseModel):
    student_id: int
    score: Decimal = Field(..., description="0 ~ 100 사이 점수")


class ScoreSubmission(BaseModel):
    assignment_id: int
    term_id: int
    scores: List[ScoreItem] = Field(..., min_length=1)


class ScoreUpdate(BaseModel):
    score: Decimal
